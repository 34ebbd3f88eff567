"""
Explanation assembly for a single, already-finalized scored account.

Steps
-----
1. Resolve every attribution to ``(label, value)`` with the vertical's
   resolver.
2. Truncating verticals keep only the ``max_features`` largest impacts.
3. Re-sort for display (non-negative first, by magnitude).
4. Reconstruct the decomposition over the kept factors, so the displayed
   arithmetic adds up.
5. Pick the category-specific top-factor panel.

The result is recomputed on every call and holds no state.
"""

from __future__ import annotations

import logging

from propensity_engine.config import ExplainConfig
from propensity_engine.explain.decomposition import reconstruct
from propensity_engine.explain.factors import display_sort, keep_largest, select_top_factors
from propensity_engine.models.account import ScoredResult
from propensity_engine.models.explanation import Explanation, ResolvedFactor
from propensity_engine.verticals.profile import VerticalProfile

logger = logging.getLogger(__name__)


def resolve_factors(
    result: ScoredResult,
    profile: VerticalProfile,
    text_truncate: int = 25,
) -> list[ResolvedFactor]:
    """Resolve ``result``'s attributions in backend order."""
    resolver = profile.resolver.with_text_truncate(text_truncate)
    factors: list[ResolvedFactor] = []
    for attribution in result.attributions:
        label, value = resolver.resolve(attribution.feature, result.record)
        factors.append(ResolvedFactor(name=label, impact=attribution.impact, value=value))
    return factors


def build_explanation(
    result: ScoredResult,
    profile: VerticalProfile,
    config: ExplainConfig | None = None,
) -> Explanation:
    """Build the full explanation for one scored account."""
    cfg = config or ExplainConfig()

    factors = resolve_factors(result, profile, cfg.text_truncate)
    if profile.truncate_features:
        factors = keep_largest(factors, cfg.max_features)
    factors = display_sort(factors)

    decomposition = reconstruct(result.score, (f.impact for f in factors))
    logger.debug(
        "Explained account %s: %d factors, base=%.4f, sum=%.4f",
        result.account_id, len(factors),
        decomposition.base_value, decomposition.attribution_sum,
    )

    return Explanation(
        account_id=result.account_id,
        category=result.category,
        probability=result.score,
        factors=tuple(factors),
        decomposition=decomposition,
        panel=select_top_factors(factors, result.category, cfg.top_factors),
    )
