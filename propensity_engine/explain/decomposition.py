"""
Decomposition reconstructor.

The backend returns per-feature attributions but no base value, while the
final probability is already known.  The base value is back-solved so the
additive model reproduces that probability::

    attribution_sum = Σ impact
    p_clamped       = min(0.99, max(0.01, target_probability))
    target_log_odds = ln(p_clamped / (1 - p_clamped))
    base_value      = target_log_odds - attribution_sum
    log_odds        = base_value + attribution_sum
    probability     = 1 / (1 + e^(-log_odds))

The clamp keeps the logit finite for near-certain predictions.  The
recomputed ``probability`` therefore equals the *clamped* target; any value
shown outside the trace must use the original, unclamped probability.

Example: impacts (+0.40, -0.10, +0.05), target 0.60 →
sum 0.35, logit 0.405465, base 0.055465, probability 0.60.
"""

from __future__ import annotations

import math
from typing import Iterable

from propensity_engine.models.account import Attribution
from propensity_engine.models.explanation import Decomposition

PROBABILITY_FLOOR = 0.01
PROBABILITY_CEILING = 0.99


def sigmoid(log_odds: float) -> float:
    """Logistic function, stable for large negative inputs."""
    if log_odds >= 0:
        return 1.0 / (1.0 + math.exp(-log_odds))
    z = math.exp(log_odds)
    return z / (1.0 + z)


def logit(probability: float) -> float:
    return math.log(probability / (1.0 - probability))


def reconstruct(
    target_probability: float,
    impacts: Iterable[float | Attribution],
) -> Decomposition:
    """Back-solve the base value for ``target_probability``.

    Args:
        target_probability: Known final probability (any real; clamped to
                            [0.01, 0.99] before inversion).
        impacts:            Attributions or raw impact values; order does
                            not matter.

    Returns:
        ``Decomposition`` with ``log_odds == base_value + attribution_sum``.
    """
    attribution_sum = 0.0
    for item in impacts:
        attribution_sum += item.impact if isinstance(item, Attribution) else float(item)

    clamped = min(PROBABILITY_CEILING, max(PROBABILITY_FLOOR, target_probability))
    target_log_odds = logit(clamped)
    base_value = target_log_odds - attribution_sum
    log_odds = base_value + attribution_sum

    return Decomposition(
        base_value=base_value,
        attribution_sum=attribution_sum,
        log_odds=log_odds,
        probability=sigmoid(log_odds),
    )
