"""
Priority tiering: split each category into three bands by a secondary
magnitude (predicted amount, placement amount, arrears balance).

Algorithm, per category independently
-------------------------------------
1. Take the subset of results in that category; skip it when empty.
2. ``lo = min(values)``, ``hi = max(values)`` over the subset.
3. ``t_hi = lo + upper_split * (hi - lo)``   (default 0.66)
   ``t_lo = lo + lower_split * (hi - lo)``   (default 0.33)
4. value >= t_hi → band 1;  t_lo <= value < t_hi → band 2;  else band 3.

When every member shares the same value, ``t_hi == t_lo == lo`` and the
whole subset lands in band 1.

Example (High, values 100/300/500/700/900): t_hi = 628, t_lo = 364 →
900, 700 → H1;  500 → H2;  300, 100 → H3.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Callable

from propensity_engine.config import TieringConfig
from propensity_engine.models.account import ScoredResult
from propensity_engine.taxonomy.categories import Category, PriorityBand, bands_for


def band_thresholds(
    values: list[float],
    upper_split: float = 0.66,
    lower_split: float = 0.33,
) -> tuple[float, float]:
    """Return ``(t_hi, t_lo)`` for a non-empty list of values."""
    lo = min(values)
    hi = max(values)
    spread = hi - lo
    return lo + spread * upper_split, lo + spread * lower_split


def band_for_value(
    value: float,
    category: Category,
    t_hi: float,
    t_lo: float,
) -> PriorityBand:
    first, second, third = bands_for(category)
    if value >= t_hi:
        return first
    if value >= t_lo:
        return second
    return third


def assign_priorities(
    results: list[ScoredResult],
    secondary_value: Callable[[ScoredResult], float],
    config: TieringConfig | None = None,
) -> list[ScoredResult]:
    """Assign a category-scoped priority band to every result.

    Args:
        results:         Classified results (any mix of categories).
        secondary_value: Tiering magnitude accessor, usually
                         ``profile.secondary_value``.
        config:          Split points; defaults to 0.66 / 0.33.

    Returns:
        New list, same order and length as ``results``, each result a copy
        with ``priority`` set.
    """
    cfg = config or TieringConfig()

    values = [secondary_value(r) for r in results]

    by_category: dict[Category, list[float]] = defaultdict(list)
    for result, value in zip(results, values):
        by_category[result.category].append(value)

    thresholds = {
        category: band_thresholds(cat_values, cfg.upper_split, cfg.lower_split)
        for category, cat_values in by_category.items()
    }

    tiered: list[ScoredResult] = []
    for result, value in zip(results, values):
        t_hi, t_lo = thresholds[result.category]
        band = band_for_value(value, result.category, t_hi, t_lo)
        tiered.append(result.model_copy(update={"priority": band}))
    return tiered
