"""
Factor ordering and top-factor selection for explanation display.

Display order
-------------
All non-negative impacts first, then all negative impacts; within each
group by descending magnitude.  This is independent of the backend's order
and of the account ranking order.

Top-factor selection (N = ``[explain] top_factors``, default 6)
--------------------------------------------------------------
  Super High / High : top N non-negative, impact descending,
                      split into two columns of N/2
  Low               : top N negative, most negative first,
                      split into two columns of N/2
  Medium            : top N/2 non-negative (left) beside
                      top N/2 negative (right)
"""

from __future__ import annotations

from typing import Sequence

from propensity_engine.models.explanation import FactorPanel, ResolvedFactor
from propensity_engine.taxonomy.categories import Category


def display_sort(factors: Sequence[ResolvedFactor]) -> list[ResolvedFactor]:
    """Non-negative first, then negative; each by descending |impact|."""
    return sorted(factors, key=lambda f: (f.impact < 0, -abs(f.impact)))


def keep_largest(factors: Sequence[ResolvedFactor], limit: int) -> list[ResolvedFactor]:
    """Keep the ``limit`` factors with the largest |impact|."""
    return sorted(factors, key=lambda f: -abs(f.impact))[:limit]


def panel_title(category: Category) -> str:
    return f"TOP {category.value.upper()} FACTORS"


def select_top_factors(
    factors: Sequence[ResolvedFactor],
    category: Category,
    top_n: int = 6,
) -> FactorPanel:
    """Choose the two display columns of top factors for ``category``."""
    half = top_n // 2
    positive = sorted((f for f in factors if f.impact >= 0), key=lambda f: -f.impact)
    negative = sorted((f for f in factors if f.impact < 0), key=lambda f: f.impact)

    if category.is_favorable:
        chosen = positive[:top_n]
        left, right = chosen[:half], chosen[half:]
    elif category is Category.LOW:
        chosen = negative[:top_n]
        left, right = chosen[:half], chosen[half:]
    else:
        left, right = positive[:half], negative[:half]

    return FactorPanel(title=panel_title(category), left=tuple(left), right=tuple(right))
