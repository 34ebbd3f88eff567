"""
Result ranker: total order over scored accounts.

Sort key (ascending):
  1. Category rank   (Super High < High < Medium < Low)
  2. Band level      (1 < 2 < 3; untiered results after band 3)
  3. Secondary value descending

``sorted()`` is stable, so entries equal on all three keys keep their input
order.  Entries without a category (plain ``FeatureRecord`` rows from a
merged collection) sort after every classified entry, in input order.
"""

from __future__ import annotations

from typing import Callable, Sequence

from propensity_engine.models.account import FeatureRecord, ScoredResult

_UNCLASSIFIED = 1


def rank_results(
    rows: Sequence[FeatureRecord | ScoredResult],
    secondary_value: Callable[[ScoredResult], float],
) -> list[FeatureRecord | ScoredResult]:
    """Return ``rows`` in ranking order (a permutation of the input).

    Args:
        rows:            Scored results, optionally mixed with unscored
                         records.
        secondary_value: Final tie-break magnitude (sorted descending).
    """

    def sort_key(row: FeatureRecord | ScoredResult) -> tuple:
        if not isinstance(row, ScoredResult):
            return (_UNCLASSIFIED, 0, 0, 0.0)
        level = row.priority.level if row.priority is not None else 4
        return (0, row.category.rank, level, -secondary_value(row))

    return sorted(rows, key=sort_key)
