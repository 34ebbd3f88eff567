"""
Merge reconciler: overlay a partial result set onto the full collection.

The operator usually scores only a selection of accounts.  The merged
collection keeps every original account, in original order:

  - scored identifier   → the ``ScoredResult`` replaces the record wholesale
  - unscored identifier → the original ``FeatureRecord``, untouched

Results whose identifier is not in the original collection are ignored.
When ``scored`` repeats an identifier, the last occurrence wins.
"""

from __future__ import annotations

import logging
from typing import Sequence

from propensity_engine.models.account import FeatureRecord, ScoredResult

logger = logging.getLogger(__name__)


def merge_results(
    original: Sequence[FeatureRecord],
    scored: Sequence[ScoredResult],
) -> list[FeatureRecord | ScoredResult]:
    """Return one entry per ``original`` record, scored where available.

    ``len(result) == len(original)`` for all inputs.
    """
    lookup: dict[str, ScoredResult] = {r.account_id: r for r in scored}

    original_ids = {rec.account_id for rec in original}
    stray = [acct for acct in lookup if acct not in original_ids]
    if stray:
        logger.debug("Ignoring %d result(s) for unknown accounts: %s", len(stray), stray)

    return [lookup.get(rec.account_id, rec) for rec in original]
