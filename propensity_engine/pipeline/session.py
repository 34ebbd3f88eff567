"""
Scoring session: the committed account collection plus its latest results.

Contract:
  1. ``commit(records)`` is the only way records enter the session; it is
     the draft → committed boundary.  Every record is checked against the
     vertical's field ranges first; one bad value rejects the whole batch.
     Committing clears previous results.
  2. ``run(selected_ids)`` sends the committed records (or a selection) to
     the backend, then classifies, tiers, ranks and merges in that order.
  3. A run is all-or-nothing: a backend failure propagates unchanged and the
     previous ``ScoringRun`` stays current.
  4. ``explain(account_id)`` rebuilds an explanation from the latest run on
     every call; nothing is cached.

Usage::

    session = ScoringSession(get_profile("healthcare"), FixtureBackend(), config)
    session.commit(generate_sample_accounts(6, seed=1))
    run = session.run()
    for row in run.ranked:
        print(row.account_id, row.category, row.priority)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Protocol, Sequence
from uuid import uuid4

from propensity_engine.config import AppConfig
from propensity_engine.explain.explanation import build_explanation
from propensity_engine.models.account import BackendPrediction, FeatureRecord, ScoredResult
from propensity_engine.models.explanation import Explanation
from propensity_engine.scoring.classifier import CategoryClassifier
from propensity_engine.scoring.merge import merge_results
from propensity_engine.scoring.ranker import rank_results
from propensity_engine.scoring.tiering import assign_priorities
from propensity_engine.verticals.profile import VerticalProfile

logger = logging.getLogger(__name__)


class PredictionBackend(Protocol):
    """Anything that can batch-score records (live client or fixture)."""

    def predict(self, records: Sequence[FeatureRecord]) -> list[BackendPrediction]: ...


@dataclass(frozen=True)
class ScoringRun:
    """Outcome of one scoring call.

    Attributes:
        run_slug:     Unique id for log correlation.
        accounts:     Full committed collection in original order, each
                      entry either its ``ScoredResult`` or the untouched
                      ``FeatureRecord``.
        ranked:       Scored results in ranking order.
        unscored_ids: Selected accounts the backend returned no usable
                      result for.
        finished_at:  UTC completion time.
    """

    run_slug: str
    accounts: tuple[FeatureRecord | ScoredResult, ...]
    ranked: tuple[ScoredResult, ...]
    unscored_ids: tuple[str, ...] = ()
    finished_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def result_for(self, account_id: str) -> Optional[ScoredResult]:
        for row in self.ranked:
            if row.account_id == account_id:
                return row
        return None


class ScoringSession:
    """Holds one vertical's committed records and latest scoring run.

    Attributes:
        profile: Vertical profile driving classification, tiering and display.
        backend: Prediction backend (``PredictionClient`` or ``FixtureBackend``).
        config:  Application configuration.
    """

    def __init__(
        self,
        profile: VerticalProfile,
        backend: PredictionBackend,
        config: AppConfig,
    ) -> None:
        self.profile = profile
        self.backend = backend
        self.config = config
        self.classifier = CategoryClassifier(profile, config.classification)
        self._records: tuple[FeatureRecord, ...] = ()
        self._last_run: Optional[ScoringRun] = None

    @property
    def records(self) -> tuple[FeatureRecord, ...]:
        return self._records

    @property
    def last_run(self) -> Optional[ScoringRun]:
        return self._last_run

    def commit(self, records: Sequence[FeatureRecord]) -> None:
        """Replace the committed collection and discard previous results.

        Raises:
            ValueError: On duplicate identifiers, records of another vertical,
                or a numeric field outside the vertical's accepted range.
        """
        seen: set[str] = set()
        for rec in records:
            if rec.vertical != self.profile.slug:
                raise ValueError(
                    f"Record {rec.account_id} belongs to '{rec.vertical}', "
                    f"not '{self.profile.slug}'."
                )
            if rec.account_id in seen:
                raise ValueError(f"Duplicate account identifier '{rec.account_id}'.")
            seen.add(rec.account_id)
            self.profile.check_ranges(rec)

        self._records = tuple(records)
        self._last_run = None
        logger.info("Committed %d %s record(s).", len(self._records), self.profile.slug)

    reset = commit

    def _select(self, selected_ids: Optional[Sequence[str]]) -> list[FeatureRecord]:
        if selected_ids is None:
            return list(self._records)
        by_id = {rec.account_id: rec for rec in self._records}
        wanted = {str(i) for i in selected_ids}
        unknown = sorted(wanted - by_id.keys())
        if unknown:
            raise KeyError(f"Unknown account identifier(s): {unknown}")
        return [rec for rec in self._records if rec.account_id in wanted]

    def _to_result(
        self,
        record: FeatureRecord,
        prediction: BackendPrediction,
    ) -> Optional[ScoredResult]:
        if not prediction.is_complete:
            logger.warning("Account %s: backend result is missing score or attributions.",
                           record.account_id)
            return None
        category = self.classifier.classify_prediction(prediction)
        if category is None:
            return None
        return ScoredResult(
            record=record,
            score=prediction.score,
            category=category,
            amount_predicted=prediction.amount_predicted,
            attributions=prediction.attributions,
            scoring_date=prediction.scoring_date,
        )

    def run(self, selected_ids: Optional[Sequence[str]] = None) -> ScoringRun:
        """Score the selected records (all when ``selected_ids`` is None).

        Raises:
            KeyError:     If a selected identifier is not committed.
            BackendError: Propagated unchanged from a live backend.
        """
        selection = self._select(selected_ids)
        run_slug = str(uuid4())
        logger.info(
            "Scoring run starting | vertical=%s | accounts=%d | run_slug=%s",
            self.profile.slug, len(selection), run_slug,
            extra={"run_slug": run_slug, "vertical": str(self.profile.slug)},
        )

        predictions: list[BackendPrediction] = (
            self.backend.predict(selection) if selection else []
        )
        by_id = {p.account_id: p for p in predictions}

        scored: list[ScoredResult] = []
        unscored: list[str] = []
        for record in selection:
            prediction = by_id.get(record.account_id)
            result = self._to_result(record, prediction) if prediction is not None else None
            if result is None:
                unscored.append(record.account_id)
            else:
                scored.append(result)

        tiered = assign_priorities(scored, self.profile.secondary_value, self.config.tiering)
        ranked = rank_results(tiered, self.profile.secondary_value)
        accounts = merge_results(self._records, tiered)

        run = ScoringRun(
            run_slug=run_slug,
            accounts=tuple(accounts),
            ranked=tuple(ranked),
            unscored_ids=tuple(unscored),
        )
        self._last_run = run
        logger.info(
            "Scoring run completed | scored=%d | unscored=%d | run_slug=%s",
            len(ranked), len(unscored), run_slug,
            extra={"run_slug": run_slug, "vertical": str(self.profile.slug)},
        )
        return run

    def explain(self, account_id: str) -> Explanation:
        """Build the explanation for one account of the latest run.

        Raises:
            KeyError: If the account has no result in the latest run.
        """
        result = self._last_run.result_for(str(account_id)) if self._last_run else None
        if result is None:
            raise KeyError(f"Account '{account_id}' has no scoring result.")
        return build_explanation(result, self.profile, self.config.explain)
