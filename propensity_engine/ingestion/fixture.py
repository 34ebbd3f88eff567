"""
Offline healthcare scorer — used by ``score --fixture`` and in tests.

Reproduces the collectability mock model without its random noise, so the
same input always yields the same prediction::

    log_odds = -3.5
             + (tuScore - 700) / 200
             + (0.4 if bankcard available else -0.3)
             - (ageOfAccount - 150) / 400
             + financial class term      (+0.6 commercial/preferred,
                                          -0.8 self-pay, +0.15 medicare/medicaid)
             + billing status term       (+0.5 ACTIVE, -0.6 DECLINED)
             + patient age term          (+0.2 under 40, -0.15 over 65)
             + marital status term       (+0.15 M, -0.1 W)
             - (initBal - 1000) / 5000
    p = sigmoid(log_odds)

Each non-baseline term is reported as an attribution under the backend's
feature name.  Only a score is returned; classification and tiering happen
in the engine, as they do for a live threshold-mode backend.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from propensity_engine.explain.decomposition import sigmoid
from propensity_engine.explain.formatting import js_str
from propensity_engine.ingestion.sample_accounts import generate_sample_accounts
from propensity_engine.models.account import Attribution, BackendPrediction, FeatureRecord
from propensity_engine.taxonomy.categories import VerticalSlug
from propensity_engine.verticals import healthcare
from propensity_engine.verticals.profile import VerticalProfile, parse_float

logger = logging.getLogger(__name__)

BASELINE_LOG_ODDS = -3.5


def _num(record: FeatureRecord, key: str) -> float:
    value = parse_float(record.get(key))
    return value if value is not None else 0.0


def _text(record: FeatureRecord, key: str) -> str:
    value = record.get(key)
    return "" if value is None else str(value)


def feature_terms(record: FeatureRecord) -> list[tuple[str, float]]:
    """Return ``(feature name, log-odds contribution)`` for one account."""
    fc = _text(record, "fc")
    if fc in ("COMMERCIAL", "PREFERRED"):
        fc_term = 0.6
    elif fc == "SELF-PAY":
        fc_term = -0.8
    elif fc in ("MEDICARE", "MEDICAID"):
        fc_term = 0.15
    else:
        fc_term = 0.0

    rep_code = _text(record, "ptRepCode")
    rep_term = (0.5 if "ACTIVE" in rep_code else 0.0) - (0.6 if "DECLINED" in rep_code else 0.0)

    age = _num(record, "age")
    age_term = 0.2 if age < 40 else (-0.15 if age > 65 else 0.0)

    marital = _text(record, "ptMs")
    marital_term = {"M": 0.15, "W": -0.1}.get(marital, 0.0)

    bankcard = js_str(record.get("bnkcrdAvlble"))

    return [
        ("TU SCORE", (_num(record, "tuScore") - 700) / 200),
        ("BNKCRD AVLBLE", 0.4 if bankcard == "1" else -0.3),
        ("Age of Account", -(_num(record, "ageOfAccount") - 150) / 400),
        ("FC", fc_term),
        ("PT REP CODE", rep_term),
        ("Age", age_term),
        ("PT MS", marital_term),
        ("INIT BAL", -(_num(record, "initBal") - 1000) / 5000),
    ]


class FixtureBackend:
    """Deterministic stand-in for the healthcare prediction backend.

    Exposes the same ``predict(records)`` call as ``PredictionClient``.
    """

    def __init__(self, profile: VerticalProfile = healthcare.PROFILE) -> None:
        if profile.slug != VerticalSlug.HEALTHCARE:
            raise ValueError(
                f"The fixture backend only models the healthcare vertical, not '{profile.slug}'."
            )
        self.profile = profile

    def score_record(self, record: FeatureRecord) -> BackendPrediction:
        terms = feature_terms(record)
        log_odds = BASELINE_LOG_ODDS + sum(impact for _, impact in terms)
        probability = sigmoid(log_odds)
        attributions = tuple(
            Attribution(
                feature=name,
                impact=impact,
                field_key=self.profile.resolver.field_key(name),
            )
            for name, impact in terms
        )
        return BackendPrediction(
            account_id=record.account_id,
            score=probability,
            amount_predicted=healthcare.estimate_amount_predicted(
                probability, record.get("initBal")
            ),
            attributions=attributions,
        )

    def predict(self, records: Sequence[FeatureRecord]) -> list[BackendPrediction]:
        predictions = [self.score_record(r) for r in records]
        logger.info("Fixture-scored %d account(s).", len(predictions))
        return predictions

    def generate_accounts(self, count: int = 5, seed: Optional[int] = None) -> list[FeatureRecord]:
        return generate_sample_accounts(count=count, seed=seed)
