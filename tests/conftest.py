"""
Shared pytest fixtures for the Propensity Engine test suite.

Provides:
  - Record and result factories for each vertical.
  - ``app_config``: a default ``AppConfig`` built without touching disk.
  - ``clean_env``: strips ``PROPENSITY_ENGINE_*`` overrides from the
    environment for config-loading tests.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import pytest

from propensity_engine.config import AppConfig
from propensity_engine.models.account import Attribution, FeatureRecord, ScoredResult
from propensity_engine.taxonomy.categories import Category, PriorityBand, VerticalSlug


def make_healthcare_record(facs: str = "32552411", **overrides: Any) -> FeatureRecord:
    fields: dict[str, Any] = {
        "facsNumber": facs,
        "zip5": "39564",
        "fc": "COMMERCIAL",
        "initBal": 1200,
        "ptMs": "M",
        "tuScore": 800,
        "bnkcrdAvlble": 1,
        "serviceType": "HB",
        "ptRepCode": "ACTIVE, PAPERLESS",
        "serviceArea": "LABORATORY",
        "serviceDescr": "Diseases of the circulatory system",
        "age": 45,
        "ageOfAccount": 60,
    }
    fields.update(overrides)
    return FeatureRecord(vertical=VerticalSlug.HEALTHCARE, account_id=facs, fields=fields)


def make_rpc_record(acct: str = "A1", **overrides: Any) -> FeatureRecord:
    fields: dict[str, Any] = {
        "AcctID": acct,
        "PlaceAmt": 500.0,
        "FICOScore_sql04": 640,
        "Decile": 3,
        "ChargeOffDate": "2025-06-30T00:00:00",
        "CallWindow_avg": 14.256,
        "CMCity": "PHOENIX",
    }
    fields.update(overrides)
    return FeatureRecord(vertical=VerticalSlug.RPC, account_id=acct, fields=fields)


def make_utility_record(acct: str = "10001", **overrides: Any) -> FeatureRecord:
    fields: dict[str, Any] = {
        "acctId": int(acct),
        "budgetBillingFlag": "Yes",
        "lowIncomeFlag": "No",
        "pctOnTimePayments12m": 0.87,
        "paymentChannelPrimary": "Online",
        "arrearsBalance": 1234.5,
        "maxDpd12m": 15,
        "delinquencyCount12m": 2,
        "rpcSuccessRatio": 0.415,
        "ptpKeptCount": 3,
        "ptpBrokenCount": 1,
        "arrangementEnrolledFlag": "No",
        "tuScore": 690,
        "complaintCount": 0,
    }
    fields.update(overrides)
    return FeatureRecord(vertical=VerticalSlug.UTILITY, account_id=acct, fields=fields)


def make_result(
    record: FeatureRecord,
    category: Category = Category.HIGH,
    score: float = 0.5,
    priority: Optional[PriorityBand] = None,
    amount_predicted: Optional[float] = None,
    impacts: Optional[dict[str, float]] = None,
) -> ScoredResult:
    attributions = tuple(
        Attribution(feature=name, impact=impact) for name, impact in (impacts or {}).items()
    )
    return ScoredResult(
        record=record,
        score=score,
        category=category,
        priority=priority,
        amount_predicted=amount_predicted,
        attributions=attributions,
    )


@pytest.fixture
def healthcare_record() -> Callable[..., FeatureRecord]:
    """Factory for healthcare ``FeatureRecord`` objects."""
    return make_healthcare_record


@pytest.fixture
def rpc_record() -> Callable[..., FeatureRecord]:
    """Factory for RPC ``FeatureRecord`` objects."""
    return make_rpc_record


@pytest.fixture
def utility_record() -> Callable[..., FeatureRecord]:
    """Factory for utility ``FeatureRecord`` objects."""
    return make_utility_record


@pytest.fixture
def scored_result() -> Callable[..., ScoredResult]:
    """Factory for ``ScoredResult`` objects."""
    return make_result


@pytest.fixture
def app_config() -> AppConfig:
    """Default configuration (no TOML, no env)."""
    return AppConfig()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove ``PROPENSITY_ENGINE_*`` variables so config tests are hermetic."""
    for name in (
        "PROPENSITY_ENGINE_BACKEND_URL",
        "PROPENSITY_ENGINE_API_TOKEN",
        "PROPENSITY_ENGINE_LOG_LEVEL",
        "PROPENSITY_ENGINE_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
