"""
Utility customer payment-propensity vertical.

Wire format
-----------
snake_case on the wire, camelCase internally.  The predict endpoint's schema
is strict about JSON types, so ``to_wire`` coerces and clamps every field:

  int   : acct_id, max_dpd_12m, delinquency_count_12m, ptp_kept_count,
          ptp_broken_count, tu_score, complaint_count
  float : pct_on_time_payments_12m, arrears_balance, rpc_success_ratio
  str   : budget_billing_flag / low_income_flag / arrangement_enrolled_flag
          ("Yes"/"No"), payment_channel_primary ("Online"/"Agent"/"IVR"/"Cash")

Edited values can arrive as strings or blanks; unparseable values fall back
to the field's default before clamping.

Predict response row::

    {
      "acct_id": 30253,
      "probability": 0.148,
      "probability_percent": "14.8%",
      "category": "High",
      "shap_values": [{"feature": "TU Score", "impact": 2.831}, ...]
    }

Backend feature names are already display labels and are used verbatim.
"""

from __future__ import annotations

from typing import Any, Mapping

from propensity_engine.explain.formatting import (
    PLACEHOLDER,
    format_currency,
    format_whole_percent,
    js_str,
)
from propensity_engine.explain.resolver import FeatureSpec, TableFeatureResolver
from propensity_engine.models.account import BackendPrediction, FeatureRecord, ScoredResult
from propensity_engine.taxonomy.categories import Category, VerticalSlug
from propensity_engine.verticals.profile import (
    ClassificationMode,
    FieldRange,
    VerticalProfile,
    parse_attributions,
    parse_float,
    parse_percent,
    secondary_from_field,
)

WIRE_KEYS: dict[str, str] = {
    "acctId": "acct_id",
    "budgetBillingFlag": "budget_billing_flag",
    "lowIncomeFlag": "low_income_flag",
    "pctOnTimePayments12m": "pct_on_time_payments_12m",
    "paymentChannelPrimary": "payment_channel_primary",
    "arrearsBalance": "arrears_balance",
    "maxDpd12m": "max_dpd_12m",
    "delinquencyCount12m": "delinquency_count_12m",
    "rpcSuccessRatio": "rpc_success_ratio",
    "ptpKeptCount": "ptp_kept_count",
    "ptpBrokenCount": "ptp_broken_count",
    "arrangementEnrolledFlag": "arrangement_enrolled_flag",
    "tuScore": "tu_score",
    "complaintCount": "complaint_count",
}

_FEATURE_KEYS: dict[str, str] = {
    "TU Score": "tuScore",
    "Arrears Balance": "arrearsBalance",
    "Complaint Count": "complaintCount",
    "RPC Success Ratio": "rpcSuccessRatio",
    "PTP Broken Count": "ptpBrokenCount",
    "PTP Kept Count": "ptpKeptCount",
    "Delinquency Count": "delinquencyCount12m",
    "Budget Billing": "budgetBillingFlag",
    "Max Days Past Due": "maxDpd12m",
    "Arrangement Enrolled": "arrangementEnrolledFlag",
    "Low Income": "lowIncomeFlag",
    "Payment Channel": "paymentChannelPrimary",
    "On-Time Payments": "pctOnTimePayments12m",
}

FEATURE_TABLE: dict[str, FeatureSpec] = {
    name: FeatureSpec(name, key) for name, key in _FEATURE_KEYS.items()
}

_PERCENT_KEYS = frozenset({"pctOnTimePayments12m", "rpcSuccessRatio"})

CATEGORY_CODES: dict[str, Category] = {
    "High": Category.HIGH,
    "Medium": Category.MEDIUM,
    "Low": Category.LOW,
}

COLUMNS: tuple[tuple[str, str], ...] = (
    ("arrearsBalance", "Arrears"),
    ("tuScore", "TU Score"),
    ("maxDpd12m", "Max DPD"),
)


def format_value(key: str, raw: Any, text_truncate: int = 25) -> str:
    """Format one utility record value: currency, whole percent, or verbatim."""
    if raw is None:
        return PLACEHOLDER
    if key == "arrearsBalance":
        return format_currency(raw, min_fraction=2, max_fraction=2)
    if key in _PERCENT_KEYS:
        return format_whole_percent(raw)
    return js_str(raw)


def secondary_value(result: ScoredResult) -> float:
    """Tiering magnitude: outstanding arrears balance."""
    return secondary_from_field(result, "arrearsBalance")


# ── Outbound coercion ────────────────────────────────────────────────────────


def _safe_int(value: Any, fallback: int = 0) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return fallback


def _safe_float(value: Any, fallback: float = 0.0) -> float:
    number = parse_float(value) if value not in (None, "") else None
    return number if number is not None else fallback


def _clamp_int(value: Any, low: int, high: int, fallback: int = 0) -> int:
    return min(high, max(low, _safe_int(value, fallback)))


def _clamp_float(value: Any, low: float, high: float, fallback: float = 0.0) -> float:
    return min(high, max(low, _safe_float(value, fallback)))


def _text(value: Any, default: str) -> str:
    return str(value) if value else default


def to_wire(record: FeatureRecord) -> dict[str, Any]:
    """Serialise a record for the predict endpoint with strict JSON types."""
    get = record.get
    return {
        "acct_id": _clamp_int(get("acctId"), 10000, 40000, 10000),
        "budget_billing_flag": _text(get("budgetBillingFlag"), "No"),
        "low_income_flag": _text(get("lowIncomeFlag"), "No"),
        "pct_on_time_payments_12m": _clamp_float(get("pctOnTimePayments12m"), 0.0, 1.0),
        "payment_channel_primary": _text(get("paymentChannelPrimary"), "Online"),
        "arrears_balance": _clamp_float(get("arrearsBalance"), 0.0, 100000.0),
        "max_dpd_12m": _clamp_int(get("maxDpd12m"), 0, 60),
        "delinquency_count_12m": _clamp_int(get("delinquencyCount12m"), 0, 12),
        "rpc_success_ratio": _clamp_float(get("rpcSuccessRatio"), 0.0, 1.0),
        "ptp_kept_count": _clamp_int(get("ptpKeptCount"), 0, 12),
        "ptp_broken_count": _clamp_int(get("ptpBrokenCount"), 0, 12),
        "arrangement_enrolled_flag": _text(get("arrangementEnrolledFlag"), "No"),
        "tu_score": _clamp_int(get("tuScore"), 300, 850, 300),
        "complaint_count": _clamp_int(get("complaintCount"), 0, 10),
    }


def from_wire(row: Mapping[str, Any]) -> FeatureRecord:
    fields = {key: row.get(wire) for key, wire in WIRE_KEYS.items()}
    return FeatureRecord(
        vertical=VerticalSlug.UTILITY,
        account_id=row.get("acct_id"),
        fields=fields,
    )


def parse_prediction(row: Mapping[str, Any]) -> BackendPrediction:
    # Derive from the percent string so explanations match the table exactly.
    score = parse_percent(row.get("probability_percent"))
    if score is None:
        score = parse_float(row.get("probability"))
    return BackendPrediction(
        account_id=row.get("acct_id"),
        score=score,
        category_code=row.get("category"),
        attributions=parse_attributions(row.get("shap_values"), RESOLVER),
    )


FIELD_RANGES: dict[str, FieldRange] = {
    "pctOnTimePayments12m": FieldRange("On-Time Payments (12m)", 0, 1),
    "arrearsBalance": FieldRange("Arrears Balance", 0, 100000),
    "maxDpd12m": FieldRange("Max DPD (12m)", 0, 60),
    "delinquencyCount12m": FieldRange("Delinquency Count (12m)", 0, 12),
    "rpcSuccessRatio": FieldRange("RPC Success Ratio", 0, 1),
    "ptpKeptCount": FieldRange("PTP Kept", 0, 12),
    "ptpBrokenCount": FieldRange("PTP Broken", 0, 12),
    "tuScore": FieldRange("TU Score", 300, 850),
    "complaintCount": FieldRange("Complaints", 0, 10),
}


RESOLVER = TableFeatureResolver(
    table=FEATURE_TABLE,
    formatter=format_value,
    unmapped_value="",
)

PROFILE = VerticalProfile(
    slug=VerticalSlug.UTILITY,
    display_name="Utility Payment Propensity",
    id_field="acctId",
    classification_mode=ClassificationMode.PASSTHROUGH,
    category_codes=CATEGORY_CODES,
    endpoint_prefix="/api/utilities/accounts",
    resolver=RESOLVER,
    truncate_features=True,
    columns=COLUMNS,
    secondary_value=secondary_value,
    to_wire=to_wire,
    from_wire=from_wire,
    parse_prediction=parse_prediction,
    response_id_field="acct_id",
    field_ranges=FIELD_RANGES,
)
