"""
Healthcare patient-collectability vertical.

Wire format
-----------
The backend speaks snake_case (``facs_number``, ``init_bal``); records are
held with camelCase keys (``facsNumber``, ``initBal``).  Conversion happens
only here, at the boundary.

Predict response row::

    {
      "facs": "27765417",
      "predicted_payment_propensity": "14.36%",
      "category": "High",
      "priority": "H1",
      "amount_predicted": "$1,652",
      "shap_values": [{"feature": "Age of Account", "impact": 1.0349}, ...]
    }

The backend's ``priority`` code is not trusted; bands are re-derived locally
over the scored batch so every vertical follows the same tiering rule.

Classification is threshold mode: a backend category label is passed
through when present, otherwise the raw score is cut at the configured
thresholds.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional

from propensity_engine.explain.formatting import (
    PLACEHOLDER,
    format_currency,
    js_str,
    truncate_text,
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
    parse_money,
    parse_percent,
)

# internal key → wire key
WIRE_KEYS: dict[str, str] = {
    "facsNumber": "facs_number",
    "zip5": "zip5",
    "fc": "fc",
    "initBal": "init_bal",
    "ptMs": "pt_ms",
    "tuScore": "tu_score",
    "bnkcrdAvlble": "bnkcrd_avlble",
    "serviceType": "service_type",
    "ptRepCode": "pt_rep_code",
    "serviceArea": "service_area",
    "serviceDescr": "service_descr",
    "age": "age",
    "ageOfAccount": "age_of_account",
}

MARITAL_MAP: dict[str, str] = {"S": "Single", "M": "Married", "D": "Divorced", "W": "Widow"}
SERVICE_TYPE_MAP: dict[str, str] = {"HB": "Hospital", "PB": "Physician"}
BANKCARD_MAP: dict[str, str] = {"1": "Yes", "0": "No"}

FEATURE_TABLE: dict[str, FeatureSpec] = {
    "Age of Account": FeatureSpec("Account Age (Days)", "ageOfAccount"),
    "FC": FeatureSpec("Financial Class", "fc"),
    "BNKCRD AVLBLE": FeatureSpec("Bankcard Available", "bnkcrdAvlble"),
    "INIT BAL": FeatureSpec("Initial Balance ($)", "initBal"),
    "Age": FeatureSpec("Patient Age", "age"),
    "SERVICE AREA": FeatureSpec("Service Area", "serviceArea"),
    "PT REP CODE": FeatureSpec("Billing Status", "ptRepCode"),
    "ZIP5": FeatureSpec("ZIP Code", "zip5"),
    "TU SCORE": FeatureSpec("TU Score", "tuScore"),
    "PT MS": FeatureSpec("Marital Status", "ptMs"),
    "Description Code": FeatureSpec("Diagnosis Category", "serviceDescr"),
    "SERVICE TYPE": FeatureSpec("Service Type", "serviceType"),
}

CATEGORY_CODES: dict[str, Category] = {
    "High": Category.HIGH,
    "Medium": Category.MEDIUM,
    "Low": Category.LOW,
}

COLUMNS: tuple[tuple[str, str], ...] = (
    ("fc", "Financial Class"),
    ("initBal", "Init Bal"),
    ("tuScore", "TU Score"),
)


def format_value(key: str, raw: Any, text_truncate: int = 25) -> str:
    """Format one healthcare record value for display."""
    if raw is None:
        return PLACEHOLDER
    if key == "ptMs":
        return MARITAL_MAP.get(js_str(raw), js_str(raw))
    if key == "bnkcrdAvlble":
        return BANKCARD_MAP.get(js_str(raw), js_str(raw))
    if key == "serviceType":
        return SERVICE_TYPE_MAP.get(js_str(raw), js_str(raw))
    if key == "initBal":
        return format_currency(raw)
    return truncate_text(js_str(raw), text_truncate)


def estimate_amount_predicted(score: float, init_bal: Any) -> Optional[float]:
    """Expected recovery: ``min(round(score * initBal), initBal)``.

    Rounding is half-up to whole currency units.  Returns ``None`` when the
    initial balance is missing or not numeric.
    """
    balance = parse_float(init_bal)
    if balance is None:
        return None
    amount = float(math.floor(score * balance + 0.5))
    return min(amount, balance)


def secondary_value(result: ScoredResult) -> float:
    """Tiering magnitude: predicted amount, estimated when the backend omits it."""
    if result.amount_predicted is not None:
        return result.amount_predicted
    estimate = estimate_amount_predicted(result.score, result.record.get("initBal"))
    return estimate if estimate is not None else 0.0


def to_wire(record: FeatureRecord) -> dict[str, Any]:
    return {wire: record.get(key) for key, wire in WIRE_KEYS.items()}


def from_wire(row: Mapping[str, Any]) -> FeatureRecord:
    fields = {key: row.get(wire) for key, wire in WIRE_KEYS.items()}
    return FeatureRecord(
        vertical=VerticalSlug.HEALTHCARE,
        account_id=row.get("facs_number"),
        fields=fields,
    )


def parse_prediction(row: Mapping[str, Any]) -> BackendPrediction:
    return BackendPrediction(
        account_id=row.get("facs"),
        score=parse_percent(row.get("predicted_payment_propensity")),
        category_code=row.get("category"),
        amount_predicted=parse_money(row.get("amount_predicted")),
        attributions=parse_attributions(row.get("shap_values"), RESOLVER),
    )


FIELD_RANGES: dict[str, FieldRange] = {
    "initBal": FieldRange("Initial Balance", 10, 10000),
    "tuScore": FieldRange("TU Score", 300, 850),
    "bnkcrdAvlble": FieldRange("Bankcard Available", 0, 1),
    "age": FieldRange("Patient Age", 1, 100),
    "ageOfAccount": FieldRange("Age of Account", 1, 300),
}


RESOLVER = TableFeatureResolver(
    table=FEATURE_TABLE,
    formatter=format_value,
    unmapped_value="",
)

PROFILE = VerticalProfile(
    slug=VerticalSlug.HEALTHCARE,
    display_name="Patient Collectability",
    id_field="facsNumber",
    classification_mode=ClassificationMode.THRESHOLD,
    category_codes=CATEGORY_CODES,
    endpoint_prefix="/api/accounts",
    resolver=RESOLVER,
    truncate_features=True,
    columns=COLUMNS,
    secondary_value=secondary_value,
    to_wire=to_wire,
    from_wire=from_wire,
    parse_prediction=parse_prediction,
    response_id_field="facs",
    field_ranges=FIELD_RANGES,
)
