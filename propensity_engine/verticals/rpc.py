"""
Financial right-party-contact (RPC) vertical.

The RPC backend uses PascalCase keys for both its generate and predict
endpoints, so records keep the backend's keys verbatim and the request body
is the record as-is.

Predict response row::

    {
      "AcctID": 1234567,
      "Model_Score": 0.9999,
      "Model_Score_Percent": "100.0%",
      "Account_Priority": "SH",
      "Scoring_Date": "2026-02-16",
      "shap_values": [{"feature": "RPC_Flag", "impact": 11.0488}, ...]
    }

The backend classifies server-side (``Account_Priority``), so the profile is
in pass-through mode.  ``*_AGE`` attributions are engineered from date
columns; their values are shown from the source date field.
"""

from __future__ import annotations

from typing import Any, Mapping

from propensity_engine.explain.formatting import (
    PLACEHOLDER,
    date_part,
    is_date_like,
    is_number,
    js_str,
    to_fixed,
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

FEATURE_TABLE: dict[str, FeatureSpec] = {
    "RPC_Flag": FeatureSpec("RPC Flag", "RPC_Flag"),
    "StatusCode": FeatureSpec("Status Code", "StatusCode"),
    "Phone1ContactabilityScore_mapped": FeatureSpec(
        "Contactability Score", "Phone1ContactabilityScore_mapped"
    ),
    "HasValidNumber": FeatureSpec("Has Valid Number", "HasValidNumber"),
    "CMCity": FeatureSpec("City", "CMCity"),
    "Chargeoff_AGE": FeatureSpec("Charge-Off Date", "ChargeOffDate"),
    "Decile": FeatureSpec("Decile", "Decile"),
    "FICOScore_sql04": FeatureSpec("FICO Score", "FICOScore_sql04"),
    "LastPayPreCharge_AGE": FeatureSpec("Last Pay Pre-Charge", "LastPayPreCharge_sql04"),
    "CallWindow_avg": FeatureSpec("Call Window (avg)", "CallWindow_avg"),
    "Connect_Flag": FeatureSpec("Connect Flag", "Connect_Flag"),
    "NumPhoneNumbersDialed": FeatureSpec("Phone Numbers Dialed", "NumPhoneNumbersDialed"),
    "ValidCalls": FeatureSpec("Valid Calls", "ValidCalls"),
    "Clientid": FeatureSpec("Client ID", "Clientid"),
    "AmexProductType": FeatureSpec("Product Type", "AmexProductType"),
    "PhoneInService_mapped": FeatureSpec("Phone In-Service", "PhoneInService_mapped"),
    "PartyGrouping_mapped": FeatureSpec("Party Grouping", "PartyGrouping_mapped"),
    "Outbound_AGE": FeatureSpec("Last Outbound Call", "LastOutboundCallDate"),
    "DOB_AGE": FeatureSpec("Date of Birth", "DateOfBirth"),
    "InitialAmexPScore_sql04": FeatureSpec("Initial Amex P-Score", "InitialAmexPScore_sql04"),
    "PlaceAmt": FeatureSpec("Place Amount", "PlaceAmt"),
    "Channel": FeatureSpec("Channel", "Channel"),
    "Level": FeatureSpec("Level", "Level"),
    "AccountType": FeatureSpec("Account Type", "AccountType"),
    "AmexTenure_sql04": FeatureSpec("Amex Tenure", "AmexTenure_sql04"),
    "BestDayToCall": FeatureSpec("Best Day to Call", "BestDayToCall"),
    "SecondBestCallWindow_avg": FeatureSpec("2nd Best Call Window", "SecondBestCallWindow_avg"),
    "Totalemailscount": FeatureSpec("Total Emails", "Totalemailscount"),
    "PageFlag": FeatureSpec("Page Flag", "PageFlag"),
    "PageWebFlag": FeatureSpec("Page Web Flag", "PageWebFlag"),
    "ResultCodeFlag": FeatureSpec("Result Code Flag", "ResultCodeFlag"),
}

CATEGORY_CODES: dict[str, Category] = {
    "SH": Category.SUPER_HIGH,
    "H": Category.HIGH,
    "M": Category.MEDIUM,
    "L": Category.LOW,
}

COLUMNS: tuple[tuple[str, str], ...] = (
    ("PlaceAmt", "Place Amt"),
    ("FICOScore_sql04", "FICO"),
    ("Decile", "Decile"),
)


def format_value(key: str, raw: Any, text_truncate: int = 25) -> str:
    """Format one RPC record value: dates to ``YYYY-MM-DD``, floats to 2 dp."""
    if raw is None or raw == "":
        return PLACEHOLDER
    if is_date_like(raw):
        return date_part(raw)
    if is_number(raw):
        if float(raw).is_integer():
            return js_str(raw)
        return to_fixed(raw, 2)
    return js_str(raw)


def secondary_value(result: ScoredResult) -> float:
    """Tiering magnitude: placement amount of the account."""
    return secondary_from_field(result, "PlaceAmt")


def to_wire(record: FeatureRecord) -> dict[str, Any]:
    return dict(record.fields)


def from_wire(row: Mapping[str, Any]) -> FeatureRecord:
    return FeatureRecord(
        vertical=VerticalSlug.RPC,
        account_id=row.get("AcctID"),
        fields=dict(row),
    )


def parse_prediction(row: Mapping[str, Any]) -> BackendPrediction:
    # The percent string matches what the table shows; raw score is the fallback.
    score = parse_percent(row.get("Model_Score_Percent"))
    if score is None:
        score = parse_float(row.get("Model_Score"))
    return BackendPrediction(
        account_id=row.get("AcctID"),
        score=score,
        category_code=row.get("Account_Priority"),
        attributions=parse_attributions(row.get("shap_values"), RESOLVER),
        scoring_date=row.get("Scoring_Date"),
    )


# Counts have no real upper bound; 999999 stands in for "any integer".
FIELD_RANGES: dict[str, FieldRange] = {
    "PlaceAmt": FieldRange("Place Amount", 10, 10000),
    "Decile": FieldRange("Decile", 1, 10),
    "FICOScore_sql04": FieldRange("FICO Score", 300, 850),
    "BestDayToCall": FieldRange("Best Day to Call", 1, 7),
    "CallWindow_avg": FieldRange("Call Window (avg)", 0, 23),
    "SecondBestCallWindow_avg": FieldRange("2nd Best Call Window", 0, 23),
    "InitialAmexPScore_sql04": FieldRange("Initial Amex P-Score", 0, 10000),
    "NumPhoneNumbersDialed": FieldRange("Phone Numbers Dialed", 0, 999999),
    "ValidCalls": FieldRange("Valid Calls", 0, 999999),
    "Totalemailscount": FieldRange("Total Emails", 0, 999999),
}


RESOLVER = TableFeatureResolver(
    table=FEATURE_TABLE,
    formatter=format_value,
    unmapped_value=PLACEHOLDER,
)

PROFILE = VerticalProfile(
    slug=VerticalSlug.RPC,
    display_name="Right Party Contact",
    id_field="AcctID",
    classification_mode=ClassificationMode.PASSTHROUGH,
    category_codes=CATEGORY_CODES,
    endpoint_prefix="/api/amex/accounts",
    resolver=RESOLVER,
    truncate_features=False,
    columns=COLUMNS,
    secondary_value=secondary_value,
    to_wire=to_wire,
    from_wire=from_wire,
    parse_prediction=parse_prediction,
    response_id_field="AcctID",
    field_ranges=FIELD_RANGES,
)
