"""Tests for propensity_engine.explain.resolver and the per-vertical formatters."""

from __future__ import annotations

import pytest

from propensity_engine.explain.formatting import PLACEHOLDER
from propensity_engine.verticals import healthcare, rpc, utility


class TestHealthcareResolver:
    @pytest.mark.parametrize(
        "feature, expected",
        [
            ("PT MS", ("Marital Status", "Married")),
            ("BNKCRD AVLBLE", ("Bankcard Available", "Yes")),
            ("SERVICE TYPE", ("Service Type", "Hospital")),
            ("INIT BAL", ("Initial Balance ($)", "$1,200")),
            ("TU SCORE", ("TU Score", "800")),
            ("Age of Account", ("Account Age (Days)", "60")),
        ],
    )
    def test_mapped_features(self, healthcare_record, feature: str, expected: tuple[str, str]) -> None:
        assert healthcare.RESOLVER.resolve(feature, healthcare_record()) == expected

    def test_unknown_feature_uses_raw_name(self, healthcare_record) -> None:
        assert healthcare.RESOLVER.resolve("Mystery", healthcare_record()) == ("Mystery", "")

    def test_code_outside_dictionary_verbatim(self, healthcare_record) -> None:
        rec = healthcare_record(ptMs="X")
        assert healthcare.RESOLVER.resolve("PT MS", rec) == ("Marital Status", "X")

    def test_long_text_truncated(self, healthcare_record) -> None:
        _, value = healthcare.RESOLVER.resolve("Description Code", healthcare_record())
        assert value == "Diseases of the circulato..."

    def test_text_truncate_budget_override(self, healthcare_record) -> None:
        resolver = healthcare.RESOLVER.with_text_truncate(8)
        _, value = resolver.resolve("Description Code", healthcare_record())
        assert value == "Diseases..."

    def test_missing_field_placeholder(self, healthcare_record) -> None:
        rec = healthcare_record(tuScore=None)
        assert healthcare.RESOLVER.resolve("TU SCORE", rec) == ("TU Score", PLACEHOLDER)

    def test_field_key_lookup(self) -> None:
        assert healthcare.RESOLVER.field_key("INIT BAL") == "initBal"
        assert healthcare.RESOLVER.field_key("nope") is None


class TestRpcResolver:
    def test_date_shows_date_part(self, rpc_record) -> None:
        assert rpc.RESOLVER.resolve("Chargeoff_AGE", rpc_record()) == ("Charge-Off Date", "2025-06-30")

    def test_float_two_decimals(self, rpc_record) -> None:
        assert rpc.RESOLVER.resolve("CallWindow_avg", rpc_record()) == ("Call Window (avg)", "14.26")

    def test_integral_number_verbatim(self, rpc_record) -> None:
        assert rpc.RESOLVER.resolve("PlaceAmt", rpc_record()) == ("Place Amount", "500")
        assert rpc.RESOLVER.resolve("Decile", rpc_record()) == ("Decile", "3")

    def test_empty_value_placeholder(self, rpc_record) -> None:
        rec = rpc_record(CMCity="")
        assert rpc.RESOLVER.resolve("CMCity", rec) == ("City", PLACEHOLDER)

    def test_text_containing_t_is_not_a_date(self, rpc_record) -> None:
        rec = rpc_record(CMCity="TEMPE T")
        assert rpc.RESOLVER.resolve("CMCity", rec) == ("City", "TEMPE T")

    def test_unknown_feature(self, rpc_record) -> None:
        assert rpc.RESOLVER.resolve("NewFeature", rpc_record()) == ("NewFeature", PLACEHOLDER)


class TestUtilityResolver:
    def test_labels_are_feature_names(self, utility_record) -> None:
        assert utility.RESOLVER.resolve("TU Score", utility_record()) == ("TU Score", "690")

    def test_arrears_two_decimals(self, utility_record) -> None:
        assert utility.RESOLVER.resolve("Arrears Balance", utility_record()) == (
            "Arrears Balance", "$1,234.50",
        )

    def test_ratio_whole_percent(self, utility_record) -> None:
        rec = utility_record(pctOnTimePayments12m=0.875)
        assert utility.RESOLVER.resolve("On-Time Payments", rec) == ("On-Time Payments", "88%")

    def test_flags_verbatim(self, utility_record) -> None:
        assert utility.RESOLVER.resolve("Budget Billing", utility_record()) == ("Budget Billing", "Yes")
