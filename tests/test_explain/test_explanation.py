"""Tests for propensity_engine.explain.explanation."""

from __future__ import annotations

import pytest

from propensity_engine.config import ExplainConfig
from propensity_engine.explain.explanation import build_explanation
from propensity_engine.taxonomy.categories import Category
from propensity_engine.verticals import healthcare, rpc


def test_healthcare_explanation(healthcare_record, scored_result) -> None:
    result = scored_result(
        healthcare_record(),
        Category.HIGH,
        score=0.6,
        impacts={"INIT BAL": -0.10, "TU SCORE": 0.40, "PT MS": 0.05},
    )
    exp = build_explanation(result, healthcare.PROFILE)

    assert exp.account_id == "32552411"
    assert exp.probability == 0.6
    assert [f.name for f in exp.factors] == ["TU Score", "Marital Status", "Initial Balance ($)"]
    assert [f.value for f in exp.factors] == ["800", "Married", "$1,200"]
    assert exp.decomposition.base_value == pytest.approx(0.055465, abs=1e-6)
    assert exp.panel.title == "TOP HIGH FACTORS"
    assert [f.name for f in exp.panel.factors] == ["TU Score", "Marital Status"]


def test_truncating_vertical_keeps_largest(healthcare_record, scored_result) -> None:
    impacts = {f"feature_{i}": (i + 1) * 0.01 * (-1) ** i for i in range(15)}
    result = scored_result(healthcare_record(), Category.MEDIUM, score=0.05, impacts=impacts)

    exp = build_explanation(result, healthcare.PROFILE, ExplainConfig(max_features=12))

    assert len(exp.factors) == 12
    kept = sorted(abs(f.impact) for f in exp.factors)
    assert kept[0] == pytest.approx(0.04)
    # Decomposition covers only the kept factors
    assert exp.decomposition.attribution_sum == pytest.approx(sum(f.impact for f in exp.factors))


def test_non_truncating_vertical_keeps_all(rpc_record, scored_result) -> None:
    impacts = {f"feature_{i}": 0.1 * (i + 1) for i in range(15)}
    result = scored_result(rpc_record(), Category.SUPER_HIGH, score=0.95, impacts=impacts)
    exp = build_explanation(result, rpc.PROFILE)
    assert len(exp.factors) == 15


def test_probability_is_unclamped(healthcare_record, scored_result) -> None:
    result = scored_result(healthcare_record(), Category.HIGH, score=0.9995, impacts={"TU SCORE": 1.0})
    exp = build_explanation(result, healthcare.PROFILE)
    assert exp.probability == 0.9995
    assert exp.decomposition.probability == pytest.approx(0.99)


def test_no_attributions(healthcare_record, scored_result) -> None:
    result = scored_result(healthcare_record(), Category.LOW, score=0.01)
    exp = build_explanation(result, healthcare.PROFILE)
    assert exp.factors == ()
    assert exp.decomposition.attribution_sum == 0.0
    assert exp.panel.factors == ()
