"""Tests for propensity_engine.scoring.ranker."""

from __future__ import annotations

from propensity_engine.scoring.ranker import rank_results
from propensity_engine.taxonomy.categories import Category, PriorityBand


def _amount(result) -> float:
    return result.amount_predicted or 0.0


def test_category_then_band_then_amount(healthcare_record, scored_result) -> None:
    rows = [
        scored_result(healthcare_record("low"), Category.LOW, priority=PriorityBand.L1, amount_predicted=900),
        scored_result(healthcare_record("h2"), Category.HIGH, priority=PriorityBand.H2, amount_predicted=900),
        scored_result(healthcare_record("h1a"), Category.HIGH, priority=PriorityBand.H1, amount_predicted=100),
        scored_result(healthcare_record("h1b"), Category.HIGH, priority=PriorityBand.H1, amount_predicted=300),
        scored_result(healthcare_record("sh"), Category.SUPER_HIGH, priority=PriorityBand.SH3, amount_predicted=1),
        scored_result(healthcare_record("med"), Category.MEDIUM, priority=PriorityBand.M1, amount_predicted=50),
    ]
    ranked = rank_results(rows, _amount)
    assert [r.account_id for r in ranked] == ["sh", "h1b", "h1a", "h2", "med", "low"]


def test_stable_for_full_ties(healthcare_record, scored_result) -> None:
    """Entries equal on every key keep their input order."""
    rows = [
        scored_result(healthcare_record(str(i)), Category.MEDIUM, priority=PriorityBand.M2, amount_predicted=40)
        for i in (3, 1, 2)
    ]
    assert [r.account_id for r in rank_results(rows, _amount)] == ["3", "1", "2"]


def test_unscored_records_sort_last(healthcare_record, scored_result) -> None:
    rows = [
        healthcare_record("raw1"),
        scored_result(healthcare_record("s"), Category.LOW, priority=PriorityBand.L3),
        healthcare_record("raw2"),
    ]
    ranked = rank_results(rows, _amount)
    assert [r.account_id for r in ranked] == ["s", "raw1", "raw2"]


def test_untiered_after_band_three(healthcare_record, scored_result) -> None:
    rows = [
        scored_result(healthcare_record("none"), Category.HIGH, amount_predicted=999),
        scored_result(healthcare_record("h3"), Category.HIGH, priority=PriorityBand.H3, amount_predicted=1),
    ]
    assert [r.account_id for r in rank_results(rows, _amount)] == ["h3", "none"]


def test_output_is_permutation(healthcare_record, scored_result) -> None:
    rows = [
        scored_result(healthcare_record(str(i)), Category.HIGH, priority=PriorityBand.H1, amount_predicted=i)
        for i in range(6)
    ]
    ranked = rank_results(rows, _amount)
    assert sorted(r.account_id for r in ranked) == sorted(r.account_id for r in rows)
    assert len(ranked) == len(rows)


def test_empty() -> None:
    assert rank_results([], _amount) == []
