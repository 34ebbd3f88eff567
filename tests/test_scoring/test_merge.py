"""Tests for propensity_engine.scoring.merge."""

from __future__ import annotations

from propensity_engine.models.account import FeatureRecord, ScoredResult
from propensity_engine.scoring.merge import merge_results
from propensity_engine.taxonomy.categories import Category


def test_partial_overlay_keeps_order(healthcare_record, scored_result) -> None:
    """[A, B, C] merged with [B'] gives [A, B', C]."""
    a, b, c = (healthcare_record(x) for x in ("A", "B", "C"))
    b_scored = scored_result(b, Category.HIGH)

    merged = merge_results([a, b, c], [b_scored])

    assert merged[0] is a
    assert merged[1] is b_scored
    assert merged[2] is c


def test_one_entry_per_original(healthcare_record, scored_result) -> None:
    original = [healthcare_record(str(i)) for i in range(4)]
    scored = [scored_result(original[3], Category.LOW), scored_result(original[0], Category.HIGH)]
    assert len(merge_results(original, scored)) == 4


def test_unknown_ids_ignored(healthcare_record, scored_result) -> None:
    original = [healthcare_record("A")]
    stray = scored_result(healthcare_record("Z"), Category.HIGH)
    merged = merge_results(original, [stray])
    assert merged == original


def test_last_duplicate_wins(healthcare_record, scored_result) -> None:
    a = healthcare_record("A")
    first = scored_result(a, Category.LOW)
    second = scored_result(a, Category.HIGH)
    merged = merge_results([a], [first, second])
    assert merged[0] is second


def test_empty_scored_returns_original(healthcare_record) -> None:
    original = [healthcare_record("A"), healthcare_record("B")]
    merged = merge_results(original, [])
    assert all(isinstance(m, FeatureRecord) for m in merged)
    assert [m.account_id for m in merged] == ["A", "B"]


def test_replaced_wholesale(healthcare_record, scored_result) -> None:
    """The scored entry replaces the record; it does not patch fields."""
    a = healthcare_record("A")
    result = scored_result(a, Category.MEDIUM, score=0.04)
    merged = merge_results([a], [result])
    assert isinstance(merged[0], ScoredResult)
    assert merged[0].score == 0.04
