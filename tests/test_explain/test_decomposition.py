"""Tests for propensity_engine.explain.decomposition."""

from __future__ import annotations

import math

import pytest

from propensity_engine.explain.decomposition import logit, reconstruct, sigmoid
from propensity_engine.models.account import Attribution


def test_worked_example() -> None:
    """Impacts (+0.40, -0.10, +0.05) at p = 0.60."""
    d = reconstruct(0.60, [0.40, -0.10, 0.05])
    assert d.attribution_sum == pytest.approx(0.35)
    assert d.base_value == pytest.approx(0.055465, abs=1e-6)
    assert d.log_odds == pytest.approx(0.405465, abs=1e-6)
    assert d.probability == pytest.approx(0.60, abs=1e-9)


def test_log_odds_identity() -> None:
    d = reconstruct(0.27, [1.2, -3.4, 0.7, 0.05])
    assert d.log_odds == pytest.approx(d.base_value + d.attribution_sum)
    assert d.probability == pytest.approx(1 / (1 + math.exp(-d.log_odds)))


@pytest.mark.parametrize("p", [0.01, 0.05, 0.2, 0.5, 0.8, 0.99])
def test_round_trip_within_clamp(p: float) -> None:
    d = reconstruct(p, [0.3, -1.1, 2.0])
    assert abs(d.probability - p) < 1e-9


@pytest.mark.parametrize("p, clamped", [(0.0, 0.01), (-0.5, 0.01), (0.999, 0.99), (1.0, 0.99), (3.0, 0.99)])
def test_clamps_extreme_targets(p: float, clamped: float) -> None:
    """Certain predictions are clamped so the logit stays finite."""
    d = reconstruct(p, [0.5])
    assert math.isfinite(d.base_value)
    assert d.probability == pytest.approx(clamped, abs=1e-9)


def test_empty_attributions() -> None:
    d = reconstruct(0.3, [])
    assert d.attribution_sum == 0.0
    assert d.base_value == pytest.approx(logit(0.3))


def test_accepts_attribution_models() -> None:
    attrs = [Attribution(feature="A", impact=0.25), Attribution(feature="B", impact=-0.5)]
    d = reconstruct(0.4, attrs)
    assert d.attribution_sum == pytest.approx(-0.25)


def test_order_independent() -> None:
    a = reconstruct(0.4, [0.1, 0.2, -0.3])
    b = reconstruct(0.4, [-0.3, 0.2, 0.1])
    assert a.base_value == pytest.approx(b.base_value)


def test_rounded_trace() -> None:
    trace = reconstruct(0.60, [0.40, -0.10, 0.05]).rounded()
    assert trace["base_value"] == 0.055
    assert trace["attribution_sum"] == 0.35
    assert trace["log_odds"] == 0.405


def test_sigmoid_stable_for_large_inputs() -> None:
    assert sigmoid(-1000.0) == 0.0
    assert sigmoid(1000.0) == 1.0
    assert sigmoid(0.0) == 0.5
