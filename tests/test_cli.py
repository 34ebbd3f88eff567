"""Tests for propensity_engine.cli (typer CliRunner, fixture backend only)."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest
from typer.testing import CliRunner

from propensity_engine.cli import app

runner = CliRunner()


@pytest.fixture
def sample_file(tmp_path: Path, clean_env) -> Path:
    out = tmp_path / "accounts.json"
    result = runner.invoke(app, ["generate-sample", "--count", "6", "--seed", "4", "--out", str(out)])
    assert result.exit_code == 0, result.output
    return out


# ── validate-config ───────────────────────────────────────────────────────────


def test_validate_config_ok(clean_env) -> None:
    result = runner.invoke(app, ["validate-config"])
    assert result.exit_code == 0
    assert "[OK] Config is valid." in result.output
    assert "0.085767" in result.output


def test_validate_config_full_masks_token(clean_env) -> None:
    clean_env.setenv("PROPENSITY_ENGINE_API_TOKEN", "very-secret")
    result = runner.invoke(app, ["validate-config", "--full"])
    assert result.exit_code == 0
    assert "very-secret" not in result.output
    assert '"api_token": "***"' in result.output


def test_validate_config_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["validate-config", "--config", str(tmp_path / "missing.toml")])
    assert result.exit_code == 1


# ── generate-sample ───────────────────────────────────────────────────────────


def test_generate_sample_writes_file(sample_file: Path) -> None:
    rows = json.loads(sample_file.read_text(encoding="utf-8"))
    assert len(rows) == 6
    assert all("facsNumber" in row for row in rows)


def test_generate_sample_bad_count(clean_env) -> None:
    result = runner.invoke(app, ["generate-sample", "--count", "99"])
    assert result.exit_code == 1


# ── score ─────────────────────────────────────────────────────────────────────


def test_score_with_fixture(sample_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "results.json"
    result = runner.invoke(
        app,
        ["score", "--vertical", "healthcare", "--input", str(sample_file), "--fixture", "--out", str(out)],
    )
    assert result.exit_code == 0, result.output
    assert "Ranked Results" in result.output

    rows = json.loads(out.read_text(encoding="utf-8"))
    assert len(rows) == 6
    assert all(row["category"] in ("High", "Medium", "Low") for row in rows)
    assert all(row["priority"] for row in rows)


def test_score_selection_and_explain(sample_file: Path) -> None:
    ids = [row["facsNumber"] for row in json.loads(sample_file.read_text(encoding="utf-8"))]
    result = runner.invoke(
        app,
        [
            "score", "--vertical", "healthcare", "--input", str(sample_file), "--fixture",
            "--select", ids[0], "--select", ids[1], "--explain", ids[0],
        ],
    )
    assert result.exit_code == 0, result.output
    assert "Scored:   2" in result.output
    assert f"Explanation: account {ids[0]}" in result.output


def test_score_explain_unscored_account(sample_file: Path) -> None:
    ids = [row["facsNumber"] for row in json.loads(sample_file.read_text(encoding="utf-8"))]
    result = runner.invoke(
        app,
        [
            "score", "--vertical", "healthcare", "--input", str(sample_file), "--fixture",
            "--select", ids[0], "--explain", ids[1],
        ],
    )
    assert result.exit_code == 1


def test_score_unknown_vertical(sample_file: Path) -> None:
    result = runner.invoke(app, ["score", "--vertical", "insurance", "--input", str(sample_file)])
    assert result.exit_code == 1


def test_score_fixture_rejects_other_vertical(tmp_path: Path, clean_env) -> None:
    src = tmp_path / "rpc.json"
    src.write_text(json.dumps([{"AcctID": "A1", "PlaceAmt": 10}]), encoding="utf-8")
    result = runner.invoke(app, ["score", "--vertical", "rpc", "--input", str(src), "--fixture"])
    assert result.exit_code == 1


def test_score_missing_input(tmp_path: Path, clean_env) -> None:
    result = runner.invoke(
        app, ["score", "--vertical", "healthcare", "--input", str(tmp_path / "none.json"), "--fixture"]
    )
    assert result.exit_code == 1


def test_score_duplicate_ids(tmp_path: Path, clean_env) -> None:
    src = tmp_path / "dup.json"
    src.write_text(json.dumps([{"facsNumber": "1"}, {"facsNumber": "1"}]), encoding="utf-8")
    result = runner.invoke(app, ["score", "--vertical", "healthcare", "--input", str(src), "--fixture"])
    assert result.exit_code == 1


def test_score_rejects_non_object_entries(tmp_path: Path, clean_env) -> None:
    src = tmp_path / "bad.json"
    src.write_text("[5]", encoding="utf-8")
    result = runner.invoke(app, ["score", "--vertical", "healthcare", "--input", str(src), "--fixture"])
    assert result.exit_code == 1
    assert "not a JSON object" in result.output


def test_score_out_of_range_value(tmp_path: Path, clean_env) -> None:
    src = tmp_path / "range.json"
    src.write_text(json.dumps([{"facsNumber": "1", "tuScore": 99}]), encoding="utf-8")
    result = runner.invoke(app, ["score", "--vertical", "healthcare", "--input", str(src), "--fixture"])
    assert result.exit_code == 1
    assert "TU Score" in result.output


# ── backend transport ─────────────────────────────────────────────────────────


def _refuse(self, method, url, **kwargs):
    raise httpx.ConnectError("[Errno 111] Connection refused")


def test_score_backend_unreachable(tmp_path: Path, clean_env) -> None:
    src = tmp_path / "rpc.json"
    src.write_text(json.dumps([{"AcctID": "A1", "PlaceAmt": 10}]), encoding="utf-8")
    clean_env.setattr(httpx.Client, "request", _refuse)

    result = runner.invoke(app, ["score", "--vertical", "rpc", "--input", str(src)])

    assert result.exit_code == 1
    assert "[ERROR]" in result.output
    assert "unreachable" in result.output


def test_fetch_accounts_backend_unreachable(clean_env) -> None:
    clean_env.setattr(httpx.Client, "request", _refuse)
    result = runner.invoke(app, ["fetch-accounts", "--vertical", "utility"])
    assert result.exit_code == 1
    assert "[ERROR]" in result.output


def test_fetch_accounts_stdout_is_pure_json(clean_env) -> None:
    def _generate(self, method, url, **kwargs):
        data = [{"AcctID": "A1", "PlaceAmt": 250}, {"AcctID": "A2", "PlaceAmt": 90}]
        body = {"Response": {"StatusCode": 200, "Message": "OK", "ResponseInfo": {"data": data}}}
        return httpx.Response(200, json=body)

    clean_env.setattr(httpx.Client, "request", _generate)
    result = runner.invoke(app, ["fetch-accounts", "--vertical", "rpc"])

    assert result.exit_code == 0, result.output
    rows = json.loads(result.stdout)
    assert [row["AcctID"] for row in rows] == ["A1", "A2"]
