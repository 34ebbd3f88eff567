"""
Propensity Engine — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Execute action (sample generation, backend fetch, scoring run).
  5. Report result to stdout.

Install and run::

    pip install -e .
    propensity-engine --help
    propensity-engine validate-config
    propensity-engine generate-sample --count 6 --seed 7 --out accounts.json
    propensity-engine fetch-accounts --vertical rpc --out rpc.json
    propensity-engine score --vertical healthcare --input accounts.json --fixture
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer

app = typer.Typer(
    name="propensity-engine",
    help="Prediction post-processing and explainability for propensity backends.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from propensity_engine.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from propensity_engine.utils.logging import configure_logging
    configure_logging(config.logging)


def _profile_or_exit(vertical: str):
    from propensity_engine.verticals import get_profile

    try:
        return get_profile(vertical)
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


def _write_json(path: str, payload: Any) -> None:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")


def _load_records(path: str, profile) -> list:
    """Read a JSON array of internal-keyed records for ``profile``."""
    src = Path(path)
    if not src.exists():
        raise FileNotFoundError(f"Input file not found: {src}")
    rows = json.loads(src.read_text(encoding="utf-8"))
    if not isinstance(rows, list):
        raise ValueError(f"{src} must contain a JSON array of account records.")
    for i, row in enumerate(rows):
        if not isinstance(row, dict):
            raise ValueError(f"{src}: entry {i} is not a JSON object.")
    return [profile.build_record(row) for row in rows]


def _account_to_json(entry) -> dict[str, Any]:
    from propensity_engine.models.account import ScoredResult

    if not isinstance(entry, ScoredResult):
        return dict(entry.fields)
    return {
        **entry.record.fields,
        "score": entry.score,
        "category": entry.category.value,
        "priority": entry.priority.value if entry.priority is not None else None,
        "amount_predicted": entry.amount_predicted,
        "scoring_date": entry.scoring_date,
        "attributions": [
            {"feature": a.feature, "impact": a.impact} for a in entry.attributions
        ],
    }


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Backend URL:       {config.backend.base_url}")
    typer.echo(f"  API token:         {'set' if config.backend.api_token else 'not set'}")
    typer.echo(
        f"  Thresholds:        high>={config.classification.high_threshold}"
        f"  medium>={config.classification.medium_threshold}"
    )
    typer.echo(
        f"  Tier splits:       {config.tiering.upper_split} / {config.tiering.lower_split}"
    )
    typer.echo(f"  Top factors:       {config.explain.top_factors}")
    typer.echo(f"  Log level:         {config.logging.level}")
    typer.echo(f"  Debug mode:        {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        dump = config.model_dump()
        if dump["backend"].get("api_token"):
            dump["backend"]["api_token"] = "***"
        typer.echo(json.dumps(dump, indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config is valid.")


@app.command("generate-sample")
def generate_sample(
    count: int = typer.Option(5, "--count", help="Number of healthcare accounts (1-20)."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for a reproducible batch."),
    out: Optional[str] = typer.Option(None, "--out", help="Write records to this JSON file."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Generate sample healthcare accounts without a backend."""
    from propensity_engine.ingestion.sample_accounts import generate_sample_accounts

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        records = generate_sample_accounts(count=count, seed=seed)
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    rows = [dict(r.fields) for r in records]
    if out:
        _write_json(out, rows)
        typer.echo(f"[OK] Wrote {len(rows)} account(s) to {out}")
    else:
        typer.echo(json.dumps(rows, indent=2))


@app.command("fetch-accounts")
def fetch_accounts(
    vertical: str = typer.Option(..., "--vertical", help="healthcare | rpc | utility"),
    out: Optional[str] = typer.Option(None, "--out", help="Write records to this JSON file."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Fetch sample accounts from the live backend's generate endpoint."""
    from propensity_engine.ingestion.client import BackendError, PredictionClient

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    profile = _profile_or_exit(vertical)

    try:
        records = PredictionClient(profile, config.backend).generate_accounts()
    except (BackendError, OSError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    rows = [dict(r.fields) for r in records]
    if out:
        _write_json(out, rows)
        typer.echo(f"[OK] Wrote {len(rows)} {profile.slug} account(s) to {out}")
    else:
        typer.echo(json.dumps(rows, indent=2, default=str))


@app.command("score")
def score(
    vertical: str = typer.Option(..., "--vertical", help="healthcare | rpc | utility"),
    input_path: str = typer.Option(..., "--input", help="JSON array of account records."),
    select: Optional[list[str]] = typer.Option(
        None, "--select", help="Score only these account ids (repeatable).",
    ),
    fixture: bool = typer.Option(
        False, "--fixture", help="Use the offline healthcare scorer instead of the backend.",
    ),
    out: Optional[str] = typer.Option(None, "--out", help="Write merged results to this JSON file."),
    explain_id: Optional[str] = typer.Option(
        None, "--explain", help="Print the explanation for this account id.",
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Score accounts, print the ranked table, optionally explain one account.

    Exits with code 1 on invalid input or backend failure.
    """
    from propensity_engine.ingestion.client import BackendError, PredictionClient
    from propensity_engine.ingestion.fixture import FixtureBackend
    from propensity_engine.pipeline.session import ScoringSession
    from propensity_engine.reporting.formatters import format_explanation, format_ranked_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    profile = _profile_or_exit(vertical)

    try:
        records = _load_records(input_path, profile)
        backend = FixtureBackend(profile) if fixture else PredictionClient(profile, config.backend)
        session = ScoringSession(profile, backend, config)
        session.commit(records)
        run = session.run(select or None)
    except (FileNotFoundError, ValueError, KeyError, BackendError, OSError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(format_ranked_table(list(run.ranked), profile, list(run.unscored_ids)))

    if out:
        _write_json(out, [_account_to_json(a) for a in run.accounts])
        typer.echo("")
        typer.echo(f"[OK] Wrote {len(run.accounts)} account(s) to {out}")

    if explain_id:
        try:
            explanation = session.explain(explain_id)
        except KeyError as exc:
            typer.echo(f"[ERROR] {exc}", err=True)
            raise typer.Exit(code=1)
        typer.echo(format_explanation(explanation))


if __name__ == "__main__":
    app()
