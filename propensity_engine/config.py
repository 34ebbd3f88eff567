"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``PROPENSITY_ENGINE_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The scoring session, backend client and CLI commands receive an ``AppConfig``
instance — never raw dicts or individual env var lookups scattered through
the codebase.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class BackendConfig(BaseModel):
    """Prediction backend connection settings."""

    model_config = ConfigDict(frozen=True)

    base_url: str = "http://localhost:8000"
    timeout_seconds: float = 30.0
    api_token: Optional[str] = None

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got '{v}'.")
        return v.rstrip("/")

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {v}.")
        return v


class ClassificationConfig(BaseModel):
    """Raw-score cut points for threshold-mode verticals.

    These are dataset-fitted constants from the production post-processing
    step; they are kept verbatim rather than re-derived.
    """

    model_config = ConfigDict(frozen=True)

    high_threshold: float = 0.085767
    medium_threshold: float = 0.031018

    @model_validator(mode="after")
    def validate_order(self) -> "ClassificationConfig":
        if self.medium_threshold >= self.high_threshold:
            raise ValueError(
                f"medium_threshold ({self.medium_threshold}) must be below "
                f"high_threshold ({self.high_threshold})."
            )
        return self


class TieringConfig(BaseModel):
    """Min–max interpolation split points for priority bands."""

    model_config = ConfigDict(frozen=True)

    upper_split: float = 0.66
    lower_split: float = 0.33

    @model_validator(mode="after")
    def validate_splits(self) -> "TieringConfig":
        if not 0.0 < self.lower_split < self.upper_split < 1.0:
            raise ValueError(
                "Tiering splits must satisfy 0 < lower_split < upper_split < 1, "
                f"got lower={self.lower_split}, upper={self.upper_split}."
            )
        return self


class ExplainConfig(BaseModel):
    """Explanation display parameters."""

    model_config = ConfigDict(frozen=True)

    top_factors: int = 6          # split into two display columns
    max_features: int = 12        # attribution cap for truncating verticals
    text_truncate: int = 25       # free-text character budget before "..."

    @field_validator("top_factors")
    @classmethod
    def validate_top_factors(cls, v: int) -> int:
        if v <= 0 or v % 2:
            raise ValueError(f"top_factors must be a positive even number, got {v}.")
        return v

    @field_validator("max_features", "text_truncate")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"Value must be positive, got {v}.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth."""

    model_config = ConfigDict(frozen=True)

    backend: BackendConfig = BackendConfig()
    classification: ClassificationConfig = ClassificationConfig()
    tiering: TieringConfig = TieringConfig()
    explain: ExplainConfig = ExplainConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config explicitly."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply PROPENSITY_ENGINE_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply PROPENSITY_ENGINE_* env vars to the raw config dict.

    Supported overrides:
      PROPENSITY_ENGINE_BACKEND_URL → raw["backend"]["base_url"]
      PROPENSITY_ENGINE_API_TOKEN   → raw["backend"]["api_token"]
      PROPENSITY_ENGINE_LOG_LEVEL   → raw["logging"]["level"]
      PROPENSITY_ENGINE_DEBUG       → raw["debug"]
    """
    if base_url := os.environ.get("PROPENSITY_ENGINE_BACKEND_URL"):
        raw.setdefault("backend", {})["base_url"] = base_url

    if api_token := os.environ.get("PROPENSITY_ENGINE_API_TOKEN"):
        raw.setdefault("backend", {})["api_token"] = api_token

    if log_level := os.environ.get("PROPENSITY_ENGINE_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("PROPENSITY_ENGINE_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        backend=BackendConfig(**raw.get("backend", {})),
        classification=ClassificationConfig(**raw.get("classification", {})),
        tiering=TieringConfig(**raw.get("tiering", {})),
        explain=ExplainConfig(**raw.get("explain", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
