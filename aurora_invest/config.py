"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      committed policy defaults
  2. ``config/local.toml``        optional local overrides (gitignored)
  3. ``.env``                     local env overrides (gitignored)
  4. Environment variables        ``AURORA_INVEST_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The engines themselves never read configuration: CLI commands load an
``AppConfig`` once and pass the relevant threshold objects down.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from aurora_invest.policy import (
    ConcentrationThresholds,
    ConfidenceThresholds,
    FundamentalsThresholds,
    RiskThresholds,
    SentimentThresholds,
    SynthesizerPolicy,
    TechnicalThresholds,
    ValuationThresholds,
)

# ── Sub-config models ─────────────────────────────────────────────────────────


class AnalysisConfig(BaseModel):
    """Analysis Engine settings and classification thresholds."""

    model_config = ConfigDict(frozen=True)

    default_horizon_months: int = Field(default=3, ge=1)
    fundamentals: FundamentalsThresholds = FundamentalsThresholds()
    valuation: ValuationThresholds = ValuationThresholds()
    technicals: TechnicalThresholds = TechnicalThresholds()
    sentiment: SentimentThresholds = SentimentThresholds()


class PortfolioConfig(BaseModel):
    """Portfolio Engine guardrails."""

    model_config = ConfigDict(frozen=True)

    concentration: ConcentrationThresholds = ConcentrationThresholds()


class RecommendationConfig(BaseModel):
    """Recommendation Synthesizer cut-points.

    ``concentration`` is not read from its own TOML table: it mirrors
    ``[portfolio.concentration]`` so both engines share one guardrail.
    """

    model_config = ConfigDict(frozen=True)

    confidence: ConfidenceThresholds = ConfidenceThresholds()
    risk: RiskThresholds = RiskThresholds()
    concentration: ConcentrationThresholds = ConcentrationThresholds()


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
    """Complete application configuration.

    Constructed by ``load_config()`` which merges TOML + .env + env vars.
    """

    model_config = ConfigDict(frozen=True)

    analysis: AnalysisConfig = AnalysisConfig()
    portfolio: PortfolioConfig = PortfolioConfig()
    recommendation: RecommendationConfig = RecommendationConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False

    def synthesizer_policy(self) -> SynthesizerPolicy:
        """Bundle the recommendation cut-points for ``build_active_manager_recommendation``."""
        return SynthesizerPolicy(
            confidence=self.recommendation.confidence,
            risk=self.recommendation.risk,
            concentration=self.recommendation.concentration,
        )


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

    # 3. Apply AURORA_INVEST_* environment variable overrides
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
    """Apply AURORA_INVEST_* env vars to the raw config dict.

    Supported overrides:
      AURORA_INVEST_LOG_LEVEL               → raw["logging"]["level"]
      AURORA_INVEST_DEFAULT_HORIZON_MONTHS  → raw["analysis"]["default_horizon_months"]
      AURORA_INVEST_DEBUG                   → raw["debug"]
    """
    if log_level := os.environ.get("AURORA_INVEST_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if horizon := os.environ.get("AURORA_INVEST_DEFAULT_HORIZON_MONTHS"):
        raw.setdefault("analysis", {})["default_horizon_months"] = horizon

    if debug := os.environ.get("AURORA_INVEST_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    analysis = raw.get("analysis", {})
    portfolio = PortfolioConfig(**raw.get("portfolio", {}))
    recommendation = raw.get("recommendation", {})

    return AppConfig(
        analysis=AnalysisConfig(**analysis),
        portfolio=portfolio,
        recommendation=RecommendationConfig(
            confidence=ConfidenceThresholds(**recommendation.get("confidence", {})),
            risk=RiskThresholds(**recommendation.get("risk", {})),
            concentration=portfolio.concentration,
        ),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", False),
    )
