"""
Tests for aurora_invest/config.py.

What we test
------------
1. The committed config/default.toml loads and matches the policy defaults.
2. A sibling local.toml is deep-merged over the base file.
3. AURORA_INVEST_* environment variables override TOML values.
4. Missing file → FileNotFoundError; invalid values → ValidationError.
5. The synthesizer policy mirrors the portfolio concentration thresholds.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from aurora_invest.config import AppConfig, LoggingConfig, _deep_merge, load_config


_ENV_VARS = (
    "AURORA_INVEST_LOG_LEVEL",
    "AURORA_INVEST_DEFAULT_HORIZON_MONTHS",
    "AURORA_INVEST_DEBUG",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


# ── Default file ──────────────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_loads(self):
        cfg = load_config()
        assert isinstance(cfg, AppConfig)
        assert cfg.analysis.default_horizon_months == 3
        assert cfg.logging.level == "INFO"
        assert cfg.debug is False

    def test_thresholds_match_policy_defaults(self):
        cfg = load_config()
        assert cfg.portfolio.concentration.high_pct == pytest.approx(25.0)
        assert cfg.recommendation.confidence.high == 65
        assert cfg.recommendation.risk.high == 7
        assert cfg.analysis.valuation.rich_forward_pe == pytest.approx(40.0)


# ── Layering ──────────────────────────────────────────────────────────────────

class TestLayering:
    def test_minimal_file_uses_model_defaults(self, tmp_path):
        cfg = load_config(_write(tmp_path / "default.toml", "debug = true\n"))
        assert cfg.debug is True
        assert cfg.portfolio.concentration.emergency_pct == pytest.approx(40.0)

    def test_local_toml_merged(self, tmp_path):
        base = _write(
            tmp_path / "default.toml",
            "[portfolio.concentration]\nmoderate_pct = 20.0\nhigh_pct = 25.0\nemergency_pct = 40.0\n",
        )
        _write(tmp_path / "local.toml", "[portfolio.concentration]\nhigh_pct = 30.0\n")
        cfg = load_config(base)
        assert cfg.portfolio.concentration.high_pct == pytest.approx(30.0)
        assert cfg.portfolio.concentration.moderate_pct == pytest.approx(20.0)

    def test_recommendation_concentration_mirrors_portfolio(self, tmp_path):
        cfg = load_config(_write(
            tmp_path / "default.toml",
            "[portfolio.concentration]\nmoderate_pct = 15.0\nhigh_pct = 20.0\nemergency_pct = 35.0\n",
        ))
        assert cfg.recommendation.concentration == cfg.portfolio.concentration
        assert cfg.synthesizer_policy().concentration.emergency_pct == pytest.approx(35.0)

    def test_deep_merge_keeps_siblings(self):
        merged = _deep_merge({"a": {"x": 1, "y": 2}, "b": 1}, {"a": {"y": 3}})
        assert merged == {"a": {"x": 1, "y": 3}, "b": 1}


class TestEnvOverrides:
    def test_log_level(self, tmp_path, monkeypatch):
        monkeypatch.setenv("AURORA_INVEST_LOG_LEVEL", "debug")
        cfg = load_config(_write(tmp_path / "default.toml", ""))
        assert cfg.logging.level == "DEBUG"

    def test_horizon(self, tmp_path, monkeypatch):
        monkeypatch.setenv("AURORA_INVEST_DEFAULT_HORIZON_MONTHS", "6")
        cfg = load_config(_write(tmp_path / "default.toml", ""))
        assert cfg.analysis.default_horizon_months == 6

    @pytest.mark.parametrize("raw, expected", [("1", True), ("yes", True), ("0", False)])
    def test_debug(self, tmp_path, monkeypatch, raw, expected):
        monkeypatch.setenv("AURORA_INVEST_DEBUG", raw)
        cfg = load_config(_write(tmp_path / "default.toml", ""))
        assert cfg.debug is expected


# ── Failures ──────────────────────────────────────────────────────────────────

class TestFailures:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config(tmp_path / "nope.toml")

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError, match="Log level must be one of"):
            LoggingConfig(level="LOUD")

    def test_inverted_concentration(self, tmp_path):
        path = _write(
            tmp_path / "default.toml",
            "[portfolio.concentration]\nmoderate_pct = 30.0\nhigh_pct = 25.0\nemergency_pct = 40.0\n",
        )
        with pytest.raises(ValidationError):
            load_config(path)

    def test_zero_horizon(self, tmp_path):
        with pytest.raises(ValidationError):
            load_config(_write(tmp_path / "default.toml", "[analysis]\ndefault_horizon_months = 0\n"))
