"""
AuroraInvest CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load and validate JSON inputs.
  4. Run the engines with the configured thresholds.
  5. Print an ASCII report (or JSON with ``--json``).

Install and run::

    pip install -e .
    aurora-invest --help
    aurora-invest validate-config
    aurora-invest analyze --profile profile.json --stock aapl.json
    aurora-invest portfolio --portfolio book.json --prices prices.json
    aurora-invest recommend --profile profile.json --stock aapl.json \\
        --portfolio book.json --prices prices.json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, TypeVar

import typer
from pydantic import BaseModel, TypeAdapter, ValidationError

app = typer.Typer(
    name="aurora-invest",
    help="AuroraInvest: deterministic stock analysis and recommendation CLI.",
    add_completion=False,
)

ModelT = TypeVar("ModelT", bound=BaseModel)

_FLOAT_MAP = TypeAdapter(dict[str, float])


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from aurora_invest.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except ValueError as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from aurora_invest.utils.logging import configure_logging
    configure_logging(config.logging)


def _read_json_or_exit(path: str, label: str) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        typer.echo(f"[ERROR] {label} file not found: {path}", err=True)
        raise typer.Exit(code=1)
    except json.JSONDecodeError as exc:
        typer.echo(f"[ERROR] {label} file is not valid JSON: {exc}", err=True)
        raise typer.Exit(code=1)


def _load_model_or_exit(path: str, model: type[ModelT], label: str) -> ModelT:
    """Read a JSON file and validate it into ``model``; exit 1 on any failure."""
    raw = _read_json_or_exit(path, label)
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid {label}: {exc}", err=True)
        raise typer.Exit(code=1)


def _load_float_map_or_exit(path: str, label: str) -> dict[str, float]:
    raw = _read_json_or_exit(path, label)
    try:
        return _FLOAT_MAP.validate_python(raw)
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid {label}: {exc}", err=True)
        raise typer.Exit(code=1)


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, default=str))


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
    conc = config.portfolio.concentration
    rec = config.recommendation

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Default horizon:   {config.analysis.default_horizon_months} months")
    typer.echo(
        f"  Concentration:     moderate > {conc.moderate_pct:g}%, "
        f"high > {conc.high_pct:g}%, emergency >= {conc.emergency_pct:g}%"
    )
    typer.echo(f"  Confidence:        high >= {rec.confidence.high}, low < {rec.confidence.low}")
    typer.echo(f"  Risk score:        moderate {rec.risk.moderate}, high {rec.risk.high}")
    typer.echo(f"  Log level:         {config.logging.level}")
    typer.echo(f"  Debug mode:        {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        _echo_json(config.model_dump(mode="json"))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("analyze")
def analyze(
    profile_path: str = typer.Option(..., "--profile", help="UserProfile JSON file."),
    stock_path: str = typer.Option(..., "--stock", help="StockData JSON file."),
    horizon_months: Optional[int] = typer.Option(
        None,
        "--horizon-months",
        min=1,
        help="Scenario horizon in months (default from config).",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Analyze one stock against an investor profile."""
    from aurora_invest.analysis.engine import analyze_stock
    from aurora_invest.models.profile import AnalysisOptions, UserProfile
    from aurora_invest.models.stock import StockData
    from aurora_invest.reporting.formatters import format_analysis

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    profile = _load_model_or_exit(profile_path, UserProfile, "profile")
    stock = _load_model_or_exit(stock_path, StockData, "stock")
    options = AnalysisOptions(
        horizon_months=horizon_months or config.analysis.default_horizon_months
    )

    result = analyze_stock(
        profile,
        stock,
        options,
        fundamentals_thresholds=config.analysis.fundamentals,
        valuation_thresholds=config.analysis.valuation,
        technical_thresholds=config.analysis.technicals,
        sentiment_thresholds=config.analysis.sentiment,
    )

    if as_json:
        _echo_json(result.model_dump(mode="json"))
        return
    typer.echo(format_analysis(result))


@app.command("portfolio")
def portfolio(
    portfolio_path: str = typer.Option(..., "--portfolio", help="Portfolio JSON file."),
    prices_path: str = typer.Option(..., "--prices", help='Prices JSON, e.g. {"AAPL": 180.0}.'),
    betas_path: Optional[str] = typer.Option(None, "--betas", help="Optional betas JSON."),
    profile_path: Optional[str] = typer.Option(
        None,
        "--profile",
        help="UserProfile JSON; when given, adds a scenario stress test.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Value a portfolio and report allocation, metrics and concentration risk."""
    from aurora_invest.analysis.scenarios import generate_scenarios
    from aurora_invest.models.portfolio import HoldingScenarioSnapshot, Portfolio
    from aurora_invest.models.profile import UserProfile
    from aurora_invest.models.stock import StockData
    from aurora_invest.portfolio.engine import (
        calculate_allocation,
        calculate_portfolio_metrics,
        detect_concentration_risk,
    )
    from aurora_invest.portfolio.stress import calculate_portfolio_stress_test
    from aurora_invest.reporting.formatters import format_portfolio_summary

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    book = _load_model_or_exit(portfolio_path, Portfolio, "portfolio")
    prices = _load_float_map_or_exit(prices_path, "prices")
    betas = _load_float_map_or_exit(betas_path, "betas") if betas_path else None

    allocations = calculate_allocation(book, prices)
    metrics = calculate_portfolio_metrics(book, prices, betas)
    concentration = detect_concentration_risk(allocations, config.portfolio.concentration)

    stress = None
    if profile_path:
        profile = _load_model_or_exit(profile_path, UserProfile, "profile")
        horizon = config.analysis.default_horizon_months
        priced = {k.strip().upper(): v for k, v in prices.items()}
        snapshots = [
            HoldingScenarioSnapshot(
                ticker=h.ticker,
                shares=h.shares,
                current_price=priced[h.ticker],
                scenarios=generate_scenarios(profile, StockData(ticker=h.ticker), horizon),
            )
            for h in book.holdings
            if priced.get(h.ticker, 0) > 0
        ]
        stress = calculate_portfolio_stress_test(snapshots)

    if as_json:
        _echo_json({
            "allocations":   [a.model_dump(mode="json") for a in allocations],
            "metrics":       metrics.model_dump(mode="json"),
            "concentration": concentration.model_dump(mode="json"),
            "stress_test":   stress.model_dump(mode="json") if stress is not None else None,
        })
        return
    typer.echo(format_portfolio_summary(book.name, allocations, metrics, concentration, stress))


@app.command("recommend")
def recommend(
    profile_path: str = typer.Option(..., "--profile", help="UserProfile JSON file."),
    stock_path: str = typer.Option(..., "--stock", help="StockData JSON file."),
    portfolio_path: Optional[str] = typer.Option(
        None, "--portfolio", help="Optional Portfolio JSON file (requires --prices)."
    ),
    prices_path: Optional[str] = typer.Option(None, "--prices", help="Prices JSON file."),
    betas_path: Optional[str] = typer.Option(None, "--betas", help="Optional betas JSON."),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Analyze a stock and synthesize a portfolio-aware recommendation."""
    from aurora_invest.analysis.engine import analyze_stock
    from aurora_invest.models.portfolio import Portfolio
    from aurora_invest.models.profile import AnalysisOptions, UserProfile
    from aurora_invest.models.stock import StockData
    from aurora_invest.portfolio.engine import build_portfolio_context
    from aurora_invest.recommendations.synthesizer import build_active_manager_recommendation
    from aurora_invest.reporting.formatters import format_recommendation

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    if portfolio_path and not prices_path:
        typer.echo("[ERROR] --portfolio requires --prices.", err=True)
        raise typer.Exit(code=1)

    profile = _load_model_or_exit(profile_path, UserProfile, "profile")
    stock = _load_model_or_exit(stock_path, StockData, "stock")

    analysis = analyze_stock(
        profile,
        stock,
        AnalysisOptions(horizon_months=config.analysis.default_horizon_months),
        fundamentals_thresholds=config.analysis.fundamentals,
        valuation_thresholds=config.analysis.valuation,
        technical_thresholds=config.analysis.technicals,
        sentiment_thresholds=config.analysis.sentiment,
    )

    context = None
    if portfolio_path:
        book = _load_model_or_exit(portfolio_path, Portfolio, "portfolio")
        prices = _load_float_map_or_exit(prices_path, "prices")
        betas = _load_float_map_or_exit(betas_path, "betas") if betas_path else None
        context = build_portfolio_context(
            stock.ticker, book, prices, betas, config.portfolio.concentration
        )

    rec = build_active_manager_recommendation(
        analysis, profile, context, config.synthesizer_policy()
    )

    if as_json:
        _echo_json(rec.model_dump(mode="json") if rec is not None else None)
        return
    typer.echo(format_recommendation(rec))


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
