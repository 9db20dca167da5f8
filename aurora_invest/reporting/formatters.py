"""
ASCII terminal formatters for CLI commands.

All formatters accept engine output models and return plain multi-line
strings suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).
"""

from __future__ import annotations

from typing import Optional, Sequence

from aurora_invest.models.analysis import AnalysisResult, ScenarioBand
from aurora_invest.models.portfolio import (
    ConcentrationRisk,
    PortfolioAllocation,
    PortfolioMetrics,
    PortfolioStressTestResult,
)
from aurora_invest.models.recommendation import ActiveManagerRecommendation


# ── Analysis ──────────────────────────────────────────────────────────────────


def format_analysis(result: AnalysisResult) -> str:
    """Format an ``AnalysisResult`` as a sectioned text report."""
    title = f"{result.name} ({result.ticker})" if result.name else result.ticker
    s = result.summary

    lines: list[str] = []
    lines.append("")
    lines.append(f"=== Analysis: {title} ===")
    lines.append(f"  Generated at: {result.generated_at.isoformat()}")
    lines.append("")
    lines.append(f"  {s.headline_view}")
    lines.append(f"  Risk score:      {s.risk_score}/10")
    lines.append(f"  Conviction (3m): {s.conviction_score_3m}/100")

    lines.append("")
    lines.append("  [KEY TAKEAWAYS]")
    for takeaway in s.key_takeaways:
        lines.append(f"    - {takeaway}")

    lines.append("")
    lines.append("  [VIEWS]")
    lines.append(f"    Fundamentals: {result.fundamentals_view}")
    lines.append(f"    Valuation:    {result.valuation_view}")
    lines.append(f"    Technical:    {result.technical_view}")
    lines.append(f"    Sentiment:    {result.sentiment_view}")

    hp = result.historical_performance
    if hp is not None:
        lines.append("")
        lines.append(f"  [PRICE HISTORY] ({hp.period}, {hp.data_points} closes)")
        lines.append(f"    Period return:     {hp.period_return_pct:+.2f}%")
        lines.append(f"    Annualized return: {hp.annualized_return_pct:+.2f}%")
        lines.append(f"    Volatility:        {hp.volatility_pct:.2f}%")
        lines.append(f"    Trend:             {hp.trend}")

    sc = result.scenarios
    lines.append("")
    lines.append(f"  [SCENARIOS] ({sc.horizon_months}-month horizon)")
    header = f"    {'Case':<5}  {'Prob':>5}  {'Return range':>16}  Description"
    lines.append(header)
    lines.append("    " + "-" * (len(header) - 4))
    for label, band in (("Bull", sc.bull), ("Base", sc.base), ("Bear", sc.bear)):
        lines.append(_scenario_row(label, band))
    lines.append(f"    Point estimate: {sc.point_estimate_return_pct:+.1f}%")
    lines.append(f"    {sc.uncertainty_comment}")

    g = result.planning_guidance
    lines.append("")
    lines.append("  [PLANNING GUIDANCE]")
    for heading, items in (
        ("Position sizing", g.position_sizing),
        ("Timing", g.timing),
        ("Risk notes", g.risk_notes),
    ):
        lines.append(f"    {heading}:")
        for item in items:
            lines.append(f"      - {item}")
    lines.append(f"    {g.language_notes}")

    lines.append("")
    lines.append(f"  {result.disclaimer}")
    return "\n".join(lines)


def _scenario_row(label: str, band: ScenarioBand) -> str:
    low, high = band.expected_return_pct_range
    rng = f"{low:+.1f}% .. {high:+.1f}%"
    return f"    {label:<5}  {band.probability_pct:>4}%  {rng:>16}  {band.description}"


# ── Portfolio ─────────────────────────────────────────────────────────────────


def format_portfolio_summary(
    name: str,
    allocations: Sequence[PortfolioAllocation],
    metrics: PortfolioMetrics,
    concentration: ConcentrationRisk,
    stress: Optional[PortfolioStressTestResult] = None,
) -> str:
    """Format allocations, aggregate metrics and concentration risk."""
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== Portfolio: {name} ===")
    lines.append(f"  Total value:    {metrics.total_value:>12,.2f}")
    lines.append(f"  Total cost:     {metrics.total_cost:>12,.2f}")
    lines.append(
        f"  Gain/loss:      {metrics.total_gain_loss:>12,.2f}  "
        f"({metrics.total_gain_loss_pct:+.2f}%)"
    )
    lines.append(f"  Beta:           {metrics.beta:>12.2f}")
    lines.append(f"  Volatility:     {metrics.volatility:>11.2f}%")

    lines.append("")
    lines.append("  [ALLOCATION]")
    if not allocations:
        lines.append("    (no holdings)")
    else:
        header = (
            f"    {'Ticker':<8}  {'Value':>12}  {'Weight':>7}  "
            f"{'Gain/Loss':>12}  {'G/L %':>8}"
        )
        lines.append(header)
        lines.append("    " + "-" * (len(header) - 4))
        for a in allocations:
            marker = "" if a.priced else "  (no price)"
            lines.append(
                f"    {a.ticker:<8}  {a.value:>12,.2f}  {a.weight_pct:>6.2f}%  "
                f"{a.gain_loss:>12,.2f}  {a.gain_loss_pct:>+7.2f}%{marker}"
            )

    lines.append("")
    lines.append(f"  [CONCENTRATION] level: {concentration.level.upper()}")
    for warning in concentration.warnings:
        lines.append(f"    ! {warning}")
    if concentration.largest_positions:
        largest = ", ".join(
            f"{p.ticker} {p.weight_pct:.1f}%" for p in concentration.largest_positions
        )
        lines.append(f"    Largest positions: {largest}")

    if stress is not None and stress.entries:
        lines.append("")
        lines.append("  [STRESS TEST]")
        lines.append(f"    Bull: {stress.bull_value:>12,.2f}  ({stress.bull_change_pct:+.2f}%)")
        lines.append(f"    Base: {stress.base_value:>12,.2f}  ({stress.base_change_pct:+.2f}%)")
        lines.append(f"    Bear: {stress.bear_value:>12,.2f}  ({stress.bear_change_pct:+.2f}%)")

    return "\n".join(lines)


# ── Recommendation ────────────────────────────────────────────────────────────


def format_recommendation(rec: Optional[ActiveManagerRecommendation]) -> str:
    """Format an ``ActiveManagerRecommendation``; handles the ``None`` case."""
    if rec is None:
        return "\n  (no recommendation: analysis did not identify an instrument)"

    lines: list[str] = []
    lines.append("")
    lines.append(f"=== {rec.headline} ===")
    lines.append(f"  Action:     {rec.primary_action.upper()}")
    lines.append(f"  Confidence: {rec.confidence_score}/100")
    lines.append(f"  Timeframe:  {rec.timeframe.replace('_', ' ')}")

    lines.append("")
    lines.append("  [RATIONALE]")
    for bullet in rec.rationale:
        lines.append(f"    - {bullet}")

    lines.append("")
    lines.append("  [RISK FLAGS]")
    if rec.risk_flags:
        for flag in rec.risk_flags:
            lines.append(f"    ! {flag}")
    else:
        lines.append("    (none)")

    if rec.notes:
        lines.append("")
        lines.append("  [NOTES]")
        for note in rec.notes:
            lines.append(f"    * {note}")

    return "\n".join(lines)
