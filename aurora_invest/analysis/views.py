"""
Plain-text views for ``AnalysisResult``.

Each view is a ``" | "``-joined list of labelled parts. No markup: the
presentation collaborator decides how to render them.
"""

from __future__ import annotations

from typing import Optional

from aurora_invest.analysis.sentiment import describe_target_outlook
from aurora_invest.models.analysis import (
    FundamentalsInsight,
    HistoricalPerformance,
    SentimentSignals,
    TechnicalSignals,
    ValuationInsight,
)
from aurora_invest.models.stock import StockData
from aurora_invest.taxonomy.classifications import PRICE_POSITION_LABELS

_SEP = " | "


def compose_fundamentals_view(stock: StockData, insight: FundamentalsInsight) -> str:
    f = stock.fundamentals
    if f is None:
        return "Fundamentals data not available."

    parts = [f"Classification: {insight.classification.upper()}"]
    if insight.quality_score > 0:
        parts.append(f"Quality Score: {insight.quality_score}/100")
    if insight.drivers:
        parts.append(f"Drivers: {', '.join(insight.drivers)}")
    if insight.cautionary_notes:
        parts.append(f"Watch: {', '.join(insight.cautionary_notes)}")

    labelled = (
        ("Trailing P/E",     f.trailing_pe,              ""),
        ("Forward P/E",      f.forward_pe,               ""),
        ("EPS Growth (YoY)", f.eps_growth_yoy_pct,       "%"),
        ("Net Margin",       f.net_margin_pct,           "%"),
        ("FCF Yield",        f.free_cash_flow_yield_pct, "%"),
        ("ROE",              f.roe,                      "%"),
    )
    for label, value, suffix in labelled:
        if value is not None:
            parts.append(f"{label}: {value:.1f}{suffix}")
    return _SEP.join(parts)


def compose_valuation_view(stock: StockData, insight: ValuationInsight) -> str:
    if stock.fundamentals is None:
        return "Valuation data not available."

    parts = [f"Classification: {insight.classification.upper()}"]
    if insight.commentary:
        parts.append(f"Notes: {insight.commentary}")
    if insight.drivers:
        parts.append(f"Drivers: {', '.join(insight.drivers)}")
    if insight.cautionary_notes:
        parts.append(f"Watch: {', '.join(insight.cautionary_notes)}")
    if insight.peg_ratio is not None:
        parts.append(f"PEG Ratio: {insight.peg_ratio:.2f}")
    if insight.earnings_yield_pct is not None:
        parts.append(f"Earnings Yield: {insight.earnings_yield_pct:.1f}%")
    if insight.free_cash_flow_yield_pct is not None:
        parts.append(f"FCF Yield: {insight.free_cash_flow_yield_pct:.1f}%")
    if insight.dividend_yield_pct is not None:
        parts.append(f"Dividend Yield: {insight.dividend_yield_pct:.2f}%")
    return _SEP.join(parts)


def compose_technical_view(
    stock: StockData,
    signals: TechnicalSignals,
    performance: Optional[HistoricalPerformance] = None,
) -> str:
    tech = stock.technicals
    if tech is None and performance is None:
        return "Technical data not available."

    parts: list[str] = []
    if tech is not None:
        parts.extend([
            f"Trend: {signals.trend}",
            f"Momentum: {signals.momentum}",
            f"Position: {PRICE_POSITION_LABELS[signals.price_position]}",
        ])
        if tech.rsi14 is not None:
            parts.append(f"RSI(14): {tech.rsi14:.1f}")
    if performance is not None:
        parts.append(
            f"{performance.period} Return: {performance.period_return_pct:+.1f}% "
            f"({performance.annualized_return_pct:+.1f}% annualized)"
        )
        parts.append(f"Volatility: {performance.volatility_pct:.1f}%")
        parts.append(f"{performance.period} Trend: {performance.trend}")
    return _SEP.join(parts)


def compose_sentiment_view(signals: SentimentSignals) -> str:
    news = (
        ". ".join(signals.news_highlights) + "."
        if signals.news_highlights
        else "No recent news themes available."
    )
    return _SEP.join([
        f"Analyst Consensus: {signals.consensus_text}",
        f"Target vs Price: {describe_target_outlook(signals)}",
        f"News: {news}",
    ])
