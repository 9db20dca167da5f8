"""
Return, volatility and trend helpers over a ``HistoricalData`` price series.

Points are sorted by date and non-finite prices are dropped before any
computation. Fewer than two usable points yields zero returns, zero
volatility and a ``sideways`` trend.

Trend rule
----------
    change  = (last - first) / first * 100
    slope   = least-squares slope of price against index
    breadth = advances / (advances + declines)

    uptrend   : change >= threshold  AND slope > 0  AND breadth >= 0.55
    downtrend : change <= -threshold AND slope < 0  AND breadth <= 0.45
    sideways  : otherwise

Thresholds by period: 1M 3%, 3M 5%, 6M 7%, 1Y 10%, 5Y 15%.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from aurora_invest.models.analysis import HistoricalPerformance
from aurora_invest.models.stock import HistoricalData, HistoricalDataPoint
from aurora_invest.taxonomy.classifications import HistoricalTrend

TRADING_DAYS_PER_YEAR = 252

PERIOD_MONTHS: dict[str, int] = {"1M": 1, "3M": 3, "6M": 6, "1Y": 12, "5Y": 60}
TREND_THRESHOLD_PCT: dict[str, float] = {
    "1M": 3.0, "3M": 5.0, "6M": 7.0, "1Y": 10.0, "5Y": 15.0,
}

_UPTREND_BREADTH = 0.55
_DOWNTREND_BREADTH = 0.45


@dataclass(frozen=True)
class PeriodReturns:
    """Simple and annualised return over the series, in percent."""

    period_pct: float
    annualized_pct: float


def calculate_returns(history: HistoricalData) -> PeriodReturns:
    """Period return and its annualised equivalent for the series' period."""
    points = _normalize(history)
    if len(points) < 2:
        return PeriodReturns(0.0, 0.0)

    start, end = points[0].price, points[-1].price
    if start <= 0 or end <= 0:
        return PeriodReturns(0.0, 0.0)

    years = PERIOD_MONTHS[history.period] / 12
    period_pct = (end - start) / start * 100.0
    annualized_pct = (math.pow(end / start, 1 / years) - 1) * 100.0
    return PeriodReturns(round(period_pct, 2), round(annualized_pct, 2))


def calculate_volatility(history: HistoricalData) -> float:
    """Annualised volatility (%) from daily returns, population std-dev."""
    points = _normalize(history)
    returns = [
        (curr.price - prev.price) / prev.price
        for prev, curr in zip(points, points[1:])
        if prev.price > 0 and curr.price > 0
    ]
    if not returns:
        return 0.0

    mean = sum(returns) / len(returns)
    variance = sum((r - mean) ** 2 for r in returns) / len(returns)
    return round(math.sqrt(variance) * math.sqrt(TRADING_DAYS_PER_YEAR) * 100.0, 2)


def detect_trend(history: HistoricalData) -> HistoricalTrend:
    """Classify the series as uptrend / downtrend / sideways."""
    points = _normalize(history)
    if len(points) < 2:
        return HistoricalTrend.SIDEWAYS

    start, end = points[0].price, points[-1].price
    if start <= 0 or end <= 0:
        return HistoricalTrend.SIDEWAYS

    change_pct = (end - start) / start * 100.0
    threshold = TREND_THRESHOLD_PCT[history.period]
    slope = _slope([p.price for p in points])

    advances = sum(1 for prev, curr in zip(points, points[1:]) if curr.price > prev.price)
    declines = sum(1 for prev, curr in zip(points, points[1:]) if curr.price < prev.price)
    moves = advances + declines
    breadth = advances / moves if moves else 0.5

    if change_pct >= threshold and slope > 0 and breadth >= _UPTREND_BREADTH:
        return HistoricalTrend.UPTREND
    if change_pct <= -threshold and slope < 0 and breadth <= _DOWNTREND_BREADTH:
        return HistoricalTrend.DOWNTREND
    return HistoricalTrend.SIDEWAYS


def summarize_history(history: HistoricalData) -> HistoricalPerformance:
    """Bundle returns, volatility and trend for ``analyze_stock``."""
    returns = calculate_returns(history)
    return HistoricalPerformance(
        period=history.period,
        period_return_pct=returns.period_pct,
        annualized_return_pct=returns.annualized_pct,
        volatility_pct=calculate_volatility(history),
        trend=detect_trend(history),
        data_points=len(_normalize(history)),
    )


# ── Helpers ───────────────────────────────────────────────────────────────────


def _normalize(history: HistoricalData) -> list[HistoricalDataPoint]:
    usable = [p for p in history.data_points if math.isfinite(p.price)]
    return sorted(usable, key=lambda p: p.as_of)


def _slope(prices: list[float]) -> float:
    n = len(prices)
    mean_x = (n - 1) / 2
    mean_y = sum(prices) / n
    numerator = sum((i - mean_x) * (y - mean_y) for i, y in enumerate(prices))
    denominator = sum((i - mean_x) ** 2 for i in range(n))
    return numerator / denominator if denominator else 0.0
