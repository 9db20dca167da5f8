"""
Technical signals from moving averages, RSI-14 and the 52-week range.

    trend     bullish  iff price > SMA50 > SMA200   (strict chain)
              bearish  iff price < SMA50 < SMA200
              neutral  otherwise, or when an average is missing
    momentum  RSI > 70 overbought, RSI < 30 oversold, else neutral
    position  percentile inside [52w low, 52w high]:
              > 80 near_high, < 20 near_low, else mid_range;
              unknown when the range is missing or degenerate
"""

from __future__ import annotations

from typing import Optional

from aurora_invest.models.analysis import TechnicalSignals
from aurora_invest.models.stock import StockData, StockTechnicals
from aurora_invest.policy import DEFAULT_TECHNICAL_THRESHOLDS, TechnicalThresholds
from aurora_invest.taxonomy.classifications import Momentum, PricePosition, Trend


def analyze_technicals(
    stock: StockData,
    thresholds: Optional[TechnicalThresholds] = None,
) -> TechnicalSignals:
    """Classify trend, momentum and 52-week position for one snapshot."""
    t = thresholds or DEFAULT_TECHNICAL_THRESHOLDS
    tech = stock.technicals
    if tech is None:
        return TechnicalSignals(
            trend=Trend.NEUTRAL,
            momentum=Momentum.NEUTRAL,
            price_position=PricePosition.UNKNOWN,
        )

    percentile = range_percentile(tech)
    if percentile is None:
        position = PricePosition.UNKNOWN
    elif percentile > t.near_high_percentile:
        position = PricePosition.NEAR_HIGH
    elif percentile < t.near_low_percentile:
        position = PricePosition.NEAR_LOW
    else:
        position = PricePosition.MID_RANGE

    return TechnicalSignals(
        trend=_trend(tech),
        momentum=_momentum(tech.rsi14, t),
        price_position=position,
        range_percentile=round(percentile, 1) if percentile is not None else None,
    )


def range_percentile(tech: StockTechnicals) -> Optional[float]:
    """Price position inside the 52-week range as 0-100; ``None`` if unusable."""
    high, low = tech.price_52w_high, tech.price_52w_low
    if high is None or low is None or high <= low:
        return None
    return (tech.price - low) / (high - low) * 100.0


def _trend(tech: StockTechnicals) -> Trend:
    if tech.sma50 is None or tech.sma200 is None:
        return Trend.NEUTRAL
    if tech.price > tech.sma50 > tech.sma200:
        return Trend.BULLISH
    if tech.price < tech.sma50 < tech.sma200:
        return Trend.BEARISH
    return Trend.NEUTRAL


def _momentum(rsi: Optional[float], t: TechnicalThresholds) -> Momentum:
    if rsi is None:
        return Momentum.NEUTRAL
    if rsi > t.rsi_overbought:
        return Momentum.OVERBOUGHT
    if rsi < t.rsi_oversold:
        return Momentum.OVERSOLD
    return Momentum.NEUTRAL
