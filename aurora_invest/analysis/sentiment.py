"""
Sentiment signals: analyst consensus, target-implied move, news themes.

The implied return is ``(target_mean - price) / price * 100`` and is bucketed
at +/- ``target_move_pct`` (default 15%):

    > +15  upside
    < -15  downside
    else   neutral
    no target mean or no positive price → unknown
"""

from __future__ import annotations

from typing import Optional

from aurora_invest.models.analysis import SentimentSignals
from aurora_invest.models.stock import StockData
from aurora_invest.policy import DEFAULT_SENTIMENT_THRESHOLDS, SentimentThresholds
from aurora_invest.taxonomy.classifications import CONSENSUS_LABELS, TargetOutlook

MAX_NEWS_HIGHLIGHTS = 3

NO_ANALYST_DATA = "No analyst data available"
NO_CONSENSUS = "No consensus"


def analyze_sentiment(
    stock: StockData,
    thresholds: Optional[SentimentThresholds] = None,
) -> SentimentSignals:
    """Map consensus to text, bucket the target move, keep the first news themes."""
    t = thresholds or DEFAULT_SENTIMENT_THRESHOLDS
    s = stock.sentiment
    if s is None:
        return SentimentSignals(
            consensus_text=NO_ANALYST_DATA,
            target_outlook=TargetOutlook.UNKNOWN,
        )

    consensus_text = (
        CONSENSUS_LABELS[s.analyst_consensus]
        if s.analyst_consensus is not None
        else NO_CONSENSUS
    )

    price = stock.technicals.price if stock.technicals is not None else 0.0
    implied: Optional[float] = None
    outlook = TargetOutlook.UNKNOWN
    if s.analyst_target_mean is not None and s.analyst_target_mean > 0 and price > 0:
        implied = round((s.analyst_target_mean - price) / price * 100.0, 1)
        if implied > t.target_move_pct:
            outlook = TargetOutlook.UPSIDE
        elif implied < -t.target_move_pct:
            outlook = TargetOutlook.DOWNSIDE
        else:
            outlook = TargetOutlook.NEUTRAL

    return SentimentSignals(
        consensus_text=consensus_text,
        target_outlook=outlook,
        implied_return_pct=implied,
        news_highlights=list(s.news_themes[:MAX_NEWS_HIGHLIGHTS]),
    )


def describe_target_outlook(signals: SentimentSignals) -> str:
    """Plain-language reading of the target outlook, e.g. ``"Downside risk (-18.0%)"``."""
    pct = signals.implied_return_pct
    if signals.target_outlook is TargetOutlook.UPSIDE:
        return f"Significant upside ({pct:.1f}%)"
    if signals.target_outlook is TargetOutlook.DOWNSIDE:
        return f"Downside risk ({pct:.1f}%)"
    if signals.target_outlook is TargetOutlook.NEUTRAL:
        return f"Limited upside/downside ({pct:.1f}%)"
    return "Unknown"
