"""
Closed vocabularies for profiles, classifications and actions.

Every engine output that names a category uses one of these ``StrEnum``
types rather than a free-form string, so consumers can match exhaustively
and JSON round-trips keep the plain string value.

Grouping:
  - Profile inputs:     ``RiskTolerance``, ``InvestmentHorizon``, ``InvestmentObjective``
  - Market inputs:      ``AnalystConsensus``
  - Analysis outputs:   ``FundamentalsClass``, ``ValuationClass``, ``PegBucket``,
                        ``Trend``, ``Momentum``, ``PricePosition``, ``TargetOutlook``,
                        ``HistoricalTrend``
  - Portfolio outputs:  ``ConcentrationLevel``, ``PortfolioAction``
  - Synthesizer output: ``Timeframe``, ``ConfidenceTier``

This module has NO imports from any other ``aurora_invest`` package.
"""

from enum import StrEnum


# ── Profile inputs ────────────────────────────────────────────────────────────


class RiskTolerance(StrEnum):
    """How much drawdown the investor is prepared to sit through."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class InvestmentHorizon(StrEnum):
    """Holding-period bucket in years."""

    SHORT = "1-3"
    MEDIUM = "5-10"
    LONG = "10+"


class InvestmentObjective(StrEnum):
    """What the investor wants the position to deliver."""

    GROWTH = "growth"
    INCOME = "income"
    BALANCED = "balanced"


# ── Market inputs ─────────────────────────────────────────────────────────────


class AnalystConsensus(StrEnum):
    """Sell-side consensus rating supplied by the market-data collaborator."""

    STRONG_BUY = "strong_buy"
    BUY = "buy"
    HOLD = "hold"
    SELL = "sell"
    STRONG_SELL = "strong_sell"


CONSENSUS_LABELS: dict[AnalystConsensus, str] = {
    AnalystConsensus.STRONG_BUY:  "Strong Buy",
    AnalystConsensus.BUY:         "Buy",
    AnalystConsensus.HOLD:        "Hold",
    AnalystConsensus.SELL:        "Sell",
    AnalystConsensus.STRONG_SELL: "Strong Sell",
}

BULLISH_CONSENSUS: frozenset[AnalystConsensus] = frozenset({
    AnalystConsensus.STRONG_BUY, AnalystConsensus.BUY,
})
BEARISH_CONSENSUS: frozenset[AnalystConsensus] = frozenset({
    AnalystConsensus.SELL, AnalystConsensus.STRONG_SELL,
})


# ── Analysis outputs ──────────────────────────────────────────────────────────


class FundamentalsClass(StrEnum):
    """Rule-based fundamentals classification."""

    STRONG = "strong"
    OK = "ok"
    WEAK = "weak"
    UNKNOWN = "unknown"
    """Fundamentals block absent from the snapshot."""


class ValuationClass(StrEnum):
    """Rule-based valuation classification."""

    CHEAP = "cheap"
    FAIR = "fair"
    RICH = "rich"
    UNKNOWN = "unknown"
    """No fundamentals or no P/E to anchor on."""


class PegBucket(StrEnum):
    """Qualitative reading of the PEG ratio."""

    DISCOUNT = "discount"
    BALANCED = "balanced"
    DEMANDING = "demanding"
    DISTORTED = "distorted"
    """Growth is too low or negative for PEG to mean much."""


class Trend(StrEnum):
    """Moving-average trend."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class Momentum(StrEnum):
    """RSI-14 momentum state."""

    OVERBOUGHT = "overbought"
    OVERSOLD = "oversold"
    NEUTRAL = "neutral"


class PricePosition(StrEnum):
    """Where the price sits inside its 52-week range."""

    NEAR_HIGH = "near_high"
    MID_RANGE = "mid_range"
    NEAR_LOW = "near_low"
    UNKNOWN = "unknown"


PRICE_POSITION_LABELS: dict[PricePosition, str] = {
    PricePosition.NEAR_HIGH: "Near 52-week high",
    PricePosition.MID_RANGE: "Mid-range",
    PricePosition.NEAR_LOW:  "Near 52-week low",
    PricePosition.UNKNOWN:   "Unknown",
}


class TargetOutlook(StrEnum):
    """Analyst target mean relative to the current price."""

    UPSIDE = "upside"
    NEUTRAL = "neutral"
    DOWNSIDE = "downside"
    UNKNOWN = "unknown"


class HistoricalTrend(StrEnum):
    """Trend read from a historical price series."""

    UPTREND = "uptrend"
    DOWNTREND = "downtrend"
    SIDEWAYS = "sideways"


# ── Portfolio outputs ─────────────────────────────────────────────────────────


class ConcentrationLevel(StrEnum):
    """Single-position concentration risk for a whole portfolio."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class PortfolioAction(StrEnum):
    """Action vocabulary shared by the portfolio engine and the synthesizer."""

    BUY = "buy"
    HOLD = "hold"
    TRIM = "trim"
    SELL = "sell"


# ── Synthesizer outputs ───────────────────────────────────────────────────────


class Timeframe(StrEnum):
    """Recommendation timeframe derived from the investment horizon."""

    SHORT_TERM = "short_term"
    MEDIUM_TERM = "medium_term"
    LONG_TERM = "long_term"


HORIZON_TIMEFRAMES: dict[InvestmentHorizon, Timeframe] = {
    InvestmentHorizon.SHORT:  Timeframe.SHORT_TERM,
    InvestmentHorizon.MEDIUM: Timeframe.MEDIUM_TERM,
    InvestmentHorizon.LONG:   Timeframe.LONG_TERM,
}


class ConfidenceTier(StrEnum):
    """Confidence band used in headlines and rationale."""

    HIGH = "high"
    MODERATE = "moderate"
    LOWER = "lower"


CONFIDENCE_TIER_LABELS: dict[ConfidenceTier, str] = {
    ConfidenceTier.HIGH:     "High Confidence",
    ConfidenceTier.MODERATE: "Moderate Conviction",
    ConfidenceTier.LOWER:    "Lower Confidence",
}
