"""
Analysis Engine orchestrator: ``analyze_stock(profile, stock, options)``.

Pipeline
--------
    1. Guard: ``profile`` and ``stock`` are required (the only hard failure).
    2. Fundamentals + valuation insights.
    3. Technical + sentiment signals, plus price-history performance
       when ``stock.history`` is supplied.
    4. Scenarios for the requested horizon.
    5. Planning guidance for the profile.
    6. Summary (risk score, conviction, key takeaways).
    7. Textual views, disclaimer and a clock-stamped ``generated_at``.

Summary scoring
---------------
    risk_score  (1-10)
        start   5   (low tolerance: 3, high tolerance: 7)
        rich    +2
        cheap   -1
        D/E > 2.5  +1

    conviction_score_3m  (0-100)
        start   50
        strong fundamentals AND bullish trend  → 60
        weak fundamentals  OR  bearish trend   → 40
        bullish consensus AND upside target    +5
        bearish consensus OR  downside target  -5
"""

from __future__ import annotations

import logging
from typing import Optional

from aurora_invest.analysis.fundamentals import build_fundamentals_insight
from aurora_invest.analysis.guidance import generate_planning_guidance
from aurora_invest.analysis.history import summarize_history
from aurora_invest.analysis.scenarios import generate_scenarios
from aurora_invest.analysis.sentiment import analyze_sentiment, describe_target_outlook
from aurora_invest.analysis.technicals import analyze_technicals
from aurora_invest.analysis.valuation import build_valuation_insight
from aurora_invest.analysis.views import (
    compose_fundamentals_view,
    compose_sentiment_view,
    compose_technical_view,
    compose_valuation_view,
)
from aurora_invest.models.analysis import (
    AnalysisResult,
    AnalysisSummary,
    FundamentalsInsight,
    SentimentSignals,
    TechnicalSignals,
    ValuationInsight,
)
from aurora_invest.models.profile import AnalysisOptions, UserProfile
from aurora_invest.models.stock import StockData
from aurora_invest.policy import (
    FundamentalsThresholds,
    SentimentThresholds,
    TechnicalThresholds,
    ValuationThresholds,
)
from aurora_invest.taxonomy.classifications import (
    BEARISH_CONSENSUS,
    BULLISH_CONSENSUS,
    FundamentalsClass,
    RiskTolerance,
    TargetOutlook,
    Trend,
    ValuationClass,
)
from aurora_invest.utils.logging import log_context
from aurora_invest.utils.time_utils import Clock, SystemClock

logger = logging.getLogger(__name__)

DISCLAIMER = (
    "This analysis is educational only and does not constitute financial advice. "
    "Past performance is not a guide to future results. Consider consulting a "
    "licensed financial professional before making investment decisions."
)

_BASE_RISK: dict[RiskTolerance, int] = {
    RiskTolerance.LOW:      3,
    RiskTolerance.MODERATE: 5,
    RiskTolerance.HIGH:     7,
}
_HIGH_LEVERAGE_DE = 2.5


class AnalysisInputError(ValueError):
    """A required top-level input (profile or stock) was not supplied."""

    def __init__(self, argument: str) -> None:
        self.argument = argument
        super().__init__(f"{argument} is required for stock analysis.")


def analyze_stock(
    profile: Optional[UserProfile],
    stock: Optional[StockData],
    options: Optional[AnalysisOptions] = None,
    clock: Optional[Clock] = None,
    *,
    fundamentals_thresholds: Optional[FundamentalsThresholds] = None,
    valuation_thresholds: Optional[ValuationThresholds] = None,
    technical_thresholds: Optional[TechnicalThresholds] = None,
    sentiment_thresholds: Optional[SentimentThresholds] = None,
) -> AnalysisResult:
    """Run the full single-stock analysis.

    Args:
        profile:  Investor profile. Required.
        stock:    Market snapshot. Required.
        options:  Horizon override; defaults to ``AnalysisOptions()`` (3 months).
        clock:    Source of ``generated_at``; defaults to ``SystemClock``.
        *_thresholds: Policy overrides; module defaults when omitted.

    Returns:
        A fresh, immutable ``AnalysisResult``.

    Raises:
        AnalysisInputError: If ``profile`` or ``stock`` is ``None``.
    """
    if profile is None:
        raise AnalysisInputError("profile")
    if stock is None:
        raise AnalysisInputError("stock")

    options = options or AnalysisOptions()
    clock = clock or SystemClock()

    if stock.fundamentals is None:
        logger.info(
            "No fundamentals supplied; classifications default to unknown",
            extra=log_context(ticker=stock.ticker),
        )
    if stock.technicals is None:
        logger.info(
            "No technicals supplied; technical signals default to neutral",
            extra=log_context(ticker=stock.ticker),
        )

    fundamentals = build_fundamentals_insight(stock, fundamentals_thresholds)
    valuation = build_valuation_insight(stock, valuation_thresholds)
    technicals = analyze_technicals(stock, technical_thresholds)
    sentiment = analyze_sentiment(stock, sentiment_thresholds)
    performance = summarize_history(stock.history) if stock.history is not None else None

    summary = build_summary(profile, stock, fundamentals, valuation, technicals, sentiment)

    logger.debug(
        "Analysed: fundamentals=%s valuation=%s trend=%s",
        fundamentals.classification,
        valuation.classification,
        technicals.trend,
        extra=log_context(
            ticker=stock.ticker,
            risk_score=summary.risk_score,
            conviction=summary.conviction_score_3m,
        ),
    )

    return AnalysisResult(
        ticker=stock.ticker,
        name=stock.name,
        summary=summary,
        fundamentals_view=compose_fundamentals_view(stock, fundamentals),
        valuation_view=compose_valuation_view(stock, valuation),
        technical_view=compose_technical_view(stock, technicals, performance),
        sentiment_view=compose_sentiment_view(sentiment),
        scenarios=generate_scenarios(profile, stock, options.horizon_months),
        planning_guidance=generate_planning_guidance(profile),
        fundamentals_insight=fundamentals,
        valuation_insight=valuation,
        technical_signals=technicals,
        sentiment_signals=sentiment,
        historical_performance=performance,
        disclaimer=DISCLAIMER,
        generated_at=clock.now(),
    )


def build_summary(
    profile: UserProfile,
    stock: StockData,
    fundamentals: FundamentalsInsight,
    valuation: ValuationInsight,
    technicals: TechnicalSignals,
    sentiment: SentimentSignals,
) -> AnalysisSummary:
    """Headline, risk score, 3-month conviction and key takeaways."""
    return AnalysisSummary(
        headline_view=_headline(stock, fundamentals, valuation),
        risk_score=calculate_risk_score(profile, stock, valuation.classification),
        conviction_score_3m=calculate_conviction_score(
            stock, fundamentals.classification, technicals.trend, sentiment
        ),
        key_takeaways=_key_takeaways(fundamentals, valuation, technicals, sentiment),
    )


def calculate_risk_score(
    profile: UserProfile,
    stock: StockData,
    valuation: ValuationClass,
) -> int:
    """1-10 risk score from tolerance baseline, valuation and leverage."""
    score = _BASE_RISK[profile.risk_tolerance]
    if valuation is ValuationClass.RICH:
        score += 2
    elif valuation is ValuationClass.CHEAP:
        score -= 1

    de = stock.fundamentals.debt_to_equity if stock.fundamentals is not None else None
    if de is not None and de > _HIGH_LEVERAGE_DE:
        score += 1

    return int(_clamp(score, 1, 10))


def calculate_conviction_score(
    stock: StockData,
    fundamentals: FundamentalsClass,
    trend: Trend,
    sentiment: SentimentSignals,
) -> int:
    """0-100 conviction in a 3-month directional view."""
    score = 50
    if fundamentals is FundamentalsClass.STRONG and trend is Trend.BULLISH:
        score = 60
    if fundamentals is FundamentalsClass.WEAK or trend is Trend.BEARISH:
        score = 40

    consensus = stock.sentiment.analyst_consensus if stock.sentiment is not None else None
    if consensus in BULLISH_CONSENSUS and sentiment.target_outlook is TargetOutlook.UPSIDE:
        score += 5
    elif consensus in BEARISH_CONSENSUS or sentiment.target_outlook is TargetOutlook.DOWNSIDE:
        score -= 5

    return int(_clamp(score, 0, 100))


# ── Helpers ───────────────────────────────────────────────────────────────────


def _headline(
    stock: StockData,
    fundamentals: FundamentalsInsight,
    valuation: ValuationInsight,
) -> str:
    name = stock.name or stock.ticker
    headline = (
        f"{name} ({stock.ticker}) shows {fundamentals.classification} fundamentals "
        f"with {valuation.classification} valuation."
    )
    if valuation.classification is not ValuationClass.UNKNOWN:
        headline = f"{headline} {valuation.commentary}"
    return headline


def _key_takeaways(
    fundamentals: FundamentalsInsight,
    valuation: ValuationInsight,
    technicals: TechnicalSignals,
    sentiment: SentimentSignals,
) -> list[str]:
    takeaways = [
        f"Fundamentals: {fundamentals.classification}",
        f"Quality score: {fundamentals.quality_score}/100",
        f"Valuation: {valuation.classification}",
    ]
    if fundamentals.drivers:
        takeaways.append(f"Key driver: {fundamentals.drivers[0]}")
    if fundamentals.cautionary_notes:
        takeaways.append(f"Watch list: {fundamentals.cautionary_notes[0]}")
    if valuation.commentary:
        takeaways.append(f"Valuation context: {valuation.commentary}")
    takeaways.append(f"Technical trend: {technicals.trend}")
    takeaways.append(f"Analyst consensus: {sentiment.consensus_text}")
    if sentiment.target_outlook is not TargetOutlook.UNKNOWN:
        takeaways.append(f"Analyst targets suggest {describe_target_outlook(sentiment).lower()}")
    return takeaways


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
