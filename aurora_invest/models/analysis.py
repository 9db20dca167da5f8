"""
Analysis Engine output models.

``AnalysisResult`` is the single immutable value produced by one
``analyze_stock`` call. It bundles:

  - ``AnalysisSummary``     headline, risk score (1-10), 3-month conviction (0-100)
  - four textual views      fundamentals / valuation / technical / sentiment
  - ``ScenarioSummary``     bull / base / bear bands, probabilities summing to 100
  - ``PlanningGuidance``    canned, profile-keyed educational guidance
  - structured insights     the classifications behind the textual views
  - price history         returns / volatility / trend, when prices were supplied

All models are frozen. ``generated_at`` is stamped from an injected clock.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from aurora_invest.taxonomy.classifications import (
    FundamentalsClass,
    HistoricalTrend,
    Momentum,
    PegBucket,
    PricePosition,
    TargetOutlook,
    Trend,
    ValuationClass,
)


class ScenarioBand(BaseModel):
    """One illustrative outcome band.

    Attributes:
        expected_return_pct_range: ``(low, high)`` return in percent.
        probability_pct: Weight of this band; the three bands sum to 100.
        description: Plain-language narrative of the band.
    """

    model_config = ConfigDict(frozen=True)

    expected_return_pct_range: tuple[float, float]
    probability_pct: int = Field(ge=0, le=100)
    description: str

    @field_validator("expected_return_pct_range")
    @classmethod
    def validate_range_order(cls, v: tuple[float, float]) -> tuple[float, float]:
        if v[0] > v[1]:
            raise ValueError(f"Return range low ({v[0]}) must be <= high ({v[1]}).")
        return v

    @property
    def midpoint(self) -> float:
        low, high = self.expected_return_pct_range
        return (low + high) / 2


class ScenarioSummary(BaseModel):
    """Bull / base / bear bands plus a probability-weighted point estimate."""

    model_config = ConfigDict(frozen=True)

    horizon_months: int = Field(ge=1)
    bull: ScenarioBand
    base: ScenarioBand
    bear: ScenarioBand
    point_estimate_return_pct: float
    uncertainty_comment: str

    @model_validator(mode="after")
    def validate_probabilities(self) -> "ScenarioSummary":
        total = self.bull.probability_pct + self.base.probability_pct + self.bear.probability_pct
        if total != 100:
            raise ValueError(f"Scenario probabilities must sum to 100, got {total}.")
        return self


class PlanningGuidance(BaseModel):
    """Framework-language guidance; never personalized advice."""

    model_config = ConfigDict(frozen=True)

    position_sizing: list[str]
    timing: list[str]
    risk_notes: list[str]
    language_notes: str


class FundamentalsInsight(BaseModel):
    """Fundamentals classification with a weighted quality score and drivers."""

    model_config = ConfigDict(frozen=True)

    classification: FundamentalsClass
    quality_score: int = Field(ge=0, le=100)
    drivers: list[str] = []
    cautionary_notes: list[str] = []


class ValuationInsight(BaseModel):
    """Valuation classification with the multiples behind it."""

    model_config = ConfigDict(frozen=True)

    classification: ValuationClass
    commentary: str
    peg_ratio: Optional[float] = None
    peg_bucket: Optional[PegBucket] = None
    earnings_yield_pct: Optional[float] = None
    free_cash_flow_yield_pct: Optional[float] = None
    dividend_yield_pct: Optional[float] = None
    drivers: list[str] = []
    cautionary_notes: list[str] = []


class TechnicalSignals(BaseModel):
    """Trend, momentum and 52-week positioning."""

    model_config = ConfigDict(frozen=True)

    trend: Trend
    momentum: Momentum
    price_position: PricePosition
    range_percentile: Optional[float] = None


class HistoricalPerformance(BaseModel):
    """Return, volatility and trend over the supplied price series.

    Attributes:
        period: Lookback label of the series (``"1M"`` .. ``"5Y"``).
        period_return_pct: Simple return from first to last close.
        annualized_return_pct: ``period_return_pct`` compounded to one year.
        volatility_pct: Annualised volatility of daily returns.
        trend: Uptrend / downtrend / sideways.
        data_points: Usable closes the figures were computed from.
    """

    model_config = ConfigDict(frozen=True)

    period: str
    period_return_pct: float
    annualized_return_pct: float
    volatility_pct: float = Field(ge=0)
    trend: HistoricalTrend
    data_points: int = Field(ge=0)


class SentimentSignals(BaseModel):
    """Consensus text, target-implied move and highlighted news themes."""

    model_config = ConfigDict(frozen=True)

    consensus_text: str
    target_outlook: TargetOutlook
    implied_return_pct: Optional[float] = None
    news_highlights: list[str] = []


class AnalysisSummary(BaseModel):
    """Headline numbers for one analysis."""

    model_config = ConfigDict(frozen=True)

    headline_view: str
    risk_score: int = Field(ge=1, le=10)
    conviction_score_3m: int = Field(ge=0, le=100)
    key_takeaways: list[str]


class AnalysisResult(BaseModel):
    """Complete, immutable output of one ``analyze_stock`` call.

    ``ticker`` is not re-validated here: the synthesizer treats a blank
    ticker as "no identified instrument" and declines to recommend.
    """

    model_config = ConfigDict(frozen=True)

    ticker: str
    name: Optional[str] = None
    summary: AnalysisSummary
    fundamentals_view: str
    valuation_view: str
    technical_view: str
    sentiment_view: str
    scenarios: ScenarioSummary
    planning_guidance: PlanningGuidance
    fundamentals_insight: Optional[FundamentalsInsight] = None
    valuation_insight: Optional[ValuationInsight] = None
    technical_signals: Optional[TechnicalSignals] = None
    sentiment_signals: Optional[SentimentSignals] = None
    historical_performance: Optional[HistoricalPerformance] = None
    disclaimer: str
    generated_at: datetime
