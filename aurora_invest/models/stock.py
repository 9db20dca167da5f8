"""
Normalized market snapshot for a single stock.

``StockData`` is supplied by the market-data collaborator already shaped and
validated; the core never fetches anything. Every sub-field is optional:
a missing ratio degrades the relevant classification to a conservative
default instead of failing the whole analysis.

``StockData.history`` carries an optional price series summarised by the
history helpers (returns, volatility, trend).
"""

from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from aurora_invest.taxonomy.classifications import AnalystConsensus

HistoricalPeriod = Literal["1M", "3M", "6M", "1Y", "5Y"]


class StockFundamentals(BaseModel):
    """Fundamental ratios. Percentages are expressed as numbers (``18.5`` = 18.5%)."""

    model_config = ConfigDict(frozen=True)

    trailing_pe: Optional[float] = None
    forward_pe: Optional[float] = None
    dividend_yield_pct: Optional[float] = None
    revenue_growth_yoy_pct: Optional[float] = None
    eps_growth_yoy_pct: Optional[float] = None
    net_margin_pct: Optional[float] = None
    free_cash_flow_yield_pct: Optional[float] = None
    debt_to_equity: Optional[float] = None
    roe: Optional[float] = None


class StockTechnicals(BaseModel):
    """Price, ranges, moving averages, RSI and volume."""

    model_config = ConfigDict(frozen=True)

    price: float = Field(ge=0)
    price_52w_high: Optional[float] = None
    price_52w_low: Optional[float] = None
    sma20: Optional[float] = None
    sma50: Optional[float] = None
    sma200: Optional[float] = None
    rsi14: Optional[float] = None
    volume: Optional[float] = None
    avg_volume: Optional[float] = None


class StockSentiment(BaseModel):
    """Analyst consensus, price targets and recent news themes."""

    model_config = ConfigDict(frozen=True)

    analyst_consensus: Optional[AnalystConsensus] = None
    analyst_target_mean: Optional[float] = None
    analyst_target_high: Optional[float] = None
    analyst_target_low: Optional[float] = None
    news_themes: list[str] = []


class HistoricalDataPoint(BaseModel):
    """One dated closing price."""

    model_config = ConfigDict(frozen=True)

    as_of: date
    price: float


class HistoricalData(BaseModel):
    """Price series over a named lookback period."""

    model_config = ConfigDict(frozen=True)

    period: HistoricalPeriod = "6M"
    data_points: list[HistoricalDataPoint] = []


class StockData(BaseModel):
    """Immutable per-call snapshot of one stock.

    Attributes:
        ticker: Exchange symbol; stripped and upper-cased on construction.
        name: Display name, if known.
        currency: ISO currency code of the price fields, if known.
        fundamentals: Ratio block, or ``None`` when the provider had none.
        technicals: Price/indicator block, or ``None``.
        sentiment: Analyst/news block, or ``None``.
        history: Closing-price series for the return, volatility and trend
            summary, or ``None``.
    """

    model_config = ConfigDict(frozen=True)

    ticker: str
    name: Optional[str] = None
    currency: Optional[str] = None
    fundamentals: Optional[StockFundamentals] = None
    technicals: Optional[StockTechnicals] = None
    sentiment: Optional[StockSentiment] = None
    history: Optional[HistoricalData] = None

    @field_validator("ticker")
    @classmethod
    def normalize_ticker(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("ticker must not be blank.")
        return v
