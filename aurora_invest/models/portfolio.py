"""
Portfolio input and derived models.

``Portfolio`` is the **only** model in the package that is NOT frozen: lots
are added and removed over its lifetime by the persistence collaborator.
The core reads it and never writes back.

Everything derived from a portfolio (``PortfolioAllocation``,
``PortfolioMetrics``, ``ConcentrationRisk``, ``PortfolioContext``) is
recomputed from the current holdings and prices on every call and is never
cached, so a stale figure is never presented as current.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from aurora_invest.models.analysis import ScenarioSummary
from aurora_invest.taxonomy.classifications import ConcentrationLevel, PortfolioAction


class PortfolioHolding(BaseModel):
    """One position lot.

    Attributes:
        ticker: Exchange symbol; upper-cased on construction.
        shares: Number of shares held (non-negative).
        average_cost_basis: Average price paid per share.
        purchase_date: Date of (first) purchase.
    """

    model_config = ConfigDict(frozen=True)

    ticker: str
    shares: float = Field(ge=0)
    average_cost_basis: float = Field(ge=0)
    purchase_date: date

    @field_validator("ticker")
    @classmethod
    def normalize_ticker(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("ticker must not be blank.")
        return v


class Portfolio(BaseModel):
    """Named, ordered list of holdings.

    Mutable by design: ``holdings`` and ``updated_at`` change as lots are
    added or removed.
    """

    model_config = ConfigDict(frozen=False)

    id: str
    name: str
    holdings: list[PortfolioHolding] = []
    created_at: datetime
    updated_at: datetime

    def find_holding(self, ticker: str) -> Optional[PortfolioHolding]:
        """Return the first holding for ``ticker`` (case-insensitive), or ``None``."""
        wanted = (ticker or "").strip().upper()
        for holding in self.holdings:
            if holding.ticker == wanted:
                return holding
        return None


class PortfolioAllocation(BaseModel):
    """Value and weight of one holding at current prices.

    ``priced`` is ``False`` when no usable price was supplied; the holding is
    then valued at zero but still listed.
    """

    model_config = ConfigDict(frozen=True)

    ticker: str
    value: float
    weight_pct: float
    gain_loss: float
    gain_loss_pct: float
    priced: bool = True


class PortfolioMetrics(BaseModel):
    """Aggregate value, cost, gain/loss, beta and heuristic volatility."""

    model_config = ConfigDict(frozen=True)

    total_value: float = 0.0
    total_cost: float = 0.0
    total_gain_loss: float = 0.0
    total_gain_loss_pct: float = 0.0
    beta: float = 0.0
    volatility: float = 0.0


class PositionWeight(BaseModel):
    """Ticker and weight, used for the largest-positions list."""

    model_config = ConfigDict(frozen=True)

    ticker: str
    weight_pct: float


class ConcentrationRisk(BaseModel):
    """Single-position concentration assessment for a whole portfolio."""

    model_config = ConfigDict(frozen=True)

    level: ConcentrationLevel
    warnings: list[str] = []
    largest_positions: list[PositionWeight] = Field(default_factory=list, max_length=3)


class PortfolioActionSuggestion(BaseModel):
    """Portfolio-level action for one ticker with the threshold it cites."""

    model_config = ConfigDict(frozen=True)

    action: PortfolioAction
    reasoning: list[str]


class PortfolioContext(BaseModel):
    """Per-ticker bridge between the portfolio engine and the synthesizer.

    Computed just-in-time by ``build_portfolio_context``; never persisted.
    """

    model_config = ConfigDict(frozen=True)

    existing_holding: Optional[PortfolioHolding] = None
    portfolio_metrics: PortfolioMetrics = PortfolioMetrics()
    suggested_action: PortfolioAction
    reasoning: list[str] = []
    current_weight_pct: float = Field(default=0.0, ge=0)


class StressTestEntry(BaseModel):
    """Projected values of one holding under each scenario."""

    model_config = ConfigDict(frozen=True)

    ticker: str
    current_value: float
    bull_value: float
    base_value: float
    bear_value: float


class PortfolioStressTestResult(BaseModel):
    """Portfolio value projected at each scenario's midpoint return."""

    model_config = ConfigDict(frozen=True)

    current_value: float = 0.0
    bull_value: float = 0.0
    base_value: float = 0.0
    bear_value: float = 0.0
    bull_change_pct: float = 0.0
    base_change_pct: float = 0.0
    bear_change_pct: float = 0.0
    entries: list[StressTestEntry] = []


class HoldingScenarioSnapshot(BaseModel):
    """One holding paired with the scenarios from its latest analysis."""

    model_config = ConfigDict(frozen=True)

    ticker: str
    shares: float = Field(ge=0)
    current_price: float = Field(ge=0)
    scenarios: ScenarioSummary

    @field_validator("ticker")
    @classmethod
    def normalize_ticker(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("ticker must not be blank.")
        return v
