"""
Shared pytest fixtures for the AuroraInvest test suite.

Provides:
  - ``fixed_clock``: a ``FixedClock`` pinned to 2024-06-03 14:30 UTC so
    analysis results compare equal across calls.
  - Profile fixtures for each risk tolerance.
  - Sample stock snapshots (strong / weak / sparse).
  - A two-holding sample portfolio (AAPL 10 @ 150, MSFT 5 @ 300) and prices.
  - ``make_analysis``: factory for ``AnalysisResult`` with chosen
    risk / conviction scores, used by the synthesizer tests.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable

import pytest

from aurora_invest.models.analysis import (
    AnalysisResult,
    AnalysisSummary,
    PlanningGuidance,
    ScenarioBand,
    ScenarioSummary,
)
from aurora_invest.models.portfolio import Portfolio, PortfolioHolding
from aurora_invest.models.profile import UserProfile
from aurora_invest.models.stock import (
    StockData,
    StockFundamentals,
    StockSentiment,
    StockTechnicals,
)
from aurora_invest.taxonomy.classifications import (
    AnalystConsensus,
    InvestmentHorizon,
    InvestmentObjective,
    RiskTolerance,
)
from aurora_invest.utils.time_utils import FixedClock

FIXED_INSTANT = datetime(2024, 6, 3, 14, 30, 0, tzinfo=timezone.utc)


# ── Clock ─────────────────────────────────────────────────────────────────────

@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock(FIXED_INSTANT)


# ── Profiles ──────────────────────────────────────────────────────────────────

@pytest.fixture
def moderate_profile() -> UserProfile:
    return UserProfile(
        risk_tolerance=RiskTolerance.MODERATE,
        horizon=InvestmentHorizon.MEDIUM,
        objective=InvestmentObjective.GROWTH,
    )


@pytest.fixture
def low_profile() -> UserProfile:
    return UserProfile(
        risk_tolerance=RiskTolerance.LOW,
        horizon=InvestmentHorizon.SHORT,
        objective=InvestmentObjective.INCOME,
    )


@pytest.fixture
def high_profile() -> UserProfile:
    return UserProfile(
        risk_tolerance=RiskTolerance.HIGH,
        horizon=InvestmentHorizon.LONG,
        objective=InvestmentObjective.BALANCED,
    )


# ── Stocks ────────────────────────────────────────────────────────────────────

@pytest.fixture
def strong_stock() -> StockData:
    """Strong fundamentals, bullish MA chain, buy consensus with upside target."""
    return StockData(
        ticker="msft",
        name="Microsoft Corp.",
        currency="USD",
        fundamentals=StockFundamentals(
            trailing_pe=32.0,
            forward_pe=28.0,
            dividend_yield_pct=0.8,
            revenue_growth_yoy_pct=15.0,
            eps_growth_yoy_pct=20.0,
            net_margin_pct=35.0,
            free_cash_flow_yield_pct=3.5,
            debt_to_equity=0.4,
            roe=38.0,
        ),
        technicals=StockTechnicals(
            price=400.0,
            price_52w_high=420.0,
            price_52w_low=300.0,
            sma20=395.0,
            sma50=380.0,
            sma200=350.0,
            rsi14=62.0,
            volume=20_000_000,
            avg_volume=22_000_000,
        ),
        sentiment=StockSentiment(
            analyst_consensus=AnalystConsensus.BUY,
            analyst_target_mean=470.0,
            analyst_target_high=520.0,
            analyst_target_low=380.0,
            news_themes=["Cloud growth", "AI investment", "Buybacks", "Antitrust"],
        ),
    )


@pytest.fixture
def weak_stock() -> StockData:
    """Weak fundamentals, bearish MA chain, sell consensus."""
    return StockData(
        ticker="WEAK",
        name="Weak Co.",
        fundamentals=StockFundamentals(
            forward_pe=45.0,
            eps_growth_yoy_pct=-3.0,
            net_margin_pct=4.0,
            free_cash_flow_yield_pct=0.2,
            debt_to_equity=3.1,
            roe=5.0,
        ),
        technicals=StockTechnicals(
            price=20.0,
            price_52w_high=40.0,
            price_52w_low=19.0,
            sma50=24.0,
            sma200=30.0,
            rsi14=25.0,
        ),
        sentiment=StockSentiment(
            analyst_consensus=AnalystConsensus.SELL,
            analyst_target_mean=15.0,
        ),
    )


@pytest.fixture
def bare_stock() -> StockData:
    """Ticker only: every sub-block missing."""
    return StockData(ticker="BARE")


# ── Portfolio ─────────────────────────────────────────────────────────────────

def make_portfolio(*holdings: tuple[str, float, float]) -> Portfolio:
    """Build a portfolio from ``(ticker, shares, cost_basis)`` tuples."""
    stamp = datetime(2024, 1, 2, tzinfo=timezone.utc)
    return Portfolio(
        id="pf-1",
        name="Core",
        holdings=[
            PortfolioHolding(
                ticker=ticker,
                shares=shares,
                average_cost_basis=cost,
                purchase_date=date(2023, 3, 1),
            )
            for ticker, shares, cost in holdings
        ],
        created_at=stamp,
        updated_at=stamp,
    )


@pytest.fixture
def sample_portfolio() -> Portfolio:
    return make_portfolio(("AAPL", 10, 150.0), ("MSFT", 5, 300.0))


@pytest.fixture
def sample_prices() -> dict[str, float]:
    return {"AAPL": 180.0, "MSFT": 350.0}


# ── Analysis factory ──────────────────────────────────────────────────────────

def _band(low: float, high: float, prob: int) -> ScenarioBand:
    return ScenarioBand(expected_return_pct_range=(low, high), probability_pct=prob, description="-")


def build_analysis(
    ticker: str = "AAPL",
    risk_score: int = 5,
    conviction: int = 75,
) -> AnalysisResult:
    return AnalysisResult(
        ticker=ticker,
        summary=AnalysisSummary(
            headline_view="Sample headline.",
            risk_score=risk_score,
            conviction_score_3m=conviction,
            key_takeaways=["Fundamentals: ok"],
        ),
        fundamentals_view="-",
        valuation_view="-",
        technical_view="-",
        sentiment_view="-",
        scenarios=ScenarioSummary(
            horizon_months=3,
            bull=_band(8, 15, 25),
            base=_band(-6, 7, 50),
            bear=_band(-15, -5, 25),
            point_estimate_return_pct=0.8,
            uncertainty_comment="Illustrative only.",
        ),
        planning_guidance=PlanningGuidance(
            position_sizing=["-"], timing=["-"], risk_notes=["-"], language_notes="-",
        ),
        disclaimer="Educational only.",
        generated_at=FIXED_INSTANT,
    )


@pytest.fixture
def make_analysis() -> Callable[..., AnalysisResult]:
    return build_analysis
