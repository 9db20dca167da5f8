"""
Tests for aurora_invest/models/portfolio.py and recommendation.py.

What we test
------------
1. PortfolioHolding: ticker normalization, non-negative shares / cost basis.
2. Portfolio is mutable; find_holding is case-insensitive.
3. ConcentrationRisk caps largest_positions at three.
4. PortfolioContext rejects a negative weight; HoldingScenarioSnapshot
   normalizes its ticker and rejects a blank one.
5. ActiveManagerRecommendation structural bounds: 3-6 rationale bullets,
   at most three risk flags, confidence 0-100, non-blank ticker / headline.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from aurora_invest.analysis.scenarios import generate_scenarios
from aurora_invest.models.portfolio import (
    ConcentrationRisk,
    HoldingScenarioSnapshot,
    Portfolio,
    PortfolioContext,
    PortfolioHolding,
    PositionWeight,
)
from aurora_invest.models.recommendation import ActiveManagerRecommendation
from aurora_invest.models.stock import StockData
from aurora_invest.taxonomy.classifications import (
    ConcentrationLevel,
    PortfolioAction,
    Timeframe,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _holding(ticker: str = "aapl", shares: float = 10, cost: float = 150.0) -> PortfolioHolding:
    return PortfolioHolding(
        ticker=ticker, shares=shares, average_cost_basis=cost, purchase_date=date(2023, 1, 5)
    )


def _rec(**overrides) -> ActiveManagerRecommendation:
    fields = dict(
        ticker="AAPL",
        primary_action=PortfolioAction.BUY,
        confidence_score=70,
        timeframe=Timeframe.MEDIUM_TERM,
        headline="Buy AAPL - High Confidence",
        rationale=["a", "b", "c"],
        risk_flags=[],
    )
    fields.update(overrides)
    return ActiveManagerRecommendation(**fields)


# ── Holdings / portfolio ──────────────────────────────────────────────────────

class TestPortfolioHolding:
    def test_ticker_upper_cased(self):
        assert _holding(" msft ").ticker == "MSFT"

    def test_blank_ticker_rejected(self):
        with pytest.raises(ValidationError, match="ticker must not be blank"):
            _holding("  ")

    def test_negative_shares_rejected(self):
        with pytest.raises(ValidationError):
            _holding(shares=-1)

    def test_negative_cost_rejected(self):
        with pytest.raises(ValidationError):
            _holding(cost=-0.01)


class TestPortfolio:
    def _portfolio(self) -> Portfolio:
        stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
        return Portfolio(
            id="p", name="Core", holdings=[_holding("AAPL"), _holding("MSFT")],
            created_at=stamp, updated_at=stamp,
        )

    def test_find_holding_case_insensitive(self):
        p = self._portfolio()
        found = p.find_holding(" msft")
        assert found is not None
        assert found.ticker == "MSFT"

    def test_find_holding_missing_returns_none(self):
        assert self._portfolio().find_holding("NVDA") is None

    def test_portfolio_is_mutable(self):
        p = self._portfolio()
        p.holdings.append(_holding("NVDA"))
        p.updated_at = datetime(2024, 2, 1, tzinfo=timezone.utc)
        assert p.find_holding("NVDA") is not None

    def test_empty_holdings_default(self):
        stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
        p = Portfolio(id="p", name="Empty", created_at=stamp, updated_at=stamp)
        assert p.holdings == []


class TestDerivedPortfolioModels:
    def test_largest_positions_capped_at_three(self):
        with pytest.raises(ValidationError):
            ConcentrationRisk(
                level=ConcentrationLevel.LOW,
                largest_positions=[PositionWeight(ticker=t, weight_pct=25.0) for t in "ABCD"],
            )

    def test_context_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            PortfolioContext(suggested_action=PortfolioAction.HOLD, current_weight_pct=-1.0)

    def test_context_defaults(self):
        ctx = PortfolioContext(suggested_action=PortfolioAction.BUY)
        assert ctx.existing_holding is None
        assert ctx.current_weight_pct == 0.0
        assert ctx.portfolio_metrics.total_value == 0.0

    def test_snapshot_ticker_normalized(self, moderate_profile):
        snap = HoldingScenarioSnapshot(
            ticker=" aapl ",
            shares=1,
            current_price=100.0,
            scenarios=generate_scenarios(moderate_profile, StockData(ticker="AAPL")),
        )
        assert snap.ticker == "AAPL"

    def test_snapshot_blank_ticker_rejected(self, moderate_profile):
        with pytest.raises(ValidationError, match="ticker must not be blank"):
            HoldingScenarioSnapshot(
                ticker="  ",
                shares=1,
                current_price=100.0,
                scenarios=generate_scenarios(moderate_profile, StockData(ticker="AAPL")),
            )


# ── Recommendation ────────────────────────────────────────────────────────────

class TestActiveManagerRecommendation:
    def test_valid_recommendation(self):
        rec = _rec()
        assert rec.notes is None
        assert rec.primary_action == "buy"

    def test_two_rationale_bullets_rejected(self):
        with pytest.raises(ValidationError):
            _rec(rationale=["a", "b"])

    def test_seven_rationale_bullets_rejected(self):
        with pytest.raises(ValidationError):
            _rec(rationale=list("abcdefg"))

    def test_four_risk_flags_rejected(self):
        with pytest.raises(ValidationError):
            _rec(risk_flags=list("abcd"))

    @pytest.mark.parametrize("score", [-1, 101])
    def test_confidence_bounds(self, score):
        with pytest.raises(ValidationError):
            _rec(confidence_score=score)

    def test_blank_headline_rejected(self):
        with pytest.raises(ValidationError, match="must not be blank"):
            _rec(headline="   ")

    def test_frozen(self):
        rec = _rec()
        with pytest.raises(ValidationError):
            rec.confidence_score = 10  # type: ignore[misc]
