"""
Tests for aurora_invest/analysis/valuation.py.

What we test
------------
1. resolve_pe / select_growth fallbacks.
2. calculate_peg: growth floor, missing inputs, non-positive P/E.
3. classify_valuation: cheap needs both conditions, rich needs either.
4. evaluate_peg buckets.
5. build_valuation_insight: rounding, commentary details, absent block.
"""

from __future__ import annotations

import pytest

from aurora_invest.analysis.valuation import (
    NO_VALUATION_NOTE,
    build_valuation_insight,
    calculate_peg,
    classify_valuation,
    evaluate_peg,
    resolve_pe,
    select_growth,
)
from aurora_invest.models.stock import StockData, StockFundamentals
from aurora_invest.policy import ValuationThresholds
from aurora_invest.taxonomy.classifications import PegBucket, ValuationClass


def _f(**kwargs) -> StockFundamentals:
    return StockFundamentals(**kwargs)


def _stock(**kwargs) -> StockData:
    return StockData(ticker="VAL", fundamentals=_f(**kwargs))


# ── Inputs ────────────────────────────────────────────────────────────────────

class TestInputs:
    def test_forward_pe_preferred(self):
        assert resolve_pe(_f(forward_pe=18.0, trailing_pe=25.0)) == pytest.approx(18.0)

    def test_trailing_pe_fallback(self):
        assert resolve_pe(_f(trailing_pe=25.0)) == pytest.approx(25.0)

    def test_no_pe(self):
        assert resolve_pe(_f()) is None

    def test_eps_growth_preferred(self):
        assert select_growth(_f(eps_growth_yoy_pct=12.0, revenue_growth_yoy_pct=8.0)) == (12.0, "eps")

    def test_revenue_growth_fallback(self):
        assert select_growth(_f(revenue_growth_yoy_pct=8.0)) == (8.0, "revenue")

    def test_no_growth(self):
        assert select_growth(_f(forward_pe=10.0)) is None


# ── PEG ───────────────────────────────────────────────────────────────────────

class TestCalculatePeg:
    def test_basic_ratio(self):
        assert calculate_peg(_f(forward_pe=28.0, eps_growth_yoy_pct=20.0)) == pytest.approx(1.4)

    def test_negative_growth_uses_floor(self):
        assert calculate_peg(_f(forward_pe=20.0, eps_growth_yoy_pct=-5.0)) == pytest.approx(20.0)

    def test_custom_floor(self):
        t = ValuationThresholds(peg_growth_floor_pct=4.0)
        assert calculate_peg(_f(forward_pe=20.0, eps_growth_yoy_pct=0.5), t) == pytest.approx(5.0)

    def test_missing_growth(self):
        assert calculate_peg(_f(forward_pe=20.0)) is None

    def test_missing_pe(self):
        assert calculate_peg(_f(eps_growth_yoy_pct=10.0)) is None

    def test_non_positive_pe_has_no_peg(self):
        assert calculate_peg(_f(forward_pe=-8.0, eps_growth_yoy_pct=10.0)) is None


# ── Classification ────────────────────────────────────────────────────────────

class TestClassifyValuation:
    def test_absent_block_unknown(self, bare_stock):
        assert classify_valuation(bare_stock) is ValuationClass.UNKNOWN

    def test_no_pe_unknown(self):
        assert classify_valuation(_stock(eps_growth_yoy_pct=10.0)) is ValuationClass.UNKNOWN

    def test_cheap(self):
        assert classify_valuation(_stock(forward_pe=12.0, eps_growth_yoy_pct=15.0)) is ValuationClass.CHEAP

    def test_cheap_via_trailing_pe(self):
        assert classify_valuation(_stock(trailing_pe=15.0, eps_growth_yoy_pct=20.0)) is ValuationClass.CHEAP

    def test_low_peg_but_high_pe_is_not_cheap(self):
        # PEG 0.88 but P/E 22 ≥ 20
        assert classify_valuation(_stock(forward_pe=22.0, eps_growth_yoy_pct=25.0)) is ValuationClass.FAIR

    def test_rich_by_pe_alone(self):
        assert classify_valuation(_stock(forward_pe=45.0, eps_growth_yoy_pct=30.0)) is ValuationClass.RICH

    def test_rich_by_peg_alone(self):
        assert classify_valuation(_stock(forward_pe=30.0, eps_growth_yoy_pct=10.0)) is ValuationClass.RICH

    def test_rich_when_growth_negative(self):
        assert classify_valuation(_stock(forward_pe=20.0, eps_growth_yoy_pct=-5.0)) is ValuationClass.RICH

    def test_pe_without_growth_is_fair(self):
        assert classify_valuation(_stock(forward_pe=25.0)) is ValuationClass.FAIR

    def test_negative_pe_is_fair(self):
        assert classify_valuation(_stock(forward_pe=-5.0, eps_growth_yoy_pct=10.0)) is ValuationClass.FAIR

    def test_strong_fixture_is_fair(self, strong_stock):
        assert classify_valuation(strong_stock) is ValuationClass.FAIR

    def test_weak_fixture_is_rich(self, weak_stock):
        assert classify_valuation(weak_stock) is ValuationClass.RICH


# ── PEG buckets ───────────────────────────────────────────────────────────────

class TestEvaluatePeg:
    def test_no_growth_returns_none(self):
        assert evaluate_peg(_f(forward_pe=20.0)) is None

    def test_negative_growth_distorted(self):
        a = evaluate_peg(_f(forward_pe=20.0, eps_growth_yoy_pct=-2.0))
        assert a.bucket is PegBucket.DISTORTED
        assert a.ratio is None
        assert "turned negative" in a.commentary

    def test_low_growth_distorted(self):
        a = evaluate_peg(_f(forward_pe=12.0, eps_growth_yoy_pct=3.0))
        assert a.bucket is PegBucket.DISTORTED
        assert a.ratio == pytest.approx(4.0)

    def test_discount(self):
        assert evaluate_peg(_f(forward_pe=10.0, eps_growth_yoy_pct=12.0)).bucket is PegBucket.DISCOUNT

    def test_balanced(self):
        assert evaluate_peg(_f(forward_pe=28.0, eps_growth_yoy_pct=20.0)).bucket is PegBucket.BALANCED

    def test_demanding(self):
        a = evaluate_peg(_f(forward_pe=40.0, eps_growth_yoy_pct=10.0))
        assert a.bucket is PegBucket.DEMANDING
        assert "stretched" in a.commentary

    def test_revenue_source_recorded(self):
        a = evaluate_peg(_f(forward_pe=20.0, revenue_growth_yoy_pct=10.0))
        assert a.growth_source == "revenue"


# ── Insight ───────────────────────────────────────────────────────────────────

class TestValuationInsight:
    def test_absent_block(self, bare_stock):
        insight = build_valuation_insight(bare_stock)
        assert insight.classification is ValuationClass.UNKNOWN
        assert insight.commentary == NO_VALUATION_NOTE
        assert insight.peg_ratio is None

    def test_strong_fixture_figures(self, strong_stock):
        insight = build_valuation_insight(strong_stock)
        assert insight.classification is ValuationClass.FAIR
        assert insight.peg_ratio == pytest.approx(1.4)
        assert insight.peg_bucket is PegBucket.BALANCED
        assert insight.earnings_yield_pct == pytest.approx(3.57)
        assert insight.free_cash_flow_yield_pct == pytest.approx(3.5)
        assert "PEG 1.40" in insight.commentary

    def test_commentary_starts_with_class_text(self):
        insight = build_valuation_insight(_stock(forward_pe=12.0, eps_growth_yoy_pct=15.0))
        assert insight.classification is ValuationClass.CHEAP
        assert insight.commentary.startswith("Multiples screen at a discount")

    def test_expensive_multiple_caution(self):
        insight = build_valuation_insight(_stock(forward_pe=50.0, eps_growth_yoy_pct=10.0))
        assert "Earnings multiples above 35x embed perfection" in insight.cautionary_notes

    def test_lists_capped_and_unique(self):
        insight = build_valuation_insight(_stock(
            forward_pe=8.0, eps_growth_yoy_pct=25.0, free_cash_flow_yield_pct=7.0, dividend_yield_pct=4.0,
        ))
        assert len(insight.drivers) <= 3
        assert len(insight.drivers) == len(set(insight.drivers))
