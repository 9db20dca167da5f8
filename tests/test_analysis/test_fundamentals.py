"""
Tests for aurora_invest/analysis/fundamentals.py.

What we test
------------
1. classify_fundamentals: strong needs all four signals, weak needs both,
   absent block → unknown, sparse block → ok.
2. Thresholds are honoured when overridden.
3. calculate_fundamentals_quality_score: weighted 0-100, 0 when absent.
4. build_fundamentals_insight: drivers / cautions capped at three.
"""

from __future__ import annotations

import pytest

from aurora_invest.analysis.fundamentals import (
    NO_FUNDAMENTALS_NOTE,
    build_fundamentals_insight,
    calculate_fundamentals_quality_score,
    classify_fundamentals,
)
from aurora_invest.models.stock import StockData, StockFundamentals
from aurora_invest.policy import FundamentalsThresholds
from aurora_invest.taxonomy.classifications import FundamentalsClass


def _stock(**fundamentals) -> StockData:
    return StockData(ticker="TEST", fundamentals=StockFundamentals(**fundamentals))


_STRONG = dict(eps_growth_yoy_pct=16.0, net_margin_pct=21.0, free_cash_flow_yield_pct=3.1, roe=21.0)


class TestClassifyFundamentals:
    def test_strong_fixture(self, strong_stock):
        assert classify_fundamentals(strong_stock) is FundamentalsClass.STRONG

    def test_weak_fixture(self, weak_stock):
        assert classify_fundamentals(weak_stock) is FundamentalsClass.WEAK

    def test_absent_block_is_unknown(self, bare_stock):
        assert classify_fundamentals(bare_stock) is FundamentalsClass.UNKNOWN

    def test_strong_just_above_all_thresholds(self):
        assert classify_fundamentals(_stock(**_STRONG)) is FundamentalsClass.STRONG

    @pytest.mark.parametrize("field", sorted(_STRONG))
    def test_strong_requires_every_signal(self, field):
        values = dict(_STRONG)
        values[field] = None
        assert classify_fundamentals(_stock(**values)) is FundamentalsClass.OK

    def test_strong_thresholds_are_strict(self):
        values = dict(_STRONG, eps_growth_yoy_pct=15.0)
        assert classify_fundamentals(_stock(**values)) is FundamentalsClass.OK

    def test_weak_needs_both_conditions(self):
        assert classify_fundamentals(_stock(eps_growth_yoy_pct=2.0, net_margin_pct=12.0)) is FundamentalsClass.OK
        assert classify_fundamentals(_stock(eps_growth_yoy_pct=2.0, net_margin_pct=9.0)) is FundamentalsClass.WEAK

    def test_empty_block_is_ok_not_unknown(self):
        assert classify_fundamentals(_stock()) is FundamentalsClass.OK

    def test_custom_thresholds(self):
        lenient = FundamentalsThresholds(
            strong_eps_growth_pct=10.0,
            strong_net_margin_pct=10.0,
            strong_fcf_yield_pct=1.0,
            strong_roe_pct=10.0,
        )
        stock = _stock(eps_growth_yoy_pct=12.0, net_margin_pct=12.0, free_cash_flow_yield_pct=2.0, roe=12.0)
        assert classify_fundamentals(stock) is FundamentalsClass.OK
        assert classify_fundamentals(stock, lenient) is FundamentalsClass.STRONG


class TestQualityScore:
    def test_absent_block_scores_zero(self, bare_stock):
        assert calculate_fundamentals_quality_score(bare_stock) == 0

    def test_strong_fixture_score(self, strong_stock):
        # 0.25 + 0.20 + 0.20*(3.0/4.5) + 0.15 + 0.10 + 0.10 → 93
        assert calculate_fundamentals_quality_score(strong_stock) == 93

    def test_everything_at_strong_anchor_scores_100(self):
        stock = _stock(
            eps_growth_yoy_pct=25.0,
            net_margin_pct=30.0,
            free_cash_flow_yield_pct=6.0,
            roe=30.0,
            revenue_growth_yoy_pct=20.0,
            debt_to_equity=0.5,
        )
        assert calculate_fundamentals_quality_score(stock) == 100

    def test_heavy_leverage_contributes_nothing(self):
        assert calculate_fundamentals_quality_score(_stock(debt_to_equity=4.0)) == 0
        assert calculate_fundamentals_quality_score(_stock(debt_to_equity=0.5)) == 10

    def test_score_in_bounds(self, weak_stock):
        assert 0 <= calculate_fundamentals_quality_score(weak_stock) <= 100


class TestFundamentalsInsight:
    def test_absent_block(self, bare_stock):
        insight = build_fundamentals_insight(bare_stock)
        assert insight.classification is FundamentalsClass.UNKNOWN
        assert insight.quality_score == 0
        assert insight.drivers == []
        assert insight.cautionary_notes == [NO_FUNDAMENTALS_NOTE]

    def test_strong_drivers(self, strong_stock):
        insight = build_fundamentals_insight(strong_stock)
        assert insight.drivers == [
            "EPS growth is running above 18%",
            "Margins exceed 22%",
            "ROE is north of 25%",
        ]
        assert insight.cautionary_notes == []

    def test_cautions_capped_at_three(self, weak_stock):
        insight = build_fundamentals_insight(weak_stock)
        assert len(insight.cautionary_notes) == 3
        assert insight.cautionary_notes[0].startswith("Leverage is elevated")

    def test_missing_values_never_produce_notes(self):
        insight = build_fundamentals_insight(_stock())
        assert insight.drivers == []
        assert insight.cautionary_notes == []
