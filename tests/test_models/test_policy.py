"""
Tests for aurora_invest/policy.py threshold models.

What we test
------------
1. Defaults match the documented cut-points.
2. Ordering validators reject inverted thresholds.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from aurora_invest.policy import (
    DEFAULT_SYNTHESIZER_POLICY,
    ConcentrationThresholds,
    ConfidenceThresholds,
    RiskThresholds,
    TechnicalThresholds,
    ValuationThresholds,
)


class TestDefaults:
    def test_concentration_defaults(self):
        t = ConcentrationThresholds()
        assert (t.moderate_pct, t.high_pct, t.emergency_pct) == (20.0, 25.0, 40.0)

    def test_synthesizer_defaults(self):
        p = DEFAULT_SYNTHESIZER_POLICY
        assert p.confidence.high == 65
        assert p.confidence.low == 40
        assert p.risk.moderate == 4
        assert p.risk.high == 7


class TestOrdering:
    def test_concentration_must_be_increasing(self):
        with pytest.raises(ValidationError, match="moderate_pct < high_pct < emergency_pct"):
            ConcentrationThresholds(moderate_pct=30.0, high_pct=25.0, emergency_pct=40.0)

    def test_confidence_low_below_high(self):
        with pytest.raises(ValidationError, match="0 <= low < high <= 100"):
            ConfidenceThresholds(high=40, low=60)

    def test_risk_moderate_below_high(self):
        with pytest.raises(ValidationError):
            RiskThresholds(moderate=8, high=7)

    def test_valuation_cheap_peg_below_rich_peg(self):
        with pytest.raises(ValidationError, match="cheap_peg"):
            ValuationThresholds(cheap_peg=3.0, rich_peg=2.5)

    def test_valuation_growth_floor_positive(self):
        with pytest.raises(ValidationError, match="peg_growth_floor_pct"):
            ValuationThresholds(peg_growth_floor_pct=0.0)

    def test_rsi_bounds_ordered(self):
        with pytest.raises(ValidationError, match="rsi_oversold"):
            TechnicalThresholds(rsi_oversold=75.0, rsi_overbought=70.0)
