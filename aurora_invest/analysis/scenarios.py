"""
Illustrative bull / base / bear scenarios.

Probabilities are fixed at 25 / 50 / 25. Return ranges come from one of three
preset triples keyed by risk tolerance (wider for higher tolerance):

    tolerance   bull        base       bear
    low         6..12       -4..5      -12..-3
    moderate    8..15       -6..7      -15..-5
    high        10..18      -8..9      -20..-7

Point estimate = sum(probability * band midpoint), rounded to 0.1.
These are framing devices, not forecasts.
"""

from __future__ import annotations

from aurora_invest.models.analysis import ScenarioBand, ScenarioSummary
from aurora_invest.models.profile import UserProfile
from aurora_invest.models.stock import StockData
from aurora_invest.taxonomy.classifications import RiskTolerance

BULL_PROBABILITY = 25
BASE_PROBABILITY = 50
BEAR_PROBABILITY = 25

# tolerance → (bull, base, bear) return ranges in percent
SCENARIO_RANGES: dict[RiskTolerance, tuple[tuple[float, float], ...]] = {
    RiskTolerance.LOW:      ((6.0, 12.0),  (-4.0, 5.0), (-12.0, -3.0)),
    RiskTolerance.MODERATE: ((8.0, 15.0),  (-6.0, 7.0), (-15.0, -5.0)),
    RiskTolerance.HIGH:     ((10.0, 18.0), (-8.0, 9.0), (-20.0, -7.0)),
}

UNCERTAINTY_COMMENT = (
    "These scenarios are illustrative only and do not constitute predictions. "
    "Actual results may vary significantly."
)


def generate_scenarios(
    profile: UserProfile,
    stock: StockData,
    horizon_months: int = 3,
) -> ScenarioSummary:
    """Build the three scenario bands for ``profile``'s risk tolerance.

    ``stock`` does not move the bands today; it is accepted so stock-specific
    widening can be added without changing callers.
    """
    bull_range, base_range, bear_range = SCENARIO_RANGES[profile.risk_tolerance]

    bull = ScenarioBand(
        expected_return_pct_range=bull_range,
        probability_pct=BULL_PROBABILITY,
        description="Positive catalysts materialize, market sentiment improves",
    )
    base = ScenarioBand(
        expected_return_pct_range=base_range,
        probability_pct=BASE_PROBABILITY,
        description="Current trends continue, no major surprises",
    )
    bear = ScenarioBand(
        expected_return_pct_range=bear_range,
        probability_pct=BEAR_PROBABILITY,
        description="Negative developments or broader market weakness",
    )

    point_estimate = sum(
        band.midpoint * band.probability_pct / 100.0 for band in (bull, base, bear)
    )

    return ScenarioSummary(
        horizon_months=horizon_months,
        bull=bull,
        base=base,
        bear=bear,
        point_estimate_return_pct=round(point_estimate, 1),
        uncertainty_comment=UNCERTAINTY_COMMENT,
    )
