"""
Profile-keyed planning guidance.

Pure lookup: position sizing by risk tolerance, timing by horizon bucket,
risk notes by objective plus two notes that always apply. Everything is
phrased as general framework language ("many investors...").
"""

from __future__ import annotations

from aurora_invest.models.analysis import PlanningGuidance
from aurora_invest.models.profile import UserProfile
from aurora_invest.taxonomy.classifications import (
    InvestmentHorizon,
    InvestmentObjective,
    RiskTolerance,
)

POSITION_SIZING: dict[RiskTolerance, list[str]] = {
    RiskTolerance.LOW: [
        "Conservative investors often limit individual stock positions to 3-5% of total portfolio.",
        "Many risk-averse investors prefer diversifying across 20+ holdings.",
    ],
    RiskTolerance.MODERATE: [
        "Moderate investors typically allocate 5-10% per position in growth stocks.",
        "Balanced portfolios often hold 12-20 positions for adequate diversification.",
    ],
    RiskTolerance.HIGH: [
        "Growth-focused investors may allocate 10-15% to high-conviction positions.",
        "Concentrated portfolios typically hold 8-12 positions with careful monitoring.",
    ],
}

_LONG_HORIZON_TIMING = [
    "Long-term investors often prioritize fundamental strength over short-term entry timing.",
    "Many long-horizon investors use systematic entry strategies over several months.",
]

TIMING: dict[InvestmentHorizon, list[str]] = {
    InvestmentHorizon.SHORT: [
        "Short-term investors often consider entry timing more carefully, "
        "watching for technical support levels.",
        "Some traders use dollar-cost averaging over 2-4 weeks to reduce timing risk.",
    ],
    InvestmentHorizon.MEDIUM: _LONG_HORIZON_TIMING,
    InvestmentHorizon.LONG: _LONG_HORIZON_TIMING,
}

OBJECTIVE_RISK_NOTES: dict[InvestmentObjective, str] = {
    InvestmentObjective.INCOME: (
        "Income-focused investors typically compare dividend yield to bond yields "
        "and consider payout sustainability."
    ),
    InvestmentObjective.GROWTH: (
        "Growth investors often accept higher volatility in exchange for potential "
        "capital appreciation."
    ),
    InvestmentObjective.BALANCED: (
        "Balanced investors often weigh income stability against growth potential "
        "when sizing a position."
    ),
}

UNIVERSAL_RISK_NOTES = [
    "All equity investments carry market risk and can lose value, especially in the short term.",
    "Single-stock positions carry company-specific risk beyond general market risk.",
]

LANGUAGE_NOTE = (
    "This guidance is educational and framework-based. "
    "It does not constitute personalized financial advice."
)


def generate_planning_guidance(profile: UserProfile) -> PlanningGuidance:
    """Assemble canned guidance for one investor profile."""
    return PlanningGuidance(
        position_sizing=list(POSITION_SIZING[profile.risk_tolerance]),
        timing=list(TIMING[profile.horizon]),
        risk_notes=[OBJECTIVE_RISK_NOTES[profile.objective], *UNIVERSAL_RISK_NOTES],
        language_notes=LANGUAGE_NOTE,
    )
