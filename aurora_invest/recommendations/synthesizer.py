"""
Recommendation synthesis: AnalysisResult + UserProfile (+ PortfolioContext)
→ ActiveManagerRecommendation.

Pipeline (fixed order)
----------------------
    1. Guard      : blank ticker → None (never recommend an unidentified instrument)
    2. Timeframe  : "1-3" short_term, "5-10" medium_term, "10+" long_term
    3. Confidence : conviction_score_3m + sum of rule adjustments, clamped 0-100
    4. Action     : default from confidence, then the position-size guardrail
    5. Risk flags : at most one per condition, 0-3
    6. Headline   : "{Action} {TICKER} - {tier}"
    7. Rationale  : 3 baseline bullets + up to 3 portfolio-fit bullets

Confidence rules (each returns an Adjustment or None)
-----------------------------------------------------
    low tolerance       AND risk >= 7          -20
    low tolerance       AND 4 < risk < 7       -10
    moderate tolerance  AND risk > 4           -10
    high tolerance      AND risk < 4           +10

Primary action
--------------
    default   : BUY  if confidence >= 65 and the ticker is not held
                HOLD otherwise
    guardrail : with a PortfolioContext, overrides the default
                SELL if weight >= 40%
                TRIM if weight >  20%

Portfolio risk management takes precedence over single-stock conviction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from aurora_invest.models.analysis import AnalysisResult
from aurora_invest.models.portfolio import PortfolioContext
from aurora_invest.models.profile import UserProfile
from aurora_invest.models.recommendation import (
    MAX_RATIONALE,
    ActiveManagerRecommendation,
)
from aurora_invest.policy import DEFAULT_SYNTHESIZER_POLICY, SynthesizerPolicy
from aurora_invest.taxonomy.classifications import (
    CONFIDENCE_TIER_LABELS,
    HORIZON_TIMEFRAMES,
    ConfidenceTier,
    PortfolioAction,
    RiskTolerance,
    Timeframe,
)
from aurora_invest.utils.logging import log_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Adjustment:
    """Signed confidence delta with the reason it applies."""

    delta: int
    explanation: str


ConfidenceRule = Callable[[int, RiskTolerance, SynthesizerPolicy], Optional[Adjustment]]


# ── Confidence rules ──────────────────────────────────────────────────────────


def low_tolerance_high_risk(
    risk: int, tolerance: RiskTolerance, policy: SynthesizerPolicy
) -> Optional[Adjustment]:
    if tolerance is RiskTolerance.LOW and risk >= policy.risk.high:
        return Adjustment(
            -20, f"Risk score {risk}/10 sits well above a conservative risk tolerance."
        )
    return None


def low_tolerance_moderate_risk(
    risk: int, tolerance: RiskTolerance, policy: SynthesizerPolicy
) -> Optional[Adjustment]:
    if tolerance is RiskTolerance.LOW and policy.risk.moderate < risk < policy.risk.high:
        return Adjustment(
            -10, f"Risk score {risk}/10 is somewhat above a conservative risk tolerance."
        )
    return None


def moderate_tolerance_elevated_risk(
    risk: int, tolerance: RiskTolerance, policy: SynthesizerPolicy
) -> Optional[Adjustment]:
    if tolerance is RiskTolerance.MODERATE and risk > policy.risk.moderate:
        return Adjustment(
            -10, f"Risk score {risk}/10 runs above a moderate risk tolerance."
        )
    return None


def high_tolerance_low_risk(
    risk: int, tolerance: RiskTolerance, policy: SynthesizerPolicy
) -> Optional[Adjustment]:
    if tolerance is RiskTolerance.HIGH and risk < policy.risk.moderate:
        return Adjustment(
            10, f"Risk score {risk}/10 leaves room within a high risk tolerance."
        )
    return None


CONFIDENCE_RULES: tuple[ConfidenceRule, ...] = (
    low_tolerance_high_risk,
    low_tolerance_moderate_risk,
    moderate_tolerance_elevated_risk,
    high_tolerance_low_risk,
)


# ── Pipeline steps ────────────────────────────────────────────────────────────


def determine_timeframe(profile: UserProfile) -> Timeframe:
    return HORIZON_TIMEFRAMES[profile.horizon]


def confidence_adjustments(
    analysis: AnalysisResult,
    profile: UserProfile,
    policy: Optional[SynthesizerPolicy] = None,
) -> list[Adjustment]:
    """Every confidence rule that fires, in rule order."""
    p = policy or DEFAULT_SYNTHESIZER_POLICY
    risk = analysis.summary.risk_score
    fired = (rule(risk, profile.risk_tolerance, p) for rule in CONFIDENCE_RULES)
    return [adj for adj in fired if adj is not None]


def calculate_confidence_score(
    analysis: AnalysisResult,
    profile: UserProfile,
    policy: Optional[SynthesizerPolicy] = None,
) -> int:
    """Conviction adjusted for risk/tolerance fit, rounded and clamped to 0-100."""
    total = analysis.summary.conviction_score_3m + sum(
        adj.delta for adj in confidence_adjustments(analysis, profile, policy)
    )
    return int(round(_clamp(total, 0, 100)))


def confidence_tier(
    confidence: int, policy: Optional[SynthesizerPolicy] = None
) -> ConfidenceTier:
    p = policy or DEFAULT_SYNTHESIZER_POLICY
    if confidence >= p.confidence.high:
        return ConfidenceTier.HIGH
    if confidence >= p.confidence.low:
        return ConfidenceTier.MODERATE
    return ConfidenceTier.LOWER


def default_action(
    confidence: int,
    is_held: bool,
    policy: Optional[SynthesizerPolicy] = None,
) -> PortfolioAction:
    """Confidence-derived action before any portfolio guardrail."""
    p = policy or DEFAULT_SYNTHESIZER_POLICY
    if confidence >= p.confidence.high and not is_held:
        return PortfolioAction.BUY
    return PortfolioAction.HOLD


def guardrail_action(
    portfolio_context: Optional[PortfolioContext],
    policy: Optional[SynthesizerPolicy] = None,
) -> Optional[PortfolioAction]:
    """SELL / TRIM forced by position size, or ``None`` when no guardrail applies."""
    if portfolio_context is None:
        return None
    p = policy or DEFAULT_SYNTHESIZER_POLICY
    weight = portfolio_context.current_weight_pct
    if weight >= p.concentration.emergency_pct:
        return PortfolioAction.SELL
    if weight > p.concentration.moderate_pct:
        return PortfolioAction.TRIM
    return None


def determine_primary_action(
    confidence: int,
    portfolio_context: Optional[PortfolioContext] = None,
    policy: Optional[SynthesizerPolicy] = None,
) -> PortfolioAction:
    """Guardrail action when one applies, else the confidence default."""
    forced = guardrail_action(portfolio_context, policy)
    if forced is not None:
        return forced
    return default_action(confidence, _is_held(portfolio_context), policy)


def generate_risk_flags(
    analysis: AnalysisResult,
    profile: UserProfile,
    portfolio_context: Optional[PortfolioContext] = None,
    policy: Optional[SynthesizerPolicy] = None,
) -> list[str]:
    """Zero to three flags, at most one per condition."""
    p = policy or DEFAULT_SYNTHESIZER_POLICY
    risk = analysis.summary.risk_score
    tolerance = profile.risk_tolerance
    flags: list[str] = []

    if risk >= p.risk.high:
        flags.append(
            f"High risk score ({risk}/10) indicates significant uncertainty in return estimates."
        )

    if (
        portfolio_context is not None
        and portfolio_context.current_weight_pct > p.concentration.moderate_pct
    ):
        flags.append(
            f"Concentration risk: position is {portfolio_context.current_weight_pct:.1f}% "
            f"of the portfolio, above the {p.concentration.moderate_pct:g}% guardrail."
        )

    mismatch = (
        (tolerance is RiskTolerance.LOW and risk > p.risk.moderate)
        or (tolerance is RiskTolerance.MODERATE and risk >= p.risk.high)
    )
    if mismatch:
        flags.append(
            f"Risk level ({risk}/10) may exceed tolerance parameters for a {tolerance} risk profile."
        )

    return flags


def generate_headline(
    action: PortfolioAction,
    confidence: int,
    ticker: str,
    policy: Optional[SynthesizerPolicy] = None,
) -> str:
    label = CONFIDENCE_TIER_LABELS[confidence_tier(confidence, policy)]
    return f"{action.capitalize()} {ticker} - {label}"


def generate_rationale(
    analysis: AnalysisResult,
    profile: UserProfile,
    action: PortfolioAction,
    confidence: int,
    portfolio_context: Optional[PortfolioContext] = None,
    policy: Optional[SynthesizerPolicy] = None,
) -> list[str]:
    """Three baseline bullets plus portfolio-fit bullets when a context is given."""
    p = policy or DEFAULT_SYNTHESIZER_POLICY
    risk = analysis.summary.risk_score

    rationale = [
        _conviction_bullet(action, confidence, p),
        _risk_level_bullet(risk, p),
        _fit_bullet(analysis, profile, p),
    ]

    if portfolio_context is not None:
        guardrail = p.concentration.moderate_pct
        weight = portfolio_context.current_weight_pct
        if weight > guardrail:
            rationale.append(
                f"Current position weight of {weight:.1f}% exceeds the "
                f"{guardrail:g}% concentration guardrail."
            )
        elif weight > 0:
            rationale.append(
                f"Current position weight of {weight:.1f}% falls within the "
                f"{guardrail:g}% concentration guardrail."
            )
        else:
            rationale.append(
                f"No current weight in the portfolio; a new position would start "
                f"below the {guardrail:g}% concentration guardrail."
            )

        unguarded = default_action(confidence, _is_held(portfolio_context), p)
        if action is not unguarded:
            rationale.append(
                f"Position-size guardrail overrides the confidence-based "
                f"{unguarded} to {action}."
            )

        if portfolio_context.reasoning:
            rationale.append(f"Portfolio check: {portfolio_context.reasoning[0]}")

    return rationale[:MAX_RATIONALE]


def build_active_manager_recommendation(
    analysis: Optional[AnalysisResult],
    profile: UserProfile,
    portfolio_context: Optional[PortfolioContext] = None,
    policy: Optional[SynthesizerPolicy] = None,
) -> Optional[ActiveManagerRecommendation]:
    """Synthesize the final recommendation for one stock.

    Returns:
        The recommendation, or ``None`` when the analysis carries no ticker.
    """
    p = policy or DEFAULT_SYNTHESIZER_POLICY
    ticker = (analysis.ticker if analysis is not None else "").strip().upper()
    if not ticker:
        logger.warning("Analysis has no ticker; no recommendation produced")
        return None

    timeframe = determine_timeframe(profile)
    confidence = calculate_confidence_score(analysis, profile, p)
    action = determine_primary_action(confidence, portfolio_context, p)

    logger.debug(
        "Recommendation built",
        extra=log_context(
            ticker=ticker,
            action=action,
            confidence=confidence,
            weight_pct=portfolio_context.current_weight_pct if portfolio_context is not None else None,
        ),
    )

    notes: Optional[list[str]] = None
    if (
        portfolio_context is not None
        and portfolio_context.current_weight_pct > p.concentration.high_pct
    ):
        notes = [
            f"Position size adjusted to respect the {p.concentration.high_pct:g}% "
            "concentration limit."
        ]

    return ActiveManagerRecommendation(
        ticker=ticker,
        primary_action=action,
        confidence_score=confidence,
        timeframe=timeframe,
        headline=generate_headline(action, confidence, ticker, p),
        rationale=generate_rationale(analysis, profile, action, confidence, portfolio_context, p),
        risk_flags=generate_risk_flags(analysis, profile, portfolio_context, p),
        notes=notes,
    )


# ── Helpers ───────────────────────────────────────────────────────────────────


def _conviction_bullet(action: PortfolioAction, confidence: int, p: SynthesizerPolicy) -> str:
    tier = confidence_tier(confidence, p)
    if tier is ConfidenceTier.HIGH:
        return (
            f"Framework confidence score of {confidence}/100 suggests {action} "
            "aligns with similar investor profiles."
        )
    if tier is ConfidenceTier.MODERATE:
        return (
            f"Moderate conviction level ({confidence}/100) indicates a balanced "
            "opportunity-risk profile for this timeframe."
        )
    return (
        f"Lower confidence score ({confidence}/100) suggests cautious positioning "
        "may be prudent."
    )


def _risk_level_bullet(risk: int, p: SynthesizerPolicy) -> str:
    if risk >= p.risk.high:
        return f"Risk score of {risk}/10 indicates elevated uncertainty for this holding."
    if risk >= p.risk.moderate:
        return f"Moderate risk level ({risk}/10) aligns with typical balanced portfolio parameters."
    return f"Lower risk score ({risk}/10) suggests a more stable return profile."


def _fit_bullet(analysis: AnalysisResult, profile: UserProfile, p: SynthesizerPolicy) -> str:
    adjustments = confidence_adjustments(analysis, profile, p)
    if not adjustments:
        return (
            f"Risk score {analysis.summary.risk_score}/10 fits a "
            f"{profile.risk_tolerance} risk tolerance; conviction left unadjusted."
        )
    net = sum(adj.delta for adj in adjustments)
    reasons = " ".join(adj.explanation for adj in adjustments)
    return f"{reasons} Confidence adjusted by {net:+d} points."


def _is_held(portfolio_context: Optional[PortfolioContext]) -> bool:
    if portfolio_context is None:
        return False
    return (
        portfolio_context.existing_holding is not None
        or portfolio_context.current_weight_pct > 0
    )


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
