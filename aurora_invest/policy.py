"""
Policy thresholds for the analysis, portfolio and recommendation engines.

Every cut-point the engines branch on lives here as a named field on a frozen
model, grouped per engine. Engine functions take an optional threshold object
and fall back to the module-level defaults below, so the rule tables can be
tuned from ``config/default.toml`` and unit-tested independently of the
control flow.

The numbers are adjustable policy, not a validated strategy. Defaults:

    Fundamentals  strong: EPS growth > 15, net margin > 20, FCF yield > 3, ROE > 20
                  weak:   EPS growth < 5 AND net margin < 10
    Valuation     cheap:  PEG < 1.0 AND forward P/E < 20
                  rich:   PEG > 2.5 OR forward P/E > 40
    Technicals    RSI > 70 overbought, < 30 oversold; 52w percentile 80 / 20
    Sentiment     target-implied move bucketed at +/-15%
    Concentration moderate > 20%, high > 25%, emergency >= 40%
    Confidence    high >= 65, low < 40
    Risk score    moderate 4, high 7
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator


class FundamentalsThresholds(BaseModel):
    """Cut-points for ``classify_fundamentals``.

    ``strong`` needs all four strong_* signals; ``weak`` needs both weak_*
    signals. Downgrading is deliberately easier than upgrading.
    """

    model_config = ConfigDict(frozen=True)

    strong_eps_growth_pct: float = 15.0
    strong_net_margin_pct: float = 20.0
    strong_fcf_yield_pct:  float = 3.0
    strong_roe_pct:        float = 20.0
    weak_eps_growth_pct:   float = 5.0
    weak_net_margin_pct:   float = 10.0


class ValuationThresholds(BaseModel):
    """Cut-points for ``classify_valuation``."""

    model_config = ConfigDict(frozen=True)

    cheap_peg:            float = 1.0
    cheap_forward_pe:     float = 20.0
    rich_peg:             float = 2.5
    rich_forward_pe:      float = 40.0
    peg_growth_floor_pct: float = 1.0

    @model_validator(mode="after")
    def validate_ordering(self) -> "ValuationThresholds":
        if self.cheap_peg >= self.rich_peg:
            raise ValueError(
                f"cheap_peg ({self.cheap_peg}) must be < rich_peg ({self.rich_peg})."
            )
        if self.peg_growth_floor_pct <= 0:
            raise ValueError("peg_growth_floor_pct must be positive.")
        return self


class TechnicalThresholds(BaseModel):
    """Cut-points for ``analyze_technicals``."""

    model_config = ConfigDict(frozen=True)

    rsi_overbought:       float = 70.0
    rsi_oversold:         float = 30.0
    near_high_percentile: float = 80.0
    near_low_percentile:  float = 20.0

    @model_validator(mode="after")
    def validate_ordering(self) -> "TechnicalThresholds":
        if self.rsi_oversold >= self.rsi_overbought:
            raise ValueError("rsi_oversold must be below rsi_overbought.")
        if self.near_low_percentile >= self.near_high_percentile:
            raise ValueError("near_low_percentile must be below near_high_percentile.")
        return self


class SentimentThresholds(BaseModel):
    """Cut-point for bucketing the analyst-target implied return."""

    model_config = ConfigDict(frozen=True)

    target_move_pct: float = 15.0


class ConcentrationThresholds(BaseModel):
    """Position-weight guardrails shared by the portfolio engine and synthesizer.

    Attributes:
        moderate_pct:  Weight above which a position is flagged and, in the
                       synthesizer, trimmed.
        high_pct:      Weight above which portfolio concentration is ``high``
                       and the portfolio engine suggests a trim.
        emergency_pct: Weight at or above which the synthesizer says ``sell``.
    """

    model_config = ConfigDict(frozen=True)

    moderate_pct:  float = 20.0
    high_pct:      float = 25.0
    emergency_pct: float = 40.0

    @model_validator(mode="after")
    def validate_ordering(self) -> "ConcentrationThresholds":
        if not self.moderate_pct < self.high_pct < self.emergency_pct:
            raise ValueError(
                "Concentration thresholds must satisfy moderate_pct < high_pct < "
                f"emergency_pct, got {self.moderate_pct} / {self.high_pct} / "
                f"{self.emergency_pct}."
            )
        return self


class ConfidenceThresholds(BaseModel):
    """Confidence cut-points for the default action and the headline tier."""

    model_config = ConfigDict(frozen=True)

    high: int = 65
    low:  int = 40

    @model_validator(mode="after")
    def validate_ordering(self) -> "ConfidenceThresholds":
        if not 0 <= self.low < self.high <= 100:
            raise ValueError(
                f"Confidence thresholds must satisfy 0 <= low < high <= 100, "
                f"got low={self.low}, high={self.high}."
            )
        return self


class RiskThresholds(BaseModel):
    """Risk-score cut-points (scores run 1-10)."""

    model_config = ConfigDict(frozen=True)

    moderate: int = 4
    high:     int = 7

    @model_validator(mode="after")
    def validate_ordering(self) -> "RiskThresholds":
        if not 1 <= self.moderate < self.high <= 10:
            raise ValueError(
                f"Risk thresholds must satisfy 1 <= moderate < high <= 10, "
                f"got moderate={self.moderate}, high={self.high}."
            )
        return self


class SynthesizerPolicy(BaseModel):
    """Everything the recommendation synthesizer branches on."""

    model_config = ConfigDict(frozen=True)

    confidence:    ConfidenceThresholds = ConfidenceThresholds()
    risk:          RiskThresholds = RiskThresholds()
    concentration: ConcentrationThresholds = ConcentrationThresholds()


# ── Defaults ──────────────────────────────────────────────────────────────────

DEFAULT_FUNDAMENTALS_THRESHOLDS = FundamentalsThresholds()
DEFAULT_VALUATION_THRESHOLDS = ValuationThresholds()
DEFAULT_TECHNICAL_THRESHOLDS = TechnicalThresholds()
DEFAULT_SENTIMENT_THRESHOLDS = SentimentThresholds()
DEFAULT_CONCENTRATION_THRESHOLDS = ConcentrationThresholds()
DEFAULT_SYNTHESIZER_POLICY = SynthesizerPolicy()
