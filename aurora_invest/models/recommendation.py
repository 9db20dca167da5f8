"""
Recommendation Synthesizer output model.

``ActiveManagerRecommendation`` is stateless: one value per
(stock, profile, portfolio context) combination. The validators enforce the
structural bounds the synthesizer guarantees (3-6 rationale bullets, at most
three risk flags, confidence within 0-100).
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from aurora_invest.taxonomy.classifications import PortfolioAction, Timeframe

MIN_RATIONALE = 3
MAX_RATIONALE = 6
MAX_RISK_FLAGS = 3


class ActiveManagerRecommendation(BaseModel):
    """Final, bounded action for one stock.

    Attributes:
        ticker: Instrument the recommendation is about.
        primary_action: ``buy``, ``hold``, ``trim`` or ``sell``.
        confidence_score: 0-100, conviction adjusted for risk/tolerance fit.
        timeframe: Derived from the investor's horizon bucket.
        headline: ``"{Action} {TICKER} - {tier}"``.
        rationale: 3-6 explanation bullets.
        risk_flags: 0-3 warnings, at most one per condition.
        notes: Optional extra remarks (e.g. concentration-limit note).
    """

    model_config = ConfigDict(frozen=True)

    ticker: str
    primary_action: PortfolioAction
    confidence_score: int = Field(ge=0, le=100)
    timeframe: Timeframe
    headline: str
    rationale: list[str] = Field(min_length=MIN_RATIONALE, max_length=MAX_RATIONALE)
    risk_flags: list[str] = Field(default_factory=list, max_length=MAX_RISK_FLAGS)
    notes: Optional[list[str]] = None

    @field_validator("ticker", "headline")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be blank.")
        return v.strip()
