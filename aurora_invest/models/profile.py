"""
Investor profile and per-call analysis options.

``UserProfile`` is an immutable per-call input: the engines never store it
and never mutate it.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from aurora_invest.taxonomy.classifications import (
    InvestmentHorizon,
    InvestmentObjective,
    RiskTolerance,
)


class UserProfile(BaseModel):
    """Risk tolerance, horizon bucket and objective of one investor.

    Attributes:
        risk_tolerance: ``low``, ``moderate`` or ``high``.
        horizon: Holding-period bucket: ``"1-3"``, ``"5-10"`` or ``"10+"`` years.
        objective: ``growth``, ``income`` or ``balanced``.
    """

    model_config = ConfigDict(frozen=True)

    risk_tolerance: RiskTolerance
    horizon: InvestmentHorizon
    objective: InvestmentObjective


class AnalysisOptions(BaseModel):
    """Optional knobs for ``analyze_stock``."""

    model_config = ConfigDict(frozen=True)

    horizon_months: int = Field(default=3, ge=1)
