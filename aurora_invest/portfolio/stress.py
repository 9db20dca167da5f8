"""
Portfolio stress test over analysis scenarios.

Each holding's current value is projected at the midpoint of its bull, base
and bear return ranges; the portfolio result is the sum, with the change
against current value expressed in percent.
"""

from __future__ import annotations

from typing import Sequence

from aurora_invest.models.analysis import ScenarioBand
from aurora_invest.models.portfolio import (
    HoldingScenarioSnapshot,
    PortfolioStressTestResult,
    StressTestEntry,
)


def calculate_portfolio_stress_test(
    snapshots: Sequence[HoldingScenarioSnapshot],
) -> PortfolioStressTestResult:
    """Aggregate per-holding scenario projections; all zeros when empty."""
    if not snapshots:
        return PortfolioStressTestResult()

    entries: list[StressTestEntry] = []
    for snap in snapshots:
        current = round(snap.shares * snap.current_price, 2)
        entries.append(StressTestEntry(
            ticker=snap.ticker,
            current_value=current,
            bull_value=_project(current, snap.scenarios.bull),
            base_value=_project(current, snap.scenarios.base),
            bear_value=_project(current, snap.scenarios.bear),
        ))

    current_total = sum(e.current_value for e in entries)
    bull_total = sum(e.bull_value for e in entries)
    base_total = sum(e.base_value for e in entries)
    bear_total = sum(e.bear_value for e in entries)

    def change_pct(value: float) -> float:
        if current_total == 0:
            return 0.0
        return round((value - current_total) / current_total * 100.0, 2)

    return PortfolioStressTestResult(
        current_value=round(current_total, 2),
        bull_value=round(bull_total, 2),
        base_value=round(base_total, 2),
        bear_value=round(bear_total, 2),
        bull_change_pct=change_pct(bull_total),
        base_change_pct=change_pct(base_total),
        bear_change_pct=change_pct(bear_total),
        entries=entries,
    )


def _project(current_value: float, band: ScenarioBand) -> float:
    return round(current_value * (1 + band.midpoint / 100.0), 2)
