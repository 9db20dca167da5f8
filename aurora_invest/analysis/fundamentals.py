"""
Fundamentals classification and quality scoring.

Classification (rule-based, see ``FundamentalsThresholds``)
-----------------------------------------------------------
    unknown : fundamentals block absent
    strong  : EPS growth > 15  AND net margin > 20  AND FCF yield > 3  AND ROE > 20
    weak    : EPS growth < 5   AND net margin < 10
    ok      : everything else

A metric that is missing can never satisfy a strong_* or weak_* condition,
so a sparse snapshot lands on ``ok`` rather than on either extreme.

Quality score (0-100, supplementary)
------------------------------------
    score = 100 * (
          eps_growth     * 0.25    # linear between 0% and 20%
        + net_margin     * 0.20    # linear between 5% and 22%
        + fcf_yield      * 0.20    # linear between 0.5% and 5%
        + roe            * 0.15    # linear between 8% and 25%
        + revenue_growth * 0.10    # linear between -5% and 12%
        + leverage       * 0.10    # D/E: 1 at <= 0.8x, 0 at >= 3x
    )

Each component is scaled to [0, 1] between its weak and strong anchor.
A missing metric contributes 0.
"""

from __future__ import annotations

from typing import Optional

from aurora_invest.models.analysis import FundamentalsInsight
from aurora_invest.models.stock import StockData, StockFundamentals
from aurora_invest.policy import DEFAULT_FUNDAMENTALS_THRESHOLDS, FundamentalsThresholds
from aurora_invest.taxonomy.classifications import FundamentalsClass

# (weight, strong anchor, weak anchor)
_POSITIVE_COMPONENTS: dict[str, tuple[float, float, float]] = {
    "eps_growth_yoy_pct":       (0.25, 20.0, 0.0),
    "net_margin_pct":           (0.20, 22.0, 5.0),
    "free_cash_flow_yield_pct": (0.20, 5.0,  0.5),
    "roe":                      (0.15, 25.0, 8.0),
    "revenue_growth_yoy_pct":   (0.10, 12.0, -5.0),
}
_LEVERAGE_WEIGHT = 0.10
_LEVERAGE_STRONG = 0.8
_LEVERAGE_WEAK = 3.0

_MAX_DRIVERS = 3
_MAX_CAUTIONS = 3

NO_FUNDAMENTALS_NOTE = "Fundamentals data not available."


def classify_fundamentals(
    stock: StockData,
    thresholds: Optional[FundamentalsThresholds] = None,
) -> FundamentalsClass:
    """Classify a stock's fundamentals as strong / ok / weak / unknown.

    Never returns ``unknown`` when the fundamentals block is present.
    """
    t = thresholds or DEFAULT_FUNDAMENTALS_THRESHOLDS
    f = stock.fundamentals
    if f is None:
        return FundamentalsClass.UNKNOWN

    if (
        _above(f.eps_growth_yoy_pct, t.strong_eps_growth_pct)
        and _above(f.net_margin_pct, t.strong_net_margin_pct)
        and _above(f.free_cash_flow_yield_pct, t.strong_fcf_yield_pct)
        and _above(f.roe, t.strong_roe_pct)
    ):
        return FundamentalsClass.STRONG

    if (
        _below(f.eps_growth_yoy_pct, t.weak_eps_growth_pct)
        and _below(f.net_margin_pct, t.weak_net_margin_pct)
    ):
        return FundamentalsClass.WEAK

    return FundamentalsClass.OK


def calculate_fundamentals_quality_score(stock: StockData) -> int:
    """Weighted 0-100 quality score; 0 when fundamentals are absent."""
    f = stock.fundamentals
    if f is None:
        return 0

    total = 0.0
    for field, (weight, strong, weak) in _POSITIVE_COMPONENTS.items():
        value = getattr(f, field)
        if value is not None:
            total += _score_higher_is_better(value, strong, weak) * weight

    if f.debt_to_equity is not None:
        total += (
            _score_lower_is_better(f.debt_to_equity, _LEVERAGE_STRONG, _LEVERAGE_WEAK)
            * _LEVERAGE_WEIGHT
        )

    return int(round(_clamp(total * 100.0, 0.0, 100.0)))


def build_fundamentals_insight(
    stock: StockData,
    thresholds: Optional[FundamentalsThresholds] = None,
) -> FundamentalsInsight:
    """Classification, quality score and up to three drivers / cautions."""
    f = stock.fundamentals
    if f is None:
        return FundamentalsInsight(
            classification=FundamentalsClass.UNKNOWN,
            quality_score=0,
            drivers=[],
            cautionary_notes=[NO_FUNDAMENTALS_NOTE],
        )

    return FundamentalsInsight(
        classification=classify_fundamentals(stock, thresholds),
        quality_score=calculate_fundamentals_quality_score(stock),
        drivers=_drivers(f)[:_MAX_DRIVERS],
        cautionary_notes=_cautions(f)[:_MAX_CAUTIONS],
    )


# ── Drivers / cautions ────────────────────────────────────────────────────────


def _drivers(f: StockFundamentals) -> list[str]:
    drivers: list[str] = []
    if _at_least(f.eps_growth_yoy_pct, 18.0):
        drivers.append("EPS growth is running above 18%")
    if _at_least(f.net_margin_pct, 22.0):
        drivers.append("Margins exceed 22%")
    if _at_least(f.free_cash_flow_yield_pct, 4.0):
        drivers.append("Free cash flow yield surpasses 4%")
    if _at_least(f.roe, 25.0):
        drivers.append("ROE is north of 25%")
    if _at_least(f.revenue_growth_yoy_pct, 12.0):
        drivers.append("Revenue is compounding at double-digit rates")
    return drivers


def _cautions(f: StockFundamentals) -> list[str]:
    cautions: list[str] = []
    if _above(f.debt_to_equity, 2.5):
        cautions.append("Leverage is elevated (debt-to-equity > 2.5x)")
    if _below(f.free_cash_flow_yield_pct, 0.5):
        cautions.append("Limited free cash flow support (< 0.5%)")
    if _below(f.eps_growth_yoy_pct, 0.0):
        cautions.append("Recent EPS trend turned negative")
    if _below(f.net_margin_pct, 8.0):
        cautions.append("Net margins are below 8%")
    return cautions


# ── Helpers ───────────────────────────────────────────────────────────────────


def _score_higher_is_better(value: float, strong: float, weak: float) -> float:
    if value >= strong:
        return 1.0
    if value <= weak:
        return 0.0
    return (value - weak) / (strong - weak)


def _score_lower_is_better(value: float, strong: float, weak: float) -> float:
    if value <= strong:
        return 1.0
    if value >= weak:
        return 0.0
    return 1.0 - (value - strong) / (weak - strong)


def _above(value: Optional[float], threshold: float) -> bool:
    return value is not None and value > threshold


def _below(value: Optional[float], threshold: float) -> bool:
    return value is not None and value < threshold


def _at_least(value: Optional[float], threshold: float) -> bool:
    return value is not None and value >= threshold


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
