"""
Valuation classification and PEG assessment.

PEG
---
    pe     = forward P/E, falling back to trailing P/E
    growth = EPS growth YoY, falling back to revenue growth YoY
    PEG    = pe / max(growth, peg_growth_floor_pct)

The floor keeps PEG from flipping sign or exploding when growth is near zero
or negative. A non-positive P/E (loss-making company) has no PEG.

Classification (see ``ValuationThresholds``)
--------------------------------------------
    unknown : fundamentals absent, or no P/E at all
    cheap   : PEG < 1.0  AND  P/E < 20
    rich    : PEG > 2.5  OR   P/E > 40      (either alone is enough)
    fair    : everything else

PEG bucket (supplementary, used for drivers and commentary)
-----------------------------------------------------------
    distorted : growth <= 0, or growth < 5%
    discount  : PEG <= 1.0
    demanding : PEG >= 1.8
    balanced  : otherwise
"""

from __future__ import annotations

from typing import NamedTuple, Optional

from aurora_invest.models.analysis import ValuationInsight
from aurora_invest.models.stock import StockData, StockFundamentals
from aurora_invest.policy import DEFAULT_VALUATION_THRESHOLDS, ValuationThresholds
from aurora_invest.taxonomy.classifications import PegBucket, ValuationClass

_DISTORTED_GROWTH_PCT = 5.0
_DISCOUNT_PEG = 1.0
_DEMANDING_PEG = 1.8
_STRETCHED_PEG = 3.0
_MAX_DRIVERS = 3
_MAX_CAUTIONS = 3

_GROWTH_SOURCE_TEXT: dict[str, str] = {
    "eps":     "EPS growth",
    "revenue": "Revenue growth",
}

_COMMENTARY: dict[ValuationClass, str] = {
    ValuationClass.CHEAP:   "Multiples screen at a discount relative to growth and cash generation",
    ValuationClass.FAIR:    "Valuation metrics look balanced versus growth profile",
    ValuationClass.RICH:    "Premium multiples rely on sustained growth to be justified",
    ValuationClass.UNKNOWN: "Not enough earnings data to anchor a valuation view",
}

NO_VALUATION_NOTE = "Valuation data not available."


class PegAssessment(NamedTuple):
    """PEG bucket plus the inputs it was read from."""

    bucket: PegBucket
    ratio: Optional[float]
    growth_pct: float
    growth_source: str
    commentary: str


def resolve_pe(f: StockFundamentals) -> Optional[float]:
    """Forward P/E when supplied, else trailing P/E, else ``None``."""
    return f.forward_pe if f.forward_pe is not None else f.trailing_pe


def select_growth(f: StockFundamentals) -> Optional[tuple[float, str]]:
    """Return ``(growth_pct, source)`` preferring EPS growth over revenue growth."""
    if f.eps_growth_yoy_pct is not None:
        return f.eps_growth_yoy_pct, "eps"
    if f.revenue_growth_yoy_pct is not None:
        return f.revenue_growth_yoy_pct, "revenue"
    return None


def calculate_peg(
    f: StockFundamentals,
    thresholds: Optional[ValuationThresholds] = None,
) -> Optional[float]:
    """Floored PEG ratio, or ``None`` when P/E or growth is unavailable."""
    t = thresholds or DEFAULT_VALUATION_THRESHOLDS
    pe = resolve_pe(f)
    growth = select_growth(f)
    if pe is None or pe <= 0 or growth is None:
        return None
    return pe / max(growth[0], t.peg_growth_floor_pct)


def evaluate_peg(f: StockFundamentals) -> Optional[PegAssessment]:
    """Bucket the PEG ratio; ``None`` when there is no growth figure or no P/E."""
    growth = select_growth(f)
    if growth is None:
        return None
    growth_pct, source = growth
    label = _GROWTH_SOURCE_TEXT[source]
    pe = resolve_pe(f)

    if growth_pct <= 0:
        return PegAssessment(
            bucket=PegBucket.DISTORTED,
            ratio=None,
            growth_pct=growth_pct,
            growth_source=source,
            commentary=f"{label} turned negative, so PEG loses meaning.",
        )

    if growth_pct < _DISTORTED_GROWTH_PCT:
        return PegAssessment(
            bucket=PegBucket.DISTORTED,
            ratio=pe / growth_pct if pe is not None and pe > 0 else None,
            growth_pct=growth_pct,
            growth_source=source,
            commentary=f"{label} below 5% makes PEG less reliable.",
        )

    if pe is None or pe <= 0:
        return None

    ratio = pe / growth_pct
    if ratio <= _DISCOUNT_PEG:
        bucket = PegBucket.DISCOUNT
        commentary = "PEG below 1 suggests valuation is discounting future growth."
    elif ratio >= _DEMANDING_PEG:
        bucket = PegBucket.DEMANDING
        commentary = (
            "PEG above 3 signals stretched multiples relative to growth."
            if ratio >= _STRETCHED_PEG
            else "PEG above 1.8 requires flawless execution to justify."
        )
    else:
        bucket = PegBucket.BALANCED
        commentary = "PEG indicates valuation is broadly aligned with growth."

    return PegAssessment(
        bucket=bucket,
        ratio=ratio,
        growth_pct=growth_pct,
        growth_source=source,
        commentary=commentary,
    )


def classify_valuation(
    stock: StockData,
    thresholds: Optional[ValuationThresholds] = None,
) -> ValuationClass:
    """Classify valuation as cheap / fair / rich / unknown."""
    t = thresholds or DEFAULT_VALUATION_THRESHOLDS
    f = stock.fundamentals
    if f is None:
        return ValuationClass.UNKNOWN
    pe = resolve_pe(f)
    if pe is None:
        return ValuationClass.UNKNOWN

    peg = calculate_peg(f, t)
    if (peg is not None and peg > t.rich_peg) or pe > t.rich_forward_pe:
        return ValuationClass.RICH
    if peg is not None and peg < t.cheap_peg and pe < t.cheap_forward_pe:
        return ValuationClass.CHEAP
    return ValuationClass.FAIR


def build_valuation_insight(
    stock: StockData,
    thresholds: Optional[ValuationThresholds] = None,
) -> ValuationInsight:
    """Classification, multiples and commentary behind the valuation view."""
    f = stock.fundamentals
    if f is None:
        return ValuationInsight(
            classification=ValuationClass.UNKNOWN,
            commentary=NO_VALUATION_NOTE,
        )

    classification = classify_valuation(stock, thresholds)
    pe = resolve_pe(f)
    peg = calculate_peg(f, thresholds)
    assessment = evaluate_peg(f)
    earnings_yield = 100.0 / pe if pe is not None and pe > 0 else None
    fcf_yield = f.free_cash_flow_yield_pct
    dividend_yield = f.dividend_yield_pct

    drivers: list[str] = []
    cautions: list[str] = []

    if assessment is not None:
        if assessment.bucket is PegBucket.DISCOUNT:
            drivers.append("PEG screens below 1x relative to growth inputs")
        elif assessment.bucket is PegBucket.BALANCED:
            drivers.append("PEG roughly aligned with growth trajectory")
        elif assessment.bucket is PegBucket.DEMANDING:
            cautions.append("Growth-adjusted PEG above 1.8x carries premium expectations")
        else:
            cautions.append("PEG distorted because growth is limited or negative")
        if assessment.growth_pct >= 20:
            label = _GROWTH_SOURCE_TEXT[assessment.growth_source]
            drivers.append(f"{label} running near {assessment.growth_pct:.0f}%")

    if earnings_yield is not None:
        if earnings_yield >= 6.5:
            drivers.append(f"Earnings yield {earnings_yield:.1f}% clears 6% hurdle")
        elif earnings_yield < 3:
            cautions.append("Earnings yield below 3% offers thin cash support")

    if fcf_yield is not None:
        if fcf_yield >= 5:
            drivers.append("Free cash flow yield exceeds 5%")
        elif fcf_yield < 1:
            cautions.append("Free cash flow yield under 1% provides little downside protection")

    if dividend_yield is not None and dividend_yield >= 3:
        drivers.append("Dividend yield north of 3% adds income support")

    if pe is not None and pe >= 35:
        cautions.append("Earnings multiples above 35x embed perfection")

    details: list[str] = []
    if peg is not None:
        details.append(f"PEG {peg:.2f}")
    if assessment is not None:
        details.append(assessment.commentary)
    if earnings_yield is not None:
        details.append(f"Earnings yield {earnings_yield:.1f}%")
    if fcf_yield is not None:
        details.append(f"FCF yield {fcf_yield:.1f}%")
    if dividend_yield is not None:
        details.append(f"Dividend yield {dividend_yield:.2f}%")

    commentary = _COMMENTARY[classification]
    if details:
        commentary = f"{commentary} ({' | '.join(details)})"

    return ValuationInsight(
        classification=classification,
        commentary=commentary,
        peg_ratio=round(peg, 2) if peg is not None else None,
        peg_bucket=assessment.bucket if assessment is not None else None,
        earnings_yield_pct=round(earnings_yield, 2) if earnings_yield is not None else None,
        free_cash_flow_yield_pct=fcf_yield,
        dividend_yield_pct=dividend_yield,
        drivers=_dedupe(drivers)[:_MAX_DRIVERS],
        cautionary_notes=_dedupe(cautions)[:_MAX_CAUTIONS],
    )


def _dedupe(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))
