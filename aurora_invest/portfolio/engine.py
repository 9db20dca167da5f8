"""
Portfolio valuation, concentration risk and action suggestions.

Allocation
----------
    value      = shares * price            (0 and priced=False without a price)
    weight_pct = value / total_value * 100 (0 when total_value is 0)
    gain_loss  = value - shares * average_cost_basis   (0 when unpriced)

Heuristic volatility (percent)
------------------------------
    volatility = 12 + 15 * sqrt(sum(w^2)) + 0.3 * max(0, max_weight_pct - 25)

where ``w`` are fractional weights. More concentrated books score higher.

Concentration (see ``ConcentrationThresholds``)
-----------------------------------------------
    high     : some weight > 25%
    moderate : some weight > 20%, none > 25%
    low      : otherwise

Weights are judged per ticker, with every lot of a ticker summed.

Prices and betas are looked up case-insensitively. Non-finite or
non-positive prices count as missing; non-finite betas count as 1.0.
"""

from __future__ import annotations

import logging
import math
from typing import Mapping, Optional, Sequence

from aurora_invest.models.portfolio import (
    ConcentrationRisk,
    Portfolio,
    PortfolioActionSuggestion,
    PortfolioAllocation,
    PortfolioContext,
    PortfolioHolding,
    PortfolioMetrics,
    PositionWeight,
)
from aurora_invest.policy import DEFAULT_CONCENTRATION_THRESHOLDS, ConcentrationThresholds
from aurora_invest.taxonomy.classifications import ConcentrationLevel, PortfolioAction
from aurora_invest.utils.logging import log_context

logger = logging.getLogger(__name__)

NEUTRAL_BETA = 1.0
MAX_LARGEST_POSITIONS = 3

_VOL_BASE = 12.0
_VOL_DISPERSION = 15.0
_VOL_PENALTY_FROM_PCT = 25.0
_VOL_PENALTY_SLOPE = 0.3


def calculate_allocation(
    portfolio: Portfolio,
    prices: Mapping[str, float],
) -> list[PortfolioAllocation]:
    """One allocation row per holding, in portfolio order.

    Holdings without a usable price stay in the list with ``value=0`` and
    ``priced=False``. Returns ``[]`` for an empty portfolio.
    """
    if not portfolio.holdings:
        return []

    price_map = _normalize_prices(prices)
    rows: list[tuple[PortfolioHolding, Optional[float], float]] = []
    for holding in portfolio.holdings:
        price = price_map.get(holding.ticker)
        value = holding.shares * price if price is not None else 0.0
        rows.append((holding, price, value))

    unpriced = sorted({h.ticker for h, price, _ in rows if price is None})
    if unpriced:
        logger.warning("No usable price for %s; valued at zero", ", ".join(unpriced))

    total_value = sum(value for _, _, value in rows)

    allocations: list[PortfolioAllocation] = []
    for holding, price, value in rows:
        cost = holding.shares * holding.average_cost_basis
        gain_loss = value - cost if price is not None else 0.0
        allocations.append(PortfolioAllocation(
            ticker=holding.ticker,
            value=_round(value),
            weight_pct=_round(value / total_value * 100.0) if total_value > 0 else 0.0,
            gain_loss=_round(gain_loss),
            gain_loss_pct=_round(gain_loss / cost * 100.0) if cost > 0 else 0.0,
            priced=price is not None,
        ))
    return allocations


def calculate_portfolio_beta(
    holdings: Sequence[PortfolioHolding],
    betas: Optional[Mapping[str, float]],
    prices: Mapping[str, float],
) -> float:
    """Value-weighted average beta; a missing beta counts as 1.0.

    Returns 0.0 when no holding has a positive value.
    """
    price_map = _normalize_prices(prices)
    beta_map = _normalize_betas(betas)

    total_value = 0.0
    weighted = 0.0
    for holding in holdings:
        price = price_map.get(holding.ticker)
        if price is None:
            continue
        value = holding.shares * price
        total_value += value
        weighted += value * beta_map.get(holding.ticker, NEUTRAL_BETA)

    if total_value <= 0:
        return 0.0
    return _round(weighted / total_value)


def calculate_portfolio_metrics(
    portfolio: Portfolio,
    prices: Mapping[str, float],
    betas: Optional[Mapping[str, float]] = None,
) -> PortfolioMetrics:
    """Aggregate value, cost, gain/loss, beta and heuristic volatility.

    ``total_cost`` covers every holding. Gain/loss is measured over priced
    holdings only, so an unpriced lot never reads as a 100% loss.
    """
    if not portfolio.holdings:
        return PortfolioMetrics()

    allocations = calculate_allocation(portfolio, prices)
    total_value = sum(a.value for a in allocations)
    total_cost = sum(h.shares * h.average_cost_basis for h in portfolio.holdings)
    priced_cost = sum(
        h.shares * h.average_cost_basis
        for h, a in zip(portfolio.holdings, allocations)
        if a.priced
    )
    total_gain_loss = total_value - priced_cost

    return PortfolioMetrics(
        total_value=_round(total_value),
        total_cost=_round(total_cost),
        total_gain_loss=_round(total_gain_loss),
        total_gain_loss_pct=_round(total_gain_loss / priced_cost * 100.0) if priced_cost > 0 else 0.0,
        beta=calculate_portfolio_beta(portfolio.holdings, betas, prices),
        volatility=estimate_volatility(allocations) if total_value > 0 else 0.0,
    )


def position_weights(allocations: Sequence[PortfolioAllocation]) -> list[PositionWeight]:
    """Weight per ticker, summing every lot of the same ticker.

    Tickers keep the order of their first lot.
    """
    totals: dict[str, float] = {}
    for a in allocations:
        totals[a.ticker] = totals.get(a.ticker, 0.0) + a.weight_pct
    return [PositionWeight(ticker=t, weight_pct=_round(w)) for t, w in totals.items()]


def estimate_volatility(allocations: Sequence[PortfolioAllocation]) -> float:
    """Concentration-driven volatility heuristic (percent); 0.0 when empty."""
    positions = position_weights(allocations)
    if not positions:
        return 0.0
    sum_sq = sum((p.weight_pct / 100.0) ** 2 for p in positions)
    max_weight = max(p.weight_pct for p in positions)
    volatility = (
        _VOL_BASE
        + _VOL_DISPERSION * math.sqrt(sum_sq)
        + _VOL_PENALTY_SLOPE * max(0.0, max_weight - _VOL_PENALTY_FROM_PCT)
    )
    return _round(volatility)


def detect_concentration_risk(
    allocations: Sequence[PortfolioAllocation],
    thresholds: Optional[ConcentrationThresholds] = None,
) -> ConcentrationRisk:
    """Classify single-position concentration and name every offending ticker.

    Lots of the same ticker are judged as one position, matching the
    weight ``build_portfolio_context`` reports for that ticker.
    """
    t = thresholds or DEFAULT_CONCENTRATION_THRESHOLDS
    positions = position_weights(allocations)
    warnings: list[str] = []
    level = ConcentrationLevel.LOW

    for p in positions:
        if p.weight_pct > t.high_pct:
            warnings.append(
                f"{p.ticker} represents {p.weight_pct:.1f}% of portfolio value, "
                f"above the {t.high_pct:g}% concentration threshold."
            )
            level = ConcentrationLevel.HIGH
        elif p.weight_pct > t.moderate_pct:
            warnings.append(
                f"{p.ticker} is {p.weight_pct:.1f}% of the portfolio, above the "
                f"{t.moderate_pct:g}% watch level. Keep it under {t.high_pct:g}% "
                "to avoid concentration risk."
            )
            if level is ConcentrationLevel.LOW:
                level = ConcentrationLevel.MODERATE

    largest = sorted(positions, key=lambda p: p.weight_pct, reverse=True)
    if largest:
        logger.debug(
            "Concentration assessed over %d position(s)",
            len(positions),
            extra=log_context(
                ticker=largest[0].ticker,
                weight_pct=largest[0].weight_pct,
                concentration=level,
            ),
        )
    return ConcentrationRisk(
        level=level,
        warnings=warnings,
        largest_positions=largest[:MAX_LARGEST_POSITIONS],
    )


def suggest_portfolio_action(
    ticker: str,
    portfolio: Portfolio,
    current_weight_pct: float,
    thresholds: Optional[ConcentrationThresholds] = None,
) -> PortfolioActionSuggestion:
    """Suggest buy / trim / hold for one ticker.

    Rules (first match wins):
        1. BUY  : ticker not held
        2. TRIM : weight > high concentration threshold
        3. HOLD : otherwise

    Every reasoning list cites the threshold it was judged against.
    """
    t = thresholds or DEFAULT_CONCENTRATION_THRESHOLDS
    symbol = (ticker or "").strip().upper()
    weight = current_weight_pct if math.isfinite(current_weight_pct) else 0.0

    if portfolio.find_holding(symbol) is None:
        reasoning = [f"{symbol} is not currently held in the portfolio."]
        if portfolio.holdings:
            reasoning.append(
                f"Consider how this addition fits alongside existing positions; "
                f"keep any single position under {t.high_pct:g}%."
            )
        else:
            reasoning.append("Adding the first holding will establish your portfolio baseline.")
        return PortfolioActionSuggestion(action=PortfolioAction.BUY, reasoning=reasoning)

    if weight > t.high_pct:
        return PortfolioActionSuggestion(
            action=PortfolioAction.TRIM,
            reasoning=[
                f"{symbol} represents {weight:.1f}% of the portfolio, above the "
                f"{t.high_pct:g}% concentration threshold.",
                "Consider trimming to stay diversified.",
            ],
        )

    return PortfolioActionSuggestion(
        action=PortfolioAction.HOLD,
        reasoning=[
            f"{symbol} sits at {weight:.1f}%, within the {t.high_pct:g}% "
            "concentration threshold for single positions.",
            "Maintain current size while monitoring fundamentals and risk exposure.",
        ],
    )


def build_portfolio_context(
    ticker: str,
    portfolio: Portfolio,
    prices: Mapping[str, float],
    betas: Optional[Mapping[str, float]] = None,
    thresholds: Optional[ConcentrationThresholds] = None,
) -> PortfolioContext:
    """Compute the per-ticker bridge the synthesizer consumes.

    The ticker's weight is the sum over all of its lots.
    """
    symbol = (ticker or "").strip().upper()
    allocations = calculate_allocation(portfolio, prices)
    weight = next((p.weight_pct for p in position_weights(allocations) if p.ticker == symbol), 0.0)
    suggestion = suggest_portfolio_action(symbol, portfolio, weight, thresholds)

    logger.debug(
        "Portfolio context built",
        extra=log_context(ticker=symbol, action=suggestion.action, weight_pct=weight),
    )

    return PortfolioContext(
        existing_holding=portfolio.find_holding(symbol),
        portfolio_metrics=calculate_portfolio_metrics(portfolio, prices, betas),
        suggested_action=suggestion.action,
        reasoning=suggestion.reasoning,
        current_weight_pct=_round(weight),
    )


# ── Helpers ───────────────────────────────────────────────────────────────────


def _normalize_prices(prices: Optional[Mapping[str, float]]) -> dict[str, float]:
    result: dict[str, float] = {}
    for key, value in (prices or {}).items():
        if isinstance(value, (int, float)) and math.isfinite(value) and value > 0:
            result[key.strip().upper()] = float(value)
    return result


def _normalize_betas(betas: Optional[Mapping[str, float]]) -> dict[str, float]:
    result: dict[str, float] = {}
    for key, value in (betas or {}).items():
        if isinstance(value, (int, float)) and math.isfinite(value):
            result[key.strip().upper()] = float(value)
    return result


def _round(value: float, digits: int = 2) -> float:
    return round(value, digits) if math.isfinite(value) else 0.0
