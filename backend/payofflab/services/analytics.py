from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from payofflab.services.legs import Position, premium_value
from payofflab.services.payoff import (
    PayoffPoint,
    calculate_total_payoff,
    generate_payoff_curve,
    round_cents,
)

logger = logging.getLogger(__name__)

BREAKEVEN_RANGE = 0.30
EXTREMES_RANGE = 0.50
# Number of edge samples inspected by the unbounded-tail test.
TAIL_POINTS = 5

SIMULATOR_BAND = 0.15
SIMULATOR_STEP = 0.25


@dataclass(frozen=True)
class Bounded:
    value: float


@dataclass(frozen=True)
class Unbounded:
    pass


PnLExtreme = Union[Bounded, Unbounded]


def _zero_crossing(p0: PayoffPoint, p1: PayoffPoint) -> float:
    a = abs(p0.pnl)
    denom = a + abs(p1.pnl)
    ratio = a / denom if denom > 0 else 0.0
    return p0.price + ratio * (p1.price - p0.price)


def calculate_breakevens(legs: Position, current_price: float) -> list[float]:
    """Prices where the expiry P&L crosses zero, scanning a ±30% window left to right.

    Each crossing is located by linear interpolation between the two samples that
    bracket it, so precision is bounded by the sample spacing (~0.6% of price).
    A sample at exactly 0 counts as non-negative.
    """
    curve = generate_payoff_curve(legs, current_price, BREAKEVEN_RANGE)
    out: list[float] = []
    for p0, p1 in zip(curve, curve[1:]):
        if (p0.pnl < 0 <= p1.pnl) or (p1.pnl < 0 <= p0.pnl):
            out.append(round_cents(_zero_crossing(p0, p1)))
    return out


def _is_monotone(values: list[float], *, increasing: bool) -> bool:
    pairs = zip(values, values[1:])
    if increasing:
        return all(b >= a for a, b in pairs)
    return all(b <= a for a, b in pairs)


def calculate_max_profit(legs: Position, current_price: float) -> PnLExtreme:
    """Best expiry P&L over ±50%.

    If the top `TAIL_POINTS` samples are still non-decreasing and the best value is
    a profit, the upside is treated as unbounded. A flat tail passes the test, so
    a capped payoff that plateaus inside the window also reads as unbounded.
    """
    curve = generate_payoff_curve(legs, current_price, EXTREMES_RANGE)
    if not curve:
        return Bounded(0.0)
    pnl = [p.pnl for p in curve]
    best = max(pnl)
    if best > 0 and _is_monotone(pnl[-TAIL_POINTS:], increasing=True):
        return Unbounded()
    return Bounded(best)


def calculate_max_loss(legs: Position, current_price: float) -> PnLExtreme:
    """Worst expiry P&L over ±50% (raw, negative for a loss).

    Unbounded when the P&L is non-increasing across the lowest `TAIL_POINTS`
    samples (read left to right) and the worst value is a loss. A flat tail
    passes the test.
    """
    curve = generate_payoff_curve(legs, current_price, EXTREMES_RANGE)
    if not curve:
        return Bounded(0.0)
    pnl = [p.pnl for p in curve]
    worst = min(pnl)
    if worst < 0 and _is_monotone(pnl[:TAIL_POINTS], increasing=False):
        return Unbounded()
    return Bounded(worst)


def calculate_net_premium(legs: Position) -> float:
    """Credit received (positive) or debit paid (negative) when opening the position."""
    total = 0.0
    for leg in legs:
        cost = premium_value(leg)
        total += cost if leg.side == "short" else -cost
    return total


@dataclass(frozen=True)
class PositionSummary:
    current_price: float
    simulated_price: float
    price_change: float
    price_change_pct: float
    current_pnl: float
    simulated_pnl: float
    breakevens: list[float]
    max_profit: PnLExtreme
    max_loss: PnLExtreme
    net_premium: float


def summarize_position(
    legs: Position,
    current_price: float,
    simulated_price: float | None = None,
) -> PositionSummary | None:
    if not legs:
        return None

    simulated = current_price if simulated_price is None else simulated_price
    change = simulated - current_price
    change_pct = change / current_price * 100.0 if current_price else 0.0

    return PositionSummary(
        current_price=float(current_price),
        simulated_price=float(simulated),
        price_change=change,
        price_change_pct=change_pct,
        current_pnl=calculate_total_payoff(legs, current_price),
        simulated_pnl=calculate_total_payoff(legs, simulated),
        breakevens=calculate_breakevens(legs, current_price),
        max_profit=calculate_max_profit(legs, current_price),
        max_loss=calculate_max_loss(legs, current_price),
        net_premium=calculate_net_premium(legs),
    )


# ----------------------
# Chart window helpers
# ----------------------


@dataclass(frozen=True)
class PriceWindow:
    min_price: float
    max_price: float

    def __post_init__(self) -> None:
        if self.max_price < self.min_price:
            raise ValueError("max_price must be >= min_price")

    @property
    def center(self) -> float:
        return (self.min_price + self.max_price) / 2.0

    @property
    def width(self) -> float:
        return self.max_price - self.min_price


def default_window(current_price: float, price_range: float) -> PriceWindow:
    return PriceWindow(current_price * (1.0 - price_range), current_price * (1.0 + price_range))


def zoom_in(window: PriceWindow) -> PriceWindow:
    """Halve the visible width around the same centre."""
    c, w = window.center, window.width
    return PriceWindow(c - w * 0.25, c + w * 0.25)


def zoom_out(window: PriceWindow) -> PriceWindow:
    """Double the visible width around the same centre; prices never go below 0."""
    c, w = window.center, window.width
    return PriceWindow(max(0.0, c - w), c + w)


def simulator_bounds(current_price: float) -> tuple[float, float, float]:
    """(min, max, step) for the what-if price slider."""
    return (
        current_price * (1.0 - SIMULATOR_BAND),
        current_price * (1.0 + SIMULATOR_BAND),
        SIMULATOR_STEP,
    )
