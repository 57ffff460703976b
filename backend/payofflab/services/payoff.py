from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from payofflab.services.legs import Leg, Position

logger = logging.getLogger(__name__)

# 100 equal steps -> 101 samples, both window edges included.
CURVE_STEPS = 100
DEFAULT_RANGE = 0.15


@dataclass(frozen=True)
class PayoffPoint:
    price: float
    pnl: float


def round_cents(x: float) -> float:
    # Half-up rounding (matches what the chart tooltip displays).
    return math.floor(x * 100.0 + 0.5) / 100.0


def _round_cents_array(x: np.ndarray) -> np.ndarray:
    return np.floor(x * 100.0 + 0.5) / 100.0


def _leg_pnl(leg: Leg, prices):
    """Expiry P&L of one leg; `prices` may be a float or an ndarray."""
    if leg.is_future:
        value = prices - leg.strike
    else:
        if leg.option_type == "call":
            intrinsic = np.maximum(prices - leg.strike, 0.0)
        else:
            intrinsic = np.maximum(leg.strike - prices, 0.0)
        value = intrinsic - leg.premium
    return value * leg.direction * leg.quantity * leg.instrument.multiplier


def calculate_leg_payoff(leg: Leg, underlying_price: float) -> float:
    return float(_leg_pnl(leg, float(underlying_price)))


def calculate_total_payoff(legs: Position, underlying_price: float) -> float:
    total = 0.0
    for leg in legs:
        total += calculate_leg_payoff(leg, underlying_price)
    return total


def _total_pnl_array(legs: Position, prices: np.ndarray) -> np.ndarray:
    total = np.zeros_like(prices)
    for leg in legs:
        total = total + _leg_pnl(leg, prices)
    return total


def _curve(legs: Position, lo: float, hi: float) -> list[PayoffPoint]:
    if not legs:
        return []
    prices = np.linspace(lo, hi, CURVE_STEPS + 1)
    pnl = _round_cents_array(_total_pnl_array(legs, prices))
    shown = _round_cents_array(prices)
    return [PayoffPoint(price=float(p), pnl=float(v)) for p, v in zip(shown, pnl)]


def generate_payoff_curve(
    legs: Position,
    center_price: float,
    price_range: float = DEFAULT_RANGE,
) -> list[PayoffPoint]:
    """Expiry P&L sampled over center * (1 -/+ price_range).

    Always 101 points for a non-empty position; an empty position gives [].
    Prices are increasing only for center_price >= 0 and price_range >= 0; other
    inputs are sampled as given, so a negative center comes back descending.
    Prices and P&L are rounded to cents; P&L is evaluated at the unrounded price.
    """
    lo = center_price * (1.0 - price_range)
    hi = center_price * (1.0 + price_range)
    points = _curve(legs, lo, hi)
    logger.debug("payoff curve: %d legs, [%s, %s], %d points", len(legs), lo, hi, len(points))
    return points


def generate_payoff_curve_between(legs: Position, min_price: float, max_price: float) -> list[PayoffPoint]:
    """Same sampling as generate_payoff_curve over an explicit (zoomed) window."""
    if max_price < min_price:
        raise ValueError("max_price must be >= min_price")
    return _curve(legs, min_price, max_price)
