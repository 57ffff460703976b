from __future__ import annotations

"""Approximate Reg-T style margin for a multi-leg position.

This is a display figure, not a broker-accurate requirement:
  - vertical spreads are margined at strike width,
  - naked shorts at max(20% of underlying + premium - OTM, 10% of strike + premium),
  - unpaired longs at the premium paid.
"""

import logging
from dataclasses import dataclass, field
from typing import Literal

from payofflab.services.legs import Leg, Position, format_price, premium_value
from payofflab.services.payoff import round_cents

logger = logging.getLogger(__name__)

MarginType = Literal["long-only", "spread", "naked", "cash-secured"]

# Highest first. "cash-secured" is reserved: nothing below produces it yet.
MARGIN_TYPE_PRIORITY: tuple[MarginType, ...] = ("naked", "spread", "cash-secured", "long-only")

NAKED_UNDERLYING_PCT = 0.20
NAKED_STRIKE_PCT = 0.10


@dataclass(frozen=True)
class MarginLine:
    description: str
    amount: float


@dataclass(frozen=True)
class MarginResult:
    margin: float
    margin_type: MarginType
    breakdown: list[MarginLine] = field(default_factory=list)


def resolve_margin_type(observed: set[MarginType]) -> MarginType:
    for t in MARGIN_TYPE_PRIORITY:
        if t in observed:
            return t
    return "long-only"


def _is_spread_partner(short: Leg, long: Leg) -> bool:
    if short.leg_kind != long.leg_kind:
        return False
    if not short.is_future and short.option_type != long.option_type:
        return False
    return short.instrument.family == long.instrument.family and short.quantity == long.quantity


def pair_spreads(short_legs: list[Leg], long_legs: list[Leg]) -> list[tuple[int, int]]:
    """Greedy first-match pairing of shorts with longs.

    Returns (short index, long index) pairs in short-leg order. Each short takes
    the earliest unclaimed long that passes `_is_spread_partner`. No search over
    alternative assignments is made, so the result can carry more margin than an
    optimal matching would.
    """
    claimed: set[int] = set()
    pairs: list[tuple[int, int]] = []
    for si, short in enumerate(short_legs):
        for li, long in enumerate(long_legs):
            if li in claimed or not _is_spread_partner(short, long):
                continue
            claimed.add(li)
            pairs.append((si, li))
            logger.debug("paired short %s with long %s", short.leg_id, long.leg_id)
            break
    return pairs


def spread_margin(short: Leg, long: Leg) -> float:
    return abs(short.strike - long.strike) * short.quantity * short.instrument.multiplier


def naked_margin(leg: Leg, current_price: float) -> float:
    mult = leg.instrument.multiplier
    qty = leg.quantity
    underlying_value = current_price * mult * qty
    prem = premium_value(leg)

    otm = 0.0
    if not leg.is_future:
        if leg.option_type == "call" and leg.strike > current_price:
            otm = (leg.strike - current_price) * mult * qty
        elif leg.option_type == "put" and leg.strike < current_price:
            otm = (current_price - leg.strike) * mult * qty

    method1 = underlying_value * NAKED_UNDERLYING_PCT + prem - otm
    method2 = leg.strike * mult * qty * NAKED_STRIKE_PCT + prem
    return max(method1, method2)


def calculate_margin_requirement(legs: Position, current_price: float) -> MarginResult:
    if not legs:
        return MarginResult(margin=0.0, margin_type="long-only", breakdown=[])

    short_legs = [l for l in legs if l.side == "short"]
    long_legs = [l for l in legs if l.side == "long"]

    if not short_legs:
        paid = 0.0
        for leg in long_legs:
            paid += premium_value(leg)
        return MarginResult(
            margin=round_cents(paid),
            margin_type="long-only",
            breakdown=[MarginLine("Long options (premium paid)", paid)],
        )

    observed: set[MarginType] = {"long-only"}
    spread_lines: list[MarginLine] = []
    naked_lines: list[MarginLine] = []
    long_lines: list[MarginLine] = []

    pairs = pair_spreads(short_legs, long_legs)
    paired_shorts = {si for si, _ in pairs}
    paired_longs = {li for _, li in pairs}

    for si, li in pairs:
        short, long = short_legs[si], long_legs[li]
        spread_lines.append(
            MarginLine(
                f"{short.type_label.upper()} spread ({format_price(short.strike)}/{format_price(long.strike)})",
                spread_margin(short, long),
            )
        )
        observed.add("spread")

    for si, leg in enumerate(short_legs):
        if si in paired_shorts:
            continue
        naked_lines.append(
            MarginLine(
                f"Naked {leg.type_label} {leg.instrument.symbol} {format_price(leg.strike)}",
                naked_margin(leg, current_price),
            )
        )
        observed.add("naked")

    for li, leg in enumerate(long_legs):
        if li in paired_longs:
            continue
        long_lines.append(
            MarginLine(
                f"Long {leg.type_label} {leg.instrument.symbol} {format_price(leg.strike)}",
                premium_value(leg),
            )
        )

    breakdown = spread_lines + naked_lines + long_lines
    total = 0.0
    for line in breakdown:
        total += line.amount

    return MarginResult(
        margin=round_cents(total),
        margin_type=resolve_margin_type(observed),
        breakdown=breakdown,
    )
