from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from payofflab.meta.instrument_catalog import Instrument, resolve_instrument
from payofflab.schemas.instruments import InstrumentSpec, LegKind, OptionType, PositionDefinition, Side


@dataclass(frozen=True)
class Leg:
    """One line of a position.

    For a future leg `strike` holds the entry price; premium is forced to 0 and
    `option_type` is ignored everywhere.
    """

    leg_id: str
    instrument: Instrument
    side: Side
    strike: float
    quantity: int
    option_type: OptionType = "call"
    premium: float = 0.0
    leg_kind: LegKind = "option"
    futures_expiry: str | None = None

    def __post_init__(self) -> None:
        if self.leg_kind == "future" and self.premium != 0.0:
            object.__setattr__(self, "premium", 0.0)

    @property
    def is_future(self) -> bool:
        return self.leg_kind == "future"

    @property
    def direction(self) -> float:
        return 1.0 if self.side == "long" else -1.0

    @property
    def type_label(self) -> str:
        return "future" if self.is_future else self.option_type


Position = Sequence[Leg]


def premium_value(leg: Leg) -> float:
    """Premium in currency units (points x quantity x multiplier)."""
    return leg.premium * leg.quantity * leg.instrument.multiplier


def instrument_from_spec(spec: InstrumentSpec) -> Instrument:
    return Instrument(
        symbol=spec.symbol.strip().upper(),
        name=spec.name or spec.symbol,
        asset_class=spec.asset_class,
        multiplier=float(spec.multiplier),
        tick_size=float(spec.tick_size),
        strike_interval=float(spec.strike_interval),
        family=spec.family,
    )


def legs_from_definition(position: PositionDefinition) -> list[Leg]:
    """Turn validated request legs into engine legs.

    Raises KeyError when a leg names a symbol the catalog does not know.
    """
    out: list[Leg] = []
    for l in position.legs:
        if l.instrument is not None:
            inst = instrument_from_spec(l.instrument)
        else:
            inst = resolve_instrument(str(l.symbol))
        out.append(
            Leg(
                leg_id=l.leg_id,
                instrument=inst,
                side=l.side,
                strike=float(l.strike),
                quantity=int(l.quantity),
                option_type=l.option_type,
                premium=float(l.premium),
                leg_kind=l.leg_kind,
                futures_expiry=l.futures_expiry,
            )
        )
    return out


def format_price(x: float) -> str:
    """Print a price the way the UI prints numbers: 5850, 5852.5."""
    x = float(x)
    if x.is_integer():
        return str(int(x))
    return repr(x)
