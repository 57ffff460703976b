from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator


AssetClass = Literal["index", "etf", "future", "micro-future", "stock"]
LegKind = Literal["option", "future"]
OptionType = Literal["call", "put"]
Side = Literal["long", "short"]


class InstrumentSpec(BaseModel):
    symbol: str = Field(min_length=1, max_length=16)
    name: str = Field(default="")
    family: str | None = Field(default=None, description="Grouping used for spread pairing (e.g. SPX, NDX)")
    asset_class: AssetClass = Field(default="stock")
    multiplier: float = Field(gt=0, description="Dollars per 1.0 point move, per contract")
    tick_size: float = Field(default=0.01, gt=0)
    strike_interval: float = Field(default=1.0, gt=0)


class LegInput(BaseModel):
    """A position leg as sent by the UI.

    The instrument is named by `symbol` (looked up in the catalog) or sent inline
    as `instrument` for ad-hoc stocks. Inline wins when both are given.
    """

    leg_id: str = Field(description="Client-side leg id")
    symbol: str | None = Field(default=None)
    instrument: InstrumentSpec | None = Field(default=None)

    leg_kind: LegKind = Field(default="option")
    option_type: OptionType = Field(default="call", description="Ignored for futures")
    side: Side
    strike: float = Field(description="Option strike, or entry price for a future")
    premium: float = Field(default=0.0, ge=0.0, description="Per-unit premium in underlying points")
    quantity: int = Field(gt=0)
    futures_expiry: str | None = Field(default=None, description="Contract code, informational only")

    @model_validator(mode="after")
    def _check_instrument(self) -> "LegInput":
        if self.symbol is None and self.instrument is None:
            raise ValueError("either symbol or instrument is required")
        if self.leg_kind == "future":
            self.premium = 0.0
        return self


class PositionDefinition(BaseModel):
    name: str = Field(default="Untitled")
    legs: list[LegInput] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_leg_ids(self) -> "PositionDefinition":
        ids = [l.leg_id for l in self.legs]
        if len(ids) != len(set(ids)):
            raise ValueError("leg_id values must be unique within a position")
        return self


class InstrumentOut(BaseModel):
    symbol: str
    name: str
    family: str | None
    asset_class: AssetClass
    multiplier: float
    tick_size: float
    strike_interval: float


class InstrumentCatalogResponse(BaseModel):
    instruments: list[InstrumentOut]
    families: list[str]
    default_prices: dict[str, float]
    stock_default_price: float
    display_range: float
    zoom_presets: list[float]


class StockGroupOut(BaseModel):
    group_id: str
    name: str
    stocks: list[InstrumentOut]


class StockListResponse(BaseModel):
    query: str | None
    stocks: list[InstrumentOut]
    groups: list[StockGroupOut]


class StrikeLadderResponse(BaseModel):
    symbol: str
    price: float
    strike_interval: float
    atm_strike: float
    strikes: list[float]


class FuturesExpiry(BaseModel):
    code: str
    label: str
    expiry: str
