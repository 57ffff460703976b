from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from payofflab.schemas.instruments import PositionDefinition


class PayoffCurveRequest(BaseModel):
    """Curve over center_price * (1 -/+ price_range), or over an explicit window.

    `min_price`/`max_price` are the zoomed chart window; when both are set they
    take precedence over center_price/price_range.
    """

    position: PositionDefinition
    center_price: float = Field(gt=0)
    price_range: float | None = Field(
        default=None,
        gt=0.0,
        le=1.0,
        description="Window half-width as a fraction (0.15 = ±15%). Defaults to the configured display range.",
    )
    min_price: float | None = Field(default=None, ge=0.0)
    max_price: float | None = Field(default=None, gt=0.0)

    @model_validator(mode="after")
    def _check_window(self) -> "PayoffCurveRequest":
        if (self.min_price is None) != (self.max_price is None):
            raise ValueError("min_price and max_price must be given together")
        if self.min_price is not None and self.max_price is not None and self.max_price <= self.min_price:
            raise ValueError("max_price must be > min_price")
        return self


class PayoffPointOut(BaseModel):
    price: float
    pnl: float


class PayoffCurveResponse(BaseModel):
    min_price: float
    max_price: float
    points: list[PayoffPointOut]
    zoom_in: tuple[float, float] | None = Field(default=None, description="Next window if the user zooms in")
    zoom_out: tuple[float, float] | None = Field(default=None, description="Next window if the user zooms out")


class PnLExtremeOut(BaseModel):
    unlimited: bool
    value: float | None = Field(default=None, description="Null when unlimited")


class PositionSummaryRequest(BaseModel):
    position: PositionDefinition
    current_price: float = Field(gt=0)
    simulated_price: float | None = Field(default=None, gt=0)


class PositionSummaryResponse(BaseModel):
    has_position: bool

    current_price: float
    simulated_price: float
    price_change: float
    price_change_pct: float

    current_pnl: float | None = None
    simulated_pnl: float | None = None
    breakevens: list[float] = Field(default_factory=list)
    max_profit: PnLExtremeOut | None = None
    max_loss: PnLExtremeOut | None = None
    net_premium: float | None = Field(default=None, description="Positive = credit received, negative = debit paid")

    simulator_min: float
    simulator_max: float
    simulator_step: float
