from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from payofflab.schemas.instruments import PositionDefinition


MarginType = Literal["long-only", "spread", "naked", "cash-secured"]


class MarginRequest(BaseModel):
    position: PositionDefinition
    current_price: float = Field(gt=0, description="Underlying price used for naked-short requirements")


class MarginLineOut(BaseModel):
    description: str
    amount: float


class MarginResponse(BaseModel):
    margin: float
    margin_type: MarginType
    breakdown: list[MarginLineOut]
