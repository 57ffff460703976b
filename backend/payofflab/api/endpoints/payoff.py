from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from payofflab.api.deps import get_settings
from payofflab.config import Settings
from payofflab.schemas.payoff import (
    PayoffCurveRequest,
    PayoffCurveResponse,
    PayoffPointOut,
    PnLExtremeOut,
    PositionSummaryRequest,
    PositionSummaryResponse,
)
from payofflab.services.analytics import (
    PnLExtreme,
    PriceWindow,
    Unbounded,
    default_window,
    simulator_bounds,
    summarize_position,
    zoom_in,
    zoom_out,
)
from payofflab.services.legs import legs_from_definition
from payofflab.services.payoff import generate_payoff_curve, generate_payoff_curve_between


logger = logging.getLogger(__name__)

router = APIRouter()


def _extreme_out(x: PnLExtreme) -> PnLExtremeOut:
    if isinstance(x, Unbounded):
        return PnLExtremeOut(unlimited=True, value=None)
    return PnLExtremeOut(unlimited=False, value=x.value)


@router.post("/curve", response_model=PayoffCurveResponse)
def api_payoff_curve(req: PayoffCurveRequest, settings: Settings = Depends(get_settings)) -> PayoffCurveResponse:
    try:
        legs = legs_from_definition(req.position)
    except KeyError as e:
        logger.info("payoff curve rejected: %s", e)
        raise HTTPException(status_code=400, detail=str(e.args[0])) from e

    if req.min_price is not None and req.max_price is not None:
        window = PriceWindow(req.min_price, req.max_price)
        points = generate_payoff_curve_between(legs, window.min_price, window.max_price)
    else:
        price_range = req.price_range if req.price_range is not None else settings.display_range
        window = default_window(req.center_price, price_range)
        points = generate_payoff_curve(legs, req.center_price, price_range)

    zin = zoom_in(window)
    zout = zoom_out(window)
    return PayoffCurveResponse(
        min_price=window.min_price,
        max_price=window.max_price,
        points=[PayoffPointOut(price=p.price, pnl=p.pnl) for p in points],
        zoom_in=(zin.min_price, zin.max_price),
        zoom_out=(zout.min_price, zout.max_price),
    )


@router.post("/summary", response_model=PositionSummaryResponse)
def api_position_summary(req: PositionSummaryRequest) -> PositionSummaryResponse:
    try:
        legs = legs_from_definition(req.position)
    except KeyError as e:
        logger.info("position summary rejected: %s", e)
        raise HTTPException(status_code=400, detail=str(e.args[0])) from e

    sim_min, sim_max, sim_step = simulator_bounds(req.current_price)
    simulated = req.simulated_price if req.simulated_price is not None else req.current_price
    change = simulated - req.current_price

    summary = summarize_position(legs, req.current_price, simulated)
    if summary is None:
        return PositionSummaryResponse(
            has_position=False,
            current_price=req.current_price,
            simulated_price=simulated,
            price_change=change,
            price_change_pct=change / req.current_price * 100.0,
            simulator_min=sim_min,
            simulator_max=sim_max,
            simulator_step=sim_step,
        )

    return PositionSummaryResponse(
        has_position=True,
        current_price=summary.current_price,
        simulated_price=summary.simulated_price,
        price_change=summary.price_change,
        price_change_pct=summary.price_change_pct,
        current_pnl=summary.current_pnl,
        simulated_pnl=summary.simulated_pnl,
        breakevens=summary.breakevens,
        max_profit=_extreme_out(summary.max_profit),
        max_loss=_extreme_out(summary.max_loss),
        net_premium=summary.net_premium,
        simulator_min=sim_min,
        simulator_max=sim_max,
        simulator_step=sim_step,
    )
