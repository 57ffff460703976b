from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from payofflab.schemas.margin import MarginLineOut, MarginRequest, MarginResponse
from payofflab.services.legs import legs_from_definition
from payofflab.services.margin import calculate_margin_requirement


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/requirement", response_model=MarginResponse)
def api_margin_requirement(req: MarginRequest) -> MarginResponse:
    try:
        legs = legs_from_definition(req.position)
    except KeyError as e:
        logger.info("margin request rejected: %s", e)
        raise HTTPException(status_code=400, detail=str(e.args[0])) from e

    res = calculate_margin_requirement(legs, req.current_price)
    return MarginResponse(
        margin=res.margin,
        margin_type=res.margin_type,
        breakdown=[MarginLineOut(description=l.description, amount=l.amount) for l in res.breakdown],
    )
