from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from payofflab.api.deps import get_settings
from payofflab.config import Settings
from payofflab.meta.instrument_catalog import (
    DEFAULT_PRICES,
    FAMILIES,
    INSTRUMENTS,
    POPULAR_STOCKS,
    STOCK_DEFAULT_PRICE,
    STOCK_GROUPS,
    futures_expiries,
    instrument_to_dict,
    nearby_strikes,
    resolve_instrument,
    round_to_strike,
    search_stocks,
)
from payofflab.schemas.instruments import (
    FuturesExpiry,
    InstrumentCatalogResponse,
    InstrumentOut,
    StockGroupOut,
    StockListResponse,
    StrikeLadderResponse,
)


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/instruments", response_model=InstrumentCatalogResponse)
def get_instrument_catalog(settings: Settings = Depends(get_settings)) -> InstrumentCatalogResponse:
    """Static instrument metadata used by the instrument picker and chart controls."""
    return InstrumentCatalogResponse(
        instruments=[InstrumentOut(**instrument_to_dict(i)) for i in INSTRUMENTS],
        families=list(FAMILIES),
        default_prices=dict(DEFAULT_PRICES),
        stock_default_price=STOCK_DEFAULT_PRICE,
        display_range=settings.display_range,
        zoom_presets=list(settings.zoom_presets),
    )


@router.get("/stocks", response_model=StockListResponse)
def get_stocks(q: str | None = Query(default=None, max_length=32)) -> StockListResponse:
    """Preset stocks; with `q`, only presets whose symbol or name match."""
    stocks = search_stocks(q) if q else list(POPULAR_STOCKS)
    groups = [
        StockGroupOut(
            group_id=group_id,
            name=str(group["name"]),
            stocks=[InstrumentOut(**instrument_to_dict(s)) for s in group["stocks"]],  # type: ignore[union-attr]
        )
        for group_id, group in STOCK_GROUPS.items()
    ]
    return StockListResponse(
        query=q,
        stocks=[InstrumentOut(**instrument_to_dict(s)) for s in stocks],
        groups=groups,
    )


@router.get("/strikes", response_model=StrikeLadderResponse)
def get_strike_ladder(
    symbol: str,
    price: float = Query(gt=0),
    count: int = Query(default=10, ge=1, le=100),
) -> StrikeLadderResponse:
    try:
        inst = resolve_instrument(symbol, price=price)
    except KeyError as e:
        logger.info("strike ladder for unknown symbol %r", symbol)
        raise HTTPException(status_code=400, detail=f"unknown instrument symbol: {symbol}") from e

    return StrikeLadderResponse(
        symbol=inst.symbol,
        price=price,
        strike_interval=inst.strike_interval,
        atm_strike=round_to_strike(price, inst.strike_interval),
        strikes=nearby_strikes(price, inst.strike_interval, count),
    )


@router.get("/futures-expiries", response_model=list[FuturesExpiry])
def get_futures_expiries(count: int = Query(default=4, ge=1, le=12)) -> list[FuturesExpiry]:
    return [FuturesExpiry(**e) for e in futures_expiries(count=count)]
