from fastapi import APIRouter

from payofflab.api.endpoints import margin, meta, payoff

api_router = APIRouter()

api_router.include_router(meta.router, prefix="/v1/meta", tags=["meta"])
api_router.include_router(payoff.router, prefix="/v1/payoff", tags=["payoff"])
api_router.include_router(margin.router, prefix="/v1/margin", tags=["margin"])
