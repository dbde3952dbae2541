"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from .insights import router as insights_router
from .portfolio import router as portfolio_router
from .state import router as state_router
from .symbols import router as symbols_router

api_router = APIRouter()
api_router.include_router(symbols_router, prefix="/symbols", tags=["symbols"])
api_router.include_router(state_router, prefix="/state", tags=["state"])
api_router.include_router(portfolio_router, prefix="/portfolio", tags=["portfolio"])
api_router.include_router(insights_router, prefix="/insights", tags=["insights"])

__all__ = ["api_router"]
