"""Active symbol, language and live quote endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from spot_tracer.schemas import LanguageRequest, QuoteSchema, SymbolSelectRequest, TrackerStateSchema
from spot_tracer.services.ledger import LedgerError, LedgerService
from spot_tracer.services.quotes import PricePoller

from ..dependencies import get_ledger, get_poller, ledger_http_error

router = APIRouter()
logger = logging.getLogger(__name__)


def _state_schema(ledger: LedgerService) -> TrackerStateSchema:
    info = ledger.current_symbol_info
    price = ledger.state.market_price
    return TrackerStateSchema(
        current_symbol=info.symbol,
        alias=info.alias,
        has_api=info.has_api,
        language=ledger.state.language,
        market_price=float(price) if price is not None else None,
        insight=ledger.state.insight,
    )


@router.get("", response_model=TrackerStateSchema)
async def get_state(ledger: LedgerService = Depends(get_ledger)) -> TrackerStateSchema:
    return _state_schema(ledger)


@router.put("/symbol", response_model=TrackerStateSchema)
async def put_symbol(
    payload: SymbolSelectRequest,
    ledger: LedgerService = Depends(get_ledger),
    poller: PricePoller = Depends(get_poller),
) -> TrackerStateSchema:
    previous = ledger.state.current_symbol
    try:
        ledger.select_symbol(payload.symbol)
    except LedgerError as exc:
        raise ledger_http_error(exc, ledger.state.language) from exc
    if payload.symbol != previous:
        poller.trigger()
    return _state_schema(ledger)


@router.put("/language", response_model=TrackerStateSchema)
async def put_language(payload: LanguageRequest, ledger: LedgerService = Depends(get_ledger)) -> TrackerStateSchema:
    ledger.set_language(payload.language)
    return _state_schema(ledger)


@router.post("/language/toggle", response_model=TrackerStateSchema)
async def toggle_language(ledger: LedgerService = Depends(get_ledger)) -> TrackerStateSchema:
    ledger.toggle_language()
    return _state_schema(ledger)


@router.post("/quote/refresh", response_model=QuoteSchema)
async def refresh_quote(
    ledger: LedgerService = Depends(get_ledger),
    poller: PricePoller = Depends(get_poller),
) -> QuoteSchema:
    symbol = ledger.state.current_symbol
    price = await poller.poll_once()
    logger.info("Manual quote refresh for %s: %s", symbol, price)
    return QuoteSchema(
        symbol=symbol,
        market_price=float(price) if price is not None else None,
        available=price is not None,
    )


__all__ = ["router"]
