"""Transaction log, summary and CSV export endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response, status

from spot_tracer.catalog import resolve_symbol
from spot_tracer.models import TransactionKind
from spot_tracer.schemas import (
    PortfolioSummarySchema,
    TransactionCreateRequest,
    TransactionSchema,
    TransactionUpdateRequest,
)
from spot_tracer.services.export import export_filename, render_transactions_csv
from spot_tracer.services.ledger import LedgerError, LedgerService, TransactionDraft

from ..dependencies import get_ledger, ledger_http_error

router = APIRouter()


def _draft(payload: TransactionCreateRequest) -> TransactionDraft:
    return TransactionDraft(
        date=payload.date,
        kind=TransactionKind(payload.type),
        price=payload.price,
        quantity=payload.quantity,
    )


@router.get("/{symbol}/transactions", response_model=list[TransactionSchema])
async def get_transactions(symbol: str, ledger: LedgerService = Depends(get_ledger)) -> list[TransactionSchema]:
    try:
        transactions = ledger.list_transactions(symbol)
    except LedgerError as exc:
        raise ledger_http_error(exc, ledger.state.language) from exc
    return [TransactionSchema.from_transaction(tx) for tx in transactions]


@router.post("/{symbol}/transactions", response_model=TransactionSchema, status_code=status.HTTP_201_CREATED)
async def post_transaction(
    symbol: str,
    payload: TransactionCreateRequest,
    ledger: LedgerService = Depends(get_ledger),
) -> TransactionSchema:
    try:
        tx = ledger.add_transaction(symbol, _draft(payload))
    except LedgerError as exc:
        raise ledger_http_error(exc, ledger.state.language) from exc
    return TransactionSchema.from_transaction(tx)


@router.put("/{symbol}/transactions/{transaction_id}", response_model=TransactionSchema)
async def put_transaction(
    symbol: str,
    transaction_id: str,
    payload: TransactionUpdateRequest,
    ledger: LedgerService = Depends(get_ledger),
) -> TransactionSchema:
    try:
        tx = ledger.update_transaction(symbol, transaction_id, _draft(payload))
    except LedgerError as exc:
        raise ledger_http_error(exc, ledger.state.language) from exc
    return TransactionSchema.from_transaction(tx)


@router.delete("/{symbol}/transactions/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    symbol: str,
    transaction_id: str,
    ledger: LedgerService = Depends(get_ledger),
) -> Response:
    try:
        ledger.delete_transaction(symbol, transaction_id)
    except LedgerError as exc:
        raise ledger_http_error(exc, ledger.state.language) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{symbol}/summary", response_model=PortfolioSummarySchema)
async def get_summary(symbol: str, ledger: LedgerService = Depends(get_ledger)) -> PortfolioSummarySchema:
    try:
        stats = ledger.stats(symbol)
    except LedgerError as exc:
        raise ledger_http_error(exc, ledger.state.language) from exc
    market_price = ledger.state.market_price if symbol == ledger.state.current_symbol else None
    return PortfolioSummarySchema.from_stats(resolve_symbol(symbol), stats, market_price)


@router.get("/{symbol}/export.csv")
async def export_csv(symbol: str, ledger: LedgerService = Depends(get_ledger)) -> Response:
    try:
        stats = ledger.stats(symbol)
    except LedgerError as exc:
        raise ledger_http_error(exc, ledger.state.language) from exc
    if not stats.processed_transactions:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No transactions to export")
    filename = export_filename(resolve_symbol(symbol).alias, date.today())
    return Response(
        content=render_transactions_csv(stats.processed_transactions),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


__all__ = ["router"]
