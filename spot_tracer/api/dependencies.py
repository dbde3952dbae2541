"""Shared FastAPI dependencies for the tracker API."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from spot_tracer.i18n import Language, translate
from spot_tracer.services.insights import InsightGenerator
from spot_tracer.services.ledger import (
    LedgerError,
    LedgerService,
    TransactionNotFoundError,
    UnknownSymbolError,
)
from spot_tracer.services.quotes import PricePoller


def get_ledger(request: Request) -> LedgerService:
    return request.app.state.ledger


def get_poller(request: Request) -> PricePoller:
    return request.app.state.poller


def get_insight_generator(request: Request) -> InsightGenerator:
    return request.app.state.insights


def ledger_http_error(exc: LedgerError, language: Language = "en") -> HTTPException:
    """Map a rejected ledger operation onto an HTTP error response.

    The detail carries the machine-readable code, the technical message and
    the user-facing text in the active language.
    """

    if isinstance(exc, (TransactionNotFoundError, UnknownSymbolError)):
        status_code = status.HTTP_404_NOT_FOUND
    else:
        status_code = status.HTTP_400_BAD_REQUEST
    return HTTPException(
        status_code=status_code,
        detail={"code": exc.code, "message": str(exc), "display": translate(language, exc.code)},
    )


__all__ = ["get_insight_generator", "get_ledger", "get_poller", "ledger_http_error"]
