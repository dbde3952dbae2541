"""Pydantic schema exports."""

from .portfolio import (
    PortfolioSummarySchema,
    ProcessedTransactionSchema,
    SymbolSchema,
    TransactionCreateRequest,
    TransactionSchema,
    TransactionUpdateRequest,
)
from .state import InsightSchema, LanguageRequest, QuoteSchema, SymbolSelectRequest, TrackerStateSchema

__all__ = [
    "InsightSchema",
    "LanguageRequest",
    "PortfolioSummarySchema",
    "ProcessedTransactionSchema",
    "QuoteSchema",
    "SymbolSchema",
    "SymbolSelectRequest",
    "TrackerStateSchema",
    "TransactionCreateRequest",
    "TransactionSchema",
    "TransactionUpdateRequest",
]
