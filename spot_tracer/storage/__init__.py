"""Persistence layer for the tracker's local state."""

from .kv import InMemoryStore, JsonFileStore, KeyValueStore
from .repository import (
    CURRENT_SYMBOL_KEY,
    LANGUAGE_KEY,
    PORTFOLIO_KEY,
    PortfolioRepository,
    transaction_from_record,
    transaction_to_record,
)

__all__ = [
    "CURRENT_SYMBOL_KEY",
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "LANGUAGE_KEY",
    "PORTFOLIO_KEY",
    "PortfolioRepository",
    "transaction_from_record",
    "transaction_to_record",
]
