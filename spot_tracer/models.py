"""Domain models shared by the cost-basis engine and its collaborators."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Tuple


class TransactionKind(str, Enum):
    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class Transaction:
    """A recorded buy or sell for one symbol.

    Records are immutable; an edit replaces the whole record under the same id.
    """

    id: str
    date: date
    kind: TransactionKind
    price: Decimal
    quantity: Decimal


@dataclass(frozen=True)
class SymbolInfo:
    """Static catalog entry for a tradable symbol."""

    symbol: str
    alias: str
    has_api: bool


@dataclass(frozen=True)
class ProcessedTransaction:
    """A transaction augmented with the position state right after it was applied."""

    transaction: Transaction
    post_trade_average_price: Decimal
    cumulative_realized_pl: Decimal
    transaction_pl: Optional[Decimal] = None

    @property
    def id(self) -> str:
        return self.transaction.id

    @property
    def date(self) -> date:
        return self.transaction.date

    @property
    def kind(self) -> TransactionKind:
        return self.transaction.kind

    @property
    def price(self) -> Decimal:
        return self.transaction.price

    @property
    def quantity(self) -> Decimal:
        return self.transaction.quantity


@dataclass(frozen=True)
class PortfolioStats:
    """Derived summary of a symbol ledger at the current instant.

    ``market_value`` and ``unrealized_pl`` are ``None`` when no market price
    is known, which is distinct from a zero value.
    """

    average_price: Decimal
    total_quantity: Decimal
    realized_pl: Decimal
    processed_transactions: Tuple[ProcessedTransaction, ...]
    market_value: Optional[Decimal] = None
    unrealized_pl: Optional[Decimal] = None


Ledger = List[Transaction]
Portfolio = Dict[str, Ledger]


__all__ = [
    "Ledger",
    "Portfolio",
    "PortfolioStats",
    "ProcessedTransaction",
    "SymbolInfo",
    "Transaction",
    "TransactionKind",
]
