"""Transaction log management and tracker state.

This is the entry boundary in front of the cost-basis engine: it validates
drafts, assigns ids, persists every change and owns the presentation state
(selected symbol, language, last market price, cached insight). Methods are
synchronous and never yield to the event loop, so calls from concurrent
request handlers cannot interleave.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

from spot_tracer.catalog import find_symbol, resolve_symbol
from spot_tracer.i18n import Language, is_language, other_language
from spot_tracer.models import Portfolio, PortfolioStats, SymbolInfo, Transaction, TransactionKind
from spot_tracer.storage import PortfolioRepository

from .cost_basis import Number, compute, holding_shortfalls, to_decimal

logger = logging.getLogger(__name__)


class LedgerError(ValueError):
    """Base class for rejected ledger operations."""

    def __init__(self, message: str, *, code: str) -> None:
        super().__init__(message)
        self.code = code


class TransactionValidationError(LedgerError):
    """Raised when a draft violates the transaction invariants."""


class TransactionNotFoundError(LedgerError):
    """Raised when no transaction with the requested id exists for the symbol."""


class UnknownSymbolError(LedgerError):
    """Raised for symbols outside the supported catalog."""


@dataclass(frozen=True)
class TransactionDraft:
    """User-entered fields of a transaction, before an id is assigned."""

    date: date
    kind: TransactionKind
    price: Decimal
    quantity: Decimal


@dataclass
class TrackerState:
    portfolio: Portfolio = field(default_factory=dict)
    current_symbol: str = resolve_symbol(None).symbol
    language: Language = "en"
    market_price: Optional[Decimal] = None
    insight: Optional[str] = None


class LedgerService:
    """Create, edit and delete transactions and expose derived statistics."""

    def __init__(
        self,
        repository: PortfolioRepository,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._repository = repository
        self._clock = clock
        self.state = TrackerState(
            portfolio=repository.load_portfolio(),
            current_symbol=repository.load_current_symbol(),
            language=repository.load_language(),
        )
        self._last_id = max(
            (int(tx.id) for ledger in self.state.portfolio.values() for tx in ledger if tx.id.isdigit()),
            default=0,
        )
        self._revision = 0

    @property
    def revision(self) -> int:
        """Counter bumped whenever the active symbol or any ledger changes."""

        return self._revision

    @property
    def current_symbol_info(self) -> SymbolInfo:
        return resolve_symbol(self.state.current_symbol)

    # Transactions

    def list_transactions(self, symbol: str) -> list[Transaction]:
        _require_symbol(symbol)
        return list(self.state.portfolio.get(symbol, []))

    def add_transaction(self, symbol: str, draft: TransactionDraft) -> Transaction:
        _require_symbol(symbol)
        _validate_draft(draft)
        tx = Transaction(
            id=self._next_id(),
            date=draft.date,
            kind=draft.kind,
            price=draft.price,
            quantity=draft.quantity,
        )
        ledger = self.list_transactions(symbol)
        ledger.append(tx)
        self._commit(symbol, ledger)
        logger.info("Added %s transaction %s for %s", tx.kind.value, tx.id, symbol)
        return tx

    def update_transaction(self, symbol: str, transaction_id: str, draft: TransactionDraft) -> Transaction:
        _require_symbol(symbol)
        _validate_draft(draft)
        ledger = self.list_transactions(symbol)
        index = _index_of(ledger, transaction_id)
        tx = Transaction(
            id=transaction_id,
            date=draft.date,
            kind=draft.kind,
            price=draft.price,
            quantity=draft.quantity,
        )
        ledger[index] = tx
        self._commit(symbol, ledger)
        logger.info("Updated transaction %s for %s", transaction_id, symbol)
        return tx

    def delete_transaction(self, symbol: str, transaction_id: str) -> None:
        _require_symbol(symbol)
        ledger = self.list_transactions(symbol)
        del ledger[_index_of(ledger, transaction_id)]
        self._commit(symbol, ledger)
        logger.info("Deleted transaction %s for %s", transaction_id, symbol)

    def stats(self, symbol: Optional[str] = None) -> PortfolioStats:
        """Run the engine on a ledger; only the active symbol gets a market price."""

        target = symbol or self.state.current_symbol
        _require_symbol(target)
        market_price = self.state.market_price if target == self.state.current_symbol else None
        return compute(self.state.portfolio.get(target, []), market_price)

    # Presentation state

    def select_symbol(self, symbol: str) -> SymbolInfo:
        info = _require_symbol(symbol)
        if symbol != self.state.current_symbol:
            self.state.current_symbol = symbol
            self.state.market_price = None
            self.state.insight = None
            self._repository.save_current_symbol(symbol)
            self._revision += 1
            logger.info("Active symbol changed to %s", symbol)
        return info

    def set_language(self, language: Language) -> Language:
        if not is_language(language):
            raise TransactionValidationError(f"Unsupported language: {language}", code="unknown_language")
        self.state.language = language
        self._repository.save_language(language)
        return language

    def toggle_language(self) -> Language:
        return self.set_language(other_language(self.state.language))

    def set_market_price(self, symbol: str, price: Optional[Number]) -> bool:
        """Record the latest quote for ``symbol``.

        Quotes for a symbol that is no longer active are discarded; returns
        whether the state changed.
        """

        if symbol != self.state.current_symbol:
            return False
        self.state.market_price = to_decimal(price) if price is not None else None
        return True

    def set_insight(self, symbol: str, text: Optional[str], *, revision: Optional[int] = None) -> bool:
        """Cache commentary for the active symbol.

        When ``revision`` is given and the ledger changed since it was read,
        the text describes an outdated position and is discarded.
        """

        if symbol != self.state.current_symbol:
            return False
        if revision is not None and revision != self._revision:
            logger.info("Discarding insight for %s: ledger changed while it was generated", symbol)
            return False
        self.state.insight = text
        return True

    # Helpers

    def _commit(self, symbol: str, ledger: list[Transaction]) -> None:
        new_shortfalls = {tx.id for tx in holding_shortfalls(ledger)}
        existing_shortfalls = {tx.id for tx in holding_shortfalls(self.state.portfolio.get(symbol, []))}
        if new_shortfalls - existing_shortfalls:
            raise TransactionValidationError(
                "Sell quantity exceeds the position held on that date",
                code="oversell",
            )
        portfolio = dict(self.state.portfolio)
        portfolio[symbol] = ledger
        self._repository.save_portfolio(portfolio)
        self.state.portfolio = portfolio
        self._revision += 1
        if symbol == self.state.current_symbol:
            self.state.insight = None

    def _next_id(self) -> str:
        candidate = int(self._clock() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return str(candidate)


def _require_symbol(symbol: str) -> SymbolInfo:
    info = find_symbol(symbol)
    if info is None:
        raise UnknownSymbolError(f"Unsupported symbol: {symbol}", code="unknown_symbol")
    return info


def _validate_draft(draft: TransactionDraft) -> None:
    if not isinstance(draft.kind, TransactionKind):
        raise TransactionValidationError(f"Unsupported transaction type: {draft.kind}", code="invalid_type")
    if not draft.price.is_finite() or draft.price <= 0:
        raise TransactionValidationError("Price must be greater than zero", code="invalid_price")
    if not draft.quantity.is_finite() or draft.quantity <= 0:
        raise TransactionValidationError("Quantity must be greater than zero", code="invalid_quantity")


def _index_of(ledger: list[Transaction], transaction_id: str) -> int:
    for index, tx in enumerate(ledger):
        if tx.id == transaction_id:
            return index
    raise TransactionNotFoundError(f"Transaction {transaction_id} not found", code="transaction_not_found")


__all__ = [
    "LedgerError",
    "LedgerService",
    "TrackerState",
    "TransactionDraft",
    "TransactionNotFoundError",
    "TransactionValidationError",
    "UnknownSymbolError",
]
