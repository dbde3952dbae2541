"""Typed persistence of the portfolio, selected symbol and language."""

from __future__ import annotations

import json
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from spot_tracer.catalog import resolve_symbol
from spot_tracer.i18n import Language, detect_language, is_language
from spot_tracer.models import Portfolio, Transaction, TransactionKind

from .kv import KeyValueStore

logger = logging.getLogger(__name__)

PORTFOLIO_KEY = "spot_tracer_portfolio_v6"
CURRENT_SYMBOL_KEY = "spot_tracer_current_symbol_v6"
LANGUAGE_KEY = "spot_tracer_lang"


def transaction_to_record(tx: Transaction) -> dict[str, Any]:
    return {
        "id": tx.id,
        "date": tx.date.isoformat(),
        "type": tx.kind.value,
        "price": _json_number(tx.price),
        "qty": _json_number(tx.quantity),
    }


def transaction_from_record(record: Any) -> Transaction:
    """Build a ``Transaction`` from its stored JSON object.

    Raises:
        ValueError: The record is malformed or violates the positive price and
            quantity invariant.
    """

    if not isinstance(record, dict):
        raise ValueError("transaction record must be an object")
    tx_id = record.get("id")
    if tx_id is None or not str(tx_id).strip():
        raise ValueError("transaction record is missing an id")
    price = _parse_decimal(record.get("price"), "price")
    quantity = _parse_decimal(record.get("qty"), "qty")
    if price <= 0 or quantity <= 0:
        raise ValueError("price and qty must be positive")
    try:
        kind = TransactionKind(str(record.get("type", "")).lower())
        trade_date = date.fromisoformat(str(record.get("date", ""))[:10])
    except ValueError as exc:
        raise ValueError(f"invalid transaction record {tx_id}: {exc}") from exc
    return Transaction(id=str(tx_id), date=trade_date, kind=kind, price=price, quantity=quantity)


class PortfolioRepository:
    """Load and save tracker state through a ``KeyValueStore``.

    Reads never raise: corrupt or missing entries fall back to an empty
    portfolio, the first catalog symbol and the detected language.
    """

    def __init__(self, store: KeyValueStore, *, default_language: Optional[Language] = None) -> None:
        self._store = store
        self._default_language = default_language

    def load_portfolio(self) -> Portfolio:
        raw = self._store.get(PORTFOLIO_KEY)
        if not raw:
            return {}
        try:
            payload = json.loads(raw, parse_float=Decimal)
        except ValueError as exc:
            logger.warning("Stored portfolio is not valid JSON, starting empty: %s", exc)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Stored portfolio is not an object, starting empty")
            return {}

        portfolio: Portfolio = {}
        for symbol, records in payload.items():
            if not isinstance(records, list):
                logger.warning("Skipping ledger for %s: not a list", symbol)
                continue
            ledger: list[Transaction] = []
            for record in records:
                try:
                    ledger.append(transaction_from_record(record))
                except ValueError as exc:
                    logger.warning("Dropping stored transaction for %s: %s", symbol, exc)
            portfolio[str(symbol)] = ledger
        return portfolio

    def save_portfolio(self, portfolio: Portfolio) -> None:
        payload = {symbol: [transaction_to_record(tx) for tx in ledger] for symbol, ledger in portfolio.items()}
        self._store.set(PORTFOLIO_KEY, json.dumps(payload, ensure_ascii=False))

    def load_current_symbol(self) -> str:
        return resolve_symbol(self._store.get(CURRENT_SYMBOL_KEY)).symbol

    def save_current_symbol(self, symbol: str) -> None:
        self._store.set(CURRENT_SYMBOL_KEY, symbol)

    def load_language(self) -> Language:
        saved = self._store.get(LANGUAGE_KEY)
        if is_language(saved):
            return saved  # type: ignore[return-value]
        if self._default_language is not None:
            return self._default_language
        return detect_language()

    def save_language(self, language: Language) -> None:
        self._store.set(LANGUAGE_KEY, language)


def _parse_decimal(value: Any, field: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ValueError(f"{field} must be a number")
    try:
        parsed = Decimal(str(value))
    except ArithmeticError as exc:
        raise ValueError(f"{field} must be a number") from exc
    if not parsed.is_finite():
        raise ValueError(f"{field} must be finite")
    return parsed


def _json_number(value: Decimal) -> int | float | str:
    """Store as a JSON number when that is exact, otherwise as the decimal text."""

    if value == value.to_integral_value():
        return int(value)
    as_float = float(value)
    if Decimal(repr(as_float)) == value:
        return as_float
    return format(value, "f")


__all__ = [
    "CURRENT_SYMBOL_KEY",
    "LANGUAGE_KEY",
    "PORTFOLIO_KEY",
    "PortfolioRepository",
    "transaction_from_record",
    "transaction_to_record",
]
