"""Weighted-average cost basis and P&L computation.

``compute`` folds a symbol ledger in date order and derives the post-trade
average price, per-trade realized P&L and running realized P&L for every
transaction, plus portfolio totals. It reads no clock, keeps no state between
calls and never mutates its input, so callers can rerun it on every edit or
price tick.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional, Union

from spot_tracer.models import PortfolioStats, ProcessedTransaction, Transaction, TransactionKind

ZERO = Decimal("0")
DUST_EPSILON = Decimal("1e-8")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert a number to ``Decimal`` going through ``str`` for floats."""

    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def compute(
    transactions: Iterable[Transaction],
    market_price: Optional[Number] = None,
) -> PortfolioStats:
    """Compute cost basis and P&L for one symbol ledger.

    Transactions are processed by ascending ``date``; same-day entries keep
    their input order. Sells against an empty position realize nothing and
    leave the state untouched. After each sell a remaining quantity below
    ``DUST_EPSILON`` snaps the whole position to exactly zero.
    """

    ordered = sorted(transactions, key=lambda tx: tx.date)

    running_qty = ZERO
    running_cost = ZERO
    realized_pl = ZERO
    avg_price = ZERO
    processed: list[ProcessedTransaction] = []

    for tx in ordered:
        tx_pl: Optional[Decimal] = None
        prev_avg = avg_price

        if tx.kind == TransactionKind.BUY:
            running_cost += tx.price * tx.quantity
            running_qty += tx.quantity
            avg_price = running_cost / running_qty if running_qty > 0 else ZERO
        else:
            if running_qty > 0:
                tx_pl = (tx.price - prev_avg) * tx.quantity
                realized_pl += tx_pl
                running_cost -= prev_avg * tx.quantity
                running_qty -= tx.quantity
            if running_qty < DUST_EPSILON:
                running_qty = ZERO
                running_cost = ZERO
                avg_price = ZERO

        processed.append(
            ProcessedTransaction(
                transaction=tx,
                post_trade_average_price=avg_price,
                transaction_pl=tx_pl,
                cumulative_realized_pl=realized_pl,
            )
        )

    market_value: Optional[Decimal] = None
    unrealized_pl: Optional[Decimal] = None
    if market_price is not None:
        price = to_decimal(market_price)
        market_value = price * running_qty
        unrealized_pl = (price - avg_price) * running_qty

    return PortfolioStats(
        average_price=avg_price,
        total_quantity=running_qty,
        realized_pl=realized_pl,
        market_value=market_value,
        unrealized_pl=unrealized_pl,
        processed_transactions=tuple(processed),
    )


def holding_shortfalls(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Return sells that exceed the quantity held at their point in the ledger.

    Uses the same ordering as ``compute``. A shortfall of at most
    ``DUST_EPSILON`` is tolerated so that closing a position with a rounded
    quantity is not reported.
    """

    held = ZERO
    shortfalls: list[Transaction] = []
    for tx in sorted(transactions, key=lambda item: item.date):
        if tx.kind == TransactionKind.BUY:
            held += tx.quantity
            continue
        if tx.quantity - held > DUST_EPSILON:
            shortfalls.append(tx)
            continue
        held -= tx.quantity
        if held < DUST_EPSILON:
            held = ZERO
    return shortfalls


__all__ = [
    "DUST_EPSILON",
    "compute",
    "holding_shortfalls",
    "to_decimal",
]
