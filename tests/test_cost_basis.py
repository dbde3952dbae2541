"""Golden tests for the weighted-average cost-basis engine."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from spot_tracer.models import Transaction, TransactionKind
from spot_tracer.services.cost_basis import DUST_EPSILON, compute, holding_shortfalls

BUY = TransactionKind.BUY
SELL = TransactionKind.SELL


def tx(tx_id: str, day: date, kind: TransactionKind, price: str, quantity: str) -> Transaction:
    return Transaction(id=tx_id, date=day, kind=kind, price=Decimal(price), quantity=Decimal(quantity))


def build_ledger():
    return [
        tx("1", date(2024, 1, 1), BUY, "100", "1"),
        tx("2", date(2024, 1, 2), BUY, "200", "1"),
        tx("3", date(2024, 1, 3), SELL, "300", "1"),
    ]


def test_empty_ledger_is_flat():
    stats = compute([])
    assert stats.average_price == 0
    assert stats.total_quantity == 0
    assert stats.realized_pl == 0
    assert stats.market_value is None
    assert stats.unrealized_pl is None
    assert stats.processed_transactions == ()


def test_buys_then_partial_sell_matches_weighted_average():
    stats = compute(build_ledger(), market_price=Decimal("250"))

    assert stats.average_price == Decimal("150")
    assert stats.total_quantity == Decimal("1")
    assert stats.realized_pl == Decimal("150")
    assert stats.market_value == Decimal("250")
    assert stats.unrealized_pl == Decimal("100")

    first, second, third = stats.processed_transactions
    assert first.post_trade_average_price == Decimal("100")
    assert first.transaction_pl is None
    assert second.post_trade_average_price == Decimal("150")
    assert third.transaction_pl == Decimal("150")
    assert third.post_trade_average_price == Decimal("150")
    assert third.cumulative_realized_pl == Decimal("150")


def test_market_price_accepts_plain_numbers():
    stats = compute(build_ledger(), market_price="250")
    assert stats.unrealized_pl == Decimal("100")


def test_transactions_are_processed_in_date_order():
    ledger = list(reversed(build_ledger()))
    stats = compute(ledger)
    assert [item.id for item in stats.processed_transactions] == ["1", "2", "3"]
    assert stats.realized_pl == Decimal("150")


def test_same_day_transactions_keep_insertion_order():
    day = date(2024, 5, 1)
    ledger = [
        tx("a", day, BUY, "10", "2"),
        tx("b", day, SELL, "12", "1"),
        tx("c", day, BUY, "16", "1"),
    ]
    stats = compute(ledger)
    assert [item.id for item in stats.processed_transactions] == ["a", "b", "c"]
    assert stats.processed_transactions[1].transaction_pl == Decimal("2")
    assert stats.average_price == Decimal("13")


def test_selling_everything_resets_average():
    ledger = [
        tx("1", date(2024, 1, 1), BUY, "100", "2"),
        tx("2", date(2024, 1, 2), SELL, "90", "2"),
    ]
    stats = compute(ledger, market_price=Decimal("95"))
    assert stats.total_quantity == 0
    assert stats.average_price == 0
    assert stats.realized_pl == Decimal("-20")
    assert stats.market_value == 0
    assert stats.unrealized_pl == 0
    assert stats.processed_transactions[-1].post_trade_average_price == 0


def test_sell_against_empty_position_realizes_nothing():
    ledger = [
        tx("1", date(2024, 1, 1), SELL, "100", "1"),
        tx("2", date(2024, 1, 2), BUY, "50", "1"),
    ]
    stats = compute(ledger)
    first = stats.processed_transactions[0]
    assert first.transaction_pl is None
    assert first.cumulative_realized_pl == 0
    assert first.post_trade_average_price == 0
    assert stats.total_quantity == Decimal("1")
    assert stats.average_price == Decimal("50")


def test_rebuy_after_flat_starts_fresh_basis():
    ledger = [
        tx("1", date(2024, 1, 1), BUY, "100", "1"),
        tx("2", date(2024, 1, 2), SELL, "120", "1"),
        tx("3", date(2024, 1, 3), BUY, "80", "1"),
    ]
    stats = compute(ledger)
    assert stats.average_price == Decimal("80")
    assert stats.realized_pl == Decimal("20")


def test_dust_remainder_snaps_to_zero():
    ledger = [
        tx("1", date(2024, 1, 1), BUY, "100", "1"),
        tx("2", date(2024, 1, 2), SELL, "100", "0.999999995"),
    ]
    stats = compute(ledger, market_price=Decimal("100"))
    assert stats.total_quantity == 0
    assert stats.average_price == 0
    assert stats.market_value == 0


def test_remainder_at_threshold_is_kept():
    ledger = [
        tx("1", date(2024, 1, 1), BUY, "100", "1"),
        tx("2", date(2024, 1, 2), SELL, "100", str(Decimal("1") - DUST_EPSILON)),
    ]
    stats = compute(ledger)
    assert stats.total_quantity == DUST_EPSILON
    assert stats.average_price == Decimal("100")


def test_oversold_position_clamps_to_zero():
    ledger = [
        tx("1", date(2024, 1, 1), BUY, "100", "1"),
        tx("2", date(2024, 1, 2), SELL, "150", "2"),
    ]
    stats = compute(ledger)
    assert stats.processed_transactions[1].transaction_pl == Decimal("100")
    assert stats.total_quantity == 0
    assert stats.average_price == 0


def test_compute_does_not_mutate_input():
    ledger = list(reversed(build_ledger()))
    snapshot = list(ledger)
    compute(ledger)
    assert ledger == snapshot


def test_realized_pl_is_sum_of_transaction_pl():
    ledger = build_ledger() + [
        tx("4", date(2024, 1, 4), BUY, "120", "3"),
        tx("5", date(2024, 1, 5), SELL, "110", "2"),
    ]
    stats = compute(ledger)
    total = sum(
        (item.transaction_pl for item in stats.processed_transactions if item.transaction_pl is not None),
        Decimal("0"),
    )
    assert stats.realized_pl == total
    assert stats.processed_transactions[-1].cumulative_realized_pl == total


def test_holding_shortfalls_reports_oversized_sells():
    ledger = [
        tx("1", date(2024, 1, 2), BUY, "100", "1"),
        tx("2", date(2024, 1, 1), SELL, "100", "1"),
        tx("3", date(2024, 1, 3), SELL, "100", "1.000000005"),
    ]
    shortfalls = holding_shortfalls(ledger)
    assert [item.id for item in shortfalls] == ["2"]


def test_holding_shortfalls_empty_for_valid_ledger():
    assert holding_shortfalls(build_ledger()) == []


def test_compute_is_idempotent():
    ledger = build_ledger()
    assert compute(ledger, Decimal("250")) == compute(ledger, Decimal("250"))


def test_zero_market_price_is_a_value_not_missing():
    ledger = [tx("1", date(2024, 1, 1), BUY, "100", "10")]
    stats = compute(ledger, market_price=Decimal("0"))
    assert stats.market_value == 0
    assert stats.market_value is not None
    assert stats.unrealized_pl == Decimal("-1000")


def test_partial_sell_keeps_average_and_realizes_gain():
    ledger = [
        tx("1", date(2024, 1, 1), BUY, "100", "10"),
        tx("2", date(2024, 1, 2), SELL, "150", "4"),
    ]
    stats = compute(ledger)
    assert stats.processed_transactions[1].transaction_pl == Decimal("200")
    assert stats.realized_pl == Decimal("200")
    assert stats.total_quantity == Decimal("6")
    assert stats.average_price == Decimal("100")


def test_full_exit_realizes_gain_and_flattens():
    ledger = [
        tx("1", date(2024, 1, 1), BUY, "10", "5"),
        tx("2", date(2024, 1, 2), SELL, "12", "5"),
    ]
    stats = compute(ledger)
    assert stats.processed_transactions[1].transaction_pl == Decimal("10")
    assert stats.realized_pl == Decimal("10")
    assert stats.total_quantity == 0
    assert stats.average_price == 0


def test_buy_only_average_is_quantity_weighted_after_each_buy():
    ledger = [
        tx("1", date(2024, 1, 1), BUY, "10", "1"),
        tx("2", date(2024, 1, 2), BUY, "20", "3"),
        tx("3", date(2024, 1, 3), BUY, "35", "4"),
    ]
    stats = compute(ledger)
    averages = [item.post_trade_average_price for item in stats.processed_transactions]
    assert averages == [Decimal("10"), Decimal("17.5"), Decimal("26.25")]
    assert all(item.transaction_pl is None for item in stats.processed_transactions)
    assert stats.realized_pl == 0
