"""Pydantic schemas for symbols, transactions and portfolio summaries."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from spot_tracer.models import PortfolioStats, ProcessedTransaction, SymbolInfo, Transaction


class SymbolSchema(BaseModel):
    symbol: str = Field(..., examples=["BTCUSDT"])
    alias: str = Field(..., examples=["BTC"])
    has_api: bool

    @classmethod
    def from_info(cls, info: SymbolInfo) -> "SymbolSchema":
        return cls(symbol=info.symbol, alias=info.alias, has_api=info.has_api)


class TransactionCreateRequest(BaseModel):
    date: dt.date = Field(default_factory=dt.date.today, description="Trade date; defaults to today")
    type: Literal["buy", "sell"]
    price: Decimal = Field(..., gt=0)
    quantity: Decimal = Field(..., gt=0)

    @field_validator("price", "quantity", mode="before")
    @classmethod
    def _float_via_str(cls, value: object) -> object:
        # 0.1 should become Decimal("0.1"), not its binary expansion
        if isinstance(value, float):
            return str(value)
        return value

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"date": "2024-03-01", "type": "buy", "price": 64250.5, "quantity": 0.015},
        }
    )


class TransactionUpdateRequest(TransactionCreateRequest):
    date: dt.date


class TransactionSchema(BaseModel):
    id: str
    date: dt.date
    type: str
    price: float
    quantity: float

    @classmethod
    def from_transaction(cls, tx: Transaction) -> "TransactionSchema":
        return cls(
            id=tx.id,
            date=tx.date,
            type=tx.kind.value,
            price=float(tx.price),
            quantity=float(tx.quantity),
        )


class ProcessedTransactionSchema(TransactionSchema):
    avg_price_after: float
    transaction_pl: float | None = None
    cumulative_pl: float

    @classmethod
    def from_processed(cls, item: ProcessedTransaction) -> "ProcessedTransactionSchema":
        return cls(
            id=item.id,
            date=item.date,
            type=item.kind.value,
            price=float(item.price),
            quantity=float(item.quantity),
            avg_price_after=float(item.post_trade_average_price),
            transaction_pl=float(item.transaction_pl) if item.transaction_pl is not None else None,
            cumulative_pl=float(item.cumulative_realized_pl),
        )


class PortfolioSummarySchema(BaseModel):
    symbol: str
    alias: str
    market_price: float | None = None
    average_price: float
    total_quantity: float
    realized_pl: float
    market_value: float | None = None
    unrealized_pl: float | None = None
    transactions: list[ProcessedTransactionSchema]

    @classmethod
    def from_stats(
        cls,
        info: SymbolInfo,
        stats: PortfolioStats,
        market_price: Decimal | None,
    ) -> "PortfolioSummarySchema":
        return cls(
            symbol=info.symbol,
            alias=info.alias,
            market_price=float(market_price) if market_price is not None else None,
            average_price=float(stats.average_price),
            total_quantity=float(stats.total_quantity),
            realized_pl=float(stats.realized_pl),
            market_value=float(stats.market_value) if stats.market_value is not None else None,
            unrealized_pl=float(stats.unrealized_pl) if stats.unrealized_pl is not None else None,
            transactions=[ProcessedTransactionSchema.from_processed(item) for item in stats.processed_transactions],
        )


__all__ = [
    "PortfolioSummarySchema",
    "ProcessedTransactionSchema",
    "SymbolSchema",
    "TransactionCreateRequest",
    "TransactionSchema",
    "TransactionUpdateRequest",
]
