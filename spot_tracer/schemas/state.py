"""Pydantic schemas for tracker preferences, quotes and insights."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class TrackerStateSchema(BaseModel):
    current_symbol: str
    alias: str
    has_api: bool
    language: Literal["en", "zh"]
    market_price: float | None = None
    insight: str | None = None


class SymbolSelectRequest(BaseModel):
    symbol: str = Field(..., min_length=1, examples=["ETHUSDT"])


class LanguageRequest(BaseModel):
    language: Literal["en", "zh"]


class QuoteSchema(BaseModel):
    symbol: str
    market_price: float | None = None
    available: bool


class InsightSchema(BaseModel):
    symbol: str
    language: Literal["en", "zh"]
    text: str
    generated: bool = Field(..., description="False when the text is the placeholder or the fallback message")


__all__ = [
    "InsightSchema",
    "LanguageRequest",
    "QuoteSchema",
    "SymbolSelectRequest",
    "TrackerStateSchema",
]
