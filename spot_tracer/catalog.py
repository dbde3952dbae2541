"""Fixed catalog of supported symbols."""
from __future__ import annotations

from typing import Optional, Tuple

from .models import SymbolInfo

SUPPORTED_SYMBOLS: Tuple[SymbolInfo, ...] = (
    SymbolInfo(symbol="BTCUSDT", alias="BTC", has_api=True),
    SymbolInfo(symbol="ETHUSDT", alias="ETH", has_api=True),
    SymbolInfo(symbol="SOLUSDT", alias="SOL", has_api=True),
    SymbolInfo(symbol="BNBUSDT", alias="BNB", has_api=True),
    SymbolInfo(symbol="ADAUSDT", alias="ADA", has_api=True),
    SymbolInfo(symbol="DOGEUSDT", alias="DOGE", has_api=True),
    SymbolInfo(symbol="TSLA", alias="TSLA", has_api=False),
    SymbolInfo(symbol="NVDA", alias="NVDA", has_api=False),
    SymbolInfo(symbol="AAPLE", alias="AAPL", has_api=False),
)

DEFAULT_SYMBOL = SUPPORTED_SYMBOLS[0]


def find_symbol(symbol: str) -> Optional[SymbolInfo]:
    """Return the catalog entry for ``symbol`` or ``None`` when unsupported."""

    for info in SUPPORTED_SYMBOLS:
        if info.symbol == symbol:
            return info
    return None


def resolve_symbol(symbol: Optional[str]) -> SymbolInfo:
    """Return the catalog entry for ``symbol``, falling back to the first entry."""

    if symbol:
        info = find_symbol(symbol)
        if info is not None:
            return info
    return DEFAULT_SYMBOL


__all__ = ["DEFAULT_SYMBOL", "SUPPORTED_SYMBOLS", "find_symbol", "resolve_symbol"]
