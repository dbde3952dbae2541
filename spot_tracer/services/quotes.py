"""Market price lookup and background polling for the active symbol."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from decimal import Decimal
from typing import Optional, Protocol

from spot_tracer.models import SymbolInfo
from spot_tracer.providers.binance import QuoteUnavailableError

from .ledger import LedgerService

logger = logging.getLogger(__name__)


class QuoteProvider(Protocol):
    async def fetch_price(self, symbol: str) -> Decimal:
        ...


class QuoteService:
    """Resolve a current price for a catalog symbol, or ``None`` when unavailable."""

    def __init__(self, provider: QuoteProvider) -> None:
        self._provider = provider

    async def refresh(self, info: SymbolInfo) -> Optional[Decimal]:
        if not info.has_api:
            return None
        try:
            price = await self._provider.fetch_price(info.symbol)
        except QuoteUnavailableError as exc:
            logger.warning("Price unavailable for %s: %s", info.symbol, exc)
            return None
        logger.debug("Fetched %s price %s", info.symbol, price)
        return price


class PricePoller:
    """Keep the ledger's market price current for the active symbol.

    Polls immediately on start, then every ``interval_seconds``. ``trigger``
    wakes the loop early, e.g. right after the active symbol changes. A failed
    poll clears the stored price instead of keeping the last known one.
    """

    def __init__(self, ledger: LedgerService, quotes: QuoteService, *, interval_seconds: float) -> None:
        self._ledger = ledger
        self._quotes = quotes
        self._interval = interval_seconds
        self._wake = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def poll_once(self) -> Optional[Decimal]:
        """Refresh the active symbol; any provider failure clears the stored price."""

        info = self._ledger.current_symbol_info
        try:
            price = await self._quotes.refresh(info)
        except Exception:
            logger.exception("Quote refresh failed for %s", info.symbol)
            price = None
        self._ledger.set_market_price(info.symbol, price)
        return price

    def trigger(self) -> None:
        self._wake.set()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="price-poller")
        logger.info("Price poller started with %.1fs interval", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Price poller stopped")

    async def _run(self) -> None:
        while True:
            self._wake.clear()
            await self.poll_once()
            try:
                await asyncio.wait_for(self._wake.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                pass


__all__ = ["PricePoller", "QuoteProvider", "QuoteService"]
