"""Binance spot ticker client used for live market prices."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from spot_tracer.config import get_settings


class QuoteUnavailableError(RuntimeError):
    """Raised when no usable price could be obtained for a symbol."""


class BinanceClient:
    """Thin async wrapper around ``GET /api/v3/ticker/price``."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout_seconds: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = get_settings()
        self._base_url = (base_url or settings.quote_base_url).rstrip("/")
        self._timeout = timeout_seconds if timeout_seconds is not None else settings.quote_timeout_seconds
        self._client = client

    async def fetch_price(self, symbol: str) -> Decimal:
        """Return the last traded price for ``symbol``."""

        url = f"{self._base_url}/api/v3/ticker/price"
        client = self._client or httpx.AsyncClient(timeout=self._timeout)
        try:
            response = await client.get(url, params={"symbol": symbol})
        except httpx.HTTPError as exc:
            raise QuoteUnavailableError(f"Failed to reach quote API for {symbol}: {exc}") from exc
        finally:
            if self._client is None:
                await client.aclose()

        if response.status_code >= 400:
            detail: Any
            try:
                payload = response.json()
                detail = payload.get("msg", payload) if isinstance(payload, dict) else payload
            except ValueError:
                detail = response.text
            raise QuoteUnavailableError(f"Quote API error {response.status_code} for {symbol}: {detail}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise QuoteUnavailableError("Quote API returned invalid JSON payload") from exc

        raw_price = payload.get("price") if isinstance(payload, dict) else None
        if raw_price is None or isinstance(raw_price, bool):
            raise QuoteUnavailableError(f"Quote API response for {symbol} has no price")
        try:
            price = Decimal(str(raw_price))
        except InvalidOperation as exc:
            raise QuoteUnavailableError(f"Quote API returned non-numeric price {raw_price!r}") from exc
        if not price.is_finite() or price <= 0:
            raise QuoteUnavailableError(f"Quote API returned non-positive price {raw_price!r}")
        return price


__all__ = ["BinanceClient", "QuoteUnavailableError"]
