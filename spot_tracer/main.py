"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI

from spot_tracer.api.routes import api_router
from spot_tracer.config import AppSettings, get_settings
from spot_tracer.core.logging import setup_logging
from spot_tracer.core.telemetry import setup_telemetry
from spot_tracer.providers.binance import BinanceClient
from spot_tracer.services.insights import InsightGenerator
from spot_tracer.services.ledger import LedgerService
from spot_tracer.services.quotes import PricePoller, QuoteProvider, QuoteService
from spot_tracer.storage import JsonFileStore, KeyValueStore, PortfolioRepository

logger = logging.getLogger(__name__)


def create_app(
    settings: AppSettings | None = None,
    *,
    store: KeyValueStore | None = None,
    quote_provider: QuoteProvider | None = None,
    insight_generator: InsightGenerator | None = None,
) -> FastAPI:
    """Build the application with its services attached to ``app.state``.

    Services are wired eagerly so the app is usable without running the
    lifespan; the lifespan only drives the background price poller.
    """

    settings = settings or get_settings()
    if store is None:
        store = JsonFileStore(Path(settings.data_dir) / settings.store_filename)
    repository = PortfolioRepository(
        store,
        default_language=settings.default_language,
    )
    ledger = LedgerService(repository)
    provider = quote_provider or BinanceClient(
        settings.quote_base_url,
        timeout_seconds=settings.quote_timeout_seconds,
    )
    poller = PricePoller(
        ledger,
        QuoteService(provider),
        interval_seconds=settings.quote_poll_interval_seconds,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting %s with settings %s", settings.app_name, settings.dict_for_logging())
        if settings.quote_polling_enabled:
            poller.start()
        try:
            yield
        finally:
            await poller.stop()

    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.ledger = ledger
    app.state.poller = poller
    app.state.insights = insight_generator or InsightGenerator(settings)
    setup_telemetry(app, settings)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        """Return service readiness metadata."""

        return {
            "status": "ok",
            "timestamp": datetime.now().isoformat(),
            "version": settings.app_version,
        }

    app.include_router(api_router)
    return app


def run() -> None:
    """Serve the API with uvicorn using the configured host and port."""

    settings = get_settings()
    setup_logging()
    uvicorn.run(
        "spot_tracer.main:create_app",
        factory=True,
        host=settings.application_host,
        port=settings.application_port,
    )


__all__ = ["create_app", "run"]
