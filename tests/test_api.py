"""End-to-end API tests over an in-memory store."""

from __future__ import annotations

import asyncio
from decimal import Decimal
from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient

from spot_tracer.config import AppSettings
from spot_tracer.main import create_app
from spot_tracer.providers.binance import QuoteUnavailableError
from spot_tracer.services.insights import InsightGenerator
from spot_tracer.storage import InMemoryStore


class StubResponses:
    def __init__(
        self,
        output_text: str = "Hold the position.",
        *,
        gate: asyncio.Event | None = None,
        error: Exception | None = None,
    ) -> None:
        self.output_text = output_text
        self.gate = gate
        self.error = error
        self.started = asyncio.Event()

    async def create(self, **kwargs):
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return SimpleNamespace(output_text=self.output_text)


class StubOpenAI:
    def __init__(self, responses: StubResponses) -> None:
        self.responses = responses


class StubProvider:
    def __init__(self, price: Decimal | Exception | None = Decimal("150")) -> None:
        self.price = price

    async def fetch_price(self, symbol: str) -> Decimal:
        if isinstance(self.price, Exception):
            raise self.price
        if self.price is None:
            raise QuoteUnavailableError("offline")
        return self.price


def _client(provider: StubProvider | None = None, responses: StubResponses | None = None) -> AsyncClient:
    settings = AppSettings(
        quote_polling_enabled=False,
        telemetry_enabled=False,
        default_language="en",
        openai_api_key=None,
    )
    generator = InsightGenerator(settings, client=StubOpenAI(responses or StubResponses()))
    app = create_app(
        settings,
        store=InMemoryStore(),
        quote_provider=provider or StubProvider(),
        insight_generator=generator,
    )
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_health_and_catalog():
    async with _client() as client:
        health = await client.get("/health")
        assert health.status_code == 200
        assert health.json()["status"] == "ok"

        symbols = (await client.get("/symbols")).json()
        assert symbols[0] == {"symbol": "BTCUSDT", "alias": "BTC", "has_api": True}
        assert {"symbol": "AAPLE", "alias": "AAPL", "has_api": False} in symbols


@pytest.mark.asyncio
async def test_transaction_crud_and_summary():
    async with _client() as client:
        created = await client.post(
            "/portfolio/BTCUSDT/transactions",
            json={"date": "2024-01-01", "type": "buy", "price": 100, "quantity": 2},
        )
        assert created.status_code == 201
        tx_id = created.json()["id"]

        sold = await client.post(
            "/portfolio/BTCUSDT/transactions",
            json={"date": "2024-01-02", "type": "sell", "price": 130, "quantity": 1},
        )
        assert sold.status_code == 201

        refreshed = await client.post("/state/quote/refresh")
        assert refreshed.json() == {"symbol": "BTCUSDT", "market_price": 150.0, "available": True}

        summary = (await client.get("/portfolio/BTCUSDT/summary")).json()
        assert summary["average_price"] == 100.0
        assert summary["total_quantity"] == 1.0
        assert summary["realized_pl"] == 30.0
        assert summary["market_value"] == 150.0
        assert summary["unrealized_pl"] == 50.0
        assert summary["transactions"][1]["transaction_pl"] == 30.0
        assert summary["transactions"][0]["transaction_pl"] is None

        updated = await client.put(
            f"/portfolio/BTCUSDT/transactions/{tx_id}",
            json={"date": "2024-01-01", "type": "buy", "price": 110, "quantity": 2},
        )
        assert updated.status_code == 200
        assert updated.json()["price"] == 110.0

        listing = (await client.get("/portfolio/BTCUSDT/transactions")).json()
        assert [item["id"] for item in listing] == [tx_id, sold.json()["id"]]

        deleted = await client.delete(f"/portfolio/BTCUSDT/transactions/{sold.json()['id']}")
        assert deleted.status_code == 204
        assert len((await client.get("/portfolio/BTCUSDT/transactions")).json()) == 1


@pytest.mark.asyncio
async def test_error_mapping():
    async with _client() as client:
        oversell = await client.post(
            "/portfolio/ETHUSDT/transactions",
            json={"date": "2024-01-01", "type": "sell", "price": 10, "quantity": 1},
        )
        assert oversell.status_code == 400
        assert oversell.json()["detail"]["code"] == "oversell"

        unknown_symbol = await client.get("/portfolio/XRPUSDT/transactions")
        assert unknown_symbol.status_code == 404

        missing = await client.delete("/portfolio/ETHUSDT/transactions/123")
        assert missing.status_code == 404
        assert missing.json()["detail"]["code"] == "transaction_not_found"

        invalid = await client.post(
            "/portfolio/ETHUSDT/transactions",
            json={"date": "2024-01-01", "type": "buy", "price": 0, "quantity": 1},
        )
        assert invalid.status_code == 422


@pytest.mark.asyncio
async def test_state_symbol_and_language():
    async with _client() as client:
        state = (await client.get("/state")).json()
        assert state["current_symbol"] == "BTCUSDT"
        assert state["language"] == "en"

        selected = await client.put("/state/symbol", json={"symbol": "TSLA"})
        assert selected.status_code == 200
        assert selected.json()["has_api"] is False

        quote = (await client.post("/state/quote/refresh")).json()
        assert quote == {"symbol": "TSLA", "market_price": None, "available": False}

        rejected = await client.put("/state/symbol", json={"symbol": "XRPUSDT"})
        assert rejected.status_code == 404

        toggled = (await client.post("/state/language/toggle")).json()
        assert toggled["language"] == "zh"
        chosen = (await client.put("/state/language", json={"language": "en"})).json()
        assert chosen["language"] == "en"


@pytest.mark.asyncio
async def test_quote_failure_clears_market_price():
    provider = StubProvider()
    async with _client(provider) as client:
        await client.post("/state/quote/refresh")
        provider.price = None
        quote = (await client.post("/state/quote/refresh")).json()
        assert quote["available"] is False
        assert (await client.get("/state")).json()["market_price"] is None


@pytest.mark.asyncio
async def test_csv_export():
    async with _client() as client:
        empty = await client.get("/portfolio/SOLUSDT/export.csv")
        assert empty.status_code == 404

        await client.post(
            "/portfolio/SOLUSDT/transactions",
            json={"date": "2024-02-01", "type": "buy", "price": 98.5, "quantity": 3},
        )
        response = await client.get("/portfolio/SOLUSDT/export.csv")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "SpotTracer_SOL_" in response.headers["content-disposition"]
        lines = response.content.decode("utf-8-sig").splitlines()
        assert lines == [
            "Date,Type,Price,Quantity,AvgPriceAfter,TransactionPL",
            "2024-02-01,buy,98.5,3,98.5,0",
        ]


@pytest.mark.asyncio
async def test_insight_generation_is_cached_until_ledger_changes():
    responses = StubResponses(output_text="Average cost is well below market.")
    async with _client(responses=responses) as client:
        placeholder = (await client.get("/insights")).json()
        assert placeholder["generated"] is False

        await client.post(
            "/portfolio/BTCUSDT/transactions",
            json={"date": "2024-01-01", "type": "buy", "price": 100, "quantity": 1},
        )
        generated = (await client.post("/insights")).json()
        assert generated["text"] == "Average cost is well below market."
        assert generated["generated"] is True
        assert (await client.get("/insights")).json()["text"] == "Average cost is well below market."

        await client.post(
            "/portfolio/BTCUSDT/transactions",
            json={"date": "2024-01-02", "type": "buy", "price": 90, "quantity": 1},
        )
        assert (await client.get("/insights")).json()["generated"] is False


@pytest.mark.asyncio
async def test_insight_finished_after_ledger_change_is_not_cached():
    gate = asyncio.Event()
    responses = StubResponses(output_text="Written for the old position.", gate=gate)
    async with _client(responses=responses) as client:
        await client.post(
            "/portfolio/BTCUSDT/transactions",
            json={"date": "2024-01-01", "type": "buy", "price": 100, "quantity": 1},
        )
        pending = asyncio.create_task(client.post("/insights"))
        await responses.started.wait()

        added = await client.post(
            "/portfolio/BTCUSDT/transactions",
            json={"date": "2024-01-02", "type": "buy", "price": 80, "quantity": 1},
        )
        assert added.status_code == 201
        gate.set()
        await pending

        cached = (await client.get("/insights")).json()
        assert cached["generated"] is False
        assert cached["text"] != "Written for the old position."


@pytest.mark.asyncio
async def test_fallback_insight_is_reported_and_not_cached():
    responses = StubResponses(error=RuntimeError("quota exceeded"))
    async with _client(responses=responses) as client:
        await client.post(
            "/portfolio/BTCUSDT/transactions",
            json={"date": "2024-01-01", "type": "buy", "price": 100, "quantity": 1},
        )
        result = (await client.post("/insights")).json()
        assert result["generated"] is False
        assert result["text"] == "Could not generate insights at this moment."
        assert (await client.get("/insights")).json()["generated"] is False


@pytest.mark.asyncio
async def test_manual_refresh_survives_unexpected_provider_error():
    provider = StubProvider()
    async with _client(provider) as client:
        await client.post("/state/quote/refresh")
        provider.price = RuntimeError("boom")
        response = await client.post("/state/quote/refresh")
        assert response.status_code == 200
        assert response.json()["available"] is False
        assert (await client.get("/state")).json()["market_price"] is None
