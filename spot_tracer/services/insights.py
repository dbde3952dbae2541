"""Natural-language commentary on a position via the OpenAI Responses API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from openai import AsyncOpenAI

from spot_tracer.config import AppSettings, get_settings
from spot_tracer.i18n import Language, translate
from spot_tracer.models import PortfolioStats

from .export import plain_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Insight:
    """Commentary text; ``generated`` is False when it is the fallback message."""

    text: str
    generated: bool


def build_insight_prompt(
    alias: str,
    stats: PortfolioStats,
    market_price: Optional[Decimal],
    language: Language,
    *,
    recent: int = 5,
) -> str:
    """Summarise the position and its latest transactions for the model."""

    market_line = f"${market_price:.4f}" if market_price is not None else "N/A"
    unrealized_line = (
        f"${stats.unrealized_pl:.2f}"
        if market_price is not None and stats.unrealized_pl is not None
        else "N/A"
    )
    recent_lines = "\n".join(
        f"- {tx.date.isoformat()}: {tx.kind.value.upper()} {plain_number(tx.quantity)} @ ${plain_number(tx.price)}"
        for tx in stats.processed_transactions[-recent:]
    )
    return (
        f"Analyze the following trading portfolio for {alias}:\n"
        f"- Current Average Cost: ${stats.average_price:.4f}\n"
        f"- Holding Quantity: {stats.total_quantity:.6f}\n"
        f"- Realized Profit/Loss: ${stats.realized_pl:.2f}\n"
        f"- Market Price: {market_line}\n"
        f"- Unrealized Profit/Loss: {unrealized_line}\n"
        "\n"
        "Recent Transactions:\n"
        f"{recent_lines}\n"
        "\n"
        "Provide a concise (2-3 sentences) analysis of the performance and a strategic suggestion "
        "based on current market standing.\n"
        "Focus on risk management and cost basis.\n"
        f"{translate(language, 'insight_instruction')}"
    )


class InsightGenerator:
    """Generate short portfolio commentary, falling back to a canned message on failure."""

    def __init__(self, settings: AppSettings | None = None, client: Any | None = None) -> None:
        self._settings = settings or get_settings()
        self._client = client

    def _get_client(self) -> Any | None:
        if self._client is None and self._settings.openai_api_key:
            self._client = AsyncOpenAI(api_key=self._settings.openai_api_key)
        return self._client

    async def generate(
        self,
        alias: str,
        stats: PortfolioStats,
        market_price: Optional[Decimal],
        language: Language = "en",
    ) -> Insight:
        fallback = Insight(translate(language, "insight_fallback"), generated=False)
        client = self._get_client()
        if client is None:
            logger.warning("Insight generation skipped: OPENAI_API_KEY is not configured")
            return fallback

        prompt = build_insight_prompt(
            alias,
            stats,
            market_price,
            language,
            recent=self._settings.insight_recent_transactions,
        )
        logger.info("Requesting insights for %s (%d transactions)", alias, len(stats.processed_transactions))
        try:
            response = await client.responses.create(
                model=self._settings.openai_model,
                input=prompt,
                temperature=self._settings.insight_temperature,
                top_p=self._settings.insight_top_p,
            )
            text = (response.output_text or "").strip()
        except Exception as exc:  # any client or transport failure degrades to the fallback text
            logger.exception("Insight generation failed: %s", exc)
            return fallback
        if not text:
            logger.warning("Insight generation returned empty output for %s", alias)
            return fallback
        return Insight(text, generated=True)


__all__ = ["Insight", "InsightGenerator", "build_insight_prompt"]
