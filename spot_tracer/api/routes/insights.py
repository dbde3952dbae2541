"""On-demand portfolio commentary endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from spot_tracer.i18n import translate
from spot_tracer.schemas import InsightSchema
from spot_tracer.services.insights import InsightGenerator
from spot_tracer.services.ledger import LedgerService

from ..dependencies import get_insight_generator, get_ledger

router = APIRouter()


@router.get("", response_model=InsightSchema)
async def get_insight(ledger: LedgerService = Depends(get_ledger)) -> InsightSchema:
    state = ledger.state
    if state.insight is None:
        return InsightSchema(
            symbol=state.current_symbol,
            language=state.language,
            text=translate(state.language, "insight_placeholder"),
            generated=False,
        )
    return InsightSchema(symbol=state.current_symbol, language=state.language, text=state.insight, generated=True)


@router.post("", response_model=InsightSchema)
async def post_insight(
    ledger: LedgerService = Depends(get_ledger),
    generator: InsightGenerator = Depends(get_insight_generator),
) -> InsightSchema:
    info = ledger.current_symbol_info
    language = ledger.state.language
    market_price = ledger.state.market_price
    revision = ledger.revision
    insight = await generator.generate(info.alias, ledger.stats(info.symbol), market_price, language)
    if insight.generated:
        ledger.set_insight(info.symbol, insight.text, revision=revision)
    return InsightSchema(symbol=info.symbol, language=language, text=insight.text, generated=insight.generated)


__all__ = ["router"]
