"""Supported symbol catalog endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from spot_tracer.catalog import SUPPORTED_SYMBOLS
from spot_tracer.schemas import SymbolSchema

router = APIRouter()


@router.get("", response_model=list[SymbolSchema])
async def list_symbols() -> list[SymbolSchema]:
    return [SymbolSchema.from_info(info) for info in SUPPORTED_SYMBOLS]


__all__ = ["router"]
