"""User-facing strings in the supported languages."""

from __future__ import annotations

import os
from typing import Literal, Mapping, Optional

Language = Literal["en", "zh"]

SUPPORTED_LANGUAGES: tuple[Language, ...] = ("en", "zh")

TRANSLATIONS: Mapping[Language, Mapping[str, str]] = {
    "en": {
        "insight_fallback": "Could not generate insights at this moment.",
        "insight_placeholder": "Get an AI-powered analysis of your position and cost basis.",
        "insight_instruction": "Please provide the analysis in English.",
        "invalid_price": "Price must be greater than zero.",
        "invalid_quantity": "Quantity must be greater than zero.",
        "oversell": "Sell quantity exceeds the position held on that date.",
        "unknown_symbol": "Unsupported symbol.",
        "transaction_not_found": "Transaction not found.",
        "unknown_language": "Unsupported language.",
    },
    "zh": {
        "insight_fallback": "暂时无法生成分析报告。",
        "insight_placeholder": "获取关于持仓与成本的 AI 分析。",
        "insight_instruction": "Please provide the analysis in Chinese.",
        "invalid_price": "价格必须大于零。",
        "invalid_quantity": "数量必须大于零。",
        "oversell": "卖出数量超过该日期的持仓数量。",
        "unknown_symbol": "不支持的交易对。",
        "transaction_not_found": "未找到该交易记录。",
        "unknown_language": "不支持的语言。",
    },
}


def is_language(value: object) -> bool:
    return value in SUPPORTED_LANGUAGES


def detect_language(locale_name: Optional[str] = None) -> Language:
    """Map a locale string such as ``zh_CN.UTF-8`` to a supported language.

    Without an argument the process locale from ``LC_ALL``/``LANG`` is used.
    """

    if locale_name is None:
        locale_name = os.environ.get("LC_ALL") or os.environ.get("LANG") or ""
    return "zh" if locale_name.lower().startswith("zh") else "en"


def translate(language: Language, key: str) -> str:
    """Return the string for ``key``, falling back to English and then to the key itself."""

    table = TRANSLATIONS.get(language, TRANSLATIONS["en"])
    return table.get(key) or TRANSLATIONS["en"].get(key, key)


def other_language(language: Language) -> Language:
    return "zh" if language == "en" else "en"


__all__ = [
    "Language",
    "SUPPORTED_LANGUAGES",
    "TRANSLATIONS",
    "detect_language",
    "is_language",
    "other_language",
    "translate",
]
