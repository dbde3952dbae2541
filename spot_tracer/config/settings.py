"""Application configuration and environment helpers."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_QUOTE_BASE_URL = "https://api.binance.com"
DEFAULT_POLL_INTERVAL_SECONDS = 20.0


class AppSettings(BaseSettings):
    """Configuration options for the Spot Tracer service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="Spot Tracer")
    app_version: str = Field(default="v6")
    application_host: str = Field(default="127.0.0.1")
    application_port: int = Field(default=8000, ge=1, le=65535)

    data_dir: str = Field(
        default=".spot_tracer",
        description="Directory holding the file-backed key-value store.",
    )
    store_filename: str = Field(default="storage.json")

    quote_base_url: str = Field(default=DEFAULT_QUOTE_BASE_URL)
    quote_timeout_seconds: float = Field(default=10.0, gt=0)
    quote_poll_interval_seconds: float = Field(default=DEFAULT_POLL_INTERVAL_SECONDS, gt=0)
    quote_polling_enabled: bool = Field(default=True)

    openai_api_key: str | None = Field(default=None)
    openai_model: str = Field(default="gpt-4.1-mini")
    insight_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    insight_top_p: float = Field(default=0.9, gt=0.0, le=1.0)
    insight_recent_transactions: int = Field(default=5, ge=1)

    default_language: Literal["en", "zh"] | None = Field(
        default=None,
        description="Overrides locale detection when no language preference is stored.",
    )

    telemetry_enabled: bool = Field(default=False)
    telemetry_service_name: str = Field(default="spot-tracer")
    telemetry_otlp_endpoint: str | None = Field(default=None)
    telemetry_otlp_insecure: bool = Field(default=True)
    telemetry_sample_ratio: float = Field(default=1.0, ge=0.0, le=1.0)

    def dict_for_logging(self) -> dict[str, Any]:
        """Return a sanitized dict for logging purposes."""

        hidden = {"openai_api_key"}
        return {k: ("***" if k in hidden and v else v) for k, v in self.model_dump().items()}


@lru_cache(maxsize=1)
def get_settings(**overrides: Any) -> AppSettings:
    """Return cached application settings with optional overrides."""

    if overrides:
        return AppSettings(**overrides)
    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "DEFAULT_QUOTE_BASE_URL",
    "get_settings",
]
