"""Configuration package for the Spot Tracer service."""

from .settings import AppSettings, get_settings

__all__ = ["AppSettings", "get_settings"]
