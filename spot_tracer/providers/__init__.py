"""Clients for external market data providers."""
