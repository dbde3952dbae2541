"""Spot Tracer: weighted-average cost basis and P&L tracking for a spot portfolio."""

__version__ = "0.1.0"
