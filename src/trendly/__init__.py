"""Trendly: price tracking across e-commerce stores with per-user watchlists."""

__version__ = "0.1.0"
