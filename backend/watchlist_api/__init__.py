"""Watchlist API: movie intake, enrichment and watchlist management."""
from .app import create_app

__all__ = ["create_app"]
