"""Watchlist backend packages."""
