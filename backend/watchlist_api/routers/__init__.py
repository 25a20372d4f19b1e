"""Router exports for the Watchlist API."""
from . import health, images, items

__all__ = ["health", "images", "items"]
