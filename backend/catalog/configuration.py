"""
TMDb image configuration shared by the fetcher and response builders.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

DEFAULT_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/"
PREFERRED_POSTER_SIZE = "w342"
MIN_LOGO_WIDTH = 45
PROXY_PREFIX = "/tmdb/images"


@dataclass
class CatalogConfiguration:
    """Image base URL and preferred sizes, loaded once from ``/configuration``.

    Populated lazily by :meth:`MetadataFetcher.ensure_configuration`. Two
    concurrent first loads write the same values, so no lock is taken.
    """

    image_base_url: str = DEFAULT_IMAGE_BASE_URL
    poster_size: str = PREFERRED_POSTER_SIZE
    logo_size: str = "w92"
    profile_size: str = "w185"
    loaded: bool = False

    def apply(self, payload: dict[str, Any]) -> None:
        """Update the cached fields from a ``/configuration`` response body."""

        images = payload.get("images") or {}
        if images:
            self.image_base_url = (
                images.get("secure_base_url") or images.get("base_url") or self.image_base_url
            )

            poster_sizes = images.get("poster_sizes") or []
            if poster_sizes:
                self.poster_size = (
                    PREFERRED_POSTER_SIZE
                    if PREFERRED_POSTER_SIZE in poster_sizes
                    else poster_sizes[-1]
                )

            logo_sizes = images.get("logo_sizes") or []
            if logo_sizes:
                self.logo_size = next(
                    (size for size in logo_sizes if _width(size) >= MIN_LOGO_WIDTH),
                    logo_sizes[-1],
                )

        self.loaded = True

    def image_url(self, path: Optional[str], size: str = PREFERRED_POSTER_SIZE) -> Optional[str]:
        """Absolute upstream URL for an image path."""

        if not path:
            return None
        return f"{self.image_base_url}{size}{path}"

    def proxy_url(self, path: Optional[str], size: Optional[str] = "original") -> Optional[str]:
        """Local proxy URL served by the image proxy router."""

        if not path:
            return None
        trimmed = path[1:] if path.startswith("/") else path
        return f"{PROXY_PREFIX}/{size or 'original'}/{trimmed}"

    def poster_url(self, path: Optional[str]) -> Optional[str]:
        return self.proxy_url(path, self.poster_size)

    def logo_url(self, path: Optional[str]) -> Optional[str]:
        return self.proxy_url(path, self.logo_size)

    def profile_url(self, path: Optional[str]) -> Optional[str]:
        return self.proxy_url(path, self.profile_size)


def _width(size: str) -> int:
    if not size.startswith("w"):
        return -1
    try:
        return int(size[1:])
    except ValueError:
        return -1
