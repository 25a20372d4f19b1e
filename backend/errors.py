"""Error taxonomy shared by the catalog pipeline and the watchlist API."""
from __future__ import annotations

from typing import Any


class WatchlistError(RuntimeError):
    """Base error carrying a user-facing message and a stable HTTP status."""

    status_code: int = 500
    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(WatchlistError):
    """Raised for malformed caller input before any remote call is made."""

    status_code = 400
    default_message = "Please provide a movie title or upload an image"


class ExtractionFailed(WatchlistError):
    """Raised when no movie title could be extracted from the input."""

    status_code = 422
    default_message = (
        "We couldn't understand that title. Try rephrasing or include the release year."
    )


class NotFound(WatchlistError):
    """Raised when the catalog search returns no candidates."""

    status_code = 404
    default_message = (
        "We couldn't find that movie. Try adding the release year or a more specific title."
    )


class ItemNotFound(WatchlistError):
    """Raised when a watchlist item id does not exist."""

    status_code = 404
    default_message = "Item not found"


class UpstreamUnavailable(WatchlistError):
    """Raised when a required remote call fails or times out."""

    status_code = 502
    default_message = "The movie catalog is unavailable right now. Please try again."


class ServiceNotConfigured(WatchlistError):
    """Raised when an external service is used without credentials."""

    status_code = 503
    default_message = "This service is not configured."


class DuplicateEntry(WatchlistError):
    """Raised when the resolved movie is already on the watchlist."""

    status_code = 409
    default_message = "Already on your list"

    def __init__(self, existing: Any, message: str | None = None) -> None:
        super().__init__(message)
        self.existing = existing
