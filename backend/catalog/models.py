"""
Value objects exchanged between the catalog fetcher, the ranker and the API.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Optional

from .normalizer import normalize_title

ProviderKind = Literal["flatrate", "rent", "buy"]

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v="


def parse_release_year(release_date: Optional[str]) -> Optional[int]:
    """Extract the year from an ISO ``YYYY-MM-DD`` date, or None."""

    if not release_date:
        return None
    try:
        return int(str(release_date).split("-")[0])
    except ValueError:
        return None


@dataclass(slots=True)
class ExtractionResult:
    """Best-guess movie description produced by an extractor."""

    title: str
    year: Optional[int] = None
    description: Optional[str] = None


@dataclass(slots=True)
class SearchCandidate:
    """One catalog search hit, with the derived fields used for ranking."""

    external_id: int
    title: str
    original_title: str
    release_date: Optional[str] = None
    vote_count: int = 0
    popularity: float = 0.0
    release_year: Optional[int] = field(init=False, default=None)
    normalized_title: str = field(init=False, default="")
    normalized_original_title: str = field(init=False, default="")

    def __post_init__(self) -> None:
        self.release_year = parse_release_year(self.release_date)
        self.normalized_title = normalize_title(self.title)
        self.normalized_original_title = normalize_title(self.original_title)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "SearchCandidate":
        return cls(
            external_id=payload["id"],
            title=payload.get("title") or "",
            original_title=payload.get("original_title") or "",
            release_date=payload.get("release_date") or None,
            vote_count=max(int(payload.get("vote_count") or 0), 0),
            popularity=max(float(payload.get("popularity") or 0.0), 0.0),
        )


@dataclass(slots=True)
class WatchProvider:
    """Streaming availability entry for the configured region."""

    name: str
    logo_path: Optional[str]
    kind: ProviderKind
    display_priority: int = 999

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "logo_path": self.logo_path,
            "type": self.kind,
            "display_priority": self.display_priority,
        }


@dataclass(slots=True)
class Video:
    """A video attached to a movie, usually its trailer."""

    key: str
    name: str
    site: str
    type: str
    official: bool = False

    @property
    def url(self) -> Optional[str]:
        if self.site == "YouTube" and self.key:
            return f"{YOUTUBE_WATCH_URL}{self.key}"
        return None


@dataclass(slots=True)
class CastMember:
    """Billed cast entry."""

    name: str
    character: Optional[str] = None
    profile_path: Optional[str] = None


@dataclass(slots=True)
class CanonicalMovie:
    """The disambiguated movie chosen for a user's description."""

    external_id: int
    title: Optional[str] = None
    original_title: Optional[str] = None
    poster_path: Optional[str] = None
    release_date: Optional[str] = None
    genres: list[str] = field(default_factory=list)
    vote_average: Optional[float] = None
    vote_count: Optional[int] = None
    overview: Optional[str] = None
    runtime_minutes: Optional[int] = None
    watch_providers: list[WatchProvider] = field(default_factory=list)

    @property
    def release_year(self) -> Optional[int]:
        return parse_release_year(self.release_date)
