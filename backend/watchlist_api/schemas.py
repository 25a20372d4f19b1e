"""Pydantic models exposed by the Watchlist API."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

API_VERSION = "0.1.0"

ItemStatus = Literal["to_watch", "watched"]

ItemSortOption = Literal[
    "created_desc",
    "created_asc",
    "title_asc",
    "title_desc",
    "year_desc",
    "year_asc",
    "rating_desc",
]


class HealthStatus(BaseModel):
    """Service health payload."""

    status: Literal["ok"] = Field(default="ok")
    version: str = Field(default=API_VERSION, description="Semantic version of the API service.")
    catalog_configured: bool = Field(
        default=False, description="Whether a TMDb API key is configured."
    )
    extraction_configured: bool = Field(
        default=False, description="Whether an OpenAI API key is configured."
    )


class WatchProviderModel(BaseModel):
    """Streaming availability entry with a proxied logo URL."""

    name: str
    logo_path: str | None = None
    type: Literal["flatrate", "rent", "buy"]
    display_priority: int = 999
    logo_url: str | None = None


class VideoModel(BaseModel):
    """Trailer or other promotional video."""

    key: str
    name: str
    site: str
    type: str
    official: bool = False
    url: str | None = None


class CastMemberModel(BaseModel):
    """Billed cast entry with a proxied profile photo URL."""

    name: str
    character: str | None = None
    profile_path: str | None = None
    profile_url: str | None = None


class WatchlistItemModel(BaseModel):
    """Watchlist entry as presented to clients."""

    id: int
    raw_input: str | None = None
    title: str
    year: int | None = None
    description: str | None = None
    tmdb_id: int
    poster_path: str | None = None
    poster_url: str | None = None
    release_date: str | None = None
    genres: list[str] = Field(default_factory=list)
    vote_average: float | None = None
    vote_count: int | None = None
    providers: list[WatchProviderModel] = Field(default_factory=list)
    overview: str | None = None
    runtime: int | None = None
    personal_rating: float | None = None
    personal_notes: str | None = None
    status: ItemStatus
    watched_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class WatchlistItemDetailsModel(WatchlistItemModel):
    """Watchlist entry extended with trailer and cast."""

    videos: list[VideoModel] = Field(default_factory=list)
    credits: list[CastMemberModel] = Field(default_factory=list)


class WatchlistGroupsModel(BaseModel):
    """Watchlist split by lifecycle status."""

    to_watch: list[WatchlistItemModel] = Field(default_factory=list)
    watched: list[WatchlistItemModel] = Field(default_factory=list)


class WatchlistMetricsModel(BaseModel):
    """Aggregate statistics for the watchlist."""

    total: int = Field(description="Total number of items on the watchlist.")
    status_counts: dict[str, int] = Field(
        default_factory=dict, description="Count of items per lifecycle status."
    )
    genre_counts: dict[str, int] = Field(
        default_factory=dict, description="Count of items per catalog genre."
    )


class IntakeRequest(BaseModel):
    """Free text or an image (data URL) describing a movie."""

    input: str | None = Field(default=None, description="Free-text movie description.")
    image: str | None = Field(
        default=None, description="Base64 data URL of a poster, screenshot or post."
    )


class IntakeResponse(BaseModel):
    """Outcome of an intake request."""

    created: bool = Field(description="False when the movie was already on the watchlist.")
    item: WatchlistItemModel
    message: str | None = None


class StatusUpdate(BaseModel):
    """Payload used to move an item between lifecycle states."""

    status: ItemStatus


class PersonalDetailsUpdate(BaseModel):
    """Personal rating and notes. Omitted fields are kept, null clears."""

    personal_rating: float | None = Field(default=None, ge=0, le=5)
    personal_notes: str | None = Field(default=None)


class DeleteResponse(BaseModel):
    success: bool = True
