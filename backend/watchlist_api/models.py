"""Database models for the Watchlist API."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import CheckConstraint, Column, JSON
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Timezone-aware current UTC time for timestamp columns."""

    return datetime.now(timezone.utc)


class WatchlistItemRecord(SQLModel, table=True):
    """One movie on the watchlist, flattened with its catalog metadata."""

    __tablename__ = "watchlist_items"
    # Ids of deleted items are never handed out again.
    __table_args__ = (
        CheckConstraint("status IN ('to_watch', 'watched')", name="ck_watchlist_items_status"),
        {"sqlite_autoincrement": True},
    )

    id: int | None = Field(default=None, primary_key=True)
    raw_input: str | None = Field(default=None)
    title: str = Field(index=True)
    year: int | None = Field(default=None, index=True)
    description: str | None = Field(default=None)
    tmdb_id: int = Field(index=True, unique=True)
    poster_path: str | None = Field(default=None)
    release_date: str | None = Field(default=None)
    genres: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    vote_average: float | None = Field(default=None)
    vote_count: int | None = Field(default=None)
    providers: list[dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    overview: str | None = Field(default=None)
    runtime: int | None = Field(default=None)
    personal_rating: float | None = Field(default=None)
    personal_notes: str | None = Field(default=None)
    status: str = Field(default="to_watch", index=True)
    watched_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)
