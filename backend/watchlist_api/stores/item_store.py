"""Watchlist store backed by the single ``watchlist_items`` table."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ...catalog.configuration import CatalogConfiguration
from ...catalog.models import CanonicalMovie, ExtractionResult
from ...errors import DuplicateEntry, ItemNotFound
from ..db import session_scope
from ..models import WatchlistItemRecord, utcnow
from ..schemas import (
    ItemSortOption,
    ItemStatus,
    WatchlistGroupsModel,
    WatchlistItemModel,
    WatchlistMetricsModel,
    WatchProviderModel,
)


def _escape_like(term: str) -> str:
    """Make ``%`` and ``_`` match literally inside a LIKE pattern."""

    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass(slots=True)
class ItemStore:
    """CRUD accessor for watchlist items.

    The UNIQUE constraint on ``tmdb_id`` is what keeps concurrent intakes of
    the same movie from producing two rows; ``create`` reports a violation as
    :class:`DuplicateEntry`.
    """

    engine: Engine
    images: CatalogConfiguration = field(default_factory=CatalogConfiguration)

    def list(
        self,
        *,
        status: ItemStatus | None = None,
        query: str | None = None,
        genre: str | None = None,
        sort: ItemSortOption = "created_desc",
    ) -> list[WatchlistItemModel]:
        """Return items matching the provided filters."""

        statement = select(WatchlistItemRecord)
        if status:
            statement = statement.where(WatchlistItemRecord.status == status)
        if query:
            pattern = _escape_like(query.lower())
            statement = statement.where(
                func.lower(WatchlistItemRecord.title).like(f"%{pattern}%", escape="\\")
            )

        sort_orders: dict[str, tuple[object, ...]] = {
            "created_desc": (WatchlistItemRecord.created_at.desc(), WatchlistItemRecord.id.desc()),
            "created_asc": (WatchlistItemRecord.created_at.asc(), WatchlistItemRecord.id.asc()),
            "title_asc": (func.lower(WatchlistItemRecord.title).asc(), WatchlistItemRecord.id),
            "title_desc": (func.lower(WatchlistItemRecord.title).desc(), WatchlistItemRecord.id),
            "year_desc": (
                WatchlistItemRecord.year.desc().nullslast(),
                func.lower(WatchlistItemRecord.title).asc(),
            ),
            "year_asc": (
                WatchlistItemRecord.year.asc().nullslast(),
                func.lower(WatchlistItemRecord.title).asc(),
            ),
            "rating_desc": (
                WatchlistItemRecord.personal_rating.desc().nullslast(),
                WatchlistItemRecord.created_at.desc(),
            ),
        }
        statement = statement.order_by(*sort_orders.get(sort, sort_orders["created_desc"]))

        with Session(self.engine) as session:
            records: Sequence[WatchlistItemRecord] = session.exec(statement).all()
            if genre:
                wanted = genre.lower()
                records = [
                    record
                    for record in records
                    if any(name.lower() == wanted for name in record.genres or [])
                ]
            return [self._to_model(record) for record in records]

    def grouped(
        self,
        *,
        query: str | None = None,
        genre: str | None = None,
        sort: ItemSortOption = "created_desc",
    ) -> WatchlistGroupsModel:
        """Return the watchlist split by status."""

        return WatchlistGroupsModel(
            to_watch=self.list(status="to_watch", query=query, genre=genre, sort=sort),
            watched=self.list(status="watched", query=query, genre=genre, sort=sort),
        )

    def get(self, item_id: int) -> WatchlistItemModel | None:
        with Session(self.engine) as session:
            record = session.get(WatchlistItemRecord, item_id)
            return self._to_model(record) if record else None

    def get_by_external_id(self, tmdb_id: int) -> WatchlistItemModel | None:
        """Return the item already recorded for a catalog id, if any."""

        with Session(self.engine) as session:
            record = session.exec(
                select(WatchlistItemRecord).where(WatchlistItemRecord.tmdb_id == tmdb_id)
            ).first()
            return self._to_model(record) if record else None

    def create(
        self,
        movie: CanonicalMovie,
        extraction: ExtractionResult,
        *,
        raw_input: str | None,
    ) -> WatchlistItemModel:
        """Persist a new enriched item."""

        record = WatchlistItemRecord(
            raw_input=raw_input,
            title=movie.title or extraction.title,
            year=movie.release_year or extraction.year,
            description=extraction.description,
            tmdb_id=movie.external_id,
            poster_path=movie.poster_path,
            release_date=movie.release_date,
            genres=list(movie.genres),
            vote_average=movie.vote_average,
            vote_count=movie.vote_count,
            providers=[provider.to_dict() for provider in movie.watch_providers],
            overview=movie.overview,
            runtime=movie.runtime_minutes,
            status="to_watch",
        )
        try:
            with session_scope(self.engine) as session:
                session.add(record)
                session.flush()
                session.refresh(record)
                return self._to_model(record)
        except IntegrityError as exc:
            existing = self.get_by_external_id(movie.external_id)
            if existing is None:
                raise
            raise DuplicateEntry(existing) from exc

    def update_status(self, item_id: int, status: ItemStatus) -> WatchlistItemModel:
        """Move an item between lifecycle states, stamping ``watched_at``."""

        now = utcnow()
        with session_scope(self.engine) as session:
            record = session.get(WatchlistItemRecord, item_id)
            if record is None:
                raise ItemNotFound()
            record.status = status
            record.watched_at = now if status == "watched" else None
            record.updated_at = now
            session.add(record)
            session.flush()
            session.refresh(record)
            return self._to_model(record)

    def update_personal(self, item_id: int, changes: dict[str, Any]) -> WatchlistItemModel:
        """Apply personal rating/notes changes. Absent keys are left untouched."""

        with session_scope(self.engine) as session:
            record = session.get(WatchlistItemRecord, item_id)
            if record is None:
                raise ItemNotFound()
            if "personal_rating" in changes:
                record.personal_rating = changes["personal_rating"]
            if "personal_notes" in changes:
                record.personal_notes = changes["personal_notes"]
            record.updated_at = utcnow()
            session.add(record)
            session.flush()
            session.refresh(record)
            return self._to_model(record)

    def delete(self, item_id: int) -> bool:
        with session_scope(self.engine) as session:
            record = session.get(WatchlistItemRecord, item_id)
            if record is None:
                return False
            session.delete(record)
            return True

    def metrics(self) -> WatchlistMetricsModel:
        """Return aggregate statistics for dashboards."""

        with Session(self.engine) as session:
            total = session.exec(select(func.count()).select_from(WatchlistItemRecord)).one()

            status_rows = session.exec(
                select(WatchlistItemRecord.status, func.count())
                .group_by(WatchlistItemRecord.status)
                .order_by(WatchlistItemRecord.status)
            ).all()
            status_counts = {"to_watch": 0, "watched": 0}
            for status, count in status_rows:
                status_counts[status] = count

            genre_counts: dict[str, int] = {}
            for genres in session.exec(select(WatchlistItemRecord.genres)).all():
                for name in genres or []:
                    genre_counts[name] = genre_counts.get(name, 0) + 1

        return WatchlistMetricsModel(
            total=total,
            status_counts=status_counts,
            genre_counts=dict(sorted(genre_counts.items())),
        )

    def _to_model(self, record: WatchlistItemRecord) -> WatchlistItemModel:
        """Convert a record into a response model with proxied image URLs."""

        providers = []
        for provider in record.providers or []:
            if provider and isinstance(provider, dict):
                providers.append(
                    WatchProviderModel(
                        name=provider.get("name", ""),
                        logo_path=provider.get("logo_path"),
                        type=provider.get("type", "flatrate"),
                        display_priority=provider.get("display_priority", 999),
                        logo_url=self.images.logo_url(provider.get("logo_path")),
                    )
                )

        return WatchlistItemModel(
            id=record.id,
            raw_input=record.raw_input,
            title=record.title,
            year=record.year,
            description=record.description,
            tmdb_id=record.tmdb_id,
            poster_path=record.poster_path,
            poster_url=self.images.poster_url(record.poster_path),
            release_date=record.release_date,
            genres=list(record.genres or []),
            vote_average=record.vote_average,
            vote_count=record.vote_count,
            providers=providers,
            overview=record.overview,
            runtime=record.runtime,
            personal_rating=record.personal_rating,
            personal_notes=record.personal_notes,
            status=record.status,
            watched_at=record.watched_at,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
