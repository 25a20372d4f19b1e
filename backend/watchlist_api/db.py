"""Database helpers for the Watchlist API."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from . import models  # noqa: F401  registers tables on SQLModel.metadata
from .settings import WatchlistSettings
from .utils.paths import ensure_sqlite_path


def create_engine_from_settings(settings: WatchlistSettings) -> Engine:
    """Create a SQLModel engine using watchlist settings."""

    ensure_sqlite_path(settings.database_url)
    connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
    return create_engine(settings.database_url, echo=settings.database_echo, connect_args=connect_args)


def init_database(engine: Engine) -> None:
    """Create tables if they do not exist yet."""

    SQLModel.metadata.create_all(engine)


@contextmanager
def session_scope(engine: Engine) -> Iterator[Session]:
    """Yield a SQLModel session that commits on success and rolls back on error."""

    session = Session(engine)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
