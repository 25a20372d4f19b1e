"""Filesystem helpers for watchlist storage paths."""
from __future__ import annotations

from pathlib import Path

from platformdirs import user_data_dir


APP_NAME = "Watchlist"
APP_AUTHOR = "Watchlist"


def default_database_path() -> Path:
    """Return the platform-appropriate default SQLite database location."""

    return Path(user_data_dir(APP_NAME, APP_AUTHOR)) / "watchlist.db"


def default_database_url() -> str:
    """Return the default SQLite connection URL."""

    return f"sqlite:///{default_database_path()}"


def ensure_sqlite_path(database_url: str) -> None:
    """Create parent directories when using a SQLite URL."""

    if database_url.startswith("sqlite:///"):
        path_part = database_url.removeprefix("sqlite:///").split("?")[0]
        if path_part and path_part != ":memory:":
            Path(path_part).expanduser().parent.mkdir(parents=True, exist_ok=True)
