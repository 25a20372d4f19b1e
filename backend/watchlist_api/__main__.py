"""CLI entry point for launching the Watchlist API with Uvicorn."""
import logging

import uvicorn

from .app import create_app
from .settings import WatchlistSettings


def main() -> None:
    """Start a development server for the Watchlist API."""
    settings = WatchlistSettings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
