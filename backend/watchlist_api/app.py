"""Application factory for the Watchlist API."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..errors import WatchlistError
from .routers import health, images, items
from .schemas import API_VERSION
from .settings import WatchlistSettings
from .state import AppState

logger = logging.getLogger(__name__)


async def handle_watchlist_error(request: Request, exc: WatchlistError) -> JSONResponse:
    """Map domain errors to their stable status with a user-facing message only."""

    if exc.status_code >= 500:
        logger.warning(
            "%s %s failed with %s", request.method, request.url.path, type(exc).__name__,
            exc_info=exc.__cause__ or exc,
        )
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app(settings: WatchlistSettings | None = None) -> FastAPI:
    """Build and configure the FastAPI application."""

    resolved_settings = settings or WatchlistSettings()
    app_state = AppState(settings=resolved_settings)

    app = FastAPI(title="Watchlist API", version=API_VERSION)
    app.state.app_state = app_state
    app.state.settings = app_state.settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(WatchlistError, handle_watchlist_error)

    for router in (health.router, items.router, images.router):
        app.include_router(router)

    return app
