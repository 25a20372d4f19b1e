"""FastAPI dependencies for the Watchlist API."""
from fastapi import Depends, Request

from ..catalog.metadata_fetcher import MetadataFetcher
from .services import EnrichmentService, IntakeService
from .state import AppState
from .stores.item_store import ItemStore


def get_app_state(request: Request) -> AppState:
    """Resolve the shared application state from the FastAPI request."""
    return request.app.state.app_state


def get_item_store(app_state: AppState = Depends(get_app_state)) -> ItemStore:
    """Return the watchlist store dependency."""
    return app_state.item_store


def get_metadata_fetcher(app_state: AppState = Depends(get_app_state)) -> MetadataFetcher:
    return app_state.metadata_fetcher


def get_enrichment_service(
    fetcher: MetadataFetcher = Depends(get_metadata_fetcher),
) -> EnrichmentService:
    return EnrichmentService(fetcher)


def get_intake_service(
    app_state: AppState = Depends(get_app_state),
    enrichment: EnrichmentService = Depends(get_enrichment_service),
) -> IntakeService:
    """Assemble the intake pipeline from the current collaborators."""
    return IntakeService(
        text_extractor=app_state.text_extractor,
        image_extractor=app_state.image_extractor,
        enrichment=enrichment,
        store=app_state.item_store,
    )
