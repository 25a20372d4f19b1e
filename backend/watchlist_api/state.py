"""Shared state container for the Watchlist API."""
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.engine import Engine

from ..catalog.configuration import CatalogConfiguration
from ..catalog.metadata_fetcher import MetadataFetcher
from .db import create_engine_from_settings, init_database
from .services.extraction import ImageMovieExtractor, MovieExtractor, TextMovieExtractor
from .settings import WatchlistSettings
from .stores.item_store import ItemStore


@dataclass(slots=True)
class AppState:
    """Encapsulates the collaborators shared across routers."""

    settings: WatchlistSettings
    engine: Engine
    catalog_configuration: CatalogConfiguration
    metadata_fetcher: MetadataFetcher
    item_store: ItemStore
    text_extractor: MovieExtractor
    image_extractor: MovieExtractor

    def __init__(self, settings: WatchlistSettings) -> None:
        self.settings = settings
        self.engine = create_engine_from_settings(settings)
        init_database(self.engine)
        self.catalog_configuration = CatalogConfiguration()
        self.metadata_fetcher = MetadataFetcher(
            settings.tmdb_api_key,
            configuration=self.catalog_configuration,
            region=settings.watch_region,
            base_url=settings.tmdb_base_url,
            timeout=settings.http_timeout,
        )
        self.item_store = ItemStore(self.engine, images=self.catalog_configuration)
        self.text_extractor = TextMovieExtractor(
            settings.openai_api_key, model=settings.openai_text_model
        )
        self.image_extractor = ImageMovieExtractor(
            settings.openai_api_key, model=settings.openai_vision_model
        )
