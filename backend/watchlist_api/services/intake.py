"""Watchlist intake: extraction, enrichment, deduplication and persistence."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from ...errors import DuplicateEntry, ValidationError
from ..schemas import WatchlistItemModel
from ..stores.item_store import ItemStore
from .enrichment import EnrichmentService
from .extraction import MovieExtractor

logger = logging.getLogger(__name__)

IMAGE_RAW_INPUT = "[Image upload]"


@dataclass(slots=True)
class IntakeOutcome:
    """Either a newly created item or the item that already existed."""

    created: bool
    item: WatchlistItemModel


class IntakeService:
    """Adds a described movie to the watchlist at most once."""

    def __init__(
        self,
        *,
        text_extractor: MovieExtractor,
        image_extractor: MovieExtractor,
        enrichment: EnrichmentService,
        store: ItemStore,
    ) -> None:
        self._text_extractor = text_extractor
        self._image_extractor = image_extractor
        self._enrichment = enrichment
        self._store = store

    async def intake(self, text: str | None = None, image: str | None = None) -> IntakeOutcome:
        text = text.strip() if isinstance(text, str) else None
        if not text and not image:
            raise ValidationError()

        if image:
            extraction = await self._image_extractor.extract(image)
        else:
            extraction = await self._text_extractor.extract(text)

        movie = await self._enrichment.resolve_and_enrich(extraction)

        existing = self._store.get_by_external_id(movie.external_id)
        if existing is not None:
            logger.info("TMDb %s is already on the watchlist as item %s", movie.external_id, existing.id)
            return IntakeOutcome(created=False, item=existing)

        try:
            item = self._store.create(
                movie,
                extraction,
                raw_input=text or (IMAGE_RAW_INPUT if image else extraction.title),
            )
        except DuplicateEntry as exc:
            logger.info("Concurrent intake of TMDb %s resolved to the existing item", movie.external_id)
            return IntakeOutcome(created=False, item=exc.existing)

        logger.info("Added TMDb %s as watchlist item %s", movie.external_id, item.id)
        return IntakeOutcome(created=True, item=item)
