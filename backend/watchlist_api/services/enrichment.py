"""Resolution of an extraction result into one enriched canonical movie."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

from ...catalog.metadata_fetcher import MetadataFetcher
from ...catalog.models import CanonicalMovie, CastMember, ExtractionResult, Video
from ...catalog.normalizer import normalize_title
from ...catalog.ranker import select_best
from ...errors import NotFound

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MovieExtras:
    """Trailer and cast fetched for the detail view."""

    video: Optional[Video] = None
    credits: list[CastMember] = field(default_factory=list)


class EnrichmentService:
    """Search, rank, fetch and compose. Does not touch the watchlist store."""

    def __init__(self, fetcher: MetadataFetcher) -> None:
        self._fetcher = fetcher

    async def resolve_and_enrich(self, extraction: ExtractionResult) -> CanonicalMovie:
        await self._fetcher.ensure_configuration()

        candidates = await self._fetcher.search(extraction.title, extraction.year)
        chosen = select_best(
            candidates,
            extraction.year,
            normalized_title=normalize_title(extraction.title),
        )
        if chosen is None:
            raise NotFound()
        logger.info(
            "Resolved %r (%s) to TMDb %s %r out of %d candidates",
            extraction.title,
            extraction.year,
            chosen.external_id,
            chosen.title,
            len(candidates),
        )

        movie = await self._fetcher.fetch_details(chosen.external_id)
        movie.watch_providers = await self._fetcher.fetch_watch_providers(movie.external_id)
        if not movie.overview and extraction.description:
            movie.overview = extraction.description
        return movie

    async def fetch_extras(self, movie_id: int) -> MovieExtras:
        """Fetch the primary video and top credits concurrently."""

        video, credits = await asyncio.gather(
            self._fetcher.fetch_primary_video(movie_id),
            self._fetcher.fetch_top_credits(movie_id),
        )
        return MovieExtras(video=video, credits=credits)
