"""
TMDb metadata fetcher.

Search, details and configuration are required steps and raise
``UpstreamUnavailable`` on failure. Providers, videos and credits are
best-effort: failures are logged and degrade to empty results.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..errors import NotFound, ServiceNotConfigured, UpstreamUnavailable
from .configuration import CatalogConfiguration
from .models import CanonicalMovie, CastMember, SearchCandidate, Video, WatchProvider

logger = logging.getLogger(__name__)

PROVIDER_KINDS = ("flatrate", "rent", "buy")
VIDEO_SITE = "YouTube"
TOP_CREDITS = 10


class MetadataFetcher:
    TMDB_ENDPOINT = "https://api.themoviedb.org/3"

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        configuration: CatalogConfiguration | None = None,
        region: str = "US",
        base_url: str = TMDB_ENDPOINT,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.configuration = configuration or CatalogConfiguration()
        self.region = region
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _client(self, base_url: str | None = None, **kwargs: Any) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=base_url if base_url is not None else self._base_url,
            timeout=self._timeout,
            transport=self._transport,
            **kwargs,
        )

    async def _get_json(self, path: str, params: Dict[str, Any] | None = None) -> Dict[str, Any]:
        if not self.enabled:
            raise ServiceNotConfigured("TMDb API key not configured")

        query: Dict[str, Any] = {"api_key": self.api_key}
        if params:
            query.update(params)

        try:
            async with self._client() as client:
                response = await client.get(path, params=query)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error("TMDb %s responded with HTTP %s", path, exc.response.status_code)
            raise UpstreamUnavailable() from exc
        except httpx.HTTPError as exc:
            logger.error("TMDb %s request failed: %s", path, exc)
            raise UpstreamUnavailable() from exc
        except ValueError as exc:
            logger.error("TMDb %s returned invalid JSON", path)
            raise UpstreamUnavailable() from exc

        if not isinstance(payload, dict):
            logger.error("TMDb %s returned a non-object payload", path)
            raise UpstreamUnavailable()
        return payload

    async def ensure_configuration(self) -> CatalogConfiguration:
        """Load the image configuration on first use."""

        if not self.configuration.loaded:
            payload = await self._get_json("/configuration")
            self.configuration.apply(payload)
        return self.configuration

    async def search(self, title: str, year: Optional[int] = None) -> List[SearchCandidate]:
        """Search movies by title, raising NotFound when nothing matches."""

        params: Dict[str, Any] = {"query": title, "include_adult": "false"}
        if year:
            params["year"] = year

        payload = await self._get_json("/search/movie", params)
        results = payload.get("results") or []
        candidates = [
            SearchCandidate.from_payload(result)
            for result in results
            if isinstance(result, dict) and result.get("id") is not None
        ]
        if not candidates:
            raise NotFound()
        return candidates

    async def fetch_details(self, movie_id: int) -> CanonicalMovie:
        data = await self._get_json(f"/movie/{movie_id}")
        return CanonicalMovie(
            external_id=data.get("id", movie_id),
            title=data.get("title"),
            original_title=data.get("original_title"),
            poster_path=data.get("poster_path"),
            release_date=data.get("release_date") or None,
            genres=[genre["name"] for genre in data.get("genres") or [] if genre.get("name")],
            vote_average=data.get("vote_average"),
            vote_count=data.get("vote_count"),
            overview=(data.get("overview") or "").strip() or None,
            runtime_minutes=data.get("runtime") or None,
        )

    async def fetch_watch_providers(self, movie_id: int) -> List[WatchProvider]:
        try:
            data = await self._get_json(f"/movie/{movie_id}/watch/providers")
        except UpstreamUnavailable:
            logger.warning("Watch providers unavailable for movie %s", movie_id)
            return []

        region_data = (data.get("results") or {}).get(self.region)
        if not region_data:
            return []

        providers: List[WatchProvider] = []
        seen: set[str] = set()
        for kind in PROVIDER_KINDS:
            for entry in region_data.get(kind) or []:
                name = entry.get("provider_name")
                if not name or name in seen:
                    continue
                seen.add(name)
                priority = entry.get("display_priority")
                providers.append(
                    WatchProvider(
                        name=name,
                        logo_path=entry.get("logo_path"),
                        kind=kind,
                        display_priority=999 if priority is None else priority,
                    )
                )

        providers.sort(key=lambda p: (PROVIDER_KINDS.index(p.kind), p.display_priority))
        return providers

    async def fetch_primary_video(self, movie_id: int) -> Optional[Video]:
        try:
            data = await self._get_json(f"/movie/{movie_id}/videos")
        except UpstreamUnavailable:
            logger.warning("Videos unavailable for movie %s", movie_id)
            return None

        videos = [
            video
            for video in data.get("results") or []
            if isinstance(video, dict) and video.get("site") == VIDEO_SITE
        ]
        preferences = (
            lambda v: v.get("type") == "Trailer" and bool(v.get("official")),
            lambda v: v.get("type") == "Trailer",
            lambda v: v.get("type") == "Teaser",
            lambda v: True,
        )
        for matches in preferences:
            chosen = next((video for video in videos if matches(video)), None)
            if chosen is not None:
                return Video(
                    key=chosen.get("key") or "",
                    name=chosen.get("name") or "",
                    site=chosen.get("site") or VIDEO_SITE,
                    type=chosen.get("type") or "",
                    official=bool(chosen.get("official")),
                )
        return None

    async def fetch_top_credits(self, movie_id: int, limit: int = TOP_CREDITS) -> List[CastMember]:
        try:
            data = await self._get_json(f"/movie/{movie_id}/credits")
        except UpstreamUnavailable:
            logger.warning("Credits unavailable for movie %s", movie_id)
            return []

        return [
            CastMember(
                name=person.get("name") or "",
                character=person.get("character"),
                profile_path=person.get("profile_path"),
            )
            for person in (data.get("cast") or [])[:limit]
        ]

    async def fetch_image(self, size: str, image_name: str) -> httpx.Response:
        """Fetch raw image bytes from the configured image host."""

        url = self.configuration.image_url(f"/{image_name}", size)
        try:
            async with self._client(base_url="", follow_redirects=True) as client:
                return await client.get(url)
        except httpx.HTTPError as exc:
            logger.error("TMDb image request failed for %s: %s", url, exc)
            raise UpstreamUnavailable("Failed to load image") from exc
