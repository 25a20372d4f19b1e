"""Shared fixtures: an in-memory TMDb fake and stub extractors."""
from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.catalog.metadata_fetcher import MetadataFetcher  # noqa: E402
from backend.catalog.models import ExtractionResult  # noqa: E402
from backend.errors import ExtractionFailed  # noqa: E402
from backend.watchlist_api import create_app  # noqa: E402
from backend.watchlist_api.db import create_engine_from_settings, init_database  # noqa: E402
from backend.watchlist_api.settings import WatchlistSettings  # noqa: E402
from backend.watchlist_api.stores.item_store import ItemStore  # noqa: E402

MOVIE_PATH = re.compile(r"/movie/(\d+)(/.*)?$")

HEAT_1995 = {
    "id": 949,
    "title": "Heat",
    "original_title": "Heat",
    "release_date": "1995-12-15",
    "vote_count": 7000,
    "popularity": 40.0,
}

HEAT_1986 = {
    "id": 11692,
    "title": "Heat",
    "original_title": "Heat",
    "release_date": "1986-03-14",
    "vote_count": 150,
    "popularity": 8.0,
}


class FakeTMDb:
    """Routes TMDb v3 requests to canned payloads.

    Set ``failures`` to endpoint names (``search``, ``details``,
    ``providers``, ``videos``, ``credits``, ``configuration``, ``image``)
    to make them answer HTTP 500.
    """

    def __init__(self) -> None:
        self.search_results: list[dict[str, Any]] = [HEAT_1995, HEAT_1986]
        self.details: dict[int, dict[str, Any]] = {
            949: {
                "id": 949,
                "title": "Heat",
                "original_title": "Heat",
                "poster_path": "/heat.jpg",
                "release_date": "1995-12-15",
                "genres": [{"id": 28, "name": "Action"}, {"id": 80, "name": "Crime"}],
                "vote_average": 7.9,
                "vote_count": 7000,
                "overview": "A group of high-end professional thieves...",
                "runtime": 170,
            },
            11692: {
                "id": 11692,
                "title": "Heat",
                "original_title": "Heat",
                "poster_path": None,
                "release_date": "1986-03-14",
                "genres": [{"id": 18, "name": "Drama"}],
                "vote_average": 5.1,
                "vote_count": 150,
                "overview": "",
                "runtime": 101,
            },
        }
        self.providers: dict[int, dict[str, Any]] = {
            949: {
                "results": {
                    "US": {
                        "flatrate": [
                            {"provider_name": "Max", "logo_path": "/max.png", "display_priority": 5},
                            {"provider_name": "Netflix", "logo_path": "/netflix.png", "display_priority": 1},
                        ],
                        "rent": [
                            {"provider_name": "Netflix", "logo_path": "/netflix.png", "display_priority": 1},
                            {"provider_name": "Apple TV", "logo_path": "/apple.png", "display_priority": 2},
                        ],
                        "buy": [
                            {"provider_name": "Apple TV", "logo_path": "/apple.png", "display_priority": 2},
                            {"provider_name": "Vudu", "logo_path": "/vudu.png"},
                        ],
                    },
                    "GB": {"flatrate": [{"provider_name": "BBC", "logo_path": "/bbc.png"}]},
                }
            }
        }
        self.videos: dict[int, list[dict[str, Any]]] = {
            949: [
                {"key": "clip1", "name": "Clip", "site": "YouTube", "type": "Clip", "official": True},
                {"key": "vimeo1", "name": "Trailer", "site": "Vimeo", "type": "Trailer", "official": True},
                {"key": "teaser1", "name": "Teaser", "site": "YouTube", "type": "Teaser", "official": True},
                {"key": "fan1", "name": "Fan trailer", "site": "YouTube", "type": "Trailer", "official": False},
                {"key": "official1", "name": "Official Trailer", "site": "YouTube", "type": "Trailer", "official": True},
            ]
        }
        self.cast: dict[int, list[dict[str, Any]]] = {
            949: [
                {"name": f"Actor {index}", "character": f"Role {index}", "profile_path": f"/p{index}.jpg"}
                for index in range(12)
            ]
        }
        self.configuration: dict[str, Any] = {
            "images": {
                "secure_base_url": "https://images.example/t/p/",
                "base_url": "http://images.example/t/p/",
                "poster_sizes": ["w92", "w154", "w342", "w500", "original"],
                "logo_sizes": ["w45", "w92", "w154", "original"],
            }
        }
        self.failures: set[str] = set()
        self.requests: list[httpx.Request] = []

    def endpoint(self, request: httpx.Request) -> str:
        path = request.url.path
        if request.url.host != "api.themoviedb.org":
            return "image"
        if path.endswith("/configuration"):
            return "configuration"
        if path.endswith("/search/movie"):
            return "search"
        match = MOVIE_PATH.search(path)
        if match:
            suffix = match.group(2) or ""
            return {
                "": "details",
                "/watch/providers": "providers",
                "/videos": "videos",
                "/credits": "credits",
            }.get(suffix, "unknown")
        return "unknown"

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        endpoint = self.endpoint(request)
        if endpoint in self.failures:
            return httpx.Response(500, json={"status_message": "boom"})

        if endpoint == "image":
            if request.url.path.endswith("missing.jpg"):
                return httpx.Response(404, text="not found")
            return httpx.Response(
                200, content=b"\x89PNG-bytes", headers={"content-type": "image/png"}
            )
        if endpoint == "configuration":
            return httpx.Response(200, json=self.configuration)
        if endpoint == "search":
            return httpx.Response(200, json={"page": 1, "results": self.search_results})

        movie_id = int(MOVIE_PATH.search(request.url.path).group(1))
        if endpoint == "details":
            if movie_id not in self.details:
                return httpx.Response(404, json={"status_message": "not found"})
            return httpx.Response(200, json=self.details[movie_id])
        if endpoint == "providers":
            return httpx.Response(200, json=self.providers.get(movie_id, {"results": {}}))
        if endpoint == "videos":
            return httpx.Response(200, json={"id": movie_id, "results": self.videos.get(movie_id, [])})
        if endpoint == "credits":
            return httpx.Response(200, json={"id": movie_id, "cast": self.cast.get(movie_id, [])})
        return httpx.Response(404)

    def calls(self, endpoint: str) -> list[httpx.Request]:
        return [request for request in self.requests if self.endpoint(request) == endpoint]


class StubExtractor:
    """Extractor returning a fixed result or raising a fixed error."""

    def __init__(
        self,
        result: ExtractionResult | None = None,
        error: Exception | None = None,
    ) -> None:
        self.result = result or ExtractionResult(title="Heat", year=1995, description="heist film")
        self.error = error
        self.calls: list[str] = []

    async def extract(self, source: str) -> ExtractionResult:
        self.calls.append(source)
        if self.error:
            raise self.error
        return self.result


@pytest.fixture()
def tmdb() -> FakeTMDb:
    return FakeTMDb()


@pytest.fixture()
def fetcher(tmdb: FakeTMDb) -> MetadataFetcher:
    return MetadataFetcher("test-key", transport=httpx.MockTransport(tmdb.handler))


@pytest.fixture()
def client(tmp_path: Path, tmdb: FakeTMDb) -> TestClient:
    """Provide a test client backed by an isolated SQLite database and fakes."""

    db_path = tmp_path / "watchlist.db"
    settings = WatchlistSettings(database_url=f"sqlite:///{db_path}", tmdb_api_key="test-key")
    app = create_app(settings=settings)

    app_state = app.state.app_state
    app_state.metadata_fetcher = MetadataFetcher(
        "test-key",
        configuration=app_state.catalog_configuration,
        transport=httpx.MockTransport(tmdb.handler),
    )
    app_state.text_extractor = StubExtractor()
    app_state.image_extractor = StubExtractor(
        error=ExtractionFailed("Could not identify a movie from the image.")
    )
    return TestClient(app)


@pytest.fixture()
def store(tmp_path: Path) -> ItemStore:
    """Provide a store over a fresh SQLite file created like the app does."""

    settings = WatchlistSettings(database_url=f"sqlite:///{tmp_path / 'store.db'}")
    engine = create_engine_from_settings(settings)
    init_database(engine)
    return ItemStore(engine)
