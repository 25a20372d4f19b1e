"""Tests for the OpenAI-backed title extractors."""
from __future__ import annotations

import asyncio
import json
from types import SimpleNamespace
from typing import Any

import httpx
import openai
import pytest

from backend.catalog.models import ExtractionResult
from backend.errors import ExtractionFailed, ServiceNotConfigured
from backend.watchlist_api.services.extraction import (
    ImageMovieExtractor,
    TextMovieExtractor,
    parse_extraction,
)


class FakeCompletions:
    """Records chat completion requests and replays one canned reply."""

    def __init__(self, content: str | None = None, error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.requests: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> SimpleNamespace:
        self.requests.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(completions: FakeCompletions) -> Any:
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        (
            '{"title": " Heat ", "year": 1995, "description": "heist"}',
            ExtractionResult(title="Heat", year=1995, description="heist"),
        ),
        ('{"title": "Heat", "year": "1995"}', ExtractionResult(title="Heat", year=1995)),
        ('{"title": "Heat", "year": "mid nineties"}', ExtractionResult(title="Heat")),
        ('{"title": "Heat", "year": null, "description": ""}', ExtractionResult(title="Heat")),
        ('{"title": null, "year": 1995}', None),
        ('{"title": "   "}', None),
        ('["Heat"]', None),
        ("not json", None),
        (None, None),
    ],
)
def test_parse_extraction(content: str | None, expected: ExtractionResult | None) -> None:
    assert parse_extraction(content) == expected


def test_text_extractor_sends_json_chat_request() -> None:
    completions = FakeCompletions(json.dumps({"title": "Heat", "year": 1995, "description": None}))
    extractor = TextMovieExtractor(None, model="text-model", client=fake_client(completions))

    result = asyncio.run(extractor.extract("  heat with de niro  "))

    assert result == ExtractionResult(title="Heat", year=1995)
    request = completions.requests[0]
    assert request["model"] == "text-model"
    assert request["temperature"] == 0.3
    assert request["max_tokens"] == 150
    assert request["response_format"] == {"type": "json_object"}
    assert request["messages"][0]["role"] == "system"
    assert '"heat with de niro"' in request["messages"][1]["content"]


def test_image_extractor_sends_data_url() -> None:
    completions = FakeCompletions('{"title": "Heat", "year": 1995}')
    extractor = ImageMovieExtractor(None, model="vision-model", client=fake_client(completions))

    result = asyncio.run(extractor.extract("data:image/png;base64,AAAA"))

    assert result.title == "Heat"
    content = completions.requests[0]["messages"][1]["content"]
    assert content[1] == {
        "type": "image_url",
        "image_url": {"url": "data:image/png;base64,AAAA", "detail": "high"},
    }


def test_extractor_without_title_fails() -> None:
    extractor = TextMovieExtractor(
        None, model="text-model", client=fake_client(FakeCompletions('{"title": null}'))
    )

    with pytest.raises(ExtractionFailed) as excinfo:
        asyncio.run(extractor.extract("asdfgh"))

    assert excinfo.value.status_code == 422


def test_image_extractor_without_title_uses_image_message() -> None:
    extractor = ImageMovieExtractor(
        None, model="vision-model", client=fake_client(FakeCompletions("{}"))
    )

    with pytest.raises(ExtractionFailed, match="Could not identify a movie from the image"):
        asyncio.run(extractor.extract("data:image/png;base64,AAAA"))


def test_remote_failure_becomes_extraction_failed() -> None:
    error = openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1"))
    completions = FakeCompletions(error=error)
    extractor = TextMovieExtractor(None, model="text-model", client=fake_client(completions))

    with pytest.raises(ExtractionFailed) as excinfo:
        asyncio.run(extractor.extract("heat"))

    assert excinfo.value.__cause__ is error
    assert len(completions.requests) == 1


def test_extractor_without_api_key_is_not_configured() -> None:
    extractor = TextMovieExtractor(None, model="text-model")

    assert extractor.enabled is False
    with pytest.raises(ServiceNotConfigured):
        asyncio.run(extractor.extract("heat"))


def test_extractor_with_api_key_builds_client() -> None:
    extractor = ImageMovieExtractor("sk-test", model="vision-model")

    assert extractor.enabled is True
