"""Movie title extraction from free text or images via OpenAI."""
from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import openai
from openai import AsyncOpenAI

from ...catalog.models import ExtractionResult
from ...errors import ExtractionFailed, ServiceNotConfigured

logger = logging.getLogger(__name__)

TEXT_SYSTEM_PROMPT = (
    "You are a movie title parser. Extract movie information from user input "
    "and return as JSON."
)

TEXT_USER_PROMPT = """Extract movie title and optional year from the user input. If unsure about year or description, return null.
Reply as strict JSON with keys: title, year, description.

User input: {input}"""

IMAGE_SYSTEM_PROMPT = """You are a movie identification expert. Analyze images (screenshots, movie posters, social media posts, etc.) to identify movies being discussed or shown.
Extract the main movie title from the image. This could be from:
- Movie posters or promotional material
- Social media posts or tweets about movies
- Screenshots from movies
- Text mentioning movies
- Video frames or scenes
Be careful to only extract actual movie titles, not TV shows or other content.
Return as strict JSON with keys: title, year, description.
If no movie can be identified, return null for title."""

IMAGE_USER_PROMPT = (
    "What movie is shown or discussed in this image? Extract the movie title and any "
    "additional information you can determine."
)


class MovieExtractor(Protocol):
    """Turns one user-supplied source into an :class:`ExtractionResult`."""

    async def extract(self, source: str) -> ExtractionResult:
        ...


def parse_extraction(content: str | None) -> ExtractionResult | None:
    """Parse a JSON completion into a result, or None when it has no title."""

    try:
        parsed = json.loads(content or "")
    except ValueError:
        return None
    if not isinstance(parsed, dict):
        return None

    title = parsed.get("title")
    if not isinstance(title, str) or not title.strip():
        return None

    year: int | None
    try:
        year = int(parsed["year"]) if parsed.get("year") else None
    except (TypeError, ValueError):
        year = None

    description = parsed.get("description")
    if not isinstance(description, str) or not description.strip():
        description = None

    return ExtractionResult(title=title.strip(), year=year, description=description)


class _OpenAIExtractor:
    """Shared chat-completion plumbing for the text and image extractors."""

    failure_message = ExtractionFailed.default_message
    no_title_message = (
        "Could not extract a movie title. Try adding more detail or the release year."
    )

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str,
        timeout: float = 30.0,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self.model = model
        self._client = client
        if self._client is None and api_key:
            self._client = AsyncOpenAI(api_key=api_key, timeout=timeout)

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def _messages(self, source: str) -> list[dict[str, Any]]:
        raise NotImplementedError

    async def extract(self, source: str) -> ExtractionResult:
        if self._client is None:
            raise ServiceNotConfigured("OpenAI client not initialized")

        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=self._messages(source),
                temperature=0.3,
                max_tokens=150,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as exc:
            logger.error("OpenAI extraction with %s failed: %s", self.model, exc)
            raise ExtractionFailed(self.failure_message) from exc

        content = response.choices[0].message.content if response.choices else None
        result = parse_extraction(content)
        if result is None:
            logger.info("OpenAI extraction returned no title: %r", content)
            raise ExtractionFailed(self.no_title_message)
        return result


class TextMovieExtractor(_OpenAIExtractor):
    """Extracts a title from free text such as "that heist movie with De Niro"."""

    def _messages(self, source: str) -> list[dict[str, Any]]:
        return [
            {"role": "system", "content": TEXT_SYSTEM_PROMPT},
            {"role": "user", "content": TEXT_USER_PROMPT.format(input=json.dumps(source.strip()))},
        ]


class ImageMovieExtractor(_OpenAIExtractor):
    """Identifies a movie from a poster, screenshot or social post."""

    failure_message = (
        "We couldn't extract a movie from that image. Try another image or type the title instead."
    )
    no_title_message = (
        "Could not identify a movie from the image. Try a clearer image or enter the title manually."
    )

    def _messages(self, source: str) -> list[dict[str, Any]]:
        return [
            {"role": "system", "content": IMAGE_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": IMAGE_USER_PROMPT},
                    {"type": "image_url", "image_url": {"url": source, "detail": "high"}},
                ],
            },
        ]
