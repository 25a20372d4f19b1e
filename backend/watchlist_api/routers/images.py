"""Image proxy serving TMDb posters, logos and profile photos."""
from __future__ import annotations

import re

from fastapi import APIRouter, Depends, HTTPException, Response

from ...catalog.metadata_fetcher import MetadataFetcher
from ..dependencies import get_metadata_fetcher

router = APIRouter(prefix="/tmdb/images", tags=["images"])

_SIZE_CHARS = re.compile(r"[^a-z0-9_]", re.IGNORECASE)
_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_.-]")

DEFAULT_CACHE_CONTROL = "public, max-age=86400"


@router.get("/{size}/{image_name}")
async def proxy_image(
    size: str,
    image_name: str,
    fetcher: MetadataFetcher = Depends(get_metadata_fetcher),
) -> Response:
    """Stream an image from the TMDb image host through this service."""

    sanitized_size = _SIZE_CHARS.sub("", size)
    sanitized_name = _NAME_CHARS.sub("", image_name)
    if not sanitized_size or not sanitized_name:
        raise HTTPException(status_code=400, detail="Invalid image parameters")

    upstream = await fetcher.fetch_image(sanitized_size, sanitized_name)
    if not upstream.is_success:
        raise HTTPException(status_code=upstream.status_code, detail="Image unavailable")

    return Response(
        content=upstream.content,
        media_type=upstream.headers.get("content-type", "image/jpeg"),
        headers={
            "Cache-Control": upstream.headers.get("cache-control", DEFAULT_CACHE_CONTROL),
            "Access-Control-Allow-Origin": "*",
        },
    )
