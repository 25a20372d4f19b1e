"""Watchlist item endpoints: intake, browsing and personal bookkeeping."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from ...catalog.configuration import CatalogConfiguration
from ...errors import DuplicateEntry, ItemNotFound
from ..dependencies import get_app_state, get_enrichment_service, get_intake_service, get_item_store
from ..schemas import (
    CastMemberModel,
    DeleteResponse,
    IntakeRequest,
    IntakeResponse,
    ItemSortOption,
    ItemStatus,
    PersonalDetailsUpdate,
    StatusUpdate,
    VideoModel,
    WatchlistGroupsModel,
    WatchlistItemDetailsModel,
    WatchlistItemModel,
    WatchlistMetricsModel,
)
from ..services import EnrichmentService, IntakeService
from ..state import AppState
from ..stores.item_store import ItemStore

router = APIRouter(prefix="/api/items", tags=["items"])


@router.post(
    "/intake",
    response_model=IntakeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": IntakeResponse, "description": "Movie already on the watchlist."}},
)
async def intake_item(
    request: IntakeRequest,
    response: Response,
    intake: IntakeService = Depends(get_intake_service),
) -> IntakeResponse:
    """Identify the described movie and add it to the watchlist."""

    outcome = await intake.intake(request.input, request.image)
    if not outcome.created:
        response.status_code = DuplicateEntry.status_code
        return IntakeResponse(
            created=False, item=outcome.item, message=DuplicateEntry.default_message
        )
    return IntakeResponse(created=True, item=outcome.item)


@router.get("", response_model=WatchlistGroupsModel | list[WatchlistItemModel])
def list_items(
    item_status: ItemStatus | None = Query(
        default=None,
        alias="status",
        description="Return a flat list for one status instead of both groups.",
    ),
    query: str | None = Query(default=None, description="Optional title search term."),
    genre: str | None = Query(default=None, description="Only items tagged with this genre."),
    sort: ItemSortOption = Query(
        default="created_desc", description="Sort ordering applied to the returned items."
    ),
    store: ItemStore = Depends(get_item_store),
) -> WatchlistGroupsModel | list[WatchlistItemModel]:
    """Return the watchlist, grouped by status unless one status is requested."""

    if item_status is not None:
        return store.list(status=item_status, query=query, genre=genre, sort=sort)
    return store.grouped(query=query, genre=genre, sort=sort)


@router.get("/metrics", response_model=WatchlistMetricsModel)
def item_metrics(store: ItemStore = Depends(get_item_store)) -> WatchlistMetricsModel:
    """Return aggregate watchlist statistics."""

    return store.metrics()


@router.get("/{item_id}", response_model=WatchlistItemModel)
def get_item(item_id: int, store: ItemStore = Depends(get_item_store)) -> WatchlistItemModel:
    """Return a single watchlist item, raising when missing."""

    item = store.get(item_id)
    if item is None:
        raise ItemNotFound()
    return item


@router.get("/{item_id}/details", response_model=WatchlistItemDetailsModel)
async def get_item_details(
    item_id: int,
    store: ItemStore = Depends(get_item_store),
    enrichment: EnrichmentService = Depends(get_enrichment_service),
    app_state: AppState = Depends(get_app_state),
) -> WatchlistItemDetailsModel:
    """Return an item together with its trailer and top-billed cast."""

    item = store.get(item_id)
    if item is None:
        raise ItemNotFound()

    extras = await enrichment.fetch_extras(item.tmdb_id)
    images: CatalogConfiguration = app_state.catalog_configuration

    videos = []
    if extras.video is not None:
        video = extras.video
        videos.append(
            VideoModel(
                key=video.key,
                name=video.name,
                site=video.site,
                type=video.type,
                official=video.official,
                url=video.url,
            )
        )
    credits = [
        CastMemberModel(
            name=member.name,
            character=member.character,
            profile_path=member.profile_path,
            profile_url=images.profile_url(member.profile_path),
        )
        for member in extras.credits
    ]
    return WatchlistItemDetailsModel(**item.model_dump(), videos=videos, credits=credits)


@router.patch("/{item_id}/status", response_model=WatchlistItemModel)
def update_item_status(
    item_id: int,
    update: StatusUpdate,
    store: ItemStore = Depends(get_item_store),
) -> WatchlistItemModel:
    """Mark an item as watched or move it back to the to-watch list."""

    return store.update_status(item_id, update.status)


@router.patch("/{item_id}/personal", response_model=WatchlistItemModel)
def update_item_personal(
    item_id: int,
    update: PersonalDetailsUpdate,
    store: ItemStore = Depends(get_item_store),
) -> WatchlistItemModel:
    """Save a personal rating (0-5 stars) and notes."""

    return store.update_personal(item_id, update.model_dump(exclude_unset=True))


@router.delete("/{item_id}", response_model=DeleteResponse)
def delete_item(item_id: int, store: ItemStore = Depends(get_item_store)) -> DeleteResponse:
    """Remove an item from the watchlist."""

    if not store.delete(item_id):
        raise ItemNotFound()
    return DeleteResponse(success=True)
