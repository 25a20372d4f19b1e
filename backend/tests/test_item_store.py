"""Tests for the SQLite-backed watchlist store."""
from __future__ import annotations

from backend.catalog.models import CanonicalMovie, ExtractionResult
from backend.watchlist_api.stores.item_store import ItemStore


def add(store: ItemStore, external_id: int, title: str, **fields):
    return store.create(
        CanonicalMovie(external_id=external_id, title=title, **fields),
        ExtractionResult(title=title),
        raw_input=title.lower(),
    )


def test_create_and_updates_stamp_timestamps(store: ItemStore) -> None:
    item = add(store, 949, "Heat", genres=["Crime"])

    assert item.created_at is not None
    assert item.updated_at is not None
    assert item.watched_at is None

    watched = store.update_status(item.id, "watched")
    assert watched.status == "watched"
    assert watched.watched_at is not None

    rated = store.update_personal(item.id, {"personal_rating": 4.0})
    assert rated.personal_rating == 4.0
    assert rated.updated_at >= item.updated_at

    reverted = store.update_status(item.id, "to_watch")
    assert reverted.watched_at is None


def test_deleted_ids_are_not_reused(store: ItemStore) -> None:
    first = add(store, 949, "Heat")
    second = add(store, 11692, "Heat")

    assert store.delete(second.id) is True
    replacement = add(store, 11692, "Heat")

    assert replacement.id > second.id
    assert store.get(second.id) is None
    assert store.get(first.id).tmdb_id == 949


def test_query_wildcards_match_literally(store: ItemStore) -> None:
    add(store, 1, "Heat")
    add(store, 2, "snake_case")
    add(store, 3, "100% Wolf")

    assert [item.tmdb_id for item in store.list(query="_")] == [2]
    assert [item.tmdb_id for item in store.list(query="%")] == [3]
    assert {item.tmdb_id for item in store.list(query="a")} == {1, 2}
    assert store.list(query="\\") == []
