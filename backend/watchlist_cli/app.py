"""Command line interface for the Watchlist API."""
from __future__ import annotations

import base64
import json
import mimetypes
from pathlib import Path
from typing import Optional

import httpx
import typer

from .client import create_client


DEFAULT_API_BASE = "http://localhost:8000"

app = typer.Typer(help="Add movies to your watchlist and keep track of what you've seen.")


STATUS_CHOICES = {"to_watch", "watched"}
SORT_CHOICES = (
    "created_desc",
    "created_asc",
    "title_asc",
    "title_desc",
    "year_desc",
    "year_asc",
    "rating_desc",
)


def _api_base_option() -> typer.Option:
    return typer.Option(
        DEFAULT_API_BASE,
        "--api-base",
        help="Base URL for the Watchlist API service.",
        show_default=True,
        envvar="WATCHLIST_API_BASE",
    )


def _echo_json(payload: object) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and isinstance(body.get("detail"), str):
        return body["detail"]
    return response.text


def _finish(response: httpx.Response) -> None:
    """Print a successful JSON body, or the API's message and exit non-zero."""

    if response.is_client_error or response.status_code in (502, 503):
        typer.echo(_detail(response), err=True)
        raise typer.Exit(code=1)
    response.raise_for_status()
    _echo_json(response.json())


def _image_data_url(path: Path) -> str:
    mime_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


@app.command()
def health(api_base: str = _api_base_option()) -> None:
    """Call the /health endpoint and pretty-print the response."""

    with create_client(api_base) as client:
        response = client.get("/health")
        response.raise_for_status()
        _echo_json(response.json())


@app.command()
def add(
    text: Optional[str] = typer.Argument(
        None, help="Free-text description, e.g. \"heat 1995\" or \"that movie with the spinning top\"."
    ),
    image: Optional[Path] = typer.Option(
        None,
        "--image",
        "-i",
        exists=True,
        dir_okay=False,
        readable=True,
        help="Poster, screenshot or social post to identify the movie from.",
    ),
    api_base: str = _api_base_option(),
) -> None:
    """Identify a movie and add it to the watchlist."""

    if not (text and text.strip()) and image is None:
        typer.echo("Provide a movie description or --image.", err=True)
        raise typer.Exit(code=1)

    payload: dict[str, object] = {}
    if text:
        payload["input"] = text
    if image is not None:
        payload["image"] = _image_data_url(image)

    with create_client(api_base) as client:
        response = client.post("/api/items/intake", json=payload)
        if response.status_code == 409:
            _echo_json(response.json())
            typer.echo("Already on your list", err=True)
            raise typer.Exit(code=1)
        _finish(response)


@app.command("list")
def list_items(
    status: Optional[str] = typer.Option(
        None, "--status", help="Only show items with this status (to_watch or watched)."
    ),
    query: Optional[str] = typer.Option(None, help="Optional title search term."),
    genre: Optional[str] = typer.Option(None, help="Only show items tagged with this genre."),
    sort: str = typer.Option("created_desc", help="Sort ordering applied to results.", show_default=True),
    api_base: str = _api_base_option(),
) -> None:
    """Display the watchlist."""

    if status is not None and status.lower() not in STATUS_CHOICES:
        typer.echo(
            "Invalid status value. Allowed values: " + ", ".join(sorted(STATUS_CHOICES)),
            err=True,
        )
        raise typer.Exit(code=1)
    if sort not in SORT_CHOICES:
        typer.echo("Invalid sort value. Allowed values: " + ", ".join(SORT_CHOICES), err=True)
        raise typer.Exit(code=1)

    params: dict[str, object] = {"sort": sort}
    if status:
        params["status"] = status.lower()
    if query:
        params["query"] = query
    if genre:
        params["genre"] = genre

    with create_client(api_base) as client:
        _finish(client.get("/api/items", params=params))


@app.command()
def show(
    item_id: int = typer.Argument(..., help="Watchlist item identifier."),
    api_base: str = _api_base_option(),
) -> None:
    """Display a single watchlist item."""

    with create_client(api_base) as client:
        _finish(client.get(f"/api/items/{item_id}"))


@app.command()
def details(
    item_id: int = typer.Argument(..., help="Watchlist item identifier."),
    api_base: str = _api_base_option(),
) -> None:
    """Display an item with its trailer and cast."""

    with create_client(api_base) as client:
        _finish(client.get(f"/api/items/{item_id}/details"))


@app.command()
def metrics(api_base: str = _api_base_option()) -> None:
    """Display aggregate watchlist statistics."""

    with create_client(api_base) as client:
        _finish(client.get("/api/items/metrics"))


@app.command()
def watched(
    item_id: int = typer.Argument(..., help="Watchlist item identifier."),
    api_base: str = _api_base_option(),
) -> None:
    """Mark an item as watched."""

    with create_client(api_base) as client:
        _finish(client.patch(f"/api/items/{item_id}/status", json={"status": "watched"}))


@app.command()
def unwatch(
    item_id: int = typer.Argument(..., help="Watchlist item identifier."),
    api_base: str = _api_base_option(),
) -> None:
    """Move an item back to the to-watch list."""

    with create_client(api_base) as client:
        _finish(client.patch(f"/api/items/{item_id}/status", json={"status": "to_watch"}))


@app.command()
def rate(
    item_id: int = typer.Argument(..., help="Watchlist item identifier."),
    rating: Optional[float] = typer.Option(None, min=0, max=5, help="Personal rating, 0 to 5 stars."),
    notes: Optional[str] = typer.Option(None, help="Personal notes."),
    clear_rating: bool = typer.Option(False, "--clear-rating", help="Remove the personal rating."),
    clear_notes: bool = typer.Option(False, "--clear-notes", help="Remove the personal notes."),
    api_base: str = _api_base_option(),
) -> None:
    """Save a personal rating and notes for an item."""

    if (rating is not None and clear_rating) or (notes is not None and clear_notes):
        typer.echo("Cannot set and clear the same field in one command.", err=True)
        raise typer.Exit(code=1)

    payload: dict[str, object] = {}
    if clear_rating:
        payload["personal_rating"] = None
    elif rating is not None:
        payload["personal_rating"] = rating
    if clear_notes:
        payload["personal_notes"] = None
    elif notes is not None:
        payload["personal_notes"] = notes

    if not payload:
        typer.echo("No updates supplied.")
        raise typer.Exit(code=1)

    with create_client(api_base) as client:
        _finish(client.patch(f"/api/items/{item_id}/personal", json=payload))


@app.command()
def remove(
    item_id: int = typer.Argument(..., help="Watchlist item identifier."),
    api_base: str = _api_base_option(),
) -> None:
    """Delete an item from the watchlist."""

    with create_client(api_base) as client:
        _finish(client.delete(f"/api/items/{item_id}"))
