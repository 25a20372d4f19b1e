"""Runtime configuration for the Watchlist API."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .utils.paths import default_database_url


class WatchlistSettings(BaseSettings):
    """Environment-aware settings for the Watchlist API service."""

    tmdb_api_key: str | None = Field(
        default=None, description="TMDb API key used for search and enrichment."
    )
    tmdb_base_url: str = Field(
        default="https://api.themoviedb.org/3", description="Base URL of the TMDb v3 API."
    )
    watch_region: str = Field(
        default="US", description="Region code used when reading watch providers."
    )
    openai_api_key: str | None = Field(
        default=None, description="OpenAI API key used to extract titles from text and images."
    )
    openai_text_model: str = Field(
        default="gpt-4-turbo-preview", description="Chat model used for text extraction."
    )
    openai_vision_model: str = Field(
        default="gpt-4o", description="Vision model used for image extraction."
    )
    http_timeout: float = Field(
        default=10.0, gt=0, description="Timeout in seconds for outbound HTTP calls."
    )
    database_url: str = Field(
        default_factory=default_database_url,
        description="Connection URL for the watchlist SQLite database.",
    )
    database_echo: bool = Field(
        default=False, description="Enable SQL echo for debugging queries."
    )
    log_level: str = Field(default="INFO", description="Root log level for the server.")
    host: str = Field(default="0.0.0.0", description="Interface the server binds to.")
    port: int = Field(default=8000, description="Port the server listens on.")

    model_config = SettingsConfigDict(
        env_prefix="WATCHLIST_",
        env_file=".env",
        env_file_encoding="utf-8",
    )
