"""Service layer helpers for external integrations."""

from .enrichment import EnrichmentService, MovieExtras
from .extraction import ImageMovieExtractor, MovieExtractor, TextMovieExtractor
from .intake import IntakeOutcome, IntakeService

__all__ = [
    "EnrichmentService",
    "ImageMovieExtractor",
    "IntakeOutcome",
    "IntakeService",
    "MovieExtractor",
    "MovieExtras",
    "TextMovieExtractor",
]
