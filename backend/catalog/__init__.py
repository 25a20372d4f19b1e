"""
Catalog matching and enrichment package for the watchlist.

Bundles the title normalizer, the candidate ranker and the TMDb metadata
fetcher used to turn a loose movie description into one canonical record.
"""
from .configuration import CatalogConfiguration
from .metadata_fetcher import MetadataFetcher
from .models import CanonicalMovie, CastMember, SearchCandidate, Video, WatchProvider
from .normalizer import normalize_title
from .ranker import select_best

__all__ = [
    "CanonicalMovie",
    "CastMember",
    "CatalogConfiguration",
    "MetadataFetcher",
    "SearchCandidate",
    "Video",
    "WatchProvider",
    "normalize_title",
    "select_best",
]
