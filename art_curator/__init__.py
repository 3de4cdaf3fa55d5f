"""Search the Met and Harvard Art Museums and curate exhibitions."""

from .aggregator import (
    Aggregator,
    get_artwork_by_id,
    get_featured_artworks,
    harvard_art,
    met_museum,
    search_all_collections,
)
from .errors import AllSourcesFailed, CuratorError, SourceUnavailable, UnknownSource
from .models import Artwork, Pagination, SearchFilters, SearchQuery, SearchResult
from .refine import refine

__all__ = [
    "Aggregator",
    "AllSourcesFailed",
    "Artwork",
    "CuratorError",
    "Pagination",
    "SearchFilters",
    "SearchQuery",
    "SearchResult",
    "SourceUnavailable",
    "UnknownSource",
    "get_artwork_by_id",
    "get_featured_artworks",
    "harvard_art",
    "met_museum",
    "refine",
    "search_all_collections",
]
