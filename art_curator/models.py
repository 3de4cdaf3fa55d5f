"""Data models for the exhibition curator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Source tags, in dispatch order
METROPOLITAN = "metropolitan"
HARVARD = "harvard"
ALL_SOURCES = "all"
SOURCE_ORDER = (METROPOLITAN, HARVARD)

SORT_OPTIONS = ("relevance", "title", "artist", "date-newest", "date-oldest")


@dataclass
class Artwork:
    """Unified artwork representation across all museum sources."""

    id: str
    source: str  # "metropolitan" or "harvard"
    title: str = "Untitled"
    artist: str = "Unknown Artist"
    date: str = "Unknown Date"  # Free text, not guaranteed numeric
    medium: str = ""
    dimensions: str = ""
    department: str = ""
    culture: str = ""
    provenance: str = ""
    description: str = ""

    image_url: str | None = None
    thumbnail_url: str | None = None
    object_url: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        """Composite (source, id) key; ids are only unique within a source."""
        return (self.source, self.id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for session state and file storage."""
        return {
            "id": self.id,
            "source": self.source,
            "title": self.title,
            "artist": self.artist,
            "date": self.date,
            "medium": self.medium,
            "dimensions": self.dimensions,
            "department": self.department,
            "culture": self.culture,
            "provenance": self.provenance,
            "description": self.description,
            "image_url": self.image_url,
            "thumbnail_url": self.thumbnail_url,
            "object_url": self.object_url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Artwork":
        return cls(
            id=str(data["id"]),
            source=data["source"],
            title=data.get("title") or "Untitled",
            artist=data.get("artist") or "Unknown Artist",
            date=data.get("date") or "Unknown Date",
            medium=data.get("medium") or "",
            dimensions=data.get("dimensions") or "",
            department=data.get("department") or "",
            culture=data.get("culture") or "",
            provenance=data.get("provenance") or "",
            description=data.get("description") or "",
            image_url=data.get("image_url"),
            thumbnail_url=data.get("thumbnail_url"),
            object_url=data.get("object_url"),
        )


@dataclass
class Pagination:
    total: int
    page: int
    page_size: int
    total_pages: int
    has_more: bool


@dataclass
class SearchFilters:
    """Options applied on top of the upstream query."""

    exclude_xrays: bool = True
    sort_by: str = "relevance"
    medium: str = ""  # Medium category, empty for all


@dataclass
class SearchQuery:
    """A single logical search across one or more sources."""

    search_term: str
    page: int = 1
    page_size: int = 20
    sources: tuple[str, ...] = (ALL_SOURCES,)
    filters: SearchFilters = field(default_factory=SearchFilters)

    def __post_init__(self) -> None:
        if not self.search_term or not self.search_term.strip():
            raise ValueError("search_term must be a non-empty string")
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be > 0, got {self.page_size}")

        self.sources = tuple(self.sources)
        if not self.sources:
            raise ValueError("At least one source must be selected")
        allowed = (ALL_SOURCES,) + SOURCE_ORDER
        for source in self.sources:
            if source not in allowed:
                raise ValueError(
                    f"Unknown source: {source}. Available: {', '.join(allowed)}"
                )

    def active_sources(self, order: tuple[str, ...] = SOURCE_ORDER) -> list[str]:
        """Sources to query, in dispatch order. "all" expands to every source."""
        if ALL_SOURCES in self.sources:
            return list(order)
        return [source for source in order if source in self.sources]


@dataclass
class AdapterPage:
    """One adapter's page of normalized results."""

    source: str
    artworks: list[Artwork] = field(default_factory=list)
    pagination: Pagination = field(
        default_factory=lambda: Pagination(0, 1, 20, 0, False)
    )


@dataclass
class SearchResult:
    """Combined result of one aggregation pass. Never persisted."""

    artworks: list[Artwork] = field(default_factory=list)
    pagination: Pagination = field(
        default_factory=lambda: Pagination(0, 1, 20, 0, False)
    )
    sources: list[str] = field(default_factory=list)  # Sources that succeeded


@dataclass
class RefinedPage:
    """Client-side filtered, sorted and re-paginated slice."""

    artworks: list[Artwork]
    pagination: Pagination
    filtered_total: int
