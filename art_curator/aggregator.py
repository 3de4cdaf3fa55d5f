"""Fan a search out to every selected museum and merge the answers."""

from __future__ import annotations

import math
import random
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, Mapping

import requests

from .adapters import build_adapters
from .adapters.base import MuseumAdapter
from .config import Settings
from .errors import AllSourcesFailed, SourceUnavailable, UnknownSource
from .mappings import upstream_hint
from .models import (
    AdapterPage,
    Artwork,
    METROPOLITAN,
    HARVARD,
    Pagination,
    SearchQuery,
    SearchResult,
)


def dedupe(artworks: Iterable[Artwork]) -> list[Artwork]:
    """Drop repeated (source, id) keys, keeping the first occurrence."""
    seen: set[tuple[str, str]] = set()
    unique: list[Artwork] = []
    for artwork in artworks:
        if artwork.key in seen:
            continue
        seen.add(artwork.key)
        unique.append(artwork)
    return unique


def combine_pagination(pages: list[AdapterPage], page: int, page_size: int) -> Pagination:
    """
    Combined pagination estimate across independently paginated sources.

    The total is the largest per-source total, not the sum: the real
    combined count is unknowable without fetching everything, and the max
    keeps "next page" working for as long as any source has more.
    """
    total = max((p.pagination.total for p in pages), default=0)
    return Pagination(
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size),
        has_more=page * page_size < total,
    )


def fisher_yates(items: list, rng: random.Random) -> list:
    """Unbiased in-place shuffle; returns the same list for chaining."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


class Aggregator:
    """
    Combines several museum adapters into one logical collection.

    Adapters are passed in explicitly, keyed by source tag; their mapping
    order is the dispatch order and therefore the order of merged results.
    """

    def __init__(
        self,
        adapters: Mapping[str, MuseumAdapter],
        rng: random.Random | None = None,
    ) -> None:
        if not adapters:
            raise ValueError("Aggregator needs at least one adapter")
        self.adapters = dict(adapters)
        self.rng = rng or random.Random()
        self._log_callback: Callable[[str, str], None] | None = None

    @classmethod
    def from_settings(
        cls, settings: Settings, session: requests.Session | None = None
    ) -> "Aggregator":
        """Build adapters for every registered source; they share `session` if given."""
        return cls(build_adapters(settings, session=session))

    @property
    def source_order(self) -> tuple[str, ...]:
        return tuple(self.adapters)

    def set_logger(self, callback: Callable[[str, str], None] | None) -> None:
        """Set logging callback for the aggregator and every adapter."""
        self._log_callback = callback
        for adapter in self.adapters.values():
            adapter.set_logger(callback)

    def _log(self, level: str, message: str) -> None:
        if self._log_callback:
            self._log_callback(level, f"[aggregator] {message}")

    def search_all_collections(self, query: SearchQuery) -> SearchResult:
        """
        Search every selected source concurrently and merge the pages.

        Partial failure is tolerated: the result is built from whichever
        sources answered. Raises AllSourcesFailed only when none did.
        """
        active = query.active_sources(self.source_order)
        if not active:
            raise AllSourcesFailed({})
        filters = query.filters
        self._log(
            "INFO",
            f"Searching {', '.join(active)} for {query.search_term!r} (page {query.page})",
        )

        failures: dict[str, SourceUnavailable] = {}
        pages: list[AdapterPage] = []

        with ThreadPoolExecutor(max_workers=len(active)) as executor:
            # Submit everything before collecting anything
            futures = [
                (
                    source,
                    executor.submit(
                        self.adapters[source].search,
                        query.search_term,
                        page=query.page,
                        page_size=query.page_size,
                        department_or_classification=upstream_hint(filters.medium, source),
                        exclude_xrays=filters.exclude_xrays,
                    ),
                )
                for source in active
            ]

            # Collected in dispatch order, not completion order
            for source, future in futures:
                try:
                    pages.append(future.result())
                except SourceUnavailable as e:
                    self._log("WARN", f"{source} unavailable: {e.message}")
                    failures[source] = e

        if not pages:
            self._log("ERROR", "Every source failed")
            raise AllSourcesFailed(failures)

        artworks = dedupe(artwork for page in pages for artwork in page.artworks)
        result = SearchResult(
            artworks=artworks,
            pagination=combine_pagination(pages, query.page, query.page_size),
            sources=[page.source for page in pages],
        )
        self._log(
            "INFO",
            f"Merged {len(artworks)} artworks from {', '.join(result.sources)} "
            f"(estimated total {result.pagination.total})",
        )
        return result

    def get_featured_artworks(self, limit: int = 10, exclude_xrays: bool = True) -> list[Artwork]:
        """
        Random mix of highlights from every source, at most `limit` long.

        Never raises; a source that fails contributes nothing.
        """
        if limit <= 0:
            return []

        per_source = math.ceil(limit / len(self.adapters))
        with ThreadPoolExecutor(max_workers=len(self.adapters)) as executor:
            futures = [
                executor.submit(adapter.get_featured, per_source, exclude_xrays)
                for adapter in self.adapters.values()
            ]
            combined = [artwork for future in futures for artwork in future.result()]

        combined = fisher_yates(dedupe(combined), self.rng)
        self._log("INFO", f"Featured: {len(combined)} candidates, returning {min(limit, len(combined))}")
        return combined[:limit]

    def get_artwork_by_id(self, artwork_id: str | int, source: str) -> Artwork | None:
        """
        Look up one artwork by its composite key.

        Returns None when the artwork does not exist; raises UnknownSource
        when no adapter serves `source`.
        """
        adapter = self.adapters.get(source)
        if adapter is None:
            raise UnknownSource(source)
        return adapter.get_by_id(artwork_id)


# Default aggregator for callers that don't wire their own
_default: Aggregator | None = None


def default_aggregator() -> Aggregator:
    global _default
    if _default is None:
        _default = Aggregator.from_settings(Settings.from_env())
    return _default


def search_all_collections(query: SearchQuery) -> SearchResult:
    return default_aggregator().search_all_collections(query)


def get_featured_artworks(limit: int = 10, exclude_xrays: bool = True) -> list[Artwork]:
    return default_aggregator().get_featured_artworks(limit, exclude_xrays)


def get_artwork_by_id(artwork_id: str | int, source: str) -> Artwork | None:
    return default_aggregator().get_artwork_by_id(artwork_id, source)


def met_museum() -> MuseumAdapter:
    """Single-source access to the Metropolitan adapter."""
    return default_aggregator().adapters[METROPOLITAN]


def harvard_art() -> MuseumAdapter:
    """Single-source access to the Harvard adapter."""
    return default_aggregator().adapters[HARVARD]
