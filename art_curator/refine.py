"""Client-side filtering, sorting and re-pagination of fetched artworks.

The museum APIs can't sort by date or filter by medium consistently, so
these run over the page(s) already fetched. Nothing here does I/O or
raises on odd data: missing fields fall back to empty strings and
unparseable dates to year 0.
"""

from __future__ import annotations

import math
import re
import unicodedata
from typing import Iterable

from .mappings import keywords_for
from .models import Artwork, Pagination, RefinedPage
from .normalize import is_xray_artwork

_YEAR = re.compile(r"\b(\d{4})\b")
_BCE = re.compile(r"\b(\d+)\s*(?:BCE|BC|B\.C\.E\.|B\.C\.)", re.IGNORECASE)
_CENTURY = re.compile(r"\b(\d+)(?:st|nd|rd|th)\s+century\b", re.IGNORECASE)


def extract_year(date: str | None) -> int:
    """
    Best-effort numeric year from a free-text date.

    Tries, in order: a 4-digit year, "<N> BCE/BC" (negative), then
    "<N>th century" (the century's midpoint). Anything else is 0.
    """
    if not date:
        return 0

    match = _YEAR.search(date)
    if match:
        return int(match.group(1))

    match = _BCE.search(date)
    if match:
        return -int(match.group(1))

    match = _CENTURY.search(date)
    if match:
        return int(match.group(1)) * 100 - 50

    return 0


def matches_medium(artwork: Artwork, category: str) -> bool:
    """True if medium or description contains any keyword for the category."""
    keywords = keywords_for(category)
    if not keywords:
        return True
    haystack = f"{artwork.medium or ''} {artwork.description or ''}".lower()
    return any(keyword in haystack for keyword in keywords)


def filter_by_medium(artworks: Iterable[Artwork], category: str | None) -> list[Artwork]:
    """Keep artworks in the medium category; no category means keep all."""
    if not category:
        return list(artworks)
    return [artwork for artwork in artworks if matches_medium(artwork, category)]


def exclude_xrays(artworks: Iterable[Artwork]) -> list[Artwork]:
    """Drop X-ray/radiograph records. Applying it twice changes nothing."""
    return [artwork for artwork in artworks if not is_xray_artwork(artwork)]


def _lexical_key(value: str | None) -> tuple[str, str]:
    """Accent-insensitive sort key; "Édouard" sorts with "Edouard", ties by the raw text."""
    text = (value or "").casefold()
    decomposed = unicodedata.normalize("NFKD", text)
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return folded, text


def sort_artworks(artworks: Iterable[Artwork], sort_by: str = "relevance") -> list[Artwork]:
    """
    Sort artworks. Unknown sort keys keep upstream (relevance) order.

    All sorts are stable, so ties keep their upstream order.
    """
    items = list(artworks)

    if sort_by == "title":
        return sorted(items, key=lambda a: _lexical_key(a.title))
    if sort_by == "artist":
        return sorted(items, key=lambda a: _lexical_key(a.artist))
    if sort_by == "date-newest":
        return sorted(items, key=lambda a: extract_year(a.date), reverse=True)
    if sort_by == "date-oldest":
        return sorted(items, key=lambda a: extract_year(a.date))

    return items


def paginate(artworks: list[Artwork], page: int, page_size: int) -> tuple[list[Artwork], Pagination]:
    """Slice a page out of an already filtered list, clamping the page number."""
    page_size = max(page_size, 1)
    total = len(artworks)
    total_pages = max(1, math.ceil(total / page_size))
    current = min(max(page, 1), total_pages)

    start = (current - 1) * page_size
    window = artworks[start:start + page_size]
    return window, Pagination(
        total=total,
        page=current,
        page_size=page_size,
        total_pages=total_pages,
        has_more=current < total_pages,
    )


def refine(
    artworks: Iterable[Artwork],
    sort_by: str = "relevance",
    medium: str | None = "",
    page: int = 1,
    page_size: int = 20,
    exclude_xray_records: bool = False,
) -> RefinedPage:
    """Filter, sort, then re-paginate against the filtered length."""
    items = list(artworks)
    if exclude_xray_records:
        items = exclude_xrays(items)
    items = filter_by_medium(items, medium)
    items = sort_artworks(items, sort_by)

    window, pagination = paginate(items, page, page_size)
    return RefinedPage(artworks=window, pagination=pagination, filtered_total=len(items))
