"""Metropolitan Museum of Art adapter."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import requests

from . import register
from .base import MuseumAdapter, PARSE_ERRORS, compute_pagination
from ..config import MET_BASE_URL
from ..models import AdapterPage, Artwork, METROPOLITAN
from ..normalize import is_xray_artwork, normalize_met

# Search operators the Met API honours for excluding matches server-side
XRAY_QUERY_EXCLUSIONS = '-xray -"x ray" -"x-ray" -radiograph'

# Well-known highlights used for the featured panel
FEATURED_IDS = [
    436535,  # Van Gogh - Wheat Field with Cypresses
    436524,  # Monet - Garden at Sainte-Adresse
    438722,  # Van Gogh - Irises
    437127,  # Monet - Bridge over a Pond of Water Lilies
    436105,  # Rembrandt - Aristotle with a Bust of Homer
    435809,  # Bruegel - The Harvesters
    437329,  # Vermeer - Young Woman with a Water Pitcher
    436532,  # Van Gogh - Self-Portrait with a Straw Hat
    437984,  # Cézanne - Still Life with Apples and a Pot of Primroses
    436947,  # Degas - The Dance Class
]


@register
class MetAdapter(MuseumAdapter):
    """
    Adapter for The Met Collection API.

    The search endpoint returns every matching object id at once, so paging
    happens here: the page window is sliced out of the id list and only
    those objects are fetched, one request each, in parallel. Objects
    without a primary image are dropped after fetching, so a delivered page
    can be shorter than page_size while pagination.total still counts the
    dropped ids.
    """

    name = "The Metropolitan Museum of Art"
    short_name = METROPOLITAN
    base_url = MET_BASE_URL

    def _do_search(
        self,
        term: str,
        page: int,
        page_size: int,
        department_or_classification: str | None,
        exclude_xrays: bool,
    ) -> AdapterPage:
        query = f"{term} {XRAY_QUERY_EXCLUSIONS}" if exclude_xrays else term
        params: dict[str, str | int] = {"q": query}
        if department_or_classification:
            params["departmentId"] = department_or_classification

        self._log_info(f"Fetching ids from API (timeout={self.fetch_timeout}s)")
        data = self._get_json(f"{self.base_url}/search", params)

        object_ids = data.get("objectIDs") or []
        total = data.get("total") or len(object_ids)

        offset = (page - 1) * page_size
        page_ids = object_ids[offset:offset + page_size]
        self._log_info(f"Received {len(object_ids)} ids, fetching {len(page_ids)} objects")

        artworks = self._fetch_many(page_ids, exclude_xrays)
        dropped = len(page_ids) - len(artworks)
        if dropped:
            self._log_info(f"Dropped {dropped} objects without images or excluded")

        return AdapterPage(
            source=self.short_name,
            artworks=artworks,
            pagination=compute_pagination(total, page, page_size),
        )

    def _fetch_many(self, object_ids: list[int], exclude_xrays: bool) -> list[Artwork]:
        """Fetch objects in parallel, keeping upstream order and dropping failures."""
        if not object_ids:
            return []

        workers = min(len(object_ids), self.max_workers)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(
                executor.map(lambda oid: self._fetch_or_drop(oid, exclude_xrays), object_ids)
            )
        return [artwork for artwork in results if artwork is not None]

    def _fetch_or_drop(self, object_id: int, exclude_xrays: bool) -> Artwork | None:
        """One detail fetch for a page; any failure resolves to None (dropped)."""
        try:
            artwork = self._fetch_object(object_id)
        except (requests.RequestException, *PARSE_ERRORS) as e:
            self._log_warning(f"Dropping object {object_id}: {e}")
            return None

        if artwork is None:
            return None
        if exclude_xrays and is_xray_artwork(artwork):
            return None
        return artwork

    def _fetch_object(self, artwork_id: str | int) -> Artwork | None:
        data = self._get_json(f"{self.base_url}/objects/{artwork_id}")
        artwork = normalize_met(data)

        # Met records without a primary image are never surfaced
        if artwork is None or not artwork.image_url:
            return None
        return artwork

    def _do_featured(self, limit: int, exclude_xrays: bool) -> list[Artwork]:
        return self._fetch_many(FEATURED_IDS[:limit], exclude_xrays)
