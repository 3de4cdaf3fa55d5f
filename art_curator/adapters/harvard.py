"""Harvard Art Museums adapter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import requests

from . import register
from .base import MuseumAdapter, compute_pagination
from ..config import HARVARD_BASE_URL, MODE_DIRECT, Settings
from ..models import AdapterPage, Artwork, HARVARD
from ..normalize import XRAY_TERMS, is_xray_artwork, normalize_harvard

OBJECT_ENDPOINT = "/object"

FEATURED_FIELDS = ",".join([
    "id",
    "title",
    "people",
    "dated",
    "images",
    "primaryimageurl",
    "url",
    "medium",
    "technique",
    "dimensions",
    "department",
    "culture",
    "provenance",
    "creditline",
    "description",
    "classification",
])


@dataclass(frozen=True)
class HarvardRequest:
    url: str
    params: dict[str, Any] = field(default_factory=dict)


class DirectRequestBuilder:
    """Talk to the Harvard API directly, with the key in the query string."""

    def __init__(self, api_key: str, base_url: str = HARVARD_BASE_URL) -> None:
        if not api_key:
            raise ValueError("HARVARD_API_KEY is required in direct mode")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    def build(self, endpoint: str, params: dict[str, Any]) -> HarvardRequest:
        return HarvardRequest(
            url=f"{self.base_url}{endpoint}",
            params={**params, "apikey": self.api_key},
        )


class ProxiedRequestBuilder:
    """Route through the relay, which appends the key server-side."""

    def __init__(self, relay_url: str) -> None:
        if not relay_url:
            raise ValueError("HARVARD_RELAY_URL is required in proxy mode")
        self.relay_url = relay_url

    def build(self, endpoint: str, params: dict[str, Any]) -> HarvardRequest:
        # Never carry a key through the relay, even if a caller passed one
        clean = {k: v for k, v in params.items() if k != "apikey"}
        return HarvardRequest(url=self.relay_url, params={"endpoint": endpoint, **clean})


def request_builder_for(settings: Settings) -> DirectRequestBuilder | ProxiedRequestBuilder:
    """Pick the request strategy once, from the deployment mode."""
    if settings.harvard_mode == MODE_DIRECT:
        return DirectRequestBuilder(settings.harvard_api_key)
    return ProxiedRequestBuilder(settings.harvard_relay_url)


def xray_query(term: str) -> str:
    """Extend a search term with NOT clauses for X-ray records."""
    exclusions = " ".join(f'NOT "{t}"' for t in XRAY_TERMS)
    return f"({term}) {exclusions}"


@register
class HarvardAdapter(MuseumAdapter):
    """Adapter for the Harvard Art Museums API (paginated server-side)."""

    name = "Harvard Art Museums"
    short_name = HARVARD
    base_url = HARVARD_BASE_URL

    def __init__(
        self,
        request_builder: DirectRequestBuilder | ProxiedRequestBuilder,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.request_builder = request_builder

    @classmethod
    def from_settings(
        cls, settings: Settings, session: requests.Session | None = None
    ) -> "HarvardAdapter":
        return cls(
            request_builder_for(settings),
            session=session,
            fetch_timeout=settings.request_timeout,
            max_workers=settings.max_workers,
        )

    def _request(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        request = self.request_builder.build(endpoint, params or {})
        return self._get_json(request.url, request.params)

    def _normalize_records(self, records: list[dict], exclude_xrays: bool) -> list[Artwork]:
        """Normalize, then drop image-less and (optionally) X-ray records."""
        artworks: list[Artwork] = []
        no_image = 0
        xrays = 0

        for item in records:
            artwork = normalize_harvard(item)
            if artwork is None or not artwork.image_url:
                no_image += 1
                continue
            if exclude_xrays and is_xray_artwork(artwork):
                xrays += 1
                continue
            artworks.append(artwork)

        if no_image > 0:
            self._log_info(f"Skipped {no_image} records without images")
        if xrays > 0:
            self._log_info(f"Excluded {xrays} X-ray records")
        return artworks

    def _do_search(
        self,
        term: str,
        page: int,
        page_size: int,
        department_or_classification: str | None,
        exclude_xrays: bool,
    ) -> AdapterPage:
        params: dict[str, Any] = {
            "q": xray_query(term) if exclude_xrays else term,
            "page": page,
            "size": page_size,
            "hasimage": 1,
            "sort": "rank",
            "sortorder": "desc",
        }
        if department_or_classification:
            params["classification"] = department_or_classification

        self._log_info(f"Fetching page {page} (timeout={self.fetch_timeout}s)")
        data = self._request(OBJECT_ENDPOINT, params)

        info = data["info"]
        records = data.get("records") or []
        self._log_info(f"Received {len(records)} records from API")

        return AdapterPage(
            source=self.short_name,
            artworks=self._normalize_records(records, exclude_xrays),
            pagination=compute_pagination(
                info.get("totalrecords", 0), int(info.get("page") or page), page_size
            ),
        )

    def _fetch_object(self, artwork_id: str | int) -> Artwork | None:
        data = self._request(f"{OBJECT_ENDPOINT}/{artwork_id}")
        # Detail view may show a record without an image
        return normalize_harvard(data)

    def _do_featured(self, limit: int, exclude_xrays: bool) -> list[Artwork]:
        params = {
            "size": limit,
            "hasimage": 1,
            "sort": "totalpageviews",
            "sortorder": "desc",
            "fields": FEATURED_FIELDS,
        }
        data = self._request(OBJECT_ENDPOINT, params)
        return self._normalize_records(data.get("records") or [], exclude_xrays)
