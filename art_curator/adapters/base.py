"""Abstract base class for museum adapters."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any, Callable

import requests

from ..config import DEFAULT_MAX_WORKERS, DEFAULT_TIMEOUT, Settings
from ..errors import SourceUnavailable
from ..models import AdapterPage, Artwork, Pagination
from ..normalize import is_xray_artwork

# Errors raised while decoding or walking a malformed upstream body
PARSE_ERRORS = (ValueError, KeyError, TypeError, AttributeError)


def compute_pagination(total: int, page: int, page_size: int) -> Pagination:
    """Build pagination stats for a page window over `total` results."""
    total = max(int(total or 0), 0)
    return Pagination(
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if page_size else 0,
        has_more=page * page_size < total,
    )


class MuseumAdapter(ABC):
    """
    Abstract base class for museum API adapters.

    Subclasses implement museum-specific API logic while this base class
    provides error conversion and logging. The three public entry points
    differ in how they fail:

    - search() raises SourceUnavailable so the aggregator can tolerate it
    - get_by_id() returns None for anything missing or broken
    - get_featured() returns an empty list on any failure
    """

    # Subclasses must define these
    name: str = "Unknown Museum"  # Full display name
    short_name: str = "unknown"  # Source tag (e.g., "metropolitan")
    base_url: str = ""

    # Logging callback - set by app to integrate with UI logging
    _log_callback: Callable[[str, str], None] | None = None

    def __init__(
        self,
        session: requests.Session | None = None,
        fetch_timeout: float = DEFAULT_TIMEOUT,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self.session = session or requests.Session()
        self.fetch_timeout = fetch_timeout
        self.max_workers = max_workers

    @classmethod
    def from_settings(
        cls, settings: Settings, session: requests.Session | None = None
    ) -> "MuseumAdapter":
        return cls(
            session=session,
            fetch_timeout=settings.request_timeout,
            max_workers=settings.max_workers,
        )

    def set_logger(self, callback: Callable[[str, str], None] | None) -> None:
        """Set logging callback. Signature: callback(level, message)."""
        self._log_callback = callback

    def _log(self, level: str, message: str) -> None:
        """Log a message if callback is set."""
        if self._log_callback:
            self._log_callback(level, f"[{self.short_name}] {message}")

    def _log_info(self, message: str) -> None:
        self._log("INFO", message)

    def _log_warning(self, message: str) -> None:
        self._log("WARN", message)

    def _log_error(self, message: str) -> None:
        self._log("ERROR", message)

    def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """GET a JSON document, raising for non-2xx responses."""
        response = self.session.get(url, params=params, timeout=self.fetch_timeout)
        response.raise_for_status()
        return response.json()

    def search(
        self,
        term: str,
        page: int = 1,
        page_size: int = 20,
        department_or_classification: str | None = None,
        exclude_xrays: bool = True,
    ) -> AdapterPage:
        """
        Search for artworks and return one normalized page.

        Every artwork in the page has an image. Raises SourceUnavailable
        when the upstream cannot be reached or answers with garbage.
        """
        try:
            self._log_info(f"Search started (term={term!r}, page={page}, size={page_size})")
            result = self._do_search(
                term, page, page_size, department_or_classification, exclude_xrays
            )
            self._log_info(
                f"Search complete: {len(result.artworks)} artworks "
                f"(total estimate {result.pagination.total})"
            )
            return result

        except requests.Timeout as e:
            self._log_error(f"Timeout after {self.fetch_timeout}s")
            raise SourceUnavailable(
                self.short_name, f"{self.name} took too long to respond. Try again later."
            ) from e

        except requests.ConnectionError as e:
            self._log_error("Connection failed")
            raise SourceUnavailable(
                self.short_name, f"Could not connect to {self.name}. Check your internet connection."
            ) from e

        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "unknown"
            self._log_error(f"HTTP error: {status}")
            raise SourceUnavailable(
                self.short_name, f"{self.name} returned an error (status {status}). Try again later."
            ) from e

        except requests.RequestException as e:
            self._log_error(f"Request error: {e}")
            raise SourceUnavailable(
                self.short_name, f"Error communicating with {self.name}. Try again."
            ) from e

        except PARSE_ERRORS as e:
            self._log_error(f"Malformed response: {type(e).__name__}: {e}")
            raise SourceUnavailable(
                self.short_name, f"{self.name} sent a response we could not read."
            ) from e

    def get_by_id(self, artwork_id: str | int, exclude_xrays: bool = False) -> Artwork | None:
        """Fetch one artwork. Returns None when missing, malformed or excluded."""
        try:
            artwork = self._fetch_object(artwork_id)
        except (requests.RequestException, *PARSE_ERRORS) as e:
            self._log_warning(f"Could not fetch artwork {artwork_id}: {e}")
            return None

        if artwork is None:
            return None
        if exclude_xrays and is_xray_artwork(artwork):
            self._log_info(f"Excluded X-ray record {artwork_id}")
            return None
        return artwork

    def get_featured(self, limit: int = 10, exclude_xrays: bool = True) -> list[Artwork]:
        """Best-effort list of highlights; empty on any upstream failure."""
        if limit <= 0:
            return []
        try:
            artworks = self._do_featured(limit, exclude_xrays)
        except (requests.RequestException, *PARSE_ERRORS) as e:
            self._log_warning(f"Featured artworks unavailable: {e}")
            return []
        return artworks[:limit]

    @abstractmethod
    def _do_search(
        self,
        term: str,
        page: int,
        page_size: int,
        department_or_classification: str | None,
        exclude_xrays: bool,
    ) -> AdapterPage:
        """
        Implement the actual search logic.

        Exceptions are converted by search().
        """
        pass

    @abstractmethod
    def _fetch_object(self, artwork_id: str | int) -> Artwork | None:
        """Fetch and normalize a single record, or None when unusable."""
        pass

    @abstractmethod
    def _do_featured(self, limit: int, exclude_xrays: bool) -> list[Artwork]:
        """Fetch featured artworks. Exceptions are swallowed by get_featured()."""
        pass
