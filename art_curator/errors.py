"""Error taxonomy for museum lookups."""

from __future__ import annotations


class CuratorError(Exception):
    """Base class for all curator errors."""


class SourceUnavailable(CuratorError):
    """One upstream call failed (network error, non-2xx, malformed body)."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(message)
        self.source = source
        self.message = message


class AllSourcesFailed(CuratorError):
    """Every dispatched source failed; the only case where a search fails."""

    def __init__(self, failures: dict[str, SourceUnavailable]) -> None:
        self.failures = failures
        names = ", ".join(failures) or "none"
        super().__init__(f"Failed to search any collections (tried: {names})")


class UnknownSource(CuratorError, ValueError):
    """Caller passed a source tag no adapter is registered for."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"Unknown artwork source: {source}")
