"""Museum adapter registry and utilities."""

from __future__ import annotations

from typing import TYPE_CHECKING

import requests

from ..errors import UnknownSource

if TYPE_CHECKING:
    from ..config import Settings
    from .base import MuseumAdapter

# Registry of available adapters, in dispatch order
_ADAPTERS: dict[str, type[MuseumAdapter]] = {}


def register(cls: type["MuseumAdapter"]) -> type["MuseumAdapter"]:
    """Decorator to register an adapter class."""
    _ADAPTERS[cls.short_name] = cls
    return cls


def get_adapter_class(short_name: str) -> type["MuseumAdapter"]:
    """Get an adapter class by source tag (e.g., 'metropolitan', 'harvard')."""
    if short_name not in _ADAPTERS:
        raise UnknownSource(short_name)
    return _ADAPTERS[short_name]


def list_adapters() -> list[tuple[str, str]]:
    """Return list of (short_name, full_name) tuples for all registered adapters."""
    return [(name, cls.name) for name, cls in _ADAPTERS.items()]


def get_adapter_names() -> dict[str, str]:
    """Return dict mapping short_name -> full_name."""
    return {name: cls.name for name, cls in _ADAPTERS.items()}


def build_adapters(
    settings: "Settings",
    session: requests.Session | None = None,
) -> dict[str, "MuseumAdapter"]:
    """Construct one adapter per registered source from deployment settings."""
    session = session or requests.Session()
    adapters: dict[str, MuseumAdapter] = {}
    for name, cls in _ADAPTERS.items():
        adapters[name] = cls.from_settings(settings, session=session)
    return adapters


# Import adapters to trigger registration
# These imports must come after the registry is defined
from . import met  # noqa: E402, F401
from . import harvard  # noqa: E402, F401
