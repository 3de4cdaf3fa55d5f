"""Medium category mappings across museums."""

from .mediums import (
    CANONICAL_MEDIUMS,
    MEDIUM_KEYWORDS,
    MEDIUM_LABELS,
    get_medium_categories,
    keywords_for,
    upstream_hint,
)

__all__ = [
    "CANONICAL_MEDIUMS",
    "MEDIUM_KEYWORDS",
    "MEDIUM_LABELS",
    "get_medium_categories",
    "keywords_for",
    "upstream_hint",
]
