"""Medium categories and how they map onto each museum.

Each canonical category (shown in the UI) has a keyword bucket used for
client-side matching against an artwork's medium and description. Where a
museum API can narrow a query by the same category server-side, the
museum-specific value lives in UPSTREAM_HINTS, keyed by source tag.
"""

from __future__ import annotations

# Canonical medium categories shown in the UI
CANONICAL_MEDIUMS = [
    "paintings",
    "sculpture",
    "prints",
    "photographs",
    "drawings",
    "textiles",
    "ceramics",
    "metalwork",
    "glass",
]

MEDIUM_LABELS = {
    "paintings": "Paintings",
    "sculpture": "Sculpture",
    "prints": "Prints",
    "photographs": "Photographs",
    "drawings": "Drawings",
    "textiles": "Textiles",
    "ceramics": "Ceramics",
    "metalwork": "Metalwork",
    "glass": "Glass",
}

# Keywords matched case-insensitively as substrings
MEDIUM_KEYWORDS: dict[str, list[str]] = {
    "paintings": ["oil", "canvas", "tempera", "acrylic", "watercolor", "painting", "panel"],
    "sculpture": ["sculpture", "marble", "bronze", "statue", "carved", "relief", "bust"],
    "prints": ["print", "etching", "engraving", "lithograph", "woodcut", "aquatint", "mezzotint"],
    "photographs": ["photograph", "gelatin silver", "albumen", "daguerreotype", "platinum print", "cyanotype"],
    "drawings": ["drawing", "pencil", "graphite", "chalk", "charcoal", "ink", "pastel"],
    "textiles": ["textile", "silk", "wool", "cotton", "linen", "embroidery", "tapestry"],
    "ceramics": ["ceramic", "porcelain", "earthenware", "stoneware", "terracotta", "faience"],
    "metalwork": ["silver", "gold", "copper", "iron", "brass", "pewter", "metal"],
    "glass": ["glass", "stained glass", "crystal"],
}

# Server-side narrowing, where the museum has a matching classification.
# Missing entries mean the category is only applied client-side.
UPSTREAM_HINTS: dict[str, dict[str, str]] = {
    "harvard": {
        "paintings": "Paintings",
        "sculpture": "Sculpture",
        "prints": "Prints",
        "photographs": "Photographs",
        "drawings": "Drawings",
        "textiles": "Textile Arts",
    },
}


def get_medium_categories() -> list[str]:
    """Return canonical medium categories for UI display."""
    return CANONICAL_MEDIUMS.copy()


def keywords_for(category: str) -> list[str]:
    """Keyword bucket for a category; empty for unknown or blank categories."""
    return list(MEDIUM_KEYWORDS.get((category or "").lower(), []))


def upstream_hint(category: str, source: str) -> str | None:
    """
    Map a canonical medium category to a source-specific query value.

    Returns None when the source has no server-side equivalent.
    """
    if not category:
        return None
    return UPSTREAM_HINTS.get(source.lower(), {}).get(category.lower())
