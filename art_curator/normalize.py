"""Map raw museum API records onto the canonical Artwork shape."""

from __future__ import annotations

from typing import Any

from .models import Artwork, METROPOLITAN, HARVARD

XRAY_TERMS = ("x-ray", "xray", "radiograph", "radiography", "x ray")

THUMBNAIL_HEIGHT = 400


def _text(value: Any, fallback: str = "") -> str:
    """Coerce an upstream value to a display string, never None."""
    if value is None:
        return fallback
    if isinstance(value, list):
        value = ", ".join(str(v) for v in value if v)
    value = str(value).strip()
    return value or fallback


def is_xray(title: str | None, description: str | None) -> bool:
    """True if title or description mentions an X-ray/radiograph term."""
    haystack = f"{title or ''} {description or ''}".lower()
    return any(term in haystack for term in XRAY_TERMS)


def is_xray_artwork(artwork: Artwork) -> bool:
    return is_xray(artwork.title, artwork.description)


def thumbnail_for(image_url: str | None, height: int = THUMBNAIL_HEIGHT) -> str | None:
    """Derive a bounded-height thumbnail URL from a full image URL."""
    if not image_url:
        return None
    separator = "&" if "?" in image_url else "?"
    return f"{image_url}{separator}height={height}"


def normalize_met(item: dict[str, Any]) -> Artwork | None:
    """Normalize a Metropolitan Museum object record."""
    object_id = item.get("objectID")
    if object_id in (None, ""):
        return None

    image_url = _text(item.get("primaryImage")) or None
    thumbnail_url = _text(item.get("primaryImageSmall")) or image_url

    return Artwork(
        id=str(object_id),
        source=METROPOLITAN,
        title=_text(item.get("title"), "Untitled"),
        artist=_text(item.get("artistDisplayName"), "Unknown Artist"),
        date=_text(item.get("objectDate"), "Unknown Date"),
        medium=_text(item.get("medium")),
        dimensions=_text(item.get("dimensions")),
        department=_text(item.get("department")),
        culture=_text(item.get("culture")),
        provenance=_text(item.get("creditLine")),
        description=_text(item.get("objectDescription")) or _text(item.get("objectName")),
        image_url=image_url,
        thumbnail_url=thumbnail_url,
        object_url=_text(item.get("objectURL")) or None,
    )


def _harvard_image(item: dict[str, Any]) -> str | None:
    """Primary image, else first of the image list, else None."""
    primary = _text(item.get("primaryimageurl"))
    if primary:
        return primary
    images = item.get("images") or []
    if images and isinstance(images[0], dict):
        return _text(images[0].get("baseimageurl")) or None
    return None


def normalize_harvard(item: dict[str, Any]) -> Artwork | None:
    """Normalize a Harvard Art Museums object record."""
    object_id = item.get("id")
    if object_id in (None, ""):
        return None

    people = item.get("people") or []
    artist = ""
    if people and isinstance(people[0], dict):
        artist = _text(people[0].get("displayname"))

    image_url = _harvard_image(item)

    return Artwork(
        id=str(object_id),
        source=HARVARD,
        title=_text(item.get("title"), "Untitled"),
        artist=artist or "Unknown Artist",
        date=_text(item.get("dated"), "Unknown Date"),
        medium=_text(item.get("medium")) or _text(item.get("technique")),
        dimensions=_text(item.get("dimensions")),
        department=_text(item.get("department")),
        culture=_text(item.get("culture")),
        provenance=_text(item.get("provenance")) or _text(item.get("creditline")),
        description=_text(item.get("description")) or _text(item.get("classification")),
        image_url=image_url,
        thumbnail_url=thumbnail_for(image_url),
        object_url=_text(item.get("url")) or None,
    )
