"""Exhibitions: named, ordered collections of artworks kept on disk.

State changes go through reduce(), which takes the current ExhibitionState
and an action and returns a new state without touching the old one.
ExhibitionStore wraps that with read-all-on-start, write-all-on-change
JSON persistence.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Union

from .models import Artwork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Exhibition:
    id: str
    name: str
    description: str = ""
    created_at: str = ""
    artworks: tuple[Artwork, ...] = ()

    def contains(self, source: str, artwork_id: str) -> bool:
        return any(a.source == source and a.id == str(artwork_id) for a in self.artworks)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "created_at": self.created_at,
            "artworks": [a.to_dict() for a in self.artworks],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Exhibition":
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description") or "",
            created_at=data.get("created_at") or "",
            artworks=tuple(Artwork.from_dict(a) for a in data.get("artworks", [])),
        )


@dataclass(frozen=True)
class ExhibitionState:
    exhibitions: tuple[Exhibition, ...] = ()
    is_loading: bool = False
    error: str | None = None


# Actions


@dataclass(frozen=True)
class CreateExhibition:
    name: str
    description: str = ""
    exhibition_id: str | None = None  # Generated when omitted


@dataclass(frozen=True)
class AddToExhibition:
    exhibition_id: str
    artwork: Artwork


@dataclass(frozen=True)
class RemoveFromExhibition:
    exhibition_id: str
    artwork_id: str
    source: str


@dataclass(frozen=True)
class DeleteExhibition:
    exhibition_id: str


@dataclass(frozen=True)
class RenameExhibition:
    exhibition_id: str
    name: str | None = None
    description: str | None = None  # None keeps the current description


@dataclass(frozen=True)
class SetLoading:
    is_loading: bool


@dataclass(frozen=True)
class SetError:
    error: str | None


Action = Union[
    CreateExhibition,
    AddToExhibition,
    RemoveFromExhibition,
    DeleteExhibition,
    RenameExhibition,
    SetLoading,
    SetError,
]


def new_exhibition_id() -> str:
    return f"exhibition_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}"


def _update(state: ExhibitionState, exhibition_id: str, change) -> ExhibitionState:
    """Apply `change` to the matching exhibition, leaving the rest alone."""
    exhibitions = tuple(
        change(e) if e.id == exhibition_id else e for e in state.exhibitions
    )
    return replace(state, exhibitions=exhibitions, error=None)


def reduce(state: ExhibitionState, action: Action) -> ExhibitionState:
    """Return the state that results from applying `action` to `state`."""
    if isinstance(action, CreateExhibition):
        exhibition = Exhibition(
            id=action.exhibition_id or new_exhibition_id(),
            name=action.name,
            description=action.description or "",
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        return replace(state, exhibitions=state.exhibitions + (exhibition,), error=None)

    if isinstance(action, AddToExhibition):
        artwork = action.artwork

        def add(e: Exhibition) -> Exhibition:
            # Composite-key dedup: same id from another museum is a different artwork
            if e.contains(artwork.source, artwork.id):
                return e
            return replace(e, artworks=e.artworks + (artwork,))

        return _update(state, action.exhibition_id, add)

    if isinstance(action, RemoveFromExhibition):
        def remove(e: Exhibition) -> Exhibition:
            return replace(e, artworks=tuple(
                a for a in e.artworks
                if not (a.id == str(action.artwork_id) and a.source == action.source)
            ))

        return _update(state, action.exhibition_id, remove)

    if isinstance(action, DeleteExhibition):
        return replace(
            state,
            exhibitions=tuple(e for e in state.exhibitions if e.id != action.exhibition_id),
            error=None,
        )

    if isinstance(action, RenameExhibition):
        def rename(e: Exhibition) -> Exhibition:
            return replace(
                e,
                name=action.name or e.name,
                description=e.description if action.description is None else action.description,
            )

        return _update(state, action.exhibition_id, rename)

    if isinstance(action, SetLoading):
        return replace(state, is_loading=action.is_loading)

    if isinstance(action, SetError):
        return replace(state, error=action.error, is_loading=False)

    return state


# Queries


def get_exhibition(state: ExhibitionState, exhibition_id: str) -> Exhibition | None:
    return next((e for e in state.exhibitions if e.id == exhibition_id), None)


def total_artworks(state: ExhibitionState) -> int:
    return sum(len(e.artworks) for e in state.exhibitions)


def is_artwork_in_any(state: ExhibitionState, artwork: Artwork | None) -> bool:
    if artwork is None:
        return False
    return any(e.contains(artwork.source, artwork.id) for e in state.exhibitions)


def exhibitions_containing(state: ExhibitionState, artwork: Artwork | None) -> list[Exhibition]:
    if artwork is None:
        return []
    return [e for e in state.exhibitions if e.contains(artwork.source, artwork.id)]


class ExhibitionStore:
    """Holds the current state and persists it to a JSON file after every change."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.state = self._load()

    def _load(self) -> ExhibitionState:
        if not self.path.exists():
            return ExhibitionState()
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            exhibitions = tuple(Exhibition.from_dict(e) for e in data.get("exhibitions", []))
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error("Error loading exhibitions from %s: %s", self.path, e)
            return ExhibitionState()
        return ExhibitionState(exhibitions=exhibitions)

    def _save(self) -> None:
        payload = {"exhibitions": [e.to_dict() for e in self.state.exhibitions]}
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Write beside the target and swap in; a failed write leaves the old file intact
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            logger.error("Error saving exhibitions to %s: %s", self.path, e)
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

    def dispatch(self, action: Action) -> ExhibitionState:
        self.state = reduce(self.state, action)
        self._save()
        return self.state

    # Convenience wrappers used by the UI

    @property
    def exhibitions(self) -> tuple[Exhibition, ...]:
        return self.state.exhibitions

    def create(self, name: str, description: str = "") -> Exhibition:
        exhibition_id = new_exhibition_id()
        self.dispatch(CreateExhibition(name, description, exhibition_id))
        return get_exhibition(self.state, exhibition_id)

    def add(self, exhibition_id: str, artwork: Artwork) -> None:
        self.dispatch(AddToExhibition(exhibition_id, artwork))

    def remove(self, exhibition_id: str, artwork_id: str, source: str) -> None:
        self.dispatch(RemoveFromExhibition(exhibition_id, str(artwork_id), source))

    def delete(self, exhibition_id: str) -> None:
        self.dispatch(DeleteExhibition(exhibition_id))

    def rename(self, exhibition_id: str, name: str | None = None, description: str | None = None) -> None:
        self.dispatch(RenameExhibition(exhibition_id, name, description))
