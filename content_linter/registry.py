"""Single flat id namespace shared by lessons, courses and interview banks.

One registry is created per validation run and passed explicitly to every
phase; nothing here is module-level state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ContentKind(str, Enum):
    LESSON = "lesson"
    COURSE = "course"
    INTERVIEW = "interview"


@dataclass(frozen=True)
class RegistryEntry:
    kind: ContentKind
    location: str
    record: Any = None


class CollisionError(ValueError):
    """An id was registered twice, possibly under different content kinds."""

    def __init__(self, content_id: str, first: RegistryEntry, kind: ContentKind, location: str):
        self.content_id = content_id
        self.first = first
        self.kind = kind
        self.location = location
        super().__init__(
            f"Duplicate ID '{content_id}': {kind.value} in {location} "
            f"collides with {first.kind.value} in {first.location}"
        )


class IdRegistry:
    def __init__(self):
        self._entries: dict[str, RegistryEntry] = {}

    def register(self, content_id: str, kind: ContentKind, location: str, record: Any = None) -> None:
        """Claim `content_id`; raises CollisionError if it is already taken."""
        existing = self._entries.get(content_id)
        if existing is not None:
            raise CollisionError(content_id, existing, kind, location)
        self._entries[content_id] = RegistryEntry(kind, location, record)

    def exists(self, content_id: str, kind: Optional[ContentKind] = None) -> bool:
        entry = self._entries.get(content_id)
        if entry is None:
            return False
        return kind is None or entry.kind is kind

    def get(self, content_id: str) -> Optional[RegistryEntry]:
        return self._entries.get(content_id)
