"""
In-Memory Entry Store: process-local implementation of EntryStore.

Nothing survives the process; used for tests and throwaway sessions.
"""

import logging
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime

from spacelearn.domain.errors import NotFound
from spacelearn.domain.models import LearningEntry, Review
from spacelearn.domain.ports import EntryStore

from .codec import generate_entry_id, now

logger = logging.getLogger(__name__)


class InMemoryEntryStore(EntryStore):
    """Keeps entries in a dict keyed by id."""

    def __init__(self, entries: Sequence[LearningEntry] = ()):
        self._entries: dict[str, LearningEntry] = {e.id: e for e in entries}
        self._next_sequence = max((e.sequence_number for e in entries), default=0) + 1

    async def list_entries(self) -> list[LearningEntry]:
        return list(self._entries.values())

    async def create_entry(
        self,
        content: str,
        context: str | None = None,
        tags: Sequence[str] | None = None,
    ) -> LearningEntry:
        entry = LearningEntry(
            id=generate_entry_id(),
            sequence_number=self._next_sequence,
            content=content,
            context=context or None,
            tags=tuple(tags or ()),
            created_at=now(),
        )
        self._next_sequence += 1
        self._entries[entry.id] = entry
        return entry

    async def update_entry(
        self,
        entry_id: str,
        step: int,
        reviews: Sequence[Review],
        last_reviewed_at: datetime | None,
    ) -> None:
        entry = self._require(entry_id)
        self._entries[entry_id] = replace(entry, step=step, reviews=tuple(reviews))

    async def edit_entry(
        self,
        entry_id: str,
        content: str | None = None,
        context: str | None = None,
        tags: Sequence[str] | None = None,
    ) -> LearningEntry:
        entry = self._require(entry_id)
        changes: dict = {}
        if content is not None:
            changes["content"] = content
        if context is not None:
            changes["context"] = context or None
        if tags is not None:
            changes["tags"] = tuple(tags)
        entry = replace(entry, **changes)
        self._entries[entry_id] = entry
        return entry

    async def delete_entry(self, entry_id: str) -> None:
        self._require(entry_id)
        del self._entries[entry_id]

    def _require(self, entry_id: str) -> LearningEntry:
        entry = self._entries.get(entry_id)
        if entry is None:
            logger.warning(f"Entry {entry_id} not found in memory store")
            raise NotFound(entry_id)
        return entry
