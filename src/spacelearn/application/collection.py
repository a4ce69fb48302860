"""In-memory mirror of the durable entry store."""

from collections.abc import Iterable

from spacelearn.domain.errors import NotFound
from spacelearn.domain.models import LearningEntry


class EntryCollection:
    """
    Owned mapping from entry id to entry, in display order.

    Every mutation builds a new mapping and swaps it in, so a snapshot that
    was already handed out never changes underneath its reader.
    """

    def __init__(self, entries: Iterable[LearningEntry] = ()):
        self._entries: dict[str, LearningEntry] = {e.id: e for e in entries}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._entries

    def snapshot(self) -> list[LearningEntry]:
        return list(self._entries.values())

    def get(self, entry_id: str) -> LearningEntry | None:
        return self._entries.get(entry_id)

    def require(self, entry_id: str) -> LearningEntry:
        entry = self._entries.get(entry_id)
        if entry is None:
            raise NotFound(entry_id)
        return entry

    def replace_all(self, entries: Iterable[LearningEntry]) -> None:
        self._entries = {e.id: e for e in entries}

    def insert_front(self, entry: LearningEntry) -> None:
        updated = {entry.id: entry}
        updated.update((k, v) for k, v in self._entries.items() if k != entry.id)
        self._entries = updated

    def put(self, entry: LearningEntry) -> None:
        """Replace an entry in place, keeping its position."""
        if entry.id not in self._entries:
            raise NotFound(entry.id)
        updated = dict(self._entries)
        updated[entry.id] = entry
        self._entries = updated

    def remove(self, entry_id: str) -> LearningEntry:
        entry = self.require(entry_id)
        self._entries = {k: v for k, v in self._entries.items() if k != entry_id}
        return entry
