"""
Learning Service: Application layer orchestrator.

Owns the in-memory entry collection, routes every mutation through the
durable store first, and answers due-set queries with the pure scheduler.
"""

import logging
from collections.abc import Sequence
from datetime import date, datetime

from spacelearn.domain.errors import NotFound, ValidationError
from spacelearn.domain.models import Difficulty, LearningEntry
from spacelearn.domain.policy import DEFAULT_POLICY, IntervalPolicy
from spacelearn.domain.ports import EntryStore

from . import scheduler
from .collection import EntryCollection

logger = logging.getLogger(__name__)


def require_content(content: str | None) -> str:
    if content is None or not content.strip():
        raise ValidationError("Entry content must not be empty")
    return content.strip()


def normalize_tags(tags: Sequence[str] | None) -> tuple[str, ...]:
    """Strip tags, drop blanks and duplicates; first occurrence wins."""
    if not tags:
        return ()
    seen: dict[str, None] = {}
    for tag in tags:
        if not isinstance(tag, str):
            raise ValidationError(f"Tags must be strings, got {type(tag).__name__}")
        cleaned = tag.strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return tuple(seen)


def normalize_context(context: str | None) -> str | None:
    if context is None:
        return None
    return context.strip() or None


class LearningService:
    """
    Host-facing handle over one entry collection.

    Follows Dependency Inversion: depends on the EntryStore abstraction,
    not concrete adapter implementations. Writes reach the store before the
    in-memory collection, so a failed write never changes what callers see.
    """

    def __init__(self, store: EntryStore, policy: IntervalPolicy | None = None):
        """
        Args:
            store: The durable store (port).
            policy: Interval ladder; uses the default ladder if not provided.
        """
        self._store = store
        self._policy = policy or DEFAULT_POLICY
        self._collection = EntryCollection()

    @property
    def policy(self) -> IntervalPolicy:
        return self._policy

    @property
    def entries(self) -> list[LearningEntry]:
        return self._collection.snapshot()

    async def load(self) -> list[LearningEntry]:
        """Fetch every entry from the store, newest first."""
        entries = await self._store.list_entries()
        entries = sorted(entries, key=lambda e: e.sequence_number, reverse=True)
        self._collection.replace_all(entries)
        logger.info(f"Loaded {len(entries)} entries")
        return self.entries

    def find(self, ref: str) -> LearningEntry:
        """
        Resolve an entry by id, label (``#0007``) or bare sequence number.

        Raises:
            NotFound: if nothing matches.
        """
        entry = self._collection.get(ref)
        if entry is not None:
            return entry

        number = ref.strip().lstrip("#")
        if number.isdigit():
            for candidate in self._collection.snapshot():
                if candidate.sequence_number == int(number):
                    return candidate
        raise NotFound(ref)

    async def add_entry(
        self,
        content: str,
        context: str | None = None,
        tags: Sequence[str] | None = None,
    ) -> LearningEntry:
        content = require_content(content)
        entry = await self._store.create_entry(
            content, normalize_context(context), normalize_tags(tags)
        )
        self._collection.insert_front(entry)
        logger.info(f"Saved entry {entry.label} ({entry.id})")
        return entry

    async def complete_review(
        self,
        entry_id: str,
        questions: Sequence[str] | None = None,
        answers: Sequence[str] | None = None,
        difficulty: Difficulty | str | None = None,
    ) -> LearningEntry:
        """
        Record a completed review and move the entry one step up the ladder.

        Raises:
            NotFound: if the entry is unknown; nothing is written.
            StoreUnavailable: if the store write fails; local state is unchanged.
        """
        entry = self._collection.require(entry_id)
        if difficulty is not None and not isinstance(difficulty, Difficulty):
            try:
                difficulty = Difficulty(difficulty)
            except ValueError:
                raise ValidationError(f"Unknown difficulty: {difficulty!r}") from None

        updated = scheduler.complete_review(
            entry,
            questions=questions,
            answers=answers,
            difficulty=difficulty,
            policy=self._policy,
        )
        await self._store.update_entry(
            updated.id, updated.step, updated.reviews, updated.last_reviewed_at
        )
        self._collection.put(updated)
        logger.info(f"Review completed for {updated.label}: step {entry.step} -> {updated.step}")
        return updated

    async def edit_entry(
        self,
        entry_id: str,
        content: str | None = None,
        context: str | None = None,
        tags: Sequence[str] | None = None,
    ) -> LearningEntry:
        self._collection.require(entry_id)
        if content is not None:
            content = require_content(content)
        updated = await self._store.edit_entry(
            entry_id,
            content=content,
            context=context.strip() if context is not None else None,
            tags=normalize_tags(tags) if tags is not None else None,
        )
        self._collection.put(updated)
        logger.info(f"Edited entry {updated.label}")
        return updated

    async def delete_entry(self, entry_id: str) -> None:
        entry = self._collection.require(entry_id)
        await self._store.delete_entry(entry_id)
        self._collection.remove(entry_id)
        logger.info(f"Deleted entry {entry.label}")

    def due_entries(self, today: date | datetime | None = None) -> list[LearningEntry]:
        """Entries due for review on ``today`` (defaults to now), in display order."""
        return scheduler.compute_due_entries(self.entries, today, self._policy)

    def entries_created_on(self, day: date | datetime | None = None) -> list[LearningEntry]:
        return scheduler.entries_created_on(self.entries, day)

    async def close(self) -> None:
        await self._store.close()
