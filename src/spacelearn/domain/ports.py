"""
Ports (interfaces) for durable entry storage.

These define the contract that infrastructure adapters must implement.
Application services depend on this abstraction, not concrete implementations.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime

from .models import LearningEntry, Review


class EntryStore(ABC):
    """
    Port for persisting learning entries.

    Implementations:
        - InMemoryEntryStore: process-local dict, used for tests and demos.
        - JsonFileEntryStore: a single JSON document on local disk.
        - SupabaseEntryStore: a Supabase table via its PostgREST API.

    Every method raises NotFound for unknown ids and StoreUnavailable when
    the backend cannot be reached. Failed calls must not leave partial writes.
    """

    @abstractmethod
    async def list_entries(self) -> list[LearningEntry]:
        """
        Fetch every stored entry.

        Returns:
            Entries in storage order; callers sort as they need.
        """
        pass

    @abstractmethod
    async def create_entry(
        self,
        content: str,
        context: str | None = None,
        tags: Sequence[str] | None = None,
    ) -> LearningEntry:
        """
        Persist a new entry.

        The store assigns ``id``, ``sequence_number`` and ``created_at``;
        the entry starts at step 0 with no reviews.
        """
        pass

    @abstractmethod
    async def update_entry(
        self,
        entry_id: str,
        step: int,
        reviews: Sequence[Review],
        last_reviewed_at: datetime | None,
    ) -> None:
        """
        Write the scheduling state produced by a completed review.

        Args:
            entry_id: Entry to update.
            step: New ladder step.
            reviews: Full review history, including the new review.
            last_reviewed_at: Completion time of the newest review.
        """
        pass

    @abstractmethod
    async def edit_entry(
        self,
        entry_id: str,
        content: str | None = None,
        context: str | None = None,
        tags: Sequence[str] | None = None,
    ) -> LearningEntry:
        """
        Change the text fields of an entry. ``None`` leaves a field untouched.

        Scheduling fields (step, reviews, created_at) are never changed here.
        """
        pass

    @abstractmethod
    async def delete_entry(self, entry_id: str) -> None:
        pass

    async def close(self) -> None:
        """Release any held resources."""
        return None
