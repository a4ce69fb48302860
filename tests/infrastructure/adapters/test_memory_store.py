from datetime import datetime

import pytest

from spacelearn.domain.errors import NotFound
from spacelearn.domain.models import Review
from spacelearn.infrastructure.adapters.memory_store import InMemoryEntryStore


@pytest.mark.asyncio
async def test_create_assigns_identity_and_sequence():
    store = InMemoryEntryStore()
    first = await store.create_entry("one")
    second = await store.create_entry("two", "ctx", ["t"])

    assert first.id.startswith("entry_")
    assert first.id != second.id
    assert (first.sequence_number, second.sequence_number) == (1, 2)
    assert second.context == "ctx"
    assert second.tags == ("t",)
    assert first.step == 0 and first.reviews == ()
    assert first.created_at.tzinfo is not None


@pytest.mark.asyncio
async def test_sequence_continues_after_seeded_entries(make_entry):
    store = InMemoryEntryStore([make_entry(sequence_number=9)])
    entry = await store.create_entry("next")
    assert entry.sequence_number == 10


@pytest.mark.asyncio
async def test_update_edit_delete(make_entry):
    seeded = make_entry()
    store = InMemoryEntryStore([seeded])
    review = Review(date=datetime(2026, 3, 16), step=1)

    await store.update_entry(seeded.id, 1, [review], review.date)
    edited = await store.edit_entry(seeded.id, tags=["x"])

    assert edited.step == 1
    assert edited.reviews == (review,)
    assert edited.tags == ("x",)
    assert edited.content == seeded.content

    await store.delete_entry(seeded.id)
    assert await store.list_entries() == []


@pytest.mark.asyncio
async def test_unknown_ids():
    store = InMemoryEntryStore()
    with pytest.raises(NotFound):
        await store.update_entry("x", 1, [], None)
    with pytest.raises(NotFound):
        await store.edit_entry("x", content="c")
    with pytest.raises(NotFound):
        await store.delete_entry("x")
