import pytest

from spacelearn.application.collection import EntryCollection
from spacelearn.domain.errors import NotFound


def test_snapshot_is_not_affected_by_later_mutations(make_entry):
    a, b = make_entry(), make_entry()
    collection = EntryCollection([a, b])
    snapshot = collection.snapshot()

    collection.remove(a.id)
    collection.insert_front(make_entry())

    assert snapshot == [a, b]
    assert len(collection) == 2


def test_insert_front_and_put_keep_positions(make_entry):
    a, b, c = make_entry(), make_entry(), make_entry()
    collection = EntryCollection([a, b])
    collection.insert_front(c)
    assert [e.id for e in collection.snapshot()] == [c.id, a.id, b.id]

    updated = make_entry(id=a.id, step=3)
    collection.put(updated)
    assert collection.snapshot() == [c, updated, b]


def test_require_and_remove_unknown(make_entry):
    collection = EntryCollection([make_entry()])
    assert "nope" not in collection
    assert collection.get("nope") is None
    with pytest.raises(NotFound):
        collection.require("nope")
    with pytest.raises(NotFound):
        collection.remove("nope")
    with pytest.raises(NotFound):
        collection.put(make_entry(id="nope"))
    assert len(collection) == 1


def test_replace_all(make_entry):
    collection = EntryCollection([make_entry()])
    fresh = [make_entry(), make_entry()]
    collection.replace_all(fresh)
    assert collection.snapshot() == fresh
