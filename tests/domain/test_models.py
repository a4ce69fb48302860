from datetime import datetime

import pytest

from spacelearn.domain.errors import NotFound, SpaceLearnError
from spacelearn.domain.models import Difficulty, Review


def test_label_is_zero_padded(make_entry):
    assert make_entry(sequence_number=7).label == "#0007"
    assert make_entry(sequence_number=12345).label == "#12345"


def test_last_reviewed_at(make_entry):
    entry = make_entry()
    assert entry.last_reviewed_at is None

    first = Review(date=datetime(2026, 3, 1), step=1)
    second = Review(date=datetime(2026, 3, 4), step=2, difficulty=Difficulty.HARD)
    entry = make_entry(reviews=(first, second), step=2)
    assert entry.last_reviewed_at == datetime(2026, 3, 4)


def test_entries_are_frozen(make_entry):
    entry = make_entry()
    with pytest.raises(AttributeError):
        entry.step = 3


def test_not_found_carries_id():
    err = NotFound("entry_x")
    assert isinstance(err, SpaceLearnError)
    assert err.entry_id == "entry_x"
    assert "entry_x" in str(err)
