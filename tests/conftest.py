from datetime import datetime, timedelta

import pytest

from spacelearn.domain.models import LearningEntry

# Fixed reference moment, naive so it is read as local time
TODAY = datetime(2026, 3, 15, 9, 30)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def make_entry():
    """Factory for entries created a given number of days before TODAY."""
    counter = {"n": 0}

    def _make(days_ago: int = 0, step: int = 0, **kwargs) -> LearningEntry:
        counter["n"] += 1
        n = counter["n"]
        defaults = {
            "id": f"entry_{n}",
            "sequence_number": n,
            "content": f"Learned thing {n}",
            "created_at": TODAY - timedelta(days=days_ago),
            "step": step,
        }
        defaults.update(kwargs)
        return LearningEntry(**defaults)

    return _make


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks HOME to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home
