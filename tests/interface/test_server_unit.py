from datetime import date, timedelta
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from spacelearn.application.learning_service import LearningService
from spacelearn.consts import VERSION
from spacelearn.domain.errors import StoreUnavailable
from spacelearn.infrastructure.adapters.memory_store import InMemoryEntryStore
from spacelearn.server import app, get_service

client = TestClient(app)


@pytest.fixture
def service():
    svc = LearningService(InMemoryEntryStore())
    app.dependency_overrides[get_service] = lambda: svc
    yield svc
    app.dependency_overrides.clear()


def _create(content="Tuples are immutable", **extra):
    response = client.post("/entries", json={"content": content, **extra})
    assert response.status_code == 201, response.text
    return response.json()


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == VERSION


def test_get_version():
    response = client.get("/version")
    assert response.status_code == 200
    assert response.json() == {"version": VERSION}


def test_create_and_list(service):
    created = _create(context="book", tags=["python", " python "])
    assert created["label"] == "#0001"
    assert created["tags"] == ["python"]
    assert created["step"] == 0

    response = client.get("/entries")
    assert response.status_code == 200
    assert [e["id"] for e in response.json()] == [created["id"]]


def test_create_blank_content_is_422(service):
    response = client.post("/entries", json={"content": "  "})
    assert response.status_code == 422
    assert "must not be empty" in response.json()["detail"]
    assert service.entries == []


def test_due_endpoint(service):
    entry = _create()
    tomorrow = (date.today() + timedelta(days=1)).isoformat()

    response = client.get("/entries/due")
    assert response.status_code == 200
    assert response.json()["count"] == 0

    response = client.get("/entries/due", params={"today": tomorrow})
    data = response.json()
    assert data["today"] == tomorrow
    assert data["count"] == 1
    assert data["entries"][0]["id"] == entry["id"]


def test_today_endpoint(service):
    _create()
    assert len(client.get("/entries/today").json()) == 1
    assert client.get("/entries/today", params={"day": "2001-01-01"}).json() == []


def test_review_endpoint(service):
    entry = _create()

    response = client.post(
        f"/entries/{entry['id']}/review",
        json={"questions": ["Why?"], "answers": ["Hashable"], "difficulty": "easy"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["step"] == 1
    assert data["reviews"][0]["questions"] == ["Why?"]
    assert data["reviews"][0]["difficulty"] == "easy"
    assert data["reviews"][0]["step"] == 1


def test_review_unknown_entry_is_404(service):
    _create()
    response = client.post("/entries/missing/review", json={})
    assert response.status_code == 404
    assert len(service.entries) == 1


def test_review_bad_difficulty_is_422(service):
    entry = _create()
    response = client.post(f"/entries/{entry['id']}/review", json={"difficulty": "brutal"})
    assert response.status_code == 422
    assert service.entries[0].step == 0


def test_store_unavailable_is_503(service):
    entry = _create()
    service._store.update_entry = AsyncMock(side_effect=StoreUnavailable("offline"))

    response = client.post(f"/entries/{entry['id']}/review", json={})

    assert response.status_code == 503
    assert response.json()["detail"] == "offline"
    assert service.entries[0].step == 0


def test_edit_and_delete(service):
    entry = _create()

    response = client.patch(f"/entries/{entry['id']}", json={"content": "Edited"})
    assert response.status_code == 200
    assert response.json()["content"] == "Edited"

    response = client.delete(f"/entries/{entry['id']}")
    assert response.status_code == 204
    assert client.get("/entries").json() == []

    assert client.delete(f"/entries/{entry['id']}").status_code == 404


def test_reload(service):
    _create()
    response = client.post("/entries/reload")
    assert response.status_code == 200
    assert len(response.json()) == 1
