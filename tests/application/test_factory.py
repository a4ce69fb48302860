from unittest.mock import AsyncMock, patch

import pytest

from spacelearn.application.config import AppConfig
from spacelearn.application.factory import get_entry_store, open_service
from spacelearn.domain.errors import StoreUnavailable, ValidationError
from spacelearn.infrastructure.adapters import (
    InMemoryEntryStore,
    JsonFileEntryStore,
    SupabaseEntryStore,
)


def test_memory_backend():
    assert isinstance(get_entry_store(AppConfig(backend="memory")), InMemoryEntryStore)


def test_json_backend(tmp_path):
    store = get_entry_store(AppConfig(backend="json", data_file=tmp_path / "e.json"))
    assert isinstance(store, JsonFileEntryStore)
    assert store.path == (tmp_path / "e.json").resolve()


def test_supabase_backend():
    config = AppConfig(
        backend="supabase", supabase_url="https://demo.supabase.co", supabase_key="k"
    )
    store = get_entry_store(config)
    assert isinstance(store, SupabaseEntryStore)
    assert store.endpoint == "https://demo.supabase.co/rest/v1/revisoes"


def test_supabase_backend_needs_credentials():
    with pytest.raises(ValidationError):
        get_entry_store(AppConfig(backend="supabase", supabase_url="https://x.supabase.co"))


@pytest.mark.asyncio
async def test_open_service_loads_entries(tmp_path):
    config = AppConfig(backend="json", data_file=tmp_path / "e.json", intervals=[2, 3])
    service = await open_service(config)
    assert service.entries == []
    assert service.policy.intervals == (2, 3)


@pytest.mark.asyncio
async def test_open_service_closes_store_when_load_fails():
    store = InMemoryEntryStore()
    store.list_entries = AsyncMock(side_effect=StoreUnavailable("down"))
    store.close = AsyncMock()

    with patch("spacelearn.application.factory.get_entry_store", return_value=store):
        with pytest.raises(StoreUnavailable):
            await open_service(AppConfig(backend="memory"))

    store.close.assert_awaited_once()
