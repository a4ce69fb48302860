"""
Store Factory
Centralizes the logic for selecting the configured EntryStore adapter.
"""

import logging

from spacelearn.application.config import AppConfig
from spacelearn.application.learning_service import LearningService
from spacelearn.domain.errors import ValidationError
from spacelearn.domain.ports import EntryStore
from spacelearn.infrastructure.adapters.json_store import JsonFileEntryStore
from spacelearn.infrastructure.adapters.memory_store import InMemoryEntryStore
from spacelearn.infrastructure.adapters.supabase_store import SupabaseEntryStore

logger = logging.getLogger(__name__)


def get_entry_store(config: AppConfig) -> EntryStore:
    """
    Returns the EntryStore implementation named by ``config.backend``.
    """
    if config.backend == "memory":
        return InMemoryEntryStore()

    if config.backend == "supabase":
        if not config.supabase_url or not config.supabase_key:
            raise ValidationError(
                "The supabase backend needs both supabase_url and supabase_key"
            )
        logger.debug(f"Backend: Supabase ({config.supabase_url}, table={config.supabase_table})")
        return SupabaseEntryStore(
            url=config.supabase_url,
            api_key=config.supabase_key,
            table=config.supabase_table,
            timeout=config.request_timeout,
        )

    logger.debug(f"Backend: JSON file ({config.data_file})")
    return JsonFileEntryStore(config.data_file)


async def open_service(config: AppConfig) -> LearningService:
    """Build a LearningService for ``config`` and load its entries."""
    service = LearningService(get_entry_store(config), policy=config.policy())
    try:
        await service.load()
    except Exception:
        await service.close()
        raise
    return service
