# Infrastructure Store Adapters Package
from .json_store import JsonFileEntryStore
from .memory_store import InMemoryEntryStore
from .supabase_store import SupabaseEntryStore

__all__ = ["InMemoryEntryStore", "JsonFileEntryStore", "SupabaseEntryStore"]
