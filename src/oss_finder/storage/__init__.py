"""사용자 상태 저장소 모듈."""

from oss_finder.config import Settings
from oss_finder.storage.base import (
    KeyValueStore,
    StoredRecord,
    read_counter,
    read_model,
    read_model_list,
    write_model,
)
from oss_finder.storage.local import LocalJSONStore
from oss_finder.storage.memory import MemoryStore
from oss_finder.storage.supabase import SupabaseStore


def create_store(settings: Settings) -> KeyValueStore:
    """설정에 맞는 저장소 백엔드를 생성한다."""
    if settings.storage_backend == "memory":
        return MemoryStore()
    if settings.storage_backend == "supabase":
        store = SupabaseStore(
            url=settings.supabase_url,
            key=settings.supabase_key,
            table=settings.supabase_table,
        )
        if not store.is_configured:
            raise RuntimeError("storage_backend=supabase requires SUPABASE_URL and SUPABASE_KEY")
        return store
    return LocalJSONStore(settings.storage_dir)


__all__ = [
    "KeyValueStore",
    "LocalJSONStore",
    "MemoryStore",
    "StoredRecord",
    "SupabaseStore",
    "create_store",
    "read_counter",
    "read_model",
    "read_model_list",
    "write_model",
]
