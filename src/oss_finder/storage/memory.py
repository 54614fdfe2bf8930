"""인메모리 저장소 모듈."""

import copy
from typing import Any

from oss_finder.storage.base import StoredRecord, next_revision


class MemoryStore:
    """프로세스 메모리에 값을 보관한다 (테스트와 단일 프로세스 데모용)."""

    def __init__(self) -> None:
        self._records: dict[str, StoredRecord] = {}

    def get_record(self, key: str) -> StoredRecord | None:
        """리비전을 포함한 레코드를 가져온다."""
        record = self._records.get(key)
        return record.model_copy(deep=True) if record else None

    def get(self, key: str) -> Any | None:
        """값을 가져온다."""
        record = self._records.get(key)
        return copy.deepcopy(record.value) if record else None

    def set(self, key: str, value: Any, expected_revision: int | None = None) -> int:
        """값을 저장하고 새 리비전을 반환한다."""
        revision = next_revision(key, self._records.get(key), expected_revision)
        self._records[key] = StoredRecord(value=copy.deepcopy(value), revision=revision)
        return revision

    def delete(self, key: str) -> None:
        """값을 삭제한다."""
        self._records.pop(key, None)

    def keys(self, prefix: str = "") -> list[str]:
        """prefix로 시작하는 키 목록."""
        return sorted(k for k in self._records if k.startswith(prefix))
