"""Supabase 스토리지 모듈."""

import logging
from datetime import UTC, datetime
from typing import Any

from supabase import Client, create_client

from oss_finder.exceptions import StaleWriteError
from oss_finder.storage.base import StoredRecord, next_revision

logger = logging.getLogger(__name__)


def like_prefix(prefix: str) -> str:
    """prefix로 시작하는 값에 맞는 LIKE 패턴. 와일드카드 문자는 이스케이프한다."""
    escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"{escaped}%"


class SupabaseStore:
    """Supabase 테이블에 키-값 레코드를 저장한다.

    테이블은 ``key`` (text, primary key), ``value`` (jsonb),
    ``revision`` (int), ``updated_at`` (timestamptz) 컬럼을 가진다.
    """

    def __init__(self, url: str | None, key: str | None, table: str = "kv_store") -> None:
        """
        Args:
            url: Supabase 프로젝트 URL
            key: Supabase anon key
            table: 레코드를 저장할 테이블 이름
        """
        self.table = table
        self.client: Client | None = None
        if url and key:
            self.client = create_client(url, key)

    @property
    def is_configured(self) -> bool:
        """Supabase가 설정되었는지 확인한다."""
        return self.client is not None

    def _require_client(self) -> Client:
        if self.client is None:
            raise RuntimeError("Supabase is not configured")
        return self.client

    def get_record(self, key: str) -> StoredRecord | None:
        """리비전을 포함한 레코드를 가져온다."""
        client = self._require_client()
        response = (
            client.table(self.table)
            .select("value, revision, updated_at")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return StoredRecord.model_validate(response.data[0])

    def get(self, key: str) -> Any | None:
        """값을 가져온다."""
        record = self.get_record(key)
        return record.value if record else None

    def set(self, key: str, value: Any, expected_revision: int | None = None) -> int:
        """값을 저장하고 새 리비전을 반환한다."""
        client = self._require_client()
        current = self.get_record(key)
        revision = next_revision(key, current, expected_revision)

        data = {
            "key": key,
            "value": value,
            "revision": revision,
            "updated_at": datetime.now(UTC).isoformat(),
        }

        if current is None:
            client.table(self.table).insert(data).execute()
            logger.info(f"New record: {key}")
        else:
            # 읽은 리비전이 그대로일 때만 갱신한다
            response = (
                client.table(self.table)
                .update(data)
                .eq("key", key)
                .eq("revision", current.revision)
                .execute()
            )
            if not response.data:
                latest = self.get_record(key)
                actual = latest.revision if latest else 0
                if expected_revision is not None or latest is None:
                    raise StaleWriteError(key, current.revision, actual)
                # last-write-wins: 다른 writer의 리비전 위에 덮어쓴다
                revision = actual + 1
                data["revision"] = revision
                client.table(self.table).update(data).eq("key", key).execute()
        return revision

    def delete(self, key: str) -> None:
        """값을 삭제한다."""
        client = self._require_client()
        client.table(self.table).delete().eq("key", key).execute()

    def keys(self, prefix: str = "") -> list[str]:
        """prefix로 시작하는 키 목록."""
        client = self._require_client()
        response = (
            client.table(self.table)
            .select("key")
            .like("key", like_prefix(prefix))
            .order("key")
            .execute()
        )
        return [row["key"] for row in response.data or []]
