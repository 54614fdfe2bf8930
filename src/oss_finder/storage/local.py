"""로컬 JSON 파일 저장소 모듈."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any
from urllib.parse import quote, unquote

from pydantic import ValidationError as PydanticValidationError

from oss_finder.storage.base import StoredRecord, next_revision

logger = logging.getLogger(__name__)


class LocalJSONStore:
    """키마다 JSON 파일 하나를 디렉터리에 저장한다.

    읽기와 쓰기는 동기적이다. 쓰기는 임시 파일에 기록한 뒤 원본과 교체한다.
    """

    SUFFIX = ".json"

    def __init__(self, directory: Path | str) -> None:
        """
        Args:
            directory: JSON 파일을 저장할 디렉터리. 없으면 생성한다.
        """
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}{self.SUFFIX}"

    def get_record(self, key: str) -> StoredRecord | None:
        """리비전을 포함한 레코드를 가져온다. 파일이 깨졌으면 None."""
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return StoredRecord.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, PydanticValidationError) as e:
            logger.warning(f"Failed to read {path.name}: {e}")
            return None

    def get(self, key: str) -> Any | None:
        """값을 가져온다."""
        record = self.get_record(key)
        return record.value if record else None

    def set(self, key: str, value: Any, expected_revision: int | None = None) -> int:
        """값을 저장하고 새 리비전을 반환한다."""
        revision = next_revision(key, self.get_record(key), expected_revision)
        record = StoredRecord(value=value, revision=revision)

        fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(record.model_dump_json())
            os.replace(tmp_name, self._path(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return revision

    def delete(self, key: str) -> None:
        """값을 삭제한다."""
        self._path(key).unlink(missing_ok=True)

    def keys(self, prefix: str = "") -> list[str]:
        """prefix로 시작하는 키 목록."""
        names = (
            unquote(p.name[: -len(self.SUFFIX)])
            for p in self.directory.glob(f"*{self.SUFFIX}")
        )
        return sorted(k for k in names if k.startswith(prefix))

    def __repr__(self) -> str:
        return f"LocalJSONStore({str(self.directory)!r})"
