"""키-값 저장소 프로토콜 정의."""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from oss_finder.exceptions import StaleWriteError
from oss_finder.models import utcnow

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class StoredRecord(BaseModel):
    """리비전이 붙은 저장 레코드."""

    value: Any = Field(description="JSON 직렬화 가능한 값")
    revision: int = Field(default=1, ge=1, description="쓰기마다 1씩 증가하는 리비전")
    updated_at: datetime = Field(default_factory=utcnow)


class KeyValueStore(Protocol):
    """사용자 상태를 보관하는 키-값 저장소 프로토콜."""

    def get_record(self, key: str) -> StoredRecord | None:
        """리비전을 포함한 레코드를 가져온다."""
        ...

    def get(self, key: str) -> Any | None:
        """값을 가져온다. 없으면 None."""
        ...

    def set(self, key: str, value: Any, expected_revision: int | None = None) -> int:
        """값을 저장하고 새 리비전을 반환한다."""
        ...

    def delete(self, key: str) -> None:
        """값을 삭제한다."""
        ...

    def keys(self, prefix: str = "") -> list[str]:
        """prefix로 시작하는 키 목록을 반환한다."""
        ...


def next_revision(key: str, current: StoredRecord | None, expected: int | None) -> int:
    """기대 리비전을 검사하고 다음 리비전 번호를 계산한다.

    Args:
        key: 저장 키
        current: 현재 저장된 레코드
        expected: 호출자가 읽었던 리비전. None이면 검사하지 않는다 (last-write-wins).
            아직 없는 키에 대해서는 0을 기대값으로 쓴다.

    Raises:
        StaleWriteError: 기대 리비전과 현재 리비전이 다를 때
    """
    actual = current.revision if current else 0
    if expected is not None and expected != actual:
        raise StaleWriteError(key, expected, actual)
    return actual + 1


def read_model(
    store: KeyValueStore,
    key: str,
    model: type[M],
    default: Callable[[], M],
) -> M:
    """저장된 JSON을 모델로 읽는다. 없거나 깨졌으면 기본값을 반환한다."""
    raw = store.get(key)
    if raw is None:
        return default()
    try:
        return model.model_validate(raw)
    except PydanticValidationError as e:
        logger.warning(f"Corrupted record for {key}, using defaults: {e}")
        return default()


def read_model_list(store: KeyValueStore, key: str, model: type[M]) -> list[M]:
    """저장된 JSON 배열을 모델 리스트로 읽는다. 깨진 항목은 버린다."""
    raw = store.get(key)
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning(f"Expected a list for {key}, got {type(raw).__name__}")
        return []

    items: list[M] = []
    for entry in raw:
        try:
            items.append(model.model_validate(entry))
        except PydanticValidationError as e:
            logger.warning(f"Dropping corrupted entry in {key}: {e}")
    return items


def write_model(store: KeyValueStore, key: str, value: BaseModel | list[BaseModel]) -> int:
    """모델(또는 모델 리스트)을 JSON 형태로 저장한다."""
    if isinstance(value, list):
        payload: Any = [item.model_dump(mode="json") for item in value]
    else:
        payload = value.model_dump(mode="json")
    return store.set(key, payload)


def read_counter(store: KeyValueStore, key: str) -> int:
    """정수 카운터를 읽는다. 없거나 숫자가 아니면 0."""
    raw = store.get(key)
    if raw is None:
        return 0
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning(f"Counter {key} is not a number: {raw!r}")
        return 0
