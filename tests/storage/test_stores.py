"""키-값 저장소 백엔드 테스트."""

from pathlib import Path

import pytest
from pydantic import BaseModel

from oss_finder.exceptions import StaleWriteError
from oss_finder.storage import (
    KeyValueStore,
    LocalJSONStore,
    MemoryStore,
    read_counter,
    read_model,
    read_model_list,
    write_model,
)


class Item(BaseModel):
    name: str
    count: int = 0


@pytest.fixture(params=["memory", "local"])
def kv(request: pytest.FixtureRequest, tmp_path: Path) -> KeyValueStore:
    """MemoryStore와 LocalJSONStore를 같은 테스트로 검증한다."""
    if request.param == "memory":
        return MemoryStore()
    return LocalJSONStore(tmp_path / "store")


class TestKeyValueStore:
    """공통 저장소 동작 테스트."""

    def test_missing_key(self, kv: KeyValueStore) -> None:
        assert kv.get("nope") is None
        assert kv.get_record("nope") is None

    def test_set_and_get(self, kv: KeyValueStore) -> None:
        kv.set("user_preferences_u1", {"languages": ["Go"], "level": 2})
        assert kv.get("user_preferences_u1") == {"languages": ["Go"], "level": 2}

    def test_revision_increments(self, kv: KeyValueStore) -> None:
        assert kv.set("k", 1) == 1
        assert kv.set("k", 2) == 2
        record = kv.get_record("k")
        assert record is not None
        assert record.revision == 2
        assert record.value == 2

    def test_expected_revision(self, kv: KeyValueStore) -> None:
        kv.set("k", "a", expected_revision=0)
        kv.set("k", "b", expected_revision=1)

        with pytest.raises(StaleWriteError) as exc_info:
            kv.set("k", "c", expected_revision=1)

        assert exc_info.value.expected == 1
        assert exc_info.value.actual == 2
        assert kv.get("k") == "b"

    def test_new_key_expects_zero(self, kv: KeyValueStore) -> None:
        with pytest.raises(StaleWriteError):
            kv.set("k", "a", expected_revision=3)

    def test_delete(self, kv: KeyValueStore) -> None:
        kv.set("k", 1)
        kv.delete("k")
        kv.delete("k")
        assert kv.get("k") is None

    def test_keys_with_prefix(self, kv: KeyValueStore) -> None:
        for key in ["view_count_u2", "view_count_u1", "user_stats_u1", "a/b c"]:
            kv.set(key, 0)

        assert kv.keys("view_count_") == ["view_count_u1", "view_count_u2"]
        assert "a/b c" in kv.keys()

    def test_returned_values_are_copies(self, kv: KeyValueStore) -> None:
        kv.set("k", {"items": [1]})
        value = kv.get("k")
        value["items"].append(2)
        assert kv.get("k") == {"items": [1]}


class TestLocalJSONStore:
    """LocalJSONStore 전용 테스트."""

    def test_persists_across_instances(self, tmp_path: Path) -> None:
        LocalJSONStore(tmp_path).set("user_stats_u1", {"level": 3})
        assert LocalJSONStore(tmp_path).get("user_stats_u1") == {"level": 3}

    def test_corrupted_file_reads_as_missing(self, tmp_path: Path) -> None:
        store = LocalJSONStore(tmp_path)
        store.set("k", 1)
        next(tmp_path.glob("*.json")).write_text("{not json", encoding="utf-8")

        assert store.get("k") is None

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        store = LocalJSONStore(tmp_path)
        store.set("k", 1)
        store.set("k", 2)
        assert list(tmp_path.glob("*.tmp")) == []


class TestModelHelpers:
    """read_model, write_model 등 보조 함수 테스트."""

    def test_model_round_trip(self, store: MemoryStore) -> None:
        write_model(store, "item", Item(name="a", count=2))
        assert read_model(store, "item", Item, lambda: Item(name="default")) == Item(name="a", count=2)

    def test_read_model_default(self, store: MemoryStore) -> None:
        store.set("item", {"count": "many"})
        assert read_model(store, "item", Item, lambda: Item(name="default")).name == "default"

    def test_read_model_list_drops_bad_entries(self, store: MemoryStore) -> None:
        store.set("items", [{"name": "a"}, {"count": 1}, {"name": "b", "count": 3}])
        assert [i.name for i in read_model_list(store, "items", Item)] == ["a", "b"]

    def test_read_model_list_non_list(self, store: MemoryStore) -> None:
        store.set("items", {"name": "a"})
        assert read_model_list(store, "items", Item) == []

    def test_write_model_list(self, store: MemoryStore) -> None:
        write_model(store, "items", [Item(name="a"), Item(name="b")])
        assert store.get("items") == [{"name": "a", "count": 0}, {"name": "b", "count": 0}]

    @pytest.mark.parametrize(("raw", "expected"), [(None, 0), (7, 7), ("3", 3), ("x", 0)])
    def test_read_counter(self, store: MemoryStore, raw: object, expected: int) -> None:
        if raw is not None:
            store.set("counter", raw)
        assert read_counter(store, "counter") == expected
