"""Tests for the durable key-value stores."""

import sqlite3

import pytest

from music_sheets.core.config import Config, StorageConfig
from music_sheets.core.exceptions import StoreError
from music_sheets.core.store import MemoryStore, SqliteStore, create_store


class TestMemoryStore:
    @pytest.mark.anyio
    async def test_missing_key_returns_none(self) -> None:
        assert await MemoryStore().get("missing") is None

    @pytest.mark.anyio
    async def test_values_are_copied(self) -> None:
        store = MemoryStore()
        value = [{"id": "1"}]
        await store.set("k", value)

        value[0]["id"] = "changed"
        loaded = await store.get("k")
        loaded.append("extra")

        assert await store.get("k") == [{"id": "1"}]

    @pytest.mark.anyio
    async def test_delete(self) -> None:
        store = MemoryStore({"k": 1})
        await store.delete("k")
        await store.delete("never-existed")
        assert await store.get("k") is None
        assert store.keys() == []


class TestSqliteStore:
    @pytest.mark.anyio
    async def test_set_get_overwrite(self, tmp_path) -> None:
        store = SqliteStore(tmp_path / "data" / "sheets.db")

        await store.set("music-sheets", [{"id": "favorite", "title": "我喜欢"}])
        await store.set("music-sheets", [{"id": "favorite", "title": "Loved"}])

        assert await store.get("music-sheets") == [{"id": "favorite", "title": "Loved"}]

    @pytest.mark.anyio
    async def test_missing_key_and_delete(self, tmp_path) -> None:
        store = SqliteStore(tmp_path / "sheets.db")
        assert await store.get("nope") is None

        await store.set("k", [])
        await store.delete("k")

        assert await store.get("k") is None

    @pytest.mark.anyio
    async def test_persists_across_instances(self, tmp_path) -> None:
        db_path = tmp_path / "sheets.db"
        await SqliteStore(db_path).set("favorite", [{"platform": "local", "id": "1"}])

        assert await SqliteStore(db_path).get("favorite") == [
            {"platform": "local", "id": "1"}
        ]

    @pytest.mark.anyio
    async def test_unserializable_value_raises_store_error(self, tmp_path) -> None:
        store = SqliteStore(tmp_path / "sheets.db")
        with pytest.raises(StoreError, match="set failed for key 'bad'"):
            await store.set("bad", {"obj": object()})

    @pytest.mark.anyio
    async def test_corrupt_value_raises_store_error(self, tmp_path) -> None:
        db_path = tmp_path / "sheets.db"
        store = SqliteStore(db_path)
        await store.set("k", [])
        conn = sqlite3.connect(db_path)
        conn.execute("UPDATE kv_store SET value = '{not json' WHERE key = 'k'")
        conn.commit()
        conn.close()

        with pytest.raises(StoreError) as exc_info:
            await store.get("k")
        assert exc_info.value.operation == "get"
        assert exc_info.value.key == "k"


def test_create_store_selects_backend(tmp_path):
    memory = create_store(Config(storage=StorageConfig(backend="memory")))
    assert isinstance(memory, MemoryStore)

    sqlite_store = create_store(
        Config(storage=StorageConfig(database_path=str(tmp_path / "s.db")))
    )
    assert isinstance(sqlite_store, SqliteStore)
    assert sqlite_store.db_path == tmp_path / "s.db"
