"""
Durable key-value stores for sheet persistence.

Values are JSON-compatible structures (lists, dicts, strings, numbers).
Every store exposes the same async get/set/delete contract so the sheet
manager never depends on a concrete backend.
"""

import asyncio
import copy
import json
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Protocol

from loguru import logger

from .config import Config, get_database_path
from .exceptions import StoreError


class DurableStore(Protocol):
    """Protocol for async key-value persistence."""

    async def get(self, key: str) -> Optional[Any]: ...
    async def set(self, key: str, value: Any) -> None: ...
    async def delete(self, key: str) -> None: ...


class MemoryStore:
    """Dict-backed store. Values are copied on the way in and out."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    async def get(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self._data.get(key))

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data.keys())


class SqliteStore:
    """SQLite-backed store keeping JSON-encoded values in a single table.

    Blocking sqlite calls run in a worker thread so awaiting callers never
    stall the event loop. Each call opens its own short-lived connection.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self._initialized = False

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Get a database connection with proper cleanup and concurrency support."""
        conn = sqlite3.connect(self.db_path, timeout=30.0)
        conn.row_factory = sqlite3.Row

        # WAL mode allows reads during writes
        conn.execute("PRAGMA journal_mode=WAL")

        try:
            yield conn
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        if self._initialized:
            return
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            conn.commit()
        self._initialized = True
        logger.debug(f"Key-value store ready at {self.db_path}")

    def _get(self, key: str) -> Optional[Any]:
        self._ensure_schema()
        with self._connection() as conn:
            cursor = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cursor.fetchone()
        if row is None:
            return None
        return json.loads(row["value"])

    def _set(self, key: str, value: Any) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        self._ensure_schema()
        with self._connection() as conn:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
            """,
                (key, payload),
            )
            conn.commit()

    def _delete(self, key: str) -> None:
        self._ensure_schema()
        with self._connection() as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()

    async def get(self, key: str) -> Optional[Any]:
        try:
            return await asyncio.to_thread(self._get, key)
        except (sqlite3.Error, ValueError) as e:
            raise StoreError("get", key, str(e)) from e

    async def set(self, key: str, value: Any) -> None:
        try:
            await asyncio.to_thread(self._set, key, value)
        except (sqlite3.Error, TypeError, ValueError) as e:
            raise StoreError("set", key, str(e)) from e

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._delete, key)
        except sqlite3.Error as e:
            raise StoreError("delete", key, str(e)) from e


def create_store(config: Config) -> DurableStore:
    """Create the store selected by the [storage] config section."""
    if config.storage.backend == "memory":
        logger.warning("Using in-memory store; sheets will not survive restart")
        return MemoryStore()
    return SqliteStore(get_database_path(config))
