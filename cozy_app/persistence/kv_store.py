"""Key-value persistence layer for phase flags, tokens and profiles."""

import asyncio
import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Sequence

from ..errors import StoreError
from ..logging.config import get_store_logger
from ..utils.time import format_timestamp


class KeyValueStore(ABC):
    """
    Asynchronous string key-value store.

    Expected failures raise StoreError. Anything else a backend raises is
    treated as a fault and left to propagate.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Remove key. Removing an absent key succeeds."""

    @abstractmethod
    async def remove_many(self, keys: Sequence[str]) -> None:
        """Remove all keys. A failure reports the keys that may remain in failed_keys."""


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store for tests and demos."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def remove(self, key: str) -> None:
        self.data.pop(key, None)

    async def remove_many(self, keys: Sequence[str]) -> None:
        for key in keys:
            self.data.pop(key, None)


class SqliteKeyValueStore(KeyValueStore):
    """SQLite-based durable store. Blocking calls run in a worker thread."""

    def __init__(self, db_path: str = "cozy_state.db", timeout: float = 30.0):
        self.db_path = Path(db_path)
        self.timeout = timeout
        self.logger = get_store_logger(__name__)
        self._lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        try:
            with self._get_connection() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                """)
                conn.commit()
        except sqlite3.Error as e:
            raise StoreError(
                f"Failed to initialize store: {e}",
                operation="init",
                target=str(self.db_path)
            ) from e

    @contextmanager
    def _get_connection(self) -> Iterator[sqlite3.Connection]:
        """Get database connection with proper error handling."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.timeout)
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", error=str(e), db_path=str(self.db_path))
            raise
        finally:
            if conn:
                conn.close()

    def _get_sync(self, key: str) -> Optional[str]:
        with self._lock, self._get_connection() as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        return row[0] if row else None

    def _set_sync(self, key: str, value: str) -> None:
        with self._lock, self._get_connection() as conn:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, format_timestamp())
            )
            conn.commit()

    def _remove_many_sync(self, keys: Sequence[str]) -> None:
        with self._lock, self._get_connection() as conn:
            conn.executemany(
                "DELETE FROM kv_store WHERE key = ?", [(key,) for key in keys]
            )
            conn.commit()

    async def _run(self, operation: str, target: str, keys: Sequence[str], func, *args):
        try:
            return await asyncio.to_thread(func, *args)
        except sqlite3.Error as e:
            raise StoreError(
                f"Store {operation} failed for {target}: {e}",
                operation=operation,
                target=target,
                failed_keys=keys
            ) from e

    async def get(self, key: str) -> Optional[str]:
        return await self._run("get", key, [key], self._get_sync, key)

    async def set(self, key: str, value: str) -> None:
        await self._run("set", key, [key], self._set_sync, key, value)

    async def remove(self, key: str) -> None:
        await self._run("remove", key, [key], self._remove_many_sync, [key])

    async def remove_many(self, keys: Sequence[str]) -> None:
        keys = list(keys)
        await self._run("remove_many", ",".join(keys), keys, self._remove_many_sync, keys)

    def _keys_sync(self) -> list[str]:
        with self._lock, self._get_connection() as conn:
            rows = conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [row[0] for row in rows]

    async def keys(self) -> list[str]:
        """List stored keys, for diagnostics."""
        return await self._run("keys", "*", [], self._keys_sync)


def create_store(backend: str = "sqlite", db_path: str = "cozy_state.db",
                 timeout: float = 30.0) -> KeyValueStore:
    """Build the store configured by store.backend."""
    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend == "sqlite":
        return SqliteKeyValueStore(db_path, timeout=timeout)
    raise ValueError(f"Unknown store backend: {backend}")
