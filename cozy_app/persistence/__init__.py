"""Persistent key-value storage backends."""

from .kv_store import InMemoryKeyValueStore, KeyValueStore, SqliteKeyValueStore, create_store

__all__ = ["InMemoryKeyValueStore", "KeyValueStore", "SqliteKeyValueStore", "create_store"]
