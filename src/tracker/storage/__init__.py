"""Persistence backends."""

from tracker.storage.kv import KeyValueStore, MemoryKeyValueStore, SqlKeyValueStore

__all__ = ["KeyValueStore", "MemoryKeyValueStore", "SqlKeyValueStore"]
