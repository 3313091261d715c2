"""Repository implementations."""

from .kv import InMemoryKeyValueStore, SQLModelKeyValueStore, namespaced_key

__all__ = ["InMemoryKeyValueStore", "SQLModelKeyValueStore", "namespaced_key"]
