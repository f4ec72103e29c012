"""Key-value store adapters - Session store backends."""

from .memory import InMemoryKeyValueStore
from .postgres import PostgresKeyValueStore

__all__ = ["InMemoryKeyValueStore", "PostgresKeyValueStore"]
