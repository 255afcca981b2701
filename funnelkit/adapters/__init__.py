"""Adapters for host storage."""

from funnelkit.adapters.storage import (
    FileStore,
    KeyValueStore,
    MemoryStore,
    SqliteStore,
)

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "FileStore",
    "SqliteStore",
]
