"""Adapters - I/O implementations of ports."""

from .memory_store import MemoryTaskStore
from .sqlite_store import SqliteTaskStore

__all__ = [
    "MemoryTaskStore",
    "SqliteTaskStore",
]
