"""Ports - interfaces/protocols for external dependencies."""

from .task_store import PersistentStore

__all__ = [
    "PersistentStore",
]
