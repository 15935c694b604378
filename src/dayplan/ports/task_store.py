"""Persistent task store interface."""

from typing import Protocol

from dayplan.core.tasks import NewTask, Task


class PersistentStore(Protocol):
    """Durable key-value collection of tasks, keyed by a store-assigned id."""

    async def create(self, record: NewTask) -> str:
        """Insert a new task and return its assigned id."""
        ...

    async def upsert(self, task: Task) -> None:
        """Insert or replace a task by id."""
        ...

    async def load_all(self) -> list[Task]:
        """Fetch all tasks in creation order."""
        ...
