"""In-process task store adapter."""

from dataclasses import replace

from dayplan.core.tasks import NewTask, Task


class MemoryTaskStore:
    """
    Dict-backed task storage.

    Implements PersistentStore protocol. Ids are auto-incremented integers
    rendered as strings. Nothing survives the process.
    """

    def __init__(self, tasks: list[Task] | None = None):
        self._records: dict[str, Task] = {}
        self._next_id = 1
        for task in tasks or []:
            self._records[task.id] = replace(task)
            if task.id.isdigit():
                self._next_id = max(self._next_id, int(task.id) + 1)

    async def create(self, record: NewTask) -> str:
        task_id = str(self._next_id)
        self._next_id += 1
        self._records[task_id] = Task(
            id=task_id,
            title=record.title,
            created_at=record.created_at,
            status=record.status,
            slot=record.slot,
        )
        return task_id

    async def upsert(self, task: Task) -> None:
        self._records[task.id] = replace(task)

    async def load_all(self) -> list[Task]:
        return [replace(t) for t in self._records.values()]
