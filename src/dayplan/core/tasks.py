"""Task domain logic and the slot-assignment store."""

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING

from .errors import InvalidInput, InvalidSlot, PersistenceFailure, UnknownTask
from .slots import SlotCalendar

if TYPE_CHECKING:
    from dayplan.ports.task_store import PersistentStore

logger = logging.getLogger(__name__)


class TaskStatus(str, Enum):
    """Task status. Stored but never transitioned."""

    PENDING = "pending"


@dataclass
class NewTask:
    """Fields of a task that has not been assigned an id yet."""

    title: str
    created_at: datetime
    status: TaskStatus = TaskStatus.PENDING
    slot: str | None = None


@dataclass(frozen=True)
class Task:
    """A task sitting either in the unscheduled pool or in one slot."""

    id: str
    title: str
    created_at: datetime
    status: TaskStatus = TaskStatus.PENDING
    slot: str | None = None

    @property
    def is_scheduled(self) -> bool:
        return self.slot is not None


def validate_title(title: str) -> str:
    """Reject empty or whitespace-only titles."""
    if not isinstance(title, str) or not title.strip():
        raise InvalidInput("Task title must not be empty")
    return title


class TaskAssignmentStore:
    """
    Owns the in-memory task collection and is its only writer.

    Every task sits in exactly one place: the unscheduled pool (slot is None)
    or a single slot of the calendar. Mutations are applied in memory first
    and then written to the persistent store. A failed write raises
    PersistenceFailure but is not rolled back; load_all() reconciles.

    Creation blocks until the store hands back a durable id, so there are
    no provisional tasks in memory. Mutating calls wait for the first
    load_all() to finish, and fail if it failed.

    Tasks are frozen; a move swaps in an updated instance, so query
    results can be handed to a view without copying.
    """

    def __init__(self, calendar: SlotCalendar, store: "PersistentStore"):
        self.calendar = calendar
        self._store = store
        # dicts keep insertion order; that is the bucket order
        self._tasks: dict[str, Task] = {}
        self._hydration_done = asyncio.Event()
        self._loaded = False
        self._load_error: PersistenceFailure | None = None
        self._create_lock = asyncio.Lock()
        self._write_locks: dict[str, asyncio.Lock] = {}

    @property
    def is_hydrated(self) -> bool:
        return self._loaded

    async def _wait_for_hydration(self) -> None:
        """Block until a load has resolved; fail if no load has succeeded."""
        await self._hydration_done.wait()
        if not self._loaded:
            raise PersistenceFailure(f"Tasks were never loaded: {self._load_error}")

    async def load_all(self) -> list[Task]:
        """Replace in-memory state with the persisted tasks."""
        try:
            loaded = await self._store.load_all()
        except Exception as e:
            logger.error(f"Failed to load tasks: {e}")
            failure = e if isinstance(e, PersistenceFailure) else PersistenceFailure(f"Failed to load tasks: {e}")
            if not self._loaded:
                self._load_error = failure
                self._hydration_done.set()
            if failure is e:
                raise
            raise failure from e

        tasks: dict[str, Task] = {}
        for task in loaded:
            if task.slot is not None and task.slot not in self.calendar:
                logger.warning(f"Task {task.id} has unknown slot {task.slot!r}; moving it to unscheduled")
                task = replace(task, slot=None)
            tasks[task.id] = task

        self._tasks = tasks
        self._loaded = True
        self._load_error = None
        self._hydration_done.set()
        logger.info(f"Loaded {len(tasks)} tasks")
        return self.all()

    async def create(self, title: str, created_at: datetime | None = None) -> Task:
        """Create an unscheduled task. Returns once the store has assigned an id."""
        validate_title(title)
        await self._wait_for_hydration()

        record = NewTask(title=title, created_at=created_at or datetime.now(timezone.utc))
        async with self._create_lock:
            try:
                task_id = await self._store.create(record)
            except Exception as e:
                logger.error(f"Failed to create task {title!r}: {e}")
                if isinstance(e, PersistenceFailure):
                    raise
                raise PersistenceFailure(f"Failed to create task: {e}") from e

            task = Task(
                id=str(task_id),
                title=record.title,
                created_at=record.created_at,
                status=record.status,
                slot=None,
            )
            self._tasks[task.id] = task

        logger.info(f"Created task {task.id}: {task.title}")
        return task

    async def move_to_slot(self, task_id: str, destination: str | None) -> Task:
        """
        Move a task to a slot label, or back to unscheduled with None.

        Moving a task to where it already is still succeeds and still
        writes the task.
        """
        if destination is not None and destination not in self.calendar:
            raise InvalidSlot(f"Unknown slot: {destination!r}")

        await self._wait_for_hydration()
        task = self._tasks.get(task_id)
        if task is None:
            raise UnknownTask(task_id)

        task = replace(task, slot=destination)
        self._tasks[task_id] = task
        logger.debug(f"Moved task {task_id} to {destination or 'unscheduled'}")
        await self._write(task)
        return task

    async def _write(self, snapshot: Task) -> None:
        """Upsert a task snapshot; writes to one task are applied in order."""
        lock = self._write_locks.setdefault(snapshot.id, asyncio.Lock())
        async with lock:
            try:
                await self._store.upsert(snapshot)
            except Exception as e:
                logger.error(f"Failed to persist task {snapshot.id}: {e}")
                if isinstance(e, PersistenceFailure):
                    raise
                raise PersistenceFailure(f"Failed to persist task {snapshot.id}: {e}") from e

    def get(self, task_id: str) -> Task | None:
        return self._tasks.get(task_id)

    def all(self) -> list[Task]:
        return list(self._tasks.values())

    def unscheduled(self) -> list[Task]:
        """Tasks not assigned to any slot, in insertion order."""
        return [t for t in self._tasks.values() if t.slot is None]

    def by_bucket(self, label: str) -> list[Task]:
        """Tasks assigned to a slot, in insertion order."""
        if label not in self.calendar:
            raise InvalidSlot(f"Unknown slot: {label!r}")
        return [t for t in self._tasks.values() if t.slot == label]
