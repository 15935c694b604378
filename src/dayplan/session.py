"""Planner session wiring shared by the CLI commands.

A session owns the slot calendar, the task store, the pill track and the
drop dispatcher. Nothing here is global: every command opens its own
session, and pill status lives exactly as long as the session does.
"""

import logging
from dataclasses import dataclass, field

from .adapters.memory_store import MemoryTaskStore
from .adapters.sqlite_store import SqliteTaskStore
from .config import Config
from .core.board import Board, assemble_board
from .core.dispatch import DropDispatcher
from .core.pills import PillStatusTrack
from .core.slots import SlotCalendar
from .core.tasks import TaskAssignmentStore
from .ports.task_store import PersistentStore

logger = logging.getLogger(__name__)


@dataclass
class PlannerSession:
    """Explicitly owned planner state for one session."""

    calendar: SlotCalendar
    tasks: TaskAssignmentStore
    pills: PillStatusTrack
    dispatcher: DropDispatcher = field(init=False)

    def __post_init__(self):
        self.dispatcher = DropDispatcher(self.calendar, self.tasks, self.pills)

    @classmethod
    def build(cls, calendar: SlotCalendar, store: PersistentStore) -> "PlannerSession":
        return cls(
            calendar=calendar,
            tasks=TaskAssignmentStore(calendar, store),
            pills=PillStatusTrack(calendar),
        )

    def board(self) -> Board:
        return assemble_board(self.calendar, self.tasks, self.pills)


def get_store(config: Config, in_memory: bool = False) -> PersistentStore:
    """Resolve the task store from config."""
    if in_memory:
        return MemoryTaskStore()
    return SqliteTaskStore(config.database_path())


async def open_session(config: Config, store: PersistentStore | None = None) -> PlannerSession:
    """Build a session and hydrate its tasks from the store."""
    session = PlannerSession.build(config.calendar(), store or get_store(config))
    await session.tasks.load_all()
    logger.debug(f"Session opened with {len(session.calendar)} slots")
    return session
