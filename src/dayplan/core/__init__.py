"""Functional core - slot assignment and pill status logic."""

from .errors import (
    PlannerError,
    InvalidInput,
    UnknownTask,
    UnknownSlot,
    InvalidSlot,
    MalformedEvent,
    PersistenceFailure,
)
from .slots import DEFAULT_SLOTS, SlotCalendar
from .tasks import NewTask, Task, TaskStatus, TaskAssignmentStore
from .pills import PillToken, PillStatusTrack
from .dispatch import DropDispatcher, DropEvent, PillItem, TaskItem, Zone, ZoneKind, decode_drop_event
from .board import Board, SlotRow, assemble_board, format_board

__all__ = [
    # Errors
    "PlannerError",
    "InvalidInput",
    "UnknownTask",
    "UnknownSlot",
    "InvalidSlot",
    "MalformedEvent",
    "PersistenceFailure",
    # Slots
    "DEFAULT_SLOTS",
    "SlotCalendar",
    # Tasks
    "NewTask",
    "Task",
    "TaskStatus",
    "TaskAssignmentStore",
    # Pills
    "PillToken",
    "PillStatusTrack",
    # Dispatch
    "DropDispatcher",
    "DropEvent",
    "PillItem",
    "TaskItem",
    "Zone",
    "ZoneKind",
    "decode_drop_event",
    # Board
    "Board",
    "SlotRow",
    "assemble_board",
    "format_board",
]
