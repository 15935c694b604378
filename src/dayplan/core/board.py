"""Read-only board assembly for a view layer - no I/O dependencies."""

from dataclasses import dataclass

from .pills import PillStatusTrack, PillToken
from .slots import SlotCalendar
from .tasks import Task, TaskAssignmentStore

PILL_TAKEN = "[x]"
PILL_NOT_TAKEN = "[ ]"


@dataclass
class SlotRow:
    """One slot of the day: its pill and its task bucket."""

    index: int
    label: str
    pill: PillToken
    tasks: list[Task]


@dataclass
class Board:
    """Snapshot of the whole day."""

    unscheduled: list[Task]
    rows: list[SlotRow]

    @property
    def pills_taken(self) -> int:
        return sum(1 for row in self.rows if row.pill.taken)


def assemble_board(
    calendar: SlotCalendar,
    tasks: TaskAssignmentStore,
    pills: PillStatusTrack,
) -> Board:
    """
    Snapshot the current state of tasks and pills.

    Pure function - reads state, never mutates it.
    """
    rows = [
        SlotRow(index=i, label=label, pill=pills.get(i), tasks=tasks.by_bucket(label))
        for i, label in enumerate(calendar.slots())
    ]
    return Board(unscheduled=tasks.unscheduled(), rows=rows)


def format_slot_row(row: SlotRow) -> str:
    """
    Format a single slot row for display.

    Pure function - no I/O.
    """
    marker = PILL_TAKEN if row.pill.taken else PILL_NOT_TAKEN
    titles = ", ".join(f"{t.title} (#{t.id})" for t in row.tasks) or "-"
    return f"{row.index:>2} {row.label} {marker} {titles}"


def format_board(board: Board) -> str:
    """Format a board as plain text."""
    unscheduled = "\n".join(f"- {t.title} (#{t.id})" for t in board.unscheduled) or "None"
    schedule = "\n".join(format_slot_row(row) for row in board.rows)
    return f"""Unscheduled Tasks
{unscheduled}

Schedule (pills taken: {board.pills_taken}/{len(board.rows)})
{schedule}"""


def board_to_dict(board: Board) -> dict:
    """Plain-data form of a board, for JSON output."""

    def task_dict(t: Task) -> dict:
        return {
            "id": t.id,
            "title": t.title,
            "created_at": t.created_at.isoformat(),
            "status": t.status.value,
            "slot": t.slot,
        }

    return {
        "unscheduled": [task_dict(t) for t in board.unscheduled],
        "slots": [
            {
                "index": row.index,
                "label": row.label,
                "pill_taken": row.pill.taken,
                "tasks": [task_dict(t) for t in row.tasks],
            }
            for row in board.rows
        ],
    }
