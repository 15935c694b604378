"""Drop-event decoding and routing.

A drop event names a dragged item and the zone it was released on:

    ("task", "12", "task-zone-3")    task 12 into slot 3's bucket
    ("task", "12", "unscheduled")    task 12 back to the unscheduled pool
    ("pill", "3", "pill-right-3")    slot 3's pill marked taken
    ("pill", "3", "pill-left-3")     slot 3's pill marked not taken

Payloads are decoded once into typed events; everything past decoding works
with TaskItem / PillItem and Zone, never raw strings.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum

from .errors import InvalidSlot, MalformedEvent, UnknownSlot
from .pills import PillStatusTrack
from .slots import SlotCalendar
from .tasks import TaskAssignmentStore

logger = logging.getLogger(__name__)

UNSCHEDULED_ZONE = "unscheduled"

_ZONE_RE = re.compile(r"^(task-zone|pill-left|pill-right)-(\d+)$")


class ItemKind(str, Enum):
    TASK = "task"
    PILL = "pill"


class ZoneKind(str, Enum):
    UNSCHEDULED = "unscheduled"
    TASK_BUCKET = "task-zone"
    PILL_NOT_TAKEN = "pill-left"
    PILL_TAKEN = "pill-right"


@dataclass(frozen=True)
class Zone:
    """A decoded drop zone. slot_index is None only for the unscheduled pool."""

    kind: ZoneKind
    slot_index: int | None = None

    @property
    def accepts_pills(self) -> bool:
        return self.kind in (ZoneKind.PILL_NOT_TAKEN, ZoneKind.PILL_TAKEN)

    def zone_id(self) -> str:
        if self.kind == ZoneKind.UNSCHEDULED:
            return UNSCHEDULED_ZONE
        return f"{self.kind.value}-{self.slot_index}"


@dataclass(frozen=True)
class TaskItem:
    task_id: str


@dataclass(frozen=True)
class PillItem:
    slot_index: int


@dataclass(frozen=True)
class DropEvent:
    item: TaskItem | PillItem
    zone: Zone


def parse_zone(zone_id: str) -> Zone:
    """Decode a zone id. Raises InvalidSlot if it names no zone."""
    zone_id = (zone_id or "").strip()
    if zone_id == UNSCHEDULED_ZONE:
        return Zone(ZoneKind.UNSCHEDULED)
    match = _ZONE_RE.match(zone_id)
    if not match:
        raise InvalidSlot(f"Unknown drop zone: {zone_id!r}")
    return Zone(ZoneKind(match.group(1)), int(match.group(2)))


def decode_drop_event(item_kind: str, item_id: str | int, zone_id: str) -> DropEvent:
    """Decode a loosely-typed drop payload into a DropEvent."""
    try:
        kind = ItemKind(str(item_kind).strip().lower())
    except ValueError:
        raise MalformedEvent(f"Unknown item kind: {item_kind!r}")

    raw_id = str(item_id).strip()
    if not raw_id:
        raise MalformedEvent("Drop event has no item id")

    if kind == ItemKind.TASK:
        item: TaskItem | PillItem = TaskItem(raw_id)
    else:
        try:
            item = PillItem(int(raw_id))
        except ValueError:
            raise MalformedEvent(f"Pill id must be a slot index, got {raw_id!r}")

    return DropEvent(item=item, zone=parse_zone(zone_id))


class DropDispatcher:
    """
    Route drop events to the task store or the pill track.

    Every check runs before any state changes, so a rejected event
    leaves both collections untouched.
    """

    def __init__(self, calendar: SlotCalendar, tasks: TaskAssignmentStore, pills: PillStatusTrack):
        self.calendar = calendar
        self.tasks = tasks
        self.pills = pills

    async def dispatch(self, event: DropEvent) -> None:
        logger.debug(f"Dispatching {event}")
        if isinstance(event.item, TaskItem):
            destination = self._task_destination(event.zone)
            await self.tasks.move_to_slot(event.item.task_id, destination)
        else:
            taken = self._pill_position(event.item, event.zone)
            self.pills.set_taken(event.item.slot_index, taken)

    async def dispatch_raw(self, item_kind: str, item_id: str | int, zone_id: str) -> None:
        await self.dispatch(decode_drop_event(item_kind, item_id, zone_id))

    def _task_destination(self, zone: Zone) -> str | None:
        """Slot label for a task zone, or None for the unscheduled pool."""
        if zone.kind == ZoneKind.UNSCHEDULED:
            return None
        if zone.kind != ZoneKind.TASK_BUCKET:
            raise InvalidSlot(f"Tasks cannot be dropped on {zone.zone_id()}")
        label = self.calendar.label_at(zone.slot_index)
        if label is None:
            raise InvalidSlot(f"Unknown drop zone: {zone.zone_id()}")
        return label

    def _pill_position(self, item: PillItem, zone: Zone) -> bool:
        """True for the taken position, False for not taken."""
        if not zone.accepts_pills:
            raise InvalidSlot(f"Pills cannot be dropped on {zone.zone_id()}")
        if self.pills.get(item.slot_index) is None:
            raise UnknownSlot(item.slot_index)
        if self.calendar.label_at(zone.slot_index) is None:
            raise UnknownSlot(zone.slot_index)
        if zone.slot_index != item.slot_index:
            raise InvalidSlot(f"Pill {item.slot_index} cannot be dropped on {zone.zone_id()}")
        return zone.kind == ZoneKind.PILL_TAKEN
