"""Tests for drop-event decoding and routing."""

from datetime import datetime, timezone

import pytest
import pytest_asyncio

from dayplan.core.dispatch import (
    DropDispatcher,
    DropEvent,
    PillItem,
    TaskItem,
    Zone,
    ZoneKind,
    decode_drop_event,
    parse_zone,
)
from dayplan.core.errors import InvalidSlot, MalformedEvent, UnknownSlot, UnknownTask
from dayplan.core.pills import PillStatusTrack
from dayplan.core.slots import SlotCalendar
from dayplan.core.tasks import TaskAssignmentStore

from fakes import RecordingStore


@pytest.fixture
def calendar():
    return SlotCalendar()


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def pills(calendar):
    return PillStatusTrack(calendar)


@pytest_asyncio.fixture
async def tasks(calendar, store):
    tasks = TaskAssignmentStore(calendar, store)
    await tasks.load_all()
    return tasks


@pytest.fixture
def dispatcher(calendar, tasks, pills):
    return DropDispatcher(calendar, tasks, pills)


@pytest_asyncio.fixture
async def milk(tasks):
    return await tasks.create("Buy milk", datetime(2025, 1, 15, tzinfo=timezone.utc))


def snapshot(tasks, pills):
    return (
        [(t.id, t.slot) for t in tasks.all()],
        [t.taken for t in pills.tokens()],
    )


class TestParseZone:
    def test_unscheduled(self):
        assert parse_zone("unscheduled") == Zone(ZoneKind.UNSCHEDULED)

    def test_task_zone(self):
        assert parse_zone("task-zone-4") == Zone(ZoneKind.TASK_BUCKET, 4)

    def test_pill_zones(self):
        assert parse_zone("pill-left-2") == Zone(ZoneKind.PILL_NOT_TAKEN, 2)
        assert parse_zone("pill-right-2") == Zone(ZoneKind.PILL_TAKEN, 2)

    def test_zone_id_round_trips(self):
        for zone_id in ("unscheduled", "task-zone-0", "pill-left-16", "pill-right-3"):
            assert parse_zone(zone_id).zone_id() == zone_id

    @pytest.mark.parametrize("zone_id", ["", "task-zone-", "task-zone-x", "pill-middle-1", "09:00", "task-zone--1"])
    def test_malformed(self, zone_id):
        with pytest.raises(InvalidSlot):
            parse_zone(zone_id)


class TestDecodeDropEvent:
    def test_task_event(self):
        event = decode_drop_event("task", "12", "task-zone-3")
        assert event == DropEvent(TaskItem("12"), Zone(ZoneKind.TASK_BUCKET, 3))

    def test_pill_event(self):
        event = decode_drop_event("pill", "3", "pill-right-3")
        assert event == DropEvent(PillItem(3), Zone(ZoneKind.PILL_TAKEN, 3))

    def test_kind_is_case_insensitive(self):
        assert decode_drop_event("PILL", 3, "pill-left-3").item == PillItem(3)

    def test_unknown_kind(self):
        with pytest.raises(MalformedEvent):
            decode_drop_event("note", "1", "task-zone-0")

    def test_non_integer_pill_id(self):
        with pytest.raises(MalformedEvent):
            decode_drop_event("pill", "three", "pill-left-3")

    def test_missing_item_id(self):
        with pytest.raises(MalformedEvent):
            decode_drop_event("task", "  ", "task-zone-0")


class TestDispatchTask:
    @pytest.mark.asyncio
    async def test_moves_task_into_slot(self, dispatcher, tasks, milk):
        await dispatcher.dispatch_raw("task", milk.id, "task-zone-1")

        assert [t.title for t in tasks.by_bucket("09:00")] == ["Buy milk"]
        assert tasks.unscheduled() == []

    @pytest.mark.asyncio
    async def test_moves_task_back_to_unscheduled(self, dispatcher, tasks, milk):
        await dispatcher.dispatch_raw("task", milk.id, "task-zone-1")
        await dispatcher.dispatch_raw("task", milk.id, "unscheduled")

        assert [t.title for t in tasks.unscheduled()] == ["Buy milk"]

    @pytest.mark.asyncio
    async def test_unknown_task(self, dispatcher, tasks, pills, milk):
        before = snapshot(tasks, pills)

        with pytest.raises(UnknownTask):
            await dispatcher.dispatch_raw("task", "nonexistent-id", "task-zone-1")

        assert snapshot(tasks, pills) == before

    @pytest.mark.asyncio
    async def test_zone_outside_calendar(self, dispatcher, tasks, pills, store, milk):
        before = snapshot(tasks, pills)

        with pytest.raises(InvalidSlot):
            await dispatcher.dispatch_raw("task", milk.id, "task-zone-17")

        assert snapshot(tasks, pills) == before
        assert store.upserts == []

    @pytest.mark.asyncio
    async def test_task_onto_pill_zone(self, dispatcher, tasks, pills, milk):
        before = snapshot(tasks, pills)

        with pytest.raises(InvalidSlot):
            await dispatcher.dispatch_raw("task", milk.id, "pill-right-1")

        assert snapshot(tasks, pills) == before


class TestDispatchPill:
    @pytest.mark.asyncio
    async def test_right_zone_marks_taken(self, dispatcher, pills):
        await dispatcher.dispatch_raw("pill", "3", "pill-right-3")
        assert pills.get(3).taken is True

    @pytest.mark.asyncio
    async def test_left_zone_marks_not_taken(self, dispatcher, pills):
        await dispatcher.dispatch_raw("pill", "3", "pill-right-3")
        await dispatcher.dispatch_raw("pill", "3", "pill-left-3")
        assert pills.get(3).taken is False

    @pytest.mark.asyncio
    async def test_same_position_twice_is_noop(self, dispatcher, pills):
        await dispatcher.dispatch_raw("pill", "3", "pill-right-3")
        await dispatcher.dispatch_raw("pill", "3", "pill-right-3")
        assert pills.get(3).taken is True
        assert pills.taken_count() == 1

    @pytest.mark.asyncio
    async def test_unknown_pill(self, dispatcher, tasks, pills):
        before = snapshot(tasks, pills)

        with pytest.raises(UnknownSlot):
            await dispatcher.dispatch(DropEvent(PillItem(40), Zone(ZoneKind.PILL_TAKEN, 40)))

        assert snapshot(tasks, pills) == before

    @pytest.mark.asyncio
    async def test_pill_zone_outside_calendar(self, dispatcher, tasks, pills):
        before = snapshot(tasks, pills)

        with pytest.raises(UnknownSlot):
            await dispatcher.dispatch_raw("pill", "3", "pill-right-99")

        assert snapshot(tasks, pills) == before

    @pytest.mark.asyncio
    async def test_pill_into_other_slot_holder(self, dispatcher, tasks, pills):
        before = snapshot(tasks, pills)

        with pytest.raises(InvalidSlot):
            await dispatcher.dispatch_raw("pill", "3", "pill-right-5")

        assert snapshot(tasks, pills) == before

    @pytest.mark.asyncio
    async def test_pill_onto_task_zone(self, dispatcher, tasks, pills):
        before = snapshot(tasks, pills)

        with pytest.raises(InvalidSlot):
            await dispatcher.dispatch_raw("pill", "3", "task-zone-3")

        assert snapshot(tasks, pills) == before

    @pytest.mark.asyncio
    async def test_pill_onto_unscheduled_zone(self, dispatcher, tasks, pills, store, milk):
        before = snapshot(tasks, pills)

        with pytest.raises(InvalidSlot):
            await dispatcher.dispatch_raw("pill", "3", "unscheduled")

        assert snapshot(tasks, pills) == before
        assert store.upserts == []

    @pytest.mark.asyncio
    async def test_pill_drop_never_touches_tasks(self, dispatcher, store, milk):
        await dispatcher.dispatch_raw("pill", "0", "pill-right-0")
        assert store.upserts == []
