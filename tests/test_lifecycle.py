"""Tests for the event bus lifecycle: snapshots, conflict recompute and history."""

from __future__ import annotations

from datetime import datetime

import pytest

from timetable.domain.bus import EventBus
from timetable.domain.events import (
    ConflictsRecomputed,
    EventCreated,
    EventDeleted,
    EventsChanged,
    EventUpdated,
)
from timetable.domain.handlers import ConflictMonitor, HandlerRegistry
from timetable.domain.models import HistoryAction, ScheduleEvent
from timetable.repos.memory import EventRepository, HistoryRepository
from timetable.services.history import HistoryRecorder, diff_events


@pytest.fixture()
def env():
    """Fresh bus + repos + registry for each test."""
    bus = EventBus()
    event_repo = EventRepository()
    history_repo = HistoryRepository()
    history = HistoryRecorder(history_repo)
    history.start("ana")
    monitor = ConflictMonitor(bus)
    registry = HandlerRegistry(bus=bus, event_repo=event_repo, history=history)

    class Env:
        pass

    e = Env()
    e.bus = bus
    e.event_repo = event_repo
    e.history_repo = history_repo
    e.history = history
    e.monitor = monitor
    e.registry = registry
    return e


def _make_event(**overrides) -> ScheduleEvent:
    defaults = dict(
        title="Calc",
        start=datetime(2024, 1, 1, 8, 0),
        end=datetime(2024, 1, 1, 9, 0),
        room="101",
    )
    defaults.update(overrides)
    return ScheduleEvent(**defaults)


# ---------------------------------------------------------------------------
# Bus
# ---------------------------------------------------------------------------


def test_bus_calls_handlers_in_order_and_unsubscribes():
    bus = EventBus()
    calls = []
    bus.subscribe(EventsChanged, lambda e: calls.append("first"))
    unsubscribe = bus.subscribe(EventsChanged, lambda e: calls.append("second"))

    bus.publish(EventsChanged())
    unsubscribe()
    bus.publish(EventsChanged())

    assert calls == ["first", "second", "first"]


def test_handler_can_unsubscribe_during_delivery():
    bus = EventBus()
    calls = []

    def once(event):
        calls.append("once")
        unsubscribe_once()

    unsubscribe_once = bus.subscribe(EventsChanged, once)
    bus.subscribe(EventsChanged, lambda e: calls.append("always"))

    bus.publish(EventsChanged())
    bus.publish(EventsChanged())
    unsubscribe_once()

    assert calls == ["once", "always", "always"]


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


def test_repository_treats_numeric_and_string_ids_alike():
    repo = EventRepository()
    event = _make_event(id=7)
    repo.add(event)

    assert repo.get("7") is event
    repo.replace(event.model_copy(update={"room": "202"}))
    assert repo.get(7).room == "202"
    assert repo.delete("7").id == 7
    assert repo.list_all() == []


# ---------------------------------------------------------------------------
# Conflict recompute
# ---------------------------------------------------------------------------


def test_created_event_triggers_full_recompute(env):
    first = _make_event(id="a")
    env.event_repo.add(first)
    env.bus.publish(EventCreated(event_id=first.id))
    assert env.monitor.index.conflict_ids == []

    second = _make_event(id="b", title="Phys")
    env.event_repo.add(second)
    env.bus.publish(EventCreated(event_id=second.id))

    assert env.monitor.index.conflict_ids == ["a", "b"]
    assert [e.id for e in env.monitor.snapshot] == ["a", "b"]


def test_update_can_clear_conflicts(env):
    a = _make_event(id="a")
    b = _make_event(id="b", title="Phys")
    env.event_repo.add(a)
    env.event_repo.add(b)
    env.bus.publish(EventsChanged(events=env.event_repo.list_all()))
    assert len(env.monitor.index.conflict_ids) == 2

    moved = b.model_copy(update={"room": "202"})
    env.event_repo.replace(moved)
    env.bus.publish(EventUpdated(event_id="b", before=b))

    assert env.monitor.index.conflict_ids == []


def test_delete_recomputes(env):
    a = _make_event(id="a")
    b = _make_event(id="b", title="Phys")
    env.event_repo.add(a)
    env.event_repo.add(b)
    env.bus.publish(EventCreated(event_id="b"))
    assert env.monitor.index.conflict_ids == ["a", "b"]

    env.event_repo.delete("a")
    env.bus.publish(EventDeleted(event=a))

    assert env.monitor.index.conflict_ids == []


def test_recompute_publishes_summary(env):
    received = []
    env.bus.subscribe(ConflictsRecomputed, received.append)

    env.event_repo.add(_make_event(id="a"))
    env.event_repo.add(_make_event(id="b", title="Phys"))
    env.bus.publish(EventCreated(event_id="b"))

    assert received[-1].total == 2
    assert received[-1].conflict_ids == ["a", "b"]


def test_unknown_event_is_ignored(env):
    env.bus.publish(EventCreated(event_id="missing"))
    assert env.history_repo.list_recent() == []


def test_detached_monitor_stops_updating(env):
    env.monitor.detach()
    env.event_repo.add(_make_event(id="a"))
    env.event_repo.add(_make_event(id="b", title="Phys"))
    env.bus.publish(EventCreated(event_id="b"))
    assert env.monitor.index.conflict_ids == []


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


def test_history_records_each_change(env):
    a = _make_event(id="a")
    env.event_repo.add(a)
    env.bus.publish(EventCreated(event_id="a"))

    moved = a.model_copy(update={"room": "202"})
    env.event_repo.replace(moved)
    env.bus.publish(EventUpdated(event_id="a", before=a))

    env.event_repo.delete("a")
    env.bus.publish(EventDeleted(event=moved))

    entries = env.history_repo.list_for_event("a")
    assert [e.action for e in entries] == [
        HistoryAction.CREATED,
        HistoryAction.UPDATED,
        HistoryAction.DELETED,
    ]
    assert all(e.user == "ana" for e in entries)
    assert entries[1].changed == {"room": {"before": "101", "after": "202"}}


def test_recorder_without_session_drops_entries(caplog):
    repo = HistoryRepository()
    recorder = HistoryRecorder(repo)

    with caplog.at_level("WARNING"):
        assert recorder.record(HistoryAction.CREATED, "a") is None

    recorder.flush()
    assert repo.list_recent() == []
    assert "No active history session" in caplog.text


def test_recorder_buffers_until_flush():
    repo = HistoryRepository()
    recorder = HistoryRecorder(repo)
    recorder.start("ana")

    recorder.record(HistoryAction.CREATED, "a")
    recorder.record(HistoryAction.UPDATED, "a")
    assert repo.list_recent() == []

    assert recorder.flush() == 2
    assert len(repo.list_recent()) == 2


def test_close_flushes_and_ends_session():
    repo = HistoryRepository()
    recorder = HistoryRecorder(repo)
    recorder.start("ana")
    recorder.record(HistoryAction.DELETED, "a")

    recorder.close()

    assert recorder.active is False
    assert [e.user for e in repo.list_recent()] == ["ana"]


def test_starting_new_session_closes_previous():
    repo = HistoryRepository()
    recorder = HistoryRecorder(repo)
    recorder.start("ana")
    recorder.record(HistoryAction.CREATED, "a")

    recorder.start("bia")
    recorder.record(HistoryAction.UPDATED, "a")
    recorder.flush()

    assert sorted(e.user for e in repo.list_recent()) == ["ana", "bia"]


def test_diff_events_reports_class_field_by_public_name():
    before = _make_event(class_="A")
    after = before.model_copy(update={"class_": "B"})
    assert diff_events(before, after) == {"class": {"before": "A", "after": "B"}}
    assert diff_events(before, before) == {}
