"""Domain event handlers, wired up at application startup."""

from __future__ import annotations

import logging

from timetable.domain.bus import EventBus
from timetable.domain.events import (
    ConflictsRecomputed,
    EventCreated,
    EventDeleted,
    EventsChanged,
    EventUpdated,
)
from timetable.domain.models import ConflictIndex, HistoryAction, ScheduleEvent
from timetable.repos.memory import EventRepository
from timetable.services.conflicts import detect_conflicts
from timetable.services.history import HistoryRecorder, diff_events
from timetable.services.summary import summarize

logger = logging.getLogger(__name__)


class ConflictMonitor:
    """Holds the conflict index for the latest snapshot.

    Every ``EventsChanged`` rebuilds the index from scratch; nothing is
    patched incrementally.
    """

    def __init__(self, bus: EventBus) -> None:
        self.bus = bus
        self.snapshot: list[ScheduleEvent] = []
        self.index = ConflictIndex()
        self._unsubscribe = bus.subscribe(EventsChanged, self.on_events_changed)

    def on_events_changed(self, event: EventsChanged) -> None:
        self.snapshot = list(event.events)
        self.index = detect_conflicts(self.snapshot)
        summary = summarize(self.index)
        logger.info(
            "Recomputed conflicts over %d events: %d conflicted (rooms=%s teachers=%s classes=%s)",
            len(self.snapshot),
            summary.total,
            summary.room,
            summary.teacher,
            summary.class_,
        )
        self.bus.publish(
            ConflictsRecomputed(
                conflict_ids=self.index.conflict_ids, total=summary.total
            )
        )

    def detach(self) -> None:
        self._unsubscribe()


class HandlerRegistry:
    """Wires domain-event handlers to the bus with access to the repository
    and the history recorder."""

    def __init__(
        self,
        bus: EventBus,
        event_repo: EventRepository,
        history: HistoryRecorder,
    ) -> None:
        self.bus = bus
        self.event_repo = event_repo
        self.history = history
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(EventCreated, self.on_event_created)
        self.bus.subscribe(EventUpdated, self.on_event_updated)
        self.bus.subscribe(EventDeleted, self.on_event_deleted)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_event_created(self, event: EventCreated) -> None:
        stored = self.event_repo.get(event.event_id)
        if stored is None:
            return

        self.history.record(
            HistoryAction.CREATED, stored.id, changed=diff_events(None, stored)
        )
        self._publish_snapshot()

    def on_event_updated(self, event: EventUpdated) -> None:
        stored = self.event_repo.get(event.event_id)
        if stored is None:
            return

        self.history.record(
            HistoryAction.UPDATED, stored.id, changed=diff_events(event.before, stored)
        )
        self._publish_snapshot()

    def on_event_deleted(self, event: EventDeleted) -> None:
        self.history.record(
            HistoryAction.DELETED,
            event.event.id,
            changed=diff_events(event.event, None),
        )
        self._publish_snapshot()

    def _publish_snapshot(self) -> None:
        self.history.flush()
        self.bus.publish(EventsChanged(events=self.event_repo.list_all()))
