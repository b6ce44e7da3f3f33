"""In-memory repositories for schedule events and edit history."""

from __future__ import annotations

from timetable.domain.models import EventId, HistoryEntry, ScheduleEvent


class EventRepository:
    """Dict-backed store for ScheduleEvent instances, keyed by id.

    Insertion order is kept; it drives the pair order of conflict detection.
    Ids are keyed by their string form, so ``7`` and ``"7"`` name the same
    event (path parameters always arrive as strings).
    """

    def __init__(self) -> None:
        self._store: dict[str, ScheduleEvent] = {}

    def add(self, event: ScheduleEvent) -> None:
        self._store[str(event.id)] = event

    def get(self, event_id: EventId) -> ScheduleEvent | None:
        return self._store.get(str(event_id))

    def list_all(self) -> list[ScheduleEvent]:
        return list(self._store.values())

    def replace(self, event: ScheduleEvent) -> None:
        """Swap in a new version of an existing event, keeping its position."""
        key = str(event.id)
        if key not in self._store:
            raise KeyError(event.id)
        self._store[key] = event

    def delete(self, event_id: EventId) -> ScheduleEvent | None:
        return self._store.pop(str(event_id), None)

    def clear(self) -> None:
        self._store.clear()


class HistoryRepository:
    """List-backed store for HistoryEntry instances."""

    def __init__(self) -> None:
        self._entries: list[HistoryEntry] = []

    def add(self, entry: HistoryEntry) -> None:
        self._entries.append(entry)

    def list_recent(self) -> list[HistoryEntry]:
        """All entries, newest first."""
        return sorted(reversed(self._entries), key=lambda e: e.timestamp, reverse=True)

    def list_for_event(self, event_id: EventId) -> list[HistoryEntry]:
        return sorted(
            [e for e in self._entries if e.event_id == event_id],
            key=lambda e: e.timestamp,
        )

    def clear(self) -> None:
        self._entries.clear()
