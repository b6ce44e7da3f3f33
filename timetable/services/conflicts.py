"""Service for detecting scheduling conflicts between events."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence

from timetable.domain.models import (
    ConflictIndex,
    ConflictRecord,
    ConflictType,
    EventId,
    ScheduleEvent,
)
from timetable.services.week import canonical_window


def overlaps(a: ScheduleEvent, b: ScheduleEvent) -> bool:
    """Return True if both events fall on the same weekday and their times intersect.

    Overlap rule: a.start < b.end AND b.start < a.end, compared on the
    reference week. Exact boundary touches (end == start) are NOT overlaps.
    Events missing a bound, or with end <= start, never overlap.
    """
    window_a = canonical_window(a.start, a.end)
    window_b = canonical_window(b.start, b.end)
    if window_a is None or window_b is None:
        return False
    start_a, end_a = window_a
    start_b, end_b = window_b
    if start_a.date() != start_b.date():
        return False
    return start_a < end_b and start_b < end_a


def find_overlapping(
    event: ScheduleEvent, others: Iterable[ScheduleEvent]
) -> list[ScheduleEvent]:
    """Return the events in *others* that overlap *event*, skipping itself."""
    return [o for o in others if o.id != event.id and overlaps(event, o)]


def _filled(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _pair(
    rule: ConflictType, a: ScheduleEvent, b: ScheduleEvent, value_a: str, value_b: str
) -> list[ConflictRecord]:
    return [
        ConflictRecord(
            event_id=a.id, conflict_type=rule, conflict_value=value_a, conflict_with=b.id
        ),
        ConflictRecord(
            event_id=b.id, conflict_type=rule, conflict_value=value_b, conflict_with=a.id
        ),
    ]


def check_pair(a: ScheduleEvent, b: ScheduleEvent) -> list[ConflictRecord]:
    """Return the conflict records for one pair of events (empty if none).

    Each triggered rule adds exactly two records, one per side.
    """
    if a.id is None or b.id is None or a.id == b.id:
        return []
    if not overlaps(a, b):
        return []

    records: list[ConflictRecord] = []

    if a.room and b.room and a.room == b.room:
        records += _pair(ConflictType.ROOM, a, b, a.room, b.room)

    if a.teacher and b.teacher and a.teacher == b.teacher:
        records += _pair(ConflictType.TEACHER, a, b, a.teacher, b.teacher)

    # Same class in two different subjects; an identical title is the same session.
    # Trimmed for the match only, records keep each side's own value.
    class_a, class_b = _filled(a.class_), _filled(b.class_)
    if class_a and class_a == class_b and a.title != b.title:
        records += _pair(ConflictType.CLASS, a, b, a.class_, b.class_)

    return records


def detect_conflicts(events: Sequence[ScheduleEvent]) -> ConflictIndex:
    """Scan every unordered pair (i < j) and build the conflict index.

    Events are bucketed by reference-week day first; pairs inside a bucket
    keep input order, so each event's records come out in the same order as
    a plain pairwise scan. The input is never modified.
    """
    if events is None:
        raise TypeError("events must be a sequence of ScheduleEvent, not None")
    snapshot = list(events)

    buckets: dict[object, list[ScheduleEvent]] = defaultdict(list)
    for event in snapshot:
        window = canonical_window(event.start, event.end)
        if window is not None:
            buckets[window[0].date()].append(event)

    details: dict[EventId, list[ConflictRecord]] = {}
    for day_events in buckets.values():
        for i in range(len(day_events)):
            for j in range(i + 1, len(day_events)):
                for record in check_pair(day_events[i], day_events[j]):
                    details.setdefault(record.event_id, []).append(record)

    conflict_ids: list[EventId] = list(
        dict.fromkeys(event.id for event in snapshot if event.id in details)
    )

    return ConflictIndex(
        conflict_ids=conflict_ids,
        details={eid: details[eid] for eid in conflict_ids},
    )
