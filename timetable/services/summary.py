"""Summaries, descriptions and lookups over a ConflictIndex."""

from __future__ import annotations

from collections.abc import Iterable

from timetable.domain.models import (
    ConflictIndex,
    ConflictRecord,
    ConflictSummary,
    ConflictType,
    EventConflictReport,
    EventId,
    ScheduleEvent,
)

DESCRIPTION_SEPARATOR = " • "

_CLAUSES = {
    ConflictType.ROOM: "Room {} occupied",
    ConflictType.TEACHER: "Teacher {} double-booked",
    ConflictType.CLASS: "Class {} overlapping",
}

_SUGGESTIONS = {
    ConflictType.ROOM: [
        "Move one of the sessions to another room",
        "Check which other rooms are free at the same time",
    ],
    ConflictType.TEACHER: [
        "Reschedule one of the teacher's sessions",
        "Check whether another teacher can take one of the sessions",
    ],
    ConflictType.CLASS: [
        "Reschedule one of the subjects",
        "Check whether the subjects can be offered in different terms",
    ],
}


def _values_by_type(records: Iterable[ConflictRecord]) -> dict[ConflictType, list[str]]:
    grouped: dict[ConflictType, dict[str, None]] = {t: {} for t in ConflictType}
    for record in records:
        grouped[record.conflict_type][record.conflict_value] = None
    return {t: list(values) for t, values in grouped.items()}


def summarize(index: ConflictIndex) -> ConflictSummary:
    """Distinct conflicting values per rule, plus the number of conflicted events."""
    values = _values_by_type(
        record for records in index.details.values() for record in records
    )
    return ConflictSummary(
        room=values[ConflictType.ROOM],
        teacher=values[ConflictType.TEACHER],
        class_=values[ConflictType.CLASS],
        total=len(set(index.conflict_ids)),
    )


def describe(records: list[ConflictRecord]) -> str:
    if not records:
        return ""
    values = _values_by_type(records)
    return DESCRIPTION_SEPARATOR.join(
        clause.format(", ".join(values[conflict_type]))
        for conflict_type, clause in _CLAUSES.items()
        if values[conflict_type]
    )


def event_conflicts(event_id: EventId, index: ConflictIndex) -> list[ConflictRecord]:
    return index.details.get(event_id, [])


def has_conflicts(event_id: EventId, index: ConflictIndex) -> bool:
    return event_id in index.conflict_ids


def conflicting_events(
    event_id: EventId, events: Iterable[ScheduleEvent], index: ConflictIndex
) -> list[ScheduleEvent]:
    """Resolve the counterparts of *event_id* back into events.

    Ids that no longer match any event are dropped.
    """
    wanted = {record.conflict_with for record in event_conflicts(event_id, index)}
    return [event for event in events if event.id in wanted]


def suggest_resolution(records: list[ConflictRecord]) -> list[str]:
    present = {record.conflict_type for record in records}
    suggestions: list[str] = []
    for conflict_type in ConflictType:
        if conflict_type in present:
            suggestions.extend(_SUGGESTIONS[conflict_type])
    return suggestions


def build_report(
    event_id: EventId, events: list[ScheduleEvent], index: ConflictIndex
) -> EventConflictReport:
    records = event_conflicts(event_id, index)
    return EventConflictReport(
        event_id=event_id,
        records=records,
        description=describe(records),
        suggestions=suggest_resolution(records),
        conflicting_events=conflicting_events(event_id, events, index),
    )
