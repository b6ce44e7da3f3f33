"""Tests for conflict summaries, descriptions and lookups."""

from datetime import datetime

from timetable.domain.models import ConflictIndex, ConflictRecord, ConflictType, ScheduleEvent
from timetable.services.conflicts import detect_conflicts
from timetable.services.summary import (
    build_report,
    conflicting_events,
    describe,
    event_conflicts,
    has_conflicts,
    suggest_resolution,
    summarize,
)


def _make_event(**overrides) -> ScheduleEvent:
    defaults = dict(
        title="Calc",
        start=datetime(2024, 1, 1, 8, 0),
        end=datetime(2024, 1, 1, 9, 0),
    )
    defaults.update(overrides)
    return ScheduleEvent(**defaults)


def _record(event_id, conflict_type, value, other) -> ConflictRecord:
    return ConflictRecord(
        event_id=event_id,
        conflict_type=conflict_type,
        conflict_value=value,
        conflict_with=other,
    )


def _crowded_monday() -> list[ScheduleEvent]:
    return [
        _make_event(id="a", room="101", teacher="Silva", class_="A", title="Calc"),
        _make_event(id="b", room="101", teacher="Silva", class_="A", title="Phys"),
        _make_event(id="c", room="101", teacher="Souza", class_="B", title="Bio"),
    ]


# ---------------------------------------------------------------------------
# summarize
# ---------------------------------------------------------------------------


def test_summary_counts_events_not_records():
    index = detect_conflicts(_crowded_monday())

    summary = summarize(index)

    record_count = sum(len(r) for r in index.details.values())
    assert record_count > 3
    assert summary.total == 3
    assert summary.room == ["101"]
    assert summary.teacher == ["Silva"]
    assert summary.class_ == ["A"]


def test_summary_of_empty_index():
    summary = summarize(ConflictIndex())
    assert summary.total == 0
    assert summary.room == []
    assert summary.teacher == []
    assert summary.class_ == []


def test_summary_serializes_class_key():
    summary = summarize(detect_conflicts(_crowded_monday()))
    assert summary.model_dump(by_alias=True)["class"] == ["A"]


# ---------------------------------------------------------------------------
# describe / suggest_resolution
# ---------------------------------------------------------------------------


def test_describe_empty():
    assert describe([]) == ""


def test_describe_groups_by_type_in_fixed_order():
    records = [
        _record("a", ConflictType.TEACHER, "Silva", "b"),
        _record("a", ConflictType.ROOM, "101", "b"),
        _record("a", ConflictType.ROOM, "101", "c"),
        _record("a", ConflictType.ROOM, "102", "d"),
    ]
    assert describe(records) == "Room 101, 102 occupied • Teacher Silva double-booked"


def test_describe_class_clause():
    records = [_record("a", ConflictType.CLASS, "A", "b")]
    assert describe(records) == "Class A overlapping"


def test_suggestions_once_per_type():
    records = [
        _record("a", ConflictType.ROOM, "101", "b"),
        _record("a", ConflictType.ROOM, "102", "c"),
        _record("a", ConflictType.CLASS, "A", "b"),
    ]
    suggestions = suggest_resolution(records)
    assert len(suggestions) == 4
    assert suggestions[0] == "Move one of the sessions to another room"
    assert suggestions[-1] == "Check whether the subjects can be offered in different terms"


def test_no_suggestions_without_records():
    assert suggest_resolution([]) == []


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def test_conflicting_events_resolves_counterparts():
    events = _crowded_monday()
    index = detect_conflicts(events)

    others = conflicting_events("a", events, index)

    assert [e.id for e in others] == ["b", "c"]


def test_conflicting_events_drops_dangling_ids():
    events = _crowded_monday()
    index = detect_conflicts(events)

    remaining = [e for e in events if e.id != "b"]

    assert [e.id for e in conflicting_events("a", remaining, index)] == ["c"]


def test_lookups_for_unknown_event():
    index = detect_conflicts(_crowded_monday())
    assert event_conflicts("zzz", index) == []
    assert has_conflicts("zzz", index) is False
    assert has_conflicts("a", index) is True
    assert conflicting_events("zzz", _crowded_monday(), index) == []


def test_build_report():
    events = _crowded_monday()
    index = detect_conflicts(events)

    report = build_report("c", events, index)

    assert report.event_id == "c"
    assert {r.conflict_type for r in report.records} == {ConflictType.ROOM}
    assert report.description == "Room 101 occupied"
    assert len(report.suggestions) == 2
    assert [e.id for e in report.conflicting_events] == ["a", "b"]
