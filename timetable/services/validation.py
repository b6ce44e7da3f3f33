"""Validation for schedule events and creation requests.

Problems are collected into a ``ValidationResult`` instead of being raised;
callers decide whether a failed result blocks the operation.
"""

from __future__ import annotations

from timetable.config import Settings
from timetable.domain.models import CreateEventRequest, ScheduleEvent, ValidationResult
from timetable.services.week import parse_hhmm, to_minutes, weekday_from_name

_REQUIRED_FIELDS = [
    ("title", "Title"),
    ("day", "Day"),
    ("start_time", "Start time"),
    ("end_time", "End time"),
    ("room", "Room"),
    ("teacher", "Teacher"),
    ("class_", "Class"),
    ("type", "Type"),
]


def validate_event(event: ScheduleEvent) -> ValidationResult:
    errors: list[str] = []

    if not event.title.strip():
        errors.append("Event title is empty")
    if event.start is None:
        errors.append("Event start time is missing")
    if event.end is None:
        errors.append("Event end time is missing")
    if event.start is not None and event.end is not None:
        if (event.start.tzinfo is None) != (event.end.tzinfo is None):
            errors.append("Event start and end must both carry a time zone or neither")
        elif event.end <= event.start:
            errors.append("Event end time must be after start time")

    return ValidationResult.from_errors(errors)


def validate_create_request(
    request: CreateEventRequest, settings: Settings
) -> ValidationResult:
    """Check a creation request: required fields, day name, time syntax,
    ordering and the configured business-hours window."""
    errors: list[str] = []

    for attr, label in _REQUIRED_FIELDS:
        if not getattr(request, attr).strip():
            errors.append(f"{label} is required")

    if request.day.strip() and weekday_from_name(request.day) is None:
        errors.append(f"Unknown day: {request.day}")

    start = parse_hhmm(request.start_time)
    end = parse_hhmm(request.end_time)
    if request.start_time.strip() and start is None:
        errors.append("Start time must be in HH:MM format")
    if request.end_time.strip() and end is None:
        errors.append("End time must be in HH:MM format")

    if start is not None and end is not None:
        start_minutes = to_minutes(start)
        end_minutes = to_minutes(end)
        if end_minutes <= start_minutes:
            errors.append("End time must be after start time")
        if start_minutes < to_minutes(parse_hhmm(settings.day_start)):
            errors.append(f"Start time cannot be before {settings.day_start}")
        if end_minutes > to_minutes(parse_hhmm(settings.day_end)):
            errors.append(f"End time cannot be after {settings.day_end}")

    return ValidationResult.from_errors(errors)
