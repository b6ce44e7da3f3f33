"""Service for creating, updating and preparing schedule events."""

from __future__ import annotations

import logging

from timetable.config import Settings
from timetable.domain.models import CreateEventRequest, EventUpdate, ScheduleEvent
from timetable.services.colors import derive_colors
from timetable.services.validation import validate_create_request, validate_event
from timetable.services.week import event_window, minutes_to_hhmm, parse_hhmm, to_minutes

logger = logging.getLogger(__name__)


class EventValidationError(ValueError):
    """Raised when a create request is rejected. Carries every failed check."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(f"Invalid event data: {', '.join(errors)}")

    @property
    def message(self) -> str:
        return str(self)


def create_event(request: CreateEventRequest, settings: Settings) -> ScheduleEvent:
    """Build a colored event on the reference week from form input.

    Raises ``EventValidationError`` if the request fails validation.
    """
    result = validate_create_request(request, settings)
    if not result.is_valid:
        raise EventValidationError(result.errors)

    start, end = event_window(
        request.day, request.start_time, request.end_time, settings.reference_monday
    )
    event = ScheduleEvent(
        title=request.title.strip(),
        start=start,
        end=end,
        room=request.room.strip(),
        teacher=request.teacher.strip(),
        class_=request.class_.strip(),
        type=request.type.strip(),
        semester=request.semester.strip() if request.semester else None,
    )
    return derive_colors(event)


def update_event(existing: ScheduleEvent, updates: EventUpdate) -> ScheduleEvent:
    """Apply the explicitly-set fields of *updates*; ``id`` never changes."""
    changes = updates.model_dump(exclude_unset=True)
    changes.pop("id", None)
    return derive_colors(existing.model_copy(update=changes))


def prepare_event(event: ScheduleEvent) -> ScheduleEvent:
    """Validate (warn only) and recolor an event accepted from the live source."""
    result = validate_event(event)
    if not result.is_valid:
        logger.warning("Event %s validation warnings: %s", event.id, result.errors)
    return derive_colors(event)


def available_end_times(start_time: str, settings: Settings) -> list[str]:
    """Hourly end-time slots inside business hours, strictly after *start_time*."""
    start = parse_hhmm(start_time)
    if start is None:
        return []
    first = to_minutes(parse_hhmm(settings.day_start))
    last = to_minutes(parse_hhmm(settings.day_end))
    start_minutes = to_minutes(start)
    return [
        minutes_to_hhmm(m) for m in range(first, last + 1, 60) if m > start_minutes
    ]
