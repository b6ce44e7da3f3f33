"""Domain events emitted when the event collection changes."""

from __future__ import annotations

from pydantic import BaseModel, Field

from timetable.domain.models import EventId, ScheduleEvent


class EventCreated(BaseModel):
    """Fired when a new ScheduleEvent is stored."""

    event_id: EventId


class EventUpdated(BaseModel):
    """Fired after a partial update has replaced a stored event."""

    event_id: EventId
    before: ScheduleEvent


class EventDeleted(BaseModel):
    """Fired after an event is removed."""

    event: ScheduleEvent


class EventsChanged(BaseModel):
    """Carries the full current snapshot after any create/update/delete."""

    events: list[ScheduleEvent] = Field(default_factory=list)


class ConflictsRecomputed(BaseModel):
    """Fired after the conflict index has been rebuilt from a snapshot."""

    conflict_ids: list[EventId]
    total: int
