"""FastAPI application: entry point for the timetable conflict service."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Header, HTTPException

from timetable.config import configure_logging, load_settings
from timetable.domain.bus import EventBus
from timetable.domain.events import EventCreated, EventDeleted, EventsChanged, EventUpdated
from timetable.domain.handlers import ConflictMonitor, HandlerRegistry
from timetable.domain.models import (
    ConflictIndex,
    ConflictSummary,
    CreateEventRequest,
    EntityFormConfig,
    EventConflictReport,
    EventUpdate,
    FilterDimension,
    HistoryEntry,
    ScheduleEvent,
)
from timetable.repos.memory import EventRepository, HistoryRepository
from timetable.services.events import (
    EventValidationError,
    available_end_times,
    create_event as _create_event,
    prepare_event,
    update_event as _update_event,
)
from timetable.services.filters import EventFilter, filter_options
from timetable.services.forms import get_form_config
from timetable.services.history import HistoryRecorder
from timetable.services.summary import build_report, summarize

settings = load_settings()
configure_logging(settings)

# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus()
event_repo = EventRepository()
history_repo = HistoryRepository()
history = HistoryRecorder(history_repo)
conflict_monitor = ConflictMonitor(event_bus)

handler_registry = HandlerRegistry(
    bus=event_bus,
    event_repo=event_repo,
    history=history,
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    history.start(settings.user)
    yield
    history.close()


app = FastAPI(title="Timetable Conflict Service", lifespan=lifespan)


def _get_or_404(event_id: str) -> ScheduleEvent:
    event = event_repo.get(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


def _open_session(user: str | None) -> None:
    if user and user != history.user:
        history.start(user)


# ── Routes ────────────────────────────────────────────────────────────


@app.post("/events", response_model=ScheduleEvent, status_code=201)
def create_event(
    payload: CreateEventRequest, x_user: str | None = Header(default=None)
) -> ScheduleEvent:
    """Validate form input and store a new session on the reference week."""
    try:
        event = _create_event(payload, settings)
    except EventValidationError as exc:
        raise HTTPException(
            status_code=422, detail={"message": exc.message, "errors": exc.errors}
        ) from exc

    _open_session(x_user)
    event_repo.add(event)
    event_bus.publish(EventCreated(event_id=event.id))
    return event


@app.get("/events", response_model=list[ScheduleEvent])
def list_events() -> list[ScheduleEvent]:
    """Return all stored events in insertion order."""
    return event_repo.list_all()


@app.put("/events", response_model=list[ScheduleEvent])
def replace_events(events: list[ScheduleEvent]) -> list[ScheduleEvent]:
    """Replace the whole collection with a snapshot pushed by the live source.

    Malformed events are accepted with logged warnings.
    """
    event_repo.clear()
    for event in events:
        event_repo.add(prepare_event(event))
    event_bus.publish(EventsChanged(events=event_repo.list_all()))
    return event_repo.list_all()


@app.get("/events/filter", response_model=list[ScheduleEvent])
def filter_events(
    dimension: FilterDimension = FilterDimension.TEACHER,
    value: str = "",
    search: str = "",
    conflicted_only: bool = False,
) -> list[ScheduleEvent]:
    """Narrow the events by one dimension value and/or a free-text search."""
    view = EventFilter(event_repo.list_all(), active_dimension=dimension)
    view.set_value(value)
    view.set_search(search)
    events = view.filtered_events
    if conflicted_only:
        conflicted = set(conflict_monitor.index.conflict_ids)
        events = [e for e in events if e.id in conflicted]
    return events


@app.get("/events/{event_id}", response_model=ScheduleEvent)
def get_event(event_id: str) -> ScheduleEvent:
    """Return a single event by id."""
    return _get_or_404(event_id)


@app.patch("/events/{event_id}", response_model=ScheduleEvent)
def patch_event(
    event_id: str, updates: EventUpdate, x_user: str | None = Header(default=None)
) -> ScheduleEvent:
    """Apply a partial update; the id is preserved and colors re-derived."""
    existing = _get_or_404(event_id)
    updated = _update_event(existing, updates)

    _open_session(x_user)
    event_repo.replace(updated)
    event_bus.publish(EventUpdated(event_id=updated.id, before=existing))
    return updated


@app.delete("/events/{event_id}", status_code=200)
def delete_event(event_id: str, x_user: str | None = Header(default=None)) -> dict:
    """Delete an event by id."""
    existing = _get_or_404(event_id)

    _open_session(x_user)
    event_repo.delete(existing.id)
    event_bus.publish(EventDeleted(event=existing))
    return {"status": "deleted", "id": existing.id}


@app.get("/events/{event_id}/conflicts", response_model=EventConflictReport)
def get_event_conflicts(event_id: str) -> EventConflictReport:
    """Conflict records, description, suggestions and counterparts for one event."""
    existing = _get_or_404(event_id)
    return build_report(existing.id, event_repo.list_all(), conflict_monitor.index)


@app.get("/conflicts", response_model=ConflictIndex)
def get_conflicts() -> ConflictIndex:
    return conflict_monitor.index


@app.get("/conflicts/summary", response_model=ConflictSummary)
def get_conflict_summary() -> ConflictSummary:
    return summarize(conflict_monitor.index)


@app.get("/filters/options")
def get_filter_options() -> dict[str, list[str]]:
    """Sorted distinct teacher / class / room values of the current events."""
    return {
        dimension.value: values
        for dimension, values in filter_options(event_repo.list_all()).items()
    }


@app.get("/end-times")
def get_end_times(start: str) -> list[str]:
    """End-time slots available after *start* inside business hours."""
    return available_end_times(start, settings)


@app.get("/history", response_model=list[HistoryEntry])
def list_history() -> list[HistoryEntry]:
    """Edit history, newest first."""
    return history_repo.list_recent()


@app.get("/forms/{entity}", response_model=EntityFormConfig)
def get_form(entity: str) -> EntityFormConfig:
    config = get_form_config(entity)
    if config is None:
        raise HTTPException(status_code=404, detail="Unknown entity")
    return config
