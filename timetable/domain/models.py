"""Domain models for the timetable conflict service."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

EventId = str | int


class ConflictType(StrEnum):
    ROOM = "room"
    TEACHER = "teacher"
    CLASS = "class"


class FilterDimension(StrEnum):
    TEACHER = "teacher"
    CLASS = "class"
    ROOM = "room"


class HistoryAction(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class FieldKind(StrEnum):
    TEXT = "text"
    NUMBER = "number"
    EMAIL = "email"
    SELECT = "select"
    TEXTAREA = "textarea"
    CHECKBOX = "checkbox"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class ScheduleEvent(BaseModel):
    """One weekly session on the timetable.

    ``start``/``end`` may be missing or out of order; such events are kept
    and simply never overlap anything. Colors are derived from ``type``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: EventId = Field(default_factory=_new_id)
    title: str = ""
    start: datetime | None = None
    end: datetime | None = None
    room: str | None = None
    teacher: str | None = None
    class_: str | None = Field(default=None, alias="class")
    type: str | None = None
    semester: str | None = None
    background_color: str | None = None
    border_color: str | None = None
    text_color: str | None = None


class EventStyle(BaseModel):
    model_config = ConfigDict(frozen=True)

    background: str
    border: str
    text: str


class ConflictRecord(BaseModel):
    """One side of a rule violation between two events."""

    model_config = ConfigDict(frozen=True)

    event_id: EventId
    conflict_type: ConflictType
    conflict_value: str
    conflict_with: EventId


class ConflictIndex(BaseModel):
    conflict_ids: list[EventId] = Field(default_factory=list)
    details: dict[EventId, list[ConflictRecord]] = Field(default_factory=dict)


class ConflictSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    room: list[str] = Field(default_factory=list)
    teacher: list[str] = Field(default_factory=list)
    class_: list[str] = Field(default_factory=list, alias="class")
    total: int = 0


class ValidationResult(BaseModel):
    is_valid: bool
    errors: list[str] = Field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: list[str]) -> ValidationResult:
        return cls(is_valid=not errors, errors=errors)


class HistoryEntry(BaseModel):
    id: str = Field(default_factory=_new_id)
    user: str
    action: HistoryAction
    event_id: EventId | None = None
    timestamp: datetime = Field(default_factory=_utcnow)
    changed: dict = Field(default_factory=dict)


class SelectOption(BaseModel):
    value: str
    label: str


class FormField(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = False
    placeholder: str | None = None
    options: tuple[SelectOption, ...] = ()


class EntityFormConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    entity: str
    title: str
    fields: tuple[FormField, ...]
    defaults: dict = Field(default_factory=dict)


class FilterInfo(BaseModel):
    value: str
    index: int
    total: int
    display_text: str


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class CreateEventRequest(BaseModel):
    """Form input for a new session: weekday name plus HH:MM bounds."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    day: str = ""
    start_time: str = ""
    end_time: str = ""
    room: str = ""
    teacher: str = ""
    class_: str = Field(default="", alias="class")
    type: str = ""
    semester: str | None = None


class EventUpdate(BaseModel):
    """Partial update; only fields that were explicitly set are applied."""

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    room: str | None = None
    teacher: str | None = None
    class_: str | None = Field(default=None, alias="class")
    type: str | None = None
    semester: str | None = None


class EventConflictReport(BaseModel):
    event_id: EventId
    records: list[ConflictRecord] = Field(default_factory=list)
    description: str = ""
    suggestions: list[str] = Field(default_factory=list)
    conflicting_events: list[ScheduleEvent] = Field(default_factory=list)
