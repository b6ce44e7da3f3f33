"""Derive an event's presentation colors from its modality (``type``)."""

from __future__ import annotations

import unicodedata

from timetable.domain.models import EventStyle, ScheduleEvent

DEFAULT_STYLE = EventStyle(background="#E5E7EB", border="#9CA3AF", text="#1F2937")

CONFLICT_STYLE = EventStyle(background="#FEE2E2", border="#DC2626", text="#7F1D1D")

_TYPE_STYLES = {
    "teorica": EventStyle(background="#DBEAFE", border="#2563EB", text="#1E3A8A"),
    "pratica": EventStyle(background="#DCFCE7", border="#16A34A", text="#14532D"),
    "assincrona": EventStyle(background="#FEF3C7", border="#D97706", text="#78350F"),
}

_ALIASES = {
    "theory": "teorica",
    "theoretical": "teorica",
    "practice": "pratica",
    "practical": "pratica",
    "lab": "pratica",
    "asynchronous": "assincrona",
    "async": "assincrona",
}


def _type_key(event_type: str | None) -> str:
    if not event_type:
        return ""
    decomposed = unicodedata.normalize("NFKD", event_type.strip().lower())
    key = "".join(c for c in decomposed if not unicodedata.combining(c))
    return _ALIASES.get(key, key)


def style_for(event_type: str | None) -> EventStyle:
    return _TYPE_STYLES.get(_type_key(event_type), DEFAULT_STYLE)


def derive_colors(event: ScheduleEvent) -> ScheduleEvent:
    """Return a copy of *event* with colors recomputed from its ``type``."""
    style = style_for(event.type)
    return event.model_copy(
        update={
            "background_color": style.background,
            "border_color": style.border,
            "text_color": style.text,
        }
    )
