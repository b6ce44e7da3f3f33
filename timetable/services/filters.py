"""Filter / view engine: narrows an event snapshot by teacher, class or room.

Independent of conflict detection. One dimension is active at a time and
holds at most one selected value; a free-text search applies on top.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from timetable.domain.models import (
    ConflictIndex,
    ConflictRecord,
    EventId,
    FilterDimension,
    FilterInfo,
    ScheduleEvent,
)

_DIMENSION_FIELD = {
    FilterDimension.TEACHER: "teacher",
    FilterDimension.CLASS: "class_",
    FilterDimension.ROOM: "room",
}


def dimension_value(event: ScheduleEvent, dimension: FilterDimension) -> str | None:
    return getattr(event, _DIMENSION_FIELD[dimension])


def filter_options(events: Iterable[ScheduleEvent]) -> dict[FilterDimension, list[str]]:
    """Sorted distinct non-empty values for every dimension."""
    snapshot = list(events)
    return {
        dimension: sorted(
            {v for e in snapshot if (v := dimension_value(e, dimension))}
        )
        for dimension in FilterDimension
    }


def matches_search(event: ScheduleEvent, term: str) -> bool:
    if not term:
        return True
    needle = term.lower()
    haystack = (event.title, event.teacher, event.room, event.class_)
    return any(field and needle in field.lower() for field in haystack)


def step(options: Sequence[str], current: str, forward: bool) -> str:
    """Move one position around the cycle ``"" -> options[0] .. options[-1] -> ""``.

    Returns *current* unchanged when there are no options.
    """
    if not options:
        return current
    cycle = ["", *options]
    position = cycle.index(current) if current in cycle else 0
    offset = 1 if forward else -1
    return cycle[(position + offset) % len(cycle)]


class EventFilter:
    """Filter state bound to one event snapshot."""

    def __init__(
        self,
        events: Iterable[ScheduleEvent],
        active_dimension: FilterDimension = FilterDimension.TEACHER,
    ) -> None:
        self._events: tuple[ScheduleEvent, ...] = tuple(events)
        self._options = filter_options(self._events)
        self.active_dimension = active_dimension
        self.value = ""
        self.search_term = ""

    @property
    def events(self) -> tuple[ScheduleEvent, ...]:
        return self._events

    @property
    def options(self) -> dict[FilterDimension, list[str]]:
        return self._options

    @property
    def filtered_events(self) -> list[ScheduleEvent]:
        return [
            e
            for e in self._events
            if matches_search(e, self.search_term)
            and (
                not self.value
                or dimension_value(e, self.active_dimension) == self.value
            )
        ]

    @property
    def has_active_filters(self) -> bool:
        return bool(self.value or self.search_term)

    def with_events(self, events: Iterable[ScheduleEvent]) -> EventFilter:
        """Rebind the current state to a new snapshot."""
        rebound = EventFilter(events, self.active_dimension)
        rebound.value = self.value
        rebound.search_term = self.search_term
        return rebound

    def set_active_dimension(self, dimension: FilterDimension) -> None:
        if dimension != self.active_dimension:
            self.active_dimension = dimension
            self.value = ""

    def set_value(self, value: str, dimension: FilterDimension | None = None) -> None:
        if dimension is not None:
            self.set_active_dimension(dimension)
        self.value = value

    def set_search(self, term: str) -> None:
        self.search_term = term

    def clear(self) -> None:
        self.value = ""
        self.search_term = ""

    def navigate_next(self) -> None:
        self.value = step(self._options[self.active_dimension], self.value, True)

    def navigate_previous(self) -> None:
        self.value = step(self._options[self.active_dimension], self.value, False)

    def current_info(self) -> FilterInfo:
        options = self._options[self.active_dimension]
        index = options.index(self.value) if self.value in options else -1
        if not self.value:
            display = f"Select {self.active_dimension.value}"
        else:
            display = f"{self.value} ({index + 1}/{len(options)})"
        return FilterInfo(
            value=self.value, index=index, total=len(options), display_text=display
        )


def conflicts_for(
    events: Iterable[ScheduleEvent], index: ConflictIndex
) -> dict[EventId, list[ConflictRecord]]:
    """Restrict a conflict index to the given (typically filtered) events."""
    return {
        e.id: index.details[e.id] for e in events if e.id in index.details
    }
