"""Edit-history recorder.

One recorder per editing session: ``start`` opens it for a user, ``record``
buffers entries, ``flush`` writes them to the repository and ``close`` ends
the session. Callers hold the recorder and pass it where it is needed.
"""

from __future__ import annotations

import logging

from timetable.domain.models import EventId, HistoryAction, HistoryEntry, ScheduleEvent
from timetable.repos.memory import HistoryRepository

logger = logging.getLogger(__name__)

_TRACKED_FIELDS = ("title", "start", "end", "room", "teacher", "class_", "type", "semester")


def diff_events(
    before: ScheduleEvent | None, after: ScheduleEvent | None
) -> dict[str, dict]:
    """Return ``{field: {"before": ..., "after": ...}}`` for every tracked field
    whose value differs."""
    changed: dict[str, dict] = {}
    for field in _TRACKED_FIELDS:
        old = getattr(before, field) if before is not None else None
        new = getattr(after, field) if after is not None else None
        if old != new:
            changed[field.rstrip("_")] = {"before": old, "after": new}
    return changed


class HistoryRecorder:
    def __init__(self, repo: HistoryRepository) -> None:
        self.repo = repo
        self.user: str | None = None
        self._pending: list[HistoryEntry] = []

    @property
    def active(self) -> bool:
        return self.user is not None

    def start(self, user: str) -> None:
        if self.active:
            self.close()
        self.user = user or "unknown user"
        logger.debug("History session started for %s", self.user)

    def record(
        self,
        action: HistoryAction,
        event_id: EventId | None = None,
        changed: dict | None = None,
    ) -> HistoryEntry | None:
        if not self.active:
            logger.warning(
                "No active history session; dropping %s for event %s", action, event_id
            )
            return None
        entry = HistoryEntry(
            user=self.user, action=action, event_id=event_id, changed=changed or {}
        )
        self._pending.append(entry)
        return entry

    def flush(self) -> int:
        """Write buffered entries to the repository; return how many were written."""
        written = len(self._pending)
        for entry in self._pending:
            self.repo.add(entry)
        self._pending.clear()
        return written

    def close(self) -> None:
        self.flush()
        logger.debug("History session closed for %s", self.user)
        self.user = None
