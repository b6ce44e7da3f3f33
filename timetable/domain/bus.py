"""Synchronous in-process bus that delivers collection-change notifications.

Mutations publish ``EventCreated`` / ``EventUpdated`` / ``EventDeleted``;
the handler registry answers each with a full ``EventsChanged`` snapshot,
and the conflict monitor answers that with ``ConflictsRecomputed``. All of
it runs inside the original ``publish`` call, so the index is current by
the time a request handler returns.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable


class EventBus:
    """Publish/subscribe bus keyed by the exact type of the published object.

    Handlers run in registration order. ``subscribe`` hands back an
    ``unsubscribe`` callable; a handler may call it, or subscribe others,
    while a publish is in flight without affecting the current delivery.
    """

    def __init__(self) -> None:
        self._subscribers: dict[type, list[Callable]] = defaultdict(list)

    def subscribe(self, event_type: type, handler: Callable) -> Callable[[], None]:
        handlers = self._subscribers[event_type]
        handlers.append(handler)

        def unsubscribe() -> None:
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def publish(self, event: Any) -> None:
        # Snapshot the list; delivery order is fixed at publish time.
        for handler in tuple(self._subscribers.get(type(event), ())):
            handler(event)
