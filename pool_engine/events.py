"""In-process event bus for committed engine events."""

from __future__ import annotations

import threading
from collections.abc import Callable

import structlog

from pool_engine.models.events import EngineEvent

logger = structlog.get_logger()

Subscriber = Callable[[EngineEvent], None]


class EventBus:
    """Append-only event log with synchronous subscribers.

    Subscribers run after the log append, in subscription order. A failing
    subscriber is logged and skipped; it cannot undo a committed operation
    or stop later subscribers from seeing the event.
    """

    def __init__(self) -> None:
        self._history: list[EngineEvent] = []
        self._subscribers: list[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register a subscriber.

        Returns:
            A callable that removes the subscriber again
        """
        with self._lock:
            self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            with self._lock:
                if subscriber in self._subscribers:
                    self._subscribers.remove(subscriber)

        return unsubscribe

    def publish(self, event: EngineEvent) -> None:
        with self._lock:
            self._history.append(event)
            subscribers = list(self._subscribers)

        logger.info("event_published", kind=event.kind, pool=event.pool_id[-8:])
        for subscriber in subscribers:
            try:
                subscriber(event)
            except Exception:
                logger.exception(
                    "event_subscriber_failed",
                    kind=event.kind,
                    subscriber=getattr(subscriber, "__name__", repr(subscriber)),
                )

    def history(self, kind: type[EngineEvent] | None = None) -> list[EngineEvent]:
        """Events published so far, optionally filtered by event type."""
        with self._lock:
            events = list(self._history)
        if kind is None:
            return events
        return [e for e in events if isinstance(e, kind)]
