"""
Runbooks Event Distribution — Subscriber Registry
====================================================
Who hears which published event.

A registry is built for a closed set of event types (an engine's
event catalogue). Subscribing outside that set is a wiring bug and
fails at startup rather than silently never firing.

Subscribers are kept in subscription order; delivery follows it.
"""

import logging
from threading import Lock
from typing import Callable, Iterable, List, Optional, Tuple

from core.events.errors import DuplicateSubscriberError, UnknownEventTypeSubscription

logger = logging.getLogger("runbooks.events")

Subscriber = Tuple[str, Callable]


class SubscriberRegistry:

    def __init__(self, event_types: Iterable[str]):
        self._event_types = frozenset(event_types)
        if not self._event_types:
            raise ValueError("SubscriberRegistry needs at least one event type.")
        self._subscribers: dict[str, List[Subscriber]] = {
            event_type: [] for event_type in self._event_types
        }
        self._lock = Lock()

    @property
    def event_types(self) -> frozenset:
        return self._event_types

    def subscribe(
        self,
        event_type: str,
        handler: Callable,
        name: Optional[str] = None,
    ) -> None:
        """
        Raises:
            UnknownEventTypeSubscription: event_type not in the catalogue.
            DuplicateSubscriberError:     handler already listens to it.
            TypeError:                    handler is not callable.
        """
        if event_type not in self._event_types:
            raise UnknownEventTypeSubscription(event_type, self._event_types)
        if not callable(handler):
            raise TypeError(f"Subscriber must be callable, got {type(handler)}.")

        name = name or getattr(handler, "__qualname__", repr(handler))
        with self._lock:
            subscribers = self._subscribers[event_type]
            if any(existing is handler for _, existing in subscribers):
                raise DuplicateSubscriberError(event_type, name)
            subscribers.append((name, handler))

        logger.info(f"Subscribed {name} → {event_type}")

    def subscribe_all(self, handler: Callable, name: Optional[str] = None) -> None:
        """Subscribe one handler to every event type of the catalogue."""
        for event_type in sorted(self._event_types):
            self.subscribe(event_type, handler, name)

    def subscribers_for(self, event_type: str) -> List[Subscriber]:
        """Snapshot of (name, handler) pairs; empty for unknown types."""
        with self._lock:
            return list(self._subscribers.get(event_type, ()))

    def subscriber_count(self, event_type: str) -> int:
        return len(self.subscribers_for(event_type))
