"""
Runbooks Event Distribution — Publish Sinks
==============================================
The publish sink is the only outbound collaborator of an aggregate.

Contract:
- publish(event) returns None on success
- publish(event) raising means the event was NOT accepted;
  the aggregate must not apply it

Implementations here are in-memory. Durable transports belong
to the surrounding infrastructure.
"""

from __future__ import annotations

import logging
from typing import Any, List, Protocol, runtime_checkable

from core.events.dispatcher import dispatch
from core.events.registry import SubscriberRegistry

logger = logging.getLogger("runbooks.events")


@runtime_checkable
class EventPublisher(Protocol):
    """Capability that receives every event an aggregate emits."""

    def publish(self, event: Any) -> None:
        ...


class InMemoryEventPublisher:
    """
    Records published events in order.

    The recorded list is the event stream: replaying it into a fresh
    aggregate reproduces the live state.
    """

    def __init__(self):
        self._published: List[Any] = []

    def publish(self, event: Any) -> None:
        self._published.append(event)
        logger.debug(f"Recorded {event.event_type} (#{len(self._published)})")

    @property
    def published(self) -> List[Any]:
        return list(self._published)

    def clear(self) -> None:
        self._published.clear()

    def __len__(self) -> int:
        return len(self._published)


class DispatchingEventPublisher:
    """
    Publish sink that hands each event to its registered subscribers.

    Subscriber failures are logged by dispatch() and do not
    propagate to the publishing aggregate.
    """

    def __init__(self, registry: SubscriberRegistry):
        self._registry = registry

    def publish(self, event: Any) -> None:
        dispatch(event, self._registry)
