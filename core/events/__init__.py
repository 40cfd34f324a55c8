"""
Runbooks Event Distribution — Public API
===========================================
Aggregates emit events to a publish sink.
Subscribers hear them only after the sink accepted them.
"""

from core.events.dispatcher import DispatchReport, SubscriberFailure, dispatch
from core.events.errors import (
    DuplicateSubscriberError,
    EventBusError,
    UnknownEventTypeSubscription,
)
from core.events.publisher import (
    DispatchingEventPublisher,
    EventPublisher,
    InMemoryEventPublisher,
)
from core.events.registry import SubscriberRegistry

__all__ = [
    "dispatch",
    "DispatchReport",
    "SubscriberFailure",
    "SubscriberRegistry",
    "EventPublisher",
    "InMemoryEventPublisher",
    "DispatchingEventPublisher",
    "EventBusError",
    "UnknownEventTypeSubscription",
    "DuplicateSubscriberError",
]
