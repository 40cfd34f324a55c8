"""
Runbooks Event Distribution — Errors
=======================================
Raised while wiring subscribers. Failures of a subscriber while
an event is delivered are reported by dispatch(), never raised.
"""


class EventBusError(Exception):
    """Base error for event distribution."""
    pass


class UnknownEventTypeSubscription(EventBusError):
    """Subscription to an event type the registry was not built for."""

    def __init__(self, event_type: str, known: frozenset):
        self.event_type = event_type
        super().__init__(
            f"Cannot subscribe to '{event_type}': not one of {sorted(known)}."
        )


class DuplicateSubscriberError(EventBusError):
    """Same handler subscribed twice to one event type."""

    def __init__(self, event_type: str, subscriber_name: str):
        self.event_type = event_type
        self.subscriber_name = subscriber_name
        super().__init__(
            f"'{subscriber_name}' already listens to '{event_type}'."
        )
