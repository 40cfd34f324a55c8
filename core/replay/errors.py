"""
Runbooks Replay — Errors
===========================
Error types for rebuilding aggregates from history.
"""


class ReplayError(Exception):
    """Base error for all replay operations."""
    pass


class ApplyError(Exception):
    """
    An event cannot be applied to the aggregate's current state.

    Raised by aggregates, never for business rule violations.
    """
    pass


class EventDecodeError(ReplayError):
    """A stored event could not be turned back into an event object."""
    pass


class UnknownEventTypeError(EventDecodeError):
    """A serialized event names a type no engine registered."""

    def __init__(self, event_type: str):
        self.event_type = event_type
        super().__init__(f"Unknown event type '{event_type}' in history.")


class MalformedEventError(EventDecodeError):
    """A serialized event of a known type has missing or unexpected fields."""

    def __init__(self, event_type: str, detail: str):
        self.event_type = event_type
        self.detail = detail
        super().__init__(f"Malformed {event_type} in history: {detail}")


class ReplayIntegrityError(ReplayError):
    """An event could not be applied — history is out of order or corrupt."""

    def __init__(self, position: int, event_type: str, detail: str):
        self.position = position
        self.event_type = event_type
        self.detail = detail
        super().__init__(
            f"Replay integrity failure at position {position} "
            f"({event_type}): {detail}"
        )
