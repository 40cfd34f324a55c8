"""
Runbooks Replay — Public API
===============================
History is the truth. State is a fold over history.
"""

from core.replay.errors import (
    ApplyError,
    EventDecodeError,
    MalformedEventError,
    ReplayError,
    ReplayIntegrityError,
    UnknownEventTypeError,
)
from core.replay.event_replayer import ReplayResult, replay_events

__all__ = [
    "replay_events",
    "ReplayResult",
    "ApplyError",
    "ReplayError",
    "ReplayIntegrityError",
    "EventDecodeError",
    "MalformedEventError",
    "UnknownEventTypeError",
]
