"""
Runbooks Replay — Event Replayer
===================================
Rebuilds aggregate state by applying historical events.

Replay doctrine:
- Apply only — never validate, never publish
- Deterministic order: exactly the order given
- Each event applied exactly once
- Never modify events

Ordering is the caller's contract. Replaying out of order or
skipping an event yields an inconsistent aggregate; the replayer
only reports events that cannot be applied at all.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Protocol

from core.replay.errors import ApplyError, EventDecodeError, ReplayIntegrityError

logger = logging.getLogger("runbooks.replay")


class ReplayableAggregate(Protocol):
    def apply(self, event: Any) -> None:
        ...


@dataclass
class ReplayResult:
    """Structured result of a replay operation."""

    events_applied: int = 0
    last_event_type: str = ""


def replay_events(
    aggregate: ReplayableAggregate,
    events: Iterable[Any],
    decode: Optional[Callable[[Any], Any]] = None,
) -> ReplayResult:
    """
    Apply events to the aggregate in the given order.

    decode, when given, turns each stored record into an event first.

    Raises:
        ReplayIntegrityError: a record could not be decoded or applied.
            Events before it remain applied.
    """
    result = ReplayResult()

    for position, record in enumerate(events):
        event_type = _event_type_of(record)
        try:
            event = decode(record) if decode is not None else record
            aggregate.apply(event)
        except (EventDecodeError, ApplyError) as exc:
            raise ReplayIntegrityError(position, event_type, str(exc)) from exc

        result.events_applied += 1
        result.last_event_type = event_type

    logger.info(
        f"Replay complete: {result.events_applied} events applied to "
        f"{type(aggregate).__name__}"
    )
    return result


def _event_type_of(record: Any) -> str:
    if isinstance(record, dict):
        return str(record.get("event_type", "<missing event_type>"))
    return getattr(record, "event_type", type(record).__name__)
