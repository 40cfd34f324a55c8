"""
Runbooks Replay — Event Replayer Tests
=========================================
Generic replay over any aggregate exposing apply().
"""

import pytest

from core.replay import (
    ApplyError,
    EventDecodeError,
    ReplayIntegrityError,
    ReplayResult,
    replay_events,
)


class CounterAggregate:
    """Adds event values; refuses negatives."""

    def __init__(self):
        self.total = 0
        self.seen = []

    def apply(self, event) -> None:
        if event < 0:
            raise ApplyError(f"negative value {event}")
        self.total += event
        self.seen.append(event)


def test_applies_in_order():
    aggregate = CounterAggregate()
    result = replay_events(aggregate, [1, 2, 3])

    assert aggregate.seen == [1, 2, 3]
    assert isinstance(result, ReplayResult)
    assert result.events_applied == 3
    assert result.last_event_type == "int"


def test_accepts_generators():
    aggregate = CounterAggregate()
    replay_events(aggregate, (n for n in range(4)))
    assert aggregate.total == 6


def test_apply_error_wrapped_with_position():
    aggregate = CounterAggregate()
    with pytest.raises(ReplayIntegrityError) as exc_info:
        replay_events(aggregate, [5, -1, 7])

    assert exc_info.value.position == 1
    assert "negative value" in exc_info.value.detail
    assert isinstance(exc_info.value.__cause__, ApplyError)
    # earlier events stay applied, later ones are never reached
    assert aggregate.seen == [5]


def test_other_errors_propagate():
    class Exploding:
        def apply(self, event):
            raise KeyError("bug")

    with pytest.raises(KeyError):
        replay_events(Exploding(), [1])


def _decode_number(record):
    try:
        return int(record["value"])
    except (KeyError, ValueError) as exc:
        raise EventDecodeError(f"bad record {record!r}") from exc


def test_decode_hook_applied_before_apply():
    aggregate = CounterAggregate()
    replay_events(
        aggregate,
        [{"event_type": "counter.added", "value": "2"},
         {"event_type": "counter.added", "value": "3"}],
        decode=_decode_number,
    )
    assert aggregate.seen == [2, 3]


def test_decode_error_wrapped_with_position():
    aggregate = CounterAggregate()
    with pytest.raises(ReplayIntegrityError) as exc_info:
        replay_events(
            aggregate,
            [{"event_type": "counter.added", "value": "2"},
             {"event_type": "counter.added"}],
            decode=_decode_number,
        )

    assert exc_info.value.position == 1
    assert exc_info.value.event_type == "counter.added"
    assert isinstance(exc_info.value.__cause__, EventDecodeError)
    assert aggregate.seen == [2]
