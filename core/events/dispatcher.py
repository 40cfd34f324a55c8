"""
Runbooks Event Distribution — Dispatcher
===========================================
Delivers one published event to its subscribers, in order.

By the time dispatch runs the publish sink has accepted the event
and the aggregate applies it next. A subscriber failing is logged
and reported; it never reaches the aggregate.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List

from core.events.registry import SubscriberRegistry

logger = logging.getLogger("runbooks.events")


@dataclass(frozen=True)
class SubscriberFailure:
    subscriber: str
    error_type: str
    error: str


@dataclass
class DispatchReport:
    event_type: str
    delivered: List[str] = field(default_factory=list)
    failures: List[SubscriberFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def dispatch(event: Any, registry: SubscriberRegistry) -> DispatchReport:
    """Call every subscriber of event.event_type. Never raises for them."""
    report = DispatchReport(event_type=event.event_type)

    for name, handler in registry.subscribers_for(event.event_type):
        try:
            handler(event)
        except Exception as exc:
            report.failures.append(SubscriberFailure(
                subscriber=name,
                error_type=type(exc).__name__,
                error=str(exc),
            ))
            logger.error(
                f"Subscriber {name} failed on {event.event_type}: {exc}",
                exc_info=True,
            )
        else:
            report.delivered.append(name)

    logger.debug(
        f"{event.event_type} delivered to {len(report.delivered)}, "
        f"{len(report.failures)} failed"
    )
    return report
