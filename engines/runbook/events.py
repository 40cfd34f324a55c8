"""
Runbooks Engine — Event Types
================================
Engine: Runbook
Authority: Event-Sourced — events are the only thing replayed

Events are immutable records of changes that already happened.
They compare by value: two events with the same fields are equal.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import ClassVar, Dict, Type, Union

from core.replay.errors import MalformedEventError, UnknownEventTypeError


# ══════════════════════════════════════════════════════════════
# EVENT TYPE CONSTANTS
# ══════════════════════════════════════════════════════════════

RUNBOOK_CREATED_V1 = "runbook.runbook.created.v1"
RUNBOOK_TASK_ADDED_V1 = "runbook.task.added.v1"
RUNBOOK_TASK_STARTED_V1 = "runbook.task.started.v1"
RUNBOOK_TASK_COMPLETED_V1 = "runbook.task.completed.v1"
RUNBOOK_COMPLETED_V1 = "runbook.runbook.completed.v1"

RUNBOOK_EVENT_TYPES = (
    RUNBOOK_CREATED_V1,
    RUNBOOK_TASK_ADDED_V1,
    RUNBOOK_TASK_STARTED_V1,
    RUNBOOK_TASK_COMPLETED_V1,
    RUNBOOK_COMPLETED_V1,
)


# ══════════════════════════════════════════════════════════════
# COMMAND → EVENT MAPPING
# ══════════════════════════════════════════════════════════════

COMMAND_TO_EVENT_TYPE = {
    "runbook.runbook.create.request": RUNBOOK_CREATED_V1,
    "runbook.task.add.request": RUNBOOK_TASK_ADDED_V1,
    "runbook.task.start.request": RUNBOOK_TASK_STARTED_V1,
    "runbook.task.complete.request": RUNBOOK_TASK_COMPLETED_V1,
    "runbook.runbook.complete.request": RUNBOOK_COMPLETED_V1,
}


def resolve_runbook_event_type(command_type: str) -> str | None:
    return COMMAND_TO_EVENT_TYPE.get(command_type)


# ══════════════════════════════════════════════════════════════
# EVENTS
# ══════════════════════════════════════════════════════════════

class _RunbookEvent:
    event_type: ClassVar[str]

    def to_dict(self) -> dict:
        data = asdict(self)
        data["event_type"] = self.event_type
        return data


@dataclass(frozen=True)
class RunbookCreated(_RunbookEvent):
    event_type: ClassVar[str] = RUNBOOK_CREATED_V1

    project_id: str
    runbook_id: str
    name: str
    owner_id: str


@dataclass(frozen=True)
class TaskAdded(_RunbookEvent):
    """user_id is the assignee of the new task."""
    event_type: ClassVar[str] = RUNBOOK_TASK_ADDED_V1

    task_id: str
    name: str
    description: str
    user_id: str


@dataclass(frozen=True)
class TaskMarkedInProgress(_RunbookEvent):
    event_type: ClassVar[str] = RUNBOOK_TASK_STARTED_V1

    task_id: str


@dataclass(frozen=True)
class TaskCompleted(_RunbookEvent):
    event_type: ClassVar[str] = RUNBOOK_TASK_COMPLETED_V1

    task_id: str
    user_id: str


@dataclass(frozen=True)
class RunbookCompleted(_RunbookEvent):
    event_type: ClassVar[str] = RUNBOOK_COMPLETED_V1

    runbook_id: str


RunbookEvent = Union[
    RunbookCreated,
    TaskAdded,
    TaskMarkedInProgress,
    TaskCompleted,
    RunbookCompleted,
]

EVENT_CLASSES: Dict[str, Type[_RunbookEvent]] = {
    cls.event_type: cls
    for cls in (
        RunbookCreated,
        TaskAdded,
        TaskMarkedInProgress,
        TaskCompleted,
        RunbookCompleted,
    )
}


def event_from_dict(data: dict) -> RunbookEvent:
    """
    Rebuild an event from its to_dict() form.

    Raises:
        UnknownEventTypeError: event_type is not a runbook event.
        MalformedEventError:   fields do not match the event type.
    """
    fields = dict(data)
    event_type = fields.pop("event_type", None)
    cls = EVENT_CLASSES.get(event_type)
    if cls is None:
        raise UnknownEventTypeError(str(event_type))
    try:
        return cls(**fields)
    except TypeError as exc:
        raise MalformedEventError(event_type, str(exc)) from exc
