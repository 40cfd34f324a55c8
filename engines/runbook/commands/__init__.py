"""
Runbooks Engine — Request Commands
=====================================
Typed runbook requests. Each one is handled directly by the
Runbook aggregate and converts to / from the canonical Command
envelope for routing through the CommandBus.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Union

from core.commands.base import Command


# ══════════════════════════════════════════════════════════════
# COMMAND TYPE CONSTANTS
# ══════════════════════════════════════════════════════════════

RUNBOOK_CREATE_REQUEST = "runbook.runbook.create.request"
RUNBOOK_TASK_ADD_REQUEST = "runbook.task.add.request"
RUNBOOK_TASK_START_REQUEST = "runbook.task.start.request"
RUNBOOK_TASK_COMPLETE_REQUEST = "runbook.task.complete.request"
RUNBOOK_COMPLETE_REQUEST = "runbook.runbook.complete.request"

RUNBOOK_COMMAND_TYPES = frozenset({
    RUNBOOK_CREATE_REQUEST,
    RUNBOOK_TASK_ADD_REQUEST,
    RUNBOOK_TASK_START_REQUEST,
    RUNBOOK_TASK_COMPLETE_REQUEST,
    RUNBOOK_COMPLETE_REQUEST,
})


def _require_id(value, field_name: str) -> None:
    if not value or not isinstance(value, str):
        raise ValueError(f"{field_name} must be a non-empty string.")


def _envelope(
    command_type: str,
    *,
    aggregate_id: str,
    actor_id: str,
    payload: dict,
    command_id: uuid.UUID,
    correlation_id: uuid.UUID,
    issued_at: datetime,
) -> Command:
    return Command(
        command_id=command_id,
        command_type=command_type,
        aggregate_id=aggregate_id,
        actor_id=actor_id,
        payload=payload,
        issued_at=issued_at,
        correlation_id=correlation_id,
        source_engine="runbook",
    )


# ══════════════════════════════════════════════════════════════
# REQUEST COMMANDS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CreateRunbook:
    """Request to create a runbook owned by owner_id."""
    project_id: str
    runbook_id: str
    name: str
    owner_id: str

    def __post_init__(self):
        _require_id(self.project_id, "project_id")
        _require_id(self.runbook_id, "runbook_id")
        _require_id(self.owner_id, "owner_id")
        if not isinstance(self.name, str):
            raise ValueError("name must be a string.")

    def to_command(
        self,
        *,
        actor_id: str,
        command_id: uuid.UUID,
        correlation_id: uuid.UUID,
        issued_at: datetime,
    ) -> Command:
        return _envelope(
            RUNBOOK_CREATE_REQUEST,
            aggregate_id=self.runbook_id,
            actor_id=actor_id,
            payload={
                "project_id": self.project_id,
                "runbook_id": self.runbook_id,
                "name": self.name,
                "owner_id": self.owner_id,
            },
            command_id=command_id,
            correlation_id=correlation_id,
            issued_at=issued_at,
        )


@dataclass(frozen=True)
class AddTask:
    """Request to add a task assigned to assignee_id."""
    task_id: str
    name: str
    description: str
    assignee_id: str

    def __post_init__(self):
        _require_id(self.task_id, "task_id")
        _require_id(self.assignee_id, "assignee_id")
        if not isinstance(self.name, str):
            raise ValueError("name must be a string.")
        if not isinstance(self.description, str):
            raise ValueError("description must be a string.")

    def to_command(
        self,
        *,
        runbook_id: str,
        actor_id: str,
        command_id: uuid.UUID,
        correlation_id: uuid.UUID,
        issued_at: datetime,
    ) -> Command:
        return _envelope(
            RUNBOOK_TASK_ADD_REQUEST,
            aggregate_id=runbook_id,
            actor_id=actor_id,
            payload={
                "task_id": self.task_id,
                "name": self.name,
                "description": self.description,
                "assignee_id": self.assignee_id,
            },
            command_id=command_id,
            correlation_id=correlation_id,
            issued_at=issued_at,
        )


@dataclass(frozen=True)
class StartTask:
    """Request by user_id to start working on a task."""
    task_id: str
    user_id: str

    def __post_init__(self):
        _require_id(self.task_id, "task_id")
        _require_id(self.user_id, "user_id")

    def to_command(
        self,
        *,
        runbook_id: str,
        command_id: uuid.UUID,
        correlation_id: uuid.UUID,
        issued_at: datetime,
    ) -> Command:
        return _envelope(
            RUNBOOK_TASK_START_REQUEST,
            aggregate_id=runbook_id,
            actor_id=self.user_id,
            payload={"task_id": self.task_id, "user_id": self.user_id},
            command_id=command_id,
            correlation_id=correlation_id,
            issued_at=issued_at,
        )


@dataclass(frozen=True)
class CompleteTask:
    """Request by user_id to complete a task in progress."""
    task_id: str
    user_id: str

    def __post_init__(self):
        _require_id(self.task_id, "task_id")
        _require_id(self.user_id, "user_id")

    def to_command(
        self,
        *,
        runbook_id: str,
        command_id: uuid.UUID,
        correlation_id: uuid.UUID,
        issued_at: datetime,
    ) -> Command:
        return _envelope(
            RUNBOOK_TASK_COMPLETE_REQUEST,
            aggregate_id=runbook_id,
            actor_id=self.user_id,
            payload={"task_id": self.task_id, "user_id": self.user_id},
            command_id=command_id,
            correlation_id=correlation_id,
            issued_at=issued_at,
        )


@dataclass(frozen=True)
class CompleteRunbook:
    """Request by user_id to close the runbook."""
    runbook_id: str
    user_id: str

    def __post_init__(self):
        _require_id(self.runbook_id, "runbook_id")
        _require_id(self.user_id, "user_id")

    def to_command(
        self,
        *,
        command_id: uuid.UUID,
        correlation_id: uuid.UUID,
        issued_at: datetime,
    ) -> Command:
        return _envelope(
            RUNBOOK_COMPLETE_REQUEST,
            aggregate_id=self.runbook_id,
            actor_id=self.user_id,
            payload={"runbook_id": self.runbook_id, "user_id": self.user_id},
            command_id=command_id,
            correlation_id=correlation_id,
            issued_at=issued_at,
        )


RunbookRequest = Union[
    CreateRunbook, AddTask, StartTask, CompleteTask, CompleteRunbook,
]

REQUEST_CLASSES = {
    RUNBOOK_CREATE_REQUEST: CreateRunbook,
    RUNBOOK_TASK_ADD_REQUEST: AddTask,
    RUNBOOK_TASK_START_REQUEST: StartTask,
    RUNBOOK_TASK_COMPLETE_REQUEST: CompleteTask,
    RUNBOOK_COMPLETE_REQUEST: CompleteRunbook,
}


def request_from_command(command: Command) -> RunbookRequest:
    """
    Rebuild the typed request carried by a command envelope.

    Raises:
        ValueError: not a runbook command, or payload fields missing.
    """
    cls = REQUEST_CLASSES.get(command.command_type)
    if cls is None:
        raise ValueError(
            f"Unsupported runbook command type: {command.command_type}"
        )
    try:
        return cls(**command.payload)
    except TypeError as exc:
        raise ValueError(
            f"Invalid payload for {command.command_type}: {exc}"
        ) from exc
