"""
Runbooks Command Layer — Command Envelope
============================================
A Command is a frozen request addressed to one runbook.

The envelope only checks its own shape. Whether the request is
allowed is decided later by the aggregate's policies.

command_type reads   <engine>.<domain>.<action>.request
e.g.                 runbook.task.start.request
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Tuple

REQUEST_SUFFIX = ".request"


def _non_empty_str(value, field_name: str) -> None:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{field_name} must be a non-empty string.")


def _uuid(value, field_name: str) -> None:
    if not isinstance(value, uuid.UUID):
        raise ValueError(
            f"{field_name} must be UUID, got {type(value).__name__}."
        )


def split_command_type(command_type: str) -> Tuple[str, str, str]:
    """
    'runbook.task.start.request' → ('runbook', 'task', 'start')

    Raises ValueError when the type is not <engine>.<domain>.<action>.request.
    """
    _non_empty_str(command_type, "command_type")
    if not command_type.endswith(REQUEST_SUFFIX):
        raise ValueError(
            f"command_type '{command_type}' must end with '{REQUEST_SUFFIX}'."
        )
    segments = command_type[: -len(REQUEST_SUFFIX)].split(".")
    if len(segments) != 3 or not all(segments):
        raise ValueError(
            f"command_type '{command_type}' must read "
            f"<engine>.<domain>.<action>{REQUEST_SUFFIX}."
        )
    engine, domain, action = segments
    return engine, domain, action


@dataclass(frozen=True)
class Command:
    """
    aggregate_id names the runbook the command is for. Payload keys
    are those of the typed request the command_type maps to.
    """

    command_id: uuid.UUID
    command_type: str
    aggregate_id: str
    actor_id: str
    payload: dict
    issued_at: datetime
    correlation_id: uuid.UUID
    source_engine: str

    def __post_init__(self):
        _uuid(self.command_id, "command_id")
        _uuid(self.correlation_id, "correlation_id")

        engine, _, _ = split_command_type(self.command_type)
        if engine != self.source_engine:
            raise ValueError(
                f"command_type '{self.command_type}' belongs to engine "
                f"'{engine}', not '{self.source_engine}'."
            )

        _non_empty_str(self.aggregate_id, "aggregate_id")
        _non_empty_str(self.actor_id, "actor_id")

        if not isinstance(self.payload, dict):
            raise TypeError(
                f"payload must be a dict, got {type(self.payload).__name__}."
            )
        if not isinstance(self.issued_at, datetime):
            raise ValueError("issued_at must be a datetime.")

    @property
    def domain(self) -> str:
        return split_command_type(self.command_type)[1]

    @property
    def action(self) -> str:
        return split_command_type(self.command_type)[2]
