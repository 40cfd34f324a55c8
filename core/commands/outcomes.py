"""
Runbooks Command Layer — Command Outcome
===========================================
One outcome per command handled by the bus.

ACCEPTED carries no reason: the event was published and applied.
REJECTED always carries the RejectionReason that stopped it; nothing
was published.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from core.commands.rejection import RejectionReason


class CommandStatus(Enum):
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CommandOutcome:
    command_id: uuid.UUID
    status: CommandStatus
    reason: Optional[RejectionReason] = None
    occurred_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self):
        if not isinstance(self.command_id, uuid.UUID):
            raise ValueError("command_id must be UUID.")
        if not isinstance(self.status, CommandStatus):
            raise ValueError(
                f"status must be CommandStatus, got {type(self.status).__name__}."
            )
        if (self.status is CommandStatus.REJECTED) != (self.reason is not None):
            raise ValueError(
                f"{self.status.value} outcome "
                f"{'requires' if self.status is CommandStatus.REJECTED else 'cannot carry'} "
                f"a RejectionReason."
            )

    @classmethod
    def accepted(cls, command_id: uuid.UUID) -> "CommandOutcome":
        return cls(command_id=command_id, status=CommandStatus.ACCEPTED)

    @classmethod
    def rejected(
        cls, command_id: uuid.UUID, reason: RejectionReason
    ) -> "CommandOutcome":
        return cls(
            command_id=command_id,
            status=CommandStatus.REJECTED,
            reason=reason,
        )

    @property
    def is_accepted(self) -> bool:
        return self.status is CommandStatus.ACCEPTED

    @property
    def is_rejected(self) -> bool:
        return self.status is CommandStatus.REJECTED
