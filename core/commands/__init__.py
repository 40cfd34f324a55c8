"""
Runbooks Command Layer — Public API
======================================
Every change begins as a Command.
Every Command handled by the bus produces exactly one Outcome.
"""

from core.commands.base import (
    Command,
    split_command_type,
)
from core.commands.outcomes import (
    CommandOutcome,
    CommandStatus,
)
from core.commands.rejection import (
    CommandRejected,
    ReasonCode,
    RejectionReason,
)
from core.commands.bus import (
    CommandBus,
    CommandBusError,
    CommandResult,
    NoHandlerRegistered,
)

__all__ = [
    # ── Base ──────────────────────────────────────────────────
    "Command",
    "split_command_type",
    # ── Outcomes ──────────────────────────────────────────────
    "CommandOutcome",
    "CommandStatus",
    # ── Rejection ─────────────────────────────────────────────
    "CommandRejected",
    "RejectionReason",
    "ReasonCode",
    # ── Bus ────────────────────────────────────────────────────
    "CommandBus",
    "CommandBusError",
    "CommandResult",
    "NoHandlerRegistered",
]
