"""
Runbooks Command Layer — Command Bus
=======================================
Routes command envelopes to the engine service that owns them.

Flow:
    1. Look up the handler registered for command_type
    2. Execute it — the handler validates, publishes, and applies
    3. CommandRejected → REJECTED outcome (nothing was published)
    4. Otherwise → ACCEPTED outcome with the execution result

The CommandBus:
- Orchestrates, does not decide
- Never publishes events itself
- Contains no engine-specific logic

Exceptions other than CommandRejected propagate unchanged.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Protocol

from core.commands.base import Command, REQUEST_SUFFIX
from core.commands.outcomes import CommandOutcome
from core.commands.rejection import CommandRejected

logger = logging.getLogger("runbooks.commands")


# ══════════════════════════════════════════════════════════════
# ENGINE SERVICE PROTOCOL
# ══════════════════════════════════════════════════════════════

class EngineServiceProtocol(Protocol):
    """Handler registered per command type."""

    def execute(self, command: Command) -> Any:
        ...


# ══════════════════════════════════════════════════════════════
# COMMAND BUS ERRORS
# ══════════════════════════════════════════════════════════════

class CommandBusError(Exception):
    """Base error for command bus operations."""
    pass


class NoHandlerRegistered(CommandBusError):
    """No engine service handler registered for command type."""

    def __init__(self, command_type: str):
        self.command_type = command_type
        super().__init__(
            f"No engine service handler registered for "
            f"command type '{command_type}'."
        )


# ══════════════════════════════════════════════════════════════
# COMMAND BUS RESULT
# ══════════════════════════════════════════════════════════════

class CommandResult:
    """
    Result of CommandBus.handle() — wraps outcome + execution result.
    """

    def __init__(
        self,
        outcome: CommandOutcome,
        execution_result: Any = None,
    ):
        self.outcome = outcome
        self.execution_result = execution_result

    @property
    def is_accepted(self) -> bool:
        return self.outcome.is_accepted

    @property
    def is_rejected(self) -> bool:
        return self.outcome.is_rejected


# ══════════════════════════════════════════════════════════════
# COMMAND BUS
# ══════════════════════════════════════════════════════════════

class CommandBus:
    """
    Orchestration layer for command handling.

    Usage:
        bus = CommandBus()
        bus.register_handler("runbook.task.start.request", runbook_service)
        result = bus.handle(command)
    """

    def __init__(self):
        self._handlers: Dict[str, EngineServiceProtocol] = {}

    def register_handler(
        self,
        command_type: str,
        handler: EngineServiceProtocol,
    ) -> None:
        """Handler must have a callable .execute(command)."""
        if not command_type.endswith(REQUEST_SUFFIX):
            raise ValueError(
                f"command_type '{command_type}' must end with '{REQUEST_SUFFIX}'."
            )

        if not hasattr(handler, "execute") or not callable(handler.execute):
            raise TypeError("Handler must have callable .execute() method.")

        self._handlers[command_type] = handler
        logger.info(f"Handler registered: {command_type}")

    def has_handler(self, command_type: str) -> bool:
        return command_type in self._handlers

    def handle(self, command: Command) -> CommandResult:
        """
        Execute a command through its registered handler.

        Raises:
            NoHandlerRegistered: command_type has no handler.
        """
        handler = self._handlers.get(command.command_type)
        if handler is None:
            raise NoHandlerRegistered(command.command_type)

        try:
            execution_result = handler.execute(command)
        except CommandRejected as exc:
            logger.info(
                f"Command {command.command_id} rejected by "
                f"policy '{exc.reason.policy_name}': "
                f"[{exc.reason.code}] {exc.reason.message}"
            )
            return CommandResult(
                outcome=CommandOutcome.rejected(command.command_id, exc.reason),
            )

        logger.info(
            f"Command {command.command_id} ACCEPTED "
            f"({command.command_type})"
        )
        return CommandResult(
            outcome=CommandOutcome.accepted(command.command_id),
            execution_result=execution_result,
        )
