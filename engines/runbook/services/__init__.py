"""
Runbooks Engine — Application Service
========================================
Holds live Runbook aggregates in memory and executes command
envelopes routed by the CommandBus against the right one.

The service never validates business rules itself: the aggregate
does. A CommandRejected raised by the aggregate travels back to
the bus, which turns it into a REJECTED outcome.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from core.commands.base import Command
from core.config.settings import DEFAULT_SETTINGS, RunbookSettings
from core.events.publisher import EventPublisher
from engines.runbook.aggregate import Runbook, RunbookSnapshot
from engines.runbook.commands import (
    CompleteRunbook,
    CreateRunbook,
    RUNBOOK_COMMAND_TYPES,
    request_from_command,
)
from engines.runbook.errors import rejection_error
from engines.runbook.events import RunbookCreated, resolve_runbook_event_type
from engines.runbook.policies import command_targets_runbook_policy

logger = logging.getLogger("runbooks.engine")


class RunbookNotFound(LookupError):
    """No live runbook with this id in the service."""

    def __init__(self, runbook_id: str):
        self.runbook_id = runbook_id
        super().__init__(f"Runbook '{runbook_id}' not found.")


# ══════════════════════════════════════════════════════════════
# EXECUTION RESULT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RunbookExecutionResult:
    runbook_id: str
    event_type: str
    event: Any
    runbook: RunbookSnapshot


# ══════════════════════════════════════════════════════════════
# COMMAND HANDLER
# ══════════════════════════════════════════════════════════════

class _RunbookCommandHandler:
    def __init__(self, service: "RunbookService"):
        self._service = service

    def execute(self, command: Command) -> RunbookExecutionResult:
        return self._service._execute_command(command)


# ══════════════════════════════════════════════════════════════
# APPLICATION SERVICE
# ══════════════════════════════════════════════════════════════

class RunbookService:
    """Runbook Engine application service."""

    def __init__(
        self,
        *,
        command_bus,
        publisher: EventPublisher,
        settings: Optional[RunbookSettings] = None,
    ):
        self._command_bus = command_bus
        self._publisher = publisher
        self._settings = settings or DEFAULT_SETTINGS
        self._runbooks: Dict[str, Runbook] = {}

        self._register_handlers()

    def _register_handlers(self) -> None:
        handler = _RunbookCommandHandler(self)
        for command_type in sorted(RUNBOOK_COMMAND_TYPES):
            self._command_bus.register_handler(command_type, handler)

    def _execute_command(self, command: Command) -> RunbookExecutionResult:
        event_type = resolve_runbook_event_type(command.command_type)
        if event_type is None:
            raise ValueError(
                f"Unsupported runbook command type: {command.command_type}"
            )

        request = request_from_command(command)

        if isinstance(request, (CreateRunbook, CompleteRunbook)):
            reason = command_targets_runbook_policy(
                command.aggregate_id, request.runbook_id,
            )
            if reason is not None:
                raise rejection_error(reason)

        if isinstance(request, CreateRunbook):
            if request.runbook_id in self._runbooks:
                raise ValueError(
                    f"Runbook '{request.runbook_id}' already exists."
                )
            runbook = Runbook.from_command(
                request, self._publisher, self._settings,
            )
            self._runbooks[request.runbook_id] = runbook
            logger.info(f"Runbook {request.runbook_id} created")
            return RunbookExecutionResult(
                runbook_id=request.runbook_id,
                event_type=event_type,
                event=RunbookCreated(
                    project_id=request.project_id,
                    runbook_id=request.runbook_id,
                    name=request.name,
                    owner_id=request.owner_id,
                ),
                runbook=runbook.snapshot(),
            )

        runbook = self._get(command.aggregate_id)
        event = runbook.handle(request)

        return RunbookExecutionResult(
            runbook_id=command.aggregate_id,
            event_type=event_type,
            event=event,
            runbook=runbook.snapshot(),
        )

    def _get(self, runbook_id: str) -> Runbook:
        runbook = self._runbooks.get(runbook_id)
        if runbook is None:
            raise RunbookNotFound(runbook_id)
        return runbook

    # ══════════════════════════════════════════════════════════
    # HISTORY / QUERIES
    # ══════════════════════════════════════════════════════════

    def load(self, events: Iterable[Any]) -> RunbookSnapshot:
        """
        Rebuild a runbook from history and keep it live for new commands.
        Replaces a live runbook with the same id.
        """
        runbook = Runbook.from_history(events, self._publisher, self._settings)
        snapshot = runbook.snapshot()
        self._runbooks[snapshot.runbook_id] = runbook
        logger.info(f"Runbook {snapshot.runbook_id} loaded from history")
        return snapshot

    def get_runbook(self, runbook_id: str) -> RunbookSnapshot:
        return self._get(runbook_id).snapshot()

    def has_runbook(self, runbook_id: str) -> bool:
        return runbook_id in self._runbooks

    @property
    def runbook_count(self) -> int:
        return len(self._runbooks)
