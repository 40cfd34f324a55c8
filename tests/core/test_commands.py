"""
Runbooks Command Layer — Tests
=================================
1. Command envelope structural validation
2. RejectionReason / CommandOutcome invariants
3. CommandBus routing: accepted, rejected, no handler, propagation
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

import pytest

from core.commands.base import Command, split_command_type
from core.commands.bus import CommandBus, CommandResult, NoHandlerRegistered
from core.commands.outcomes import CommandOutcome, CommandStatus
from core.commands.rejection import CommandRejected, ReasonCode, RejectionReason


# ══════════════════════════════════════════════════════════════
# TEST INFRASTRUCTURE — STUBS
# ══════════════════════════════════════════════════════════════

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _command(**overrides) -> Command:
    fields = {
        "command_id": uuid.uuid4(),
        "command_type": "runbook.task.start.request",
        "aggregate_id": "runbook-1",
        "actor_id": "user-1",
        "payload": {"task_id": "task-1"},
        "issued_at": NOW,
        "correlation_id": uuid.uuid4(),
        "source_engine": "runbook",
    }
    fields.update(overrides)
    return Command(**fields)


class StubEngineService:
    """Records execute calls, optionally raises."""

    def __init__(self, return_value: Any = "executed", error: Exception = None):
        self.executed_commands = []
        self.return_value = return_value
        self.error = error

    def execute(self, command: Command) -> Any:
        self.executed_commands.append(command)
        if self.error is not None:
            raise self.error
        return self.return_value


def _reason(code=ReasonCode.NOT_OWNER) -> RejectionReason:
    return RejectionReason(
        code=code, message="not allowed", policy_name="test_policy",
    )


# ══════════════════════════════════════════════════════════════
# COMMAND ENVELOPE
# ══════════════════════════════════════════════════════════════

class TestCommandEnvelope:
    def test_valid_command(self):
        command = _command()
        assert command.source_engine == "runbook"
        assert command.domain == "task"
        assert command.action == "start"

    def test_split_command_type(self):
        assert split_command_type("runbook.runbook.complete.request") == (
            "runbook", "runbook", "complete",
        )

    def test_frozen(self):
        command = _command()
        with pytest.raises(Exception):
            command.actor_id = "someone-else"  # type: ignore[misc]

    @pytest.mark.parametrize("overrides", [
        {"command_id": "not-a-uuid"},
        {"command_type": "runbook.task.start"},
        {"command_type": "runbook.start.request"},
        {"command_type": "billing.task.start.request"},
        {"command_type": "runbook..start.request"},
        {"command_type": "runbook.task.start.now.request"},
        {"issued_at": "2026-01-01"},
        {"aggregate_id": ""},
        {"actor_id": ""},
        {"correlation_id": "nope"},
    ])
    def test_invalid_structure(self, overrides):
        with pytest.raises(ValueError):
            _command(**overrides)

    def test_payload_must_be_dict(self):
        with pytest.raises(TypeError):
            _command(payload=["task-1"])


# ══════════════════════════════════════════════════════════════
# REJECTION + OUTCOME
# ══════════════════════════════════════════════════════════════

class TestRejection:
    def test_reason_requires_fields(self):
        with pytest.raises(ValueError):
            RejectionReason(code="", message="m", policy_name="p")
        with pytest.raises(ValueError):
            RejectionReason(code="C", message="", policy_name="p")
        with pytest.raises(ValueError):
            RejectionReason(code="C", message="m", policy_name="")

    def test_reason_to_dict(self):
        assert _reason().to_dict() == {
            "code": "NOT_OWNER",
            "message": "not allowed",
            "policy_name": "test_policy",
        }

    def test_command_rejected_carries_reason(self):
        exc = CommandRejected(_reason())
        assert exc.code == ReasonCode.NOT_OWNER
        assert "not allowed" in str(exc)


class TestOutcome:
    def test_rejected_requires_reason(self):
        with pytest.raises(ValueError):
            CommandOutcome(
                command_id=uuid.uuid4(),
                status=CommandStatus.REJECTED,
                reason=None,
                occurred_at=NOW,
            )

    def test_accepted_forbids_reason(self):
        with pytest.raises(ValueError):
            CommandOutcome(
                command_id=uuid.uuid4(),
                status=CommandStatus.ACCEPTED,
                reason=_reason(),
                occurred_at=NOW,
            )

    def test_flags(self):
        outcome = CommandOutcome.accepted(uuid.uuid4())
        assert outcome.is_accepted
        assert not outcome.is_rejected
        assert outcome.occurred_at.tzinfo is timezone.utc

    def test_rejected_factory_keeps_reason(self):
        outcome = CommandOutcome.rejected(uuid.uuid4(), _reason())
        assert outcome.status is CommandStatus.REJECTED
        assert outcome.reason == _reason()


# ══════════════════════════════════════════════════════════════
# COMMAND BUS
# ══════════════════════════════════════════════════════════════

class TestCommandBus:
    def test_accepted(self):
        bus = CommandBus()
        service = StubEngineService()
        bus.register_handler("runbook.task.start.request", service)

        command = _command()
        result = bus.handle(command)

        assert isinstance(result, CommandResult)
        assert result.is_accepted
        assert result.outcome.command_id == command.command_id
        assert result.execution_result == "executed"
        assert service.executed_commands == [command]

    def test_rejected(self):
        bus = CommandBus()
        bus.register_handler(
            "runbook.task.start.request",
            StubEngineService(error=CommandRejected(_reason())),
        )

        result = bus.handle(_command())

        assert result.is_rejected
        assert result.outcome.reason == _reason()
        assert result.execution_result is None

    def test_no_handler(self):
        with pytest.raises(NoHandlerRegistered):
            CommandBus().handle(_command())

    def test_other_errors_propagate(self):
        bus = CommandBus()
        bus.register_handler(
            "runbook.task.start.request",
            StubEngineService(error=ConnectionError("sink down")),
        )
        with pytest.raises(ConnectionError):
            bus.handle(_command())

    def test_register_requires_request_suffix(self):
        with pytest.raises(ValueError):
            CommandBus().register_handler("runbook.task.started.v1", StubEngineService())

    def test_register_requires_execute(self):
        with pytest.raises(TypeError):
            CommandBus().register_handler("runbook.task.start.request", object())
