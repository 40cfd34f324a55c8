"""
Runbooks Engine — Errors
===========================
Two families, never mixed:

Business rejections (CommandRejected subclasses)
    Raised while validating a command. Nothing was published,
    nothing was applied. Callers may retry with corrected input.

Integrity errors (ApplyError subclasses)
    Raised while applying an event the aggregate cannot accept.
    Programming or data errors — not modeled business failures.
"""

from __future__ import annotations

from core.commands.rejection import CommandRejected, ReasonCode, RejectionReason
from core.replay.errors import ApplyError


# ══════════════════════════════════════════════════════════════
# BUSINESS REJECTIONS
# ══════════════════════════════════════════════════════════════

class AssigneeMismatch(CommandRejected):
    """The actor of a start/complete-task command is not the assignee."""


class TaskNotInProgress(CommandRejected):
    """A complete-task command targets a task that is not IN_PROGRESS."""


class NotOwner(CommandRejected):
    """The actor of a complete-runbook command is not the owner."""


class PendingTasksExist(CommandRejected):
    """The runbook still has OPEN or IN_PROGRESS tasks."""


class TaskNotFound(CommandRejected):
    """A task command names a task the runbook does not hold."""


class DuplicateTask(CommandRejected):
    """add-task reuses an existing task_id under the REJECT policy."""


class RunbookIdMismatch(CommandRejected):
    """Envelope and payload name different runbooks."""


REJECTION_ERRORS = {
    ReasonCode.ASSIGNEE_MISMATCH: AssigneeMismatch,
    ReasonCode.TASK_NOT_IN_PROGRESS: TaskNotInProgress,
    ReasonCode.NOT_OWNER: NotOwner,
    ReasonCode.PENDING_TASKS_EXIST: PendingTasksExist,
    ReasonCode.TASK_NOT_FOUND: TaskNotFound,
    ReasonCode.DUPLICATE_TASK: DuplicateTask,
    ReasonCode.RUNBOOK_ID_MISMATCH: RunbookIdMismatch,
}


def rejection_error(reason: RejectionReason) -> CommandRejected:
    """Typed exception for a policy rejection."""
    return REJECTION_ERRORS.get(reason.code, CommandRejected)(reason)


# ══════════════════════════════════════════════════════════════
# INTEGRITY ERRORS
# ══════════════════════════════════════════════════════════════

class RunbookNotCreated(ApplyError):
    """The runbook has not processed its RunbookCreated event."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(
            f"Cannot {action}: runbook has not been created "
            f"(no RunbookCreated applied)."
        )


class UnknownTask(ApplyError, LookupError):
    """A task event references a task_id the runbook does not hold."""

    def __init__(self, task_id: str, event_type: str):
        self.task_id = task_id
        self.event_type = event_type
        super().__init__(
            f"{event_type} references unknown task '{task_id}'."
        )


class UnsupportedEvent(ApplyError, TypeError):
    """The object handed to apply() is not an event this entity handles."""

    def __init__(self, target: str, event):
        self.event = event
        super().__init__(
            f"{target} cannot apply {type(event).__name__}."
        )
