"""
Runbooks Engine — Policies
=============================
Invariant checks evaluated by the Runbook before it publishes.

Each policy returns None when the rule holds, or a RejectionReason
when it does not. Policies read state; they never mutate it.
"""

from __future__ import annotations

from typing import Mapping, Optional

from core.commands.rejection import ReasonCode, RejectionReason
from engines.runbook.task import Task


def task_must_exist_policy(
    tasks: Mapping[str, Task],
    task_id: str,
) -> Optional[RejectionReason]:
    if task_id not in tasks:
        return RejectionReason(
            code=ReasonCode.TASK_NOT_FOUND,
            message=f"Task '{task_id}' does not exist in this runbook.",
            policy_name="task_must_exist_policy",
        )
    return None


def task_must_be_new_policy(
    tasks: Mapping[str, Task],
    task_id: str,
) -> Optional[RejectionReason]:
    """Only evaluated under the REJECT duplicate task policy."""
    if task_id in tasks:
        return RejectionReason(
            code=ReasonCode.DUPLICATE_TASK,
            message=f"Task '{task_id}' already exists in this runbook.",
            policy_name="task_must_be_new_policy",
        )
    return None


def assignee_must_match_policy(
    task: Task,
    user_id: str,
) -> Optional[RejectionReason]:
    """
    Only the assignee may start or complete a task.
    """
    if task.assignee_id != user_id:
        return RejectionReason(
            code=ReasonCode.ASSIGNEE_MISMATCH,
            message=(
                f"Task '{task.task_id}' is assigned to "
                f"'{task.assignee_id}', not '{user_id}'."
            ),
            policy_name="assignee_must_match_policy",
        )
    return None


def task_must_be_in_progress_policy(task: Task) -> Optional[RejectionReason]:
    if not task.is_in_progress:
        return RejectionReason(
            code=ReasonCode.TASK_NOT_IN_PROGRESS,
            message=(
                f"Task '{task.task_id}' is {task.status.value}. "
                f"Only IN_PROGRESS tasks can be completed."
            ),
            policy_name="task_must_be_in_progress_policy",
        )
    return None


def owner_must_match_policy(
    owner_id: str,
    user_id: str,
) -> Optional[RejectionReason]:
    if owner_id != user_id:
        return RejectionReason(
            code=ReasonCode.NOT_OWNER,
            message=f"Runbook is owned by '{owner_id}', not '{user_id}'.",
            policy_name="owner_must_match_policy",
        )
    return None


def all_tasks_completed_policy(
    tasks: Mapping[str, Task],
) -> Optional[RejectionReason]:
    """
    A runbook closes only when every task is COMPLETED.
    An empty runbook has nothing pending.
    """
    pending = sorted(
        task_id for task_id, task in tasks.items() if not task.is_closed
    )
    if pending:
        return RejectionReason(
            code=ReasonCode.PENDING_TASKS_EXIST,
            message=(
                f"Runbook has {len(pending)} pending task(s): "
                f"{', '.join(pending)}."
            ),
            policy_name="all_tasks_completed_policy",
        )
    return None


def command_targets_runbook_policy(
    aggregate_id: str,
    runbook_id: str,
) -> Optional[RejectionReason]:
    """The envelope's aggregate_id and the payload's runbook_id must agree."""
    if aggregate_id != runbook_id:
        return RejectionReason(
            code=ReasonCode.RUNBOOK_ID_MISMATCH,
            message=(
                f"Command addressed to runbook '{aggregate_id}' "
                f"carries runbook_id '{runbook_id}'."
            ),
            policy_name="command_targets_runbook_policy",
        )
    return None
