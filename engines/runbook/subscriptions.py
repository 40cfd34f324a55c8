"""
Runbooks Engine — Event Subscriptions
========================================
Read-side consumers of published runbook events.

Subscriptions:
- runbook.task.added.v1     → task lands on its assignee's board
- runbook.task.started.v1   → task moves to in progress
- runbook.task.completed.v1 → task leaves the board

Consumers never touch the aggregate; they see events only after
the publish sink accepted them.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from core.events.registry import SubscriberRegistry
from engines.runbook.events import (
    RUNBOOK_EVENT_TYPES,
    RUNBOOK_TASK_ADDED_V1,
    RUNBOOK_TASK_COMPLETED_V1,
    RUNBOOK_TASK_STARTED_V1,
    TaskAdded,
    TaskCompleted,
    TaskMarkedInProgress,
)
from engines.runbook.task import TaskStatus

logger = logging.getLogger("runbooks.events")


TASK_BOARD_SUBSCRIPTIONS: Dict[str, str] = {
    RUNBOOK_TASK_ADDED_V1: "handle_task_added",
    RUNBOOK_TASK_STARTED_V1: "handle_task_started",
    RUNBOOK_TASK_COMPLETED_V1: "handle_task_completed",
}


def runbook_subscriber_registry() -> SubscriberRegistry:
    """Registry that accepts subscriptions to runbook events only."""
    return SubscriberRegistry(RUNBOOK_EVENT_TYPES)


class TaskBoard:
    """
    Unfinished tasks per assignee.

    Fed from one event stream, so task ids are expected to be unique
    within it (one runbook, or a service whose runbooks do not reuse
    task ids).
    """

    def __init__(self):
        self._assignees: Dict[str, str] = {}
        self._status: Dict[str, TaskStatus] = {}

    def subscribe(self, registry: SubscriberRegistry) -> None:
        for event_type, method_name in TASK_BOARD_SUBSCRIPTIONS.items():
            registry.subscribe(
                event_type,
                getattr(self, method_name),
                name=f"TaskBoard.{method_name}",
            )

    def handle_task_added(self, event: TaskAdded) -> None:
        self._assignees[event.task_id] = event.user_id
        self._status[event.task_id] = TaskStatus.OPEN

    def handle_task_started(self, event: TaskMarkedInProgress) -> None:
        if event.task_id not in self._status:
            logger.warning(f"TaskBoard: start for unseen task {event.task_id}")
            return
        self._status[event.task_id] = TaskStatus.IN_PROGRESS

    def handle_task_completed(self, event: TaskCompleted) -> None:
        self._assignees.pop(event.task_id, None)
        self._status.pop(event.task_id, None)

    def tasks_for(self, assignee_id: str) -> List[str]:
        return sorted(
            task_id for task_id, user in self._assignees.items()
            if user == assignee_id
        )

    def status_of(self, task_id: str) -> TaskStatus:
        return self._status[task_id]

    def __len__(self) -> int:
        return len(self._status)
