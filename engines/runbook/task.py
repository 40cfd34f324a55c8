"""
Runbooks Engine — Task Entity
================================
Leaf entity owned by exactly one Runbook.

Task holds state and applies its own status events. It never
validates: the Runbook checks assignee and status before it
publishes, then delegates the mutation here.

Status only moves forward: OPEN → IN_PROGRESS → COMPLETED.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from engines.runbook.errors import UnsupportedEvent
from engines.runbook.events import TaskCompleted, TaskMarkedInProgress


class TaskStatus(Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


@dataclass(frozen=True)
class TaskSnapshot:
    """Read-only view of a task."""
    task_id: str
    name: str
    description: str
    assignee_id: str
    status: TaskStatus

    def to_dict(self) -> dict:
        return {
            "task_id": self.task_id,
            "name": self.name,
            "description": self.description,
            "assignee_id": self.assignee_id,
            "status": self.status.value,
        }


class Task:

    def __init__(
        self,
        task_id: str,
        assignee_id: str,
        name: str = "",
        description: str = "",
    ):
        self._task_id = task_id
        self._assignee_id = assignee_id
        self._name = name
        self._description = description
        self._status = TaskStatus.OPEN

    @property
    def task_id(self) -> str:
        return self._task_id

    @property
    def assignee_id(self) -> str:
        return self._assignee_id

    @property
    def status(self) -> TaskStatus:
        return self._status

    @property
    def is_open(self) -> bool:
        return self._status == TaskStatus.OPEN

    @property
    def is_in_progress(self) -> bool:
        return self._status == TaskStatus.IN_PROGRESS

    @property
    def is_closed(self) -> bool:
        return self._status == TaskStatus.COMPLETED

    def apply(self, event) -> None:
        """Unconditional status change; the owning Runbook validated already."""
        if isinstance(event, TaskMarkedInProgress):
            self._status = TaskStatus.IN_PROGRESS
        elif isinstance(event, TaskCompleted):
            self._status = TaskStatus.COMPLETED
        else:
            raise UnsupportedEvent("Task", event)

    def snapshot(self) -> TaskSnapshot:
        return TaskSnapshot(
            task_id=self._task_id,
            name=self._name,
            description=self._description,
            assignee_id=self._assignee_id,
            status=self._status,
        )

    def __repr__(self) -> str:
        return (
            f"Task(task_id={self._task_id!r}, "
            f"assignee_id={self._assignee_id!r}, status={self._status.value})"
        )
