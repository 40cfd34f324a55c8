"""
Runbooks Engine — Runbook Aggregate
======================================
Consistency boundary for a runbook and the tasks it owns.

Every command handler follows the same path:
    validate → build event → publish → apply

- Validation happens here, once, before anything is published.
- publish() raising aborts the command; nothing is applied.
- apply() is a pure state mutation shared by live handling and replay.

A Runbook is obtained only through Runbook.create() / from_command()
or by replaying history with Runbook.from_history().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from core.commands.rejection import RejectionReason
from core.config.settings import DEFAULT_SETTINGS, RunbookSettings
from core.events.publisher import EventPublisher
from core.replay.event_replayer import replay_events
from engines.runbook.commands import (
    AddTask,
    CompleteRunbook,
    CompleteTask,
    CreateRunbook,
    StartTask,
)
from engines.runbook.errors import (
    RunbookNotCreated,
    UnknownTask,
    UnsupportedEvent,
    rejection_error,
)
from engines.runbook.events import (
    RunbookCompleted,
    RunbookCreated,
    TaskAdded,
    TaskCompleted,
    TaskMarkedInProgress,
    event_from_dict,
)
from engines.runbook.policies import (
    all_tasks_completed_policy,
    assignee_must_match_policy,
    owner_must_match_policy,
    task_must_be_in_progress_policy,
    task_must_be_new_policy,
    task_must_exist_policy,
)
from engines.runbook.task import Task, TaskSnapshot

logger = logging.getLogger("runbooks.engine")


def _decode(record: Any):
    return event_from_dict(record) if isinstance(record, dict) else record


@dataclass(frozen=True)
class RunbookSnapshot:
    """
    Read-only copy of runbook state. Holds no reference into the aggregate.

    Tasks are stored as (task_id, TaskSnapshot) pairs sorted by id, so
    snapshots compare and hash by value.
    """
    runbook_id: str
    project_id: str
    name: str
    owner_id: str
    completed: bool
    task_items: Tuple[Tuple[str, TaskSnapshot], ...] = ()

    @property
    def tasks(self) -> Mapping[str, TaskSnapshot]:
        return MappingProxyType(dict(self.task_items))

    def to_dict(self) -> dict:
        return {
            "runbook_id": self.runbook_id,
            "project_id": self.project_id,
            "name": self.name,
            "owner_id": self.owner_id,
            "completed": self.completed,
            "tasks": {
                task_id: task.to_dict()
                for task_id, task in self.task_items
            },
        }


class Runbook:

    def __init__(
        self,
        publisher: Optional[EventPublisher] = None,
        settings: Optional[RunbookSettings] = None,
    ):
        self._publisher = publisher
        self._settings = settings or DEFAULT_SETTINGS
        self._runbook_id: Optional[str] = None
        self._project_id: Optional[str] = None
        self._name: Optional[str] = None
        self._owner_id: Optional[str] = None
        self._completed = False
        self._tasks: Optional[Dict[str, Task]] = None

    # ══════════════════════════════════════════════════════════
    # CONSTRUCTION
    # ══════════════════════════════════════════════════════════

    @classmethod
    def create(
        cls,
        project_id: str,
        runbook_id: str,
        name: str,
        owner_id: str,
        publisher: EventPublisher,
        settings: Optional[RunbookSettings] = None,
    ) -> Runbook:
        """Create-runbook command handler; always succeeds for valid input."""
        return cls.from_command(
            CreateRunbook(project_id, runbook_id, name, owner_id),
            publisher,
            settings,
        )

    @classmethod
    def from_command(
        cls,
        command: CreateRunbook,
        publisher: EventPublisher,
        settings: Optional[RunbookSettings] = None,
    ) -> Runbook:
        runbook = cls(publisher, settings)
        runbook._emit(RunbookCreated(
            project_id=command.project_id,
            runbook_id=command.runbook_id,
            name=command.name,
            owner_id=command.owner_id,
        ))
        return runbook

    @classmethod
    def from_history(
        cls,
        events: Iterable[Any],
        publisher: Optional[EventPublisher] = None,
        settings: Optional[RunbookSettings] = None,
    ) -> Runbook:
        """
        Rebuild a runbook by applying events in order.

        Accepts event objects or their to_dict() form. Nothing is
        validated or published. Pass a publisher to keep handling
        commands on the rebuilt instance.
        """
        runbook = cls(publisher, settings)
        replay_events(runbook, events, decode=_decode)
        return runbook

    # ══════════════════════════════════════════════════════════
    # STATE ACCESS (read-only)
    # ══════════════════════════════════════════════════════════

    @property
    def runbook_id(self) -> Optional[str]:
        return self._runbook_id

    @property
    def project_id(self) -> Optional[str]:
        return self._project_id

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def owner_id(self) -> Optional[str]:
        return self._owner_id

    @property
    def is_created(self) -> bool:
        return self._tasks is not None

    @property
    def is_completed(self) -> bool:
        return self._completed

    @property
    def tasks(self) -> Dict[str, TaskSnapshot]:
        """Copy of the task mapping; changing it does not touch the runbook."""
        return {
            task_id: task.snapshot()
            for task_id, task in (self._tasks or {}).items()
        }

    @property
    def task_count(self) -> int:
        return len(self._tasks or {})

    def get_task(self, task_id: str) -> Optional[TaskSnapshot]:
        task = (self._tasks or {}).get(task_id)
        return task.snapshot() if task is not None else None

    def snapshot(self) -> RunbookSnapshot:
        self._require_created("take a snapshot")
        return RunbookSnapshot(
            runbook_id=self._runbook_id,
            project_id=self._project_id,
            name=self._name,
            owner_id=self._owner_id,
            completed=self._completed,
            task_items=tuple(sorted(self.tasks.items())),
        )

    # ══════════════════════════════════════════════════════════
    # HANDLE
    # ══════════════════════════════════════════════════════════
    #
    # The positional handlers build the same typed request that
    # arrives through handle(); validation is identical either way.

    def handle(self, command: Any):
        """Route a typed request to its handler. Returns the published event."""
        if isinstance(command, CreateRunbook):
            raise TypeError(
                "CreateRunbook creates a new aggregate; "
                "use Runbook.from_command()."
            )
        handler = self._HANDLERS.get(type(command))
        if handler is None:
            raise TypeError(f"Runbook cannot handle {type(command).__name__}.")
        return handler(self, command)

    def add_task(
        self,
        task_id: str,
        name: str,
        description: str,
        assignee_id: str,
    ) -> TaskAdded:
        return self._add_task(AddTask(task_id, name, description, assignee_id))

    def start_task(self, task_id: str, user_id: str) -> TaskMarkedInProgress:
        return self._start_task(StartTask(task_id, user_id))

    def complete_task(self, task_id: str, user_id: str) -> TaskCompleted:
        return self._complete_task(CompleteTask(task_id, user_id))

    def complete_runbook(self, runbook_id: str, user_id: str) -> RunbookCompleted:
        return self._complete_runbook(CompleteRunbook(runbook_id, user_id))

    def _add_task(self, request: AddTask) -> TaskAdded:
        tasks = self._require_created("add a task")
        if self._settings.rejects_duplicate_tasks:
            self._enforce(task_must_be_new_policy(tasks, request.task_id))

        return self._emit(TaskAdded(
            task_id=request.task_id,
            name=request.name,
            description=request.description,
            user_id=request.assignee_id,
        ))

    def _start_task(self, request: StartTask) -> TaskMarkedInProgress:
        task = self._task_for_command(request.task_id)
        self._enforce(assignee_must_match_policy(task, request.user_id))

        return self._emit(TaskMarkedInProgress(task_id=request.task_id))

    def _complete_task(self, request: CompleteTask) -> TaskCompleted:
        task = self._task_for_command(request.task_id)
        self._enforce(assignee_must_match_policy(task, request.user_id))
        self._enforce(task_must_be_in_progress_policy(task))

        return self._emit(
            TaskCompleted(task_id=request.task_id, user_id=request.user_id)
        )

    def _complete_runbook(self, request: CompleteRunbook) -> RunbookCompleted:
        tasks = self._require_created("complete the runbook")
        self._enforce(owner_must_match_policy(self._owner_id, request.user_id))
        self._enforce(all_tasks_completed_policy(tasks))

        return self._emit(RunbookCompleted(runbook_id=request.runbook_id))

    _HANDLERS = {
        AddTask: _add_task,
        StartTask: _start_task,
        CompleteTask: _complete_task,
        CompleteRunbook: _complete_runbook,
    }

    def _task_for_command(self, task_id: str) -> Task:
        tasks = self._require_created("act on a task")
        self._enforce(task_must_exist_policy(tasks, task_id))
        return tasks[task_id]

    def _enforce(self, reason: Optional[RejectionReason]) -> None:
        if reason is None:
            return
        logger.debug(
            f"Runbook {self._runbook_id} rejected command: "
            f"[{reason.code}] {reason.message}"
        )
        raise rejection_error(reason)

    def _emit(self, event):
        if self._publisher is None:
            raise RuntimeError(
                "Runbook has no publisher; it can replay history "
                "but cannot handle commands."
            )
        # publish first: a failing sink leaves the runbook untouched
        self._publisher.publish(event)
        self.apply(event)
        return event

    # ══════════════════════════════════════════════════════════
    # APPLY
    # ══════════════════════════════════════════════════════════

    def apply(self, event) -> None:
        """
        Mutate state from an event. No validation, no publishing.

        Raises ApplyError subclasses when the event cannot apply to the
        current state (history out of order or corrupt).
        """
        if isinstance(event, RunbookCreated):
            self._project_id = event.project_id
            self._runbook_id = event.runbook_id
            self._name = event.name
            self._owner_id = event.owner_id
            self._completed = False
            self._tasks = {}

        elif isinstance(event, TaskAdded):
            tasks = self._require_created(f"apply {event.event_type}")
            tasks[event.task_id] = Task(
                task_id=event.task_id,
                assignee_id=event.user_id,
                name=event.name,
                description=event.description,
            )

        elif isinstance(event, (TaskMarkedInProgress, TaskCompleted)):
            tasks = self._require_created(f"apply {event.event_type}")
            task = tasks.get(event.task_id)
            if task is None:
                raise UnknownTask(event.task_id, event.event_type)
            task.apply(event)

        elif isinstance(event, RunbookCompleted):
            self._require_created(f"apply {event.event_type}")
            self._completed = True

        else:
            raise UnsupportedEvent("Runbook", event)

        logger.debug(f"Runbook {self._runbook_id} applied {event.event_type}")

    def _require_created(self, action: str) -> Dict[str, Task]:
        if self._tasks is None:
            raise RunbookNotCreated(action)
        return self._tasks

    def __repr__(self) -> str:
        return (
            f"Runbook(runbook_id={self._runbook_id!r}, "
            f"tasks={self.task_count}, completed={self._completed})"
        )
