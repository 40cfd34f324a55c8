"""
Runbooks Engine — Task Entity and Policy Tests
=================================================
Task applies status events unconditionally; policies decide.
"""

import pytest

from core.commands.rejection import ReasonCode
from engines.runbook.errors import UnsupportedEvent
from engines.runbook.events import TaskAdded, TaskCompleted, TaskMarkedInProgress
from engines.runbook.policies import (
    all_tasks_completed_policy,
    assignee_must_match_policy,
    owner_must_match_policy,
    task_must_be_in_progress_policy,
    task_must_be_new_policy,
    task_must_exist_policy,
)
from engines.runbook.task import Task, TaskStatus


class TestTask:
    def test_new_task_is_open(self):
        task = Task("t", "u")
        assert task.status is TaskStatus.OPEN
        assert task.is_open
        assert not task.is_in_progress
        assert not task.is_closed
        assert task.assignee_id == "u"

    def test_mark_in_progress(self):
        task = Task("t", "u")
        task.apply(TaskMarkedInProgress("t"))
        assert task.is_in_progress

    def test_complete(self):
        task = Task("t", "u")
        task.apply(TaskMarkedInProgress("t"))
        task.apply(TaskCompleted("t", "u"))
        assert task.is_closed

    def test_complete_is_unconditional(self):
        task = Task("t", "u")
        task.apply(TaskCompleted("t", "somebody"))
        assert task.status is TaskStatus.COMPLETED

    def test_rejects_foreign_event(self):
        task = Task("t", "u")
        with pytest.raises(UnsupportedEvent):
            task.apply(TaskAdded("t", "n", "d", "u"))

    def test_snapshot(self):
        task = Task("t", "u", name="deploy", description="roll out v2")
        snap = task.snapshot()
        assert snap.task_id == "t"
        assert snap.name == "deploy"
        assert snap.description == "roll out v2"
        assert snap.to_dict()["status"] == "OPEN"


class TestPolicies:
    def _tasks(self, **statuses):
        tasks = {}
        for task_id, status in statuses.items():
            task = Task(task_id, "u")
            if status in ("IN_PROGRESS", "COMPLETED"):
                task.apply(TaskMarkedInProgress(task_id))
            if status == "COMPLETED":
                task.apply(TaskCompleted(task_id, "u"))
            tasks[task_id] = task
        return tasks

    def test_assignee_match(self):
        assert assignee_must_match_policy(Task("t", "u"), "u") is None

    def test_assignee_mismatch(self):
        reason = assignee_must_match_policy(Task("t", "u"), "x")
        assert reason.code == ReasonCode.ASSIGNEE_MISMATCH

    def test_in_progress(self):
        tasks = self._tasks(a="OPEN", b="IN_PROGRESS")
        assert task_must_be_in_progress_policy(tasks["b"]) is None
        reason = task_must_be_in_progress_policy(tasks["a"])
        assert reason.code == ReasonCode.TASK_NOT_IN_PROGRESS
        assert "OPEN" in reason.message

    def test_owner(self):
        assert owner_must_match_policy("o", "o") is None
        assert owner_must_match_policy("o", "x").code == ReasonCode.NOT_OWNER

    def test_all_completed(self):
        assert all_tasks_completed_policy({}) is None
        assert all_tasks_completed_policy(self._tasks(a="COMPLETED")) is None

    def test_pending_lists_task_ids(self):
        reason = all_tasks_completed_policy(
            self._tasks(a="COMPLETED", b="OPEN", c="IN_PROGRESS")
        )
        assert reason.code == ReasonCode.PENDING_TASKS_EXIST
        assert "b, c" in reason.message

    def test_existence(self):
        tasks = self._tasks(a="OPEN")
        assert task_must_exist_policy(tasks, "a") is None
        assert task_must_exist_policy(tasks, "z").code == ReasonCode.TASK_NOT_FOUND
        assert task_must_be_new_policy(tasks, "z") is None
        assert task_must_be_new_policy(tasks, "a").code == ReasonCode.DUPLICATE_TASK
