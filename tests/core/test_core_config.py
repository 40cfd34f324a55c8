"""
Runbooks Core Config — Tests
"""

import logging

import pytest

from core.config import (
    DEFAULT_SETTINGS,
    DUPLICATE_TASK_OVERWRITE,
    DUPLICATE_TASK_REJECT,
    RunbookSettings,
    configure_logging,
)


class TestRunbookSettings:
    def test_defaults(self):
        assert DEFAULT_SETTINGS.duplicate_task_policy == DUPLICATE_TASK_OVERWRITE
        assert DEFAULT_SETTINGS.rejects_duplicate_tasks is False
        assert DEFAULT_SETTINGS.log_level == "WARNING"

    def test_reject_policy(self):
        settings = RunbookSettings(duplicate_task_policy=DUPLICATE_TASK_REJECT)
        assert settings.rejects_duplicate_tasks is True

    def test_invalid_policy(self):
        with pytest.raises(ValueError):
            RunbookSettings(duplicate_task_policy="IGNORE")

    def test_invalid_log_level(self):
        with pytest.raises(ValueError):
            RunbookSettings(log_level="LOUD")

    def test_from_env(self):
        settings = RunbookSettings.from_env({
            "RUNBOOK_DUPLICATE_TASK_POLICY": " reject ",
            "RUNBOOK_LOG_LEVEL": "debug",
        })
        assert settings.duplicate_task_policy == DUPLICATE_TASK_REJECT
        assert settings.log_level == "DEBUG"

    def test_from_env_defaults(self):
        assert RunbookSettings.from_env({}) == DEFAULT_SETTINGS

    def test_from_process_environment(self, monkeypatch):
        monkeypatch.setenv("RUNBOOK_DUPLICATE_TASK_POLICY", "REJECT")
        monkeypatch.delenv("RUNBOOK_LOG_LEVEL", raising=False)
        assert RunbookSettings.from_env().rejects_duplicate_tasks is True


def test_configure_logging_sets_namespace_level():
    logger = configure_logging(RunbookSettings(log_level="DEBUG"))
    try:
        assert logger.name == "runbooks"
        assert logging.getLogger("runbooks.engine").getEffectiveLevel() == logging.DEBUG
    finally:
        logger.setLevel(logging.NOTSET)
