"""
Runbooks Core Config — Engine Settings
=========================================
Operator-configurable behaviour, never hardcoded in engine logic.

Sources:
- Explicit construction (tests, embedding applications)
- Environment variables via RunbookSettings.from_env()

Environment:
    RUNBOOK_DUPLICATE_TASK_POLICY   OVERWRITE | REJECT   (default OVERWRITE)
    RUNBOOK_LOG_LEVEL               logging level name   (default WARNING)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional


# ══════════════════════════════════════════════════════════════
# DUPLICATE TASK POLICIES
# ══════════════════════════════════════════════════════════════

DUPLICATE_TASK_OVERWRITE = "OVERWRITE"
DUPLICATE_TASK_REJECT = "REJECT"

VALID_DUPLICATE_TASK_POLICIES = frozenset({
    DUPLICATE_TASK_OVERWRITE,
    DUPLICATE_TASK_REJECT,
})

VALID_LOG_LEVELS = frozenset({
    "CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG",
})

LOGGER_NAMESPACE = "runbooks"


# ══════════════════════════════════════════════════════════════
# SETTINGS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RunbookSettings:
    """
    Runbook engine settings.

    Fields:
        duplicate_task_policy: What adding an existing task_id does.
                               OVERWRITE replaces the task with a fresh
                               OPEN one; REJECT raises DuplicateTask.
        log_level:             Level for the 'runbooks' logger namespace.
    """

    duplicate_task_policy: str = DUPLICATE_TASK_OVERWRITE
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.duplicate_task_policy not in VALID_DUPLICATE_TASK_POLICIES:
            raise ValueError(
                f"duplicate_task_policy '{self.duplicate_task_policy}' not valid. "
                f"Must be one of: {sorted(VALID_DUPLICATE_TASK_POLICIES)}"
            )
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level '{self.log_level}' not valid. "
                f"Must be one of: {sorted(VALID_LOG_LEVELS)}"
            )

    @property
    def rejects_duplicate_tasks(self) -> bool:
        return self.duplicate_task_policy == DUPLICATE_TASK_REJECT

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> RunbookSettings:
        """Build settings from RUNBOOK_* environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            duplicate_task_policy=env.get(
                "RUNBOOK_DUPLICATE_TASK_POLICY", DUPLICATE_TASK_OVERWRITE
            ).strip().upper(),
            log_level=env.get("RUNBOOK_LOG_LEVEL", "WARNING").strip().upper(),
        )


DEFAULT_SETTINGS = RunbookSettings()


def configure_logging(settings: RunbookSettings) -> logging.Logger:
    """Apply settings.log_level to the 'runbooks' logger namespace."""
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(settings.log_level)
    return logger
