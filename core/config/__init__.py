"""
Runbooks Core Config — Public API
====================================
Operator-configurable engine behaviour.
"""

from core.config.settings import (
    DEFAULT_SETTINGS,
    DUPLICATE_TASK_OVERWRITE,
    DUPLICATE_TASK_REJECT,
    RunbookSettings,
    configure_logging,
)

__all__ = [
    "RunbookSettings",
    "DEFAULT_SETTINGS",
    "DUPLICATE_TASK_OVERWRITE",
    "DUPLICATE_TASK_REJECT",
    "configure_logging",
]
