"""
Runbooks Command Layer — Rejection Model
===========================================
Structured rejection reasons for denied commands.

A RejectionReason is an explanation structure, not an event.
CommandRejected is the exception that carries it out of a
command handler.

Every rejection must be:
- Deterministic (same state + command → same rejection)
- Machine-readable (code)
- Human-readable (message)
- Attributable (policy_name)
"""

from __future__ import annotations

from dataclasses import dataclass


# ══════════════════════════════════════════════════════════════
# REJECTION REASON (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """
    Structured reason for command rejection.

    Fields:
        code:        Machine-readable rejection code (e.g. 'NOT_OWNER').
        message:     Human-readable explanation.
        policy_name: Name of the policy that caused rejection.
    """

    code: str
    message: str
    policy_name: str

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "policy_name": self.policy_name,
        }


# ══════════════════════════════════════════════════════════════
# STANDARD REJECTION CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """
    Known rejection codes.

    Convention: SCREAMING_SNAKE_CASE.
    """

    # ── Task ──────────────────────────────────────────────────
    ASSIGNEE_MISMATCH = "ASSIGNEE_MISMATCH"
    TASK_NOT_IN_PROGRESS = "TASK_NOT_IN_PROGRESS"
    TASK_NOT_FOUND = "TASK_NOT_FOUND"
    DUPLICATE_TASK = "DUPLICATE_TASK"

    # ── Runbook ───────────────────────────────────────────────
    NOT_OWNER = "NOT_OWNER"
    PENDING_TASKS_EXIST = "PENDING_TASKS_EXIST"

    # ── Envelope ──────────────────────────────────────────────
    RUNBOOK_ID_MISMATCH = "RUNBOOK_ID_MISMATCH"


# ══════════════════════════════════════════════════════════════
# REJECTION EXCEPTION
# ══════════════════════════════════════════════════════════════

class CommandRejected(Exception):
    """
    Raised by a command handler when a business rule denies the command.

    Raised before any event is published; the aggregate is unchanged.
    """

    def __init__(self, reason: RejectionReason):
        self.reason = reason
        super().__init__(f"[{reason.code}] {reason.message}")

    @property
    def code(self) -> str:
        return self.reason.code
