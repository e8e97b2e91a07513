"""
Sanitizer result models.

A health policy classifies a snapshot into a :class:`Verdict`; every sanitizer
run produces exactly one immutable :class:`Outcome` that is handed to an
observability sink and then discarded.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class VerdictStatus(str, Enum):
    """Health classification of a store."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class VerdictReason(str, Enum):
    """Reasons reported by the built-in health policies."""

    FORCED = "forced"
    UNREADABLE = "unreadable"
    TOO_MANY_ENTRIES = "too_many_entries"
    TOO_LARGE = "too_large"


class ActionTaken(str, Enum):
    """Mutation performed on the store during a run."""

    NONE = "none"
    CLEARED = "cleared"


class ErrorKind(str, Enum):
    """Failures recorded on an outcome instead of being raised."""

    UNREADABLE = "unreadable"
    CLEAR_FAILED = "clear_failed"


class Verdict(BaseModel):
    """A health policy's classification of a store snapshot."""

    status: VerdictStatus
    reason: str | None = Field(default=None, description="Why the store is unhealthy")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_reason(self) -> Verdict:
        if self.status is VerdictStatus.UNHEALTHY and not self.reason:
            raise ValueError("an unhealthy verdict needs a reason")
        if self.status is VerdictStatus.HEALTHY and self.reason is not None:
            raise ValueError("a healthy verdict carries no reason")
        return self

    @classmethod
    def healthy(cls) -> Verdict:
        return cls(status=VerdictStatus.HEALTHY)

    @classmethod
    def unhealthy(cls, reason: str | VerdictReason) -> Verdict:
        value = reason.value if isinstance(reason, VerdictReason) else reason
        return cls(status=VerdictStatus.UNHEALTHY, reason=value)

    @property
    def is_healthy(self) -> bool:
        return self.status is VerdictStatus.HEALTHY

    def __str__(self) -> str:
        if self.is_healthy:
            return "Healthy"
        return f"Unhealthy({self.reason})"


class Outcome(BaseModel):
    """Immutable record of one sanitizer run."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    store_name: str = Field(description="Store that was assessed")
    verdict: Verdict
    action_taken: ActionTaken = Field(default=ActionTaken.NONE)
    error: ErrorKind | None = Field(default=None)
    error_detail: str | None = Field(default=None, description="Message of the underlying error")
    entries_before: int | None = Field(default=None, ge=0, description="Entry count before the run")
    duration_ms: float = Field(default=0.0, ge=0.0)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_consistency(self) -> Outcome:
        if self.action_taken is ActionTaken.CLEARED and self.verdict.is_healthy:
            raise ValueError("a healthy store is never cleared")
        if self.error is ErrorKind.CLEAR_FAILED and self.action_taken is ActionTaken.CLEARED:
            raise ValueError("a failed clear cannot be reported as cleared")
        return self

    @property
    def cleared(self) -> bool:
        return self.action_taken is ActionTaken.CLEARED

    @property
    def succeeded(self) -> bool:
        """False only when the store needed clearing and the clear failed."""
        return self.error is not ErrorKind.CLEAR_FAILED
