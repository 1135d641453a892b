"""Value types for validating and applying a date rewrite."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from commitdate.models.commit import Commit


class RejectionCode(str, Enum):
    FUTURE_DATE = "future_date"
    BEFORE_PREVIOUS = "before_previous"
    AFTER_NEXT = "after_next"
    INVALID_FORMAT = "invalid_format"


class RewriteState(str, Enum):
    REQUESTED = "requested"
    VALIDATING = "validating"
    REJECTED = "rejected"
    REWRITING = "rewriting"
    COMMITTED = "committed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (
            RewriteState.REJECTED,
            RewriteState.COMMITTED,
            RewriteState.FAILED,
        )


@dataclass(frozen=True)
class DateWindow:
    """Admissible interval for a new commit date. ``None`` lower bound is unbounded."""

    lower_bound: datetime | None
    upper_bound: datetime

    @property
    def is_empty(self) -> bool:
        """True when neighbors are already out of order and no date can satisfy both."""
        return self.lower_bound is not None and self.lower_bound > self.upper_bound

    def contains(self, candidate: datetime) -> bool:
        if self.lower_bound is not None and candidate < self.lower_bound:
            return False
        return candidate <= self.upper_bound


@dataclass(frozen=True)
class ValidationOutcome:
    valid: bool
    reason: str = ""
    code: RejectionCode | None = None

    @classmethod
    def ok(cls) -> ValidationOutcome:
        return cls(valid=True)

    @classmethod
    def reject(cls, code: RejectionCode, reason: str) -> ValidationOutcome:
        return cls(valid=False, reason=reason, code=code)


@dataclass(frozen=True)
class RewriteRequest:
    """A commit and date that already passed validation."""

    commit: Commit
    new_date: datetime
    window: DateWindow

    @classmethod
    def from_outcome(
        cls,
        outcome: ValidationOutcome,
        commit: Commit,
        new_date: datetime,
        window: DateWindow,
    ) -> RewriteRequest:
        if not outcome.valid:
            raise ValueError(f"Cannot build a rewrite request from a rejected date: {outcome.reason}")
        return cls(commit=commit, new_date=new_date, window=window)


@dataclass(frozen=True)
class RewriteOutcome:
    """Terminal state of one rewrite attempt."""

    state: RewriteState
    error: str = ""
    backup_refs_removed: int = 0

    @property
    def succeeded(self) -> bool:
        return self.state == RewriteState.COMMITTED
