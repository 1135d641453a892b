"""Structured result of a non-interactive run."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum


class ErrorCode(str, Enum):
    INVALID_DATE_FORMAT = "INVALID_DATE_FORMAT"
    COMMIT_NOT_FOUND = "COMMIT_NOT_FOUND"
    PUSHED_REQUIRES_CONFIRM = "PUSHED_REQUIRES_CONFIRM"
    DATE_PARSING_ERROR = "DATE_PARSING_ERROR"
    DATE_OUT_OF_RANGE = "DATE_OUT_OF_RANGE"
    EXECUTION_ERROR = "EXECUTION_ERROR"
    # Raised before a run starts
    NOT_A_REPOSITORY = "NOT_A_REPOSITORY"
    UNCOMMITTED_CHANGES = "UNCOMMITTED_CHANGES"
    MISSING_REQUIRED_OPTIONS = "MISSING_REQUIRED_OPTIONS"


@dataclass(frozen=True)
class ChangedCommit:
    hash: str
    message: str
    old_date: str
    new_date: str
    is_pushed: bool

    def to_dict(self) -> dict:
        return {
            "hash": self.hash,
            "message": self.message,
            "oldDate": self.old_date,
            "newDate": self.new_date,
            "isPushed": self.is_pushed,
        }


@dataclass(frozen=True)
class RunResult:
    success: bool
    commit: ChangedCommit | None = None
    error: str = ""
    error_code: ErrorCode | None = None

    @classmethod
    def succeeded(cls, commit: ChangedCommit) -> RunResult:
        return cls(success=True, commit=commit)

    @classmethod
    def failed(cls, error_code: ErrorCode, error: str) -> RunResult:
        return cls(success=False, error=error, error_code=error_code)

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    def to_dict(self) -> dict:
        doc: dict = {"success": self.success}
        if self.commit is not None:
            doc["commit"] = self.commit.to_dict()
        if self.error:
            doc["error"] = self.error
        if self.error_code is not None:
            doc["errorCode"] = self.error_code.value
        return doc

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    def summary(self) -> str:
        """One-line human readable form."""
        if not self.success:
            return f"Error: {self.error}"
        assert self.commit is not None
        return (
            f"Success: Changed date for commit {self.commit.hash} "
            f"from {self.commit.old_date} to {self.commit.new_date}"
        )
