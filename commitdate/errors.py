"""Exception types shared across the package."""

from __future__ import annotations


class CommitDateError(Exception):
    """Base class for commit-date errors."""


class GitError(CommitDateError):
    """A git subprocess exited with a non-zero status."""

    def __init__(self, command: list[str], returncode: int, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr or "no output"
        super().__init__(f"git {' '.join(command)} failed (rc={returncode}): {detail}")


class PreconditionError(CommitDateError):
    """The repository is not in a state where a rewrite may start."""

    def __init__(self, message: str, code: str) -> None:
        self.code = code
        super().__init__(message)
