"""Drives select -> validate -> rewrite -> refresh cycles."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol

from commitdate.errors import GitError
from commitdate.models.commit import Commit, CommitScope
from commitdate.models.result import ChangedCommit, ErrorCode, RunResult
from commitdate.models.rewrite import DateWindow, RewriteState
from commitdate.services.commit_service import CommitService, find_in, neighbors
from commitdate.services.date_validator import DateValidator, same_minute, to_iso
from commitdate.services.rewrite_service import RewriteService

logger = logging.getLogger(__name__)


class CycleStatus(str, Enum):
    COMMITTED = "committed"
    UNCHANGED = "unchanged"
    CANCELLED = "cancelled"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class CycleResult:
    status: CycleStatus
    commit: Commit
    new_date: datetime | None = None
    error: str = ""


class Prompter(Protocol):
    """User interaction needed by the interactive loop."""

    def confirm_pushed_mode(self) -> bool: ...

    def select_commit(self, commits: list[Commit], allow_pushed: bool) -> Commit: ...

    def confirm_pushed_commit(self, commit: Commit) -> bool: ...

    def prompt_new_date(self, commit: Commit, window: DateWindow) -> datetime: ...

    def confirm_changes(self, commit: Commit, new_date: datetime) -> bool: ...

    def ask_continue(self) -> bool: ...

    def show_no_commits(self, scope: CommitScope) -> None: ...

    def show_result(self, result: CycleResult) -> None: ...

    def show_error(self, message: str) -> None: ...


class SessionService:
    """Runs rewrite cycles against a freshly fetched commit listing."""

    def __init__(
        self,
        commit_service: CommitService,
        validator: DateValidator,
        rewrite_service: RewriteService,
    ) -> None:
        self._commits = commit_service
        self._validator = validator
        self._rewriter = rewrite_service

    async def run_cycle(
        self, prompter: Prompter, commits: list[Commit], allow_pushed: bool
    ) -> CycleResult:
        """One interactive cycle over ``commits``. Declining any prompt cancels it."""
        commit = prompter.select_commit(commits, allow_pushed)
        if commit.is_pushed and not prompter.confirm_pushed_commit(commit):
            return CycleResult(status=CycleStatus.CANCELLED, commit=commit)

        previous, following = neighbors(commits, commit)
        prev_date = previous.author_date if previous else None
        next_date = following.author_date if following else None
        window = self._validator.compute_window(prev_date, next_date)

        new_date = prompter.prompt_new_date(commit, window)
        if same_minute(new_date, commit.author_date):
            return CycleResult(status=CycleStatus.UNCHANGED, commit=commit, new_date=new_date)

        if not prompter.confirm_changes(commit, new_date):
            return CycleResult(status=CycleStatus.CANCELLED, commit=commit, new_date=new_date)

        outcome = await self._rewriter.validate_and_rewrite(commit, new_date, prev_date, next_date)
        status = {
            RewriteState.COMMITTED: CycleStatus.COMMITTED,
            RewriteState.REJECTED: CycleStatus.REJECTED,
        }.get(outcome.state, CycleStatus.FAILED)
        return CycleResult(status=status, commit=commit, new_date=new_date, error=outcome.error)

    async def run_interactive(
        self, prompter: Prompter, scope: CommitScope, count: int
    ) -> int:
        """Loop over cycles until the user stops. Returns the number of rewrites made."""
        allow_pushed = scope == CommitScope.ALL
        if allow_pushed and not prompter.confirm_pushed_mode():
            return 0

        committed = 0
        try:
            commits = await self._commits.list_commits(scope, count)
            while commits:
                result = await self.run_cycle(prompter, commits, allow_pushed)
                prompter.show_result(result)
                if result.status == CycleStatus.FAILED:
                    break
                if result.status == CycleStatus.COMMITTED:
                    committed += 1

                if not prompter.ask_continue():
                    return committed
                # Hashes from the previous cycle may be stale
                commits = await self._commits.list_commits(scope, count)
            else:
                prompter.show_no_commits(scope)
        except GitError as e:
            prompter.show_error(str(e))
        return committed

    async def run_once(
        self,
        token: str,
        date_text: str,
        confirmed: bool = False,
        allow_pushed: bool = False,
        limit: int = 100,
    ) -> RunResult:
        """Execute exactly one non-interactive cycle and report a structured result."""
        format_check = self._validator.validate_format(date_text)
        if not format_check.valid:
            return RunResult.failed(ErrorCode.INVALID_DATE_FORMAT, format_check.reason)

        try:
            scope = CommitScope.for_flag(allow_pushed)
            commits = await self._commits.list_commits(scope, limit)
            commit = find_in(commits, token)
            if commit is None:
                return RunResult.failed(
                    ErrorCode.COMMIT_NOT_FOUND, f"Commit {token} not found"
                )

            if commit.is_pushed and not confirmed:
                return RunResult.failed(
                    ErrorCode.PUSHED_REQUIRES_CONFIRM,
                    f"Commit {commit.short_id} is already pushed to "
                    f"{', '.join(commit.remote_refs)}. Use --no-confirm to modify it",
                )

            new_date = self._validator.parse_date(date_text)
            if new_date is None:
                return RunResult.failed(ErrorCode.DATE_PARSING_ERROR, "Could not parse date")

            previous, following = neighbors(commits, commit)
            prev_date = previous.author_date if previous else None
            next_date = following.author_date if following else None
            outcome = self._validator.validate(new_date, prev_date, next_date)
            if not outcome.valid:
                return RunResult.failed(ErrorCode.DATE_OUT_OF_RANGE, outcome.reason)

            changed = ChangedCommit(
                hash=commit.short_id,
                message=commit.message,
                old_date=to_iso(commit.author_date),
                new_date=to_iso(new_date),
                is_pushed=commit.is_pushed,
            )
            if same_minute(new_date, commit.author_date):
                logger.info("Date of %s unchanged, skipping rewrite", commit.short_id)
                return RunResult.succeeded(changed)

            rewrite = await self._rewriter.validate_and_rewrite(
                commit, new_date, prev_date, next_date
            )
            if not rewrite.succeeded:
                code = (
                    ErrorCode.DATE_OUT_OF_RANGE
                    if rewrite.state == RewriteState.REJECTED
                    else ErrorCode.EXECUTION_ERROR
                )
                return RunResult.failed(code, rewrite.error)
            return RunResult.succeeded(changed)
        except GitError as e:
            return RunResult.failed(ErrorCode.EXECUTION_ERROR, str(e))
