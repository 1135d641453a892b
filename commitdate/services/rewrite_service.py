"""Applies a validated date change to repository history."""

from __future__ import annotations

import logging
from datetime import datetime

from commitdate.errors import GitError
from commitdate.infra import git as git_ops
from commitdate.models.commit import Commit
from commitdate.models.rewrite import (
    RewriteOutcome,
    RewriteRequest,
    RewriteState,
)
from commitdate.services.date_validator import DateValidator

logger = logging.getLogger(__name__)


class RewriteService:
    """Rewrites the author and committer date of a single commit.

    The rewrite is not transactional. An interrupted run can leave history
    partially rewritten; backup refs are only removed after success so they
    remain available for manual recovery.
    """

    def __init__(self, repo_path: str, validator: DateValidator, git=git_ops) -> None:
        self._path = repo_path
        self._validator = validator
        self._git = git

    async def rewrite(self, full_id: str, new_date: datetime) -> RewriteOutcome:
        """Redate ``full_id``; root commits are replayed from the start of history."""
        try:
            branch = await self._git.get_current_branch(self._path)
            parents = await self._git.get_parents(self._path, full_id)
            if not parents:
                logger.info("%s is a root commit, rewriting from the start of history", full_id)
            await self._git.rewrite_commit_date(self._path, full_id, new_date, branch, parents)
        except GitError as e:
            logger.warning("Rewrite of %s failed: %s", full_id, e)
            return RewriteOutcome(state=RewriteState.FAILED, error=str(e))

        removed = await self._git.delete_backup_refs(self._path)
        return RewriteOutcome(state=RewriteState.COMMITTED, backup_refs_removed=removed)

    async def apply(self, request: RewriteRequest) -> RewriteOutcome:
        return await self.rewrite(request.commit.full_id, request.new_date)

    async def validate_and_rewrite(
        self,
        commit: Commit,
        new_date: datetime,
        prev_date: datetime | None,
        next_date: datetime | None,
    ) -> RewriteOutcome:
        """Run Validating -> Rejected | Rewriting -> Committed | Failed."""
        logger.debug("%s: %s", commit.short_id, RewriteState.VALIDATING.value)
        outcome = self._validator.validate(new_date, prev_date, next_date)
        if not outcome.valid:
            logger.debug("%s: %s (%s)", commit.short_id, RewriteState.REJECTED.value, outcome.reason)
            return RewriteOutcome(state=RewriteState.REJECTED, error=outcome.reason)

        request = RewriteRequest.from_outcome(
            outcome,
            commit=commit,
            new_date=new_date,
            window=self._validator.compute_window(prev_date, next_date),
        )
        logger.debug("%s: %s", commit.short_id, RewriteState.REWRITING.value)
        result = await self.apply(request)
        logger.debug("%s: %s", commit.short_id, result.state.value)
        return result
