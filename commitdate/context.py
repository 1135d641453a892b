"""AppContext: wires config, git access and services together."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from commitdate.config import AppConfig, load_config
from commitdate.errors import PreconditionError
from commitdate.infra import git as git_ops
from commitdate.models.result import ErrorCode

if TYPE_CHECKING:
    from pathlib import Path

    from commitdate.services.commit_service import CommitService
    from commitdate.services.date_validator import DateValidator
    from commitdate.services.rewrite_service import RewriteService
    from commitdate.services.session_service import SessionService
    from commitdate.ui.messages import MessageFormatter

logger = logging.getLogger(__name__)


class AppContext:
    """Central wiring for all application dependencies.

    Services are created lazily on first access and all operate on the
    repository at ``repo_path``.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        config_path: Path | None = None,
        repo_path: str | None = None,
    ) -> None:
        self.config = config or load_config(config_path)
        self.repo_path = repo_path or os.getcwd()
        self._validator: DateValidator | None = None
        self._commit_service: CommitService | None = None
        self._rewrite_service: RewriteService | None = None
        self._session_service: SessionService | None = None
        self._formatter: MessageFormatter | None = None

    async def check_preconditions(self) -> None:
        """Refuse to start outside a work tree or with uncommitted changes."""
        if not await git_ops.is_git_repo(self.repo_path):
            raise PreconditionError(
                "Not a git repository (or any of the parent directories)",
                ErrorCode.NOT_A_REPOSITORY.value,
            )
        if await git_ops.has_uncommitted_changes(self.repo_path):
            raise PreconditionError(
                "You have uncommitted changes. Commit or stash them first",
                ErrorCode.UNCOMMITTED_CHANGES.value,
            )
        logger.debug("Preconditions satisfied for %s", self.repo_path)

    @property
    def validator(self) -> DateValidator:
        if self._validator is None:
            from commitdate.services.date_validator import DateValidator

            self._validator = DateValidator()
        return self._validator

    @property
    def commit_service(self) -> CommitService:
        if self._commit_service is None:
            from commitdate.services.commit_service import CommitService

            self._commit_service = CommitService(
                self.repo_path,
                short_id_length=self.config.display.short_id_length,
            )
        return self._commit_service

    @property
    def rewrite_service(self) -> RewriteService:
        if self._rewrite_service is None:
            from commitdate.services.rewrite_service import RewriteService

            self._rewrite_service = RewriteService(self.repo_path, self.validator)
        return self._rewrite_service

    @property
    def session_service(self) -> SessionService:
        if self._session_service is None:
            from commitdate.services.session_service import SessionService

            self._session_service = SessionService(
                commit_service=self.commit_service,
                validator=self.validator,
                rewrite_service=self.rewrite_service,
            )
        return self._session_service

    @property
    def formatter(self) -> MessageFormatter:
        if self._formatter is None:
            from commitdate.ui.messages import MessageFormatter

            self._formatter = MessageFormatter(color=self.config.display.color)
        return self._formatter
