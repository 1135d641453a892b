"""Read-only access to the commit listing and its push status."""

from __future__ import annotations

import logging

from commitdate.infra import git as git_ops
from commitdate.models.commit import SHORT_ID_LENGTH, Commit, CommitScope

logger = logging.getLogger(__name__)


class CommitService:
    """Lists commits newest first and classifies each as pushed or not.

    Nothing here is cached: every call re-reads the repository, since a
    rewrite invalidates the hash of the rewritten commit and its descendants.
    """

    def __init__(
        self,
        repo_path: str,
        git=git_ops,
        short_id_length: int = SHORT_ID_LENGTH,
    ) -> None:
        self._path = repo_path
        self._git = git
        self._short_id_length = short_id_length

    async def list_commits(self, scope: CommitScope, limit: int) -> list[Commit]:
        """Return up to ``limit`` commits in ``scope``, newest first."""
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")

        if scope == CommitScope.ALL:
            entries = await self._git.list_commits(self._path, limit)
            return [await self._to_commit(e) for e in entries]

        branch = await self._git.get_current_branch(self._path)
        upstream = await self._git.get_upstream_branch(self._path, branch)
        revision_range = f"{upstream}..HEAD" if upstream else None
        entries = await self._git.list_commits(self._path, limit, revision_range)

        commits = []
        for entry in entries:
            commit = await self._to_commit(entry)
            # Reachable from some other remote branch even if not from upstream
            if not commit.is_pushed:
                commits.append(commit)
        logger.debug(
            "Found %d unpushed commit(s) on %s (upstream=%s)", len(commits), branch, upstream
        )
        return commits

    async def find_by_identifier(
        self, token: str, scope: CommitScope, limit: int
    ) -> Commit | None:
        """Resolve a short id, full id or id prefix against the scoped listing."""
        commits = await self.list_commits(scope, limit)
        return find_in(commits, token)

    async def _to_commit(self, entry: git_ops.LogEntry) -> Commit:
        remote_refs = await self._git.get_remote_refs_containing(self._path, entry.sha)
        return Commit.create(
            full_id=entry.sha,
            message=entry.subject,
            author_name=entry.author_name,
            author_date=entry.author_date,
            committer_date=entry.committer_date,
            remote_refs=tuple(remote_refs),
            short_id_length=self._short_id_length,
        )


def find_in(commits: list[Commit], token: str) -> Commit | None:
    """First commit matching ``token``; no ambiguity detection."""
    return next((c for c in commits if c.matches(token)), None)


def neighbors(commits: list[Commit], commit: Commit) -> tuple[Commit | None, Commit | None]:
    """Return (previous, next) of ``commit`` by position in a newest-first listing.

    ``previous`` is the older commit listed after it and ``next`` the newer
    one listed before it.
    """
    index = next(
        (i for i, c in enumerate(commits) if c.full_id == commit.full_id), None
    )
    if index is None:
        raise ValueError(f"Commit {commit.short_id} is not in the listing")
    previous = commits[index + 1] if index < len(commits) - 1 else None
    following = commits[index - 1] if index > 0 else None
    return previous, following
