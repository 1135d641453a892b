"""Git subprocess operations used to inspect and rewrite commit dates."""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone

from commitdate.errors import GitError

logger = logging.getLogger(__name__)

# Unit and record separators keep commit subjects with spaces or pipes intact.
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%an", "%aI", "%cI", "%s"]) + _RECORD_SEP

BACKUP_REF_PREFIX = "refs/original/"


@dataclass(frozen=True)
class LogEntry:
    """Raw metadata of one commit as reported by ``git log``."""

    sha: str
    author_name: str
    author_date: datetime
    committer_date: datetime
    subject: str


async def _git(
    cwd: str, *args: str, env: dict[str, str] | None = None, check: bool = True
) -> tuple[int, str, str]:
    """Run a git command and return (returncode, stdout, stderr)."""
    logger.debug("git %s (cwd=%s)", " ".join(args), cwd)
    proc = await asyncio.create_subprocess_exec(
        "git", *args,
        cwd=cwd,
        env={**os.environ, **env} if env else None,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await proc.communicate()
    out = stdout.decode(errors="replace")
    err = stderr.decode(errors="replace").strip()
    if check and proc.returncode != 0:
        raise GitError(list(args), proc.returncode, err)
    return proc.returncode, out, err


async def is_git_repo(path: str) -> bool:
    """Check if a path is inside a git work tree."""
    rc, out, _ = await _git(path, "rev-parse", "--is-inside-work-tree", check=False)
    return rc == 0 and out.strip() == "true"


async def has_uncommitted_changes(path: str) -> bool:
    """Return True when the index or work tree differs from HEAD (untracked files count)."""
    _, out, _ = await _git(path, "status", "--porcelain")
    return bool(out.strip())


async def get_current_branch(path: str) -> str:
    _, out, _ = await _git(path, "rev-parse", "--abbrev-ref", "HEAD")
    return out.strip()


async def get_upstream_branch(path: str, branch: str) -> str | None:
    """Return the upstream tracking branch of ``branch``, or None if it has none."""
    rc, out, _ = await _git(
        path, "rev-parse", "--abbrev-ref", f"{branch}@{{upstream}}", check=False
    )
    if rc != 0:
        return None
    return out.strip() or None


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.strip()).astimezone(timezone.utc)


def parse_log_output(output: str) -> list[LogEntry]:
    """Parse output produced with the ``_LOG_FORMAT`` pretty format."""
    entries: list[LogEntry] = []
    for record in output.split(_RECORD_SEP):
        record = record.strip("\n")
        if not record:
            continue
        sha, author, author_date, committer_date, subject = record.split(_FIELD_SEP, 4)
        entries.append(
            LogEntry(
                sha=sha.strip(),
                author_name=author,
                author_date=_parse_timestamp(author_date),
                committer_date=_parse_timestamp(committer_date),
                subject=subject,
            )
        )
    return entries


async def list_commits(
    path: str, max_count: int, revision_range: str | None = None
) -> list[LogEntry]:
    """List up to ``max_count`` commits, newest first."""
    args = ["log", f"--format={_LOG_FORMAT}", f"-n{max_count}"]
    if revision_range:
        args.append(revision_range)
    _, out, _ = await _git(path, *args)
    return parse_log_output(out)


def parse_remote_branches(output: str) -> list[str]:
    """Parse ``git branch -r`` output, skipping symbolic refs like ``origin/HEAD -> origin/main``."""
    refs = []
    for line in output.splitlines():
        name = line.strip()
        if name and "->" not in name:
            refs.append(name)
    return refs


async def get_remote_refs_containing(path: str, sha: str) -> list[str]:
    """Return remote-tracking branches that contain ``sha``."""
    _, out, _ = await _git(path, "branch", "-r", "--contains", sha)
    return parse_remote_branches(out)


async def get_parents(path: str, sha: str) -> list[str]:
    """Return the parent SHAs of a commit. Empty for a root commit."""
    _, out, _ = await _git(path, "rev-list", "--parents", "-n", "1", sha)
    parts = out.split()
    return parts[1:]


def build_env_filter(sha: str, new_date: datetime) -> str:
    """Shell snippet for ``filter-branch --env-filter`` that redates one commit."""
    git_date = f"{int(new_date.timestamp())} +0000"
    return (
        f'if [ "$GIT_COMMIT" = "{sha}" ]; then\n'
        f'    export GIT_AUTHOR_DATE="{git_date}"\n'
        f'    export GIT_COMMITTER_DATE="{git_date}"\n'
        f"fi\n"
    )


async def rewrite_commit_date(
    path: str, sha: str, new_date: datetime, branch: str, parents: list[str]
) -> None:
    """Set author and committer date of ``sha`` to ``new_date``.

    Replays ``sha`` and its descendants on ``branch``. For a non-root commit
    the replay is bounded by the commit's parents, otherwise it starts at the
    root of history. Hashes of the rewritten commit and every descendant change.
    """
    revisions = [branch, *(f"^{p}" for p in parents)]
    await _git(
        path,
        "filter-branch", "-f",
        "--env-filter", build_env_filter(sha, new_date),
        "--", *revisions,
        env={"FILTER_BRANCH_SQUELCH_WARNING": "1"},
    )
    logger.info("Rewrote date of %s to %s on %s", sha, new_date.isoformat(), branch)


async def delete_backup_refs(path: str) -> int:
    """Delete refs left under ``refs/original/``. Returns the number removed.

    Errors are logged and swallowed; a missing backup namespace is not an error.
    """
    rc, out, err = await _git(
        path, "for-each-ref", "--format=%(refname)", BACKUP_REF_PREFIX, check=False
    )
    if rc != 0:
        logger.warning("Could not list backup refs: %s", err)
        return 0

    removed = 0
    for ref in (line.strip() for line in out.splitlines()):
        if not ref:
            continue
        rc, _, err = await _git(path, "update-ref", "-d", ref, check=False)
        if rc != 0:
            logger.warning("Could not delete backup ref %s: %s", ref, err)
            continue
        removed += 1
    if removed:
        logger.info("Deleted %d backup ref(s)", removed)
    return removed
