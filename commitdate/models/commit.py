"""Commit domain model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

SHORT_ID_LENGTH = 7


class CommitScope(str, Enum):
    UNPUSHED = "unpushed"
    ALL = "all"

    @classmethod
    def for_flag(cls, allow_pushed: bool) -> CommitScope:
        return cls.ALL if allow_pushed else cls.UNPUSHED


@dataclass(frozen=True)
class Commit:
    """Snapshot of a commit's identity and metadata at query time.

    Instances are never reused across a rewrite: changing one commit's date
    changes its hash and the hash of every descendant.
    """

    short_id: str
    full_id: str
    message: str
    author_name: str
    author_date: datetime
    committer_date: datetime
    is_pushed: bool = False
    remote_refs: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.full_id:
            raise ValueError("Commit id cannot be empty")
        if not self.full_id.startswith(self.short_id):
            raise ValueError(
                f"Short id {self.short_id!r} is not a prefix of {self.full_id!r}"
            )
        if self.is_pushed != bool(self.remote_refs):
            raise ValueError("is_pushed must be true exactly when remote_refs is non-empty")

    @classmethod
    def create(
        cls,
        full_id: str,
        message: str,
        author_name: str,
        author_date: datetime,
        committer_date: datetime | None = None,
        remote_refs: tuple[str, ...] = (),
        short_id_length: int = SHORT_ID_LENGTH,
    ) -> Commit:
        """Build a commit, deriving the short id and push status."""
        return cls(
            short_id=full_id[:short_id_length],
            full_id=full_id,
            message=message,
            author_name=author_name,
            author_date=author_date,
            committer_date=committer_date or author_date,
            is_pushed=bool(remote_refs),
            remote_refs=tuple(remote_refs),
        )

    def matches(self, token: str) -> bool:
        """Check a short id, full id or id prefix against this commit."""
        if not token:
            return False
        return token == self.short_id or token == self.full_id or self.full_id.startswith(token)

    def to_dict(self) -> dict:
        return {
            "hash": self.short_id,
            "fullHash": self.full_id,
            "message": self.message,
            "author": self.author_name,
            "authorDate": self.author_date.isoformat(),
            "committerDate": self.committer_date.isoformat(),
            "isPushed": self.is_pushed,
            "remotes": list(self.remote_refs),
        }
