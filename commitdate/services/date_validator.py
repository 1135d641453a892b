"""Date parsing, formatting and chronological window checks."""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import datetime, timezone

from commitdate.models.rewrite import DateWindow, RejectionCode, ValidationOutcome

# Shapes datetime.fromisoformat accepts on every supported Python
_ISO_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}"
    r"(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d{3}|\.\d{6})?)?(?:Z|[+-]\d{2}:\d{2})?)?$"
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_date(value: datetime) -> str:
    """Display form: UTC, no fractional seconds, no zone marker."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")


def to_iso(value: datetime) -> str:
    """Canonical ISO-8601 form in UTC with milliseconds, e.g. ``2025-01-15T10:00:00.000Z``."""
    utc = value.astimezone(timezone.utc)
    return f"{utc.strftime('%Y-%m-%dT%H:%M:%S')}.{utc.microsecond // 1000:03d}Z"


def same_minute(a: datetime, b: datetime) -> bool:
    def _trim(d: datetime) -> datetime:
        return d.astimezone(timezone.utc).replace(second=0, microsecond=0)

    return _trim(a) == _trim(b)


class DateValidator:
    """Computes and enforces the admissible date window for a commit.

    Neighbor dates come from the visible commit listing: ``prev`` is the
    older commit just below the target and ``next`` the newer one above it.
    """

    def __init__(self, clock: Callable[[], datetime] = _utc_now) -> None:
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    def validate_format(self, text: str) -> ValidationOutcome:
        """Check that ``text`` is shaped like an ISO-8601 date-time."""
        if not text or not _ISO_RE.match(text.strip()):
            return ValidationOutcome.reject(
                RejectionCode.INVALID_FORMAT,
                "Invalid date format. Use ISO 8601 (e.g. 2025-01-15T14:30:00)",
            )
        return ValidationOutcome.ok()

    def parse_date(self, text: str) -> datetime | None:
        """Parse an ISO-8601 string into an aware UTC datetime.

        Strings without an offset are read as UTC, never local time. Git
        stores whole seconds, so any fraction is dropped. Returns None
        instead of raising on any malformed or impossible value.
        """
        text = text.strip() if text else ""
        if not _ISO_RE.match(text):
            return None
        try:
            value = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).replace(microsecond=0)

    def compute_window(
        self, prev_date: datetime | None, next_date: datetime | None
    ) -> DateWindow:
        now = self.now()
        upper = next_date if next_date is not None and next_date < now else now
        return DateWindow(lower_bound=prev_date, upper_bound=upper)

    def validate(
        self,
        candidate: datetime,
        prev_date: datetime | None,
        next_date: datetime | None,
    ) -> ValidationOutcome:
        """Apply the future, previous-commit and next-commit checks in that order."""
        if candidate > self.now():
            return ValidationOutcome.reject(
                RejectionCode.FUTURE_DATE, "Date cannot be in the future"
            )
        if prev_date is not None and candidate < prev_date:
            return ValidationOutcome.reject(
                RejectionCode.BEFORE_PREVIOUS,
                f"Date cannot be earlier than previous commit ({to_iso(prev_date)})",
            )
        if next_date is not None and candidate > next_date:
            return ValidationOutcome.reject(
                RejectionCode.AFTER_NEXT,
                f"Date cannot be later than next commit ({to_iso(next_date)})",
            )
        return ValidationOutcome.ok()

    def format_window(self, window: DateWindow) -> str:
        lower = format_date(window.lower_bound) if window.lower_bound else "no limit"
        return f"{lower} .. {format_date(window.upper_bound)}"
