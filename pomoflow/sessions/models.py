"""Domain types for persisted timer sessions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

DEFAULT_TITLE = "Pomodoro Session"

_FRACTION = re.compile(r"\.(\d+)")


class SessionFilter(Enum):
    ALL = "all"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"

    @property
    def completed(self) -> bool | None:
        """The ``completed`` value rows must match, or None for all rows."""
        if self is SessionFilter.COMPLETED:
            return True
        if self is SessionFilter.INCOMPLETE:
            return False
        return None


@dataclass(frozen=True)
class TimerSession:
    """One pomodoro attempt as stored by a :class:`SessionStore`."""

    id: str
    user_id: str
    title: str
    duration_seconds: int
    started_at: datetime
    completed: bool = False
    created_at: datetime | None = None
    completed_at: datetime | None = None


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes (SQLite drops the offset)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value) -> datetime | None:
    """Parse an ISO-8601 timestamp as returned by the hosted backend."""
    if value is None or isinstance(value, datetime):
        return as_utc(value)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # fromisoformat() before 3.11 only takes 3 or 6 fractional digits
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    return as_utc(datetime.fromisoformat(text))
