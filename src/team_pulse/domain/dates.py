from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from typing import Any


def iso_z(dt: datetime) -> str:
    """Render an aware datetime as UTC ISO-8601 with a `Z` suffix (millisecond precision)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    dt = dt.astimezone(UTC)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso_datetime(value: Any) -> datetime | None:
    """
    Best-effort parser for upstream timestamps.

    Supports:
      - "2025-09-07T20:20:00Z" / "+00:00" / "2025-09-07T20:20Z"
      - "2025-09-07" (midnight UTC)
    Returns None on missing/invalid input.
    """
    if not isinstance(value, str) or not value.strip():
        return None

    v = value.strip()
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"

    try:
        dt = datetime.fromisoformat(v)
    except ValueError:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def parse_day(value: str) -> date:
    """Parse the calendar-day part of an ISO date or timestamp ("2025-09-07...")."""
    return date.fromisoformat(value.strip()[:10])


@dataclass(frozen=True)
class DateRange:
    """Inclusive range between two aware datetimes."""

    start: datetime
    end: datetime

    @classmethod
    def for_day(cls, day: date, tz: tzinfo = UTC) -> DateRange:
        start = datetime.combine(day, time.min, tzinfo=tz)
        end = datetime.combine(day, time(23, 59, 59, 999000), tzinfo=tz)
        return cls(start=start, end=end)

    @classmethod
    def lookahead(cls, now: datetime, *, days: int = 30) -> DateRange:
        """Local midnight of `now` through the same wall time `days` later."""
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return cls(start=start, end=start + timedelta(days=days))

    @property
    def from_iso(self) -> str:
        return iso_z(self.start)

    @property
    def to_iso(self) -> str:
        return iso_z(self.end)

    @property
    def start_day(self) -> date:
        return self.start.date()

    @property
    def end_day(self) -> date:
        return self.end.date()

    def days(self) -> Iterator[date]:
        d = self.start_day
        while d <= self.end_day:
            yield d
            d += timedelta(days=1)
