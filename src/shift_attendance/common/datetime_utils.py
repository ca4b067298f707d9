from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable, Protocol


class Clock(Protocol):
    """Time source for every timestamp the engine records or measures against."""

    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Server clock, always timezone-aware UTC."""

    def __init__(self, source: Callable[[], datetime] | None = None):
        self._source = source or (lambda: datetime.now(timezone.utc))

    def now(self) -> datetime:
        return ensure_utc(self._source())


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def ensure_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime.

    Naive values are treated as already being UTC (that is how they are stored).
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def truncate_seconds(value: datetime) -> datetime:
    return value.replace(microsecond=0)


def to_storage(value: datetime) -> datetime:
    """Naive UTC datetime for DATETIME columns (whole seconds, never rounded up)."""
    return truncate_seconds(ensure_utc(value)).replace(tzinfo=None)


def to_iso_utc(value: datetime | None) -> str | None:
    if value is None:
        return None
    return ensure_utc(value).isoformat(timespec="seconds").replace("+00:00", "Z")
