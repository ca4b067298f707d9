from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple

from ..common.datetime_utils import ensure_utc
from ..core.constants import DEFAULT_UTC_OFFSET_MINUTES, DEFAULT_WEEK_START, MAX_UTC_OFFSET_MINUTES
from ..core.exceptions import ValidationError


class TimeNormalizer:
    """Fixed-offset local time for a deployment (no DST).

    Every local-day decision in the engine goes through here: which calendar
    day a check-in belongs to, the UTC bounds of a day/week/month, and the
    ``HH:MM`` strings shown to people.
    """

    def __init__(self, offset_minutes: int = DEFAULT_UTC_OFFSET_MINUTES, *, week_start: int = DEFAULT_WEEK_START):
        offset_minutes = int(offset_minutes)
        if abs(offset_minutes) > MAX_UTC_OFFSET_MINUTES:
            raise ValidationError(f"UTC offset out of range: {offset_minutes} minutes")
        week_start = int(week_start)
        if not 0 <= week_start <= 6:
            raise ValidationError(f"Week start must be 0 (Monday) .. 6 (Sunday), got {week_start}")

        self._offset = timedelta(minutes=offset_minutes)
        self._tz = timezone(self._offset)
        self._week_start = week_start

    @property
    def offset_minutes(self) -> int:
        return int(self._offset.total_seconds() // 60)

    @property
    def tz(self) -> timezone:
        return self._tz

    def to_local(self, value: datetime) -> datetime:
        return ensure_utc(value).astimezone(self._tz)

    def local_day(self, value: datetime) -> date:
        return self.to_local(value).date()

    def day_bounds_utc(self, day: date) -> Tuple[datetime, datetime]:
        """[start, end) in UTC of a local calendar day."""
        return self.range_bounds_utc(day, day)

    def range_bounds_utc(self, first_day: date, last_day: date) -> Tuple[datetime, datetime]:
        """[start, end) in UTC covering local days first_day..last_day inclusive."""
        if last_day < first_day:
            raise ValidationError("Range end is before range start")
        try:
            start = datetime.combine(first_day, time.min, tzinfo=self._tz)
            end = datetime.combine(last_day + timedelta(days=1), time.min, tzinfo=self._tz)
            return start.astimezone(timezone.utc), end.astimezone(timezone.utc)
        except OverflowError:
            raise ValidationError(f"Date range {first_day}..{last_day} is out of range") from None

    def week_days(self, day: date) -> Tuple[date, date]:
        first = day - timedelta(days=(day.weekday() - self._week_start) % 7)
        return first, first + timedelta(days=6)

    @staticmethod
    def month_days(year: int, month: int) -> Tuple[date, date]:
        if not 1 <= int(month) <= 12:
            raise ValidationError(f"Invalid month: {month}")
        last = calendar.monthrange(int(year), int(month))[1]
        return date(int(year), int(month), 1), date(int(year), int(month), last)

    @staticmethod
    def year_days(year: int) -> Tuple[date, date]:
        return date(int(year), 1, 1), date(int(year), 12, 31)

    def format_time(self, value: datetime | None) -> str | None:
        if value is None:
            return None
        return self.to_local(value).strftime("%H:%M")

    def format_datetime(self, value: datetime | None) -> str | None:
        if value is None:
            return None
        return self.to_local(value).strftime("%Y-%m-%d %H:%M")
