"""
Time Window Value Objects

Times of day are carried as minutes since midnight. ``ShiftWindow`` is the
half-open interval ``[start, end)`` a shift occupies on its date and
``DateRange`` the inclusive calendar range a schedule view covers.
"""

import re
from datetime import date, time, timedelta

from pydantic import Field, model_validator
from typing_extensions import Self

from shift_engine.domain.shared.base import ValueObject

MINUTES_PER_DAY = 24 * 60

# H:MM or HH:MM with an optional :SS suffix, as emitted by the backend
_TIME_OF_DAY_PATTERN = re.compile(r"^([0-9]{1,2}):([0-9]{2})(?::([0-9]{2}))?$")


def parse_time_of_day(value: str | time | None) -> int | None:
    """
    Parse a time of day into minutes since midnight.

    Args:
        value: ``HH:MM`` string (``H:MM`` and a trailing ``:SS`` accepted) or
            a ``datetime.time``

    Returns:
        Minutes since midnight, or None when the value is not a valid time
    """
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    if not isinstance(value, str):
        return None

    match = _TIME_OF_DAY_PATTERN.match(value.strip())
    if match is None:
        return None

    hours, minutes, seconds = match.groups()
    if int(hours) > 23 or int(minutes) > 59:
        return None
    if seconds is not None and int(seconds) > 59:
        return None
    return int(hours) * 60 + int(minutes)


def format_time_of_day(minutes: int) -> str:
    """Format minutes since midnight as ``HH:MM``."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_time_of_day(value: str | time | None) -> str | None:
    """Return the canonical ``HH:MM`` form of a time, or None if invalid."""
    minutes = parse_time_of_day(value)
    return None if minutes is None else format_time_of_day(minutes)


class ShiftWindow(ValueObject):
    """A half-open time-of-day interval ``[start, end)`` within one date."""

    start_minutes: int = Field(ge=0, lt=MINUTES_PER_DAY)
    end_minutes: int = Field(gt=0, lt=MINUTES_PER_DAY)

    @model_validator(mode="after")
    def _end_after_start(self) -> Self:
        if self.end_minutes <= self.start_minutes:
            raise ValueError("end time must be after start time")
        return self

    @classmethod
    def from_strings(cls, start_time: str, end_time: str) -> "ShiftWindow":
        """
        Build a window from ``HH:MM`` strings.

        Raises:
            ValueError: If either time is malformed or end is not after start
        """
        start = parse_time_of_day(start_time)
        end = parse_time_of_day(end_time)
        if start is None or end is None:
            raise ValueError(f"invalid time window {start_time!r}-{end_time!r}")
        return cls(start_minutes=start, end_minutes=end)

    @property
    def start_time(self) -> str:
        return format_time_of_day(self.start_minutes)

    @property
    def end_time(self) -> str:
        return format_time_of_day(self.end_minutes)

    @property
    def start_hour(self) -> int:
        return self.start_minutes // 60

    @property
    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes

    @property
    def duration_hours(self) -> float:
        return self.duration_minutes / 60

    def overlaps_with(self, other: "ShiftWindow") -> bool:
        """
        Half-open overlap.

        Touching windows such as 09:00-12:00 and 12:00-15:00 do not overlap.
        """
        return (
            self.start_minutes < other.end_minutes
            and other.start_minutes < self.end_minutes
        )

    def __str__(self) -> str:
        return f"{self.start_time}-{self.end_time}"


class DateRange(ValueObject):
    """An inclusive calendar date range."""

    start: date
    end: date

    @model_validator(mode="after")
    def _start_not_after_end(self) -> Self:
        if self.start > self.end:
            raise ValueError("start date must not be after end date")
        return self

    @classmethod
    def for_day(cls, day: date) -> "DateRange":
        return cls(start=day, end=day)

    @classmethod
    def iso_week(cls, day: date) -> "DateRange":
        """Monday to Sunday of the ISO week containing ``day``."""
        monday = day - timedelta(days=day.weekday())
        return cls(start=monday, end=monday + timedelta(days=6))

    @classmethod
    def month(cls, day: date) -> "DateRange":
        """First to last day of the month containing ``day``."""
        first = day.replace(day=1)
        next_month = (first + timedelta(days=32)).replace(day=1)
        return cls(start=first, end=next_month - timedelta(days=1))

    @property
    def num_days(self) -> int:
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def days(self) -> list[date]:
        return [self.start + timedelta(days=i) for i in range(self.num_days)]

    def shifted(self, days: int) -> "DateRange":
        """Same-length range moved by ``days`` (negative moves backwards)."""
        offset = timedelta(days=days)
        return DateRange(start=self.start + offset, end=self.end + offset)

    def __str__(self) -> str:
        return f"{self.start.isoformat()}..{self.end.isoformat()}"
