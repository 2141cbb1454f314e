"""Compliance rule value objects."""

from collections.abc import Iterable

from pydantic import Field, field_validator, model_validator
from typing_extensions import Self

from shift_engine.domain.shared.base import ValueObject

from .time_window import MINUTES_PER_DAY, format_time_of_day, parse_time_of_day


class ComplianceRule(ValueObject):
    """
    Bounds every new or edited shift window must satisfy.

    Attributes:
        min_start_minutes: Earliest allowed start, minutes since midnight
        max_end_minutes: Latest allowed end, minutes since midnight
        allowed_durations: Permitted shift lengths in whole hours
    """

    min_start_minutes: int = Field(ge=0, lt=MINUTES_PER_DAY)
    max_end_minutes: int = Field(gt=0, lt=MINUTES_PER_DAY)
    allowed_durations: frozenset[int]

    @field_validator("allowed_durations")
    @classmethod
    def _positive_durations(cls, v: frozenset[int]) -> frozenset[int]:
        if not v or any(hours <= 0 for hours in v):
            raise ValueError("allowed durations must be positive whole hours")
        return v

    @model_validator(mode="after")
    def _window_is_ordered(self) -> Self:
        if self.max_end_minutes <= self.min_start_minutes:
            raise ValueError("max end must be after min start")
        return self

    @classmethod
    def from_strings(
        cls, min_start: str, max_end: str, allowed_durations: Iterable[int]
    ) -> "ComplianceRule":
        start = parse_time_of_day(min_start)
        end = parse_time_of_day(max_end)
        if start is None or end is None:
            raise ValueError(f"invalid compliance window {min_start!r}-{max_end!r}")
        return cls(
            min_start_minutes=start,
            max_end_minutes=end,
            allowed_durations=frozenset(allowed_durations),
        )

    @property
    def min_start(self) -> str:
        return format_time_of_day(self.min_start_minutes)

    @property
    def max_end(self) -> str:
        return format_time_of_day(self.max_end_minutes)


class ComplianceLimits(ValueObject):
    """Thresholds for advisory schedule warnings (hours)."""

    weekly_hour_limit: int = Field(default=40, gt=0)
    overtime_shift_hours: int = Field(default=8, gt=0)
    min_rest_hours: int = Field(default=8, ge=0)
