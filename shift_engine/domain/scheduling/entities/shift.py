"""
Shift Entity

A shift assigns zero or more employees to a time window at one client
location on one date. Shifts are immutable snapshots; every change produces a
new instance (and, for moves, possibly a new identifier issued by the
backend).
"""

import datetime as dt

from pydantic import field_validator, model_validator
from typing_extensions import Self

from shift_engine.domain.shared.base import ValueObject

from ..value_objects.enums import ShiftStatus, ShiftType
from ..value_objects.identifier import Identifier
from ..value_objects.time_window import (
    ShiftWindow,
    normalize_time_of_day,
    parse_time_of_day,
)


class ShiftDraft(ValueObject):
    """
    A shift that has not been persisted yet.

    Used as the ``create_shift`` payload and as the unit a bulk template
    generation spec expands into.

    Attributes:
        location_id: Client/site the crew works at
        date: Calendar date of the shift
        start_time: Start of the shift, ``HH:MM``
        end_time: End of the shift, ``HH:MM``; strictly after ``start_time``
        assigned_employee_ids: Ordered, duplicate-free assignees (empty = open shift)
        shift_type: Regular or emergency cover
        notes: Free text shown to the crew
    """

    location_id: Identifier
    date: dt.date
    start_time: str
    end_time: str
    assigned_employee_ids: tuple[Identifier, ...] = ()
    shift_type: ShiftType = ShiftType.REGULAR
    notes: str | None = None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _normalize_time(cls, v: object) -> str:
        normalized = normalize_time_of_day(v)  # type: ignore[arg-type]
        if normalized is None:
            raise ValueError(f"invalid time of day: {v!r}")
        return normalized

    @field_validator("assigned_employee_ids")
    @classmethod
    def _dedupe_assignees(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(v))

    @model_validator(mode="after")
    def _end_after_start(self) -> Self:
        if parse_time_of_day(self.end_time) <= parse_time_of_day(self.start_time):
            raise ValueError("end_time must be after start_time")
        return self

    @property
    def window(self) -> ShiftWindow:
        return ShiftWindow.from_strings(self.start_time, self.end_time)

    @property
    def start_minutes(self) -> int:
        return self.window.start_minutes

    @property
    def duration_hours(self) -> float:
        return self.window.duration_hours

    @property
    def primary_employee_id(self) -> str | None:
        """First assignee; the one a move or swap carries over."""
        return self.assigned_employee_ids[0] if self.assigned_employee_ids else None

    @property
    def is_open(self) -> bool:
        return not self.assigned_employee_ids

    def to_shift(self, shift_id: str) -> "Shift":
        """Materialise the draft under a backend-issued identifier."""
        return Shift(**{**self.model_dump(), "id": shift_id})


class Shift(ShiftDraft):
    """A persisted shift with identity and lifecycle status."""

    id: Identifier
    status: ShiftStatus = ShiftStatus.SCHEDULED

    def shares_employee_with(self, other: "ShiftDraft") -> bool:
        return not set(self.assigned_employee_ids).isdisjoint(
            other.assigned_employee_ids
        )

    def overlaps_with(self, other: "Shift") -> bool:
        """Same date, intersecting assignees and overlapping windows."""
        return (
            self.date == other.date
            and self.shares_employee_with(other)
            and self.window.overlaps_with(other.window)
        )

    def with_window(self, window: ShiftWindow) -> "Shift":
        return self.model_copy(
            update={"start_time": window.start_time, "end_time": window.end_time}
        )

    def moved_to(
        self, shift_id: str, new_date: dt.date, employee_id: str
    ) -> "Shift":
        """Replacement record a move produces: new date, single assignee."""
        return self.model_copy(
            update={
                "id": shift_id,
                "date": new_date,
                "assigned_employee_ids": (employee_id,),
            }
        )

