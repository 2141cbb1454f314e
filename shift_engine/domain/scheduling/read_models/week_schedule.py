"""Week copy read models."""

import datetime as dt

from pydantic import Field

from shift_engine.domain.shared.base import ValueObject

from ..entities.shift import Shift


class WeekScheduleSummary(ValueObject):
    """Shifts of one location for one ISO week, with totals."""

    location_id: str
    week_start: dt.date
    week_end: dt.date
    shifts: tuple[Shift, ...] = ()
    total_shifts: int = Field(ge=0, default=0)
    total_hours: float = Field(ge=0.0, default=0.0)
    employee_count: int = Field(ge=0, default=0)

    @property
    def employee_ids(self) -> set[str]:
        return {
            employee_id
            for shift in self.shifts
            for employee_id in shift.assigned_employee_ids
        }


class WeekCopyValidation(ValueObject):
    """Pre-flight result of copying a week onto another week."""

    is_valid: bool
    warnings: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()
