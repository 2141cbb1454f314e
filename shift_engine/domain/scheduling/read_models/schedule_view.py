"""Schedule view read models."""

import datetime as dt

from shift_engine.domain.shared.base import ValueObject

from ..entities.shift import Shift
from ..value_objects.enums import ViewGranularity
from ..value_objects.time_window import DateRange
from .compliance_warning import ComplianceWarning
from .conflict import Conflict
from .schedule_stats import ScheduleStats


class ScheduleView(ValueObject):
    """Immutable projection of the shifts one location shows for a range."""

    location_id: str
    date_range: DateRange
    granularity: ViewGranularity
    shifts: tuple[Shift, ...] = ()

    @property
    def days_in_view(self) -> list[dt.date]:
        return self.date_range.days()

    def shifts_on(self, day: dt.date) -> list[Shift]:
        return [shift for shift in self.shifts if shift.date == day]

    def shifts_for_employee(self, employee_id: str) -> list[Shift]:
        return [
            shift for shift in self.shifts if employee_id in shift.assigned_employee_ids
        ]


class ScheduleDiagnostics(ValueObject):
    """Derived analysis of a schedule view."""

    conflicts: tuple[Conflict, ...] = ()
    stats: ScheduleStats = ScheduleStats()
    compliance_warnings: tuple[ComplianceWarning, ...] = ()

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    def conflicting_shift_ids(self) -> set[str]:
        return {
            shift_id for conflict in self.conflicts for shift_id in conflict.shift_ids
        }
