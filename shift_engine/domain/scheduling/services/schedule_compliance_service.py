"""
Schedule Compliance Service

Advisory labour-rule checks over a whole shift set. Unlike the
``ComplianceValidator`` these never block an operation; they produce
warnings for the schedule view.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import timedelta

from ..entities.shift import Shift
from ..read_models.compliance_warning import ComplianceWarning
from ..value_objects.compliance import ComplianceLimits
from ..value_objects.enums import ComplianceWarningKind
from ..value_objects.time_window import MINUTES_PER_DAY


class ScheduleComplianceService:
    """
    Service for advisory schedule compliance checks.

    Checks, per employee:
    - hours per ISO week above the weekly limit
    - single shifts longer than the overtime threshold
    - less than the minimum rest between shifts on consecutive days
    """

    def __init__(self, limits: ComplianceLimits | None = None) -> None:
        self._limits = limits or ComplianceLimits()

    def check_schedule_compliance(
        self, shifts: Iterable[Shift]
    ) -> list[ComplianceWarning]:
        """
        Check a shift set against the configured limits.

        Args:
            shifts: Shifts to check (typically the visible view)

        Returns:
            Warnings ordered by employee, then by kind and date
        """
        by_employee: dict[str, list[Shift]] = defaultdict(list)
        for shift in shifts:
            for employee_id in shift.assigned_employee_ids:
                by_employee[employee_id].append(shift)

        warnings = []
        for employee_id in sorted(by_employee):
            employee_shifts = sorted(
                by_employee[employee_id], key=lambda s: (s.date, s.start_minutes, s.id)
            )
            warnings.extend(self._check_weekly_hours(employee_id, employee_shifts))
            warnings.extend(self._check_overtime(employee_id, employee_shifts))
            warnings.extend(self._check_rest(employee_id, employee_shifts))
        return warnings

    def _check_weekly_hours(
        self, employee_id: str, shifts: list[Shift]
    ) -> list[ComplianceWarning]:
        minutes_per_week: dict[tuple[int, int], int] = defaultdict(int)
        shifts_per_week: dict[tuple[int, int], list[Shift]] = defaultdict(list)
        for shift in shifts:
            iso = shift.date.isocalendar()
            week = (iso[0], iso[1])
            minutes_per_week[week] += shift.window.duration_minutes
            shifts_per_week[week].append(shift)

        warnings = []
        limit_minutes = self._limits.weekly_hour_limit * 60
        for week in sorted(minutes_per_week):
            if minutes_per_week[week] <= limit_minutes:
                continue
            hours = minutes_per_week[week] / 60
            week_shifts = shifts_per_week[week]
            warnings.append(
                ComplianceWarning(
                    kind=ComplianceWarningKind.WEEKLY_HOURS,
                    employee_id=employee_id,
                    message=(
                        f"Employee {employee_id} works {hours:g}h in week "
                        f"{week[0]}-W{week[1]:02d} "
                        f"(limit {self._limits.weekly_hour_limit}h)"
                    ),
                    dates=tuple(sorted({s.date for s in week_shifts})),
                    shift_ids=tuple(s.id for s in week_shifts),
                    hours=hours,
                )
            )
        return warnings

    def _check_overtime(
        self, employee_id: str, shifts: list[Shift]
    ) -> list[ComplianceWarning]:
        threshold_minutes = self._limits.overtime_shift_hours * 60
        return [
            ComplianceWarning(
                kind=ComplianceWarningKind.OVERTIME,
                employee_id=employee_id,
                message=(
                    f"Shift {shift.id} on {shift.date.isoformat()} lasts "
                    f"{shift.duration_hours:g}h "
                    f"(over {self._limits.overtime_shift_hours}h)"
                ),
                dates=(shift.date,),
                shift_ids=(shift.id,),
                hours=shift.duration_hours,
            )
            for shift in shifts
            if shift.window.duration_minutes > threshold_minutes
        ]

    def _check_rest(
        self, employee_id: str, shifts: list[Shift]
    ) -> list[ComplianceWarning]:
        min_rest_minutes = self._limits.min_rest_hours * 60
        warnings = []
        for previous, following in zip(shifts, shifts[1:]):
            if following.date != previous.date + timedelta(days=1):
                continue
            rest_minutes = (
                MINUTES_PER_DAY - previous.window.end_minutes
            ) + following.window.start_minutes
            if rest_minutes >= min_rest_minutes:
                continue
            warnings.append(
                ComplianceWarning(
                    kind=ComplianceWarningKind.INSUFFICIENT_REST,
                    employee_id=employee_id,
                    message=(
                        f"Only {rest_minutes / 60:g}h rest between shift "
                        f"{previous.id} and shift {following.id} "
                        f"(minimum {self._limits.min_rest_hours}h)"
                    ),
                    dates=(previous.date, following.date),
                    shift_ids=(previous.id, following.id),
                    hours=rest_minutes / 60,
                )
            )
        return warnings
