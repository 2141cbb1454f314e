"""
Week Copy Service

Copies one week of a location's schedule onto another week. The copy is not
applied directly: it becomes a bulk template generation spec that goes
through the normal approval workflow.
"""

import datetime as dt
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from ..entities.bulk_template import GenerationSpec, SlotDefinition
from ..entities.shift import Shift
from ..read_models.week_schedule import WeekCopyValidation, WeekScheduleSummary
from ..value_objects.enums import ShiftStatus
from ..value_objects.time_window import DateRange


class WeekCopyService:
    """Extracts, validates and re-targets a week of shifts."""

    def extract_week_schedule(
        self, shifts: Iterable[Shift], week_start: dt.date, location_id: str
    ) -> WeekScheduleSummary:
        """
        Summarise a location's shifts in the ISO week containing ``week_start``.

        Cancelled shifts are not copied.
        """
        week = DateRange.iso_week(week_start)
        week_shifts = sorted(
            (
                shift
                for shift in shifts
                if shift.location_id == str(location_id)
                and week.contains(shift.date)
                and shift.status != ShiftStatus.CANCELLED
            ),
            key=lambda s: (s.date, s.start_minutes, s.id),
        )

        total_minutes = sum(s.window.duration_minutes for s in week_shifts)
        total_hours = (Decimal(total_minutes) / Decimal(60)).quantize(
            Decimal("0.1"), rounding=ROUND_HALF_UP
        )
        employees = {e for s in week_shifts for e in s.assigned_employee_ids}

        return WeekScheduleSummary(
            location_id=str(location_id),
            week_start=week.start,
            week_end=week.end,
            shifts=tuple(week_shifts),
            total_shifts=len(week_shifts),
            total_hours=float(total_hours),
            employee_count=len(employees),
        )

    def validate_week_copy(
        self,
        summary: WeekScheduleSummary,
        target_week_start: dt.date,
        known_employee_ids: Iterable[str],
        today: dt.date | None = None,
    ) -> WeekCopyValidation:
        """
        Check a copy before it is turned into a template.

        Errors: nothing to copy, copying onto the source week, or source
        employees that no longer exist. Warning: the target week lies in the
        past.
        """
        today = today or dt.date.today()
        target = DateRange.iso_week(target_week_start)
        errors: list[str] = []
        warnings: list[str] = []

        if summary.total_shifts == 0:
            errors.append("Source week has no shifts to copy")
        if target.start == summary.week_start:
            errors.append("Target week is the same as the source week")

        known = {str(e) for e in known_employee_ids}
        missing = sorted(summary.employee_ids - known)
        if missing:
            errors.append(f"Employees no longer available: {', '.join(missing)}")

        if target.end < today:
            warnings.append(
                f"Target week starting {target.start.isoformat()} is in the past"
            )

        return WeekCopyValidation(
            is_valid=not errors, warnings=tuple(warnings), errors=tuple(errors)
        )

    def build_week_copy_spec(
        self,
        summary: WeekScheduleSummary,
        target_week_start: dt.date,
        name: str | None = None,
    ) -> GenerationSpec:
        """
        Generation spec reproducing the summary's shifts in the target week.

        Every shift becomes one date-pinned slot, offset by the number of days
        between the two weeks.
        """
        target = DateRange.iso_week(target_week_start)
        offset = dt.timedelta(days=(target.start - summary.week_start).days)

        slots = tuple(
            SlotDefinition(
                start_time=shift.start_time,
                end_time=shift.end_time,
                employee_ids=shift.assigned_employee_ids,
                role=shift.notes,
                shift_type=shift.shift_type,
                on_date=shift.date + offset,
            )
            for shift in summary.shifts
        )
        return GenerationSpec(
            name=name or f"Copy of week {summary.week_start.isoformat()}",
            location_id=summary.location_id,
            date_range=target,
            slots=slots,
        )
