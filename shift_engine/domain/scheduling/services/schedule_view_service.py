"""
Schedule View Service

Projects the shift snapshot onto what one location shows for a date range,
and derives conflicts, statistics and compliance warnings for the result.
"""

import datetime as dt
from collections.abc import Iterable

from ..entities.shift import Shift
from ..read_models.schedule_view import ScheduleDiagnostics, ScheduleView
from ..value_objects.enums import ViewGranularity
from ..value_objects.time_window import DateRange
from .conflict_detector import ConflictDetector
from .schedule_compliance_service import ScheduleComplianceService
from .stats_aggregator import StatsAggregator


class ScheduleViewService:
    """Builds schedule views and their diagnostics."""

    def __init__(
        self,
        conflict_detector: ConflictDetector | None = None,
        stats_aggregator: StatsAggregator | None = None,
        compliance_service: ScheduleComplianceService | None = None,
    ) -> None:
        self._conflict_detector = conflict_detector or ConflictDetector()
        self._stats_aggregator = stats_aggregator or StatsAggregator()
        self._compliance_service = compliance_service or ScheduleComplianceService()

    @staticmethod
    def effective_range(
        date_range: DateRange, granularity: ViewGranularity
    ) -> DateRange:
        """A day view shows only the first day of the requested range."""
        if granularity == ViewGranularity.DAY:
            return DateRange.for_day(date_range.start)
        return date_range

    def project(
        self,
        all_shifts: Iterable[Shift],
        location_id: str,
        date_range: DateRange,
        granularity: ViewGranularity,
    ) -> list[Shift]:
        """
        Filter shifts to a location and date range.

        Args:
            all_shifts: Current shift snapshot
            location_id: Location to show
            date_range: Requested range (inclusive)
            granularity: Day, week or month

        Returns:
            Matching shifts, stably sorted by start time
        """
        visible_range = self.effective_range(date_range, granularity)
        visible = [
            shift
            for shift in all_shifts
            if shift.location_id == str(location_id)
            and visible_range.contains(shift.date)
        ]
        return sorted(visible, key=lambda shift: shift.start_minutes)

    def build_view(
        self,
        all_shifts: Iterable[Shift],
        location_id: str,
        date_range: DateRange,
        granularity: ViewGranularity,
    ) -> ScheduleView:
        return ScheduleView(
            location_id=str(location_id),
            date_range=self.effective_range(date_range, granularity),
            granularity=granularity,
            shifts=tuple(
                self.project(all_shifts, location_id, date_range, granularity)
            ),
        )

    def diagnose(self, view: ScheduleView) -> ScheduleDiagnostics:
        return ScheduleDiagnostics(
            conflicts=tuple(self._conflict_detector.detect(view.shifts)),
            stats=self._stats_aggregator.aggregate(view.shifts),
            compliance_warnings=tuple(
                self._compliance_service.check_schedule_compliance(view.shifts)
            ),
        )

    @staticmethod
    def navigate(
        date_range: DateRange, granularity: ViewGranularity, steps: int
    ) -> DateRange:
        """
        Range shown after moving ``steps`` periods forward (negative = back).

        Day and week views move by whole days and ISO weeks, month views by
        calendar months.
        """
        if granularity == ViewGranularity.DAY:
            return DateRange.for_day(date_range.start + dt.timedelta(days=steps))
        if granularity == ViewGranularity.WEEK:
            monday = DateRange.iso_week(date_range.start).start
            return DateRange.iso_week(monday + dt.timedelta(weeks=steps))

        month_index = date_range.start.year * 12 + date_range.start.month - 1 + steps
        first = dt.date(month_index // 12, month_index % 12 + 1, 1)
        return DateRange.month(first)
