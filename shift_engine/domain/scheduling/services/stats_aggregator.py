"""
Stats Aggregator

Summary metrics for the schedule dashboard. Pure and idempotent: the same
shift set always yields the same ``ScheduleStats``.
"""

from collections import Counter
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from ..entities.shift import Shift, ShiftDraft
from ..read_models.schedule_stats import ScheduleStats


class StatsAggregator:
    """Computes shift counts, night work, mean length and workload balance."""

    def __init__(self, night_start_hour: int = 22, night_end_hour: int = 6) -> None:
        """
        Args:
            night_start_hour: Shifts starting at or after this hour are night shifts
            night_end_hour: Shifts starting at or before this hour are night shifts
        """
        self._night_start_hour = night_start_hour
        self._night_end_hour = night_end_hour

    def aggregate(
        self, shifts: Iterable[Shift], drafts: Iterable[ShiftDraft] = ()
    ) -> ScheduleStats:
        """
        Summarise persisted shifts and, optionally, unsaved drafts.

        Drafts count towards totals, night shifts and mean length but not
        towards the workload balance or per-employee counts.
        """
        shifts = list(shifts)
        drafts = list(drafts)
        everything = [*shifts, *drafts]
        if not everything:
            return ScheduleStats()

        employee_counts: Counter[str] = Counter()
        for shift in shifts:
            employee_counts.update(shift.assigned_employee_ids)

        total_minutes = sum(shift.window.duration_minutes for shift in everything)

        return ScheduleStats(
            total_shifts=len(everything),
            night_shifts=sum(1 for shift in everything if self.is_night_shift(shift)),
            avg_hours=self._average_hours(total_minutes, len(everything)),
            balance_score=self._balance_score(employee_counts),
            unassigned_shifts=sum(1 for shift in shifts if shift.is_open),
            draft_shifts=len(drafts),
            employee_shift_counts=dict(sorted(employee_counts.items())),
        )

    def is_night_shift(self, shift: ShiftDraft) -> bool:
        start_hour = shift.window.start_hour
        return (
            start_hour >= self._night_start_hour
            or start_hour <= self._night_end_hour
        )

    @staticmethod
    def _average_hours(total_minutes: int, shift_count: int) -> float:
        # Decimal keeps x.x5 from rounding down through binary floats
        average = Decimal(total_minutes) / Decimal(shift_count * 60)
        return float(average.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))

    @staticmethod
    def _balance_score(employee_counts: Counter[str]) -> int:
        if not employee_counts:
            return 100
        least = min(employee_counts.values())
        most = max(employee_counts.values())
        # round-half-up of 100 * least / most in integer arithmetic
        return (200 * least + most) // (2 * most)
