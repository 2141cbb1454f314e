"""Aggregate statistics over a set of shifts."""

from pydantic import Field

from shift_engine.domain.shared.base import ValueObject


class ScheduleStats(ValueObject):
    """
    Dashboard metrics for the visible shifts.

    Attributes:
        total_shifts: Number of shifts
        night_shifts: Shifts starting late in the evening or early morning
        avg_hours: Mean shift length in hours, one decimal
        balance_score: 100 * least-loaded / most-loaded employee shift count
        unassigned_shifts: Open shifts without any assignee
        draft_shifts: Unsaved drafts included in the totals
        employee_shift_counts: Shift count per assigned employee
    """

    total_shifts: int = Field(ge=0, default=0)
    night_shifts: int = Field(ge=0, default=0)
    avg_hours: float = Field(ge=0.0, default=0.0)
    balance_score: int = Field(ge=0, le=100, default=100)
    unassigned_shifts: int = Field(ge=0, default=0)
    draft_shifts: int = Field(ge=0, default=0)
    employee_shift_counts: dict[str, int] = Field(default_factory=dict)

    def __hash__(self) -> int:
        return hash(
            (
                self.total_shifts,
                self.night_shifts,
                self.avg_hours,
                self.balance_score,
                self.unassigned_shifts,
                self.draft_shifts,
                tuple(sorted(self.employee_shift_counts.items())),
            )
        )

    @property
    def assigned_employee_count(self) -> int:
        return len(self.employee_shift_counts)

    @property
    def night_shift_ratio(self) -> float:
        if self.total_shifts <= 0:
            return 0.0
        return self.night_shifts / self.total_shifts
