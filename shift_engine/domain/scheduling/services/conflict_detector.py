"""
Conflict Detector

Finds pairs of shifts that double-book an employee: same date, at least one
shared assignee and overlapping half-open windows.
"""

from collections import defaultdict
from collections.abc import Iterable
from itertools import combinations

from ..entities.shift import Shift
from ..read_models.conflict import Conflict


class ConflictDetector:
    """
    Pure overlap detection over a shift set.

    Shifts are bucketed by date first; within a bucket every unordered pair
    is compared once. The result depends only on the set of shifts, never on
    their input order.
    """

    def detect(self, shifts: Iterable[Shift]) -> list[Conflict]:
        """
        Detect overlapping assignments.

        Args:
            shifts: Shifts to analyse

        Returns:
            One conflict per overlapping pair, sorted by (shift_id_a, shift_id_b)
        """
        unique: dict[str, Shift] = {}
        for shift in shifts:
            # a repeated id is one shift, not a second booking; of diverging
            # copies the one with the smallest serialisation wins
            kept = unique.get(shift.id)
            if kept is None or shift.model_dump_json() < kept.model_dump_json():
                unique[shift.id] = shift

        by_date: dict = defaultdict(list)
        for shift in unique.values():
            by_date[shift.date].append(shift)

        conflicts = []
        for day_shifts in by_date.values():
            for first, second in combinations(day_shifts, 2):
                if first.overlaps_with(second):
                    conflicts.append(self._build_conflict(first, second))

        return sorted(conflicts, key=lambda c: (c.shift_id_a, c.shift_id_b))

    def conflicts_for(self, shift: Shift, others: Iterable[Shift]) -> list[Conflict]:
        """Conflicts a single (proposed) shift would have with ``others``."""
        conflicts = [
            self._build_conflict(shift, other)
            for other in others
            if other.id != shift.id and shift.overlaps_with(other)
        ]
        return sorted(conflicts, key=lambda c: (c.shift_id_a, c.shift_id_b))

    @staticmethod
    def _build_conflict(first: Shift, second: Shift) -> Conflict:
        a, b = (first, second) if first.id < second.id else (second, first)
        shared = sorted(set(a.assigned_employee_ids) & set(b.assigned_employee_ids))
        description = (
            f"Employee{'s' if len(shared) > 1 else ''} {', '.join(shared)} "
            f"double-booked on {a.date.isoformat()}: "
            f"shift {a.id} ({a.window}) overlaps shift {b.id} ({b.window})"
        )
        return Conflict(
            shift_id_a=a.id,
            shift_id_b=b.id,
            date=a.date,
            employee_ids=tuple(shared),
            description=description,
        )
