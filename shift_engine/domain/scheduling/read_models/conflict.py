"""Scheduling conflict read model."""

import datetime as dt

from shift_engine.domain.shared.base import ValueObject

from ..value_objects.enums import ConflictType


class Conflict(ValueObject):
    """
    Two shifts that put at least one employee in two places at once.

    Pairs are normalised so that ``shift_id_a < shift_id_b``.
    """

    shift_id_a: str
    shift_id_b: str
    type: ConflictType = ConflictType.OVERLAP
    date: dt.date
    employee_ids: tuple[str, ...]
    description: str

    @property
    def shift_ids(self) -> tuple[str, str]:
        return self.shift_id_a, self.shift_id_b

    def involves(self, shift_id: str) -> bool:
        return shift_id in (self.shift_id_a, self.shift_id_b)
