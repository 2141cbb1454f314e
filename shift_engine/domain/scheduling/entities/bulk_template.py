"""
Bulk Shift Template Entity

A bulk template describes many shifts at once (a generation spec). It is
drafted locally, submitted for approval and, once approved, fanned out by the
backend into concrete shifts.
"""

import datetime as dt

from pydantic import Field, field_validator, model_validator
from typing_extensions import Self

from shift_engine.domain.shared.base import ValueObject

from ..value_objects.enums import ShiftType, TemplateStatus
from ..value_objects.identifier import Identifier
from ..value_objects.time_window import (
    DateRange,
    normalize_time_of_day,
    parse_time_of_day,
)
from .shift import ShiftDraft


class SlotDefinition(ValueObject):
    """
    One recurring or one-off slot of a generation spec.

    A slot pinned to ``on_date`` applies only on that date, a slot with
    ``weekday`` (0 = Monday) on every matching day of the range, and a slot
    with neither on every day of the range.
    """

    start_time: str
    end_time: str
    employee_ids: tuple[Identifier, ...] = ()
    role: str | None = None
    shift_type: ShiftType = ShiftType.REGULAR
    on_date: dt.date | None = None
    weekday: int | None = Field(default=None, ge=0, le=6)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _normalize_time(cls, v: object) -> str:
        normalized = normalize_time_of_day(v)  # type: ignore[arg-type]
        if normalized is None:
            raise ValueError(f"invalid time of day: {v!r}")
        return normalized

    @model_validator(mode="after")
    def _validate_slot(self) -> Self:
        if parse_time_of_day(self.end_time) <= parse_time_of_day(self.start_time):
            raise ValueError("end_time must be after start_time")
        if self.on_date is not None and self.weekday is not None:
            raise ValueError("a slot is pinned to a date or a weekday, not both")
        return self

    def applies_on(self, day: dt.date) -> bool:
        if self.on_date is not None:
            return day == self.on_date
        if self.weekday is not None:
            return day.weekday() == self.weekday
        return True


class GenerationSpec(ValueObject):
    """What a bulk template generates: slots repeated over a date range."""

    name: str = Field(min_length=1)
    location_id: Identifier
    date_range: DateRange
    slots: tuple[SlotDefinition, ...] = ()

    def expand(self) -> list[ShiftDraft]:
        """Concrete shift drafts in date order, then slot order."""
        drafts = []
        for day in self.date_range.days():
            for slot in self.slots:
                if not slot.applies_on(day):
                    continue
                drafts.append(
                    ShiftDraft(
                        location_id=self.location_id,
                        date=day,
                        start_time=slot.start_time,
                        end_time=slot.end_time,
                        assigned_employee_ids=slot.employee_ids,
                        shift_type=slot.shift_type,
                        notes=slot.role,
                    )
                )
        return drafts

    @property
    def is_empty(self) -> bool:
        return not self.expand()


class BulkShiftTemplate(ValueObject):
    """
    Bulk shift template snapshot.

    Attributes:
        id: Local id while drafted, backend id once submitted
        status: Lifecycle status; approved and rejected are terminal
        generation_spec: Shifts the template generates
        rejection_reason: Set only when rejected
        created_shift_ids: Set only when approved (may be empty when the
            backend reports a count only)
        created_shift_count: Number of shifts the approval fanned out
    """

    id: Identifier
    status: TemplateStatus = TemplateStatus.DRAFT
    generation_spec: GenerationSpec
    rejection_reason: str | None = None
    created_shift_ids: tuple[Identifier, ...] = ()
    created_shift_count: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _status_consistency(self) -> Self:
        if self.rejection_reason is not None and self.status != TemplateStatus.REJECTED:
            raise ValueError("only rejected templates carry a rejection reason")
        if self.created_shift_ids and self.status != TemplateStatus.APPROVED:
            raise ValueError("only approved templates carry created shift ids")
        return self

    @property
    def name(self) -> str:
        return self.generation_spec.name

    @property
    def is_local(self) -> bool:
        return self.status == TemplateStatus.DRAFT
