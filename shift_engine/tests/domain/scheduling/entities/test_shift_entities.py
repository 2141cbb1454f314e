"""Tests for shift and bulk template entities."""

from datetime import date

import pytest
from pydantic import ValidationError

from shift_engine.domain.scheduling.entities.bulk_template import (
    BulkShiftTemplate,
    SlotDefinition,
)
from shift_engine.domain.scheduling.entities.shift import Shift, ShiftDraft
from shift_engine.domain.scheduling.value_objects.enums import TemplateStatus
from shift_engine.domain.scheduling.value_objects.time_window import ShiftWindow
from shift_engine.tests.factories import (
    BASE_DATE,
    BulkShiftTemplateFactory,
    GenerationSpecFactory,
    ShiftFactory,
)


class TestShift:
    """Test the shift entity."""

    def test_times_are_normalized(self):
        shift = ShiftFactory.create(start="8:00:00", end="16:00:00")

        assert shift.start_time == "08:00"
        assert shift.end_time == "16:00"

    def test_identifiers_are_coerced_to_strings(self):
        shift = Shift(
            id=42,
            location_id=7,
            date=BASE_DATE,
            start_time="08:00",
            end_time="12:00",
            assigned_employee_ids=[3, 5],
        )

        assert shift.id == "42"
        assert shift.location_id == "7"
        assert shift.assigned_employee_ids == ("3", "5")

    def test_assignees_are_deduplicated_in_order(self):
        shift = ShiftFactory.create(employees=("b", "a", "b"))

        assert shift.assigned_employee_ids == ("b", "a")
        assert shift.primary_employee_id == "b"

    def test_end_must_follow_start(self):
        with pytest.raises(ValidationError):
            ShiftFactory.create(start="16:00", end="08:00")

    def test_blank_identifier_rejected(self):
        with pytest.raises(ValidationError):
            ShiftFactory.create(id="  ")

    def test_open_shift(self):
        shift = ShiftFactory.create(employees=())

        assert shift.is_open
        assert shift.primary_employee_id is None

    def test_shifts_are_immutable(self):
        shift = ShiftFactory.create()

        with pytest.raises(ValidationError):
            shift.start_time = "09:00"

    def test_with_window(self):
        shift = ShiftFactory.create(id="1")

        updated = shift.with_window(ShiftWindow.from_strings("10:00", "14:00"))

        assert (updated.id, updated.start_time, updated.end_time) == ("1", "10:00", "14:00")
        assert shift.start_time == "08:00"

    def test_moved_to_keeps_window(self):
        shift = ShiftFactory.create(id="1", employees=("emp-1", "emp-3"))

        moved = shift.moved_to("2", date(2024, 3, 15), "emp-2")

        assert moved.id == "2"
        assert moved.date == date(2024, 3, 15)
        assert moved.assigned_employee_ids == ("emp-2",)
        assert moved.window == shift.window

    def test_draft_to_shift(self):
        draft = ShiftDraft(
            location_id="loc-1", date=BASE_DATE, start_time="08:00", end_time="12:00"
        )

        shift = draft.to_shift("99")

        assert isinstance(shift, Shift)
        assert shift.id == "99"
        assert shift.location_id == "loc-1"


class TestGenerationSpec:
    """Test generation spec expansion."""

    def test_every_day_slot(self):
        spec = GenerationSpecFactory.create(days=3)

        drafts = spec.expand()

        assert [d.date for d in drafts] == [
            BASE_DATE,
            date(2024, 3, 12),
            date(2024, 3, 13),
        ]
        assert all(d.assigned_employee_ids == ("emp-1",) for d in drafts)

    def test_weekday_and_date_pinned_slots(self):
        spec = GenerationSpecFactory.create(
            days=14,
            slots=(
                SlotDefinition(start_time="06:00", end_time="10:00", weekday=4),
                SlotDefinition(
                    start_time="12:00",
                    end_time="16:00",
                    on_date=date(2024, 3, 13),
                    role="Windows",
                ),
            ),
        )

        drafts = spec.expand()

        assert [(d.date, d.start_time) for d in drafts] == [
            (date(2024, 3, 13), "12:00"),
            (date(2024, 3, 15), "06:00"),
            (date(2024, 3, 22), "06:00"),
        ]
        assert drafts[0].notes == "Windows"

    def test_empty_spec(self):
        assert GenerationSpecFactory.create(slots=()).is_empty
        pinned_outside = SlotDefinition(
            start_time="08:00", end_time="12:00", on_date=date(2025, 1, 1)
        )
        assert GenerationSpecFactory.create(slots=(pinned_outside,)).is_empty

    def test_slot_cannot_pin_date_and_weekday(self):
        with pytest.raises(ValidationError):
            SlotDefinition(
                start_time="08:00", end_time="12:00", weekday=0, on_date=BASE_DATE
            )


class TestBulkShiftTemplate:
    """Test template status consistency."""

    def test_reason_only_on_rejected(self):
        with pytest.raises(ValidationError):
            BulkShiftTemplateFactory.create(rejection_reason="nope")

        rejected = BulkShiftTemplateFactory.create(
            status=TemplateStatus.REJECTED, rejection_reason="nope"
        )
        assert rejected.rejection_reason == "nope"

    def test_created_ids_only_on_approved(self):
        with pytest.raises(ValidationError):
            BulkShiftTemplateFactory.create(created_shift_ids=("1",))

    def test_name_and_locality(self):
        template = BulkShiftTemplate(
            id="draft-1", generation_spec=GenerationSpecFactory.create(name="Week 12")
        )

        assert template.status == TemplateStatus.DRAFT
        assert template.is_local
        assert template.name == "Week 12"
