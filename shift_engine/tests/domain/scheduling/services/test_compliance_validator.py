"""Tests for ComplianceValidator."""

import pytest

from shift_engine.custom_types import Failure, Success
from shift_engine.domain.scheduling.services.compliance_validator import (
    ComplianceValidator,
)
from shift_engine.domain.shared.exceptions import (
    DurationViolationError,
    InvalidFormatError,
    OrderingViolationError,
    WindowViolationError,
)
from shift_engine.tests.factories import ComplianceRuleFactory


@pytest.fixture
def validator(compliance_rule):
    return ComplianceValidator(compliance_rule)


class TestComplianceValidator:
    """Test shift window validation against a compliance rule."""

    def test_compliant_window(self, validator):
        result = validator.validate("08:00", "16:00")

        assert isinstance(result, Success)
        assert result.value.start_time == "08:00"
        assert result.value.end_time == "16:00"
        assert result.value.duration_hours == 8

    def test_end_after_max_end_is_window_violation(self, validator):
        result = validator.validate("21:00", "23:00")

        assert isinstance(result, Failure)
        assert isinstance(result.error, WindowViolationError)
        assert result.error.error_code == "WINDOW_VIOLATION"
        assert result.error.field_name == "end_time"

    def test_start_before_min_start_is_window_violation(self, validator):
        result = validator.validate("05:00", "09:00")

        assert isinstance(result.error, WindowViolationError)
        assert result.error.field_name == "start_time"

    def test_half_hour_duration_is_duration_violation(self, validator):
        result = validator.validate("08:00", "16:30")

        assert isinstance(result, Failure)
        assert isinstance(result.error, DurationViolationError)
        assert result.error.error_code == "DURATION_VIOLATION"

    def test_duration_not_in_allowed_set(self, validator):
        result = validator.validate("08:00", "13:00")

        assert isinstance(result.error, DurationViolationError)

    @pytest.mark.parametrize(
        "start,end,field",
        [
            ("8am", "16:00", "start_time"),
            ("08:00", "25:00", "end_time"),
            ("", "", "start_time"),
        ],
    )
    def test_malformed_times(self, validator, start, end, field):
        result = validator.validate(start, end)

        assert isinstance(result.error, InvalidFormatError)
        assert result.error.field_name == field

    @pytest.mark.parametrize("start,end", [("16:00", "08:00"), ("10:00", "10:00")])
    def test_end_not_after_start(self, validator, start, end):
        result = validator.validate(start, end)

        assert isinstance(result.error, OrderingViolationError)

    def test_ordering_checked_before_window(self, validator):
        # both out of bounds and reversed: ordering wins
        result = validator.validate("23:00", "05:00")

        assert isinstance(result.error, OrderingViolationError)

    def test_window_checked_before_duration(self, validator):
        result = validator.validate("20:30", "23:00")

        assert isinstance(result.error, WindowViolationError)

    def test_window_bounds_are_inclusive(self, validator):
        assert validator.is_compliant("06:00", "12:00")
        assert validator.is_compliant("10:00", "22:00")

    def test_explicit_rule_overrides_default(self, validator):
        night_rule = ComplianceRuleFactory.create(
            min_start="00:00", max_end="23:59", allowed_durations=(2,)
        )

        assert validator.validate("21:00", "23:00", night_rule).is_success()

    def test_no_rule_configured(self):
        with pytest.raises(ValueError):
            ComplianceValidator().validate("08:00", "16:00")

    def test_errors_are_validation_typed(self, validator):
        error = validator.validate("21:00", "23:00").error

        assert error.to_dict()["type"] == "validation"
        assert error.to_dict()["error_code"] == "WINDOW_VIOLATION"
