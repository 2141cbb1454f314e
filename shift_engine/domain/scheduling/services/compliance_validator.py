"""
Compliance Validator

Checks a proposed shift window against a ``ComplianceRule``. Called before
every operation that creates or changes a time window, so a failing check
never reaches the backend.
"""

from shift_engine.custom_types import Failure, Result, Success
from shift_engine.domain.shared.exceptions import (
    ComplianceError,
    DurationViolationError,
    InvalidFormatError,
    OrderingViolationError,
    WindowViolationError,
)

from ..value_objects.compliance import ComplianceRule
from ..value_objects.time_window import ShiftWindow, parse_time_of_day


class ComplianceValidator:
    """
    Pure validation of shift windows.

    Checks run in a fixed order and the first failure is reported: format,
    ordering, window bounds, duration.
    """

    def __init__(self, default_rule: ComplianceRule | None = None) -> None:
        self._default_rule = default_rule

    def validate(
        self,
        start_time: str,
        end_time: str,
        rule: ComplianceRule | None = None,
    ) -> Result[ShiftWindow, ComplianceError]:
        """
        Validate a proposed time window.

        Args:
            start_time: Proposed start, ``HH:MM``
            end_time: Proposed end, ``HH:MM``
            rule: Rule to apply; the validator's default rule when omitted

        Returns:
            Success with the parsed window, or Failure with the first violation
        """
        rule = rule or self._default_rule
        if rule is None:
            raise ValueError("no compliance rule configured")

        start = parse_time_of_day(start_time)
        if start is None:
            return Failure(
                InvalidFormatError("start_time", start_time, "expected HH:MM")
            )
        end = parse_time_of_day(end_time)
        if end is None:
            return Failure(InvalidFormatError("end_time", end_time, "expected HH:MM"))

        if end <= start:
            return Failure(
                OrderingViolationError(
                    "end_time",
                    end_time,
                    f"shift must end after it starts ({start_time})",
                )
            )

        if start < rule.min_start_minutes:
            return Failure(
                WindowViolationError(
                    "start_time",
                    start_time,
                    f"shifts may not start before {rule.min_start}",
                    {"min_start": rule.min_start},
                )
            )
        if end > rule.max_end_minutes:
            return Failure(
                WindowViolationError(
                    "end_time",
                    end_time,
                    f"shifts may not end after {rule.max_end}",
                    {"max_end": rule.max_end},
                )
            )

        duration_minutes = end - start
        allowed = ", ".join(str(hours) for hours in sorted(rule.allowed_durations))
        if (
            duration_minutes % 60 != 0
            or duration_minutes // 60 not in rule.allowed_durations
        ):
            return Failure(
                DurationViolationError(
                    "duration",
                    f"{duration_minutes / 60:g}h",
                    f"shift length must be one of {allowed} hours",
                    {"duration_minutes": duration_minutes, "allowed_hours": allowed},
                )
            )

        return Success(ShiftWindow(start_minutes=start, end_minutes=end))

    def is_compliant(
        self, start_time: str, end_time: str, rule: ComplianceRule | None = None
    ) -> bool:
        return self.validate(start_time, end_time, rule).is_success()
