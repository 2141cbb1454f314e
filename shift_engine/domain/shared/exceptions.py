"""
Domain Exceptions

Typed errors for the shift scheduling engine. Engine operations return them
inside ``Failure`` results; only shift backends raise (``ShiftBackendError``),
and the coordinator and workflow convert those at their boundary. Callers
branch on ``error_type`` / ``error_code``, never on message text.
"""

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shift_engine.domain.scheduling.repositories.shift_backend import (
        MoveShiftResult,
    )


class ErrorType(str, Enum):
    """Error type enumeration for discriminated unions."""

    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    NOT_FOUND = "not_found"
    EXTERNAL_SERVICE = "external_service"
    PARTIAL_FAILURE = "partial_failure"


class DomainError(Exception):
    """Base class for all domain errors with type discrimination."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, str | dict[str, str | int | bool | None]]:
        """Convert error to dictionary for API responses."""
        return {
            "type": self.error_type.value,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainError):
    """Raised when domain validation rules are violated."""

    def __init__(
        self,
        field_name: str,
        value: str | int | float | bool | None,
        message: str,
        error_code: str | None = None,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        self.field_name = field_name
        self.value = value
        self.error_code = error_code or "VALIDATION_ERROR"

        full_message = f"Validation failed for field '{field_name}': {message}"
        details = details or {}
        details.update(
            {
                "field": field_name,
                "value": str(value) if value is not None else None,
                "error_code": self.error_code,
            }
        )

        super().__init__(full_message, ErrorType.VALIDATION, details)

    def to_dict(self) -> dict[str, str | None]:
        """Convert to dictionary for API responses."""
        return {
            "type": self.error_type.value,
            "field": self.field_name,
            "value": str(self.value) if self.value is not None else None,
            "message": self.message,
            "error_code": self.error_code,
        }


# Compliance errors, reported in check order
class ComplianceError(ValidationError):
    """Base class for time-window compliance violations."""

    code = "COMPLIANCE_ERROR"

    def __init__(
        self,
        field_name: str,
        value: str | int | float | bool | None,
        message: str,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        super().__init__(field_name, value, message, self.code, details)


class InvalidFormatError(ComplianceError):
    """Raised when a time of day is not HH:MM."""

    code = "INVALID_FORMAT"


class OrderingViolationError(ComplianceError):
    """Raised when a shift does not end after it starts."""

    code = "ORDERING_VIOLATION"


class WindowViolationError(ComplianceError):
    """Raised when a shift starts too early or ends too late."""

    code = "WINDOW_VIOLATION"


class DurationViolationError(ComplianceError):
    """Raised when a shift length is not an allowed whole-hour duration."""

    code = "DURATION_VIOLATION"


class MissingReasonError(ValidationError):
    """Raised when a template is rejected without a reason."""

    def __init__(self, template_id: str) -> None:
        super().__init__(
            "reason",
            None,
            f"a rejection reason is required for template {template_id}",
            "MISSING_REASON",
            {"template_id": template_id},
        )
        self.template_id = template_id


class NoEmployeeAssignedError(ValidationError):
    """Raised when a swap involves a shift without assignees."""

    def __init__(self, shift_id: str) -> None:
        super().__init__(
            "assigned_employee_ids",
            shift_id,
            f"shift {shift_id} has no assigned employee",
            "NO_EMPLOYEE_ASSIGNED",
            {"shift_id": shift_id},
        )
        self.shift_id = shift_id


class InvalidSwapError(ValidationError):
    """Raised when a shift is swapped with itself."""

    def __init__(self, shift_id: str) -> None:
        super().__init__(
            "shift_b",
            shift_id,
            "a shift cannot be swapped with itself",
            "INVALID_SWAP",
            {"shift_id": shift_id},
        )
        self.shift_id = shift_id


class EmptyGenerationSpecError(ValidationError):
    """Raised when a template without slots or days is submitted."""

    def __init__(self, template_id: str) -> None:
        super().__init__(
            "generation_spec",
            template_id,
            "generation spec produces no shifts",
            "EMPTY_GENERATION_SPEC",
            {"template_id": template_id},
        )
        self.template_id = template_id


class InvalidTransitionError(DomainError):
    """Raised when a bulk template status transition is not allowed."""

    error_code = "INVALID_TRANSITION"

    def __init__(
        self, template_id: str, current_status: str, attempted_status: str
    ) -> None:
        details = {
            "template_id": template_id,
            "current_status": current_status,
            "attempted_status": attempted_status,
            "error_code": self.error_code,
        }
        super().__init__(
            f"Cannot change template {template_id} from {current_status} "
            f"to {attempted_status}",
            ErrorType.BUSINESS_RULE,
            details,
        )
        self.template_id = template_id
        self.current_status = current_status
        self.attempted_status = attempted_status


class ShiftNotFoundError(DomainError):
    """Raised when a shift is not part of the current snapshot."""

    error_code = "SHIFT_NOT_FOUND"

    def __init__(self, shift_id: str) -> None:
        details = {
            "shift_id": shift_id,
            "entity_type": "shift",
            "error_code": self.error_code,
        }
        super().__init__(f"Shift not found: {shift_id}", ErrorType.NOT_FOUND, details)
        self.shift_id = shift_id


class TemplateNotFoundError(DomainError):
    """Raised when a bulk template is unknown."""

    error_code = "TEMPLATE_NOT_FOUND"

    def __init__(self, template_id: str) -> None:
        details = {
            "template_id": template_id,
            "entity_type": "bulk_template",
            "error_code": self.error_code,
        }
        super().__init__(
            f"Bulk template not found: {template_id}", ErrorType.NOT_FOUND, details
        )
        self.template_id = template_id


class ExternalServiceError(DomainError):
    """Base class for external service errors."""

    def __init__(
        self,
        message: str,
        service_name: str,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        service_details = details or {}
        service_details.update(
            {"service_name": service_name, "error_category": "external_service"}
        )

        super().__init__(message, ErrorType.EXTERNAL_SERVICE, service_details)
        self.service_name = service_name


class ShiftBackendError(ExternalServiceError):
    """Raised by shift backends when a call fails or is rejected."""

    error_code = "SHIFT_BACKEND_ERROR"

    def __init__(
        self,
        operation: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        details = {
            "operation": operation,
            "status_code": status_code,
            "error_code": self.error_code,
        }
        super().__init__(message, "shift_backend", details)
        self.operation = operation
        self.status_code = status_code


class PartialSwapFailureError(DomainError):
    """
    Raised when exactly one half of a swap was applied by the backend.

    No compensation is attempted. ``succeeded`` is the move the backend
    performed, ``failed_shift_id`` the shift that kept its old assignment and
    ``cause`` the backend error for that half.
    """

    error_code = "PARTIAL_SWAP_FAILURE"

    def __init__(
        self,
        succeeded: "MoveShiftResult",
        failed_shift_id: str,
        cause: ShiftBackendError,
    ) -> None:
        details = {
            "succeeded_old_shift_id": succeeded.old_shift_id,
            "succeeded_new_shift_id": succeeded.new_shift.id,
            "failed_shift_id": failed_shift_id,
            "cause": cause.message,
            "error_code": self.error_code,
        }
        super().__init__(
            f"Swap partially applied: shift {succeeded.old_shift_id} moved, "
            f"shift {failed_shift_id} failed: {cause.message}",
            ErrorType.PARTIAL_FAILURE,
            details,
        )
        self.succeeded = succeeded
        self.failed_shift_id = failed_shift_id
        self.cause = cause
