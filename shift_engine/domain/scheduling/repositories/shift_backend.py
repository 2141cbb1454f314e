"""
Shift Backend Interface

Defines the contract the engine uses to talk to the shift-management
backend. Every method may raise ``ShiftBackendError``; the engine never
retries mutating calls.
"""

import datetime as dt
from abc import ABC, abstractmethod

from pydantic import Field

from shift_engine.domain.shared.base import ValueObject

from ..entities.bulk_template import BulkShiftTemplate, GenerationSpec
from ..entities.shift import Shift, ShiftDraft
from ..value_objects.enums import TemplateStatus
from ..value_objects.identifier import Identifier
from ..value_objects.time_window import DateRange, ShiftWindow


class CreateShiftResult(ValueObject):
    """Created shift plus advisory warnings the backend attached."""

    shift: Shift
    warnings: tuple[str, ...] = ()


class MoveShiftResult(ValueObject):
    """A move replaces the shift; the replacement may carry a new id."""

    old_shift_id: Identifier
    new_shift: Shift


class ApproveTemplateResult(ValueObject):
    """Outcome of approving a bulk template."""

    created_shift_count: int = Field(ge=0)
    created_shift_ids: tuple[Identifier, ...] = ()


class ShiftBackend(ABC):
    """
    Abstract shift-management backend.

    Implementations live in the infrastructure layer (HTTP, in-memory).
    """

    @abstractmethod
    async def fetch_shifts(
        self, location_id: str, date_range: DateRange
    ) -> list[Shift]:
        """
        Fetch the canonical shifts of a location.

        Args:
            location_id: Client/site identifier
            date_range: Inclusive date range to fetch

        Returns:
            Shifts at the location within the range

        Raises:
            ShiftBackendError: If the backend call fails
        """
        pass

    @abstractmethod
    async def create_shift(self, draft: ShiftDraft) -> CreateShiftResult:
        """
        Create a shift.

        Args:
            draft: Shift to create (assignees, date, window, location, type)

        Returns:
            Created shift and any backend warnings

        Raises:
            ShiftBackendError: If the backend rejects or fails the call
        """
        pass

    @abstractmethod
    async def update_shift(self, shift_id: str, window: ShiftWindow) -> Shift:
        """
        Change the time window of a shift.

        Args:
            shift_id: Shift to update
            window: New start/end times

        Returns:
            Updated shift

        Raises:
            ShiftBackendError: If the backend rejects or fails the call
        """
        pass

    @abstractmethod
    async def move_shift_to_date(
        self, shift_id: str, new_date: dt.date, employee_id: str
    ) -> MoveShiftResult:
        """
        Move a shift to another date and employee.

        Args:
            shift_id: Shift to move
            new_date: Target date
            employee_id: Employee the moved shift is assigned to

        Returns:
            Old identifier and the replacement shift

        Raises:
            ShiftBackendError: If the backend rejects or fails the call
        """
        pass

    @abstractmethod
    async def delete_shift(self, shift_id: str) -> None:
        """
        Delete a shift.

        Raises:
            ShiftBackendError: If the backend rejects or fails the call
        """
        pass

    @abstractmethod
    async def create_bulk_template(self, spec: GenerationSpec) -> str:
        """
        Submit a bulk template for approval.

        Args:
            spec: Generation spec of the template

        Returns:
            Backend identifier of the pending template

        Raises:
            ShiftBackendError: If the backend rejects or fails the call
        """
        pass

    @abstractmethod
    async def approve_bulk_template(self, template_id: str) -> ApproveTemplateResult:
        """
        Approve a pending template; the backend fans out its shifts.

        Returns:
            Number (and, when known, ids) of created shifts

        Raises:
            ShiftBackendError: If the backend rejects or fails the call
        """
        pass

    @abstractmethod
    async def reject_bulk_template(self, template_id: str, reason: str) -> None:
        """
        Reject a pending template.

        Raises:
            ShiftBackendError: If the backend rejects or fails the call
        """
        pass

    @abstractmethod
    async def list_bulk_templates(
        self, status: TemplateStatus | None = None
    ) -> list[BulkShiftTemplate]:
        """
        List submitted templates.

        Args:
            status: Only templates in this status; all when None

        Raises:
            ShiftBackendError: If the backend call fails
        """
        pass
