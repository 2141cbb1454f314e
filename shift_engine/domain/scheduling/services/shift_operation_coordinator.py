"""
Shift Operation Coordinator

Orchestrates create, update, move, delete and swap operations against the
shift backend. Every operation validates locally first, then commits through
the backend, then replaces the in-memory snapshot. Validation failures and
backend failures leave the snapshot untouched; the only exception is a
partially failed swap, whose successful half is reflected locally.
"""

import asyncio
import datetime as dt

from shift_engine.core.observability import (
    PARTIAL_SWAP_FAILURES,
    get_logger,
    log_error_with_context,
    monitor_operation,
)
from shift_engine.custom_types import Failure, Result, Success
from shift_engine.domain.shared.base import ValueObject
from shift_engine.domain.shared.exceptions import (
    DomainError,
    InvalidSwapError,
    NoEmployeeAssignedError,
    PartialSwapFailureError,
    ShiftBackendError,
    ShiftNotFoundError,
)

from ..entities.shift import Shift, ShiftDraft
from ..read_models.schedule_view import ScheduleDiagnostics, ScheduleView
from ..repositories.shift_backend import MoveShiftResult, ShiftBackend
from ..value_objects.compliance import ComplianceRule
from ..value_objects.enums import ShiftType, ViewGranularity
from ..value_objects.time_window import DateRange
from .compliance_validator import ComplianceValidator
from .conflict_detector import ConflictDetector
from .schedule_view_service import ScheduleViewService


class ShiftOperationResult(ValueObject):
    """
    Outcome of a successful shift operation.

    Attributes:
        shifts: Full snapshot after the operation
        affected: Shifts created or replaced by the operation
        removed_ids: Identifiers no longer present in the snapshot
        warnings: Backend warnings and double-bookings the change introduced
    """

    shifts: tuple[Shift, ...] = ()
    affected: tuple[Shift, ...] = ()
    removed_ids: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


class ShiftOperationCoordinator:
    """
    Validate-then-commit coordinator for shift operations.

    Holds the current shift snapshot as an immutable tuple that is replaced,
    never mutated, after each backend success. Designed for a single logical
    caller issuing one operation at a time.
    """

    def __init__(
        self,
        backend: ShiftBackend,
        compliance_rule: ComplianceRule,
        validator: ComplianceValidator | None = None,
        view_service: ScheduleViewService | None = None,
        conflict_detector: ConflictDetector | None = None,
    ) -> None:
        """
        Initialize the coordinator.

        Args:
            backend: Shift-management backend
            compliance_rule: Rule every new or edited window must satisfy
            validator: Compliance validator
            view_service: Builds views and diagnostics over the snapshot
            conflict_detector: Reports double-bookings a change introduces
        """
        self._backend = backend
        self._compliance_rule = compliance_rule
        self._validator = validator or ComplianceValidator(compliance_rule)
        self._view_service = view_service or ScheduleViewService()
        self._conflict_detector = conflict_detector or ConflictDetector()

        self._shifts: tuple[Shift, ...] = ()
        self._location_id: str | None = None
        self._date_range: DateRange | None = None

        self.logger = get_logger(__name__)

    @property
    def shifts(self) -> tuple[Shift, ...]:
        """Current snapshot."""
        return self._shifts

    @property
    def location_id(self) -> str | None:
        return self._location_id

    @property
    def date_range(self) -> DateRange | None:
        return self._date_range

    def get_shift(self, shift_id: str) -> Shift | None:
        shift_id = str(shift_id)
        for shift in self._shifts:
            if shift.id == shift_id:
                return shift
        return None

    # ------------------------------------------------------------------
    # Loading and views
    # ------------------------------------------------------------------

    @monitor_operation("load_shifts")
    async def load(
        self, location_id: str, date_range: DateRange
    ) -> Result[ShiftOperationResult, DomainError]:
        """
        Fetch the canonical shift set for a location and range.

        The scope is remembered for ``refresh``. On failure the previous
        snapshot and scope are kept.
        """
        try:
            shifts = await self._backend.fetch_shifts(str(location_id), date_range)
        except ShiftBackendError as e:
            log_error_with_context(
                e,
                "load_shifts",
                {"location_id": str(location_id), "date_range": str(date_range)},
                severity="warning",
            )
            return Failure(e)

        self._location_id = str(location_id)
        self._date_range = date_range
        self._shifts = tuple(shifts)
        self.logger.info(
            "Shifts loaded",
            location_id=self._location_id,
            date_range=str(date_range),
            shift_count=len(self._shifts),
        )
        return Success(ShiftOperationResult(shifts=self._shifts))

    async def refresh(self) -> Result[ShiftOperationResult, DomainError]:
        """Re-fetch the last loaded scope; a no-op before the first load."""
        if self._location_id is None or self._date_range is None:
            return Success(ShiftOperationResult(shifts=self._shifts))
        return await self.load(self._location_id, self._date_range)

    def view(
        self,
        granularity: ViewGranularity = ViewGranularity.WEEK,
        date_range: DateRange | None = None,
        location_id: str | None = None,
    ) -> ScheduleView:
        """Project the snapshot; defaults to the loaded location and range."""
        location_id = location_id or self._location_id
        date_range = date_range or self._date_range
        if location_id is None or date_range is None:
            raise ValueError("no location/date range loaded; call load() first")
        return self._view_service.build_view(
            self._shifts, location_id, date_range, granularity
        )

    def diagnose(
        self,
        granularity: ViewGranularity = ViewGranularity.WEEK,
        date_range: DateRange | None = None,
        location_id: str | None = None,
    ) -> ScheduleDiagnostics:
        return self._view_service.diagnose(
            self.view(granularity, date_range, location_id)
        )

    # ------------------------------------------------------------------
    # Mutating operations
    # ------------------------------------------------------------------

    @monitor_operation("add_shift")
    async def add_shift(
        self,
        employee_id: str | None,
        shift_date: dt.date,
        start_time: str,
        end_time: str,
        location_id: str,
        shift_type: ShiftType = ShiftType.REGULAR,
        notes: str | None = None,
    ) -> Result[ShiftOperationResult, DomainError]:
        """
        Create a shift for one employee (or an open shift when None).

        Args:
            employee_id: Employee to assign, None for an open shift
            shift_date: Date of the shift
            start_time: Start, ``HH:MM``
            end_time: End, ``HH:MM``
            location_id: Client/site of the shift
            shift_type: Regular or emergency
            notes: Free text for the crew

        Returns:
            Success with the created shift in ``affected``, or Failure with a
            compliance or backend error
        """
        validation = self._validator.validate(
            start_time, end_time, self._compliance_rule
        )
        if isinstance(validation, Failure):
            return Failure(validation.error)
        window = validation.value

        draft = ShiftDraft(
            location_id=location_id,
            date=shift_date,
            start_time=window.start_time,
            end_time=window.end_time,
            assigned_employee_ids=(employee_id,) if employee_id else (),
            shift_type=shift_type,
            notes=notes,
        )

        try:
            created = await self._backend.create_shift(draft)
        except ShiftBackendError as e:
            log_error_with_context(
                e, "add_shift", {"shift_date": shift_date.isoformat()}, "warning"
            )
            return Failure(e)

        self._shifts = self._replace_in_snapshot(
            self._shifts, appended=(created.shift,)
        )
        warnings = tuple(created.warnings) + self._double_booking_warnings(
            created.shift
        )
        return Success(
            ShiftOperationResult(
                shifts=self._shifts, affected=(created.shift,), warnings=warnings
            )
        )

    @monitor_operation("update_shift_time")
    async def update_shift_time(
        self, shift_id: str, start_time: str, end_time: str
    ) -> Result[ShiftOperationResult, DomainError]:
        """
        Change the time window of an existing shift.

        Assignees are kept from the local record when the backend response
        does not carry them.
        """
        current = self.get_shift(shift_id)
        if current is None:
            return Failure(ShiftNotFoundError(str(shift_id)))

        validation = self._validator.validate(
            start_time, end_time, self._compliance_rule
        )
        if isinstance(validation, Failure):
            return Failure(validation.error)

        try:
            updated = await self._backend.update_shift(current.id, validation.value)
        except ShiftBackendError as e:
            log_error_with_context(
                e, "update_shift_time", {"shift_id": current.id}, "warning"
            )
            return Failure(e)

        if not updated.assigned_employee_ids and current.assigned_employee_ids:
            updated = updated.model_copy(
                update={"assigned_employee_ids": current.assigned_employee_ids}
            )

        self._shifts = self._replace_in_snapshot(
            self._shifts, replacements={current.id: updated}
        )
        return Success(
            ShiftOperationResult(
                shifts=self._shifts,
                affected=(updated,),
                removed_ids=(current.id,) if updated.id != current.id else (),
                warnings=self._double_booking_warnings(updated),
            )
        )

    @monitor_operation("move_shift")
    async def move_shift(
        self, shift_id: str, new_date: dt.date, employee_id: str
    ) -> Result[ShiftOperationResult, DomainError]:
        """
        Move a shift to another date and employee.

        The backend may issue a new identifier; the old record is removed
        and the replacement takes its place in the snapshot.
        """
        current = self.get_shift(shift_id)
        if current is None:
            return Failure(ShiftNotFoundError(str(shift_id)))

        try:
            moved = await self._backend.move_shift_to_date(
                current.id, new_date, str(employee_id)
            )
        except ShiftBackendError as e:
            log_error_with_context(e, "move_shift", {"shift_id": current.id}, "warning")
            return Failure(e)

        self._shifts = self._apply_moves(self._shifts, [moved])
        return Success(
            ShiftOperationResult(
                shifts=self._shifts,
                affected=(moved.new_shift,),
                removed_ids=self._removed_ids([moved]),
                warnings=self._double_booking_warnings(moved.new_shift),
            )
        )

    @monitor_operation("delete_shift")
    async def delete_shift(
        self, shift_id: str
    ) -> Result[ShiftOperationResult, DomainError]:
        current = self.get_shift(shift_id)
        if current is None:
            return Failure(ShiftNotFoundError(str(shift_id)))

        try:
            await self._backend.delete_shift(current.id)
        except ShiftBackendError as e:
            log_error_with_context(
                e, "delete_shift", {"shift_id": current.id}, "warning"
            )
            return Failure(e)

        self._shifts = tuple(s for s in self._shifts if s.id != current.id)
        return Success(
            ShiftOperationResult(shifts=self._shifts, removed_ids=(current.id,))
        )

    @monitor_operation("swap_shifts")
    async def swap_shifts(
        self, shift_a_id: str, shift_b_id: str
    ) -> Result[ShiftOperationResult, DomainError]:
        """
        Exchange date and first assignee between two shifts.

        Both moves are issued concurrently. If exactly one fails the result is
        a ``PartialSwapFailureError``: the successful move is kept (no
        compensation), reflected locally, and the failed shift is unchanged.
        If both fail, the first shift's backend error is returned.
        """
        if str(shift_a_id) == str(shift_b_id):
            return Failure(InvalidSwapError(str(shift_a_id)))

        shift_a = self.get_shift(shift_a_id)
        if shift_a is None:
            return Failure(ShiftNotFoundError(str(shift_a_id)))
        shift_b = self.get_shift(shift_b_id)
        if shift_b is None:
            return Failure(ShiftNotFoundError(str(shift_b_id)))

        employee_a = shift_a.primary_employee_id
        if employee_a is None:
            return Failure(NoEmployeeAssignedError(shift_a.id))
        employee_b = shift_b.primary_employee_id
        if employee_b is None:
            return Failure(NoEmployeeAssignedError(shift_b.id))

        outcome_a, outcome_b = await asyncio.gather(
            self._backend.move_shift_to_date(shift_a.id, shift_b.date, employee_b),
            self._backend.move_shift_to_date(shift_b.id, shift_a.date, employee_a),
            return_exceptions=True,
        )
        for outcome in (outcome_a, outcome_b):
            if isinstance(outcome, BaseException) and not isinstance(
                outcome, ShiftBackendError
            ):
                raise outcome

        if isinstance(outcome_a, ShiftBackendError) and isinstance(
            outcome_b, ShiftBackendError
        ):
            log_error_with_context(
                outcome_a,
                "swap_shifts",
                {"shift_a_id": shift_a.id, "shift_b_id": shift_b.id},
                "warning",
            )
            return Failure(outcome_a)

        if isinstance(outcome_a, ShiftBackendError) or isinstance(
            outcome_b, ShiftBackendError
        ):
            if isinstance(outcome_a, ShiftBackendError):
                succeeded, failed_id, cause = outcome_b, shift_a.id, outcome_a
            else:
                succeeded, failed_id, cause = outcome_a, shift_b.id, outcome_b

            self._shifts = self._apply_moves(self._shifts, [succeeded])
            error = PartialSwapFailureError(succeeded, failed_id, cause)
            PARTIAL_SWAP_FAILURES.inc()
            log_error_with_context(
                error,
                "swap_shifts",
                {"shift_a_id": shift_a.id, "shift_b_id": shift_b.id},
            )
            return Failure(error)

        moves = [outcome_a, outcome_b]
        self._shifts = self._apply_moves(self._shifts, moves)
        return Success(
            ShiftOperationResult(
                shifts=self._shifts,
                affected=(outcome_a.new_shift, outcome_b.new_shift),
                removed_ids=self._removed_ids(moves),
            )
        )

    # ------------------------------------------------------------------
    # Snapshot helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _replace_in_snapshot(
        snapshot: tuple[Shift, ...],
        replacements: dict[str, Shift] | None = None,
        appended: tuple[Shift, ...] = (),
    ) -> tuple[Shift, ...]:
        """
        Build the next snapshot.

        Replaced records keep their position, appended ones go last. Any
        other record sharing an id with a replacement or appended shift is
        dropped so no identifier appears twice.
        """
        replacements = replacements or {}
        incoming_ids = {s.id for s in replacements.values()} | {
            s.id for s in appended
        }

        result: list[Shift] = []
        seen: set[str] = set()
        for shift in snapshot:
            if shift.id in replacements:
                shift = replacements[shift.id]
            elif shift.id in incoming_ids:
                continue
            if shift.id in seen:
                continue
            seen.add(shift.id)
            result.append(shift)

        for shift in appended:
            if shift.id not in seen:
                seen.add(shift.id)
                result.append(shift)
        return tuple(result)

    @classmethod
    def _apply_moves(
        cls, snapshot: tuple[Shift, ...], moves: list[MoveShiftResult]
    ) -> tuple[Shift, ...]:
        return cls._replace_in_snapshot(
            snapshot, replacements={m.old_shift_id: m.new_shift for m in moves}
        )

    @staticmethod
    def _removed_ids(moves: list[MoveShiftResult]) -> tuple[str, ...]:
        new_ids = {m.new_shift.id for m in moves}
        return tuple(m.old_shift_id for m in moves if m.old_shift_id not in new_ids)

    def _double_booking_warnings(self, shift: Shift) -> tuple[str, ...]:
        others = [s for s in self._shifts if s.id != shift.id]
        return tuple(
            conflict.description
            for conflict in self._conflict_detector.conflicts_for(shift, others)
        )
