"""
In-Memory Shift Backend

Dict-backed ``ShiftBackend`` with the same observable semantics as the REST
API: moves issue new identifiers, approving a template fans out its
generation spec. Supports failure injection and records every call, for
tests and local development.
"""

import asyncio
import datetime as dt
import itertools
from typing import Any

from shift_engine.domain.scheduling.entities.bulk_template import (
    BulkShiftTemplate,
    GenerationSpec,
)
from shift_engine.domain.scheduling.entities.shift import Shift, ShiftDraft
from shift_engine.domain.scheduling.repositories.shift_backend import (
    ApproveTemplateResult,
    CreateShiftResult,
    MoveShiftResult,
    ShiftBackend,
)
from shift_engine.domain.scheduling.value_objects.enums import TemplateStatus
from shift_engine.domain.scheduling.value_objects.time_window import (
    DateRange,
    ShiftWindow,
)
from shift_engine.domain.shared.exceptions import ShiftBackendError


class _InjectedFailure:
    def __init__(
        self, error: ShiftBackendError, target_id: str | None, remaining: int | None
    ) -> None:
        self.error = error
        self.target_id = target_id
        self.remaining = remaining


class InMemoryShiftBackend(ShiftBackend):
    """In-memory shift backend with configurable failures."""

    def __init__(
        self,
        shifts: list[Shift] | None = None,
        latency_seconds: float = 0.0,
    ) -> None:
        """
        Initialize the backend.

        Args:
            shifts: Initial shifts; new ids continue after the largest numeric id
            latency_seconds: Simulated delay before every call completes
        """
        self._shifts: dict[str, Shift] = {s.id: s for s in shifts or []}
        self._templates: dict[str, BulkShiftTemplate] = {}
        self._failures: dict[str, list[_InjectedFailure]] = {}
        self._latency_seconds = latency_seconds

        numeric_ids = [int(i) for i in self._shifts if i.isdigit()]
        self._shift_ids = itertools.count(max(numeric_ids, default=0) + 1)
        self._template_ids = itertools.count(1)

        self.calls: list[dict[str, Any]] = []

    @property
    def shifts(self) -> list[Shift]:
        return list(self._shifts.values())

    @property
    def templates(self) -> list[BulkShiftTemplate]:
        return list(self._templates.values())

    def inject_failure(
        self,
        operation: str,
        message: str = "injected failure",
        target_id: str | None = None,
        times: int | None = None,
        status_code: int | None = 500,
    ) -> None:
        """
        Make an operation fail.

        Args:
            operation: Backend method name, e.g. ``move_shift_to_date``
            message: Error message
            target_id: Only fail calls for this shift or template id
            times: Fail this many times, then succeed again; None = always
            status_code: Status code carried by the error
        """
        self._failures.setdefault(operation, []).append(
            _InjectedFailure(
                ShiftBackendError(operation, message, status_code),
                str(target_id) if target_id is not None else None,
                times,
            )
        )

    def clear_failures(self) -> None:
        self._failures.clear()

    def calls_to(self, operation: str) -> list[dict[str, Any]]:
        return [call for call in self.calls if call["operation"] == operation]

    async def _enter(
        self, operation: str, target_id: str | None = None, **args: Any
    ) -> None:
        self.calls.append({"operation": operation, "target_id": target_id, **args})
        if self._latency_seconds:
            await asyncio.sleep(self._latency_seconds)

        for failure in self._failures.get(operation, []):
            if failure.target_id is not None and failure.target_id != target_id:
                continue
            if failure.remaining is not None:
                if failure.remaining <= 0:
                    continue
                failure.remaining -= 1
            raise failure.error

    def _require_shift(self, operation: str, shift_id: str) -> Shift:
        shift = self._shifts.get(str(shift_id))
        if shift is None:
            raise ShiftBackendError(operation, f"Shift {shift_id} not found", 404)
        return shift

    def _require_template(self, operation: str, template_id: str) -> BulkShiftTemplate:
        template = self._templates.get(str(template_id))
        if template is None:
            raise ShiftBackendError(operation, f"Template {template_id} not found", 404)
        return template

    def _next_shift_id(self) -> str:
        return str(next(self._shift_ids))

    async def fetch_shifts(
        self, location_id: str, date_range: DateRange
    ) -> list[Shift]:
        await self._enter("fetch_shifts", str(location_id), date_range=date_range)
        return sorted(
            (
                shift
                for shift in self._shifts.values()
                if shift.location_id == str(location_id)
                and date_range.contains(shift.date)
            ),
            key=lambda s: (s.date, s.start_minutes, s.id),
        )

    async def create_shift(self, draft: ShiftDraft) -> CreateShiftResult:
        await self._enter("create_shift", None, draft=draft)
        shift = draft.to_shift(self._next_shift_id())
        self._shifts[shift.id] = shift

        warnings = tuple(
            f"Employee {employee_id} already works {other.start_time}-{other.end_time} "
            f"on {other.date.isoformat()}"
            for other in self._shifts.values()
            if other.id != shift.id
            and other.date == shift.date
            and other.window.overlaps_with(shift.window)
            for employee_id in shift.assigned_employee_ids
            if employee_id in other.assigned_employee_ids
        )
        return CreateShiftResult(shift=shift, warnings=warnings)

    async def update_shift(self, shift_id: str, window: ShiftWindow) -> Shift:
        operation = "update_shift"
        await self._enter(operation, str(shift_id), window=window)
        updated = self._require_shift(operation, shift_id).with_window(window)
        self._shifts[updated.id] = updated
        return updated

    async def move_shift_to_date(
        self, shift_id: str, new_date: dt.date, employee_id: str
    ) -> MoveShiftResult:
        operation = "move_shift_to_date"
        await self._enter(
            operation, str(shift_id), new_date=new_date, employee_id=employee_id
        )
        current = self._require_shift(operation, shift_id)
        moved = current.moved_to(self._next_shift_id(), new_date, str(employee_id))
        del self._shifts[current.id]
        self._shifts[moved.id] = moved
        return MoveShiftResult(old_shift_id=current.id, new_shift=moved)

    async def delete_shift(self, shift_id: str) -> None:
        operation = "delete_shift"
        await self._enter(operation, str(shift_id))
        self._require_shift(operation, shift_id)
        del self._shifts[str(shift_id)]

    async def create_bulk_template(self, spec: GenerationSpec) -> str:
        await self._enter("create_bulk_template", None, spec=spec)
        template = BulkShiftTemplate(
            id=f"tpl-{next(self._template_ids)}",
            status=TemplateStatus.PENDING_APPROVAL,
            generation_spec=spec,
        )
        self._templates[template.id] = template
        return template.id

    async def approve_bulk_template(self, template_id: str) -> ApproveTemplateResult:
        operation = "approve_bulk_template"
        await self._enter(operation, str(template_id))
        template = self._require_template(operation, template_id)
        if template.status != TemplateStatus.PENDING_APPROVAL:
            raise ShiftBackendError(
                operation, f"Template {template_id} is {template.status.value}", 409
            )

        created = []
        for draft in template.generation_spec.expand():
            shift = draft.to_shift(self._next_shift_id())
            self._shifts[shift.id] = shift
            created.append(shift.id)

        self._templates[template.id] = template.model_copy(
            update={
                "status": TemplateStatus.APPROVED,
                "created_shift_ids": tuple(created),
                "created_shift_count": len(created),
            }
        )
        return ApproveTemplateResult(
            created_shift_count=len(created), created_shift_ids=tuple(created)
        )

    async def reject_bulk_template(self, template_id: str, reason: str) -> None:
        operation = "reject_bulk_template"
        await self._enter(operation, str(template_id), reason=reason)
        template = self._require_template(operation, template_id)
        if template.status != TemplateStatus.PENDING_APPROVAL:
            raise ShiftBackendError(
                operation, f"Template {template_id} is {template.status.value}", 409
            )
        self._templates[template.id] = template.model_copy(
            update={"status": TemplateStatus.REJECTED, "rejection_reason": reason}
        )

    async def list_bulk_templates(
        self, status: TemplateStatus | None = None
    ) -> list[BulkShiftTemplate]:
        await self._enter("list_bulk_templates", None, status=status)
        return [
            template
            for template in self._templates.values()
            if status is None or template.status == status
        ]
