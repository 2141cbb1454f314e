"""
Mappers between shift backend JSON payloads and domain objects.

The backend speaks snake_case JSON with ``client_id`` for the location and
integer ids. Assignees arrive either as ``employee_ids`` or nested as
``employees[].employee.id``; times may carry a seconds suffix.
"""

import datetime as dt
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from shift_engine.domain.scheduling.entities.bulk_template import (
    BulkShiftTemplate,
    GenerationSpec,
    SlotDefinition,
)
from shift_engine.domain.scheduling.entities.shift import Shift, ShiftDraft
from shift_engine.domain.scheduling.repositories.shift_backend import (
    ApproveTemplateResult,
    MoveShiftResult,
)
from shift_engine.domain.scheduling.value_objects.enums import (
    ShiftStatus,
    ShiftType,
    TemplateStatus,
)
from shift_engine.domain.scheduling.value_objects.time_window import DateRange
from shift_engine.domain.shared.exceptions import ShiftBackendError


def _first(payload: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return default


class ShiftMapper:
    """
    Mapper class for converting between shift payloads and domain shifts.

    Malformed payloads raise ``ShiftBackendError`` for the calling operation.
    """

    @staticmethod
    def employee_ids_from_payload(payload: dict[str, Any]) -> tuple[str, ...]:
        if payload.get("employee_ids") is not None:
            return tuple(str(e) for e in payload["employee_ids"])

        employee_ids = []
        for entry in payload.get("employees") or []:
            employee = entry.get("employee", entry) if isinstance(entry, dict) else None
            if employee and employee.get("id") is not None:
                employee_ids.append(str(employee["id"]))
        return tuple(employee_ids)

    @staticmethod
    def payload_to_domain(payload: dict[str, Any], operation: str) -> Shift:
        """
        Convert a backend shift payload to a domain Shift.

        Args:
            payload: Shift JSON object
            operation: Backend operation name, for error reporting

        Returns:
            Domain shift

        Raises:
            ShiftBackendError: If the payload is not a valid shift
        """
        if not isinstance(payload, dict):
            raise ShiftBackendError(
                operation, f"expected shift object, got {payload!r}"
            )
        try:
            return Shift(
                id=payload["id"],
                location_id=_first(payload, "client_id", "clientId", "location_id"),
                date=str(payload["date"])[:10],
                start_time=payload["start_time"],
                end_time=payload["end_time"],
                assigned_employee_ids=ShiftMapper.employee_ids_from_payload(payload),
                shift_type=payload.get("shift_type") or ShiftType.REGULAR,
                status=payload.get("status") or ShiftStatus.SCHEDULED,
                notes=payload.get("notes"),
            )
        except (KeyError, TypeError, PydanticValidationError) as e:
            raise ShiftBackendError(operation, f"malformed shift payload: {e}") from e

    @staticmethod
    def draft_to_payload(draft: ShiftDraft) -> dict[str, Any]:
        """Convert a shift draft to the create-shift request body."""
        payload: dict[str, Any] = {
            "client_id": draft.location_id,
            "date": draft.date.isoformat(),
            "start_time": draft.start_time,
            "end_time": draft.end_time,
            "employee_ids": list(draft.assigned_employee_ids),
            "shift_type": draft.shift_type.value,
        }
        if draft.notes is not None:
            payload["notes"] = draft.notes
        return payload

    @staticmethod
    def move_payload_to_domain(payload: dict[str, Any]) -> MoveShiftResult:
        operation = "move_shift_to_date"
        if not isinstance(payload, dict):
            raise ShiftBackendError(operation, f"unexpected move response {payload!r}")
        new_shift = _first(payload, "newShift", "new_shift")
        old_shift_id = _first(payload, "oldShiftId", "old_shift_id")
        if new_shift is None or old_shift_id is None:
            raise ShiftBackendError(
                operation, "move response lacks old id or new shift"
            )
        new_shift = ShiftMapper.payload_to_domain(new_shift, operation)
        try:
            return MoveShiftResult(old_shift_id=old_shift_id, new_shift=new_shift)
        except PydanticValidationError as e:
            raise ShiftBackendError(operation, f"malformed move payload: {e}") from e


class BulkTemplateMapper:
    """
    Mapper class for bulk templates.

    On the wire a template is a named list of concrete shifts for a scheduled
    week; in the domain every such shift becomes a date-pinned slot.
    """

    @staticmethod
    def spec_to_payload(spec: GenerationSpec) -> dict[str, Any]:
        return {
            "name": spec.name,
            "scheduled_week": spec.date_range.start.isoformat(),
            "shifts": [ShiftMapper.draft_to_payload(d) for d in spec.expand()],
        }

    @staticmethod
    def payload_to_domain(payload: dict[str, Any]) -> BulkShiftTemplate:
        operation = "list_bulk_templates"
        if not isinstance(payload, dict):
            raise ShiftBackendError(
                operation, f"expected bulk template object, got {payload!r}"
            )
        try:
            shifts = payload.get("shifts") or []
            dates = [dt.date.fromisoformat(str(s["date"])[:10]) for s in shifts]
            scheduled_week = payload.get("scheduled_week")
            if dates:
                date_range = DateRange(start=min(dates), end=max(dates))
            else:
                date_range = DateRange.iso_week(
                    dt.date.fromisoformat(str(scheduled_week)[:10])
                )

            location_id = _first(payload, "client_id", "location_id")
            if location_id is None and shifts:
                location_id = shifts[0].get("client_id")

            slots = tuple(
                SlotDefinition(
                    start_time=s["start_time"],
                    end_time=s["end_time"],
                    employee_ids=ShiftMapper.employee_ids_from_payload(s),
                    role=s.get("notes"),
                    shift_type=s.get("shift_type") or ShiftType.REGULAR,
                    on_date=day,
                )
                for s, day in zip(shifts, dates)
            )
            status = TemplateStatus(payload.get("status") or "pending_approval")

            return BulkShiftTemplate(
                id=payload["id"],
                status=status,
                generation_spec=GenerationSpec(
                    name=payload.get("name") or f"Template {payload['id']}",
                    location_id=location_id if location_id is not None else "unknown",
                    date_range=date_range,
                    slots=slots,
                ),
                rejection_reason=(
                    payload.get("rejection_reason")
                    if status == TemplateStatus.REJECTED
                    else None
                ),
                created_shift_ids=(
                    tuple(payload.get("created_shift_ids") or ())
                    if status == TemplateStatus.APPROVED
                    else ()
                ),
                created_shift_count=payload.get("created_shift_count"),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ShiftBackendError(
                operation, f"malformed bulk template payload: {e}"
            ) from e

    @staticmethod
    def approval_to_domain(payload: dict[str, Any] | None) -> ApproveTemplateResult:
        operation = "approve_bulk_template"
        payload = payload or {}
        if not isinstance(payload, dict):
            raise ShiftBackendError(
                operation, f"unexpected approval response {payload!r}"
            )
        try:
            raw_ids = _first(
                payload, "createdShiftIds", "created_shift_ids", default=()
            )
            created_ids = tuple(str(i) for i in raw_ids)
            count = _first(
                payload,
                "createdShiftCount",
                "created_shift_count",
                default=len(created_ids),
            )
            return ApproveTemplateResult(
                created_shift_count=count, created_shift_ids=created_ids
            )
        except (TypeError, PydanticValidationError) as e:
            raise ShiftBackendError(
                operation, f"malformed approval payload: {e}"
            ) from e
