"""
HTTP Shift Backend

``ShiftBackend`` implementation for the REST/JSON shift-management API.
Every response is wrapped in the ``{success, message, data, warnings}``
envelope; transport errors, non-2xx statuses and ``success: false`` bodies
all surface as ``ShiftBackendError``.
"""

import datetime as dt
import time
from typing import Any

import httpx

from shift_engine.core.config import settings
from shift_engine.core.observability import log_backend_request
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

from .mappers import BulkTemplateMapper, ShiftMapper


class HttpShiftBackend(ShiftBackend):
    """
    Shift backend talking to the admin REST API over httpx.

    Can be used as an async context manager; an injected client is never
    closed by the backend.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_token: str | None = None,
        timeout_seconds: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the backend.

        Args:
            base_url: API root, e.g. ``https://admin.example.com/api``
            api_token: Bearer token sent with every request
            timeout_seconds: Per-request timeout
            client: Preconfigured client (tests, shared connection pools)
        """
        self._api_token = api_token or settings.BACKEND_API_TOKEN
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.BACKEND_BASE_URL,
            timeout=timeout_seconds or settings.BACKEND_TIMEOUT_SECONDS,
        )

    async def __aenter__(self) -> "HttpShiftBackend":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @property
    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        return headers

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the decoded response envelope."""
        start_time = time.perf_counter()
        try:
            response = await self._client.request(
                method, path, params=params, json=json, headers=self._headers
            )
        except httpx.HTTPError as e:
            log_backend_request(
                operation, time.perf_counter() - start_time, error=str(e)
            )
            raise ShiftBackendError(operation, f"request failed: {e}") from e

        duration = time.perf_counter() - start_time
        body = self._decode(response)

        if response.is_error:
            message = body.get("message") or response.reason_phrase or "request failed"
            log_backend_request(
                operation, duration, error=message, status_code=response.status_code
            )
            raise ShiftBackendError(operation, message, response.status_code)

        if body.get("success") is False:
            message = body.get("message") or "backend reported failure"
            log_backend_request(
                operation, duration, error=message, status_code=response.status_code
            )
            raise ShiftBackendError(operation, message, response.status_code)

        log_backend_request(operation, duration, status_code=response.status_code)
        return body

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        if not response.content:
            return {"success": not response.is_error}
        try:
            body = response.json()
        except ValueError:
            return {"success": not response.is_error, "message": response.text}
        if isinstance(body, dict) and "success" in body:
            return body
        return {"success": not response.is_error, "data": body}

    async def fetch_shifts(
        self, location_id: str, date_range: DateRange
    ) -> list[Shift]:
        operation = "fetch_shifts"
        body = await self._request(
            operation,
            "GET",
            "/shifts",
            params={
                "clientId": location_id,
                "startDate": date_range.start.isoformat(),
                "endDate": date_range.end.isoformat(),
            },
        )
        data = body.get("data")
        if not isinstance(data, list):
            raise ShiftBackendError(operation, "shift list missing from response")
        return [ShiftMapper.payload_to_domain(item, operation) for item in data]

    async def create_shift(self, draft: ShiftDraft) -> CreateShiftResult:
        operation = "create_shift"
        body = await self._request(
            operation, "POST", "/shifts", json=ShiftMapper.draft_to_payload(draft)
        )
        data = body.get("data")
        # Some deployments nest the shift as {shift, employeeShifts, warnings}
        if isinstance(data, dict) and isinstance(data.get("shift"), dict):
            warnings = tuple(body.get("warnings") or data.get("warnings") or ())
            data = data["shift"]
        else:
            warnings = tuple(body.get("warnings") or ())

        shift = ShiftMapper.payload_to_domain(data, operation)
        if not shift.assigned_employee_ids and draft.assigned_employee_ids:
            shift = shift.model_copy(
                update={"assigned_employee_ids": draft.assigned_employee_ids}
            )
        return CreateShiftResult(shift=shift, warnings=warnings)

    async def update_shift(self, shift_id: str, window: ShiftWindow) -> Shift:
        operation = "update_shift"
        body = await self._request(
            operation,
            "PUT",
            f"/shifts/{shift_id}",
            json={"start_time": window.start_time, "end_time": window.end_time},
        )
        return ShiftMapper.payload_to_domain(body.get("data"), operation)

    async def move_shift_to_date(
        self, shift_id: str, new_date: dt.date, employee_id: str
    ) -> MoveShiftResult:
        body = await self._request(
            "move_shift_to_date",
            "POST",
            "/shifts/move",
            json={
                "shiftId": shift_id,
                "newDate": new_date.isoformat(),
                "employeeId": employee_id,
            },
        )
        return ShiftMapper.move_payload_to_domain(body.get("data"))

    async def delete_shift(self, shift_id: str) -> None:
        await self._request("delete_shift", "DELETE", f"/shifts/{shift_id}")

    async def create_bulk_template(self, spec: GenerationSpec) -> str:
        operation = "create_bulk_template"
        body = await self._request(
            operation,
            "POST",
            "/shifts/bulk-templates",
            json=BulkTemplateMapper.spec_to_payload(spec),
        )
        data = body.get("data")
        template_id = data.get("id") if isinstance(data, dict) else data
        if template_id is None:
            raise ShiftBackendError(operation, "template id missing from response")
        return str(template_id)

    async def approve_bulk_template(self, template_id: str) -> ApproveTemplateResult:
        body = await self._request(
            "approve_bulk_template",
            "POST",
            f"/shifts/bulk-templates/{template_id}/approve",
        )
        return BulkTemplateMapper.approval_to_domain(body.get("data"))

    async def reject_bulk_template(self, template_id: str, reason: str) -> None:
        await self._request(
            "reject_bulk_template",
            "POST",
            f"/shifts/bulk-templates/{template_id}/reject",
            json={"reason": reason},
        )

    async def list_bulk_templates(
        self, status: TemplateStatus | None = None
    ) -> list[BulkShiftTemplate]:
        operation = "list_bulk_templates"
        body = await self._request(
            operation,
            "GET",
            "/shifts/bulk-templates",
            params={"status": status.value} if status else None,
        )
        data = body.get("data")
        if not isinstance(data, list):
            raise ShiftBackendError(operation, "template list missing from response")
        return [BulkTemplateMapper.payload_to_domain(item) for item in data]
