"""
Bulk Template Workflow

State machine for bulk shift-generation templates:

    draft -> pending_approval -> approved | rejected

Drafts exist only locally. Submission hands the generation spec to the
backend; approval makes the backend fan out the shifts, after which the
coordinator re-fetches its snapshot. Approved and rejected are terminal.
"""

import uuid
from datetime import datetime, timezone

from shift_engine.core.observability import (
    get_logger,
    log_error_with_context,
    log_template_transition,
    monitor_operation,
)
from shift_engine.custom_types import Failure, Result, Success
from shift_engine.domain.shared.exceptions import (
    DomainError,
    EmptyGenerationSpecError,
    InvalidTransitionError,
    MissingReasonError,
    ShiftBackendError,
    TemplateNotFoundError,
)

from ..entities.bulk_template import BulkShiftTemplate, GenerationSpec
from ..repositories.shift_backend import ShiftBackend
from ..value_objects.compliance import ComplianceRule
from ..value_objects.enums import TemplateStatus
from .compliance_validator import ComplianceValidator
from .shift_operation_coordinator import ShiftOperationCoordinator


class TemplateTransition:
    """Represents a bulk template state transition."""

    def __init__(
        self,
        template_id: str,
        from_status: TemplateStatus,
        to_status: TemplateStatus,
        timestamp: datetime,
        reason: str | None = None,
    ) -> None:
        self.template_id = template_id
        self.from_status = from_status
        self.to_status = to_status
        self.timestamp = timestamp
        self.reason = reason or ""


class BulkTemplateWorkflow:
    """
    Service for managing the bulk template lifecycle.

    Keeps a registry of known templates keyed by id. Terminal templates are
    never replaced in the registry, not even by a later backend listing.
    """

    def __init__(
        self,
        backend: ShiftBackend,
        compliance_rule: ComplianceRule,
        coordinator: ShiftOperationCoordinator | None = None,
        validator: ComplianceValidator | None = None,
    ) -> None:
        """
        Initialize the workflow.

        Args:
            backend: Shift-management backend
            compliance_rule: Rule every slot window must satisfy
            coordinator: Refreshed after an approval created shifts
            validator: Compliance validator
        """
        self._backend = backend
        self._compliance_rule = compliance_rule
        self._coordinator = coordinator
        self._validator = validator or ComplianceValidator(compliance_rule)

        self._templates: dict[str, BulkShiftTemplate] = {}
        self._transition_history: list[TemplateTransition] = []

        self.logger = get_logger(__name__)

    @property
    def transition_history(self) -> list[TemplateTransition]:
        return list(self._transition_history)

    def get_template(self, template_id: str) -> BulkShiftTemplate | None:
        return self._templates.get(str(template_id))

    def create_draft(self, spec: GenerationSpec) -> BulkShiftTemplate:
        """Create a client-local draft template."""
        template = BulkShiftTemplate(
            id=f"draft-{uuid.uuid4().hex[:12]}",
            status=TemplateStatus.DRAFT,
            generation_spec=spec,
        )
        self._templates[template.id] = template
        self.logger.info(
            "Bulk template drafted",
            template_id=template.id,
            name=spec.name,
            slot_count=len(spec.slots),
        )
        return template

    def update_draft(
        self, template_id: str, spec: GenerationSpec
    ) -> Result[BulkShiftTemplate, DomainError]:
        """Replace the generation spec of a draft."""
        lookup = self._lookup(template_id)
        if isinstance(lookup, Failure):
            return lookup
        if lookup.value.status != TemplateStatus.DRAFT:
            return Failure(
                InvalidTransitionError(
                    lookup.value.id,
                    lookup.value.status.value,
                    TemplateStatus.DRAFT.value,
                )
            )

        template = lookup.value.model_copy(update={"generation_spec": spec})
        self._templates[template.id] = template
        return Success(template)

    @monitor_operation("submit_bulk_template")
    async def submit(self, template_id: str) -> Result[BulkShiftTemplate, DomainError]:
        """
        Submit a draft for approval.

        The draft's local id is replaced by the backend-issued id.

        Returns:
            Success with the pending template, or Failure with
            InvalidTransition, EmptyGenerationSpec or a backend error
        """
        lookup = self._lookup(template_id, TemplateStatus.PENDING_APPROVAL)
        if isinstance(lookup, Failure):
            return lookup
        draft = lookup.value

        if draft.generation_spec.is_empty:
            return Failure(EmptyGenerationSpecError(draft.id))

        try:
            backend_id = await self._backend.create_bulk_template(
                draft.generation_spec
            )
        except ShiftBackendError as e:
            log_error_with_context(
                e, "submit_bulk_template", {"template_id": draft.id}, "warning"
            )
            return Failure(e)

        pending = draft.model_copy(
            update={"id": str(backend_id), "status": TemplateStatus.PENDING_APPROVAL}
        )
        del self._templates[draft.id]
        self._templates[pending.id] = pending
        self._record_transition(
            pending.id, draft.status, pending.status, local_id=draft.id
        )
        return Success(pending)

    @monitor_operation("approve_bulk_template")
    async def approve(self, template_id: str) -> Result[BulkShiftTemplate, DomainError]:
        """
        Approve a pending template and refresh the coordinator's shifts.

        Every slot window is checked against the compliance rule before the
        backend is asked to fan out; the first violation is returned and
        nothing is created.

        A failed refresh does not undo the approval; it is logged and the
        approved template is still returned.
        """
        lookup = self._lookup(template_id, TemplateStatus.APPROVED)
        if isinstance(lookup, Failure):
            return lookup
        pending = lookup.value
        compliance = self._check_slots(pending)
        if isinstance(compliance, Failure):
            return compliance

        try:
            approval = await self._backend.approve_bulk_template(pending.id)
        except ShiftBackendError as e:
            log_error_with_context(
                e, "approve_bulk_template", {"template_id": pending.id}, "warning"
            )
            return Failure(e)

        approved = pending.model_copy(
            update={
                "status": TemplateStatus.APPROVED,
                "created_shift_ids": approval.created_shift_ids,
                "created_shift_count": approval.created_shift_count,
            }
        )
        self._templates[approved.id] = approved
        self._record_transition(
            approved.id,
            pending.status,
            approved.status,
            created_shift_count=approval.created_shift_count,
        )

        if self._coordinator is not None:
            refreshed = await self._coordinator.refresh()
            if isinstance(refreshed, Failure):
                self.logger.warning(
                    "Shift refresh after template approval failed",
                    template_id=approved.id,
                    error=str(refreshed.error),
                )

        return Success(approved)

    @monitor_operation("reject_bulk_template")
    async def reject(
        self, template_id: str, reason: str
    ) -> Result[BulkShiftTemplate, DomainError]:
        """
        Reject a pending template. No shifts are created.

        Returns:
            Success with the rejected template, or Failure with
            InvalidTransition, MissingReason or a backend error
        """
        lookup = self._lookup(template_id, TemplateStatus.REJECTED)
        if isinstance(lookup, Failure):
            return lookup
        pending = lookup.value

        reason = (reason or "").strip()
        if not reason:
            return Failure(MissingReasonError(pending.id))

        try:
            await self._backend.reject_bulk_template(pending.id, reason)
        except ShiftBackendError as e:
            log_error_with_context(
                e, "reject_bulk_template", {"template_id": pending.id}, "warning"
            )
            return Failure(e)

        rejected = pending.model_copy(
            update={"status": TemplateStatus.REJECTED, "rejection_reason": reason}
        )
        self._templates[rejected.id] = rejected
        self._record_transition(
            rejected.id, pending.status, rejected.status, reason=reason
        )
        return Success(rejected)

    async def list_templates(
        self, status: TemplateStatus | None = None
    ) -> Result[list[BulkShiftTemplate], DomainError]:
        """
        List templates, optionally filtered by status.

        Drafts come from the local registry; everything else from the backend.
        Backend entries refresh the registry except where it already holds a
        terminal template.
        """
        drafts = [
            t for t in self._templates.values() if t.status == TemplateStatus.DRAFT
        ]
        if status == TemplateStatus.DRAFT:
            return Success(drafts)

        try:
            remote = await self._backend.list_bulk_templates(status)
        except ShiftBackendError as e:
            log_error_with_context(e, "list_bulk_templates", severity="warning")
            return Failure(e)

        listed = []
        for template in remote:
            known = self._templates.get(template.id)
            if known is not None and known.status.is_terminal:
                template = known
            else:
                self._templates[template.id] = template
            if status is None or template.status == status:
                listed.append(template)

        return Success(drafts + listed if status is None else listed)

    def _lookup(
        self, template_id: str, target_status: TemplateStatus | None = None
    ) -> Result[BulkShiftTemplate, DomainError]:
        """Find a template and, when given, check it may move to ``target_status``."""
        template = self._templates.get(str(template_id))
        if template is None:
            return Failure(TemplateNotFoundError(str(template_id)))
        if target_status is not None and not template.status.can_transition_to(
            target_status
        ):
            return Failure(
                InvalidTransitionError(
                    template.id, template.status.value, target_status.value
                )
            )
        return Success(template)

    def _check_slots(self, template: BulkShiftTemplate) -> Result[None, DomainError]:
        """Validate every slot window; the first violation fails the template."""
        for index, slot in enumerate(template.generation_spec.slots):
            validation = self._validator.validate(
                slot.start_time, slot.end_time, self._compliance_rule
            )
            if isinstance(validation, Failure):
                validation.error.details.update(
                    {"template_id": template.id, "slot_index": index}
                )
                log_error_with_context(
                    validation.error,
                    "bulk_template_compliance",
                    {"template_id": template.id, "slot_index": index},
                    "warning",
                )
                return Failure(validation.error)
        return Success(None)

    def _record_transition(
        self,
        template_id: str,
        from_status: TemplateStatus,
        to_status: TemplateStatus,
        reason: str | None = None,
        **context,
    ) -> None:
        self._transition_history.append(
            TemplateTransition(
                template_id=template_id,
                from_status=from_status,
                to_status=to_status,
                timestamp=datetime.now(timezone.utc),
                reason=reason,
            )
        )
        if reason:
            context["reason"] = reason
        log_template_transition(
            template_id, from_status.value, to_status.value, **context
        )
