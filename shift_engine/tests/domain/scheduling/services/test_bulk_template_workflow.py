"""Tests for BulkTemplateWorkflow."""

from unittest.mock import AsyncMock

import pytest

from shift_engine.custom_types import Failure, Success
from shift_engine.domain.scheduling.entities.bulk_template import SlotDefinition
from shift_engine.domain.scheduling.repositories.shift_backend import (
    ApproveTemplateResult,
)
from shift_engine.domain.scheduling.services.bulk_template_workflow import (
    BulkTemplateWorkflow,
)
from shift_engine.domain.scheduling.value_objects.enums import TemplateStatus
from shift_engine.domain.shared.exceptions import (
    EmptyGenerationSpecError,
    DurationViolationError,
    ErrorType,
    InvalidTransitionError,
    MissingReasonError,
    ShiftBackendError,
    TemplateNotFoundError,
    WindowViolationError,
)
from shift_engine.tests.factories import (
    BulkShiftTemplateFactory,
    GenerationSpecFactory,
)


async def _submitted(workflow, **spec_kwargs):
    draft = workflow.create_draft(GenerationSpecFactory.create(**spec_kwargs))
    result = await workflow.submit(draft.id)
    assert isinstance(result, Success)
    return result.value


class TestDrafts:
    """Test local drafts."""

    def test_create_draft(self, workflow):
        draft = workflow.create_draft(GenerationSpecFactory.create())

        assert draft.status == TemplateStatus.DRAFT
        assert draft.id.startswith("draft-")
        assert workflow.get_template(draft.id) == draft

    def test_update_draft(self, workflow):
        draft = workflow.create_draft(GenerationSpecFactory.create())

        result = workflow.update_draft(draft.id, GenerationSpecFactory.create(name="Renamed"))

        assert result.value.name == "Renamed"
        assert workflow.get_template(draft.id).name == "Renamed"

    @pytest.mark.asyncio
    async def test_submitted_template_cannot_be_edited(self, workflow):
        pending = await _submitted(workflow)

        result = workflow.update_draft(pending.id, GenerationSpecFactory.create())

        assert isinstance(result.error, InvalidTransitionError)

    def test_update_unknown_draft(self, workflow):
        result = workflow.update_draft("draft-missing", GenerationSpecFactory.create())

        assert isinstance(result.error, TemplateNotFoundError)


class TestSubmit:
    """Test draft submission."""

    @pytest.mark.asyncio
    async def test_submit_rekeys_to_backend_id(self, workflow, in_memory_backend):
        draft = workflow.create_draft(GenerationSpecFactory.create())

        result = await workflow.submit(draft.id)

        pending = result.value
        assert pending.id == "tpl-1"
        assert pending.status == TemplateStatus.PENDING_APPROVAL
        assert workflow.get_template(draft.id) is None
        assert workflow.get_template("tpl-1") == pending
        assert len(in_memory_backend.calls_to("create_bulk_template")) == 1

        transition = workflow.transition_history[-1]
        assert transition.template_id == "tpl-1"
        assert transition.from_status == TemplateStatus.DRAFT
        assert transition.to_status == TemplateStatus.PENDING_APPROVAL

    @pytest.mark.asyncio
    async def test_empty_spec_is_rejected_locally(self, workflow, in_memory_backend):
        draft = workflow.create_draft(GenerationSpecFactory.create(slots=()))

        result = await workflow.submit(draft.id)

        assert isinstance(result.error, EmptyGenerationSpecError)
        assert in_memory_backend.calls_to("create_bulk_template") == []
        assert workflow.get_template(draft.id).status == TemplateStatus.DRAFT

    @pytest.mark.asyncio
    async def test_cannot_submit_twice(self, workflow):
        pending = await _submitted(workflow)

        result = await workflow.submit(pending.id)

        assert isinstance(result.error, InvalidTransitionError)
        assert result.error.error_type == ErrorType.BUSINESS_RULE

    @pytest.mark.asyncio
    async def test_backend_failure_keeps_draft(self, workflow, in_memory_backend):
        in_memory_backend.inject_failure("create_bulk_template", "unavailable")
        draft = workflow.create_draft(GenerationSpecFactory.create())

        result = await workflow.submit(draft.id)

        assert isinstance(result.error, ShiftBackendError)
        assert workflow.get_template(draft.id).status == TemplateStatus.DRAFT
        assert workflow.transition_history == []


class TestApprove:
    """Test approval and shift fan-out."""

    @pytest.mark.asyncio
    async def test_approve_creates_shifts_and_refreshes(
        self, workflow, coordinator, in_memory_backend, week
    ):
        await coordinator.load("loc-1", week)
        pending = await _submitted(workflow, days=5)

        result = await workflow.approve(pending.id)

        approved = result.value
        assert approved.status == TemplateStatus.APPROVED
        assert approved.created_shift_count == 5
        assert len(approved.created_shift_ids) == 5
        assert len(coordinator.shifts) == 5
        assert {s.id for s in coordinator.shifts} == set(approved.created_shift_ids)

    @pytest.mark.asyncio
    async def test_draft_cannot_be_approved(self, workflow, in_memory_backend):
        draft = workflow.create_draft(GenerationSpecFactory.create())

        result = await workflow.approve(draft.id)

        assert isinstance(result.error, InvalidTransitionError)
        assert result.error.current_status == "draft"
        assert in_memory_backend.calls_to("approve_bulk_template") == []

    @pytest.mark.asyncio
    async def test_approved_is_terminal(self, workflow):
        pending = await _submitted(workflow)
        await workflow.approve(pending.id)

        again = await workflow.approve(pending.id)
        rejected = await workflow.reject(pending.id, "too late")

        assert isinstance(again.error, InvalidTransitionError)
        assert isinstance(rejected.error, InvalidTransitionError)

    @pytest.mark.asyncio
    async def test_unknown_template(self, workflow):
        result = await workflow.approve("tpl-404")

        assert isinstance(result.error, TemplateNotFoundError)
        assert result.error.error_type == ErrorType.NOT_FOUND

    @pytest.mark.asyncio
    async def test_non_compliant_slot_blocks_approval(self, workflow, in_memory_backend):
        late_slot = SlotDefinition(
            start_time="21:00", end_time="23:00", employee_ids=("emp-1",)
        )
        pending = await _submitted(workflow, days=1, slots=(late_slot,))

        result = await workflow.approve(pending.id)

        assert isinstance(result.error, WindowViolationError)
        assert result.error.details["template_id"] == pending.id
        assert result.error.details["slot_index"] == 0
        assert in_memory_backend.calls_to("approve_bulk_template") == []
        assert in_memory_backend.shifts == []
        assert workflow.get_template(pending.id).status == TemplateStatus.PENDING_APPROVAL

    @pytest.mark.asyncio
    async def test_first_violating_slot_is_reported(self, workflow, in_memory_backend):
        slots = (
            SlotDefinition(start_time="08:00", end_time="16:00"),
            SlotDefinition(start_time="08:00", end_time="11:00"),
            SlotDefinition(start_time="20:00", end_time="23:00"),
        )
        pending = await _submitted(workflow, days=1, slots=slots)

        result = await workflow.approve(pending.id)

        assert isinstance(result.error, DurationViolationError)
        assert result.error.details["slot_index"] == 1
        assert in_memory_backend.calls_to("approve_bulk_template") == []

    @pytest.mark.asyncio
    async def test_listed_template_is_checked_before_approval(
        self, mock_backend, compliance_rule
    ):
        early_slot = SlotDefinition(start_time="04:00", end_time="08:00")
        mock_backend.list_bulk_templates.return_value = [
            BulkShiftTemplateFactory.create(
                id="tpl-9", spec=GenerationSpecFactory.create(slots=(early_slot,))
            )
        ]
        workflow = BulkTemplateWorkflow(mock_backend, compliance_rule)
        await workflow.list_templates()

        result = await workflow.approve("tpl-9")

        assert isinstance(result.error, WindowViolationError)
        assert result.error.field_name == "start_time"
        mock_backend.approve_bulk_template.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_backend_failure_leaves_template_pending(
        self, workflow, in_memory_backend
    ):
        pending = await _submitted(workflow)
        in_memory_backend.inject_failure("approve_bulk_template", "timeout", times=1)

        result = await workflow.approve(pending.id)

        assert isinstance(result.error, ShiftBackendError)
        assert workflow.get_template(pending.id).status == TemplateStatus.PENDING_APPROVAL
        assert (await workflow.approve(pending.id)).is_success()

    @pytest.mark.asyncio
    async def test_failed_refresh_does_not_fail_approval(
        self, workflow, coordinator, in_memory_backend, week
    ):
        await coordinator.load("loc-1", week)
        pending = await _submitted(workflow)
        in_memory_backend.inject_failure("fetch_shifts", "down")

        result = await workflow.approve(pending.id)

        assert result.is_success()
        assert coordinator.shifts == ()

    @pytest.mark.asyncio
    async def test_approve_without_coordinator(self, mock_backend, compliance_rule):
        mock_backend.create_bulk_template.return_value = 17
        mock_backend.approve_bulk_template.return_value = ApproveTemplateResult(
            created_shift_count=3
        )
        workflow = BulkTemplateWorkflow(mock_backend, compliance_rule)
        draft = workflow.create_draft(GenerationSpecFactory.create())
        await workflow.submit(draft.id)

        result = await workflow.approve("17")

        assert result.value.created_shift_count == 3
        assert result.value.created_shift_ids == ()
        mock_backend.approve_bulk_template.assert_awaited_once_with("17")


class TestReject:
    """Test rejection."""

    @pytest.mark.asyncio
    async def test_reject(self, workflow, in_memory_backend):
        pending = await _submitted(workflow)

        result = await workflow.reject(pending.id, "  Wrong site  ")

        rejected = result.value
        assert rejected.status == TemplateStatus.REJECTED
        assert rejected.rejection_reason == "Wrong site"
        assert in_memory_backend.shifts == []
        assert workflow.transition_history[-1].reason == "Wrong site"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reason", ["", "   ", None])
    async def test_reason_required(self, workflow, in_memory_backend, reason):
        pending = await _submitted(workflow)

        result = await workflow.reject(pending.id, reason)

        assert isinstance(result.error, MissingReasonError)
        assert result.error.error_code == "MISSING_REASON"
        assert in_memory_backend.calls_to("reject_bulk_template") == []

    @pytest.mark.asyncio
    async def test_draft_cannot_be_rejected(self, workflow):
        draft = workflow.create_draft(GenerationSpecFactory.create())

        result = await workflow.reject(draft.id, "no")

        assert isinstance(result.error, InvalidTransitionError)


class TestListTemplates:
    """Test listing templates across local drafts and the backend."""

    @pytest.mark.asyncio
    async def test_lists_drafts_and_remote_templates(self, workflow):
        draft = workflow.create_draft(GenerationSpecFactory.create(name="Draft"))
        pending = await _submitted(workflow, name="Pending")

        result = await workflow.list_templates()

        assert [t.id for t in result.value] == [draft.id, pending.id]

    @pytest.mark.asyncio
    async def test_filter_by_status(self, workflow, in_memory_backend):
        workflow.create_draft(GenerationSpecFactory.create())
        first = await _submitted(workflow)
        second = await _submitted(workflow)
        await workflow.approve(first.id)

        drafts = await workflow.list_templates(TemplateStatus.DRAFT)
        pending = await workflow.list_templates(TemplateStatus.PENDING_APPROVAL)

        assert [t.status for t in drafts.value] == [TemplateStatus.DRAFT]
        assert [t.id for t in pending.value] == [second.id]
        assert in_memory_backend.calls_to("list_bulk_templates")[-1]["status"] == (
            TemplateStatus.PENDING_APPROVAL
        )

    @pytest.mark.asyncio
    async def test_terminal_templates_are_not_replaced(
        self, mock_backend, compliance_rule
    ):
        workflow = BulkTemplateWorkflow(mock_backend, compliance_rule)
        mock_backend.create_bulk_template.return_value = "tpl-1"
        mock_backend.approve_bulk_template.return_value = ApproveTemplateResult(
            created_shift_count=5
        )
        draft = workflow.create_draft(GenerationSpecFactory.create())
        await workflow.submit(draft.id)
        await workflow.approve("tpl-1")

        # a stale listing still reports the template as pending
        mock_backend.list_bulk_templates.return_value = [
            BulkShiftTemplateFactory.create(id="tpl-1"),
            BulkShiftTemplateFactory.create(id="tpl-2"),
        ]
        result = await workflow.list_templates()

        statuses = {t.id: t.status for t in result.value}
        assert statuses == {
            "tpl-1": TemplateStatus.APPROVED,
            "tpl-2": TemplateStatus.PENDING_APPROVAL,
        }
        assert workflow.get_template("tpl-1").status == TemplateStatus.APPROVED
        assert workflow.get_template("tpl-2") is not None

    @pytest.mark.asyncio
    async def test_backend_failure(self, workflow, in_memory_backend):
        in_memory_backend.inject_failure("list_bulk_templates", "down")

        result = await workflow.list_templates()

        assert isinstance(result, Failure)


class TestTransitionLog:
    """Test the transition history."""

    @pytest.mark.asyncio
    async def test_full_lifecycle_is_recorded(self, workflow):
        pending = await _submitted(workflow)
        await workflow.reject(pending.id, "Duplicate")

        history = [
            (t.from_status, t.to_status) for t in workflow.transition_history
        ]
        assert history == [
            (TemplateStatus.DRAFT, TemplateStatus.PENDING_APPROVAL),
            (TemplateStatus.PENDING_APPROVAL, TemplateStatus.REJECTED),
        ]

    def test_history_is_a_copy(self, compliance_rule):
        workflow = BulkTemplateWorkflow(AsyncMock(), compliance_rule)

        workflow.transition_history.append("x")

        assert workflow.transition_history == []
