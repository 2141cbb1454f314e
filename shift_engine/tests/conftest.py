from unittest.mock import AsyncMock

import pytest

from shift_engine.domain.scheduling.repositories.shift_backend import ShiftBackend
from shift_engine.domain.scheduling.services.bulk_template_workflow import (
    BulkTemplateWorkflow,
)
from shift_engine.domain.scheduling.services.shift_operation_coordinator import (
    ShiftOperationCoordinator,
)
from shift_engine.domain.scheduling.value_objects.compliance import ComplianceRule
from shift_engine.domain.scheduling.value_objects.time_window import DateRange
from shift_engine.infrastructure.backends.in_memory_backend import (
    InMemoryShiftBackend,
)
from shift_engine.tests.factories import BASE_DATE, ComplianceRuleFactory


@pytest.fixture
def compliance_rule() -> ComplianceRule:
    """Default rule: 06:00-22:00, 4/6/8/10/12 hour shifts."""
    return ComplianceRuleFactory.create()


@pytest.fixture
def week() -> DateRange:
    return DateRange.iso_week(BASE_DATE)


@pytest.fixture
def in_memory_backend() -> InMemoryShiftBackend:
    return InMemoryShiftBackend()


@pytest.fixture
def mock_backend() -> AsyncMock:
    """Backend double; every method is an AsyncMock."""
    return AsyncMock(spec=ShiftBackend)


@pytest.fixture
def coordinator(in_memory_backend, compliance_rule) -> ShiftOperationCoordinator:
    return ShiftOperationCoordinator(in_memory_backend, compliance_rule)


@pytest.fixture
def workflow(in_memory_backend, compliance_rule, coordinator) -> BulkTemplateWorkflow:
    return BulkTemplateWorkflow(in_memory_backend, compliance_rule, coordinator)
