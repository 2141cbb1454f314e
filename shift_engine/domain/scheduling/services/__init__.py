"""
Scheduling domain services.

Pure analysis services (compliance, conflicts, statistics, views, week copy)
and the orchestrating services that talk to the shift backend (operation
coordinator, bulk template workflow).
"""

from .bulk_template_workflow import BulkTemplateWorkflow, TemplateTransition
from .compliance_validator import ComplianceValidator
from .conflict_detector import ConflictDetector
from .schedule_compliance_service import ScheduleComplianceService
from .schedule_view_service import ScheduleViewService
from .shift_operation_coordinator import (
    ShiftOperationCoordinator,
    ShiftOperationResult,
)
from .stats_aggregator import StatsAggregator
from .week_copy_service import WeekCopyService

__all__ = [
    "BulkTemplateWorkflow",
    "ComplianceValidator",
    "ConflictDetector",
    "ScheduleComplianceService",
    "ScheduleViewService",
    "ShiftOperationCoordinator",
    "ShiftOperationResult",
    "StatsAggregator",
    "TemplateTransition",
    "WeekCopyService",
]
