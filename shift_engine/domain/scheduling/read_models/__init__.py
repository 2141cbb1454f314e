"""
Read models for scheduling projections.

Immutable views and analysis results derived from a shift snapshot.
"""

from .compliance_warning import ComplianceWarning
from .conflict import Conflict
from .schedule_stats import ScheduleStats
from .schedule_view import ScheduleDiagnostics, ScheduleView
from .week_schedule import WeekCopyValidation, WeekScheduleSummary

__all__ = [
    "ComplianceWarning",
    "Conflict",
    "ScheduleDiagnostics",
    "ScheduleStats",
    "ScheduleView",
    "WeekCopyValidation",
    "WeekScheduleSummary",
]
