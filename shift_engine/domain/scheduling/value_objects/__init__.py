"""Scheduling value objects."""

from .compliance import ComplianceLimits, ComplianceRule
from .enums import (
    ComplianceWarningKind,
    ConflictType,
    ShiftStatus,
    ShiftType,
    TemplateStatus,
    ViewGranularity,
)
from .identifier import Identifier, coerce_identifier
from .time_window import (
    MINUTES_PER_DAY,
    DateRange,
    ShiftWindow,
    format_time_of_day,
    normalize_time_of_day,
    parse_time_of_day,
)

__all__ = [
    "ComplianceLimits",
    "ComplianceRule",
    "ComplianceWarningKind",
    "ConflictType",
    "DateRange",
    "Identifier",
    "MINUTES_PER_DAY",
    "ShiftStatus",
    "ShiftType",
    "ShiftWindow",
    "TemplateStatus",
    "ViewGranularity",
    "coerce_identifier",
    "format_time_of_day",
    "normalize_time_of_day",
    "parse_time_of_day",
]
