"""
Shift Scheduling Domain

Value objects, entities, read models, the shift backend contract and the
domain services that validate, analyse and coordinate shift operations.

Services live in ``services`` and are imported from there; this package
only re-exports the data model.
"""

from .entities import (
    BulkShiftTemplate,
    GenerationSpec,
    Shift,
    ShiftDraft,
    SlotDefinition,
)
from .value_objects import (
    ComplianceLimits,
    ComplianceRule,
    DateRange,
    ShiftStatus,
    ShiftType,
    ShiftWindow,
    TemplateStatus,
    ViewGranularity,
)

__all__ = [
    "BulkShiftTemplate",
    "ComplianceLimits",
    "ComplianceRule",
    "DateRange",
    "GenerationSpec",
    "Shift",
    "ShiftDraft",
    "ShiftStatus",
    "ShiftType",
    "ShiftWindow",
    "SlotDefinition",
    "TemplateStatus",
    "ViewGranularity",
]
