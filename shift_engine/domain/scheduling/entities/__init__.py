"""Scheduling domain entities."""

from .bulk_template import BulkShiftTemplate, GenerationSpec, SlotDefinition
from .shift import Shift, ShiftDraft

__all__ = [
    "BulkShiftTemplate",
    "GenerationSpec",
    "Shift",
    "ShiftDraft",
    "SlotDefinition",
]
