"""Shift backend implementations."""

from .http_shift_backend import HttpShiftBackend
from .in_memory_backend import InMemoryShiftBackend
from .mappers import BulkTemplateMapper, ShiftMapper

__all__ = [
    "BulkTemplateMapper",
    "HttpShiftBackend",
    "InMemoryShiftBackend",
    "ShiftMapper",
]
