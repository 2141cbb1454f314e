"""Repository interfaces for the scheduling domain."""

from .shift_backend import (
    ApproveTemplateResult,
    CreateShiftResult,
    MoveShiftResult,
    ShiftBackend,
)

__all__ = [
    "ApproveTemplateResult",
    "CreateShiftResult",
    "MoveShiftResult",
    "ShiftBackend",
]
