"""Domain enums for shift scheduling."""

from enum import Enum


class ShiftStatus(str, Enum):
    """Shift status enumeration."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    MISSED = "missed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Check if shift status is terminal (cannot transition further)."""
        return self != ShiftStatus.SCHEDULED

    def can_transition_to(self, target_status: "ShiftStatus") -> bool:
        """Check if shift can transition from current status to target status."""
        valid_transitions = {
            ShiftStatus.SCHEDULED: {
                ShiftStatus.COMPLETED,
                ShiftStatus.MISSED,
                ShiftStatus.CANCELLED,
            },
            ShiftStatus.COMPLETED: set(),  # Terminal state
            ShiftStatus.MISSED: set(),  # Terminal state
            ShiftStatus.CANCELLED: set(),  # Terminal state
        }
        return target_status in valid_transitions.get(self, set())


class ShiftType(str, Enum):
    """Shift type enumeration."""

    REGULAR = "regular"
    EMERGENCY = "emergency"


class TemplateStatus(str, Enum):
    """Bulk shift template status enumeration."""

    DRAFT = "draft"  # Client-local, never sent to the backend
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        """Check if template status is terminal (cannot transition further)."""
        return self in {TemplateStatus.APPROVED, TemplateStatus.REJECTED}

    def can_transition_to(self, target_status: "TemplateStatus") -> bool:
        """Check if template can transition from current status to target status."""
        valid_transitions = {
            TemplateStatus.DRAFT: {TemplateStatus.PENDING_APPROVAL},
            TemplateStatus.PENDING_APPROVAL: {
                TemplateStatus.APPROVED,
                TemplateStatus.REJECTED,
            },
            TemplateStatus.APPROVED: set(),  # Terminal state
            TemplateStatus.REJECTED: set(),  # Terminal state
        }
        return target_status in valid_transitions.get(self, set())


class ViewGranularity(str, Enum):
    """Calendar granularity of a schedule view."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class ConflictType(str, Enum):
    """Kinds of scheduling conflict."""

    OVERLAP = "overlap"


class ComplianceWarningKind(str, Enum):
    """Advisory schedule warnings."""

    WEEKLY_HOURS = "weekly_hours"
    OVERTIME = "overtime"
    INSUFFICIENT_REST = "insufficient_rest"
