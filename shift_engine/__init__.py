"""
Shift Scheduling Engine

Assigns cleaning-crew employees to time slots, detects overlapping
assignments, enforces shift compliance rules and coordinates multi-step
shift operations against an abstract shift-management backend.
"""

__version__ = "0.1.0"
