"""Core data models for faultwatch."""

from .faults import FaultEvent, FaultKind, TaskState

__all__ = [
    "FaultEvent",
    "FaultKind",
    "TaskState",
]
