"""Fault reporting for fire-and-forget background work."""

from .app import Application, IApplication
from .hooks import GlobalFaultHook, LoopFaultHook
from .models import FaultEvent, FaultKind, TaskState
from .reporter import FaultHandler, FaultReporter, IFaultReporter
from .supervisor import ITaskSupervisor, TaskHandle, TaskSupervisor
from .tracker import FaultTracker, ITracker

__all__ = [
    # Application
    "Application",
    "IApplication",
    # Models
    "FaultEvent",
    "FaultKind",
    "TaskState",
    # Components
    "FaultHandler",
    "IFaultReporter",
    "FaultReporter",
    "ITaskSupervisor",
    "TaskSupervisor",
    "TaskHandle",
    "ITracker",
    "FaultTracker",
    "GlobalFaultHook",
    "LoopFaultHook",
]
