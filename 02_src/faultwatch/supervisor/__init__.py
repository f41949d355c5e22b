"""TaskSupervisor module."""

from .handle import TaskHandle
from .supervisor import ITaskSupervisor, TaskSupervisor

__all__ = ["ITaskSupervisor", "TaskHandle", "TaskSupervisor"]
