"""Runtime fault hooks."""

from .global_hook import GlobalFaultHook
from .loop_hook import LoopFaultHook

__all__ = ["GlobalFaultHook", "LoopFaultHook"]
