"""FaultReporter module."""

from .reporter import FaultHandler, FaultReporter, IFaultReporter

__all__ = ["FaultHandler", "FaultReporter", "IFaultReporter"]
