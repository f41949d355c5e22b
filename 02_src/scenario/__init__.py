"""Demo scenario module."""

from .scenario import FireAndForgetScenario, IScenario

__all__ = ["FireAndForgetScenario", "IScenario"]
