"""Tracker module."""

from .tracker import FaultTracker, ITracker

__all__ = ["FaultTracker", "ITracker"]
