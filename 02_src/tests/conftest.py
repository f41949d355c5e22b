"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def reporter():
    """Create an empty FaultReporter."""
    from faultwatch.reporter import FaultReporter

    return FaultReporter()


@pytest.fixture
def supervisor(reporter):
    """Create TaskSupervisor with reporter."""
    from faultwatch.supervisor import TaskSupervisor

    sv = TaskSupervisor(reporter, max_workers=2)
    yield sv
    sv.shutdown()


@pytest_asyncio.fixture
async def tracker(reporter):
    """Create started FaultTracker with reporter."""
    from faultwatch.tracker import FaultTracker

    tr = FaultTracker(reporter)
    await tr.start()
    return tr


@pytest.fixture
def unobserved(reporter):
    """Collect events delivered to unobserved-failure handlers."""
    events = []
    reporter.on_unobserved_failure(events.append)
    return events


@pytest.fixture
def faults(reporter):
    """Collect events delivered to unhandled-fault handlers."""
    events = []
    reporter.on_unhandled_fault(events.append)
    return events
