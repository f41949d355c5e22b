"""Tracker implementation for delivered FaultEvents."""

from collections import deque
from typing import Protocol

from ..logging_config import get_logger
from ..models import FaultEvent, FaultKind
from ..reporter import IFaultReporter

logger = get_logger(__name__)


class ITracker(Protocol):
    """Recording FaultEvents delivered by the reporter."""

    async def start(self) -> None:
        """Subscribe to all fault kinds."""
        ...

    def events(self, kind: FaultKind | None = None) -> list[FaultEvent]:
        """Recorded events, oldest first."""
        ...


class FaultTracker:
    """Logs every delivered FaultEvent and keeps the most recent ones in memory."""

    def __init__(self, reporter: IFaultReporter, history_size: int = 100):
        self._reporter = reporter
        self._history: deque[FaultEvent] = deque(maxlen=history_size)
        self._started = False

    async def start(self) -> None:
        """Subscribe to all fault kinds."""
        if self._started:
            return

        for kind in [FaultKind.FAULT, FaultKind.UNOBSERVED_FAILURE]:
            self._reporter.subscribe(kind, self._handle_fault)
        self._started = True

    def _handle_fault(self, event: FaultEvent) -> None:
        """Handle a FaultEvent delivered by the reporter."""
        self._history.append(event)
        logger.info(
            "Fault event %s from %s: %s",
            event.kind.value,
            event.source,
            event.message[:100],
            extra={"context": event.summary()},
        )

    def events(self, kind: FaultKind | None = None) -> list[FaultEvent]:
        """Recorded events, oldest first."""
        if kind is None:
            return list(self._history)
        return [e for e in self._history if e.kind == kind]
