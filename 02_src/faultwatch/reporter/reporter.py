"""FaultReporter: process-wide callback registry for fault events."""

import threading
from typing import Callable, Protocol

from ..logging_config import get_logger
from ..models import FaultEvent, FaultKind

logger = get_logger(__name__)


FaultHandler = Callable[[FaultEvent], None]


class IFaultReporter(Protocol):
    """Fault-reporting context shared by everything that launches work."""

    def subscribe(self, kind: FaultKind, handler: FaultHandler) -> None:
        """Subscribe a handler to an event kind."""
        ...

    def report(self, event: FaultEvent) -> int:
        """Deliver an event to the subscribers of its kind."""
        ...


class FaultReporter:
    """Ordered, append-only handler registry per FaultKind.

    Handlers are stored as tuples that are replaced on every subscribe, so
    ``report`` reads a snapshot without locking. Reports arrive from worker
    threads, runtime hooks and garbage-collector finalizers, any of which
    may interrupt a thread that is in the middle of ``subscribe``.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: dict[FaultKind, tuple[FaultHandler, ...]] = {
            FaultKind.FAULT: (),
            FaultKind.UNOBSERVED_FAILURE: (),
        }

    def subscribe(self, kind: FaultKind, handler: FaultHandler) -> None:
        """Subscribe a handler to an event kind."""
        with self._lock:
            self._subscribers[kind] = self._subscribers[kind] + (handler,)

    def on_unhandled_fault(self, handler: FaultHandler) -> None:
        """Called when a thread is about to die from an unhandled exception."""
        self.subscribe(FaultKind.FAULT, handler)

    def on_unobserved_failure(self, handler: FaultHandler) -> None:
        """Called when a background fault is reclaimed without being inspected."""
        self.subscribe(FaultKind.UNOBSERVED_FAILURE, handler)

    def handlers(self, kind: FaultKind) -> tuple[FaultHandler, ...]:
        """Current handlers for a kind, in subscription order."""
        return self._subscribers[kind]

    def report(self, event: FaultEvent) -> int:
        """Deliver an event to the subscribers of its kind.

        Handler errors are logged and swallowed so one broken subscriber
        never aborts a reporting pass.

        Returns:
            Number of handlers that completed without raising.
        """
        handlers = self._subscribers[event.kind]

        if not handlers:
            logger.debug(
                "No %s handlers registered, dropping event %s",
                event.kind.value,
                event.id,
            )
            return 0

        delivered = 0
        for i, handler in enumerate(handlers):
            try:
                handler(event)
                delivered += 1
            except Exception as e:
                logger.error(
                    "Error in %s handler %s: %s",
                    event.kind.value,
                    i,
                    e,
                    exc_info=True,
                )

        return delivered
