"""Wiring of sys.excepthook and threading.excepthook into a FaultReporter."""

import sys
import threading
from types import TracebackType
from typing import Any, Callable

from ..logging_config import get_logger
from ..models import FaultEvent, FaultKind
from ..reporter import IFaultReporter

logger = get_logger(__name__)


class GlobalFaultHook:
    """Reports faults that are about to kill a thread or the main program.

    Observe only: after the ``fault`` subscribers ran, the hook that was
    installed before us is called, so the traceback is still printed and
    the process still terminates as it would have without us.
    """

    def __init__(self, reporter: IFaultReporter):
        self._reporter = reporter
        self._previous_excepthook: Callable[..., Any] | None = None
        self._previous_threading_hook: Callable[..., Any] | None = None

    @property
    def installed(self) -> bool:
        return self._previous_excepthook is not None

    def install(self) -> None:
        """Replace the interpreter hooks; idempotent."""
        if self.installed:
            return

        self._previous_excepthook = sys.excepthook
        self._previous_threading_hook = threading.excepthook
        sys.excepthook = self._excepthook
        threading.excepthook = self._threading_excepthook
        logger.info("Global fault hooks installed")

    def uninstall(self) -> None:
        """Restore the hooks found at install time."""
        if not self.installed:
            return

        sys.excepthook = self._previous_excepthook
        threading.excepthook = self._previous_threading_hook
        self._previous_excepthook = None
        self._previous_threading_hook = None
        logger.info("Global fault hooks removed")

    def _excepthook(
        self,
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        if isinstance(exc, Exception):
            self._report(exc, threading.current_thread().name)
        previous = self._previous_excepthook or sys.__excepthook__
        previous(exc_type, exc, tb)

    def _threading_excepthook(self, args: threading.ExceptHookArgs) -> None:
        if isinstance(args.exc_value, Exception):
            source = args.thread.name if args.thread is not None else "<unknown thread>"
            self._report(args.exc_value, source)
        previous = self._previous_threading_hook or threading.__excepthook__
        previous(args)

    def _report(self, exc: Exception, source: str) -> None:
        event = FaultEvent.from_exception(FaultKind.FAULT, exc, source)
        logger.error(
            "Unhandled exception in %s: %s",
            source,
            event.message,
            extra={"context": event.summary()},
        )
        self._reporter.report(event)
