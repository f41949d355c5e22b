"""Routing of asyncio's "exception was never retrieved" reports."""

import asyncio
from typing import Any, Callable

from ..logging_config import get_logger
from ..models import FaultEvent, FaultKind
from ..reporter import IFaultReporter

logger = get_logger(__name__)


LoopExceptionHandler = Callable[[asyncio.AbstractEventLoop, dict[str, Any]], Any]

# Suffix of the message asyncio passes when a Task or Future holding an
# exception is garbage collected before anybody called result()/exception().
NEVER_RETRIEVED = "exception was never retrieved"


class LoopFaultHook:
    """Turns raw asyncio tasks reclaimed with a pending exception into
    unobserved-failure events.

    These are tasks created with ``asyncio.create_task`` directly rather than
    through TaskSupervisor; asyncio only notices them when the garbage
    collector finalizes the task. Every other context goes to the handler
    that was set before, or to the loop's default handler.
    """

    def __init__(self, reporter: IFaultReporter):
        self._reporter = reporter
        self._loop: asyncio.AbstractEventLoop | None = None
        self._previous: LoopExceptionHandler | None = None

    @property
    def installed(self) -> bool:
        return self._loop is not None

    def install(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Set the exception handler on ``loop`` (default: the running loop)."""
        if self.installed:
            return

        self._loop = loop or asyncio.get_running_loop()
        self._previous = self._loop.get_exception_handler()
        self._loop.set_exception_handler(self._handle)
        logger.info("Loop fault hook installed")

    def uninstall(self) -> None:
        """Restore the loop's previous exception handler."""
        if not self.installed:
            return

        if not self._loop.is_closed():
            self._loop.set_exception_handler(self._previous)
        self._loop = None
        self._previous = None
        logger.info("Loop fault hook removed")

    def _handle(self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        exc = context.get("exception")
        future = context.get("future")
        message = context.get("message", "")

        if exc is not None and future is not None and message.endswith(NEVER_RETRIEVED):
            source = future.get_name() if isinstance(future, asyncio.Task) else repr(future)
            event = FaultEvent.from_exception(FaultKind.UNOBSERVED_FAILURE, exc, source)
            logger.warning(
                "Unobserved fault in reclaimed asyncio task %s: %s",
                source,
                event.message,
                extra={"context": event.summary()},
            )
            self._reporter.report(event)
            return

        if self._previous is not None:
            self._previous(loop, context)
        else:
            loop.default_exception_handler(context)
