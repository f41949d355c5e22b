"""TaskHandle: tracking state for one launched unit of work."""

import asyncio
import threading
from concurrent.futures import Future
from typing import TYPE_CHECKING, Any

from ..logging_config import get_logger
from ..models import FaultEvent, FaultKind, TaskState
from ..reporter import IFaultReporter

if TYPE_CHECKING:
    from .supervisor import TaskSupervisor

logger = get_logger(__name__)


class TaskHandle:
    """Handle to a unit of work started by TaskSupervisor.

    The handle owns the fault of a failed unit until somebody inspects it
    (``result``, ``exception`` or ``await``) or until it is reclaimed, either
    by a supervisor sweep after ``detach()`` or by the garbage collector when
    the handle is dropped. Whichever comes first wins; the fault is handed
    to the unobserved-failure reporter at most once.
    """

    def __init__(
        self,
        future: "Future | asyncio.Future",
        name: str,
        reporter: IFaultReporter,
        supervisor: "TaskSupervisor",
    ):
        self._lock = threading.Lock()
        self._done_event = threading.Event()
        self._state = TaskState.RUNNING
        self._fault: FaultEvent | None = None
        self._detached = False

        self._future = future
        self._name = name
        self._reporter = reporter
        self._supervisor = supervisor

        # A future that is already done runs the callback at once and keeps
        # no reference to it. The cycle through _callback keeps a dropped
        # handle alive until a collector pass, never just a refcount drop.
        self._callback = self._on_done
        future.add_done_callback(self._callback)

    def __repr__(self) -> str:
        return f"<TaskHandle {self._name!r} state={self._state.value}>"

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> TaskState:
        return self._state

    @property
    def detached(self) -> bool:
        return self._detached

    def done(self) -> bool:
        """True once the unit finished and its outcome has been recorded."""
        return self._done_event.is_set()

    def detach(self) -> None:
        """Give up on the outcome; the supervisor will report a leftover fault."""
        with self._lock:
            if self._detached:
                return
            self._detached = True
        self._supervisor._adopt(self)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until finished without observing the outcome.

        Not for coroutine handles on their own loop thread: the loop could
        never run the task to completion.
        """
        return self._done_event.wait(timeout)

    async def wait_done(self) -> None:
        """Wait until finished without observing the outcome."""
        if self._done_event.is_set():
            return

        if isinstance(self._future, asyncio.Future):
            await asyncio.wait([self._future])
            while not self._done_event.is_set():
                await asyncio.sleep(0)  # _on_done is already queued on the loop
        else:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self._done_event.wait)

    def exception(self, timeout: float | None = None) -> BaseException | None:
        """Return the exception raised by the unit, marking it observed."""
        fault = self._wait_and_observe(timeout)
        if fault is not None:
            return fault.exception
        if self._future.cancelled():
            return self._future.exception()  # raises CancelledError
        return None

    def result(self, timeout: float | None = None) -> Any:
        """Return the unit's result or re-raise its exception, marking it observed."""
        fault = self._wait_and_observe(timeout)
        if fault is not None:
            raise fault.exception
        return self._future.result()

    def __await__(self):
        return self._join().__await__()

    async def _join(self) -> Any:
        await self.wait_done()
        return self.result()

    def _wait_and_observe(self, timeout: float | None) -> FaultEvent | None:
        if not self._done_event.is_set():
            if isinstance(self._future, asyncio.Future):
                raise asyncio.InvalidStateError(f"Task {self._name!r} is not done")
            if not self._done_event.wait(timeout):
                raise TimeoutError(f"Task {self._name!r} did not finish in {timeout}s")

        with self._lock:
            if self._state is TaskState.FAULTED:
                self._state = TaskState.OBSERVED
                self._fault.observed = True
            return self._fault

    def _on_done(self, future: "Future | asyncio.Future") -> None:
        # Retrieving the exception here also keeps asyncio from logging
        # "Task exception was never retrieved" for coroutine units.
        exc = None if future.cancelled() else future.exception()

        with self._lock:
            if exc is None:
                self._state = TaskState.DONE
            else:
                self._fault = FaultEvent.from_exception(
                    FaultKind.UNOBSERVED_FAILURE, exc, self._name
                )
                self._state = TaskState.FAULTED
        self._done_event.set()

        if exc is not None:
            logger.debug("Task %s faulted: %s", self._name, exc)

    def _claim_unobserved(self) -> FaultEvent | None:
        """Move FAULTED to REPORTED_UNOBSERVED; returns the fault if this call won."""
        with self._lock:
            if self._state is not TaskState.FAULTED:
                return None
            self._state = TaskState.REPORTED_UNOBSERVED
            return self._fault

    def __del__(self):
        fault = self._claim_unobserved()
        if fault is None:
            return

        logger.warning(
            "Task %s was reclaimed with an unobserved fault: %s",
            self._name,
            fault.message,
            extra={"context": fault.summary()},
        )
        self._reporter.report(fault)
