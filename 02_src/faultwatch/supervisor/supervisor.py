"""TaskSupervisor: launches background work and sweeps detached handles."""

import asyncio
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Coroutine, Protocol

from ..config import DEFAULT_MAX_WORKERS, DEFAULT_SWEEP_INTERVAL
from ..logging_config import get_logger
from ..models import FaultEvent
from ..reporter import IFaultReporter
from .handle import TaskHandle

logger = get_logger(__name__)


class ITaskSupervisor(Protocol):
    """Launching units of work and reporting faults nobody looked at."""

    def launch(self, work: Callable[..., Any], *args, **kwargs) -> TaskHandle:
        """Run a callable on the worker pool, return its handle."""
        ...

    def fire_and_forget(self, work: Callable[..., Any], *args, **kwargs) -> None:
        """Run a callable on the worker pool and detach it immediately."""
        ...

    def sweep(self) -> list[FaultEvent]:
        """Report unobserved faults of finished detached handles."""
        ...

    async def start(self, sweep_interval: float | None = None) -> None:
        """Start the periodic sweeper."""
        ...

    async def stop(self) -> None:
        """Stop the sweeper and the worker pool, then sweep one last time."""
        ...


class TaskSupervisor:
    """Fire-and-forget launcher with explicit detach and deterministic sweeps."""

    def __init__(
        self,
        reporter: IFaultReporter,
        max_workers: int = DEFAULT_MAX_WORKERS,
        thread_name_prefix: str = "faultwatch-worker",
    ):
        self._reporter = reporter
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=thread_name_prefix
        )
        self._lock = threading.Lock()
        self._detached: list[TaskHandle] = []
        self._sweep_interval = DEFAULT_SWEEP_INTERVAL
        self._sweep_task: asyncio.Task | None = None
        self._running = False
        self._closed = False

    @property
    def pending(self) -> int:
        """Detached handles not yet swept."""
        with self._lock:
            return len(self._detached)

    def launch(
        self,
        work: Callable[..., Any],
        *args,
        name: str | None = None,
        **kwargs,
    ) -> TaskHandle:
        """Run a callable on the worker pool, return its handle."""
        if self._closed:
            raise RuntimeError("TaskSupervisor is shut down")

        task_name = name or getattr(work, "__qualname__", repr(work))
        future = self._executor.submit(work, *args, **kwargs)
        logger.debug("Launched %s on worker pool", task_name)
        return TaskHandle(future, task_name, self._reporter, self)

    def spawn(
        self, coro: Coroutine[Any, Any, Any], name: str | None = None
    ) -> TaskHandle:
        """Schedule a coroutine on the running loop, return its handle."""
        if not asyncio.iscoroutine(coro):
            raise TypeError(f"spawn() expects a coroutine, got {type(coro).__name__}")
        if self._closed:
            coro.close()
            raise RuntimeError("TaskSupervisor is shut down")

        task_name = name or getattr(coro, "__qualname__", "coroutine")
        try:
            task = asyncio.create_task(coro, name=task_name)
        except RuntimeError:
            coro.close()
            raise
        logger.debug("Spawned %s on event loop", task_name)
        return TaskHandle(task, task_name, self._reporter, self)

    def fire_and_forget(
        self,
        work: Callable[..., Any],
        *args,
        name: str | None = None,
        **kwargs,
    ) -> None:
        """Run a callable on the worker pool and detach it immediately."""
        self.launch(work, *args, name=name, **kwargs).detach()

    def _adopt(self, handle: TaskHandle) -> None:
        with self._lock:
            self._detached.append(handle)

    def sweep(self) -> list[FaultEvent]:
        """Report unobserved faults of finished detached handles.

        Finished handles are dropped from tracking; running ones stay for
        the next sweep.

        Returns:
            Events delivered to unobserved-failure subscribers, in detection order.
        """
        with self._lock:
            finished: list[TaskHandle] = []
            still_running: list[TaskHandle] = []
            for handle in self._detached:
                (finished if handle.done() else still_running).append(handle)
            self._detached = still_running

        reported = []
        for handle in finished:
            fault = handle._claim_unobserved()
            if fault is None:
                continue

            logger.warning(
                "Unobserved fault in detached task %s: %s",
                handle.name,
                fault.message,
                extra={"context": fault.summary()},
            )
            self._reporter.report(fault)
            reported.append(fault)

        return reported

    async def start(self, sweep_interval: float | None = None) -> None:
        """Start the periodic sweeper."""
        if sweep_interval is not None:
            if sweep_interval <= 0:
                raise ValueError(
                    f"Sweep interval must be positive, got {sweep_interval}"
                )
            self._sweep_interval = sweep_interval

        if self._running:
            return

        self._running = True
        self._sweep_task = asyncio.create_task(
            self._sweep_loop(), name="faultwatch-sweeper"
        )
        logger.info("Sweeper started, interval %ss", self._sweep_interval)

    async def stop(self) -> None:
        """Stop the sweeper and the worker pool, then sweep one last time."""
        self._running = False

        if self._sweep_task:
            self._sweep_task.cancel()
            await asyncio.gather(self._sweep_task, return_exceptions=True)
            self._sweep_task = None

        # Let in-flight work finish so its faults are visible to the final sweep
        await asyncio.to_thread(self.shutdown)

        reported = self.sweep()
        logger.info("Supervisor stopped, final sweep reported %s faults", len(reported))

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work and shut the worker pool down."""
        self._closed = True
        self._executor.shutdown(wait=wait)

    async def _sweep_loop(self) -> None:
        """Background sweeper."""
        while self._running:
            try:
                await asyncio.sleep(self._sweep_interval)
                self.sweep()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Sweep error: {e}", exc_info=True)
