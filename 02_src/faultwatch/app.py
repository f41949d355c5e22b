"""Application bootstrap and lifecycle management."""

import os
from typing import Protocol

from .config import resolve_max_workers, resolve_sweep_interval
from .hooks import GlobalFaultHook, LoopFaultHook
from .logging_config import get_logger
from .reporter import FaultReporter
from .supervisor import TaskSupervisor
from .tracker import FaultTracker, ITracker

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        sweep_interval: float | None = None,
        max_workers: int | None = None,
    ):
        self._sweep_interval = (
            resolve_sweep_interval(os.getenv("FAULTWATCH_SWEEP_INTERVAL"))
            if sweep_interval is None
            else sweep_interval
        )
        self._max_workers = (
            resolve_max_workers(os.getenv("FAULTWATCH_MAX_WORKERS"))
            if max_workers is None
            else max_workers
        )

        # Components (will be initialized in start())
        self._reporter: FaultReporter | None = None
        self._tracker: ITracker | None = None
        self._supervisor: TaskSupervisor | None = None
        self._global_hook: GlobalFaultHook | None = None
        self._loop_hook: LoopFaultHook | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. FaultReporter (no dependencies)
        self._reporter = FaultReporter()

        # 2. Tracker (depends on FaultReporter)
        self._tracker = FaultTracker(self._reporter)
        await self._tracker.start()

        # 3. TaskSupervisor (depends on FaultReporter)
        self._supervisor = TaskSupervisor(self._reporter, max_workers=self._max_workers)
        await self._supervisor.start(self._sweep_interval)
        logger.info("TaskSupervisor started with %s workers", self._max_workers)

        # 4. Runtime hooks (depend on FaultReporter)
        self._global_hook = GlobalFaultHook(self._reporter)
        self._global_hook.install()
        self._loop_hook = LoopFaultHook(self._reporter)
        self._loop_hook.install()
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._loop_hook:
            self._loop_hook.uninstall()
        if self._global_hook:
            self._global_hook.uninstall()
        if self._supervisor:
            await self._supervisor.stop()
        logger.info("Application stopped")

    @property
    def reporter(self) -> FaultReporter:
        """Get fault reporter instance."""
        if not self._reporter:
            raise RuntimeError("Application not started")
        return self._reporter

    @property
    def supervisor(self) -> TaskSupervisor:
        """Get task supervisor instance."""
        if not self._supervisor:
            raise RuntimeError("Application not started")
        return self._supervisor

    @property
    def tracker(self) -> ITracker:
        """Get tracker instance."""
        if not self._tracker:
            raise RuntimeError("Application not started")
        return self._tracker
