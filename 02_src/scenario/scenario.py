"""Hardcoded fire-and-forget scenario."""

from typing import Protocol, TextIO

from faultwatch.config import DETECTION_MODES, DETECTION_SWEEP
from faultwatch.logging_config import get_logger
from faultwatch.models import FaultEvent
from faultwatch.reporter import IFaultReporter
from faultwatch.supervisor import ITaskSupervisor

logger = get_logger(__name__)

FIRE_AND_FORGET = "Fire and forget!"
UNHANDLED_EXCEPTION_CAUGHT = "Unhandled exception was caught!"
UNOBSERVED_EXCEPTION_CAUGHT = "Unhandled task scheduler exception was caught!"
FAULT_MESSAGE = "Hello World!"


class IScenario(Protocol):
    """Drive the system with a fixed scenario."""

    async def run(self) -> None:
        """Register handlers and trigger the scenario."""
        ...


def throw_hello_world() -> None:
    """Background work that always fails."""
    raise Exception(FAULT_MESSAGE)


class FireAndForgetScenario:
    """Registers both console handlers and launches one failing unit of work.

    In ``sweep`` mode the unit is detached, so the supervisor reports it on
    its next sweep. In ``reclamation`` mode the handle is simply dropped and
    the report waits for the garbage collector, which may never get to it
    before the process exits.
    """

    def __init__(
        self,
        reporter: IFaultReporter,
        supervisor: ITaskSupervisor,
        detection: str = DETECTION_SWEEP,
        out: TextIO | None = None,
    ):
        if detection not in DETECTION_MODES:
            raise ValueError(f"Unknown detection mode {detection!r}")

        self._reporter = reporter
        self._supervisor = supervisor
        self._detection = detection
        self._out = out

    def _print(self, text: str) -> None:
        print(text, file=self._out, flush=True)

    def _on_unhandled_fault(self, event: FaultEvent) -> None:
        self._print(UNHANDLED_EXCEPTION_CAUGHT)

    def _on_unobserved_failure(self, event: FaultEvent) -> None:
        self._print(UNOBSERVED_EXCEPTION_CAUGHT)

    async def run(self) -> None:
        """Register handlers and trigger the scenario."""
        self._reporter.on_unhandled_fault(self._on_unhandled_fault)
        self._reporter.on_unobserved_failure(self._on_unobserved_failure)

        if self._detection == DETECTION_SWEEP:
            self._supervisor.fire_and_forget(throw_hello_world)
            logger.info("Scenario launched in %s mode", self._detection)
            self._print(FIRE_AND_FORGET)
            return

        # Held until the launch line is out; after that only the collector
        # decides when the fault surfaces.
        handle = self._supervisor.launch(throw_hello_world)
        logger.info("Scenario launched in %s mode", self._detection)
        self._print(FIRE_AND_FORGET)
        del handle
