"""Fault-related data models."""

import traceback
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class FaultKind(str, Enum):
    """Reporter event kinds."""

    FAULT = "fault"
    UNOBSERVED_FAILURE = "unobserved-failure"


class TaskState(str, Enum):
    """Lifecycle of a single launched unit of work."""

    RUNNING = "running"
    DONE = "done"  # finished without a fault (or cancelled)
    FAULTED = "faulted"  # fault captured, nobody has looked at it yet
    OBSERVED = "observed"
    REPORTED_UNOBSERVED = "reported_unobserved"


@dataclass
class FaultEvent:
    """A failure of a thread or background unit of work."""

    id: str
    kind: FaultKind
    message: str  # str(exception), verbatim
    trace: str  # formatted traceback
    exception_type: str
    source: str  # task or thread name
    timestamp: datetime
    observed: bool = False
    exception: BaseException | None = field(default=None, repr=False, compare=False)

    @classmethod
    def from_exception(
        cls, kind: FaultKind, exc: BaseException, source: str
    ) -> "FaultEvent":
        """Build an event from a raised exception."""
        return cls(
            id=str(uuid.uuid4()),
            kind=kind,
            message=str(exc),
            trace="".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            ),
            exception_type=type(exc).__name__,
            source=source,
            timestamp=datetime.now(timezone.utc),
            exception=exc,
        )

    def summary(self) -> dict:
        """Loggable fields, without the trace and exception object."""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "message": self.message,
            "exception_type": self.exception_type,
            "source": self.source,
            "timestamp": self.timestamp.isoformat(),
            "observed": self.observed,
        }
