"""
Specification violations and the fail-fast abort exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ViolationKind(Enum):
    """
    Kinds of specification violation.

    SAFETY:    A transition produced the ``error`` state.
    LIVENESS:  A non-final state was still active when the trace ended.
    INVARIANT: A registered invariant evaluated to false.
    """

    SAFETY = "safety"
    LIVENESS = "liveness"
    INVARIANT = "invariant"


@dataclass(frozen=True)
class Violation:
    """
    A recorded violation.

    Attributes:
        monitor: Name of the monitor that recorded it.
        kind: The kind of violation.
        number: Position in the monitor's own error count (1-based).
        message: Optional free text attached by the specification.
        event: The event being verified, if any.
    """

    monitor: str
    kind: ViolationKind
    number: int
    message: Optional[str] = None
    event: Any = None

    def __str__(self) -> str:
        text = f"{self.monitor} {self.kind.value} error # {self.number}"
        if self.message:
            text += f": {self.message}"
        if self.event is not None:
            text += f" (event: {self.event})"
        return text


class MonitorError(RuntimeError):
    """
    Raised to abort verification on the first violation.

    Attributes:
        violation: The violation that triggered the abort.
    """

    def __init__(self, violation: Violation) -> None:
        super().__init__(str(violation))
        self.violation = violation
