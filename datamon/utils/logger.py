"""
Structured logging for data automata monitors.

Provides configurable log levels (silent, normal, verbose, debug)
with consistent formatting for step traces, violations, verdicts,
and monitoring statistics.
"""

from __future__ import annotations

import sys
from enum import Enum
from typing import Any, Dict, Iterable, TextIO

from datamon.core.violation import Violation

_BANNER = (
    "*****************************************",
    "**              E R R O R              **",
    "*****************************************",
)


class LogLevel(Enum):
    """
    Logging levels for the monitor.

    SILENT:  No output at all.
    NORMAL:  Violations, verdicts and requested step traces.
    VERBOSE: Progress information and statistics.
    DEBUG:   Detailed per-transition output.
    """

    SILENT = 0
    NORMAL = 1
    VERBOSE = 2
    DEBUG = 3


class MonitorLogger:
    """
    Structured logger for data automata monitors.

    Provides consistent formatting for step traces, debug information,
    violations, verdicts, and statistics. Output is filtered by the
    configured log level.

    Attributes:
        level: The minimum log level to display.
        stream: The output stream (defaults to stdout).
    """

    def __init__(
        self,
        level: LogLevel = LogLevel.NORMAL,
        stream: TextIO = sys.stdout,
    ) -> None:
        """
        Initialize logger with level and output stream.

        Args:
            level: Minimum log level to display.
            stream: Output stream (default: sys.stdout).
        """
        self.level: LogLevel = level
        self.stream: TextIO = stream

    def enabled(self, level: LogLevel) -> bool:
        """True if messages at *level* are displayed."""
        return self.level.value >= level.value

    def debug(self, message: str, **kwargs: Any) -> None:
        """
        Log a debug message (only shown at DEBUG level).

        Args:
            message: The message to log.
            **kwargs: Additional key-value pairs to include.
        """
        if self.enabled(LogLevel.DEBUG):
            self._write(f"[DEBUG] {message}")
            for k, v in kwargs.items():
                self._write(f"  {k}: {v}")

    def info(self, message: str, **kwargs: Any) -> None:
        """
        Log an info message (shown at VERBOSE and DEBUG levels).

        Args:
            message: The message to log.
            **kwargs: Additional key-value pairs to include.
        """
        if self.enabled(LogLevel.VERBOSE):
            self._write(f"[INFO] {message}")
            for k, v in kwargs.items():
                self._write(f"  {k}: {v}")

    # ------------------------------------------------------------------ #
    # Step traces (requested with print_steps)
    # ------------------------------------------------------------------ #

    def event_step(self, monitor: str, event: Any) -> None:
        """Log an event submitted to a monitor."""
        if self.enabled(LogLevel.NORMAL):
            self._write(f"[EVENT] {monitor} <- {event}")

    def soup_states(self, monitor: str, states: Iterable[Any]) -> None:
        """Log the active states of a monitor after an event."""
        if self.enabled(LogLevel.NORMAL):
            topline = f"--- {monitor} " + "-" * 20
            self._write(topline)
            for state in states:
                self._write(f"  {state}")
            self._write("-" * len(topline))

    def ending(self, monitor: str) -> None:
        """Log the end of trace evaluation for a monitor."""
        if self.enabled(LogLevel.NORMAL):
            self._write(f"[END] Ending trace evaluation for {monitor}")

    # ------------------------------------------------------------------ #
    # Violations
    # ------------------------------------------------------------------ #

    def violation(self, violation: Violation) -> None:
        """Log a violation on one line (shown at NORMAL level and above)."""
        if self.enabled(LogLevel.NORMAL):
            self._write(f"[ERROR] {violation}")

    def error_banner(self, violation: Violation) -> None:
        """Log a violation with an emphasizing banner."""
        if self.enabled(LogLevel.NORMAL):
            self._write("")
            for line in _BANNER:
                self._write(line)
            self._write("")
            self._write(str(violation))
            self._write("")

    def hot_states(self, monitor: str, states: Iterable[Any]) -> None:
        """Log non-final states remaining at the end of the trace."""
        if self.enabled(LogLevel.NORMAL):
            self._write(f"[LIVENESS] Non final {monitor} states:")
            for state in states:
                self._write(f"  {state}")

    def terminating(self) -> None:
        """Log the fail-fast abort."""
        if self.enabled(LogLevel.NORMAL):
            self._write("[ABORT] Terminating on first error")

    # ------------------------------------------------------------------ #
    # Verdicts
    # ------------------------------------------------------------------ #

    def verdict_satisfied(self) -> None:
        """Log a SATISFIED verdict (shown at NORMAL level and above)."""
        if self.enabled(LogLevel.NORMAL):
            self._write("SATISFIED: No specification violations")

    def verdict_violated(self, error_count: int) -> None:
        """Log a VIOLATED verdict (shown at NORMAL level and above)."""
        if self.enabled(LogLevel.NORMAL):
            self._write(f"VIOLATED: {error_count} specification violation(s)")

    def statistics(self, stats: Dict[str, Any]) -> None:
        """
        Log monitoring statistics (shown at VERBOSE level and above).

        Args:
            stats: Dictionary of statistic names to values.
        """
        if self.enabled(LogLevel.VERBOSE):
            self._write("=== Statistics ===")
            for key, value in stats.items():
                label = key.replace("_", " ").title()
                self._write(f"  {label}: {value}")

    def _write(self, message: str) -> None:
        """Write a line to the output stream."""
        self.stream.write(message + "\n")
