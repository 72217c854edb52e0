"""
Trace file parser for replayed event streams.

Reads traces with one event term per line, building application events
through an :class:`EventFactory`, and extracts monitor options from
directives in comment lines.

Traces can be loaded completely (:meth:`TraceReader.read_all`) or
streamed line by line (:meth:`TraceReader.iter_events`) so that long
logs are verified without holding every event in memory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from datamon.core.options import MonitorOptions
from datamon.parser.events import EventFactory
from datamon.parser.grammar import ParseError
from datamon.parser.lexer import LexerError


class TraceError(ValueError):
    """Raised for malformed trace lines or directives."""

    pass


@dataclass
class TraceMetadata:
    """
    Metadata extracted from a trace file.

    Attributes:
        source: Path of the trace file.
        event_count: Total number of events.
        directives: Raw option directives found in comment lines.
    """

    source: Path
    event_count: int
    directives: Dict[str, str] = field(default_factory=dict)

    @property
    def options(self) -> MonitorOptions:
        """Monitor options defined by the directives."""
        return MonitorOptions.from_mapping(self.directives)


@dataclass
class TraceData:
    """
    Complete trace data loaded from a file.

    Attributes:
        events: List of all events in file order.
        metadata: Trace metadata.
    """

    events: List[Any]
    metadata: TraceMetadata


class TraceReader:
    """
    Parses trace files into events.

    Expected format::

        # Optional directives (any monitor option)
        # stop_on_error: true
        # print_steps: false

        # One event per line
        acquire(1, 10)
        release(1, 10)

    Attributes:
        filepath: Path to the trace file.
        factory: Builds application events from parsed terms.
    """

    def __init__(
        self,
        filepath: Path,
        factory: Optional[EventFactory] = None,
    ) -> None:
        """
        Initialize reader with file path and event factory.

        Args:
            filepath: Path to the trace file.
            factory: Event factory (default: one with an empty namespace,
                     producing generic terms).
        """
        self.filepath: Path = Path(filepath)
        self.factory: EventFactory = factory or EventFactory()

    def read_all(self) -> TraceData:
        """
        Read all events and directives.

        Returns:
            TraceData with all events and metadata.
        """
        events = self.read_events()
        metadata = TraceMetadata(
            source=self.filepath,
            event_count=len(events),
            directives=self._parse_directives(),
        )
        return TraceData(events=events, metadata=metadata)

    def read_metadata(self) -> TraceMetadata:
        """
        Read only metadata without building events.

        Returns:
            TraceMetadata with directives and event count.
        """
        return TraceMetadata(
            source=self.filepath,
            event_count=len(self._read_event_lines()),
            directives=self._parse_directives(),
        )

    def read_options(
        self, base: Optional[MonitorOptions] = None,
    ) -> MonitorOptions:
        """
        Apply the file's directives on top of *base* options.

        Raises:
            TraceError: If a directive names an unknown option or has a
                non-boolean value.
        """
        try:
            return (base or MonitorOptions()).merged(**self._parse_directives())
        except ValueError as exc:
            raise TraceError(f"{self.filepath}: {exc}") from exc

    def read_events(self) -> List[Any]:
        """
        Read all events from the file.

        Returns:
            List of events in file order.

        Raises:
            FileNotFoundError: If the trace file does not exist.
            TraceError: If a line is not a valid event.
        """
        return list(self.iter_events())

    def iter_events(self) -> Iterator[Any]:
        """
        Stream events from the file, one line at a time.

        Raises:
            FileNotFoundError: If the trace file does not exist.
            TraceError: If a line is not a valid event.
        """
        if not self.filepath.exists():
            raise FileNotFoundError(f"Trace file not found: {self.filepath}")

        with open(self.filepath) as f:
            for lineno, line in enumerate(f, start=1):
                stripped = line.strip()
                if not stripped or stripped.startswith("#"):
                    continue
                yield self._parse_line(lineno, stripped)

    def validate(self) -> List[str]:
        """
        Validate the trace file and return a list of error strings.

        Validates:
        - The file exists and contains events
        - Every event line parses and builds
        - Directives name known options with boolean values

        Returns:
            List of error messages (empty if valid).
        """
        errors: List[str] = []

        if not self.filepath.exists():
            errors.append(f"File not found: {self.filepath}")
            return errors

        lines = self._read_event_lines()
        if not lines:
            errors.append("No events found in file")

        for lineno, text in lines:
            try:
                self._parse_line(lineno, text)
            except TraceError as exc:
                errors.append(str(exc))

        try:
            self.read_options()
        except TraceError as exc:
            errors.append(str(exc))

        return errors

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _parse_line(self, lineno: int, text: str) -> Any:
        """Parse and build the event on one line."""
        try:
            return self.factory.parse(text)
        except (LexerError, ParseError, ValueError, TypeError) as exc:
            raise TraceError(
                f"{self.filepath.name}:{lineno}: invalid event '{text}': {exc}"
            ) from exc

    def _parse_directives(self) -> Dict[str, str]:
        """Extract ``# name: value`` directives naming monitor options."""
        directives: Dict[str, str] = {}
        if not self.filepath.exists():
            return directives

        known = MonitorOptions.names()
        with open(self.filepath) as f:
            for line in f:
                line = line.strip()
                if not line.startswith("#"):
                    continue
                content = line.lstrip("#").strip()
                if ":" not in content:
                    continue
                name, value = (part.strip() for part in content.split(":", 1))
                if name in known:
                    directives[name] = value

        return directives

    def _read_event_lines(self) -> List[Tuple[int, str]]:
        """Read non-comment, non-empty lines with their line numbers."""
        if not self.filepath.exists():
            return []

        lines: List[Tuple[int, str]] = []
        with open(self.filepath) as f:
            for lineno, line in enumerate(f, start=1):
                stripped = line.strip()
                if stripped and not stripped.startswith("#"):
                    lines.append((lineno, stripped))
        return lines
