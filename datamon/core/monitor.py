"""
The monitor: verification engine for data automata.

A monitor keeps a soup of active states. Every submitted event is
dispatched to each relevant active state; states whose transitions fire
are replaced by their successors, ``ok`` successors close a branch and
``error`` successors record a safety violation. Invariants are checked
after each event, and the event is then forwarded to sub-monitors.

A specification is written by sub-classing :class:`Monitor` and declaring
states in ``__init__``; the first state built with one of the operator
methods becomes the initial state::

    class AcquireRelease(Monitor):
        def __init__(self, **kwargs):
            super().__init__(**kwargs)
            self.always(self.idle)

        def idle(self, event):
            if isinstance(event, Acquire):
                return lift(self.locked(event.thread, event.lock))
            return None

        def locked(self, thread, lock):
            def step(event):
                if isinstance(event, Release) and event.lock == lock:
                    return lift(ok)
                return None
            return Locked(thread, lock).hot(step)

    m = AcquireRelease()
    m.verify(Acquire(1, 10))
    m.end()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Dict,
    FrozenSet,
    Hashable,
    Iterable,
    List,
    Optional,
    Union,
)

from datamon.core.during import During
from datamon.core.operators import Transitions
from datamon.core.options import MonitorOptions
from datamon.core.soup import StateSoup
from datamon.core.state import State, error, ok
from datamon.core.violation import MonitorError, Violation, ViolationKind
from datamon.utils.logger import LogLevel, MonitorLogger


@dataclass
class Invariant:
    """
    A boolean predicate checked after every event.

    Attributes:
        label: Message reported when the invariant is violated.
        predicate: Zero-argument callable returning the invariant's value.
    """

    label: str
    predicate: Callable[[], bool]


@dataclass
class MonitorResult:
    """
    Result of monitoring a trace.

    Attributes:
        satisfied: Whether no violation was recorded in the monitor tree.
        verdict: Human-readable verdict string.
        error_count: Number of violations in the monitor tree.
        violations: The violations, in the order they were recorded per monitor.
        statistics: Dictionary of monitoring statistics.
    """

    satisfied: bool
    verdict: str
    error_count: int
    violations: List[Violation]
    statistics: Dict[str, Any]


class Monitor:
    """
    Runtime monitor over a stream of events.

    Attributes:
        name: Monitor name used in logs (defaults to the class name).
        print_steps: Trace each event and the resulting active states.
        print_error_banner: Emphasize violations with a banner.
        stop_on_error: Raise MonitorError on the first violation.
        logger: Logger for traces and violations.
        violations: Violations recorded by this monitor (not sub-monitors).
    """

    def __init__(
        self,
        name: Optional[str] = None,
        options: Optional[MonitorOptions] = None,
        logger: Optional[MonitorLogger] = None,
    ) -> None:
        """
        Initialize an empty monitor.

        Args:
            name: Monitor name (default: the class name).
            options: Configuration flags (default: MonitorOptions()).
            logger: Optional logger (default: NORMAL level on stdout).
        """
        opts = options or MonitorOptions()
        self.name: str = name or type(self).__name__
        self.print_steps: bool = opts.print_steps
        self.print_error_banner: bool = opts.print_error_banner
        self.stop_on_error: bool = opts.stop_on_error
        self.logger: MonitorLogger = logger or MonitorLogger(LogLevel.NORMAL)
        self.violations: List[Violation] = []

        self._soup = StateSoup()
        self._initial_states: List[State] = []
        self._declaring: bool = True
        self._invariants: List[Invariant] = []
        self._monitors: List[Monitor] = []
        self._error_count: int = 0
        self._error_message: Optional[str] = None
        self._current_event: Any = None
        self._events_processed: int = 0
        self._max_active_states: int = 0

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #

    def configure(
        self,
        options: Optional[MonitorOptions] = None,
        logger: Optional[MonitorLogger] = None,
    ) -> Monitor:
        """
        Apply options and/or a logger to this monitor and all sub-monitors.

        Returns:
            The monitor itself.
        """
        if options is not None:
            self.print_steps = options.print_steps
            self.print_error_banner = options.print_error_banner
            self.stop_on_error = options.stop_on_error
        if logger is not None:
            self.logger = logger
        for monitor in self._monitors:
            monitor.configure(options, logger)
        return self

    @property
    def options(self) -> MonitorOptions:
        """The monitor's current flags as a MonitorOptions value."""
        return MonitorOptions(
            print_steps=self.print_steps,
            print_error_banner=self.print_error_banner,
            stop_on_error=self.stop_on_error,
        )

    def trace_steps(self) -> Monitor:
        """Enable step traces for this monitor and its sub-monitors."""
        self.print_steps = True
        for monitor in self._monitors:
            monitor.trace_steps()
        return self

    def halt_on_error(self) -> Monitor:
        """Stop on the first violation in this monitor or any sub-monitor."""
        self.stop_on_error = True
        for monitor in self._monitors:
            monitor.halt_on_error()
        return self

    def monitor(self, *monitors: Monitor) -> Monitor:
        """
        Register sub-monitors.

        Sub-monitors receive every event submitted to this monitor, after
        this monitor has processed it, in registration order. Grouping
        has no other semantics.

        Returns:
            The monitor itself.
        """
        self._monitors.extend(monitors)
        return self

    @property
    def monitors(self) -> List[Monitor]:
        """The registered sub-monitors."""
        return list(self._monitors)

    # ------------------------------------------------------------------ #
    # State declaration
    # ------------------------------------------------------------------ #

    def initial(self, *states: State) -> None:
        """Add states to the soup as initial states."""
        for state in states:
            self._soup.add(state)
            self._initial_states.append(state)

    def watch(self, ts: Transitions) -> State:
        """Build a ``watch`` state (see :meth:`State.watch`)."""
        return self._declare(State().watch(ts))

    def always(self, ts: Transitions) -> State:
        """Build an ``always`` state (see :meth:`State.always`)."""
        return self._declare(State().always(ts))

    def hot(self, ts: Transitions) -> State:
        """Build a ``hot`` state (see :meth:`State.hot`)."""
        return self._declare(State().hot(ts))

    def next(self, ts: Transitions) -> State:
        """Build a ``next`` state (see :meth:`State.next`)."""
        return self._declare(State().next(ts))

    def wnext(self, ts: Transitions) -> State:
        """Build a ``wnext`` state (see :meth:`State.wnext`)."""
        return self._declare(State().wnext(ts))

    def unless(self, escape: Transitions, ts: Transitions) -> State:
        """Build an ``unless`` state (see :meth:`State.unless`)."""
        return self._declare(State().unless(escape, ts))

    def until(self, escape: Transitions, ts: Transitions) -> State:
        """Build an ``until`` state (see :meth:`State.until`)."""
        return self._declare(State().until(escape, ts))

    def during(self, begin: Iterable[Any], end: Iterable[Any]) -> During:
        """Build an interval fact and add it as an initial state."""
        interval = During(begin, end)
        self.initial(interval)
        return interval

    def invariant(self, predicate: Callable[[], bool], label: str = "") -> None:
        """
        Register an invariant, checked now and after every event.

        Args:
            predicate: Zero-argument callable returning a bool.
            label: Message reported on violation.
        """
        invariant = Invariant(label, predicate)
        self._invariants.append(invariant)
        self._check_invariant(invariant)

    def _declare(self, state: State) -> State:
        # The first operator state built before monitoring starts is initial
        if self._declaring:
            self._declaring = False
            self.initial(state)
        return state

    # ------------------------------------------------------------------ #
    # Fact queries
    # ------------------------------------------------------------------ #

    @property
    def states(self) -> FrozenSet[State]:
        """Snapshot of the active states."""
        return self._soup.snapshot()

    def holds(self, state: State) -> bool:
        """True if a state equal to *state* is active."""
        return state in self._soup

    def exists(self, predicate: Callable[[State], Optional[bool]]) -> bool:
        """True if some active state satisfies *predicate* (``None`` = false)."""
        return self._soup.exists(predicate)

    def find(
        self,
        fn: Callable[[State], Optional[Iterable[State]]],
        orelse: Union[Callable[[], Iterable[State]], Iterable[State]],
    ) -> FrozenSet[State]:
        """
        Union of *fn* over matching active states, else *orelse*.

        See :meth:`StateSoup.find`.
        """
        return self._soup.find(fn, orelse)

    # ------------------------------------------------------------------ #
    # Result helpers
    # ------------------------------------------------------------------ #

    def error(self, message: str) -> State:
        """Return ``error``, attaching *message* to the resulting violation."""
        self._error_message = message
        return error

    def check(self, condition: bool, message: str = "") -> None:
        """Record a safety violation immediately if *condition* is false."""
        if not condition:
            self.report_error(
                ViolationKind.SAFETY, message or None, self._current_event,
            )

    def _check_invariant(self, invariant: Invariant) -> None:
        if not invariant.predicate():
            self.report_error(
                ViolationKind.INVARIANT,
                invariant.label or None,
                self._current_event,
            )

    # ------------------------------------------------------------------ #
    # Verification
    # ------------------------------------------------------------------ #

    def key_of(self, event: Any) -> Optional[Hashable]:
        """
        Return the partition key of an event (override to partition).

        Events with a key are only dispatched to unkeyed states and states
        keyed with the same value. The default, ``None``, dispatches every
        event to every state.
        """
        return None

    def verify(self, event: Any) -> None:
        """
        Submit an event to the monitor and its sub-monitors.

        Raises:
            MonitorError: If ``stop_on_error`` is set and a violation occurs.
        """
        self._declaring = False
        self._current_event = event
        self.verify_before_event(event)
        if self.print_steps:
            self.logger.event_step(self.name, event)

        to_remove: List[State] = []
        to_add: List[State] = []
        for source in self._soup.relevant(self.key_of(event)):
            self._error_message = None
            targets = source.apply(event)
            if targets is None:
                continue
            if self.logger.enabled(LogLevel.DEBUG):
                self.logger.debug(
                    f"{self.name}: {source} fired on {event}",
                    successors=", ".join(str(t) for t in targets) or "(none)",
                )
            to_remove.append(source)
            for target in targets:
                if target is error:
                    self.report_error(
                        ViolationKind.SAFETY, self._error_message, event,
                    )
                elif target is not ok:
                    to_add.append(target)
        self._error_message = None
        self._soup.update(to_remove, to_add)

        self._events_processed += 1
        self._max_active_states = max(self._max_active_states, len(self._soup))
        if self.print_steps:
            self.logger.soup_states(self.name, self._soup)

        for invariant in self._invariants:
            self._check_invariant(invariant)
        for monitor in self._monitors:
            monitor.verify(event)
        self.verify_after_event(event)

    def apply(self, event: Any) -> None:
        """Alias for :meth:`verify`."""
        self.verify(event)

    def __call__(self, event: Any) -> None:
        self.verify(event)

    def end(self) -> None:
        """
        End the trace: every non-final active state is a liveness violation.

        The soup is inspected, not cleared. Sub-monitors are ended after
        this monitor.

        Raises:
            MonitorError: If ``stop_on_error`` is set and a violation occurs.
        """
        self._current_event = None
        if self.print_steps:
            self.logger.ending(self.name)
        hot_states = self._soup.hot_states()
        if hot_states:
            self.logger.hot_states(self.name, hot_states)
            for state in hot_states:
                self.report_error(
                    ViolationKind.LIVENESS, f"non final state {state}",
                )
        for monitor in self._monitors:
            monitor.end()

    def run(self, events: Iterable[Any], end: bool = True) -> MonitorResult:
        """
        Verify a sequence of events and return the verdict.

        A MonitorError raised under ``stop_on_error`` ends the run early;
        the violation that caused it is part of the result.

        Args:
            events: The events, in trace order.
            end: Whether to call :meth:`end` after the last event.

        Returns:
            MonitorResult with verdict and statistics.
        """
        aborted = False
        try:
            for event in events:
                self.verify(event)
            if end:
                self.end()
        except MonitorError:
            aborted = True

        count = self.get_error_count()
        stats = self.get_statistics()
        stats["aborted"] = aborted
        if count == 0:
            verdict = "SATISFIED: No specification violations"
            self.logger.verdict_satisfied()
        else:
            verdict = f"VIOLATED: {count} specification violation(s)"
            self.logger.verdict_violated(count)
        self.logger.statistics(stats)

        return MonitorResult(
            satisfied=count == 0,
            verdict=verdict,
            error_count=count,
            violations=self.violations_all(),
            statistics=stats,
        )

    def reset(self) -> None:
        """Restore the initial soup and clear errors, recursively."""
        self._soup.clear()
        for state in self._initial_states:
            if isinstance(state, During):
                state.rewind()
            self._soup.add(state)
        self._error_count = 0
        self._events_processed = 0
        self._max_active_states = 0
        self._current_event = None
        self.violations = []
        for monitor in self._monitors:
            monitor.reset()

    # ------------------------------------------------------------------ #
    # Hooks
    # ------------------------------------------------------------------ #

    def verify_before_event(self, event: Any) -> None:
        """Called before every event is processed. Empty by default."""

    def verify_after_event(self, event: Any) -> None:
        """Called after every event is processed. Empty by default."""

    def callback(self, violation: Violation) -> None:
        """Called once per recorded violation. Empty by default."""

    # ------------------------------------------------------------------ #
    # Errors and statistics
    # ------------------------------------------------------------------ #

    def report_error(
        self,
        kind: ViolationKind,
        message: Optional[str] = None,
        event: Any = None,
    ) -> Violation:
        """
        Record a violation.

        Increments the error count, logs the violation, invokes
        :meth:`callback` and, under ``stop_on_error``, raises.

        Returns:
            The recorded violation.

        Raises:
            MonitorError: If ``stop_on_error`` is set.
        """
        self._error_count += 1
        violation = Violation(
            monitor=self.name,
            kind=kind,
            number=self._error_count,
            message=message,
            event=event,
        )
        self.violations.append(violation)
        if self.print_error_banner:
            self.logger.error_banner(violation)
        else:
            self.logger.violation(violation)
        self.callback(violation)
        if self.stop_on_error:
            self.logger.terminating()
            raise MonitorError(violation)
        return violation

    def get_error_count(self) -> int:
        """Return this monitor's error count plus all sub-monitors'."""
        return self._error_count + sum(
            m.get_error_count() for m in self._monitors
        )

    def violations_all(self) -> List[Violation]:
        """Return the violations of this monitor and all sub-monitors."""
        result = list(self.violations)
        for monitor in self._monitors:
            result.extend(monitor.violations_all())
        return result

    def get_statistics(self) -> Dict[str, Any]:
        """Return monitoring statistics for this monitor tree."""
        return {
            "events_processed": self._events_processed,
            "active_states": len(self._soup),
            "max_active_states": self._max_active_states,
            "partitions": self._soup.partitions,
            "sub_monitors": len(self._monitors),
            "error_count": self.get_error_count(),
        }

    def __str__(self) -> str:
        return f"{self.name}({self._soup})"
