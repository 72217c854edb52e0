"""
Interval facts: is the trace currently between a begin and an end event?
"""

from __future__ import annotations

from typing import Any, FrozenSet, Iterable

from datamon.core.state import State, lift, ok


class During(State):
    """
    Self-looping fact tracking an interval of the trace.

    ``on`` becomes true when an event in ``begin`` is observed and false
    when an event in ``end`` is observed; any other event leaves it
    unchanged. ``begin`` is checked first. Events must be hashable.

    Attributes:
        begin: Events that open the interval.
        end: Events that close the interval.
        on: Whether the interval is currently open.
    """

    def __init__(self, begin: Iterable[Any], end: Iterable[Any]) -> None:
        self.begin: FrozenSet[Any] = frozenset(begin)
        self.end: FrozenSet[Any] = frozenset(end)
        self.on: bool = False
        self._initially_on = False
        self.always(self._toggle)

    def starts_true(self) -> During:
        """Open the interval before any event is observed."""
        self.on = self._initially_on = True
        return self

    def rewind(self) -> None:
        """Restore the interval to its state before the first event."""
        self.on = self._initially_on

    def implies(self, condition: bool) -> bool:
        """``on ==> condition``: true outside the interval or if *condition* holds."""
        return (not self.on) or condition

    def _toggle(self, event: Any) -> FrozenSet[State]:
        if event in self.begin:
            self.on = True
        elif event in self.end:
            self.on = False
        return lift(ok)

    def __bool__(self) -> bool:
        return self.on

    def __str__(self) -> str:
        begin = ", ".join(sorted(map(str, self.begin)))
        end = ", ".join(sorted(map(str, self.end)))
        return f"during({begin})({end}) [{'on' if self.on else 'off'}]"
