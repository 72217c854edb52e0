"""
Monitor states, the ``ok``/``error`` sentinels and result helpers.

A state owns a transition table and a finality flag. Anonymous states
(built inline by the temporal operators) compare by identity. Facts are
states declared as frozen dataclasses; they compare and hash by type and
field values so that queries can locate them by shape::

    @dataclass(frozen=True)
    class Locked(State):
        thread: int
        lock: int

    Locked(1, 10).hot(on_event)

Configuring a fact's transitions, key or label does not change its
equality, since none of those are dataclass fields.
"""

from __future__ import annotations

import dataclasses
from typing import Any, FrozenSet, Hashable, Iterable, Optional

from datamon.core.operators import (
    Transitions,
    constantly,
    first_of,
    no_transitions,
    self_loop,
)


class SpecificationError(TypeError):
    """Raised when a transition table returns something other than states."""

    pass


class State:
    """
    A node of a data automaton.

    Attributes:
        is_final: True if the state may remain active when the trace ends.
        key: Partition key (``None`` for the global partition).
    """

    is_final: bool = True
    key: Optional[Hashable] = None
    _transitions: Transitions = staticmethod(no_transitions)
    _operator: str = "state"
    _label: Optional[str] = None

    def apply(self, event: Any) -> Optional[FrozenSet[State]]:
        """
        Evaluate the transition table on an event.

        Args:
            event: The observed event.

        Returns:
            ``None`` if no transition applies, otherwise the successor set.

        Raises:
            SpecificationError: If the table returns a non-state result.
        """
        result = self._transitions(event)
        if result is None:
            return None
        return successors(result)

    # ------------------------------------------------------------------ #
    # Temporal operators
    # ------------------------------------------------------------------ #

    def watch(self, ts: Transitions) -> State:
        """Wait for *ts* to fire. Final."""
        return self._configure("watch", ts, final=True)

    def always(self, ts: Transitions) -> State:
        """Fire *ts* repeatedly; the state survives every firing. Final."""
        return self._configure(
            "always", self_loop(_checked(ts), self), final=True,
        )

    def hot(self, ts: Transitions) -> State:
        """Wait for *ts* to fire; it must fire before the trace ends."""
        return self._configure("hot", ts, final=False)

    def next(self, ts: Transitions) -> State:
        """*ts* must fire on the next event, and a next event must occur."""
        return self._configure("next", first_of(ts, constantly((error,))), final=False)

    def wnext(self, ts: Transitions) -> State:
        """*ts* must fire on the next event, if there is one. Final."""
        return self._configure("wnext", first_of(ts, constantly((error,))), final=True)

    def unless(self, escape: Transitions, ts: Transitions) -> State:
        """Repeat *ts* until *escape* fires; *escape* need never fire."""
        return self._configure(
            "unless", first_of(escape, self_loop(_checked(ts), self)), final=True,
        )

    def until(self, escape: Transitions, ts: Transitions) -> State:
        """Repeat *ts* until *escape* fires; *escape* must eventually fire."""
        return self._configure(
            "until", first_of(escape, self_loop(_checked(ts), self)), final=False,
        )

    # ------------------------------------------------------------------ #
    # Decoration
    # ------------------------------------------------------------------ #

    def keyed(self, key: Hashable) -> State:
        """
        Place this state in the partition for *key*.

        Must be called before the state enters a soup.

        Args:
            key: The partition key.

        Returns:
            The state itself.
        """
        object.__setattr__(self, "key", key)
        return self

    def label(self, *values: Any) -> State:
        """Attach display values shown in step traces."""
        object.__setattr__(
            self, "_label", "(" + ", ".join(repr(v) for v in values) + ")",
        )
        return self

    def _configure(self, operator: str, ts: Transitions, final: bool) -> State:
        # object.__setattr__ so that frozen dataclass facts can be configured
        object.__setattr__(self, "_operator", operator)
        object.__setattr__(self, "_transitions", ts)
        object.__setattr__(self, "is_final", final)
        return self

    def __str__(self) -> str:
        if dataclasses.is_dataclass(self):
            name = repr(self)
        else:
            name = self._operator
        if self._label is not None:
            name += self._label
        return name


class _Sentinel(State):
    """Terminal pseudo-state; never stored in a soup."""

    def __init__(self, name: str) -> None:
        self._name = name

    def apply(self, event: Any) -> None:
        return None

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return self._name


ok = _Sentinel("ok")
error = _Sentinel("error")


def is_sentinel(state: State) -> bool:
    """True for ``ok`` and ``error``."""
    return state is ok or state is error


# ---------------------------------------------------------------------- #
# Result helpers
# ---------------------------------------------------------------------- #


def lift(*states: State) -> FrozenSet[State]:
    """Build an explicit successor set from states."""
    return successors(states)


def ensure(condition: bool) -> State:
    """Return ``ok`` if *condition* holds, ``error`` otherwise."""
    return ok if condition else error


def implies(antecedent: bool, consequent: bool) -> bool:
    """Boolean implication ``antecedent ==> consequent``."""
    return (not antecedent) or consequent


def successors(result: Iterable[Any]) -> FrozenSet[State]:
    """
    Normalise a transition result into a frozenset of states.

    Args:
        result: An iterable of states.

    Returns:
        The states as a frozenset.

    Raises:
        SpecificationError: If *result* is a bare state, is not iterable,
            or contains non-state values.
    """
    if isinstance(result, State):
        raise SpecificationError(
            f"Transition returned the bare state {result}; "
            f"wrap successors with lift(...)"
        )
    try:
        states = frozenset(result)
    except TypeError as exc:
        raise SpecificationError(
            f"Transition result is not a collection of states: {exc}"
        ) from exc
    for state in states:
        if not isinstance(state, State):
            raise SpecificationError(
                f"Transition result contains a non-state value: {state!r}"
            )
    return states


def _checked(ts: Transitions) -> Transitions:
    # Normalise before a self-loop is chained onto the result
    def transitions(event: Any) -> Optional[FrozenSet[State]]:
        result = ts(event)
        if result is None:
            return None
        return successors(result)

    return transitions
