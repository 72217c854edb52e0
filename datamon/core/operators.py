"""
Transition-table combinators for the temporal operators.

A transition table is a plain callable mapping an event to either
``None`` (the table is not applicable to the event) or an iterable of
successor states. The operators (``always``, ``next``, ``unless``, ...)
are built by composing tables with the combinators below; they never
inspect the states themselves, which keeps this module free of any
dependency on the state model.
"""

from __future__ import annotations

from itertools import chain
from typing import Any, Callable, Iterable, Optional

Transitions = Callable[[Any], Optional[Iterable[Any]]]


def no_transitions(event: Any) -> None:
    """Transition table that is not applicable to any event."""
    return None


def constantly(result: Iterable[Any]) -> Transitions:
    """
    Return a table applicable to every event, always yielding *result*.

    Args:
        result: The successor states produced for any event.

    Returns:
        A total transition table.
    """
    successors = tuple(result)

    def transitions(event: Any) -> Iterable[Any]:
        return successors

    return transitions


def first_of(first: Transitions, second: Transitions) -> Transitions:
    """
    Compose two tables so that *first* takes precedence.

    *second* is only consulted when *first* is not applicable, which
    preserves first-match-wins resolution in declaration order.

    Args:
        first: The preferred table.
        second: The fallback table.

    Returns:
        The composed table.
    """

    def transitions(event: Any) -> Optional[Iterable[Any]]:
        result = first(event)
        if result is not None:
            return result
        return second(event)

    return transitions


def self_loop(ts: Transitions, state: Any) -> Transitions:
    """
    Extend a table so every firing also yields *state* itself.

    Args:
        ts: The underlying table.
        state: The state to re-add whenever *ts* fires.

    Returns:
        A table applicable exactly where *ts* is.
    """

    def transitions(event: Any) -> Optional[Iterable[Any]]:
        result = ts(event)
        if result is None:
            return None
        return chain(result, (state,))

    return transitions
