"""
The state soup: the set of currently active states of one monitor.

States are stored in insertion order (dict-backed sets) so that step
traces and violation reports are reproducible. The soup is partitioned
by state key: unkeyed states live in the global partition, keyed states
in one partition per key. An event with a key is only dispatched to the
global partition and the partition for that key; an event without a
key is dispatched to every partition. An equal state is never active
in two partitions at once.
"""

from __future__ import annotations

from typing import (
    Any,
    Callable,
    Dict,
    FrozenSet,
    Hashable,
    Iterable,
    Iterator,
    List,
    Optional,
    Union,
)

from datamon.core.state import State, is_sentinel, successors

Bucket = Dict[State, None]

_ABSENT = object()


class StateSoup:
    """
    Conjunctive set of active states, partitioned by key.

    Attributes:
        partitions: Number of keyed partitions currently in use.
    """

    def __init__(self, states: Iterable[State] = ()) -> None:
        self._global: Bucket = {}
        self._buckets: Dict[Hashable, Bucket] = {}
        # Partition key each active state was stored under
        self._index: Dict[State, Optional[Hashable]] = {}
        for state in states:
            self.add(state)

    @property
    def partitions(self) -> int:
        return len(self._buckets)

    # ------------------------------------------------------------------ #
    # Mutation
    # ------------------------------------------------------------------ #

    def add(self, state: State) -> None:
        """
        Add a state to its partition.

        States are a set across partitions: adding a state equal to an
        active one is a no-op, even if the two carry different keys.

        Raises:
            ValueError: If *state* is ``ok`` or ``error``.
        """
        if is_sentinel(state):
            raise ValueError(f"Sentinel state '{state}' cannot be active")
        if state in self._index:
            return
        self._index[state] = state.key
        if state.key is None:
            self._global[state] = None
        else:
            self._buckets.setdefault(state.key, {})[state] = None

    def discard(self, state: State) -> None:
        """Remove a state (or the active state equal to it) if present."""
        key = self._index.pop(state, _ABSENT)
        if key is _ABSENT:
            return
        if key is None:
            del self._global[state]
            return
        bucket = self._buckets[key]
        del bucket[state]
        if not bucket:
            del self._buckets[key]

    def update(self, removed: Iterable[State], added: Iterable[State]) -> None:
        """Replace *removed* states with *added* ones: ``(soup - removed) | added``."""
        for state in removed:
            self.discard(state)
        for state in added:
            self.add(state)

    def clear(self) -> None:
        """Remove every state."""
        self._global.clear()
        self._buckets.clear()
        self._index.clear()

    # ------------------------------------------------------------------ #
    # Lookup
    # ------------------------------------------------------------------ #

    def relevant(self, key: Optional[Hashable]) -> List[State]:
        """
        Return the states an event with *key* must be dispatched to.

        Args:
            key: The event's key, or ``None`` to select every state.

        Returns:
            A list snapshot, safe to iterate while the soup is updated.
        """
        if key is None:
            return list(self)
        return list(self._global) + list(self._buckets.get(key, ()))

    def hot_states(self) -> List[State]:
        """Return the non-final states."""
        return [state for state in self if not state.is_final]

    def snapshot(self) -> FrozenSet[State]:
        """Return the active states as a frozenset."""
        return frozenset(self)

    # ------------------------------------------------------------------ #
    # Fact queries
    # ------------------------------------------------------------------ #

    def exists(self, predicate: Callable[[State], Optional[bool]]) -> bool:
        """
        True if some active state satisfies *predicate*.

        A predicate returning ``None`` is undefined for that state, which
        counts as false.
        """
        return any(predicate(state) for state in self)

    def find(
        self,
        fn: Callable[[State], Optional[Iterable[State]]],
        orelse: Union[Callable[[], Iterable[State]], Iterable[State]],
    ) -> FrozenSet[State]:
        """
        Apply *fn* to every matching active state.

        Args:
            fn: Maps a state to successor states, or ``None`` when the state
                does not match.
            orelse: Result when no state matches; called first if callable.

        Returns:
            The union of the successor sets of all matches, or *orelse*.
        """
        found: List[FrozenSet[State]] = []
        for state in self:
            result = fn(state)
            if result is not None:
                found.append(successors(result))
        if found:
            return frozenset().union(*found)
        if callable(orelse):
            orelse = orelse()
        return successors(orelse)

    # ------------------------------------------------------------------ #
    # Container protocol
    # ------------------------------------------------------------------ #

    def __contains__(self, state: Any) -> bool:
        return isinstance(state, State) and state in self._index

    def __iter__(self) -> Iterator[State]:
        yield from self._global
        for bucket in self._buckets.values():
            yield from bucket

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return "StateSoup({" + ", ".join(str(s) for s in self) + "})"
