"""
Tests for the transition-table combinators.

Tests cover the empty table, constant tables, first-match composition
and self-loop extension.
"""

from datamon.core.operators import constantly, first_of, no_transitions, self_loop


def _table(mapping):
    """Transition table backed by a dict; unknown events are not applicable."""
    return lambda event: mapping.get(event)


class TestNoTransitions:
    """Test the empty table."""

    def test_never_applicable(self) -> None:
        assert no_transitions("a") is None
        assert no_transitions(None) is None


class TestConstantly:
    """Test tables applicable to every event."""

    def test_same_result_for_any_event(self) -> None:
        ts = constantly(["x", "y"])
        assert tuple(ts("a")) == ("x", "y")
        assert tuple(ts(42)) == ("x", "y")

    def test_result_is_copied(self) -> None:
        result = ["x"]
        ts = constantly(result)
        result.append("y")
        assert tuple(ts("a")) == ("x",)


class TestFirstOf:
    """Test first-match-wins composition."""

    def test_first_table_wins(self) -> None:
        ts = first_of(_table({"a": ["first"]}), _table({"a": ["second"]}))
        assert ts("a") == ["first"]

    def test_falls_back_to_second(self) -> None:
        ts = first_of(_table({"a": ["first"]}), _table({"b": ["second"]}))
        assert ts("b") == ["second"]

    def test_neither_applicable(self) -> None:
        ts = first_of(_table({}), _table({}))
        assert ts("c") is None

    def test_second_not_evaluated_when_first_fires(self) -> None:
        calls = []

        def second(event):
            calls.append(event)
            return ["second"]

        ts = first_of(_table({"a": ["first"]}), second)
        ts("a")
        assert calls == []

    def test_empty_result_counts_as_firing(self) -> None:
        """An empty successor set is applicable, unlike None."""
        ts = first_of(_table({"a": []}), _table({"a": ["second"]}))
        assert ts("a") == []


class TestSelfLoop:
    """Test self-loop extension."""

    def test_adds_state_when_firing(self) -> None:
        ts = self_loop(_table({"a": ["x"]}), "me")
        assert list(ts("a")) == ["x", "me"]

    def test_adds_state_to_empty_result(self) -> None:
        ts = self_loop(_table({"a": []}), "me")
        assert list(ts("a")) == ["me"]

    def test_not_applicable_stays_not_applicable(self) -> None:
        ts = self_loop(_table({"a": ["x"]}), "me")
        assert ts("b") is None
