"""
Tests for the event term grammar/parser.

Tests cover bare names, terms with and without arguments, literal
arguments, nested terms, bare literal events, term display and error
handling.
"""

import pytest

from datamon.parser.grammar import EventParser, ParseError
from datamon.parser.lexer import LexerError
from datamon.parser.terms import Term, format_value


@pytest.fixture
def parser() -> EventParser:
    """Return a fresh parser instance."""
    return EventParser()


class TestTerms:
    """Test parsing of named terms."""

    def test_bare_name(self, parser: EventParser) -> None:
        assert parser.parse("tick") == Term("tick")

    def test_empty_arguments(self, parser: EventParser) -> None:
        assert parser.parse("tick()") == Term("tick")

    def test_int_arguments(self, parser: EventParser) -> None:
        result = parser.parse("acquire(1, 10)")
        assert result == Term("acquire", (1, 10))
        assert result.arity == 2

    def test_mixed_literals(self, parser: EventParser) -> None:
        result = parser.parse('log("boot", 2.5, true, none, -3)')
        assert result.args == ("boot", 2.5, True, None, -3)

    def test_false_argument(self, parser: EventParser) -> None:
        assert parser.parse("flag(False)").args == (False,)

    def test_nested_term(self, parser: EventParser) -> None:
        result = parser.parse("send(msg(1), 2)")
        assert result == Term("send", (Term("msg", (1,)), 2))

    def test_dotted_name(self, parser: EventParser) -> None:
        assert parser.parse("Command.START") == Term("Command.START")

    def test_surrounding_whitespace(self, parser: EventParser) -> None:
        assert parser.parse("   tick  \n") == Term("tick")

    def test_terms_are_hashable(self, parser: EventParser) -> None:
        assert len({parser.parse("a(1)"), parser.parse("a( 1 )")}) == 1


class TestLiteralEvents:
    """Test events that are bare literals."""

    def test_int(self, parser: EventParser) -> None:
        assert parser.parse("42") == 42

    def test_string(self, parser: EventParser) -> None:
        assert parser.parse('"go"') == "go"

    def test_true(self, parser: EventParser) -> None:
        assert parser.parse("true") is True

    def test_none(self, parser: EventParser) -> None:
        assert parser.parse("none") is None


class TestDisplay:
    """Test the trace syntax rendering of terms."""

    def test_name_only(self) -> None:
        assert str(Term("tick")) == "tick"

    def test_with_arguments(self) -> None:
        assert str(Term("acquire", (1, 10))) == "acquire(1, 10)"

    def test_literals(self) -> None:
        term = Term("log", ("a\"b", True, None, 2.5))
        assert str(term) == 'log("a\\"b", true, none, 2.5)'

    def test_repr_matches_str(self) -> None:
        assert repr(Term("f", (1,))) == "f(1)"

    def test_display_parses_back(self, parser: EventParser) -> None:
        term = Term("send", (Term("msg", ("x y",)), -1, False))
        assert parser.parse(str(term)) == term

    @pytest.mark.parametrize(
        "value, expected",
        [(True, "true"), (False, "false"), (None, "none"), (3, "3"), ("s", '"s"')],
    )
    def test_format_value(self, value: object, expected: str) -> None:
        assert format_value(value) == expected


class TestErrors:
    """Test error handling."""

    def test_empty(self, parser: EventParser) -> None:
        with pytest.raises(ParseError, match="empty event"):
            parser.parse("")

    def test_whitespace_only(self, parser: EventParser) -> None:
        with pytest.raises(ParseError, match="empty event"):
            parser.parse("   ")

    def test_unclosed_parenthesis(self, parser: EventParser) -> None:
        with pytest.raises(ParseError, match="unexpected end"):
            parser.parse("acquire(1, 10")

    def test_trailing_comma(self, parser: EventParser) -> None:
        with pytest.raises(ParseError):
            parser.parse("acquire(1,)")

    def test_two_events_on_one_line(self, parser: EventParser) -> None:
        with pytest.raises(ParseError):
            parser.parse("tick tock")

    def test_arguments_on_literal(self, parser: EventParser) -> None:
        with pytest.raises(ParseError):
            parser.parse("42(1)")

    def test_invalid_character(self, parser: EventParser) -> None:
        with pytest.raises(LexerError):
            parser.parse("acquire(1 & 2)")

    def test_error_reports_token(self, parser: EventParser) -> None:
        with pytest.raises(ParseError, match="Syntax error at ','"):
            parser.parse("f(,)")
