"""
Tests for the event term lexical analyzer.

Tests cover names (including dotted names), numeric and string literals,
keyword constants, delimiters, whitespace handling, comments and error
handling.
"""

import pytest

from datamon.parser.lexer import EventLexer, LexerError


@pytest.fixture
def lexer() -> EventLexer:
    """Return a fresh lexer instance."""
    return EventLexer()


def _tokens(lexer: EventLexer, text: str) -> list[tuple[str, object]]:
    """Helper: return list of (type, value) pairs from tokenizing text."""
    return [(tok.type, tok.value) for tok in lexer.tokenize(text)]


def _types(lexer: EventLexer, text: str) -> list[str]:
    """Helper: return list of token types from tokenizing text."""
    return [tok.type for tok in lexer.tokenize(text)]


class TestNames:
    """Test name tokenization."""

    def test_simple_name(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, "acquire") == [("NAME", "acquire")]

    def test_underscore_and_digits(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, "send_msg2") == [("NAME", "send_msg2")]

    def test_dotted_name(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, "Command.START") == [("NAME", "Command.START")]

    def test_leading_underscore(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, "_internal") == [("NAME", "_internal")]


class TestNumbers:
    """Test integer and float literals."""

    def test_int(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, "42") == [("INT", 42)]

    def test_negative_int(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, "-7") == [("INT", -7)]

    def test_float(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, "2.5") == [("FLOAT", 2.5)]

    def test_negative_float(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, "-0.25") == [("FLOAT", -0.25)]

    def test_exponent(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, "1e3") == [("FLOAT", 1000.0)]

    def test_leading_dot(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, ".5") == [("FLOAT", 0.5)]


class TestStrings:
    """Test string literals."""

    def test_double_quoted(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, '"hello"') == [("STRING", "hello")]

    def test_single_quoted(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, "'hello'") == [("STRING", "hello")]

    def test_empty(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, '""') == [("STRING", "")]

    def test_spaces_preserved(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, '"a b  c"') == [("STRING", "a b  c")]

    def test_escaped_quote(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, r'"say \"hi\""') == [("STRING", 'say "hi"')]

    def test_newline_escape(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, r'"a\nb"') == [("STRING", "a\nb")]

    def test_tab_escape(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, r'"a\tb"') == [("STRING", "a\tb")]

    def test_escaped_backslash(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, r'"a\\b"') == [("STRING", "a\\b")]

    def test_hash_inside_string(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, '"#1"') == [("STRING", "#1")]


class TestKeywords:
    """Test keyword constants."""

    @pytest.mark.parametrize("text", ["true", "True"])
    def test_true(self, lexer: EventLexer, text: str) -> None:
        assert _types(lexer, text) == ["TRUE"]

    @pytest.mark.parametrize("text", ["false", "False"])
    def test_false(self, lexer: EventLexer, text: str) -> None:
        assert _types(lexer, text) == ["FALSE"]

    @pytest.mark.parametrize("text", ["none", "None"])
    def test_none(self, lexer: EventLexer, text: str) -> None:
        assert _types(lexer, text) == ["NONE"]

    def test_keyword_prefix_is_name(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, "trueish") == [("NAME", "trueish")]


class TestDelimiters:
    """Test parentheses and commas."""

    def test_term(self, lexer: EventLexer) -> None:
        assert _types(lexer, "acquire(1, 10)") == [
            "NAME", "LPAREN", "INT", "COMMA", "INT", "RPAREN",
        ]

    def test_nested(self, lexer: EventLexer) -> None:
        assert _types(lexer, "f(g(x))") == [
            "NAME", "LPAREN", "NAME", "LPAREN", "NAME", "RPAREN", "RPAREN",
        ]

    def test_empty_arguments(self, lexer: EventLexer) -> None:
        assert _types(lexer, "tick()") == ["NAME", "LPAREN", "RPAREN"]

    def test_negative_argument(self, lexer: EventLexer) -> None:
        assert _tokens(lexer, "move(-1)") == [
            ("NAME", "move"), ("LPAREN", "("), ("INT", -1), ("RPAREN", ")"),
        ]


class TestWhitespaceAndComments:
    """Test ignored input."""

    def test_extra_whitespace(self, lexer: EventLexer) -> None:
        assert _types(lexer, "  acquire (\t1 ,10 )  ") == [
            "NAME", "LPAREN", "INT", "COMMA", "INT", "RPAREN",
        ]

    def test_newlines(self, lexer: EventLexer) -> None:
        assert _types(lexer, "f(\n1,\n2)") == [
            "NAME", "LPAREN", "INT", "COMMA", "INT", "RPAREN",
        ]

    def test_trailing_comment(self, lexer: EventLexer) -> None:
        assert _types(lexer, "tick  # heartbeat") == ["NAME"]

    def test_comment_only(self, lexer: EventLexer) -> None:
        assert _types(lexer, "# nothing here") == []

    def test_empty_input(self, lexer: EventLexer) -> None:
        assert _types(lexer, "") == []


class TestErrors:
    """Test invalid characters."""

    @pytest.mark.parametrize("text", ["@", "acquire(1; 2)", "a + b", "[1]"])
    def test_invalid_character(self, lexer: EventLexer, text: str) -> None:
        with pytest.raises(LexerError, match="Invalid character"):
            list(lexer.tokenize(text))

    def test_unterminated_string(self, lexer: EventLexer) -> None:
        with pytest.raises(LexerError):
            list(lexer.tokenize('"open'))
