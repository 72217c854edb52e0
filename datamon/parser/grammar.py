"""
Parser for event terms.

Implements the grammar of trace events::

    event     : value
    value     : term | INT | FLOAT | STRING | TRUE | FALSE | NONE
    term      : NAME | NAME ( ) | NAME ( arguments )
    arguments : value | arguments , value
"""

from __future__ import annotations

from typing import Any

import sly

from datamon.parser.lexer import EventLexer
from datamon.parser.terms import Term


class ParseError(Exception):
    """Exception raised for parsing errors."""

    pass


class _SLYParser(sly.Parser):
    """SLY-based parser for event terms."""

    tokens = EventLexer.tokens

    @_("value")
    def event(self, p):
        return p.value

    # --- Values ---

    @_("term")
    def value(self, p):
        return p.term

    @_("INT", "FLOAT", "STRING")
    def value(self, p):
        return p[0]

    @_("TRUE")
    def value(self, p):
        return True

    @_("FALSE")
    def value(self, p):
        return False

    @_("NONE")
    def value(self, p):
        return None

    # --- Terms ---

    @_("NAME")
    def term(self, p):
        return Term(p.NAME)

    @_("NAME LPAREN RPAREN")
    def term(self, p):
        return Term(p.NAME)

    @_("NAME LPAREN arguments RPAREN")
    def term(self, p):
        return Term(p.NAME, tuple(p.arguments))

    @_("value")
    def arguments(self, p):
        return [p.value]

    @_("arguments COMMA value")
    def arguments(self, p):
        return p.arguments + [p.value]

    def error(self, token):
        if token:
            raise ParseError(
                f"Syntax error at '{token.value}' " f"(type: {token.type}, index: {token.index})"
            )
        raise ParseError("Syntax error: unexpected end of event")


class EventParser:
    """
    Parser for event terms.

    Wraps the SLY-based parser with a clean public interface.
    Converts term strings into Term values or literals.
    """

    def __init__(self) -> None:
        self._lexer = EventLexer()
        self._parser = _SLYParser()

    def parse(self, text: str) -> Any:
        """
        Parse an event string.

        Args:
            text: The event string to parse.

        Returns:
            A Term, or a literal for bare literal events (``42``).

        Raises:
            ParseError: If the text is syntactically invalid or empty.
        """
        text = text.strip()
        if not text:
            raise ParseError("Syntax error: empty event")

        return self._parser.parse(self._lexer.tokenize(text))
