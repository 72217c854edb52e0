"""
Lexical analyzer for event terms.

Tokenizes event term strings such as ``acquire(1, 10)`` or
``log("boot", 2.5, true)`` into a stream of tokens (names, literals,
delimiters) that can be consumed by the parser.
"""

from __future__ import annotations

import re

import sly


class LexerError(Exception):
    """Exception raised for lexical analysis errors."""
    pass


_ESCAPE = re.compile(r"\\(.)")
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}


class EventLexer(sly.Lexer):
    """
    Lexical analyzer for event terms.

    Converts a term string into a stream of tokens.

    Token Types:
        NAME                - Term names and symbols (dots allowed)
        INT, FLOAT, STRING  - Literals
        TRUE, FALSE, NONE   - Keyword constants
        LPAREN, RPAREN      - Delimiters
        COMMA               - Argument separator
    """

    tokens = {
        NAME,
        INT, FLOAT, STRING,
        TRUE, FALSE, NONE,
        LPAREN, RPAREN, COMMA,
    }

    # Ignored characters
    ignore = " \t"

    # Ignore newlines
    @_(r"\n+")
    def ignore_newline(self, t):
        self.lineno += len(t.value)

    # Ignore comments (# to end of line)
    ignore_comment = r"\#[^\n]*"

    LPAREN = r"\("
    RPAREN = r"\)"
    COMMA = r","

    @_(r'"(?:[^"\\\n]|\\.)*"|\'(?:[^\'\\\n]|\\.)*\'')
    def STRING(self, t):
        t.value = _ESCAPE.sub(
            lambda m: _ESCAPES.get(m.group(1), m.group(1)), t.value[1:-1],
        )
        return t

    # FLOAT must come before INT so that "2.5" is not split
    @_(r"-?(?:\d+\.\d*|\.\d+)(?:[eE][-+]?\d+)?|-?\d+[eE][-+]?\d+")
    def FLOAT(self, t):
        t.value = float(t.value)
        return t

    @_(r"-?\d+")
    def INT(self, t):
        t.value = int(t.value)
        return t

    # Identifiers and keywords
    @_(r"[a-zA-Z_][a-zA-Z0-9_\.]*")
    def NAME(self, t):
        keywords = {
            "true": "TRUE",
            "True": "TRUE",
            "false": "FALSE",
            "False": "FALSE",
            "none": "NONE",
            "None": "NONE",
        }
        t.type = keywords.get(t.value, "NAME")
        return t

    def error(self, t):
        """Handle invalid characters."""
        raise LexerError(
            f"Invalid character '{t.value[0]}' at index {self.index}"
        )
