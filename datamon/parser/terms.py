"""
Event terms: the generic, hashable representation of parsed events.

A term has a name and a tuple of arguments. Arguments are literals
(int, float, str, bool, None) or nested terms. Terms compare by value,
so two independently parsed ``acquire(1, 10)`` terms are equal.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple


@dataclass(frozen=True)
class Term:
    """
    A named event with positional arguments.

    Attributes:
        name: The term name (e.g. "acquire").
        args: Positional arguments.
    """

    name: str
    args: Tuple[Any, ...] = ()

    @property
    def arity(self) -> int:
        return len(self.args)

    def __str__(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}({', '.join(format_value(a) for a in self.args)})"

    def __repr__(self) -> str:
        return str(self)


def format_value(value: Any) -> str:
    """Render a term argument in trace syntax."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "none"
    if isinstance(value, str):
        escaped = (
            value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
        )
        return f'"{escaped}"'
    return str(value)
