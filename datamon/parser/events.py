"""
Event utilities: parsing event strings and building application events.

A parsed :class:`Term` is generic. An :class:`EventFactory` turns terms
into application events by resolving term names in a namespace (usually
the module that defines the monitor and its event classes)::

    @dataclass(frozen=True)
    class acquire:
        thread: int
        lock: int

    factory = EventFactory({"acquire": acquire})
    factory.parse("acquire(1, 10)")   # acquire(thread=1, lock=10)

Names that cannot be resolved stay terms.
"""

from __future__ import annotations

from dataclasses import is_dataclass
from enum import Enum
from types import ModuleType
from typing import Any, Dict, Mapping, Optional

from datamon.parser.grammar import EventParser
from datamon.parser.terms import Term


_parser = EventParser()
_MISSING = object()


def parse_event(text: str) -> Any:
    """
    Parse an event string into a Term (or a bare literal).

    Args:
        text: The event string, e.g. ``acquire(1, 10)``.

    Returns:
        The parsed event.

    Raises:
        ParseError: If the event is syntactically invalid.
        LexerError: If the event contains invalid characters.
    """
    return _parser.parse(text)


class EventFactory:
    """
    Builds application events from parsed terms.

    Resolution of a term ``name(args...)``:
        - ``name`` is looked up in the namespace; arguments are built
          first, recursively.
        - A dotted name ``Head.attr`` follows public attributes of a
          class in the namespace (enum members, nested event classes).
          Modules are never traversed and a dotted name only resolves
          to a class or a non-callable value.
        - A callable is called with the arguments.
        - A non-callable value is returned as is, provided the term has
          no arguments (singleton events, enum members).
        - Unresolved names produce a Term.

    Attributes:
        namespace: Names available to traces.
    """

    def __init__(self, namespace: Optional[Mapping[str, Any]] = None) -> None:
        self.namespace: Dict[str, Any] = {
            name: value
            for name, value in (namespace or {}).items()
            if not isinstance(value, ModuleType)
        }

    @classmethod
    def from_module(cls, module: ModuleType) -> EventFactory:
        """
        Create a factory resolving names in a module's globals.

        Only event-like names are exposed: constants, classes and
        functions defined in the module itself, and imported dataclasses
        and enums. Imported modules, functions and other classes are left
        out so that a trace line cannot call them.
        """
        return cls({
            name: value
            for name, value in vars(module).items()
            if not name.startswith("_") and _is_event_like(value, module.__name__)
        })

    def parse(self, text: str) -> Any:
        """Parse an event string and build the application event."""
        return self.build(parse_event(text))

    def build(self, value: Any) -> Any:
        """
        Build an application event from a parsed value.

        Raises:
            ValueError: If a non-callable name is given arguments.
        """
        if not isinstance(value, Term):
            return value
        args = tuple(self.build(arg) for arg in value.args)
        target = self._resolve(value.name)
        if target is _MISSING:
            return Term(value.name, args)
        if callable(target):
            return target(*args)
        if args:
            raise ValueError(
                f"'{value.name}' is not callable but was given arguments"
            )
        return target

    def _resolve(self, name: str) -> Any:
        """Look up a possibly dotted name in the namespace."""
        head, *rest = name.split(".")
        target = self.namespace.get(head, _MISSING)
        if not rest or target is _MISSING:
            return target
        if not isinstance(target, type):
            return _MISSING
        for attr in rest:
            if attr.startswith("_") or not isinstance(target, type):
                return _MISSING
            target = getattr(target, attr, _MISSING)
            if target is _MISSING or isinstance(target, ModuleType):
                return _MISSING
        if callable(target) and not isinstance(target, type):
            return _MISSING
        return target


def _is_event_like(value: Any, module_name: str) -> bool:
    if isinstance(value, ModuleType):
        return False
    if isinstance(value, type):
        return (
            value.__module__ == module_name
            or is_dataclass(value)
            or issubclass(value, Enum)
        )
    if callable(value):
        return getattr(value, "__module__", None) == module_name
    return True
