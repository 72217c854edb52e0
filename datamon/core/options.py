"""
Monitor configuration.

Options come from three sources, lowest priority first: the defaults
below, directives at the top of a trace file, and command-line flags.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "off", "0"})


@dataclass(frozen=True)
class MonitorOptions:
    """
    Recognized monitor options.

    Attributes:
        print_steps: Trace every event and the resulting active states.
        print_error_banner: Emphasize violations with a banner in the log.
        stop_on_error: Abort verification on the first violation.
    """

    print_steps: bool = False
    print_error_banner: bool = True
    stop_on_error: bool = False

    @classmethod
    def names(cls) -> frozenset[str]:
        """Return the recognized option names."""
        return frozenset(f.name for f in fields(cls))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> MonitorOptions:
        """
        Build options from a name/value mapping.

        Args:
            mapping: Option names to booleans or boolean-like strings.

        Returns:
            Options with the given values, defaults elsewhere.

        Raises:
            ValueError: On unknown names or non-boolean values.
        """
        return cls().merged(**mapping)

    def merged(self, **overrides: Any) -> MonitorOptions:
        """Return a copy with *overrides* applied (``None`` values are skipped)."""
        unknown = set(overrides) - self.names()
        if unknown:
            raise ValueError(
                f"Unknown monitor options: {sorted(unknown)} "
                f"(recognized: {sorted(self.names())})"
            )
        values = {
            name: _to_bool(name, value)
            for name, value in overrides.items()
            if value is not None
        }
        return replace(self, **values)


def _to_bool(name: str, value: Any) -> bool:
    """Coerce an option value to bool."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ValueError(f"Option '{name}' expects a boolean, got {value!r}")
