"""
Command-line interface for the DATAMON runtime verification engine.

Replays a trace file through a monitor class loaded from a module or a
Python file, and reports violations and the verdict.
"""

from __future__ import annotations

import argparse
import importlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Tuple, Type

import datamon
from datamon.core.monitor import Monitor
from datamon.parser.events import EventFactory
from datamon.utils.logger import LogLevel, MonitorLogger
from datamon.utils.trace_reader import TraceReader


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the DATAMON CLI."""
    parser = argparse.ArgumentParser(
        prog="datamon",
        description=(
            "DATAMON: data automata runtime verification - "
            "replay an event trace through a monitor"
        ),
    )

    required = parser.add_argument_group("required arguments")
    required.add_argument(
        "-m",
        "--monitor",
        required=True,
        help="Monitor class as 'package.module:Class' or 'path/to/file.py:Class'",
    )
    required.add_argument(
        "-t",
        "--trace",
        type=Path,
        required=True,
        help="Path to trace file (one event term per line)",
    )

    parser.add_argument(
        "--stop-on-error",
        action="store_true",
        default=None,
        help="Abort on the first violation",
    )
    parser.add_argument(
        "--print-steps",
        action="store_true",
        default=None,
        help="Print every event and the resulting active states",
    )
    parser.add_argument(
        "--no-banner",
        dest="print_error_banner",
        action="store_false",
        default=None,
        help="Report violations on one line instead of a banner",
    )
    parser.add_argument(
        "-o",
        "--output",
        choices=["silent", "normal", "verbose"],
        default="normal",
        help="Output level (default: normal)",
    )
    parser.add_argument(
        "-d",
        "--debug",
        type=int,
        choices=[0, 1, 2, 3],
        default=0,
        help="Debug level 0-3 (default: 0)",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print statistics after verification",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"datamon {datamon.__version__}",
    )

    return parser


def _resolve_log_level(output: str, debug: int) -> LogLevel:
    """Determine the effective log level from output and debug settings."""
    if debug >= 3:
        return LogLevel.DEBUG
    if output == "verbose" or debug >= 1:
        return LogLevel.VERBOSE
    if output == "silent":
        return LogLevel.SILENT
    return LogLevel.NORMAL


def load_monitor_class(target: str) -> Tuple[Type[Monitor], ModuleType]:
    """
    Load a monitor class from ``module:Class`` or ``file.py:Class``.

    Args:
        target: The monitor reference.

    Returns:
        The monitor class and the module defining it.

    Raises:
        ValueError: If the reference is malformed or does not name a
            Monitor subclass.
        FileNotFoundError: If a referenced file does not exist.
    """
    location, sep, class_name = target.rpartition(":")
    if not sep or not location or not class_name:
        raise ValueError(
            f"Monitor must be given as 'module:Class' or 'file.py:Class', got '{target}'"
        )

    if location.endswith(".py"):
        path = Path(location)
        if not path.exists():
            raise FileNotFoundError(f"Monitor file not found: {path}")
        # Private module name; must not shadow an importable module
        spec = importlib.util.spec_from_file_location(
            f"_datamon_monitor_{path.stem}", path,
        )
        if spec is None or spec.loader is None:
            raise ValueError(f"Cannot load monitor file: {path}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[spec.name] = module
        spec.loader.exec_module(module)
    else:
        module = importlib.import_module(location)

    cls = getattr(module, class_name, None)
    if not (isinstance(cls, type) and issubclass(cls, Monitor)):
        raise ValueError(f"'{class_name}' in {location} is not a Monitor subclass")
    return cls, module


def main() -> None:
    """Entry point for the ``datamon`` CLI command."""
    parser = _build_parser()
    args = parser.parse_args()

    try:
        _run(args)
    except SystemExit:
        raise
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)


def _run(args: argparse.Namespace) -> None:
    """Execute the replay pipeline."""
    if not args.trace.exists():
        print(f"Error: Trace file not found: {args.trace}", file=sys.stderr)
        sys.exit(2)

    monitor_class, module = load_monitor_class(args.monitor)

    # Options: defaults < trace directives < command line
    reader = TraceReader(args.trace, factory=EventFactory.from_module(module))
    options = reader.read_options().merged(
        print_steps=args.print_steps,
        print_error_banner=args.print_error_banner,
        stop_on_error=args.stop_on_error,
    )

    log_level = _resolve_log_level(args.output, args.debug)
    logger = MonitorLogger(level=log_level, stream=sys.stdout)

    monitor = monitor_class()
    monitor.configure(options=options, logger=logger)
    logger.info(f"Monitor: {monitor.name}")
    logger.info(f"Trace: {args.trace}")

    result = monitor.run(reader.iter_events())

    # Statistics (skip if verbose already printed them)
    if args.stats and log_level.value < LogLevel.VERBOSE.value:
        print()
        print("=== Statistics ===")
        for key, value in result.statistics.items():
            label = key.replace("_", " ").title()
            print(f"  {label}: {value}")

    # Exit with appropriate code
    if result.satisfied:
        sys.exit(0)
    else:
        sys.exit(1)
