"""
Shared pytest fixtures for the DATAMON test suite.

Provides reusable fixtures for loggers that capture or discard output,
and paths to trace and monitor fixtures used across unit and
integration tests.
"""

from io import StringIO
from pathlib import Path

import pytest

from datamon.utils.logger import LogLevel, MonitorLogger


@pytest.fixture
def output() -> StringIO:
    """In-memory stream capturing logger output."""
    return StringIO()


@pytest.fixture
def logger(output: StringIO) -> MonitorLogger:
    """A NORMAL-level logger writing to the ``output`` stream."""
    return MonitorLogger(level=LogLevel.NORMAL, stream=output)


@pytest.fixture
def silent_logger() -> MonitorLogger:
    """A logger that discards everything."""
    return MonitorLogger(level=LogLevel.SILENT, stream=StringIO())


@pytest.fixture
def tmp_trace_file(tmp_path: Path) -> Path:
    """Path for a temporary trace file."""
    return tmp_path / "events.trace"


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def traces_dir(fixtures_dir: Path) -> Path:
    """Path to the test trace fixtures directory."""
    return fixtures_dir / "traces"


@pytest.fixture
def lock_monitors_file(fixtures_dir: Path) -> Path:
    """Path to the Python file defining the fixture lock monitors."""
    return fixtures_dir / "monitors" / "lock_monitors.py"
