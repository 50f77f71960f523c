"""Shared pytest fixtures for the lazyns test-suite.

This module provides reusable fixtures for:
- Private namespace registries and recording strategies
- On-disk unit trees with isolated ``sys.modules`` prefixes
- Cleanup of roots attached to ``builtins`` and to the ``lazyns`` package
- Settings and navigation-metadata cache resets
- Structured log capture
"""

from __future__ import annotations

import builtins
import itertools
import logging
import sys
from typing import TYPE_CHECKING, ParamSpec, TypeVar, cast

import pytest

import tests.bootstrap  # noqa: F401
from lazyns.registry import NamespaceRegistry
from lazyns_common.navmap_loader import clear_navmap_caches
from lazyns_common.settings import RuntimeSettings, clear_settings_cache, load_settings
from tests.helpers.strategies import RecordingStrategy
from tests.helpers.units import write_units

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from _pytest.logging import LogCaptureFixture

P = ParamSpec("P")
R = TypeVar("R")

if TYPE_CHECKING:  # pragma: no cover - typing support only

    def fixture(*args: object, **kwargs: object) -> Callable[[Callable[P, R]], Callable[P, R]]:
        """Create a pytest fixture."""
        ...

else:
    fixture = pytest.fixture

_PREFIX_COUNTER = itertools.count()

UNIT_SOURCES: dict[str, str] = {
    "ns/foo/bar/Baz.py": """
        class Baz:
            answer = 42
    """,
    "ns/Settings.py": """
        TIMEOUT = 30
    """,
    "ns/tools/Helper.py": """
        def Helper():
            return "helped"
    """,
}


@fixture(autouse=True)
def _reset_caches() -> Iterator[None]:
    """Drop cached settings and navigation metadata around every test."""
    clear_settings_cache()
    clear_navmap_caches()
    yield
    clear_settings_cache()
    clear_navmap_caches()


@fixture
def registry() -> NamespaceRegistry:
    """Provide a registry isolated from the process-wide one.

    Returns
    -------
    NamespaceRegistry
        Empty registry.
    """
    return NamespaceRegistry()


@fixture
def recording_strategy() -> RecordingStrategy:
    """Provide a strategy that records every callback.

    Returns
    -------
    RecordingStrategy
        Fresh recorder.
    """
    return RecordingStrategy()


@fixture
def unit_settings() -> Iterator[RuntimeSettings]:
    """Settings with a module prefix unique to the test.

    Units loaded under the prefix are removed from ``sys.modules`` afterwards.

    Yields
    ------
    RuntimeSettings
        Settings for filesystem-backed strategies.
    """
    prefix = f"_lazyns_test_units_{next(_PREFIX_COUNTER)}"
    yield load_settings(module_prefix=prefix)
    for name in [module for module in sys.modules if module.startswith(f"{prefix}.")]:
        sys.modules.pop(name, None)


@fixture
def unit_tree(tmp_path: Path) -> Path:
    """Write the standard ``ns`` unit tree under a temporary directory.

    Returns
    -------
    Path
        Base path containing ``ns/foo/bar/Baz.py`` and friends.
    """
    return write_units(tmp_path / "units", UNIT_SOURCES)


@fixture
def builtins_cleanup() -> Iterator[list[str]]:
    """Collect names attached to :mod:`builtins` and remove them after the test.

    Yields
    ------
    list[str]
        Append every root name the test attaches globally.
    """
    names: list[str] = []
    yield names
    for name in names:
        if hasattr(builtins, name):
            delattr(builtins, name)


@fixture
def exports_cleanup() -> Iterator[list[str]]:
    """Collect names attached to the ``lazyns`` package and remove them afterwards.

    Yields
    ------
    list[str]
        Append every attribute name the test adds to ``lazyns``.
    """
    import lazyns  # noqa: PLC0415

    names: list[str] = []
    yield names
    for name in names:
        vars(lazyns).pop(name, None)


@fixture
def lazyns_logs(caplog: LogCaptureFixture) -> LogCaptureFixture:
    """Capture DEBUG and above from the ``lazyns`` loggers.

    Returns
    -------
    LogCaptureFixture
        The configured ``caplog``.
    """
    caplog.set_level(logging.DEBUG, logger="lazyns")
    return caplog


@fixture
def caplog_records(caplog: LogCaptureFixture) -> Callable[[], dict[str, list[logging.LogRecord]]]:
    """Group captured records by their ``operation`` field.

    Returns
    -------
    Callable[[], dict[str, list[logging.LogRecord]]]
        Collector to call after the code under test has run.
    """

    def _collect_records() -> dict[str, list[logging.LogRecord]]:
        records_by_op: dict[str, list[logging.LogRecord]] = {}
        for record in caplog.records:
            record_dict = cast("dict[str, object]", record.__dict__)
            op_obj = record_dict.get("operation", "unknown")
            op = op_obj if isinstance(op_obj, str) else "unknown"
            records_by_op.setdefault(op, []).append(record)
        return records_by_op

    return _collect_records


@fixture
def structured_log_asserter() -> Callable[[logging.LogRecord, set[str]], None]:
    """Provide a helper asserting structured log fields.

    Returns
    -------
    Callable[[logging.LogRecord, set[str]], None]
        Function raising ``AssertionError`` when a record lacks a field.
    """

    def assert_log_has_fields(record: logging.LogRecord, required_fields: set[str]) -> None:
        record_dict = cast("dict[str, object]", record.__dict__)
        missing = required_fields - set(record_dict)
        if missing:
            msg = f"Missing fields in log record: {missing}"
            raise AssertionError(msg)

    return assert_log_has_fields
