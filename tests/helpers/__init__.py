"""Shared test helpers for lazyns.

Helpers defined here have no import-time side effects; fixtures that wire them
up live in ``tests/conftest.py``.
"""

from __future__ import annotations

from tests.helpers.immutability import (
    assert_frozen_attribute,
    assert_frozen_attributes,
    assert_read_only_attribute,
)
from tests.helpers.strategies import RecordingStrategy
from tests.helpers.units import write_units

__all__ = [
    "RecordingStrategy",
    "assert_frozen_attribute",
    "assert_frozen_attributes",
    "assert_read_only_attribute",
    "write_units",
]
