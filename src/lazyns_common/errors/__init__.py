"""Exception hierarchy and Problem Details support.

Examples
--------
>>> from lazyns_common.errors import ErrorCode, LazyNsError
>>> try:
...     raise LazyNsError("Operation failed", code=ErrorCode.RUNTIME_ERROR)
... except LazyNsError as e:
...     details = e.to_problem_details(instance="urn:lazyns:ns.foo")
...     assert details["type"] == "https://lazyns.dev/problems/runtime-error"
"""
# [nav:section public-api]

from __future__ import annotations

from lazyns_common.errors.codes import BASE_TYPE_URI, ErrorCode, get_type_uri
from lazyns_common.errors.exceptions import (
    AttachmentError,
    ClassificationError,
    ConfigurationError,
    LazyNsError,
    LazyNsErrorConfig,
    SettingsError,
    StrategyContractError,
    UnitLoadError,
    UnregisteredNamespaceError,
)
from lazyns_common.navmap_loader import load_nav_metadata

__all__ = [
    "BASE_TYPE_URI",
    "AttachmentError",
    "ClassificationError",
    "ConfigurationError",
    "ErrorCode",
    "LazyNsError",
    "LazyNsErrorConfig",
    "SettingsError",
    "StrategyContractError",
    "UnitLoadError",
    "UnregisteredNamespaceError",
    "get_type_uri",
]
__navmap__ = load_nav_metadata(__name__, tuple(__all__))
