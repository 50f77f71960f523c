"""Lazy, on-demand resolution of hierarchical namespaces.

Register a namespace root with a strategy and every nested symbol below it
(``ns.foo.bar.Baz``) is classified and loaded the first time it is accessed,
then cached for the life of the process.

Examples
--------
>>> import lazyns
>>> (ns,) = lazyns.register("ns", "/srv/units", target=lazyns.EXPORTS)  # doctest: +SKIP
>>> lazyns.ns.foo.bar.Baz  # loads /srv/units/ns/foo/bar/Baz.py  # doctest: +SKIP
"""
# [nav:section public-api]

from __future__ import annotations

from lazyns.default_strategy import DefaultStrategy, FilesystemProbeStrategy
from lazyns.identity import SymbolIdentity, identity_of, record_identity
from lazyns.loader import load_unit_module, unit_module_name
from lazyns.node import ResolutionNode, SymbolState, is_namespace_node
from lazyns.registration import EXPORTS, register
from lazyns.registry import NamespaceRegistry, get_registry
from lazyns.strategy import (
    CallableStrategy,
    NodeCreationHook,
    ResolutionStrategy,
    SymbolKind,
    coerce_kind,
    ensure_strategy,
)
from lazyns_common.navmap_loader import load_nav_metadata

__all__ = [
    "EXPORTS",
    "CallableStrategy",
    "DefaultStrategy",
    "FilesystemProbeStrategy",
    "NamespaceRegistry",
    "NodeCreationHook",
    "ResolutionNode",
    "ResolutionStrategy",
    "SymbolIdentity",
    "SymbolKind",
    "SymbolState",
    "coerce_kind",
    "ensure_strategy",
    "get_registry",
    "identity_of",
    "is_namespace_node",
    "load_unit_module",
    "record_identity",
    "register",
    "unit_module_name",
]
__navmap__ = load_nav_metadata(__name__, tuple(__all__))
