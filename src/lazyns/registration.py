"""Registration entry point: bind namespace roots and attach them to a target.

Examples
--------
>>> from lazyns import register
>>> (ns,) = register("ns", "/srv/units")  # doctest: +SKIP
>>> ns.foo.bar.Baz  # doctest: +SKIP
"""
# [nav:section public-api]

from __future__ import annotations

import builtins
import importlib
import os
from collections.abc import MutableMapping
from types import SimpleNamespace
from typing import TYPE_CHECKING, Final

from lazyns.default_strategy import DefaultStrategy
from lazyns.node import ResolutionNode
from lazyns.registry import get_registry
from lazyns.strategy import ensure_strategy
from lazyns_common.errors import AttachmentError
from lazyns_common.logging import get_logger, with_fields
from lazyns_common.navmap_loader import load_nav_metadata

if TYPE_CHECKING:
    from collections.abc import Iterable

    from lazyns.registry import NamespaceRegistry

__all__ = [
    "EXPORTS",
    "register",
]
__navmap__ = load_nav_metadata(__name__, tuple(__all__))

logger = get_logger(__name__)

# [nav:anchor EXPORTS]
EXPORTS: Final = "."
"""Target meaning the ``lazyns`` package module itself."""


def _normalize_names(namespaces: str | Iterable[str]) -> list[str]:
    names = [namespaces] if isinstance(namespaces, str) else list(namespaces)
    for name in names:
        if not isinstance(name, str) or not name:
            message = f"Namespace names must be non-empty strings, got {name!r}"
            raise ValueError(message)
    return names


def _coerce_strategy(strategy: object) -> object:
    if isinstance(strategy, (str, os.PathLike)):
        return DefaultStrategy(strategy)
    return strategy


def _resolve_target(target: object) -> object:
    if target is None:
        return builtins
    if not isinstance(target, str):
        return target
    package = importlib.import_module("lazyns")
    if target == EXPORTS:
        return package
    existing = vars(package).get(target)
    if existing is None:
        slot = SimpleNamespace()
        setattr(package, target, slot)
        return slot
    if not isinstance(existing, SimpleNamespace):
        message = f"Export slot {target!r} collides with lazyns.{target}"
        raise AttachmentError(message, context={"target": target})
    return existing


def _check_exports(container: object, names: list[str]) -> None:
    package = importlib.import_module("lazyns")
    if container is not package:
        return
    for name in names:
        existing = vars(package).get(name)
        if existing is not None and not isinstance(existing, ResolutionNode):
            message = f"Namespace {name!r} collides with lazyns.{name}"
            raise AttachmentError(message, context={"namespace": name, "target": EXPORTS})


def _attach(target: object, name: str, root: ResolutionNode) -> None:
    try:
        if isinstance(target, MutableMapping):
            target[name] = root
        else:
            setattr(target, name, root)
    except (AttributeError, TypeError) as exc:
        message = f"Cannot attach namespace {name!r} to {type(target).__name__}"
        raise AttachmentError(
            message, cause=exc, context={"namespace": name, "target": type(target).__name__}
        ) from exc


# [nav:anchor register]
def register(
    namespaces: str | Iterable[str],
    strategy: object,
    target: object = None,
    *,
    registry: NamespaceRegistry | None = None,
) -> list[ResolutionNode]:
    """Bind each namespace to ``strategy`` and attach its root node to ``target``.

    Parameters
    ----------
    namespaces : str | Iterable[str]
        One root name or an ordered collection of them.
    strategy : object
        Resolution strategy, or a directory (``str`` / ``os.PathLike``) used as
        the base path of a :class:`~lazyns.default_strategy.DefaultStrategy`.
    target : object, optional
        Where roots are attached. ``None`` (default) attaches to
        :mod:`builtins` so the names are visible everywhere; a string names a
        :class:`types.SimpleNamespace` slot on the ``lazyns`` package
        (:data:`EXPORTS` means the package itself); any other object is used
        directly, mutable mappings via item assignment.
    registry : NamespaceRegistry | None, optional
        Registry to bind in. Defaults to the process-wide registry.

    Returns
    -------
    list[ResolutionNode]
        Root nodes, in the order the names were given.

    Raises
    ------
    ValueError
        If a namespace name is empty or not a string.
    StrategyContractError
        If ``strategy`` does not satisfy the contract.
    AttachmentError
        If the target refuses the root, a string slot collides with an
        existing ``lazyns`` attribute, or a name attached to :data:`EXPORTS`
        would replace a ``lazyns`` attribute that is not a namespace root.

    Notes
    -----
    Registering a name again rebinds its strategy and replaces the attached
    root; nodes handed out earlier resolve through the new strategy. The
    strategy is bound only after its ``on_node_created`` hook has accepted the
    new root, so a failing hook leaves any previous binding in place.
    """
    names = _normalize_names(namespaces)
    active_registry = registry if registry is not None else get_registry()
    resolved_strategy = ensure_strategy(_coerce_strategy(strategy))
    container = _resolve_target(target)
    _check_exports(container, names)

    roots: list[ResolutionNode] = []
    for name in names:
        with with_fields(logger, operation="register", namespace=name) as log:
            root = ResolutionNode(name, registry=active_registry)
            hook = getattr(resolved_strategy, "on_node_created", None)
            if hook is not None:
                hook(container, name, root)
            active_registry.register(name, resolved_strategy)
            _attach(container, name, root)
            log.info(
                "Attached namespace %r to %s",
                name,
                type(container).__name__,
                extra={"status": "success"},
            )
        roots.append(root)
    return roots
