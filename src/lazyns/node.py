"""Resolution nodes: the lazily populated namespace tree.

A :class:`ResolutionNode` stands for one package-like level of a registered
namespace. Reading an attribute that the node has not resolved yet asks the
namespace's strategy to classify the name, then either loads a unit or creates
a child node. Whatever comes back is cached on the node for good, so each name
goes through the strategy once.

Per child name the node moves through ``UNRESOLVED -> RESOLVING -> RESOLVED``.
A failed classification or load caches nothing: the name drops back to
``UNRESOLVED`` and the next access asks the strategy again.

Examples
--------
>>> from lazyns import register
>>> ns = register("ns", "/srv/units", target={})[0]  # doctest: +SKIP
>>> ns.foo.bar.Baz  # loads /srv/units/ns/foo/bar/Baz.py  # doctest: +SKIP
"""
# [nav:section public-api]

from __future__ import annotations

import time
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Final, cast

from lazyns.identity import SymbolIdentity, record_identity
from lazyns.registry import NamespaceRegistry, get_registry
from lazyns.strategy import SymbolKind, coerce_kind
from lazyns_common.errors import UnitLoadError
from lazyns_common.logging import get_logger
from lazyns_common.navmap_loader import load_nav_metadata

if TYPE_CHECKING:
    from collections.abc import Mapping

    from lazyns.strategy import ResolutionStrategy

__all__ = [
    "ResolutionNode",
    "SymbolState",
    "is_namespace_node",
]
__navmap__ = load_nav_metadata(__name__, tuple(__all__))

logger = get_logger(__name__)

_READ_ONLY: Final = frozenset(
    {"namespace_root", "short_name", "full_name", "identity", "extras", "registry"}
)


# [nav:anchor SymbolState]
class SymbolState(StrEnum):
    """Resolution state of one child name, seen from its parent node."""

    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED = "resolved"


# [nav:anchor ResolutionNode]
class ResolutionNode:
    """One namespace level that resolves its children on first access.

    Parameters
    ----------
    short_name : str
        Name of this level.
    parent : ResolutionNode | None, optional
        Parent node; ``None`` creates a root whose namespace root is
        ``short_name``. Defaults to None.
    registry : NamespaceRegistry | None, optional
        Registry to look strategies up in. Children always use their parent's
        registry; roots default to :func:`~lazyns.registry.get_registry`.

    Notes
    -----
    Attribute access resolves any name that does not start with an underscore.
    Underscore names are answered from the cache only so interpreter and
    tooling probes never load anything; use :meth:`resolve` for them, and for
    children whose names collide with the node's own API.
    """

    __slots__ = ("_extras", "_identity", "_members", "_registry", "_resolving", "__weakref__")

    _extras: dict[str, object]
    _identity: SymbolIdentity
    _members: dict[str, object]
    _registry: NamespaceRegistry
    _resolving: set[str]

    def __init__(
        self,
        short_name: str,
        *,
        parent: ResolutionNode | None = None,
        registry: NamespaceRegistry | None = None,
    ) -> None:
        if parent is None:
            identity = SymbolIdentity(
                namespace_root=short_name,
                short_name=short_name,
                full_name=short_name,
                kind=SymbolKind.NAMESPACE,
            )
            resolved_registry = registry if registry is not None else get_registry()
        else:
            identity = parent.identity.child(short_name, SymbolKind.NAMESPACE)
            resolved_registry = parent.registry
        object.__setattr__(self, "_identity", identity)
        object.__setattr__(self, "_registry", resolved_registry)
        object.__setattr__(self, "_members", {})
        object.__setattr__(self, "_extras", {})
        object.__setattr__(self, "_resolving", set())

    @property
    def namespace_root(self) -> str:
        """Registered root this node's strategy is bound under."""
        return self._identity.namespace_root

    @property
    def short_name(self) -> str:
        """Name of this level."""
        return self._identity.short_name

    @property
    def full_name(self) -> str:
        """Dotted path from the namespace root."""
        return self._identity.full_name

    @property
    def identity(self) -> SymbolIdentity:
        """Immutable identity record of this node."""
        return self._identity

    @property
    def extras(self) -> dict[str, object]:
        """Strategy-specific data, filled in by ``on_node_created``."""
        return self._extras

    @property
    def registry(self) -> NamespaceRegistry:
        """Registry consulted for this node's strategy."""
        return self._registry

    def resolve(self, name: str) -> object:
        """Return child ``name``, resolving it through the strategy on first access.

        Parameters
        ----------
        name : str
            Child name.

        Returns
        -------
        object
            A child :class:`ResolutionNode` or a loaded unit. Repeated calls
            return the identical object without consulting the strategy.

        Raises
        ------
        ValueError
            If ``name`` is empty.
        UnregisteredNamespaceError
            If the node's namespace root has no bound strategy.
        UnitLoadError
            If ``load_unit`` neither returned nor installed a value.

        Notes
        -----
        Exceptions raised by the strategy or the host loader propagate
        unchanged and leave ``name`` unresolved.
        """
        try:
            return self._members[name]
        except KeyError:
            pass
        if not name:
            message = f"Cannot resolve an empty name under {self.full_name!r}"
            raise ValueError(message)

        strategy = self._registry.lookup_strategy(self.namespace_root)
        symbol = f"{self.full_name}.{name}"
        self._resolving.add(name)
        try:
            kind = coerce_kind(strategy.classify(self, name), symbol=symbol)
            if kind is SymbolKind.UNIT:
                return self._load_unit(strategy, name)
            return self._create_child(strategy, name)
        except Exception as exc:
            # Drop anything the unit installed on this node before failing.
            self._members.pop(name, None)
            logger.debug(
                "Resolution of %s failed",
                symbol,
                extra={
                    "operation": "resolve",
                    "status": "error",
                    "namespace": self.namespace_root,
                    "symbol": symbol,
                    "error_type": type(exc).__name__,
                },
            )
            raise
        finally:
            self._resolving.discard(name)

    def _load_unit(self, strategy: ResolutionStrategy, name: str) -> object:
        identity = self._identity.child(name, SymbolKind.UNIT)
        started = time.monotonic()
        produced = strategy.load_unit(self, name)
        if produced is None:
            # The unit may have installed itself on this node while loading.
            if name not in self._members:
                message = f"Loading {identity.full_name!r} produced no value"
                raise UnitLoadError(message, symbol=identity.full_name)
            value = self._members[name]
        else:
            value = produced
        record_identity(value, identity)
        self._members[name] = value
        logger.debug(
            "Resolved unit %s",
            identity.full_name,
            extra={
                "operation": "resolve_unit",
                "namespace": self.namespace_root,
                "symbol": identity.full_name,
                "duration_ms": round((time.monotonic() - started) * 1000, 3),
            },
        )
        return value

    def _create_child(self, strategy: ResolutionStrategy, name: str) -> ResolutionNode:
        child = ResolutionNode(name, parent=self)
        hook = getattr(strategy, "on_node_created", None)
        if hook is not None:
            hook(self, name, child)
        self._members[name] = child
        logger.debug(
            "Created namespace node %s",
            child.full_name,
            extra={
                "operation": "create_namespace",
                "namespace": self.namespace_root,
                "symbol": child.full_name,
            },
        )
        return child

    def state_of(self, name: str) -> SymbolState:
        """Report the resolution state of child ``name`` without resolving it.

        Returns
        -------
        SymbolState
            Current state.
        """
        if name in self._members:
            return SymbolState.RESOLVED
        if name in self._resolving:
            return SymbolState.RESOLVING
        return SymbolState.UNRESOLVED

    def resolved_members(self) -> Mapping[str, object]:
        """Return a read-only view of everything resolved or assigned so far.

        Returns
        -------
        Mapping[str, object]
            Live view keyed by child name, in resolution order.
        """
        return MappingProxyType(self._members)

    def __getattr__(self, name: str) -> object:
        """Resolve ``name`` on attribute access.

        Raises
        ------
        AttributeError
            For underscore names that are not cached.
        """
        # object.__getattribute__ avoids recursing here while slots are unset.
        members = cast("dict[str, object]", object.__getattribute__(self, "_members"))
        if name in members:
            return members[name]
        if name.startswith("_"):
            message = f"{type(self).__name__} {self.full_name!r} has no attribute {name!r}"
            raise AttributeError(message)
        return self.resolve(name)

    def __setattr__(self, name: str, value: object) -> None:
        """Install ``value`` as child ``name`` without consulting the strategy.

        Raises
        ------
        AttributeError
            If ``name`` is part of the node's identity or internals.
        """
        if name in _READ_ONLY or name in ResolutionNode.__slots__:
            message = f"{name!r} is read-only on namespace node {self.full_name!r}"
            raise AttributeError(message)
        self._members[name] = value

    def __delattr__(self, name: str) -> None:
        """Refuse deletion: resolved members are permanent.

        Raises
        ------
        AttributeError
            Always.
        """
        message = f"Cannot delete {name!r} from namespace node {self.full_name!r}"
        raise AttributeError(message)

    def __contains__(self, name: object) -> bool:
        """Return whether ``name`` is already resolved; never triggers resolution."""
        return name in self._members

    def __dir__(self) -> list[str]:
        """List resolved children; unresolved names are unknown until accessed."""
        return sorted(self._members)

    def __copy__(self) -> ResolutionNode:
        """Return ``self``: a node is its own identity."""
        return self

    def __deepcopy__(self, memo: dict[int, object]) -> ResolutionNode:
        """Return ``self``; nodes are never duplicated."""
        del memo
        return self

    def __repr__(self) -> str:
        """Return a debugging representation."""
        return f"<ResolutionNode {self.full_name!r} resolved={len(self._members)}>"


# [nav:anchor is_namespace_node]
def is_namespace_node(value: object) -> bool:
    """Return whether ``value`` is a resolution node rather than a unit or container.

    Parameters
    ----------
    value : object
        Candidate.

    Returns
    -------
    bool
        ``True`` for :class:`ResolutionNode` instances.
    """
    return isinstance(value, ResolutionNode)
