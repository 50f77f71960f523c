"""Strategy contract that drives lazy namespace resolution.

A strategy decides, for every unresolved name under a namespace, whether the
name is a loadable *unit* or a further *namespace*, and knows how to load
units. The resolution core calls nothing else on it.

Contract
--------
``classify(node, name)``
    Must be a pure function of currently visible state. For a given
    ``(node, name)`` it is called once per successful resolution.
``load_unit(node, name)``
    Loads the unit and either returns it or assigns it onto ``node`` and
    returns ``None``. Loading the same unit twice must be safe.
``on_node_created(parent, name, node)`` (optional)
    Runs after a namespace node is created and before it is used; typically
    stores derived data in ``node.extras``.
"""
# [nav:section public-api]

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from lazyns_common.errors import ClassificationError, StrategyContractError
from lazyns_common.navmap_loader import load_nav_metadata

if TYPE_CHECKING:
    from collections.abc import Callable

    from lazyns.node import ResolutionNode

__all__ = [
    "CallableStrategy",
    "NodeCreationHook",
    "ResolutionStrategy",
    "SymbolKind",
    "coerce_kind",
    "ensure_strategy",
]
__navmap__ = load_nav_metadata(__name__, tuple(__all__))


# [nav:anchor SymbolKind]
class SymbolKind(StrEnum):
    """Outcome of classifying a name."""

    UNIT = "unit"
    NAMESPACE = "namespace"


@runtime_checkable
# [nav:anchor ResolutionStrategy]
class ResolutionStrategy(Protocol):
    """Policy object bound to one namespace root."""

    def classify(self, node: ResolutionNode, name: str) -> SymbolKind:
        """Return whether ``name`` under ``node`` is a unit or a namespace."""
        ...

    def load_unit(self, node: ResolutionNode, name: str) -> object:
        """Load the unit ``name`` under ``node``."""
        ...


@runtime_checkable
# [nav:anchor NodeCreationHook]
class NodeCreationHook(Protocol):
    """Optional strategy capability invoked for every new namespace node.

    ``parent`` is the parent node, or the attachment target for a root.
    """

    def on_node_created(self, parent: object, name: str, node: ResolutionNode) -> None:
        """Prepare ``node`` before it is used."""
        ...


@dataclass(frozen=True, slots=True)
# [nav:anchor CallableStrategy]
class CallableStrategy:
    """Strategy assembled from plain callables.

    ``classifier`` may return a :class:`SymbolKind`, its string value, or a
    ``bool`` meaning "is a unit".

    Examples
    --------
    >>> strategy = CallableStrategy(
    ...     classifier=lambda node, name: name.endswith("Model"),
    ...     loader=lambda node, name: object(),
    ... )
    """

    classifier: Callable[[ResolutionNode, str], SymbolKind | bool | str]
    loader: Callable[[ResolutionNode, str], object]
    node_hook: Callable[[object, str, ResolutionNode], None] | None = None

    def classify(self, node: ResolutionNode, name: str) -> SymbolKind:
        """Delegate to ``classifier``.

        Returns
        -------
        SymbolKind
            Normalised classification.
        """
        return coerce_kind(self.classifier(node, name), symbol=f"{node.full_name}.{name}")

    def load_unit(self, node: ResolutionNode, name: str) -> object:
        """Delegate to ``loader``.

        Returns
        -------
        object
            Whatever ``loader`` returns.
        """
        return self.loader(node, name)

    def on_node_created(self, parent: object, name: str, node: ResolutionNode) -> None:
        """Delegate to ``node_hook`` when one was supplied."""
        if self.node_hook is not None:
            self.node_hook(parent, name, node)


# [nav:anchor coerce_kind]
def coerce_kind(value: object, *, symbol: str) -> SymbolKind:
    """Normalise a classification result.

    ``bool`` results follow the "is this a unit?" convention, so ``True`` maps
    to :attr:`SymbolKind.UNIT`.

    Parameters
    ----------
    value : object
        Raw value returned by ``classify``.
    symbol : str
        Dotted name being classified, used in the error message.

    Returns
    -------
    SymbolKind
        The normalised kind.

    Raises
    ------
    ClassificationError
        If ``value`` is neither a :class:`SymbolKind`, one of its string
        values, nor a ``bool``.
    """
    if isinstance(value, SymbolKind):
        return value
    if isinstance(value, bool):
        return SymbolKind.UNIT if value else SymbolKind.NAMESPACE
    if isinstance(value, str):
        try:
            return SymbolKind(value)
        except ValueError as exc:
            message = f"Invalid classification {value!r} for {symbol!r}"
            raise ClassificationError(message, symbol=symbol, cause=exc) from exc
    message = f"Invalid classification {value!r} for {symbol!r}"
    raise ClassificationError(message, symbol=symbol)


# [nav:anchor ensure_strategy]
def ensure_strategy(candidate: object) -> ResolutionStrategy:
    """Check that ``candidate`` satisfies the strategy contract.

    Parameters
    ----------
    candidate : object
        Object supplied by the caller.

    Returns
    -------
    ResolutionStrategy
        ``candidate`` itself, narrowed.

    Raises
    ------
    StrategyContractError
        If ``classify`` or ``load_unit`` is missing or not callable, or
        ``on_node_created`` is present but not callable.
    """
    missing = [
        member
        for member in ("classify", "load_unit")
        if not callable(getattr(candidate, member, None))
    ]
    hook = getattr(candidate, "on_node_created", None)
    if hook is not None and not callable(hook):
        missing.append("on_node_created")
    if missing:
        message = (
            f"{type(candidate).__name__} is not a resolution strategy; "
            f"missing or non-callable: {', '.join(missing)}"
        )
        raise StrategyContractError(message, missing=missing)
    return candidate  # type: ignore[return-value]  # structurally checked above
