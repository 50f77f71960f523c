"""Process-wide mapping from namespace root to its resolution strategy.

Exactly one strategy is bound per root. Binding a root again replaces the
previous strategy (last write wins); nodes look their strategy up on every
resolution, so the replacement applies to all later resolutions, including
under nodes created earlier. There is no teardown: bindings live until the
process exits.
"""
# [nav:section public-api]

from __future__ import annotations

from dataclasses import dataclass, field

from lazyns.strategy import ResolutionStrategy, ensure_strategy
from lazyns_common.errors import UnregisteredNamespaceError
from lazyns_common.logging import get_logger
from lazyns_common.navmap_loader import load_nav_metadata

__all__ = [
    "NamespaceRegistry",
    "get_registry",
]
__navmap__ = load_nav_metadata(__name__, tuple(__all__))

logger = get_logger(__name__)


@dataclass(slots=True)
# [nav:anchor NamespaceRegistry]
class NamespaceRegistry:
    """Bindings from namespace root names to strategies.

    Single-threaded use only; the registry performs no locking.
    """

    _bindings: dict[str, ResolutionStrategy] = field(default_factory=dict, init=False)

    def register(self, root_name: str, strategy: object) -> None:
        """Bind ``root_name`` to ``strategy``, replacing any previous binding.

        Parameters
        ----------
        root_name : str
            Namespace root name.
        strategy : object
            Object satisfying :class:`~lazyns.strategy.ResolutionStrategy`.

        Raises
        ------
        StrategyContractError
            If ``strategy`` does not satisfy the contract.
        """
        checked = ensure_strategy(strategy)
        previous = self._bindings.get(root_name)
        self._bindings[root_name] = checked
        if previous is not None and previous is not checked:
            logger.warning(
                "Namespace %r re-registered; previous strategy replaced",
                root_name,
                extra={
                    "operation": "register_namespace",
                    "namespace": root_name,
                    "previous_strategy": type(previous).__name__,
                    "strategy": type(checked).__name__,
                },
            )
            return
        logger.info(
            "Namespace %r bound",
            root_name,
            extra={
                "operation": "register_namespace",
                "namespace": root_name,
                "strategy": type(checked).__name__,
            },
        )

    def lookup_strategy(self, root_name: str) -> ResolutionStrategy:
        """Return the strategy bound to ``root_name``.

        Parameters
        ----------
        root_name : str
            Namespace root name.

        Returns
        -------
        ResolutionStrategy
            The bound strategy.

        Raises
        ------
        UnregisteredNamespaceError
            If nothing is bound to ``root_name``.
        """
        try:
            return self._bindings[root_name]
        except KeyError:
            available = self.list_namespaces()
            message = f"Namespace {root_name!r} is not registered. Available: {available}"
            raise UnregisteredNamespaceError(
                message, namespace=root_name, registered=available
            ) from None

    def is_registered(self, root_name: str) -> bool:
        """Return whether ``root_name`` has a bound strategy.

        Returns
        -------
        bool
            ``True`` when :meth:`lookup_strategy` would succeed.
        """
        return root_name in self._bindings

    def list_namespaces(self) -> list[str]:
        """List registered root names.

        Returns
        -------
        list[str]
            Sorted root names.
        """
        return sorted(self._bindings)


_REGISTRY = NamespaceRegistry()


# [nav:anchor get_registry]
def get_registry() -> NamespaceRegistry:
    """Return the process-wide registry used when no registry is passed explicitly.

    Returns
    -------
    NamespaceRegistry
        The shared registry.
    """
    return _REGISTRY
