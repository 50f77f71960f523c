"""Default filesystem-backed resolution strategies.

Units live in files laid out like the namespace: with base path
``/srv/units`` and root ``ns``, the symbol ``ns.foo.bar.Baz`` is loaded from
``/srv/units/ns/foo/bar/Baz.py``. Each namespace node remembers its relative
directory in ``node.extras["path"]``.

Examples
--------
>>> from lazyns.default_strategy import DefaultStrategy
>>> strategy = DefaultStrategy("/srv/units")
>>> strategy.base_path.as_posix()
'/srv/units'
"""
# [nav:section public-api]

from __future__ import annotations

from pathlib import Path, PurePath
from typing import TYPE_CHECKING

from lazyns.loader import load_unit_module, unit_module_name
from lazyns.node import ResolutionNode
from lazyns.strategy import SymbolKind
from lazyns_common.navmap_loader import load_nav_metadata
from lazyns_common.settings import get_settings

if TYPE_CHECKING:
    from os import PathLike

    from lazyns_common.settings import RuntimeSettings

__all__ = [
    "DefaultStrategy",
    "FilesystemProbeStrategy",
]
__navmap__ = load_nav_metadata(__name__, tuple(__all__))

PATH_KEY = "path"


# [nav:anchor DefaultStrategy]
class DefaultStrategy:
    """Classify by capitalisation and load units from files under ``base_path``.

    Parameters
    ----------
    base_path : str | PathLike[str]
        Directory that contains one sub-directory per namespace root.
    settings : RuntimeSettings | None, optional
        Settings providing ``unit_suffix``, ``module_prefix`` and
        ``register_modules``. Defaults to the process settings, read on use.

    Notes
    -----
    :meth:`classify` treats names starting with an uppercase character as
    units (``"Baz"``, ``"Foo1"``) and everything else as namespaces
    (``"baz"``, ``"_private"``). Subclasses override it for other layouts.
    """

    __slots__ = ("_base_path", "_settings")

    def __init__(
        self,
        base_path: str | PathLike[str],
        *,
        settings: RuntimeSettings | None = None,
    ) -> None:
        self._base_path = Path(base_path)
        self._settings = settings

    @property
    def base_path(self) -> Path:
        """Directory the unit tree is rooted at."""
        return self._base_path

    @property
    def settings(self) -> RuntimeSettings:
        """Settings in effect for this strategy."""
        return self._settings if self._settings is not None else get_settings()

    def classify(self, node: ResolutionNode, name: str) -> SymbolKind:
        """Return :attr:`SymbolKind.UNIT` when ``name`` starts with an uppercase character.

        Returns
        -------
        SymbolKind
            Classification of ``name``.
        """
        del node
        return SymbolKind.UNIT if name[:1].isupper() else SymbolKind.NAMESPACE

    def on_node_created(self, parent: object, name: str, node: ResolutionNode) -> None:
        """Store the node's directory, relative to ``base_path``, in ``node.extras``."""
        parent_path = parent.extras.get(PATH_KEY) if isinstance(parent, ResolutionNode) else None
        if isinstance(parent_path, PurePath):
            node.extras[PATH_KEY] = parent_path / name
        else:
            node.extras[PATH_KEY] = PurePath(name)

    def unit_path(self, node: ResolutionNode, name: str) -> Path:
        """Return the file the unit ``name`` under ``node`` is loaded from.

        Parameters
        ----------
        node : ResolutionNode
            Parent namespace node.
        name : str
            Unit name.

        Returns
        -------
        Path
            ``base_path / <node path> / <name><unit_suffix>``.
        """
        relative = node.extras.get(PATH_KEY)
        if not isinstance(relative, PurePath):
            # Node created without this strategy's hook: fall back to its dotted name.
            relative = PurePath(*node.full_name.split("."))
        return self._base_path / relative / f"{name}{self.settings.unit_suffix}"

    def load_unit(self, node: ResolutionNode, name: str) -> object:
        """Execute the unit file and return the value it defines.

        Returns
        -------
        object
            The value the unit assigned onto ``node``, else the module attribute
            named ``name``, else the module itself.

        Raises
        ------
        UnitLoadError
            If the unit file is missing or cannot be loaded.
        """
        settings = self.settings
        module = load_unit_module(
            self.unit_path(node, name),
            unit_module_name(f"{node.full_name}.{name}", settings=settings),
            register_module=settings.register_modules,
        )
        installed = node.resolved_members()
        if name in installed:
            return installed[name]
        return getattr(module, name, module)

    def __repr__(self) -> str:
        """Return a debugging representation."""
        return f"{type(self).__name__}({self._base_path.as_posix()!r})"


# [nav:anchor FilesystemProbeStrategy]
class FilesystemProbeStrategy(DefaultStrategy):
    """Classify a name as a unit exactly when its unit file exists.

    Lets lowercase unit files and capitalised directories coexist, at the cost
    of one filesystem check per first access.
    """

    __slots__ = ()

    def classify(self, node: ResolutionNode, name: str) -> SymbolKind:
        """Return :attr:`SymbolKind.UNIT` when the unit file for ``name`` exists.

        Returns
        -------
        SymbolKind
            Classification of ``name``.
        """
        return SymbolKind.UNIT if self.unit_path(node, name).is_file() else SymbolKind.NAMESPACE
