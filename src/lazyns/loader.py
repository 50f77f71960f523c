"""Host loader: execute a unit file as a Python module.

Units are plain ``.py`` files addressed by path rather than importable
packages, so they are loaded through :mod:`importlib.util` under a synthetic
module name (``<module_prefix>.<full_name>``). Loading the same name from the
same file returns the module already in :data:`sys.modules`; a different file
replaces it.
"""
# [nav:section public-api]

from __future__ import annotations

import importlib.util
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

from lazyns_common.errors import UnitLoadError
from lazyns_common.logging import get_logger
from lazyns_common.navmap_loader import load_nav_metadata
from lazyns_common.settings import get_settings

if TYPE_CHECKING:
    from os import PathLike
    from types import ModuleType

    from lazyns_common.settings import RuntimeSettings

__all__ = [
    "load_unit_module",
    "unit_module_name",
]
__navmap__ = load_nav_metadata(__name__, tuple(__all__))

logger = get_logger(__name__)


# [nav:anchor unit_module_name]
def unit_module_name(full_name: str, *, settings: RuntimeSettings | None = None) -> str:
    """Return the ``sys.modules`` name used for the unit ``full_name``.

    Parameters
    ----------
    full_name : str
        Dotted unit name such as ``"ns.foo.bar.Baz"``.
    settings : RuntimeSettings | None, optional
        Settings providing ``module_prefix``. Defaults to the process settings.

    Returns
    -------
    str
        Module name, e.g. ``"_lazyns_units.ns.foo.bar.Baz"``.
    """
    active = settings if settings is not None else get_settings()
    return f"{active.module_prefix}.{full_name}"


def _loaded_from(module: ModuleType, location: Path) -> bool:
    origin = getattr(module, "__file__", None)
    if not origin:
        return False
    try:
        return Path(origin).resolve() == location.resolve()
    except OSError:
        return False


# [nav:anchor load_unit_module]
def load_unit_module(
    path: str | PathLike[str],
    module_name: str,
    *,
    register_module: bool = True,
) -> ModuleType:
    """Load the file at ``path`` as module ``module_name``.

    Parameters
    ----------
    path : str | PathLike[str]
        Unit source file.
    module_name : str
        Name to give the module.
    register_module : bool, optional
        Insert the module into :data:`sys.modules` before executing it, which
        also makes repeated loads of the same file return the same module.
        Defaults to True.

    Returns
    -------
    ModuleType
        The executed module.

    Raises
    ------
    UnitLoadError
        If ``path`` is not a file or no import spec can be built for it.

    Notes
    -----
    Exceptions raised while executing the unit propagate unchanged; the
    partially initialised module is removed from :data:`sys.modules` first,
    restoring any module it replaced.
    """
    location = Path(path)
    existing = sys.modules.get(module_name)
    if existing is not None and _loaded_from(existing, location):
        return existing

    if not location.is_file():
        message = f"No loadable unit at {str(location)!r}"
        raise UnitLoadError(message, symbol=module_name, path=str(location))
    spec = importlib.util.spec_from_file_location(module_name, location)
    if spec is None or spec.loader is None:
        message = f"Cannot build an import spec for {str(location)!r}"
        raise UnitLoadError(message, symbol=module_name, path=str(location))

    module = importlib.util.module_from_spec(spec)
    if register_module:
        sys.modules[module_name] = module
    started = time.monotonic()
    try:
        spec.loader.exec_module(module)
    except BaseException:
        if register_module:
            if existing is not None:
                sys.modules[module_name] = existing
            else:
                sys.modules.pop(module_name, None)
        raise
    logger.debug(
        "Executed unit module %s",
        module_name,
        extra={
            "operation": "load_unit_module",
            "symbol": module_name,
            "path": str(location),
            "duration_ms": round((time.monotonic() - started) * 1000, 3),
        },
    )
    return module
