"""Testing bootstrap helpers for lazyns.

Imported by ``tests.conftest`` before any test module so the ``src`` layout is
importable even when the project is not installed.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path
from typing import Final

REPO_ROOT: Final[Path] = Path(__file__).resolve().parent.parent
SRC_PATH: Final[Path] = REPO_ROOT / "src"


class _BootstrapState:
    bootstrapped: bool = False


def ensure_src_path() -> None:
    """Add the ``src`` directory to ``sys.path`` exactly once."""
    if _BootstrapState.bootstrapped:
        return
    if str(SRC_PATH) not in sys.path:
        sys.path.insert(0, str(SRC_PATH))
        importlib.invalidate_caches()
    _BootstrapState.bootstrapped = True


# Ensure the src layout is active as soon as the bootstrap module is imported.
ensure_src_path()
