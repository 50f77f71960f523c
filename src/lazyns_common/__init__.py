"""Shared infrastructure for lazyns.

Errors, Problem Details payloads, structured logging, runtime settings and
navigation metadata live here so the resolution core in :mod:`lazyns` stays
focused on the namespace tree itself.
"""
# [nav:section public-api]

from __future__ import annotations

# [nav:anchor errors]
# [nav:anchor logging]
# [nav:anchor problem_details]
# [nav:anchor settings]
from lazyns_common import (
    errors,
    logging,
    navmap_loader,
    problem_details,
    settings,
    types,
)
from lazyns_common.navmap_loader import load_nav_metadata

__all__ = [
    "errors",
    "logging",
    "navmap_loader",
    "problem_details",
    "settings",
    "types",
]
__navmap__ = load_nav_metadata(__name__, tuple(__all__))
