"""Error code registry and type URIs for Problem Details.

Codes and URIs are stable once released: downstream tooling matches on them.

Examples
--------
>>> from lazyns_common.errors.codes import ErrorCode, get_type_uri
>>> get_type_uri(ErrorCode.LOAD_FAILURE)
'https://lazyns.dev/problems/load-failure'
"""

# [nav:section public-api]

from __future__ import annotations

from enum import StrEnum
from typing import Final

from lazyns_common.navmap_loader import load_nav_metadata

__all__ = [
    "BASE_TYPE_URI",
    "ErrorCode",
    "get_type_uri",
]
__navmap__ = load_nav_metadata(__name__, tuple(__all__))


# [nav:anchor BASE_TYPE_URI]
BASE_TYPE_URI: Final[str] = "https://lazyns.dev/problems"


# [nav:anchor ErrorCode]
class ErrorCode(StrEnum):
    """Stable error codes for lazyns exceptions.

    Codes are grouped by the stage that raises them:

    - Resolution: ``UNREGISTERED_NAMESPACE``, ``CLASSIFICATION_FAILURE``,
      ``LOAD_FAILURE``
    - Registration: ``STRATEGY_CONTRACT_ERROR``, ``ATTACHMENT_ERROR``
    - Configuration & runtime: ``CONFIGURATION_ERROR``, ``RUNTIME_ERROR``

    Examples
    --------
    >>> code = ErrorCode.UNREGISTERED_NAMESPACE
    >>> assert code == "unregistered-namespace"
    """

    # Resolution
    UNREGISTERED_NAMESPACE = "unregistered-namespace"
    CLASSIFICATION_FAILURE = "classification-failure"
    LOAD_FAILURE = "load-failure"

    # Registration
    STRATEGY_CONTRACT_ERROR = "strategy-contract-error"
    ATTACHMENT_ERROR = "attachment-error"

    # Configuration & runtime
    CONFIGURATION_ERROR = "configuration-error"
    RUNTIME_ERROR = "runtime-error"

    def __str__(self) -> str:
        """Return the code value.

        Returns
        -------
        str
            The kebab-case code (e.g. ``"load-failure"``).
        """
        return self.value


# [nav:anchor get_type_uri]
def get_type_uri(code: ErrorCode) -> str:
    """Return the RFC 9457 type URI for ``code``.

    Parameters
    ----------
    code : ErrorCode
        Error code enum value.

    Returns
    -------
    str
        ``BASE_TYPE_URI`` joined with the code value.
    """
    return f"{BASE_TYPE_URI}/{code.value}"
