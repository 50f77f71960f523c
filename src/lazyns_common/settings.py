"""Runtime settings with typed configuration and fail-fast validation.

Settings are read from ``LAZYNS_*`` environment variables. Invalid values
raise :class:`~lazyns_common.errors.SettingsError` at load time rather than
surfacing later as confusing resolution failures.

Examples
--------
>>> from lazyns_common.settings import load_settings
>>> settings = load_settings(unit_suffix=".py")
>>> settings.module_prefix
'_lazyns_units'
"""

from __future__ import annotations

from functools import cache

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lazyns_common.errors import SettingsError
from lazyns_common.logging import get_logger
from lazyns_common.navmap_loader import load_nav_metadata

__all__ = [
    "RuntimeSettings",
    "clear_settings_cache",
    "get_settings",
    "load_settings",
]
__navmap__ = load_nav_metadata(__name__, tuple(__all__))

logger = get_logger(__name__)

_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"})


class RuntimeSettings(BaseSettings):
    """Process configuration for lazy namespace resolution (``LAZYNS_*``)."""

    model_config = SettingsConfigDict(
        env_prefix="LAZYNS_",
        extra="forbid",
        case_sensitive=False,
    )

    unit_suffix: str = Field(
        default=".py", description="File suffix the default strategy appends to unit names"
    )
    module_prefix: str = Field(
        default="_lazyns_units",
        description="Prefix for the sys.modules name of every loaded unit",
    )
    register_modules: bool = Field(
        default=True, description="Insert loaded units into sys.modules"
    )
    log_level: str = Field(default="WARNING", description="Level used by setup_logging()")
    json_logs: bool = Field(default=False, description="Emit JSON lines from setup_logging()")

    @field_validator("unit_suffix")
    @classmethod
    def _check_suffix(cls, value: str) -> str:
        if not value.startswith(".") or len(value) < 2:  # noqa: PLR2004
            message = f"unit_suffix must look like '.py', got {value!r}"
            raise ValueError(message)
        return value

    @field_validator("module_prefix")
    @classmethod
    def _check_prefix(cls, value: str) -> str:
        if not all(part.isidentifier() for part in value.split(".")):
            message = f"module_prefix must be a dotted identifier, got {value!r}"
            raise ValueError(message)
        return value

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in _LOG_LEVELS:
            message = f"log_level must be one of {sorted(_LOG_LEVELS)}, got {value!r}"
            raise ValueError(message)
        return normalized


def load_settings(**overrides: object) -> RuntimeSettings:
    """Load :class:`RuntimeSettings` with optional overrides.

    Parameters
    ----------
    **overrides : object
        Field values that take precedence over the environment.

    Returns
    -------
    RuntimeSettings
        Validated settings.

    Raises
    ------
    SettingsError
        If any value fails validation.
    """
    try:
        return RuntimeSettings(**overrides)  # type: ignore[arg-type]  # BaseSettings accepts field kwargs
    except ValidationError as exc:
        errors: list[dict[str, object]] = [
            {"field": ".".join(str(part) for part in error["loc"]), "issue": error["msg"]}
            for error in exc.errors()
        ]
        logger.exception(
            "Settings validation failed",
            extra={"operation": "load_settings", "error_type": type(exc).__name__},
        )
        message = f"Configuration validation failed: {exc.error_count()} invalid field(s)"
        raise SettingsError(message, errors=errors, cause=exc) from exc


@cache
def get_settings() -> RuntimeSettings:
    """Return the process-wide settings, loading them on first use.

    Returns
    -------
    RuntimeSettings
        Cached settings instance.
    """
    return load_settings()


def clear_settings_cache() -> None:
    """Forget the cached settings so the next :func:`get_settings` re-reads the environment."""
    get_settings.cache_clear()
