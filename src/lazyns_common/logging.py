"""Structured logging helpers.

Library modules obtain a :class:`LoggerAdapter` through :func:`get_logger`; the
adapter guarantees ``operation`` and ``status`` fields on every record so log
output can be filtered by resolution step. Applications opt into output by
calling :func:`setup_logging`.

Examples
--------
>>> from lazyns_common.logging import get_logger
>>> logger = get_logger(__name__)
>>> logger.info("Namespace bound", extra={"operation": "register", "status": "success"})
"""

# [nav:section public-api]

from __future__ import annotations

import json
import logging
import sys
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any, cast

from lazyns_common.navmap_loader import load_nav_metadata

if TYPE_CHECKING:
    from collections.abc import Mapping, MutableMapping
    from types import TracebackType

    from lazyns_common.types import JsonValue

__all__ = [
    "JsonFormatter",
    "LoggerAdapter",
    "get_logger",
    "setup_logging",
    "with_fields",
]
__navmap__ = load_nav_metadata(__name__, tuple(__all__))

_STRUCTURED_FIELDS = ("operation", "status", "duration_ms", "namespace", "symbol")

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


# [nav:anchor JsonFormatter]
class JsonFormatter(logging.Formatter):
    """Format records as single-line JSON objects.

    The payload always carries ``ts``, ``level``, ``name`` and ``message``;
    structured fields passed through ``extra`` are appended when they are JSON
    friendly.

    Examples
    --------
    >>> import logging
    >>> handler = logging.StreamHandler()
    >>> handler.setFormatter(JsonFormatter())
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format ``record`` as JSON.

        Parameters
        ----------
        record : logging.LogRecord
            Record to render.

        Returns
        -------
        str
            JSON-encoded log entry.
        """
        data: dict[str, JsonValue] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S") + f".{int(record.msecs):03d}Z",
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        for field in _STRUCTURED_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                data[field] = value
        for key, value in record.__dict__.items():
            if (
                key in _RECORD_ATTRIBUTES
                or key in data
                or key.startswith("_")
                or value is None
                or not isinstance(value, (str, int, float, bool, list, dict))
            ):
                continue
            data[key] = value
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


if TYPE_CHECKING:

    class _LoggerAdapterBase:  # pragma: no cover - typing helper
        logger: logging.Logger
        extra: Mapping[str, object] | None

        def __init__(
            self, logger: logging.Logger, extra: Mapping[str, object] | None = None
        ) -> None: ...

        def log(self, level: int, msg: object, *args: object, **kwargs: object) -> None: ...

else:
    _LoggerAdapterBase = logging.LoggerAdapter


# [nav:anchor LoggerAdapter]
class LoggerAdapter(_LoggerAdapterBase):
    """Logger adapter that injects bound fields and default ``operation``/``status``.

    Parameters
    ----------
    logger : logging.Logger
        Base logger instance to wrap.
    extra : Mapping[str, object] | None, optional
        Fields merged into every record. Per-call ``extra`` values win.
    """

    logger: logging.Logger

    def process(
        self, msg: object, kwargs: MutableMapping[str, Any]
    ) -> tuple[object, MutableMapping[str, Any]]:
        """Merge the adapter's bound fields into the call's ``extra``.

        Parameters
        ----------
        msg : object
            Log message.
        kwargs : MutableMapping[str, Any]
            Keyword arguments of the logging call.

        Returns
        -------
        tuple[object, MutableMapping[str, Any]]
            Message and kwargs with ``extra`` populated.
        """
        supplied = kwargs.get("extra")
        extra: dict[str, Any] = dict(supplied) if isinstance(supplied, dict) else {}
        if self.extra:
            for key, value in self.extra.items():
                extra.setdefault(key, value)
        kwargs["extra"] = extra
        return msg, kwargs

    def log(self, level: int, msg: object, *args: object, **kwargs: Any) -> None:
        """Log at ``level`` after filling in ``operation`` and ``status``.

        The standard level helpers (``debug``, ``info``, ``exception``...) all
        route through this method.
        """
        if not self.isEnabledFor(level):
            return
        msg, kwargs = self.process(msg, kwargs)
        extra = cast("dict[str, Any]", kwargs["extra"])
        extra.setdefault("operation", "unknown")
        if "status" not in extra:
            if level >= logging.ERROR:
                extra["status"] = "error"
            elif level >= logging.WARNING:
                extra["status"] = "warning"
            else:
                extra["status"] = "success"
        self.logger.log(level, msg, *args, **kwargs)


# [nav:anchor get_logger]
def get_logger(name: str) -> LoggerAdapter:
    """Return a structured logger adapter for ``name``.

    A ``NullHandler`` is attached when the logger has no handlers so importing
    the library never prints anything on its own.

    Parameters
    ----------
    name : str
        Logger name, typically ``__name__``.

    Returns
    -------
    LoggerAdapter
        Adapter around :func:`logging.getLogger`.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return LoggerAdapter(logger, {})


# [nav:anchor setup_logging]
def setup_logging(level: int | str | None = None, *, json_format: bool | None = None) -> None:
    """Configure the root logger for applications using lazyns.

    Parameters
    ----------
    level : int | str | None, optional
        Threshold such as ``logging.DEBUG`` or ``"DEBUG"``. Defaults to the
        ``LAZYNS_LOG_LEVEL`` setting.
    json_format : bool | None, optional
        Emit JSON lines instead of plain text. Defaults to the
        ``LAZYNS_JSON_LOGS`` setting.
    """
    if level is None or json_format is None:
        # Imported lazily: settings log through this module.
        from lazyns_common.settings import get_settings  # noqa: PLC0415

        settings = get_settings()
        level = settings.log_level if level is None else level
        json_format = settings.json_logs if json_format is None else json_format
    handler = logging.StreamHandler(sys.stdout)
    if json_format:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)s %(name)s [%(operation)s] %(message)s",
                defaults={"operation": "-"},
            )
        )
    logging.basicConfig(level=level, handlers=[handler], force=True)


class _WithFieldsContext(AbstractContextManager[LoggerAdapter]):
    def __init__(
        self, logger: logging.Logger | LoggerAdapter, fields: Mapping[str, object]
    ) -> None:
        self._logger = logger
        self._fields = dict(fields)

    def __enter__(self) -> LoggerAdapter:
        base_logger = (
            self._logger.logger if isinstance(self._logger, LoggerAdapter) else self._logger
        )
        inherited = dict(self._logger.extra or {}) if isinstance(self._logger, LoggerAdapter) else {}
        inherited.update(self._fields)
        return LoggerAdapter(base_logger, inherited)

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        del exc_type, exc_value, exc_tb


# [nav:anchor with_fields]
def with_fields(
    logger: logging.Logger | LoggerAdapter,
    **fields: object,
) -> AbstractContextManager[LoggerAdapter]:
    """Bind structured fields to every record logged inside the block.

    Parameters
    ----------
    logger : logging.Logger | LoggerAdapter
        Logger to wrap; an adapter's existing bound fields are kept.
    **fields : object
        Fields such as ``operation`` or ``namespace``.

    Returns
    -------
    AbstractContextManager[LoggerAdapter]
        Context manager yielding the bound adapter.

    Examples
    --------
    >>> from lazyns_common.logging import get_logger, with_fields
    >>> logger = get_logger(__name__)
    >>> with with_fields(logger, operation="register", namespace="ns") as bound:
    ...     bound.info("Binding namespace")
    """
    return _WithFieldsContext(logger, fields)
