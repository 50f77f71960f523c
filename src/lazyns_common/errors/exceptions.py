"""Typed exception hierarchy with Problem Details support.

All lazyns exceptions inherit from :class:`LazyNsError`, which carries a stable
:class:`~lazyns_common.errors.codes.ErrorCode`, structured context and an RFC
9457 Problem Details rendering. Where a builtin exception family fits, the
error also derives from it (``LookupError``, ``ImportError``, ``TypeError``) so
callers can keep catching the builtin.

Examples
--------
>>> from lazyns_common.errors import ErrorCode, UnitLoadError
>>> try:
...     raise UnitLoadError("No loadable unit", path="/srv/units/ns/Baz.py")
... except UnitLoadError as e:
...     assert e.code == ErrorCode.LOAD_FAILURE
...     details = e.to_problem_details(instance="urn:lazyns:unit:ns.Baz")
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, cast

from lazyns_common.errors.codes import ErrorCode, get_type_uri
from lazyns_common.problem_details import build_problem_details

if TYPE_CHECKING:
    from lazyns_common.problem_details import ProblemDetails
    from lazyns_common.types import JsonValue

__all__ = [
    "AttachmentError",
    "ClassificationError",
    "ConfigurationError",
    "LazyNsError",
    "LazyNsErrorConfig",
    "SettingsError",
    "StrategyContractError",
    "UnitLoadError",
    "UnregisteredNamespaceError",
]


@dataclass(slots=True)
class LazyNsErrorConfig:
    """Configuration options used when instantiating :class:`LazyNsError`."""

    code: ErrorCode = ErrorCode.RUNTIME_ERROR
    cause: Exception | None = None
    context: Mapping[str, object] | None = None


_KNOWN_CONFIG_KEYS = frozenset({"code", "cause", "context"})


def _coerce_error_config(
    config: LazyNsErrorConfig | None,
    keyword_fields: dict[str, object],
) -> LazyNsErrorConfig:
    if config is not None:
        if keyword_fields:
            unexpected = ", ".join(sorted(keyword_fields))
            message = f"LazyNsError received both 'config' and keyword fields: {unexpected}"
            raise TypeError(message)
        return config

    unexpected_keys = set(keyword_fields) - _KNOWN_CONFIG_KEYS
    if unexpected_keys:
        unexpected = ", ".join(sorted(unexpected_keys))
        message = f"LazyNsError got unexpected keyword arguments: {unexpected}"
        raise TypeError(message)

    code = keyword_fields.get("code", ErrorCode.RUNTIME_ERROR)
    cause = keyword_fields.get("cause")
    context = keyword_fields.get("context")
    if not isinstance(code, ErrorCode):
        message = "code must be an instance of ErrorCode"
        raise TypeError(message)
    if cause is not None and not isinstance(cause, Exception):
        message = "cause must be an Exception when provided"
        raise TypeError(message)
    if context is not None and not isinstance(context, Mapping):
        message = "context must be a mapping when provided"
        raise TypeError(message)
    return LazyNsErrorConfig(
        code=code,
        cause=cause,
        context=cast("Mapping[str, object] | None", context),
    )


def _json_safe(value: object) -> JsonValue:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        return {str(key): _json_safe(item) for key, item in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return [_json_safe(item) for item in value]
    return str(value)


class LazyNsError(Exception):
    """Base exception for all lazyns errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    config : LazyNsErrorConfig | None, optional
        Structured configuration (code, cause, context). Cannot be combined
        with keyword fields. Defaults to None.
    **fields : object
        Keyword form of the ``LazyNsErrorConfig`` fields.

    Attributes
    ----------
    message : str
        Human-readable error message.
    code : ErrorCode
        Stable error code.
    context : dict[str, object]
        Structured details about the failure.

    Examples
    --------
    >>> from lazyns_common.errors import ErrorCode, LazyNsError
    >>> error = LazyNsError("Operation failed", code=ErrorCode.RUNTIME_ERROR)
    >>> error.to_problem_details()["code"]
    'runtime-error'
    """

    def __init__(
        self,
        message: str,
        *,
        config: LazyNsErrorConfig | None = None,
        **fields: object,
    ) -> None:
        resolved = _coerce_error_config(config, dict(fields))
        super().__init__(message)
        self.message = message
        self.code = resolved.code
        self.context: dict[str, object] = dict(resolved.context) if resolved.context else {}
        if resolved.cause is not None:
            self.__cause__ = resolved.cause

    def to_problem_details(
        self,
        instance: str | None = None,
        title: str | None = None,
    ) -> ProblemDetails:
        """Convert the error to an RFC 9457 Problem Details payload.

        Parameters
        ----------
        instance : str | None, optional
            URI identifying the occurrence. Defaults to ``urn:lazyns:error``.
        title : str | None, optional
            Short summary. Defaults to the exception class name.

        Returns
        -------
        ProblemDetails
            Validated payload; the error context becomes ``extensions``.
        """
        extensions = cast("dict[str, JsonValue]", _json_safe(self.context)) if self.context else None
        return build_problem_details(
            problem_type=get_type_uri(self.code),
            title=title or self.__class__.__name__,
            detail=self.message,
            instance=instance or "urn:lazyns:error",
            code=self.code.value,
            extensions=extensions,
        )

    def __str__(self) -> str:
        """Return ``ClassName[code]: message``, noting the cause type when chained.

        Returns
        -------
        str
            Formatted error string.
        """
        base = f"{self.__class__.__name__}[{self.code.value}]: {self.message}"
        if self.__cause__:
            base += f" (caused by: {type(self.__cause__).__name__})"
        return base


class UnregisteredNamespaceError(LazyNsError, LookupError):
    """Resolution was attempted under a namespace root with no bound strategy.

    Parameters
    ----------
    message : str
        Human-readable error message.
    namespace : str
        The namespace root that was looked up.
    registered : Sequence[str], optional
        Roots that are currently registered. Defaults to ().

    Examples
    --------
    >>> raise UnregisteredNamespaceError("Namespace 'ns' is not registered", namespace="ns")
    """

    def __init__(
        self,
        message: str,
        *,
        namespace: str,
        registered: Sequence[str] = (),
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.UNREGISTERED_NAMESPACE,
            context={"namespace": namespace, "registered": list(registered)},
        )
        self.namespace = namespace
        self.registered = tuple(registered)


class ClassificationError(LazyNsError):
    """A strategy could not classify a symbol, or returned an invalid kind.

    Strategies may raise this themselves; the resolution core never wraps a
    strategy's own exception in it.

    Parameters
    ----------
    message : str
        Human-readable error message.
    symbol : str | None, optional
        Dotted name of the symbol being classified. Defaults to None.
    cause : Exception | None, optional
        Underlying exception. Defaults to None.
    """

    def __init__(
        self,
        message: str,
        *,
        symbol: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        context = {"symbol": symbol} if symbol is not None else None
        super().__init__(
            message, code=ErrorCode.CLASSIFICATION_FAILURE, cause=cause, context=context
        )
        self.symbol = symbol


class UnitLoadError(LazyNsError, ImportError):
    """A unit could not be located or built, or a load installed nothing.

    Exceptions raised by the unit's own code are not wrapped in this error.

    Parameters
    ----------
    message : str
        Human-readable error message.
    symbol : str | None, optional
        Dotted name of the unit. Defaults to None.
    path : str | None, optional
        Filesystem location that was tried. Defaults to None.
    cause : Exception | None, optional
        Underlying exception. Defaults to None.

    Examples
    --------
    >>> raise UnitLoadError("No loadable unit", path="/srv/units/ns/Baz.py")
    """

    def __init__(
        self,
        message: str,
        *,
        symbol: str | None = None,
        path: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        context: dict[str, object] = {}
        if symbol is not None:
            context["symbol"] = symbol
        if path is not None:
            context["path"] = path
        super().__init__(
            message, code=ErrorCode.LOAD_FAILURE, cause=cause, context=context or None
        )
        self.symbol = symbol
        self.path = path


class AttachmentError(LazyNsError):
    """A root node could not be attached to its target container.

    Parameters
    ----------
    message : str
        Human-readable error message.
    cause : Exception | None, optional
        Underlying exception. Defaults to None.
    context : Mapping[str, object] | None, optional
        Additional context. Defaults to None.
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.ATTACHMENT_ERROR, cause=cause, context=context)


class ConfigurationError(LazyNsError):
    """Error during configuration validation or loading.

    Parameters
    ----------
    message : str
        Human-readable error message.
    cause : Exception | None, optional
        Underlying exception. Defaults to None.
    context : Mapping[str, object] | None, optional
        Additional context. Defaults to None.
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
        *,
        code: ErrorCode = ErrorCode.CONFIGURATION_ERROR,
    ) -> None:
        super().__init__(message, code=code, cause=cause, context=context)

    @classmethod
    def with_details(
        cls,
        *,
        field: str,
        issue: str,
        hint: str | None = None,
    ) -> ConfigurationError:
        """Create an error describing one invalid configuration field.

        Parameters
        ----------
        field : str
            Name of the offending field.
        issue : str
            What is wrong with it.
        hint : str | None, optional
            How to fix it. Defaults to None.

        Returns
        -------
        ConfigurationError
            New instance with the details captured in ``context``.
        """
        details: dict[str, object] = {"field": field, "issue": issue}
        if hint is not None:
            details["hint"] = hint
        message = f"Configuration validation failed for field '{field}': {issue}"
        return cls(message, context=details)


class SettingsError(ConfigurationError):
    """Runtime settings failed validation.

    Parameters
    ----------
    message : str
        Human-readable error message.
    errors : list[dict[str, object]] | None, optional
        Per-field validation errors. Defaults to None.
    cause : Exception | None, optional
        Underlying exception. Defaults to None.
    context : Mapping[str, object] | None, optional
        Additional context. Defaults to None.
    """

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, object]] | None = None,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        merged: dict[str, object] = dict(context or {})
        if errors:
            merged["errors"] = errors
        super().__init__(message, cause=cause, context=merged or None)
        self.errors = list(errors or [])


class StrategyContractError(ConfigurationError, TypeError):
    """A strategy object does not satisfy the resolution contract.

    Parameters
    ----------
    message : str
        Human-readable error message.
    missing : Sequence[str], optional
        Contract members that are absent or not callable. Defaults to ().
    """

    def __init__(self, message: str, *, missing: Sequence[str] = ()) -> None:
        super().__init__(
            message,
            context={"missing": list(missing)},
            code=ErrorCode.STRATEGY_CONTRACT_ERROR,
        )
        self.missing = tuple(missing)
