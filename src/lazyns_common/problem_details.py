"""RFC 9457 Problem Details helpers with schema validation.

Payloads produced here validate against the schema bundled at
``lazyns_common/schema/problem_details.json`` (JSON Schema 2020-12).

Examples
--------
>>> from lazyns_common.problem_details import build_problem_details, render_problem
>>> problem = build_problem_details(
...     problem_type="https://lazyns.dev/problems/load-failure",
...     title="UnitLoadError",
...     detail="No loadable unit at /srv/units/ns/Baz.py",
...     instance="urn:lazyns:unit:ns.Baz",
...     code="load-failure",
... )
>>> assert "load-failure" in render_problem(problem)
"""
# [nav:section public-api]

from __future__ import annotations

import json
from functools import cache
from importlib import resources
from typing import TYPE_CHECKING, TypedDict, cast

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

from lazyns_common.navmap_loader import load_nav_metadata

if TYPE_CHECKING:
    from collections.abc import Mapping

    from lazyns_common.types import JsonValue

__all__ = [
    "ProblemDetails",
    "ProblemDetailsValidationError",
    "build_problem_details",
    "render_problem",
    "validate_problem_details",
]
__navmap__ = load_nav_metadata(__name__, tuple(__all__))


# [nav:anchor ProblemDetails]
class ProblemDetails(TypedDict, total=False):
    """TypedDict for RFC 9457 Problem Details payloads."""

    type: str
    title: str
    status: int
    detail: str
    instance: str
    code: str
    extensions: dict[str, JsonValue]


# [nav:anchor ProblemDetailsValidationError]
class ProblemDetailsValidationError(Exception):
    """Raised when a Problem Details payload fails schema validation.

    Parameters
    ----------
    message : str
        Human-readable description of the failure.
    validation_errors : list[str] | None, optional
        Individual validator messages. Defaults to None.
    """

    def __init__(self, message: str, validation_errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.validation_errors = validation_errors or []


@cache
def _validator() -> Draft202012Validator:
    """Return a validator for the bundled schema.

    Returns
    -------
    Draft202012Validator
        Validator bound to the Problem Details schema.

    Raises
    ------
    ProblemDetailsValidationError
        If the bundled schema is missing or is not a valid 2020-12 schema.
    """
    try:
        text = (
            resources.files("lazyns_common")
            .joinpath("schema", "problem_details.json")
            .read_text(encoding="utf-8")
        )
        schema = cast("dict[str, object]", json.loads(text))
    except (OSError, json.JSONDecodeError) as exc:
        message = f"Failed to load Problem Details schema: {exc}"
        raise ProblemDetailsValidationError(message) from exc
    try:
        Draft202012Validator.check_schema(schema)
    except SchemaError as exc:
        message = f"Invalid Problem Details schema: {exc.message}"
        raise ProblemDetailsValidationError(message) from exc
    return Draft202012Validator(schema)


# [nav:anchor validate_problem_details]
def validate_problem_details(payload: Mapping[str, JsonValue]) -> None:
    """Validate ``payload`` against the Problem Details schema.

    Parameters
    ----------
    payload : Mapping[str, JsonValue]
        Candidate payload.

    Raises
    ------
    ProblemDetailsValidationError
        If the payload violates the schema. ``validation_errors`` lists every
        violation with its JSON path.
    """
    errors: list[str] = []
    for error in sorted(_validator().iter_errors(payload), key=lambda err: list(err.path)):
        location = ".".join(str(part) for part in error.absolute_path)
        errors.append(f"{error.message} at path: {location}" if location else error.message)
    if errors:
        message = f"Problem Details validation failed: {'; '.join(errors)}"
        raise ProblemDetailsValidationError(message, validation_errors=errors)


# [nav:anchor build_problem_details]
def build_problem_details(  # noqa: PLR0913
    *,
    problem_type: str,
    title: str,
    detail: str,
    instance: str,
    status: int | None = None,
    code: str | None = None,
    extensions: Mapping[str, JsonValue] | None = None,
) -> ProblemDetails:
    """Build and validate an RFC 9457 Problem Details payload.

    Parameters
    ----------
    problem_type : str
        Type URI identifying the problem kind.
    title : str
        Short summary.
    detail : str
        Occurrence-specific explanation.
    instance : str
        URI identifying the occurrence.
    status : int | None, optional
        HTTP status, omitted for library-only errors. Defaults to None.
    code : str | None, optional
        Stable error code. Defaults to None.
    extensions : Mapping[str, JsonValue] | None, optional
        Extra structured fields. Defaults to None.

    Returns
    -------
    ProblemDetails
        Validated payload.
    """
    payload: dict[str, JsonValue] = {
        "type": problem_type,
        "title": title,
        "detail": detail,
        "instance": instance,
    }
    if status is not None:
        payload["status"] = status
    if code is not None:
        payload["code"] = code
    if extensions:
        payload["extensions"] = dict(extensions)
    validate_problem_details(payload)
    return cast("ProblemDetails", payload)


# [nav:anchor render_problem]
def render_problem(problem: ProblemDetails | Mapping[str, object]) -> str:
    """Render ``problem`` as minified JSON without a trailing newline.

    Parameters
    ----------
    problem : ProblemDetails | Mapping[str, object]
        Payload to serialise.

    Returns
    -------
    str
        JSON text; non-ASCII characters are preserved.
    """
    return json.dumps(problem, default=str, ensure_ascii=False)
