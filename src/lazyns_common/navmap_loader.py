"""Helpers for loading navigation metadata attached to public modules.

Every public module publishes ``__navmap__`` so documentation tooling can list
its exports without importing implementation details. Metadata is derived from
the module's ``__all__`` and may be enriched by a ``_nav.json`` sidecar stored
next to the module.
"""

from __future__ import annotations

import importlib.util
import json
from collections.abc import Generator, Mapping, Sequence
from functools import cache
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, Field, model_validator

from lazyns_common.types import JsonValue

__all__ = [
    "NavMetadataModel",
    "NavModuleMeta",
    "NavSectionModel",
    "clear_navmap_caches",
    "load_nav_metadata",
]


def _collect_unknown(value: object, known: frozenset[str]) -> object:
    if not isinstance(value, Mapping):
        return value
    data = dict(value)
    extras = {key: data.pop(key) for key in list(data) if key not in known}
    data.setdefault("extras", {}).update(extras)
    return data


class NavSectionModel(BaseModel):
    """Section grouping symbols for navigation."""

    model_config = ConfigDict(frozen=True)

    id: str
    symbols: tuple[str, ...]
    title: str | None = None

    @model_validator(mode="after")
    def _dedupe(self) -> NavSectionModel:
        symbols = tuple(dict.fromkeys(self.symbols))
        if symbols == self.symbols:
            return self
        return self.model_copy(update={"symbols": symbols})


class NavModuleMeta(BaseModel):
    """Module-level metadata read from sidecars."""

    model_config = ConfigDict(frozen=True)

    owner: str | None = None
    stability: str | None = None
    since: str | None = None
    tags: tuple[str, ...] = ()
    extras: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_extras(cls, value: object) -> object:
        """Move unknown fields into ``extras``.

        Parameters
        ----------
        value : object
            Raw input value.

        Returns
        -------
        object
            Value with unknown fields relocated.
        """
        return _collect_unknown(value, frozenset({"owner", "stability", "since", "tags", "extras"}))


class NavMetadataModel(BaseModel):
    """Typed navigation metadata for one module.

    The model behaves like a read-only mapping so callers can keep treating
    ``__navmap__`` as a dictionary.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    exports: tuple[str, ...]
    sections: tuple[NavSectionModel, ...]
    module_meta: NavModuleMeta
    symbols: dict[str, dict[str, Any]]
    synopsis: str | None = None
    extras: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_extras(cls, value: object) -> object:
        """Move unknown fields into ``extras``.

        Parameters
        ----------
        value : object
            Raw input value.

        Returns
        -------
        object
            Value with unknown fields relocated.
        """
        known = frozenset(
            {"title", "synopsis", "exports", "sections", "module_meta", "symbols", "extras"}
        )
        return _collect_unknown(value, known)

    def __getitem__(self, key: str) -> JsonValue:
        """Return the flattened metadata value for ``key``.

        Parameters
        ----------
        key : str
            Metadata key.

        Returns
        -------
        JsonValue
            Value after merging ``extras`` into the top level.
        """
        return self.as_mapping()[key]

    def __iter__(self) -> Generator[tuple[str, JsonValue]]:  # type: ignore[override]  # mapping-style iteration
        """Yield flattened key/value pairs.

        Yields
        ------
        tuple[str, JsonValue]
            Metadata entries, extras included.
        """
        yield from self.as_mapping().items()

    def as_mapping(self) -> dict[str, JsonValue]:
        """Return the metadata as a plain dictionary with extras merged in.

        Returns
        -------
        dict[str, JsonValue]
            Flattened metadata.
        """
        data = self.model_dump()
        extras = data.pop("extras", {})
        if isinstance(extras, Mapping):
            data.update(extras)
        return cast("dict[str, JsonValue]", data)


def _candidate_sidecars(package: str) -> list[Path]:
    """Return ordered sidecar candidates for ``package``.

    Parameters
    ----------
    package : str
        Fully qualified module name.

    Returns
    -------
    list[Path]
        ``<module>._nav.json`` first for plain modules, then the package-level
        ``_nav.json``.
    """
    try:
        spec = importlib.util.find_spec(package)
    except (ImportError, ValueError):
        return []
    if spec is None or not isinstance(spec.origin, str):
        return []
    origin = Path(spec.origin)
    candidates: list[Path] = []
    if origin.name != "__init__.py":
        candidates.append(origin.with_name(f"{origin.stem}._nav.json"))
    candidates.append(origin.parent / "_nav.json")
    return candidates


def _load_sidecar_data(package: str) -> dict[str, Any]:
    for candidate in _candidate_sidecars(package):
        if candidate.is_file():
            with candidate.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
            if isinstance(payload, dict):
                return payload
    return {}


def _default_nav_payload(package: str, exports: Sequence[str]) -> dict[str, Any]:
    normalized = list(dict.fromkeys(str(item) for item in exports))
    return {
        "title": package,
        "exports": normalized,
        "sections": [{"id": "public-api", "title": "Public API", "symbols": normalized}],
        "module_meta": {},
        "symbols": {symbol: {} for symbol in normalized},
    }


def _to_nav_metadata(
    package: str, raw: Mapping[str, Any], exports: Sequence[str]
) -> NavMetadataModel:
    """Merge sidecar data over the defaults derived from ``exports``.

    Parameters
    ----------
    package : str
        Module name used as the default title.
    raw : Mapping[str, Any]
        Sidecar payload, possibly empty.
    exports : Sequence[str]
        Names from ``__all__``.

    Returns
    -------
    NavMetadataModel
        Validated metadata.
    """
    base = _default_nav_payload(package, exports)
    merged = {**base, **raw}
    # Sidecars describe a package; a module's exports always come from ``__all__``.
    merged["exports"] = base["exports"]
    symbols = dict(raw.get("symbols", {})) if isinstance(raw.get("symbols"), Mapping) else {}
    for symbol in base["exports"]:
        symbols.setdefault(symbol, {})
    merged["symbols"] = symbols
    if not merged.get("sections"):
        merged["sections"] = base["sections"]
    return NavMetadataModel.model_validate(merged)


@cache
def load_nav_metadata(package: str, exports: tuple[str, ...]) -> NavMetadataModel:
    """Return navigation metadata for ``package``.

    Parameters
    ----------
    package : str
        Fully qualified module name, usually ``__name__``.
    exports : tuple[str, ...]
        Public export names from ``__all__``.

    Returns
    -------
    NavMetadataModel
        Typed metadata that also supports mapping-style access.
    """
    return _to_nav_metadata(package, _load_sidecar_data(package), exports)


def clear_navmap_caches() -> None:
    """Drop cached metadata so sidecar edits are picked up (tests and tooling)."""
    load_nav_metadata.cache_clear()
