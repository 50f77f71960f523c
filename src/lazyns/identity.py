"""Identity records for resolved symbols.

Loaded units are arbitrary objects (classes, modules, functions, constants),
so their dotted names are kept in a companion record keyed by object identity
rather than written onto the objects themselves. Resolution nodes carry their
identity directly.
"""
# [nav:section public-api]

from __future__ import annotations

from dataclasses import dataclass

from lazyns.strategy import SymbolKind
from lazyns_common.navmap_loader import load_nav_metadata

__all__ = [
    "SymbolIdentity",
    "identity_of",
    "record_identity",
]
__navmap__ = load_nav_metadata(__name__, tuple(__all__))


@dataclass(frozen=True, slots=True)
# [nav:anchor SymbolIdentity]
class SymbolIdentity:
    """Where a symbol lives in its namespace tree.

    Attributes
    ----------
    namespace_root : str
        Registered root the symbol belongs to.
    short_name : str
        Name at its own level (``"Baz"``).
    full_name : str
        Dotted path from the root (``"ns.foo.bar.Baz"``).
    kind : SymbolKind
        Whether the symbol is a namespace node or a loaded unit.
    """

    namespace_root: str
    short_name: str
    full_name: str
    kind: SymbolKind

    def child(self, name: str, kind: SymbolKind) -> SymbolIdentity:
        """Return the identity of ``name`` one level below this symbol.

        Parameters
        ----------
        name : str
            Child short name.
        kind : SymbolKind
            Kind of the child.

        Returns
        -------
        SymbolIdentity
            Identity sharing this symbol's namespace root.
        """
        return SymbolIdentity(
            namespace_root=self.namespace_root,
            short_name=name,
            full_name=f"{self.full_name}.{name}",
            kind=kind,
        )


# id(value) -> (value, identity). Holding ``value`` keeps its id from being reused.
_RECORDS: dict[int, tuple[object, SymbolIdentity]] = {}


# [nav:anchor record_identity]
def record_identity(value: object, identity: SymbolIdentity) -> None:
    """Associate ``identity`` with ``value``; a later record for the same object wins.

    Parameters
    ----------
    value : object
        Loaded unit.
    identity : SymbolIdentity
        Its identity.
    """
    _RECORDS[id(value)] = (value, identity)


# [nav:anchor identity_of]
def identity_of(value: object) -> SymbolIdentity | None:
    """Return the identity of a resolution node or loaded unit.

    Parameters
    ----------
    value : object
        Node or unit.

    Returns
    -------
    SymbolIdentity | None
        The identity, or ``None`` when ``value`` was never resolved by lazyns.
    """
    # Imported here: node imports this module.
    from lazyns.node import ResolutionNode  # noqa: PLC0415

    if isinstance(value, ResolutionNode):
        return value.identity
    record = _RECORDS.get(id(value))
    if record is None or record[0] is not value:
        return None
    return record[1]
