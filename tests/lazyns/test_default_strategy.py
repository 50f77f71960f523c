"""Tests for the filesystem-backed default strategies."""

from __future__ import annotations

import sys
from pathlib import Path, PurePath
from types import ModuleType, SimpleNamespace

import pytest

from lazyns.default_strategy import DefaultStrategy, FilesystemProbeStrategy
from lazyns.node import ResolutionNode
from lazyns.registry import NamespaceRegistry
from lazyns.strategy import SymbolKind
from lazyns_common.errors import UnitLoadError
from lazyns_common.settings import RuntimeSettings, load_settings
from tests.helpers import write_units


def _tree(
    strategy: DefaultStrategy, registry: NamespaceRegistry, root_name: str = "ns"
) -> ResolutionNode:
    registry.register(root_name, strategy)
    root = ResolutionNode(root_name, registry=registry)
    strategy.on_node_created(SimpleNamespace(), root_name, root)
    return root


class TestClassify:
    """Default classification by capitalisation."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Baz", SymbolKind.UNIT),
            ("Foo1", SymbolKind.UNIT),
            ("baz", SymbolKind.NAMESPACE),
            ("_private", SymbolKind.NAMESPACE),
            ("foo_Bar", SymbolKind.NAMESPACE),
        ],
    )
    def test_uppercase_first_character_is_unit(self, name: str, expected: SymbolKind) -> None:
        """Names whose first character is uppercase are units."""
        strategy = DefaultStrategy("/srv/units")
        assert strategy.classify(ResolutionNode("ns"), name) is expected


class TestPaths:
    """Path derivation through on_node_created."""

    def test_root_path_is_root_name(self, registry: NamespaceRegistry) -> None:
        """A root attached to a non-node target gets its own name as path."""
        root = _tree(DefaultStrategy("/srv/units"), registry)
        assert root.extras["path"] == PurePath("ns")

    def test_child_paths_accumulate(self, registry: NamespaceRegistry) -> None:
        """Each namespace node extends its parent's path."""
        root = _tree(DefaultStrategy("/srv/units"), registry)
        bar = root.foo.bar
        assert bar.extras["path"] == PurePath("ns", "foo", "bar")

    def test_unit_path(self, registry: NamespaceRegistry) -> None:
        """unit_path joins base path, node path and the unit suffix."""
        strategy = DefaultStrategy("/srv/units")
        root = _tree(strategy, registry)
        bar = root.foo.bar
        assert strategy.unit_path(bar, "Baz") == Path("/srv/units/ns/foo/bar/Baz.py")

    def test_unit_path_custom_suffix(self, registry: NamespaceRegistry) -> None:
        """The suffix comes from settings."""
        strategy = DefaultStrategy("/srv/units", settings=load_settings(unit_suffix=".unit"))
        root = _tree(strategy, registry)
        assert strategy.unit_path(root, "Baz") == Path("/srv/units/ns/Baz.unit")

    def test_unit_path_without_hook_data(self) -> None:
        """Nodes created without the hook fall back to their dotted name."""
        strategy = DefaultStrategy("/srv/units")
        node = ResolutionNode("bar", parent=ResolutionNode("foo", parent=ResolutionNode("ns")))
        assert strategy.unit_path(node, "Baz") == Path("/srv/units/ns/foo/bar/Baz.py")


class TestLoadUnit:
    """Loading units from disk."""

    def test_module_attribute_named_like_unit(
        self, unit_tree: Path, unit_settings: RuntimeSettings, registry: NamespaceRegistry
    ) -> None:
        """A module defining an attribute named after the unit returns that attribute."""
        root = _tree(DefaultStrategy(unit_tree, settings=unit_settings), registry)
        baz = root.foo.bar.Baz
        assert isinstance(baz, type)
        assert baz.answer == 42
        assert root.tools.Helper() == "helped"

    def test_module_without_matching_attribute(
        self, unit_tree: Path, unit_settings: RuntimeSettings, registry: NamespaceRegistry
    ) -> None:
        """Otherwise the module itself is the unit."""
        root = _tree(DefaultStrategy(unit_tree, settings=unit_settings), registry)
        settings_unit = root.Settings
        assert isinstance(settings_unit, ModuleType)
        assert settings_unit.TIMEOUT == 30
        assert sys.modules[f"{unit_settings.module_prefix}.ns.Settings"] is settings_unit

    def test_missing_unit(
        self, unit_tree: Path, unit_settings: RuntimeSettings, registry: NamespaceRegistry
    ) -> None:
        """A unit without a file raises UnitLoadError and stays unresolved."""
        root = _tree(DefaultStrategy(unit_tree, settings=unit_settings), registry)
        with pytest.raises(UnitLoadError, match="Missing.py"):
            _ = root.Missing
        assert "Missing" not in root

    def test_register_modules_disabled(
        self, unit_tree: Path, registry: NamespaceRegistry
    ) -> None:
        """register_modules=False keeps loaded units out of sys.modules."""
        settings = load_settings(module_prefix="_lazyns_test_unregistered", register_modules=False)
        root = _tree(DefaultStrategy(unit_tree, settings=settings), registry)
        assert root.Settings.TIMEOUT == 30
        assert "_lazyns_test_unregistered.ns.Settings" not in sys.modules

    def test_repr(self) -> None:
        """repr shows the base path."""
        assert repr(DefaultStrategy("/srv/units")) == "DefaultStrategy('/srv/units')"


class TestFilesystemProbeStrategy:
    """Classification by probing for unit files."""

    def test_classifies_by_file_existence(
        self, tmp_path: Path, unit_settings: RuntimeSettings, registry: NamespaceRegistry
    ) -> None:
        """Lowercase unit files load; capitalised directories are namespaces."""
        write_units(
            tmp_path,
            {
                "ns/helpers.py": "VALUE = 'lower'\n",
                "ns/Models/User.py": "User = 'user-model'\n",
            },
        )
        strategy = FilesystemProbeStrategy(tmp_path, settings=unit_settings)
        root = _tree(strategy, registry)

        assert root.helpers.VALUE == "lower"
        models = root.Models
        assert isinstance(models, ResolutionNode)
        assert models.User == "user-model"
