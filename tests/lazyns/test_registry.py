"""Tests for lazyns.registry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from lazyns.node import ResolutionNode
from lazyns.registry import NamespaceRegistry, get_registry
from lazyns_common.errors import ErrorCode, StrategyContractError, UnregisteredNamespaceError
from tests.helpers import RecordingStrategy

if TYPE_CHECKING:
    from _pytest.logging import LogCaptureFixture


class TestNamespaceRegistry:
    """Tests for the NamespaceRegistry class."""

    def test_register_and_lookup(self, registry: NamespaceRegistry) -> None:
        """A bound strategy is returned by lookup_strategy."""
        strategy = RecordingStrategy()
        registry.register("ns", strategy)
        assert registry.lookup_strategy("ns") is strategy
        assert registry.is_registered("ns")

    def test_lookup_unregistered_lists_available(self, registry: NamespaceRegistry) -> None:
        """Looking up an unknown root names the registered ones."""
        registry.register("beta", RecordingStrategy())
        registry.register("alpha", RecordingStrategy())

        with pytest.raises(UnregisteredNamespaceError, match="not registered") as exc_info:
            registry.lookup_strategy("missing")

        error = exc_info.value
        assert "['alpha', 'beta']" in error.message
        assert error.namespace == "missing"
        assert error.code == ErrorCode.UNREGISTERED_NAMESPACE
        assert error.__cause__ is None

    def test_unregistered_error_is_lookup_error(self, registry: NamespaceRegistry) -> None:
        """UnregisteredNamespaceError can be caught as LookupError."""
        with pytest.raises(LookupError):
            registry.lookup_strategy("missing")

    def test_last_write_wins(self, registry: NamespaceRegistry) -> None:
        """Registering a root again replaces its strategy."""
        first = RecordingStrategy()
        second = RecordingStrategy()
        registry.register("x", first)
        registry.register("x", second)
        assert registry.lookup_strategy("x") is second
        assert registry.list_namespaces() == ["x"]

    def test_overwrite_routes_existing_nodes(self, registry: NamespaceRegistry) -> None:
        """Nodes created before a re-registration resolve through the new strategy."""
        first = RecordingStrategy()
        second = RecordingStrategy()
        registry.register("x", first)
        root = ResolutionNode("x", registry=registry)
        registry.register("x", second)

        root.resolve("Item")

        assert first.classify_calls == []
        assert second.classify_calls == ["x.Item"]
        assert second.load_calls == ["x.Item"]

    def test_overwrite_logs_warning(
        self, registry: NamespaceRegistry, caplog: LogCaptureFixture
    ) -> None:
        """Replacing a strategy logs a WARNING with status 'warning'."""
        registry.register("x", RecordingStrategy())
        with caplog.at_level(logging.INFO, logger="lazyns.registry"):
            registry.register("x", RecordingStrategy())

        warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert warnings[0].__dict__["operation"] == "register_namespace"
        assert warnings[0].__dict__["status"] == "warning"
        assert warnings[0].__dict__["namespace"] == "x"

    def test_rebinding_same_strategy_is_quiet(
        self, registry: NamespaceRegistry, caplog: LogCaptureFixture
    ) -> None:
        """Re-registering the identical strategy does not warn."""
        strategy = RecordingStrategy()
        registry.register("x", strategy)
        with caplog.at_level(logging.INFO, logger="lazyns.registry"):
            registry.register("x", strategy)
        assert not [record for record in caplog.records if record.levelno >= logging.WARNING]

    def test_rejects_invalid_strategy(self, registry: NamespaceRegistry) -> None:
        """Objects without the contract are refused and nothing is bound."""
        with pytest.raises(StrategyContractError):
            registry.register("ns", object())
        assert not registry.is_registered("ns")

    def test_list_namespaces_sorted(self, registry: NamespaceRegistry) -> None:
        """list_namespaces returns sorted root names."""
        for name in ("zeta", "alpha", "mid"):
            registry.register(name, RecordingStrategy())
        assert registry.list_namespaces() == ["alpha", "mid", "zeta"]


class TestGetRegistry:
    """Tests for the process-wide registry accessor."""

    def test_returns_singleton(self) -> None:
        """get_registry always returns the same registry."""
        assert get_registry() is get_registry()
        assert isinstance(get_registry(), NamespaceRegistry)
