"""
Tests for the stage dependency graph.
"""

import pytest

from infra.errors import ConfigurationError
from infra.topology.graph import DependencyGraph


@pytest.fixture
def graph():
    graph = DependencyGraph()
    graph.add("network")
    graph.add("security_groups", ("network",))
    graph.add("iam")
    graph.add("database", ("network", "security_groups"))
    graph.add("instance", ("database", "iam", "security_groups"))
    graph.add("dns", ("instance",))
    return graph


class TestDependencyGraph:
    """Topological ordering of stages."""

    def test_order_respects_prerequisites(self, graph):
        """Every node should come after all of its prerequisites."""
        order = graph.order()

        for node in order:
            for dep in graph.requires(node):
                assert order.index(dep) < order.index(node), f"{dep} must precede {node}"

    def test_layers_keep_registration_order(self, graph):
        """Independent nodes in a batch should keep registration order."""
        assert graph.layers() == [
            ["network", "iam"],
            ["security_groups"],
            ["database"],
            ["instance"],
            ["dns"],
        ]

    def test_dependents(self, graph):
        assert graph.dependents("network") == {"security_groups", "database"}
        assert graph.dependents("dns") == set()

    def test_repeated_add_merges_prerequisites(self):
        graph = DependencyGraph()
        graph.add("a")
        graph.add("b", ("a",))
        graph.add("c")
        graph.add("b", ("c",))

        assert graph.requires("b") == {"a", "c"}

    def test_cycle_is_rejected(self):
        """A cycle should be reported as a configuration error naming its members."""
        graph = DependencyGraph()
        graph.add("a", ("c",))
        graph.add("b", ("a",))
        graph.add("c", ("b",))

        with pytest.raises(ConfigurationError, match="cycle"):
            graph.order()

    def test_unknown_prerequisite_is_rejected(self):
        graph = DependencyGraph()
        graph.add("a", ("missing",))

        with pytest.raises(ConfigurationError, match="missing"):
            graph.order()

    def test_empty_graph(self):
        assert DependencyGraph().order() == []
