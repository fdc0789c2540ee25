"""
Dependency graph over resource stages.

Nodes are stage names; an edge means "requires an identifier from".
Ordering is a topological sort, so the creation order is derived rather
than written by hand.
"""

import graphlib

from infra.errors import ConfigurationError


class DependencyGraph:
    """Directed acyclic graph of stage prerequisites."""

    def __init__(self) -> None:
        self.graph: dict[str, set[str]] = {}

    def add(self, node: str, requires: tuple[str, ...] | list[str] = ()) -> None:
        """Register a node; prerequisites of a repeated node are merged."""
        self.graph.setdefault(node, set()).update(requires)

    def requires(self, node: str) -> set[str]:
        """Get the direct prerequisites of a node."""
        return set(self.graph[node])

    def dependents(self, node: str) -> set[str]:
        """Get all nodes that directly depend on this one."""
        return {name for name, deps in self.graph.items() if node in deps}

    def _sorter(self) -> graphlib.TopologicalSorter:
        for node, deps in self.graph.items():
            unknown = deps - self.graph.keys()
            if unknown:
                raise ConfigurationError(
                    f"Stage '{node}' requires unknown stage(s): {', '.join(sorted(unknown))}"
                )
        sorter = graphlib.TopologicalSorter(self.graph)
        try:
            sorter.prepare()
        except graphlib.CycleError as e:
            cycle = " -> ".join(e.args[1])
            raise ConfigurationError(f"Dependency cycle between stages: {cycle}") from e
        return sorter

    def layers(self) -> list[list[str]]:
        """
        Group nodes into batches of mutually independent nodes.

        Every node's prerequisites lie in an earlier batch. Within a batch,
        nodes keep registration order.
        """
        sorter = self._sorter()
        position = {node: i for i, node in enumerate(self.graph)}
        batches = []
        while sorter.is_active():
            ready = sorted(sorter.get_ready(), key=position.__getitem__)
            batches.append(ready)
            sorter.done(*ready)
        return batches

    def order(self) -> list[str]:
        """Return nodes in dependency order."""
        return [node for batch in self.layers() for node in batch]
