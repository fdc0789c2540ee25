"""
Topology planning: zone assignment, stage dependency graph and deferred values.
"""

from infra.topology.deferred import DeferredValue
from infra.topology.graph import DependencyGraph
from infra.topology.plan import PlanContext, Stage, TopologyPlan
from infra.topology.zones import ZoneAssignment, assign_zones

__all__ = [
    "DeferredValue",
    "DependencyGraph",
    "PlanContext",
    "Stage",
    "TopologyPlan",
    "ZoneAssignment",
    "assign_zones",
]
