"""
Topology plan: ordered execution of resource stages.

Each stage declares the identifiers it requires and the identifiers it
provides. Edges of the dependency graph are derived from those declarations,
and the plan runs stages in topological order in a single forward pass.
The first failing stage aborts the run; there are no retries and no
compensating actions.
"""

from dataclasses import dataclass
from typing import Any, Callable, Mapping

import pulumi

from infra.errors import ConfigurationError, InvalidPrefixError, ResourceCreationError
from infra.topology.graph import DependencyGraph


class PlanContext:
    """Single-assignment bindings of identifiers produced by stages."""

    def __init__(self) -> None:
        self._bindings: dict[str, Any] = {}

    def bind(self, key: str, value: Any) -> None:
        if key in self._bindings:
            raise ConfigurationError(f"Identifier '{key}' is already bound")
        self._bindings[key] = value

    def require(self, key: str) -> Any:
        try:
            return self._bindings[key]
        except KeyError:
            raise ConfigurationError(f"Identifier '{key}' is not bound yet") from None

    def get(self, key: str, default: Any = None) -> Any:
        return self._bindings.get(key, default)

    def __contains__(self, key: str) -> bool:
        return key in self._bindings

    def as_dict(self) -> dict[str, Any]:
        return dict(self._bindings)


@dataclass(frozen=True)
class Stage:
    """
    One step of the plan.

    Attributes:
        name: Stage name, unique within a plan
        build: Declares the stage's resources; returns the provided identifiers
        requires: Identifiers that must be bound before the stage runs
        provides: Identifiers the stage binds
    """
    name: str
    build: Callable[[PlanContext], Mapping[str, Any]]
    requires: tuple[str, ...] = ()
    provides: tuple[str, ...] = ()


class TopologyPlan:
    """Stages plus the dependency graph derived from their declarations."""

    def __init__(self, stages: list[Stage]) -> None:
        self.stages: dict[str, Stage] = {}
        providers: dict[str, str] = {}

        for stage in stages:
            if stage.name in self.stages:
                raise ConfigurationError(f"Duplicate stage '{stage.name}'")
            self.stages[stage.name] = stage
            for key in stage.provides:
                if key in providers:
                    raise ConfigurationError(
                        f"Identifier '{key}' is provided by both '{providers[key]}' and '{stage.name}'"
                    )
                providers[key] = stage.name

        self.graph = DependencyGraph()
        for stage in stages:
            missing = [key for key in stage.requires if key not in providers]
            if missing:
                raise ConfigurationError(
                    f"Stage '{stage.name}' requires identifier(s) nobody provides: {', '.join(missing)}"
                )
            self.graph.add(stage.name, tuple(providers[key] for key in stage.requires))

    def order(self) -> list[str]:
        """Return stage names in creation order."""
        return self.graph.order()

    def run(self, context: PlanContext | None = None) -> PlanContext:
        """
        Build every stage in dependency order.

        Args:
            context: Bindings to extend; a fresh context by default

        Returns:
            The context holding every provided identifier

        Raises:
            ConfigurationError: Propagated unchanged from any stage
            InvalidPrefixError: Propagated unchanged from any stage
            ResourceCreationError: Any other stage failure
        """
        context = context if context is not None else PlanContext()
        order = self.order()
        pulumi.log.info(f"Topology plan: {' -> '.join(order)}")

        for name in order:
            stage = self.stages[name]
            try:
                produced = stage.build(context)
            except (ConfigurationError, InvalidPrefixError):
                raise
            except Exception as e:
                raise ResourceCreationError(name, e) from e

            missing = set(stage.provides) - set(produced)
            if missing:
                raise ResourceCreationError(
                    name,
                    ConfigurationError(f"did not provide {', '.join(sorted(missing))}"),
                )
            for key in stage.provides:
                context.bind(key, produced[key])
            pulumi.log.debug(f"Stage '{name}' bound {', '.join(stage.provides) or 'nothing'}")

        return context
