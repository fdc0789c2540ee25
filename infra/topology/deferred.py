"""
Deferred values: identifiers that only exist once the engine has created
their owning resource (e.g., a database endpoint).

A DeferredValue has exactly one consumer. The consumer's render callback
runs once, when the engine resolves the value; at preview time it does not
run at all and the rendered result stays unknown.
"""

from typing import Callable, Generic, TypeVar

import pulumi

from infra.errors import ConfigurationError

T = TypeVar("T")
R = TypeVar("R")


class DeferredValue(Generic[T]):
    """Single-consumer cell over an engine-resolved value."""

    def __init__(self, name: str, source: pulumi.Input[T]) -> None:
        self.name = name
        self._source = pulumi.Output.from_input(source)
        self._consumer: str | None = None

    @property
    def consumer(self) -> str | None:
        return self._consumer

    def consume(
        self,
        consumer: str,
        render: Callable[[T], pulumi.Input[R]],
    ) -> pulumi.Output[R]:
        """
        Bind the downstream consumer and derive its value.

        Args:
            consumer: Name of the consuming step, for diagnostics
            render: Called with the resolved value; may return an Output

        Returns:
            Output resolving to the rendered value

        Raises:
            ConfigurationError: If the value already has a consumer
        """
        if self._consumer is not None:
            raise ConfigurationError(
                f"Deferred value '{self.name}' is already consumed by '{self._consumer}'"
            )
        self._consumer = consumer
        pulumi.log.debug(f"Deferred value '{self.name}' bound to '{consumer}'")
        return self._source.apply(render)
