"""Pipeline and scheduling.

Implements a fluent API for composing systems into pipelines with
dependency checking.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel

if TYPE_CHECKING:
    from apng_ecs.core.system import System
    from apng_ecs.core.world import World

T = TypeVar("T", bound=BaseModel)


class Pipe:
    """Fluent pipeline builder with dependency checking.

    Enables chaining systems with method `.to()` or pipe operator `|`,
    and execution with `.execute()` or `.out()`.

    Example:
        >>> world = World()
        >>> eids = world.spawn_frames(images)
        >>> streams = (
        ...     world.pipe(*eids)
        ...     .to(ParseChunks())
        ...     .out(ChunkStream)
        ... )
    """

    def __init__(self, world: "World", entities: list[int]) -> None:
        """Initialize Pipe with world and entities.

        Args:
            world: The ECS world
            entities: Entity IDs to apply pipeline to, in processing order
        """
        self.world: Any = world
        self.entities = list(entities)
        self.systems: list[Any] = []

    def to(self, system: "System") -> "Pipe":
        """Add system to pipeline.

        Returns:
            Self for method chaining
        """
        self.systems.append(system)
        return self

    def __or__(self, system: "System") -> "Pipe":
        """Pipe operator for chaining systems. Equivalent to `.to(system)`."""
        return self.to(system)

    def out(self, component_type: type[T]) -> list[T]:
        """Execute pipeline and return the component of the given type for every entity.

        Args:
            component_type: The component type to retrieve

        Returns:
            Component instances, in entity order

        Raises:
            RuntimeError: If any system cannot run (missing dependencies)
            KeyError: If an entity lacks the requested component after execution
        """
        self.execute()
        return [
            self.world.get_component(eid, component_type) for eid in self.entities
        ]

    def execute(self) -> None:
        """Run all systems in order with dependency checking.

        Every entity must satisfy each system's requirements.

        Raises:
            RuntimeError: If any entity is missing a system's required components
        """
        for system in self.systems:
            blocked = [
                eid for eid in self.entities if not system.can_run(self.world, eid)
            ]

            if blocked:
                required = [ct.__name__ for ct in system.required_components()]
                raise RuntimeError(
                    f"System {type(system).__name__} cannot run: "
                    f"entities {blocked} missing required components {required}"
                )

            system.run(self.world, self.entities)
