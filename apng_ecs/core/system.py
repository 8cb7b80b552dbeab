"""System base class for ECS transformations.

Systems are the "logic" layer of the ECS architecture. They operate on
components attached to frame entities, reading required components and
producing new components.

Example:
    >>> class MySystem(System):
    ...     def required_components(self):
    ...         return [ChunkStream]
    ...     def produced_components(self):
    ...         return [ImageData]
    ...     def run(self, world, eids):
    ...         for eid in eids:
    ...             stream = world.get_component(eid, ChunkStream)
    ...             world.add_component(eid, ImageData(...))
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from apng_ecs.core.world import World


class System(ABC):
    """Base class for all ECS systems.

    Systems transform components attached to entities. They declare:
    - required_components(): What inputs they need
    - produced_components(): What outputs they create
    - run(): The actual transformation logic
    """

    @abstractmethod
    def required_components(self) -> list[type]:
        """Return list of component types this system requires as input."""
        pass

    @abstractmethod
    def produced_components(self) -> list[type]:
        """Return list of component types this system produces as output."""
        pass

    @abstractmethod
    def run(self, world: World, eids: list[int]) -> None:
        """Execute system on given entities.

        Args:
            world: World instance with entities and components
            eids: Entity IDs to process, in frame order

        Note:
            - Order of eids is significant for systems that consume
              sequence numbers
            - Should add produced_components to each entity
        """
        pass

    def can_run(self, world: World, eid: int) -> bool:
        """Check if entity has all required components.

        Args:
            world: World instance
            eid: Entity ID to check

        Returns:
            True if entity has all required components
        """
        return all(world.has_component(eid, ct) for ct in self.required_components())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
