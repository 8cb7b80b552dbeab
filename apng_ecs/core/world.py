"""World: Entity-Component-System manager.

The World is the central ECS registry that manages:
- Entity creation (integer IDs, one per source frame)
- Component storage (type -> entity -> component mapping)
- The sequence counter shared by fcTL and fdAT chunks

A World lives for a single conversion call.

Example:
    >>> world = World()
    >>> eids = world.spawn_frames([png_a, png_b])
    >>> key = world.get_component(eids[0], PNGBytes)
    >>> world.clear()
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, TypeVar

from pydantic import BaseModel

from apng_ecs.errors import EncodingError

Component = BaseModel

T = TypeVar("T", bound=Component)


class SequenceCounter:
    """Zero-based uint32 counter for fcTL/fdAT sequence numbers.

    Every call to next() returns a fresh number; numbers are never reused.
    """

    def __init__(self, start: int = 0) -> None:
        self._next = start

    @property
    def value(self) -> int:
        """The number the next call to next() will return."""
        return self._next

    def next(self) -> int:
        """Return the current number and advance.

        Raises:
            EncodingError: If the counter would exceed 32 bits
        """
        if self._next > 0xFFFFFFFF:
            raise EncodingError("Sequence number overflow")
        value = self._next
        self._next += 1
        return value

    def reset(self) -> None:
        self._next = 0

    def __repr__(self) -> str:
        return f"SequenceCounter(next={self._next})"


class World:
    """Central ECS registry managing frame entities and their components.

    Attributes:
        sequence: Sequence counter for animation chunks
        metadata: Per-entity metadata dict
    """

    def __init__(self) -> None:
        self.sequence = SequenceCounter()
        self._next_eid = 0
        self._components: dict[type[Component], dict[int, Component]] = {}
        self.metadata: dict[int, dict[str, Any]] = {}

    def new_entity(self) -> int:
        """Create a new entity and return its ID.

        Returns:
            Entity ID (monotonically increasing integer)
        """
        eid = self._next_eid
        self._next_eid += 1
        self.metadata[eid] = {}
        return eid

    def spawn_frame(self, data: bytes | bytearray | memoryview, index: int) -> int:
        """Ingest one source PNG into the world.

        Args:
            data: PNG file bytes (copied, never mutated)
            index: Position of the frame in the animation

        Returns:
            Entity ID with PNGBytes and FrameIndex components attached

        Raises:
            TypeError: If data is not bytes-like
        """
        # Import here to avoid circular dependency
        from apng_ecs.components.png import FrameIndex, PNGBytes

        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"Frame {index}: expected bytes-like object, got {type(data)}")

        eid = self.new_entity()
        self.add_component(eid, PNGBytes(data=bytes(data)))
        self.add_component(eid, FrameIndex(index=index))
        return eid

    def spawn_frames(self, images: Sequence[bytes | bytearray | memoryview]) -> list[int]:
        """Ingest an ordered sequence of PNGs.

        Args:
            images: PNG buffers; the first one is the key frame

        Returns:
            Entity IDs in frame order
        """
        return [self.spawn_frame(img, i) for i, img in enumerate(images)]

    def clear(self) -> None:
        """Clear all entities and components and reset the sequence counter."""
        self.sequence.reset()
        self._next_eid = 0
        self._components.clear()
        self.metadata.clear()

    def add_component(self, eid: int, component: Component) -> None:
        """Attach a component to an entity.

        Args:
            eid: Entity ID
            component: Component instance

        Raises:
            ValueError: If entity does not exist
        """
        if eid not in self.metadata:
            raise ValueError(f"Entity {eid} does not exist")

        comp_type = type(component)
        if comp_type not in self._components:
            self._components[comp_type] = {}

        self._components[comp_type][eid] = component

    def get_component(self, eid: int, comp_type: type[T]) -> T:
        """Retrieve a component from an entity.

        Args:
            eid: Entity ID
            comp_type: Component class to retrieve

        Returns:
            Component instance

        Raises:
            KeyError: If entity does not have the component
        """
        if comp_type not in self._components:
            raise KeyError(f"No entities have component type {comp_type.__name__}")
        if eid not in self._components[comp_type]:
            raise KeyError(f"Entity {eid} does not have component {comp_type.__name__}")

        return self._components[comp_type][eid]  # type: ignore

    def has_component(self, eid: int, comp_type: type[Component]) -> bool:
        """Check if entity has a specific component type."""
        return (
            comp_type in self._components
            and eid in self._components[comp_type]
        )

    def pipe(self, *entities: int) -> Any:
        """Create a pipeline over the given entities.

        Systems are executed in order when `.execute()` or `.out()` is called.
        Entities are processed in the order given.

        Example:
            >>> (
            ...     world.pipe(*eids)
            ...     .to(ParseChunks())
            ...     .to(ExtractImageData())
            ...     .execute()
            ... )
        """
        from apng_ecs.core.pipeline import Pipe

        return Pipe(world=self, entities=list(entities))

    def __repr__(self) -> str:
        num_entities = len(self.metadata)
        num_comp_types = len(self._components)
        return (
            f"World(entities={num_entities}, component_types={num_comp_types}, "
            f"sequence={self.sequence})"
        )
