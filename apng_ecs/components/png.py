"""PNG source components: PNGBytes, FrameIndex, ChunkStream, ImageHeader, ImageData."""

from __future__ import annotations

from pydantic import BaseModel, Field

from apng_ecs.core.chunks import Chunk

U32_MAX = 2**32 - 1


class Component(BaseModel):
    """Base class for all ECS components.

    Components are immutable data containers using Pydantic for validation.
    """

    model_config = {"arbitrary_types_allowed": True, "frozen": True}


class PNGBytes(Component):
    """Raw bytes of one source PNG file.

    Attributes:
        data: Complete file contents, starting with the PNG signature
    """

    data: bytes


class FrameIndex(Component):
    """Position of an entity in the frame sequence (0 = key frame)."""

    index: int = Field(ge=0)


class ChunkStream(Component):
    """Chunks of one source image, in source order, up to and including IEND.

    Attributes:
        chunks: Parsed chunks
    """

    chunks: list[Chunk]

    def find(self, chunk_type: str) -> Chunk | None:
        """Return the first chunk of the given type, or None."""
        for chunk in self.chunks:
            if chunk.type == chunk_type:
                return chunk
        return None

    def before(self, chunk_type: str) -> list[Chunk]:
        """Return every chunk preceding the first chunk of the given type."""
        result: list[Chunk] = []
        for chunk in self.chunks:
            if chunk.type == chunk_type:
                break
            result.append(chunk)
        return result


class ImageHeader(Component):
    """Image geometry read from the IHDR chunk.

    Attributes:
        width: Image width in pixels
        height: Image height in pixels
    """

    width: int = Field(ge=0, le=U32_MAX)
    height: int = Field(ge=0, le=U32_MAX)


class ImageData(Component):
    """Compressed image data: the IDAT payloads of one image, in source order."""

    payloads: list[bytes]
