"""Chunk parsing systems.

ParseChunks:      PNGBytes    → ChunkStream (+ ImageHeader when IHDR present)
ExtractImageData: ChunkStream → ImageData
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from apng_ecs.components.png import (
    ChunkStream,
    FrameIndex,
    ImageData,
    ImageHeader,
    PNGBytes,
)
from apng_ecs.core.chunks import IDAT, IHDR, parse_chunks, read_u32
from apng_ecs.core.system import System
from apng_ecs.errors import FormatError

if TYPE_CHECKING:
    from apng_ecs.core.world import World

logger = logging.getLogger(__name__)


def read_header(stream: ChunkStream) -> ImageHeader | None:
    """Read width and height from the IHDR chunk of a stream.

    Returns:
        ImageHeader, or None if the stream has no IHDR chunk

    Raises:
        FormatError: If the IHDR payload is shorter than 8 bytes
    """
    ihdr = stream.find(IHDR)
    if ihdr is None:
        return None
    return ImageHeader(width=read_u32(ihdr.data, 0), height=read_u32(ihdr.data, 4))


class ParseChunks(System):
    """Split each source PNG into its chunk stream.

    Attributes:
        verify_crc: Whether a stored CRC that does not match is an error
    """

    def __init__(self, verify_crc: bool = True) -> None:
        self.verify_crc = verify_crc

    def required_components(self) -> list[type]:
        return [PNGBytes, FrameIndex]

    def produced_components(self) -> list[type]:
        return [ChunkStream, ImageHeader]

    def run(self, world: World, eids: list[int]) -> None:
        """Parse every entity's PNG bytes.

        Raises:
            FormatError: If a frame is malformed (message names the frame)
        """
        for eid in eids:
            index = world.get_component(eid, FrameIndex).index
            png = world.get_component(eid, PNGBytes)
            try:
                stream = ChunkStream(
                    chunks=parse_chunks(png.data, verify_crc=self.verify_crc)
                )
                header = read_header(stream)
            except FormatError as e:
                raise FormatError(f"Frame {index}: {e}") from e

            world.add_component(eid, stream)
            if header is not None:
                world.add_component(eid, header)
            logger.debug(
                "Frame %d: parsed %d chunks (%s)",
                index,
                len(stream.chunks),
                ", ".join(c.type for c in stream.chunks),
            )

    def __repr__(self) -> str:
        return f"ParseChunks(verify_crc={self.verify_crc})"


class ExtractImageData(System):
    """Collect the IDAT payloads of each chunk stream, in source order."""

    def required_components(self) -> list[type]:
        return [ChunkStream]

    def produced_components(self) -> list[type]:
        return [ImageData]

    def run(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            stream = world.get_component(eid, ChunkStream)
            image_data = ImageData(
                payloads=[c.data for c in stream.chunks if c.type == IDAT]
            )
            world.add_component(eid, image_data)
