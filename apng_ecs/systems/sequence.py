"""Frame sequencing system.

Turns each frame's IDAT payloads into its framed APNG chunks:
    key frame:    fcTL, IDAT...
    other frames: fcTL, fdAT...

Sequence numbers are drawn from the world's counter in emission order, so
entities must be passed in frame order.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from apng_ecs.components.animation import EncodedFrame
from apng_ecs.components.png import FrameIndex, ImageData
from apng_ecs.core.animation import build_fctl, build_fdat
from apng_ecs.core.chunks import IDAT, build_chunk
from apng_ecs.core.system import System

if TYPE_CHECKING:
    from apng_ecs.core.world import World

logger = logging.getLogger(__name__)


class SequenceFrames(System):
    """Emit fcTL + image data chunks for each frame.

    Attributes:
        width: Frame width shared by all frames
        height: Frame height shared by all frames
        delay_ms: Frame delay numerator over a denominator of 1000
    """

    def __init__(self, width: int, height: int, delay_ms: int) -> None:
        self.width = width
        self.height = height
        self.delay_ms = delay_ms

    def required_components(self) -> list[type]:
        return [ImageData, FrameIndex]

    def produced_components(self) -> list[type]:
        return [EncodedFrame]

    def run(self, world: World, eids: list[int]) -> None:
        """Sequence frames in the order given.

        Raises:
            EncodingError: If a payload or field is out of range
        """
        for eid in eids:
            index = world.get_component(eid, FrameIndex).index
            image_data = world.get_component(eid, ImageData)

            seq = world.sequence.next()
            parts = [build_fctl(seq, self.width, self.height, self.delay_ms)]
            used = [seq]

            if index == 0:
                parts.extend(build_chunk(IDAT, p) for p in image_data.payloads)
            else:
                for payload in image_data.payloads:
                    seq = world.sequence.next()
                    parts.append(build_fdat(seq, payload))
                    used.append(seq)

            if not image_data.payloads:
                logger.warning("Frame %d has no IDAT chunks", index)

            world.add_component(
                eid, EncodedFrame(data=b"".join(parts), sequence_numbers=used)
            )
            logger.debug(
                "Frame %d: %d data chunks, sequence numbers %s",
                index,
                len(image_data.payloads),
                used,
            )

    def __repr__(self) -> str:
        return (
            f"SequenceFrames(width={self.width}, height={self.height}, "
            f"delay_ms={self.delay_ms})"
        )
