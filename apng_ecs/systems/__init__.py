"""Systems that turn source PNG entities into APNG frame chunks."""

from apng_ecs.systems.parse import ExtractImageData, ParseChunks
from apng_ecs.systems.sequence import SequenceFrames

__all__ = [
    "ParseChunks",
    "ExtractImageData",
    "SequenceFrames",
]
