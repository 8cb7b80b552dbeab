"""APNG assembly SDK with ECS Architecture.

This package merges independently encoded PNG files into a single animated
PNG (APNG) without decoding any pixel data:
- Chunk parsing and serialization with CRC-32 checks
- acTL / fcTL / fdAT chunk builders
- Entity-Component-System architecture: one entity per source frame

Quick Start:
    >>> from apng_ecs import assemble, get_animation_info
    >>>
    >>> frames = [open(p, "rb").read() for p in ("a.png", "b.png")]
    >>> apng = assemble(frames, delay_ms=100)
    >>> get_animation_info(apng).num_frames
    2

For more control, drive the systems directly:
    >>> from apng_ecs.core.world import World
    >>> from apng_ecs.components.png import ChunkStream
    >>> from apng_ecs.systems import ParseChunks
    >>>
    >>> world = World()
    >>> eids = world.spawn_frames(frames)
    >>> streams = world.pipe(*eids).to(ParseChunks()).out(ChunkStream)
"""

__version__ = "0.1.0"

from apng_ecs.api import (
    AnimationInfo,
    ConversionResult,
    assemble,
    convert_to_apng,
    get_animation_info,
)
from apng_ecs.core.animation import build_actl, build_fctl, build_fdat
from apng_ecs.core.checksum import checksum
from apng_ecs.core.chunks import PNG_SIGNATURE, Chunk, build_chunk, is_png, parse_chunks
from apng_ecs.errors import (
    APNGError,
    EmptyInputError,
    EncodingError,
    FormatError,
    MissingHeaderError,
)

__all__ = [
    "__version__",
    "assemble",
    "convert_to_apng",
    "get_animation_info",
    "AnimationInfo",
    "ConversionResult",
    "checksum",
    "parse_chunks",
    "build_chunk",
    "is_png",
    "Chunk",
    "PNG_SIGNATURE",
    "build_actl",
    "build_fctl",
    "build_fdat",
    "APNGError",
    "FormatError",
    "MissingHeaderError",
    "EncodingError",
    "EmptyInputError",
]
