"""High-level API for building and inspecting animated PNGs.

Provides assemble() to merge independently encoded PNG files into one APNG,
convert_to_apng() as a timed wrapper for interactive front ends, and
get_animation_info() to read the animation metadata back.
"""

from __future__ import annotations

import base64
import logging
import time
from collections.abc import Sequence

from pydantic import BaseModel, Field

from apng_ecs.components.animation import EncodedFrame, FrameControl
from apng_ecs.components.png import ChunkStream, ImageHeader
from apng_ecs.config import load_config
from apng_ecs.core.animation import build_actl, parse_actl, parse_fctl, parse_fdat
from apng_ecs.core.chunks import (
    ACTL,
    FCTL,
    FDAT,
    IDAT,
    IEND,
    IHDR,
    PNG_SIGNATURE,
    build_chunk,
    parse_chunks,
    read_u32,
)
from apng_ecs.core.world import World
from apng_ecs.errors import EmptyInputError, EncodingError, FormatError, MissingHeaderError
from apng_ecs.systems import ExtractImageData, ParseChunks, SequenceFrames

logger = logging.getLogger(__name__)

# Chunks from the key frame that must not be copied into the output header
_ANIMATION_CHUNKS = {ACTL, FCTL, FDAT, IEND}

PNG_MIME_TYPE = "image/png"

ImageBuffer = bytes | bytearray | memoryview


class ConversionResult(BaseModel):
    """Result of convert_to_apng().

    Attributes:
        binary: The assembled APNG
        mime_type: Media type of binary
        processing_time: Elapsed milliseconds, formatted with one decimal
    """

    binary: bytes
    mime_type: str = Field(default=PNG_MIME_TYPE)
    processing_time: str

    def data_uri(self) -> str:
        """Return a data: URI that displays or downloads the animation."""
        encoded = base64.b64encode(self.binary).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


class AnimationInfo(BaseModel):
    """Animation metadata read from an APNG.

    Attributes:
        width: Canvas width from IHDR
        height: Canvas height from IHDR
        num_frames: Frame count declared in acTL
        num_plays: Loop count declared in acTL (0 = infinite)
        frames: fcTL records in stream order
        sequence_numbers: Sequence numbers of every fcTL and fdAT, in stream order
    """

    width: int
    height: int
    num_frames: int
    num_plays: int
    frames: list[FrameControl]
    sequence_numbers: list[int]

    @property
    def delays(self) -> list[int]:
        """Delay numerator of every frame."""
        return [f.delay_num for f in self.frames]


def _check_delay(delay_ms: int) -> int:
    if isinstance(delay_ms, bool) or not isinstance(delay_ms, int):
        raise TypeError(f"delay_ms must be an int, got {type(delay_ms)}")
    if not 0 <= delay_ms <= 0xFFFF:
        raise EncodingError(f"delay_ms must be in 0..65535, got {delay_ms}")
    return delay_ms


def assemble(
    images: Sequence[ImageBuffer],
    delay_ms: int | None = None,
    *,
    verify_crc: bool | None = None,
    config_path: str | None = None,
) -> bytes:
    """Merge PNG files into one animated PNG.

    The first image is the key frame: its IHDR and other chunks preceding its
    first IDAT seed the output header, and its IDAT chunks are kept as is.
    Every later image contributes only its IDAT payloads, wrapped as fdAT.
    All frames share the key frame's width and height.

    Args:
        images: PNG buffers in frame order
        delay_ms: Frame delay in milliseconds (config default if None)
        verify_crc: Reject input chunks with a wrong CRC (config default if None)
        config_path: Path to apng_ecs.toml (auto-detected if None)

    Returns:
        APNG bytes

    Raises:
        EmptyInputError: If images is empty
        MissingHeaderError: If the key frame has no IHDR chunk
        FormatError: If any image is malformed or truncated
        EncodingError: If delay_ms or a chunk is out of range
        TypeError: If images is not a sequence of bytes-like objects

    Example:
        >>> apng = assemble([frame_a, frame_b], delay_ms=100)
        >>> apng[:8] == PNG_SIGNATURE
        True
    """
    if isinstance(images, (bytes, bytearray, memoryview)):
        raise TypeError("images must be a sequence of PNG buffers, not a single buffer")
    images = list(images)
    if not images:
        raise EmptyInputError("At least one image is required")

    if delay_ms is None or verify_crc is None:
        settings = load_config(config_path)
        if delay_ms is None:
            delay_ms = settings.delay_ms
        if verify_crc is None:
            verify_crc = settings.verify_crc
    delay_ms = _check_delay(delay_ms)

    world = World()

    try:
        eids = world.spawn_frames(images)
        key = eids[0]

        # Key frame first: a missing header is reported before other frames are read
        world.pipe(key).to(ParseChunks(verify_crc=verify_crc)).execute()
        if not world.has_component(key, ImageHeader):
            raise MissingHeaderError("IHDR chunk not found in the first image")
        header = world.get_component(key, ImageHeader)

        if len(eids) > 1:
            world.pipe(*eids[1:]).to(ParseChunks(verify_crc=verify_crc)).execute()
        for i, eid in enumerate(eids[1:], start=1):
            if world.has_component(eid, ImageHeader):
                other = world.get_component(eid, ImageHeader)
                if (other.width, other.height) != (header.width, header.height):
                    logger.warning(
                        "Frame %d is %dx%d, key frame is %dx%d",
                        i,
                        other.width,
                        other.height,
                        header.width,
                        header.height,
                    )

        parts = [PNG_SIGNATURE]
        key_stream = world.get_component(key, ChunkStream)
        parts.extend(
            c.to_bytes()
            for c in key_stream.before(IDAT)
            if c.type not in _ANIMATION_CHUNKS
        )
        parts.append(build_actl(len(eids), num_plays=0))

        frames: list[EncodedFrame] = (
            world.pipe(*eids)
            .to(ExtractImageData())
            .to(SequenceFrames(header.width, header.height, delay_ms))
            .out(EncodedFrame)
        )
        parts.extend(f.data for f in frames)
        parts.append(build_chunk(IEND, b""))

        logger.debug(
            "Assembled %d frames (%dx%d, %d ms), %d sequence numbers",
            len(eids),
            header.width,
            header.height,
            delay_ms,
            world.sequence.value,
        )
        return b"".join(parts)

    finally:
        world.clear()


def convert_to_apng(
    images: Sequence[ImageBuffer],
    delay_ms: int | None = None,
    *,
    config_path: str | None = None,
) -> ConversionResult:
    """Assemble an APNG and measure how long it took.

    Args:
        images: PNG buffers in frame order
        delay_ms: Frame delay in milliseconds (config default if None)
        config_path: Path to apng_ecs.toml (auto-detected if None)

    Returns:
        ConversionResult with the binary, its MIME type and elapsed time

    Raises:
        Any error raised by assemble(); it is logged before propagating
    """
    images = list(images)
    start = time.perf_counter()
    try:
        binary = assemble(images, delay_ms, config_path=config_path)
    except (ValueError, TypeError):
        logger.exception("Error converting to APNG")
        raise
    elapsed_ms = (time.perf_counter() - start) * 1000.0
    result = ConversionResult(binary=binary, processing_time=f"{elapsed_ms:.1f}")
    logger.info(
        "Converted %d images to APNG: %d bytes in %s ms",
        len(images),
        len(binary),
        result.processing_time,
    )
    return result


def get_animation_info(data: bytes, verify_crc: bool = True) -> AnimationInfo:
    """Read animation metadata from an APNG.

    Args:
        data: APNG bytes
        verify_crc: Reject chunks with a wrong CRC

    Returns:
        AnimationInfo

    Raises:
        FormatError: If data is malformed or has no acTL chunk
        MissingHeaderError: If data has no IHDR chunk
    """
    stream = ChunkStream(chunks=parse_chunks(data, verify_crc=verify_crc))

    ihdr = stream.find(IHDR)
    if ihdr is None:
        raise MissingHeaderError("IHDR chunk not found")
    actl = stream.find(ACTL)
    if actl is None:
        raise FormatError("acTL chunk not found: not an animated PNG")
    control = parse_actl(actl.data)

    frames: list[FrameControl] = []
    sequence_numbers: list[int] = []
    for chunk in stream.chunks:
        if chunk.type == FCTL:
            fctl = parse_fctl(chunk.data)
            frames.append(fctl)
            sequence_numbers.append(fctl.sequence_number)
        elif chunk.type == FDAT:
            seq, _ = parse_fdat(chunk.data)
            sequence_numbers.append(seq)

    return AnimationInfo(
        width=read_u32(ihdr.data, 0),
        height=read_u32(ihdr.data, 4),
        num_frames=control.num_frames,
        num_plays=control.num_plays,
        frames=frames,
        sequence_numbers=sequence_numbers,
    )
