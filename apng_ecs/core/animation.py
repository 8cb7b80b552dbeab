"""Builders and decoders for the APNG animation chunks (acTL, fcTL, fdAT).

Payload layouts (all big-endian):
  acTL: num_frames (u32), num_plays (u32)
  fcTL: sequence_number (u32), width (u32), height (u32), x_offset (u32),
        y_offset (u32), delay_num (u16), delay_den (u16), dispose_op (u8),
        blend_op (u8)
  fdAT: sequence_number (u32) followed by compressed image data
"""

from __future__ import annotations

import struct

from pydantic import ValidationError

from apng_ecs.components.animation import (
    BLEND_OP_SOURCE,
    DELAY_DENOMINATOR,
    DISPOSE_OP_NONE,
    AnimationControl,
    FrameControl,
)
from apng_ecs.core.chunks import ACTL, FCTL, FDAT, build_chunk, read_u32
from apng_ecs.errors import EncodingError, FormatError

ACTL_FORMAT = ">II"
FCTL_FORMAT = ">IIIIIHHBB"
ACTL_SIZE = struct.calcsize(ACTL_FORMAT)  # 8
FCTL_SIZE = struct.calcsize(FCTL_FORMAT)  # 26


def build_actl(num_frames: int, num_plays: int = 0) -> bytes:
    """Build an acTL chunk.

    Args:
        num_frames: Number of frames in the animation
        num_plays: Loop count (0 = infinite)

    Returns:
        Framed acTL chunk

    Raises:
        EncodingError: If a value does not fit its field
    """
    try:
        control = AnimationControl(num_frames=num_frames, num_plays=num_plays)
    except ValidationError as e:
        raise EncodingError(f"Invalid acTL parameters: {e}") from e
    payload = struct.pack(ACTL_FORMAT, control.num_frames, control.num_plays)
    return build_chunk(ACTL, payload)


def build_fctl(
    sequence_number: int,
    width: int,
    height: int,
    delay_ms: int,
    x_offset: int = 0,
    y_offset: int = 0,
    delay_den: int = DELAY_DENOMINATOR,
    dispose_op: int = DISPOSE_OP_NONE,
    blend_op: int = BLEND_OP_SOURCE,
) -> bytes:
    """Build an fcTL chunk.

    Args:
        sequence_number: Sequence number of this chunk
        width: Frame width in pixels
        height: Frame height in pixels
        delay_ms: Delay numerator (milliseconds with the default denominator)
        x_offset: Horizontal frame offset (default 0)
        y_offset: Vertical frame offset (default 0)
        delay_den: Delay denominator (default 1000)
        dispose_op: Dispose operation (default 0, none)
        blend_op: Blend operation (default 0, source)

    Returns:
        Framed fcTL chunk

    Raises:
        EncodingError: If a value does not fit its field
    """
    try:
        control = FrameControl(
            sequence_number=sequence_number,
            width=width,
            height=height,
            x_offset=x_offset,
            y_offset=y_offset,
            delay_num=delay_ms,
            delay_den=delay_den,
            dispose_op=dispose_op,
            blend_op=blend_op,
        )
    except ValidationError as e:
        raise EncodingError(f"Invalid fcTL parameters: {e}") from e
    return build_chunk(FCTL, fctl_payload(control))


def fctl_payload(control: FrameControl) -> bytes:
    """Pack a FrameControl into its 26-byte payload."""
    return struct.pack(
        FCTL_FORMAT,
        control.sequence_number,
        control.width,
        control.height,
        control.x_offset,
        control.y_offset,
        control.delay_num,
        control.delay_den,
        control.dispose_op,
        control.blend_op,
    )


def build_fdat(sequence_number: int, data: bytes) -> bytes:
    """Build an fdAT chunk wrapping one IDAT payload.

    Raises:
        EncodingError: If the sequence number is out of range or the payload
            is too large
    """
    if not 0 <= sequence_number <= 0xFFFFFFFF:
        raise EncodingError(f"Sequence number out of range: {sequence_number}")
    return build_chunk(FDAT, struct.pack(">I", sequence_number) + bytes(data))


def parse_actl(payload: bytes) -> AnimationControl:
    """Decode an acTL payload.

    Raises:
        FormatError: If the payload is too short
    """
    if len(payload) < ACTL_SIZE:
        raise FormatError(f"acTL payload too short: {len(payload)} bytes")
    num_frames, num_plays = struct.unpack_from(ACTL_FORMAT, payload)
    return AnimationControl(num_frames=num_frames, num_plays=num_plays)


def parse_fctl(payload: bytes) -> FrameControl:
    """Decode an fcTL payload.

    Raises:
        FormatError: If the payload is too short or holds invalid values
    """
    if len(payload) < FCTL_SIZE:
        raise FormatError(f"fcTL payload too short: {len(payload)} bytes")
    fields = struct.unpack_from(FCTL_FORMAT, payload)
    names = (
        "sequence_number",
        "width",
        "height",
        "x_offset",
        "y_offset",
        "delay_num",
        "delay_den",
        "dispose_op",
        "blend_op",
    )
    try:
        return FrameControl(**dict(zip(names, fields)))
    except ValidationError as e:
        raise FormatError(f"Invalid fcTL payload: {e}") from e


def parse_fdat(payload: bytes) -> tuple[int, bytes]:
    """Split an fdAT payload into (sequence_number, image data).

    Raises:
        FormatError: If the payload is too short
    """
    return read_u32(payload, 0), bytes(payload[4:])
