"""PNG chunk parsing and serialization.

Implements the chunk framing shared by PNG and APNG.

File format:
  [Signature: 8 bytes]
    - 0x89 'P' 'N' 'G' 0x0D 0x0A 0x1A 0x0A
  [Chunk: 12 + length bytes, repeated]
    - Length: 4 bytes (payload only, big-endian)
    - Type: 4 bytes (ASCII)
    - Payload: <length> bytes
    - CRC: 4 bytes (big-endian CRC-32 over type + payload)
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from apng_ecs.core.checksum import chunk_checksum
from apng_ecs.errors import EncodingError, FormatError

# File format constants
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
SIGNATURE_SIZE = len(PNG_SIGNATURE)
CHUNK_OVERHEAD = 12  # length (4) + type (4) + crc (4)
MAX_CHUNK_LENGTH = 2**32 - 1

IHDR = "IHDR"
IDAT = "IDAT"
IEND = "IEND"
ACTL = "acTL"
FCTL = "fcTL"
FDAT = "fdAT"


def read_u32(buffer: bytes, offset: int) -> int:
    """Read a big-endian uint32 at offset, with bounds checking.

    Raises:
        FormatError: If the read would run past the end of the buffer
    """
    if offset < 0 or offset + 4 > len(buffer):
        raise FormatError(
            f"Cannot read uint32 at offset {offset}: buffer is {len(buffer)} bytes"
        )
    return int(struct.unpack_from(">I", buffer, offset)[0])


def read_u16(buffer: bytes, offset: int) -> int:
    """Read a big-endian uint16 at offset, with bounds checking.

    Raises:
        FormatError: If the read would run past the end of the buffer
    """
    if offset < 0 or offset + 2 > len(buffer):
        raise FormatError(
            f"Cannot read uint16 at offset {offset}: buffer is {len(buffer)} bytes"
        )
    return int(struct.unpack_from(">H", buffer, offset)[0])


def _encode_type(chunk_type: str) -> bytes:
    try:
        encoded = chunk_type.encode("ascii")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Chunk type must be ASCII, got {chunk_type!r}") from e
    if len(encoded) != 4:
        raise EncodingError(f"Chunk type must be 4 bytes, got {chunk_type!r}")
    return encoded


@dataclass(frozen=True)
class Chunk:
    """A single parsed chunk.

    Attributes:
        type: 4-character ASCII type tag (e.g. 'IHDR')
        data: Chunk payload
        crc: CRC stored in the source stream (None for chunks built in memory)
    """

    type: str
    data: bytes
    crc: int | None = None

    def __post_init__(self) -> None:
        """Validate Chunk fields."""
        if len(self.type) != 4:
            raise EncodingError(f"Chunk type must be 4 characters, got {self.type!r}")

    @property
    def length(self) -> int:
        """Payload length in bytes."""
        return len(self.data)

    def to_bytes(self) -> bytes:
        """Re-frame this chunk with a freshly computed CRC."""
        return build_chunk(self.type, self.data)


def build_chunk(chunk_type: str, payload: bytes) -> bytes:
    """Serialize a chunk: length + type + payload + CRC.

    Args:
        chunk_type: 4-character ASCII type tag
        payload: Chunk payload

    Returns:
        Framed chunk bytes

    Raises:
        EncodingError: If the type tag is invalid or the payload exceeds
            the 32-bit length ceiling
    """
    type_bytes = _encode_type(chunk_type)
    if len(payload) > MAX_CHUNK_LENGTH:
        raise EncodingError(
            f"Chunk {chunk_type} payload too large: "
            f"{len(payload)} bytes (max {MAX_CHUNK_LENGTH})"
        )
    payload = bytes(payload)
    crc = chunk_checksum(type_bytes, payload)
    return (
        struct.pack(">I", len(payload))
        + type_bytes
        + payload
        + struct.pack(">I", crc)
    )


def parse_chunks(
    buffer: bytes,
    *,
    skip_signature: bool = True,
    verify_crc: bool = True,
) -> list[Chunk]:
    """Parse a PNG byte stream into its chunks.

    Parsing stops after the first IEND chunk or when the buffer is exhausted.

    Args:
        buffer: PNG bytes
        skip_signature: Whether the buffer starts with the 8-byte signature.
            If True the signature is checked and skipped.
        verify_crc: Whether to compare each stored CRC with a recomputed one

    Returns:
        Chunks in source order

    Raises:
        FormatError: If the signature is wrong, a chunk is truncated, a type
            tag is not ASCII, or a CRC does not match
    """
    buffer = bytes(buffer)
    offset = 0
    if skip_signature:
        if buffer[:SIGNATURE_SIZE] != PNG_SIGNATURE:
            raise FormatError(
                f"Invalid PNG signature: expected {PNG_SIGNATURE!r}, "
                f"got {buffer[:SIGNATURE_SIZE]!r}"
            )
        offset = SIGNATURE_SIZE

    chunks: list[Chunk] = []
    end = len(buffer)
    while offset < end:
        if offset + 8 > end:
            raise FormatError(
                f"Truncated chunk header at offset {offset}: "
                f"need 8 bytes, got {end - offset}"
            )
        length = read_u32(buffer, offset)
        type_bytes = buffer[offset + 4 : offset + 8]
        try:
            chunk_type = type_bytes.decode("ascii")
        except UnicodeDecodeError as e:
            raise FormatError(
                f"Invalid chunk type {type_bytes!r} at offset {offset}"
            ) from e

        data_start = offset + 8
        data_end = data_start + length
        if data_end + 4 > end:
            raise FormatError(
                f"Chunk {chunk_type} at offset {offset} declares {length} bytes "
                f"but only {max(end - data_start - 4, 0)} remain"
            )
        data = buffer[data_start:data_end]
        stored_crc = read_u32(buffer, data_end)

        if verify_crc:
            expected = chunk_checksum(type_bytes, data)
            if stored_crc != expected:
                raise FormatError(
                    f"CRC mismatch in chunk {chunk_type} at offset {offset}: "
                    f"stored 0x{stored_crc:08X}, computed 0x{expected:08X}"
                )

        chunks.append(Chunk(type=chunk_type, data=data, crc=stored_crc))
        offset = data_end + 4

        if chunk_type == IEND:
            break

    return chunks


def is_png(data: bytes) -> bool:
    """Check whether data starts with the PNG signature."""
    return bytes(data[:SIGNATURE_SIZE]) == PNG_SIGNATURE
