"""Shared fixtures: minimal PNG files built independently of apng_ecs."""

from __future__ import annotations

import struct
import zlib
from typing import Callable

import numpy as np
import pytest

SIGNATURE = b"\x89PNG\r\n\x1a\n"


def raw_chunk(chunk_type: bytes, data: bytes, crc: int | None = None) -> bytes:
    """Frame a chunk using zlib's CRC-32."""
    if crc is None:
        crc = zlib.crc32(chunk_type + data) & 0xFFFFFFFF
    return struct.pack(">I", len(data)) + chunk_type + data + struct.pack(">I", crc)


def make_png(
    width: int = 1,
    height: int = 1,
    seed: int = 0,
    idat_parts: int = 1,
    with_ihdr: bool = True,
    extra_chunks: list[tuple[bytes, bytes]] | None = None,
) -> bytes:
    """Build a valid 8-bit RGB PNG with random pixels.

    Args:
        width: Image width
        height: Image height
        seed: Random seed for pixel values
        idat_parts: Number of IDAT chunks the zlib stream is split into
        with_ihdr: Whether to include the IHDR chunk
        extra_chunks: (type, data) chunks placed between IHDR and IDAT
    """
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, (height, width * 3), dtype=np.uint8)
    raw = b"".join(b"\x00" + row.tobytes() for row in pixels)
    compressed = zlib.compress(raw)

    step = max(1, -(-len(compressed) // idat_parts))
    parts = [compressed[i : i + step] for i in range(0, len(compressed), step)]

    out = [SIGNATURE]
    if with_ihdr:
        out.append(raw_chunk(b"IHDR", struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)))
    for chunk_type, data in extra_chunks or []:
        out.append(raw_chunk(chunk_type, data))
    out.extend(raw_chunk(b"IDAT", p) for p in parts)
    out.append(raw_chunk(b"IEND", b""))
    return b"".join(out)


@pytest.fixture
def png_factory() -> Callable[..., bytes]:
    """Factory building minimal PNGs; see make_png()."""
    return make_png


@pytest.fixture
def tiny_png() -> bytes:
    """A valid 1x1 RGB PNG."""
    return make_png()


@pytest.fixture
def two_tiny_pngs() -> list[bytes]:
    """Two different valid 1x1 RGB PNGs."""
    return [make_png(seed=1), make_png(seed=2)]


@pytest.fixture
def chunk_builder() -> Callable[..., bytes]:
    """Independent chunk framer; see raw_chunk()."""
    return raw_chunk
