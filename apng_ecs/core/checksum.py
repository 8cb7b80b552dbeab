"""CRC-32 checksum engine for PNG chunks.

Reflected CRC-32 (polynomial 0xEDB88320, seed 0xFFFFFFFF, final complement)
as used by PNG. The computation goes through zlib, which implements the same
table-driven algorithm; CRC_TABLE is the read-only lookup table for that
polynomial.

Example:
    >>> checksum(b"IEND")
    2923585666
"""

from __future__ import annotations

import zlib

import numpy as np

CRC32_POLYNOMIAL = 0xEDB88320


def _build_table() -> np.ndarray:
    """Compute the 256-entry CRC lookup table."""
    table = np.arange(256, dtype=np.uint32)
    for _ in range(8):
        table = np.where(
            table & 1,
            np.uint32(CRC32_POLYNOMIAL) ^ (table >> 1),
            table >> 1,
        ).astype(np.uint32)
    table.flags.writeable = False
    return table


CRC_TABLE = _build_table()


def checksum(data: bytes | bytearray | memoryview) -> int:
    """Compute the CRC-32 of a byte span.

    Args:
        data: Bytes to checksum

    Returns:
        Unsigned 32-bit CRC
    """
    return zlib.crc32(data) & 0xFFFFFFFF


def chunk_checksum(chunk_type: bytes, data: bytes) -> int:
    """CRC of a chunk, computed over its type tag followed by its payload."""
    return zlib.crc32(data, zlib.crc32(chunk_type)) & 0xFFFFFFFF
