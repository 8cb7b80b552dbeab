#!/usr/bin/env python3
"""Quickstart example using the high-level API.

This example demonstrates the simplest way to use the SDK:
- Read PNG files (or generate a few demo frames with Pillow)
- Merge them into one animated PNG with convert_to_apng()
- Inspect the result with get_animation_info()

File handling lives here, in the caller; the codec itself only sees bytes.
"""

from __future__ import annotations

import argparse
import io
import logging
from pathlib import Path

import numpy as np

from apng_ecs import APNGError, convert_to_apng, get_animation_info


def _demo_frames(count: int = 8, size: int = 64) -> list[bytes] | None:
    try:
        from PIL import Image
    except ImportError:
        return None
    frames = []
    for i in range(count):
        img = np.zeros((size, size, 3), dtype=np.uint8)
        x = (i * size) // count
        img[:, x : x + size // count] = (255, 128, 0)
        buf = io.BytesIO()
        Image.fromarray(img).save(buf, format="PNG")
        frames.append(buf.getvalue())
    return frames


def main() -> None:
    parser = argparse.ArgumentParser(description="Merge PNG files into an APNG")
    parser.add_argument("inputs", nargs="*", type=Path, help="PNG files in frame order")
    parser.add_argument("-o", "--output", type=Path, default=Path("animation.png"))
    parser.add_argument("-d", "--delay", type=int, default=None, help="Frame delay in ms")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if args.inputs:
        images = [p.read_bytes() for p in args.inputs]
    else:
        images = _demo_frames()
        if images is None:
            parser.error("no inputs given and Pillow is not installed for demo frames")

    try:
        result = convert_to_apng(images, args.delay)
    except APNGError as e:
        raise SystemExit(f"Conversion failed: {e}")

    args.output.write_bytes(result.binary)
    info = get_animation_info(result.binary)

    print(f"Saved: {args.output} ({len(result.binary)} bytes)")
    print(f"  Frames: {info.num_frames}  Size: {info.width}x{info.height}")
    print(f"  Delays: {info.delays}")
    print(f"  Processing time: {result.processing_time} ms")


if __name__ == "__main__":
    main()
