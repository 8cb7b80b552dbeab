"""Tests for the chunk parsing systems."""

import struct
from typing import Callable

import pytest

from apng_ecs.components.png import ChunkStream, ImageData, ImageHeader
from apng_ecs.core.world import World
from apng_ecs.errors import FormatError
from apng_ecs.systems.parse import ExtractImageData, ParseChunks, read_header


class TestParseChunks:
    """Tests for ParseChunks system."""

    def test_components(self) -> None:
        system = ParseChunks()
        assert system.verify_crc is True
        assert system.produced_components() == [ChunkStream, ImageHeader]
        assert repr(system) == "ParseChunks(verify_crc=True)"

    def test_parses_stream_and_header(self, png_factory: Callable[..., bytes]) -> None:
        world = World()
        eid = world.spawn_frame(png_factory(width=5, height=3), 0)

        ParseChunks().run(world, [eid])

        stream = world.get_component(eid, ChunkStream)
        assert [c.type for c in stream.chunks] == ["IHDR", "IDAT", "IEND"]
        header = world.get_component(eid, ImageHeader)
        assert (header.width, header.height) == (5, 3)

    def test_no_header_component_without_ihdr(self, png_factory: Callable[..., bytes]) -> None:
        world = World()
        eid = world.spawn_frame(png_factory(with_ihdr=False), 0)

        ParseChunks().run(world, [eid])

        assert world.has_component(eid, ChunkStream)
        assert not world.has_component(eid, ImageHeader)

    def test_error_names_frame(self, two_tiny_pngs: list[bytes]) -> None:
        world = World()
        eids = world.spawn_frames([two_tiny_pngs[0], two_tiny_pngs[1][:20]])

        with pytest.raises(FormatError, match="Frame 1"):
            ParseChunks().run(world, eids)

    def test_short_ihdr(self, chunk_builder: Callable[..., bytes]) -> None:
        png = b"\x89PNG\r\n\x1a\n" + chunk_builder(b"IHDR", b"\x00\x00\x00\x01")
        world = World()
        eid = world.spawn_frame(png, 0)

        with pytest.raises(FormatError, match="Frame 0: Cannot read uint32"):
            ParseChunks().run(world, [eid])

    def test_crc_policy(self, tiny_png: bytes) -> None:
        corrupt = tiny_png[:-1] + bytes([tiny_png[-1] ^ 0xFF])
        world = World()
        eid = world.spawn_frame(corrupt, 0)

        with pytest.raises(FormatError, match="CRC mismatch"):
            ParseChunks().run(world, [eid])

        ParseChunks(verify_crc=False).run(world, [eid])
        assert world.has_component(eid, ChunkStream)


class TestReadHeader:
    def test_reads_width_and_height(self, png_factory: Callable[..., bytes]) -> None:
        from apng_ecs.core.chunks import parse_chunks

        stream = ChunkStream(chunks=parse_chunks(png_factory(width=300, height=2)))
        assert read_header(stream) == ImageHeader(width=300, height=2)

    def test_none_without_ihdr(self) -> None:
        assert read_header(ChunkStream(chunks=[])) is None


class TestExtractImageData:
    """Tests for ExtractImageData system."""

    def test_collects_all_idat_in_order(self, png_factory: Callable[..., bytes]) -> None:
        png = png_factory(width=16, height=16, idat_parts=4,
                          extra_chunks=[(b"tEXt", b"a\x00b")])
        world = World()
        eid = world.spawn_frame(png, 0)

        world.pipe(eid).to(ParseChunks()).to(ExtractImageData()).execute()

        stream = world.get_component(eid, ChunkStream)
        image_data = world.get_component(eid, ImageData)
        assert len(image_data.payloads) == 4
        assert image_data.payloads == [c.data for c in stream.chunks if c.type == "IDAT"]

    def test_non_contiguous_idat(self, chunk_builder: Callable[..., bytes]) -> None:
        """IDAT chunks separated by other chunks are still collected."""
        ihdr = struct.pack(">IIBBBBB", 1, 1, 8, 2, 0, 0, 0)
        png = (
            b"\x89PNG\r\n\x1a\n"
            + chunk_builder(b"IHDR", ihdr)
            + chunk_builder(b"IDAT", b"one")
            + chunk_builder(b"tEXt", b"x\x00y")
            + chunk_builder(b"IDAT", b"two")
            + chunk_builder(b"IEND", b"")
        )
        world = World()
        eid = world.spawn_frame(png, 0)

        world.pipe(eid).to(ParseChunks()).to(ExtractImageData()).execute()

        assert world.get_component(eid, ImageData).payloads == [b"one", b"two"]
