"""Tests for the SequenceFrames system."""


import pytest

from apng_ecs.components.animation import EncodedFrame
from apng_ecs.components.png import FrameIndex, ImageData
from apng_ecs.core.animation import parse_fctl, parse_fdat
from apng_ecs.core.chunks import parse_chunks
from apng_ecs.core.world import World
from apng_ecs.errors import EncodingError
from apng_ecs.systems.sequence import SequenceFrames


def _frame_world(payload_counts: list[int]) -> tuple[World, list[int]]:
    """World with one entity per frame carrying ImageData only."""
    world = World()
    eids = []
    for index, count in enumerate(payload_counts):
        eid = world.new_entity()
        world.add_component(eid, FrameIndex(index=index))
        world.add_component(
            eid, ImageData(payloads=[f"f{index}p{j}".encode() for j in range(count)])
        )
        eids.append(eid)
    return world, eids


class TestSequenceFrames:
    """Tests for SequenceFrames system."""

    def test_components(self) -> None:
        system = SequenceFrames(1, 1, 100)
        assert system.required_components() == [ImageData, FrameIndex]
        assert system.produced_components() == [EncodedFrame]
        assert repr(system) == "SequenceFrames(width=1, height=1, delay_ms=100)"

    def test_key_frame_keeps_idat(self) -> None:
        world, eids = _frame_world([2])

        SequenceFrames(4, 4, 100).run(world, eids)

        frame = world.get_component(eids[0], EncodedFrame)
        chunks = parse_chunks(frame.data, skip_signature=False)
        assert [c.type for c in chunks] == ["fcTL", "IDAT", "IDAT"]
        assert [c.data for c in chunks[1:]] == [b"f0p0", b"f0p1"]
        assert frame.sequence_numbers == [0]

    def test_later_frames_use_fdat(self) -> None:
        world, eids = _frame_world([1, 2])

        SequenceFrames(4, 4, 100).run(world, eids)

        frame = world.get_component(eids[1], EncodedFrame)
        chunks = parse_chunks(frame.data, skip_signature=False)
        assert [c.type for c in chunks] == ["fcTL", "fdAT", "fdAT"]
        assert parse_fctl(chunks[0].data).sequence_number == 1
        assert parse_fdat(chunks[1].data) == (2, b"f1p0")
        assert parse_fdat(chunks[2].data) == (3, b"f1p1")
        assert frame.sequence_numbers == [1, 2, 3]

    @pytest.mark.parametrize("counts", [[1], [1, 1], [3, 1, 2], [1, 4, 1, 1]])
    def test_sequence_numbers_have_no_gaps(self, counts: list[int]) -> None:
        world, eids = _frame_world(counts)

        SequenceFrames(1, 1, 50).run(world, eids)

        numbers = [
            n for eid in eids
            for n in world.get_component(eid, EncodedFrame).sequence_numbers
        ]
        expected = len(counts) + sum(counts[1:])
        assert numbers == list(range(expected))
        assert world.sequence.value == expected

    def test_fctl_fields(self) -> None:
        world, eids = _frame_world([1, 1])

        SequenceFrames(320, 240, 250).run(world, eids)

        for eid in eids:
            data = world.get_component(eid, EncodedFrame).data
            fctl = parse_fctl(parse_chunks(data, skip_signature=False)[0].data)
            assert (fctl.width, fctl.height) == (320, 240)
            assert (fctl.delay_num, fctl.delay_den) == (250, 1000)
            assert (fctl.x_offset, fctl.y_offset) == (0, 0)
            assert (fctl.dispose_op, fctl.blend_op) == (0, 0)

    def test_frame_without_idat(self, caplog: pytest.LogCaptureFixture) -> None:
        world, eids = _frame_world([1, 0])

        with caplog.at_level("WARNING"):
            SequenceFrames(1, 1, 100).run(world, eids)

        assert world.get_component(eids[1], EncodedFrame).sequence_numbers == [1]
        assert "Frame 1 has no IDAT chunks" in caplog.text

    def test_invalid_delay(self) -> None:
        world, eids = _frame_world([1])
        with pytest.raises(EncodingError):
            SequenceFrames(1, 1, 70000).run(world, eids)
