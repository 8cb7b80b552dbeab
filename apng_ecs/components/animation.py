"""Animation components: AnimationControl, FrameControl, EncodedFrame."""

from __future__ import annotations

from pydantic import Field

from apng_ecs.components.png import U32_MAX, Component

U16_MAX = 2**16 - 1
DELAY_DENOMINATOR = 1000

DISPOSE_OP_NONE = 0
BLEND_OP_SOURCE = 0


class AnimationControl(Component):
    """acTL parameters.

    Attributes:
        num_frames: Number of frames in the animation
        num_plays: Number of times to loop (0 = infinite)
    """

    num_frames: int = Field(ge=0, le=U32_MAX)
    num_plays: int = Field(default=0, ge=0, le=U32_MAX)


class FrameControl(Component):
    """fcTL parameters for one frame.

    Attributes:
        sequence_number: Position in the fcTL/fdAT sequence
        width: Frame width in pixels
        height: Frame height in pixels
        x_offset: Horizontal offset of the frame region
        y_offset: Vertical offset of the frame region
        delay_num: Frame delay numerator
        delay_den: Frame delay denominator (1000 = milliseconds)
        dispose_op: Disposal applied after the frame is shown
        blend_op: How the frame is composited onto the output buffer
    """

    sequence_number: int = Field(ge=0, le=U32_MAX)
    width: int = Field(ge=0, le=U32_MAX)
    height: int = Field(ge=0, le=U32_MAX)
    x_offset: int = Field(default=0, ge=0, le=U32_MAX)
    y_offset: int = Field(default=0, ge=0, le=U32_MAX)
    delay_num: int = Field(ge=0, le=U16_MAX)
    delay_den: int = Field(default=DELAY_DENOMINATOR, ge=0, le=U16_MAX)
    dispose_op: int = Field(default=DISPOSE_OP_NONE, ge=0, le=2)
    blend_op: int = Field(default=BLEND_OP_SOURCE, ge=0, le=1)


class EncodedFrame(Component):
    """Framed output of one animation frame: fcTL followed by IDAT or fdAT chunks.

    Attributes:
        data: Concatenated chunk bytes for the frame
        sequence_numbers: Sequence numbers consumed by this frame, in order
    """

    data: bytes
    sequence_numbers: list[int]
