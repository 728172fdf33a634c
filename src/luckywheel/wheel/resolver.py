"""Map a final wheel angle to the slice under the pointer."""

import math

# Where the pointer sits in the wheel's own frame. Slice 0 starts at 0
# degrees and the pointer is drawn at the top, which the renderer places
# at 270 degrees. Re-derive this if the renderer's zero direction changes.
POINTER_ANGLE = 270.0


def slice_width(slice_count: int) -> float:
    """Angular width of one slice in degrees."""
    if slice_count < 1:
        raise ValueError(f"slice_count must be positive, got {slice_count}")
    return 360.0 / slice_count


def resolve_winner(final_angle: float, slice_count: int) -> int:
    """Return the index of the slice under the pointer.

    The angle is cumulative; only its value mod 360 matters. A pointer
    exactly on a boundary picks the slice that starts there.

    Args:
        final_angle: Wheel rotation in degrees when it stopped
        slice_count: Number of slices on the wheel

    Returns:
        Slice index in [0, slice_count - 1]
    """
    width = slice_width(slice_count)
    normalized = final_angle % 360.0
    pointer = (POINTER_ANGLE - normalized + 360.0) % 360.0
    index = math.floor(pointer / width)
    # Float error can push pointer/width up to slice_count
    return min(max(index, 0), slice_count - 1)
