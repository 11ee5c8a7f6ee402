"""
Rigid-body rotation of box selections.

No group transform is ever stored: every box keeps its own corner and
rotation, and a group rotation is applied box by box around a shared
pivot (by default the centroid of the boxes' visual centers).
"""
import logging
from dataclasses import replace
from typing import List, Optional, Sequence

import numpy as np

from box_model import Box
from rotation_algebra import (
    ZERO_ROTATION,
    compose_rotation,
    corner_from_visual_center,
    rotate_point_around_axis,
)

logger = logging.getLogger(__name__)

# swap code -> permutation of (width, height, depth)
_SWAPS = {
    "wd": (2, 1, 0),  # about the vertical axis
    "hd": (0, 2, 1),  # about the left-right axis
    "wh": (1, 0, 2),  # about the front-back axis
}


def selection_pivot(boxes: Sequence[Box]) -> np.ndarray:
    """Centroid of the boxes' visual centers."""
    if not boxes:
        raise ValueError("Cannot compute a pivot for an empty selection")
    return np.mean([b.visual_center() for b in boxes], axis=0)


def rotate_box(box: Box, pivot: np.ndarray, axis: str, angle: float) -> Box:
    """Rotate one box about a world axis through pivot.

    Returns a new Box; the input is left untouched.
    """
    new_center = rotate_point_around_axis(box.visual_center(), pivot, axis, angle)
    new_rotation = compose_rotation(box.rotation, axis, angle)
    new_position = corner_from_visual_center(new_center, box.dimensions, new_rotation)
    return replace(
        box,
        position=new_position,
        rotation=new_rotation,
        cuts=[replace(c) for c in box.cuts],
    )


def rotate_boxes(
    boxes: Sequence[Box],
    axis: str,
    angle: float,
    pivot: Optional[np.ndarray] = None,
) -> List[Box]:
    """Rotate a selection rigidly about a shared pivot.

    Args:
        boxes: Boxes to rotate together.
        axis: World axis name ("x", "y" or "z").
        angle: Radians, right-handed.
        pivot: Rotation center; defaults to selection_pivot(boxes).

    Returns:
        New Box records in the same order.
    """
    if not boxes:
        return []
    if pivot is None:
        pivot = selection_pivot(boxes)
    pivot = np.asarray(pivot, dtype=float)

    rotated = [rotate_box(b, pivot, axis, angle) for b in boxes]
    logger.info(
        "Rotated %d boxes by %.2f deg about %s through %s",
        len(rotated), np.degrees(angle), axis, pivot,
    )
    return rotated


def swap_dimensions(box: Box, swap: str) -> Box:
    """Quarter-turn a box by swapping two of its dimensions.

    Resets rotation to identity. Swaps that change the height drop the box
    back onto the floor (y = 0).
    """
    try:
        order = _SWAPS[swap]
    except KeyError:
        raise ValueError(f"Unknown dimension swap: {swap!r}") from None

    position = box.position.copy()
    if swap != "wd":
        position[1] = 0.0
    return replace(
        box,
        position=position,
        dimensions=box.dimensions[list(order)],
        rotation=ZERO_ROTATION.copy(),
        cuts=[replace(c) for c in box.cuts],
    )
