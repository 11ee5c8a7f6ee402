"""
Face-edge cut model: cutter pose for an angled cut on one box face.

The cutter is an oversized cube placed directly outside the face, then
rotated by the cut angle around an axis through the pivot edge. The pivot
edge is the face edge OPPOSITE the one the blade enters from, so that edge
stays intact for every angle. At 0 deg the cutter's near face is coplanar
with the box face and nothing is removed.

All coordinates are relative to the box center (how the CSG base solid is
centered). Box-centered frame:
- top/bottom: normal along Y, pivot around X (cuts across width)
- front/back: normal along Z, pivot around X (cuts across width)
- left/right: normal along X, pivot around Y (miter seen from above)
"""
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

import numpy as np

from box_model import BoxCut, CutEdge, CutFace, CutterConfig, CutterPose
from rotation_algebra import axis_index, rotate_vector_by_euler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FaceConfig:
    """Sign conventions for one face."""
    normal_axis: str   # axis of the outward normal
    normal_dir: int    # +1 / -1 along normal_axis
    pivot_axis: str    # axis the cut wedge rotates around
    rotation_sign: int  # angle sign when the pivot sits on the positive edge


FACE_CONFIG: Mapping[CutFace, FaceConfig] = MappingProxyType({
    CutFace.TOP:    FaceConfig("y",  1, "x",  1),
    CutFace.BOTTOM: FaceConfig("y", -1, "x", -1),
    CutFace.FRONT:  FaceConfig("z",  1, "x", -1),
    CutFace.BACK:   FaceConfig("z", -1, "x",  1),
    CutFace.RIGHT:  FaceConfig("x",  1, "y", -1),
    CutFace.LEFT:   FaceConfig("x", -1, "y",  1),
})

# Entry edges available per face: the two neighbours along the edge axis.
FACE_EDGES: Mapping[CutFace, Tuple[CutEdge, CutEdge]] = MappingProxyType({
    CutFace.TOP:    (CutEdge.FRONT, CutEdge.BACK),
    CutFace.BOTTOM: (CutEdge.FRONT, CutEdge.BACK),
    CutFace.FRONT:  (CutEdge.TOP, CutEdge.BOTTOM),
    CutFace.BACK:   (CutEdge.TOP, CutEdge.BOTTOM),
    CutFace.LEFT:   (CutEdge.FRONT, CutEdge.BACK),
    CutFace.RIGHT:  (CutEdge.FRONT, CutEdge.BACK),
})

DEFAULT_EDGE: Mapping[CutFace, CutEdge] = MappingProxyType({
    CutFace.TOP:    CutEdge.BACK,
    CutFace.BOTTOM: CutEdge.BACK,
    CutFace.FRONT:  CutEdge.BOTTOM,
    CutFace.BACK:   CutEdge.BOTTOM,
    CutFace.LEFT:   CutEdge.BACK,
    CutFace.RIGHT:  CutEdge.BACK,
})

# Direction of each entry edge along its sweep axis.
EDGE_DIR: Mapping[CutEdge, int] = MappingProxyType({
    CutEdge.FRONT:   1,  # +Z
    CutEdge.BACK:   -1,  # -Z
    CutEdge.TOP:     1,  # +Y
    CutEdge.BOTTOM: -1,  # -Y
})


def other_axis(a: str, b: str) -> str:
    """The axis perpendicular to both a and b."""
    remaining = {"x", "y", "z"} - {a, b}
    if len(remaining) != 1:
        raise ValueError(f"Axes must be distinct world axes: {a!r}, {b!r}")
    return remaining.pop()


def edge_axis(face: CutFace) -> str:
    """Axis the entry edges sit along, orthogonal to normal and pivot."""
    config = FACE_CONFIG[CutFace(face)]
    return other_axis(config.normal_axis, config.pivot_axis)


def resolve_edge(cut: BoxCut) -> CutEdge:
    """Entry edge of a cut, falling back to the face default."""
    return cut.edge if cut.edge is not None else DEFAULT_EDGE[cut.face]


def face_cut_pivot(
    dimensions: np.ndarray,
    cut: BoxCut,
) -> Tuple[np.ndarray, int]:
    """Pivot point of a face cut and its sign along the edge axis.

    The pivot lies on the face plane, on the edge opposite the blade entry.
    A partial-depth cut moves it inward by (full dimension - depth).

    Returns:
        (pivot, pivot_edge_sign)
    """
    dims = np.asarray(dimensions, dtype=float)
    half = dims / 2.0
    config = FACE_CONFIG[cut.face]
    n_idx = axis_index(config.normal_axis)
    e_idx = axis_index(edge_axis(cut.face))

    pivot_edge_sign = -EDGE_DIR[resolve_edge(cut)]

    pivot = np.zeros(3)
    pivot[n_idx] = config.normal_dir * half[n_idx]
    pivot[e_idx] = pivot_edge_sign * half[e_idx]

    if cut.depth is not None:
        inset = dims[n_idx] - cut.depth
        pivot[n_idx] -= config.normal_dir * inset

    return pivot, pivot_edge_sign


def face_cut_rotation_angle(cut: BoxCut) -> float:
    """Signed rotation (radians) of the cutter around the face's pivot axis."""
    pivot_edge_sign = -EDGE_DIR[resolve_edge(cut)]
    return pivot_edge_sign * FACE_CONFIG[cut.face].rotation_sign * np.radians(cut.angle)


def face_cutter_pose(
    dimensions: np.ndarray,
    cut: BoxCut,
    config: Optional[CutterConfig] = None,
) -> CutterPose:
    """Cutter pose that, subtracted from the box, produces the face cut.

    Args:
        dimensions: (width, height, depth) of the box.
        cut: Face-edge cut descriptor.
        config: Cutter tunables (defaults if None).

    Returns:
        CutterPose in the box-centered frame.
    """
    if config is None:
        config = CutterConfig()

    dims = np.asarray(dimensions, dtype=float)
    face_config = FACE_CONFIG[cut.face]
    cutter_size = float(np.max(dims)) * config.cutter_scale

    pivot, _ = face_cut_pivot(dims, cut)
    rotation_angle = face_cut_rotation_angle(cut)

    rotation = np.zeros(3)
    rotation[axis_index(face_config.pivot_axis)] = rotation_angle

    # Cutter starts directly outside the face, then swings about the pivot.
    rel = np.zeros(3)
    rel[axis_index(face_config.normal_axis)] = face_config.normal_dir * cutter_size / 2.0
    position = pivot + rotate_vector_by_euler(rel, rotation)

    logger.debug(
        "Face cut %s/%s %.1f deg: pivot=%s angle=%.4f rad",
        cut.face.value, resolve_edge(cut).value, cut.angle, pivot, rotation_angle,
    )

    return CutterPose(
        position=position,
        rotation=rotation,
        scale=np.full(3, cutter_size),
    )
