"""
Edge-pivot ("beta miter") cut model.

The cutter hinges directly on one of the twelve box edges. Rotating the
outward cutter by +angle or -angle about that edge are both plausible
wedges, so the sign is resolved numerically: a probe point just inside
the box, next to the pivot edge on the entry-face side, must end up inside
the chosen cutter. Ties and non-matches fall back to +angle.
"""
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

import numpy as np
from scipy.spatial.transform import Rotation

from box_model import BetaMiterCut, CutFace, CutterConfig, CutterPose, MiterEdge
from rotation_algebra import axis_index, axis_vector, rotation_to_euler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EdgeConfig:
    """Edge direction and the signs of its two fixed coordinates."""
    axis: str
    x: int = 0
    y: int = 0
    z: int = 0

    @property
    def signs(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)


EDGE_CONFIG: Mapping[MiterEdge, EdgeConfig] = MappingProxyType({
    MiterEdge.TOP_FRONT:    EdgeConfig("x", y=1, z=1),
    MiterEdge.TOP_BACK:     EdgeConfig("x", y=1, z=-1),
    MiterEdge.BOTTOM_FRONT: EdgeConfig("x", y=-1, z=1),
    MiterEdge.BOTTOM_BACK:  EdgeConfig("x", y=-1, z=-1),
    MiterEdge.TOP_LEFT:     EdgeConfig("z", x=-1, y=1),
    MiterEdge.TOP_RIGHT:    EdgeConfig("z", x=1, y=1),
    MiterEdge.BOTTOM_LEFT:  EdgeConfig("z", x=-1, y=-1),
    MiterEdge.BOTTOM_RIGHT: EdgeConfig("z", x=1, y=-1),
    MiterEdge.FRONT_LEFT:   EdgeConfig("y", x=-1, z=1),
    MiterEdge.FRONT_RIGHT:  EdgeConfig("y", x=1, z=1),
    MiterEdge.BACK_LEFT:    EdgeConfig("y", x=-1, z=-1),
    MiterEdge.BACK_RIGHT:   EdgeConfig("y", x=1, z=-1),
})

FACE_NORMAL: Mapping[CutFace, Tuple[float, float, float]] = MappingProxyType({
    CutFace.LEFT:   (-1.0, 0.0, 0.0),
    CutFace.RIGHT:  (1.0, 0.0, 0.0),
    CutFace.BOTTOM: (0.0, -1.0, 0.0),
    CutFace.TOP:    (0.0, 1.0, 0.0),
    CutFace.BACK:   (0.0, 0.0, -1.0),
    CutFace.FRONT:  (0.0, 0.0, 1.0),
})

FACE_TO_EDGES: Mapping[CutFace, Tuple[MiterEdge, ...]] = MappingProxyType({
    CutFace.LEFT: (MiterEdge.TOP_LEFT, MiterEdge.BOTTOM_LEFT,
                   MiterEdge.FRONT_LEFT, MiterEdge.BACK_LEFT),
    CutFace.RIGHT: (MiterEdge.TOP_RIGHT, MiterEdge.BOTTOM_RIGHT,
                    MiterEdge.FRONT_RIGHT, MiterEdge.BACK_RIGHT),
    CutFace.TOP: (MiterEdge.TOP_FRONT, MiterEdge.TOP_BACK,
                  MiterEdge.TOP_LEFT, MiterEdge.TOP_RIGHT),
    CutFace.BOTTOM: (MiterEdge.BOTTOM_FRONT, MiterEdge.BOTTOM_BACK,
                     MiterEdge.BOTTOM_LEFT, MiterEdge.BOTTOM_RIGHT),
    CutFace.FRONT: (MiterEdge.TOP_FRONT, MiterEdge.BOTTOM_FRONT,
                    MiterEdge.FRONT_LEFT, MiterEdge.FRONT_RIGHT),
    CutFace.BACK: (MiterEdge.TOP_BACK, MiterEdge.BOTTOM_BACK,
                   MiterEdge.BACK_LEFT, MiterEdge.BACK_RIGHT),
})

BETA_MITER_EDGE_LABELS: Mapping[MiterEdge, str] = MappingProxyType({
    edge: " + ".join(part.capitalize() for part in edge.value.split("-"))
    for edge in MiterEdge
})


def edge_faces(edge: MiterEdge) -> Tuple[CutFace, CutFace]:
    """The two faces that meet at an edge."""
    first, second = MiterEdge(edge).value.split("-")
    return CutFace(first), CutFace(second)


def face_normal(face: CutFace) -> np.ndarray:
    return np.array(FACE_NORMAL[CutFace(face)])


def edge_pivot(edge: MiterEdge, dimensions: np.ndarray) -> np.ndarray:
    """Midpoint of an edge in the box-centered frame."""
    half = np.asarray(dimensions, dtype=float) / 2.0
    return EDGE_CONFIG[MiterEdge(edge)].signs * half


def face_center(face: CutFace, dimensions: np.ndarray) -> np.ndarray:
    half = np.asarray(dimensions, dtype=float) / 2.0
    return face_normal(face) * half


def _sweep_direction(
    pivot: np.ndarray,
    center: np.ndarray,
    edge_dir: np.ndarray,
    normal: np.ndarray,
) -> np.ndarray:
    """Unit direction from the pivot toward the face center, orthogonal to
    both the edge and the entry normal. Falls back to +X when degenerate."""
    toward = center - pivot
    toward = toward - edge_dir * float(toward @ edge_dir)
    toward = toward - normal * float(toward @ normal)
    length = float(np.linalg.norm(toward))
    if length < 1e-12:
        return np.array([1.0, 0.0, 0.0])
    return toward / length


def probe_point(
    dimensions: np.ndarray,
    cut: BetaMiterCut,
    config: Optional[CutterConfig] = None,
) -> np.ndarray:
    """Sample point used to pick the rotation sign.

    Sits just inside the entry face, swept slightly from the pivot edge
    toward the face center.
    """
    if config is None:
        config = CutterConfig()
    edge_dir = axis_vector(EDGE_CONFIG[cut.edge].axis)
    normal = face_normal(cut.entry_face)
    pivot = edge_pivot(cut.edge, dimensions)
    sweep = _sweep_direction(pivot, face_center(cut.entry_face, dimensions), edge_dir, normal)
    return pivot + sweep * config.probe_sweep - normal * config.probe_inset


def _candidate(
    pivot: np.ndarray,
    outside: np.ndarray,
    edge_dir: np.ndarray,
    angle: float,
    cutter_size: float,
) -> CutterPose:
    rotation = Rotation.from_rotvec(edge_dir * angle)
    return CutterPose(
        position=pivot + rotation.apply(outside),
        rotation=rotation_to_euler(rotation),
        scale=np.full(3, cutter_size),
    )


def beta_miter_cutter_pose(
    dimensions: np.ndarray,
    cut: BetaMiterCut,
    config: Optional[CutterConfig] = None,
) -> CutterPose:
    """Cutter pose for an edge-pivot cut.

    Args:
        dimensions: (width, height, depth) of the box.
        cut: Edge-pivot cut descriptor.
        config: Cutter tunables (defaults if None).

    Returns:
        CutterPose in the box-centered frame.
    """
    if config is None:
        config = CutterConfig()

    dims = np.asarray(dimensions, dtype=float)
    edge_dir = axis_vector(EDGE_CONFIG[cut.edge].axis)
    pivot = edge_pivot(cut.edge, dims)
    cutter_size = float(np.max(dims)) * config.cutter_scale
    outside = face_normal(cut.entry_face) * (cutter_size / 2.0)
    angle = float(np.radians(cut.angle))

    sample = probe_point(dims, cut, config)
    plus = _candidate(pivot, outside, edge_dir, angle, cutter_size)
    minus = _candidate(pivot, outside, edge_dir, -angle, cutter_size)
    plus_hits = plus.contains_point(sample, config.containment_tolerance)
    minus_hits = minus.contains_point(sample, config.containment_tolerance)

    if plus_hits or not minus_hits:
        chosen, sign = plus, "+"
        if plus_hits == minus_hits:
            logger.debug(
                "Miter %s/%s: probe inconclusive (hits=%s), using +angle",
                cut.edge.value, cut.entry_face.value, plus_hits,
            )
    else:
        chosen, sign = minus, "-"

    logger.debug(
        "Miter %s via %s %.1f deg: %sangle, center=%s",
        cut.edge.value, cut.entry_face.value, cut.angle, sign, chosen.position,
    )
    return chosen


def face_from_normal(normal) -> Optional[CutFace]:
    """Face whose normal dominates the given vector; None on a tie."""
    n = np.asarray(normal, dtype=float)
    a = np.abs(n)
    if a[0] > a[1] and a[0] > a[2]:
        return CutFace.RIGHT if n[0] > 0 else CutFace.LEFT
    if a[1] > a[0] and a[1] > a[2]:
        return CutFace.TOP if n[1] > 0 else CutFace.BOTTOM
    if a[2] > a[0] and a[2] > a[1]:
        return CutFace.FRONT if n[2] > 0 else CutFace.BACK
    return None


def nearest_miter_edge_from_face_point(
    face: CutFace,
    point: np.ndarray,
    dimensions: np.ndarray,
) -> MiterEdge:
    """Closest of the face's four edges to a (box-centered) point.

    Distance is measured to the infinite line through each edge.
    """
    p = np.asarray(point, dtype=float)
    best = None
    best_dist = float("inf")
    for edge in FACE_TO_EDGES[CutFace(face)]:
        line_point = edge_pivot(edge, dimensions)
        line_dir = axis_vector(EDGE_CONFIG[edge].axis)
        dist = float(np.linalg.norm(np.cross(p - line_point, line_dir)))
        if dist < best_dist:
            best, best_dist = edge, dist
    return best


def beta_miter_edge_line(
    edge: MiterEdge,
    dimensions: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray]:
    """(start, end) of an edge in the box-centered frame, for pivot guides."""
    config = EDGE_CONFIG[MiterEdge(edge)]
    half = np.asarray(dimensions, dtype=float) / 2.0
    idx = axis_index(config.axis)
    start = config.signs * half
    end = start.copy()
    start[idx] = -half[idx]
    end[idx] = half[idx]
    return start, end
