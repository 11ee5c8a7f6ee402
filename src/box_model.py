"""
Core data structures for boxes, cuts, and cutter poses.
"""
import math
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

import numpy as np
from scipy.spatial.transform import Rotation

from rotation_algebra import (
    EULER_ORDER,
    axis_index,
    euler_to_rotation,
    migrate_rotation,
    visual_center,
)

MIN_CUT_ANGLE_DEG = 0.0
MAX_CUT_ANGLE_DEG = 89.0


class CutFace(Enum):
    """The six axis-aligned faces of a box (box-centered frame)."""
    LEFT = "left"      # -X
    RIGHT = "right"    # +X
    BOTTOM = "bottom"  # -Y
    TOP = "top"        # +Y
    BACK = "back"      # -Z
    FRONT = "front"    # +Z


class CutEdge(Enum):
    """Adjacent face whose shared edge the blade enters from."""
    TOP = "top"
    BOTTOM = "bottom"
    FRONT = "front"
    BACK = "back"


class MiterEdge(Enum):
    """The twelve box edges, named by the two faces they join."""
    TOP_FRONT = "top-front"
    TOP_BACK = "top-back"
    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_FRONT = "bottom-front"
    BOTTOM_BACK = "bottom-back"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"
    FRONT_LEFT = "front-left"
    FRONT_RIGHT = "front-right"
    BACK_LEFT = "back-left"
    BACK_RIGHT = "back-right"


def _new_id() -> str:
    return str(uuid.uuid4())


def clamp_cut_angle(angle: float) -> float:
    """Clamp a cut angle (degrees) to the editor's [0, 89] range."""
    return max(MIN_CUT_ANGLE_DEG, min(MAX_CUT_ANGLE_DEG, float(angle)))


@dataclass
class CutterConfig:
    """Tunables shared by both cutter models."""

    cutter_scale: float = 3.0  # cutter edge = scale * largest box dimension
    probe_sweep: float = 0.06  # m, probe offset from the pivot toward the face center
    probe_inset: float = 0.002  # m, probe offset inside the entry face
    containment_tolerance: float = 1e-6


@dataclass
class BoxCut:
    """
    Angled cut on one face (face-edge model).

    Attributes:
        face: Face the cut starts from
        angle: Degrees; 0 = square shoulder, 45 = miter. Range 0-89
        edge: Adjacent face the blade enters from (None = per-face default)
        depth: Meters from the face (None = full through-cut)
        cut_id: Unique identifier
    """
    face: CutFace
    angle: float
    edge: Optional[CutEdge] = None
    depth: Optional[float] = None
    cut_id: str = field(default_factory=_new_id)

    def __post_init__(self):
        self.face = CutFace(self.face)
        if self.edge is not None:
            self.edge = CutEdge(self.edge)

    def validate(self, dimensions: Optional[np.ndarray] = None) -> List[str]:
        """Check the cut against the editor's input ranges.

        Returns list of issue strings (empty = ok).
        """
        # Local import: cut_geometry depends on this module.
        from cut_geometry import FACE_CONFIG, FACE_EDGES

        issues = []
        if not math.isfinite(self.angle):
            issues.append(f"Cut {self.cut_id}: angle is not finite")
        elif not MIN_CUT_ANGLE_DEG <= self.angle <= MAX_CUT_ANGLE_DEG:
            issues.append(
                f"Cut {self.cut_id}: angle {self.angle:.2f} outside "
                f"[{MIN_CUT_ANGLE_DEG:.0f}, {MAX_CUT_ANGLE_DEG:.0f}]"
            )
        if self.edge is not None and self.edge not in FACE_EDGES[self.face]:
            allowed = ", ".join(e.value for e in FACE_EDGES[self.face])
            issues.append(
                f"Cut {self.cut_id}: edge '{self.edge.value}' is not adjacent "
                f"to face '{self.face.value}' (expected one of: {allowed})"
            )
        if self.depth is not None:
            if not math.isfinite(self.depth) or self.depth <= 0:
                issues.append(f"Cut {self.cut_id}: depth must be positive")
            elif dimensions is not None:
                axis = FACE_CONFIG[self.face].normal_axis
                full = float(np.asarray(dimensions, dtype=float)[axis_index(axis)])
                if self.depth > full:
                    issues.append(
                        f"Cut {self.cut_id}: depth {self.depth:.4f} exceeds "
                        f"box dimension {full:.4f}"
                    )
        return issues

    def to_dict(self) -> Dict:
        data = {"id": self.cut_id, "face": self.face.value, "angle": self.angle}
        if self.edge is not None:
            data["edge"] = self.edge.value
        if self.depth is not None:
            data["depth"] = self.depth
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "BoxCut":
        return cls(
            face=CutFace(data["face"]),
            angle=float(data["angle"]),
            edge=CutEdge(data["edge"]) if data.get("edge") is not None else None,
            depth=float(data["depth"]) if data.get("depth") is not None else None,
            cut_id=data.get("id") or _new_id(),
        )


@dataclass
class BetaMiterCut:
    """
    Angled cut hinged on one of the twelve box edges (edge-pivot model).

    Attributes:
        edge: Box edge the cutter pivots around
        entry_face: Face at that edge the blade enters through
        angle: Degrees
        cut_id: Unique identifier
    """
    edge: MiterEdge
    entry_face: CutFace
    angle: float
    cut_id: str = field(default_factory=_new_id)

    def __post_init__(self):
        self.edge = MiterEdge(self.edge)
        self.entry_face = CutFace(self.entry_face)

    def validate(self) -> List[str]:
        from miter_beta import edge_faces

        issues = []
        if not math.isfinite(self.angle):
            issues.append(f"Miter {self.cut_id}: angle is not finite")
        if self.entry_face not in edge_faces(self.edge):
            issues.append(
                f"Miter {self.cut_id}: entry face '{self.entry_face.value}' "
                f"does not meet edge '{self.edge.value}'"
            )
        return issues

    def to_dict(self) -> Dict:
        return {
            "id": self.cut_id,
            "edge": self.edge.value,
            "entryFace": self.entry_face.value,
            "angle": self.angle,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "BetaMiterCut":
        return cls(
            edge=MiterEdge(data["edge"]),
            entry_face=CutFace(data["entryFace"]),
            angle=float(data["angle"]),
            cut_id=data.get("id") or _new_id(),
        )


Cut = Union[BoxCut, BetaMiterCut]


@dataclass
class CutterPose:
    """
    Pose of an oversized cutter solid, in the box-centered frame.

    Consumed as the second operand of a boolean subtraction against the
    box's base solid, and reused for the removed-material overlay.
    """
    position: np.ndarray  # (3,) cutter center
    rotation: np.ndarray  # (3,) Euler XYZ, radians
    scale: np.ndarray     # (3,) cutter extents

    def as_rotation(self) -> Rotation:
        return euler_to_rotation(self.rotation)

    def quaternion(self) -> np.ndarray:
        """Rotation as a unit quaternion (x, y, z, w)."""
        return self.as_rotation().as_quat()

    def rotation_matrix(self) -> np.ndarray:
        return self.as_rotation().as_matrix()

    def to_matrix(self) -> np.ndarray:
        """4x4 rigid transform (rotation + translation, no scale)."""
        m = np.eye(4)
        m[:3, :3] = self.rotation_matrix()
        m[:3, 3] = self.position
        return m

    def contains_point(self, point: np.ndarray, tolerance: float = 1e-6) -> bool:
        """True if point lies inside the cutter's oriented box."""
        local = self.as_rotation().inv().apply(
            np.asarray(point, dtype=float) - self.position
        )
        half = np.asarray(self.scale, dtype=float) / 2.0 + tolerance
        return bool(np.all(np.abs(local) <= half))

    def to_dict(self) -> Dict:
        return {
            "position": [float(v) for v in self.position],
            "rotation": [float(v) for v in self.rotation],
            "rotation_order": EULER_ORDER,
            "scale": [float(v) for v in self.scale],
        }


@dataclass
class Box:
    """
    A rectangular prism in the assembled structure.

    Attributes:
        box_id: Unique identifier
        position: Local minimum corner (meters), in the box's unrotated frame
        dimensions: (width, height, depth) in meters, all positive
        rotation: Euler angles (rx, ry, rz) in radians, XYZ order
        cuts: Face-edge and edge-pivot cuts, in application order
        material_id: Material catalog key
    """
    box_id: str = field(default_factory=_new_id)
    position: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 0.0]))
    dimensions: np.ndarray = field(default_factory=lambda: np.array([1.0, 1.0, 1.0]))
    rotation: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 0.0]))
    cuts: List[Cut] = field(default_factory=list)
    material_id: str = "pine"
    label: Optional[str] = None
    group_id: Optional[str] = None
    locked: bool = False
    hidden: bool = False

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=float)
        self.dimensions = np.asarray(self.dimensions, dtype=float)
        self.rotation = np.asarray(self.rotation, dtype=float)

    @property
    def width(self) -> float:
        return float(self.dimensions[0])

    @property
    def height(self) -> float:
        return float(self.dimensions[1])

    @property
    def depth(self) -> float:
        return float(self.dimensions[2])

    def visual_center(self) -> np.ndarray:
        """World-space centroid (derived from corner + rotation)."""
        return visual_center(self.position, self.dimensions, self.rotation)

    @property
    def face_cuts(self) -> List[BoxCut]:
        return [c for c in self.cuts if isinstance(c, BoxCut)]

    @property
    def miter_cuts(self) -> List[BetaMiterCut]:
        return [c for c in self.cuts if isinstance(c, BetaMiterCut)]

    def add_cut(self, cut: Cut) -> Cut:
        """Attach a cut to this box."""
        self.cuts.append(cut)
        return cut

    def remove_cut(self, cut_id: str) -> bool:
        """Remove a cut by id. Returns False if no cut matched."""
        for i, cut in enumerate(self.cuts):
            if cut.cut_id == cut_id:
                del self.cuts[i]
                return True
        return False

    def get_cut(self, cut_id: str) -> Optional[Cut]:
        for cut in self.cuts:
            if cut.cut_id == cut_id:
                return cut
        return None

    def validate(self) -> Tuple[bool, List[str]]:
        """
        Basic validation of the box and its cuts.

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []

        for name, arr in (
            ("position", self.position),
            ("dimensions", self.dimensions),
            ("rotation", self.rotation),
        ):
            if arr.shape != (3,):
                errors.append(f"Box {self.box_id}: {name} must have 3 components")
            elif not np.all(np.isfinite(arr)):
                errors.append(f"Box {self.box_id}: {name} has non-finite values")

        if self.dimensions.shape == (3,) and np.any(self.dimensions <= 0):
            errors.append(f"Box {self.box_id}: dimensions must be positive")

        for cut in self.cuts:
            if isinstance(cut, BoxCut):
                errors.extend(cut.validate(self.dimensions))
            else:
                errors.extend(cut.validate())

        return (len(errors) == 0, errors)

    def to_dict(self) -> Dict:
        """Plain snapshot in the editor's record shape."""
        data = {
            "id": self.box_id,
            "position": dict(zip("xyz", (float(v) for v in self.position))),
            "dimensions": {
                "width": self.width,
                "height": self.height,
                "depth": self.depth,
            },
            "rotation": dict(zip("xyz", (float(v) for v in self.rotation))),
            "materialId": self.material_id,
        }
        if self.label is not None:
            data["label"] = self.label
        if self.group_id is not None:
            data["groupId"] = self.group_id
        if self.locked:
            data["locked"] = True
        if self.hidden:
            data["hidden"] = True
        if self.face_cuts:
            data["cuts"] = [c.to_dict() for c in self.face_cuts]
        if self.miter_cuts:
            data["betaMiterCuts"] = [c.to_dict() for c in self.miter_cuts]
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "Box":
        pos = data.get("position", {})
        dims = data["dimensions"]
        cuts: List[Cut] = [BoxCut.from_dict(c) for c in data.get("cuts") or []]
        cuts.extend(BetaMiterCut.from_dict(c) for c in data.get("betaMiterCuts") or [])
        return cls(
            box_id=data.get("id") or _new_id(),
            position=np.array([
                float(pos.get("x", 0.0)),
                float(pos.get("y", 0.0)),
                float(pos.get("z", 0.0)),
            ]),
            dimensions=np.array([
                float(dims["width"]),
                float(dims["height"]),
                float(dims["depth"]),
            ]),
            rotation=migrate_rotation(data.get("rotation", 0.0)),
            cuts=cuts,
            material_id=data.get("materialId", "pine"),
            label=data.get("label"),
            group_id=data.get("groupId"),
            locked=bool(data.get("locked", False)),
            hidden=bool(data.get("hidden", False)),
        )
