"""
Cutter dispatch and solids for the external CSG evaluator.

A box's cuts are a tagged union of face-edge (BoxCut) and edge-pivot
(BetaMiterCut) descriptors. Each maps to a cutter pose through its own
model; the same pose drives the subtraction and the removed-wedge overlay.
"""
import logging
from typing import List, Optional, Tuple

import numpy as np
import trimesh

from box_model import BetaMiterCut, Box, BoxCut, Cut, CutterConfig, CutterPose
from cut_geometry import face_cutter_pose
from miter_beta import beta_miter_cutter_pose
from rotation_algebra import euler_to_rotation

logger = logging.getLogger(__name__)


def cutter_pose(
    dimensions: np.ndarray,
    cut: Cut,
    config: Optional[CutterConfig] = None,
) -> CutterPose:
    """Cutter pose for either cut descriptor type."""
    if isinstance(cut, BoxCut):
        return face_cutter_pose(dimensions, cut, config)
    if isinstance(cut, BetaMiterCut):
        return beta_miter_cutter_pose(dimensions, cut, config)
    raise TypeError(f"Unsupported cut descriptor: {type(cut).__name__}")


def box_cutter_poses(
    box: Box,
    config: Optional[CutterConfig] = None,
) -> List[Tuple[Cut, CutterPose]]:
    """Cutter poses for every cut on a box, in application order."""
    poses = [(cut, cutter_pose(box.dimensions, cut, config)) for cut in box.cuts]
    logger.debug("Box %s: %d cutter poses", box.box_id, len(poses))
    return poses


def box_base_mesh(box: Box) -> trimesh.Trimesh:
    """Uncut box solid, centered at the origin (the CSG frame)."""
    return trimesh.creation.box(extents=box.dimensions)


def cutter_mesh(pose: CutterPose) -> trimesh.Trimesh:
    """Cutter solid placed in the box-centered frame."""
    return trimesh.creation.box(extents=pose.scale, transform=pose.to_matrix())


def box_world_transform(box: Box) -> np.ndarray:
    """4x4 transform placing the centered box solid in world space."""
    m = np.eye(4)
    m[:3, :3] = euler_to_rotation(box.rotation).as_matrix()
    m[:3, 3] = box.visual_center()
    return m
