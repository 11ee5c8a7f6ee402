"""Tests for cutter dispatch and CSG solids."""
import math

import numpy as np
import pytest

from box_model import BetaMiterCut, Box, BoxCut, CutterConfig
from cut_geometry import face_cutter_pose
from cutters import (
    box_base_mesh,
    box_cutter_poses,
    box_world_transform,
    cutter_mesh,
    cutter_pose,
)
from miter_beta import beta_miter_cutter_pose


class TestDispatch:
    """Descriptor type selects the model."""

    def test_face_cut(self, unit_dims):
        cut = BoxCut(face="front", angle=22.5, edge="top")
        pose = cutter_pose(unit_dims, cut)
        expected = face_cutter_pose(unit_dims, cut)
        np.testing.assert_allclose(pose.position, expected.position)
        np.testing.assert_allclose(pose.rotation, expected.rotation)

    def test_miter_cut(self, unit_dims):
        cut = BetaMiterCut(edge="front-left", entry_face="left", angle=40)
        pose = cutter_pose(unit_dims, cut)
        expected = beta_miter_cutter_pose(unit_dims, cut)
        np.testing.assert_allclose(pose.position, expected.position)

    def test_unknown_descriptor(self, unit_dims):
        with pytest.raises(TypeError):
            cutter_pose(unit_dims, {"face": "top", "angle": 10})

    def test_config_is_forwarded(self, unit_dims):
        pose = cutter_pose(unit_dims, BoxCut(face="top", angle=0), CutterConfig(cutter_scale=4.0))
        np.testing.assert_allclose(pose.scale, [4.0, 4.0, 4.0])

    def test_box_poses_in_cut_order(self, plank_box):
        plank_box.add_cut(BetaMiterCut(edge="top-left", entry_face="left", angle=30, cut_id="m"))
        poses = box_cutter_poses(plank_box)
        assert [cut.cut_id for cut, _ in poses] == ["miter", "bevel", "m"]
        for _, pose in poses:
            assert np.all(np.isfinite(pose.position))
            np.testing.assert_allclose(pose.scale, [3.6, 3.6, 3.6])

    def test_no_cuts(self):
        assert box_cutter_poses(Box()) == []


class TestMeshes:
    """trimesh solids handed to the CSG evaluator."""

    def test_base_mesh_centered(self, plank_box):
        mesh = box_base_mesh(plank_box)
        np.testing.assert_allclose(mesh.bounds[0], -plank_box.dimensions / 2)
        np.testing.assert_allclose(mesh.bounds[1], plank_box.dimensions / 2)
        assert mesh.volume == pytest.approx(float(np.prod(plank_box.dimensions)))

    def test_zero_angle_cutter_touches_top_face(self, unit_dims):
        pose = face_cutter_pose(unit_dims, BoxCut(face="top", angle=0))
        mesh = cutter_mesh(pose)
        assert mesh.bounds[0][1] == pytest.approx(0.5)
        assert mesh.volume == pytest.approx(27.0)

    def test_rotated_cutter_vertices(self, unit_dims):
        pose = face_cutter_pose(unit_dims, BoxCut(face="top", edge="front", angle=45))
        mesh = cutter_mesh(pose)
        np.testing.assert_allclose(mesh.vertices.mean(axis=0), pose.position, atol=1e-9)
        # Pivot edge (y=0.5, z=-0.5) lies on the cutter's near face.
        near = pose.as_rotation().inv().apply(mesh.vertices - pose.position)[:, 1]
        assert near.min() == pytest.approx(-1.5)

    def test_world_transform(self):
        box = Box(position=np.array([1.0, 2.0, 3.0]), dimensions=np.array([2.0, 2.0, 2.0]),
                  rotation=np.array([0.0, 0.0, math.pi / 2]))
        m = box_world_transform(box)
        np.testing.assert_allclose(m[:3, 3], box.visual_center())
        np.testing.assert_allclose(m[:3, :3] @ [1, 0, 0], [0, 1, 0], atol=1e-12)

    def test_pose_matrix_and_quaternion(self, unit_dims):
        pose = face_cutter_pose(unit_dims, BoxCut(face="right", angle=30))
        m = pose.to_matrix()
        np.testing.assert_allclose(m[:3, 3], pose.position)
        q = pose.quaternion()
        assert np.linalg.norm(q) == pytest.approx(1.0)
        # Single Y rotation -> quaternion (0, sin(a/2), 0, cos(a/2))
        assert q[0] == pytest.approx(0.0, abs=1e-12)
        assert q[2] == pytest.approx(0.0, abs=1e-12)
