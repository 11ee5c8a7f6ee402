"""Tests for rigid-body group rotation."""
import math

import numpy as np
import pytest

from box_model import Box, BoxCut
from cutters import box_base_mesh, box_world_transform
from group_rotation import rotate_boxes, selection_pivot, swap_dimensions
from rotation_algebra import (
    corner_from_visual_center,
    rotate_point_around_axis,
    rotate_vector_by_euler,
)


def _box_at_center(center, dims, box_id):
    dims = np.asarray(dims, dtype=float)
    return Box(
        box_id=box_id,
        position=corner_from_visual_center(center, dims, [0, 0, 0]),
        dimensions=dims,
    )


def _world_vertices(box):
    mesh = box_base_mesh(box)
    mesh.apply_transform(box_world_transform(box))
    return np.asarray(mesh.vertices)


class TestGroupRigidity:
    """Two boxes rotated together about a shared pivot."""

    @pytest.fixture
    def pair(self):
        return [
            _box_at_center([0, 0, 0], [0.5, 0.3, 0.2], "a"),
            _box_at_center([2, 0, 0], [0.4, 0.4, 0.4], "b"),
        ]

    def test_centers_after_quarter_turn(self, pair):
        rotated = rotate_boxes(pair, "y", math.pi / 2, pivot=[1, 0, 0])
        np.testing.assert_allclose(rotated[0].visual_center(), [1, 0, 1], atol=1e-9)
        np.testing.assert_allclose(rotated[1].visual_center(), [1, 0, -1], atol=1e-9)
        distance = np.linalg.norm(rotated[0].visual_center() - rotated[1].visual_center())
        assert distance == pytest.approx(2.0)

    def test_default_pivot_is_centroid(self, pair):
        np.testing.assert_allclose(selection_pivot(pair), [1, 0, 0])
        explicit = rotate_boxes(pair, "y", math.pi / 2, pivot=[1, 0, 0])
        implicit = rotate_boxes(pair, "y", math.pi / 2)
        for a, b in zip(explicit, implicit):
            np.testing.assert_allclose(a.position, b.position, atol=1e-12)

    def test_orientation_follows(self, pair):
        rotated = rotate_boxes(pair, "y", math.pi / 2, pivot=[1, 0, 0])
        for box in rotated:
            out = rotate_vector_by_euler([1, 0, 0], box.rotation)
            np.testing.assert_allclose(out, [0, 0, -1], atol=1e-9)

    def test_inputs_untouched(self, pair):
        before = [b.position.copy() for b in pair]
        rotate_boxes(pair, "z", 0.7)
        for box, pos in zip(pair, before):
            np.testing.assert_allclose(box.position, pos)
            np.testing.assert_allclose(box.rotation, [0, 0, 0])

    def test_corner_uses_new_rotation(self, pair):
        rotated = rotate_boxes(pair, "y", math.pi / 2, pivot=[1, 0, 0])
        box = rotated[0]
        expected = box.visual_center() - rotate_vector_by_euler(box.dimensions / 2, box.rotation)
        np.testing.assert_allclose(box.position, expected, atol=1e-12)

    def test_empty_selection(self):
        assert rotate_boxes([], "x", 1.0) == []
        with pytest.raises(ValueError):
            selection_pivot([])


class TestRigidMotion:
    """Every world-space vertex moves exactly as the pivot rotation."""

    @pytest.mark.parametrize("axis", ["x", "y", "z"])
    def test_vertices_follow_pivot_rotation(self, rotated_box, axis):
        other = Box(
            position=np.array([-1.0, 0.2, 0.4]),
            dimensions=np.array([0.3, 0.3, 1.1]),
            rotation=np.array([-0.2, 0.5, 0.0]),
        )
        boxes = [rotated_box, other]
        pivot = np.array([0.5, -0.25, 1.0])
        angle = 0.9

        rotated = rotate_boxes(boxes, axis, angle, pivot=pivot)
        for before, after in zip(boxes, rotated):
            expected = np.array([
                rotate_point_around_axis(v, pivot, axis, angle)
                for v in _world_vertices(before)
            ])
            np.testing.assert_allclose(_world_vertices(after), expected, atol=1e-9)

    def test_cuts_survive(self, rotated_box):
        rotated = rotate_boxes([rotated_box], "x", 0.4)[0]
        assert [c.cut_id for c in rotated.cuts] == ["m1"]
        assert rotated.cuts[0] is not rotated_box.cuts[0]


class TestSwapDimensions:
    """Quarter turns by dimension swapping."""

    def test_width_depth(self):
        box = Box(position=np.array([1.0, 0.5, 2.0]), dimensions=np.array([1.0, 2.0, 3.0]),
                  rotation=np.array([0.0, 0.3, 0.0]), cuts=[BoxCut(face="top", angle=10)])
        out = swap_dimensions(box, "wd")
        np.testing.assert_allclose(out.dimensions, [3.0, 2.0, 1.0])
        np.testing.assert_allclose(out.position, [1.0, 0.5, 2.0])
        np.testing.assert_allclose(out.rotation, [0, 0, 0])
        assert len(out.cuts) == 1

    @pytest.mark.parametrize("swap,dims", [("hd", [1.0, 3.0, 2.0]), ("wh", [2.0, 1.0, 3.0])])
    def test_height_swaps_drop_to_floor(self, swap, dims):
        box = Box(position=np.array([1.0, 0.5, 2.0]), dimensions=np.array([1.0, 2.0, 3.0]))
        out = swap_dimensions(box, swap)
        np.testing.assert_allclose(out.dimensions, dims)
        assert out.position[1] == 0.0

    def test_unknown_swap(self):
        with pytest.raises(ValueError):
            swap_dimensions(Box(), "xy")
