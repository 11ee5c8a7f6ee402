"""
Rotation algebra for box orientation.

Boxes store their local minimum corner plus a three-angle Euler rotation
(XYZ order, i.e. R = Rx @ Ry @ Rz). The world-space centroid ("visual
center") is always derived from those two, never stored. Group rotations
move visual centers around a shared pivot and compose each box's rotation
with a world-axis increment, then re-derive the corner.
"""
import warnings
from typing import Sequence, Union

import numpy as np
from scipy.spatial.transform import Rotation

EULER_ORDER = "XYZ"  # intrinsic X, Y, Z -> R = Rx @ Ry @ Rz

ZERO_ROTATION = np.array([0.0, 0.0, 0.0])

_AXIS_INDEX = {"x": 0, "y": 1, "z": 2}

Vec3Like = Union[Sequence[float], np.ndarray]


def axis_index(axis: str) -> int:
    """Index (0, 1, 2) of a world axis name."""
    try:
        return _AXIS_INDEX[axis]
    except KeyError:
        raise ValueError(f"Unknown axis: {axis!r}") from None


def axis_vector(axis: str) -> np.ndarray:
    """Unit vector along a world axis."""
    v = np.zeros(3)
    v[axis_index(axis)] = 1.0
    return v


def euler_to_rotation(rotation: Vec3Like) -> Rotation:
    """Build a scipy Rotation from Euler XYZ angles (radians)."""
    return Rotation.from_euler(EULER_ORDER, np.asarray(rotation, dtype=float))


def rotation_to_euler(rotation: Rotation) -> np.ndarray:
    """Decompose a scipy Rotation into Euler XYZ angles (radians).

    At gimbal lock (middle angle at +-90 deg) scipy warns and zeroes one of
    the outer angles; the returned angles still describe the same rotation.
    """
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", message=".*[Gg]imbal lock.*")
        return np.asarray(rotation.as_euler(EULER_ORDER), dtype=float)


def rotate_vector_by_euler(v: Vec3Like, rotation: Vec3Like) -> np.ndarray:
    """Apply an Euler XYZ rotation to a vector.

    Rotates around Z first, then Y, then X, which is the vector form of
    the matrix product Rx @ Ry @ Rz.
    """
    return euler_to_rotation(rotation).apply(np.asarray(v, dtype=float))


def visual_center(
    position: Vec3Like,
    dimensions: Vec3Like,
    rotation: Vec3Like,
) -> np.ndarray:
    """World-space centroid of a box: corner + rotated half-dimensions."""
    half = np.asarray(dimensions, dtype=float) / 2.0
    return np.asarray(position, dtype=float) + rotate_vector_by_euler(half, rotation)


def corner_from_visual_center(
    center: Vec3Like,
    dimensions: Vec3Like,
    rotation: Vec3Like,
) -> np.ndarray:
    """Inverse of visual_center().

    The rotation must be the box's current one; after a rotation change
    the *new* rotated half-dimensions are subtracted.
    """
    half = np.asarray(dimensions, dtype=float) / 2.0
    return np.asarray(center, dtype=float) - rotate_vector_by_euler(half, rotation)


def rotate_point_around_axis(
    point: Vec3Like,
    pivot: Vec3Like,
    axis: str,
    angle: float,
) -> np.ndarray:
    """Rotate a point about a world axis passing through pivot.

    Right-handed: a quarter turn about Y takes +X to -Z. The component
    along the axis is left untouched.
    """
    p = np.asarray(point, dtype=float)
    c = np.asarray(pivot, dtype=float)
    cos = np.cos(angle)
    sin = np.sin(angle)
    out = p.copy()

    if axis == "y":
        dx = p[0] - c[0]
        dz = p[2] - c[2]
        out[0] = c[0] + dx * cos + dz * sin
        out[2] = c[2] - dx * sin + dz * cos
    elif axis == "x":
        dy = p[1] - c[1]
        dz = p[2] - c[2]
        out[1] = c[1] + dy * cos - dz * sin
        out[2] = c[2] + dy * sin + dz * cos
    elif axis == "z":
        dx = p[0] - c[0]
        dy = p[1] - c[1]
        out[0] = c[0] + dx * cos - dy * sin
        out[1] = c[1] + dx * sin + dy * cos
    else:
        raise ValueError(f"Unknown axis: {axis!r}")
    return out


def compose_rotation(current: Vec3Like, axis: str, angle: float) -> np.ndarray:
    """Add a world-axis rotation increment to an Euler XYZ rotation.

    The increment is pre-multiplied (delta * current) so it acts in world
    space. Post-multiplying would rotate about the box's own local axes.
    """
    delta = Rotation.from_rotvec(axis_vector(axis) * float(angle))
    return rotation_to_euler(delta * euler_to_rotation(current))


def migrate_rotation(value) -> np.ndarray:
    """Normalize a stored rotation to Euler XYZ.

    Older records stored a single number: a rotation about Y.
    """
    if isinstance(value, (int, float)):
        return np.array([0.0, float(value), 0.0])
    if isinstance(value, dict):
        return np.array([
            float(value.get("x", 0.0)),
            float(value.get("y", 0.0)),
            float(value.get("z", 0.0)),
        ])
    return np.asarray(value, dtype=float).reshape(3)
