"""Vector, matrix and quaternion helpers.

All external-facing angles are in degrees, matching the script format;
they are converted to radians only for the trigonometric calls.

Degenerate input (normalizing a zero vector, inverting a singular matrix)
always raises DegenerateGeometry. No sentinel values are returned.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..errors import DegenerateGeometry

EPSILON = 1e-9


def vec2(x: float, y: float) -> NDArray[np.float64]:
    """Create a 2D vector."""
    return np.array([x, y], dtype=np.float64)


def vec3(x: float, y: float, z: float) -> NDArray[np.float64]:
    """Create a 3D vector."""
    return np.array([x, y, z], dtype=np.float64)


def as_vec3(value: ArrayLike) -> NDArray[np.float64]:
    """Coerce a 2D or 3D sequence to a 3D vector (z defaults to 0)."""
    arr = np.asarray(value, dtype=np.float64).reshape(-1)
    if arr.shape == (2,):
        return np.array([arr[0], arr[1], 0.0])
    if arr.shape != (3,):
        raise ValueError(f"Expected a 2D or 3D vector, got shape {arr.shape}")
    return arr


def frozen(arr: NDArray) -> NDArray:
    """Return a read-only copy of an array."""
    out = np.array(arr, copy=True)
    out.setflags(write=False)
    return out


def approx_eq(a: float, b: float, epsilon: float = EPSILON) -> bool:
    return abs(a - b) <= epsilon


def dsin(degrees: float) -> float:
    return float(np.sin(np.radians(degrees)))


def dcos(degrees: float) -> float:
    return float(np.cos(np.radians(degrees)))


def dtan(degrees: float) -> float:
    return float(np.tan(np.radians(degrees)))


def dasin(value: float) -> float:
    return float(np.degrees(np.arcsin(value)))


def dacos(value: float) -> float:
    return float(np.degrees(np.arccos(value)))


def datan(value: float) -> float:
    return float(np.degrees(np.arctan(value)))


def dot(a: ArrayLike, b: ArrayLike) -> float:
    return float(np.dot(a, b))


def cross(a: ArrayLike, b: ArrayLike) -> NDArray[np.float64]:
    return np.cross(np.asarray(a, dtype=np.float64), np.asarray(b, dtype=np.float64))


def length(v: ArrayLike) -> float:
    return float(np.linalg.norm(v))


def normalize(v: ArrayLike) -> NDArray[np.float64]:
    """Return the unit vector pointing along v.

    Raises:
        DegenerateGeometry: If v has (near) zero length
    """
    arr = np.asarray(v, dtype=np.float64)
    norm = np.linalg.norm(arr)
    if norm < EPSILON:
        raise DegenerateGeometry(f"Cannot normalize zero-length vector {arr.tolist()}")
    return arr / norm


def lerp(a: ArrayLike, b: ArrayLike, t: float) -> NDArray[np.float64]:
    a = np.asarray(a, dtype=np.float64)
    return a + (np.asarray(b, dtype=np.float64) - a) * t


def rotate_2d(points: ArrayLike, degrees: float) -> NDArray[np.float64]:
    """Rotate 2D points counter-clockwise about the origin."""
    c, s = dcos(degrees), dsin(degrees)
    rot = np.array([[c, -s], [s, c]])
    return (rot @ np.asarray(points, dtype=np.float64).T).T


def rotation_x(degrees: float) -> NDArray[np.float64]:
    c, s = dcos(degrees), dsin(degrees)
    return np.array([[1, 0, 0], [0, c, -s], [0, s, c]], dtype=np.float64)


def rotation_y(degrees: float) -> NDArray[np.float64]:
    c, s = dcos(degrees), dsin(degrees)
    return np.array([[c, 0, s], [0, 1, 0], [-s, 0, c]], dtype=np.float64)


def rotation_z(degrees: float) -> NDArray[np.float64]:
    c, s = dcos(degrees), dsin(degrees)
    return np.array([[c, -s, 0], [s, c, 0], [0, 0, 1]], dtype=np.float64)


def euler_matrix(angles: ArrayLike) -> NDArray[np.float64]:
    """3x3 rotation for Euler angles applied about X, then Y, then Z."""
    ax, ay, az = np.asarray(angles, dtype=np.float64)
    return rotation_z(az) @ rotation_y(ay) @ rotation_x(ax)


def axis_angle_matrix(axis: ArrayLike, degrees: float) -> NDArray[np.float64]:
    """3x3 rotation of `degrees` about `axis` (right-hand rule, Rodrigues)."""
    x, y, z = normalize(axis)
    c, s = dcos(degrees), dsin(degrees)
    t = 1.0 - c
    return np.array([
        [c + x * x * t, x * y * t - z * s, x * z * t + y * s],
        [y * x * t + z * s, c + y * y * t, y * z * t - x * s],
        [z * x * t - y * s, z * y * t + x * s, c + z * z * t],
    ], dtype=np.float64)


def quaternion_from_axis_angle(axis: ArrayLike, degrees: float) -> NDArray[np.float64]:
    """Unit quaternion (w, x, y, z) for a rotation about an axis."""
    unit = normalize(axis)
    half = np.radians(degrees) / 2.0
    return np.concatenate([[np.cos(half)], unit * np.sin(half)])


def quaternion_multiply(q1: ArrayLike, q2: ArrayLike) -> NDArray[np.float64]:
    """Hamilton product q1 * q2 (apply q2 first, then q1)."""
    w1, x1, y1, z1 = np.asarray(q1, dtype=np.float64)
    w2, x2, y2, z2 = np.asarray(q2, dtype=np.float64)
    return np.array([
        w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
        w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
        w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
        w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
    ])


def quaternion_to_matrix(q: ArrayLike) -> NDArray[np.float64]:
    """Convert a quaternion (w, x, y, z) to a 3x3 rotation matrix."""
    w, x, y, z = normalize(q)
    return np.array([
        [1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w)],
        [2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w)],
        [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y)],
    ])


def identity4() -> NDArray[np.float64]:
    return np.eye(4, dtype=np.float64)


def affine(
    linear: ArrayLike | None = None,
    translation: ArrayLike | None = None,
) -> NDArray[np.float64]:
    """Build a 4x4 affine matrix from a 3x3 linear part and a translation."""
    m = np.eye(4, dtype=np.float64)
    if linear is not None:
        m[:3, :3] = np.asarray(linear, dtype=np.float64)
    if translation is not None:
        m[:3, 3] = as_vec3(translation)
    return m


def invert(matrix: ArrayLike) -> NDArray[np.float64]:
    """Invert a square matrix.

    Raises:
        DegenerateGeometry: If the matrix is singular
    """
    m = np.asarray(matrix, dtype=np.float64)
    if abs(np.linalg.det(m)) < EPSILON:
        raise DegenerateGeometry("Cannot invert a singular matrix")
    return np.linalg.inv(m)


def transform_points(matrix: ArrayLike, points: ArrayLike) -> NDArray[np.float64]:
    """Apply a 4x4 affine matrix to an (N, 3) array of points."""
    m = np.asarray(matrix, dtype=np.float64)
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    return pts @ m[:3, :3].T + m[:3, 3]


def frame_from_tangent(
    tangent: ArrayLike,
    up: Sequence[float] = (0.0, 0.0, 1.0),
) -> NDArray[np.float64]:
    """Orthonormal 3x3 frame whose columns are (side, up, tangent).

    Maps a profile drawn in the XY plane onto the plane perpendicular to
    `tangent`. Falls back to the X axis as "up" when the tangent is parallel
    to `up`.
    """
    f = normalize(tangent)
    up_vec = np.asarray(up, dtype=np.float64)
    side = np.cross(up_vec, f)
    if np.linalg.norm(side) < EPSILON:
        side = np.cross(np.array([1.0, 0.0, 0.0]), f)
    side = normalize(side)
    new_up = np.cross(f, side)
    return np.column_stack([side, new_up, f])
