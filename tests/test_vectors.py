"""Tests for the vector, matrix and quaternion helpers."""

import numpy as np
import pytest

from scadgen.core.vectors import (
    affine,
    as_vec3,
    axis_angle_matrix,
    cross,
    datan,
    dcos,
    dot,
    dsin,
    euler_matrix,
    frame_from_tangent,
    frozen,
    invert,
    length,
    lerp,
    normalize,
    quaternion_from_axis_angle,
    quaternion_multiply,
    quaternion_to_matrix,
    rotate_2d,
    rotation_x,
    rotation_y,
    rotation_z,
    transform_points,
)
from scadgen.errors import DegenerateGeometry


def test_degree_trigonometry():
    assert dsin(30.0) == pytest.approx(0.5)
    assert dcos(60.0) == pytest.approx(0.5)
    assert datan(1.0) == pytest.approx(45.0)


def test_basic_products():
    assert dot([1, 2, 3], [4, 5, 6]) == 32.0
    np.testing.assert_allclose(cross([1, 0, 0], [0, 1, 0]), [0, 0, 1])
    assert length([3, 4, 0]) == pytest.approx(5.0)
    np.testing.assert_allclose(lerp([0, 0, 0], [2, 4, 6], 0.5), [1, 2, 3])


def test_normalize():
    np.testing.assert_allclose(normalize([3.0, 4.0, 0.0]), [0.6, 0.8, 0.0])


def test_normalize_zero_vector_raises():
    """Zero-length vectors are rejected instead of returning a sentinel."""
    with pytest.raises(DegenerateGeometry):
        normalize([0.0, 0.0, 0.0])
    with pytest.raises(DegenerateGeometry):
        normalize([1e-12, 0.0, 0.0])


def test_invert():
    m = affine(np.diag([2.0, 4.0, 8.0]), translation=(1, 2, 3))
    np.testing.assert_allclose(invert(m) @ m, np.eye(4), atol=1e-12)


def test_invert_singular_raises():
    with pytest.raises(DegenerateGeometry):
        invert(np.zeros((4, 4)))
    with pytest.raises(DegenerateGeometry):
        invert(np.diag([1.0, 0.0, 1.0]))


def test_as_vec3_promotes_2d():
    np.testing.assert_allclose(as_vec3([1, 2]), [1, 2, 0])
    np.testing.assert_allclose(as_vec3((1, 2, 3)), [1, 2, 3])
    with pytest.raises(ValueError):
        as_vec3([1, 2, 3, 4])


def test_frozen_is_read_only():
    arr = frozen(np.zeros(3))
    with pytest.raises(ValueError):
        arr[0] = 1.0


def test_rotate_2d_is_counter_clockwise():
    np.testing.assert_allclose(rotate_2d([1.0, 0.0], 90.0), [0.0, 1.0], atol=1e-12)
    np.testing.assert_allclose(rotate_2d([[1.0, 0.0], [0.0, 1.0]], 90.0), [[0, 1], [-1, 0]], atol=1e-12)


@pytest.mark.parametrize("rotation,axis", [(rotation_x, [1, 0, 0]), (rotation_y, [0, 1, 0]), (rotation_z, [0, 0, 1])])
def test_axis_angle_matches_principal_rotations(rotation, axis):
    for degrees in (0.0, 30.0, 90.0, -135.0):
        np.testing.assert_allclose(axis_angle_matrix(axis, degrees), rotation(degrees), atol=1e-12)


def test_rotation_z_right_hand_rule():
    np.testing.assert_allclose(rotation_z(90.0) @ [1, 0, 0], [0, 1, 0], atol=1e-12)
    np.testing.assert_allclose(rotation_x(90.0) @ [0, 1, 0], [0, 0, 1], atol=1e-12)


def test_euler_order_is_x_then_y_then_z():
    angles = (30.0, 45.0, 60.0)
    expected = rotation_z(60.0) @ rotation_y(45.0) @ rotation_x(30.0)
    np.testing.assert_allclose(euler_matrix(angles), expected, atol=1e-12)


def test_axis_angle_zero_axis_raises():
    with pytest.raises(DegenerateGeometry):
        axis_angle_matrix([0, 0, 0], 45.0)


def test_quaternions_match_axis_angle():
    axis = [1.0, 2.0, 3.0]
    q = quaternion_from_axis_angle(axis, 70.0)
    assert np.linalg.norm(q) == pytest.approx(1.0)
    np.testing.assert_allclose(quaternion_to_matrix(q), axis_angle_matrix(axis, 70.0), atol=1e-12)


def test_quaternion_multiply_composes_rotations():
    q1 = quaternion_from_axis_angle([0, 0, 1], 30.0)
    q2 = quaternion_from_axis_angle([0, 0, 1], 60.0)
    np.testing.assert_allclose(quaternion_to_matrix(quaternion_multiply(q1, q2)), rotation_z(90.0), atol=1e-12)

    qx = quaternion_from_axis_angle([1, 0, 0], 90.0)
    qz = quaternion_from_axis_angle([0, 0, 1], 90.0)
    # qz * qx applies the X rotation first
    np.testing.assert_allclose(
        quaternion_to_matrix(quaternion_multiply(qz, qx)), rotation_z(90.0) @ rotation_x(90.0), atol=1e-12
    )


def test_transform_points():
    m = affine(rotation_z(90.0), translation=(0, 0, 5))
    np.testing.assert_allclose(transform_points(m, [[1, 0, 0]]), [[0, 1, 5]], atol=1e-12)


@pytest.mark.parametrize("tangent", [(1, 0, 0), (0, 1, 1), (0, 0, 1), (0, 0, -2), (3, -1, 2)])
def test_frame_from_tangent_is_orthonormal(tangent):
    frame = frame_from_tangent(tangent)
    np.testing.assert_allclose(frame.T @ frame, np.eye(3), atol=1e-12)
    assert np.linalg.det(frame) == pytest.approx(1.0)
    np.testing.assert_allclose(frame[:, 2], normalize(tangent), atol=1e-12)
