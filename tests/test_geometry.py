"""Tests for winding, triangulation and manifold utilities."""

import numpy as np
import pytest

from scadgen.core.geometry import (
    compute_triangle_normal,
    edge_counts,
    face_normal,
    is_clockwise,
    is_consistently_wound,
    is_watertight,
    orient_outward,
    polyhedron_volume,
    signed_area,
    triangulate_face,
    triangulate_polygon,
    verify_outward_normals,
)
from scadgen.generators.extrude import loft
from scadgen.generators.primitives import CubeGenerator
from scadgen.generators.profiles import star

SQUARE = np.array([[0, 0], [1, 0], [1, 1], [0, 1]], dtype=float)
L_SHAPE = np.array([[0, 0], [2, 0], [2, 1], [1, 1], [1, 2], [0, 2]], dtype=float)


def triangle_area(points, triangle):
    return signed_area(points[list(triangle)])


def test_signed_area():
    assert signed_area(SQUARE) == pytest.approx(1.0)
    assert signed_area(SQUARE[::-1]) == pytest.approx(-1.0)
    assert not is_clockwise(SQUARE)
    assert is_clockwise(SQUARE[::-1])


def test_triangle_normal():
    normal = compute_triangle_normal(np.zeros(3), np.array([1.0, 0, 0]), np.array([0, 1.0, 0]))
    np.testing.assert_allclose(normal, [0, 0, 1])
    degenerate = compute_triangle_normal(np.zeros(3), np.zeros(3), np.zeros(3))
    np.testing.assert_allclose(degenerate, [0, 0, 1])


def test_face_normal_is_twice_the_area():
    vertices = np.array([[0, 0, 0], [2, 0, 0], [2, 3, 0], [0, 3, 0]], dtype=float)
    np.testing.assert_allclose(face_normal(vertices, [0, 1, 2, 3]), [0, 0, 12])


@pytest.mark.parametrize("polygon", [SQUARE, L_SHAPE, L_SHAPE[::-1]], ids=["square", "l_ccw", "l_cw"])
def test_triangulate_polygon_covers_area_with_same_winding(polygon):
    triangles = triangulate_polygon(polygon)
    assert len(triangles) == len(polygon) - 2
    areas = [triangle_area(polygon, t) for t in triangles]
    total = signed_area(polygon)
    assert sum(areas) == pytest.approx(total)
    assert all(np.sign(area) == np.sign(total) for area in areas)


def test_triangulate_rejects_ear_whose_diagonal_touches_a_vertex():
    # The diagonal from (0, 2) to (2, 0) runs through the reflex corner (1, 1)
    triangles = triangulate_polygon(L_SHAPE)
    assert (5, 0, 1) not in triangles
    assert all(triangle_area(L_SHAPE, t) > 0 for t in triangles)


def test_triangulate_star_keeps_winding():
    outline = star(7, 10.0, 20.0)
    triangles = triangulate_polygon(outline)
    assert len(triangles) == len(outline) - 2
    assert sum(triangle_area(outline, t) for t in triangles) == pytest.approx(signed_area(outline))
    assert all(triangle_area(outline, t) < 0 for t in triangles)


def test_star_loft_matches_trimesh_volume():
    lower = star(7, 10.0, 20.0)
    solid = loft([lower, lower], heights=[0.0, 5.0])
    mesh = solid.to_trimesh()
    assert mesh.is_watertight
    assert mesh.volume == pytest.approx(solid.volume())
    assert solid.volume() == pytest.approx(-signed_area(lower) * 5.0)


def test_triangulate_face_in_3d():
    vertices = np.array([[0, 0, 5], [0, 2, 5], [0, 2, 6], [0, 1, 6], [0, 1, 7], [0, 0, 7]], dtype=float)
    face = [0, 1, 2, 3, 4, 5]
    triangles = triangulate_face(vertices, face)
    assert len(triangles) == 4
    normal = face_normal(vertices, face)
    for triangle in triangles:
        # Every triangle faces the same way as the polygon
        assert np.dot(face_normal(vertices, triangle), normal) > 0


def test_edge_counts_and_winding():
    cube = CubeGenerator().generate()
    counts = edge_counts(cube.faces)
    assert len(counts) == 12
    assert set(counts.values()) == {2}
    assert is_consistently_wound(cube.faces)
    assert is_watertight(cube.faces)

    flipped = list(cube.faces)
    flipped[0] = tuple(reversed(flipped[0]))
    assert not is_consistently_wound(flipped)
    assert not is_watertight(flipped)


def test_volume_sign_follows_winding():
    cube = CubeGenerator(2, 3, 4).generate()
    assert polyhedron_volume(cube.points, cube.faces) == pytest.approx(24.0)
    inside_out = [tuple(reversed(face)) for face in cube.faces]
    assert polyhedron_volume(cube.points, inside_out) == pytest.approx(-24.0)


def test_orient_outward():
    cube = CubeGenerator().generate()
    inside_out = [tuple(reversed(face)) for face in cube.faces]
    assert orient_outward(cube.points, inside_out) == list(cube.faces)
    assert orient_outward(cube.points, list(cube.faces)) == list(cube.faces)


def test_verify_outward_normals():
    cube = CubeGenerator(center=True).generate()
    ok, bad = verify_outward_normals(cube.points, cube.faces)
    assert ok and bad == []
    inside_out = [tuple(reversed(face)) for face in cube.faces]
    ok, bad = verify_outward_normals(cube.points, inside_out)
    assert not ok
    assert bad == list(range(6))
