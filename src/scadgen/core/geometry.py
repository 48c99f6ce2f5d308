"""Geometry utilities for face winding, triangulation and manifold checks.

The winding convention is the one the script format expects for
polyhedron faces:

- Faces are listed clockwise when viewed from outside the solid
- For triangle (A, B, C), (B-A) x (C-A) therefore points *into* the solid

`polyhedron_volume` is positive for a correctly wound closed mesh, and
`orient_outward` flips every face of a consistently wound mesh whose
volume came out negative.
"""

from __future__ import annotations

from collections import Counter
from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .vectors import EPSILON

Face = tuple[int, ...]


def compute_triangle_normal(
    v0: NDArray[np.float64],
    v1: NDArray[np.float64],
    v2: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Compute the normal vector for a triangle.

    Uses the cross product (v1-v0) x (v2-v0). Counter-clockwise winding
    (when viewed from the normal direction) is assumed.

    Args:
        v0, v1, v2: The three vertices of the triangle

    Returns:
        Normalized normal vector (unit length), or +Z for a degenerate triangle
    """
    normal = np.cross(v1 - v0, v2 - v0)
    norm = np.linalg.norm(normal)
    if norm > 1e-10:
        return normal / norm
    return np.array([0.0, 0.0, 1.0])


def face_normal(vertices: NDArray[np.float64], face: Sequence[int]) -> NDArray[np.float64]:
    """Newell normal of a polygonal face (counter-clockwise convention).

    Works for non-convex and slightly non-planar faces. The result is not
    normalized; its length is twice the face area.
    """
    pts = vertices[list(face)]
    nxt = np.roll(pts, -1, axis=0)
    return np.array([
        np.sum((pts[:, 1] - nxt[:, 1]) * (pts[:, 2] + nxt[:, 2])),
        np.sum((pts[:, 2] - nxt[:, 2]) * (pts[:, 0] + nxt[:, 0])),
        np.sum((pts[:, 0] - nxt[:, 0]) * (pts[:, 1] + nxt[:, 1])),
    ])


def signed_area(points: ArrayLike) -> float:
    """Shoelace area of a 2D polygon; positive when counter-clockwise."""
    pts = np.asarray(points, dtype=np.float64)
    x, y = pts[:, 0], pts[:, 1]
    return float(0.5 * (np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y)))


def is_clockwise(points: ArrayLike) -> bool:
    return signed_area(points) < 0.0


def _blocks_ear(p, a, b, c) -> bool:
    """True if p lies inside or on the boundary of the counter-clockwise triangle abc.

    Points on the diagonal a-c block the ear. Points that coincide with a
    corner do not.
    """
    for corner in (a, b, c):
        if abs(p[0] - corner[0]) <= EPSILON and abs(p[1] - corner[1]) <= EPSILON:
            return False
    d1 = (b[0] - a[0]) * (p[1] - a[1]) - (b[1] - a[1]) * (p[0] - a[0])
    d2 = (c[0] - b[0]) * (p[1] - b[1]) - (c[1] - b[1]) * (p[0] - b[0])
    d3 = (a[0] - c[0]) * (p[1] - c[1]) - (a[1] - c[1]) * (p[0] - c[0])
    return d1 >= -EPSILON and d2 >= -EPSILON and d3 >= -EPSILON


def triangulate_polygon(points: ArrayLike) -> list[tuple[int, int, int]]:
    """Ear-clip a simple 2D polygon.

    Triangles are returned with the same winding as the input polygon, as
    index triples into `points`.
    """
    pts = np.asarray(points, dtype=np.float64)
    n = len(pts)
    if n < 3:
        return []
    ccw = signed_area(pts) >= 0.0
    work = list(range(n)) if ccw else list(reversed(range(n)))
    triangles: list[tuple[int, int, int]] = []

    while len(work) > 3:
        ear_found = False
        count = len(work)
        for i in range(count):
            prev_idx, cur_idx, next_idx = work[i - 1], work[i], work[(i + 1) % count]
            a, b, c = pts[prev_idx], pts[cur_idx], pts[next_idx]
            turn = (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])
            if turn <= EPSILON:
                continue
            if any(
                _blocks_ear(pts[j], a, b, c)
                for j in work
                if j not in (prev_idx, cur_idx, next_idx)
            ):
                continue
            triangles.append((prev_idx, cur_idx, next_idx))
            del work[i]
            ear_found = True
            break
        if not ear_found:
            # Only collinear or degenerate vertices remain
            triangles.append((work[-1], work[0], work[1]))
            del work[0]
    triangles.append((work[0], work[1], work[2]))

    if not ccw:
        triangles = [(a, c, b) for a, b, c in triangles]
    return triangles


def triangulate_face(vertices: NDArray[np.float64], face: Sequence[int]) -> list[tuple[int, int, int]]:
    """Triangulate a planar 3D polygon face, preserving its winding.

    Returns index triples into `vertices`.
    """
    face = list(face)
    if len(face) == 3:
        return [(face[0], face[1], face[2])]
    normal = face_normal(vertices, face)
    norm = np.linalg.norm(normal)
    if norm < EPSILON:
        return [(face[0], face[i], face[i + 1]) for i in range(1, len(face) - 1)]
    normal = normal / norm
    # Build an in-plane basis (u, v) with u x v == normal
    helper = np.array([1.0, 0.0, 0.0]) if abs(normal[0]) < 0.9 else np.array([0.0, 1.0, 0.0])
    u = np.cross(helper, normal)
    u /= np.linalg.norm(u)
    v = np.cross(normal, u)
    pts = vertices[face]
    projected = np.column_stack([pts @ u, pts @ v])
    return [(face[a], face[b], face[c]) for a, b, c in triangulate_polygon(projected)]


def edge_counts(faces: Sequence[Sequence[int]]) -> Counter:
    """Count how many faces use each undirected edge."""
    counts: Counter = Counter()
    for face in faces:
        for i, a in enumerate(face):
            b = face[(i + 1) % len(face)]
            counts[(min(a, b), max(a, b))] += 1
    return counts


def open_edges(faces: Sequence[Sequence[int]]) -> list[tuple[int, int]]:
    """Edges not shared by exactly two faces."""
    return sorted(edge for edge, count in edge_counts(faces).items() if count != 2)


def is_consistently_wound(faces: Sequence[Sequence[int]]) -> bool:
    """True if every directed edge is used once (neighbours traverse it in reverse)."""
    directed: Counter = Counter()
    for face in faces:
        for i, a in enumerate(face):
            directed[(a, face[(i + 1) % len(face)])] += 1
    return all(count == 1 for count in directed.values())


def is_watertight(faces: Sequence[Sequence[int]]) -> bool:
    """Every edge borders exactly two faces and winding is consistent."""
    return not open_edges(faces) and is_consistently_wound(faces)


def polyhedron_volume(vertices: NDArray[np.float64], faces: Sequence[Sequence[int]]) -> float:
    """Enclosed volume of a closed mesh wound clockwise-from-outside.

    A negative result means the faces are wound the other way.
    """
    total = 0.0
    for face in faces:
        v0 = vertices[face[0]]
        for i in range(1, len(face) - 1):
            total += np.dot(v0, np.cross(vertices[face[i]], vertices[face[i + 1]]))
    return float(-total / 6.0)


def orient_outward(vertices: NDArray[np.float64], faces: list[Face]) -> list[Face]:
    """Flip all faces if the mesh volume is negative.

    The faces must already be wound consistently with each other.
    """
    if polyhedron_volume(vertices, faces) < 0.0:
        return [tuple(reversed(face)) for face in faces]
    return faces


def verify_outward_normals(
    vertices: NDArray[np.float64],
    faces: Sequence[Sequence[int]],
    center: NDArray[np.float64] | None = None,
) -> tuple[bool, list[int]]:
    """Verify that all faces point away from a center point.

    Only meaningful for star-shaped meshes (every face visible from center).

    Args:
        vertices: Vertex array
        faces: Faces wound clockwise-from-outside
        center: Center point to measure "outward" from. If None, uses centroid.

    Returns:
        Tuple of (all_valid, list_of_bad_face_indices)
    """
    if center is None:
        center = vertices.mean(axis=0)

    bad_faces = []

    for i, face in enumerate(faces):
        # Newell normal is counter-clockwise; negate for the outward direction
        normal = -face_normal(vertices, face)
        face_center = vertices[list(face)].mean(axis=0)

        outward = face_center - center
        if np.linalg.norm(outward) > 1e-10 and np.dot(normal, outward) < 0:
            bad_faces.append(i)

    return len(bad_faces) == 0, bad_faces
