"""Polyhedron class for explicit vertex/face geometry."""

from __future__ import annotations

import numbers
from collections import Counter
from typing import TYPE_CHECKING, Sequence

import numpy as np
import trimesh
from numpy.typing import ArrayLike, NDArray

from ..errors import ValidationError
from . import geometry
from .vectors import frozen, transform_points

if TYPE_CHECKING:
    from .transform import Transform


def as_indices(values, field: str, shape: str, what: str) -> tuple[int, ...]:
    """Convert a face or polygon path to a tuple of integer point indices."""
    try:
        items = tuple(values)
    except TypeError:
        raise ValidationError(f"{what} must be a sequence of indices, got {values!r}",
                              field=field, shape=shape) from None
    for item in items:
        if isinstance(item, bool) or not isinstance(item, numbers.Integral):
            raise ValidationError(f"{what} has a non-integer index {item!r}", field=field, shape=shape)
    return tuple(int(item) for item in items)


class Polyhedron:
    """Container for a polyhedron's points and faces.

    Stores exactly what the caller or generator supplies: an (N, 3) array of
    points and a tuple of faces, each face a tuple of at least three point
    indices listed clockwise when viewed from outside. No geometry is
    computed at construction time, only the index constraints are checked.

    The convexity value is a rendering hint passed through to the script
    and has no effect on the modeled solid.
    """

    def __init__(
        self,
        points: ArrayLike,
        faces: Sequence[Sequence[int]],
        convexity: int = 1,
    ) -> None:
        """Create a polyhedron from geometry data.

        Args:
            points: Nx3 array of vertex positions
            faces: Sequence of faces, each a sequence of point indices
            convexity: Rendering hint, at least 1

        Raises:
            ValidationError: If a face is too short, repeats an index or
                references a point that does not exist
        """
        try:
            pts = np.asarray(points, dtype=np.float64)
        except (TypeError, ValueError):
            raise ValidationError("points must be an Nx3 array of numbers", field="points", shape="polyhedron") from None
        if pts.size == 0:
            pts = pts.reshape(0, 3)
        if pts.ndim != 2 or pts.shape[1] != 3:
            raise ValidationError(
                f"points must be an Nx3 array, got shape {pts.shape}",
                field="points", shape="polyhedron",
            )
        if not np.all(np.isfinite(pts)):
            raise ValidationError("points must be finite", field="points", shape="polyhedron")
        if isinstance(convexity, bool) or not isinstance(convexity, numbers.Integral) or convexity < 1:
            raise ValidationError(
                f"convexity must be >= 1, got {convexity}", field="convexity", shape="polyhedron"
            )

        checked = []
        for face_index, face in enumerate(faces):
            face = as_indices(face, "faces", "polyhedron", f"face {face_index}")
            if len(face) < 3:
                raise ValidationError(
                    f"face {face_index} has {len(face)} vertices, need at least 3",
                    field="faces", shape="polyhedron",
                )
            if len(set(face)) != len(face):
                raise ValidationError(
                    f"face {face_index} repeats a vertex index: {list(face)}",
                    field="faces", shape="polyhedron",
                )
            for index in face:
                if index < 0 or index >= len(pts):
                    raise ValidationError(
                        f"face {face_index} references point {index}, "
                        f"but only {len(pts)} points exist",
                        field="faces", shape="polyhedron",
                    )
            checked.append(face)

        self._points = frozen(pts)
        self._faces = tuple(checked)
        self._convexity = int(convexity)

    @property
    def points(self) -> NDArray[np.float64]:
        return self._points

    @property
    def faces(self) -> tuple[tuple[int, ...], ...]:
        return self._faces

    @property
    def convexity(self) -> int:
        return self._convexity

    @property
    def vertex_count(self) -> int:
        """Number of points in the polyhedron."""
        return len(self._points)

    @property
    def face_count(self) -> int:
        """Number of faces in the polyhedron."""
        return len(self._faces)

    def transform(self, transform: Transform | ArrayLike) -> Polyhedron:
        """Apply a Transform or 4x4 matrix, returning a new polyhedron.

        Faces are reversed when the transform mirrors space so the result
        stays wound outward.
        """
        matrix = np.asarray(getattr(transform, "matrix", transform), dtype=np.float64)
        new_points = transform_points(matrix, self._points)
        faces = self._faces
        if np.linalg.det(matrix[:3, :3]) < 0:
            faces = tuple(tuple(reversed(face)) for face in faces)
        return Polyhedron(new_points, faces, self.convexity)

    def translate(self, offset: ArrayLike) -> Polyhedron:
        return Polyhedron(self._points + np.asarray(offset, dtype=np.float64), self._faces, self.convexity)

    def reversed(self) -> Polyhedron:
        """Return a copy with every face wound the other way."""
        return Polyhedron(
            self._points, [tuple(reversed(face)) for face in self._faces], self.convexity
        )

    def with_convexity(self, convexity: int) -> Polyhedron:
        return Polyhedron(self._points, self._faces, convexity)

    def edge_counts(self) -> Counter:
        return geometry.edge_counts(self._faces)

    def open_edges(self) -> list[tuple[int, int]]:
        """Edges that do not border exactly two faces."""
        return geometry.open_edges(self._faces)

    def is_watertight(self) -> bool:
        return geometry.is_watertight(self._faces)

    def volume(self) -> float:
        """Enclosed volume; negative if the faces are wound inside out."""
        return geometry.polyhedron_volume(self._points, self._faces)

    def triangles(self) -> NDArray[np.int64]:
        """Triangulate every face, preserving winding. Returns an Mx3 array."""
        tris = []
        for face in self._faces:
            tris.extend(geometry.triangulate_face(self._points, face))
        return np.array(tris, dtype=np.int64).reshape(-1, 3)

    def to_trimesh(self) -> trimesh.Trimesh:
        """Convert to a trimesh.Trimesh for independent checks or export.

        trimesh expects counter-clockwise faces, so triangles are reversed.
        """
        return trimesh.Trimesh(
            vertices=np.array(self._points),
            faces=self.triangles()[:, ::-1],
            process=False,  # Don't modify our geometry
        )

    @staticmethod
    def merge(polyhedra: list[Polyhedron]) -> Polyhedron:
        """Merge several polyhedra into one (disjoint components allowed).

        Args:
            polyhedra: List of Polyhedron objects to merge

        Returns:
            New Polyhedron containing all points and faces, with the largest
            convexity of the inputs
        """
        if not polyhedra:
            return Polyhedron(np.empty((0, 3)), [])

        all_points = []
        all_faces = []
        offset = 0
        for poly in polyhedra:
            all_points.append(poly.points)
            all_faces.extend(tuple(i + offset for i in face) for face in poly.faces)
            offset += poly.vertex_count

        return Polyhedron(
            np.vstack(all_points),
            all_faces,
            max(poly.convexity for poly in polyhedra),
        )

    def __repr__(self) -> str:
        return f"Polyhedron(points={self.vertex_count}, faces={self.face_count}, convexity={self.convexity})"
