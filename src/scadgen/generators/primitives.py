"""Explicit-mesh primitive generators.

These build the same solids as the `cube`, `cylinder` and `sphere`
statements, but as polyhedra with every point and face listed. They are
useful as inputs to mesh-level operations (merging, transforming, volume
checks) and as reference solids in tests. All results are Z-up and
watertight.
"""

import logging
from dataclasses import dataclass

import numpy as np

from ..core.geometry import orient_outward
from ..core.mesh import Polyhedron
from ..core.shapes import check_number
from ..errors import ValidationError
from .base import PolyhedronGenerator

logger = logging.getLogger(__name__)


def _check_segments(shape: str, name: str, value: int, minimum: int = 3) -> None:
    if int(value) != value or value < minimum:
        raise ValidationError(f"must be an integer >= {minimum}, got {value!r}", field=name, shape=shape)


@dataclass
class CubeGenerator(PolyhedronGenerator):
    """Generates a box.

    Attributes:
        size_x: Extent along X
        size_y: Extent along Y
        size_z: Extent along Z
        center: Center the box on the origin instead of placing its corner there
    """

    size_x: float = 1.0
    size_y: float = 1.0
    size_z: float = 1.0
    center: bool = False

    def __post_init__(self) -> None:
        for name in ("size_x", "size_y", "size_z"):
            if check_number("cube", name, getattr(self, name)) == 0.0:
                raise ValidationError("must be > 0", field=name, shape="cube")

    def generate(self) -> Polyhedron:
        x, y, z = self.size_x, self.size_y, self.size_z
        points = np.array([
            [0, 0, 0], [x, 0, 0], [x, y, 0], [0, y, 0],
            [0, 0, z], [x, 0, z], [x, y, z], [0, y, z],
        ], dtype=np.float64)
        if self.center:
            points -= np.array([x, y, z]) / 2.0

        # Clockwise seen from outside
        faces = [
            (0, 1, 2, 3),  # bottom
            (4, 5, 1, 0),  # front
            (7, 6, 5, 4),  # top
            (5, 6, 2, 1),  # right
            (6, 7, 3, 2),  # back
            (7, 4, 0, 3),  # left
        ]
        return Polyhedron(points, faces)


@dataclass
class CylinderGenerator(PolyhedronGenerator):
    """Generates a cylinder, frustum or cone along +Z.

    A zero radius at either end collapses that ring into a single apex
    point, so cones stay manifold.

    Attributes:
        radius1: Radius at z=0
        radius2: Radius at z=height
        height: Height of the cylinder
        segments: Number of segments around the circumference
        center: Center along Z
    """

    radius1: float = 0.5
    radius2: float = 0.5
    height: float = 1.0
    segments: int = 32
    center: bool = False

    def __post_init__(self) -> None:
        check_number("cylinder", "radius1", self.radius1)
        check_number("cylinder", "radius2", self.radius2)
        if check_number("cylinder", "height", self.height) == 0.0:
            raise ValidationError("must be > 0", field="height", shape="cylinder")
        if self.radius1 == 0.0 and self.radius2 == 0.0:
            raise ValidationError("at least one radius must be > 0", field="radius1", shape="cylinder")
        _check_segments("cylinder", "segments", self.segments)

    def generate(self) -> Polyhedron:
        n = int(self.segments)
        z0 = -self.height / 2 if self.center else 0.0
        z1 = z0 + self.height
        theta = 2 * np.pi * np.arange(n) / n

        points = []
        faces = []

        def ring(radius: float, z: float) -> list[int]:
            start = len(points)
            if radius == 0.0:
                points.append([0.0, 0.0, z])
                return [start] * n
            for t in theta:
                points.append([radius * np.cos(t), radius * np.sin(t), z])
            return list(range(start, start + n))

        bottom = ring(self.radius1, z0)
        top = ring(self.radius2, z1)

        for i in range(n):
            j = (i + 1) % n
            face = (bottom[i], top[i], top[j], bottom[j])
            # Drop the repeated apex index on cone sides
            faces.append(tuple(dict.fromkeys(face)))

        if self.radius1 > 0.0:
            faces.append(tuple(bottom))
        if self.radius2 > 0.0:
            faces.append(tuple(reversed(top)))

        vertices = np.array(points, dtype=np.float64)
        faces = orient_outward(vertices, faces)
        logger.debug("cylinder: %d points, %d faces", len(vertices), len(faces))
        return Polyhedron(vertices, faces)


@dataclass
class SphereGenerator(PolyhedronGenerator):
    """Generates a UV sphere with a single vertex at each pole.

    Attributes:
        radius: Radius of the sphere
        segments: Number of horizontal segments (longitude)
        rings: Number of vertical rings (latitude)
    """

    radius: float = 0.5
    segments: int = 32
    rings: int = 16

    def __post_init__(self) -> None:
        if check_number("sphere", "radius", self.radius) == 0.0:
            raise ValidationError("must be > 0", field="radius", shape="sphere")
        _check_segments("sphere", "segments", self.segments)
        _check_segments("sphere", "rings", self.rings, minimum=2)

    def generate(self) -> Polyhedron:
        n = int(self.segments)
        rings = int(self.rings)
        r = self.radius

        points = [[0.0, 0.0, r]]
        for ring in range(1, rings):
            phi = np.pi * ring / rings
            z = r * np.cos(phi)
            ring_radius = r * np.sin(phi)
            for seg in range(n):
                theta = 2 * np.pi * seg / n
                points.append([ring_radius * np.cos(theta), ring_radius * np.sin(theta), z])
        points.append([0.0, 0.0, -r])
        bottom_pole = len(points) - 1

        def ring_index(ring: int, seg: int) -> int:
            return 1 + (ring - 1) * n + seg % n

        faces = []
        for seg in range(n):
            faces.append((0, ring_index(1, seg + 1), ring_index(1, seg)))

        for ring in range(1, rings - 1):
            for seg in range(n):
                faces.append((
                    ring_index(ring + 1, seg),
                    ring_index(ring, seg),
                    ring_index(ring, seg + 1),
                    ring_index(ring + 1, seg + 1),
                ))

        for seg in range(n):
            faces.append((bottom_pole, ring_index(rings - 1, seg), ring_index(rings - 1, seg + 1)))

        vertices = np.array(points, dtype=np.float64)
        logger.debug("sphere: %d points, %d faces", len(vertices), len(faces))
        return Polyhedron(vertices, orient_outward(vertices, faces))
