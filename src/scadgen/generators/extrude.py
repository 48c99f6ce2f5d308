"""Profile extrusion generators: linear extrude, loft, revolve and sweep.

All of them reduce to `skin`, which stitches an ordered list of 3D rings
(transformed copies of closed 2D profiles) into a polyhedron:

- Corresponding vertices of consecutive rings are joined by quad faces
- An open skin is capped with the first and last ring as single polygon faces
- A closed skin joins the last ring back to the first and has no caps

Rings must all have the same vertex count. Vertex 0 of every ring is the
seam along which the side faces start.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..core.geometry import Face, orient_outward
from ..core.mesh import Polyhedron
from ..core.transform import Transform
from ..core.vectors import EPSILON, affine, frame_from_tangent, rotate_2d, rotation_z, transform_points
from ..errors import ValidationError
from .base import PolyhedronGenerator
from .profiles import as_profile, ensure_clockwise, resample as resample_profile

logger = logging.getLogger(__name__)


def _lift(profile: NDArray[np.float64]) -> NDArray[np.float64]:
    """Place a 2D profile in the XY plane."""
    return np.column_stack([profile, np.zeros(len(profile))])


def skin(rings: Sequence[ArrayLike], closed: bool = False, convexity: int = 1) -> Polyhedron:
    """Join 3D rings into a closed polyhedron.

    Args:
        rings: Sequence of (N, 3) point arrays, all with the same N >= 3
        closed: Join the last ring back to the first instead of capping
        convexity: Rendering hint for the result

    Returns:
        Polyhedron wound clockwise seen from outside

    Raises:
        ValidationError: If fewer than two rings are given (three when
            closed) or the vertex counts differ
    """
    rings = [np.asarray(ring, dtype=np.float64) for ring in rings]
    minimum = 3 if closed else 2
    if len(rings) < minimum:
        raise ValidationError(f"need at least {minimum} rings, got {len(rings)}", field="rings", shape="skin")
    n = len(rings[0])
    if n < 3:
        raise ValidationError(f"rings need at least 3 points, got {n}", field="rings", shape="skin")
    for index, ring in enumerate(rings):
        if ring.shape != (n, 3):
            raise ValidationError(
                f"ring {index} has shape {ring.shape}, expected ({n}, 3); "
                "profiles must have matching vertex counts",
                field="rings", shape="skin",
            )

    points = np.vstack(rings)
    faces: list[Face] = []
    bands = len(rings) if closed else len(rings) - 1
    for k in range(bands):
        a = k * n
        b = ((k + 1) % len(rings)) * n
        for i in range(n):
            i2 = (i + 1) % n
            faces.append((a + i, a + i2, b + i2, b + i))

    if not closed:
        last = (len(rings) - 1) * n
        faces.append(tuple(reversed(range(n))))
        faces.append(tuple(range(last, last + n)))

    faces = orient_outward(points, faces)
    logger.debug("skin: %d rings x %d points, %d faces", len(rings), n, len(faces))
    return Polyhedron(points, faces, convexity)


@dataclass
class LinearExtrudeGenerator(PolyhedronGenerator):
    """Extrudes a profile along +Z, optionally twisting and scaling it.

    Attributes:
        profile: Closed 2D polygon
        height: Extrusion height
        twist: Clockwise twist in degrees over the full height
        scale: Scale factor of the top profile relative to the bottom
        slices: Number of intermediate layers
    """

    profile: ArrayLike
    height: float = 1.0
    twist: float = 0.0
    scale: float = 1.0
    slices: int = 1

    def __post_init__(self) -> None:
        self.profile = as_profile(self.profile, "linear_extrude")
        if not self.height > 0:
            raise ValidationError(f"must be > 0, got {self.height!r}", field="height", shape="linear_extrude")
        if not self.scale > 0:
            raise ValidationError(f"must be > 0, got {self.scale!r}", field="scale", shape="linear_extrude")
        if int(self.slices) != self.slices or self.slices < 1:
            raise ValidationError(f"must be an integer >= 1, got {self.slices!r}", field="slices",
                                  shape="linear_extrude")

    def generate(self) -> Polyhedron:
        rings = []
        for k in range(int(self.slices) + 1):
            t = k / self.slices
            factor = 1.0 + (self.scale - 1.0) * t
            layer = rotate_2d(self.profile, -self.twist * t) * factor
            rings.append(np.column_stack([layer, np.full(len(layer), self.height * t)]))
        return skin(rings)


@dataclass
class LoftGenerator(PolyhedronGenerator):
    """Connects a sequence of cross sections into one solid.

    Each profile is placed either at a height along Z or by its own
    transform. Profiles with differing vertex counts are rejected unless
    `resample` is set, in which case every profile is resampled by arc
    length to the largest count.

    Attributes:
        profiles: Closed 2D polygons, bottom to top
        heights: Z position of each profile
        transforms: Placement of each profile (instead of heights)
        resample: Resample mismatched profiles instead of failing
    """

    profiles: Sequence[ArrayLike]
    heights: Sequence[float] | None = None
    transforms: Sequence[Transform] | None = None
    resample: bool = False
    convexity: int = 1

    def __post_init__(self) -> None:
        if len(self.profiles) < 2:
            raise ValidationError(f"need at least 2 profiles, got {len(self.profiles)}",
                                  field="profiles", shape="loft")
        if (self.heights is None) == (self.transforms is None):
            raise ValidationError("give exactly one of heights or transforms", field="heights", shape="loft")
        placements = self.heights if self.heights is not None else self.transforms
        if len(placements) != len(self.profiles):
            raise ValidationError(
                f"{len(placements)} placements for {len(self.profiles)} profiles",
                field="heights" if self.heights is not None else "transforms", shape="loft",
            )
        if self.heights is not None and np.any(np.diff(self.heights) <= 0):
            raise ValidationError("heights must be strictly increasing", field="heights", shape="loft")

        profiles = [ensure_clockwise(as_profile(p, "loft")) for p in self.profiles]
        counts = {len(p) for p in profiles}
        if len(counts) > 1:
            if not self.resample:
                raise ValidationError(
                    f"profiles have mismatched vertex counts {sorted(counts)}; "
                    "pass resample=True to resample them",
                    field="profiles", shape="loft",
                )
            target = max(counts)
            profiles = [resample_profile(p, target) for p in profiles]
        self.profiles = profiles

    def generate(self) -> Polyhedron:
        if self.heights is not None:
            matrices = [affine(translation=(0.0, 0.0, z)) for z in self.heights]
        else:
            matrices = [t.matrix if isinstance(t, Transform) else np.asarray(t) for t in self.transforms]
        rings = [transform_points(m, _lift(p)) for m, p in zip(matrices, self.profiles)]
        return skin(rings, convexity=self.convexity)


@dataclass
class RevolveGenerator(PolyhedronGenerator):
    """Revolves a profile drawn in the XZ half-plane about the Z axis.

    The profile's x coordinate becomes the radius and y becomes the height.
    A full turn produces a closed ring with no caps; a partial turn is
    capped by the profile at both ends.

    Attributes:
        profile: Closed 2D polygon with every x > 0
        degrees: Sweep angle in (0, 360]
        segments: Number of angular steps
    """

    profile: ArrayLike
    degrees: float = 360.0
    segments: int = 32
    convexity: int = 1

    def __post_init__(self) -> None:
        self.profile = ensure_clockwise(as_profile(self.profile, "revolve"))
        if np.any(self.profile[:, 0] <= 0.0):
            raise ValidationError("profile must lie strictly on the +X side of the axis",
                                  field="profile", shape="revolve")
        if not 0 < self.degrees <= 360.0:
            raise ValidationError(f"must be in (0, 360], got {self.degrees!r}", field="degrees", shape="revolve")
        if int(self.segments) != self.segments or self.segments < 3:
            raise ValidationError(f"must be an integer >= 3, got {self.segments!r}",
                                  field="segments", shape="revolve")

    def generate(self) -> Polyhedron:
        segments = int(self.segments)
        full = abs(self.degrees - 360.0) < EPSILON
        base = np.column_stack([self.profile[:, 0], np.zeros(len(self.profile)), self.profile[:, 1]])
        step = self.degrees / segments
        count = segments if full else segments + 1
        rings = [base @ rotation_z(step * j).T for j in range(count)]
        return skin(rings, closed=full, convexity=self.convexity)


@dataclass
class SweepGenerator(PolyhedronGenerator):
    """Sweeps a profile along a 3D path.

    At every path point the profile is placed in the plane perpendicular to
    the local path direction (the average of the neighbouring segments),
    with the profile's Y axis kept as close to +Z as possible.

    Attributes:
        profile: Closed 2D polygon
        path: (M, 3) path points
        twist_degrees: Total rotation of the profile along the path
        closed: Treat the path as a loop (no caps)
    """

    profile: ArrayLike
    path: ArrayLike
    twist_degrees: float = 0.0
    closed: bool = False
    convexity: int = 1

    def __post_init__(self) -> None:
        self.profile = ensure_clockwise(as_profile(self.profile, "sweep"))
        path = np.asarray(self.path, dtype=np.float64)
        minimum = 3 if self.closed else 2
        if path.ndim != 2 or path.shape[1] != 3 or len(path) < minimum:
            raise ValidationError(f"path must be an Mx3 array with at least {minimum} points",
                                  field="path", shape="sweep")
        if np.any(np.linalg.norm(np.diff(path, axis=0), axis=1) < EPSILON):
            raise ValidationError("path has repeated consecutive points", field="path", shape="sweep")
        self.path = path

    def _tangent(self, index: int) -> NDArray[np.float64]:
        path = self.path
        m = len(path)
        if self.closed:
            return path[(index + 1) % m] - path[index - 1]
        if index == 0:
            return path[1] - path[0]
        if index == m - 1:
            return path[-1] - path[-2]
        return path[index + 1] - path[index - 1]

    def generate(self) -> Polyhedron:
        m = len(self.path)
        twist_step = self.twist_degrees / (m if self.closed else m - 1)
        rings = []
        for index in range(m):
            frame = frame_from_tangent(self._tangent(index))
            layer = _lift(rotate_2d(self.profile, twist_step * index))
            rings.append(layer @ frame.T + self.path[index])
        return skin(rings, closed=self.closed, convexity=self.convexity)


def linear_extrude(profile: ArrayLike, height: float, twist: float = 0.0, scale: float = 1.0,
                   slices: int = 1) -> Polyhedron:
    return LinearExtrudeGenerator(profile, height, twist, scale, slices).generate()


def loft(profiles: Sequence[ArrayLike], heights: Sequence[float] | None = None,
         transforms: Sequence[Transform] | None = None, resample: bool = False) -> Polyhedron:
    return LoftGenerator(profiles, heights, transforms, resample).generate()


def revolve(profile: ArrayLike, degrees: float = 360.0, segments: int = 32) -> Polyhedron:
    return RevolveGenerator(profile, degrees, segments).generate()


def sweep(profile: ArrayLike, path: ArrayLike, twist_degrees: float = 0.0, closed: bool = False) -> Polyhedron:
    return SweepGenerator(profile, path, twist_degrees, closed).generate()
