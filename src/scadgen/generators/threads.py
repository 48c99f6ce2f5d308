"""Helical screw thread generator.

A thread is built by sweeping a single trapezoidal tooth cross section
along a helix. The tooth is drawn in the (radius, z) half-plane:

    (r_min, base_width) ------- root, top flank start
    (r_maj, z2)         ------- crest, top
    (r_maj, z1)         ------- crest, bottom
    (r_min, 0)          ------- root, bottom flank start

Copy j of the tooth is rotated by j * 360 / segments degrees about Z and
raised by j * lead / segments, where lead = pitch * starts. Consecutive
copies are stitched with one quad per tooth edge, and the first and last
copies cap the ends, so a one-turn thread has 4 * segments side faces
plus 2 caps and no open edges.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ..core.mesh import Polyhedron
from ..core.vectors import dtan, rotation_z
from ..errors import DegenerateGeometry, ValidationError
from .base import PolyhedronGenerator
from .extrude import skin

logger = logging.getLogger(__name__)

CLOSURE_TOLERANCE = 1e-6


def thread_height(pitch: float) -> float:
    """Height of the fundamental ISO triangle for a pitch."""
    return math.sqrt(3.0) / 2.0 * pitch


def minor_diameter(major_diameter: float, pitch: float) -> float:
    """ISO minor diameter: the tooth depth is 5/8 of the fundamental triangle."""
    return major_diameter - 2.0 * 5.0 / 8.0 * thread_height(pitch)


@dataclass(frozen=True)
class ThreadParameters:
    """Parameters of a helical thread.

    Attributes:
        pitch: Axial distance between adjacent teeth
        major_diameter: Crest diameter
        minor_diameter: Root diameter (ISO value derived from the pitch if None)
        tooth_angle: Included flank angle in degrees
        starts: Number of interleaved helices
        segments: Tooth copies per revolution
        turns: Revolutions of each helix; turns * segments must be whole
        left_handed: Wind the helix clockwise seen from above
        lead_in_degrees: Angle over which the tooth grows from the root
        lead_out_degrees: Angle over which the tooth shrinks back to the root
        base_ratio: Tooth width at the root as a fraction of the pitch
    """

    pitch: float
    major_diameter: float
    minor_diameter: float | None = None
    tooth_angle: float = 60.0
    starts: int = 1
    segments: int = 32
    turns: float = 1.0
    left_handed: bool = False
    lead_in_degrees: float = 0.0
    lead_out_degrees: float = 0.0
    base_ratio: float = 0.75

    def __post_init__(self) -> None:
        def fail(field: str, message: str) -> None:
            raise ValidationError(message, field=field, shape="thread")

        if not self.pitch > 0:
            fail("pitch", f"must be > 0, got {self.pitch!r}")
        if int(self.segments) != self.segments or self.segments < 3:
            fail("segments", f"must be an integer >= 3, got {self.segments!r}")
        if int(self.starts) != self.starts or self.starts < 1:
            fail("starts", f"must be an integer >= 1, got {self.starts!r}")
        if not self.turns > 0:
            fail("turns", f"must be > 0, got {self.turns!r}")
        steps = self.turns * self.segments
        if abs(steps - round(steps)) > 1e-9:
            fail("turns", f"turns * segments must be a whole number of steps, got {steps:g}")
        if not 0.0 < self.tooth_angle < 180.0:
            fail("tooth_angle", f"must be in (0, 180), got {self.tooth_angle!r}")
        if not 0.0 < self.base_ratio <= 1.0:
            fail("base_ratio", f"must be in (0, 1], got {self.base_ratio!r}")
        if self.lead_in_degrees < 0 or self.lead_out_degrees < 0:
            fail("lead_in_degrees", "lead-in and lead-out angles must be >= 0")
        if self.lead_in_degrees + self.lead_out_degrees > 360.0 * self.turns:
            fail("lead_in_degrees", "lead-in and lead-out together exceed the thread length")

        if self.minor_diameter is None:
            object.__setattr__(self, "minor_diameter", minor_diameter(self.major_diameter, self.pitch))
        if not self.minor_diameter > 0:
            fail("minor_diameter", f"must be > 0, got {self.minor_diameter!r}")
        if not self.major_diameter > self.minor_diameter:
            fail("major_diameter", f"must exceed the minor diameter {self.minor_diameter:g}")
        if self.crest_width < 0:
            fail(
                "tooth_angle",
                f"a {self.tooth_angle:g} degree tooth of depth {self.depth:g} does not fit "
                f"in a base of {self.base_width:g}",
            )

    @property
    def depth(self) -> float:
        return (self.major_diameter - self.minor_diameter) / 2.0

    @property
    def base_width(self) -> float:
        return self.base_ratio * self.pitch

    @property
    def crest_width(self) -> float:
        return self.base_width - 2.0 * self.depth * dtan(self.tooth_angle / 2.0)

    @property
    def lead(self) -> float:
        """Axial advance of one helix per revolution."""
        return self.pitch * self.starts

    @property
    def steps(self) -> int:
        return int(round(self.turns * self.segments))


class ThreadGenerator(PolyhedronGenerator):
    """Generates the teeth of a thread as one polyhedron.

    The teeth sit on a core of the minor diameter, which is not included;
    pair the result with a cylinder to get a solid rod (see
    `scadgen.generators.fasteners`).

    Example:
        params = ThreadParameters(pitch=1.0, major_diameter=6.0, turns=4)
        rod = union(ThreadGenerator(params).to_node(), cylinder(h=4.75, r=params.minor_diameter / 2))
    """

    def __init__(self, params: ThreadParameters) -> None:
        self.params = params

    def _crest_scale(self, step: int) -> float:
        """Fraction of the full tooth depth at a step; never zero."""
        p = self.params
        n_in = int(p.segments * p.lead_in_degrees / 360.0)
        n_out = int(p.segments * p.lead_out_degrees / 360.0)
        if step < n_in:
            return (step + 1) / (n_in + 1)
        remaining = p.steps - step
        if remaining < n_out:
            return (remaining + 1) / (n_out + 1)
        return 1.0

    def tooth(self, scale: float = 1.0) -> NDArray[np.float64]:
        """Tooth cross section as (r, z) points, grown to `scale` of full depth."""
        p = self.params
        r_min = p.minor_diameter / 2.0
        r_crest = r_min + p.depth * scale
        z1 = (p.base_width - p.crest_width) / 2.0
        z2 = z1 + p.crest_width
        return np.array([
            [r_min, 0.0],
            [r_crest, z1],
            [r_crest, z2],
            [r_min, p.base_width],
        ])

    def _ring(self, step: int) -> NDArray[np.float64]:
        p = self.params
        profile = self.tooth(self._crest_scale(step))
        angle = step * 360.0 / p.segments
        if p.left_handed:
            angle = -angle
        points = np.column_stack([profile[:, 0], np.zeros(len(profile)), profile[:, 1]])
        points[:, 2] += step * p.lead / p.segments
        return points @ rotation_z(angle).T

    def _check_closure(self, first: NDArray[np.float64], last: NDArray[np.float64]) -> None:
        """The last copy must equal the first one advanced by whole turns."""
        p = self.params
        angle = 360.0 * p.turns * (-1.0 if p.left_handed else 1.0)
        expected = first @ rotation_z(angle).T
        expected[:, 2] += p.lead * p.turns
        # Root points are never affected by lead-in or lead-out
        root = [0, 3]
        if not np.allclose(expected[root], last[root], atol=CLOSURE_TOLERANCE):
            error = np.max(np.abs(expected[root] - last[root]))
            raise DegenerateGeometry(f"Thread helix does not close: end is off by {error:.3g}")

    def generate(self) -> Polyhedron:
        p = self.params
        rings = [self._ring(step) for step in range(p.steps + 1)]
        self._check_closure(rings[0], rings[-1])

        convexity = int(p.turns) + 1
        helix = skin(rings, convexity=convexity)
        if p.starts == 1:
            result = helix
        else:
            parts = [helix]
            for start in range(1, int(p.starts)):
                angle = 360.0 * start / p.starts
                parts.append(Polyhedron(helix.points @ rotation_z(angle).T, helix.faces, convexity))
            result = Polyhedron.merge(parts)

        logger.debug(
            "thread pitch=%g d=%g starts=%d: %d points, %d faces",
            p.pitch, p.major_diameter, p.starts, result.vertex_count, result.face_count,
        )
        return result
