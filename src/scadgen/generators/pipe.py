"""Pipe generators: straight, tapered and curved, hollow or solid.

A pipe with `wall_thickness=None` is solid.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..core.builders import circle, cylinder, difference, rotate, rotate_extrude, translate
from ..core.node import Node
from ..errors import ValidationError
from .base import CompositeGenerator


def _check_wall(od: float, wall_thickness: float | None, field: str = "od") -> None:
    if not od > 0:
        raise ValidationError(f"must be > 0, got {od!r}", field=field, shape="pipe")
    if wall_thickness is not None and not (wall_thickness > 0 and od - 2.0 * wall_thickness > 0):
        raise ValidationError(
            f"wall thickness {wall_thickness!r} leaves no bore in a pipe of diameter {od!r}",
            field="wall_thickness", shape="pipe",
        )


@dataclass
class TaperedPipe(CompositeGenerator):
    """A pipe along +Z whose outside diameter goes from `od1` to `od2`.

    The bore is extended slightly past both ends so the difference leaves
    no skin.
    """

    od1: float
    od2: float
    length: float
    wall_thickness: float | None = None
    center: bool = False
    fn: int = 32

    def __post_init__(self) -> None:
        _check_wall(self.od1, self.wall_thickness, "od1")
        _check_wall(self.od2, self.wall_thickness, "od2")
        if not self.length > 0:
            raise ValidationError(f"must be > 0, got {self.length!r}", field="length", shape="pipe")

    def generate(self) -> Node:
        outer = cylinder(h=self.length, d1=self.od1, d2=self.od2, center=self.center, fn=self.fn)
        if self.wall_thickness is None:
            return outer
        wall = 2.0 * self.wall_thickness
        bore = cylinder(
            h=self.length + 0.002, d1=self.od1 - wall, d2=self.od2 - wall, center=self.center, fn=self.fn,
        )
        return difference(outer, translate([0.0, 0.0, -0.001], bore))


class StraightPipe(TaperedPipe):
    """A pipe of constant diameter along +Z."""

    def __init__(self, od: float, length: float, wall_thickness: float | None = None,
                 center: bool = False, fn: int = 32) -> None:
        super().__init__(od, od, length, wall_thickness, center, fn)


@dataclass
class CurvedPipe(CompositeGenerator):
    """A pipe bent through `degrees` around a curve of `radius`.

    The section is revolved about an axis parallel to Y through
    x = -(od / 2 + radius), so the start of the pipe is centered on the origin.
    """

    od: float
    degrees: float
    radius: float
    wall_thickness: float | None = None
    fn: int = 32

    def __post_init__(self) -> None:
        _check_wall(self.od, self.wall_thickness)
        if not 0.0 < self.degrees <= 360.0:
            raise ValidationError(f"must be in (0, 360], got {self.degrees!r}", field="degrees", shape="pipe")
        if self.radius < 0:
            raise ValidationError(f"must be >= 0, got {self.radius!r}", field="radius", shape="pipe")

    def generate(self) -> Node:
        section = circle(d=self.od, fn=self.fn)
        if self.wall_thickness is not None:
            section = difference(section, circle(d=self.od - 2.0 * self.wall_thickness, fn=self.fn))
        offset = self.od / 2.0 + self.radius
        return translate(
            [-offset, 0.0, 0.0],
            rotate(
                [90.0, 0.0, 0.0],
                rotate_extrude(translate([offset, 0.0, 0.0], section), angle=self.degrees, convexity=4, fn=self.fn),
            ),
        )


def straight(od: float, wall_thickness: float, length: float, center: bool = False, fn: int = 32) -> Node:
    return StraightPipe(od, length, wall_thickness, center, fn).generate()


def straight_solid(od: float, length: float, center: bool = False, fn: int = 32) -> Node:
    return StraightPipe(od, length, None, center, fn).generate()


def tapered(od1: float, od2: float, wall_thickness: float, length: float, center: bool = False,
            fn: int = 32) -> Node:
    return TaperedPipe(od1, od2, length, wall_thickness, center, fn).generate()


def tapered_solid(od1: float, od2: float, length: float, center: bool = False, fn: int = 32) -> Node:
    return TaperedPipe(od1, od2, length, None, center, fn).generate()


def curved(od: float, wall_thickness: float, degrees: float, radius: float, fn: int = 32) -> Node:
    return CurvedPipe(od, degrees, radius, wall_thickness, fn).generate()


def curved_solid(od: float, degrees: float, radius: float, fn: int = 32) -> Node:
    return CurvedPipe(od, degrees, radius, None, fn).generate()
