"""Loft scene: a circle blending into a star."""

from ..core.builders import color, polyhedron
from ..core.node import Node
from ..generators.extrude import loft
from ..generators.profiles import circle, star


def create_loft_scene() -> Node:
    """Loft a 14-sided circle at z=0 into a 7-pointed star at z=30."""
    lower = circle(10.0, 14)
    upper = star(7, 10.0, 20.0)
    return color("steelblue", polyhedron(loft([lower, upper], heights=[0.0, 30.0])))
