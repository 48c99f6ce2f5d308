"""Cup scene: revolved Bezier body with a swept handle."""

import numpy as np

from ..core.builders import difference, polygon, polyhedron, rotate_extrude, union
from ..core.node import Node
from ..core.transform import Transform
from ..generators.extrude import sweep
from ..generators.profiles import cubic_bezier, rounded_rect

SEGMENTS = 72
CUP_SEGMENTS = 144
SLICES = 48


def _body_profile(wall: float) -> np.ndarray:
    """Half cross section of the cup, offset inwards by `wall`."""
    curve = cubic_bezier(
        (40.0 - wall, wall),
        (40.0 - wall, 33.0),
        (60.0 - wall, 66.0),
        (60.0 - wall, 100.0 + wall),
        SLICES,
    )
    return np.vstack([[0.0, wall], curve, [0.0, 100.0 + wall]])


def create_cup_scene() -> Node:
    """Create a cup with a 3mm wall and a handle.

    Returns:
        The root node of the cup.
    """
    blank = rotate_extrude(polygon(_body_profile(0.0)), convexity=2, fn=CUP_SEGMENTS)
    inner = rotate_extrude(polygon(_body_profile(3.0)), convexity=1, fn=CUP_SEGMENTS)

    handle_path = cubic_bezier(
        (37.0, 20.0, 0.0),
        (70.0, 30.0, 0.0),
        (120.0, 90.0, 0.0),
        (57.0, 90.0, 0.0),
        SEGMENTS,
    )
    handle_profile = rounded_rect(8.0, 20.0, 2.5, SEGMENTS, center=True)
    handle = sweep(handle_profile, handle_path).transform(Transform.euler((90.0, 0.0, 0.0)))

    return difference(union(blank, polyhedron(handle.with_convexity(2))), inner)
