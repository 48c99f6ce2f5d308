"""Bolt scene: an M8 hex bolt with a nut threaded onto it."""

from ..core.builders import color, translate, union
from ..core.node import Node
from ..generators.fasteners import hex_bolt, hex_nut

SEGMENTS = 36


def create_bolt_scene() -> Node:
    """Create an M8 x 20 bolt with a 6.5mm nut part way down the shank."""
    bolt = hex_bolt(8, 20.0, 5.5, SEGMENTS, lead_in_degrees=180.0)
    nut = translate([0.0, 0.0, 14.0], hex_nut(8, 6.5, SEGMENTS))
    return union(color("silver", bolt), color("goldenrod", nut))
