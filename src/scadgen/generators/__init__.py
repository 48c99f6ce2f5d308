"""Geometry generators."""

from .base import CompositeGenerator, Generator, PolyhedronGenerator
from .primitives import CubeGenerator, CylinderGenerator, SphereGenerator
from .extrude import (
    LinearExtrudeGenerator,
    LoftGenerator,
    RevolveGenerator,
    SweepGenerator,
    linear_extrude,
    loft,
    revolve,
    skin,
    sweep,
)
from .threads import ThreadGenerator, ThreadParameters
from .fasteners import MetricThreadTable, hex_bolt, hex_nut, tap, threaded_rod
from .pipe import CurvedPipe, StraightPipe, TaperedPipe
from . import profiles

__all__ = [
    "Generator",
    "PolyhedronGenerator",
    "CompositeGenerator",
    "CubeGenerator",
    "SphereGenerator",
    "CylinderGenerator",
    "LinearExtrudeGenerator",
    "LoftGenerator",
    "RevolveGenerator",
    "SweepGenerator",
    "linear_extrude",
    "loft",
    "revolve",
    "skin",
    "sweep",
    "ThreadGenerator",
    "ThreadParameters",
    "MetricThreadTable",
    "threaded_rod",
    "tap",
    "hex_nut",
    "hex_bolt",
    "StraightPipe",
    "TaperedPipe",
    "CurvedPipe",
    "profiles",
]
