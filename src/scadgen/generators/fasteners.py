"""ISO metric threaded fasteners: rods, taps, nuts and bolts.

Sizes are looked up in a YAML table shipped with the package
(`scadgen/data/metric_threads.yaml`). Every function returns a scene
subtree; the helical teeth are explicit polyhedra from `ThreadGenerator`
and everything else is built from script primitives.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ..core.builders import (
    cylinder,
    difference,
    linear_extrude,
    polygon,
    rotate,
    rotate_extrude,
    translate,
    union,
)
from ..core.node import Node
from ..errors import ValidationError
from .profiles import chamfer, circumscribed_polygon
from .threads import ThreadGenerator, ThreadParameters, minor_diameter

logger = logging.getLogger(__name__)

DEFAULT_TABLE_PATH = Path(__file__).parent.parent / "data" / "metric_threads.yaml"

TABLE_FIELDS = ("pitch", "external_dMaj", "internal_dMaj", "nut_width", "chamfer_size")


@dataclass(frozen=True)
class MetricThread:
    """One row of the metric thread table (lengths in mm)."""

    size: int
    pitch: float
    external_major: float
    internal_major: float
    nut_width: float
    chamfer_size: float


class MetricThreadTable:
    """Loads ISO metric thread sizes from a YAML file.

    YAML format:
    ```yaml
    M6: {pitch: 1.0, external_dMaj: 5.794, internal_dMaj: 6.294, nut_width: 10.0, chamfer_size: 2.1}
    ```
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or DEFAULT_TABLE_PATH
        self._rows: dict[int, MetricThread] | None = None

    def _load(self) -> dict[int, MetricThread]:
        if self._rows is None:
            logger.info("Loading metric thread table from %s", self.path)
            with open(self.path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
            self._rows = self._parse(data)
        return self._rows

    def _parse(self, data: Any) -> dict[int, MetricThread]:
        if not isinstance(data, dict) or not data:
            raise ValidationError("expected a mapping of sizes", field="table", shape="metric_thread")
        rows = {}
        for key, values in data.items():
            try:
                size = int(str(key).upper().removeprefix("M"))
            except ValueError:
                raise ValidationError(f"bad size key {key!r}", field="size", shape="metric_thread") from None
            missing = [name for name in TABLE_FIELDS if name not in (values or {})]
            if missing:
                raise ValidationError(f"M{size} is missing {missing}", field=missing[0], shape="metric_thread")
            rows[size] = MetricThread(size, *(float(values[name]) for name in TABLE_FIELDS))
        return rows

    def sizes(self) -> list[int]:
        return sorted(self._load())

    def lookup(self, m: int) -> MetricThread:
        """Return the row for M`m`.

        Always succeeds: an unknown size gives the next smaller size in the
        table, and anything below the smallest size gives the smallest.
        """
        rows = self._load()
        smallest = min(rows)
        m = max(int(m), smallest)
        while m not in rows:
            m -= 1
        return rows[m]

    def clear_cache(self) -> None:
        self._rows = None


_default_table = MetricThreadTable()


def lookup(m: int) -> MetricThread:
    """Look up a size in the packaged metric thread table."""
    return _default_table.lookup(m)


def threaded_cylinder(
    d_min: float,
    d_maj: float,
    pitch: float,
    length: float,
    segments: int = 36,
    lead_in_degrees: float = 0.0,
    lead_out_degrees: float = 0.0,
    left_handed: bool = False,
    center: bool = False,
) -> Node:
    """Threaded cylinder of `length` along +Z: helical teeth on a solid core.

    The helix runs for `length - 0.7 * pitch`, so the last tooth ends
    within a small fraction of a pitch of the top of the core.
    """
    thread_length = length - 0.7 * pitch
    steps = int(thread_length / pitch * segments)
    if steps < 1:
        raise ValidationError(
            f"length {length:g} is too short for a thread of pitch {pitch:g}",
            field="length", shape="threaded_cylinder",
        )
    params = ThreadParameters(
        pitch=pitch,
        major_diameter=d_maj,
        minor_diameter=d_min,
        segments=segments,
        turns=steps / segments,
        left_handed=left_handed,
        lead_in_degrees=lead_in_degrees,
        lead_out_degrees=lead_out_degrees,
    )
    teeth = ThreadGenerator(params).to_node()
    core = cylinder(h=length, r=d_min / 2.0 + 0.0001, fn=segments)
    result = union(teeth, core)
    if center:
        result = translate([0.0, 0.0, -length / 2.0], result)
    return result


def threaded_rod(
    m: int,
    length: float,
    segments: int = 36,
    lead_in_degrees: float = 0.0,
    lead_out_degrees: float = 0.0,
    left_handed: bool = False,
    center: bool = False,
) -> Node:
    """Threaded rod of metric size M`m`."""
    info = lookup(m)
    return threaded_cylinder(
        minor_diameter(info.external_major, info.pitch),
        info.external_major,
        info.pitch,
        length,
        segments,
        lead_in_degrees,
        lead_out_degrees,
        left_handed,
        center,
    )


def tap(m: int, length: float, segments: int = 36, left_handed: bool = False, center: bool = False) -> Node:
    """Cutter for a threaded hole of size M`m` (uses the internal major diameter)."""
    info = lookup(m)
    return threaded_cylinder(
        minor_diameter(info.internal_major, info.pitch),
        info.internal_major,
        info.pitch,
        length,
        segments,
        left_handed=left_handed,
        center=center,
    )


def _hex_prism(width: float, height: float) -> Node:
    return linear_extrude(height, polygon(circumscribed_polygon(6, width / 2.0)))


def _chamfer_radius(width: float) -> float:
    return math.sqrt((0.25 * width) ** 2 + (0.5 * width) ** 2)


def hex_nut(
    m: int,
    height: float,
    segments: int = 36,
    chamfered: bool = True,
    left_handed: bool = False,
    center: bool = False,
) -> Node:
    """Hexagonal nut of size M`m`, `height` tall."""
    info = lookup(m)
    nut_tap = translate([0.0, 0.0, -10.0], tap(m, height + 20.0, segments, left_handed))
    nut = difference(_hex_prism(info.nut_width, height), nut_tap)
    if chamfered:
        nut = nut.add(external_cylinder_chamfer(
            info.chamfer_size, 1.0, _chamfer_radius(info.nut_width), height, segments,
        ))
    if center:
        nut = translate([0.0, 0.0, -height / 2.0], nut)
    return nut


def hex_bolt(
    m: int,
    length: float,
    head_height: float,
    segments: int = 36,
    lead_in_degrees: float = 0.0,
    chamfered: bool = True,
    left_handed: bool = False,
    center: bool = False,
) -> Node:
    """Hex head bolt: a head of `head_height` at z=0 with `length` of thread above it.

    The thread tapers out over `lead_in_degrees` at the free end.
    """
    info = lookup(m)
    rod = threaded_cylinder(
        minor_diameter(info.external_major, info.pitch),
        info.external_major,
        info.pitch,
        length,
        segments,
        lead_out_degrees=lead_in_degrees,
        left_handed=left_handed,
    )
    head = _hex_prism(info.nut_width, head_height)
    if chamfered:
        head = difference(head, external_cylinder_chamfer(
            info.chamfer_size, 1.0, _chamfer_radius(info.nut_width), head_height, segments,
        ))
    bolt = union(translate([0.0, 0.0, head_height], rod), head)
    if center:
        bolt = translate([0.0, 0.0, -(head_height + length) / 2.0], bolt)
    return bolt


def external_circle_chamfer(
    size: float,
    oversize: float,
    radius: float,
    degrees: float = 360.0,
    segments: int = 36,
) -> Node:
    """Ring-shaped cutter that chamfers the outer edge of a circle of `radius`."""
    return rotate_extrude(
        translate(
            [radius + size / 2.0 + oversize / 2.0, -oversize, 0.0],
            rotate(90.0, polygon(chamfer(size, oversize))),
        ),
        angle=degrees,
        convexity=5,
        fn=segments,
    )


def external_cylinder_chamfer(
    size: float,
    oversize: float,
    radius: float,
    height: float,
    segments: int = 36,
    center: bool = False,
) -> Node:
    """Cutter that chamfers both end edges of a cylinder."""
    result = union(
        external_circle_chamfer(size, oversize, radius, 360.0, segments),
        translate(
            [0.0, 0.0, height],
            rotate([180.0, 0.0, 0.0], external_circle_chamfer(size, oversize, radius, 360.0, segments)),
        ),
    )
    if center:
        result = translate([0.0, 0.0, -height / 2.0], result)
    return result
