"""2D profile generators.

Profiles are (N, 2) float arrays describing closed polygons (the last point
connects back to the first). They are used directly as `polygon` points or
as cross sections for the extrusion generators. Curves are sampled with an
explicit segment count so output is reproducible.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..core.geometry import signed_area
from ..core.vectors import EPSILON, dcos, dsin, normalize, rotate_2d
from ..errors import ValidationError

Profile = NDArray[np.float64]


def _check_count(shape: str, name: str, value: int, minimum: int) -> int:
    if int(value) != value or value < minimum:
        raise ValidationError(f"must be an integer >= {minimum}, got {value!r}", field=name, shape=shape)
    return int(value)


def _check_positive(shape: str, name: str, value: float) -> float:
    if not value > 0:
        raise ValidationError(f"must be > 0, got {value!r}", field=name, shape=shape)
    return float(value)


def as_profile(points: ArrayLike, shape: str = "profile") -> Profile:
    """Validate and convert points to an (N, 2) profile.

    Raises:
        ValidationError: If there are fewer than 3 points or the polygon
            encloses no area
    """
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValidationError(f"expected an Nx2 point array, got shape {pts.shape}", field="points", shape=shape)
    if len(pts) < 3:
        raise ValidationError(f"need at least 3 points, got {len(pts)}", field="points", shape=shape)
    if abs(signed_area(pts)) < EPSILON:
        raise ValidationError("profile encloses no area", field="points", shape=shape)
    return pts


def arc(start: ArrayLike, degrees: float, segments: int) -> Profile:
    """Points on a clockwise arc about the origin beginning at `start`.

    A full 360 degree arc omits the closing point, giving `segments` points;
    otherwise both end points are included (`segments + 1` points).
    """
    segments = _check_count("arc", "segments", segments, 1)
    if not 0 < degrees <= 360.0:
        raise ValidationError(f"must be in (0, 360], got {degrees!r}", field="degrees", shape="arc")
    n_pts = segments if degrees == 360.0 else segments + 1
    start_pt = np.asarray(start, dtype=np.float64)
    return np.array([rotate_2d(start_pt, -degrees * i / segments) for i in range(n_pts)])


def circle(radius: float, segments: int) -> Profile:
    _check_count("circle", "segments", segments, 3)
    return arc((_check_positive("circle", "radius", radius), 0.0), 360.0, segments)


def inscribed_polygon(n_sides: int, radius: float) -> Profile:
    """Regular polygon whose corners touch a circle of `radius`."""
    return circle(radius, n_sides)


def circumscribed_polygon(n_sides: int, radius: float) -> Profile:
    """Regular polygon whose edges touch a circle of `radius`."""
    n_sides = _check_count("circumscribed_polygon", "n_sides", n_sides, 3)
    return inscribed_polygon(n_sides, radius / dcos(180.0 / n_sides))


def rounded_rect(width: float, height: float, radius: float, segments: int, center: bool = False) -> Profile:
    """Rectangle with quarter-circle corners of `radius`, `segments` per corner."""
    _check_positive("rounded_rect", "width", width)
    _check_positive("rounded_rect", "height", height)
    _check_positive("rounded_rect", "radius", radius)
    if 2 * radius > min(width, height):
        raise ValidationError(
            f"radius {radius} is too large for a {width} x {height} rectangle",
            field="radius", shape="rounded_rect",
        )
    corners = [
        ((0.0, radius), (width - radius, height - radius)),
        ((radius, 0.0), (width - radius, radius)),
        ((0.0, -radius), (radius, radius)),
        ((-radius, 0.0), (radius, height - radius)),
    ]
    pts = np.vstack([arc(start, 90.0, segments) + np.array(offset) for start, offset in corners])
    if center:
        pts -= np.array([width / 2.0, height / 2.0])
    return pts


def chamfer(size: float, oversize: float) -> Profile:
    """Triangular chamfer cutter with an oversized rim for clean differences."""
    _check_positive("chamfer", "size", size)
    return np.array([
        [0.0, size + oversize],
        [oversize, size + oversize],
        [oversize, size],
        [size, oversize],
        [size + oversize, oversize],
        [oversize + size, 0.0],
        [0.0, 0.0],
    ])


def star(n_points: int, inner_radius: float, outer_radius: float) -> Profile:
    """Star outline alternating between inner and outer radius, clockwise."""
    n_points = _check_count("star", "n_points", n_points, 2)
    _check_positive("star", "inner_radius", inner_radius)
    _check_positive("star", "outer_radius", outer_radius)
    angle = -360.0 / n_points
    pts = []
    for i in range(n_points):
        pts.append((dcos(angle * i) * inner_radius, dsin(angle * i) * inner_radius))
        pts.append((dcos(angle * (i + 0.5)) * outer_radius, dsin(angle * (i + 0.5)) * outer_radius))
    return np.array(pts)


def quadratic_bezier(start: ArrayLike, control: ArrayLike, end: ArrayLike, segments: int) -> NDArray[np.float64]:
    """Sample a quadratic Bezier curve at `segments + 1` evenly spaced parameters.

    Works for 2D and 3D control points.
    """
    segments = _check_count("quadratic_bezier", "segments", segments, 1)
    t = np.linspace(0.0, 1.0, segments + 1)[:, None]
    p0, p1, p2 = (np.asarray(p, dtype=np.float64) for p in (start, control, end))
    return (1 - t) ** 2 * p0 + 2 * t * (1 - t) * p1 + t ** 2 * p2


def cubic_bezier(
    start: ArrayLike,
    control1: ArrayLike,
    control2: ArrayLike,
    end: ArrayLike,
    segments: int,
) -> NDArray[np.float64]:
    """Sample a cubic Bezier curve at `segments + 1` evenly spaced parameters.

    Works for 2D and 3D control points.
    """
    segments = _check_count("cubic_bezier", "segments", segments, 1)
    t = np.linspace(0.0, 1.0, segments + 1)[:, None]
    p0, p1, p2, p3 = (np.asarray(p, dtype=np.float64) for p in (start, control1, control2, end))
    return (
        (1 - t) ** 3 * p0
        + 3 * t * (1 - t) ** 2 * p1
        + 3 * t ** 2 * (1 - t) * p2
        + t ** 3 * p3
    )


class CubicBezierChain:
    """A smooth chain of cubic Bezier curves (2D or 3D).

    Each added curve starts at the previous end point, and its first control
    point is placed along the previous curve's end tangent so the chain is
    tangent-continuous.

    Example:
        chain = CubicBezierChain((0, 0), (1, 1), (2, 1), (3, 0), segments=8)
        chain.add(1.0, (4, -2), (6, 0), segments=8)
        pts = chain.points()
    """

    def __init__(self, start, control1, control2, end, segments: int) -> None:
        self.curves: list[list] = [[
            np.asarray(start, dtype=np.float64),
            np.asarray(control1, dtype=np.float64),
            np.asarray(control2, dtype=np.float64),
            np.asarray(end, dtype=np.float64),
            segments,
        ]]
        self.closed = False

    def add(self, control1_length: float, control2, end, segments: int) -> CubicBezierChain:
        _, _, prev_control2, prev_end, _ = self.curves[-1]
        control1 = prev_end + normalize(prev_end - prev_control2) * control1_length
        self.curves.append([
            prev_end,
            control1,
            np.asarray(control2, dtype=np.float64),
            np.asarray(end, dtype=np.float64),
            segments,
        ])
        return self

    def close(self, control1_length: float, control2, start_control1_length: float, segments: int) -> None:
        """Close the chain back to its start, keeping the seam smooth."""
        self.add(control1_length, control2, self.curves[0][0], segments)
        _, _, last_control2, last_end, _ = self.curves[-1]
        self.curves[0][1] = last_end + normalize(last_end - last_control2) * start_control1_length
        self.closed = True

    def points(self) -> NDArray[np.float64]:
        """Sample the chain without duplicating shared end points."""
        pts = []
        for start, control1, control2, end, segments in self.curves:
            curve = cubic_bezier(start, control1, control2, end, segments)
            if pts:
                curve = curve[1:]
            pts.extend(curve)
        if self.closed:
            pts.pop()
        return np.array(pts)


def bezier_star(
    n_points: int,
    inner_radius: float,
    inner_handle_length: float,
    outer_radius: float,
    outer_handle_length: float,
    segments: int,
) -> Profile:
    """Star with smooth Bezier tips and valleys."""
    n_points = _check_count("bezier_star", "n_points", n_points, 2)
    angle = 360.0 / n_points
    knots = []
    for i in range(n_points):
        knots.append(np.array([dcos(angle * i) * outer_radius, dsin(angle * i) * outer_radius]))
        knots.append(np.array([dcos(angle * (i + 0.5)) * inner_radius, dsin(angle * (i + 0.5)) * inner_radius]))

    n_knots = len(knots)
    controls = []
    for i in range(n_knots):
        handle = inner_handle_length if i % 2 == 0 else outer_handle_length
        tangent = normalize(knots[(i + 2) % n_knots] - knots[i])
        controls.append(knots[(i + 1) % n_knots] - tangent * handle)

    chain = CubicBezierChain(knots[0], controls[0], controls[0], knots[1], segments)
    for i in range(1, n_knots - 1):
        handle = outer_handle_length if i % 2 == 0 else inner_handle_length
        chain.add(handle, controls[i], knots[i + 1], segments)
    chain.close(inner_handle_length, controls[n_knots - 1], outer_handle_length, segments)
    return chain.points()


def resample(points: ArrayLike, count: int) -> Profile:
    """Resample a closed polygon to `count` points evenly spaced by arc length.

    Vertex 0 is kept in place so the seam of a lofted surface does not move.
    """
    count = _check_count("resample", "count", count, 3)
    pts = np.asarray(points, dtype=np.float64)
    loop = np.vstack([pts, pts[:1]])
    distances = np.concatenate([[0.0], np.cumsum(np.linalg.norm(np.diff(loop, axis=0), axis=1))])
    perimeter = distances[-1]
    if perimeter < EPSILON:
        raise ValidationError("profile has zero perimeter", field="points", shape="resample")
    targets = np.arange(count) * perimeter / count
    return np.column_stack([np.interp(targets, distances, loop[:, axis]) for axis in range(pts.shape[1])])


def ensure_clockwise(points: ArrayLike) -> Profile:
    """Return the profile wound clockwise, keeping vertex 0 first."""
    pts = np.asarray(points, dtype=np.float64)
    if signed_area(pts) > 0.0:
        return np.vstack([pts[:1], pts[:0:-1]])
    return pts
