"""Builder functions mirroring the script vocabulary.

These are thin constructors over the node and shape classes so scenes read
like the script they produce:

    model = union(
        cube([1, 1, 1]),
        translate([0.5, 0, 0], sphere(0.5)),
    )
"""

from __future__ import annotations

import numbers

import numpy as np
from numpy.typing import ArrayLike

from ..errors import ValidationError
from .mesh import Polyhedron
from .node import (
    BooleanNode,
    BooleanOp,
    ColorNode,
    LinearExtrudeNode,
    Modifier,
    ModifierNode,
    Node,
    OffsetNode,
    ProjectionNode,
    ResizeNode,
    RotateExtrudeNode,
    ShapeNode,
    TransformNode,
)
from .shapes import (
    Circle,
    Cube,
    Cylinder,
    Import,
    Polygon,
    Sphere,
    Square,
    Surface,
    Text,
    check_convexity,
    check_number,
    check_resolution,
    check_vector,
)
from .transform import Transform


def _radius(shape: str, r: float | None, d: float | None, default: float | None = 1.0,
            name: str = "r") -> float | None:
    """Resolve a radius given either directly or as a diameter."""
    if r is not None and d is not None:
        raise ValidationError(f"give either {name} or d{name[1:]}, not both", field=name, shape=shape)
    if d is not None:
        return check_number(shape, "d" + name[1:], d) / 2.0
    if r is not None:
        return r
    return default


# Primitives

def cube(size: ArrayLike | float = 1.0, center: bool = False) -> ShapeNode:
    if isinstance(size, numbers.Real):
        size = (size, size, size)
    return ShapeNode(Cube(tuple(size), center))


def sphere(r: float | None = None, d: float | None = None, fa: float | None = None,
           fs: float | None = None, fn: int | None = None) -> ShapeNode:
    return ShapeNode(Sphere(_radius("sphere", r, d), fa, fs, fn))


def cylinder(h: float = 1.0, r: float | None = None, r1: float | None = None, r2: float | None = None,
             d: float | None = None, d1: float | None = None, d2: float | None = None,
             center: bool = False, fa: float | None = None, fs: float | None = None,
             fn: int | None = None) -> ShapeNode:
    """Cylinder or cone along +Z.

    `r`/`d` set both ends; `r1`/`d1` and `r2`/`d2` override the bottom and
    top radius respectively.
    """
    both = _radius("cylinder", r, d)
    bottom = _radius("cylinder", r1, d1, default=both, name="r1")
    top = _radius("cylinder", r2, d2, default=both, name="r2")
    return ShapeNode(Cylinder(h, bottom, top, center, fa, fs, fn))


def circle(r: float | None = None, d: float | None = None, fa: float | None = None,
           fs: float | None = None, fn: int | None = None) -> ShapeNode:
    return ShapeNode(Circle(_radius("circle", r, d), fa, fs, fn))


def square(size: ArrayLike | float = 1.0, center: bool = False) -> ShapeNode:
    if isinstance(size, numbers.Real):
        size = (size, size)
    return ShapeNode(Square(tuple(size), center))


def polygon(points: ArrayLike, paths=None, convexity: int = 1) -> ShapeNode:
    pts = np.asarray(points, dtype=np.float64)
    return ShapeNode(Polygon(tuple(map(tuple, pts.reshape(-1, 2) if pts.size else pts)), paths, convexity))


def polyhedron(points: ArrayLike | Polyhedron, faces=None, convexity: int = 1) -> ShapeNode:
    """Explicit mesh leaf, from points and faces or from a ready Polyhedron."""
    if isinstance(points, Polyhedron):
        return ShapeNode(points)
    if faces is None:
        raise ValidationError("faces are required with raw points", field="faces", shape="polyhedron")
    return ShapeNode(Polyhedron(points, faces, convexity))


def text(value: str, size: float = 10.0, font: str = "Liberation Sans", halign: str = "left",
         valign: str = "baseline", spacing: float = 1.0, direction: str = "ltr",
         language: str = "en", script: str = "latin", fn: int | None = None) -> ShapeNode:
    return ShapeNode(Text(value, size, font, halign, valign, spacing, direction, language, script, fn))


def import_file(file: str, convexity: int = 1) -> ShapeNode:
    return ShapeNode(Import(file, convexity))


def surface(file: str, center: bool = False, invert: bool = False, convexity: int = 1) -> ShapeNode:
    return ShapeNode(Surface(file, center, invert, convexity))


# Booleans

def union(*children: Node) -> BooleanNode:
    """Union of the children; with no children this is the empty solid."""
    return BooleanNode(BooleanOp.UNION, children)


def difference(*children: Node) -> BooleanNode:
    """First child minus every following child."""
    return BooleanNode(BooleanOp.DIFFERENCE, children)


def intersection(*children: Node) -> BooleanNode:
    return BooleanNode(BooleanOp.INTERSECTION, children)


def hull(*children: Node) -> BooleanNode:
    return BooleanNode(BooleanOp.HULL, children)


def minkowski(*children: Node, convexity: int | None = None) -> BooleanNode:
    if convexity is not None:
        check_convexity("minkowski", convexity)
    return BooleanNode(BooleanOp.MINKOWSKI, children, convexity)


# Transforms

def transform(t: Transform, *children: Node) -> TransformNode:
    return TransformNode(t, children)


def translate(v: ArrayLike, *children: Node) -> TransformNode:
    return TransformNode(Transform.translate(v), children)


def rotate(a: ArrayLike | float, *children: Node, v: ArrayLike | None = None) -> TransformNode:
    """Rotate the children.

    With a scalar `a` and an axis `v` this is an axis-angle rotation. A
    scalar without an axis rotates about Z. A vector `a` is read as angles
    about X, then Y, then Z.
    """
    if isinstance(a, numbers.Real):
        if v is None:
            return TransformNode(Transform.euler((0.0, 0.0, a)), children)
        return TransformNode(Transform.rotate(v, float(a)), children)
    if v is not None:
        raise ValidationError("an axis is only allowed with a scalar angle", field="v", shape="rotate")
    return TransformNode(Transform.euler(a), children)


def scale(v: ArrayLike | float, *children: Node) -> TransformNode:
    return TransformNode(Transform.scale(v), children)


def mirror(v: ArrayLike, *children: Node) -> TransformNode:
    return TransformNode(Transform.mirror(v), children)


def multmatrix(m: ArrayLike, *children: Node) -> TransformNode:
    try:
        matrix = np.asarray(m, dtype=np.float64)
    except (TypeError, ValueError):
        raise ValidationError(f"must be a numeric matrix, got {m!r}", field="m", shape="multmatrix") from None
    if matrix.shape == (3, 4):
        matrix = np.vstack([matrix, [0.0, 0.0, 0.0, 1.0]])
    if matrix.shape not in ((3, 3), (4, 4)):
        raise ValidationError(f"expected a 3x3, 3x4 or 4x4 matrix, got {matrix.shape}",
                              field="m", shape="multmatrix")
    return TransformNode(Transform.from_matrix(matrix), children)


# Decoration

def color(c: ArrayLike | str, *children: Node, alpha: float | None = None) -> ColorNode:
    """Color the children by name, "#rrggbb" hex, or an RGB(A) vector in 0..1."""
    if isinstance(c, str):
        if not c:
            raise ValidationError("color name must not be empty", field="c", shape="color")
        if alpha is not None:
            check_number("color", "alpha", alpha)
        return ColorNode(c, children, alpha)
    try:
        values = tuple(c)
    except TypeError:
        raise ValidationError(f"must be a color name or RGB(A) vector, got {c!r}", field="c", shape="color") from None
    if len(values) == 4 and alpha is not None:
        raise ValidationError("give alpha either in the color vector or as alpha, not both",
                              field="alpha", shape="color")
    if len(values) == 3:
        values = (*values, 1.0 if alpha is None else alpha)
    rgba = check_vector("color", "c", values, 4, 0.0)
    if any(channel > 1.0 for channel in rgba):
        raise ValidationError(f"channels must be in 0..1, got {list(rgba)}", field="c", shape="color")
    return ColorNode(rgba, children)


def disable(*children: Node) -> ModifierNode:
    return ModifierNode(Modifier.DISABLE, children)


def show_only(*children: Node) -> ModifierNode:
    return ModifierNode(Modifier.SHOW_ONLY, children)


def highlight(*children: Node) -> ModifierNode:
    return ModifierNode(Modifier.HIGHLIGHT, children)


def background(*children: Node) -> ModifierNode:
    return ModifierNode(Modifier.BACKGROUND, children)


# 2D to 3D and 2D operations

def linear_extrude(height: float, *children: Node, center: bool = False, convexity: int = 1,
                   twist: float = 0.0, scale: ArrayLike | float = 1.0, slices: int | None = None,
                   fn: int | None = None) -> LinearExtrudeNode:
    check_number("linear_extrude", "height", height)
    twist = check_number("linear_extrude", "twist", twist, None)
    check_convexity("linear_extrude", convexity)
    check_resolution("linear_extrude", None, None, fn)
    if isinstance(scale, numbers.Real):
        scale = (scale, scale)
    scale_xy = check_vector("linear_extrude", "scale", scale, 2, 0.0)
    if slices is not None and (isinstance(slices, bool) or not isinstance(slices, numbers.Integral) or slices < 1):
        raise ValidationError(f"must be >= 1, got {slices}", field="slices", shape="linear_extrude")
    return LinearExtrudeNode(float(height), children, center, convexity, twist, scale_xy, slices, fn)


def rotate_extrude(*children: Node, angle: float = 360.0, convexity: int = 1, fa: float | None = None,
                   fs: float | None = None, fn: int | None = None) -> RotateExtrudeNode:
    angle = check_number("rotate_extrude", "angle", angle, None)
    if angle == 0.0 or abs(angle) > 360.0:
        raise ValidationError(f"must be non-zero and within -360..360, got {angle}",
                              field="angle", shape="rotate_extrude")
    check_convexity("rotate_extrude", convexity)
    check_resolution("rotate_extrude", fa, fs, fn)
    return RotateExtrudeNode(angle, children, convexity, fa, fs, fn)


def projection(*children: Node, cut: bool = False) -> ProjectionNode:
    return ProjectionNode(cut, children)


def offset(*children: Node, r: float | None = None, delta: float | None = None,
           chamfer: bool = False) -> OffsetNode:
    if r is not None:
        r = check_number("offset", "r", r, None)
    if delta is not None:
        delta = check_number("offset", "delta", delta, None)
    return OffsetNode(r, children, delta, chamfer)


def resize(newsize: ArrayLike, *children: Node, auto: ArrayLike | bool = False,
           convexity: int = 1) -> ResizeNode:
    try:
        size = tuple(np.asarray(newsize, dtype=np.float64).reshape(-1))
    except (TypeError, ValueError):
        raise ValidationError(f"must be a numeric vector, got {newsize!r}", field="newsize", shape="resize") from None
    if len(size) == 2:
        size = (*size, 0.0)
    size = check_vector("resize", "newsize", size, 3, 0.0)
    if isinstance(auto, bool):
        auto = (auto, auto, auto)
    auto = tuple(bool(flag) for flag in auto)
    if len(auto) == 2:
        auto = (*auto, False)
    check_convexity("resize", convexity)
    return ResizeNode(size, children, auto, convexity)
