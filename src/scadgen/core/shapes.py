"""Primitive shape descriptors.

Each descriptor is a frozen dataclass that carries only the parameters
meaningful to its shape and validates them on construction. Explicit
polyhedra live in `scadgen.core.mesh`.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from ..errors import ValidationError
from .mesh import Polyhedron, as_indices


def check_number(shape: str, name: str, value: float, minimum: float | None = 0.0) -> float:
    """Validate a finite number, optionally bounded below (inclusive)."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"must be a number, got {value!r}", field=name, shape=shape) from None
    if not math.isfinite(number):
        raise ValidationError(f"must be finite, got {value!r}", field=name, shape=shape)
    if minimum is not None and number < minimum:
        raise ValidationError(f"must be >= {minimum:g}, got {value!r}", field=name, shape=shape)
    return number


def check_vector(shape: str, name: str, value, size: int, minimum: float | None = None) -> tuple[float, ...]:
    """Validate a fixed-size numeric vector."""
    try:
        items = tuple(value)
    except TypeError:
        raise ValidationError(
            f"must be a {size}-vector, got {value!r}", field=name, shape=shape
        ) from None
    if len(items) != size:
        raise ValidationError(f"must be a {size}-vector, got {value!r}", field=name, shape=shape)
    return tuple(check_number(shape, name, item, minimum) for item in items)


def check_resolution(shape: str, fa: float | None, fs: float | None, fn: int | None) -> None:
    """Check the $fa/$fs/$fn overrides of a curved primitive."""
    if fn is not None and (isinstance(fn, bool) or not isinstance(fn, numbers.Integral) or fn < 3):
        raise ValidationError(f"segment count must be an integer >= 3, got {fn!r}", field="fn", shape=shape)
    for name, value in (("fa", fa), ("fs", fs)):
        if value is not None and check_number(shape, name, value) <= 0:
            raise ValidationError(f"must be > 0, got {value!r}", field=name, shape=shape)


def check_convexity(shape: str, convexity: int) -> None:
    if isinstance(convexity, bool) or not isinstance(convexity, numbers.Integral) or convexity < 1:
        raise ValidationError(f"must be an integer >= 1, got {convexity!r}", field="convexity", shape=shape)


class Shape:
    """Base class for primitive descriptors."""

    keyword: ClassVar[str] = ""


@dataclass(frozen=True)
class Sphere(Shape):
    keyword: ClassVar[str] = "sphere"

    radius: float = 1.0
    fa: float | None = None
    fs: float | None = None
    fn: int | None = None

    def __post_init__(self) -> None:
        check_number(self.keyword, "radius", self.radius)
        check_resolution(self.keyword, self.fa, self.fs, self.fn)


@dataclass(frozen=True)
class Cube(Shape):
    keyword: ClassVar[str] = "cube"

    size: tuple[float, float, float] = (1.0, 1.0, 1.0)
    center: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "size", check_vector(self.keyword, "size", self.size, 3, 0.0))


@dataclass(frozen=True)
class Cylinder(Shape):
    """A cylinder, cone or frustum along +Z (r1 at the bottom, r2 at the top)."""

    keyword: ClassVar[str] = "cylinder"

    height: float = 1.0
    radius1: float = 1.0
    radius2: float = 1.0
    center: bool = False
    fa: float | None = None
    fs: float | None = None
    fn: int | None = None

    def __post_init__(self) -> None:
        check_number(self.keyword, "height", self.height)
        check_number(self.keyword, "radius1", self.radius1)
        check_number(self.keyword, "radius2", self.radius2)
        check_resolution(self.keyword, self.fa, self.fs, self.fn)


@dataclass(frozen=True)
class Circle(Shape):
    keyword: ClassVar[str] = "circle"

    radius: float = 1.0
    fa: float | None = None
    fs: float | None = None
    fn: int | None = None

    def __post_init__(self) -> None:
        check_number(self.keyword, "radius", self.radius)
        check_resolution(self.keyword, self.fa, self.fs, self.fn)


@dataclass(frozen=True)
class Square(Shape):
    keyword: ClassVar[str] = "square"

    size: tuple[float, float] = (1.0, 1.0)
    center: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "size", check_vector(self.keyword, "size", self.size, 2, 0.0))


@dataclass(frozen=True)
class Polygon(Shape):
    """A 2D polygon; `paths` selects outlines (and holes) by point index."""

    keyword: ClassVar[str] = "polygon"

    points: tuple[tuple[float, float], ...]
    paths: tuple[tuple[int, ...], ...] | None = None
    convexity: int = 1

    def __post_init__(self) -> None:
        try:
            raw_points = list(self.points)
        except TypeError:
            raise ValidationError("must be a sequence of 2D points", field="points", shape=self.keyword) from None
        if len(raw_points) < 3:
            raise ValidationError(
                f"need at least 3 points, got {len(raw_points)}", field="points", shape=self.keyword
            )
        points = tuple(check_vector(self.keyword, "points", p, 2, None) for p in raw_points)
        object.__setattr__(self, "points", points)

        if self.paths is not None:
            paths = []
            for path_index, path in enumerate(self.paths):
                path = as_indices(path, "paths", self.keyword, f"path {path_index}")
                if len(path) < 3:
                    raise ValidationError(
                        f"path {path_index} has {len(path)} points, need at least 3",
                        field="paths", shape=self.keyword,
                    )
                for i in path:
                    if i < 0 or i >= len(points):
                        raise ValidationError(
                            f"path {path_index} references point {i}, "
                            f"but only {len(points)} points exist",
                            field="paths", shape=self.keyword,
                        )
                paths.append(path)
            object.__setattr__(self, "paths", tuple(paths))
        check_convexity(self.keyword, self.convexity)


class TextHalign(Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class TextValign(Enum):
    TOP = "top"
    CENTER = "center"
    BASELINE = "baseline"
    BOTTOM = "bottom"


class TextDirection(Enum):
    LTR = "ltr"
    RTL = "rtl"
    TTB = "ttb"
    BTT = "btt"


@dataclass(frozen=True)
class Text(Shape):
    keyword: ClassVar[str] = "text"

    text: str
    size: float = 10.0
    font: str = "Liberation Sans"
    halign: TextHalign = TextHalign.LEFT
    valign: TextValign = TextValign.BASELINE
    spacing: float = 1.0
    direction: TextDirection = TextDirection.LTR
    language: str = "en"
    script: str = "latin"
    fn: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.text, str) or not self.text:
            raise ValidationError("must be a non-empty string", field="text", shape=self.keyword)
        check_number(self.keyword, "size", self.size)
        check_number(self.keyword, "spacing", self.spacing)
        # Accept plain strings for the enum-valued options
        for name, enum_type in (("halign", TextHalign), ("valign", TextValign), ("direction", TextDirection)):
            value = getattr(self, name)
            try:
                object.__setattr__(self, name, enum_type(value))
            except ValueError:
                raise ValidationError(f"unknown value {value!r}", field=name, shape=self.keyword) from None
        check_resolution(self.keyword, None, None, self.fn)


@dataclass(frozen=True)
class Import(Shape):
    """A mesh or drawing loaded by the evaluator from an external file."""

    keyword: ClassVar[str] = "import"

    file: str
    convexity: int = 1

    def __post_init__(self) -> None:
        if not isinstance(self.file, str) or not self.file:
            raise ValidationError("must be a non-empty file name", field="file", shape=self.keyword)
        check_convexity(self.keyword, self.convexity)


@dataclass(frozen=True)
class Surface(Shape):
    """A heightmap surface loaded by the evaluator from a data or image file."""

    keyword: ClassVar[str] = "surface"

    file: str
    center: bool = False
    invert: bool = False
    convexity: int = 1

    def __post_init__(self) -> None:
        if not isinstance(self.file, str) or not self.file:
            raise ValidationError("must be a non-empty file name", field="file", shape=self.keyword)
        check_convexity(self.keyword, self.convexity)


ShapeDescriptor = Sphere | Cube | Cylinder | Circle | Square | Polygon | Text | Import | Surface | Polyhedron
