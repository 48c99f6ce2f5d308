"""Deterministic scene graph to OpenSCAD script serializer.

The output is one statement per node, written depth-first with children
nested in construction order:

    union() {
      cube(size=[1, 1, 1], center=false);
      translate(v=[0.5, 0, 0]) {
        sphere(r=0.5);
      }
    }

Numbers are written with a fixed number of decimal places (trailing zeros
dropped), so the same tree always gives byte-identical text. Formatting is
controlled only through the `FormatOptions` passed in.
"""

from __future__ import annotations

import json
import logging
import math
import numbers
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, assert_never

import numpy as np

from .core.mesh import Polyhedron
from .core.node import (
    BooleanNode,
    BooleanOp,
    ColorNode,
    LinearExtrudeNode,
    ModifierNode,
    Node,
    OffsetNode,
    ProjectionNode,
    ResizeNode,
    RotateExtrudeNode,
    ShapeNode,
    TransformNode,
)
from .core.shapes import Circle, Cube, Cylinder, Import, Polygon, ShapeDescriptor, Sphere, Square, Surface, Text
from .core.transform import Transform, TransformKind
from .errors import ValidationError

logger = logging.getLogger(__name__)

SceneNode = (
    ShapeNode | BooleanNode | TransformNode | ColorNode | ModifierNode | LinearExtrudeNode
    | RotateExtrudeNode | ProjectionNode | OffsetNode | ResizeNode
)

Args = list[tuple[str, Any]]


@dataclass(frozen=True)
class FormatOptions:
    """Formatting options for `serialize`.

    Attributes:
        precision: Decimal places for numbers (trailing zeros are dropped)
        indent: Indentation added per nesting level
        fn: Global `$fn` written at the top of the script
        fa: Global `$fa` written at the top of the script
        fs: Global `$fs` written at the top of the script
    """

    precision: int = 6
    indent: str = "  "
    fn: int | None = None
    fa: float | None = None
    fs: float | None = None

    def __post_init__(self) -> None:
        if isinstance(self.precision, bool) or not isinstance(self.precision, int) or not 0 <= self.precision <= 17:
            raise ValidationError(f"must be an integer in 0..17, got {self.precision!r}",
                                  field="precision", shape="format_options")
        if not isinstance(self.indent, str) or self.indent.strip():
            raise ValidationError(f"must be a whitespace string, got {self.indent!r}",
                                  field="indent", shape="format_options")
        if self.fn is not None and (isinstance(self.fn, bool) or not isinstance(self.fn, int) or self.fn < 0):
            raise ValidationError(f"must be an integer >= 0, got {self.fn!r}", field="fn", shape="format_options")
        for name in ("fa", "fs"):
            value = getattr(self, name)
            if value is not None and (isinstance(value, bool) or not isinstance(value, numbers.Real) or value <= 0):
                raise ValidationError(f"must be a number > 0, got {value!r}", field=name, shape="format_options")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FormatOptions:
        """Build options from a mapping, rejecting unknown keys."""
        if not isinstance(data, dict):
            raise ValidationError(f"expected a mapping, got {type(data).__name__}", shape="format_options")
        known = {f.name for f in fields(cls)}
        for key in data:
            if key not in known:
                raise ValidationError(f"unknown option (expected one of {sorted(known)})",
                                      field=str(key), shape="format_options")
        return cls(**data)


def format_number(value: float, precision: int = 6) -> str:
    """Format a number with `precision` decimal places, trimmed.

    Trailing zeros and a trailing decimal point are removed and negative
    zero is written as 0, e.g. 0.5 -> "0.5", 2.0 -> "2", -1e-9 -> "0".
    """
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"Cannot format non-finite number {value!r}")
    text = f"{number:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


class _Writer:
    """Accumulates script lines for one serialize() call."""

    def __init__(self, options: FormatOptions) -> None:
        self.options = options
        self.lines: list[str] = []

    def value(self, value: Any) -> str:
        match value:
            case None:
                return "undef"
            case bool() | np.bool_():
                return "true" if value else "false"
            case Enum():
                return self.value(value.value)
            case str():
                return json.dumps(value, ensure_ascii=False)
            case numbers.Real():
                return format_number(value, self.options.precision)
            case np.ndarray() | list() | tuple():
                return "[" + ", ".join(self.value(item) for item in value) + "]"
        raise TypeError(f"Cannot write value of type {type(value).__name__}")

    def call(self, name: str, args: Args = ()) -> str:
        return f"{name}(" + ", ".join(f"{key}={self.value(val)}" for key, val in args) + ")"

    def emit(self, node: SceneNode, depth: int, prefix: str = "") -> None:
        pad = self.options.indent * depth

        if isinstance(node, ModifierNode):
            children = node.children
            if len(children) == 1:
                self.emit(children[0], depth, prefix + node.modifier.value)
            else:
                self.emit(BooleanNode(BooleanOp.UNION, children), depth, prefix + node.modifier.value)
            return

        header = prefix + self.header(node)
        if not node.children:
            self.lines.append(f"{pad}{header};")
            return
        self.lines.append(f"{pad}{header} {{")
        for child in node.children:
            self.emit(child, depth + 1)
        self.lines.append(f"{pad}}}")

    def header(self, node: SceneNode) -> str:
        match node:
            case ShapeNode(shape=shape):
                return self.shape(shape)
            case BooleanNode(op=op, convexity=convexity):
                args: Args = [("convexity", convexity)] if convexity is not None else []
                return self.call(op.value, args)
            case TransformNode(transform=transform):
                return self.transform(transform)
            case ColorNode(color=color, alpha=alpha):
                args = [("c", color)]
                if alpha is not None:
                    args.append(("alpha", alpha))
                return self.call("color", args)
            case LinearExtrudeNode():
                args = [
                    ("height", node.height),
                    ("center", node.center),
                    ("convexity", node.convexity),
                    ("twist", node.twist),
                    ("scale", node.scale),
                ]
                if node.slices is not None:
                    args.append(("slices", node.slices))
                if node.fn is not None:
                    args.append(("$fn", node.fn))
                return self.call("linear_extrude", args)
            case RotateExtrudeNode():
                args = [("angle", node.angle), ("convexity", node.convexity)]
                return self.call("rotate_extrude", args + self.resolution(node.fa, node.fs, node.fn))
            case ProjectionNode(cut=cut):
                return self.call("projection", [("cut", cut)])
            case OffsetNode():
                if node.r is not None:
                    return self.call("offset", [("r", node.r)])
                return self.call("offset", [("delta", node.delta), ("chamfer", node.chamfer)])
            case ResizeNode():
                args = [("newsize", node.newsize), ("auto", node.auto), ("convexity", node.convexity)]
                return self.call("resize", args)
            case ModifierNode():
                raise AssertionError("modifiers are written as a prefix")
            case _:
                assert_never(node)

    def shape(self, shape: ShapeDescriptor) -> str:
        match shape:
            case Sphere():
                return self.call("sphere", [("r", shape.radius)] + self.resolution(shape.fa, shape.fs, shape.fn))
            case Cube():
                return self.call("cube", [("size", shape.size), ("center", shape.center)])
            case Cylinder():
                args = [("h", shape.height), ("r1", shape.radius1), ("r2", shape.radius2), ("center", shape.center)]
                return self.call("cylinder", args + self.resolution(shape.fa, shape.fs, shape.fn))
            case Circle():
                return self.call("circle", [("r", shape.radius)] + self.resolution(shape.fa, shape.fs, shape.fn))
            case Square():
                return self.call("square", [("size", shape.size), ("center", shape.center)])
            case Polygon():
                args = [("points", shape.points), ("paths", shape.paths), ("convexity", shape.convexity)]
                return self.call("polygon", args)
            case Polyhedron():
                args = [("points", shape.points), ("faces", shape.faces), ("convexity", shape.convexity)]
                return self.call("polyhedron", args)
            case Text():
                args = [
                    ("text", shape.text),
                    ("size", shape.size),
                    ("font", shape.font),
                    ("halign", shape.halign),
                    ("valign", shape.valign),
                    ("spacing", shape.spacing),
                    ("direction", shape.direction),
                    ("language", shape.language),
                    ("script", shape.script),
                ]
                return self.call("text", args + self.resolution(None, None, shape.fn))
            case Import():
                return self.call("import", [("file", shape.file), ("convexity", shape.convexity)])
            case Surface():
                args = [
                    ("file", shape.file),
                    ("center", shape.center),
                    ("invert", shape.invert),
                    ("convexity", shape.convexity),
                ]
                return self.call("surface", args)
            case _:
                assert_never(shape)

    def transform(self, transform: Transform) -> str:
        params = transform.params
        match transform.kind:
            case TransformKind.TRANSLATE:
                return self.call("translate", [("v", params)])
            case TransformKind.ROTATE:
                return self.call("rotate", [("a", params[0]), ("v", params[1:])])
            case TransformKind.EULER:
                return self.call("rotate", [("a", params)])
            case TransformKind.SCALE:
                return self.call("scale", [("v", params)])
            case TransformKind.MIRROR:
                return self.call("mirror", [("v", params)])
            case TransformKind.MATRIX:
                return self.call("multmatrix", [("m", transform.matrix)])
            case _:
                assert_never(transform.kind)

    @staticmethod
    def resolution(fa: float | None, fs: float | None, fn: int | None) -> Args:
        return [(name, value) for name, value in (("$fa", fa), ("$fs", fs), ("$fn", fn)) if value is not None]

    def globals(self) -> Iterable[str]:
        for name in ("fn", "fa", "fs"):
            value = getattr(self.options, name)
            if value is not None:
                yield f"${name} = {self.value(value)};"


def serialize(node: Node, options: FormatOptions | None = None) -> str:
    """Serialize a scene graph to script text.

    Pure and deterministic: serializing the same tree with the same options
    always returns the same string. The result ends with a newline.

    Args:
        node: Root of the scene graph
        options: Formatting options (defaults to FormatOptions())

    Returns:
        The script text
    """
    if not isinstance(node, Node):
        raise TypeError(f"Expected a scene node, got {type(node).__name__}")
    writer = _Writer(options or FormatOptions())
    writer.lines.extend(writer.globals())
    writer.emit(node, 0)
    logger.debug("Serialized %d lines", len(writer.lines))
    return "\n".join(writer.lines) + "\n"


def save(node: Node, path: str | Path, options: FormatOptions | None = None) -> Path:
    """Serialize `node` and write it to `path` as UTF-8."""
    path = Path(path)
    path.write_text(serialize(node, options), encoding="utf-8")
    logger.info("Wrote %s", path)
    return path
