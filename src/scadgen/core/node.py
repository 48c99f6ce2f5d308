"""Scene graph nodes for CSG composition.

The tree is a strict ownership hierarchy: nodes are frozen dataclasses
that hold their children in a tuple, in construction order, and keep no
reference to their parent. Adding children returns a new node, so a node
is never mutated after it has been attached somewhere.

Example:
    body = BooleanNode(BooleanOp.DIFFERENCE).add(
        ShapeNode(Cube((2.0, 2.0, 2.0))),
        ShapeNode(Sphere(1.2)),
    )
    part = TransformNode(Transform.translate([0, 0, 5])).add(body)
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Self

from ..errors import ValidationError
from .shapes import ShapeDescriptor
from .transform import Transform


class Node:
    """Base class of every scene graph node."""

    children: tuple[Node, ...] = ()

    @property
    def label(self) -> str:
        """Short human readable name, used for tree summaries."""
        return type(self).__name__

    def add(self, *nodes: Node) -> Self:
        """Return a copy of this node with `nodes` appended as children.

        Children are kept in call order, which is both the evaluation order
        and the nesting order in the emitted script.

        Raises:
            ValidationError: If a child is not a Node
        """
        for node in nodes:
            if not isinstance(node, Node):
                raise ValidationError(
                    f"children must be scene nodes, got {type(node).__name__}",
                    field="children", shape=self.label,
                )
        return dataclasses.replace(self, children=self.children + tuple(nodes))

    def iter_nodes(self, depth: int = 0) -> Iterator[tuple[int, Node]]:
        """Iterate over this node and all descendants (depth-first).

        Yields:
            (depth, node) tuples, the root at `depth`
        """
        yield depth, self
        for child in self.children:
            yield from child.iter_nodes(depth + 1)

    def __add__(self, other: Node) -> BooleanNode:
        return BooleanNode(BooleanOp.UNION, (self, other))

    def __sub__(self, other: Node) -> BooleanNode:
        return BooleanNode(BooleanOp.DIFFERENCE, (self, other))

    def __and__(self, other: Node) -> BooleanNode:
        return BooleanNode(BooleanOp.INTERSECTION, (self, other))


def _check_children(node: Node) -> None:
    children = tuple(node.children)
    for child in children:
        if not isinstance(child, Node):
            raise ValidationError(
                f"children must be scene nodes, got {type(child).__name__}",
                field="children", shape=node.label,
            )
    object.__setattr__(node, "children", children)


@dataclass(frozen=True)
class ShapeNode(Node):
    """A primitive or polyhedron leaf."""

    shape: ShapeDescriptor
    children: tuple[Node, ...] = ()

    def __post_init__(self) -> None:
        if self.children:
            raise ValidationError("primitive leaves cannot own children", field="children", shape=self.label)

    @property
    def label(self) -> str:
        return getattr(self.shape, "keyword", "polyhedron")

    def add(self, *nodes: Node) -> Self:
        raise ValidationError("primitive leaves cannot own children", field="children", shape=self.label)


class BooleanOp(Enum):
    UNION = "union"
    DIFFERENCE = "difference"
    INTERSECTION = "intersection"
    HULL = "hull"
    MINKOWSKI = "minkowski"


@dataclass(frozen=True)
class BooleanNode(Node):
    """Boolean combination of the children.

    A boolean node with no children is valid and denotes the empty solid.
    `convexity` is only written for minkowski.
    """

    op: BooleanOp
    children: tuple[Node, ...] = ()
    convexity: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "op", BooleanOp(self.op))
        _check_children(self)

    @property
    def label(self) -> str:
        return self.op.value


@dataclass(frozen=True)
class TransformNode(Node):
    """Applies a transform to the combined geometry of all children."""

    transform: Transform
    children: tuple[Node, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.transform, Transform):
            raise ValidationError(
                f"expected a Transform, got {type(self.transform).__name__}",
                field="transform", shape="transform",
            )
        _check_children(self)

    @property
    def label(self) -> str:
        return self.transform.kind.value


@dataclass(frozen=True)
class ColorNode(Node):
    """Colors the children.

    `color` is either an (r, g, b, a) tuple in 0..1, a named color or a
    "#rrggbb" hex string. `alpha` only applies to named and hex colors.
    """

    color: tuple[float, float, float, float] | str
    children: tuple[Node, ...] = ()
    alpha: float | None = None

    def __post_init__(self) -> None:
        _check_children(self)

    @property
    def label(self) -> str:
        return "color"


class Modifier(Enum):
    """Debug modifiers, written as a prefix character."""

    DISABLE = "*"
    SHOW_ONLY = "!"
    HIGHLIGHT = "#"
    BACKGROUND = "%"


@dataclass(frozen=True)
class ModifierNode(Node):
    modifier: Modifier
    children: tuple[Node, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "modifier", Modifier(self.modifier))
        _check_children(self)

    @property
    def label(self) -> str:
        return self.modifier.name.lower()


@dataclass(frozen=True)
class LinearExtrudeNode(Node):
    """Extrudes 2D children along +Z."""

    height: float
    children: tuple[Node, ...] = ()
    center: bool = False
    convexity: int = 1
    twist: float = 0.0
    scale: tuple[float, float] = (1.0, 1.0)
    slices: int | None = None
    fn: int | None = None

    def __post_init__(self) -> None:
        _check_children(self)

    @property
    def label(self) -> str:
        return "linear_extrude"


@dataclass(frozen=True)
class RotateExtrudeNode(Node):
    """Revolves 2D children (drawn in the XY plane, x >= 0) about Z."""

    angle: float = 360.0
    children: tuple[Node, ...] = ()
    convexity: int = 1
    fa: float | None = None
    fs: float | None = None
    fn: int | None = None

    def __post_init__(self) -> None:
        _check_children(self)

    @property
    def label(self) -> str:
        return "rotate_extrude"


@dataclass(frozen=True)
class ProjectionNode(Node):
    cut: bool = False
    children: tuple[Node, ...] = ()

    def __post_init__(self) -> None:
        _check_children(self)

    @property
    def label(self) -> str:
        return "projection"


@dataclass(frozen=True)
class OffsetNode(Node):
    """Offsets 2D children by a rounded radius `r` or a straight `delta`."""

    r: float | None = None
    children: tuple[Node, ...] = ()
    delta: float | None = None
    chamfer: bool = False

    def __post_init__(self) -> None:
        if (self.r is None) == (self.delta is None):
            raise ValidationError("exactly one of r or delta is required", field="r", shape="offset")
        _check_children(self)

    @property
    def label(self) -> str:
        return "offset"


@dataclass(frozen=True)
class ResizeNode(Node):
    newsize: tuple[float, float, float]
    children: tuple[Node, ...] = ()
    auto: tuple[bool, bool, bool] = (False, False, False)
    convexity: int = 1

    def __post_init__(self) -> None:
        _check_children(self)

    @property
    def label(self) -> str:
        return "resize"
