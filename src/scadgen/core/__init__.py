"""Core modeling components: math kernel, transforms, shapes and the scene graph."""

from .transform import Transform, TransformKind, compose
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
from . import builders, geometry, shapes, vectors

__all__ = [
    "Transform",
    "TransformKind",
    "compose",
    "Polyhedron",
    "Node",
    "ShapeNode",
    "BooleanNode",
    "BooleanOp",
    "TransformNode",
    "ColorNode",
    "Modifier",
    "ModifierNode",
    "LinearExtrudeNode",
    "RotateExtrudeNode",
    "ProjectionNode",
    "OffsetNode",
    "ResizeNode",
    "builders",
    "geometry",
    "shapes",
    "vectors",
]
