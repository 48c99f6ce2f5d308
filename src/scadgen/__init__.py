"""Scadgen - CSG scene graph authoring for OpenSCAD.

Build a tree of primitives, boolean operations and transforms, then
serialize it to an OpenSCAD script:

    from scadgen import cube, serialize, sphere, translate, union

    model = union(cube([1, 1, 1]), translate([0.5, 0, 0], sphere(0.5)))
    print(serialize(model))
"""

from .errors import DegenerateGeometry, ScadgenError, ValidationError
from .core import Node, Polyhedron, Transform, compose
from .core.builders import (
    background,
    circle,
    color,
    cube,
    cylinder,
    difference,
    disable,
    highlight,
    hull,
    import_file,
    intersection,
    linear_extrude,
    minkowski,
    mirror,
    multmatrix,
    offset,
    polygon,
    polyhedron,
    projection,
    resize,
    rotate,
    rotate_extrude,
    scale,
    show_only,
    sphere,
    square,
    surface,
    text,
    transform,
    translate,
    union,
)
from .serializer import FormatOptions, format_number, save, serialize

__version__ = "0.1.0"

__all__ = [
    "ScadgenError",
    "ValidationError",
    "DegenerateGeometry",
    "Node",
    "Polyhedron",
    "Transform",
    "compose",
    "background",
    "circle",
    "color",
    "cube",
    "cylinder",
    "difference",
    "disable",
    "highlight",
    "hull",
    "import_file",
    "intersection",
    "linear_extrude",
    "minkowski",
    "mirror",
    "multmatrix",
    "offset",
    "polygon",
    "polyhedron",
    "projection",
    "resize",
    "rotate",
    "rotate_extrude",
    "scale",
    "show_only",
    "sphere",
    "square",
    "surface",
    "text",
    "transform",
    "translate",
    "union",
    "FormatOptions",
    "format_number",
    "save",
    "serialize",
]
