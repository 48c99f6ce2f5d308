"""Tests for the script serializer."""

import numpy as np
import pytest

from scadgen.core.builders import (
    circle,
    color,
    cube,
    cylinder,
    difference,
    disable,
    highlight,
    import_file,
    linear_extrude,
    minkowski,
    multmatrix,
    offset,
    polygon,
    polyhedron,
    projection,
    resize,
    rotate,
    rotate_extrude,
    scale,
    sphere,
    square,
    surface,
    text,
    translate,
    union,
)
from scadgen.core.node import TransformNode
from scadgen.core.transform import Transform
from scadgen.errors import ValidationError
from scadgen.generators.primitives import CubeGenerator
from scadgen.serializer import FormatOptions, format_number, save, serialize


def test_end_to_end_example():
    model = union(cube([1, 1, 1]), translate([0.5, 0, 0], sphere(r=0.5)))
    assert serialize(model) == (
        "union() {\n"
        "  cube(size=[1, 1, 1], center=false);\n"
        "  translate(v=[0.5, 0, 0]) {\n"
        "    sphere(r=0.5);\n"
        "  }\n"
        "}\n"
    )


def test_serialization_is_deterministic():
    def build():
        return difference(
            color([0.9, 0.6, 0.2], cube(15, center=True)),
            rotate([90, 0, 0], cylinder(h=20, r=4, center=True, fn=32)),
            polyhedron(CubeGenerator(1, 2, 3).generate()),
        )

    tree = build()
    first = serialize(tree)
    assert serialize(tree) == first
    assert serialize(build()) == first


def test_empty_union_is_a_single_statement():
    assert serialize(union()) == "union();\n"


def test_empty_boolean_as_child():
    assert serialize(difference(cube(1), union())) == (
        "difference() {\n"
        "  cube(size=[1, 1, 1], center=false);\n"
        "  union();\n"
        "}\n"
    )


@pytest.mark.parametrize("value,precision,expected", [
    (0.5, 6, "0.5"),
    (2.0, 6, "2"),
    (1.0 / 3.0, 6, "0.333333"),
    (2.0 / 3.0, 6, "0.666667"),
    (1.0 / 3.0, 2, "0.33"),
    (-1e-9, 6, "0"),
    (-0.0, 6, "0"),
    (-2.5, 6, "-2.5"),
    (12345.678, 0, "12346"),
    (1e20, 6, "100000000000000000000"),
    (7, 6, "7"),
])
def test_format_number(value, precision, expected):
    assert format_number(value, precision) == expected


def test_format_number_rejects_non_finite():
    with pytest.raises(ValueError):
        format_number(float("nan"))
    with pytest.raises(ValueError):
        format_number(float("inf"))


def test_precision_option():
    node = sphere(r=1.0 / 3.0)
    assert serialize(node) == "sphere(r=0.333333);\n"
    assert serialize(node, FormatOptions(precision=2)) == "sphere(r=0.33);\n"


def test_indent_option():
    assert serialize(union(cube(1)), FormatOptions(indent="\t")) == (
        "union() {\n\tcube(size=[1, 1, 1], center=false);\n}\n"
    )


def test_global_resolution_header():
    options = FormatOptions(fn=64, fs=0.5)
    assert serialize(cube(1), options) == "$fn = 64;\n$fs = 0.5;\ncube(size=[1, 1, 1], center=false);\n"


@pytest.mark.parametrize("kwargs", [
    {"precision": -1},
    {"precision": 18},
    {"precision": True},
    {"indent": "--"},
    {"fn": -3},
    {"fa": 0},
])
def test_invalid_options(kwargs):
    with pytest.raises(ValidationError):
        FormatOptions(**kwargs)


def test_options_from_dict():
    assert FormatOptions.from_dict({"precision": 3}) == FormatOptions(precision=3)
    with pytest.raises(ValidationError) as exc_info:
        FormatOptions.from_dict({"precission": 3})
    assert exc_info.value.field == "precission"


@pytest.mark.parametrize("node,expected", [
    (sphere(2, fn=24), "sphere(r=2, $fn=24);"),
    (cube([1, 2, 3], center=True), "cube(size=[1, 2, 3], center=true);"),
    (cylinder(h=10, r1=2, r2=1, fa=6, fs=0.5), "cylinder(h=10, r1=2, r2=1, center=false, $fa=6, $fs=0.5);"),
    (circle(d=3), "circle(r=1.5);"),
    (square([2, 1]), "square(size=[2, 1], center=false);"),
    (
        polygon([[0, 0], [1, 0], [0, 1]], paths=[[0, 1, 2]]),
        "polygon(points=[[0, 0], [1, 0], [0, 1]], paths=[[0, 1, 2]], convexity=1);",
    ),
    (polygon([[0, 0], [1, 0], [0, 1]]), "polygon(points=[[0, 0], [1, 0], [0, 1]], paths=undef, convexity=1);"),
    (
        text('say "hi"', size=5),
        'text(text="say \\"hi\\"", size=5, font="Liberation Sans", halign="left", valign="baseline", '
        'spacing=1, direction="ltr", language="en", script="latin");',
    ),
    (import_file("part.stl", convexity=3), 'import(file="part.stl", convexity=3);'),
    (surface("height.dat", center=True), 'surface(file="height.dat", center=true, invert=false, convexity=1);'),
])
def test_primitive_statements(node, expected):
    assert serialize(node) == expected + "\n"


def test_unicode_text_is_kept():
    assert serialize(text("héllo")).startswith('text(text="héllo",')


def test_polyhedron_statement():
    mesh = polyhedron([[0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1]], [(0, 1, 2), (0, 3, 1), (0, 2, 3), (1, 3, 2)])
    assert serialize(mesh) == (
        "polyhedron(points=[[0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1]], "
        "faces=[[0, 1, 2], [0, 3, 1], [0, 2, 3], [1, 3, 2]], convexity=1);\n"
    )


@pytest.mark.parametrize("node,expected", [
    (translate([1, 2, 3], cube(1)), "translate(v=[1, 2, 3]) {"),
    (rotate([90, 0, 0], cube(1)), "rotate(a=[90, 0, 0]) {"),
    (rotate(45, cube(1)), "rotate(a=[0, 0, 45]) {"),
    (rotate(45, cube(1), v=[0, 0, 1]), "rotate(a=45, v=[0, 0, 1]) {"),
    (scale([2, 3], cube(1)), "scale(v=[2, 3, 1]) {"),
    (
        multmatrix([[1, 0, 0, 5], [0, 1, 0, 0], [0, 0, 1, 0]], cube(1)),
        "multmatrix(m=[[1, 0, 0, 5], [0, 1, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]]) {",
    ),
    (color("red", cube(1)), 'color(c="red") {'),
    (color("#ff0000", cube(1), alpha=0.5), 'color(c="#ff0000", alpha=0.5) {'),
    (color([1, 0.5, 0], cube(1)), "color(c=[1, 0.5, 0, 1]) {"),
    (
        linear_extrude(5, square(1), twist=90, slices=10, fn=16),
        "linear_extrude(height=5, center=false, convexity=1, twist=90, scale=[1, 1], slices=10, $fn=16) {",
    ),
    (rotate_extrude(circle(1), angle=180, fn=48), "rotate_extrude(angle=180, convexity=1, $fn=48) {"),
    (projection(cube(1), cut=True), "projection(cut=true) {"),
    (offset(square(1), r=2), "offset(r=2) {"),
    (offset(square(1), delta=-1), "offset(delta=-1, chamfer=false) {"),
    (resize([2, 0, 0], cube(1), auto=[False, True, True]), "resize(newsize=[2, 0, 0], auto=[false, true, true], convexity=1) {"),
    (minkowski(cube(1), convexity=2), "minkowski(convexity=2) {"),
])
def test_operation_headers(node, expected):
    assert serialize(node).splitlines()[0] == expected


def test_composed_transform_serializes_as_matrix():
    combined = Transform.translate([1, 0, 0]) @ Transform.scale(2)
    assert serialize(TransformNode(combined, (cube(1),))).splitlines()[0] == (
        "multmatrix(m=[[2, 0, 0, 1], [0, 2, 0, 0], [0, 0, 2, 0], [0, 0, 0, 1]]) {"
    )


def test_childless_transform():
    assert serialize(translate([1, 0, 0])) == "translate(v=[1, 0, 0]);\n"


def test_modifier_prefixes_single_child():
    tree = difference(cube(10), highlight(translate([0, 0, 5], cylinder(h=20, r=2))))
    assert serialize(tree) == (
        "difference() {\n"
        "  cube(size=[10, 10, 10], center=false);\n"
        "  #translate(v=[0, 0, 5]) {\n"
        "    cylinder(h=20, r1=2, r2=2, center=false);\n"
        "  }\n"
        "}\n"
    )


def test_modifier_with_several_children_wraps_union():
    assert serialize(disable(cube(1), sphere(1))) == (
        "*union() {\n"
        "  cube(size=[1, 1, 1], center=false);\n"
        "  sphere(r=1);\n"
        "}\n"
    )


def test_stacked_modifiers():
    assert serialize(disable(highlight(cube(1)))) == "*#cube(size=[1, 1, 1], center=false);\n"


def test_numpy_values():
    assert serialize(translate(np.array([0.25, np.float32(0.5), 1]), cube(np.int64(2)))).splitlines()[:2] == [
        "translate(v=[0.25, 0.5, 1]) {",
        "  cube(size=[2, 2, 2], center=false);",
    ]


def test_negative_zero_is_normalized():
    assert serialize(translate([-0.0, -1e-12, 0], cube(1))).splitlines()[0] == "translate(v=[0, 0, 0]) {"


def test_serialize_rejects_non_nodes():
    with pytest.raises(TypeError):
        serialize("cube")


def test_save(tmp_path):
    model = union(cube(1), scale(2, sphere(1)))
    path = save(model, tmp_path / "model.scad")
    assert path.read_text(encoding="utf-8") == serialize(model)
    assert path.read_bytes().endswith(b"}\n")
