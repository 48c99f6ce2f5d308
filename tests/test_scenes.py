"""Tests for all scenes - builds and serializes each scene, and runs the CLI."""

import logging

import pytest

from scadgen.core.mesh import Polyhedron
from scadgen.core.node import ShapeNode
from scadgen.main import SCENES, describe, main
from scadgen.serializer import FormatOptions, serialize


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop the handlers main() installs so they don't outlive captured streams."""
    yield
    logger = logging.getLogger("scadgen")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


@pytest.mark.parametrize("scene_name,scene_factory", list(SCENES.items()))
def test_scene_loads(scene_name, scene_factory):
    """Test that each scene builds without errors."""
    root = scene_factory()
    assert root is not None
    assert root.label

    # Verify scene has nodes
    nodes = list(root.iter_nodes())
    assert len(nodes) > 1, f"Scene '{scene_name}' should have more than one node"


@pytest.mark.parametrize("scene_name,scene_factory", list(SCENES.items()))
def test_scene_serializes(scene_name, scene_factory):
    """Test that each scene serializes deterministically."""
    text = serialize(scene_factory())
    assert text.endswith("\n")
    assert text.count("{") == text.count("}")
    assert serialize(scene_factory()) == text


@pytest.mark.parametrize("scene_name,scene_factory", list(SCENES.items()))
def test_scene_polyhedra_are_closed(scene_name, scene_factory):
    """Test that every explicit mesh in a scene is watertight and wound outward."""
    for _, node in scene_factory().iter_nodes():
        if isinstance(node, ShapeNode) and isinstance(node.shape, Polyhedron):
            assert node.shape.is_watertight(), f"Scene '{scene_name}' has an open mesh"
            assert node.shape.volume() > 0


def test_csg_demo_structure():
    root = SCENES["csg_demo"]()
    assert [line.strip() for line in describe(root)] == [
        "- difference",
        "- color",
        "- intersection",
        "- cube",
        "- sphere",
        "- cylinder",
        "- euler",
        "- cylinder",
        "- euler",
        "- cylinder",
    ]


def test_cli_prints_script(capsys):
    assert main(["-s", "csg_demo"]) == 0
    out = capsys.readouterr().out
    assert out == serialize(SCENES["csg_demo"]())


def test_cli_format_options(capsys, tmp_path):
    config = tmp_path / "format.yaml"
    config.write_text("precision: 2\nfn: 16\n", encoding="utf-8")
    assert main(["-s", "loft", "--config", str(config), "--fn", "64"]) == 0
    out = capsys.readouterr().out
    assert out == serialize(SCENES["loft"](), FormatOptions(precision=2, fn=64))
    assert out.startswith("$fn = 64;\ncolor(c=\"steelblue\") {\n  polyhedron(")


def test_cli_writes_file(capsys, tmp_path):
    output = tmp_path / "demo.scad"
    assert main(["-s", "csg_demo", "-o", str(output), "--precision", "3"]) == 0
    assert output.read_text(encoding="utf-8") == serialize(SCENES["csg_demo"](), FormatOptions(precision=3))
    out = capsys.readouterr().out
    assert "Scene contains 10 nodes:" in out
    assert "  - color" in out
    assert f"Saved script to {output}" in out


def test_cli_yaml_file(capsys, tmp_path):
    scene = tmp_path / "scene.yaml"
    scene.write_text("- cube: {size: 2}\n- translate: {v: [3, 0, 0], children: [{sphere: 1}]}\n", encoding="utf-8")
    assert main(["-f", str(scene)]) == 0
    assert capsys.readouterr().out == (
        "union() {\n"
        "  cube(size=[2, 2, 2], center=false);\n"
        "  translate(v=[3, 0, 0]) {\n"
        "    sphere(r=1);\n"
        "  }\n"
        "}\n"
    )


def test_cli_reports_errors(capsys, tmp_path):
    scene = tmp_path / "bad.yaml"
    scene.write_text("teapot: {}\n", encoding="utf-8")
    assert main(["-f", str(scene)]) == 1
    assert main(["-f", str(tmp_path / "missing.yaml")]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "unknown builder 'teapot'" in captured.err


def test_cli_rejects_unknown_scene():
    with pytest.raises(SystemExit):
        main(["-s", "chair"])


def test_cli_reports_malformed_yaml(capsys, tmp_path):
    scene = tmp_path / "broken.yaml"
    scene.write_text("cube: {size: [1, 2\n", encoding="utf-8")
    assert main(["-f", str(scene)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "invalid YAML" in captured.err


def test_cli_reports_bad_builder_values(capsys, tmp_path):
    scene = tmp_path / "scene.yaml"
    scene.write_text("translate: {v: [1, 2, 3, 4], children: [{sphere: 1}]}\n", encoding="utf-8")
    assert main(["-f", str(scene)]) == 1
    assert "translate.v: must be a 2D or 3D vector" in capsys.readouterr().err


def test_cli_reports_unwritable_output(capsys, tmp_path):
    output = tmp_path / "missing" / "demo.scad"
    assert main(["-s", "csg_demo", "-o", str(output)]) == 1
    captured = capsys.readouterr()
    assert "Saved script" not in captured.out
    assert "demo.scad" in captured.err
    assert not output.exists()


def test_cli_reports_bad_precision(capsys):
    assert main(["-s", "csg_demo", "--precision", "40"]) == 1
    assert "format_options.precision" in capsys.readouterr().err
