"""Main entry point for scadgen."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

from .config import load_format_options
from .core.mesh import Polyhedron
from .core.node import Node, ShapeNode
from .errors import ScadgenError
from .layout import SceneLoader
from .logging_config import setup_logging
from .scenes import create_bolt_scene, create_csg_demo_scene, create_cup_scene, create_loft_scene
from .serializer import FormatOptions, save, serialize

logger = logging.getLogger(__name__)


# Scene registry - maps scene names to factory functions
SCENES = {
    "csg_demo": create_csg_demo_scene,
    "loft": create_loft_scene,
    "cup": create_cup_scene,
    "bolt": create_bolt_scene,
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Scadgen - CSG scene generator for OpenSCAD",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "-s", "--scene",
        choices=list(SCENES.keys()),
        default="csg_demo",
        help="Pre-built scene to generate (default: csg_demo)",
    )
    source.add_argument(
        "-f", "--file",
        metavar="PATH",
        help="YAML scene definition to generate instead of a pre-built scene",
    )
    parser.add_argument(
        "-o", "--output",
        metavar="PATH",
        help="Write the script to a .scad file (default: print to stdout)",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="YAML file with formatting options",
    )
    parser.add_argument(
        "--precision",
        type=int,
        help="Decimal places for numbers (default: 6)",
    )
    parser.add_argument(
        "--fn",
        type=int,
        help="Global $fn written at the top of the script",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def build_options(args: argparse.Namespace) -> FormatOptions:
    """Combine the config file (if any) with command line overrides."""
    options = load_format_options(args.config) if args.config else FormatOptions()
    overrides = {name: getattr(args, name) for name in ("precision", "fn") if getattr(args, name) is not None}
    return dataclasses.replace(options, **overrides)


def describe(root: Node) -> list[str]:
    """One line per node, indented by depth."""
    lines = []
    for depth, node in root.iter_nodes():
        info = ""
        if isinstance(node, ShapeNode) and isinstance(node.shape, Polyhedron):
            info = f" ({node.shape.vertex_count} points, {node.shape.face_count} faces)"
        lines.append(f"{'  ' * depth}- {node.label}{info}")
    return lines


def main(argv: list[str] | None = None) -> int:
    """Generate a scene and print or save its script."""
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        options = build_options(args)
        if args.file:
            root = SceneLoader().load(args.file)
        else:
            root = SCENES[args.scene]()
        if args.output is None:
            sys.stdout.write(serialize(root, options))
            return 0
        path = save(root, args.output, options)
    except (ScadgenError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    nodes = describe(root)
    print("Scadgen - CSG scene generator")
    print("=" * 40)
    print(f"Scene contains {len(nodes)} nodes:")
    for line in nodes:
        print(line)
    print(f"\nSaved script to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
