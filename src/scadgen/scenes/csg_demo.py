"""CSG demo scene, defined in YAML."""

from pathlib import Path

from ..core.node import Node
from ..layout import SceneLoader


def create_csg_demo_scene() -> Node:
    """Create the cube-minus-bores demo.

    Returns:
        The root node of the demo.
    """
    scene_path = Path(__file__).parent.parent / "data" / "scenes" / "csg_demo.yaml"
    return SceneLoader().load(scene_path)
