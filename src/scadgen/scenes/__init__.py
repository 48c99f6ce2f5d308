"""Pre-built scenes for scadgen."""

from .bolt import create_bolt_scene
from .csg_demo import create_csg_demo_scene
from .cup import create_cup_scene
from .loft import create_loft_scene

__all__ = ["create_bolt_scene", "create_csg_demo_scene", "create_cup_scene", "create_loft_scene"]
