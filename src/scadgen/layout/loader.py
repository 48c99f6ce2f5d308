"""YAML loader for scene definitions."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

import yaml

from ..core import builders
from ..core.node import Node
from ..errors import ValidationError
from ..generators import fasteners, pipe

logger = logging.getLogger(__name__)


# Registry of available builders: name -> (callable, leading positional parameters)
BUILDER_REGISTRY: dict[str, tuple[Callable[..., Node], tuple[str, ...]]] = {
    # Primitives
    "cube": (builders.cube, ()),
    "sphere": (builders.sphere, ()),
    "cylinder": (builders.cylinder, ()),
    "circle": (builders.circle, ()),
    "square": (builders.square, ()),
    "polygon": (builders.polygon, ()),
    "polyhedron": (builders.polyhedron, ()),
    "text": (builders.text, ()),
    "import": (builders.import_file, ()),
    "surface": (builders.surface, ()),
    # Booleans
    "union": (builders.union, ()),
    "difference": (builders.difference, ()),
    "intersection": (builders.intersection, ()),
    "hull": (builders.hull, ()),
    "minkowski": (builders.minkowski, ()),
    # Transforms
    "translate": (builders.translate, ("v",)),
    "rotate": (builders.rotate, ("a",)),
    "scale": (builders.scale, ("v",)),
    "mirror": (builders.mirror, ("v",)),
    "multmatrix": (builders.multmatrix, ("m",)),
    "color": (builders.color, ("c",)),
    # Modifiers
    "disable": (builders.disable, ()),
    "show_only": (builders.show_only, ()),
    "highlight": (builders.highlight, ()),
    "background": (builders.background, ()),
    # 2D operations
    "linear_extrude": (builders.linear_extrude, ("height",)),
    "rotate_extrude": (builders.rotate_extrude, ()),
    "projection": (builders.projection, ()),
    "offset": (builders.offset, ()),
    "resize": (builders.resize, ("newsize",)),
    # Parts
    "threaded_rod": (fasteners.threaded_rod, ()),
    "tap": (fasteners.tap, ()),
    "hex_nut": (fasteners.hex_nut, ()),
    "hex_bolt": (fasteners.hex_bolt, ()),
    "pipe": (pipe.straight, ()),
    "curved_pipe": (pipe.curved, ()),
    "tapered_pipe": (pipe.tapered, ()),
}


class SceneLoader:
    """Builds scene graphs from YAML definitions.

    Every node is a mapping with a single key, the builder name. Its value
    is either a mapping of keyword arguments (with an optional `children`
    list), a list of children, a single scalar argument, or empty:

    ```yaml
    difference:
      children:
        - cube: {size: 10, center: true}
        - translate:
            v: [0, 0, 2]
            children:
              - sphere: {r: 6}
        - cylinder: {h: 20, r: 2, center: true, fn: 24}
    ```

    A top-level list is wrapped in an implicit union.
    """

    def __init__(self, registry: dict[str, tuple[Callable[..., Node], tuple[str, ...]]] | None = None) -> None:
        self.registry = BUILDER_REGISTRY if registry is None else registry

    def load(self, path: str | Path) -> Node:
        """Load a scene from a YAML file."""
        path = Path(path)
        logger.info("Loading scene from %s", path)
        with open(path, encoding="utf-8") as f:
            return self.load_string(f.read(), source=str(path))

    def load_string(self, yaml_string: str, source: str = "<string>") -> Node:
        """Load a scene from a YAML string."""
        try:
            data = yaml.safe_load(yaml_string)
        except yaml.YAMLError as exc:
            raise ValidationError(f"invalid YAML in {source}: {exc}", shape="scene") from exc
        return self.build(data)

    def build(self, data: Any) -> Node:
        """Build a node tree from parsed YAML data."""
        if isinstance(data, list):
            return builders.union(*(self._build_node(item) for item in data))
        return self._build_node(data)

    def _build_node(self, data: Any) -> Node:
        if not isinstance(data, dict) or len(data) != 1:
            raise ValidationError(
                f"each node must be a mapping with exactly one builder name, got {data!r}",
                field="node", shape="scene",
            )
        ((name, params),) = data.items()
        if name not in self.registry:
            raise ValidationError(
                f"unknown builder {name!r} (expected one of {sorted(self.registry)})",
                field="node", shape="scene",
            )
        func, leading = self.registry[name]

        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        children: list[Any] = []
        match params:
            case None:
                pass
            case list():
                children = params
            case dict():
                kwargs = dict(params)
                children = kwargs.pop("children", None) or []
                if not isinstance(children, list):
                    raise ValidationError("children must be a list", field="children", shape=name)
                for param in leading:
                    if param not in kwargs:
                        raise ValidationError("missing required parameter", field=param, shape=name)
                    args.append(kwargs.pop(param))
            case _:
                args = [params]

        args.extend(self._build_node(child) for child in children)
        try:
            return func(*args, **kwargs)
        except ValidationError:
            raise
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"bad parameters: {exc}", shape=name) from exc
