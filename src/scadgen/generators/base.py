"""Base classes and protocols for geometry generators."""

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

from ..core.mesh import Polyhedron
from ..core.node import Node, ShapeNode


@runtime_checkable
class Generator(Protocol):
    """Protocol for geometry generators.

    Any class with a generate() method returning a Polyhedron satisfies this protocol.
    """

    def generate(self) -> Polyhedron:
        """Generate and return polyhedron geometry."""
        ...


class PolyhedronGenerator(ABC):
    """Abstract base class for generators that produce one explicit polyhedron.

    Subclasses validate their parameters on construction and implement
    generate() to build the points and faces. A generator either returns a
    complete, closed polyhedron or raises; it never returns partial geometry.
    """

    @abstractmethod
    def generate(self) -> Polyhedron:
        """Generate and return the polyhedron.

        Returns:
            A Polyhedron whose faces are wound clockwise seen from outside.
        """

    def to_node(self) -> ShapeNode:
        """Generate geometry and wrap it in a leaf node."""
        return ShapeNode(self.generate())


class CompositeGenerator(ABC):
    """Abstract base class for generators that produce scene subtrees.

    Use this for parts assembled from several primitives and boolean
    operations (e.g., a nut made of a hexagonal prism minus a tap).
    """

    @abstractmethod
    def generate(self) -> Node:
        """Generate and return the root node of the subtree."""
