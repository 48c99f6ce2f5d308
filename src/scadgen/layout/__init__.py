"""Data-driven scene definitions."""

from .loader import BUILDER_REGISTRY, SceneLoader

__all__ = ["BUILDER_REGISTRY", "SceneLoader"]
