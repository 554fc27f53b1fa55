"""Dependency and peer-dependency resolution."""

from __future__ import annotations

from .graph import DependencyUnit, ResolvedGraph
from .resolver import DependencyResolver

__all__ = ["DependencyResolver", "DependencyUnit", "ResolvedGraph"]
