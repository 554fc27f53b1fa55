"""Resolved units and the two ordered lists the orchestrator starts."""

from __future__ import annotations

from dataclasses import dataclass, field

from eazy_ci.enums import UnitRole
from eazy_ci.schema.spec import PipelineSpec


@dataclass(frozen=True)
class DependencyUnit:
    """A resolved spec plus where it was discovered."""

    spec: PipelineSpec
    depth: int
    role: UnitRole = UnitRole.DEPENDENCY

    @property
    def identity(self) -> str:
        return self.spec.identity

    @property
    def name(self) -> str:
        return self.spec.name


@dataclass
class ResolvedGraph:
    """Peers and dependencies in startup order (peers first)."""

    peers: list[DependencyUnit] = field(default_factory=list)
    dependencies: list[DependencyUnit] = field(default_factory=list)

    def startup_order(self) -> list[DependencyUnit]:
        return [*self.peers, *self.dependencies]

    def identities(self) -> list[str]:
        return [unit.identity for unit in self.startup_order()]
