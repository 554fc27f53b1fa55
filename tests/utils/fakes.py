"""In-memory collaborators for orchestrator, resolver and session tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from eazy_ci.errors import AuthError, ContainerRuntimeError, DependencyResolutionError
from eazy_ci.runtime.contracts import ContainerConfig
from eazy_ci.schema.spec import PipelineSpec


def make_spec(name: str, source: str | None = None, **fields: Any) -> PipelineSpec:
    spec = PipelineSpec.model_validate({"name": name, **fields})
    return spec.with_source(source if source is not None else name)


@dataclass
class RuntimeCall:
    method: str
    unit: str
    image: str
    config: ContainerConfig
    container_id: str


@dataclass
class FakeRuntime:
    """Hands out sequential container ids and records every call."""

    fail_when: Callable[[RuntimeCall], ContainerRuntimeError | None] | None = None
    hang_when: Callable[[RuntimeCall], bool] | None = None
    kill_failures: set[str] = field(default_factory=set)
    calls: list[RuntimeCall] = field(default_factory=list)
    killed: list[str] = field(default_factory=list)
    kill_attempts: list[str] = field(default_factory=list)
    snapshots: list[tuple[str, ...]] = field(default_factory=list)
    registry: Any = None

    async def build_and_run(self, spec: PipelineSpec, config: ContainerConfig) -> str:
        image = spec.root_image if config.root_image else spec.integration_image
        return await self._launch("build_and_run", spec, image, config)

    async def start_by_reference(
        self, spec: PipelineSpec, image_ref: str, config: ContainerConfig
    ) -> str:
        return await self._launch(
            "start_by_reference", spec, image_ref or spec.root_image, config
        )

    async def kill(self, container_id: str) -> None:
        self.kill_attempts.append(container_id)
        if container_id in self.kill_failures:
            raise ContainerRuntimeError(
                f"No such container: {container_id}", container_id=container_id
            )
        self.killed.append(container_id)

    async def _launch(
        self, method: str, spec: PipelineSpec, image: str, config: ContainerConfig
    ) -> str:
        if self.registry is not None:
            self.snapshots.append(self.registry.container_ids())
        container_id = f"c{len(self.calls) + 1}"
        call = RuntimeCall(method, spec.name, image, config, container_id)
        self.calls.append(call)
        if self.hang_when is not None and self.hang_when(call):
            await asyncio.Event().wait()
        if self.fail_when is not None:
            error = self.fail_when(call)
            if error is not None:
                raise error
        return container_id

    def commands(self) -> list[tuple[str, ...]]:
        return [call.config.command for call in self.calls]


@dataclass
class FakeFetcher:
    """Serves specs by reference; scripted auth failures count down."""

    specs: dict[str, PipelineSpec] = field(default_factory=dict)
    auth_failures: dict[str, int] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    async def fetch_spec(self, reference: str, key_path: str | None) -> PipelineSpec:
        self.calls.append(reference)
        remaining = self.auth_failures.get(reference, 0)
        if remaining:
            self.auth_failures[reference] = remaining - 1
            raise AuthError(f"Permission denied (publickey) for {reference}", reference)
        if reference not in self.specs:
            raise DependencyResolutionError(f"unknown reference {reference}", reference)
        return self.specs[reference]

    def add(self, spec: PipelineSpec) -> PipelineSpec:
        self.specs[spec.source] = spec
        return spec


@dataclass
class FakeProvisioner:
    calls: int = 0
    error: Exception | None = None

    async def set_up(self) -> None:
        self.calls += 1
        if self.error is not None:
            raise self.error


@dataclass
class FakeTerminal:
    restored: int = 0

    def restore_state(self) -> None:
        self.restored += 1
