"""Collaborator contracts consumed by the resolver and orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Protocol, runtime_checkable

from eazy_ci.schema.spec import PipelineSpec


@dataclass(frozen=True)
class ContainerConfig:
    """How a single container is built and started.

    ``wait`` makes the call block until the container's process exits;
    ``attach`` additionally wires the local terminal to it. ``root_image``
    tags a built image as the unit's service image instead of its
    integration image.
    """

    command: tuple[str, ...] = ()
    env: tuple[str, ...] = ()
    links: tuple[str, ...] = ()
    dockerfile: str | None = None
    wait: bool = False
    attach: bool = False
    expose_ports: bool = False
    host_network: bool = False
    root_image: bool = False
    volumes: tuple[str, ...] = field(default_factory=tuple)
    workdir: str | None = None
    user: str | None = None

    def with_links(self, links: tuple[str, ...]) -> ContainerConfig:
        return replace(self, links=links)


@runtime_checkable
class ContainerRuntime(Protocol):
    async def build_and_run(self, spec: PipelineSpec, config: ContainerConfig) -> str:
        """Build the image for ``spec`` from ``config.dockerfile`` and run it."""
        ...

    async def start_by_reference(
        self, spec: PipelineSpec, image_ref: str, config: ContainerConfig
    ) -> str:
        """Run an existing image; an empty ``image_ref`` means the root image."""
        ...

    async def kill(self, container_id: str) -> None:
        ...


@runtime_checkable
class CredentialProvisioner(Protocol):
    async def set_up(self) -> None:
        ...


@runtime_checkable
class SourceFetcher(Protocol):
    async def fetch_spec(self, reference: str, key_path: str | None) -> PipelineSpec:
        ...


@runtime_checkable
class TerminalStateController(Protocol):
    def restore_state(self) -> None:
        ...
