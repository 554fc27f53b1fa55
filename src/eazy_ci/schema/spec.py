"""Declarative project description loaded from ``eazy.yml``."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import Field, field_validator

from eazy_ci.constants import INTEGRATION_IMAGE_SUFFIX, LATEST_TAG

from .base import TypedBaseModel


def _as_command(value: Any) -> Any:
    """Accept either an argv list or a single shell string."""
    if value is None:
        return []
    if isinstance(value, str):
        return ["/bin/sh", "-c", value] if value.strip() else []
    return value


class IntegrationSection(TypedBaseModel):
    bootstrap: list[str] = Field(default_factory=list)
    run_test: list[str] = Field(default_factory=list, alias="runTest")

    @field_validator("bootstrap", "run_test", mode="before")
    @classmethod
    def _normalize_commands(cls, value: Any) -> Any:
        return _as_command(value)


class DeploymentSection(TypedBaseModel):
    health: list[str] = Field(default_factory=list)
    env: list[str] = Field(default_factory=list)
    port: list[str] = Field(default_factory=list)

    @field_validator("health", mode="before")
    @classmethod
    def _normalize_health(cls, value: Any) -> Any:
        return _as_command(value)

    @field_validator("env", mode="before")
    @classmethod
    def _normalize_env(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, Mapping):
            return [f"{key}={val}" for key, val in value.items()]
        return value

    @field_validator("env")
    @classmethod
    def _require_assignments(cls, value: list[str]) -> list[str]:
        for entry in value:
            if "=" not in entry or entry.startswith("="):
                raise ValueError(f"deployment env entry must be KEY=VALUE: {entry!r}")
        return value

    @field_validator("port", mode="before")
    @classmethod
    def _normalize_ports(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (str, int)):
            value = [value]
        return [str(port) for port in value]


class BuildSection(TypedBaseModel):
    image: str | None = None
    command: list[str] = Field(default_factory=list)

    @field_validator("command", mode="before")
    @classmethod
    def _normalize_command(cls, value: Any) -> Any:
        return _as_command(value)


class PipelineSpec(TypedBaseModel):
    """One project's dependencies and CI/CD stages.

    ``source`` is the reference the spec was fetched from (a repository URL,
    a local directory, or the root config path) and is its identity during
    dependency resolution. It never comes from the YAML itself.
    """

    name: str = Field(..., min_length=1)
    version: str = LATEST_TAG
    dependencies: list[str] = Field(default_factory=list)
    peer_dependencies: list[str] = Field(
        default_factory=list, alias="peerDependencies"
    )
    integration: IntegrationSection = Field(default_factory=IntegrationSection)
    deployment: DeploymentSection = Field(default_factory=DeploymentSection)
    build: BuildSection = Field(default_factory=BuildSection)
    source: str = Field("", exclude=True)

    @field_validator("name")
    @classmethod
    def _docker_safe_name(cls, value: str) -> str:
        cleaned = value.strip().lower()
        if not cleaned or any(ch.isspace() for ch in cleaned):
            raise ValueError(f"name must be a single docker-safe token: {value!r}")
        return cleaned

    @field_validator("version", mode="before")
    @classmethod
    def _stringify_version(cls, value: Any) -> Any:
        if value is None:
            return LATEST_TAG
        return str(value)

    @field_validator("dependencies", "peer_dependencies", mode="before")
    @classmethod
    def _normalize_references(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @property
    def identity(self) -> str:
        return self.source or self.name

    @property
    def root_image(self) -> str:
        return f"{self.name}:{self.version}"

    @property
    def integration_image(self) -> str:
        return f"{self.name}{INTEGRATION_IMAGE_SUFFIX}:{self.version}"

    @property
    def latest_integration_image(self) -> str:
        return f"{self.name}{INTEGRATION_IMAGE_SUFFIX}:{LATEST_TAG}"

    @property
    def has_build_image(self) -> bool:
        return bool(self.build.image)

    def with_source(self, source: str) -> PipelineSpec:
        return self.model_copy(update={"source": source})
