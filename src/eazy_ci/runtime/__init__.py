"""Concrete collaborators: container runtime, source fetch, credentials, terminal."""

from __future__ import annotations

from .contracts import (
    ContainerConfig,
    ContainerRuntime,
    CredentialProvisioner,
    SourceFetcher,
    TerminalStateController,
)
from .credentials import SSHAgentProvisioner
from .docker import DockerRuntime
from .git import GitSourceFetcher
from .terminal import TerminalController

__all__ = [
    "ContainerConfig",
    "ContainerRuntime",
    "CredentialProvisioner",
    "SourceFetcher",
    "TerminalStateController",
    "DockerRuntime",
    "GitSourceFetcher",
    "SSHAgentProvisioner",
    "TerminalController",
]
