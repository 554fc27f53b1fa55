"""Centralized semantic enums for eazy-ci."""

from __future__ import annotations

from enum import Enum


class PipelineState(str, Enum):
    """Linear lifecycle of one pipeline session."""

    IDLE = "idle"
    RESOLVING_GRAPH = "resolving_graph"
    STARTING_PEERS = "starting_peers"
    STARTING_DEPENDENCIES = "starting_dependencies"
    ROOT_BOOTSTRAP = "root_bootstrap"
    ROOT_BUILD = "root_build"
    ROOT_DEPLOY = "root_deploy"
    ROOT_HEALTH_CHECK = "root_health_check"
    TERMINAL_ACTION = "terminal_action"
    DONE = "done"


class TerminalAction(str, Enum):
    """The final, mutually exclusive step of a run."""

    SHELL = "shell"
    TEST = "test"

    @classmethod
    def for_modes(cls, *, dev: bool, integration: bool) -> TerminalAction:
        if dev or integration:
            return cls.SHELL
        return cls.TEST


class UnitRole(str, Enum):
    """Why a unit was pulled into the run."""

    DEPENDENCY = "dependency"
    PEER = "peer"
