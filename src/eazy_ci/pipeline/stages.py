"""Defines the fixed pipeline lifecycle and per-stage metadata."""

from __future__ import annotations

from dataclasses import dataclass

from eazy_ci.enums import PipelineState


@dataclass(frozen=True)
class StageInfo:
    description: str
    optional: bool
    runs_in_dev: bool


PIPELINE_STATE_ORDER: tuple[PipelineState, ...] = (
    PipelineState.IDLE,
    PipelineState.RESOLVING_GRAPH,
    PipelineState.STARTING_PEERS,
    PipelineState.STARTING_DEPENDENCIES,
    PipelineState.ROOT_BOOTSTRAP,
    PipelineState.ROOT_BUILD,
    PipelineState.ROOT_DEPLOY,
    PipelineState.ROOT_HEALTH_CHECK,
    PipelineState.TERMINAL_ACTION,
    PipelineState.DONE,
)

STAGE_DETAILS: dict[PipelineState, StageInfo] = {
    PipelineState.IDLE: StageInfo(
        description="Session created, nothing started.",
        optional=False,
        runs_in_dev=True,
    ),
    PipelineState.RESOLVING_GRAPH: StageInfo(
        description="Fetch dependency and peer specs.",
        optional=False,
        runs_in_dev=True,
    ),
    PipelineState.STARTING_PEERS: StageInfo(
        description="Start every peer unit in discovery order.",
        optional=False,
        runs_in_dev=True,
    ),
    PipelineState.STARTING_DEPENDENCIES: StageInfo(
        description="Start every dependency unit in discovery order.",
        optional=False,
        runs_in_dev=True,
    ),
    PipelineState.ROOT_BOOTSTRAP: StageInfo(
        description="Run the root integration bootstrap commands.",
        optional=True,
        runs_in_dev=True,
    ),
    PipelineState.ROOT_BUILD: StageInfo(
        description="Compile the working directory inside the build image.",
        optional=True,
        runs_in_dev=False,
    ),
    PipelineState.ROOT_DEPLOY: StageInfo(
        description="Build and start the root service container.",
        optional=True,
        runs_in_dev=False,
    ),
    PipelineState.ROOT_HEALTH_CHECK: StageInfo(
        description="Run deployment health commands against the root service.",
        optional=True,
        runs_in_dev=False,
    ),
    PipelineState.TERMINAL_ACTION: StageInfo(
        description="Attach an interactive shell or run the test commands.",
        optional=False,
        runs_in_dev=True,
    ),
    PipelineState.DONE: StageInfo(
        description="Run finished; cleanup follows.",
        optional=False,
        runs_in_dev=True,
    ),
}


def state_index(state: PipelineState) -> int:
    return PIPELINE_STATE_ORDER.index(state)
