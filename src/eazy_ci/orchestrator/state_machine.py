"""Enum-driven, forward-only pipeline state machine."""

from __future__ import annotations

from dataclasses import dataclass, field

from eazy_ci.enums import PipelineState
from eazy_ci.pipeline.stages import PIPELINE_STATE_ORDER, STAGE_DETAILS, state_index


@dataclass
class PipelineStateMachine:
    """Tracks the session's position in the fixed stage sequence.

    Transitions only move forward. Optional stages may be skipped, required
    ones may not. ``fail`` jumps to ``DONE`` from anywhere; ``finish`` is only
    legal once the terminal action has run.
    """

    state: PipelineState = PipelineState.IDLE
    succeeded: bool | None = None
    history: list[PipelineState] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.history:
            self.history.append(self.state)

    @property
    def is_done(self) -> bool:
        return self.state is PipelineState.DONE

    @property
    def last_active_state(self) -> PipelineState:
        """The most recent state before ``DONE`` was entered."""
        for state in reversed(self.history):
            if state is not PipelineState.DONE:
                return state
        return PipelineState.IDLE

    def transition_to(self, target: PipelineState) -> None:
        """Advance to the requested state if the transition is allowed."""
        if target is PipelineState.DONE:
            raise RuntimeError("Use finish() or fail() to enter the done state")
        current = state_index(self.state)
        wanted = state_index(target)
        if self.is_done or wanted <= current:
            raise RuntimeError(
                f"Invalid transition {self.state.value} -> {target.value}"
            )
        for skipped in PIPELINE_STATE_ORDER[current + 1 : wanted]:
            if not STAGE_DETAILS[skipped].optional:
                raise RuntimeError(
                    f"Cannot skip required state {skipped.value} "
                    f"({self.state.value} -> {target.value})"
                )
        self.state = target
        self.history.append(target)

    def finish(self) -> None:
        if self.state is not PipelineState.TERMINAL_ACTION:
            raise RuntimeError(f"Cannot finish from state {self.state.value}")
        self._enter_done(succeeded=True)

    def fail(self) -> None:
        if self.is_done:
            return
        self._enter_done(succeeded=False)

    def _enter_done(self, succeeded: bool) -> None:
        self.state = PipelineState.DONE
        self.succeeded = succeeded
        self.history.append(PipelineState.DONE)
