"""Pipeline orchestration: state machine, registry, cleanup and signals."""

from __future__ import annotations

from .cleanup import CleanupController
from .engine import PipelineOrchestrator
from .interrupt import InterruptMonitor
from .options import RunOptions
from .registry import LiveResourceRegistry
from .state_machine import PipelineStateMachine

__all__ = [
    "CleanupController",
    "InterruptMonitor",
    "LiveResourceRegistry",
    "PipelineOrchestrator",
    "PipelineStateMachine",
    "RunOptions",
]
