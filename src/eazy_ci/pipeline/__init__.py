"""Pipeline stage metadata and failure taxonomy."""

from __future__ import annotations

from .failure import (
    FAILURE_PROFILES,
    FailureClass,
    FailureProfile,
    FailureReport,
    failure_profile_for,
)
from .stages import PIPELINE_STATE_ORDER, STAGE_DETAILS, StageInfo

__all__ = [
    "FAILURE_PROFILES",
    "FailureClass",
    "FailureProfile",
    "FailureReport",
    "failure_profile_for",
    "PIPELINE_STATE_ORDER",
    "STAGE_DETAILS",
    "StageInfo",
]
