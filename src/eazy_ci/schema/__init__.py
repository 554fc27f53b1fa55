"""Pydantic models for pipeline specs."""

from __future__ import annotations

from .base import TypedBaseModel
from .spec import BuildSection, DeploymentSection, IntegrationSection, PipelineSpec

__all__ = [
    "TypedBaseModel",
    "PipelineSpec",
    "IntegrationSection",
    "DeploymentSection",
    "BuildSection",
]
