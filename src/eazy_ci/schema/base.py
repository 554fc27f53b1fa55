"""Shared Pydantic base class with consistent configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class TypedBaseModel(BaseModel):
    """Common base so every schema shares the same alias and freezing rules.

    Specs are written in camelCase YAML (``peerDependencies``, ``runTest``)
    while the Python side uses snake_case; ``populate_by_name`` accepts both.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")
