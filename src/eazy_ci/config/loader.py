"""Reads ``eazy.yml`` files into validated pipeline specs."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import ValidationError
import yaml

from eazy_ci.errors import ConfigError
from eazy_ci.schema.spec import PipelineSpec


def parse_spec(text: str, source: str) -> PipelineSpec:
    """Parse YAML text into a spec whose identity is ``source``."""
    try:
        raw: Any = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"{source}: invalid YAML: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(
            f"{source}: spec must contain a mapping, got {type(raw).__name__}"
        )
    try:
        spec = PipelineSpec.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"{source}: invalid spec: {exc}") from exc
    return spec.with_source(source)


def load_spec(path: str | Path) -> PipelineSpec:
    """Load the spec at ``path``; its resolved path becomes its identity."""
    resolved = Path(path).expanduser().resolve()
    if not resolved.is_file():
        raise ConfigError(f"Config file not found: {path}")
    try:
        text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    return parse_spec(text, str(resolved))
