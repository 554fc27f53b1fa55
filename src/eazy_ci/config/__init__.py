"""Configuration helpers: defaults, environment, and spec loading."""

from __future__ import annotations

from eazy_ci.config.defaults import RUN_DEFAULTS
from eazy_ci.config.env import (
    ENV_SETTINGS,
    EnvSetting,
    load_environment,
    parse_env_overrides,
    setting,
)
from eazy_ci.config.loader import load_spec, parse_spec

__all__ = [
    "RUN_DEFAULTS",
    "ENV_SETTINGS",
    "EnvSetting",
    "load_environment",
    "parse_env_overrides",
    "setting",
    "load_spec",
    "parse_spec",
]
