"""Loads environment-driven settings and validates ``-e`` overrides."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import os
from pathlib import Path
import re

from dotenv import load_dotenv

from eazy_ci.config.defaults import RUN_DEFAULTS
from eazy_ci.errors import ConfigError

_ENV_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class EnvSetting:
    """Describes a setting that may be supplied through the environment."""

    name: str
    env_var: str
    description: str


ENV_SETTINGS: tuple[EnvSetting, ...] = (
    EnvSetting("ssh_key", "EAZY_SSH_KEY", "Private key used to fetch dependencies"),
    EnvSetting("log_level", "EAZY_LOG_LEVEL", "Console log level"),
    EnvSetting("docker_bin", "EAZY_DOCKER_BIN", "Docker CLI executable"),
    EnvSetting("git_bin", "EAZY_GIT_BIN", "git executable used for fetches"),
)


def load_environment(dotenv_path: str | Path | None = None) -> None:
    """Load a `.env` file when available; existing variables win."""
    path = Path(dotenv_path) if dotenv_path else Path(".env")
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def setting(name: str, default: str | None = None) -> str | None:
    """Return a setting from the environment, falling back to run defaults."""
    spec = next((item for item in ENV_SETTINGS if item.name == name), None)
    if spec is None:
        raise KeyError(f"Unknown setting: {name}")
    value = os.getenv(spec.env_var)
    if value:
        return value
    if default is not None:
        return default
    fallback = RUN_DEFAULTS.get(name)
    return str(fallback) if fallback is not None else None


def parse_env_overrides(values: Iterable[str] | None) -> tuple[str, ...]:
    """Validate ``KEY=VALUE`` overrides passed on the command line.

    A bare ``KEY`` is expanded from the current environment, matching how
    ``docker run -e KEY`` forwards a host variable.
    """
    parsed: list[str] = []
    for raw in values or ():
        key, sep, value = raw.partition("=")
        if not _ENV_NAME.match(key):
            raise ConfigError(f"Invalid environment override: {raw!r}")
        if not sep:
            host_value = os.getenv(key)
            if host_value is None:
                raise ConfigError(
                    f"Environment override {key!r} has no value and is not set"
                )
            value = host_value
        parsed.append(f"{key}={value}")
    return tuple(parsed)


__all__ = [
    "ENV_SETTINGS",
    "EnvSetting",
    "load_environment",
    "parse_env_overrides",
    "setting",
]
