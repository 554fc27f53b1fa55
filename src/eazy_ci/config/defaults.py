"""Explicit default settings for a pipeline run."""

from __future__ import annotations

RUN_DEFAULTS: dict[str, object] = {
    "docker_bin": "docker",
    "git_bin": "git",
    "log_level": "INFO",
}
