"""Fixed names shared by the resolver, runtime, and orchestrator."""

from __future__ import annotations

CONFIG_FILE_NAME = "eazy.yml"
DEFAULT_CONFIG_PATH = f"./{CONFIG_FILE_NAME}"

DOCKERFILE = "Dockerfile"
INTEGRATION_DOCKERFILE = "Integration.Dockerfile"

BUILD_MOUNT_PATH = "/build"
"""In-container path where the working directory is mounted for builds."""
ELEVATED_USER = "root"
SHELL_COMMAND: tuple[str, ...] = ("/bin/bash",)

INTEGRATION_IMAGE_SUFFIX = "-integration"
LATEST_TAG = "latest"

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
