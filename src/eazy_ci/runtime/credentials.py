"""Provisions ssh credentials for dependency fetches."""

from __future__ import annotations

import os
from pathlib import Path

from eazy_ci.errors import AuthError
from eazy_ci.utilities.logger_manager import CustomLogger

from .process import run_command


def parse_agent_output(output: str) -> dict[str, str]:
    """Extract ``VAR=value;`` assignments printed by ``ssh-agent -s``."""
    variables: dict[str, str] = {}
    for line in output.splitlines():
        if "=" in line and ";" in line:
            var, val = line.split(";", 1)[0].split("=", 1)
            variables[var.strip()] = val.strip()
    return variables


class SSHAgentProvisioner:
    """Ensures an ssh-agent is running and holds the fetch key."""

    def __init__(self, logger: CustomLogger, key_path: str | None = None) -> None:
        self.logger = logger
        self.key_path = key_path

    async def set_up(self) -> None:
        if not os.environ.get("SSH_AUTH_SOCK"):
            self.logger.info("Starting ssh-agent")
            try:
                result = await run_command(["ssh-agent", "-s"])
            except FileNotFoundError as exc:
                raise AuthError("ssh-agent is not installed") from exc
            except OSError as exc:
                raise AuthError(f"Could not start ssh-agent: {exc}") from exc
            if not result.ok:
                raise AuthError(f"ssh-agent failed: {result.stderr.strip()}")
            for var, val in parse_agent_output(result.stdout).items():
                os.environ[var] = val
                self.logger.debug(f"Set {var}={val}")

        argv = ["ssh-add"]
        if self.key_path:
            argv.append(str(Path(self.key_path).expanduser()))
        # ssh-add may prompt for a passphrase, so it shares the terminal.
        try:
            result = await run_command(argv, capture=False)
        except FileNotFoundError as exc:
            raise AuthError("ssh-add is not installed") from exc
        except OSError as exc:
            raise AuthError(f"Could not run ssh-add: {exc}") from exc
        if not result.ok:
            raise AuthError(f"ssh-add exited with status {result.returncode}")
        self.logger.info(
            "Key added to ssh-agent",
            extra={"context": {"key_path": self.key_path or "default"}},
        )
