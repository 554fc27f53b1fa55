"""Fetches dependency specs from git repositories or local directories."""

from __future__ import annotations

import os
from pathlib import Path
import re
import shlex
import shutil
import tempfile

from eazy_ci.config.loader import parse_spec
from eazy_ci.constants import CONFIG_FILE_NAME
from eazy_ci.errors import AuthError, ConfigError, DependencyResolutionError
from eazy_ci.schema.spec import PipelineSpec
from eazy_ci.utilities.logger_manager import CustomLogger

from .process import run_command

AUTH_FAILURE_MARKERS: tuple[str, ...] = (
    "ssh",
    "publickey",
    "authentication",
    "permission denied",
    "could not read from remote repository",
    "host key verification failed",
)

_SCHEME = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)


def split_reference(reference: str) -> tuple[str, str | None]:
    """Split ``<url>[#<branch>]`` into its location and optional branch."""
    location, _, branch = reference.partition("#")
    return location.strip(), branch.strip() or None


def clone_url(location: str) -> str:
    """Expand ``host/org/repo`` shorthand into an ssh clone URL."""
    if _SCHEME.match(location) or location.startswith("git@"):
        return location
    host, sep, path = location.partition("/")
    if sep and "." in host:
        if not path.endswith(".git"):
            path = f"{path}.git"
        return f"git@{host}:{path}"
    return location


def is_auth_failure(stderr: str) -> bool:
    lowered = stderr.lower()
    return any(marker in lowered for marker in AUTH_FAILURE_MARKERS)


class GitSourceFetcher:
    """Resolves a reference to a ``PipelineSpec`` via a shallow clone."""

    def __init__(self, logger: CustomLogger, git_bin: str = "git") -> None:
        self.logger = logger
        self.git_bin = git_bin

    async def fetch_spec(self, reference: str, key_path: str | None) -> PipelineSpec:
        location, branch = split_reference(reference)
        local = Path(location).expanduser()
        if local.is_dir():
            return self._read_spec(local, str(local.resolve()))

        checkout = Path(tempfile.mkdtemp(prefix="eazy-ci-src-"))
        try:
            await self._clone(clone_url(location), branch, checkout, key_path, reference)
            return self._read_spec(checkout, reference)
        finally:
            shutil.rmtree(checkout, ignore_errors=True)

    async def _clone(
        self,
        url: str,
        branch: str | None,
        target: Path,
        key_path: str | None,
        reference: str,
    ) -> None:
        argv = [self.git_bin, "clone", "--depth", "1", "--quiet"]
        if branch:
            argv.extend(["--branch", branch])
        argv.extend([url, str(target)])
        self.logger.info(
            f"Fetching {reference}",
            extra={"context": {"url": url, "branch": branch or "default"}},
        )
        try:
            result = await run_command(argv, env=self._clone_env(key_path))
        except FileNotFoundError as exc:
            raise DependencyResolutionError(
                f"git executable not found: {self.git_bin}", reference=reference
            ) from exc
        except OSError as exc:
            raise DependencyResolutionError(
                f"Could not run {self.git_bin}: {exc}", reference=reference
            ) from exc
        if result.ok:
            return
        stderr = result.stderr.strip()
        if is_auth_failure(stderr):
            raise AuthError(f"Could not authenticate to {url}: {stderr}", reference)
        raise DependencyResolutionError(
            f"git clone of {url} failed: {stderr}", reference=reference
        )

    @staticmethod
    def _clone_env(key_path: str | None) -> dict[str, str]:
        env = dict(os.environ)
        env["GIT_TERMINAL_PROMPT"] = "0"
        if key_path:
            key = shlex.quote(str(Path(key_path).expanduser()))
            env["GIT_SSH_COMMAND"] = (
                f"ssh -i {key} -o IdentitiesOnly=yes -o StrictHostKeyChecking=accept-new"
            )
        return env

    @staticmethod
    def _read_spec(directory: Path, reference: str) -> PipelineSpec:
        spec_path = directory / CONFIG_FILE_NAME
        if not spec_path.is_file():
            raise DependencyResolutionError(
                f"{reference} has no {CONFIG_FILE_NAME}", reference=reference
            )
        try:
            return parse_spec(spec_path.read_text(encoding="utf-8"), reference)
        except ConfigError as exc:
            raise DependencyResolutionError(str(exc), reference=reference) from exc
