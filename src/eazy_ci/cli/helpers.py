"""Support routines for the eazy-ci CLI."""

from __future__ import annotations

import argparse
from pathlib import Path

from eazy_ci.config.env import parse_env_overrides, setting
from eazy_ci.orchestrator.options import RunOptions
from eazy_ci.runtime.credentials import SSHAgentProvisioner
from eazy_ci.runtime.docker import DockerRuntime
from eazy_ci.runtime.git import GitSourceFetcher
from eazy_ci.runtime.terminal import TerminalController
from eazy_ci.session import PipelineSession
from eazy_ci.utilities.logger_manager import LoggerConfig, LoggerManager


def ensure_directory(path: str | None) -> None:
    """Ensure the directory exists, creating it if necessary."""
    if path:
        dir_path = Path(path).resolve()
        dir_path.mkdir(parents=True, exist_ok=True)


def build_logger_manager(
    log_level: str | None = None, log_dir: str | None = None
) -> LoggerManager:
    ensure_directory(log_dir)
    config = LoggerConfig(
        log_level=log_level or setting("log_level") or "INFO",
        log_dir=Path(log_dir) if log_dir else None,
    )
    return LoggerManager(name="eazy-ci", config=config)


def build_run_options(
    args: argparse.Namespace, working_dir: Path | None = None
) -> RunOptions:
    """Translate parsed arguments into run options.

    Raises ``ConfigError`` when an ``-e`` override is malformed.
    """
    return RunOptions(
        dev=args.dev,
        integration=args.integration,
        host_network=args.host_network,
        env_overrides=parse_env_overrides(args.env),
        key_path=args.key or setting("ssh_key"),
        working_dir=(working_dir or Path.cwd()).resolve(),
    )


def build_session(
    config_path: str | Path,
    options: RunOptions,
    logger_manager: LoggerManager,
) -> PipelineSession:
    """Assemble a session backed by docker, git and ssh-agent."""
    logger = logger_manager.get_logger()
    terminal = TerminalController(logger)
    terminal.snapshot()
    return PipelineSession(
        config_path=config_path,
        options=options,
        runtime=DockerRuntime(
            logger,
            docker_bin=setting("docker_bin") or "docker",
            build_context=options.working_dir,
        ),
        fetcher=GitSourceFetcher(logger, git_bin=setting("git_bin") or "git"),
        provisioner=SSHAgentProvisioner(logger, key_path=options.key_path),
        terminal=terminal,
        logger=logger,
    )
