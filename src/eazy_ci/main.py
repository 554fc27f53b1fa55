"""Command-line driver for eazy-ci pipelines."""

from __future__ import annotations

import argparse
import asyncio
import sys

from eazy_ci import __version__
from eazy_ci.cli.helpers import build_logger_manager, build_run_options, build_session
from eazy_ci.config.env import load_environment
from eazy_ci.constants import DEFAULT_CONFIG_PATH, EXIT_FAILURE
from eazy_ci.errors import ConfigError


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="eazy-ci",
        description="Run a containerized CI pipeline described by eazy.yml.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=__version__,
        help="Show the version and exit.",
    )
    parser.add_argument(
        "-f",
        "--file",
        default=DEFAULT_CONFIG_PATH,
        help="Path to the pipeline spec.",
    )
    parser.add_argument(
        "-e",
        "--env",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Environment variable for the root project's containers (repeatable).",
    )
    parser.add_argument(
        "-d",
        "--dev",
        action="store_true",
        help="Skip build and deploy; open a shell with the project mounted.",
    )
    parser.add_argument(
        "-i",
        "--integration",
        action="store_true",
        help="Open an interactive shell instead of running the tests.",
    )
    parser.add_argument(
        "-H",
        "--host-network",
        action="store_true",
        help="Run every container on the host network.",
    )
    parser.add_argument(
        "-k",
        "--key",
        default=None,
        metavar="PATH",
        help="ssh private key used to fetch dependencies (or EAZY_SSH_KEY).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Console log level (or EAZY_LOG_LEVEL).",
    )
    parser.add_argument(
        "--log-dir",
        default=None,
        help="Directory for a rotating log file.",
    )
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    """Run one pipeline session and return its exit code."""
    load_environment()
    args = parse_args(argv)
    logger_manager = build_logger_manager(args.log_level, args.log_dir)
    logger = logger_manager.get_logger()
    try:
        options = build_run_options(args)
    except ConfigError as exc:
        logger.error(f"Invalid arguments: {exc}")
        logger_manager.close()
        return EXIT_FAILURE

    logger.info(
        "eazy-ci starting",
        extra={
            "context": {
                "config": args.file,
                "dev": options.dev,
                "integration": options.integration,
                "host_network": options.host_network,
            }
        },
    )
    session = build_session(args.file, options, logger_manager)
    try:
        return await session.run()
    finally:
        logger_manager.close()


def run() -> None:
    """Console entry point."""
    try:
        exit_code = asyncio.run(main())
    except KeyboardInterrupt:
        print("Pipeline interrupted by user", file=sys.stderr)
        exit_code = EXIT_FAILURE
    sys.exit(exit_code)


if __name__ == "__main__":
    run()
