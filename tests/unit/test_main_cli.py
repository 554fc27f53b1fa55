from __future__ import annotations

from pathlib import Path
import sys

import pytest

from eazy_ci import __version__
from eazy_ci.cli.helpers import build_run_options
from eazy_ci.errors import ConfigError
import eazy_ci.main as cli_main
from eazy_ci.main import main, parse_args


def test_parse_args_defaults(monkeypatch) -> None:
    """parse_args() should fall back to ./eazy.yml and the test action."""
    monkeypatch.setattr(sys, "argv", ["eazy-ci"])
    args = parse_args()
    assert args.file == "./eazy.yml"
    assert args.env == []
    assert args.dev is False
    assert args.integration is False
    assert args.host_network is False
    assert args.key is None
    assert args.log_level is None


def test_parse_args_all_flags() -> None:
    args = parse_args(
        [
            "-f",
            "ci/eazy.yml",
            "-e",
            "A=1",
            "--env",
            "B=2",
            "-d",
            "-i",
            "-H",
            "-k",
            "~/.ssh/ci",
            "--log-level",
            "debug",
            "--log-dir",
            "logs",
        ]
    )
    assert args.file == "ci/eazy.yml"
    assert args.env == ["A=1", "B=2"]
    assert args.dev and args.integration and args.host_network
    assert args.key == "~/.ssh/ci"
    assert args.log_level == "debug"
    assert args.log_dir == "logs"


def test_version_flag_prints_package_version(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_args(["--version"])
    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_build_run_options_reads_key_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("EAZY_SSH_KEY", "/keys/deploy")
    monkeypatch.setenv("HOST_TOKEN", "abc")
    args = parse_args(["-e", "A=1", "-e", "HOST_TOKEN", "-i"])
    options = build_run_options(args, working_dir=Path("/src/app"))
    assert options.key_path == "/keys/deploy"
    assert options.env_overrides == ("A=1", "HOST_TOKEN=abc")
    assert options.integration and not options.dev
    assert options.working_dir == Path("/src/app")


def test_build_run_options_rejects_bad_override() -> None:
    with pytest.raises(ConfigError):
        build_run_options(parse_args(["-e", "=oops"]))


@pytest.mark.asyncio
async def test_main_returns_one_for_invalid_override() -> None:
    assert await main(["-e", "1BAD=x"]) == 1


@pytest.mark.asyncio
async def test_main_returns_session_exit_code(monkeypatch) -> None:
    captured: dict[str, object] = {}

    class StubSession:
        async def run(self) -> int:
            return 0

    def fake_build_session(config_path, options, logger_manager):
        captured["config_path"] = config_path
        captured["options"] = options
        return StubSession()

    monkeypatch.setattr(cli_main, "build_session", fake_build_session)

    assert await main(["-f", "other.yml", "-H"]) == 0
    assert captured["config_path"] == "other.yml"
    assert captured["options"].host_network is True
