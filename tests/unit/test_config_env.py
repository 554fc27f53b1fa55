from __future__ import annotations

import os
from pathlib import Path

import pytest

from eazy_ci.config import RUN_DEFAULTS, load_environment, parse_env_overrides, setting
from eazy_ci.errors import ConfigError


def test_setting_prefers_environment(monkeypatch) -> None:
    monkeypatch.setenv("EAZY_DOCKER_BIN", "/usr/local/bin/podman")
    assert setting("docker_bin") == "/usr/local/bin/podman"


def test_setting_falls_back_to_run_defaults() -> None:
    assert setting("git_bin") == RUN_DEFAULTS["git_bin"]
    assert setting("ssh_key") is None


def test_unknown_setting_is_rejected() -> None:
    with pytest.raises(KeyError):
        setting("nope")


def test_dotenv_does_not_override_existing_variables(
    tmp_path: Path, monkeypatch
) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "EAZY_LOG_LEVEL=DEBUG\nEAZY_GIT_BIN=/opt/git\n", encoding="utf-8"
    )
    monkeypatch.setenv("EAZY_LOG_LEVEL", "WARNING")
    load_environment(env_file)
    try:
        assert setting("log_level") == "WARNING"
        assert setting("git_bin") == "/opt/git"
    finally:
        os.environ.pop("EAZY_GIT_BIN", None)


def test_parse_env_overrides_keeps_order(monkeypatch) -> None:
    monkeypatch.setenv("FROM_HOST", "yes")
    assert parse_env_overrides(["A=1", "B=x=y", "FROM_HOST", "C="]) == (
        "A=1",
        "B=x=y",
        "FROM_HOST=yes",
        "C=",
    )


@pytest.mark.parametrize("raw", ["=1", "1A=2", "MISSING_FROM_HOST_VAR"])
def test_parse_env_overrides_rejects_invalid(raw: str, monkeypatch) -> None:
    monkeypatch.delenv("MISSING_FROM_HOST_VAR", raising=False)
    with pytest.raises(ConfigError):
        parse_env_overrides([raw])
