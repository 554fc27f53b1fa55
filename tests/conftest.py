from __future__ import annotations

from collections.abc import Iterator
import os
from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ALLOWED_ARTIFACTS_ROOT = PROJECT_ROOT / "artifacts" / "test"
PYCACHE_PREFIX = ALLOWED_ARTIFACTS_ROOT / "pycache"
PYCACHE_PREFIX.mkdir(parents=True, exist_ok=True)
sys.dont_write_bytecode = True
sys.pycache_prefix = str(PYCACHE_PREFIX)
os.environ.setdefault("PYTHONDONTWRITEBYTECODE", "1")
os.environ.setdefault("PYTHONPYCACHEPREFIX", str(PYCACHE_PREFIX))
os.environ.setdefault("COVERAGE_FILE", str(ALLOWED_ARTIFACTS_ROOT / ".coverage"))

from eazy_ci.utilities.logger_manager import (  # noqa: E402
    CustomLogger,
    LoggerConfig,
    LoggerManager,
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("EAZY_SSH_KEY", "EAZY_LOG_LEVEL", "EAZY_DOCKER_BIN", "EAZY_GIT_BIN"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def test_artifacts_dir(request) -> Path:
    safe_name = (
        request.node.nodeid.replace("::", "__").replace("/", "_").replace("\\", "_")
    )
    target = ALLOWED_ARTIFACTS_ROOT / safe_name
    target.mkdir(parents=True, exist_ok=True)
    return target


@pytest.fixture
def tmp_path(test_artifacts_dir: Path) -> Path:
    return test_artifacts_dir


@pytest.fixture
def logger_manager(tmp_path: Path) -> Iterator[LoggerManager]:
    manager = LoggerManager(LoggerConfig(log_level="DEBUG", log_dir=tmp_path / "logs"))
    yield manager
    manager.close()


@pytest.fixture
def logger(logger_manager: LoggerManager) -> CustomLogger:
    return logger_manager.get_logger()
