from __future__ import annotations

import json
from pathlib import Path

from eazy_ci.utilities.logger_manager import LoggerConfig, LoggerManager


def test_context_is_written_to_structured_file(tmp_path: Path) -> None:
    log_dir = tmp_path / "structured"
    manager = LoggerManager(
        "eazy_ci.test.structured",
        LoggerConfig(log_dir=log_dir, structured_logging=True, log_file_name="run.log"),
    )
    logger = manager.get_logger()
    with logger.context(unit="redis"):
        logger.info("Killed container c1", extra={"context": {"container_id": "c1"}})
    logger.info("outside")
    manager.close()

    lines = (log_dir / "run.log").read_text(encoding="utf-8").splitlines()
    first, second = (json.loads(line) for line in lines[-2:])
    assert first["message"] == "Killed container c1"
    assert first["context"] == {"unit": "redis", "container_id": "c1"}
    assert second["context"] == {}


def test_plain_file_format_appends_context(tmp_path: Path) -> None:
    log_dir = tmp_path / "plain"
    manager = LoggerManager(
        "eazy_ci.test.plain", LoggerConfig(log_dir=log_dir, log_level="debug")
    )
    logger = manager.get_logger()
    logger.debug("Entering root_deploy", extra={"context": {"stage": "deploy"}})
    manager.close()

    text = (log_dir / "eazy-ci.log").read_text(encoding="utf-8")
    assert "[DEBUG]" in text
    assert "Entering root_deploy stage=deploy" in text


def test_config_normalizes_level_and_colors() -> None:
    config = LoggerConfig(log_level="warning")
    assert config.log_level == "WARNING"
    assert config.log_colors["ERROR"] == "red"
