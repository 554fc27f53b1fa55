"""Logger manager with colored console output and optional structured files.

Every pipeline component logs through a ``CustomLogger`` obtained from one
``LoggerManager`` per session. Records accept ``extra={"context": {...}}``;
the structured formatter serializes that payload, the console formatter
appends it compactly.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
import datetime
import json
import logging
from logging import Handler, Logger, LogRecord, getLevelName
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys
import threading
from typing import Any, ClassVar

import colorlog

CONSOLE_FORMAT = "%(log_color)s%(asctime)s [%(levelname)s] %(name)s: %(message)s%(context_suffix)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s%(context_suffix)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class LoggerConfig:
    """Configuration for LoggerManager."""

    log_level: str = "INFO"
    log_dir: Path | None = None
    log_file_name: str = "eazy-ci.log"
    max_file_size_mb: int = 10
    backup_count: int = 3
    structured_logging: bool = False
    log_colors: dict[str, str] = field(default_factory=dict)

    DEFAULT_LOG_COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "cyan",
        "INFO": "green",
        "WARNING": "yellow",
        "ERROR": "red",
        "CRITICAL": "red,bg_white",
    }

    def __post_init__(self) -> None:
        self.log_level = self.log_level.upper()
        if self.log_dir is not None:
            self.log_dir = Path(self.log_dir).resolve()
            self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_colors = self.log_colors or dict(self.DEFAULT_LOG_COLORS)


class _ContextFilter(logging.Filter):
    """Attach the active context and a printable suffix to every record."""

    def __init__(self, manager: LoggerManager) -> None:
        super().__init__()
        self._manager = manager

    def filter(self, record: LogRecord) -> bool:
        context = dict(self._manager.active_context())
        context.update(getattr(record, "context", None) or {})
        record.context = context
        record.context_suffix = (
            " " + " ".join(f"{key}={value}" for key, value in context.items())
            if context
            else ""
        )
        return True


class StructuredFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def format(self, record: LogRecord) -> str:
        log_data = {
            "timestamp": datetime.datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
            "context": getattr(record, "context", {}),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, ensure_ascii=False, default=str)


class LoggerSettings:
    """Builds the console and file handlers for a configuration."""

    def __init__(self, config: LoggerConfig) -> None:
        self.config = config

    def console_handler(self) -> Handler:
        handler = colorlog.StreamHandler(sys.stderr)
        if self.config.structured_logging:
            handler.setFormatter(StructuredFormatter())
        else:
            handler.setFormatter(
                colorlog.ColoredFormatter(
                    CONSOLE_FORMAT,
                    datefmt=DATE_FORMAT,
                    log_colors=self.config.log_colors,
                )
            )
        return handler

    def file_handler(self) -> RotatingFileHandler | None:
        if self.config.log_dir is None:
            return None
        file_path = self.config.log_dir / self.config.log_file_name
        try:
            handler = RotatingFileHandler(
                file_path,
                maxBytes=self.config.max_file_size_mb * 1024 * 1024,
                backupCount=self.config.backup_count,
                encoding="utf-8",
            )
        except OSError as e:
            print(f"Failed to create RotatingFileHandler: {e}", file=sys.stderr)
            return None
        handler.setFormatter(
            StructuredFormatter()
            if self.config.structured_logging
            else logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT)
        )
        return handler


class CustomLogger:
    """Thin wrapper exposing the stdlib API plus a ``context`` helper."""

    def __init__(self, logger: Logger, manager: LoggerManager) -> None:
        self.logger = logger
        self.manager = manager

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.error(msg, *args, **kwargs)

    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.critical(msg, *args, **kwargs)

    def log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.log(level, msg, *args, **kwargs)

    @contextmanager
    def context(self, **context_kwargs: Any) -> Iterator[CustomLogger]:
        """Delegate to LoggerManager's context method."""
        with self.manager.context(**context_kwargs):
            yield self


class LoggerManager:
    """Owns one configured logger and its context stack."""

    def __init__(
        self,
        name: str | LoggerConfig = "eazy_ci",
        config: LoggerConfig | None = None,
    ) -> None:
        if isinstance(name, LoggerConfig):
            config = name
            name = "eazy_ci"
        self.name = name
        self.config = config or LoggerConfig()
        self.settings = LoggerSettings(self.config)
        self._context_stack: list[dict[str, Any]] = []
        self._context_lock = threading.Lock()
        self._logger = self._configure_logger()

    def get_logger(self) -> CustomLogger:
        """Return the configured custom logger."""
        return CustomLogger(self._logger, self)

    def _configure_logger(self) -> Logger:
        logger = logging.getLogger(self.name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(getLevelName(self.config.log_level))
        context_filter = _ContextFilter(self)
        handlers = [self.settings.console_handler(), self.settings.file_handler()]
        for handler in handlers:
            if handler is None:
                continue
            handler.addFilter(context_filter)
            logger.addHandler(handler)
        logger.propagate = False
        return logger

    def active_context(self) -> dict[str, Any]:
        with self._context_lock:
            merged: dict[str, Any] = {}
            for frame in self._context_stack:
                merged.update(frame)
            return merged

    @contextmanager
    def context(self, **context_kwargs: Any) -> Iterator[Logger]:
        """Add contextual fields to every record logged inside the block."""
        with self._context_lock:
            self._context_stack.append(context_kwargs)
        try:
            yield self._logger
        finally:
            with self._context_lock:
                self._context_stack.remove(context_kwargs)

    def flush(self) -> None:
        """Flush all handlers to ensure logs are written."""
        for handler in self._logger.handlers:
            handler.flush()

    def close(self) -> None:
        self.flush()
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()
