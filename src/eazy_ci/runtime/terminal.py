"""Snapshots and restores the controlling terminal around interactive runs."""

from __future__ import annotations

import sys
import termios
from typing import Any, TextIO

from eazy_ci.utilities.logger_manager import CustomLogger


class TerminalController:
    """Best-effort restore of terminal attributes after ``docker run -it``."""

    def __init__(self, logger: CustomLogger, stream: TextIO | None = None) -> None:
        self.logger = logger
        self.stream = stream if stream is not None else sys.stdin
        self._saved: list[Any] | None = None

    def snapshot(self) -> None:
        try:
            if not self.stream.isatty():
                return
            self._saved = termios.tcgetattr(self.stream.fileno())
        except (termios.error, OSError, ValueError) as exc:
            self.logger.debug(f"Terminal state not captured: {exc}")

    def restore_state(self) -> None:
        if self._saved is None:
            return
        try:
            termios.tcsetattr(self.stream.fileno(), termios.TCSADRAIN, self._saved)
        except (termios.error, OSError, ValueError) as exc:
            self.logger.warning(f"Failed to restore terminal state: {exc}")
