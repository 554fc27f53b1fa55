"""Per-run switches chosen on the command line."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from eazy_ci.enums import TerminalAction


@dataclass(frozen=True)
class RunOptions:
    dev: bool = False
    integration: bool = False
    host_network: bool = False
    env_overrides: tuple[str, ...] = ()
    key_path: str | None = None
    working_dir: Path = field(default_factory=Path.cwd)

    @property
    def terminal_action(self) -> TerminalAction:
        return TerminalAction.for_modes(dev=self.dev, integration=self.integration)
