"""Exactly-once teardown of every container a session started."""

from __future__ import annotations

import asyncio

from eazy_ci.enums import PipelineState
from eazy_ci.errors import EazyError
from eazy_ci.pipeline.failure import FailureReport
from eazy_ci.runtime.contracts import ContainerRuntime, TerminalStateController
from eazy_ci.utilities.logger_manager import CustomLogger

from .registry import LiveResourceRegistry


class CleanupController:
    """Runs the teardown body once, whoever asks first.

    The normal exit path and the interrupt path both call ``cleanup``. The
    first caller kills every registered container, restores the terminal and
    logs the cause; every later or concurrent caller waits for that to
    finish and gets the first caller's exit code back.
    """

    def __init__(
        self,
        runtime: ContainerRuntime,
        registry: LiveResourceRegistry,
        terminal: TerminalStateController,
        logger: CustomLogger,
    ) -> None:
        self.runtime = runtime
        self.registry = registry
        self.terminal = terminal
        self.logger = logger
        self.exit_code: int | None = None
        self.report: FailureReport | None = None
        self.teardown_runs = 0
        self._started = False
        self._lock = asyncio.Lock()

    @property
    def has_run(self) -> bool:
        return self._started

    async def cleanup(
        self,
        exit_code: int,
        cause: BaseException | None = None,
        state: PipelineState | None = None,
    ) -> int:
        async with self._lock:
            if self._started:
                self.logger.debug(
                    "Cleanup already performed",
                    extra={"context": {"requested_exit_code": exit_code}},
                )
                return self.exit_code if self.exit_code is not None else exit_code
            self._started = True
            self.exit_code = exit_code
            self.teardown_runs += 1
            self.logger.info("Do clean up!")
            await self._kill_registered()
            self._restore_terminal()
            if cause is not None:
                self.report = FailureReport.from_error(cause, state)
                self.logger.error(
                    f"Pipeline failed: {self.report.message}",
                    extra={"context": self.report.model_dump(mode="json")},
                )
            self.logger.info(
                "Cleanup complete",
                extra={"context": {"exit_code": exit_code}},
            )
            return exit_code

    async def _kill_registered(self) -> None:
        while container_ids := self.registry.drain():
            for container_id in container_ids:
                try:
                    await self.runtime.kill(container_id)
                except EazyError as exc:
                    self.logger.info(
                        f"container already shut down: {container_id}",
                        extra={"context": {"detail": str(exc)}},
                    )
                else:
                    self.logger.info(
                        f"Killed container {container_id}",
                        extra={"context": {"container_id": container_id}},
                    )

    def _restore_terminal(self) -> None:
        try:
            self.terminal.restore_state()
        except Exception as e:
            self.logger.warning(
                "Failed to restore terminal state",
                extra={"context": {"error": str(e)}},
            )
