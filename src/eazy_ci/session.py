"""One pipeline run: the explicit value that owns every per-run resource."""

from __future__ import annotations

import asyncio
from pathlib import Path

from eazy_ci.config.loader import load_spec
from eazy_ci.constants import EXIT_FAILURE, EXIT_SUCCESS
from eazy_ci.errors import EazyError, PipelineInterrupted
from eazy_ci.orchestrator.cleanup import CleanupController
from eazy_ci.orchestrator.engine import PipelineOrchestrator
from eazy_ci.orchestrator.interrupt import InterruptMonitor
from eazy_ci.orchestrator.options import RunOptions
from eazy_ci.orchestrator.registry import LiveResourceRegistry
from eazy_ci.resolver.resolver import DependencyResolver
from eazy_ci.runtime.contracts import (
    ContainerRuntime,
    CredentialProvisioner,
    SourceFetcher,
    TerminalStateController,
)
from eazy_ci.utilities.logger_manager import CustomLogger


class PipelineSession:
    """Wires the orchestrator to its registry, cleanup and interrupt handling.

    ``run`` is the only place errors are turned into exit codes. Whether the
    pipeline finishes, fails, or is interrupted, the result goes through the
    cleanup controller, which tears everything down once and decides the
    exit code.
    """

    def __init__(
        self,
        config_path: str | Path,
        options: RunOptions,
        runtime: ContainerRuntime,
        fetcher: SourceFetcher,
        provisioner: CredentialProvisioner,
        terminal: TerminalStateController,
        logger: CustomLogger,
        monitor: InterruptMonitor | None = None,
    ) -> None:
        self.config_path = Path(config_path)
        self.options = options
        self.logger = logger
        self.registry = LiveResourceRegistry()
        self.cleanup = CleanupController(runtime, self.registry, terminal, logger)
        self.resolver = DependencyResolver(
            fetcher, provisioner, logger, key_path=options.key_path
        )
        self.orchestrator = PipelineOrchestrator(
            self.resolver, runtime, self.registry, options, logger
        )
        self.monitor = monitor or InterruptMonitor()
        self.monitor.on_interrupt = self.interrupt
        self._pipeline_task: asyncio.Task[None] | None = None
        self._interrupt_cleanup: asyncio.Task[int] | None = None

    async def run(self) -> int:
        with self.monitor.watch():
            self._pipeline_task = asyncio.create_task(self._execute())
            try:
                await self._pipeline_task
            except asyncio.CancelledError:
                if not self.monitor.is_interrupted():
                    raise
                cause = PipelineInterrupted(self.monitor.signal_name or "SIGINT")
                return await self._finish(EXIT_FAILURE, cause)
            except EazyError as exc:
                return await self._finish(EXIT_FAILURE, exc)
            except Exception as exc:
                self.logger.error("Unexpected error occurred", exc_info=True)
                return await self._finish(EXIT_FAILURE, exc)
            return await self._finish(EXIT_SUCCESS)

    def interrupt(self, signal_name: str) -> None:
        """Schedule interrupt cleanup and cancel the pipeline task."""
        self.logger.warning(
            f"Received {signal_name}; shutting down",
            extra={"context": {"state": self.orchestrator.state.value}},
        )
        self._interrupt_cleanup = asyncio.get_running_loop().create_task(
            self.cleanup.cleanup(
                EXIT_FAILURE,
                PipelineInterrupted(signal_name),
                self.orchestrator.state_machine.last_active_state,
            )
        )
        if self._pipeline_task is not None:
            self._pipeline_task.cancel()

    async def _execute(self) -> None:
        root = load_spec(self.config_path)
        self.logger.info(
            f"Loaded {root.name}:{root.version}",
            extra={
                "context": {
                    "config": root.source,
                    "action": self.options.terminal_action.value,
                }
            },
        )
        await self.orchestrator.run(root)

    async def _finish(self, exit_code: int, cause: BaseException | None = None) -> int:
        machine = self.orchestrator.state_machine
        if cause is not None:
            machine.fail()
        code = await self.cleanup.cleanup(exit_code, cause, machine.last_active_state)
        if self._interrupt_cleanup is not None:
            code = await self._interrupt_cleanup
        return code
