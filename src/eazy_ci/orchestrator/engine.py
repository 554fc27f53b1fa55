"""Drives one pipeline run through its fixed sequence of stages."""

from __future__ import annotations

from collections.abc import Awaitable
from dataclasses import replace

from eazy_ci.constants import (
    BUILD_MOUNT_PATH,
    DOCKERFILE,
    ELEVATED_USER,
    INTEGRATION_DOCKERFILE,
    SHELL_COMMAND,
)
from eazy_ci.enums import PipelineState, TerminalAction
from eazy_ci.errors import ContainerRuntimeError
from eazy_ci.pipeline.stages import STAGE_DETAILS
from eazy_ci.resolver.graph import DependencyUnit, ResolvedGraph
from eazy_ci.resolver.resolver import DependencyResolver
from eazy_ci.runtime.contracts import ContainerConfig, ContainerRuntime
from eazy_ci.schema.spec import PipelineSpec
from eazy_ci.utilities.logger_manager import CustomLogger

from .options import RunOptions
from .registry import LiveResourceRegistry
from .state_machine import PipelineStateMachine


class PipelineOrchestrator:
    """Starts peers, dependencies and the root project's stages in order.

    Every container id the runtime hands back, including the id carried by
    a failed blocking run, is registered before the next step begins, so
    cleanup can always find it. Detached service containers are also
    published as links for every container started after them.
    """

    def __init__(
        self,
        resolver: DependencyResolver,
        runtime: ContainerRuntime,
        registry: LiveResourceRegistry,
        options: RunOptions,
        logger: CustomLogger,
        state_machine: PipelineStateMachine | None = None,
    ) -> None:
        self.resolver = resolver
        self.runtime = runtime
        self.registry = registry
        self.options = options
        self.logger = logger
        self.state_machine = state_machine or PipelineStateMachine()

    @property
    def state(self) -> PipelineState:
        return self.state_machine.state

    async def run(self, root: PipelineSpec) -> ResolvedGraph:
        try:
            self._enter(PipelineState.RESOLVING_GRAPH)
            graph = await self.resolver.resolve(root)

            self._enter(PipelineState.STARTING_PEERS)
            for unit in graph.peers:
                await self.start_unit(unit)

            self._enter(PipelineState.STARTING_DEPENDENCIES)
            for unit in graph.dependencies:
                await self.start_unit(unit)

            await self.run_root(root)
        except BaseException:
            self.state_machine.fail()
            raise
        self.state_machine.finish()
        self.logger.info("Pipeline finished", extra={"context": {"root": root.name}})
        return graph

    async def start_unit(self, unit: DependencyUnit) -> str:
        """Bootstrap, start and health-check one dependency or peer."""
        spec = unit.spec
        with self.logger.context(unit=spec.name, role=unit.role.value):
            self.logger.info(f"Starting {unit.role.value} {spec.name}")
            if spec.integration.bootstrap:
                await self._start_by_reference(
                    spec,
                    spec.latest_integration_image,
                    ContainerConfig(command=tuple(spec.integration.bootstrap), wait=True),
                )
            container_id = await self._start_by_reference(
                spec,
                "",
                ContainerConfig(
                    env=tuple(spec.deployment.env),
                    expose_ports=True,
                    root_image=True,
                ),
            )
            self._publish(spec, container_id)
            if spec.deployment.health:
                await self._start_by_reference(
                    spec,
                    spec.latest_integration_image,
                    ContainerConfig(command=tuple(spec.deployment.health), wait=True),
                )
            return container_id

    async def run_root(self, root: PipelineSpec) -> None:
        """Run the root project's optional stages, then its terminal action."""
        options = self.options
        env = (*root.deployment.env, *options.env_overrides)

        if root.integration.bootstrap:
            self._enter(PipelineState.ROOT_BOOTSTRAP)
            await self._build_and_run(
                root,
                ContainerConfig(
                    command=tuple(root.integration.bootstrap),
                    env=env,
                    dockerfile=INTEGRATION_DOCKERFILE,
                    wait=True,
                ),
            )

        if root.has_build_image and self._runs(PipelineState.ROOT_BUILD):
            self._enter(PipelineState.ROOT_BUILD)
            await self._start_by_reference(
                root,
                root.build.image or "",
                self.build_container(tuple(root.build.command), env),
            )

        if self._runs(PipelineState.ROOT_DEPLOY):
            self._enter(PipelineState.ROOT_DEPLOY)
            container_id = await self._build_and_run(
                root,
                ContainerConfig(
                    env=env,
                    dockerfile=DOCKERFILE,
                    expose_ports=True,
                    root_image=True,
                ),
            )
            self._publish(root, container_id)

            if root.deployment.health and self._runs(PipelineState.ROOT_HEALTH_CHECK):
                self._enter(PipelineState.ROOT_HEALTH_CHECK)
                await self._build_and_run(
                    root,
                    ContainerConfig(
                        command=tuple(root.deployment.health),
                        env=env,
                        dockerfile=INTEGRATION_DOCKERFILE,
                        wait=True,
                    ),
                )

        self._enter(PipelineState.TERMINAL_ACTION)
        if options.terminal_action is TerminalAction.SHELL:
            await self.open_shell(root, env)
        else:
            await self.run_tests(root, env)

    async def open_shell(self, root: PipelineSpec, env: tuple[str, ...]) -> str:
        self.logger.info(
            "Opening interactive shell",
            extra={"context": {"dev": self.options.dev, "image": root.build.image}},
        )
        if root.has_build_image:
            config = self.build_container(SHELL_COMMAND, env, attach=True)
            return await self._start_by_reference(root, root.build.image or "", config)
        return await self._build_and_run(
            root,
            ContainerConfig(
                command=SHELL_COMMAND,
                env=env,
                dockerfile=INTEGRATION_DOCKERFILE,
                wait=True,
                attach=True,
            ),
        )

    async def run_tests(self, root: PipelineSpec, env: tuple[str, ...]) -> str:
        if not root.integration.run_test:
            self.logger.warning(
                "No runTest commands declared; running the integration image default"
            )
        return await self._build_and_run(
            root,
            ContainerConfig(
                command=tuple(root.integration.run_test),
                env=env,
                dockerfile=INTEGRATION_DOCKERFILE,
                wait=True,
            ),
        )

    def build_container(
        self, command: tuple[str, ...], env: tuple[str, ...], attach: bool = False
    ) -> ContainerConfig:
        """Blocking container with the working directory mounted at /build."""
        return ContainerConfig(
            command=command,
            env=env,
            wait=True,
            attach=attach,
            volumes=(f"{self.options.working_dir}:{BUILD_MOUNT_PATH}:rw",),
            workdir=BUILD_MOUNT_PATH,
            user=ELEVATED_USER,
        )

    async def _start_by_reference(
        self, spec: PipelineSpec, image_ref: str, config: ContainerConfig
    ) -> str:
        config = self._route(config)
        return await self._track(self.runtime.start_by_reference(spec, image_ref, config))

    async def _build_and_run(self, spec: PipelineSpec, config: ContainerConfig) -> str:
        config = self._route(config)
        return await self._track(self.runtime.build_and_run(spec, config))

    def _route(self, config: ContainerConfig) -> ContainerConfig:
        if self.options.host_network:
            return replace(config, host_network=True, links=())
        return config.with_links(self.registry.links())

    async def _track(self, launch: Awaitable[str]) -> str:
        try:
            container_id = await launch
        except ContainerRuntimeError as exc:
            if exc.container_id:
                self.registry.register_container(exc.container_id)
            raise
        self.registry.register_container(container_id)
        return container_id

    def _publish(self, spec: PipelineSpec, container_id: str) -> None:
        link = f"{container_id}:{spec.name}"
        self.registry.add_link(link)
        self.logger.debug(
            f"Published link {link}", extra={"context": {"unit": spec.name}}
        )

    def _runs(self, state: PipelineState) -> bool:
        return not self.options.dev or STAGE_DETAILS[state].runs_in_dev

    def _enter(self, state: PipelineState) -> None:
        self.state_machine.transition_to(state)
        self.logger.info(
            f"Entering {state.value}",
            extra={"context": {"stage": STAGE_DETAILS[state].description}},
        )
