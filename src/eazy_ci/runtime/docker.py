"""Container runtime backed by the Docker CLI."""

from __future__ import annotations

import asyncio
from pathlib import Path
import shutil
import tempfile

from eazy_ci.constants import INTEGRATION_DOCKERFILE
from eazy_ci.errors import ContainerRuntimeError
from eazy_ci.schema.spec import PipelineSpec
from eazy_ci.utilities.logger_manager import CustomLogger

from .contracts import ContainerConfig
from .process import CommandResult, run_command

UNIT_LABEL = "eazy-ci.unit"


class DockerRuntime:
    """Builds images and starts containers through ``docker`` subprocesses."""

    def __init__(
        self,
        logger: CustomLogger,
        docker_bin: str = "docker",
        build_context: str | Path = ".",
    ) -> None:
        self.logger = logger
        self.docker_bin = docker_bin
        self.build_context = Path(build_context)

    async def build_and_run(self, spec: PipelineSpec, config: ContainerConfig) -> str:
        tag = spec.root_image if config.root_image else spec.integration_image
        await self.build_image(config.dockerfile or INTEGRATION_DOCKERFILE, tag)
        return await self._run(spec, tag, config)

    async def start_by_reference(
        self, spec: PipelineSpec, image_ref: str, config: ContainerConfig
    ) -> str:
        return await self._run(spec, image_ref or spec.root_image, config)

    async def kill(self, container_id: str) -> None:
        result = await self._docker(["kill", container_id])
        if not result.ok:
            raise ContainerRuntimeError(
                f"docker kill {container_id} failed: {result.stderr.strip()}",
                container_id=container_id,
                exit_status=result.returncode,
            )

    async def build_image(self, dockerfile: str, tag: str) -> None:
        dockerfile_path = self.build_context / dockerfile
        if not dockerfile_path.is_file():
            raise ContainerRuntimeError(f"Dockerfile not found: {dockerfile_path}")
        self.logger.info(
            f"Building image {tag}",
            extra={"context": {"dockerfile": dockerfile, "tag": tag}},
        )
        result = await self._docker(
            ["build", "-f", str(dockerfile_path), "-t", tag, str(self.build_context)],
            capture=False,
        )
        if not result.ok:
            raise ContainerRuntimeError(
                f"docker build of {tag} exited with status {result.returncode}",
                exit_status=result.returncode,
            )

    def run_arguments(
        self,
        spec: PipelineSpec,
        image: str,
        config: ContainerConfig,
        cidfile: Path | None = None,
    ) -> list[str]:
        """Translate a container config into ``docker run`` arguments."""
        args = ["run", "--label", f"{UNIT_LABEL}={spec.name}"]
        if config.wait:
            args.append("--rm")
            if cidfile is not None:
                args.extend(["--cidfile", str(cidfile)])
            if config.attach:
                args.extend(["-i", "-t"])
        else:
            args.append("-d")
        if config.host_network:
            args.extend(["--network", "host"])
        else:
            for link in config.links:
                args.extend(["--link", link])
            if config.expose_ports:
                args.append("-P")
                for port in spec.deployment.port:
                    args.extend(["-p", port])
        for entry in config.env:
            args.extend(["-e", entry])
        for volume in config.volumes:
            args.extend(["-v", volume])
        if config.workdir:
            args.extend(["-w", config.workdir])
        if config.user:
            args.extend(["-u", config.user])
        args.append(image)
        args.extend(config.command)
        return args

    async def _run(self, spec: PipelineSpec, image: str, config: ContainerConfig) -> str:
        if not config.wait:
            result = await self._docker(self.run_arguments(spec, image, config))
            lines = result.stdout.strip().splitlines() if result.ok else []
            container_id = lines[-1] if lines else ""
            if not result.ok or not container_id:
                raise ContainerRuntimeError(
                    f"Failed to start {image}: {result.stderr.strip()}",
                    exit_status=result.returncode,
                )
            self.logger.info(
                f"Started {image} detached",
                extra={"context": {"unit": spec.name, "container_id": container_id}},
            )
            return container_id

        workdir = Path(tempfile.mkdtemp(prefix="eazy-ci-"))
        cidfile = workdir / "container.id"
        try:
            self.logger.info(
                f"Running {image}",
                extra={
                    "context": {
                        "unit": spec.name,
                        "command": " ".join(config.command),
                        "attach": config.attach,
                    }
                },
            )
            try:
                result = await self._docker(
                    self.run_arguments(spec, image, config, cidfile), capture=False
                )
            except asyncio.CancelledError:
                await self._kill_quietly(_read_cidfile(cidfile))
                raise
            container_id = _read_cidfile(cidfile)
            if not result.ok:
                raise ContainerRuntimeError(
                    f"Container {image} for {spec.name} exited with status "
                    f"{result.returncode}",
                    container_id=container_id,
                    exit_status=result.returncode,
                )
            if not container_id:
                raise ContainerRuntimeError(
                    f"docker did not report a container id for {image}"
                )
            return container_id
        finally:
            shutil.rmtree(workdir, ignore_errors=True)

    async def _kill_quietly(self, container_id: str | None) -> None:
        if not container_id:
            return
        try:
            await self.kill(container_id)
        except ContainerRuntimeError as exc:
            self.logger.debug(f"Kill after cancellation failed: {exc}")

    async def _docker(self, args: list[str], capture: bool = True) -> CommandResult:
        argv = [self.docker_bin, *args]
        self.logger.debug("docker " + " ".join(args))
        try:
            return await run_command(argv, capture=capture)
        except FileNotFoundError as exc:
            raise ContainerRuntimeError(
                f"Docker CLI not found: {self.docker_bin}"
            ) from exc
        except OSError as exc:
            raise ContainerRuntimeError(
                f"Could not run {self.docker_bin} {args[0]}: {exc}"
            ) from exc


def _read_cidfile(cidfile: Path) -> str | None:
    try:
        value = cidfile.read_text(encoding="utf-8").strip()
    except OSError:
        return None
    return value or None
