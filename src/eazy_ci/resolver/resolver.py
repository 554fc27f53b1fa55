"""Walks a root spec into ordered dependency and peer-dependency units."""

from __future__ import annotations

from collections.abc import Iterator

from eazy_ci.enums import UnitRole
from eazy_ci.errors import AuthError, DependencyResolutionError, EazyError
from eazy_ci.runtime.contracts import CredentialProvisioner, SourceFetcher
from eazy_ci.schema.spec import PipelineSpec
from eazy_ci.utilities.logger_manager import CustomLogger

from .graph import DependencyUnit, ResolvedGraph


class DependencyResolver:
    """Fetches every referenced spec once, in discovery order.

    Dependencies are walked depth-first and emitted after their own
    dependencies. Peers are collected from every resolved dependency and
    then from the root, deduplicated across the whole graph by identity.
    The only recovery is a single credential provisioning and re-fetch when
    a fetch fails with ``AuthError``.
    """

    def __init__(
        self,
        fetcher: SourceFetcher,
        provisioner: CredentialProvisioner,
        logger: CustomLogger,
        key_path: str | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.provisioner = provisioner
        self.logger = logger
        self.key_path = key_path

    async def resolve(self, root: PipelineSpec) -> ResolvedGraph:
        dependencies = await self.resolve_dependencies(root)
        peers: list[DependencyUnit] = []
        seen: set[str] = {root.identity}
        for unit in dependencies:
            await self.resolve_peer_dependencies(unit.spec, peers, seen, unit.depth)
        await self.resolve_peer_dependencies(root, peers, seen, 0)
        graph = ResolvedGraph(peers=peers, dependencies=dependencies)
        self.logger.info(
            "Dependency graph resolved",
            extra={
                "context": {
                    "peers": [unit.name for unit in peers],
                    "dependencies": [unit.name for unit in dependencies],
                }
            },
        )
        return graph

    async def resolve_dependencies(self, root: PipelineSpec) -> list[DependencyUnit]:
        """Return the root's transitive dependencies, dependencies first."""
        ordered: list[DependencyUnit] = []
        visited: set[str] = {root.identity}
        stack: list[tuple[PipelineSpec, int, Iterator[str]]] = [
            (root, 0, iter(root.dependencies))
        ]
        while stack:
            spec, depth, pending = stack[-1]
            reference = next(pending, None)
            if reference is None:
                stack.pop()
                if depth > 0:
                    ordered.append(DependencyUnit(spec=spec, depth=depth))
                continue
            reference = reference.strip()
            if reference in visited:
                self.logger.debug(
                    f"Skipping already visited dependency {reference}",
                    extra={"context": {"declared_by": spec.identity}},
                )
                continue
            child = await self.fetch(reference)
            already_resolved = child.identity in visited or child.name == root.name
            visited.update((reference, child.identity))
            if already_resolved:
                self.logger.debug(
                    f"Skipping {reference}: already resolved as {child.identity}",
                    extra={"context": {"declared_by": spec.identity}},
                )
                continue
            stack.append((child, depth + 1, iter(child.dependencies)))
        return ordered

    async def resolve_peer_dependencies(
        self,
        spec: PipelineSpec,
        accumulator: list[DependencyUnit],
        seen: set[str],
        depth: int = 0,
    ) -> list[DependencyUnit]:
        """Append ``spec``'s peers that are not yet in ``seen``."""
        for reference in spec.peer_dependencies:
            reference = reference.strip()
            if reference in seen:
                continue
            peer = await self.fetch(reference)
            duplicate = peer.identity in seen
            seen.update((reference, peer.identity))
            if duplicate:
                continue
            accumulator.append(
                DependencyUnit(spec=peer, depth=depth + 1, role=UnitRole.PEER)
            )
        return accumulator

    async def fetch(self, reference: str) -> PipelineSpec:
        try:
            spec = await self.fetcher.fetch_spec(reference, self.key_path)
        except AuthError as first:
            self.logger.warning(
                f"Authentication failed for {reference}; provisioning credentials",
                extra={"context": {"error": str(first)}},
            )
            spec = await self._retry_after_provisioning(reference)
        except DependencyResolutionError:
            raise
        except EazyError as exc:
            raise DependencyResolutionError(
                f"Failed to fetch {reference}: {exc}", reference=reference
            ) from exc
        return spec if spec.source else spec.with_source(reference)

    async def _retry_after_provisioning(self, reference: str) -> PipelineSpec:
        try:
            await self.provisioner.set_up()
        except EazyError as exc:
            raise DependencyResolutionError(
                f"Credential provisioning failed while fetching {reference}: {exc}",
                reference=reference,
            ) from exc
        try:
            return await self.fetcher.fetch_spec(reference, self.key_path)
        except EazyError as exc:
            raise DependencyResolutionError(
                f"Failed to fetch {reference} after credential retry: {exc}",
                reference=reference,
            ) from exc
