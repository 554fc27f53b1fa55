"""Error taxonomy shared by every pipeline stage."""

from __future__ import annotations

from eazy_ci.pipeline.failure import FailureClass


class EazyError(Exception):
    """Base class for every error the pipeline maps to an exit code."""

    failure_class: FailureClass = FailureClass.UNEXPECTED


class ConfigError(EazyError):
    """The pipeline spec is missing or invalid."""

    failure_class = FailureClass.CONFIG_ERROR


class AuthError(EazyError):
    """A source fetch was rejected because of credentials or transport."""

    failure_class = FailureClass.AUTH_ERROR

    def __init__(self, message: str, reference: str | None = None) -> None:
        super().__init__(message)
        self.reference = reference


class DependencyResolutionError(EazyError):
    """A dependency could not be fetched, even after the credential retry."""

    failure_class = FailureClass.DEPENDENCY_RESOLUTION

    def __init__(self, message: str, reference: str | None = None) -> None:
        super().__init__(message)
        self.reference = reference


class ContainerRuntimeError(EazyError):
    """An image build or container run failed."""

    failure_class = FailureClass.CONTAINER_RUNTIME

    def __init__(
        self,
        message: str,
        container_id: str | None = None,
        exit_status: int | None = None,
    ) -> None:
        super().__init__(message)
        self.container_id = container_id
        self.exit_status = exit_status


class PipelineInterrupted(EazyError):
    """The run received an external interrupt signal."""

    failure_class = FailureClass.INTERRUPTED

    def __init__(self, signal_name: str = "SIGINT") -> None:
        super().__init__(f"Pipeline interrupted by {signal_name}")
        self.signal_name = signal_name


__all__ = [
    "EazyError",
    "ConfigError",
    "AuthError",
    "DependencyResolutionError",
    "ContainerRuntimeError",
    "PipelineInterrupted",
]
