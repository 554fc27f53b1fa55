"""Models to describe pipeline failures in structured form."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import ConfigDict, Field

from eazy_ci.constants import EXIT_FAILURE
from eazy_ci.enums import PipelineState
from eazy_ci.schema.base import TypedBaseModel


class FailureClass(str, Enum):
    CONFIG_ERROR = "config_error"
    AUTH_ERROR = "auth_error"
    DEPENDENCY_RESOLUTION = "dependency_resolution"
    CONTAINER_RUNTIME = "container_runtime"
    INTERRUPTED = "interrupted"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class FailureProfile:
    retryable: bool
    user_visible: bool
    exit_code: int
    description: str


FAILURE_PROFILES: dict[FailureClass, FailureProfile] = {
    FailureClass.CONFIG_ERROR: FailureProfile(
        retryable=False,
        user_visible=True,
        exit_code=EXIT_FAILURE,
        description="eazy.yml is missing or does not validate.",
    ),
    FailureClass.AUTH_ERROR: FailureProfile(
        retryable=True,
        user_visible=True,
        exit_code=EXIT_FAILURE,
        description="Source fetch was rejected for credentials; retried once.",
    ),
    FailureClass.DEPENDENCY_RESOLUTION: FailureProfile(
        retryable=False,
        user_visible=True,
        exit_code=EXIT_FAILURE,
        description="A dependency spec could not be fetched or parsed.",
    ),
    FailureClass.CONTAINER_RUNTIME: FailureProfile(
        retryable=False,
        user_visible=True,
        exit_code=EXIT_FAILURE,
        description="An image build or container run failed.",
    ),
    FailureClass.INTERRUPTED: FailureProfile(
        retryable=False,
        user_visible=True,
        exit_code=EXIT_FAILURE,
        description="The run received an external interrupt signal.",
    ),
    FailureClass.UNEXPECTED: FailureProfile(
        retryable=False,
        user_visible=True,
        exit_code=EXIT_FAILURE,
        description="An exception outside the eazy-ci taxonomy escaped a stage.",
    ),
}


def failure_profile_for(failure_class: FailureClass) -> FailureProfile:
    profile = FAILURE_PROFILES.get(failure_class)
    if profile is None:
        raise RuntimeError(f"Missing failure profile for {failure_class.value}")
    return profile


class FailureReport(TypedBaseModel):
    """Structured payload describing why a run ended in failure."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    failure_class: FailureClass = Field(
        ..., description="Machine-actionable failure classification"
    )
    message: str = Field(..., description="Human-readable failure message")
    state: PipelineState | None = Field(
        None, description="Pipeline state active when the failure surfaced"
    )
    exit_code: int = Field(EXIT_FAILURE, description="Process exit code")

    @classmethod
    def from_error(
        cls, error: BaseException, state: PipelineState | None = None
    ) -> FailureReport:
        failure_class = getattr(error, "failure_class", FailureClass.UNEXPECTED)
        profile = failure_profile_for(failure_class)
        return cls(
            failure_class=failure_class,
            message=str(error) or type(error).__name__,
            state=state,
            exit_code=profile.exit_code,
        )


if set(FAILURE_PROFILES.keys()) != set(FailureClass):
    missing = set(FailureClass) - set(FAILURE_PROFILES.keys())
    raise RuntimeError(
        "Failure profiles must cover all failure classes: "
        f"missing={sorted(cls.value for cls in missing)}"
    )
