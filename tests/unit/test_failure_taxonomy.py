from __future__ import annotations

from typing import cast

import pytest
from pydantic import ValidationError

from eazy_ci.enums import PipelineState
from eazy_ci.errors import (
    AuthError,
    ConfigError,
    ContainerRuntimeError,
    DependencyResolutionError,
    EazyError,
    PipelineInterrupted,
)
from eazy_ci.pipeline.failure import FailureClass, FailureReport, failure_profile_for


def test_failure_profiles_cover_all_classes() -> None:
    for failure_class in cast(list[FailureClass], list(FailureClass)):
        profile = failure_profile_for(failure_class)
        assert isinstance(profile.retryable, bool)
        assert isinstance(profile.user_visible, bool)
        assert profile.exit_code == 1


def test_only_auth_failures_are_retryable() -> None:
    retryable = [
        failure_class
        for failure_class in FailureClass
        if failure_profile_for(failure_class).retryable
    ]
    assert retryable == [FailureClass.AUTH_ERROR]


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (ConfigError("bad yaml"), FailureClass.CONFIG_ERROR),
        (AuthError("denied"), FailureClass.AUTH_ERROR),
        (DependencyResolutionError("gone"), FailureClass.DEPENDENCY_RESOLUTION),
        (ContainerRuntimeError("exit 1"), FailureClass.CONTAINER_RUNTIME),
        (PipelineInterrupted("SIGTERM"), FailureClass.INTERRUPTED),
        (EazyError("other"), FailureClass.UNEXPECTED),
        (KeyError("x"), FailureClass.UNEXPECTED),
    ],
)
def test_report_classifies_errors(error: BaseException, expected: FailureClass) -> None:
    report = FailureReport.from_error(error, PipelineState.ROOT_DEPLOY)
    assert report.failure_class is expected
    assert report.state is PipelineState.ROOT_DEPLOY
    assert report.exit_code == 1


def test_interrupt_message_names_the_signal() -> None:
    report = FailureReport.from_error(PipelineInterrupted("SIGTERM"))
    assert report.message == "Pipeline interrupted by SIGTERM"


def test_report_is_frozen_and_strict() -> None:
    report = FailureReport.from_error(ConfigError("bad"))
    with pytest.raises(ValidationError):
        report.message = "changed"
    with pytest.raises(ValidationError):
        FailureReport(failure_class=FailureClass.CONFIG_ERROR, message="x", extra=1)
