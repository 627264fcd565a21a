"""Unit tests for the step runner."""

from __future__ import annotations

import logging

import pytest

from ros2_provisioner.errors import PackageManagerError
from ros2_provisioner.pipeline import PipelineResult, StepContext, StepFailed, run_pipeline


class _Step:
    def __init__(self, step_id, *, satisfied=False, always_run=False, fail=None, becomes_satisfied=True, log=None):
        self.step_id = step_id
        self.description = step_id
        self.always_run = always_run
        self._satisfied = satisfied
        self._fail = fail
        self._becomes_satisfied = becomes_satisfied
        self.log = log if log is not None else []

    def is_satisfied(self, ctx):
        return self._satisfied

    def run(self, ctx):
        self.log.append(self.step_id)
        if self._fail is not None:
            raise self._fail
        self._satisfied = self._becomes_satisfied


@pytest.fixture
def ctx(host, config) -> StepContext:
    return StepContext(config=config, host=host)


def test_runs_unsatisfied_and_skips_satisfied_steps(ctx) -> None:
    log: list[str] = []
    steps = [
        _Step("a", log=log),
        _Step("b", satisfied=True, log=log),
        _Step("c", log=log),
    ]

    result = run_pipeline(ctx=ctx, steps=steps)

    assert log == ["a", "c"]
    assert result.ran_steps == ["a", "c"]
    assert result.skipped_steps == ["b"]
    assert result.failed_step is None


def test_always_run_ignores_precondition(ctx) -> None:
    log: list[str] = []
    result = run_pipeline(ctx=ctx, steps=[_Step("a", satisfied=True, always_run=True, log=log)])

    assert log == ["a"]
    assert result.ran_steps == ["a"]


def test_stops_at_first_failure(ctx) -> None:
    log: list[str] = []
    progress = PipelineResult()
    steps = [
        _Step("a", log=log),
        _Step("b", fail=PackageManagerError("E: broken"), log=log),
        _Step("c", log=log),
    ]

    with pytest.raises(StepFailed) as exc:
        run_pipeline(ctx=ctx, steps=steps, result=progress)

    assert exc.value.step_id == "b"
    assert isinstance(exc.value.error, PackageManagerError)
    assert log == ["a", "b"]
    assert progress.ran_steps == ["a"]
    assert progress.failed_step == "b"


def test_unexpected_exceptions_are_not_wrapped(ctx) -> None:
    with pytest.raises(ValueError):
        run_pipeline(ctx=ctx, steps=[_Step("a", fail=ValueError("bug"))])


def test_warns_when_check_still_fails_after_running(ctx, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING)

    result = run_pipeline(ctx=ctx, steps=[_Step("a", becomes_satisfied=False)])

    assert result.ran_steps == ["a"]
    assert "still does not hold" in caplog.text


class _BrokenCheck(_Step):
    def is_satisfied(self, ctx):
        raise PackageManagerError("dpkg database is locked")


def test_failing_check_is_a_step_failure(ctx) -> None:
    log: list[str] = []
    progress = PipelineResult()

    with pytest.raises(StepFailed) as exc:
        run_pipeline(
            ctx=ctx,
            steps=[_Step("a", log=log), _BrokenCheck("b", log=log), _Step("c", log=log)],
            result=progress,
        )

    assert exc.value.step_id == "b"
    assert log == ["a"]
    assert progress.failed_step == "b"
