"""Tests for the fail-fast cleanup pipeline."""

from collections.abc import Callable

import pytest

from bash_helpers.cleanup import CleanupStep, StepFailureError, StepState, run_pipeline
from bash_helpers.utils import CommandResult


def _step(name: str, calls: list[str], exit_code: int = 0) -> CleanupStep:
    def action() -> CommandResult:
        calls.append(name)
        return CommandResult(
            success=exit_code == 0,
            stdout="",
            stderr="" if exit_code == 0 else f"{name} broke",
            exit_code=exit_code,
        )

    return CleanupStep(name, action, f"Run {name}")


class TestRunPipeline:
    """Tests for run_pipeline."""

    def test_all_steps_succeed(self) -> None:
        """Test every step runs in order when all succeed."""
        calls: list[str] = []
        steps = [_step(name, calls) for name in ["one", "two", "three"]]

        result = run_pipeline(steps)

        assert calls == ["one", "two", "three"]
        assert result.success is True
        assert result.failed_step is None
        assert [o.state for o in result.outcomes] == [StepState.SUCCEEDED] * 3

    @pytest.mark.parametrize("failing_index", [0, 1, 2, 3])
    def test_halts_at_first_failure(self, failing_index: int) -> None:
        """Test steps before K ran, step K failed and steps after K never ran."""
        calls: list[str] = []
        names = ["one", "two", "three", "four"]
        steps = [_step(name, calls, exit_code=1 if i == failing_index else 0) for i, name in enumerate(names)]

        result = run_pipeline(steps)

        assert calls == names[: failing_index + 1]
        states = [o.state for o in result.outcomes]
        assert states[:failing_index] == [StepState.SUCCEEDED] * failing_index
        assert states[failing_index] == StepState.FAILED
        assert states[failing_index + 1 :] == [StepState.PENDING] * (len(names) - failing_index - 1)
        assert result.success is False

    def test_failed_step_details(self) -> None:
        """Test the failing step records its exit code and error output."""
        calls: list[str] = []
        result = run_pipeline([_step("one", calls), _step("two", calls, exit_code=100)])

        failed = result.failed_step
        assert failed is not None
        assert failed.name == "two"
        assert failed.exit_code == 100
        assert failed.error_message == "two broke"

    def test_only_one_failure_possible(self) -> None:
        """Test later failing steps are never reached."""
        calls: list[str] = []
        result = run_pipeline([_step("one", calls, exit_code=1), _step("two", calls, exit_code=1)])

        assert [o.state for o in result.outcomes] == [StepState.FAILED, StepState.PENDING]

    def test_empty_pipeline(self) -> None:
        """Test an empty pipeline succeeds."""
        result = run_pipeline([])

        assert result.outcomes == []
        assert result.success is True

    def test_raise_for_failure(self) -> None:
        """Test raise_for_failure names the failing step."""
        calls: list[str] = []
        result = run_pipeline([_step("clean", calls, exit_code=2)])

        with pytest.raises(StepFailureError, match="'clean' failed with exit status 2") as exc_info:
            result.raise_for_failure()

        assert exc_info.value.step_name == "clean"
        assert exc_info.value.exit_code == 2

    def test_raise_for_failure_on_success(self) -> None:
        """Test raise_for_failure is silent after a successful run."""
        calls: list[str] = []
        run_pipeline([_step("clean", calls)]).raise_for_failure()

    def test_step_description_defaults_to_empty(self) -> None:
        """Test CleanupStep description is optional."""
        action: Callable[[], CommandResult] = lambda: CommandResult(True, "", "", 0)  # noqa: E731
        step = CleanupStep("noop", action)

        assert step.description == ""
