"""Fail-fast execution of ordered cleanup steps."""

import logging
from collections.abc import Callable
from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel
from rich.console import Console

from bash_helpers.cleanup.exceptions import StepFailureError
from bash_helpers.utils import CommandResult

logger = logging.getLogger(__name__)
console = Console()


class StepState(str, Enum):
    """Lifecycle of a pipeline step."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class CleanupStep(NamedTuple):
    """A named pipeline step."""

    name: str
    action: Callable[[], CommandResult]
    description: str = ""


class StepOutcome(BaseModel):
    """Final state of one step after the pipeline ran."""

    name: str
    state: StepState = StepState.PENDING
    exit_code: int | None = None
    error_message: str | None = None


class PipelineResult(BaseModel):
    """Result of running a pipeline."""

    outcomes: list[StepOutcome]

    @property
    def failed_step(self) -> StepOutcome | None:
        """The step that halted the pipeline, if any."""
        return next((o for o in self.outcomes if o.state == StepState.FAILED), None)

    @property
    def success(self) -> bool:
        """True if every step succeeded."""
        return all(o.state == StepState.SUCCEEDED for o in self.outcomes)

    def raise_for_failure(self) -> None:
        """Raise if a step failed.

        Raises:
            StepFailureError: Naming the failing step and its exit status
        """
        failed = self.failed_step
        if failed is not None:
            raise StepFailureError(failed.name, failed.exit_code, failed.error_message)


def run_pipeline(steps: list[CleanupStep]) -> PipelineResult:
    """Run steps in order, halting at the first failure.

    Steps after a failing one are never started and stay PENDING.

    Args:
        steps: Ordered steps to run

    Returns:
        PipelineResult with one outcome per step
    """
    outcomes = [StepOutcome(name=step.name) for step in steps]

    for index, (step, outcome) in enumerate(zip(steps, outcomes, strict=True), start=1):
        outcome.state = StepState.RUNNING
        console.print(f"[bold cyan][{index}/{len(steps)}] {step.description or step.name}[/bold cyan]")

        result = step.action()
        outcome.exit_code = result.exit_code

        if not result.success:
            outcome.state = StepState.FAILED
            outcome.error_message = result.stderr.strip() or None
            logger.debug("Step %s failed, skipping %d remaining steps", step.name, len(steps) - index)
            break

        outcome.state = StepState.SUCCEEDED

    return PipelineResult(outcomes=outcomes)
