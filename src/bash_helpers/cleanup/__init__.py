"""System cleanup pipeline."""

from bash_helpers.cleanup.exceptions import StepFailureError
from bash_helpers.cleanup.pipeline import (
    CleanupStep,
    PipelineResult,
    StepOutcome,
    StepState,
    run_pipeline,
)
from bash_helpers.cleanup.system_cleaner import SystemCleaner, select_old_kernels

__all__ = [
    "CleanupStep",
    "PipelineResult",
    "StepFailureError",
    "StepOutcome",
    "StepState",
    "SystemCleaner",
    "run_pipeline",
    "select_old_kernels",
]
