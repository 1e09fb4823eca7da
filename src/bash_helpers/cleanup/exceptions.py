"""System cleanup exceptions."""

from bash_helpers.exceptions import HelperError


class StepFailureError(HelperError):
    """Raised when a cleanup pipeline step fails."""

    def __init__(self, step_name: str, exit_code: int | None, detail: str | None = None) -> None:
        self.step_name = step_name
        self.exit_code = exit_code
        message = f"Cleanup step '{step_name}' failed with exit status {exit_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
