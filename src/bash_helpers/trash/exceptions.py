"""Trash-related exceptions."""

from pathlib import Path

from bash_helpers.exceptions import HelperError


class MoveError(HelperError):
    """Raised when a file cannot be moved to the trash."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to move {path} to trash: {reason}")
