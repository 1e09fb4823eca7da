"""Git-related exceptions for bash-helpers."""

from bash_helpers.exceptions import HelperError


class VCSError(HelperError):
    """Base exception for all git helper errors."""


class NotARepositoryError(VCSError):
    """Raised when a directory is not a valid git repository."""


class NetworkError(VCSError):
    """Raised when the remote cannot be reached."""


class VCSOperationError(VCSError):
    """Raised when a git operation fails."""
