"""Base exceptions for bash-helpers.

Each helper family (git, trash, cleanup) defines its own exceptions on top of
``HelperError`` so the CLI can report any of them the same way.
"""


class HelperError(Exception):
    """Base exception for all helper failures."""


class InvalidArgumentError(HelperError):
    """Raised when a command argument is out of range or malformed."""
