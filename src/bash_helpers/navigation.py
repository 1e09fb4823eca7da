"""Directory navigation helpers."""

from pathlib import Path

from bash_helpers.exceptions import InvalidArgumentError


def resolve_up(levels: int = 1, start: Path | None = None) -> Path:
    """Resolve the directory ``levels`` steps above ``start``.

    Args:
        levels: Number of directory levels to climb (default: 1)
        start: Directory to start from (default: current directory)

    Returns:
        Absolute path of the target directory

    Raises:
        InvalidArgumentError: If levels is below 1, exceeds the directory depth,
            or the current directory has been removed
    """
    if levels < 1:
        raise InvalidArgumentError(f"Levels must be a positive integer, got {levels}")

    try:
        current = Path(start or Path.cwd()).absolute()
    except FileNotFoundError as e:
        raise InvalidArgumentError("Current directory no longer exists") from e
    depth = len(current.parts) - 1

    if levels > depth:
        raise InvalidArgumentError(f"Cannot go up {levels} levels from {current} (depth {depth})")

    return current.parents[levels - 1]
