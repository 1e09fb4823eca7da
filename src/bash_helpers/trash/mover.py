"""Find files by extension and move them to the trash."""

import logging
import os
from pathlib import Path

from pydantic import BaseModel
from rich.console import Console

from bash_helpers.exceptions import InvalidArgumentError
from bash_helpers.trash.exceptions import MoveError
from bash_helpers.utils import run_command

logger = logging.getLogger(__name__)
console = Console()


class TrashResult(BaseModel):
    """Outcome for one matched file."""

    path: Path
    moved: bool
    error_message: str | None = None


class TrashSummary(BaseModel):
    """Outcome of a whole trash run."""

    extension: str
    results: list[TrashResult]

    @property
    def moved(self) -> list[Path]:
        """Paths that were moved to the trash."""
        return [r.path for r in self.results if r.moved]

    @property
    def failed(self) -> list[TrashResult]:
        """Results for files that could not be moved."""
        return [r for r in self.results if not r.moved]


def normalize_extension(extension: str) -> str:
    """Strip a leading dot and validate the extension.

    Args:
        extension: Extension such as ``log`` or ``.log``

    Returns:
        Extension without the leading dot

    Raises:
        InvalidArgumentError: If the extension is empty or contains a path separator
    """
    ext = extension.strip().lstrip(".")
    if not ext or "/" in ext or os.sep in ext:
        raise InvalidArgumentError(f"Invalid extension: {extension!r}")
    return ext


def find_by_extension(root: Path, extension: str) -> list[Path]:
    """Find regular files under ``root`` whose name ends with ``.<extension>``.

    Directories and symbolic links are never matched.

    Args:
        root: Directory to search recursively
        extension: Extension without the leading dot

    Returns:
        Sorted list of matching paths
    """
    suffix = f".{extension}"
    matches: list[Path] = []

    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in filenames:
            path = Path(dirpath) / filename
            if filename.endswith(suffix) and path.is_file() and not path.is_symlink():
                matches.append(path)

    return sorted(matches)


class TrashMover:
    """Moves files to the trash with an external trash command (``gio trash`` by default)."""

    def __init__(self, trash_command: list[str] | None = None) -> None:
        """Initialize the mover.

        Args:
            trash_command: Command that trashes the path appended to it
        """
        self.trash_command = trash_command or ["gio", "trash"]

    def move_to_trash(self, path: Path) -> None:
        """Move a single file to the trash.

        Args:
            path: File to move

        Raises:
            MoveError: If the trash command is missing or fails
        """
        result = run_command([*self.trash_command, str(path)], capture_output=True)
        if not result.success:
            reason = result.stderr.strip() or f"exit status {result.exit_code}"
            raise MoveError(path, reason)

    def trash_by_extension(self, extension: str, root: Path | None = None) -> TrashSummary:
        """Move every file under ``root`` ending with ``.<extension>`` to the trash.

        All matches are collected before the first move. A failed move is
        recorded and the remaining files are still processed.

        Args:
            extension: File extension, with or without the leading dot
            root: Directory to search (default: current directory)

        Returns:
            TrashSummary with one result per matched file

        Raises:
            InvalidArgumentError: If the extension is invalid
        """
        ext = normalize_extension(extension)
        base = Path(root or Path.cwd())
        results: list[TrashResult] = []

        for path in find_by_extension(base, ext):
            console.print(f"Moving to trash: {path}")
            try:
                self.move_to_trash(path)
            except MoveError as e:
                console.print(f"[red]{e}[/red]")
                results.append(TrashResult(path=path, moved=False, error_message=e.reason))
                continue
            results.append(TrashResult(path=path, moved=True))

        summary = TrashSummary(extension=ext, results=results)
        logger.debug("Moved %d of %d *.%s files under %s", len(summary.moved), len(results), ext, base)
        return summary
