"""Process execution utilities."""

import logging
import subprocess
from pathlib import Path
from typing import NamedTuple

logger = logging.getLogger(__name__)

# Exit status reported when the executable itself cannot be started
COMMAND_NOT_FOUND = 127


class CommandResult(NamedTuple):
    """Result of an external command."""

    success: bool
    stdout: str
    stderr: str
    exit_code: int | None = None


def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    capture_output: bool = False,
) -> CommandResult:
    """Run an external command and wait for it to finish.

    The command is passed as an argument list and never through a shell.
    No timeout is applied: a hung command blocks the caller.

    Args:
        cmd: The command to execute, as a list of strings.
        cwd: Working directory for the command (default: current directory).
        capture_output: If True, capture stdout/stderr instead of letting the
            command write to the terminal.

    Returns:
        A CommandResult with the outcome. A missing executable is reported as
        exit code 127 with the error in ``stderr``.
    """
    logger.debug("Running %s (cwd=%s)", " ".join(cmd), cwd or Path.cwd())

    try:
        process = subprocess.run(  # noqa: S603
            cmd,
            cwd=cwd,
            capture_output=capture_output,
            text=True,
            check=False,
        )
    except FileNotFoundError as e:
        return CommandResult(
            success=False,
            stdout="",
            stderr=f"Command not found: {cmd[0]} ({e})",
            exit_code=COMMAND_NOT_FOUND,
        )

    return CommandResult(
        success=process.returncode == 0,
        stdout=process.stdout or "",
        stderr=process.stderr or "",
        exit_code=process.returncode,
    )
