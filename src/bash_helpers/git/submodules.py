"""Run commands across git submodules."""

import logging
from collections.abc import Iterator
from pathlib import Path

import git
from pydantic import BaseModel, Field
from rich.console import Console

from bash_helpers.exceptions import InvalidArgumentError
from bash_helpers.git.exceptions import NotARepositoryError, VCSOperationError
from bash_helpers.utils import run_command

logger = logging.getLogger(__name__)
console = Console()


class SubmoduleRunResult(BaseModel):
    """Result of running a command in one submodule."""

    path: str
    exit_code: int | None = None
    error_message: str | None = None

    @property
    def success(self) -> bool:
        """Check if the command succeeded in this submodule.

        Returns:
            True if the command exited with status 0
        """
        return self.exit_code == 0 and self.error_message is None


class SubmoduleRunSummary(BaseModel):
    """Aggregated result of running a command in every submodule."""

    command: list[str]
    results: list[SubmoduleRunResult]
    skipped: list[str] = Field(default_factory=list)

    @property
    def failed(self) -> list[SubmoduleRunResult]:
        """Results of submodules where the command failed."""
        return [r for r in self.results if not r.success]

    @property
    def success(self) -> bool:
        """True if the command succeeded everywhere (or there were no submodules)."""
        return not self.failed


def open_repository(repo_path: str | Path | None = None) -> git.Repo:
    """Open the git repository containing ``repo_path``.

    Args:
        repo_path: Path inside the repository (default: current directory)

    Returns:
        The repository

    Raises:
        NotARepositoryError: If the path is not inside a git repository
        VCSOperationError: For any other git error
    """
    path = Path(repo_path or Path.cwd())
    try:
        return git.Repo(path, search_parent_directories=True)
    except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
        msg = f"Not a Git repository: {path}"
        raise NotARepositoryError(msg) from e
    except git.GitError as e:
        msg = f"Git error: {e}"
        raise VCSOperationError(msg) from e


def iter_submodules(repo: git.Repo, prefix: str = "") -> Iterator[tuple[str, git.Repo | None]]:
    """Walk submodules depth-first, parents before their nested submodules.

    Submodules come from the working tree's ``.gitmodules`` and the index, so a
    submodule that is added but not yet committed is visited too.

    Args:
        repo: Repository whose submodules to walk
        prefix: Display path prefix of ``repo`` relative to the top-level repository

    Yields:
        Tuples of (display path, submodule repository). The repository is None
        for submodules that are registered but not checked out; their nested
        submodules are not visited.
    """
    if not repo.head.is_valid():
        return

    for submodule in repo.submodules:
        display_path = f"{prefix}{submodule.path}"
        if not submodule.module_exists():
            logger.debug("Submodule %s is not initialized", display_path)
            yield display_path, None
            continue

        module = submodule.module()
        yield display_path, module
        yield from iter_submodules(module, prefix=f"{display_path}/")


class SubmoduleRunner:
    """Runs an arbitrary command in every submodule of a repository."""

    def __init__(self, repo_path: str | Path | None = None) -> None:
        """Initialize the runner.

        Args:
            repo_path: Path to the top-level repository (default: current directory)

        Raises:
            NotARepositoryError: If path is not a git repository
        """
        self.repo = open_repository(repo_path)

    def run_in_all_submodules(self, command: list[str]) -> SubmoduleRunSummary:
        """Run ``command`` in each submodule's working tree, including nested ones.

        A failure in one submodule is recorded and the traversal moves on.
        Submodules that are not initialized are skipped, not failed.

        Args:
            command: Command and arguments to execute

        Returns:
            Summary with one result per submodule that ran the command

        Raises:
            InvalidArgumentError: If the command is empty
        """
        if not command:
            raise InvalidArgumentError("No command given")

        results: list[SubmoduleRunResult] = []
        skipped: list[str] = []

        for display_path, module in iter_submodules(self.repo):
            if module is None:
                console.print(f"[dim]Skipping '{display_path}': submodule is not initialized[/dim]")
                skipped.append(display_path)
                continue

            console.print(f"[bold]Entering '{display_path}'[/bold]")
            outcome = run_command(command, cwd=module.working_tree_dir)

            if outcome.success:
                results.append(SubmoduleRunResult(path=display_path, exit_code=outcome.exit_code))
                continue

            error = outcome.stderr.strip() or f"Command exited with status {outcome.exit_code}"
            console.print(f"[red]{display_path}: {error}[/red]")
            results.append(
                SubmoduleRunResult(path=display_path, exit_code=outcome.exit_code, error_message=error)
            )

        return SubmoduleRunSummary(command=command, results=results, skipped=skipped)
