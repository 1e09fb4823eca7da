"""Remove local git branches that no longer exist on a remote."""

import logging
from pathlib import Path

import git
from pydantic import BaseModel, Field
from rich.console import Console

from bash_helpers.git.exceptions import NetworkError, VCSError
from bash_helpers.git.submodules import iter_submodules, open_repository

logger = logging.getLogger(__name__)
console = Console()


class Branch(BaseModel):
    """A local branch and whether its remote counterpart exists."""

    name: str
    on_remote: bool


class BranchPruneResult(BaseModel):
    """Result of pruning one repository."""

    repo_path: Path
    remote: str
    deleted: list[str] = Field(default_factory=list)
    kept: list[str] = Field(default_factory=list)
    skipped_current: str | None = None
    failures: dict[str, str] = Field(default_factory=dict)
    error_message: str | None = None

    @property
    def success(self) -> bool:
        """True if the fetch worked and every deletion went through."""
        return self.error_message is None and not self.failures


class GitBranchCleaner:
    """Deletes local branches whose remote-tracking reference is gone.

    Branches are force deleted, so unmerged work on a branch that was removed
    from the remote is lost locally as well.
    """

    def __init__(
        self,
        repo_path: str | Path | None = None,
        protect_current_branch: bool = True,
    ) -> None:
        """Initialize the branch cleaner.

        Args:
            repo_path: Path to git repository (default: current directory)
            protect_current_branch: Never delete the checked-out branch

        Raises:
            NotARepositoryError: If path is not a git repository
        """
        self.repo = open_repository(repo_path)
        self.repo_path = Path(self.repo.working_tree_dir or self.repo.git_dir)
        self.protect_current_branch = protect_current_branch

    def fetch(self, remote: str) -> None:
        """Fetch from the remote, pruning deleted branches and tags.

        Args:
            remote: Remote name

        Raises:
            NetworkError: If the fetch fails (remote missing or unreachable)
        """
        try:
            self.repo.git.fetch(remote, "--force", "--prune", "--prune-tags")
        except git.GitCommandError as e:
            msg = f"Failed to fetch from '{remote}': {e.stderr.strip() or e}"
            raise NetworkError(msg) from e

    def list_local_branches(self) -> list[str]:
        """Get the names of all local branches.

        Returns:
            Local branch names
        """
        return [head.name for head in self.repo.heads]

    def has_remote_branch(self, remote: str, branch: str) -> bool:
        """Check whether ``refs/remotes/<remote>/<branch>`` exists.

        Args:
            remote: Remote name
            branch: Local branch name

        Returns:
            True if the remote-tracking reference exists
        """
        try:
            self.repo.git.show_ref("--verify", "--quiet", f"refs/remotes/{remote}/{branch}")
        except git.GitCommandError:
            return False
        return True

    def get_current_branch(self) -> str | None:
        """Get the checked-out branch.

        Returns:
            Branch name, or None when HEAD is detached
        """
        if self.repo.head.is_detached:
            return None
        return self.repo.active_branch.name

    def evaluate_branches(self, remote: str) -> list[Branch]:
        """Pair every local branch with the existence of its remote counterpart.

        Args:
            remote: Remote name

        Returns:
            One Branch per local branch
        """
        return [
            Branch(name=name, on_remote=self.has_remote_branch(remote, name)) for name in self.list_local_branches()
        ]

    def prune_local_branches(self, remote: str = "origin") -> BranchPruneResult:
        """Delete every local branch that has no counterpart on ``remote``.

        Args:
            remote: Remote name (default: origin)

        Returns:
            BranchPruneResult describing what was deleted, kept or skipped

        Raises:
            NetworkError: If fetching from the remote fails
        """
        self.fetch(remote)

        result = BranchPruneResult(repo_path=self.repo_path, remote=remote)
        current = self.get_current_branch()

        for branch in self.evaluate_branches(remote):
            if branch.on_remote:
                result.kept.append(branch.name)
                continue

            if branch.name == current and self.protect_current_branch:
                console.print(
                    f"[yellow]The branch '{branch.name}' does not exist on the remote repository "
                    "but is checked out; keeping it.[/yellow]"
                )
                result.skipped_current = branch.name
                continue

            console.print(f"The branch '{branch.name}' does not exist on the remote repository.")
            console.print("Deleting the local branch...")
            try:
                self.repo.delete_head(branch.name, force=True)
            except git.GitCommandError as e:
                error = e.stderr.strip() or str(e)
                console.print(f"[red]Failed to delete '{branch.name}': {error}[/red]")
                result.failures[branch.name] = error
                continue

            logger.debug("Deleted branch %s in %s", branch.name, self.repo_path)
            result.deleted.append(branch.name)

        return result

    def prune_recursive(self, remote: str = "origin") -> list[BranchPruneResult]:
        """Prune this repository and then every nested submodule.

        Errors in a submodule are recorded in its result and do not stop the
        remaining submodules. Submodules that are not initialized are skipped.
        Errors in the top-level repository propagate.

        Args:
            remote: Remote name (default: origin)

        Returns:
            Results for the top-level repository followed by each initialized submodule

        Raises:
            NetworkError: If fetching the top-level repository fails
        """
        results = [self.prune_local_branches(remote)]

        for display_path, module in iter_submodules(self.repo):
            if module is None:
                console.print(f"[dim]Skipping '{display_path}': submodule is not initialized[/dim]")
                continue

            submodule_path = self.repo_path / display_path
            console.print(f"[bold]Entering '{display_path}'[/bold]")
            try:
                cleaner = GitBranchCleaner(module.working_tree_dir, self.protect_current_branch)
                results.append(cleaner.prune_local_branches(remote))
            except VCSError as e:
                console.print(f"[red]{display_path}: {e}[/red]")
                results.append(BranchPruneResult(repo_path=submodule_path, remote=remote, error_message=str(e)))

        return results
