"""Git helpers: branch pruning and submodule commands."""

from bash_helpers.git.branch_cleaner import Branch, BranchPruneResult, GitBranchCleaner
from bash_helpers.git.exceptions import (
    NetworkError,
    NotARepositoryError,
    VCSError,
    VCSOperationError,
)
from bash_helpers.git.submodules import (
    SubmoduleRunner,
    SubmoduleRunResult,
    SubmoduleRunSummary,
    iter_submodules,
)

__all__ = [
    "Branch",
    "BranchPruneResult",
    "GitBranchCleaner",
    "NetworkError",
    "NotARepositoryError",
    "SubmoduleRunResult",
    "SubmoduleRunSummary",
    "SubmoduleRunner",
    "VCSError",
    "VCSOperationError",
    "iter_submodules",
]
