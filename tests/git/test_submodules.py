"""Tests for submodule traversal and SubmoduleRunner."""

import sys
from pathlib import Path

import git
import pytest

from bash_helpers.exceptions import InvalidArgumentError
from bash_helpers.git import NotARepositoryError, SubmoduleRunner, iter_submodules

GIT_TEST_OPTIONS = [
    "-c",
    "protocol.file.allow=always",
    "-c",
    "user.name=Test User",
    "-c",
    "user.email=test@example.com",
]


def _git(repo: git.Repo, *args: str) -> str:
    return repo.git.execute(["git", *GIT_TEST_OPTIONS, *args])


def _make_repo(path: Path) -> git.Repo:
    repo = git.Repo.init(path)
    (path / "README.md").write_text(f"{path.name}\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")
    return repo


@pytest.fixture
def superproject(tmp_path: Path) -> git.Repo:
    """Create a repository with nested submodules.

    Layout:
        top/libs/middle              (submodule)
        top/libs/middle/vendor/leaf  (nested submodule)
        top/libs/other               (submodule)
    """
    leaf = _make_repo(tmp_path / "leaf")
    middle = _make_repo(tmp_path / "middle")
    other = _make_repo(tmp_path / "other")

    _git(middle, "submodule", "add", leaf.working_tree_dir, "vendor/leaf")
    _git(middle, "commit", "-m", "Add leaf")

    top = _make_repo(tmp_path / "top")
    _git(top, "submodule", "add", middle.working_tree_dir, "libs/middle")
    _git(top, "submodule", "add", other.working_tree_dir, "libs/other")
    _git(top, "submodule", "update", "--init", "--recursive")
    _git(top, "commit", "-m", "Add submodules")
    return top


@pytest.fixture
def plain_clone(superproject: git.Repo, tmp_path: Path) -> git.Repo:
    """Clone the superproject without initializing its submodules."""
    return superproject.clone(str(tmp_path / "clone"))


def _write_marker_command(name: str) -> list[str]:
    return [sys.executable, "-c", f"import pathlib; pathlib.Path({name!r}).write_text('ran')"]


class TestIterSubmodules:
    """Tests for iter_submodules."""

    def test_visits_nested_submodules(self, superproject: git.Repo) -> None:
        """Test nested submodules are visited after their parent."""
        paths = [path for path, _module in iter_submodules(superproject)]

        assert set(paths) == {"libs/middle", "libs/middle/vendor/leaf", "libs/other"}
        assert paths.index("libs/middle") < paths.index("libs/middle/vendor/leaf")

    def test_yields_checked_out_repositories(self, superproject: git.Repo) -> None:
        """Test each yielded repository points at the submodule's working tree."""
        top = Path(superproject.working_tree_dir)

        for path, module in iter_submodules(superproject):
            assert module is not None
            assert Path(module.working_tree_dir) == top / path

    def test_repository_without_submodules(self, tmp_path: Path) -> None:
        """Test a plain repository yields nothing."""
        repo = _make_repo(tmp_path / "plain")

        assert list(iter_submodules(repo)) == []

    def test_repository_without_commits(self, tmp_path: Path) -> None:
        """Test an empty repository yields nothing."""
        repo = git.Repo.init(tmp_path / "empty")

        assert list(iter_submodules(repo)) == []

    def test_uninitialized_submodules(self, plain_clone: git.Repo) -> None:
        """Test registered submodules that are not checked out yield no repository."""
        assert list(iter_submodules(plain_clone)) == [("libs/middle", None), ("libs/other", None)]

    def test_added_but_uncommitted_submodule(self, tmp_path: Path) -> None:
        """Test a submodule that is only staged is still visited."""
        other = _make_repo(tmp_path / "other")
        top = _make_repo(tmp_path / "top")
        _git(top, "submodule", "add", other.working_tree_dir, "libs/other")

        visited = list(iter_submodules(top))

        assert [path for path, _module in visited] == ["libs/other"]
        assert visited[0][1] is not None


class TestSubmoduleRunner:
    """Tests for SubmoduleRunner."""

    def test_init_with_non_git_directory(self, tmp_path: Path) -> None:
        """Test initialization fails outside a repository."""
        with pytest.raises(NotARepositoryError):
            SubmoduleRunner(tmp_path)

    def test_runs_in_every_submodule(self, superproject: git.Repo) -> None:
        """Test the command runs in each submodule working tree, nested ones included."""
        top = Path(superproject.working_tree_dir)
        runner = SubmoduleRunner(top)

        summary = runner.run_in_all_submodules(_write_marker_command("ran.txt"))

        assert summary.success is True
        assert len(summary.results) == 3
        for sub_path in ["libs/middle", "libs/middle/vendor/leaf", "libs/other"]:
            assert (top / sub_path / "ran.txt").read_text() == "ran"
        assert not (top / "ran.txt").exists()

    def test_failure_does_not_stop_siblings(self, superproject: git.Repo) -> None:
        """Test a failing submodule is reported while the others still run."""
        top = Path(superproject.working_tree_dir)
        runner = SubmoduleRunner(top)
        command = [
            sys.executable,
            "-c",
            "import os, pathlib, sys; pathlib.Path('ran.txt').write_text('ran'); "
            "sys.exit(3 if os.path.basename(os.getcwd()) == 'middle' else 0)",
        ]

        summary = runner.run_in_all_submodules(command)

        assert summary.success is False
        assert [r.path for r in summary.failed] == ["libs/middle"]
        assert summary.failed[0].exit_code == 3
        assert (top / "libs/middle/vendor/leaf/ran.txt").exists()
        assert (top / "libs/other/ran.txt").exists()

    def test_missing_executable(self, superproject: git.Repo) -> None:
        """Test a command that cannot be started fails in every submodule."""
        runner = SubmoduleRunner(superproject.working_tree_dir)

        summary = runner.run_in_all_submodules(["bash-helpers-no-such-command"])

        assert summary.success is False
        assert len(summary.failed) == 3
        assert all(r.exit_code == 127 for r in summary.failed)

    def test_no_submodules(self, tmp_path: Path) -> None:
        """Test a repository without submodules succeeds trivially."""
        repo = _make_repo(tmp_path / "plain")
        runner = SubmoduleRunner(repo.working_tree_dir)

        summary = runner.run_in_all_submodules(["true"])

        assert summary.results == []
        assert summary.success is True

    def test_uninitialized_submodules_are_skipped(self, plain_clone: git.Repo) -> None:
        """Test a clone made without --recurse-submodules succeeds and runs nothing."""
        top = Path(plain_clone.working_tree_dir)
        runner = SubmoduleRunner(top)

        summary = runner.run_in_all_submodules(_write_marker_command("ran.txt"))

        assert summary.success is True
        assert summary.results == []
        assert summary.skipped == ["libs/middle", "libs/other"]
        assert not (top / "libs/middle/ran.txt").exists()
        assert not (top / "libs/other/ran.txt").exists()

    def test_partially_initialized_clone(self, plain_clone: git.Repo) -> None:
        """Test initialized submodules run while the uninitialized ones are skipped."""
        top = Path(plain_clone.working_tree_dir)
        _git(plain_clone, "submodule", "update", "--init", "libs/other")
        runner = SubmoduleRunner(top)

        summary = runner.run_in_all_submodules(_write_marker_command("ran.txt"))

        assert summary.success is True
        assert [r.path for r in summary.results] == ["libs/other"]
        assert summary.skipped == ["libs/middle"]
        assert (top / "libs/other/ran.txt").read_text() == "ran"

    def test_empty_command(self, tmp_path: Path) -> None:
        """Test an empty command is rejected."""
        repo = _make_repo(tmp_path / "plain")
        runner = SubmoduleRunner(repo.working_tree_dir)

        with pytest.raises(InvalidArgumentError, match="No command given"):
            runner.run_in_all_submodules([])
