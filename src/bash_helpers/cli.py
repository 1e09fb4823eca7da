"""Command-line interface for bash-helpers."""

import logging
import sys
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from typer.core import TyperGroup

from bash_helpers import __version__
from bash_helpers.cleanup import PipelineResult, SystemCleaner
from bash_helpers.config import ConfigurationError, HelperConfig
from bash_helpers.exceptions import HelperError
from bash_helpers.git import BranchPruneResult, GitBranchCleaner, SubmoduleRunner, SubmoduleRunSummary
from bash_helpers.navigation import resolve_up
from bash_helpers.shell import render_shell_init
from bash_helpers.trash import TrashMover, TrashSummary


class UnknownCommandError(HelperError):
    """Raised when the requested subcommand does not exist."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown command '{name}'.")


class HelperGroup(TyperGroup):
    """Command group that reports unknown subcommands as UnknownCommandError."""

    def ensure_known_command(self, ctx: typer.Context, cmd_name: str) -> None:
        """Check that ``cmd_name`` names a registered subcommand.

        Raises:
            UnknownCommandError: If no subcommand has that name
        """
        if cmd_name.startswith("-") or ctx.resilient_parsing:
            return
        if self.get_command(ctx, cmd_name) is None:
            raise UnknownCommandError(cmd_name)

    def resolve_command(
        self,
        ctx: typer.Context,
        args: list[str],
    ) -> tuple[str | None, Any, list[str]]:
        try:
            self.ensure_known_command(ctx, args[0])
        except UnknownCommandError as e:
            # Usage error from the click that typer runs on, so it exits with status 2
            ctx.fail(str(e))
        return super().resolve_command(ctx, args)


app = typer.Typer(
    name="bash-helpers",
    help="Everyday shell helpers: navigation, git branch pruning, submodule commands, trash and system cleanup",
    cls=HelperGroup,
    add_completion=False,
)
console = Console()
# Diagnostics go to stderr so stdout stays usable in $(...)
err_console = Console(stderr=True)

# Help text constants
VERBOSE_OUTPUT_HELP = "Verbose output"
ENV_FILE_HELP = "Path to custom environment file (default: .env.bashhelpers or .env)"


def setup_logging(verbose: bool) -> None:
    """Setup logging configuration.

    Args:
        verbose: If True, enable debug logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
    )

    # GitPython logs every git invocation at DEBUG
    if not verbose:
        logging.getLogger("git").setLevel(logging.WARNING)


def _fail(message: str, verbose: bool = False) -> None:
    """Print an error and exit with status 1.

    Args:
        message: Error message
        verbose: If True, also print the current traceback
    """
    err_console.print(f"[red]{message}[/red]")
    if verbose:
        err_console.print_exception()
    sys.exit(1)


@app.command()
def up(
    levels: int = typer.Argument(1, help="Number of directory levels to go up"),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help=VERBOSE_OUTPUT_HELP,
    ),
) -> None:
    """Print the directory LEVELS levels above the current one.

    Use the function printed by 'shell-init' to actually change directory.
    """
    setup_logging(verbose)

    try:
        target = resolve_up(levels)
    except HelperError as e:
        _fail(f"Error: {e}", verbose)
        return

    typer.echo(str(target))


def _display_prune_results(results: list[BranchPruneResult]) -> None:
    """Display branch pruning results.

    Args:
        results: One result per pruned repository
    """
    console.print("\n[bold]Branch Pruning Summary:[/bold]")

    for result in results:
        status = "[green]✓[/green]" if result.success else "[red]✗[/red]"
        console.print(f"  {status} {result.repo_path}: {len(result.deleted)} deleted, {len(result.kept)} kept")
        for name in result.deleted:
            console.print(f"      [dim]deleted {name}[/dim]")
        if result.skipped_current:
            console.print(f"      [yellow]kept checked-out branch {result.skipped_current}[/yellow]")
        for name, error in result.failures.items():
            console.print(f"      [red]Failed to delete {name}: {error}[/red]")
        if result.error_message:
            console.print(f"      [red]Error: {result.error_message}[/red]")

    if not all(r.success for r in results):
        sys.exit(1)


@app.command("prune-branches")
def prune_branches(
    remote: str | None = typer.Option(
        None,
        "--remote",
        "-r",
        help="Remote to compare against (overrides config, default: origin)",
    ),
    recursive: bool = typer.Option(
        False,
        "--recursive",
        help="Also prune every (nested) submodule",
    ),
    include_current: bool = typer.Option(
        False,
        "--include-current",
        help="Also try to delete the checked-out branch when it is gone from the remote",
    ),
    env_file: str | None = typer.Option(
        None,
        "--env-file",
        help=ENV_FILE_HELP,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help=VERBOSE_OUTPUT_HELP,
    ),
) -> None:
    """Delete local branches that no longer exist on the remote."""
    setup_logging(verbose)

    try:
        config = HelperConfig(env_file=env_file)
        remote_name = remote or config.remote_name

        cleaner = GitBranchCleaner(
            Path.cwd(),
            protect_current_branch=config.protect_current_branch and not include_current,
        )

        if recursive:
            results = cleaner.prune_recursive(remote_name)
        else:
            results = [cleaner.prune_local_branches(remote_name)]

    except ConfigurationError as e:
        _fail(f"Configuration error: {e}")
        return
    except HelperError as e:
        _fail(f"Error: {e}", verbose)
        return

    _display_prune_results(results)


def _display_submodule_results(summary: SubmoduleRunSummary) -> None:
    """Display per-submodule results.

    Args:
        summary: Submodule run summary
    """
    if summary.skipped:
        console.print(f"[dim]Skipped {len(summary.skipped)} uninitialized submodule(s)[/dim]")

    if not summary.results:
        if not summary.skipped:
            console.print("[dim]No submodules found[/dim]")
        return

    if summary.success:
        console.print(f"\n[green]✓ Command succeeded in {len(summary.results)} submodule(s)[/green]")
        return

    console.print(f"\n[red]Command failed in {len(summary.failed)} of {len(summary.results)} submodule(s):[/red]")
    for result in summary.failed:
        console.print(f"  [red]✗[/red] {result.path}: {result.error_message}")
    sys.exit(1)


@app.command("submodule-run")
def submodule_run(
    command: list[str] = typer.Argument(..., help="Command to run in each submodule (use -- before options)"),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help=VERBOSE_OUTPUT_HELP,
    ),
) -> None:
    """Run a command in every submodule, recursively.

    Failures are collected and reported at the end; the traversal never stops early.
    """
    setup_logging(verbose)

    try:
        runner = SubmoduleRunner(Path.cwd())
        summary = runner.run_in_all_submodules(command)
    except HelperError as e:
        _fail(f"Error: {e}", verbose)
        return

    _display_submodule_results(summary)


def _display_trash_results(summary: TrashSummary) -> None:
    """Display trash results.

    Args:
        summary: Trash summary
    """
    if not summary.results:
        console.print(f"[dim]No *.{summary.extension} files found[/dim]")
        return

    console.print(f"\n[green]Moved {len(summary.moved)} *.{summary.extension} file(s) to trash[/green]")
    if summary.failed:
        console.print(f"[yellow]{len(summary.failed)} file(s) could not be moved[/yellow]")


@app.command()
def trash(
    extension: str | None = typer.Argument(None, help="File extension to trash (default from config: txt)"),
    directory: Path | None = typer.Option(
        None,
        "--dir",
        "-d",
        help="Directory to search (default: current directory)",
    ),
    env_file: str | None = typer.Option(
        None,
        "--env-file",
        help=ENV_FILE_HELP,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help=VERBOSE_OUTPUT_HELP,
    ),
) -> None:
    """Move every file with the given extension below the current directory to the trash.

    Best effort: files that cannot be moved are reported and skipped.
    """
    setup_logging(verbose)

    try:
        config = HelperConfig(env_file=env_file)
        mover = TrashMover(config.trash_command)
        summary = mover.trash_by_extension(extension or config.default_trash_extension, directory)
    except ConfigurationError as e:
        _fail(f"Configuration error: {e}")
        return
    except HelperError as e:
        _fail(f"Error: {e}", verbose)
        return

    _display_trash_results(summary)


def _display_pipeline_plan(cleaner: SystemCleaner) -> None:
    """List the cleanup steps without running them.

    Args:
        cleaner: Configured system cleaner
    """
    console.print("\n[bold cyan]System Cleanup (dry run)[/bold cyan]")
    for index, step in enumerate(cleaner.build_steps(), start=1):
        console.print(f"  {index:2}. {step.name}: {step.description}")
    console.print()


def _display_pipeline_results(result: PipelineResult) -> None:
    """Display cleanup pipeline results.

    Args:
        result: Pipeline result
    """
    console.print("\n[bold]Cleanup Summary:[/bold]")
    for outcome in result.outcomes:
        marker = {
            "succeeded": "[green]✓[/green]",
            "failed": "[red]✗[/red]",
        }.get(outcome.state.value, "[dim]-[/dim]")
        console.print(f"  {marker} {outcome.name} ({outcome.state.value})")


@app.command("clean-system")
def clean_system(
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="List the cleanup steps without running them",
    ),
    env_file: str | None = typer.Option(
        None,
        "--env-file",
        help=ENV_FILE_HELP,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help=VERBOSE_OUTPUT_HELP,
    ),
) -> None:
    """Free disk space on Debian/Ubuntu by cleaning packages, caches, logs and locales.

    Requires sudo. Stops at the first failing step; nothing is rolled back.
    """
    setup_logging(verbose)

    try:
        config = HelperConfig(env_file=env_file)
        cleaner = SystemCleaner(use_sudo=config.use_sudo, log_dir=config.log_dir)

        if dry_run:
            _display_pipeline_plan(cleaner)
            return

        result = cleaner.clean_system()
        _display_pipeline_results(result)
        result.raise_for_failure()

    except ConfigurationError as e:
        _fail(f"Configuration error: {e}")
    except HelperError as e:
        _fail(f"Error: {e}", verbose)


@app.command("shell-init")
def shell_init(
    shell: str = typer.Argument("bash", help="Shell to generate the snippet for (bash, zsh, fish)"),
) -> None:
    """Print the shell function that makes 'up' change directory.

    Add `eval "$(bash-helpers shell-init)"` to your shell startup file.
    """
    try:
        snippet = render_shell_init(shell)
    except HelperError as e:
        _fail(f"Error: {e}")
        return

    typer.echo(snippet)


@app.command()
def config(
    env_file: str | None = typer.Option(
        None,
        "--env-file",
        help=ENV_FILE_HELP,
    ),
) -> None:
    """Show current configuration."""
    try:
        cfg = HelperConfig(env_file=env_file)
    except ConfigurationError as e:
        _fail(f"Configuration error: {e}")
        return

    source = env_file or HelperConfig.find_env_file()
    console.print("[bold]Current Configuration:[/bold]\n")
    console.print(f"  Env file: {source or 'none'}")
    console.print(f"  Remote: {cfg.remote_name}")
    console.print(f"  Protect current branch: {cfg.protect_current_branch}")
    console.print(f"  Trash command: {' '.join(cfg.trash_command)}")
    console.print(f"  Default trash extension: {cfg.default_trash_extension}")
    console.print(f"  Use sudo: {cfg.use_sudo}")
    console.print(f"  Log directory: {cfg.log_dir}")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"bash-helpers version {__version__}")


if __name__ == "__main__":
    app()
