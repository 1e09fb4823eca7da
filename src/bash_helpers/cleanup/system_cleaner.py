"""Debian/Ubuntu package maintenance."""

import logging
import platform
from collections.abc import Callable
from pathlib import Path

from rich.console import Console

from bash_helpers.cleanup.pipeline import CleanupStep, PipelineResult, run_pipeline
from bash_helpers.utils import CommandResult, run_command

logger = logging.getLogger(__name__)
console = Console()

NOTHING_TO_DO = CommandResult(success=True, stdout="", stderr="", exit_code=0)


def select_old_kernels(dpkg_output: str, kernel_release: str) -> list[str]:
    """Pick kernel image packages that are safe to purge.

    Installed ``linux-image`` packages that do not belong to the running
    kernel are candidates; the last candidate in ``dpkg --list`` order is
    kept as a fallback.

    Args:
        dpkg_output: Output of ``dpkg --list``
        kernel_release: Running kernel release (``uname -r``), e.g. ``6.1.0-18-amd64``

    Returns:
        Package names to remove
    """
    # "6.1.0-18-amd64" -> "6.1.0-18"
    running = "-".join(kernel_release.split("-")[:2])

    installed: list[str] = []
    for line in dpkg_output.splitlines():
        fields = line.split()
        if "linux-image" in line and len(fields) >= 2 and fields[0] == "ii":
            installed.append(fields[1])

    candidates = [package for package in installed if running not in package]
    return candidates[:-1]


class SystemCleaner:
    """Runs the package-maintenance pipeline behind ``clean-system``.

    Nothing is rolled back: steps that already ran stay applied when a later
    step fails.
    """

    def __init__(
        self,
        use_sudo: bool = True,
        log_dir: Path = Path("/var/log"),
        kernel_release: str | None = None,
    ) -> None:
        """Initialize the cleaner.

        Args:
            use_sudo: Prefix privileged commands with sudo
            log_dir: Directory whose *.log files are truncated
            kernel_release: Running kernel release (default: ``platform.release()``)
        """
        self.use_sudo = use_sudo
        self.log_dir = log_dir
        self.kernel_release = kernel_release or platform.release()

    def _privileged(self, *args: str) -> list[str]:
        return ["sudo", *args] if self.use_sudo else list(args)

    def _command(self, *args: str) -> Callable[[], CommandResult]:
        cmd = self._privileged(*args)
        return lambda: run_command(cmd)

    def remove_old_kernels(self) -> CommandResult:
        """Purge kernel images other than the running one and its newest sibling.

        Returns:
            Result of the removal, or a no-op success when nothing qualifies
        """
        listing = run_command(["dpkg", "--list"], capture_output=True)
        if not listing.success:
            return listing

        packages = select_old_kernels(listing.stdout, self.kernel_release)
        if not packages:
            console.print("[dim]No old kernel images to remove[/dim]")
            return NOTHING_TO_DO

        logger.debug("Removing kernel packages: %s", ", ".join(packages))
        return run_command(self._privileged("apt-get", "remove", "--purge", *packages))

    def remove_orphans(self) -> CommandResult:
        """Purge the packages reported by deborphan.

        Returns:
            Result of the removal, or a no-op success when there are no orphans
        """
        listing = run_command(self._privileged("deborphan"), capture_output=True)
        if not listing.success:
            return listing

        packages = listing.stdout.split()
        if not packages:
            console.print("[dim]No orphaned packages[/dim]")
            return NOTHING_TO_DO

        return run_command(self._privileged("apt-get", "-y", "remove", "--purge", *packages))

    def build_steps(self) -> list[CleanupStep]:
        """Build the ordered cleanup pipeline.

        Returns:
            Steps in execution order
        """
        log_dir = str(self.log_dir)
        return [
            CleanupStep("autoremove", self._command("apt-get", "autoremove", "-y"), "Remove unneeded packages"),
            CleanupStep("purge", self._command("apt-get", "purge", "-y"), "Purge removed packages"),
            CleanupStep(
                "autoremove-purge",
                self._command("apt-get", "autoremove", "--purge", "-y"),
                "Remove unneeded packages and their configuration",
            ),
            CleanupStep("clean", self._command("apt-get", "clean"), "Clear the package cache"),
            CleanupStep("autoclean", self._command("apt-get", "autoclean"), "Clear obsolete downloaded packages"),
            CleanupStep("old-kernels", self.remove_old_kernels, "Remove old kernel images"),
            CleanupStep(
                "truncate-logs",
                self._command(
                    "find", log_dir, "-type", "f", "-name", "*.log", "-exec", "truncate", "-s", "0", "{}", ";"
                ),
                f"Truncate log files in {log_dir}",
            ),
            CleanupStep(
                "install-localepurge",
                self._command("apt-get", "install", "-y", "localepurge"),
                "Install localepurge",
            ),
            CleanupStep("localepurge", self._command("localepurge"), "Purge unused locales"),
            CleanupStep(
                "install-deborphan",
                self._command("apt-get", "install", "-y", "deborphan"),
                "Install deborphan",
            ),
            CleanupStep("orphans", self.remove_orphans, "Remove orphaned packages"),
        ]

    def clean_system(self) -> PipelineResult:
        """Run the cleanup pipeline, stopping at the first failing step.

        Returns:
            PipelineResult with the state of every step
        """
        result = run_pipeline(self.build_steps())
        if result.success:
            console.print("[green]System cleanup complete![/green]")
        return result
