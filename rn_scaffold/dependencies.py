"""Reconciling the project's dependencies with the navigation stack.

The reconciler compares the required dependency list with ``package.json``,
asks before installing anything, runs the package manager with the user's
terminal attached, and then re-reads the manifest to verify the result.
Nothing raised in here escapes :meth:`DependencyReconciler.reconcile`:
every failure becomes a :class:`DependencyReport`.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Sequence
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field
from rich.markup import escape

from .errors import InstallProcessError, ScaffoldError
from .manifest import MANIFEST_NAME, PlatformKind, ProjectManifest, load_manifest
from .utils import (
    console,
    print_command,
    print_error,
    print_item,
    print_step,
    print_success,
    print_warning,
    run_command,
)

AskFn = Callable[[str, bool], bool]
InstallRunner = Callable[[list[str], Path], Awaitable[tuple[int, str]]]

POD_INSTALL_COMMAND = "cd ios && pod install && cd .."


class DependencyOutcome(str, Enum):
    ALREADY_SATISFIED = "already-satisfied"
    SKIPPED_BY_USER = "skipped-by-user"
    INSTALLED = "installed"
    INSTALL_FAILED = "install-failed"


class DependencyReport(BaseModel):
    """Terminal result of a reconciliation."""

    outcome: DependencyOutcome
    missing: list[str] = Field(default_factory=list, description="Missing dependencies, in required order")
    install_command: str = Field(default="", description="Command that was run, if any")
    manual_command: str = Field(default="", description="Command the user should run by hand")
    error: str = Field(default="", description="Installer error message for install-failed")
    follow_ups: list[str] = Field(default_factory=list, description="Manual steps still required")
    unresolved: list[str] = Field(
        default_factory=list, description="Required dependencies still absent after installing"
    )

    @property
    def satisfied(self) -> bool:
        return self.outcome in (DependencyOutcome.ALREADY_SATISFIED, DependencyOutcome.INSTALLED)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def compute_missing(required: Iterable[str], manifest: ProjectManifest | None) -> list[str]:
    """Return the required names not declared in *manifest*, in required order."""
    declared = manifest.names() if manifest is not None else set()
    return [name for name in required if name not in declared]


def install_command(
    packages: Sequence[str], project_root: str | Path, lockfile_name: str = "yarn.lock"
) -> list[str]:
    """Pick ``yarn add`` when a yarn lockfile exists, ``npm install`` otherwise."""
    if (Path(project_root) / lockfile_name).exists():
        return ["yarn", "add", *packages]
    return ["npm", "install", *packages]


def manual_install_command(packages: Sequence[str], platform: PlatformKind) -> str:
    """Command shown when automated installation is skipped or fails."""
    if platform is PlatformKind.EXPO:
        return " ".join(["npx", "expo", "install", *packages])
    return " ".join(["npm", "install", *packages])


async def run_install(command: list[str], cwd: Path, timeout: int = 600) -> tuple[int, str]:
    """Run the installer with inherited stdio. Returns ``(returncode, error)``."""
    returncode, _, stderr = await run_command(command, cwd=cwd, timeout=timeout, capture=False)
    return returncode, stderr


# ---------------------------------------------------------------------------
# Reconciler
# ---------------------------------------------------------------------------


class DependencyReconciler:
    """Detect, prompt, install and verify the required dependencies.

    Args:
        ask: ``ask(question, default) -> bool`` prompt capability.
        runner: ``runner(command, cwd) -> (returncode, error)``; defaults to
            :func:`run_install`.
        lockfile_name: Lockfile whose presence selects yarn.
        native_dir: Native folder that triggers the ``pod install`` reminder.
        manifest_name: Manifest re-read during verification.
        echo: Print progress to the console.
    """

    def __init__(
        self,
        ask: AskFn,
        runner: InstallRunner | None = None,
        *,
        lockfile_name: str = "yarn.lock",
        native_dir: str = "ios",
        manifest_name: str = MANIFEST_NAME,
        echo: bool = True,
    ) -> None:
        self.ask = ask
        self.runner = runner or run_install
        self.lockfile_name = lockfile_name
        self.native_dir = native_dir
        self.manifest_name = manifest_name
        self.echo = echo

    async def reconcile(
        self,
        manifest: ProjectManifest | None,
        required: Sequence[str],
        project_root: str | Path,
        platform: PlatformKind = PlatformKind.UNKNOWN,
    ) -> DependencyReport:
        root = Path(project_root)
        self._step("📦 Checking dependencies...")

        missing = compute_missing(required, manifest)
        if not missing:
            self._say(print_success, "   ✓ All required dependencies are already installed!")
            return DependencyReport(outcome=DependencyOutcome.ALREADY_SATISFIED)

        manual = manual_install_command(missing, platform)
        self._say(print_warning, "   ⚠ Missing required navigation dependencies:")
        for name in missing:
            self._item(f"   - {escape(name)}")

        if not self.ask("Would you like to install them now?", True):
            self._say(print_warning, "   ⚠ Skipping installation. You will need to install them manually later.")
            self._manual(manual)
            return DependencyReport(
                outcome=DependencyOutcome.SKIPPED_BY_USER,
                missing=missing,
                manual_command=manual,
            )

        command = install_command(missing, root, self.lockfile_name)
        command_str = " ".join(command)
        try:
            self._step("   Installing dependencies... (this may take a minute)")
            await self._install(command, root)
        except InstallProcessError as exc:
            self._say(print_error, "   ❌ Failed to install dependencies")
            self._item(f"   Error: {escape(str(exc))}")
            self._manual(manual)
            return DependencyReport(
                outcome=DependencyOutcome.INSTALL_FAILED,
                missing=missing,
                install_command=command_str,
                manual_command=manual,
                error=str(exc),
            )

        self._say(print_success, "   ✓ Dependencies installed successfully!")
        report = DependencyReport(
            outcome=DependencyOutcome.INSTALLED,
            missing=missing,
            install_command=command_str,
        )

        if platform is PlatformKind.EXPO:
            self._say(print_success, "   ℹ Expo project - native dependencies handled automatically!")
        elif (root / self.native_dir).is_dir():
            report.follow_ups.append(POD_INSTALL_COMMAND)
            self._say(print_warning, "   📱 iOS detected - Remember to run:")
            self._command(POD_INSTALL_COMMAND)

        self._verify(report, required, root, platform)
        return report

    async def _install(self, command: list[str], cwd: Path) -> None:
        command_str = " ".join(command)
        try:
            returncode, error = await self.runner(command, cwd)
        except OSError as exc:
            raise InstallProcessError(
                f"Could not start {command[0]}: {exc.strerror or exc}", command=command_str
            ) from exc

        if returncode != 0:
            message = error or f"Command failed: {command_str}"
            raise InstallProcessError(
                f"{message} (exit {returncode})", command=command_str, returncode=returncode
            )

    def _verify(
        self,
        report: DependencyReport,
        required: Sequence[str],
        root: Path,
        platform: PlatformKind,
    ) -> None:
        """Re-read the manifest and record dependencies that are still absent."""
        try:
            refreshed = load_manifest(root, self.manifest_name)
        except ScaffoldError as exc:
            report.follow_ups.append(f"Verify dependencies manually ({exc})")
            self._say(print_warning, f"   ⚠ Could not verify installed dependencies: {escape(str(exc))}")
            return

        report.unresolved = compute_missing(required, refreshed)
        if report.unresolved:
            report.manual_command = manual_install_command(report.unresolved, platform)
            self._say(
                print_warning,
                f"   ⚠ Still missing after install: {escape(', '.join(report.unresolved))}",
            )
            self._manual(report.manual_command)

    # -- Console helpers ----------------------------------------------------

    def _step(self, message: str) -> None:
        if self.echo:
            print_step(message)

    def _item(self, message: str) -> None:
        if self.echo:
            print_item(message)

    def _say(self, printer: Callable[[str], None], message: str) -> None:
        if self.echo:
            printer(message)

    def _command(self, command: str) -> None:
        if self.echo:
            print_command(escape(command))

    def _manual(self, command: str) -> None:
        if self.echo:
            console.print("   [dim]Run this command to install:[/dim]")
            print_command(escape(command))
