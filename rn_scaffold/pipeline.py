"""rn-scaffold orchestrator.

Drives one scaffold run through a fixed sequence of states::

    start -> detect-project -> check-conflict -> confirm
          -> materializing -> reconciling -> done

A declined prompt ends the run in ``aborted`` (exit 0). A fatal error while
detecting the project or materializing files ends it in ``failed`` (exit 1).
Dependency problems never fail the run: the generated tree is usable and the
summary tells the user what to install by hand.

Usage::

    rn-scaffold
    rn-scaffold --project-root ./MyApp --yes
"""

from __future__ import annotations

import asyncio
import functools
import sys
import traceback
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from rich.markup import escape
from rich.panel import Panel

from rn_scaffold.config import ScaffoldConfig
from rn_scaffold.dependencies import (
    AskFn,
    DependencyOutcome,
    DependencyReconciler,
    DependencyReport,
    InstallRunner,
    compute_missing,
    manual_install_command,
    run_install,
)
from rn_scaffold.errors import ManifestNotFound, ScaffoldError
from rn_scaffold.manifest import PlatformKind, ProjectManifest, classify_platform, load_manifest
from rn_scaffold.scaffolder import CreationReport, WriteReport, ensure_all, write_all
from rn_scaffold.utils import (
    always_yes,
    ask_yes_no,
    console,
    print_error,
    print_item,
    print_step,
    print_summary_table,
    print_warning,
)

# ---------------------------------------------------------------------------
# Run state
# ---------------------------------------------------------------------------


class ScaffoldState(str, Enum):
    START = "start"
    DETECT_PROJECT = "detect-project"
    CHECK_CONFLICT = "check-conflict"
    CONFIRM = "confirm"
    MATERIALIZING = "materializing"
    RECONCILING = "reconciling"
    DONE = "done"
    ABORTED = "aborted"
    FAILED = "failed"


class ScaffoldAborted(Exception):
    """Internal signal: the user declined a prompt in *state*."""

    def __init__(self, state: ScaffoldState) -> None:
        self.state = state
        super().__init__(f"Cancelled at {state.value}")


class ScaffoldResult(BaseModel):
    """Everything a run produced, for the summary and for callers."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    state: ScaffoldState = ScaffoldState.START
    history: list[ScaffoldState] = Field(default_factory=list)
    platform: PlatformKind = PlatformKind.UNKNOWN
    manifest_found: bool = False
    aborted_at: ScaffoldState | None = None
    directories: list[CreationReport] = Field(default_factory=list)
    files: list[WriteReport] = Field(default_factory=list)
    dependencies: DependencyReport | None = None
    error: str = ""

    @property
    def exit_code(self) -> int:
        return 1 if self.state is ScaffoldState.FAILED else 0

    @property
    def success(self) -> bool:
        return self.state is ScaffoldState.DONE


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class Scaffolder:
    """Scaffold orchestrator.

    Attributes:
        config: Immutable run configuration (paths and fixed plans).
        ask: ``ask(question, default) -> bool`` used for every prompt.
        reconciler: Dependency reconciler sharing the same prompt.
        result: Accumulated result of the current run.
    """

    def __init__(
        self,
        config: ScaffoldConfig,
        ask: AskFn | None = None,
        runner: InstallRunner | None = None,
        *,
        echo: bool = True,
    ) -> None:
        self.config = config
        if ask is None:
            ask = always_yes if config.assume_yes else ask_yes_no
        self.ask = ask
        self.echo = echo
        self.reconciler = DependencyReconciler(
            ask,
            runner or functools.partial(run_install, timeout=config.install_timeout),
            lockfile_name=config.lockfile_name,
            native_dir=config.native_dir,
            manifest_name=config.manifest_name,
            echo=echo,
        )
        self.result = ScaffoldResult()
        self._manifest: ProjectManifest | None = None

    def _enter(self, state: ScaffoldState) -> None:
        self.result.state = state
        self.result.history.append(state)

    async def run(self) -> ScaffoldResult:
        """Execute the run and return its result. Never raises for scaffold errors."""
        self.result = ScaffoldResult()
        self._enter(ScaffoldState.START)
        self._banner()

        try:
            self._enter(ScaffoldState.DETECT_PROJECT)
            self.detect_project()

            self._enter(ScaffoldState.CHECK_CONFLICT)
            self.check_conflict()

            self._enter(ScaffoldState.CONFIRM)
            self.confirm()

            self._enter(ScaffoldState.MATERIALIZING)
            await self.materialize()

        except ScaffoldAborted as exc:
            self.result.aborted_at = exc.state
            self._enter(ScaffoldState.ABORTED)
            self._say(console.print, "[dim]Cancelled.[/dim]")
            return self.result

        except ScaffoldError as exc:
            self.result.error = str(exc)
            self._enter(ScaffoldState.FAILED)
            self._say(print_error, f"\n❌ Error creating structure: {escape(str(exc))}")
            return self.result

        except Exception as exc:
            self.result.error = f"{type(exc).__name__}: {exc}"
            self._enter(ScaffoldState.FAILED)
            self._say(print_error, f"\n❌ Error creating structure: {escape(str(exc))}")
            self._say(console.print, f"[dim]{escape(traceback.format_exc())}[/dim]")
            return self.result

        self._enter(ScaffoldState.RECONCILING)
        self.result.dependencies = await self.reconcile()

        self._enter(ScaffoldState.DONE)
        if self.echo:
            self._print_final_summary()
        return self.result

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------

    def detect_project(self) -> None:
        """Load ``package.json`` and classify the project.

        Raises:
            ManifestParseError: If the manifest is malformed.
            ScaffoldAborted: If the project is unrecognised and the user
                declines to continue.
        """
        try:
            self._manifest = load_manifest(self.config.project_root, self.config.manifest_name)
        except ManifestNotFound:
            self._manifest = None
            self._say(print_warning, "⚠ No package.json found in current directory.")
            self._say(print_item, "This tool is typically used in a React Native project.")
        else:
            self.result.manifest_found = True

        platform = classify_platform(self._manifest)
        self.result.platform = platform

        if platform is PlatformKind.UNKNOWN:
            if self._manifest is not None:
                self._say(print_warning, "⚠ This doesn't appear to be a React Native or Expo project.")
            if not self.ask("Continue anyway?", False):
                raise ScaffoldAborted(ScaffoldState.DETECT_PROJECT)
        else:
            self._say(console.print, f"[cyan]✓ {platform.label} project detected![/cyan]\n")

    def check_conflict(self) -> None:
        """Ask before writing into an existing source tree."""
        if self.config.source_path.exists():
            question = (
                f"{self.config.source_root}/ directory already exists. "
                "Continue and potentially overwrite files?"
            )
            if not self.ask(question, False):
                raise ScaffoldAborted(ScaffoldState.CHECK_CONFLICT)

    def confirm(self) -> None:
        question = (
            "This will create a complete React Native app with navigation "
            "and sample screens. Continue?"
        )
        if not self.ask(question, True):
            raise ScaffoldAborted(ScaffoldState.CONFIRM)

    async def materialize(self) -> None:
        """Create the directory plan, then copy the file plan."""
        self._say(print_step, "📁 Creating directories...")
        self.result.directories = await ensure_all(
            self.config.directories, self.config.project_root, echo=self.echo
        )

        self._say(print_step, "📝 Generating files...")
        self.result.files = await write_all(
            self.config.files,
            self.config.project_root,
            self.config.templates_dir,
            architecture_doc=self.config.architecture_doc,
            echo=self.echo,
        )

    async def reconcile(self) -> DependencyReport:
        """Run the dependency reconciler; failures become a report."""
        try:
            return await self.reconciler.reconcile(
                self._manifest,
                self.config.required_dependencies,
                self.config.project_root,
                self.result.platform,
            )
        except Exception as exc:
            missing = compute_missing(self.config.required_dependencies, self._manifest)
            self._say(print_error, f"   ❌ Dependency check failed: {escape(str(exc))}")
            return DependencyReport(
                outcome=DependencyOutcome.INSTALL_FAILED,
                missing=missing,
                error=str(exc),
                manual_command=manual_install_command(missing, self.result.platform),
            )

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def _say(self, printer: Any, message: str) -> None:
        if self.echo:
            printer(message)

    def _banner(self) -> None:
        if not self.echo:
            return
        console.print(
            Panel(
                "[bold bright_blue]React Native Clean Architecture Scaffold[/bold bright_blue]\n"
                f"Project : {Path(self.config.project_root).resolve()}",
                border_style="bright_blue",
            )
        )

    def follow_ups(self) -> list[str]:
        """Manual actions that remain after the run."""
        report = self.result.dependencies
        if report is None:
            return []
        actions: list[str] = []
        if report.manual_command:
            actions.append(report.manual_command)
        actions.extend(report.follow_ups)
        return actions

    def summary_rows(self) -> dict[str, str]:
        """Rows of the "What was created" table."""
        guide_name = self.config.architecture_doc
        planned = [f for f in self.result.files if f.written and f.destination != guide_name]
        guide = any(f.written and f.destination == guide_name for f in self.result.files)
        report = self.result.dependencies

        rows = {
            "Platform": self.result.platform.label,
            "Directories": str(len(self.result.directories)),
            "Files": str(len(planned)),
            "Architecture guide": "created" if guide else "skipped",
        }
        if report is not None:
            rows["Dependencies"] = report.outcome.value
            if report.outcome is DependencyOutcome.INSTALLED:
                if report.unresolved:
                    rows["Unresolved"] = ", ".join(report.unresolved)
            elif report.missing:
                rows["Missing"] = ", ".join(report.missing)
            if report.error:
                rows["Install error"] = escape(report.error)
        return rows

    def _print_final_summary(self) -> None:
        console.print()
        console.print(
            Panel(
                "[bold green]✅ Clean architecture structure created successfully![/bold green]",
                border_style="bold green",
            )
        )

        print_summary_table(self.summary_rows(), title="What was created")

        actions = self.follow_ups()
        if actions:
            console.print("[white]⚠ Follow-up actions:[/white]")
            for action in actions:
                console.print(f"   [cyan]{escape(action)}[/cyan]", soft_wrap=True)
            console.print()

        console.print("[white]📋 Next steps:[/white]")
        print_item(f"1. Review {self.config.architecture_doc} for complete guidelines")
        print_item("2. Run: npm start (or yarn start)")
        print_item("3. Customize the screens and styles to match your needs")
        console.print()


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``rn-scaffold``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="rn-scaffold",
        description="Scaffold a clean-architecture layout into a React Native or Expo project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  rn-scaffold\n"
            "  rn-scaffold --project-root ./MyApp --yes\n"
        ),
    )
    parser.add_argument(
        "--project-root", "-p",
        default=None,
        help="Project directory (default: current directory)",
    )
    parser.add_argument(
        "--templates-dir",
        default=None,
        help="Directory holding the templates (default: bundled templates)",
    )
    parser.add_argument(
        "--install-timeout",
        type=int,
        default=None,
        help="Seconds to wait for the package manager (default: 600)",
    )
    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        default=None,
        help="Answer yes to every prompt",
    )

    args = parser.parse_args(argv)

    try:
        config = ScaffoldConfig.from_env(
            project_root=Path(args.project_root) if args.project_root else None,
            templates_dir=Path(args.templates_dir) if args.templates_dir else None,
            install_timeout=args.install_timeout,
            assume_yes=args.yes,
        )
    except ValueError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        sys.exit(1)

    if not config.project_root.is_dir():
        console.print(f"[bold red]Error:[/bold red] Project directory not found: {config.project_root}")
        sys.exit(1)

    result = asyncio.run(Scaffolder(config).run())
    sys.exit(result.exit_code)


if __name__ == "__main__":
    main()
