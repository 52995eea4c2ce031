"""Shared utility functions for rn-scaffold.

Provides async command execution, JSON loading, file-system helpers, the
yes/no prompt, and Rich-based console reporting used by every stage of a
scaffold run.
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: int = 120,
    capture: bool = True,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run an external command asynchronously.

    Args:
        cmd: Program and arguments.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
        capture: Whether to capture stdout/stderr. When ``False`` the child
            inherits the parent's streams so its output is shown live.
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple. If *capture* is ``False``
        the stdout/stderr strings will be empty.

    Raises:
        OSError: If the program cannot be spawned (e.g. not on ``PATH``).
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=stdout_pipe,
        stderr=stderr_pipe,
        cwd=str(cwd) if cwd else None,
        env=merged_env,
    )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# JSON / file-system helpers
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> Any:
    """Load and parse a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    raw = Path(path).read_text(encoding="utf-8")
    return json.loads(raw)


def ensure_dir(path: str | Path) -> bool:
    """Create a directory (and parents) if it does not exist.

    Returns:
        ``True`` if the directory already existed before the call.
    """
    dir_path = Path(path)
    existed = dir_path.is_dir()
    dir_path.mkdir(parents=True, exist_ok=True)
    return existed


# ---------------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------------


def ask_yes_no(question: str, default: bool) -> bool:
    """Ask a yes/no question on the terminal."""
    return Confirm.ask(question, default=default, console=console)


def always_yes(question: str, default: bool) -> bool:
    """Prompt replacement for non-interactive runs (``--yes``)."""
    console.print(f"[dim]{question} (auto-yes)[/dim]")
    return True


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_step(message: str) -> None:
    """Print a cyan section heading such as ``Creating directories...``."""
    console.print()
    console.print(f"[cyan]{message}[/cyan]")


def print_item(message: str) -> None:
    """Print a dim progress line."""
    console.print(f"   [dim]{message}[/dim]")


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_command(command: str) -> None:
    """Print a command the user is expected to run by hand."""
    console.print(f"   [cyan]{command}[/cyan]", soft_wrap=True)


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()
