"""Directory materialization for the scaffold layout."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ..errors import FilesystemError
from ..utils import ensure_dir, print_item


@dataclass(frozen=True)
class CreationReport:
    """One planned directory after it has been ensured."""

    path: str
    existed: bool = False

    @property
    def message(self) -> str:
        return f"✓ Created {self.path}"


async def ensure_all(
    plan: Sequence[str],
    project_root: str | Path,
    *,
    echo: bool = True,
) -> list[CreationReport]:
    """Ensure every directory in *plan* exists under *project_root*.

    Directories are created one at a time in plan order, parents included.
    Already-present directories are still reported, so the report always has
    one entry per planned path.

    Raises:
        FilesystemError: If a path cannot be created (permission denied, or a
            regular file occupies it). Directories created before the failure
            are left in place.
    """
    root = Path(project_root)
    reports: list[CreationReport] = []

    for rel in plan:
        target = root / rel
        try:
            existed = await asyncio.to_thread(ensure_dir, target)
        except OSError as exc:
            raise FilesystemError(target, exc.strerror or str(exc)) from exc

        report = CreationReport(path=rel, existed=existed)
        reports.append(report)
        if echo:
            print_item(report.message)

    return reports
