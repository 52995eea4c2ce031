"""Verbatim template copying.

Templates are opaque: each one is read as raw bytes and written unchanged to
its destination. Overwrite authorization is obtained once by the orchestrator,
so every destination is overwritten unconditionally here.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ..errors import FilesystemError, TemplateMissing
from ..utils import print_item, print_warning


@dataclass(frozen=True)
class WriteReport:
    """Result of copying one template."""

    destination: str
    source: Path
    written: bool = True

    @property
    def message(self) -> str:
        if self.written:
            return f"✓ Created {self.destination}"
        return f"⚠ {self.destination} template not found, skipping"


async def write_all(
    plan: Sequence[tuple[str, str]],
    project_root: str | Path,
    templates_dir: str | Path,
    *,
    architecture_doc: str | None = "PROJECT_ARCHITECTURE.md",
    echo: bool = True,
) -> list[WriteReport]:
    """Copy every ``(template, destination)`` pair of *plan*.

    Args:
        plan: Template names (relative to *templates_dir*) paired with
            destinations (relative to *project_root*).
        project_root: Root of the host project.
        templates_dir: Directory holding the bundled templates.
        architecture_doc: Optional guide copied to the project root after the
            plan. A missing source is reported as skipped. ``None`` disables it.
        echo: Print a progress line per file.

    Returns:
        One report per plan entry in order, plus one for the architecture
        guide when enabled.

    Raises:
        TemplateMissing: If a planned template does not exist.
        FilesystemError: If a destination cannot be written.
    """
    root = Path(project_root)
    templates = Path(templates_dir)
    reports: list[WriteReport] = []

    for template_name, destination in plan:
        source = templates / template_name
        target = root / destination
        await asyncio.to_thread(copy_template, source, target)

        report = WriteReport(destination=destination, source=source)
        reports.append(report)
        if echo:
            print_item(report.message)

    if architecture_doc:
        source = templates / architecture_doc
        if source.is_file():
            await asyncio.to_thread(copy_template, source, root / architecture_doc)
            report = WriteReport(destination=architecture_doc, source=source)
            if echo:
                print_item(report.message)
        else:
            report = WriteReport(destination=architecture_doc, source=source, written=False)
            if echo:
                print_warning(f"   {report.message}")
        reports.append(report)

    return reports


def copy_template(source: Path, target: Path) -> None:
    """Synchronous helper: read *source* bytes and write them to *target*."""
    try:
        content = source.read_bytes()
    except FileNotFoundError as exc:
        raise TemplateMissing(source) from exc
    except IsADirectoryError as exc:
        raise TemplateMissing(source) from exc

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
    except OSError as exc:
        raise FilesystemError(target, exc.strerror or str(exc)) from exc
