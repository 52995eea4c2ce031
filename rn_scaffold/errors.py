"""Exception hierarchy for the scaffold run.

Fatal errors (``ManifestParseError``, ``FilesystemError``, ``TemplateMissing``)
propagate to the orchestrator and end the run with a non-zero exit code.
``ManifestNotFound`` degrades project detection, and ``InstallProcessError`` is
always converted into a dependency report instead of escaping.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for every error raised by rn-scaffold."""


class ManifestNotFound(ScaffoldError):
    """Raised when the project has no ``package.json``."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"No package.json found at {path}")


class ManifestParseError(ScaffoldError):
    """Raised when ``package.json`` exists but is not a well-formed manifest."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid package.json at {path}: {reason}")


class FilesystemError(ScaffoldError):
    """Raised when a planned directory or file cannot be created."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write {path}: {reason}")


class TemplateMissing(ScaffoldError):
    """Raised when a template listed in the file plan is not bundled."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Template not found: {path}")


class InstallProcessError(ScaffoldError):
    """Raised when the package-manager command cannot be run or exits non-zero."""

    def __init__(self, message: str, command: str = "", returncode: int | None = None) -> None:
        self.command = command
        self.returncode = returncode
        super().__init__(message)
