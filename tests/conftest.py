"""Shared pytest fixtures for the rn-scaffold test suite.

Provides reusable fixtures for:
- Temporary project directories and ``package.json`` writers
- Scripted yes/no prompts that record every question
- Fake package-manager runners that record invocations
- Small template directories and a ready-made ``ScaffoldConfig``
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from rn_scaffold.config import ScaffoldConfig


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Temporary host project directory (auto-cleanup)."""
    project_dir = tmp_path / "MyApp"
    project_dir.mkdir()
    yield project_dir


@pytest.fixture
def write_manifest(tmp_project_dir: Path):
    """Factory that writes ``package.json`` into the temporary project.

    Usage:
        def test_x(write_manifest):
            write_manifest(dependencies={"react-native": "0.74.0"})
    """
    def factory(
        dependencies: dict[str, str] | None = None,
        dev_dependencies: dict[str, str] | None = None,
        **extra: Any,
    ) -> Path:
        data: dict[str, Any] = {"name": "my-app", "version": "0.0.1", **extra}
        if dependencies is not None:
            data["dependencies"] = dependencies
        if dev_dependencies is not None:
            data["devDependencies"] = dev_dependencies
        path = tmp_project_dir / "package.json"
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return path

    return factory


# ---------------------------------------------------------------------------
# Prompt and process doubles
# ---------------------------------------------------------------------------

class ScriptedPrompt:
    """Answers yes/no questions from a keyword table.

    A question is matched against *answers* by substring; unmatched questions
    get their stated default. Every question is recorded in ``asked``.
    """

    def __init__(self, answers: dict[str, bool] | None = None) -> None:
        self.answers = answers or {}
        self.asked: list[tuple[str, bool]] = []

    def __call__(self, question: str, default: bool) -> bool:
        self.asked.append((question, default))
        for keyword, answer in self.answers.items():
            if keyword in question:
                return answer
        return default

    def was_asked(self, keyword: str) -> bool:
        return any(keyword in question for question, _ in self.asked)


class FakeRunner:
    """Stands in for the package manager; records ``(command, cwd)`` calls."""

    def __init__(
        self,
        returncode: int = 0,
        error: str = "",
        raises: BaseException | None = None,
        on_run=None,
    ) -> None:
        self.returncode = returncode
        self.error = error
        self.raises = raises
        self.on_run = on_run
        self.calls: list[tuple[list[str], Path]] = []

    async def __call__(self, command: list[str], cwd: Path) -> tuple[int, str]:
        self.calls.append((list(command), Path(cwd)))
        if self.raises is not None:
            raise self.raises
        if self.on_run is not None:
            self.on_run(command, cwd)
        return self.returncode, self.error


@pytest.fixture
def scripted_prompt():
    """Factory for :class:`ScriptedPrompt` instances."""
    return ScriptedPrompt


@pytest.fixture
def fake_runner():
    """Factory for :class:`FakeRunner` instances."""
    return FakeRunner


# ---------------------------------------------------------------------------
# Templates and config
# ---------------------------------------------------------------------------

@pytest.fixture
def small_templates(tmp_path: Path) -> Path:
    """A template directory with two templates and an architecture guide."""
    root = tmp_path / "templates"
    (root / "screens").mkdir(parents=True)
    (root / "screens" / "Home.tsx.template").write_text(
        "export const Home = () => null;\n", encoding="utf-8"
    )
    (root / "root").mkdir()
    (root / "root" / "App.tsx.template").write_bytes(b"// App\r\nexport default {};\n\x00")
    (root / "PROJECT_ARCHITECTURE.md").write_text("# Architecture\n", encoding="utf-8")
    return root


@pytest.fixture
def small_file_plan() -> tuple[tuple[str, str], ...]:
    return (
        ("screens/Home.tsx.template", "src/screens/home/Home.tsx"),
        ("root/App.tsx.template", "App.tsx"),
    )


@pytest.fixture
def scaffold_config(tmp_project_dir: Path) -> ScaffoldConfig:
    """Default configuration rooted at the temporary project, bundled templates."""
    return ScaffoldConfig(project_root=tmp_project_dir)
