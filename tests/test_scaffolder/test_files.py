"""Tests for the file materializer (rn_scaffold.scaffolder.files).

Covers:
- Byte-identical copies, parent directory creation, unconditional overwrite
- Architecture guide copied or reported as skipped
- TemplateMissing and FilesystemError abort the remaining plan
- The bundled template set
"""

from __future__ import annotations

from pathlib import Path

import pytest

from rn_scaffold.config import FILE_PLAN, ScaffoldConfig
from rn_scaffold.errors import FilesystemError, TemplateMissing
from rn_scaffold.scaffolder import WriteReport, copy_template, write_all

pytestmark = pytest.mark.unit


class TestWriteAll:
    @pytest.mark.asyncio
    async def test_copies_verbatim(self, tmp_project_dir: Path, small_templates: Path, small_file_plan):
        reports = await write_all(small_file_plan, tmp_project_dir, small_templates, echo=False)

        for template, destination in small_file_plan:
            assert (tmp_project_dir / destination).read_bytes() == (small_templates / template).read_bytes()
        assert [r.destination for r in reports] == [
            "src/screens/home/Home.tsx",
            "App.tsx",
            "PROJECT_ARCHITECTURE.md",
        ]
        assert all(r.written for r in reports)

    @pytest.mark.asyncio
    async def test_overwrites_existing_destination(
        self, tmp_project_dir: Path, small_templates: Path, small_file_plan
    ):
        (tmp_project_dir / "App.tsx").write_text("old app", encoding="utf-8")
        await write_all(small_file_plan, tmp_project_dir, small_templates, echo=False)
        assert (tmp_project_dir / "App.tsx").read_bytes() == (
            small_templates / "root" / "App.tsx.template"
        ).read_bytes()

    @pytest.mark.asyncio
    async def test_architecture_doc_skipped_when_absent(
        self, tmp_project_dir: Path, small_templates: Path, small_file_plan
    ):
        (small_templates / "PROJECT_ARCHITECTURE.md").unlink()
        reports = await write_all(small_file_plan, tmp_project_dir, small_templates, echo=False)

        assert reports[-1] == WriteReport(
            destination="PROJECT_ARCHITECTURE.md",
            source=small_templates / "PROJECT_ARCHITECTURE.md",
            written=False,
        )
        assert "skipping" in reports[-1].message
        assert not (tmp_project_dir / "PROJECT_ARCHITECTURE.md").exists()

    @pytest.mark.asyncio
    async def test_architecture_doc_disabled(
        self, tmp_project_dir: Path, small_templates: Path, small_file_plan
    ):
        reports = await write_all(
            small_file_plan, tmp_project_dir, small_templates, architecture_doc=None, echo=False
        )
        assert len(reports) == len(small_file_plan)

    @pytest.mark.asyncio
    async def test_missing_template_aborts_remaining(self, tmp_project_dir: Path, small_templates: Path):
        plan = (
            ("screens/Home.tsx.template", "src/screens/home/Home.tsx"),
            ("screens/Nope.tsx.template", "src/screens/nope/Nope.tsx"),
            ("root/App.tsx.template", "App.tsx"),
        )
        with pytest.raises(TemplateMissing) as excinfo:
            await write_all(plan, tmp_project_dir, small_templates, echo=False)

        assert excinfo.value.path == small_templates / "screens" / "Nope.tsx.template"
        assert (tmp_project_dir / "src" / "screens" / "home" / "Home.tsx").exists()
        assert not (tmp_project_dir / "App.tsx").exists()
        assert not (tmp_project_dir / "PROJECT_ARCHITECTURE.md").exists()

    @pytest.mark.asyncio
    async def test_unwritable_destination(self, tmp_project_dir: Path, small_templates: Path):
        (tmp_project_dir / "App.tsx").mkdir()
        with pytest.raises(FilesystemError):
            await write_all(
                (("root/App.tsx.template", "App.tsx"),), tmp_project_dir, small_templates, echo=False
            )

    @pytest.mark.asyncio
    async def test_bundled_templates(self, tmp_project_dir: Path):
        config = ScaffoldConfig(project_root=tmp_project_dir)
        reports = await write_all(FILE_PLAN, tmp_project_dir, config.templates_dir, echo=False)

        assert len(reports) == len(FILE_PLAN) + 1
        for template, destination in FILE_PLAN:
            assert (tmp_project_dir / destination).read_bytes() == config.template_path(template).read_bytes()
        assert (tmp_project_dir / "PROJECT_ARCHITECTURE.md").is_file()


class TestCopyTemplate:
    def test_template_is_a_directory(self, tmp_path: Path):
        (tmp_path / "dir.template").mkdir()
        with pytest.raises(TemplateMissing):
            copy_template(tmp_path / "dir.template", tmp_path / "out.txt")

    def test_creates_parents(self, tmp_path: Path):
        source = tmp_path / "x.template"
        source.write_bytes(b"\xff\xfe binary")
        target = tmp_path / "a" / "b" / "x.ts"
        copy_template(source, target)
        assert target.read_bytes() == b"\xff\xfe binary"
