"""Tests for tree composition (node_starter.scaffolder.composer)."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from node_starter.errors import ScaffoldFailure, SourceNotFound
from node_starter.scaffolder.composer import compose_tree
from node_starter.scaffolder.templates import TemplateRenderer

pytestmark = pytest.mark.unit


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """A small template tree exercising every composition rule."""
    src = tmp_path / "src-tree"
    (src / "lib" / "nested").mkdir(parents=True)
    (src / "{{ ignored }}.j2").mkdir()
    (src / "plain.txt").write_text("raw {{ project_name }}\n", encoding="utf-8")
    (src / "README.md.j2").write_text("# {{ project_name }}\n", encoding="utf-8")
    (src / "vue-only.ts.j2").write_text(
        "{% if framework == 'vue' %}\nexport const vue = true;\n{% endif %}\n", encoding="utf-8"
    )
    (src / "blank.txt.j2").write_text("   \n\n", encoding="utf-8")
    (src / "lib" / "nested" / "util.ts.j2").write_text(
        "export const name = '{{ project_name }}';\n", encoding="utf-8"
    )
    (src / "lib" / "logo.bin").write_bytes(bytes(range(256)))
    script = src / "run.sh"
    script.write_text("#!/bin/sh\necho hi\n", encoding="utf-8")
    script.chmod(0o755)
    return src


async def test_renders_and_strips_marker(source_tree: Path, tmp_path: Path, renderer: TemplateRenderer):
    dest = tmp_path / "out"
    await compose_tree(source_tree, dest, renderer, {"project_name": "app1"})

    assert (dest / "README.md").read_text(encoding="utf-8") == "# app1\n"
    assert not (dest / "README.md.j2").exists()
    assert (dest / "lib" / "nested" / "util.ts").read_text(encoding="utf-8") == (
        "export const name = 'app1';\n"
    )


async def test_plain_files_copied_verbatim(source_tree: Path, tmp_path: Path, renderer: TemplateRenderer):
    dest = tmp_path / "out"
    await compose_tree(source_tree, dest, renderer, {"project_name": "app1"})

    assert (dest / "plain.txt").read_text(encoding="utf-8") == "raw {{ project_name }}\n"
    assert (dest / "lib" / "logo.bin").read_bytes() == bytes(range(256))


async def test_file_mode_preserved(source_tree: Path, tmp_path: Path, renderer: TemplateRenderer):
    dest = tmp_path / "out"
    await compose_tree(source_tree, dest, renderer, {"project_name": "app1"})
    assert os.stat(dest / "run.sh").st_mode & stat.S_IXUSR


@pytest.mark.parametrize(
    "context",
    [{}, {"framework": "solid"}, {"framework": "lit", "project_name": "x"}],
)
async def test_empty_render_produces_no_file(
    source_tree: Path, tmp_path: Path, renderer: TemplateRenderer, context: dict
):
    dest = tmp_path / "out"
    context = {"project_name": "app1", **context}
    await compose_tree(source_tree, dest, renderer, context)
    assert not (dest / "vue-only.ts").exists()
    assert not (dest / "blank.txt").exists()


async def test_conditional_file_written_when_selected(
    source_tree: Path, tmp_path: Path, renderer: TemplateRenderer
):
    dest = tmp_path / "out"
    await compose_tree(source_tree, dest, renderer, {"project_name": "a", "framework": "vue"})
    assert (dest / "vue-only.ts").read_text(encoding="utf-8") == "export const vue = true;\n"


async def test_directory_marker_stripped(source_tree: Path, tmp_path: Path, renderer: TemplateRenderer):
    dest = tmp_path / "out"
    await compose_tree(source_tree, dest, renderer, {"project_name": "a"})
    assert (dest / "{{ ignored }}").is_dir()


async def test_returns_written_paths(source_tree: Path, tmp_path: Path, renderer: TemplateRenderer):
    dest = tmp_path / "out"
    written = await compose_tree(source_tree, dest, renderer, {"project_name": "a"})
    relative = {p.relative_to(dest).as_posix() for p in written}
    assert relative == {
        "README.md",
        "plain.txt",
        "run.sh",
        "lib/logo.bin",
        "lib/nested/util.ts",
    }


async def test_creates_missing_parents(source_tree: Path, tmp_path: Path, renderer: TemplateRenderer):
    dest = tmp_path / "deep" / "er" / "out"
    await compose_tree(source_tree, dest, renderer, {"project_name": "a"})
    assert (dest / "README.md").is_file()


async def test_overwrites_existing_files(source_tree: Path, tmp_path: Path, renderer: TemplateRenderer):
    dest = tmp_path / "out"
    dest.mkdir()
    (dest / "README.md").write_text("old\n", encoding="utf-8")
    (dest / "keep.txt").write_text("untouched\n", encoding="utf-8")

    await compose_tree(source_tree, dest, renderer, {"project_name": "new"})

    assert (dest / "README.md").read_text(encoding="utf-8") == "# new\n"
    assert (dest / "keep.txt").read_text(encoding="utf-8") == "untouched\n"


async def test_source_is_not_modified(source_tree: Path, tmp_path: Path, renderer: TemplateRenderer):
    before = sorted(p.relative_to(source_tree).as_posix() for p in source_tree.rglob("*"))
    await compose_tree(source_tree, tmp_path / "out", renderer, {"project_name": "a"})
    after = sorted(p.relative_to(source_tree).as_posix() for p in source_tree.rglob("*"))
    assert before == after


async def test_missing_source_raises(tmp_path: Path, renderer: TemplateRenderer):
    with pytest.raises(SourceNotFound) as exc_info:
        await compose_tree(tmp_path / "nope", tmp_path / "out", renderer, {})
    assert isinstance(exc_info.value, ScaffoldFailure)
    assert exc_info.value.path == tmp_path / "nope"
    assert not (tmp_path / "out").exists()
