"""Shared pytest fixtures for the node-starter test suite.

Provides reusable fixtures for:
- The packaged template store and an isolated working directory
- A fake Vite/Rsbuild output tree for overlay tests
- Mocked subprocess execution for external steps
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from node_starter.config import Settings
from node_starter.scaffolder.templates import TemplateRenderer, TemplateStore

PACKAGED_TEMPLATES = Path(__file__).resolve().parent.parent / "node_starter" / "templates"


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------


@pytest.fixture
def templates_dir() -> Path:
    """The template store shipped with the package."""
    assert PACKAGED_TEMPLATES.is_dir(), f"Template store not found at {PACKAGED_TEMPLATES}"
    return PACKAGED_TEMPLATES


@pytest.fixture
def store(templates_dir: Path) -> TemplateStore:
    return TemplateStore(templates_dir)


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Empty directory standing in for the user's current directory."""
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def settings(templates_dir: Path, workdir: Path) -> Settings:
    return Settings(templates_dir=templates_dir, cwd=workdir)


# ---------------------------------------------------------------------------
# Generated frontend projects
# ---------------------------------------------------------------------------


def write_frontend_project(root: Path, name: str = "app") -> Path:
    """Write the minimal tree a Vite generator leaves behind."""
    (root / "src").mkdir(parents=True, exist_ok=True)
    manifest: dict[str, Any] = {
        "name": name,
        "private": True,
        "version": "0.0.0",
        "type": "module",
        "scripts": {"dev": "vite", "build": "vite build", "preview": "vite preview"},
        "dependencies": {"vue": "^3.5.13"},
        "devDependencies": {"vite": "^6.0.5", "typescript": "~5.6.2"},
    }
    (root / "package.json").write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    (root / "src" / "style.css").write_text(":root {\n  color: #213547;\n}\n", encoding="utf-8")
    (root / "src" / "main.ts").write_text("import './style.css'\n", encoding="utf-8")
    return root


@pytest.fixture
def frontend_project(tmp_path: Path) -> Path:
    """A fake Vite project directory with ``package.json`` and ``src/style.css``."""
    return write_frontend_project(tmp_path / "app")


@pytest.fixture
def make_frontend_project():
    """Factory fixture: ``make_frontend_project(root, name)``."""
    return write_frontend_project


# ---------------------------------------------------------------------------
# Subprocess mocking
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_run_command():
    """Patch the subprocess runner used by external steps to always succeed.

    Yields the ``AsyncMock`` so tests can inspect the commands issued.
    """
    mock = AsyncMock(return_value=(0, "", ""))
    with patch("node_starter.scaffolder.external.run_command", new=mock):
        yield mock
