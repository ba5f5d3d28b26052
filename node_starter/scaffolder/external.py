"""Delegation to external tools.

Each step runs exactly one subprocess and reports a :class:`StepResult`.
Steps never raise for a failing tool; the caller decides whether a failed
result aborts the scaffold (delegated generators) or only warrants a warning
(git init, dependency install).
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

from node_starter.config import DEFAULT_FRAMEWORK, Framework, PackageManager
from node_starter.package_manager import get_commands
from node_starter.utils import run_command

# ---------------------------------------------------------------------------
# Framework -> generator template lookups
# ---------------------------------------------------------------------------

VITE_TEMPLATES: dict[Framework, str] = {
    Framework.VUE: "vue-ts",
    Framework.SOLID: "solid-ts",
    Framework.LIT: "lit-ts",
}

RSBUILD_TEMPLATES: dict[Framework, str] = {
    Framework.VUE: "vue-ts",
    Framework.SOLID: "solid-ts",
    Framework.LIT: "lit-ts",
}


class StepResult(BaseModel):
    """Outcome of one external step."""

    name: str
    ok: bool
    reason: str = ""


async def run_step(name: str, cmd: list[str], cwd: str | Path) -> StepResult:
    """Run *cmd* in *cwd* and wrap its exit status in a :class:`StepResult`."""
    returncode, stdout, stderr = await run_command(cmd, cwd=cwd)
    if returncode == 0:
        return StepResult(name=name, ok=True)
    detail = stderr or stdout or f"exit code {returncode}"
    return StepResult(name=name, ok=False, reason=f"`{' '.join(cmd)}` failed: {detail}")


# ---------------------------------------------------------------------------
# Delegated generators
# ---------------------------------------------------------------------------


async def create_with_vite(name: str, framework: Framework | None, parent: Path) -> StepResult:
    template = VITE_TEMPLATES[framework or DEFAULT_FRAMEWORK]
    return await run_step(
        "vite", ["bun", "create", "vite", name, "--template", template], cwd=parent
    )


async def create_with_rsbuild(name: str, framework: Framework | None, parent: Path) -> StepResult:
    template = RSBUILD_TEMPLATES[framework or DEFAULT_FRAMEWORK]
    return await run_step(
        "rsbuild", ["bun", "create", "rsbuild@latest", name, "--template", template], cwd=parent
    )


async def create_tui(name: str, parent: Path) -> StepResult:
    return await run_step("opentui", ["bun", "create", "tui", name], cwd=parent)


# ---------------------------------------------------------------------------
# Best-effort steps
# ---------------------------------------------------------------------------


async def init_git(project_path: Path) -> StepResult:
    return await run_step("git", ["git", "init"], cwd=project_path)


async def install_dependencies(pm: PackageManager, project_path: Path) -> StepResult:
    return await run_step("install", get_commands(pm).install, cwd=project_path)
