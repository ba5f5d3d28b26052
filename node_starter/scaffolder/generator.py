"""Main scaffolding orchestrator.

Takes a ``ProjectConfig`` and materializes the project directory:

1. validate the configuration,
2. check the template store exists,
3. check the destination does not exist,
4. generate the primary tree (local template or delegated generator) and
   apply the overlays the archetype calls for,
5. copy the cross-cutting partials,
6. ``git init`` (best-effort),
7. install dependencies (best-effort).

Steps run strictly in order.  Steps 1-5 abort the whole run on failure and
leave whatever was already written in place; steps 6-7 only warn.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

from jinja2 import TemplateError

from node_starter.config import Archetype, Complexity, ProjectConfig, Settings, validate_config
from node_starter.errors import ScaffoldEnvironmentError, ScaffoldFailure
from node_starter.package_manager import get_commands
from node_starter.utils import (
    directory_exists,
    file_exists,
    print_info,
    print_panel,
    print_step,
    print_success,
    print_summary_table,
    print_warning,
)

from .composer import compose_tree
from .external import (
    StepResult,
    create_tui,
    create_with_rsbuild,
    create_with_vite,
    init_git,
    install_dependencies,
)
from .overlays import apply_backend_overlay, apply_styling_overlay
from .templates import TemplateRenderer, TemplateStore

TSCONFIG_BASE = "tsconfig.base.json"


class ProjectGenerator:
    """Scaffolds one project described by a :class:`ProjectConfig`.

    Attributes:
        config: The project to generate.
        settings: Template store location and working directory.
        store: Path resolver for the template store.
        renderer: Jinja2 renderer shared by every composition step.
    """

    def __init__(self, config: ProjectConfig, settings: Settings | None = None) -> None:
        self.config = config
        self.settings = settings or Settings()
        self.store = TemplateStore(self.settings.templates_dir)
        self.renderer = TemplateRenderer()
        self._styling_applied = False

    @property
    def project_path(self) -> Path:
        return self.settings.project_path(self.config.name)

    # -- Public API --------------------------------------------------------

    async def generate(self) -> Path:
        """Generate the project and return its root directory.

        Raises:
            ConfigValidationError: The configuration is invalid.
            ScaffoldEnvironmentError: The template store is missing or the
                destination already exists.
            ScaffoldFailure: Composition or a delegated generator failed.
        """
        # 1-3. Preconditions; nothing is written before these pass.
        self.config = validate_config(self.config.model_dump())
        self._check_environment()

        self._print_plan()
        dest = self.project_path

        # 4. Primary tree and overlays
        print_step("Scaffolding project...")
        try:
            await self._scaffold_archetype(dest)
            # 5. Cross-cutting partials
            await self._copy_partials(dest)
        except OSError as exc:
            raise ScaffoldFailure(f"Failed to write project files: {exc}") from exc
        except TemplateError as exc:
            raise ScaffoldFailure(f"Failed to render template: {exc}") from exc
        print_success("Project scaffolded successfully")

        # 6. Version control
        if self.config.git:
            print_step("Initializing git repository...")
            self._report_best_effort(
                await init_git(dest),
                success="Git repository initialized",
                warning="Failed to initialize git repository",
            )

        # 7. Dependencies
        if self.config.install:
            pm = self.config.runtime.value
            print_step(f"Installing dependencies with {pm}...")
            self._report_best_effort(
                await install_dependencies(self.config.runtime, dest),
                success="Dependencies installed",
                warning=f"Failed to install dependencies. Run '{pm} install' manually.",
            )

        run = get_commands(self.config.runtime).run_prefix
        print_panel(f"cd {self.config.name}\n{run} dev", title="Project created!")
        return dest

    # -- Preconditions -----------------------------------------------------

    def _check_environment(self) -> None:
        if not self.store.exists():
            raise ScaffoldEnvironmentError(f"Template directory not found: {self.store.root}")
        if self.project_path.exists():
            raise ScaffoldEnvironmentError(f"Directory {self.project_path} already exists")

    def _print_plan(self) -> None:
        plan = {
            "Project": self.config.name,
            "Template": self.config.archetype.value,
        }
        if self.config.framework:
            plan["Framework"] = self.config.framework.value
        if self.config.server:
            plan["Server"] = self.config.server
        if self.config.uses_ui_library:
            plan["UI Library"] = self.config.ui.value
        plan["Runtime"] = self.config.runtime.value
        print_summary_table(plan, title="Creating project")

    # -- Archetype dispatch ------------------------------------------------

    async def _scaffold_archetype(self, dest: Path) -> None:
        archetype = self.config.archetype
        if archetype is Archetype.CLI:
            await self._scaffold_local(dest)
        elif archetype is Archetype.FRONTEND_BFF:
            await self._scaffold_frontend_bff(dest)
        elif archetype is Archetype.TUI:
            self._require(await create_tui(self.config.name, dest.parent))
            print_success("OpenTUI project created")

    async def _scaffold_local(self, dest: Path) -> None:
        context = self.config.template_context().as_template_vars()
        source = self.store.archetype_path(self.config.archetype)
        await compose_tree(source, dest, self.renderer, context)

    async def _scaffold_frontend_bff(self, dest: Path) -> None:
        config = self.config
        if config.complexity is Complexity.COMPLEX:
            print_step(f"Creating {config.framework.value} project with Rsbuild...")
            self._require(await create_with_rsbuild(config.name, config.framework, dest.parent))
            print_success("Rsbuild project created")
        else:
            print_step(f"Creating {config.framework.value} project with Vite...")
            self._require(await create_with_vite(config.name, config.framework, dest.parent))
            print_success("Vite project created")

        await apply_backend_overlay(config, dest, self.store, self.renderer)
        if config.uses_tailwind:
            await apply_styling_overlay(config, dest, self.store, self.renderer)
            self._styling_applied = True

    @staticmethod
    def _require(result: StepResult) -> None:
        """Turn a failed delegated-generator step into a fatal error."""
        if not result.ok:
            raise ScaffoldFailure(result.reason)

    # -- Partials ----------------------------------------------------------

    async def _copy_partials(self, dest: Path) -> None:
        context = self.config.template_context().as_template_vars()

        # The styling overlay composes the same partial.
        if self.config.uses_tailwind and not self._styling_applied:
            tailwind = self.store.partial_path("tailwind")
            if directory_exists(tailwind):
                await compose_tree(tailwind, dest, self.renderer, context)

        oxlint = self.store.partial_path("oxlint")
        if directory_exists(oxlint):
            await compose_tree(oxlint, dest, self.renderer, context)

        # Vite, Rsbuild and OpenTUI ship their own tsconfig.
        if self.config.archetype is Archetype.CLI:
            tsconfig_base = self.store.partial_path("tsconfig", TSCONFIG_BASE)
            if file_exists(tsconfig_base):
                await asyncio.to_thread(shutil.copy2, tsconfig_base, dest / TSCONFIG_BASE)

    # -- Reporting ---------------------------------------------------------

    @staticmethod
    def _report_best_effort(result: StepResult, *, success: str, warning: str) -> None:
        if result.ok:
            print_success(success)
        else:
            print_warning(warning)
            print_info(result.reason)


async def scaffold_project(config: ProjectConfig, settings: Settings | None = None) -> Path:
    """Convenience wrapper: ``ProjectGenerator(config, settings).generate()``."""
    return await ProjectGenerator(config, settings).generate()
