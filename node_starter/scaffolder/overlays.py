"""Optional overlays applied on top of a generated frontend project.

* Backend overlay: a Backend-for-Frontend server tree plus its dependencies
  and the ``server``/``start`` scripts.
* Styling overlay: Tailwind CSS config, dependencies, and the Tailwind
  directives prepended to the project's main stylesheet.

The backend overlay composes its partial before merging ``package.json``;
the styling overlay merges first, so a project without a manifest is left
untouched.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from node_starter.config import DEFAULT_SERVER, ProjectConfig, Server, UiLibrary
from node_starter.package_manager import get_commands
from node_starter.utils import directory_exists, file_exists, print_step, print_success, print_warning

from .composer import compose_tree
from .manifest import MANIFEST_NAME, ManifestPatch, merge_into
from .templates import TemplateRenderer, TemplateStore

# ---------------------------------------------------------------------------
# Backend (BFF) lookup tables
# ---------------------------------------------------------------------------

SERVER_DEPENDENCIES: dict[Server, dict[str, str]] = {
    Server.HONO: {"hono": "^4.6.14"},
    Server.ELYSIA: {"elysia": "^1.1.0", "@elysiajs/cors": "^1.1.0"},
    Server.H3: {"h3": "^1.13.0"},
    Server.EXPRESS: {"express": "^4.21.0", "cors": "^2.8.5"},
}

SERVER_DEV_DEPENDENCIES: dict[Server, dict[str, str]] = {
    Server.HONO: {},
    Server.ELYSIA: {},
    Server.H3: {},
    Server.EXPRESS: {"@types/express": "^5.0.0", "@types/cors": "^2.8.17"},
}

ORCHESTRATION_DEV_DEPENDENCIES = {"concurrently": "^9.1.0"}

SERVER_SCRIPT = "bun run server/index.ts"

# ---------------------------------------------------------------------------
# Styling lookup tables
# ---------------------------------------------------------------------------

TAILWIND_DEV_DEPENDENCIES = {
    "tailwindcss": "^3.4.16",
    "postcss": "^8.4.49",
    "autoprefixer": "^10.4.20",
}

UI_LIBRARY_DEV_DEPENDENCIES: dict[UiLibrary, dict[str, str]] = {
    UiLibrary.DAISYUI: {"daisyui": "^4.12.14"},
    UiLibrary.BASECOAT: {},
    UiLibrary.NONE: {},
}

# Checked in order; only the first one found is modified.
STYLESHEET_CANDIDATES = ("src/style.css", "src/index.css", "src/App.css")

TAILWIND_DIRECTIVES = "@tailwind base;\n@tailwind components;\n@tailwind utilities;\n\n"


def resolve_server(name: str | None) -> Server | None:
    """Return the :class:`Server` called *name*, or ``None`` if unknown."""
    try:
        return Server(name or DEFAULT_SERVER.value)
    except ValueError:
        return None


def start_script(config: ProjectConfig) -> str:
    run = get_commands(config.runtime).run_prefix
    return f'concurrently "{run} dev" "{run} server"'


async def apply_backend_overlay(
    config: ProjectConfig,
    dest: Path,
    store: TemplateStore,
    renderer: TemplateRenderer,
) -> Server:
    """Add the BFF server for ``config.server`` to the project at *dest*.

    Unknown servers, and known servers without a partial tree, fall back to
    the default server with a warning.

    Returns:
        The server whose tree and dependencies were applied.
    """
    requested = config.server or DEFAULT_SERVER.value
    print_step(f"Adding BFF server ({requested})...")

    server = resolve_server(requested)
    if server is None or not directory_exists(store.partial_path("bff", server.value)):
        print_warning(
            f"Server template for {requested} not found, using {DEFAULT_SERVER.value}"
        )
        server = DEFAULT_SERVER

    context = config.template_context().as_template_vars()
    await compose_tree(store.partial_path("bff", server.value), dest, renderer, context)

    patch = ManifestPatch(
        dependencies=dict(SERVER_DEPENDENCIES[server]),
        dev_dependencies={**ORCHESTRATION_DEV_DEPENDENCIES, **SERVER_DEV_DEPENDENCIES[server]},
        scripts={"server": SERVER_SCRIPT, "start": start_script(config)},
    )
    await merge_into(dest / MANIFEST_NAME, patch)

    print_success(f"BFF server ({server.value}) added")
    return server


async def apply_styling_overlay(
    config: ProjectConfig,
    dest: Path,
    store: TemplateStore,
    renderer: TemplateRenderer,
) -> Path | None:
    """Add Tailwind CSS to the project at *dest*.

    Returns:
        The stylesheet that received the Tailwind directives, if any.
    """
    print_step("Adding Tailwind CSS...")

    dev_dependencies = dict(TAILWIND_DEV_DEPENDENCIES)
    if config.ui is not None:
        dev_dependencies.update(UI_LIBRARY_DEV_DEPENDENCIES[config.ui])
    await merge_into(dest / MANIFEST_NAME, ManifestPatch(dev_dependencies=dev_dependencies))

    context = config.template_context().as_template_vars()
    await compose_tree(store.partial_path("tailwind"), dest, renderer, context)

    stylesheet = await inject_tailwind_directives(dest)

    print_success("Tailwind CSS added")
    return stylesheet


async def inject_tailwind_directives(dest: Path) -> Path | None:
    """Prepend the Tailwind directives to the first stylesheet found."""
    for candidate in STYLESHEET_CANDIDATES:
        css_path = dest / candidate
        if file_exists(css_path):
            existing = await asyncio.to_thread(css_path.read_text, encoding="utf-8")
            await asyncio.to_thread(
                css_path.write_text, TAILWIND_DIRECTIVES + existing, encoding="utf-8"
            )
            return css_path
    return None
