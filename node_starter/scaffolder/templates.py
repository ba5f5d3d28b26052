"""Template store layout and Jinja2 rendering.

The template store is a read-only directory with one sub-tree per archetype
plus a ``_partials`` tree of overlay fragments::

    templates/
        cli/
        _partials/
            bff/<server>/
            oxlint/
            tailwind/
            tsconfig/

Files ending in ``.j2`` are rendered through :class:`TemplateRenderer`;
everything else is copied verbatim.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Any

from jinja2 import ChainableUndefined, Environment
from pydantic import BaseModel

from node_starter.config import Archetype, Framework, Server

TEMPLATE_SUFFIX = ".j2"
PARTIALS_DIRNAME = "_partials"


# ---------------------------------------------------------------------------
# TemplateStore
# ---------------------------------------------------------------------------


class TemplateStore:
    """Resolves paths inside a template store rooted at *root*."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def exists(self) -> bool:
        return self.root.is_dir()

    def archetype_path(self, archetype: Archetype) -> Path:
        return self.root / archetype.value

    def partial_path(self, *parts: str) -> Path:
        """Path of a partial, e.g. ``partial_path("bff", "hono")``."""
        return self.root.joinpath(PARTIALS_DIRNAME, *parts)


# ---------------------------------------------------------------------------
# Archetype catalogue
# ---------------------------------------------------------------------------


class TemplateInfo(BaseModel):
    """One entry of the archetype catalogue shown by ``node-starter list``."""

    name: str
    description: str
    frameworks: list[str] | None = None
    servers: list[str] | None = None
    runtime: str | None = None


def get_available_templates() -> list[TemplateInfo]:
    """Return the archetype catalogue."""
    return [
        TemplateInfo(
            name=Archetype.CLI.value,
            description="Node CLI application with citty",
            runtime="bun",
        ),
        TemplateInfo(
            name=Archetype.FRONTEND_BFF.value,
            description="Frontend application with Backend-for-Frontend",
            frameworks=[f.value for f in Framework],
            servers=[s.value for s in Server],
            runtime="bun (simple) / pnpm (complex)",
        ),
        TemplateInfo(
            name=Archetype.TUI.value,
            description="Terminal UI application with opentui",
            runtime="bun",
        ),
    ]


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders template text against a context dictionary.

    Rendering is pure: the same text and context always give the same output.
    Variables missing from the context render as empty strings, including
    attribute access and filters applied to them (``{{ framework.name }}``,
    ``{{ server | slugify }}``).
    """

    def __init__(self) -> None:
        self.env = Environment(
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=ChainableUndefined,
        )
        # Register custom filters
        self.env.filters["slugify"] = _slugify_filter
        self.env.filters["pascal_case"] = _pascal_case_filter

    def render(self, text: str, context: dict[str, Any]) -> str:
        """Render template *text* with the provided context."""
        template = self.env.from_string(text)
        return template.render(**context)

    async def render_file(self, path: str | Path, context: dict[str, Any]) -> str:
        """Read the template at *path* and render it."""
        text = await asyncio.to_thread(Path(path).read_text, encoding="utf-8")
        return self.render(text, context)


def strip_template_suffix(name: str) -> str:
    """``"package.json.j2"`` -> ``"package.json"``; other names unchanged."""
    if name.endswith(TEMPLATE_SUFFIX):
        return name[: -len(TEMPLATE_SUFFIX)]
    return name


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _slugify_filter(value: Any) -> str:
    """Convert a string to a package-name-safe slug."""
    if not value:
        return ""
    slug = re.sub(r"[^a-z0-9]+", "-", str(value).lower().strip())
    return slug.strip("-")


def _pascal_case_filter(value: Any) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    if not value:
        return ""
    parts = re.split(r"[-_\s]+", str(value))
    return "".join(word.capitalize() for word in parts if word)
