"""node-starter configuration.

Typed, validated description of the project to generate.  All settings use
Pydantic v2 models so they are validated once at construction time and then
passed, immutable, through the rest of the system.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from node_starter.errors import ConfigValidationError

# ---------------------------------------------------------------------------
# Closed enumerations
# ---------------------------------------------------------------------------


class Archetype(str, Enum):
    CLI = "cli"
    FRONTEND_BFF = "frontend-bff"
    TUI = "tui"


class Framework(str, Enum):
    VUE = "vue"
    SOLID = "solid"
    LIT = "lit"


class Server(str, Enum):
    HONO = "hono"
    ELYSIA = "elysia"
    H3 = "h3"
    EXPRESS = "express"


class UiLibrary(str, Enum):
    DAISYUI = "daisyui"
    BASECOAT = "basecoat"
    NONE = "none"


class Complexity(str, Enum):
    SIMPLE = "simple"
    COMPLEX = "complex"


class PackageManager(str, Enum):
    BUN = "bun"
    PNPM = "pnpm"
    NPM = "npm"


DEFAULT_PROJECT_NAME = "my-project"
DEFAULT_FRAMEWORK = Framework.VUE
DEFAULT_SERVER = Server.HONO

# UI libraries that are built on Tailwind CSS.
TAILWIND_UI_LIBRARIES = frozenset({UiLibrary.DAISYUI, UiLibrary.BASECOAT})

_DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"


def check_project_name(value: str) -> str:
    """Return *value* stripped, or raise ``ValueError`` unless it is a single
    directory name below the working directory."""
    value = value.strip()
    if not value:
        raise ValueError("project name must not be empty")
    if value in (".", "..") or "/" in value or "\\" in value:
        raise ValueError(f"project name must be a single directory name, got {value!r}")
    return value


# ---------------------------------------------------------------------------
# Project configuration
# ---------------------------------------------------------------------------


class ProjectConfig(BaseModel):
    """The resolved description of the project to generate.

    ``framework``, ``server``, ``ui`` and ``complexity`` only apply to the
    ``frontend-bff`` archetype.  For every other archetype they are ``None``
    ("not applicable") whatever the caller passed; for ``frontend-bff`` the
    missing ones are filled with their defaults.  ``server`` stays a plain
    string so that an unknown server can reach the backend overlay, which
    falls back to hono.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Project directory and package name")
    archetype: Archetype = Field(..., description="Top-level project kind")
    framework: Framework | None = Field(default=None, description="Frontend framework")
    server: str | None = Field(default=None, description="BFF server framework")
    ui: UiLibrary | None = Field(default=None, description="UI library")
    complexity: Complexity | None = Field(default=None, description="Bundler/runtime tier")
    runtime: PackageManager = Field(default=PackageManager.BUN, description="Package manager")
    git: bool = Field(default=True, description="Initialise a git repository")
    install: bool = Field(default=True, description="Install dependencies")

    @model_validator(mode="before")
    @classmethod
    def _apply_archetype_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = {k: v for k, v in data.items() if v is not None}
        if data.get("archetype") in (Archetype.FRONTEND_BFF, Archetype.FRONTEND_BFF.value):
            data.setdefault("framework", DEFAULT_FRAMEWORK)
            data.setdefault("server", DEFAULT_SERVER.value)
            data.setdefault("ui", UiLibrary.NONE)
            data.setdefault("complexity", Complexity.SIMPLE)
            complex_tier = data["complexity"] in (Complexity.COMPLEX, Complexity.COMPLEX.value)
            data.setdefault("runtime", PackageManager.PNPM if complex_tier else PackageManager.BUN)
        else:
            for key in ("framework", "server", "ui", "complexity"):
                data.pop(key, None)
        return data

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return check_project_name(value)

    @field_validator("server")
    @classmethod
    def _normalise_server(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip().lower() or None

    @property
    def uses_tailwind(self) -> bool:
        return self.ui in TAILWIND_UI_LIBRARIES

    @property
    def uses_ui_library(self) -> bool:
        return self.ui is not None and self.ui is not UiLibrary.NONE

    def template_context(self) -> "TemplateContext":
        """Build the renderer-facing view of this configuration."""
        return TemplateContext(
            project_name=self.name,
            framework=self.framework.value if self.framework else None,
            server=self.server,
            ui=self.ui.value if self.ui else None,
            runtime=self.runtime.value,
            complexity=self.complexity.value if self.complexity else None,
            uses_tailwind=self.uses_tailwind,
            uses_ui_library=self.uses_ui_library,
        )


class TemplateContext(BaseModel):
    """Variables available to every template during one scaffold."""

    model_config = ConfigDict(frozen=True)

    project_name: str
    framework: str | None = None
    server: str | None = None
    ui: str | None = None
    runtime: str | None = None
    complexity: str | None = None
    uses_tailwind: bool = False
    uses_ui_library: bool = False

    def as_template_vars(self) -> dict[str, Any]:
        """Return the context as a plain dict, omitting unset optional fields
        so that templates see them as undefined."""
        return self.model_dump(exclude_none=True)


def validate_config(raw: dict[str, Any]) -> ProjectConfig:
    """Build a :class:`ProjectConfig` from loosely-typed values (CLI flags or
    prompt answers).

    Raises:
        ConfigValidationError: With one line per offending field.
    """
    try:
        return ProjectConfig.model_validate(raw)
    except ValidationError as exc:
        problems = []
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"]) or "config"
            problems.append(f"{field}: {error['msg']}")
        raise ConfigValidationError("Invalid project configuration:\n  " + "\n  ".join(problems)) from exc


def validate_project_name(name: str) -> str:
    """:func:`check_project_name` for callers that skip :class:`ProjectConfig`.

    Raises:
        ConfigValidationError: If *name* is not a single directory name.
    """
    try:
        return check_project_name(name)
    except ValueError as exc:
        raise ConfigValidationError(f"Invalid project configuration:\n  name: {exc}") from exc


# ---------------------------------------------------------------------------
# Runtime settings
# ---------------------------------------------------------------------------


class Settings(BaseModel):
    """Where templates are read from and where projects are written."""

    templates_dir: Path = Field(default=_DEFAULT_TEMPLATES_DIR)
    cwd: Path = Field(default_factory=Path.cwd)

    def project_path(self, name: str) -> Path:
        """Destination directory for a project called *name*."""
        return self.cwd / name

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            NODE_STARTER_TEMPLATES_DIR, NODE_STARTER_CWD.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("NODE_STARTER_TEMPLATES_DIR"):
            kwargs["templates_dir"] = Path(os.environ["NODE_STARTER_TEMPLATES_DIR"])
        if os.environ.get("NODE_STARTER_CWD"):
            kwargs["cwd"] = Path(os.environ["NODE_STARTER_CWD"])
        return cls(**kwargs)
