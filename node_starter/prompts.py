"""Interactive prompts for ``node-starter create`` without ``--type``."""

from __future__ import annotations

from typing import Any

from rich.prompt import Confirm, Prompt

from node_starter.config import (
    DEFAULT_PROJECT_NAME,
    Archetype,
    Complexity,
    PackageManager,
    ProjectConfig,
    validate_config,
)
from node_starter.errors import PromptCancelled
from node_starter.utils import console

ARCHETYPE_CHOICES = [
    ("cli", "Node CLI application"),
    ("frontend-bff", "Frontend with Backend-for-Frontend"),
    ("tui", "Terminal UI application"),
]

FRAMEWORK_CHOICES = [
    ("vue", "Vue - Progressive JavaScript framework"),
    ("solid", "SolidJS - Simple and performant reactivity"),
    ("lit", "Lit - Simple, fast web components"),
]

SERVER_CHOICES = [
    ("hono", "Hono - Lightweight, ultrafast web framework"),
    ("elysia", "Elysia - Ergonomic framework for Bun"),
    ("h3", "h3 - Minimal H(TTP) framework (UnJS)"),
    ("express", "Express - Classic Node.js framework"),
]

UI_CHOICES = [
    ("none", "None - No UI library"),
    ("daisyui", "daisyUI - Tailwind CSS component library"),
    ("basecoat", "basecoat - Minimal Tailwind components"),
]

COMPLEXITY_CHOICES = [
    ("simple", "Simple - Bun runtime, Vite bundler"),
    ("complex", "Complex - pnpm, Rsbuild bundler"),
]

RUNTIME_CHOICES = [
    ("bun", "bun"),
    ("pnpm", "pnpm"),
]


def select(question: str, options: list[tuple[str, str]]) -> str:
    """Show *options* and ask for one of their values; the first is the default."""
    console.print(f"[bold]{question}[/bold]")
    for value, label in options:
        console.print(f"  [cyan]{value}[/cyan]  [dim]{label}[/dim]")
    values = [value for value, _ in options]
    return Prompt.ask("Choose", choices=values, default=values[0], console=console)


def run_interactive_prompts(initial_name: str | None = None) -> ProjectConfig:
    """Ask for every setting and return the validated configuration.

    Raises:
        PromptCancelled: If the user hits Ctrl-C or closes stdin.
    """
    try:
        answers = _ask(initial_name)
    except (KeyboardInterrupt, EOFError) as exc:
        raise PromptCancelled("Project creation cancelled") from exc
    return validate_config(answers)


def _ask(initial_name: str | None) -> dict[str, Any]:
    name = initial_name or Prompt.ask(
        "Project name", default=DEFAULT_PROJECT_NAME, console=console
    )
    archetype = select("Template type:", ARCHETYPE_CHOICES)

    answers: dict[str, Any] = {"name": name, "archetype": archetype}
    runtime = PackageManager.BUN.value

    if archetype == Archetype.FRONTEND_BFF.value:
        answers["framework"] = select("Frontend framework:", FRAMEWORK_CHOICES)
        answers["server"] = select("BFF server framework:", SERVER_CHOICES)
        answers["ui"] = select("UI library:", UI_CHOICES)
        answers["complexity"] = select("Project complexity:", COMPLEXITY_CHOICES)
        if answers["complexity"] == Complexity.COMPLEX.value:
            runtime = PackageManager.PNPM.value

    if Confirm.ask("Override default runtime?", default=False, console=console):
        runtime = select("Select runtime:", RUNTIME_CHOICES)
    answers["runtime"] = runtime

    answers["git"] = Confirm.ask("Initialize git repository?", default=True, console=console)
    answers["install"] = Confirm.ask("Install dependencies?", default=True, console=console)
    return answers
