"""Command-line interface for node-starter.

Usage::

    node-starter create my-app --type cli
    node-starter create my-app --type frontend-bff --framework solid --server elysia
    node-starter create my-app --from github:user/repo
    node-starter create            # interactive
    node-starter list
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Any

from node_starter import __version__
from node_starter.config import DEFAULT_PROJECT_NAME, Settings, validate_config
from node_starter.errors import NodeStarterError, PromptCancelled
from node_starter.prompts import run_interactive_prompts
from node_starter.scaffolder import get_available_templates, scaffold_project, scaffold_remote_template
from node_starter.utils import console, print_error, print_info, print_step

USAGE_EXAMPLES = [
    "node-starter create my-app --type cli",
    "node-starter create my-app --type frontend-bff --framework vue",
    "node-starter create my-app --type frontend-bff --framework solid --server elysia",
    "node-starter create my-app --type tui",
    "node-starter create my-app --from github:user/repo",
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="node-starter",
        description="A scaffolding CLI for generating projects from preferred stack configurations",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create", help="Create a new project from a template")
    create.add_argument("name", nargs="?", default=None, help="Project name")
    create.add_argument("--type", "-t", dest="archetype", help="Template type (cli, frontend-bff, tui)")
    create.add_argument("--framework", "-f", help="Frontend framework (vue, solid, lit)")
    create.add_argument("--server", "-s", help="BFF server framework (hono, elysia, h3, express)")
    create.add_argument("--ui", "-u", help="UI library (daisyui, basecoat, none)")
    create.add_argument("--runtime", "-r", help="Runtime (bun, pnpm, npm)")
    create.add_argument("--complexity", "-c", help="Project complexity (simple, complex)")
    create.add_argument("--from", dest="source", help="Remote template source (e.g., github:user/repo)")
    create.add_argument(
        "--git",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Initialize git repository (default: on)",
    )
    create.add_argument(
        "--install",
        "-i",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Install dependencies (default: on)",
    )
    create.set_defaults(handler=cmd_create)

    list_cmd = subparsers.add_parser("list", help="List available templates")
    list_cmd.set_defaults(handler=cmd_list)

    return parser


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_list(args: argparse.Namespace) -> int:
    """Print the archetype catalogue and some usage examples."""
    console.print()
    console.print("[bold]Available Templates[/bold]")
    console.print()
    for template in get_available_templates():
        console.print(f"  [cyan]{template.name}[/cyan]")
        console.print(f"  {template.description}")
        if template.frameworks:
            console.print(f"  [dim]Frameworks:[/dim] {', '.join(template.frameworks)}")
        if template.servers:
            console.print(f"  [dim]Servers:[/dim]    {', '.join(template.servers)}")
        if template.runtime:
            console.print(f"  [dim]Runtime:[/dim]    {template.runtime}")
        console.print()

    console.print("[bold]Usage Examples[/bold]")
    console.print()
    for example in USAGE_EXAMPLES:
        console.print(f"  [dim]$[/dim] {example}", highlight=False)
    console.print()
    return 0


def cmd_create(args: argparse.Namespace) -> int:
    """Create a project from flags, a remote source, or interactive answers."""
    settings = Settings.from_env()
    print_step("Starting project creation...")

    if args.source:
        asyncio.run(
            scaffold_remote_template(
                args.source,
                args.name or DEFAULT_PROJECT_NAME,
                settings,
                git=args.git,
                install=args.install,
            )
        )
        return 0

    if args.archetype:
        config = validate_config(config_from_args(args))
    else:
        config = run_interactive_prompts(args.name)

    asyncio.run(scaffold_project(config, settings))
    return 0


def config_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Collect the raw project settings given as flags."""
    return {
        "name": args.name or DEFAULT_PROJECT_NAME,
        "archetype": args.archetype,
        "framework": args.framework,
        "server": args.server,
        "ui": args.ui,
        "runtime": args.runtime,
        "complexity": args.complexity,
        "git": args.git,
        "install": args.install,
    }


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``node-starter`` and ``python -m node_starter``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        exit_code = args.handler(args)
    except PromptCancelled as exc:
        print_info(str(exc))
        return
    except NodeStarterError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
