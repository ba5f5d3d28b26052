"""Exceptions raised by node-starter.

Every fatal condition derives from :class:`NodeStarterError`; the CLI
catches that base class, prints the message and exits with status 1.
Best-effort steps (git init, dependency install) never raise: they report a
failed :class:`~node_starter.scaffolder.external.StepResult` instead.
"""

from __future__ import annotations

from pathlib import Path


class NodeStarterError(Exception):
    """Base class for fatal node-starter errors."""


class ConfigValidationError(NodeStarterError):
    """The requested project configuration is missing or invalid."""


class ScaffoldEnvironmentError(NodeStarterError):
    """A filesystem precondition (template store, destination) is violated."""


class ScaffoldFailure(NodeStarterError):
    """Composition or a delegated generator failed mid-scaffold.

    The destination directory may be left partially written.
    """


class SourceNotFound(ScaffoldFailure):
    """A template tree to compose does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Template source not found: {path}")


class ManifestNotFound(ScaffoldFailure):
    """The destination has no ``package.json`` to merge into."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Package manifest not found: {path}")


class RemoteTemplateError(NodeStarterError):
    """A remote template source could not be resolved or downloaded."""


class PromptCancelled(NodeStarterError):
    """The user aborted the interactive prompts."""
