"""``package.json`` merging for overlays."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from node_starter.errors import ManifestNotFound
from node_starter.utils import file_exists, load_json, save_json

MANIFEST_NAME = "package.json"


class ManifestPatch(BaseModel):
    """Entries an overlay adds to a manifest."""

    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict)
    scripts: dict[str, str] = Field(default_factory=dict)

    def sections(self) -> dict[str, dict[str, str]]:
        """Map manifest section names to the entries for that section."""
        return {
            "dependencies": self.dependencies,
            "devDependencies": self.dev_dependencies,
            "scripts": self.scripts,
        }


def apply_patch(manifest: dict[str, Any], patch: ManifestPatch) -> dict[str, Any]:
    """Shallow-merge *patch* into *manifest* in place and return it.

    New keys are appended, existing keys are overwritten and untouched keys
    keep their value and position.  Sections that receive no entries are
    left exactly as they were (including absent).
    """
    for section, entries in patch.sections().items():
        if not entries:
            continue
        target = manifest.get(section)
        if not isinstance(target, dict):
            target = {}
            manifest[section] = target
        target.update(entries)
    return manifest


async def merge_into(manifest_path: str | Path, patch: ManifestPatch) -> dict[str, Any]:
    """Merge *patch* into the manifest file at *manifest_path*.

    The file is read fresh on every call so sequential overlays always see
    each other's writes.

    Raises:
        ManifestNotFound: If the manifest does not exist.
    """
    path = Path(manifest_path)
    if not file_exists(path):
        raise ManifestNotFound(path)

    manifest = await asyncio.to_thread(load_json, path)
    apply_patch(manifest, patch)
    await save_json(manifest, path)
    return manifest
