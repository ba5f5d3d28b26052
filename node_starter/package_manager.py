"""Package manager command table and detection."""

from __future__ import annotations

from pydantic import BaseModel

from node_starter.config import PackageManager
from node_starter.utils import run_command


class PackageManagerCommands(BaseModel):
    install: list[str]
    run: list[str]

    @property
    def run_prefix(self) -> str:
        """The run command as it appears in ``package.json`` scripts."""
        return " ".join(self.run)


PACKAGE_MANAGER_COMMANDS: dict[PackageManager, PackageManagerCommands] = {
    PackageManager.BUN: PackageManagerCommands(install=["bun", "install"], run=["bun", "run"]),
    PackageManager.PNPM: PackageManagerCommands(install=["pnpm", "install"], run=["pnpm", "run"]),
    PackageManager.NPM: PackageManagerCommands(install=["npm", "install"], run=["npm", "run"]),
}


def get_commands(pm: PackageManager) -> PackageManagerCommands:
    return PACKAGE_MANAGER_COMMANDS[pm]


async def detect_package_manager() -> PackageManager:
    """Pick the first available of bun, pnpm; fall back to npm.

    A package manager counts as available when ``<pm> --version`` exits 0.
    """
    for candidate in (PackageManager.BUN, PackageManager.PNPM):
        returncode, _, _ = await run_command([candidate.value, "--version"])
        if returncode == 0:
            return candidate
    return PackageManager.NPM
