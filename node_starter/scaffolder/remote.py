"""Remote template sources.

A source identifier looks like ``[provider:]owner/repo[/sub/dir][#ref]``.
The provider defaults to GitHub and the ref to ``main``.  The repository
archive is downloaded as a tarball and unpacked into the destination with
its top-level directory stripped.
"""

from __future__ import annotations

import asyncio
import io
import re
import tarfile
from pathlib import Path, PurePosixPath

import httpx
from pydantic import BaseModel

from node_starter.config import Settings, validate_project_name
from node_starter.errors import RemoteTemplateError, ScaffoldEnvironmentError
from node_starter.package_manager import detect_package_manager
from node_starter.utils import print_info, print_panel, print_step, print_success, print_warning

from .external import init_git, install_dependencies

DEFAULT_PROVIDER = "github"
DEFAULT_REF = "main"

PROVIDER_ALIASES = {
    "gh": "github",
    "github": "github",
    "gitlab": "gitlab",
    "bitbucket": "bitbucket",
    "sourcehut": "sourcehut",
}

TARBALL_URLS = {
    "github": "https://github.com/{repo}/archive/{ref}.tar.gz",
    "gitlab": "https://gitlab.com/{repo}/-/archive/{ref}.tar.gz",
    "bitbucket": "https://bitbucket.org/{repo}/get/{ref}.tar.gz",
    "sourcehut": "https://git.sr.ht/~{repo}/archive/{ref}.tar.gz",
}

_SOURCE_RE = re.compile(
    r"^(?:(?P<provider>[a-z]+):)?"
    r"(?P<repo>[\w.-]+/[\w.-]+)"
    r"(?P<subdir>(?:/[\w.-]+)*)"
    r"(?:#(?P<ref>[\w./-]+))?$"
)


class RemoteSource(BaseModel):
    """A parsed remote template identifier."""

    provider: str
    repo: str
    subdir: str = ""
    ref: str = DEFAULT_REF

    @property
    def tarball_url(self) -> str:
        return TARBALL_URLS[self.provider].format(repo=self.repo, ref=self.ref)

    def __str__(self) -> str:
        subdir = f"/{self.subdir}" if self.subdir else ""
        return f"{self.provider}:{self.repo}{subdir}#{self.ref}"


def parse_source(source: str) -> RemoteSource:
    """Parse a source identifier such as ``github:user/repo/templates/app#v2``.

    Raises:
        RemoteTemplateError: If the identifier or its provider is not recognised.
    """
    match = _SOURCE_RE.match(source.strip())
    if match is None:
        raise RemoteTemplateError(f"Invalid template source: {source!r}")

    provider_name = match.group("provider") or DEFAULT_PROVIDER
    provider = PROVIDER_ALIASES.get(provider_name)
    if provider is None:
        raise RemoteTemplateError(f"Unsupported template provider: {provider_name!r}")

    return RemoteSource(
        provider=provider,
        repo=match.group("repo"),
        subdir=match.group("subdir").strip("/"),
        ref=match.group("ref") or DEFAULT_REF,
    )


# ---------------------------------------------------------------------------
# Download & extraction
# ---------------------------------------------------------------------------


async def fetch_tarball(url: str, client: httpx.AsyncClient | None = None) -> bytes:
    """Download *url* and return the response body.

    Raises:
        RemoteTemplateError: On any transport error or non-2xx response.
    """
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(follow_redirects=True, timeout=httpx.Timeout(60.0, connect=10.0))
    try:
        response = await client.get(url)
        response.raise_for_status()
        return response.content
    except httpx.HTTPStatusError as exc:
        raise RemoteTemplateError(
            f"Failed to download {url}: HTTP {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        raise RemoteTemplateError(f"Failed to download {url}: {exc}") from exc
    finally:
        if owns_client:
            await client.aclose()


def extract_tarball(data: bytes, dest: Path, subdir: str = "") -> list[Path]:
    """Unpack a repository tarball into *dest*.

    The archive's top-level directory is stripped.  When *subdir* is given,
    only members below it are extracted, relative to it.

    Raises:
        RemoteTemplateError: If the archive is unreadable, contains unsafe
            paths, or has no files under *subdir*.
    """
    prefix = PurePosixPath(subdir) if subdir else None
    written: list[Path] = []

    try:
        archive = tarfile.open(fileobj=io.BytesIO(data), mode="r:*")
    except tarfile.TarError as exc:
        raise RemoteTemplateError(f"Downloaded template is not a valid archive: {exc}") from exc

    with archive:
        for member in archive.getmembers():
            parts = PurePosixPath(member.name).parts[1:]
            if not parts:
                continue
            relative = PurePosixPath(*parts)
            if relative.is_absolute() or ".." in relative.parts:
                raise RemoteTemplateError(f"Unsafe path in template archive: {member.name}")
            if prefix is not None:
                try:
                    relative = relative.relative_to(prefix)
                except ValueError:
                    continue
                if not relative.parts:
                    continue

            target = dest.joinpath(*relative.parts)
            if member.isdir():
                target.mkdir(parents=True, exist_ok=True)
            elif member.isfile():
                source = archive.extractfile(member)
                if source is None:
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                with source, open(target, "wb") as fh:
                    fh.write(source.read())
                target.chmod(member.mode & 0o777 or 0o644)
                written.append(target)

    if not written:
        location = f" under {subdir!r}" if subdir else ""
        raise RemoteTemplateError(f"Template archive has no files{location}")
    return written


async def download_template(
    source: str | RemoteSource,
    dest: Path,
    client: httpx.AsyncClient | None = None,
) -> RemoteSource:
    """Resolve *source*, download it and unpack it into *dest*.

    Raises:
        ScaffoldEnvironmentError: If *dest* already exists.
        RemoteTemplateError: If resolution, download or extraction fails.
    """
    resolved = source if isinstance(source, RemoteSource) else parse_source(source)
    if dest.exists():
        raise ScaffoldEnvironmentError(f"Directory {dest} already exists")

    data = await fetch_tarball(resolved.tarball_url, client=client)
    await asyncio.to_thread(extract_tarball, data, dest, resolved.subdir)
    return resolved


async def scaffold_remote_template(
    source: str,
    project_name: str,
    settings: Settings,
    *,
    git: bool = True,
    install: bool = True,
    client: httpx.AsyncClient | None = None,
) -> Path:
    """Create *project_name* from a remote template, then optionally run
    ``git init`` and install dependencies with the detected package manager.

    Raises:
        ConfigValidationError: If *project_name* is not a single directory name.
    """
    project_name = validate_project_name(project_name)
    dest = settings.project_path(project_name)
    print_info(f"Fetching template from: {source}")
    print_info(f"Destination: {dest}")

    print_step("Downloading template...")
    resolved = await download_template(source, dest, client=client)
    print_success(f"Template downloaded from {resolved}")

    if git:
        print_step("Initializing git repository...")
        result = await init_git(dest)
        if result.ok:
            print_success("Git repository initialized")
        else:
            print_warning("Failed to initialize git repository")

    if install:
        pm = await detect_package_manager()
        print_step(f"Installing dependencies with {pm.value}...")
        result = await install_dependencies(pm, dest)
        if result.ok:
            print_success("Dependencies installed")
        else:
            print_warning(f"Failed to install dependencies. Run '{pm.value} install' manually.")

    print_panel(f"cd {project_name}\n# Start developing!", title="Project created!")
    return dest
