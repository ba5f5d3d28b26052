"""Tree composition: copy a template tree into a project directory.

Template-marked files (``*.j2``) are rendered and written without their
marker; a template whose output is only whitespace produces no file at all,
which is how a template opts out for a given stack.  Every other file is
copied byte-for-byte.  Existing destination files are overwritten, so
overlays can be composed on top of an already-materialized project.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import Any

from node_starter.errors import SourceNotFound

from .templates import TEMPLATE_SUFFIX, TemplateRenderer, strip_template_suffix


async def compose_tree(
    source_dir: str | Path,
    dest_dir: str | Path,
    renderer: TemplateRenderer,
    context: dict[str, Any],
) -> list[Path]:
    """Compose *source_dir* into *dest_dir*.

    Args:
        source_dir: Template tree to read.  Never modified.
        dest_dir: Target directory, created (with parents) if absent.
        renderer: Renderer used for ``*.j2`` files.
        context: Template variables.

    Returns:
        The destination paths that were written, in traversal order.

    Raises:
        SourceNotFound: If *source_dir* is not a directory.
    """
    source = Path(source_dir)
    if not source.is_dir():
        raise SourceNotFound(source)

    written: list[Path] = []
    await _compose_dir(source, Path(dest_dir), renderer, context, written)
    return written


async def _compose_dir(
    source: Path,
    dest: Path,
    renderer: TemplateRenderer,
    context: dict[str, Any],
    written: list[Path],
) -> None:
    await asyncio.to_thread(dest.mkdir, parents=True, exist_ok=True)

    entries = await asyncio.to_thread(lambda: sorted(source.iterdir()))
    for entry in entries:
        dest_path = dest / strip_template_suffix(entry.name)

        if entry.is_dir():
            await _compose_dir(entry, dest_path, renderer, context, written)
        elif entry.name.endswith(TEMPLATE_SUFFIX):
            rendered = await renderer.render_file(entry, context)
            if rendered.strip():
                await asyncio.to_thread(dest_path.write_text, rendered, encoding="utf-8")
                written.append(dest_path)
        else:
            await asyncio.to_thread(shutil.copy2, entry, dest_path)
            written.append(dest_path)
