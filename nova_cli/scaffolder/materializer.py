"""Template materialization.

Copies a template tree into a project directory, replacing placeholder tokens
in every text file.  Replacement is literal substring substitution applied in
mapping order; a token is assumed never to occur inside another token's
replacement value.  There is no escape syntax for a literal token.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from nova_cli.config import APP_CONFIG_FILE, BUILD_CONFIG_FILE
from nova_cli.generators.templates import TemplateRenderer
from nova_cli.utils import ensure_dir


def apply_replacements(contents: str, replacements: dict[str, str]) -> str:
    """Replace every literal occurrence of each token, in mapping order."""
    result = contents
    for token, value in replacements.items():
        result = result.replace(token, value)
    return result


def _copy_file(src: Path, dest: Path, replacements: dict[str, str]) -> None:
    """Synchronous helper: copy one file, substituting tokens in text files."""
    raw = src.read_bytes()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        # binary asset, copied verbatim
        dest.write_bytes(raw)
        return
    dest.write_bytes(apply_replacements(text, replacements).encode("utf-8"))


async def copy_template(
    src: str | Path,
    dest: str | Path,
    replacements: dict[str, str],
) -> list[Path]:
    """Recursively copy *src* into *dest*, substituting tokens in every file.

    Directories are created as needed and visited depth-first.  Symlinks to
    files are followed; anything that is neither a directory nor a file is
    skipped.

    Returns:
        The written file paths, in copy order.
    """
    src_dir = Path(src)
    dest_dir = Path(dest)
    await asyncio.to_thread(ensure_dir, dest_dir)

    entries = await asyncio.to_thread(lambda: sorted(src_dir.iterdir()))
    written: list[Path] = []
    for entry in entries:
        target = dest_dir / entry.name
        if entry.is_dir():
            written.extend(await copy_template(entry, target, replacements))
        elif entry.is_file():
            await asyncio.to_thread(_copy_file, entry, target, replacements)
            written.append(target)
    return written


async def ensure_build_config(
    dest: str | Path,
    renderer: TemplateRenderer | None = None,
) -> Path | None:
    """Write ``vite.config.js`` into *dest* unless one already exists.

    Returns:
        The written path, or ``None`` when the project already had one.
    """
    target = Path(dest) / BUILD_CONFIG_FILE
    if target.exists():
        return None

    renderer = renderer or TemplateRenderer()
    return await renderer.render_to_file(
        "vite.config.js.j2", target, {"app_config_file": APP_CONFIG_FILE}
    )
