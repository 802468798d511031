"""The ``nova new`` command: create a project directory from a template.

Steps, in order:

1. Validate the name and the target directory (missing or empty only).
2. Resolve the template source (remote clone, or the bundled fallback).
3. Materialize the template with the app-name placeholder replaced.
4. Release the template source (removes a temporary clone).
5. Synthesize ``vite.config.js`` if the template did not ship one.
6. Install dependencies unless suppressed.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from nova_cli.config import CliConfig
from nova_cli.errors import UserInputError
from nova_cli.scaffolder.materializer import copy_template, ensure_build_config
from nova_cli.scaffolder.resolver import resolve_template_source
from nova_cli.utils import is_empty_dir, path_exists, print_success, run_checked

APP_NAME_TOKEN = "__APP_NAME__"
# characters that cannot appear verbatim inside a quoted JSON or JS string
UNSAFE_NAME_CHARS = frozenset('"\\')


async def prepare_target(name: str | None, cwd: Path) -> Path:
    """Validate *name* and return the (created) empty target directory.

    Raises:
        UserInputError: If no name was given, the name contains a quote,
            backslash or control character, or the target exists and is
            not an empty directory.
    """
    if not name:
        raise UserInputError("project name is required")
    if any(ch in UNSAFE_NAME_CHARS or not ch.isprintable() for ch in name):
        raise UserInputError(
            f"invalid project name {name!r}: quotes, backslashes and control "
            "characters are not allowed"
        )

    target = (cwd / name).resolve()
    if path_exists(target):
        if not target.is_dir():
            raise UserInputError(f'"{name}" exists and is not a directory')
        if not await asyncio.to_thread(is_empty_dir, target):
            raise UserInputError(f'directory "{name}" is not empty')
    else:
        await asyncio.to_thread(target.mkdir, parents=True)
    return target


async def scaffold_project(
    name: str | None,
    *,
    install: bool = True,
    cwd: str | Path | None = None,
    config: CliConfig | None = None,
) -> Path:
    """Create project *name* below *cwd* and return its path.

    Args:
        name: Project directory name; also substituted for ``__APP_NAME__``.
        install: Run the package installer once the tree is written.
        cwd: Parent directory, defaults to the current working directory.
        config: CLI settings; defaults to ``CliConfig.from_env()``.

    Raises:
        UserInputError: Invalid name or non-empty target.
        ExternalProcessError: The package installer failed.
    """
    config = config or CliConfig.from_env()
    base = Path(cwd) if cwd else Path.cwd()
    target = await prepare_target(name, base)

    source = await resolve_template_source(
        config.template_repo,
        subdir=config.template_subdir,
        timeout=config.clone_timeout,
    )
    try:
        await copy_template(source.path, target, {APP_NAME_TOKEN: name})
    finally:
        await source.release()

    await ensure_build_config(target)
    print_success(f"project created at {target}")

    if install:
        await run_checked(config.install_command, cwd=target)
        print_success("dependencies installed")

    return target
