"""Single-file boilerplate generators (controller, middleware, migration).

Each generator normalises the supplied name into a canonical file name,
refuses to overwrite an existing file and renders a Jinja2 boilerplate into
the project's ``app/`` tree.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from nova_cli.errors import UserInputError
from nova_cli.generators.naming import (
    normalize_suffix,
    sanitize_file_name,
    timestamp,
    to_class_name,
)
from nova_cli.generators.templates import TemplateRenderer
from nova_cli.utils import ensure_not_exists, write_file

CONTROLLER_SUFFIX = ".controller.js"
MIDDLEWARE_SUFFIX = ".middleware.js"

CONTROLLERS_DIR = Path("app") / "controllers"
MIDDLEWARE_DIR = Path("app") / "middleware"
MIGRATIONS_DIR = Path("app") / "migrations"


@dataclass
class GeneratedArtifact:
    """A generated boilerplate file."""

    target_path: Path
    file_name: str
    contents: str


class ArtifactGenerator:
    """Writes boilerplate files below a project root.

    Args:
        root: Project root; defaults to the current working directory.
        renderer: Template renderer, injectable for tests.
    """

    def __init__(
        self,
        root: str | Path | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.root = Path(root) if root else Path.cwd()
        self.renderer = renderer or TemplateRenderer()

    # -- Public API --------------------------------------------------------

    async def create_controller(self, name: str | None) -> GeneratedArtifact:
        """Create ``app/controllers/<name>.controller.js``."""
        name = _require_name(name, "controller")
        file_name = normalize_suffix(name, CONTROLLER_SUFFIX)
        class_name = to_class_name(file_name[: -len(CONTROLLER_SUFFIX)])
        return await self._write(
            CONTROLLERS_DIR / file_name,
            "controller.js.j2",
            {"class_name": class_name},
        )

    async def create_middleware(self, name: str | None) -> GeneratedArtifact:
        """Create ``app/middleware/<name>.middleware.js``."""
        name = _require_name(name, "middleware")
        file_name = normalize_suffix(name, MIDDLEWARE_SUFFIX)
        class_name = to_class_name(file_name[: -len(MIDDLEWARE_SUFFIX)])
        return await self._write(
            MIDDLEWARE_DIR / file_name,
            "middleware.js.j2",
            {"class_name": class_name},
        )

    async def create_migration(
        self, name: str | None, now: datetime | None = None
    ) -> GeneratedArtifact:
        """Create ``app/migrations/<YYYY_MM_DD_HH_MM_SS>_<slug>.js``."""
        name = _require_name(name, "migration")
        file_name = f"{timestamp(now)}_{sanitize_file_name(name)}.js"
        return await self._write(
            MIGRATIONS_DIR / file_name,
            "migration.js.j2",
            {"name": name},
        )

    # -- Internals ---------------------------------------------------------

    async def _write(
        self, relative: Path, template: str, context: dict[str, str]
    ) -> GeneratedArtifact:
        target = self.root / relative
        ensure_not_exists(target, cwd=self.root)

        contents = self.renderer.render(template, context)
        await asyncio.to_thread(write_file, target, contents)
        return GeneratedArtifact(target_path=target, file_name=target.name, contents=contents)


def _require_name(name: str | None, kind: str) -> str:
    if not name or not name.strip():
        raise UserInputError(f"{kind} name is required")
    return name
