"""nova-cli configuration.

Two typed configuration objects, both Pydantic v2 models so they are validated
at construction time:

* ``CliConfig`` -- settings of the CLI itself (template repository, installer
  and migration tool commands).  Built from environment variables.
* ``ProjectConfig`` -- dev/build settings of a generated project.  Loaded from
  the project's optional ``nova.json`` with ``NOVA_*`` environment overrides.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from nova_cli.errors import UserInputError

DEFAULT_TEMPLATE_REPO = "https://github.com/nova-js/nova"
APP_CONFIG_FILE = "nova.config.js"
BUILD_CONFIG_FILE = "vite.config.js"
PROJECT_SETTINGS_FILE = "nova.json"


class CliConfig(BaseModel):
    """Settings consumed by the scaffolding and database commands."""

    template_repo: str = Field(
        default=DEFAULT_TEMPLATE_REPO,
        description="Git location cloned for the project template",
    )
    template_subdir: str = Field(
        default="templates/base",
        description="Template directory inside the cloned repository",
    )
    clone_timeout: int = Field(default=120, ge=1, description="git clone timeout in seconds")
    install_command: list[str] = Field(default_factory=lambda: ["npm", "install"])
    migration_command: list[str] = Field(default_factory=lambda: ["npx", "drizzle-kit"])

    @classmethod
    def from_env(cls) -> "CliConfig":
        """Build a ``CliConfig`` from environment variables.

        Recognised variables (all optional):
            NOVA_TEMPLATE_REPO, NOVA_CLONE_TIMEOUT.

        An empty ``NOVA_TEMPLATE_REPO`` counts as unset.

        Raises:
            UserInputError: If a variable holds an invalid value.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("NOVA_TEMPLATE_REPO"):
            kwargs["template_repo"] = os.environ["NOVA_TEMPLATE_REPO"]
        if os.environ.get("NOVA_CLONE_TIMEOUT"):
            kwargs["clone_timeout"] = os.environ["NOVA_CLONE_TIMEOUT"]
        try:
            return cls.model_validate(kwargs)
        except ValidationError as exc:
            raise UserInputError(f"invalid CLI settings: {exc.errors()[0]['msg']}")


class ProjectConfig(BaseModel):
    """Dev/build settings of a Nova project.

    The application process is started as ``<runtime> <entry>`` from the
    project root; the frontend dev server listens on
    ``frontend_host:frontend_port``.
    """

    root: Path = Field(default=Path("."))
    app_name: str = Field(default="")
    runtime: str = Field(default="node")
    entry: str = Field(default="server.js")
    app_host: str = Field(default="0.0.0.0")
    app_port: int = Field(default=3000, ge=1, le=65535)
    frontend_host: str = Field(default="localhost")
    frontend_port: int = Field(default=5173, ge=1, le=65535)
    tooling: str = Field(default="vite", description="Dev tooling name")
    shutdown_timeout: float = Field(
        default=5.0, gt=0, description="Seconds to wait for a child to exit before killing it"
    )

    @property
    def app_command(self) -> list[str]:
        """Command line that starts the application server."""
        return [self.runtime, self.entry]

    @property
    def app_url(self) -> str:
        host = "localhost" if self.app_host in ("0.0.0.0", "") else self.app_host
        return f"http://{host}:{self.app_port}"

    @classmethod
    def load(cls, root: str | Path) -> "ProjectConfig":
        """Load the settings of the project rooted at *root*.

        Recognised environment overrides (all optional):
            NOVA_APP_NAME, NOVA_HOST, NOVA_PORT, NOVA_FRONTEND_HOST,
            NOVA_FRONTEND_PORT.

        Raises:
            UserInputError: If *root* is not a Nova project or ``nova.json``
                is malformed.
        """
        project_root = Path(root).resolve()
        if not (project_root / APP_CONFIG_FILE).is_file():
            raise UserInputError(
                f"{APP_CONFIG_FILE} not found in {project_root}; "
                "run this command inside a Nova project"
            )

        data: dict[str, Any] = {}
        settings_path = project_root / PROJECT_SETTINGS_FILE
        if settings_path.is_file():
            try:
                raw = json.loads(settings_path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as exc:
                raise UserInputError(f"invalid {PROJECT_SETTINGS_FILE}: {exc}")
            if not isinstance(raw, dict):
                raise UserInputError(f"invalid {PROJECT_SETTINGS_FILE}: expected an object")
            data.update(raw)

        env_map = {
            "NOVA_APP_NAME": "app_name",
            "NOVA_HOST": "app_host",
            "NOVA_PORT": "app_port",
            "NOVA_FRONTEND_HOST": "frontend_host",
            "NOVA_FRONTEND_PORT": "frontend_port",
        }
        for var, field_name in env_map.items():
            if os.environ.get(var):
                data[field_name] = os.environ[var]

        data["root"] = project_root
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise UserInputError(f"invalid project settings: {exc.errors()[0]['msg']}")
