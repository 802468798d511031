"""Passthrough to the project's migration tool (drizzle-kit)."""

from __future__ import annotations

from pathlib import Path

from nova_cli.config import CliConfig
from nova_cli.utils import run_checked

DB_ACTIONS: dict[str, str] = {
    "db:init": "generate",
    "db:push": "push",
}


async def run_migration_tool(
    action: str,
    cwd: str | Path | None = None,
    config: CliConfig | None = None,
) -> None:
    """Run ``<migration_command> <action>`` with inherited streams.

    Raises:
        ExternalProcessError: The tool is missing or exits non-zero.
    """
    config = config or CliConfig.from_env()
    await run_checked([*config.migration_command, action], cwd=cwd or Path.cwd())
