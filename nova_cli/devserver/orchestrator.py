"""Entry points for ``nova dev`` and ``nova build``."""

from __future__ import annotations

from pathlib import Path

from nova_cli.config import ProjectConfig
from nova_cli.devserver.session import DevSession
from nova_cli.devserver.tooling import ToolingLocator, default_locator
from nova_cli.errors import BuildError, NovaError
from nova_cli.utils import print_dim, print_success


async def run_dev(
    root: str | Path | None = None,
    locator: ToolingLocator | None = None,
) -> int:
    """Load the project, resolve its tooling and supervise a dev session."""
    config = ProjectConfig.load(root or Path.cwd())
    tooling = (locator or default_locator(config)).locate(config)
    session = DevSession(config, tooling)
    return await session.run()


async def run_build(
    root: str | Path | None = None,
    locator: ToolingLocator | None = None,
) -> None:
    """Run a one-shot production build.

    Raises:
        NovaError: Failures reported by the tooling propagate unchanged.
        BuildError: Any other exception raised by the tooling, wrapped.
    """
    config = ProjectConfig.load(root or Path.cwd())
    tooling = (locator or default_locator(config)).locate(config)

    print_dim(f"building {config.app_name or config.root.name}")
    try:
        await tooling.run_build(config)
    except NovaError:
        raise
    except Exception as exc:
        raise BuildError(f"build failed: {exc}", cause=exc)
    print_success("build completed")
