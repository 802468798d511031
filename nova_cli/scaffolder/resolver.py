"""Template source resolution.

Decides whether a scaffold uses a freshly cloned remote template or the
template bundled with nova-cli.  A remote template that cannot be obtained is
a normal outcome, reported as a ``FallbackReason`` value rather than raised,
so callers always end up with a usable ``TemplateSource``.
"""

from __future__ import annotations

import asyncio
import shutil
import tempfile
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from nova_cli.utils import print_dim, run_command

BUNDLED_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "base"


class FallbackReason(str, Enum):
    """Why the remote template was not used."""

    CLONE_FAILED = "clone_failed"
    TEMPLATE_MISSING = "template_missing"


@dataclass
class TemplateSource:
    """A template directory plus an optional cleanup for temporary clones."""

    path: Path
    cleanup: Callable[[], Awaitable[None]] | None = None

    async def release(self) -> None:
        """Run the cleanup, if any."""
        if self.cleanup is not None:
            await self.cleanup()


def _make_cleanup(temp_root: Path) -> Callable[[], Awaitable[None]]:
    """Build an idempotent coroutine function that removes *temp_root*."""

    async def cleanup() -> None:
        # ignore_errors also covers the directory being gone already.
        await asyncio.to_thread(shutil.rmtree, temp_root, ignore_errors=True)

    return cleanup


async def fetch_remote_template(
    repo: str,
    *,
    subdir: str = "templates/base",
    timeout: float = 120.0,
) -> TemplateSource | FallbackReason:
    """Shallow-clone *repo* and locate the template directory inside it.

    Args:
        repo: Anything ``git clone`` accepts (URL or local path).  Not
            validated here.
        subdir: Template directory expected inside the clone.
        timeout: Seconds before the clone is abandoned.

    Returns:
        A ``TemplateSource`` whose ``cleanup`` removes the clone, or a
        ``FallbackReason`` after the temporary directory has been removed.
    """
    temp_root = Path(await asyncio.to_thread(tempfile.mkdtemp, prefix="nova-template-"))
    cleanup = _make_cleanup(temp_root)

    try:
        returncode, _, _ = await run_command(
            ["git", "clone", "--depth", "1", repo, str(temp_root)],
            timeout=timeout,
            capture=True,
        )
    except OSError:
        # git missing or not executable
        returncode = -1
    except BaseException:
        shutil.rmtree(temp_root, ignore_errors=True)
        raise

    if returncode != 0:
        await cleanup()
        return FallbackReason.CLONE_FAILED

    template_path = temp_root / subdir
    if not template_path.is_dir():
        await cleanup()
        return FallbackReason.TEMPLATE_MISSING

    return TemplateSource(path=template_path, cleanup=cleanup)


async def resolve_template_source(
    repo: str,
    *,
    subdir: str = "templates/base",
    timeout: float = 120.0,
    bundled: Path = BUNDLED_TEMPLATE_DIR,
) -> TemplateSource:
    """Return the remote template when available, else the bundled one."""
    outcome = await fetch_remote_template(repo, subdir=subdir, timeout=timeout)
    if isinstance(outcome, TemplateSource):
        print_dim(f"using template from {repo}")
        return outcome

    print_dim(f"remote template unavailable ({outcome.value}), using bundled template")
    return TemplateSource(path=bundled)
