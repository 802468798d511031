"""Dev tooling capability and its locators.

The orchestrator never imports bundler code directly.  It talks to a
``DevTooling`` object that can start a dev server and run a production build,
obtained from a ``ToolingLocator``:

* ``NodeModulesLocator`` resolves the bundler binary from the *project's own*
  ``node_modules/.bin``, never from nova-cli's environment.
* ``EntryPointLocator`` loads a Python plugin registered under the
  ``nova_cli.tooling`` entry-point group.
"""

from __future__ import annotations

import asyncio
from importlib.metadata import entry_points
from pathlib import Path
from typing import Protocol, runtime_checkable

from nova_cli.config import ProjectConfig
from nova_cli.errors import ExternalProcessError, ToolingNotFoundError
from nova_cli.utils import run_checked

ENTRY_POINT_GROUP = "nova_cli.tooling"


@runtime_checkable
class ServerHandle(Protocol):
    """A running dev server that can be stopped."""

    async def close(self) -> None: ...


@runtime_checkable
class MonitoredServerHandle(ServerHandle, Protocol):
    """A ``ServerHandle`` whose server can exit on its own."""

    async def wait(self) -> int:
        """Wait for the server to exit and return its exit status."""
        ...


@runtime_checkable
class DevTooling(Protocol):
    """Frontend dev/build capability used by ``nova dev`` and ``nova build``."""

    async def start_dev_server(self, config: ProjectConfig) -> ServerHandle | None:
        """Start the dev server; may not return until the server stops."""
        ...

    async def run_build(self, config: ProjectConfig) -> None:
        """Produce a production build, raising on failure."""
        ...


class ToolingLocator(Protocol):
    def locate(self, config: ProjectConfig) -> DevTooling: ...


async def spawn_process(cmd: list[str], cwd: str | Path) -> asyncio.subprocess.Process:
    """Start a long-running child that inherits the parent's standard streams.

    Raises:
        ExternalProcessError: If the program does not exist.
    """
    try:
        return await asyncio.create_subprocess_exec(*cmd, cwd=str(cwd))
    except FileNotFoundError:
        raise ExternalProcessError(f"command not found: {cmd[0]}", command=" ".join(cmd))


class ProcessServerHandle:
    """``ServerHandle`` backed by a child process.

    ``close()`` sends SIGTERM, waits up to *timeout* seconds and then kills
    the process.  Closing twice is a no-op.  ``wait()`` resolves when the
    process exits, whether or not ``close()`` was called.
    """

    def __init__(self, process: asyncio.subprocess.Process, timeout: float = 5.0) -> None:
        self.process = process
        self.timeout = timeout
        self._closed = False

    async def wait(self) -> int:
        return await self.process.wait()

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        if self.process.returncode is None:
            try:
                self.process.terminate()
            except ProcessLookupError:
                return
        try:
            await asyncio.wait_for(self.process.wait(), timeout=self.timeout)
        except asyncio.TimeoutError:
            self.process.kill()
            await self.process.wait()


class ViteTooling:
    """Runs the project's Vite binary as a child process."""

    def __init__(self, binary: str | Path) -> None:
        self.binary = Path(binary)

    async def start_dev_server(self, config: ProjectConfig) -> ProcessServerHandle:
        cmd = [
            str(self.binary),
            "--host", config.frontend_host,
            "--port", str(config.frontend_port),
        ]
        process = await spawn_process(cmd, cwd=config.root)
        return ProcessServerHandle(process, timeout=config.shutdown_timeout)

    async def run_build(self, config: ProjectConfig) -> None:
        await run_checked([str(self.binary), "build"], cwd=config.root)


class NodeModulesLocator:
    """Find a bundler binary in ``<project>/node_modules/.bin``."""

    def __init__(self, binary_name: str = "vite") -> None:
        self.binary_name = binary_name

    def locate(self, config: ProjectConfig) -> ViteTooling:
        bin_dir = Path(config.root) / "node_modules" / ".bin"
        for candidate in (bin_dir / self.binary_name, bin_dir / f"{self.binary_name}.cmd"):
            if candidate.is_file():
                return ViteTooling(candidate)
        raise ToolingNotFoundError(
            f"{self.binary_name} not found in {bin_dir}; run `npm install` first"
        )


class EntryPointLocator:
    """Load a ``DevTooling`` factory from the ``nova_cli.tooling`` group."""

    def __init__(self, name: str) -> None:
        self.name = name

    def locate(self, config: ProjectConfig) -> DevTooling:
        matches = entry_points(group=ENTRY_POINT_GROUP, name=self.name)
        if not matches:
            raise ToolingNotFoundError(
                f'no dev tooling named "{self.name}" is installed '
                f"(entry-point group {ENTRY_POINT_GROUP})"
            )
        factory = next(iter(matches)).load()
        tooling = factory()
        if not isinstance(tooling, DevTooling):
            raise ToolingNotFoundError(f'dev tooling "{self.name}" does not implement DevTooling')
        return tooling


def default_locator(config: ProjectConfig) -> ToolingLocator:
    """Pick the locator for ``config.tooling``."""
    if config.tooling == "vite":
        return NodeModulesLocator("vite")
    return EntryPointLocator(config.tooling)
