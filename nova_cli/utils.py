"""Shared utility functions for nova-cli.

Provides async command execution, file-system guards used by the scaffolding
commands, and Rich-based console reporting.  Every message printed by the CLI
goes through the ``print_*`` helpers so the ``[nova]`` prefix stays
consistent.
"""

from __future__ import annotations

import asyncio
import os
import shutil
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from nova_cli.errors import ExternalProcessError, UserInputError

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

PREFIX = r"\[nova]"

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


def _resolve_executable(cmd: list[str]) -> list[str]:
    """Resolve the program through ``PATH`` so ``npm.cmd`` style shims work."""
    resolved = shutil.which(cmd[0])
    return [resolved or cmd[0], *cmd[1:]]


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: float | None = None,
    capture: bool = False,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously and wait for it to exit.

    Args:
        cmd: Program and arguments.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
            ``None`` waits indefinitely.
        capture: Whether to capture stdout/stderr.  By default the child
            inherits the parent's streams so installers can show progress.
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  If *capture* is ``False``
        the stdout/stderr strings will be empty.

    Raises:
        FileNotFoundError: If the program does not exist.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    process = await asyncio.create_subprocess_exec(
        *_resolve_executable(cmd),
        stdout=stdout_pipe,
        stderr=stderr_pipe,
        cwd=str(cwd) if cwd else None,
        env=merged_env,
    )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


async def run_checked(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: float | None = None,
) -> None:
    """Run a command with inherited streams and fail unless it exits 0.

    Raises:
        ExternalProcessError: If the program is missing or exits non-zero.
    """
    cmd_str = " ".join(cmd)
    try:
        returncode, _, _ = await run_command(cmd, cwd=cwd, timeout=timeout)
    except FileNotFoundError:
        raise ExternalProcessError(f"command not found: {cmd[0]}", command=cmd_str)

    if returncode != 0:
        raise ExternalProcessError(
            f"command failed: {cmd_str}",
            command=cmd_str,
            returncode=returncode,
        )


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def path_exists(path: str | Path) -> bool:
    """Return ``True`` if *path* exists (file, directory or anything else).

    Only a missing entry counts as "does not exist"; other ``OSError``s such
    as permission failures propagate.
    """
    try:
        Path(path).stat()
    except FileNotFoundError:
        return False
    return True


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist.

    Returns:
        The resolved ``Path`` object.
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path.resolve()


def is_empty_dir(path: str | Path) -> bool:
    """Return ``True`` if *path* is a directory with no entries."""
    with os.scandir(path) as entries:
        return next(entries, None) is None


def relative_path(path: str | Path, cwd: str | Path | None = None) -> str:
    """Render *path* relative to *cwd* when it lives below it."""
    base = Path(cwd) if cwd else Path.cwd()
    try:
        return str(Path(path).relative_to(base))
    except ValueError:
        return str(path)


def ensure_not_exists(path: str | Path, cwd: str | Path | None = None) -> None:
    """Refuse to continue if *path* already exists.

    Raises:
        UserInputError: ``"<path> already exists"``.
    """
    if path_exists(path):
        raise UserInputError(f"{relative_path(path, cwd)} already exists")


def write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    ensure_dir(path.parent)
    path.write_text(content, encoding="utf-8")


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_info(message: str) -> None:
    """Print a plain prefixed message."""
    console.print(f"{PREFIX} {escape(message)}")


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[green]{PREFIX} {escape(message)}[/green]")


def print_dim(message: str) -> None:
    """Print a de-emphasised progress note."""
    console.print(f"[dim]{PREFIX} {escape(message)}[/dim]")


def print_warning(message: str) -> None:
    """Print a yellow warning message to stderr."""
    err_console.print(f"[yellow]{PREFIX} {escape(message)}[/yellow]")


def print_error(message: str) -> None:
    """Print a red error message to stderr."""
    err_console.print(f"[bold red]{PREFIX} {escape(message)}[/bold red]")
