"""nova command-line entry point.

Routes the first argument to a command::

    nova new my-app --no-install
    nova dev
    nova create:controller user-profile

Every command runs inside a single ``asyncio.run``.  Any exception raised by a
command (``NovaError`` or otherwise, e.g. an ``OSError`` from the filesystem)
is printed as one ``[nova] <message>`` line on stderr and turns into exit
status 1; an unknown command prints an error and the help text but still
exits 0.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Awaitable, Callable

from nova_cli import __version__
from nova_cli.database import DB_ACTIONS, run_migration_tool
from nova_cli.devserver import run_build, run_dev
from nova_cli.errors import NovaError
from nova_cli.generators import ArtifactGenerator
from nova_cli.scaffolder import scaffold_project
from nova_cli.utils import console, print_error, print_success, relative_path

HELP_TEXT = """Nova CLI

Usage:
  nova new <name> [--no-install]
  nova dev
  nova build
  nova db:init
  nova db:push
  nova create:controller <name>
  nova create:middleware <name>
  nova create:migration <name>
"""

CommandHandler = Callable[[list[str]], Awaitable[int | None]]


def print_help() -> None:
    console.print(HELP_TEXT, markup=False, highlight=False)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


async def _cmd_new(args: list[str]) -> None:
    parser = argparse.ArgumentParser(prog="nova new", add_help=False, allow_abbrev=False)
    parser.add_argument("name", nargs="?")
    parser.add_argument("--no-install", "--skip-install", dest="install", action="store_false")
    opts, _ = parser.parse_known_args(args)
    await scaffold_project(opts.name, install=opts.install)


async def _cmd_dev(args: list[str]) -> int:
    return await run_dev()


async def _cmd_build(args: list[str]) -> None:
    await run_build()


def _db_command(action: str) -> CommandHandler:
    async def handler(args: list[str]) -> None:
        await run_migration_tool(action)

    return handler


def _create_command(kind: str) -> CommandHandler:
    async def handler(args: list[str]) -> None:
        generator = ArtifactGenerator()
        create = getattr(generator, f"create_{kind}")
        artifact = await create(args[0] if args else None)
        print_success(f"{kind} created: {relative_path(artifact.target_path)}")

    return handler


COMMANDS: dict[str, CommandHandler] = {
    "new": _cmd_new,
    "dev": _cmd_dev,
    "build": _cmd_build,
    **{name: _db_command(action) for name, action in DB_ACTIONS.items()},
    "create:controller": _create_command("controller"),
    "create:middleware": _create_command("middleware"),
    "create:migration": _create_command("migration"),
}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def run(argv: list[str] | None = None) -> int:
    """Dispatch *argv* (without the program name) and return the exit code."""
    args = list(sys.argv[1:] if argv is None else argv)
    command, rest = (args[0], args[1:]) if args else (None, [])

    if command in (None, "help", "--help", "-h"):
        print_help()
        return 0

    if command in ("--version", "-v"):
        console.print(f"nova-cli {__version__}", highlight=False)
        return 0

    handler = COMMANDS.get(command)
    if handler is None:
        print_error(f'unknown command "{command}"')
        print_help()
        return 0

    try:
        result = asyncio.run(handler(rest))
    except NovaError as exc:
        print_error(str(exc))
        return 1
    except KeyboardInterrupt:
        return 130
    except Exception as exc:
        # filesystem and other runtime failures surface the same way
        print_error(str(exc) or type(exc).__name__)
        return 1
    return result or 0


def main() -> None:
    """Console-script entry point for ``nova``."""
    sys.exit(run())


if __name__ == "__main__":
    main()
