"""Error kinds raised by nova-cli commands.

Every error a command is expected to raise derives from ``NovaError``.  The
dispatcher in :mod:`nova_cli.cli` catches ``NovaError`` once, prints its
message on a single line and exits with status 1.  Other exceptions, such as
an ``OSError`` from the filesystem, are reported the same way.

Falling back to the bundled template when a remote clone is unavailable is
*not* an error and has no exception type (see
:class:`nova_cli.scaffolder.resolver.FallbackReason`).
"""

from __future__ import annotations


class NovaError(Exception):
    """Base class for user-visible command failures."""


class UserInputError(NovaError):
    """Raised for a missing or invalid argument, or a target that already exists."""


class ExternalProcessError(NovaError):
    """Raised when a child process (installer, migration tool, bundler) fails."""

    def __init__(self, message: str, command: str = "", returncode: int | None = None):
        self.command = command
        self.returncode = returncode
        super().__init__(message)


class ToolingNotFoundError(UserInputError):
    """Raised when the project's dev tooling cannot be resolved."""


class DevServerError(NovaError):
    """Raised after a dev session shut down because the dev server faulted."""

    def __init__(self, message: str, cause: BaseException | None = None):
        self.cause = cause
        super().__init__(message)


class BuildError(NovaError):
    """Raised when a production build fails."""

    def __init__(self, message: str, cause: BaseException | None = None):
        self.cause = cause
        super().__init__(message)
