"""Dev session supervision.

A ``DevSession`` runs the application server and the frontend dev server side
by side and stops both on SIGINT/SIGTERM or when the dev server fails to
start or exits on its own.  Its lifecycle is an explicit state machine::

    STARTING -> RUNNING -> SHUTTING_DOWN -> TERMINATED

A signal that arrives before the dev server is started moves STARTING
straight to SHUTTING_DOWN.  Every change of state goes through
``_transition``, a compare-and-set on ``state``.  Because the whole session runs on one event loop and
``_transition`` never awaits, only the first shutdown trigger can win the
move to SHUTTING_DOWN; later signals are ignored.

Shutdown order is fixed: the application process is signalled first, then the
frontend server handle (if one was captured) is closed.  Both steps are
attempted even if the other fails.
"""

from __future__ import annotations

import asyncio
import signal
from enum import Enum

from nova_cli.config import ProjectConfig
from nova_cli.devserver.tooling import (
    DevTooling,
    MonitoredServerHandle,
    ServerHandle,
    spawn_process,
)
from nova_cli.errors import DevServerError, ExternalProcessError
from nova_cli.utils import print_dim, print_info, print_warning

DEFAULT_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)


class SessionState(str, Enum):
    """Lifecycle states of a dev session."""

    STARTING = "starting"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    TERMINATED = "terminated"


class DevSession:
    """Supervises the application process and the frontend dev server.

    Attributes:
        config: Project settings (app command, ports, timeouts).
        tooling: Capability used to start the frontend dev server.
        state: Current ``SessionState``.
        app_process: The spawned application process, once started.
        frontend_server: Handle returned by the dev server startup, if any.
        shutdown_cause: The dev server fault that triggered shutdown, if any.
    """

    def __init__(
        self,
        config: ProjectConfig,
        tooling: DevTooling,
        signals: tuple[signal.Signals, ...] = DEFAULT_SIGNALS,
    ) -> None:
        self.config = config
        self.tooling = tooling
        self.signals = signals
        self.state = SessionState.STARTING
        self.app_process: asyncio.subprocess.Process | None = None
        self.frontend_server: ServerHandle | None = None
        self.shutdown_cause: BaseException | None = None

        self._terminated = asyncio.Event()
        self._startup_task: asyncio.Future | None = None
        self._shutdown_task: asyncio.Future | None = None
        self._watch_task: asyncio.Future | None = None
        self._installed_signals: list[signal.Signals] = []

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def _transition(
        self,
        expected: SessionState | tuple[SessionState, ...],
        new: SessionState,
    ) -> bool:
        """Move to *new* only if the current state is one of *expected*."""
        allowed = expected if isinstance(expected, tuple) else (expected,)
        if self.state not in allowed:
            return False
        self.state = new
        return True

    def _begin_shutdown(self) -> bool:
        return self._transition(
            (SessionState.STARTING, SessionState.RUNNING), SessionState.SHUTTING_DOWN
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(self) -> int:
        """Run the session until it terminates.

        Returns:
            0 after a signal-initiated shutdown.

        Raises:
            ExternalProcessError: The application runtime could not be started.
            DevServerError: The dev server failed; both processes were
                stopped before this is raised.
        """
        self.app_process = await spawn_process(self.config.app_command, cwd=self.config.root)
        print_info(f"app server started (pid {self.app_process.pid}) on {self.config.app_url}")

        self._install_signal_handlers()
        try:
            if self._transition(SessionState.STARTING, SessionState.RUNNING):
                await self._start_frontend()
            await self._terminated.wait()
        except BaseException:
            if self.state is not SessionState.TERMINATED:
                if self._startup_task is not None:
                    self._startup_task.cancel()
                self._signal_app(signal.SIGTERM)
            raise
        finally:
            if self._watch_task is not None and not self._watch_task.done():
                self._watch_task.cancel()
            self._remove_signal_handlers()

        if self.shutdown_cause is not None:
            raise DevServerError(
                f"dev server failed: {self.shutdown_cause}", cause=self.shutdown_cause
            )
        return 0

    def request_shutdown(self, signum: int = signal.SIGTERM) -> bool:
        """Signal-handler entry point; schedules shutdown at most once.

        Returns:
            ``True`` if this call started the shutdown sequence.
        """
        if not self._begin_shutdown():
            return False
        print_dim(f"received {signal.Signals(signum).name}, shutting down")
        self._shutdown_task = asyncio.ensure_future(self._shutdown_sequence(signum))
        return True

    async def shutdown(
        self,
        cause: BaseException | None = None,
        signum: int = signal.SIGTERM,
    ) -> None:
        """Shut the session down, or wait for a shutdown already under way."""
        if self._begin_shutdown():
            self.shutdown_cause = cause
            await self._shutdown_sequence(signum)
        else:
            await self._terminated.wait()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _start_frontend(self) -> None:
        """Start the dev server, racing it against a shutdown request."""
        self._startup_task = asyncio.ensure_future(self.tooling.start_dev_server(self.config))
        terminated = asyncio.ensure_future(self._terminated.wait())
        try:
            await asyncio.wait(
                {self._startup_task, terminated}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            terminated.cancel()

        task = self._startup_task
        if not task.done() or task.cancelled():
            return

        exc = task.exception()
        if exc is not None:
            print_warning(f"dev server failed to start: {exc}")
            await self.shutdown(cause=exc)
            return

        handle = task.result()
        if handle is None:
            return
        if self.state is SessionState.RUNNING:
            self.frontend_server = handle
            print_info(
                f"frontend dev server on http://{self.config.frontend_host}:"
                f"{self.config.frontend_port}"
            )
            if isinstance(handle, MonitoredServerHandle):
                self._watch_task = asyncio.ensure_future(self._watch_frontend(handle))
        else:
            # shutdown began while the server was starting
            await self._close_frontend(handle)

    async def _watch_frontend(self, handle: MonitoredServerHandle) -> None:
        """Treat an exit of the dev server while RUNNING as a fault."""
        returncode = await handle.wait()
        if self.state is not SessionState.RUNNING:
            return
        message = f"frontend dev server exited unexpectedly (code {returncode})"
        print_warning(message)
        await self.shutdown(cause=ExternalProcessError(message, returncode=returncode))

    async def _shutdown_sequence(self, signum: int) -> None:
        try:
            if self._startup_task is not None and not self._startup_task.done():
                self._startup_task.cancel()

            self._signal_app(signum)
            if self.frontend_server is not None:
                await self._close_frontend(self.frontend_server)
            await self._wait_app()
        finally:
            self._transition(SessionState.SHUTTING_DOWN, SessionState.TERMINATED)
            self._terminated.set()

    def _signal_app(self, signum: int) -> None:
        process = self.app_process
        if process is None or process.returncode is not None:
            return
        try:
            process.send_signal(signum)
        except ProcessLookupError:
            pass
        except ValueError:
            # signal not supported on this platform
            process.terminate()
        except OSError as exc:
            print_warning(f"failed to signal app server: {exc}")

    async def _close_frontend(self, handle: ServerHandle) -> None:
        try:
            await handle.close()
        except Exception as exc:
            print_warning(f"failed to stop frontend server: {exc}")

    async def _wait_app(self) -> None:
        process = self.app_process
        if process is None or process.returncode is not None:
            return
        try:
            await asyncio.wait_for(process.wait(), timeout=self.config.shutdown_timeout)
        except asyncio.TimeoutError:
            print_warning("app server did not exit in time, killing it")
            try:
                process.kill()
            except ProcessLookupError:
                return
            await process.wait()

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in self.signals:
            try:
                loop.add_signal_handler(sig, self.request_shutdown, sig)
            except (NotImplementedError, RuntimeError):
                # Windows event loops and non-main threads
                continue
            self._installed_signals.append(sig)

    def _remove_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in self._installed_signals:
            loop.remove_signal_handler(sig)
        self._installed_signals.clear()
