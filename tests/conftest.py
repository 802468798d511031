"""Shared pytest fixtures for the nova-cli test suite.

Provides reusable fixtures for:
- Temporary template trees and Nova projects
- Mock subprocess helpers (one-shot commands and long-running servers)
- Fake dev tooling for the dev session
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A small template tree with the app-name placeholder in several files."""
    root = tmp_path / "template"
    (root / "app" / "controllers").mkdir(parents=True)
    (root / "web" / "components").mkdir(parents=True)
    (root / "nova.config.js").write_text(
        "export default { app: { name: '__APP_NAME__' } };\n", encoding="utf-8"
    )
    (root / "package.json").write_text(
        json.dumps({"name": "__APP_NAME__", "private": True}, indent=2) + "\n",
        encoding="utf-8",
    )
    (root / "app" / "controllers" / "home.controller.js").write_text(
        "export default class HomeController {}\n", encoding="utf-8"
    )
    (root / "web" / "components" / "Hero.jsx").write_text(
        "<h1>Welcome to __APP_NAME__ (__APP_NAME__)</h1>\n", encoding="utf-8"
    )
    yield root


@pytest.fixture
def nova_project(tmp_path: Path) -> Path:
    """A minimal Nova project root: app config plus ``nova.json``."""
    root = tmp_path / "demo"
    root.mkdir()
    (root / "nova.config.js").write_text("export default {};\n", encoding="utf-8")
    (root / "nova.json").write_text(
        json.dumps({"app_name": "demo", "frontend_port": 24000, "shutdown_timeout": 0.5}),
        encoding="utf-8",
    )
    yield root


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove every NOVA_* variable so defaults are deterministic."""
    import os

    for key in list(os.environ):
        if key.startswith("NOVA_"):
            monkeypatch.delenv(key, raising=False)


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory


@pytest.fixture
def running_process():
    """Factory for a mock long-running child (``returncode`` stays ``None``).

    ``send_signal``/``terminate``/``kill`` are plain mocks; ``wait`` sets a
    return code and resolves immediately, as a well-behaved child would.
    """
    def factory(pid: int = 4242) -> MagicMock:
        proc = MagicMock()
        proc.pid = pid
        proc.returncode = None

        async def _wait() -> int:
            if proc.returncode is None:
                proc.returncode = 0
            return proc.returncode

        proc.wait = AsyncMock(side_effect=_wait)
        proc.send_signal = MagicMock()
        proc.terminate = MagicMock()
        proc.kill = MagicMock()
        return proc

    return factory


# ---------------------------------------------------------------------------
# Fake dev tooling
# ---------------------------------------------------------------------------

class FakeHandle:
    """Records ``close()`` calls."""

    def __init__(self, events: list[str] | None = None) -> None:
        self.close_calls = 0
        self.events = events if events is not None else []

    async def close(self) -> None:
        self.close_calls += 1
        self.events.append("frontend_closed")


class FakeTooling:
    """A ``DevTooling`` whose behaviour is configured per test.

    Args:
        handle: Returned from ``start_dev_server``.
        start_error: Raised from ``start_dev_server`` instead.
        block: If set, ``start_dev_server`` waits for this event first.
        build_error: Raised from ``run_build``.
    """

    def __init__(
        self,
        handle: Any = None,
        start_error: BaseException | None = None,
        block: asyncio.Event | None = None,
        build_error: BaseException | None = None,
    ) -> None:
        self.handle = handle
        self.start_error = start_error
        self.block = block
        self.build_error = build_error
        self.started = asyncio.Event()
        self.start_calls = 0
        self.build_calls = 0

    async def start_dev_server(self, config: Any) -> Any:
        self.start_calls += 1
        self.started.set()
        if self.block is not None:
            await self.block.wait()
        if self.start_error is not None:
            raise self.start_error
        return self.handle

    async def run_build(self, config: Any) -> None:
        self.build_calls += 1
        if self.build_error is not None:
            raise self.build_error


class FakeLocator:
    def __init__(self, tooling: FakeTooling) -> None:
        self.tooling = tooling

    def locate(self, config: Any) -> FakeTooling:
        return self.tooling


@pytest.fixture
def fake_tooling():
    """Factory for ``FakeTooling`` instances."""
    return FakeTooling


@pytest.fixture
def fake_handle():
    """Factory for ``FakeHandle`` instances."""
    return FakeHandle


@pytest.fixture
def fake_locator():
    """Factory for ``FakeLocator`` instances."""
    return FakeLocator
