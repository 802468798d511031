"""nova-cli dev/build orchestration.

Manages the processes behind ``nova dev`` and ``nova build``: tooling
resolution against the project's own dependencies, the application server and
frontend dev server pair, and their coordinated shutdown.

Key classes:
    DevSession          - Dev session state machine and process supervision
    DevTooling          - Capability interface for dev server / build
    NodeModulesLocator  - Resolves the project's own bundler binary
    EntryPointLocator   - Resolves a Python plugin from entry points
"""

from nova_cli.devserver.orchestrator import run_build, run_dev
from nova_cli.devserver.session import DevSession, SessionState
from nova_cli.devserver.tooling import (
    DevTooling,
    EntryPointLocator,
    MonitoredServerHandle,
    NodeModulesLocator,
    ProcessServerHandle,
    ServerHandle,
    ToolingLocator,
    ViteTooling,
    default_locator,
)

__all__ = [
    "DevSession",
    "SessionState",
    "DevTooling",
    "ServerHandle",
    "MonitoredServerHandle",
    "ToolingLocator",
    "NodeModulesLocator",
    "EntryPointLocator",
    "ProcessServerHandle",
    "ViteTooling",
    "default_locator",
    "run_build",
    "run_dev",
]
