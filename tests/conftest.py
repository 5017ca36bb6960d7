"""
Shared pytest fixtures and configuration for dockvm tests.

This module provides:
- Recording host/guest capability providers that log every call in order
- Settings rooted in a temporary directory
- A DockerRuntime wired to both

Usage:
    def test_something(runtime, guest, calls):
        guest.fail(INSTALLED_PROBE)  # dockvm.container.docker.INSTALLED_PROBE
        runtime.provision()
        assert calls[0] == ("guest", INSTALLED_PROBE)
"""

import sys
from pathlib import Path
from typing import Any

import pytest
import structlog

# Ensure dockvm package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dockvm.container.docker import DockerRuntime
from dockvm.core.errors import CommandError
from dockvm.core.result import Err, Ok
from dockvm.core.settings import DockvmSettings, clear_settings_cache


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark all tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Recording capability providers
# =============================================================================


class FakeHost:
    """HostActions stub: records ``(side, argv)`` and replays canned results.

    Commands without a canned result succeed (``run``) or print nothing
    (``run_output``).
    """

    side = "host"

    def __init__(self, calls: list) -> None:
        self.calls = calls
        self.results: dict[tuple, Any] = {}

    def respond(self, argv, result) -> None:
        self.results[tuple(argv)] = result

    def fail(self, argv, exit_code: int | None = 1, stderr: str = "") -> CommandError:
        error = CommandError(list(argv), exit_code=exit_code, stderr=stderr)
        self.respond(argv, Err(error))
        return error

    def run(self, argv):
        key = tuple(argv)
        self.calls.append((self.side, key))
        return self.results.get(key, Ok(None)).map(lambda _: None)

    def run_output(self, argv):
        key = tuple(argv)
        self.calls.append((self.side, key))
        return self.results.get(key, Ok(""))


class FakeGuest(FakeHost):
    """GuestActions stub; ``restart`` and ``user`` are logged as pseudo-commands."""

    side = "guest"

    def __init__(self, calls: list, username: str = "lima") -> None:
        super().__init__(calls)
        self.restart_result = Ok(None)
        self.user_result = Ok(username)

    def restart(self):
        self.calls.append((self.side, ("restart",)))
        return self.restart_result

    def user(self):
        self.calls.append((self.side, ("user",)))
        return self.user_result


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _isolate(monkeypatch):
    """Fresh settings cache and logging context for every test."""
    for key in ("DOCKVM_PROFILE", "DOCKVM_RUNTIME", "DOCKVM_LOG_LEVEL", "DOCKVM_LOG_FORMAT"):
        monkeypatch.delenv(key, raising=False)
    clear_settings_cache()
    structlog.contextvars.clear_contextvars()
    yield
    clear_settings_cache()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def settings(tmp_path: Path) -> DockvmSettings:
    return DockvmSettings(
        home_dir=tmp_path / "home",
        launch_agents_dir=tmp_path / "LaunchAgents",
        lima_home=tmp_path / "lima",
    )


@pytest.fixture
def calls() -> list:
    return []


@pytest.fixture
def host(calls) -> FakeHost:
    return FakeHost(calls)


@pytest.fixture
def guest(calls) -> FakeGuest:
    return FakeGuest(calls)


@pytest.fixture
def runtime(host, guest, settings) -> DockerRuntime:
    return DockerRuntime(host, guest, settings)
