"""
CLI utility helpers: runtime wiring and output formatting.
"""

from __future__ import annotations

from typing import NoReturn

import typer
from rich.console import Console
from pydantic import ValidationError
from rich.markup import escape

from dockvm.core.errors import ConfigError, categorize_error
from dockvm.core.logging import configure_logging
from dockvm.core.result import Result
from dockvm.core.settings import DockvmSettings, get_settings
from dockvm.environment.guest import GuestShell
from dockvm.environment.host import HostShell
from dockvm.environment.protocols import ContainerRuntime
from dockvm.environment.registry import ContainerRegistry, default_registry

console = Console()
err_console = Console(stderr=True)


# ── Wiring ───────────────────────────────────────────────────────────────


def load_settings(profile: str | None = None) -> DockvmSettings:
    """Cached env settings, or a fresh instance when a profile is given.

    Raises:
        ConfigError: If the environment or ``profile`` fails validation.
    """
    try:
        settings = get_settings() if profile is None else DockvmSettings(profile=profile)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {exc}", cause=exc) from exc
    configure_logging(
        level=settings.log_level,
        json_format=settings.log_format == "json",
        service=settings.app_name,
    )
    return settings


def make_runtime(
    runtime: str | None = None,
    profile: str | None = None,
    registry: ContainerRegistry | None = None,
) -> ContainerRuntime:
    """Bind the named runtime to a host shell and a lima guest shell."""
    settings = load_settings(profile)
    host = HostShell(env={"LIMA_HOME": str(settings.lima_home)})
    guest = GuestShell(settings.lima_instance, host)
    registry = registry or default_registry()
    return registry.create(runtime or settings.runtime, host, guest, settings)


# ── Output helpers ───────────────────────────────────────────────────────


def fail(error: Exception) -> NoReturn:
    """Print ``error`` to stderr and exit 1."""
    err_console.print(f"[bold red]Error[/bold red] ({categorize_error(error).value}): {escape(str(error))}")
    raise typer.Exit(code=1)


def output_result(result: Result[None], *, done: str) -> None:
    """Render a lifecycle result: ``done`` on success, the error otherwise."""
    if result.is_err():
        fail(result.error)
    console.print(f"[green]✓[/green] {done}")
