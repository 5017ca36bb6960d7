"""
Root Typer application for dockvm.

Usage::

    dockvm provision                 # install docker in the VM, set up host
    dockvm start                     # start docker, load the launch agent
    dockvm stop
    dockvm teardown                  # remove host-side configuration
    dockvm version
    dockvm dependencies
    dockvm runtimes
"""

from __future__ import annotations

import typer
from typer import Typer

from dockvm.cli.utils import console, fail, make_runtime, output_result
from dockvm.core.errors import DockvmError
from dockvm.core.logging import LogContext
from dockvm.environment.protocols import ContainerRuntime
from dockvm.environment.registry import default_registry

app = Typer(
    name="dockvm",
    help="dockvm: container runtime lifecycle inside a lima VM.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

RuntimeOption = typer.Option(None, "--runtime", "-r", help="Container runtime (default: docker).")
ProfileOption = typer.Option(None, "--profile", "-p", help="Instance profile.")


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError, version as pkg_version

        try:
            v = pkg_version("dockvm")
        except PackageNotFoundError:
            from dockvm import __version__ as v
        typer.echo(f"dockvm {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Provision, start, stop and tear down a container runtime."""


def _runtime(runtime: str | None, profile: str | None) -> ContainerRuntime:
    try:
        return make_runtime(runtime, profile)
    except DockvmError as exc:
        fail(exc)


# ── Lifecycle ────────────────────────────────────────────────────────────


@app.command()
def provision(
    runtime: str | None = RuntimeOption,
    profile: str | None = ProfileOption,
) -> None:
    """Install and configure the runtime in the VM and on the host."""
    rt = _runtime(runtime, profile)
    with LogContext(runtime=rt.name, operation="provision"):
        output_result(rt.provision(), done=f"{rt.name} provisioned")


@app.command()
def start(
    runtime: str | None = RuntimeOption,
    profile: str | None = ProfileOption,
) -> None:
    """Start the runtime in the VM and activate the host launch agent."""
    rt = _runtime(runtime, profile)
    with LogContext(runtime=rt.name, operation="start"):
        output_result(rt.start(), done=f"{rt.name} started")


@app.command()
def stop(
    runtime: str | None = RuntimeOption,
    profile: str | None = ProfileOption,
) -> None:
    """Stop the runtime in the VM and deactivate the host launch agent."""
    rt = _runtime(runtime, profile)
    with LogContext(runtime=rt.name, operation="stop"):
        output_result(rt.stop(), done=f"{rt.name} stopped")


@app.command()
def teardown(
    runtime: str | None = RuntimeOption,
    profile: str | None = ProfileOption,
) -> None:
    """Remove the runtime's host-side configuration."""
    rt = _runtime(runtime, profile)
    with LogContext(runtime=rt.name, operation="teardown"):
        output_result(rt.teardown(), done=f"{rt.name} removed")


# ── Queries ──────────────────────────────────────────────────────────────


@app.command()
def version(
    runtime: str | None = RuntimeOption,
    profile: str | None = ProfileOption,
) -> None:
    """Show runtime client and server versions."""
    rt = _runtime(runtime, profile)
    text = rt.version()
    if text:
        typer.echo(text)
    else:
        console.print(f"[dim]{rt.name} version unavailable[/dim]")


@app.command()
def dependencies(
    runtime: str | None = RuntimeOption,
    profile: str | None = ProfileOption,
) -> None:
    """List packages the runtime needs in the VM."""
    rt = _runtime(runtime, profile)
    for package in rt.dependencies():
        typer.echo(package)


@app.command()
def runtimes() -> None:
    """List supported container runtimes."""
    for name in default_registry().names():
        typer.echo(name)
