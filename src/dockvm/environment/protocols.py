"""
Canonical protocol definitions for dockvm environments.

A container runtime never spawns processes itself. It talks to two
capability providers: ``HostActions`` (the machine running dockvm) and
``GuestActions`` (the VM the runtime lives in). Both return ``Result`` values
so that a failed command is data the action chain can stop on.

Architecture:
    ::

        protocols.py
        ├── HostActions      : run / run_output on the host
        ├── GuestActions     : run / run_output in the guest + restart / user
        └── ContainerRuntime : provision / start / stop / teardown /
                                dependencies / version / name

    Implementations:
        HostShell   (environment/host.py)   subprocess on the host
        GuestShell  (environment/guest.py)  ``limactl shell`` into the VM
        DockerRuntime (container/docker.py)

Guardrails:
    ❌ DON'T: Raise from run()/run_output() for a non-zero exit
    ✅ DO: Return Err(CommandError(...))

Tags:
    protocol, host, guest, container-runtime, dockvm

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from dockvm.core.result import Result


@runtime_checkable
class HostActions(Protocol):
    """Command execution on the host."""

    def run(self, argv: Sequence[str]) -> Result[None]:
        """Run a command; Ok(None) on exit status 0."""
        ...

    def run_output(self, argv: Sequence[str]) -> Result[str]:
        """Run a command and return its stripped standard output."""
        ...


@runtime_checkable
class GuestActions(HostActions, Protocol):
    """Command execution inside the guest VM."""

    def restart(self) -> Result[None]:
        """Restart the guest VM."""
        ...

    def user(self) -> Result[str]:
        """Name of the login user inside the guest."""
        ...


@runtime_checkable
class ContainerRuntime(Protocol):
    """A container runtime whose lifecycle dockvm converges.

    Every lifecycle method probes fresh state, builds a new action chain and
    returns the first failure unchanged. All four are safe to re-run after a
    partial failure.
    """

    @property
    def name(self) -> str:
        ...

    def provision(self) -> Result[None]:
        ...

    def start(self) -> Result[None]:
        ...

    def stop(self) -> Result[None]:
        ...

    def teardown(self) -> Result[None]:
        ...

    def dependencies(self) -> list[str]:
        ...

    def version(self) -> str:
        ...


__all__ = [
    "HostActions",
    "GuestActions",
    "ContainerRuntime",
]
