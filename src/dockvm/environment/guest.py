"""Guest-side command execution through lima.

``GuestShell`` implements :class:`~dockvm.environment.protocols.GuestActions`
by prefixing every command with ``limactl shell <instance>`` and running it on
the host. The VM itself is managed elsewhere; this module only reaches into it.

Tags:
    guest, lima, vm, commands, capability-provider
"""

from __future__ import annotations

from collections.abc import Sequence

from dockvm.core.logging import get_logger
from dockvm.core.result import Result
from dockvm.environment.protocols import HostActions

logger = get_logger(__name__)

LIMACTL = "limactl"


class GuestShell:
    """Runs commands inside the lima VM ``instance``.

    Example::

        guest = GuestShell("dockvm", HostShell())
        guest.run(["command", "-v", "docker"])
    """

    def __init__(self, instance: str, host: HostActions) -> None:
        self.instance = instance
        self._host = host

    def run(self, argv: Sequence[str]) -> Result[None]:
        return self._host.run(self._shell_argv(argv))

    def run_output(self, argv: Sequence[str]) -> Result[str]:
        return self._host.run_output(self._shell_argv(argv))

    def restart(self) -> Result[None]:
        """Stop then start the VM; a failed stop is returned without starting."""
        logger.info("guest.restart", instance=self.instance)
        return self._host.run([LIMACTL, "stop", self.instance]).flat_map(
            lambda _: self._host.run([LIMACTL, "start", self.instance])
        )

    def user(self) -> Result[str]:
        return self.run_output(["whoami"])

    def _shell_argv(self, argv: Sequence[str]) -> list[str]:
        return [LIMACTL, "shell", self.instance, *argv]

    def __repr__(self) -> str:
        return f"GuestShell({self.instance!r})"
