"""Host-side command execution.

``HostShell`` implements :class:`~dockvm.environment.protocols.HostActions`
with ``subprocess.run``. Commands block until they exit; there is no timeout,
so a hung command blocks the calling chain.

Key Concepts:
    run(argv): Exit status 0 → ``Ok(None)``; anything else → ``Err(CommandError)``
        carrying argv, exit code and stderr.
    run_output(argv): Same, but ``Ok`` carries stripped stdout.
    A binary that cannot be started (``OSError``) is also ``Err(CommandError)``,
        with ``exit_code=None`` and the OSError as cause.

Related Modules:
    - :mod:`dockvm.environment.guest`: wraps a HostShell to reach the VM

Tags:
    host, subprocess, commands, capability-provider
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping, Sequence

from dockvm.core.errors import CommandError
from dockvm.core.logging import get_logger
from dockvm.core.result import Err, Ok, Result

logger = get_logger(__name__)


class HostShell:
    """Runs commands on the host.

    Parameters
    ----------
    env
        Extra environment variables merged over ``os.environ`` for every
        command (e.g. ``LIMA_HOME``).
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env = dict(env or {})

    def run(self, argv: Sequence[str]) -> Result[None]:
        return self._exec(argv).map(lambda _: None)

    def run_output(self, argv: Sequence[str]) -> Result[str]:
        return self._exec(argv).map(lambda completed: completed.stdout.strip())

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _exec(self, argv: Sequence[str]) -> Result[subprocess.CompletedProcess[str]]:
        cmd = [str(arg) for arg in argv]
        logger.debug("host.exec", cmd=" ".join(cmd))
        env = {**os.environ, **self._env} if self._env else None
        try:
            completed = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                env=env,
            )
        except OSError as exc:
            logger.debug("host.exec_error", cmd=cmd[0], error=str(exc))
            return Err(CommandError(cmd, cause=exc))

        if completed.returncode != 0:
            logger.debug(
                "host.exec_failed",
                cmd=" ".join(cmd),
                exit_code=completed.returncode,
            )
            return Err(CommandError(cmd, exit_code=completed.returncode, stderr=completed.stderr))
        return Ok(completed)

    def __repr__(self) -> str:
        return "HostShell()"
