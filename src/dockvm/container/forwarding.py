"""Host-side docker socket forwarding script.

The launch agent runs this script; it forwards the guest's
``/var/run/docker.sock`` to ``<app_dir>/docker.sock`` on the host over the lima
ssh connection, as the guest login user.
"""

from __future__ import annotations

from pathlib import Path

from dockvm.core.errors import ErrorContext, ScriptError
from dockvm.core.logging import get_logger
from dockvm.core.result import Result, try_result
from dockvm.core.settings import DockvmSettings

logger = get_logger(__name__)

GUEST_DOCKER_SOCKET = "/var/run/docker.sock"

_TEMPLATE = """#!/bin/sh
# generated by dockvm, overwritten on every provision
rm -f "{host_socket}"
exec ssh -F "{ssh_config}" -l "{user}" -nNT -L "{host_socket}:{guest_socket}" {ssh_host}
"""


def render_socket_forwarding_script(user: str, settings: DockvmSettings) -> str:
    return _TEMPLATE.format(
        host_socket=settings.host_socket,
        ssh_config=settings.ssh_config,
        user=user,
        guest_socket=GUEST_DOCKER_SOCKET,
        ssh_host=settings.ssh_host,
    )


def write_socket_forwarding_script(user: str, settings: DockvmSettings) -> Result[Path]:
    """Write the forwarding script for ``user``; overwrites in place."""
    path = settings.forwarding_script

    def write() -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_socket_forwarding_script(user, settings), encoding="utf-8")
        path.chmod(0o755)
        return path

    logger.debug("socket.script", file=str(path), user=user)
    return try_result(write).map_err(
        lambda exc: ScriptError(
            f"Could not write socket forwarding script {path}: {exc}",
            context=ErrorContext(path=str(path)),
            cause=exc,
        )
    )
