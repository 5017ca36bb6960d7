"""Service descriptor manager backed by launchd.

A runtime is supervised on the host as a launchd user agent: one plist per
runtime instance, labelled ``<label_prefix>.<app_name>.<runtime>`` and stored
in ``~/Library/LaunchAgents``. The plist's existence on disk is the only record
that the runtime was provisioned; nothing is tracked in memory.

Key Concepts:
    exists(): ``Path.is_file``; any OSError counts as absent.
    install(script): Renders the plist with ``plistlib`` and overwrites the file.
    load() / unload(): ``launchctl load|unload <plist>`` on the host.
    remove(): ``rm -rf <plist>`` on the host.

The manager is a set of primitives; deciding when to call them belongs to the
runtime controller.

Related Modules:
    - :mod:`dockvm.container.docker`: composes these primitives into chains

Tags:
    launchd, launchctl, plist, service-descriptor, macos
"""

from __future__ import annotations

import plistlib
from pathlib import Path

from dockvm.core.errors import DescriptorError, ErrorContext
from dockvm.core.logging import get_logger
from dockvm.core.result import Result, try_result
from dockvm.core.settings import DockvmSettings
from dockvm.environment.protocols import HostActions

logger = get_logger(__name__)

LAUNCHCTL = "launchctl"


def agent_label(prefix: str, app_name: str, runtime: str) -> str:
    """``com.dockvm`` + ``dockvm`` + ``docker`` → ``com.dockvm.dockvm.docker``."""
    return f"{prefix}.{app_name}.{runtime}"


class LaunchAgent:
    """launchd user agent for one runtime instance.

    Parameters
    ----------
    label
        launchd label, also the plist file stem.
    agents_dir
        Directory holding the plist.
    log_dir
        Directory for the agent's stdout/stderr logs.
    host
        Host capability provider used for ``launchctl`` and ``rm``.
    """

    def __init__(self, label: str, agents_dir: Path, log_dir: Path, host: HostActions) -> None:
        self.label = label
        self.agents_dir = Path(agents_dir)
        self.log_dir = Path(log_dir)
        self._host = host

    @classmethod
    def for_runtime(cls, runtime: str, host: HostActions, settings: DockvmSettings) -> LaunchAgent:
        return cls(
            label=agent_label(settings.label_prefix, settings.app_name, runtime),
            agents_dir=settings.launch_agents_dir,
            log_dir=settings.app_dir,
            host=host,
        )

    @property
    def file(self) -> Path:
        return self.agents_dir / f"{self.label}.plist"

    def exists(self) -> bool:
        try:
            return self.file.is_file()
        except OSError as exc:
            logger.debug("launchd.exists_error", file=str(self.file), error=str(exc))
            return False

    def render(self, script: Path) -> bytes:
        """Plist document running ``script`` under ``/bin/sh``."""
        return plistlib.dumps(
            {
                "Label": self.label,
                "ProgramArguments": ["/bin/sh", str(script)],
                "RunAtLoad": True,
                "KeepAlive": True,
                "StandardOutPath": str(self.log_dir / f"{self.label}.stdout.log"),
                "StandardErrorPath": str(self.log_dir / f"{self.label}.stderr.log"),
            }
        )

    def install(self, script: Path) -> Result[None]:
        """Write (or overwrite) the plist for ``script``."""

        def write() -> None:
            payload = self.render(script)
            self.agents_dir.mkdir(parents=True, exist_ok=True)
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self.file.write_bytes(payload)

        logger.debug("launchd.install", label=self.label, file=str(self.file))
        return try_result(write).map_err(
            lambda exc: DescriptorError(
                f"Could not write launch agent {self.file}: {exc}",
                context=ErrorContext(path=str(self.file)),
                cause=exc,
            )
        )

    def load(self) -> Result[None]:
        return self._host.run([LAUNCHCTL, "load", str(self.file)])

    def unload(self) -> Result[None]:
        return self._host.run([LAUNCHCTL, "unload", str(self.file)])

    def remove(self) -> Result[None]:
        return self._host.run(["rm", "-rf", str(self.file)])

    def __repr__(self) -> str:
        return f"LaunchAgent({self.label!r})"


__all__ = [
    "LaunchAgent",
    "agent_label",
]
