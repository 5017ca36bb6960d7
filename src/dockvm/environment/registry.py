"""Container runtime registry.

Maps a runtime name (``"docker"``) to a constructor that binds a runtime to a
host/guest capability pair. The registry is an ordinary object built once at
startup by :func:`default_registry` and passed to whoever needs it; nothing
registers itself as a side effect of being imported.

.. code-block:: text

    default_registry()
         │  register("docker", DockerRuntime)
         ▼
    ContainerRegistry ──create("docker", host, guest)──▶ DockerRuntime
         │
         └── create("podman", ...) ──▶ RuntimeNotFoundError

Example:
    >>> registry = ContainerRegistry()
    >>> registry.register("docker", DockerRuntime)
    >>> runtime = registry.create("docker", host, guest)
    >>> runtime.name
    'docker'

Tags:
    dockvm, registry, container-runtime, dependency-injection
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from dockvm.core.errors import RuntimeNotFoundError
from dockvm.core.logging import get_logger

if TYPE_CHECKING:
    from dockvm.core.settings import DockvmSettings
    from dockvm.environment.protocols import ContainerRuntime, GuestActions, HostActions

    RuntimeConstructor = Callable[[HostActions, GuestActions, DockvmSettings | None], ContainerRuntime]

logger = get_logger(__name__)


class ContainerRegistry:
    """Name-keyed table of container runtime constructors."""

    def __init__(self) -> None:
        self._constructors: dict[str, RuntimeConstructor] = {}

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def register(self, name: str, constructor: RuntimeConstructor) -> None:
        """Register ``constructor`` under ``name``.

        An existing registration with the same name is replaced (with a
        warning).
        """
        if name in self._constructors:
            logger.warning("registry.replace", runtime=name)
        self._constructors[name] = constructor
        logger.debug("registry.register", runtime=name)

    def unregister(self, name: str) -> bool:
        """Remove a runtime; True if it was registered."""
        if name not in self._constructors:
            return False
        del self._constructors[name]
        return True

    def names(self) -> list[str]:
        """Sorted list of registered runtime names."""
        return sorted(self._constructors)

    def create(
        self,
        name: str,
        host: HostActions,
        guest: GuestActions,
        settings: DockvmSettings | None = None,
    ) -> ContainerRuntime:
        """Construct the runtime registered as ``name``.

        Raises:
            RuntimeNotFoundError: If no runtime is registered under ``name``.
        """
        constructor = self._constructors.get(name)
        if constructor is None:
            raise RuntimeNotFoundError(name, self.names())
        return constructor(host, guest, settings)

    def __len__(self) -> int:
        return len(self._constructors)

    def __contains__(self, name: str) -> bool:
        return name in self._constructors

    def __repr__(self) -> str:
        return f"ContainerRegistry([{', '.join(self.names())}])"


def default_registry() -> ContainerRegistry:
    """Registry holding every runtime dockvm ships with."""
    from dockvm.container.docker import DockerRuntime

    registry = ContainerRegistry()
    registry.register(DockerRuntime.NAME, DockerRuntime)
    return registry


__all__ = [
    "ContainerRegistry",
    "default_registry",
]
