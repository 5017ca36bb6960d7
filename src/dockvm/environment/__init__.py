"""Host and guest environments a container runtime is driven through.

Modules:
    protocols - HostActions, GuestActions, ContainerRuntime
    host      - HostShell (subprocess on the host)
    guest     - GuestShell (``limactl shell`` into the VM)
    registry  - ContainerRegistry and default_registry()
"""

from dockvm.environment.guest import GuestShell
from dockvm.environment.host import HostShell
from dockvm.environment.protocols import ContainerRuntime, GuestActions, HostActions
from dockvm.environment.registry import ContainerRegistry, default_registry

__all__ = [
    "ContainerRegistry",
    "ContainerRuntime",
    "GuestActions",
    "GuestShell",
    "HostActions",
    "HostShell",
    "default_registry",
]
