"""Container runtimes and the machinery they are built from.

Modules:
    chain       - Action, ActionChain (fail-fast sequential steps)
    launchd     - LaunchAgent (host service descriptor)
    forwarding  - docker socket forwarding script
    docker      - DockerRuntime (runtime controller)
"""

from dockvm.container.chain import Action, ActionChain
from dockvm.container.docker import DockerRuntime
from dockvm.container.launchd import LaunchAgent

__all__ = [
    "Action",
    "ActionChain",
    "DockerRuntime",
    "LaunchAgent",
]
