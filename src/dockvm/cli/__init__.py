"""
CLI layer for dockvm.

Terminal transport only: argument parsing, wiring a runtime to the host and
guest shells, and coloured output. Lifecycle logic lives in
``dockvm.container``.

Entry point::

    dockvm --help
"""

from dockvm.cli.app import app

__all__ = ["app"]
