"""
dockvm - container runtime lifecycle for a lima guest, supervised by launchd.
"""

__version__ = "0.1.0"
