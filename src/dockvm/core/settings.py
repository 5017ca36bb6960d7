"""
Centralized settings for dockvm.

Manifesto:
    Paths, labels and names that several modules must agree on (the launch
    agent label, the host socket, the forwarding script, the lima ssh config)
    are derived in one place from a handful of validated inputs.

All fields can be set via ``DOCKVM_*`` environment variables (e.g.
``DOCKVM_PROFILE=dev``) or a ``.env`` file.

Tags:
    dockvm, configuration, settings, pydantic, caching

Doc-Types:
    api-reference
"""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "dockvm"
SYSTEM_DOCKER_SOCKET = Path("/var/run/docker.sock")

_PROFILE_PATTERN = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9_-]*$")


class DockvmSettings(BaseSettings):
    """dockvm configuration.

    Fields
    ──────
    profile            : Instance profile; ``default`` maps to app name ``dockvm``
    runtime            : Container runtime to manage
    label_prefix       : Reverse-domain prefix for launch agent labels
    home_dir           : Per-user state directory
    launch_agents_dir  : Where launch agent plists are installed
    lima_home          : Lima state directory (ssh config lives here)
    log_level          : Structlog log level
    log_format         : ``console`` or ``json``
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCKVM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Instance ─────────────────────────────────────────────────
    profile: str = Field(default="default")
    runtime: str = Field(default="docker")

    # ── Host paths ───────────────────────────────────────────────
    label_prefix: str = Field(default="com.dockvm")
    home_dir: Path = Field(default_factory=lambda: Path.home() / ".dockvm")
    launch_agents_dir: Path = Field(
        default_factory=lambda: Path.home() / "Library" / "LaunchAgents",
        description="Per-user launchd agents directory",
    )
    lima_home: Path = Field(default_factory=lambda: Path.home() / ".lima")

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    @field_validator("profile")
    @classmethod
    def _check_profile(cls, value: str) -> str:
        if not _PROFILE_PATTERN.match(value):
            raise ValueError(f"invalid profile name: {value!r}")
        return value

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("console", "json"):
            raise ValueError("log_format must be 'console' or 'json'")
        return value

    # ── Derived values ───────────────────────────────────────────

    @property
    def app_name(self) -> str:
        """``dockvm`` for the default profile, ``dockvm-<profile>`` otherwise."""
        if self.profile == "default":
            return APP_NAME
        return f"{APP_NAME}-{self.profile}"

    @property
    def app_dir(self) -> Path:
        return self.home_dir / self.app_name

    @property
    def host_socket(self) -> Path:
        """Host end of the forwarded docker socket."""
        return self.app_dir / "docker.sock"

    @property
    def system_socket(self) -> Path:
        return SYSTEM_DOCKER_SOCKET

    @property
    def forwarding_script(self) -> Path:
        return self.app_dir / "socket.sh"

    @property
    def lima_instance(self) -> str:
        return self.app_name

    @property
    def ssh_config(self) -> Path:
        return self.lima_home / self.lima_instance / "ssh.config"

    @property
    def ssh_host(self) -> str:
        return f"lima-{self.lima_instance}"


@lru_cache(maxsize=1)
def get_settings() -> DockvmSettings:
    """Return the cached process-wide settings."""
    return DockvmSettings()


def clear_settings_cache() -> None:
    """Drop the cached settings (tests, profile switches)."""
    get_settings.cache_clear()


__all__ = [
    "APP_NAME",
    "SYSTEM_DOCKER_SOCKET",
    "DockvmSettings",
    "get_settings",
    "clear_settings_cache",
]
