"""Tests for dockvm.core.settings module."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from dockvm.core.settings import (
    SYSTEM_DOCKER_SOCKET,
    DockvmSettings,
    clear_settings_cache,
    get_settings,
)


class TestDefaults:
    def test_default_profile(self):
        settings = DockvmSettings()
        assert settings.profile == "default"
        assert settings.runtime == "docker"
        assert settings.app_name == "dockvm"
        assert settings.lima_instance == "dockvm"
        assert settings.label_prefix == "com.dockvm"

    def test_default_paths_under_home(self):
        settings = DockvmSettings()
        assert settings.home_dir == Path.home() / ".dockvm"
        assert settings.launch_agents_dir == Path.home() / "Library" / "LaunchAgents"
        assert settings.lima_home == Path.home() / ".lima"


class TestDerivedValues:
    def test_profile_app_name(self, tmp_path):
        settings = DockvmSettings(profile="dev", home_dir=tmp_path)
        assert settings.app_name == "dockvm-dev"
        assert settings.app_dir == tmp_path / "dockvm-dev"

    def test_sockets_and_script(self, settings):
        assert settings.host_socket == settings.app_dir / "docker.sock"
        assert settings.system_socket == SYSTEM_DOCKER_SOCKET
        assert settings.forwarding_script == settings.app_dir / "socket.sh"

    def test_ssh(self, settings):
        assert settings.ssh_config == settings.lima_home / "dockvm" / "ssh.config"
        assert settings.ssh_host == "lima-dockvm"


class TestValidation:
    @pytest.mark.parametrize("profile", ["", "-dev", "a b", "x/y"])
    def test_invalid_profile(self, profile):
        with pytest.raises(ValidationError):
            DockvmSettings(profile=profile)

    def test_log_format_normalised(self):
        assert DockvmSettings(log_format="JSON").log_format == "json"

    def test_invalid_log_format(self):
        with pytest.raises(ValidationError):
            DockvmSettings(log_format="xml")


class TestEnvironment:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("DOCKVM_PROFILE", "ci")
        monkeypatch.setenv("DOCKVM_LOG_LEVEL", "DEBUG")
        settings = DockvmSettings()
        assert settings.app_name == "dockvm-ci"
        assert settings.log_level == "DEBUG"

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()

    def test_clear_cache(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("DOCKVM_PROFILE", "other")
        assert get_settings() is first
        clear_settings_cache()
        assert get_settings().profile == "other"
