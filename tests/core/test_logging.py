"""Tests for dockvm.core.logging module."""

import json

import pytest
import structlog

from dockvm.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


class TestContext:
    def test_bind_and_unbind(self):
        bind_context(runtime="docker", operation="start")
        assert structlog.contextvars.get_contextvars() == {"runtime": "docker", "operation": "start"}
        unbind_context("operation")
        assert structlog.contextvars.get_contextvars() == {"runtime": "docker"}
        clear_context()
        assert structlog.contextvars.get_contextvars() == {}

    def test_log_context_scoped(self):
        with LogContext(runtime="docker", operation="stop") as ctx:
            assert isinstance(ctx, LogContext)
            assert structlog.contextvars.get_contextvars()["operation"] == "stop"
        assert structlog.contextvars.get_contextvars() == {}


class TestGetLogger:
    def test_named_logger_usable_without_configuration(self):
        logger = get_logger("dockvm.container.chain")
        logger.debug("chain.start", chain="docker")

    def test_named_logger_binds_name(self):
        logger = get_logger("dockvm.x").bind(extra=1)
        assert logger._context == {"logger_name": "dockvm.x", "extra": 1}


class TestConfigureLogging:
    def test_json_output_to_stderr(self, capsys):
        configure_logging(level="INFO", json_format=True, service="dockvm-test")
        with LogContext(runtime="docker"):
            get_logger("dockvm.test").info("chain.stage", stage="starting")

        captured = capsys.readouterr()
        assert captured.out == ""
        line = json.loads(captured.err.strip().splitlines()[-1])
        assert line["event"] == "chain.stage"
        assert line["stage"] == "starting"
        assert line["runtime"] == "docker"
        assert line["service"] == "dockvm-test"
        assert line["logger_name"] == "dockvm.test"
        assert line["level"] == "info"
        assert "timestamp" in line

    def test_level_filters(self, capsys):
        configure_logging(level="WARNING", json_format=True)
        get_logger(__name__).info("hidden")
        get_logger(__name__).warning("shown")
        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err

    def test_module_logger_follows_reconfiguration(self, capsys):
        logger = get_logger("dockvm.early")
        configure_logging(level="ERROR", json_format=True)
        logger.warning("dropped")
        configure_logging(level="DEBUG", json_format=True)
        logger.debug("kept")
        err = capsys.readouterr().err
        assert "dropped" not in err
        assert "kept" in err

    def test_without_timestamp(self, capsys):
        configure_logging(level="INFO", json_format=True, add_timestamp=False)
        get_logger().info("plain")
        line = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert "timestamp" not in line
