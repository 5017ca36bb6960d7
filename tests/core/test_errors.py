"""Tests for dockvm.core.errors module."""

import pytest

from dockvm.core.errors import (
    ChainAlreadyExecutedError,
    ChainError,
    CommandError,
    ConfigError,
    DescriptorError,
    DockvmError,
    ErrorCategory,
    ErrorContext,
    RuntimeNotFoundError,
    ScriptError,
    categorize_error,
)


class TestErrorContext:
    def test_to_dict_skips_none(self):
        ctx = ErrorContext(runtime="docker", exit_code=0)
        assert ctx.to_dict() == {"runtime": "docker", "exit_code": 0}

    def test_metadata_merged(self):
        ctx = ErrorContext(stage="starting", metadata={"attempt": 2})
        assert ctx.to_dict() == {"stage": "starting", "attempt": 2}


class TestDockvmError:
    def test_default_category(self):
        assert DockvmError("x").category == ErrorCategory.INTERNAL

    def test_category_override(self):
        assert DockvmError("x", category=ErrorCategory.CONFIG).category == ErrorCategory.CONFIG

    def test_cause_chained(self):
        cause = OSError("denied")
        error = DockvmError("wrap", cause=cause)
        assert error.cause is cause
        assert error.__cause__ is cause

    def test_with_context(self):
        error = DockvmError("x").with_context(runtime="docker", attempt=2)
        assert error.context.runtime == "docker"
        assert error.context.metadata == {"attempt": 2}

    def test_with_context_metadata_key_not_replaced(self):
        error = DockvmError("x").with_context(metadata="plain")
        assert error.context.metadata == {"metadata": "plain"}

    def test_to_dict(self):
        data = DockvmError("boom", cause=ValueError("inner")).to_dict()
        assert data["error_type"] == "DockvmError"
        assert data["message"] == "boom"
        assert data["category"] == "INTERNAL"
        assert data["cause"] == "inner"
        assert "context" not in data

    def test_repr(self):
        assert repr(ConfigError("bad")) == "ConfigError('bad', category=CONFIG)"


class TestCommandError:
    def test_non_zero_exit(self):
        error = CommandError(["launchctl", "load", "a.plist"], exit_code=5, stderr="  nope \n")
        assert error.argv == ["launchctl", "load", "a.plist"]
        assert error.exit_code == 5
        assert error.category == ErrorCategory.COMMAND
        assert str(error) == "Command failed (exit 5): launchctl load a.plist\nnope"
        assert error.context.argv == ["launchctl", "load", "a.plist"]
        assert error.context.exit_code == 5

    def test_could_not_run(self):
        cause = FileNotFoundError("limactl")
        error = CommandError(["limactl", "shell"], cause=cause)
        assert error.exit_code is None
        assert str(error) == "Command could not be run: limactl shell"
        assert error.__cause__ is cause
        assert error.context.stderr is None

    def test_explicit_message(self):
        assert str(CommandError(["x"], exit_code=1, message="custom")) == "custom"

    def test_argv_copied(self):
        argv = ["a"]
        error = CommandError(argv, exit_code=1)
        argv.append("b")
        assert error.argv == ["a"]


class TestSpecificErrors:
    @pytest.mark.parametrize(
        "error, category",
        [
            (ScriptError("x"), ErrorCategory.FILESYSTEM),
            (DescriptorError("x"), ErrorCategory.FILESYSTEM),
            (ChainError("x"), ErrorCategory.CHAIN),
            (ChainAlreadyExecutedError("docker"), ErrorCategory.CHAIN),
            (RuntimeNotFoundError("podman"), ErrorCategory.REGISTRY),
            (ConfigError("x"), ErrorCategory.CONFIG),
        ],
    )
    def test_categories(self, error, category):
        assert error.category == category
        assert isinstance(error, DockvmError)

    def test_chain_already_executed(self):
        error = ChainAlreadyExecutedError("docker")
        assert error.chain_name == "docker"
        assert "already been executed" in str(error)

    def test_runtime_not_found_lists_available(self):
        error = RuntimeNotFoundError("podman", ["nerdctl", "docker"])
        assert error.runtime_name == "podman"
        assert error.available == ["docker", "nerdctl"]
        assert str(error) == "Unsupported container runtime 'podman'. Available: docker, nerdctl"

    def test_runtime_not_found_none_available(self):
        assert str(RuntimeNotFoundError("docker")).endswith("Available: (none)")


class TestCategorizeError:
    def test_dockvm_error(self):
        assert categorize_error(CommandError(["x"], exit_code=1)) == ErrorCategory.COMMAND

    def test_os_error(self):
        assert categorize_error(PermissionError("denied")) == ErrorCategory.FILESYSTEM

    def test_value_error(self):
        assert categorize_error(ValueError("bad")) == ErrorCategory.CONFIG

    def test_unknown(self):
        assert categorize_error(RuntimeError("?")) == ErrorCategory.UNKNOWN
