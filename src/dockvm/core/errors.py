"""
Structured error types for dockvm.

Every failure that can end a lifecycle operation is a ``DockvmError`` carrying
a category and a structured context (runtime, stage, action, argv, exit code).
These errors are normally *returned* inside ``Err`` rather than raised: the
action chain hands the first one back to the caller exactly as the failing
step produced it.

Manifesto:
    - **Typed Error Hierarchy:** A failed host command, a failed file write
      and an unknown runtime name are different things and look different
    - **Rich Context:** argv, exit code and stderr travel with the error so the
      CLI can print something actionable
    - **Error Chaining:** ``cause=`` preserves the underlying OSError

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                       DockvmError                                │
        │  (category, context, cause)                                      │
        ├─────────────────────────────────────────────────────────────────┤
        │  CommandError      ScriptError       DescriptorError            │
        │  (COMMAND)         (FILESYSTEM)      (FILESYSTEM)               │
        │                                                                  │
        │  ChainError        RuntimeNotFound   ConfigError                │
        │  (CHAIN)           (REGISTRY)        (CONFIG)                   │
        │       │                                                          │
        │  ChainAlreadyExecutedError                                       │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = CommandError(["launchctl", "load", "x.plist"], exit_code=1, stderr="nope")
    >>> error.category.value
    'COMMAND'
    >>> error.context.exit_code
    1

Guardrails:
    ❌ DON'T: Raise from inside a chain action
    ✅ DO: Return Err(SomeDockvmError(...)) and let the chain stop

    ❌ DON'T: Swallow the original exception
    ✅ DO: Pass it as cause= for error chaining

Tags:
    error-handling, exception-hierarchy, error-context, dockvm

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification and reporting.

    The CLI prints the category next to the message, so values are short,
    upper-case and stable.
    """

    COMMAND = "COMMAND"           # Host or guest command failed / could not run
    FILESYSTEM = "FILESYSTEM"     # Script or descriptor could not be written
    CONFIG = "CONFIG"             # Invalid settings
    REGISTRY = "REGISTRY"         # Unknown runtime name
    CHAIN = "CHAIN"               # Action chain misuse
    INTERNAL = "INTERNAL"         # Bugs, unexpected state
    UNKNOWN = "UNKNOWN"           # Uncategorized errors


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Attributes:
        runtime: Container runtime name (e.g. "docker")
        stage: Chain stage in effect when the failure happened
        action: Human readable action name
        argv: Command line that was executed
        exit_code: Process exit code, if the process ran
        stderr: Captured standard error, if any
        path: File involved in a filesystem failure
        metadata: Additional key-value pairs
    """

    runtime: str | None = None
    stage: str | None = None
    action: str | None = None
    argv: list[str] | None = None
    exit_code: int | None = None
    stderr: str | None = None
    path: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["runtime", "stage", "action", "argv", "exit_code", "stderr", "path"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class DockvmError(Exception):
    """
    Base exception for all dockvm errors.

    Subclasses set ``default_category``; callers may override it per
    instance. ``with_context`` fills known context fields and drops anything
    else into ``context.metadata``.

    Examples:
        >>> error = DockvmError("boom").with_context(runtime="docker", attempt=2)
        >>> error.context.runtime
        'docker'
        >>> error.context.metadata["attempt"]
        2
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> DockvmError:
        """Add context to this error (fluent API)."""
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# COMMAND ERRORS
# =============================================================================


class CommandError(DockvmError):
    """
    A host or guest command exited non-zero or could not be started.

    ``exit_code`` is None when the process never ran (binary missing,
    permission denied); ``cause`` then holds the OSError.
    """

    default_category = ErrorCategory.COMMAND

    def __init__(
        self,
        argv: list[str],
        *,
        exit_code: int | None = None,
        stderr: str = "",
        message: str | None = None,
        cause: Exception | None = None,
    ):
        self.argv = list(argv)
        self.exit_code = exit_code
        self.stderr = stderr
        if message is None:
            if exit_code is None:
                message = f"Command could not be run: {' '.join(self.argv)}"
            else:
                message = f"Command failed (exit {exit_code}): {' '.join(self.argv)}"
            if stderr.strip():
                message = f"{message}\n{stderr.strip()}"
        super().__init__(
            message,
            context=ErrorContext(argv=self.argv, exit_code=exit_code, stderr=stderr or None),
            cause=cause,
        )


# =============================================================================
# FILESYSTEM ERRORS
# =============================================================================


class ScriptError(DockvmError):
    """Host-side helper script could not be written."""

    default_category = ErrorCategory.FILESYSTEM


class DescriptorError(DockvmError):
    """Service descriptor could not be rendered or written."""

    default_category = ErrorCategory.FILESYSTEM


# =============================================================================
# CHAIN / REGISTRY / CONFIG ERRORS
# =============================================================================


class ChainError(DockvmError):
    """Action chain misuse."""

    default_category = ErrorCategory.CHAIN


class ChainAlreadyExecutedError(ChainError):
    """An action chain is single-use and was executed a second time."""

    def __init__(self, name: str):
        self.chain_name = name
        super().__init__(f"Action chain '{name}' has already been executed")


class RuntimeNotFoundError(DockvmError):
    """No container runtime registered under the requested name."""

    default_category = ErrorCategory.REGISTRY

    def __init__(self, name: str, available: list[str] | None = None):
        self.runtime_name = name
        self.available = sorted(available or [])
        listing = ", ".join(self.available) or "(none)"
        super().__init__(f"Unsupported container runtime '{name}'. Available: {listing}")


class ConfigError(DockvmError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, DockvmError):
        return error.category
    if isinstance(error, OSError):
        return ErrorCategory.FILESYSTEM
    # pydantic's ValidationError is a ValueError
    if isinstance(error, ValueError):
        return ErrorCategory.CONFIG
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "DockvmError",
    "CommandError",
    "ScriptError",
    "DescriptorError",
    "ChainError",
    "ChainAlreadyExecutedError",
    "RuntimeNotFoundError",
    "ConfigError",
    "categorize_error",
]
