"""dockvm core -- results, errors, logging and settings.

Architecture::

    errors.py     Structured error hierarchy (DockvmError, CommandError)
    result.py     Result[T] envelope (Ok / Err / try_result)
    logging.py    structlog configuration and LogContext
    settings.py   DockvmSettings (pydantic-settings, DOCKVM_* env)
"""

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
)
from dockvm.core.result import Err, Ok, Result, try_result

__all__ = [
    "ChainAlreadyExecutedError",
    "ChainError",
    "CommandError",
    "ConfigError",
    "DescriptorError",
    "DockvmError",
    "ErrorCategory",
    "ErrorContext",
    "RuntimeNotFoundError",
    "ScriptError",
    "Err",
    "Ok",
    "Result",
    "try_result",
]
