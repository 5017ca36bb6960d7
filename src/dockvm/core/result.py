"""
Result envelope for host, guest and chain operations.

Every fallible call in dockvm (a host command, a guest command, an action in
a chain, a file write) returns ``Ok[T]`` on success or ``Err[T]`` on failure
instead of raising. A lifecycle operation can then hand the *exact* failure of
its first failing step back to the caller, which is what the action chain's
fail-fast contract requires.

Manifesto:
    - **Failure as a value:** A failed ``launchctl load`` is an expected outcome,
      not an exceptional one. It travels back as ``Err`` untouched.
    - **Verbatim propagation:** ``Err`` carries the original exception object;
      nothing re-wraps it on the way up.
    - **Probe-friendly:** ``is_ok()`` turns any query into a boolean check.

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                     Result[T]                                │
        ├─────────────────┬─────────────────┬─────────────────────────┤
        │     Ok[T]       │     Err[T]      │     Utilities           │
        ├─────────────────┼─────────────────┼─────────────────────────┤
        │ • value: T      │ • error: Exc    │ • try_result()          │
        │ • map()         │ • map_err()     │                         │
        │ • flat_map()    │ • or_else()     │                         │
        │ • unwrap()      │ • unwrap_or()   │                         │
        └─────────────────┴─────────────────┴─────────────────────────┘

Examples:
    >>> from dockvm.core.result import Ok, Err
    >>> Ok("v24.0.7").map(str.upper).unwrap()
    'V24.0.7'
    >>> Err(ValueError("no daemon")).unwrap_or("")
    ''

Guardrails:
    ❌ DON'T: Call unwrap() on a command result without checking is_ok()
    ✅ DO: Use unwrap_or() for best-effort queries such as version()

    ❌ DON'T: Re-wrap an Err's exception when passing it upwards
    ✅ DO: Return the Err object itself

Tags:
    result-pattern, error-handling, dockvm, fail-fast

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from dockvm.core.errors import DockvmError


T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Successful result containing a value.

    Commands that produce no meaningful value (``run``) return ``Ok(None)``;
    queries (``run_output``, ``user``) return ``Ok(text)``.

    Examples:
        >>> Ok(42).is_ok()
        True
        >>> Ok(10).map(lambda x: x * 2).unwrap()
        20
    """

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def unwrap_or_else(self, f: Callable[[Exception], T]) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Transform the value."""
        return Ok(f(self.value))

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Chain to another fallible call."""
        return f(self.value)

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        """No-op for Ok."""
        return self

    def or_else(self, f: Callable[[Exception], Result[T]]) -> Result[T]:
        """No-op for Ok."""
        return self

    def inspect(self, f: Callable[[T], None]) -> Result[T]:
        """Call f with the value for side effects, return self."""
        f(self.value)
        return self

    def inspect_err(self, f: Callable[[Exception], None]) -> Result[T]:
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"ok": True, "value": self.value}

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """
    Failed result containing an error.

    ``Err`` short-circuits ``map``/``flat_map``: the same exception object is
    carried through unchanged, which is what lets the action chain return the
    first failure verbatim.

    Examples:
        >>> err = Err(ValueError("launchctl missing"))
        >>> err.is_err()
        True
        >>> err.map(lambda x: x * 2).error is err.error
        True

    Guardrails:
        ❌ DON'T: Call unwrap() on Err - it raises the error
        ✅ DO: Prefer DockvmError subclasses so category and context survive
    """

    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the error. Use only when you're sure it's Ok."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_or_else(self, f: Callable[[Exception], T]) -> T:
        return f(self.error)

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        """Transform the error."""
        return Err(f(self.error))

    def or_else(self, f: Callable[[Exception], Result[T]]) -> Result[T]:
        """Call f with error to try recovery."""
        return f(self.error)

    def inspect(self, f: Callable[[T], None]) -> Result[T]:
        return self

    def inspect_err(self, f: Callable[[Exception], None]) -> Result[T]:
        """Call f with error for side effects, return self."""
        f(self.error)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        if isinstance(self.error, DockvmError):
            return {"ok": False, "error": self.error.to_dict()}
        return {
            "ok": False,
            "error": {
                "error_type": type(self.error).__name__,
                "message": str(self.error),
            },
        }

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[T]


def try_result(f: Callable[[], T]) -> Result[T]:
    """
    Execute a function and wrap its outcome in a Result.

    Bridges exception-raising code (file writes, ``plistlib``) into the
    Result world: a return value becomes ``Ok``, any exception becomes
    ``Err`` holding that same exception.

    Examples:
        >>> try_result(lambda: int("3")).unwrap()
        3
        >>> try_result(lambda: int("x")).is_err()
        True
    """
    try:
        return Ok(f())
    except Exception as e:
        return Err(e)


__all__ = [
    "Ok",
    "Err",
    "Result",
    "try_result",
]
