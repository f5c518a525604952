from __future__ import annotations

from typing import Any, Dict, Mapping, Sequence


class LaunchkitError(Exception):
    """Base exception for launchkit."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ProcessSpawnError(LaunchkitError, OSError):
    """Raised when a child process cannot be started."""

    def __init__(
        self,
        message: str,
        *,
        argv: Sequence[str] = (),
        errno: int | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        ctx["argv"] = list(argv)
        if errno is not None:
            ctx["errno"] = errno
        LaunchkitError.__init__(self, message, context=ctx)
        if errno is not None:
            OSError.__init__(self, errno, message)
        else:
            OSError.__init__(self, message)
        self.argv = list(argv)

    def __str__(self) -> str:
        return str(self.args[-1]) if self.args else ""


class PoolShutdownError(LaunchkitError, RuntimeError):
    """Raised when work is submitted to a worker pool that has been shut down."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        LaunchkitError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class ConfigError(LaunchkitError, RuntimeError):
    """Raised when a configuration value is missing or invalid."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        LaunchkitError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class SchemaValidationError(LaunchkitError, ValueError):
    """Raised when merged settings do not satisfy the bundled schema."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        LaunchkitError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class FilterRecursionError(LaunchkitError, ValueError):
    """Raised when placeholder substitution does not converge."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        LaunchkitError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "LaunchkitError",
    "ProcessSpawnError",
    "PoolShutdownError",
    "ConfigError",
    "SchemaValidationError",
    "FilterRecursionError",
]
