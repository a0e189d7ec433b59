"""
Exception hierarchy for the bifrost bridge.

Provides:
- One exception class per failure kind of the bridge protocol
- Local diagnostic codes (never sent on the wire)
- Safe error message formatting (no sensitive data leak)
"""

from __future__ import annotations

import re
from typing import Any


class BifrostError(Exception):
    """Base exception for all bifrost errors."""

    def __init__(
        self,
        message: str,
        code: str = "BRIDGE_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class MarshalError(BifrostError):
    """A value or record could not be converted to or from its wire shape."""

    def __init__(self, message: str, path: str | None = None):
        details = {"path": path} if path else {}
        if path:
            message = f"{message} (at {path})"
        super().__init__(message, code="MARSHAL_ERROR", details=details)


class UnknownReference(BifrostError):
    """An object identifier does not resolve in the object table."""

    def __init__(self, oid: Any):
        super().__init__(
            f"unknown object reference: {oid!r}",
            code="UNKNOWN_REFERENCE",
            details={"oid": oid},
        )
        self.oid = oid


class UnknownMethod(BifrostError):
    """The resolved object has no member with the requested name."""

    def __init__(self, method: str, target: str = "object"):
        super().__init__(
            f"{target} has no member {method!r}",
            code="UNKNOWN_METHOD",
            details={"method": method, "target": target},
        )
        self.method = method


class UnknownModule(BifrostError):
    """The host runtime could not load the requested module."""

    def __init__(self, module: str, reason: str = ""):
        message = f"cannot import module {module!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message, code="UNKNOWN_MODULE", details={"module": module})
        self.module = module


class ModuleAccessDenied(BifrostError):
    """The module is excluded by the server's module policy."""

    def __init__(self, module: str):
        super().__init__(
            f"module {module!r} is not allowed on this bridge",
            code="MODULE_DENIED",
            details={"module": module},
        )
        self.module = module


class InvocationFault(BifrostError):
    """The invoked member raised while running."""

    def __init__(self, method: str, message: str, exc_type: str = "Exception"):
        super().__init__(
            message,
            code="INVOCATION_FAULT",
            details={"method": method, "exc_type": exc_type},
        )
        self.method = method
        self.exc_type = exc_type

    @classmethod
    def from_exception(cls, method: str, exc: BaseException) -> "InvocationFault":
        exc_type = type(exc).__name__
        text = str(exc).strip()
        message = f"{exc_type}: {text}" if text else exc_type
        return cls(method, message, exc_type)


class RemoteError(BifrostError):
    """The server answered with an error response."""

    def __init__(self, message: str):
        super().__init__(message or "remote call failed", code="REMOTE_ERROR")


class ProtocolError(BifrostError):
    """A response record violates the response invariant."""

    def __init__(self, message: str, record: Any = None):
        details = {"record": record} if record is not None else {}
        super().__init__(message, code="PROTOCOL_ERROR", details=details)


class TransportTimeout(BifrostError):
    """No response record arrived within the configured timeout."""

    def __init__(self, timeout_seconds: float, operation: str = "response"):
        super().__init__(
            f"timed out after {timeout_seconds}s waiting for {operation}",
            code="TRANSPORT_TIMEOUT",
            details={"timeout_seconds": timeout_seconds, "operation": operation},
        )
        self.timeout_seconds = timeout_seconds


class TransportClosed(BifrostError):
    """The transport is closed or the peer went away."""

    def __init__(self, message: str = "bridge transport is closed"):
        super().__init__(message, code="TRANSPORT_CLOSED")


_SENSITIVE_PATTERNS = [
    re.compile(r"(api[_-]?key|token|secret|password|auth)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE),
    re.compile(r"sk-[a-zA-Z0-9]{20,}"),
    re.compile(r"xox[baprs]-[a-zA-Z0-9\-]+"),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove sensitive information from error messages."""
    sanitized = message
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def error_message(exc: BaseException) -> str:
    """Human-readable message for an error response; never empty."""
    if isinstance(exc, BifrostError):
        return exc.message or exc.code
    text = str(exc).strip()
    return f"{type(exc).__name__}: {text}" if text else type(exc).__name__
