"""Utility helpers for bifrost."""

from bifrost.utils.exceptions import (
    BifrostError,
    InvocationFault,
    MarshalError,
    ModuleAccessDenied,
    ProtocolError,
    RemoteError,
    TransportClosed,
    TransportTimeout,
    UnknownMethod,
    UnknownModule,
    UnknownReference,
    error_message,
    sanitize_error_message,
)

__all__ = [
    "BifrostError",
    "InvocationFault",
    "MarshalError",
    "ModuleAccessDenied",
    "ProtocolError",
    "RemoteError",
    "TransportClosed",
    "TransportTimeout",
    "UnknownMethod",
    "UnknownModule",
    "UnknownReference",
    "error_message",
    "sanitize_error_message",
]
