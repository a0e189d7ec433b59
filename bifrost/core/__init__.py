"""Shared protocol records, wire codec and value marshalling."""

from .codec import (
    decode_request_line,
    decode_response_line,
    encode_request_line,
    encode_response_line,
    safe_dict,
)
from .contracts import HostRuntime, Transport
from .marshal import ValueMarshaller
from .protocol import MAP_KEY, REF_KEY, CallRequest, ModuleRequest, ObjectRef, Request, Response

__all__ = [
    "CallRequest",
    "HostRuntime",
    "MAP_KEY",
    "ModuleRequest",
    "ObjectRef",
    "REF_KEY",
    "Request",
    "Response",
    "Transport",
    "ValueMarshaller",
    "decode_request_line",
    "decode_response_line",
    "encode_request_line",
    "encode_response_line",
    "safe_dict",
]
