"""Call gateway: one blocking request/response exchange per call."""

from __future__ import annotations

import threading
from typing import Any, Iterable

from loguru import logger

from bifrost.client.marshal import ClientMarshaller
from bifrost.core.codec import decode_response_line, encode_request_line
from bifrost.core.contracts import Transport
from bifrost.core.marshal import DEFAULT_MAX_DEPTH
from bifrost.core.protocol import CallRequest, ModuleRequest, Request
from bifrost.utils.exceptions import (
    MarshalError,
    ProtocolError,
    RemoteError,
    TransportClosed,
    TransportTimeout,
)


class CallGateway:
    """Client end of one bridge connection.

    The protocol has no correlation ids, so exactly one request may be in
    flight: the exchange is serialized under a lock, and a timeout closes the
    connection because a late reply could no longer be paired correctly.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        timeout: float | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.transport = transport
        self.timeout = timeout
        self.marshaller = ClientMarshaller(self, max_depth=max_depth)
        self._lock = threading.Lock()
        self._closed = False
        self.calls = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def import_module(self, name: str) -> Any:
        """Load ``name`` on the server; usually returns a Proxy for the module."""
        return self._exchange(ModuleRequest(module=name))

    def call(self, oid: int, method: str, params: Iterable[Any] = ()) -> Any:
        tagged = [self.marshaller.encode(param) for param in params]
        return self._exchange(CallRequest(oid=oid, method=method, params=tagged))

    def _exchange(self, request: Request) -> Any:
        line = encode_request_line(request)
        with self._lock:
            if self._closed:
                raise TransportClosed()
            self.calls += 1
            try:
                self.transport.send(line)
                raw = self.transport.receive(self.timeout)
            except TransportTimeout:
                logger.warning("Bridge call timed out; closing connection")
                self._close_locked()
                raise
            except TransportClosed:
                self._close_locked()
                raise
            try:
                response = decode_response_line(raw)
            except (MarshalError, ProtocolError):
                logger.warning("Bridge sent an unreadable response; closing connection")
                self._close_locked()
                raise
        if response.error is not None:
            raise RemoteError(response.error)
        return self.marshaller.decode(response.result)

    def close(self) -> None:
        with self._lock:
            self._close_locked()

    def _close_locked(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self.transport.close()
        except Exception as exc:
            logger.debug("Ignoring transport close failure: {}", exc)

    def __enter__(self) -> "CallGateway":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
