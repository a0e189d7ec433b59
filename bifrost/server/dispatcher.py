"""Server-side request dispatch with a hard error boundary."""

from __future__ import annotations

from typing import Any

from loguru import logger

from bifrost.core.codec import decode_request_line, encode_response_line
from bifrost.core.contracts import HostRuntime
from bifrost.core.marshal import DEFAULT_MAX_DEPTH
from bifrost.core.protocol import CallRequest, ModuleRequest, Request, Response
from bifrost.server.marshal import ServerMarshaller
from bifrost.server.object_table import ObjectTable
from bifrost.utils.exceptions import (
    BifrostError,
    InvocationFault,
    MarshalError,
    error_message,
    sanitize_error_message,
)


class Dispatcher:
    """Turns one decoded request into exactly one response; never raises."""

    def __init__(
        self,
        host: HostRuntime,
        table: ObjectTable | None = None,
        *,
        redact_errors: bool = True,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.host = host
        self.table = table if table is not None else ObjectTable()
        self.marshaller = ServerMarshaller(self.table, max_depth=max_depth)
        self.redact_errors = redact_errors
        self.handled = 0

    def handle(self, request: Request) -> Response:
        self.handled += 1
        try:
            if isinstance(request, ModuleRequest):
                return self._handle_module(request)
            return self._handle_call(request)
        except InvocationFault as exc:
            logger.debug("Call {} raised {}", exc.method, exc.message)
            return self._failure(exc)
        except BifrostError as exc:
            logger.warning("Request failed with {}: {}", exc.code, exc.message)
            return self._failure(exc)
        except Exception as exc:
            logger.exception("Unexpected dispatcher failure")
            return self._failure(exc)

    def handle_line(self, line: str) -> str:
        """Decode one wire record, dispatch it and encode the reply."""
        try:
            request = decode_request_line(line)
        except MarshalError as exc:
            logger.warning("Rejected malformed request: {}", exc.message)
            response = self._failure(exc)
        else:
            response = self.handle(request)
        try:
            return encode_response_line(response)
        except MarshalError as exc:
            return encode_response_line(self._failure(exc))

    def _handle_module(self, request: ModuleRequest) -> Response:
        logger.debug("module {}", request.module)
        try:
            module = self.host.resolve_module(request.module)
        except BifrostError:
            raise
        except BaseException as exc:
            # import-time code may call sys.exit or raise anything
            raise InvocationFault.from_exception(request.module, exc) from exc
        return Response.success(self.marshaller.encode(module))

    def _handle_call(self, request: CallRequest) -> Response:
        logger.debug("call oid={} method={} params={}", request.oid, request.method, len(request.params))
        target = self.table.resolve(request.oid)
        member = self.host.resolve_member(target, request.method)
        params = [self.marshaller.decode(param) for param in request.params]
        try:
            value: Any = member(*params)
        except BaseException as exc:
            # SystemExit and KeyboardInterrupt from bridged code must not stop the server
            raise InvocationFault.from_exception(request.method, exc) from exc
        return Response.success(self.marshaller.encode(value))

    def _failure(self, exc: BaseException) -> Response:
        message = error_message(exc)
        if self.redact_errors:
            message = sanitize_error_message(message)
        return Response.failure(message)
