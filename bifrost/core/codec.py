"""Line-delimited JSON codec for bridge request and response records."""

from __future__ import annotations

import json
from typing import Any

from bifrost.core.protocol import CallRequest, ModuleRequest, Request, Response
from bifrost.utils.exceptions import MarshalError, ProtocolError

_MODULE_FIELDS = frozenset({"module"})
_CALL_FIELDS = frozenset({"oid", "method", "params"})


def safe_dict(value: Any) -> dict[str, Any]:
    """Return the value when dict-like, otherwise an empty dict."""
    return value if isinstance(value, dict) else {}


def _dumps(payload: dict[str, Any]) -> str:
    try:
        return json.dumps(payload, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise MarshalError(f"record is not JSON-serializable: {exc}") from exc


def _loads(line: str) -> Any:
    text = line.strip()
    if not text:
        raise MarshalError("empty record")
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise MarshalError(f"invalid JSON record: {exc.msg}") from exc


def is_identifier(value: Any) -> bool:
    """True for a positive integer object identifier (bool excluded)."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def request_payload(request: Request) -> dict[str, Any]:
    if isinstance(request, ModuleRequest):
        return {"module": request.module}
    return {"oid": request.oid, "method": request.method, "params": list(request.params)}


def encode_request_line(request: Request) -> str:
    """Encode a request frame into one line of JSON."""
    return _dumps(request_payload(request))


def decode_request_payload(payload: Any) -> Request:
    """Validate a raw dict payload and build the matching request record."""
    if not isinstance(payload, dict):
        raise MarshalError(f"request must be a JSON object, got {type(payload).__name__}")
    keys = set(payload)
    has_module = bool(keys & _MODULE_FIELDS)
    has_call = bool(keys & _CALL_FIELDS)
    if has_module and has_call:
        raise MarshalError("request mixes module and call fields")
    if has_module:
        module = payload["module"]
        if not isinstance(module, str) or not module.strip():
            raise MarshalError("module request needs a non-empty 'module' string")
        return ModuleRequest(module=module.strip())
    if not has_call:
        raise MarshalError("request is neither a module request nor a call request")
    missing = sorted(_CALL_FIELDS - keys)
    if missing:
        raise MarshalError(f"call request missing {', '.join(missing)}")
    oid = payload["oid"]
    method = payload["method"]
    params = payload["params"]
    if not is_identifier(oid):
        raise MarshalError(f"call request 'oid' must be a positive integer, got {oid!r}")
    if not isinstance(method, str) or not method:
        raise MarshalError("call request needs a non-empty 'method' string")
    if not isinstance(params, list):
        raise MarshalError("call request 'params' must be a list")
    return CallRequest(oid=oid, method=method, params=params)


def decode_request_line(line: str) -> Request:
    """Decode one wire line into a request record."""
    return decode_request_payload(_loads(line))


def response_payload(response: Response) -> dict[str, Any]:
    if response.error is not None:
        return {"error": response.error}
    return {"result": response.result}


def encode_response_line(response: Response) -> str:
    """Encode a response frame into one line of JSON."""
    return _dumps(response_payload(response))


def decode_response_payload(payload: Any) -> Response:
    """Decode a raw dict payload into a response, enforcing result-xor-error."""
    if not isinstance(payload, dict):
        raise ProtocolError("response must be a JSON object", record=payload)
    has_result = "result" in payload
    has_error = "error" in payload
    if has_result and has_error:
        raise ProtocolError("response carries both 'result' and 'error'", record=payload)
    if not has_result and not has_error:
        raise ProtocolError("response carries neither 'result' nor 'error'", record=payload)
    if has_error:
        error = payload["error"]
        if not isinstance(error, str):
            raise ProtocolError("response 'error' must be a string", record=payload)
        return Response(error=error)
    return Response(result=payload["result"])


def decode_response_line(line: str) -> Response:
    """Decode one wire line into a response record."""
    return decode_response_payload(_loads(line))
