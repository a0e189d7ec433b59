import json

import pytest

from bifrost.core.codec import (
    decode_request_line,
    decode_response_line,
    encode_request_line,
    encode_response_line,
)
from bifrost.core.protocol import CallRequest, ModuleRequest, Response
from bifrost.utils.exceptions import MarshalError, ProtocolError


def test_encode_call_request_line_shape():
    line = encode_request_line(CallRequest(oid=1, method="add", params=[2, 3]))
    assert json.loads(line) == {"oid": 1, "method": "add", "params": [2, 3]}


def test_encode_module_request_line_shape():
    line = encode_request_line(ModuleRequest(module="lib"))
    assert json.loads(line) == {"module": "lib"}


def test_text_with_newlines_stays_on_one_line():
    line = encode_request_line(CallRequest(oid=1, method="echo", params=["a\nb"]))
    assert "\n" not in line
    assert decode_request_line(line).params == ["a\nb"]


def test_decode_module_request():
    assert decode_request_line('{"module": "lib"}') == ModuleRequest(module="lib")


def test_decode_call_request():
    request = decode_request_line('{"oid": 3, "method": "m", "params": [1, {"a": null}]}')
    assert request == CallRequest(oid=3, method="m", params=[1, {"a": None}])


@pytest.mark.parametrize(
    "line",
    [
        '{"module": "lib", "oid": 1}',
        "{}",
        '{"oid": 1, "method": "m"}',
        '{"oid": true, "method": "m", "params": []}',
        '{"oid": 0, "method": "m", "params": []}',
        '{"oid": "1", "method": "m", "params": []}',
        '{"oid": 1, "method": "", "params": []}',
        '{"oid": 1, "method": "m", "params": {}}',
        '{"module": ""}',
        '{"module": 7}',
        "[1, 2]",
        "not json",
        "   ",
    ],
)
def test_decode_request_rejects_malformed(line):
    with pytest.raises(MarshalError):
        decode_request_line(line)


def test_response_shapes():
    assert encode_response_line(Response.success(5)) == '{"result": 5}'
    assert encode_response_line(Response.failure("nope")) == '{"error": "nope"}'
    assert encode_response_line(Response.success(None)) == '{"result": null}'


def test_null_result_is_a_valid_response():
    response = decode_response_line('{"result": null}')
    assert response.ok is True
    assert response.result is None


def test_decode_error_response():
    response = decode_response_line('{"error": "ValueError: boom"}')
    assert response.ok is False
    assert response.error == "ValueError: boom"


@pytest.mark.parametrize(
    "line",
    ["{}", '{"result": 1, "error": "x"}', '{"error": 3}', "[]", '"just text"'],
)
def test_decode_response_invariant_violations(line):
    with pytest.raises(ProtocolError):
        decode_response_line(line)


def test_undecodable_response_is_a_marshal_error():
    with pytest.raises(MarshalError):
        decode_response_line("garbage")


def test_encode_rejects_non_json_numbers():
    with pytest.raises(MarshalError):
        encode_response_line(Response.success(float("nan")))
