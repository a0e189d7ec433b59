from bifrost.utils.exceptions import (
    BifrostError,
    InvocationFault,
    MarshalError,
    RemoteError,
    UnknownReference,
    error_message,
    sanitize_error_message,
)


def test_error_str_carries_code():
    err = UnknownReference(7)
    assert str(err) == "[UNKNOWN_REFERENCE] unknown object reference: 7"
    assert err.to_dict()["details"] == {"oid": 7}


def test_all_bridge_errors_share_base():
    assert isinstance(MarshalError("x"), BifrostError)
    assert isinstance(RemoteError("x"), BifrostError)


def test_invocation_fault_message_from_exception():
    fault = InvocationFault.from_exception("m", KeyError("k"))
    assert fault.message == "KeyError: 'k'"
    assert fault.exc_type == "KeyError"
    assert InvocationFault.from_exception("m", RuntimeError()).message == "RuntimeError"


def test_error_message_never_empty():
    assert error_message(ValueError()) == "ValueError"
    assert error_message(ValueError("bad")) == "ValueError: bad"
    assert error_message(MarshalError("shape")) == "shape"


def test_remote_error_default_message():
    assert RemoteError("").message == "remote call failed"


def test_sanitize_error_message():
    text = sanitize_error_message("failed with api_key=sk-abcdefghijklmnopqrstuv and Bearer abc.def")
    assert "sk-abcdefghijklmnopqrstuv" not in text
    assert "abc.def" not in text
    assert sanitize_error_message("plain failure") == "plain failure"
