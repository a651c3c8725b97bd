from types import SimpleNamespace

import pytest

from ethlibs.jsonrpc.errors import (
    ErrorCode,
    JSONRPCError,
    internal_error,
    invalid_input,
    invalid_params,
    invalid_request,
    limit_exceeded,
    method_not_found,
    method_not_supported,
    new_error,
    parse_error,
    resource_not_found,
    resource_unavailable,
    transaction_rejected,
)


@pytest.mark.parametrize(
    "factory, code",
    [
        (invalid_request, -32600),
        (invalid_params, -32602),
        (internal_error, -32603),
        (invalid_input, -32000),
        (resource_not_found, -32001),
        (resource_unavailable, -32002),
        (transaction_rejected, -32003),
        (limit_exceeded, -32005),
    ],
)
def test_message_factories_set_code_and_message(factory, code):
    err = factory("something failed")
    assert err.code == code
    assert err.message == "something failed"
    assert str(err) == "something failed"
    assert err.data is None


def test_parse_error_has_no_data():
    err = parse_error("bad json")
    assert err.code == -32700
    assert err.to_json() == {"code": -32700, "message": "bad json"}


def test_data_is_included_when_given():
    err = invalid_params("wrong", {"field": "from"})
    assert err.to_json() == {
        "code": ErrorCode.INVALID_PARAMS,
        "message": "wrong",
        "data": {"field": "from"},
    }


def test_empty_data_is_omitted():
    err = new_error(ErrorCode.INTERNAL_ERROR, "oops", {})
    assert "data" not in err.to_json()


def test_new_error_accepts_any_code():
    err = new_error(-1, "custom")
    assert err.code == -1
    assert err.to_json()["code"] == -1


def test_method_not_found_message():
    err = method_not_found(SimpleNamespace(method="foo_bar"))
    assert err.code == -32601
    assert err.message == "The method foo_bar does not exist/is not available"


def test_method_not_supported_message():
    err = method_not_supported(SimpleNamespace(method="foo_notSupported"), {"k": 1})
    assert err.code == -32004
    assert err.message == "method not supported foo_notSupported"
    assert err.data == {"k": 1}


def test_error_can_be_raised():
    err = limit_exceeded("too many")
    assert err.code == ErrorCode.LIMIT_EXCEEDED
    assert err.to_json() == {"code": -32005, "message": "too many"}
    with pytest.raises(JSONRPCError, match="too many"):
        raise err