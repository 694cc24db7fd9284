"""Tests for the JSON-RPC response encoder."""

import json

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from toolbox_mcp.mcp.encoder import (
    decode_response,
    encode,
    encode_error,
    encode_result,
    serialize,
    to_wire,
)
from toolbox_mcp.mcp.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JSONRPCError,
    JSONRPCErrorResponse,
    JSONRPCResponse,
)

request_ids = st.one_of(
    st.integers(min_value=-(2**53), max_value=2**53),
    st.text(max_size=20),
)


class TestEncodeResult:
    def test_wraps_result(self) -> None:
        response = encode_result(1, {"tools": []})
        assert isinstance(response, JSONRPCResponse)
        assert to_wire(response) == {"jsonrpc": "2.0", "id": 1, "result": {"tools": []}}

    def test_string_id_preserved(self) -> None:
        assert to_wire(encode_result("abc", {}))["id"] == "abc"


class TestEncodeError:
    def test_default_message_from_code(self) -> None:
        response = encode_error(3, METHOD_NOT_FOUND)
        assert response.error.message == "Method not found"
        assert response.error.code == METHOD_NOT_FOUND

    def test_unknown_code_gets_generic_message(self) -> None:
        assert encode_error(3, -32000).error.message == "Server error"

    def test_data_omitted_when_none(self) -> None:
        wire = to_wire(encode_error(3, PARSE_ERROR))
        assert wire == {
            "jsonrpc": "2.0",
            "id": 3,
            "error": {"code": PARSE_ERROR, "message": "Parse error"},
        }

    def test_data_kept_when_set(self) -> None:
        wire = to_wire(encode_error(3, INVALID_PARAMS, "Invalid params: x", [{"loc": ["x"]}]))
        assert wire["error"]["data"] == [{"loc": ["x"]}]

    def test_null_id_allowed(self) -> None:
        assert to_wire(encode_error(None, INTERNAL_ERROR))["id"] is None


class TestEncode:
    def test_result_only(self) -> None:
        assert isinstance(encode(1, result={"ok": True}), JSONRPCResponse)

    def test_error_only(self) -> None:
        response = encode(1, error=JSONRPCError(code=INTERNAL_ERROR, message="boom"))
        assert isinstance(response, JSONRPCErrorResponse)

    def test_both_rejected(self) -> None:
        with pytest.raises(ValueError, match="exactly one"):
            encode(1, result={}, error=JSONRPCError(code=INTERNAL_ERROR, message="boom"))

    def test_neither_rejected(self) -> None:
        with pytest.raises(ValueError, match="exactly one"):
            encode(1)

    def test_result_requires_id(self) -> None:
        with pytest.raises(ValueError, match="request id"):
            encode(None, result={})


class TestSerialize:
    def test_single_line_without_newline(self) -> None:
        line = serialize(encode_result(1, {"text": "a\nb"}))
        assert "\n" not in line
        assert json.loads(line)["result"]["text"] == "a\nb"

    def test_non_ascii_kept(self) -> None:
        line = serialize(encode_result(1, {"text": "héllo"}))
        assert "héllo" in line


class TestDecodeResponse:
    def test_decodes_result(self) -> None:
        response = decode_response({"jsonrpc": "2.0", "id": 1, "result": {}})
        assert isinstance(response, JSONRPCResponse)

    def test_decodes_error(self) -> None:
        response = decode_response(
            {"jsonrpc": "2.0", "id": 1, "error": {"code": -32601, "message": "nope"}}
        )
        assert isinstance(response, JSONRPCErrorResponse)
        assert response.error.code == -32601

    def test_rejects_both(self) -> None:
        with pytest.raises(ValueError):
            decode_response(
                {"id": 1, "result": {}, "error": {"code": -32603, "message": "x"}}
            )

    def test_rejects_neither(self) -> None:
        with pytest.raises(ValueError):
            decode_response({"id": 1})

    def test_rejects_malformed_error(self) -> None:
        with pytest.raises(ValidationError):
            decode_response({"id": 1, "error": {"message": "missing code"}})


@given(rid=request_ids)
def test_id_survives_the_wire_with_its_type(rid: int | str) -> None:
    """An id written to the wire reads back equal and with the same JSON type."""
    decoded = json.loads(serialize(encode_result(rid, {})))
    assert decoded["id"] == rid
    assert type(decoded["id"]) is type(rid)


@given(rid=request_ids, code=st.sampled_from([PARSE_ERROR, METHOD_NOT_FOUND, INVALID_PARAMS]))
def test_error_frames_never_carry_result(rid: int | str, code: int) -> None:
    decoded = json.loads(serialize(encode_error(rid, code)))
    assert "result" not in decoded
    assert decoded["error"]["code"] == code
