"""Response encoder: wraps handler output in the JSON-RPC envelope.

A response carries exactly one of ``result`` or ``error``, and the id
exactly as it arrived (numeric ids stay numeric).
"""

from __future__ import annotations

import json
from typing import Any

from toolbox_mcp.mcp.protocol import (
    ERROR_MESSAGES,
    JSONRPCError,
    JSONRPCErrorResponse,
    JSONRPCResponse,
    RequestId,
)

Response = JSONRPCResponse | JSONRPCErrorResponse

_UNSET: Any = object()


def encode_result(request_id: RequestId, result: dict[str, Any]) -> JSONRPCResponse:
    """Wrap a handler result for ``request_id``."""
    return JSONRPCResponse(id=request_id, result=result)


def encode_error(
    request_id: RequestId | None,
    code: int,
    message: str | None = None,
    data: Any = None,
) -> JSONRPCErrorResponse:
    """Wrap an error for ``request_id``; message defaults to the code's standard text."""
    return JSONRPCErrorResponse(
        id=request_id,
        error=JSONRPCError(
            code=code,
            message=message or ERROR_MESSAGES.get(code, "Server error"),
            data=data,
        ),
    )


def encode(
    request_id: RequestId | None,
    *,
    result: dict[str, Any] = _UNSET,
    error: JSONRPCError = _UNSET,
) -> Response:
    """Build a response from exactly one of ``result`` or ``error``.

    Raises:
        ValueError: If both or neither are given, or a result has no id.
    """
    has_result = result is not _UNSET
    has_error = error is not _UNSET
    if has_result == has_error:
        raise ValueError("A response needs exactly one of result or error")
    if has_result:
        if request_id is None:
            raise ValueError("A result response needs a request id")
        return encode_result(request_id, result)
    return JSONRPCErrorResponse(id=request_id, error=error)


def to_wire(response: Response) -> dict[str, Any]:
    """Return the JSON-ready dict for ``response``; ``error.data`` is omitted when unset."""
    payload = response.model_dump(by_alias=True)
    error = payload.get("error")
    if isinstance(error, dict) and error.get("data") is None:
        error.pop("data", None)
    return payload


def serialize(response: Response) -> str:
    """Serialize ``response`` to a single JSON line (no trailing newline)."""
    return json.dumps(to_wire(response), ensure_ascii=False, separators=(",", ":"))


def decode_response(raw: dict[str, Any]) -> Response:
    """Parse a peer's response dict back into a response model.

    Raises:
        pydantic.ValidationError: If ``raw`` is not a well-formed response.
        ValueError: If ``raw`` carries both or neither of result and error.
    """
    has_result = "result" in raw
    has_error = "error" in raw
    if has_result == has_error:
        raise ValueError("Response must carry exactly one of result or error")
    if has_error:
        return JSONRPCErrorResponse.model_validate(raw)
    return JSONRPCResponse.model_validate(raw)
