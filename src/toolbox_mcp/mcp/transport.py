"""Framed stdio transport: one JSON-RPC message per line.

Reads requests from a text input stream and writes responses to a text
output stream. Nothing but response frames is ever written to the output
stream; diagnostics go through the logger (stderr).

Malformed lines are handled in ``decode_line``:

- not JSON: a PARSE_ERROR response if a top-level request id can be
  recovered from the raw text, otherwise the line is dropped;
- JSON that is not an object (array, scalar): dropped;
- a JSON object that is not a valid request: an INVALID_REQUEST response
  if it carries a usable id, otherwise the line is dropped.
"""

from __future__ import annotations

import asyncio
import json
import re
import sys
from typing import Any, TextIO

from pydantic import ValidationError

from toolbox_mcp.errors import INVALID_REQUEST, PARSE_ERROR
from toolbox_mcp.mcp.encoder import Response, encode_error, serialize
from toolbox_mcp.mcp.protocol import (
    JSONRPCErrorResponse,
    JSONRPCNotification,
    JSONRPCRequest,
    RequestId,
)
from toolbox_mcp.observability import get_logger

logger = get_logger(__name__)

IncomingMessage = JSONRPCRequest | JSONRPCNotification | JSONRPCErrorResponse

# "id": 12  or  "id": "abc"  in a line that failed to parse
_ID_PATTERN = re.compile(r'"id"\s*:\s*(-?\d+(?![\d.eE])|"(?:[^"\\]|\\.)*")')


def _usable_id(value: Any) -> RequestId | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, str)):
        return value
    return None


def recover_id(raw: str) -> RequestId | None:
    """Best-effort extraction of a request id from text that is not valid JSON.

    Only an ``"id"`` member of the outermost object counts; ids nested in
    params (``arguments.id``) or inside string values are ignored.
    """
    depth = 0
    in_string = False
    escaped = False
    pos = 0
    for match in _ID_PATTERN.finditer(raw):
        for ch in raw[pos:match.start()]:
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
            elif ch == '"':
                in_string = True
            elif ch in "{[":
                depth += 1
            elif ch in "}]":
                depth -= 1
        pos = match.start()
        if in_string or depth != 1:
            continue
        try:
            return _usable_id(json.loads(match.group(1)))
        except json.JSONDecodeError:
            return None
    return None


def decode_line(line: str) -> IncomingMessage | None:
    """Decode one frame into a request, a notification, or a ready error response.

    Returns None when the line must be dropped (nothing to correlate a
    response with).
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as exc:
        rid = recover_id(line)
        if rid is None:
            logger.warning("mcp.transport.dropped", reason="parse_error", error=str(exc))
            return None
        return encode_error(rid, PARSE_ERROR)

    if not isinstance(data, dict):
        logger.warning(
            "mcp.transport.dropped", reason="not_an_object", kind=type(data).__name__
        )
        return None

    if "id" not in data:
        try:
            return JSONRPCNotification.model_validate(data)
        except ValidationError as exc:
            logger.warning("mcp.transport.dropped", reason="invalid_notification", error=str(exc))
            return None

    rid = _usable_id(data["id"])
    if rid is None:
        logger.warning("mcp.transport.dropped", reason="invalid_id", id=repr(data["id"]))
        return None
    try:
        return JSONRPCRequest.model_validate(data)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
        return encode_error(
            rid,
            INVALID_REQUEST,
            f"Invalid request: bad or missing {', '.join(fields) or 'fields'}",
        )


class StdioTransport:
    """Newline-delimited JSON-RPC over a pair of text streams.

    Args:
        stdin: Input stream (default: sys.stdin).
        stdout: Output stream (default: sys.stdout).
    """

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._write_lock = asyncio.Lock()

    def _readline(self) -> str | None:
        try:
            line = self._stdin.readline()
        except (EOFError, OSError) as e:
            logger.debug("mcp.transport.closed", reason=str(e))
            return None
        if not line:
            return None
        return line

    async def read_next(self) -> IncomingMessage | None:
        """Return the next decodable message, or None at end of stream.

        ``readline`` blocks until a full line is buffered, so it runs in
        the default executor. Blank and undecodable lines are skipped.
        """
        loop = asyncio.get_running_loop()
        while True:
            line = await loop.run_in_executor(None, self._readline)
            if line is None:
                return None
            line = line.strip()
            if not line:
                continue
            message = decode_line(line)
            if message is not None:
                return message

    async def write(self, response: Response) -> None:
        """Write one response frame and flush it immediately."""
        frame = serialize(response) + "\n"
        async with self._write_lock:
            self._stdout.write(frame)
            self._stdout.flush()
