"""Toolbox MCP Error Taxonomy.

This module defines the error hierarchy for the toolbox server.

Failures come in two tiers:

- ``ProtocolError`` subclasses are raised by handlers and converted by the
  router into JSON-RPC ``error`` objects carrying ``jsonrpc_code``.
- Domain failures (network fetch, file read) never raise; the handler
  returns a successful result with ``isError`` set instead.
"""
from __future__ import annotations

from typing import Any

# JSON-RPC 2.0 standard error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

ERROR_MESSAGES: dict[int, str] = {
    PARSE_ERROR: "Parse error",
    INVALID_REQUEST: "Invalid request",
    METHOD_NOT_FOUND: "Method not found",
    INVALID_PARAMS: "Invalid params",
    INTERNAL_ERROR: "Internal error",
}


class ToolboxError(Exception):
    """Base exception for all toolbox errors.

    Attributes:
        code: Error code following the toolbox:<area>/<reason> pattern
        message: Human-readable error message
        details: Optional additional error context
    """

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to ``{code, message, details}`` dict."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(ToolboxError):
    """Raised when an environment setting cannot be parsed or is out of range."""

    def __init__(self, setting: str, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="toolbox:config/invalid",
            message=f"Invalid setting {setting}: {reason}",
            details={"setting": setting, **(details or {})},
        )
        self.setting = setting
        self.reason = reason


class ProtocolError(ToolboxError):
    """Base for failures reported to the client as a JSON-RPC error object.

    Attributes:
        jsonrpc_code: Integer JSON-RPC error code placed in the response
        data: Optional structured detail placed in ``error.data``
    """

    jsonrpc_code: int = INTERNAL_ERROR

    def __init__(
        self,
        code: str,
        message: str,
        data: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(code=code, message=message, details=details)
        self.data = data


class InvalidRequestError(ProtocolError):
    """Raised when a message is JSON but not a valid JSON-RPC request."""

    jsonrpc_code = INVALID_REQUEST

    def __init__(self, reason: str, data: Any = None) -> None:
        super().__init__(
            code="toolbox:protocol/invalid_request",
            message=f"Invalid request: {reason}",
            data=data,
        )
        self.reason = reason


class MethodNotFoundError(ProtocolError):
    """Raised when the request names a method the server does not implement."""

    jsonrpc_code = METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        super().__init__(
            code="toolbox:protocol/method_not_found",
            message=f"Method not found: {method}",
            details={"method": method},
        )
        self.method = method


class InvalidParamsError(ProtocolError):
    """Raised when method params or tool arguments do not match the expected shape."""

    jsonrpc_code = INVALID_PARAMS

    def __init__(self, reason: str, data: Any = None) -> None:
        super().__init__(
            code="toolbox:protocol/invalid_params",
            message=f"Invalid params: {reason}",
            data=data,
        )
        self.reason = reason


class UnknownToolError(ProtocolError):
    """Raised when ``tools/call`` names a tool missing from the registry."""

    jsonrpc_code = INVALID_PARAMS

    def __init__(self, name: str) -> None:
        super().__init__(
            code="toolbox:tool/not_found",
            message=f"Unknown tool: {name}",
            details={"tool": name},
        )
        self.name = name


class UnknownPromptError(ProtocolError):
    """Raised when ``prompts/get`` names a prompt missing from the registry."""

    jsonrpc_code = INVALID_PARAMS

    def __init__(self, name: str) -> None:
        super().__init__(
            code="toolbox:prompt/not_found",
            message=f"Unknown prompt: {name}",
            details={"prompt": name},
        )
        self.name = name


class RemoteError(ToolboxError):
    """Raised by the client when the server answers with a JSON-RPC error.

    Attributes:
        method: Method of the failed request
        jsonrpc_code: Error code returned by the server
        data: ``error.data`` returned by the server, if any
    """

    def __init__(self, method: str, jsonrpc_code: int, message: str, data: Any = None) -> None:
        super().__init__(
            code="toolbox:client/remote_error",
            message=f"{method} failed ({jsonrpc_code}): {message}",
            details={"method": method, "jsonrpc_code": jsonrpc_code},
        )
        self.method = method
        self.jsonrpc_code = jsonrpc_code
        self.remote_message = message
        self.data = data
