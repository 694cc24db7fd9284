"""MCP protocol types (revision 2025-11-25).

JSON-RPC 2.0 envelopes and MCP payloads for initialize, ping, tools,
resources and prompts. Models use extra="ignore" for forward compatibility
with future protocol fields; catalog descriptors are frozen.

Error codes (stable for this server):
    -32700 PARSE_ERROR       line is not a JSON object
    -32600 INVALID_REQUEST   JSON object that is not a valid request
    -32601 METHOD_NOT_FOUND  unknown method
    -32602 INVALID_PARAMS    bad params, bad tool arguments, unknown tool or prompt
    -32603 INTERNAL_ERROR    unexpected handler failure
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

from toolbox_mcp.errors import (
    ERROR_MESSAGES,
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
)

# Protocol version supported by this implementation
MCP_PROTOCOL_VERSION = "2025-11-25"

JSONRPC_VERSION = "2.0"

# Request ids keep their JSON type: 7 stays 7, "7" stays "7".
RequestId = StrictInt | StrictStr

__all__ = [
    "ERROR_MESSAGES",
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "JSONRPC_VERSION",
    "METHOD_NOT_FOUND",
    "MCP_PROTOCOL_VERSION",
    "PARSE_ERROR",
    "CallToolRequestParams",
    "CallToolResult",
    "GetPromptRequestParams",
    "GetPromptResult",
    "Implementation",
    "InitializeRequestParams",
    "InitializeResult",
    "JSONRPCError",
    "JSONRPCErrorResponse",
    "JSONRPCNotification",
    "JSONRPCRequest",
    "JSONRPCResponse",
    "ListPromptsResult",
    "ListResourcesResult",
    "ListToolsResult",
    "Method",
    "Prompt",
    "PromptArgument",
    "ReadResourceRequestParams",
    "ReadResourceResult",
    "RequestId",
    "Resource",
    "TextContent",
    "TextResourceContents",
    "Tool",
]


def _mcp_model_config(frozen: bool = False) -> ConfigDict:
    """Pydantic config for MCP models: allow extra fields for forward compatibility."""
    return ConfigDict(extra="ignore", populate_by_name=True, frozen=frozen)


class Method(str, Enum):
    """Request methods served by the router.

    Every member must have a bound handler; see ``Router``.
    """

    INITIALIZE = "initialize"
    PING = "ping"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"
    RESOURCES_LIST = "resources/list"
    RESOURCES_READ = "resources/read"
    PROMPTS_LIST = "prompts/list"
    PROMPTS_GET = "prompts/get"

    @classmethod
    def lookup(cls, name: str) -> Method | None:
        """Return the member for a wire method name, or None if unsupported."""
        try:
            return cls(name)
        except ValueError:
            return None


# --- JSON-RPC 2.0 ---


class JSONRPCError(BaseModel):
    """JSON-RPC 2.0 error object."""

    model_config = _mcp_model_config()

    code: int = Field(description="Error code (integer)")
    message: str = Field(description="Short error description")
    data: Any = Field(default=None, description="Optional additional data")


class JSONRPCRequest(BaseModel):
    """JSON-RPC 2.0 request (has id, expects response)."""

    model_config = _mcp_model_config()

    jsonrpc: Literal["2.0"] = Field(default="2.0")
    id: RequestId = Field(description="Request id (must not be null)")
    method: str = Field(description="Method name")
    params: dict[str, Any] | None = Field(default=None)


class JSONRPCResponse(BaseModel):
    """JSON-RPC 2.0 success response."""

    model_config = _mcp_model_config()

    jsonrpc: Literal["2.0"] = Field(default="2.0")
    id: RequestId = Field(description="Same id as request")
    result: dict[str, Any] = Field(description="Result payload")


class JSONRPCErrorResponse(BaseModel):
    """JSON-RPC 2.0 error response."""

    model_config = _mcp_model_config()

    jsonrpc: Literal["2.0"] = Field(default="2.0")
    id: RequestId | None = Field(description="Same id as request, or null")
    error: JSONRPCError = Field(description="Error object")


class JSONRPCNotification(BaseModel):
    """JSON-RPC 2.0 notification (no id, no response)."""

    model_config = _mcp_model_config()

    jsonrpc: Literal["2.0"] = Field(default="2.0")
    method: str = Field(description="Method name")
    params: dict[str, Any] | None = Field(default=None)


# --- Implementation (clientInfo / serverInfo) ---


class Implementation(BaseModel):
    """MCP implementation info (client or server)."""

    model_config = _mcp_model_config()

    name: str = Field(description="Programmatic name")
    version: str = Field(description="Version string")
    title: str | None = Field(default=None, description="Human-readable title")
    description: str | None = Field(default=None)


# --- Initialize ---


class InitializeRequestParams(BaseModel):
    """Params for initialize request."""

    model_config = _mcp_model_config()

    protocol_version: str = Field(alias="protocolVersion")
    capabilities: dict[str, Any] = Field(default_factory=dict)
    client_info: Implementation = Field(alias="clientInfo")


class InitializeResult(BaseModel):
    """Result of initialize (server response)."""

    model_config = _mcp_model_config()

    protocol_version: str = Field(alias="protocolVersion", default=MCP_PROTOCOL_VERSION)
    capabilities: dict[str, Any] = Field(default_factory=dict)
    server_info: Implementation = Field(alias="serverInfo")
    instructions: str | None = Field(default=None)


# --- Content ---


class TextContent(BaseModel):
    """Text content block in a tool result."""

    model_config = _mcp_model_config()

    type: Literal["text"] = Field(default="text")
    text: str = Field(description="Text content")


# --- Tools ---


class Tool(BaseModel):
    """MCP tool definition (tools/list item)."""

    model_config = _mcp_model_config(frozen=True)

    name: str = Field(description="Unique tool name")
    description: str = Field(description="Human-readable description")
    input_schema: dict[str, Any] = Field(
        alias="inputSchema",
        description="JSON Schema for parameters (object, not null)",
    )
    title: str | None = Field(default=None)


class CallToolRequestParams(BaseModel):
    """Params for tools/call request."""

    model_config = _mcp_model_config()

    name: str = Field(description="Tool name")
    arguments: dict[str, Any] = Field(default_factory=dict, description="Tool arguments")


class CallToolResult(BaseModel):
    """Result of tools/call (content + isError)."""

    model_config = _mcp_model_config()

    content: list[TextContent] = Field(
        default_factory=list,
        description="Content blocks",
    )
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def from_text(cls, text: str, *, is_error: bool = False) -> CallToolResult:
        """Build a result holding a single text block."""
        return cls(content=[TextContent(text=text)], is_error=is_error)


class ListToolsResult(BaseModel):
    """Result of tools/list."""

    model_config = _mcp_model_config()

    tools: list[Tool] = Field(default_factory=list)


# --- Resources ---


class Resource(BaseModel):
    """MCP resource definition (resources/list item)."""

    model_config = _mcp_model_config(frozen=True)

    uri: str = Field(description="Resource URI, e.g. file:///README.md")
    name: str = Field(description="Display name")
    description: str | None = Field(default=None)
    mime_type: str | None = Field(default=None, alias="mimeType")


class ListResourcesResult(BaseModel):
    """Result of resources/list."""

    model_config = _mcp_model_config()

    resources: list[Resource] = Field(default_factory=list)


class ReadResourceRequestParams(BaseModel):
    """Params for resources/read request."""

    model_config = _mcp_model_config()

    uri: str = Field(description="URI of the resource to read")


class TextResourceContents(BaseModel):
    """Text contents of a read resource."""

    model_config = _mcp_model_config()

    uri: str
    mime_type: str = Field(default="text/plain", alias="mimeType")
    text: str


class ReadResourceResult(BaseModel):
    """Result of resources/read; isError marks a failed read."""

    model_config = _mcp_model_config()

    contents: list[TextResourceContents] = Field(default_factory=list)
    is_error: bool | None = Field(default=None, alias="isError")


# --- Prompts ---


class PromptArgument(BaseModel):
    """Declared argument of a prompt template."""

    model_config = _mcp_model_config(frozen=True)

    name: str
    description: str | None = Field(default=None)
    type: str = Field(default="string")
    required: bool = Field(default=False)


class Prompt(BaseModel):
    """MCP prompt definition (prompts/list item)."""

    model_config = _mcp_model_config(frozen=True)

    name: str = Field(description="Unique prompt name")
    description: str | None = Field(default=None)
    arguments: tuple[PromptArgument, ...] = Field(default=())


class ListPromptsResult(BaseModel):
    """Result of prompts/list."""

    model_config = _mcp_model_config()

    prompts: list[Prompt] = Field(default_factory=list)


class GetPromptRequestParams(BaseModel):
    """Params for prompts/get request."""

    model_config = _mcp_model_config()

    name: str = Field(description="Prompt name")
    arguments: dict[str, Any] | None = Field(default=None)


class GetPromptResult(BaseModel):
    """Result of prompts/get: template text plus the caller's arguments, unmodified."""

    model_config = _mcp_model_config()

    prompt: str
    arguments: dict[str, Any] | None = Field(default=None)
