"""Model Context Protocol (MCP) server core.

Implements MCP over newline-delimited JSON-RPC 2.0 on stdio, with support
for initialize, ping, tools/list, tools/call, resources/list,
resources/read, prompts/list and prompts/get.

Example:
    >>> from toolbox_mcp.catalog import build_router
    >>> from toolbox_mcp.config import load_settings
    >>> from toolbox_mcp.mcp import MCPServer
    >>> server = MCPServer(build_router(load_settings()))
    >>> # asyncio.run(server.run_stdio())
"""

from toolbox_mcp.mcp.client import MCPClient
from toolbox_mcp.mcp.protocol import (
    MCP_PROTOCOL_VERSION,
    CallToolRequestParams,
    CallToolResult,
    GetPromptResult,
    InitializeRequestParams,
    InitializeResult,
    JSONRPCError,
    JSONRPCErrorResponse,
    JSONRPCRequest,
    JSONRPCResponse,
    ListPromptsResult,
    ListResourcesResult,
    ListToolsResult,
    Method,
    Prompt,
    ReadResourceResult,
    Resource,
    TextContent,
    Tool,
)
from toolbox_mcp.mcp.registry import CapabilityRegistry, RegisteredPrompt, RegisteredTool
from toolbox_mcp.mcp.router import Router
from toolbox_mcp.mcp.server import MCPServer
from toolbox_mcp.mcp.transport import StdioTransport

__all__ = [
    "CapabilityRegistry",
    "MCPClient",
    "MCPServer",
    "MCP_PROTOCOL_VERSION",
    "CallToolRequestParams",
    "CallToolResult",
    "GetPromptResult",
    "InitializeRequestParams",
    "InitializeResult",
    "JSONRPCError",
    "JSONRPCErrorResponse",
    "JSONRPCRequest",
    "JSONRPCResponse",
    "ListPromptsResult",
    "ListResourcesResult",
    "ListToolsResult",
    "Method",
    "Prompt",
    "ReadResourceResult",
    "RegisteredPrompt",
    "RegisteredTool",
    "Resource",
    "Router",
    "StdioTransport",
    "TextContent",
    "Tool",
]
