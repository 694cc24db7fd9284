"""MCP client over stdio.

Starts an MCP server as a subprocess and exchanges newline-delimited
JSON-RPC messages with it. JSON-RPC errors surface as ``RemoteError``;
tool and resource failures reported in a successful result (``isError``)
are returned as-is.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, cast

from toolbox_mcp import __version__
from toolbox_mcp.errors import RemoteError
from toolbox_mcp.mcp.encoder import Response, decode_response
from toolbox_mcp.mcp.protocol import (
    MCP_PROTOCOL_VERSION,
    CallToolRequestParams,
    CallToolResult,
    GetPromptResult,
    Implementation,
    InitializeRequestParams,
    InitializeResult,
    JSONRPCErrorResponse,
    ListPromptsResult,
    ListResourcesResult,
    ListToolsResult,
    Method,
    Prompt,
    ReadResourceResult,
    RequestId,
    Resource,
    Tool,
)
from toolbox_mcp.observability import get_logger

logger = get_logger(__name__)


class MCPClient:
    """MCP client with stdio transport.

    Args:
        server_command: Command and args to start the server
            (e.g. ["python", "-m", "toolbox_mcp.mcp.server_runner"]).
        name: Client name sent with initialize.
        version: Client version sent with initialize.
        receive_timeout: Seconds to wait for a response (None = no timeout).
        env: Environment for the server process (None = inherit).
    """

    def __init__(
        self,
        server_command: list[str],
        *,
        name: str = "toolbox-mcp-client",
        version: str = __version__,
        receive_timeout: float | None = 60.0,
        env: dict[str, str] | None = None,
    ) -> None:
        self._server_command = server_command
        self._client_info = Implementation(name=name, version=version)
        self._receive_timeout = receive_timeout
        self._env = env
        self._process: asyncio.subprocess.Process | None = None
        self._request_id = 0
        self._init_result: InitializeResult | None = None

    @property
    def init_result(self) -> InitializeResult | None:
        return self._init_result

    def _next_id(self) -> int:
        self._request_id += 1
        return self._request_id

    async def _send(self, payload: dict[str, Any]) -> None:
        """Send one JSON-RPC message (request or notification) to server stdin."""
        if self._process is None or self._process.stdin is None:
            raise RuntimeError("Not connected; call connect() first")
        line = json.dumps(payload) + "\n"
        self._process.stdin.write(line.encode("utf-8"))
        await self._process.stdin.drain()

    async def _receive(self) -> dict[str, Any] | None:
        """Read one JSON-RPC message from server stdout; None at end of stream."""
        if self._process is None or self._process.stdout is None:
            raise RuntimeError("Not connected; call connect() first")
        while True:
            read_coro = self._process.stdout.readline()
            if self._receive_timeout is not None:
                try:
                    raw_line = await asyncio.wait_for(read_coro, timeout=self._receive_timeout)
                except asyncio.TimeoutError:
                    raise RuntimeError(f"No response within {self._receive_timeout}s") from None
            else:
                raw_line = await read_coro
            if not raw_line:
                return None
            line = raw_line.decode("utf-8").strip()
            if not line:
                continue
            try:
                return cast("dict[str, Any]", json.loads(line))
            except json.JSONDecodeError as e:
                logger.warning("mcp.client.parse_error", error=str(e))

    async def connect(self, *, initialize: bool = True) -> InitializeResult | None:
        """Start the server process and optionally perform the initialize handshake.

        Args:
            initialize: Send initialize and notifications/initialized first.

        Returns:
            InitializeResult from the server, or None when initialize is skipped.

        Raises:
            RuntimeError: If already connected or the server fails to respond.
            RemoteError: If the server rejects initialize.
        """
        if self._process is not None:
            raise RuntimeError("Already connected")
        self._process = await asyncio.create_subprocess_exec(
            *self._server_command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
            env=self._env,
        )
        if self._process.stdin is None or self._process.stdout is None:
            raise RuntimeError("Failed to get server stdin/stdout")
        if not initialize:
            return None

        params = InitializeRequestParams(
            protocol_version=MCP_PROTOCOL_VERSION,
            capabilities={},
            client_info=self._client_info,
        ).model_dump(by_alias=True, exclude_none=True)
        result = await self._call(Method.INITIALIZE, params)
        self._init_result = InitializeResult.model_validate(result)
        await self._send({"jsonrpc": "2.0", "method": "notifications/initialized"})
        return self._init_result

    async def request(self, method: str, params: dict[str, Any] | None = None) -> Response:
        """Send one request and return the matching response (result or error)."""
        req_id: RequestId = self._next_id()
        await self._send(
            {"jsonrpc": "2.0", "id": req_id, "method": method, "params": params or {}}
        )
        while True:
            raw = await self._receive()
            if raw is None:
                raise RuntimeError(f"No response to {method}")
            if raw.get("id") != req_id:
                logger.warning("mcp.client.unexpected_id", expected=req_id, got=raw.get("id"))
                continue
            return decode_response(raw)

    async def _call(self, method: Method, params: dict[str, Any] | None = None) -> dict[str, Any]:
        response = await self.request(method.value, params)
        if isinstance(response, JSONRPCErrorResponse):
            err = response.error
            raise RemoteError(method.value, err.code, err.message, err.data)
        return response.result

    async def ping(self) -> None:
        await self._call(Method.PING)

    async def list_tools(self) -> list[Tool]:
        result = await self._call(Method.TOOLS_LIST)
        return ListToolsResult.model_validate(result).tools

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> CallToolResult:
        """Invoke a tool by name.

        Returns:
            CallToolResult; ``is_error`` marks a failure reported by the tool.

        Raises:
            RemoteError: For protocol-level failures (unknown tool, bad arguments).
        """
        params = CallToolRequestParams(name=name, arguments=arguments or {})
        result = await self._call(Method.TOOLS_CALL, params.model_dump(by_alias=True))
        return CallToolResult.model_validate(result)

    async def list_resources(self) -> list[Resource]:
        result = await self._call(Method.RESOURCES_LIST)
        return ListResourcesResult.model_validate(result).resources

    async def read_resource(self, uri: str) -> ReadResourceResult:
        result = await self._call(Method.RESOURCES_READ, {"uri": uri})
        return ReadResourceResult.model_validate(result)

    async def list_prompts(self) -> list[Prompt]:
        result = await self._call(Method.PROMPTS_LIST)
        return ListPromptsResult.model_validate(result).prompts

    async def get_prompt(
        self, name: str, arguments: dict[str, Any] | None = None
    ) -> GetPromptResult:
        params: dict[str, Any] = {"name": name}
        if arguments is not None:
            params["arguments"] = arguments
        result = await self._call(Method.PROMPTS_GET, params)
        return GetPromptResult.model_validate(result)

    async def disconnect(self) -> None:
        """Close stdin and wait for the server process to exit."""
        if self._process is not None:
            if self._process.stdin:
                self._process.stdin.close()
                await self._process.stdin.wait_closed()
            try:
                await asyncio.wait_for(self._process.wait(), timeout=5.0)
            except asyncio.TimeoutError:
                self._process.terminate()
                await self._process.wait()
            self._process = None
        self._init_result = None

    async def __aenter__(self) -> MCPClient:
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.disconnect()
