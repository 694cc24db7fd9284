"""Request router: maps a JSON-RPC method to its handler and encodes the outcome.

``Router.dispatch`` always returns a response for a request. Handlers
signal protocol-level failures by raising ``ProtocolError`` subclasses;
any other exception is converted to an INTERNAL_ERROR response here and
never propagates to the server loop.
"""

from __future__ import annotations

import inspect
import traceback
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import jsonschema
from pydantic import BaseModel, ValidationError

from toolbox_mcp.errors import (
    INTERNAL_ERROR,
    InvalidParamsError,
    MethodNotFoundError,
    ProtocolError,
    UnknownPromptError,
    UnknownToolError,
)
from toolbox_mcp.mcp.encoder import Response, encode_error, encode_result
from toolbox_mcp.mcp.protocol import (
    MCP_PROTOCOL_VERSION,
    CallToolRequestParams,
    GetPromptRequestParams,
    GetPromptResult,
    Implementation,
    InitializeRequestParams,
    InitializeResult,
    JSONRPCNotification,
    JSONRPCRequest,
    ListPromptsResult,
    ListResourcesResult,
    ListToolsResult,
    Method,
    ReadResourceRequestParams,
)
from toolbox_mcp.mcp.registry import CapabilityRegistry, ResourceReader
from toolbox_mcp.observability import get_logger, is_debug_mode, sanitize_for_logging

logger = get_logger(__name__)

Handler = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]
ParamsT = TypeVar("ParamsT", bound=BaseModel)


def _validation_details(exc: ValidationError) -> list[dict[str, Any]]:
    return [
        {"loc": [str(part) for part in err["loc"]], "msg": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]


def parse_params(model: type[ParamsT], params: dict[str, Any]) -> ParamsT:
    """Validate ``params`` against ``model``.

    Raises:
        InvalidParamsError: With per-field details in ``data``.
    """
    try:
        return model.model_validate(params)
    except ValidationError as exc:
        details = _validation_details(exc)
        summary = "; ".join(f"{'.'.join(d['loc']) or 'params'}: {d['msg']}" for d in details)
        raise InvalidParamsError(summary, data=details) from exc


class Router:
    """Stateless dispatcher from request to response.

    Args:
        registry: Immutable capability catalog.
        resource_reader: Coroutine function reading a resource URI.
        server_info: Name and version reported by ``initialize``.
        instructions: Optional instructions reported by ``initialize``.

    Raises:
        RuntimeError: If a ``Method`` member has no bound handler.
    """

    def __init__(
        self,
        registry: CapabilityRegistry,
        *,
        resource_reader: ResourceReader,
        server_info: Implementation,
        instructions: str | None = None,
    ) -> None:
        self._registry = registry
        self._resource_reader = resource_reader
        self._server_info = server_info
        self._instructions = instructions
        self._handlers: dict[Method, Handler] = {
            Method.INITIALIZE: self._handle_initialize,
            Method.PING: self._handle_ping,
            Method.TOOLS_LIST: self._handle_tools_list,
            Method.TOOLS_CALL: self._handle_tools_call,
            Method.RESOURCES_LIST: self._handle_resources_list,
            Method.RESOURCES_READ: self._handle_resources_read,
            Method.PROMPTS_LIST: self._handle_prompts_list,
            Method.PROMPTS_GET: self._handle_prompts_get,
        }
        unbound = [m.value for m in Method if m not in self._handlers]
        if unbound:
            raise RuntimeError(f"No handler bound for methods: {', '.join(unbound)}")

    @property
    def registry(self) -> CapabilityRegistry:
        return self._registry

    async def dispatch(self, request: JSONRPCRequest) -> Response:
        """Run the handler for ``request`` and return its response."""
        rid = request.id
        method = Method.lookup(request.method)
        try:
            if method is None:
                raise MethodNotFoundError(request.method)
            result = await self._handlers[method](request.params or {})
        except ProtocolError as exc:
            logger.info(
                "mcp.request.rejected",
                request_id=rid,
                method=request.method,
                code=exc.jsonrpc_code,
                error=exc.message,
            )
            return encode_error(rid, exc.jsonrpc_code, exc.message, exc.data)
        except Exception as exc:
            logger.exception("mcp.request.error", request_id=rid, method=request.method)
            data: dict[str, Any] = {"type": type(exc).__name__}
            if is_debug_mode():
                data["traceback"] = traceback.format_exc()
            return encode_error(rid, INTERNAL_ERROR, str(exc) or type(exc).__name__, data)
        return encode_result(rid, result)

    async def handle_notification(self, notification: JSONRPCNotification) -> None:
        """Handle a notification (never answered)."""
        if notification.method == "notifications/initialized":
            logger.debug("mcp.initialized", message="Client sent initialized")
        elif notification.method == "notifications/cancelled":
            logger.debug("mcp.cancelled", params=notification.params)
        else:
            logger.debug(
                "mcp.notification", method=notification.method, params=notification.params
            )

    async def _handle_initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        if params:
            parsed = parse_params(InitializeRequestParams, params)
            logger.info(
                "mcp.initialize",
                client=parsed.client_info.name,
                client_version=parsed.client_info.version,
                protocol_version=parsed.protocol_version,
            )
        result = InitializeResult(
            protocol_version=MCP_PROTOCOL_VERSION,
            capabilities=self._registry.capabilities(),
            server_info=self._server_info,
            instructions=self._instructions,
        )
        return result.model_dump(by_alias=True, exclude_none=True)

    async def _handle_ping(self, params: dict[str, Any]) -> dict[str, Any]:
        return {}

    async def _handle_tools_list(self, params: dict[str, Any]) -> dict[str, Any]:
        logger.debug("mcp.tools.list")
        result = ListToolsResult(tools=self._registry.list_tools())
        return result.model_dump(by_alias=True, exclude_none=True)

    async def _handle_tools_call(self, params: dict[str, Any]) -> dict[str, Any]:
        """Validate the call, run the tool, and return its CallToolResult.

        Unknown tools and schema violations are protocol errors. Failures
        the tool reports itself come back as a result with isError set.
        """
        parsed = parse_params(CallToolRequestParams, params)
        tool = self._registry.get_tool(parsed.name)
        if tool is None:
            raise UnknownToolError(parsed.name)

        try:
            jsonschema.validate(instance=parsed.arguments, schema=tool.descriptor.input_schema)
        except jsonschema.ValidationError as exc:
            raise InvalidParamsError(f"Invalid arguments: {exc.message}") from exc
        try:
            inspect.signature(tool.handler).bind(**parsed.arguments)
        except TypeError as exc:
            raise InvalidParamsError(f"Tool argument mismatch: {exc}") from exc

        logger.info(
            "mcp.tool.call",
            tool=parsed.name,
            arguments=sanitize_for_logging(parsed.arguments),
        )
        outcome = await tool.handler(**parsed.arguments)
        if outcome.is_error:
            logger.warning("mcp.tool.failed", tool=parsed.name)
        return outcome.model_dump(by_alias=True, exclude_none=True)

    async def _handle_resources_list(self, params: dict[str, Any]) -> dict[str, Any]:
        result = ListResourcesResult(resources=self._registry.list_resources())
        return result.model_dump(by_alias=True, exclude_none=True)

    async def _handle_resources_read(self, params: dict[str, Any]) -> dict[str, Any]:
        parsed = parse_params(ReadResourceRequestParams, params)
        result = await self._resource_reader(parsed.uri)
        return result.model_dump(by_alias=True, exclude_none=True)

    async def _handle_prompts_list(self, params: dict[str, Any]) -> dict[str, Any]:
        logger.debug("mcp.prompts.list")
        result = ListPromptsResult(prompts=self._registry.list_prompts())
        return result.model_dump(by_alias=True, exclude_none=True)

    async def _handle_prompts_get(self, params: dict[str, Any]) -> dict[str, Any]:
        parsed = parse_params(GetPromptRequestParams, params)
        prompt = self._registry.get_prompt(parsed.name)
        if prompt is None:
            raise UnknownPromptError(parsed.name)
        # arguments are echoed back exactly as sent, including null members
        if parsed.arguments is None:
            result = GetPromptResult(prompt=prompt.template)
        else:
            result = GetPromptResult(prompt=prompt.template, arguments=parsed.arguments)
        return result.model_dump(by_alias=True, exclude_unset=True)
