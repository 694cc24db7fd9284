"""MCP server loop over stdio.

Reads JSON-RPC messages (one per line) from stdin, dispatches requests
through the router and writes responses to stdout.
"""

from __future__ import annotations

import asyncio
from typing import TextIO

from toolbox_mcp.errors import INTERNAL_ERROR, InvalidRequestError
from toolbox_mcp.mcp.encoder import encode_error
from toolbox_mcp.mcp.protocol import (
    JSONRPCErrorResponse,
    JSONRPCNotification,
    JSONRPCRequest,
    RequestId,
)
from toolbox_mcp.mcp.router import Router
from toolbox_mcp.mcp.transport import StdioTransport
from toolbox_mcp.observability import bind_context, get_logger, unbind_context

logger = get_logger(__name__)


class MCPServer:
    """Stdio MCP server driving a ``Router``.

    By default requests are processed strictly in arrival order: the next
    line is read only after the previous response is written. With
    ``concurrent=True`` each request runs as its own task, tracked by id
    until its response is written; responses may then be written out of
    order, and a request reusing an in-flight id is rejected.

    Args:
        router: Dispatcher holding the capability registry.
        concurrent: Dispatch requests concurrently.
    """

    def __init__(self, router: Router, *, concurrent: bool = False) -> None:
        self._router = router
        self._concurrent = concurrent
        self._in_flight: dict[RequestId, asyncio.Task[None]] = {}

    @property
    def router(self) -> Router:
        return self._router

    @property
    def in_flight(self) -> frozenset[RequestId]:
        """Ids of requests currently being handled (concurrent mode)."""
        return frozenset(self._in_flight)

    async def _respond(self, request: JSONRPCRequest, transport: StdioTransport) -> None:
        bind_context(request_id=request.id, method=request.method)
        try:
            logger.debug("mcp.request.received")
            try:
                response = await self._router.dispatch(request)
            except Exception as e:
                logger.exception("mcp.request_error", error=str(e))
                response = encode_error(request.id, INTERNAL_ERROR, str(e))
            await transport.write(response)
        finally:
            unbind_context("request_id", "method")

    def _spawn(self, request: JSONRPCRequest, transport: StdioTransport) -> None:
        rid = request.id
        task = asyncio.create_task(self._respond(request, transport))
        self._in_flight[rid] = task

        def _done(_: asyncio.Task[None]) -> None:
            if self._in_flight.get(rid) is task:
                del self._in_flight[rid]

        task.add_done_callback(_done)

    async def run_stdio(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        """Run the server until the input stream closes.

        In concurrent mode, requests still in flight at end of input are
        awaited before returning.

        Args:
            stdin: Optional input stream (default: sys.stdin).
            stdout: Optional output stream (default: sys.stdout).
        """
        transport = StdioTransport(stdin, stdout)
        logger.info("mcp.server.started", concurrent=self._concurrent)
        try:
            while True:
                message = await transport.read_next()
                if message is None:
                    break
                if isinstance(message, JSONRPCErrorResponse):
                    await transport.write(message)
                elif isinstance(message, JSONRPCNotification):
                    await self._router.handle_notification(message)
                elif not self._concurrent:
                    await self._respond(message, transport)
                elif message.id in self._in_flight:
                    exc = InvalidRequestError(f"id {message.id!r} is already in flight")
                    logger.warning("mcp.request.duplicate_id", request_id=message.id)
                    await transport.write(
                        encode_error(message.id, exc.jsonrpc_code, exc.message, exc.data)
                    )
                else:
                    self._spawn(message, transport)
        finally:
            if self._in_flight:
                await asyncio.gather(*self._in_flight.values(), return_exceptions=True)
            logger.info("mcp.server.stopped")
