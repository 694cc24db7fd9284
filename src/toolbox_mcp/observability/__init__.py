"""Observability module for the toolbox MCP server.

Structured logging (structlog) routed to stderr, with context binding
for per-request fields such as the JSON-RPC id and method.

Example:
    >>> from toolbox_mcp.observability import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info("mcp.request.received", request_id=1, method="tools/list")
"""

from toolbox_mcp.observability.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    is_debug_mode,
    sanitize_for_logging,
    unbind_context,
)

__all__ = [
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
    "is_debug_mode",
    "sanitize_for_logging",
    "unbind_context",
]
