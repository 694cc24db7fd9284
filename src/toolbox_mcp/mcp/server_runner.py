"""Entry point to run the toolbox MCP server over stdio.

Used by the CLI driver and by clients that launch the server as a subprocess.

Example:
    python -m toolbox_mcp.mcp.server_runner

Then send JSON-RPC messages (one per line) to stdin; read responses from stdout.
Logs are written to stderr.
"""

from __future__ import annotations

import asyncio
import contextlib
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from toolbox_mcp.config import Settings
    from toolbox_mcp.mcp.server import MCPServer


def build_server(settings: Settings) -> MCPServer:
    """Build the MCPServer with the default catalog for ``settings``."""
    from toolbox_mcp.catalog import build_router
    from toolbox_mcp.mcp.server import MCPServer

    return MCPServer(build_router(settings), concurrent=settings.concurrent)


def main() -> None:
    """Load settings, configure logging, and serve stdio until stdin closes."""
    from toolbox_mcp.config import load_settings
    from toolbox_mcp.errors import ConfigurationError
    from toolbox_mcp.observability import configure_logging, get_logger

    configure_logging()
    logger = get_logger(__name__)
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        logger.error("mcp.server.config_error", setting=exc.setting, error=exc.message)
        sys.exit(1)

    server = build_server(settings)
    logger.info(
        "mcp.server.starting",
        name=settings.server_name,
        version=settings.server_version,
        resource_root=str(settings.resource_root),
    )
    with contextlib.suppress(BrokenPipeError, KeyboardInterrupt):
        asyncio.run(server.run_stdio())
    sys.exit(0)


if __name__ == "__main__":
    main()
