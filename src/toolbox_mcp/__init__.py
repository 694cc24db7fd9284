"""toolbox-mcp: a Model Context Protocol server over stdio.

Exposes system-information and todo-fetching tools, local file resources,
and static prompt templates to MCP clients using newline-delimited
JSON-RPC 2.0 on stdin/stdout.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
