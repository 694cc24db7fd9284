"""Command-line driver for the toolbox MCP server.

Each client command starts the server as a subprocess, sends exactly one
JSON-RPC request over stdio, prints the response and exits: 0 when the
server returned a result, 1 when it returned a JSON-RPC error.

Example:
    >>> # From terminal:
    >>> # toolbox-mcp list-tools
    >>> # toolbox-mcp system-info
    >>> # toolbox-mcp random-data --id 7
    >>> # toolbox-mcp read-resource file:///README.md
    >>> # toolbox-mcp get-prompt system_info
    >>> # toolbox-mcp serve   # run the server itself on stdio
"""

import asyncio
import json
import shlex
import sys
from typing import Annotated, Any, Optional

import typer

from toolbox_mcp import __version__
from toolbox_mcp.mcp.client import MCPClient
from toolbox_mcp.mcp.encoder import Response, to_wire
from toolbox_mcp.mcp.protocol import JSONRPCErrorResponse, Method

app = typer.Typer(help="Toolbox MCP server and one-shot client.", no_args_is_help=True)

BYTES_PER_MB = 1024 * 1024

# Server command for client subcommands; overridden with --server
_server_command: list[str] = [sys.executable, "-m", "toolbox_mcp.mcp.server_runner"]


def _version_callback(value: bool) -> None:
    """Print the version and exit when requested."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


VERSION_OPTION = typer.Option(
    False,
    "--version",
    help="Show toolbox-mcp version and exit.",
    callback=_version_callback,
    is_eager=True,
)

SERVER_OPTION = typer.Option(
    None,
    "--server",
    help="Command that starts the MCP server (default: this package's server).",
)


@app.callback()
def cli(
    version: bool = VERSION_OPTION,
    server: Optional[str] = SERVER_OPTION,
) -> None:
    """Toolbox MCP CLI entrypoint."""
    global _server_command
    _server_command = (
        shlex.split(server)
        if server
        else [sys.executable, "-m", "toolbox_mcp.mcp.server_runner"]
    )


async def _send_one(method: str, params: dict[str, Any]) -> Response:
    """Start the server, send one request without a handshake, return the response."""
    client = MCPClient(_server_command)
    await client.connect(initialize=False)
    try:
        return await client.request(method, params)
    finally:
        await client.disconnect()


def _format_system_info(info: dict[str, Any]) -> str:
    memory = info.get("memoryUsage", {})
    lines = [
        "System Information:",
        f"  Platform: {info.get('platform')}",
        f"  Python Version: {info.get('pythonVersion')}",
        f"  Architecture: {info.get('arch')}",
        f"  Current Directory: {info.get('cwd')}",
        f"  Environment Variables: {info.get('env')}",
        "  Memory Usage:",
        f"    RSS: {memory.get('rss', 0) / BYTES_PER_MB:.2f} MB",
        f"    VMS: {memory.get('vms', 0) / BYTES_PER_MB:.2f} MB",
        f"    Allocated Blocks: {memory.get('allocatedBlockCount', 0)} (count)",
    ]
    if "tracedCurrent" in memory:
        lines.append(f"    Traced: {memory['tracedCurrent'] / BYTES_PER_MB:.2f} MB")
    lines.append(f"  Uptime: {float(info.get('uptime', 0)):.2f} seconds")
    return "\n".join(lines)


def _print_response(response: Response, *, pretty_system_info: bool = False) -> None:
    """Print ``response`` and exit 1 if it is a JSON-RPC error."""
    if isinstance(response, JSONRPCErrorResponse):
        typer.echo("\n=== MCP Error ===", err=True)
        typer.echo(json.dumps(to_wire(response)["error"], indent=2), err=True)
        raise typer.Exit(1)

    typer.echo("\n=== MCP Response ===")
    result = response.result
    if pretty_system_info and not result.get("isError") and result.get("content"):
        try:
            info = json.loads(result["content"][0]["text"])
        except (KeyError, IndexError, TypeError, json.JSONDecodeError):
            info = None
        if isinstance(info, dict):
            typer.echo(_format_system_info(info))
            return
    typer.echo(json.dumps(result, indent=2, ensure_ascii=False))


def _run(method: Method, params: dict[str, Any] | None = None, **print_kwargs: Any) -> None:
    try:
        response = asyncio.run(_send_one(method.value, params or {}))
    except (OSError, RuntimeError) as exc:
        typer.echo(f"Failed to talk to server: {exc}", err=True)
        raise typer.Exit(1) from exc
    _print_response(response, **print_kwargs)


@app.command("list-tools")
def list_tools() -> None:
    """List available tools."""
    _run(Method.TOOLS_LIST)


@app.command("system-info")
def system_info() -> None:
    """Get system information from the server."""
    _run(
        Method.TOOLS_CALL,
        {"name": "get_system_info", "arguments": {}},
        pretty_system_info=True,
    )


@app.command("random-data")
def random_data(
    todo_id: Annotated[
        Optional[int],
        typer.Option("--id", min=1, max=100, help="Todo ID (1-100); random if omitted."),
    ] = None,
) -> None:
    """Get random todo data from the JSONPlaceholder API."""
    arguments: dict[str, Any] = {} if todo_id is None else {"id": todo_id}
    _run(Method.TOOLS_CALL, {"name": "get_random_data", "arguments": arguments})


@app.command("list-resources")
def list_resources() -> None:
    """List available resources."""
    _run(Method.RESOURCES_LIST)


@app.command("read-resource")
def read_resource(
    uri: Annotated[str, typer.Argument(help="Resource URI, e.g. file:///README.md")],
) -> None:
    """Read a resource by URI."""
    _run(Method.RESOURCES_READ, {"uri": uri})


@app.command("list-prompts")
def list_prompts() -> None:
    """List available prompts."""
    _run(Method.PROMPTS_LIST)


@app.command("get-prompt")
def get_prompt(
    name: Annotated[str, typer.Argument(help="Prompt name, e.g. system_info")],
    arg: Annotated[
        Optional[list[str]],
        typer.Option("--arg", "-a", help="Prompt argument as key=value (repeatable)."),
    ] = None,
) -> None:
    """Get a prompt template by name."""
    params: dict[str, Any] = {"name": name}
    if arg:
        arguments: dict[str, Any] = {}
        for item in arg:
            key, sep, value = item.partition("=")
            if not sep or not key:
                raise typer.BadParameter(f"Expected key=value, got {item!r}", param_hint="--arg")
            arguments[key] = value
        params["arguments"] = arguments
    _run(Method.PROMPTS_GET, params)


@app.command("serve")
def serve() -> None:
    """Run the MCP server on stdin/stdout."""
    from toolbox_mcp.mcp.server_runner import main as run_server

    run_server()


def main() -> None:
    """Run the toolbox MCP CLI."""
    app()


if __name__ == "__main__":
    main()
