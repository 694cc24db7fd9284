"""Integration tests for MCP server and client (stdio subprocess)."""

import os
import sys
from pathlib import Path

import pytest

from toolbox_mcp.errors import RemoteError
from toolbox_mcp.mcp.client import MCPClient

SERVER_COMMAND = [sys.executable, "-m", "toolbox_mcp.mcp.server_runner"]


def _env(resource_root: Path) -> dict[str, str]:
    # unroutable todo endpoint: get_random_data must fail as a tool error
    return {
        **os.environ,
        "TOOLBOX_RESOURCE_ROOT": str(resource_root),
        "TOOLBOX_TODO_API_URL": "http://127.0.0.1:9/todos",
        "TOOLBOX_FETCH_TIMEOUT": "2",
        "TOOLBOX_SERVER_NAME": "integration-server",
    }


@pytest.mark.asyncio
async def test_client_handshake_and_listings(tmp_path: Path) -> None:
    """Client connects, initializes, and sees the full catalog."""
    async with MCPClient(SERVER_COMMAND, env=_env(tmp_path), receive_timeout=30.0) as client:
        init = client.init_result
        assert init is not None
        assert init.server_info.name == "integration-server"
        assert init.protocol_version == "2025-11-25"

        await client.ping()
        assert [t.name for t in await client.list_tools()] == [
            "get_system_info",
            "get_random_data",
        ]
        assert [r.uri for r in await client.list_resources()] == [
            "file:///README.md",
            "file:///pyproject.toml",
        ]
        assert [p.name for p in await client.list_prompts()] == [
            "system_info",
            "get_random_data",
        ]


@pytest.mark.asyncio
async def test_client_tool_calls(tmp_path: Path) -> None:
    async with MCPClient(SERVER_COMMAND, env=_env(tmp_path), receive_timeout=30.0) as client:
        info = await client.call_tool("get_system_info")
        assert info.is_error is False
        assert '"pythonVersion"' in info.content[0].text

        failed = await client.call_tool("get_random_data", {"id": 5})
        assert failed.is_error is True
        assert failed.content[0].text.startswith("Error fetching data: ")

        with pytest.raises(RemoteError) as exc_info:
            await client.call_tool("nonexistent")
        assert exc_info.value.jsonrpc_code == -32602

        with pytest.raises(RemoteError) as exc_info:
            await client.call_tool("get_random_data", {"id": 500})
        assert exc_info.value.jsonrpc_code == -32602


@pytest.mark.asyncio
async def test_client_resources_and_prompts(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
    async with MCPClient(SERVER_COMMAND, env=_env(tmp_path), receive_timeout=30.0) as client:
        read = await client.read_resource("file:///pyproject.toml")
        assert read.is_error is None
        assert read.contents[0].text == '[project]\nname = "x"\n'

        missing = await client.read_resource("file:///no/such/resource.md")
        assert missing.is_error is True

        prompt = await client.get_prompt("get_random_data", {"id": 3})
        assert "get_random_data tool" in prompt.prompt
        assert prompt.arguments == {"id": 3}

        with pytest.raises(RemoteError, match="Unknown prompt: nope"):
            await client.get_prompt("nope")
