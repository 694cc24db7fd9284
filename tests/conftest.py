"""Shared pytest fixtures for toolbox MCP tests.

The todo fetch never leaves the process: every registry built here uses an
``httpx.MockTransport`` that serves todo items for ids 1-100.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from toolbox_mcp.catalog import build_default_registry, build_router
from toolbox_mcp.config import Settings
from toolbox_mcp.mcp.registry import CapabilityRegistry
from toolbox_mcp.mcp.router import Router

TODO_API_URL = "https://todos.example.test/todos"


def make_todo(todo_id: int) -> dict[str, object]:
    """Todo item shaped like the JSONPlaceholder payload."""
    return {
        "userId": (todo_id - 1) // 20 + 1,
        "id": todo_id,
        "title": f"todo number {todo_id}",
        "completed": todo_id % 2 == 0,
    }


def todo_api_handler(request: httpx.Request) -> httpx.Response:
    """MockTransport handler: 200 with a todo for /todos/<1..100>, 404 otherwise."""
    tail = request.url.path.rsplit("/", 1)[-1]
    if request.method == "GET" and tail.isdigit() and 1 <= int(tail) <= 100:
        return httpx.Response(status_code=200, json=make_todo(int(tail)))
    return httpx.Response(status_code=404, json={})


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing resources at tmp_path and the todo API at a test host."""
    return Settings(
        server_name="toolbox-test",
        todo_api_url=TODO_API_URL,
        fetch_timeout=2.0,
        resource_root=tmp_path,
    )


@pytest.fixture
def todo_transport() -> httpx.MockTransport:
    return httpx.MockTransport(todo_api_handler)


@pytest.fixture
def registry(settings: Settings, todo_transport: httpx.MockTransport) -> CapabilityRegistry:
    return build_default_registry(settings, transport=todo_transport)


@pytest.fixture
def router(settings: Settings, registry: CapabilityRegistry) -> Router:
    return build_router(settings, registry=registry)


@pytest.fixture
def router_with_transport(settings: Settings) -> Callable[[httpx.AsyncBaseTransport], Router]:
    """Factory building a Router whose todo fetch goes through the given transport."""

    def _make(transport: httpx.AsyncBaseTransport) -> Router:
        return build_router(settings, transport=transport)

    return _make
