"""``get_random_data`` tool: fetch a todo item from the JSONPlaceholder API.

Fetch failures (non-2xx status, timeouts, connection errors, bad JSON) are
domain errors: they come back as a CallToolResult with ``isError`` set and
never raise out of the tool.
"""

from __future__ import annotations

import json
import random
from typing import Any

import httpx

from toolbox_mcp.config import Settings
from toolbox_mcp.mcp.protocol import CallToolResult
from toolbox_mcp.observability import get_logger

logger = get_logger(__name__)

NAME = "get_random_data"
DESCRIPTION = "Fetch random data from JSONPlaceholder API (todos 1-100)"

MIN_TODO_ID = 1
MAX_TODO_ID = 100

INPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "id": {
            "type": "integer",
            "description": "Todo ID between 1 and 100 (optional, random if not provided)",
            "minimum": MIN_TODO_ID,
            "maximum": MAX_TODO_ID,
        }
    },
    "required": [],
}


def pick_todo_id(requested: int | None = None, rng: random.Random | None = None) -> int:
    """Return ``requested`` or a uniform random id in [MIN_TODO_ID, MAX_TODO_ID]."""
    if requested is not None:
        return requested
    return (rng or random).randint(MIN_TODO_ID, MAX_TODO_ID)


class RandomDataTool:
    """Callable tool body bound to settings and an optional httpx transport.

    Args:
        settings: Provides the endpoint base URL and the fetch timeout.
        transport: Optional httpx transport for tests (e.g. MockTransport).
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    async def __call__(self, id: int | None = None) -> CallToolResult:  # noqa: A002
        # jsonschema accepts 5.0 as an integer
        todo_id = pick_todo_id(int(id) if id is not None else None)
        url = self._settings.todo_url(todo_id)
        logger.info("mcp.tool.fetch", tool=NAME, todo_id=todo_id)

        client_kwargs: dict[str, Any] = {"timeout": httpx.Timeout(self._settings.fetch_timeout)}
        if self._transport is not None:
            client_kwargs["transport"] = self._transport

        try:
            async with httpx.AsyncClient(**client_kwargs) as client:
                response = await client.get(url)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            return self._failure(todo_id, f"HTTP error! status: {exc.response.status_code}")
        except httpx.HTTPError as exc:
            return self._failure(todo_id, str(exc) or type(exc).__name__)
        except ValueError as exc:
            return self._failure(todo_id, f"Invalid JSON in response: {exc}")

        logger.info("mcp.tool.completed", tool=NAME, todo_id=todo_id)
        payload = {
            "message": f"Fetched todo data for ID: {todo_id}",
            "data": data,
            "api_url": url,
        }
        return CallToolResult.from_text(json.dumps(payload, indent=2))

    @staticmethod
    def _failure(todo_id: int, reason: str) -> CallToolResult:
        logger.warning("mcp.tool.fetch_failed", tool=NAME, todo_id=todo_id, error=reason)
        return CallToolResult.from_text(f"Error fetching data: {reason}", is_error=True)
