"""Runtime settings for the toolbox MCP server.

Settings are read once from the environment at process start and frozen;
the resulting value is passed explicitly to the components that need it.

Environment Variables:
    TOOLBOX_SERVER_NAME: serverInfo.name reported by ``initialize``
    TOOLBOX_TODO_API_URL: Base URL of the todo endpoint (``/<id>`` is appended)
    TOOLBOX_FETCH_TIMEOUT: Timeout in seconds for the todo fetch (> 0)
    TOOLBOX_RESOURCE_ROOT: Directory that relative ``file:///`` resources resolve against
    TOOLBOX_CONCURRENT: Truthy to dispatch requests concurrently
"""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from toolbox_mcp import __version__
from toolbox_mcp.errors import ConfigurationError

ENV_SERVER_NAME = "TOOLBOX_SERVER_NAME"
ENV_TODO_API_URL = "TOOLBOX_TODO_API_URL"
ENV_FETCH_TIMEOUT = "TOOLBOX_FETCH_TIMEOUT"
ENV_RESOURCE_ROOT = "TOOLBOX_RESOURCE_ROOT"
ENV_CONCURRENT = "TOOLBOX_CONCURRENT"

DEFAULT_SERVER_NAME = "toolbox-mcp-server"
DEFAULT_TODO_API_URL = "https://jsonplaceholder.typicode.com/todos"
DEFAULT_FETCH_TIMEOUT_SECONDS = 10.0

_TRUTHY = ("true", "1", "yes", "on")

_FIELD_ENV = {
    "server_name": ENV_SERVER_NAME,
    "todo_api_url": ENV_TODO_API_URL,
    "fetch_timeout": ENV_FETCH_TIMEOUT,
    "resource_root": ENV_RESOURCE_ROOT,
    "concurrent": ENV_CONCURRENT,
}


class Settings(BaseModel):
    """Immutable server settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    server_name: str = Field(default=DEFAULT_SERVER_NAME, min_length=1)
    server_version: str = Field(default=__version__)
    todo_api_url: str = Field(default=DEFAULT_TODO_API_URL)
    fetch_timeout: float = Field(
        default=DEFAULT_FETCH_TIMEOUT_SECONDS, gt=0, allow_inf_nan=False
    )
    resource_root: Path = Field(default_factory=Path.cwd)
    concurrent: bool = False

    def todo_url(self, todo_id: int) -> str:
        """Return the todo endpoint URL for ``todo_id``."""
        return f"{self.todo_api_url.rstrip('/')}/{todo_id}"


def _parse_timeout(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(ENV_FETCH_TIMEOUT, f"not a number: {raw!r}") from exc
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(
            ENV_FETCH_TIMEOUT, f"must be a finite positive number, got {raw!r}"
        )
    return value


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        environ: Mapping to read from (default: os.environ).

    Returns:
        Frozen Settings instance.

    Raises:
        ConfigurationError: If a variable holds an unusable value.
    """
    env = os.environ if environ is None else environ
    values: dict[str, object] = {}

    name = env.get(ENV_SERVER_NAME, "").strip()
    if name:
        values["server_name"] = name
    url = env.get(ENV_TODO_API_URL, "").strip()
    if url:
        if not url.startswith(("http://", "https://")):
            raise ConfigurationError(ENV_TODO_API_URL, f"expected an http(s) URL, got {url!r}")
        values["todo_api_url"] = url
    timeout = env.get(ENV_FETCH_TIMEOUT, "").strip()
    if timeout:
        values["fetch_timeout"] = _parse_timeout(timeout)
    root = env.get(ENV_RESOURCE_ROOT, "").strip()
    if root:
        values["resource_root"] = Path(root).expanduser()
    values["concurrent"] = env.get(ENV_CONCURRENT, "").strip().lower() in _TRUTHY

    try:
        return Settings.model_validate(values)
    except ValidationError as exc:
        err = exc.errors()[0]
        field = str(err["loc"][0]) if err["loc"] else "settings"
        raise ConfigurationError(_FIELD_ENV.get(field, field), err["msg"]) from exc
