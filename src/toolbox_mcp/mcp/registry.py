"""Capability registry: the immutable catalog advertised to clients.

The registry is built once at startup and injected into the router. Its
listings come back in registration order on every call.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from toolbox_mcp.mcp.protocol import (
    CallToolResult,
    Prompt,
    ReadResourceResult,
    Resource,
    Tool,
)

EMPTY_INPUT_SCHEMA: dict[str, Any] = {"type": "object", "additionalProperties": False}

ToolHandler = Callable[..., Awaitable[CallToolResult]]
ResourceReader = Callable[[str], Awaitable[ReadResourceResult]]


@dataclass(frozen=True)
class RegisteredTool:
    """A tool descriptor paired with the coroutine function that runs it.

    The handler receives the validated arguments as keyword arguments.
    """

    descriptor: Tool
    handler: ToolHandler

    @property
    def name(self) -> str:
        return self.descriptor.name


@dataclass(frozen=True)
class RegisteredPrompt:
    """A prompt descriptor paired with its static template text."""

    descriptor: Prompt
    template: str

    @property
    def name(self) -> str:
        return self.descriptor.name


@dataclass(frozen=True)
class CapabilityRegistry:
    """Read-only catalog of tools, resources and prompts.

    Use ``CapabilityRegistry.build`` to construct one; names must be unique
    within a category.
    """

    tools: tuple[RegisteredTool, ...] = ()
    resources: tuple[Resource, ...] = ()
    prompts: tuple[RegisteredPrompt, ...] = ()
    _tools_by_name: Mapping[str, RegisteredTool] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )
    _prompts_by_name: Mapping[str, RegisteredPrompt] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        tools = _index_unique("tool", self.tools)
        prompts = _index_unique("prompt", self.prompts)
        _index_unique("resource", self.resources, key=lambda r: r.uri)
        object.__setattr__(self, "_tools_by_name", MappingProxyType(tools))
        object.__setattr__(self, "_prompts_by_name", MappingProxyType(prompts))

    @classmethod
    def build(
        cls,
        tools: Iterable[RegisteredTool] = (),
        resources: Iterable[Resource] = (),
        prompts: Iterable[RegisteredPrompt] = (),
    ) -> CapabilityRegistry:
        """Freeze the given entries into a registry.

        Raises:
            ValueError: If two entries of one category share a name (or uri).
        """
        return cls(tools=tuple(tools), resources=tuple(resources), prompts=tuple(prompts))

    def list_tools(self) -> list[Tool]:
        return [t.descriptor for t in self.tools]

    def list_resources(self) -> list[Resource]:
        return list(self.resources)

    def list_prompts(self) -> list[Prompt]:
        return [p.descriptor for p in self.prompts]

    def get_tool(self, name: str) -> RegisteredTool | None:
        return self._tools_by_name.get(name)

    def get_prompt(self, name: str) -> RegisteredPrompt | None:
        return self._prompts_by_name.get(name)

    def capabilities(self) -> dict[str, Any]:
        """Server capabilities advertised by ``initialize``."""
        caps: dict[str, Any] = {}
        if self.tools:
            caps["tools"] = {"listChanged": False}
        if self.resources:
            caps["resources"] = {"subscribe": False, "listChanged": False}
        if self.prompts:
            caps["prompts"] = {"listChanged": False}
        return caps


def _index_unique(
    kind: str,
    entries: Iterable[Any],
    key: Callable[[Any], str] = lambda e: e.name,
) -> dict[str, Any]:
    index: dict[str, Any] = {}
    for entry in entries:
        k = key(entry)
        if k in index:
            raise ValueError(f"Duplicate {kind}: {k}")
        index[k] = entry
    return index
