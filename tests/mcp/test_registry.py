"""Tests for the capability registry and the default catalog."""

import dataclasses

import pytest

from toolbox_mcp.mcp.protocol import CallToolResult, Prompt, Resource, Tool
from toolbox_mcp.mcp.registry import (
    EMPTY_INPUT_SCHEMA,
    CapabilityRegistry,
    RegisteredPrompt,
    RegisteredTool,
)


async def _noop() -> CallToolResult:
    return CallToolResult.from_text("ok")


def _tool(name: str) -> RegisteredTool:
    return RegisteredTool(
        descriptor=Tool(name=name, description=f"{name} tool", input_schema=EMPTY_INPUT_SCHEMA),
        handler=_noop,
    )


def _prompt(name: str) -> RegisteredPrompt:
    return RegisteredPrompt(descriptor=Prompt(name=name), template=f"{name} template")


class TestCapabilityRegistry:
    def test_empty_registry(self) -> None:
        reg = CapabilityRegistry.build()
        assert reg.list_tools() == []
        assert reg.list_resources() == []
        assert reg.list_prompts() == []
        assert reg.capabilities() == {}

    def test_lists_keep_registration_order(self) -> None:
        reg = CapabilityRegistry.build(tools=[_tool("b"), _tool("a"), _tool("c")])
        assert [t.name for t in reg.list_tools()] == ["b", "a", "c"]

    def test_lookup_by_name(self) -> None:
        reg = CapabilityRegistry.build(tools=[_tool("a")], prompts=[_prompt("p")])
        assert reg.get_tool("a") is not None
        assert reg.get_tool("missing") is None
        assert reg.get_prompt("p").template == "p template"
        assert reg.get_prompt("missing") is None

    def test_duplicate_tool_rejected(self) -> None:
        with pytest.raises(ValueError, match="Duplicate tool: a"):
            CapabilityRegistry.build(tools=[_tool("a"), _tool("a")])

    def test_duplicate_prompt_rejected(self) -> None:
        with pytest.raises(ValueError, match="Duplicate prompt: p"):
            CapabilityRegistry.build(prompts=[_prompt("p"), _prompt("p")])

    def test_duplicate_resource_uri_rejected(self) -> None:
        res = Resource(uri="file:///a", name="a")
        with pytest.raises(ValueError, match="Duplicate resource: file:///a"):
            CapabilityRegistry.build(resources=[res, res])

    def test_registry_is_frozen(self) -> None:
        reg = CapabilityRegistry.build(tools=[_tool("a")])
        with pytest.raises(dataclasses.FrozenInstanceError):
            reg.tools = ()  # type: ignore[misc]

    def test_listing_returns_fresh_list(self) -> None:
        reg = CapabilityRegistry.build(tools=[_tool("a")])
        listed = reg.list_tools()
        listed.clear()
        assert [t.name for t in reg.list_tools()] == ["a"]

    def test_capabilities_follow_contents(self) -> None:
        reg = CapabilityRegistry.build(
            tools=[_tool("a")], resources=[Resource(uri="file:///a", name="a")]
        )
        caps = reg.capabilities()
        assert caps["tools"] == {"listChanged": False}
        assert caps["resources"]["listChanged"] is False
        assert "prompts" not in caps


class TestDefaultCatalog:
    def test_tools(self, registry: CapabilityRegistry) -> None:
        assert [t.name for t in registry.list_tools()] == ["get_system_info", "get_random_data"]
        random_tool = registry.get_tool("get_random_data")
        props = random_tool.descriptor.input_schema["properties"]
        assert props["id"]["minimum"] == 1
        assert props["id"]["maximum"] == 100
        assert random_tool.descriptor.input_schema["required"] == []

    def test_resources(self, registry: CapabilityRegistry) -> None:
        resources = {r.uri: r for r in registry.list_resources()}
        assert set(resources) == {"file:///README.md", "file:///pyproject.toml"}
        assert resources["file:///README.md"].mime_type == "text/markdown"

    def test_prompts(self, registry: CapabilityRegistry) -> None:
        prompts = registry.list_prompts()
        assert [p.name for p in prompts] == ["system_info", "get_random_data"]
        id_arg = prompts[1].arguments[0]
        assert id_arg.name == "id"
        assert id_arg.type == "number"
        assert id_arg.required is False
