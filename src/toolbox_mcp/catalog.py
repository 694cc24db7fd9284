"""Default catalog: the tools, resources and prompts this server advertises."""

from __future__ import annotations

import httpx

from toolbox_mcp.config import Settings
from toolbox_mcp.mcp.protocol import Implementation, Prompt, PromptArgument, Resource, Tool
from toolbox_mcp.mcp.registry import CapabilityRegistry, RegisteredPrompt, RegisteredTool
from toolbox_mcp.mcp.router import Router
from toolbox_mcp.resources import FileResourceReader
from toolbox_mcp.tools import random_data, system_info

SYSTEM_INFO_PROMPT = (
    "You are a helpful assistant. The user wants to get system information. "
    "Use the get_system_info tool to retrieve current system details and present them "
    "in a clear, organized format."
)

RANDOM_DATA_PROMPT = (
    "You are a helpful assistant. The user wants to fetch random todo data from the "
    "JSONPlaceholder API. Use the get_random_data tool to retrieve todo data. You can "
    "optionally specify an ID between 1-100, or let it fetch a random todo. Present the "
    "data in a clear, organized format showing the todo details."
)

DEFAULT_RESOURCES: tuple[Resource, ...] = (
    Resource(
        uri="file:///README.md",
        name="README",
        description="Project README file",
        mime_type="text/markdown",
    ),
    Resource(
        uri="file:///pyproject.toml",
        name="Package Configuration",
        description="Python package configuration",
        mime_type="application/toml",
    ),
)

DEFAULT_PROMPTS: tuple[RegisteredPrompt, ...] = (
    RegisteredPrompt(
        descriptor=Prompt(
            name="system_info",
            description="Get system information",
            arguments=(
                PromptArgument(
                    name="none",
                    description="No arguments required",
                    type="string",
                    required=False,
                ),
            ),
        ),
        template=SYSTEM_INFO_PROMPT,
    ),
    RegisteredPrompt(
        descriptor=Prompt(
            name="get_random_data",
            description="Fetch random todo data from JSONPlaceholder API",
            arguments=(
                PromptArgument(
                    name="id",
                    description="Optional todo ID (1-100), random if not provided",
                    type="number",
                    required=False,
                ),
            ),
        ),
        template=RANDOM_DATA_PROMPT,
    ),
)


def build_default_registry(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CapabilityRegistry:
    """Build the catalog of two tools, two file resources and two prompts.

    Args:
        settings: Server settings (todo endpoint, fetch timeout).
        transport: Optional httpx transport for the todo fetch (tests).
    """
    tools = (
        RegisteredTool(
            descriptor=Tool(
                name=system_info.NAME,
                description=system_info.DESCRIPTION,
                input_schema=system_info.INPUT_SCHEMA,
            ),
            handler=system_info.get_system_info,
        ),
        RegisteredTool(
            descriptor=Tool(
                name=random_data.NAME,
                description=random_data.DESCRIPTION,
                input_schema=random_data.INPUT_SCHEMA,
            ),
            handler=random_data.RandomDataTool(settings, transport=transport),
        ),
    )
    return CapabilityRegistry.build(
        tools=tools,
        resources=DEFAULT_RESOURCES,
        prompts=DEFAULT_PROMPTS,
    )


def build_router(
    settings: Settings,
    *,
    registry: CapabilityRegistry | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Router:
    """Wire the default registry and file reader into a Router."""
    return Router(
        registry if registry is not None else build_default_registry(settings, transport=transport),
        resource_reader=FileResourceReader(settings.resource_root),
        server_info=Implementation(
            name=settings.server_name,
            version=settings.server_version,
            description="MCP server with system info and todo tools",
        ),
    )
